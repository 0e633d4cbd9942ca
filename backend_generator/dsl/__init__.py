"""Entity DSL parser and validator.

Parses the compact entity DSL into frozen pydantic models and checks them for
structural problems before any file is generated.

Usage::

    from backend_generator.dsl import parse_entity_dsl, validate_entity

    entity = parse_entity_dsl("User\\nid:uuid@id@default(cuid())\\nemail:string@unique")
    errors = validate_entity(entity)
"""

from backend_generator.dsl.models import (
    AbacPolicy,
    Entity,
    EntityField,
    FieldType,
    Relationship,
    RelationshipType,
)
from backend_generator.dsl.parser import (
    DslError,
    DslErrorKind,
    load_entities_json,
    load_spec_file,
    parse_entities_dsl,
    parse_entities_dsl_from_file,
    parse_entity_dsl,
    parse_entity_dsl_from_file,
)
from backend_generator.dsl.validator import check_references, validate_entity

__all__ = [
    "AbacPolicy",
    "DslError",
    "DslErrorKind",
    "Entity",
    "EntityField",
    "FieldType",
    "Relationship",
    "RelationshipType",
    "check_references",
    "load_entities_json",
    "load_spec_file",
    "parse_entities_dsl",
    "parse_entities_dsl_from_file",
    "parse_entity_dsl",
    "parse_entity_dsl_from_file",
    "validate_entity",
]
