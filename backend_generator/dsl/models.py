"""Pydantic v2 models for the entity DSL.

Defines the structured entity model produced by the DSL parser and consumed
by the schema projection and the source/test writers.  All models are frozen:
an ``Entity`` is built once per parse call and never mutated afterwards.
Attributes are snake_case in Python and serialise with camelCase aliases so a
JSON entity specification uses the same keys as the DSL data model
(``isId``, ``defaultValue``, ``targetEntity``, ...).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class FieldType(str, Enum):
    """Closed set of primitive field kinds accepted by the DSL."""
    STRING = "string"
    TEXT = "text"
    INT = "int"
    BIGINT = "bigint"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    JSON = "json"
    UUID = "uuid"


class RelationshipType(str, Enum):
    """Cardinality of a relationship between two entities."""
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"


FIELD_TYPES: frozenset[str] = frozenset(t.value for t in FieldType)
RELATIONSHIP_TYPES: frozenset[str] = frozenset(t.value for t in RelationshipType)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Entity building blocks
# ---------------------------------------------------------------------------

class EntityField(_FrozenModel):
    """A single typed attribute of an entity."""
    name: str = Field(..., description="Field name, unique within the entity")
    type: FieldType = Field(..., description="Primitive field kind")
    optional: bool = Field(default=False, description="Whether the value may be null")
    unique: bool = Field(default=False, description="Whether a uniqueness constraint applies")
    is_id: bool = Field(default=False, description="Whether this is the identity field")
    default_value: Optional[str] = Field(
        default=None, description="Raw default expression, passed through verbatim"
    )
    relation_target: Optional[str] = Field(
        default=None, description="Related entity name from @relation(...)"
    )
    relation_type: Optional[RelationshipType] = Field(
        default=None, description="Relationship kind from @relation(...)"
    )

    @property
    def has_relation(self) -> bool:
        return self.relation_target is not None and self.relation_type is not None


class Relationship(_FrozenModel):
    """A named, directed association derived from a relation field."""
    name: str = Field(..., description="Field name with the 'Id' suffix removed")
    target_entity: str = Field(..., description="Name of the related entity")
    type: RelationshipType = Field(..., description="Relationship kind")
    optional: bool = Field(default=False, description="Inherited from the source field")


class AbacPolicy(_FrozenModel):
    """An attribute-based access rule template derived from the entity name."""
    action: str = Field(..., description="create, read, update, delete or list")
    resource: str = Field(..., description="Lower-cased entity name")
    conditions: tuple[str, ...] = Field(
        default_factory=tuple, description="Boolean expressions, any of which grants access"
    )


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------

class Entity(_FrozenModel):
    """A named record type parsed from the entity DSL."""
    name: str = Field(..., description="Entity name, PascalCase by convention")
    fields: tuple[EntityField, ...] = Field(
        default_factory=tuple, description="Fields in declaration order"
    )
    relationships: tuple[Relationship, ...] = Field(
        default_factory=tuple, description="Relationships derived from relation fields"
    )
    soft_delete: bool = Field(default=False, description="Soft-delete flag (never inferred)")
    auditing: bool = Field(default=True, description="Auditing flag")
    abac_policies: tuple[AbacPolicy, ...] = Field(
        default_factory=tuple, description="Generated access policies"
    )

    @property
    def field_names(self) -> list[str]:
        """Field names in declaration order."""
        return [f.name for f in self.fields]

    @property
    def id_field(self) -> Optional[EntityField]:
        """The first field marked ``@id``, if any."""
        for field in self.fields:
            if field.is_id:
                return field
        return None
