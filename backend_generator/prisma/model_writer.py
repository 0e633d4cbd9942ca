"""Prisma model projection.

Renders a parsed ``Entity`` into a Prisma ``model`` block.  The output is a
pure function of the entity: fields in declaration order, then relationship
lines, then the ``@@map`` table mapping, byte-identical on every call for
equal entities.  No validation is done here; callers run
``validate_entity`` first.
"""

from __future__ import annotations

from backend_generator.dsl.models import Entity, EntityField, Relationship, RelationshipType
from backend_generator.utils import pluralize, snake_case


# ---------------------------------------------------------------------------
# Type mapping
# ---------------------------------------------------------------------------

# DSL type -> (Prisma scalar, native database attribute)
_PRISMA_TYPE_MAP: dict[str, tuple[str, str | None]] = {
    "string": ("String", None),
    "text": ("String", "@db.Text"),
    "int": ("Int", None),
    "bigint": ("BigInt", None),
    "float": ("Float", None),
    "decimal": ("Decimal", None),
    "boolean": ("Boolean", None),
    "date": ("DateTime", "@db.Date"),
    "datetime": ("DateTime", None),
    "json": ("Json", None),
    "uuid": ("String", "@db.Uuid"),
}

_LIST_RELATIONS = (RelationshipType.ONE_TO_MANY, RelationshipType.MANY_TO_MANY)

_INDENT = "  "


def map_field_type(field_type: str) -> tuple[str, str | None]:
    """Map a DSL type token to its Prisma scalar and native attribute.

    Unknown tokens fall back to a plain ``String`` so new DSL types never
    break rendering.
    """
    token = getattr(field_type, "value", field_type)
    return _PRISMA_TYPE_MAP.get(token, ("String", None))


def table_name(entity_name: str) -> str:
    """Database table name for an entity: pluralised and snake-cased."""
    return snake_case(pluralize(entity_name))


# ---------------------------------------------------------------------------
# Line rendering
# ---------------------------------------------------------------------------

def render_field(field: EntityField) -> str:
    """Render one field line (without indentation)."""
    scalar, native = map_field_type(field.type)
    line = f"{field.name} {scalar}"
    if field.optional:
        line += "?"
    if field.unique:
        line += " @unique"
    if field.is_id:
        line += " @id"
    if field.default_value:
        line += f" @default({field.default_value})"
    if native:
        line += f" {native}"
    return line


def render_relationship(rel: Relationship) -> str:
    """Render one relationship line (without indentation).

    To-one relations are a plain, possibly optional, reference.  To-many
    relations are lists with a named ``@relation`` so that several relations
    between the same two models stay distinguishable.
    """
    if rel.type in _LIST_RELATIONS:
        return f'{rel.name} {rel.target_entity}[] @relation("{rel.name}To{rel.target_entity}")'
    return f"{rel.name} {rel.target_entity}{'?' if rel.optional else ''}"


def generate_model(entity: Entity) -> str:
    """Render *entity* as a Prisma ``model`` block.

    Example output for ``Post``::

        model Post {
          id String @id @default(cuid()) @db.Uuid
          title String
          authorId String @db.Uuid
          author User

          @@map("posts")
        }
    """
    lines = [f"model {entity.name} {{"]
    lines.extend(_INDENT + render_field(f) for f in entity.fields)
    lines.extend(_INDENT + render_relationship(r) for r in entity.relationships)
    lines.append("")
    lines.append(f'{_INDENT}@@map("{table_name(entity.name)}")')
    lines.append("}")
    return "\n".join(lines) + "\n"
