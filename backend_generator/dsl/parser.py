"""Entity DSL parser.

Converts the compact per-line entity DSL into validated ``Entity`` models::

    Post
    id:uuid@id@default(cuid())
    title:string
    content:text?
    authorId:uuid@relation(User,many-to-one)

The first non-blank line names the entity; every following non-blank line
declares one field as ``name:type[?]`` followed by any number of modifiers
(``@unique``, ``@id``, ``@default(...)``, ``@relation(Target,kind)``).
Several entities may be given in one document, separated by blank lines.

The parser is pure: no I/O except in the ``*_from_file`` coroutines, which
read the file in a worker thread and delegate to the text parsers.
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from .models import (
    FIELD_TYPES,
    RELATIONSHIP_TYPES,
    AbacPolicy,
    Entity,
    EntityField,
    FieldType,
    Relationship,
    RelationshipType,
)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DslErrorKind(str, Enum):
    """Classification of DSL parse failures."""
    EMPTY_INPUT = "EmptyInput"
    INVALID_FIELD_FORMAT = "InvalidFieldFormat"
    INVALID_FIELD_TYPE = "InvalidFieldType"
    INVALID_RELATION = "InvalidRelation"


class DslError(Exception):
    """Raised when DSL text cannot be parsed into an entity."""

    def __init__(self, kind: DslErrorKind, message: str, line: str | None = None) -> None:
        self.kind = kind
        self.line = line
        super().__init__(message)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_FIELD_LINE_PATTERN = re.compile(r"^(\w+):(\w+)(\?)?(.*)$")
_MODIFIER_PATTERN = re.compile(r"^@(\w+)(.*)$", re.DOTALL)
_BLOCK_SEPARATOR = re.compile(r"\n\s*\n")

_ID_SUFFIX = "Id"

_ABAC_ROLE_SUFFIXES: list[tuple[str, str, bool]] = [
    # (action, role suffix, owner may act)
    ("create", "creator", False),
    ("read", "reader", True),
    ("update", "updater", True),
    ("delete", "deleter", True),
    ("list", "reader", False),
]


# ---------------------------------------------------------------------------
# Modifier scanning
# ---------------------------------------------------------------------------

def _split_modifiers(tail: str) -> list[str]:
    """Split a modifier tail into ``@``-prefixed segments.

    Only an ``@`` at parenthesis depth 0 and outside a quoted string starts a
    new segment, so ``@default("a@unique")`` stays a single segment.
    Whitespace between segments is dropped.
    """
    segments: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None

    for ch in tail:
        if quote is not None:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch == "@" and depth == 0:
            if current:
                segments.append("".join(current))
            current = [ch]
            continue
        current.append(ch)

    if current:
        segments.append("".join(current))
    return [s.strip() for s in segments if s.strip()]


def _parenthesised(rest: str) -> str | None:
    """Return the text between the first ``(`` and the last ``)`` of *rest*."""
    if not rest.startswith("(") or not rest.endswith(")"):
        return None
    return rest[1:-1]


def _parse_relation(segment: str, args: str | None) -> tuple[str, RelationshipType]:
    """Parse the ``Target,kind`` arguments of a relation modifier."""
    if args is None:
        raise DslError(
            DslErrorKind.INVALID_RELATION, f"Invalid relation: {segment}", segment
        )
    parts = [p.strip() for p in args.split(",")]
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise DslError(
            DslErrorKind.INVALID_RELATION, f"Invalid relation: {segment}", segment
        )
    target, kind = parts
    if not re.fullmatch(r"\w+", target) or kind not in RELATIONSHIP_TYPES:
        raise DslError(
            DslErrorKind.INVALID_RELATION, f"Invalid relation: {segment}", segment
        )
    return target, RelationshipType(kind)


def _parse_modifiers(line: str, tail: str) -> dict[str, Any]:
    """Scan the modifier tail of a field line into field attributes.

    Repeated modifiers are tolerated; the last ``@default``/``@relation``
    wins.
    """
    attrs: dict[str, Any] = {
        "unique": False,
        "is_id": False,
        "default_value": None,
        "relation_target": None,
        "relation_type": None,
    }

    for segment in _split_modifiers(tail):
        match = _MODIFIER_PATTERN.match(segment)
        if not match:
            raise DslError(
                DslErrorKind.INVALID_FIELD_FORMAT, f"Invalid field format: {line}", line
            )
        name, rest = match.group(1), match.group(2).strip()

        if name in ("unique", "id") and not rest:
            attrs["unique" if name == "unique" else "is_id"] = True
        elif name == "default" and _parenthesised(rest) is not None:
            value = _parenthesised(rest)
            attrs["default_value"] = value or None
        elif name == "relation":
            target, kind = _parse_relation(segment, _parenthesised(rest))
            attrs["relation_target"] = target
            attrs["relation_type"] = kind
        else:
            raise DslError(
                DslErrorKind.INVALID_FIELD_FORMAT, f"Invalid field format: {line}", line
            )

    return attrs


# ---------------------------------------------------------------------------
# Field / entity construction
# ---------------------------------------------------------------------------

def parse_field_line(line: str) -> EntityField:
    """Parse a single ``name:type[?][modifiers]`` declaration.

    Raises:
        DslError: ``INVALID_FIELD_FORMAT`` if the line does not match the
            grammar, ``INVALID_FIELD_TYPE`` if the type is unknown,
            ``INVALID_RELATION`` if a relation modifier is malformed.
    """
    match = _FIELD_LINE_PATTERN.match(line)
    if not match:
        raise DslError(
            DslErrorKind.INVALID_FIELD_FORMAT, f"Invalid field format: {line}", line
        )

    field_name, field_type, optional, tail = match.groups()
    if field_type not in FIELD_TYPES:
        raise DslError(
            DslErrorKind.INVALID_FIELD_TYPE, f"Invalid field type: {field_type}", line
        )

    attrs = _parse_modifiers(line, tail or "")
    return EntityField(
        name=field_name,
        type=FieldType(field_type),
        optional=bool(optional),
        **attrs,
    )


def derive_relationships(fields: Iterable[EntityField]) -> tuple[Relationship, ...]:
    """Build relationships from ``*Id`` fields that carry a relation modifier."""
    relationships: list[Relationship] = []
    for field in fields:
        if _ID_SUFFIX not in field.name or field.name == "id":
            continue
        if not field.has_relation:
            continue
        relationships.append(
            Relationship(
                name=field.name.replace(_ID_SUFFIX, "", 1),
                target_entity=field.relation_target,
                type=field.relation_type,
                optional=field.optional,
            )
        )
    return tuple(relationships)


def default_abac_policies(entity_name: str) -> tuple[AbacPolicy, ...]:
    """Generate the five default access policies for an entity."""
    resource = entity_name.lower()
    policies: list[AbacPolicy] = []
    for action, role, owner_allowed in _ABAC_ROLE_SUFFIXES:
        condition = (
            f"user.roles.includes('admin') || "
            f"user.roles.includes('{resource}_{role}')"
        )
        if owner_allowed:
            condition += " || resource.createdBy === user.id"
        policies.append(
            AbacPolicy(action=action, resource=resource, conditions=(condition,))
        )
    return tuple(policies)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_entity_dsl(text: str) -> Entity:
    """Parse one entity definition.

    Args:
        text: DSL text.  The first non-blank line is the entity name, every
            further non-blank line is a field declaration.

    Returns:
        The parsed ``Entity`` with fields in line order, derived
        relationships and default ABAC policies.

    Raises:
        DslError: ``EMPTY_INPUT`` for empty or whitespace-only text, or any
            field-level error from :func:`parse_field_line`.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        raise DslError(DslErrorKind.EMPTY_INPUT, "Empty DSL input")

    entity_name = lines[0]
    fields = tuple(parse_field_line(line) for line in lines[1:])

    return Entity(
        name=entity_name,
        fields=fields,
        relationships=derive_relationships(fields),
        soft_delete=False,
        auditing=True,
        abac_policies=default_abac_policies(entity_name),
    )


def parse_entities_dsl(text: str) -> list[Entity]:
    """Parse a blank-line separated batch of entity definitions.

    Blocks are parsed in input order.  The first failing block aborts the
    whole call and its ``DslError`` propagates; no partial list is returned.
    """
    normalised = text.replace("\r\n", "\n")
    blocks = [b for b in _BLOCK_SEPARATOR.split(normalised) if b.strip()]
    return [parse_entity_dsl(block) for block in blocks]


def load_entities_json(text: str) -> list[Entity]:
    """Load entities from a structured JSON specification.

    The document is either one entity object or an array of them, using the
    camelCase keys of the data model.  Relationships are always derived from
    the relation fields; a ``relationships`` array in the document must match
    them.  ABAC policies are synthesised when the document leaves them out.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.
        pydantic.ValidationError: If an entity does not match the model.
        ValueError: If a supplied ``relationships`` array differs from the
            one derived from the fields.
    """
    data = json.loads(text)
    items = data if isinstance(data, list) else [data]

    entities: list[Entity] = []
    for item in items:
        entity = Entity.model_validate(item)
        derived = derive_relationships(entity.fields)
        if "relationships" in item and entity.relationships != derived:
            raise ValueError(
                f"Entity {entity.name}: relationships must be derived from relation fields"
            )
        updates: dict[str, Any] = {"relationships": derived}
        if "abacPolicies" not in item and "abac_policies" not in item:
            updates["abac_policies"] = default_abac_policies(entity.name)
        entities.append(entity.model_copy(update=updates))
    return entities


async def _read_text(path: str | Path) -> str:
    """Read a UTF-8 file in a worker thread.  I/O errors propagate unchanged."""
    return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")


async def parse_entity_dsl_from_file(path: str | Path) -> Entity:
    """Read *path* and parse it with :func:`parse_entity_dsl`."""
    return parse_entity_dsl(await _read_text(path))


async def parse_entities_dsl_from_file(path: str | Path) -> list[Entity]:
    """Read *path* and parse it with :func:`parse_entities_dsl`."""
    return parse_entities_dsl(await _read_text(path))


async def load_spec_file(path: str | Path) -> list[Entity]:
    """Load every entity from a specification file.

    ``.json`` files use the structured form; anything else is DSL text that
    may hold several blank-line separated entities.
    """
    text = await _read_text(path)
    if Path(path).suffix.lower() == ".json":
        return load_entities_json(text)
    return parse_entities_dsl(text)
