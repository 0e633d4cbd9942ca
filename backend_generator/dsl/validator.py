"""Structural validation for parsed entities.

Validation never raises and never mutates: it returns human-readable
violation messages and leaves the decision to abort to the caller.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from .models import Entity


def _duplicates(names: Iterable[str]) -> list[str]:
    """Return each repeated name once, in the order its first repeat appears."""
    seen: set[str] = set()
    repeated: list[str] = []
    for name in names:
        if name in seen and name not in repeated:
            repeated.append(name)
        seen.add(name)
    return repeated


def validate_entity(entity: Entity) -> list[str]:
    """Check a single entity for structural problems.

    Checks run in a fixed order:

    1. at least one field is marked ``@id``;
    2. field names are unique (one message listing every duplicated name);
    3. every relationship names a target entity (one message each).

    Returns:
        Violation messages; an empty list means the entity is valid.
    """
    errors: list[str] = []

    if entity.id_field is None:
        errors.append("Entity must have an ID field")

    duplicates = _duplicates(entity.field_names)
    if duplicates:
        errors.append(f"Duplicate field names: {', '.join(duplicates)}")

    for rel in entity.relationships:
        if not rel.target_entity:
            errors.append(f"Relationship {rel.name} has no target entity")

    return errors


def check_references(entities: Iterable[Entity]) -> list[str]:
    """Check relationship targets across a batch of entities.

    Reports repeated entity names and every relationship whose target is not
    one of the entities in the batch.  Relationships with an empty target are
    left to :func:`validate_entity`.
    """
    batch = list(entities)
    errors: list[str] = []

    counts = Counter(e.name for e in batch)
    repeated = [name for name in counts if counts[name] > 1]
    if repeated:
        errors.append(f"Duplicate entity names: {', '.join(repeated)}")

    known = set(counts)
    for entity in batch:
        for rel in entity.relationships:
            if rel.target_entity and rel.target_entity not in known:
                errors.append(
                    f"Relationship {entity.name}.{rel.name} targets unknown "
                    f"entity {rel.target_entity}"
                )

    return errors
