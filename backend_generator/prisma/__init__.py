"""Prisma schema projection for parsed entities.

``generate_model`` renders an entity as a ``model`` block; ``SchemaWriter``
appends such blocks to the project's ``schema.prisma``.
"""

from backend_generator.prisma.model_writer import (
    generate_model,
    map_field_type,
    table_name,
)
from backend_generator.prisma.schema_writer import (
    SchemaFileNotFoundError,
    SchemaWriter,
    has_model,
)

__all__ = [
    "SchemaFileNotFoundError",
    "SchemaWriter",
    "generate_model",
    "has_model",
    "map_field_type",
    "table_name",
]
