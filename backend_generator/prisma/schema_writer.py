"""Appends generated models to the project's Prisma schema file."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

from backend_generator.config import GeneratorConfig
from backend_generator.dsl.models import Entity

from .model_writer import generate_model


class SchemaFileNotFoundError(FileNotFoundError):
    """Raised when the configured Prisma schema file does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Prisma schema not found: {path}")


def has_model(schema: str, model_name: str) -> bool:
    """Return ``True`` if *schema* already declares ``model <model_name>``."""
    pattern = rf"^\s*model\s+{re.escape(model_name)}\s*\{{"
    return re.search(pattern, schema, re.MULTILINE) is not None


class SchemaWriter:
    """Writes model fragments into ``<project_root>/<schema_path>``."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    @property
    def schema_file(self) -> Path:
        return self.config.schema_file

    async def read_schema(self) -> str:
        path = self.schema_file
        if not path.is_file():
            raise SchemaFileNotFoundError(path)
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    async def append_model(self, entity: Entity) -> bool:
        """Append the model for *entity* unless the schema already has it.

        Returns:
            ``True`` if the fragment was written, ``False`` if a model with
            the same name was already present.

        Raises:
            SchemaFileNotFoundError: If the schema file is missing.
        """
        schema = await self.read_schema()
        if has_model(schema, entity.name):
            return False

        fragment = generate_model(entity)
        if schema.strip():
            updated = schema.rstrip("\n") + "\n\n" + fragment
        else:
            updated = fragment
        await asyncio.to_thread(self.schema_file.write_text, updated, encoding="utf-8")
        return True
