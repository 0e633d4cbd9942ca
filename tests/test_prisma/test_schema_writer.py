"""Tests for appending generated models to the Prisma schema file.

Covers:
- has_model detection
- Appending after existing content and into an empty schema
- Idempotency when the model already exists
- Missing schema file
"""

from __future__ import annotations

from pathlib import Path

import pytest

from backend_generator.config import GeneratorConfig
from backend_generator.prisma.model_writer import generate_model
from backend_generator.prisma.schema_writer import (
    SchemaFileNotFoundError,
    SchemaWriter,
    has_model,
)


pytestmark = pytest.mark.unit


class TestHasModel:
    def test_detects_model(self):
        schema = "model User {\n  id String @id\n}\n"
        assert has_model(schema, "User") is True

    def test_indented_declaration(self):
        assert has_model("  model   User{\n}", "User") is True

    def test_prefix_is_not_a_match(self):
        assert has_model("model UserProfile {\n}\n", "User") is False

    def test_mention_in_field_is_not_a_match(self):
        assert has_model("model Post {\n  author User\n}\n", "User") is False


class TestSchemaWriter:
    @pytest.mark.asyncio
    async def test_append_model(self, generator_config, user_entity):
        writer = SchemaWriter(generator_config)
        before = generator_config.schema_file.read_text(encoding="utf-8")

        assert await writer.append_model(user_entity) is True

        after = generator_config.schema_file.read_text(encoding="utf-8")
        assert after.startswith(before.rstrip("\n"))
        assert after.endswith("\n\n" + generate_model(user_entity))

    @pytest.mark.asyncio
    async def test_append_is_idempotent(self, generator_config, user_entity):
        writer = SchemaWriter(generator_config)
        await writer.append_model(user_entity)
        once = generator_config.schema_file.read_text(encoding="utf-8")

        assert await writer.append_model(user_entity) is False
        assert generator_config.schema_file.read_text(encoding="utf-8") == once
        assert once.count("model User {") == 1

    @pytest.mark.asyncio
    async def test_models_appended_in_order(self, generator_config, user_entity, post_entity):
        writer = SchemaWriter(generator_config)
        await writer.append_model(user_entity)
        await writer.append_model(post_entity)

        schema = generator_config.schema_file.read_text(encoding="utf-8")
        assert schema.index("model User {") < schema.index("model Post {")

    @pytest.mark.asyncio
    async def test_empty_schema(self, generator_config, user_entity):
        generator_config.schema_file.write_text("", encoding="utf-8")
        await SchemaWriter(generator_config).append_model(user_entity)
        assert generator_config.schema_file.read_text(encoding="utf-8") == generate_model(
            user_entity
        )

    @pytest.mark.asyncio
    async def test_missing_schema(self, tmp_path: Path, user_entity):
        config = GeneratorConfig(project_root=tmp_path)
        with pytest.raises(SchemaFileNotFoundError) as exc_info:
            await SchemaWriter(config).append_model(user_entity)
        assert "Prisma schema not found" in str(exc_info.value)
        assert isinstance(exc_info.value, FileNotFoundError)
