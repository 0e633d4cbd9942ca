"""Tests for entity template context and NestJS module generation.

Covers:
- build_entity_context names, field enrichment, validators, sample payload
- TypeScript type and decorator mapping
- SourceWriter output layout and rendered content
- Skipping existing files unless overwrite is enabled
"""

from __future__ import annotations

import json

import pytest

from backend_generator.dsl.models import EntityField, FieldType
from backend_generator.dsl.parser import parse_entity_dsl
from backend_generator.writer import SourceWriter, build_entity_context
from backend_generator.writer.base import field_decorators, sample_value, ts_type


pytestmark = pytest.mark.unit


MODULE_FILES = [
    "user.module.ts",
    "user.controller.ts",
    "user.service.ts",
    "dto/create-user.dto.ts",
    "dto/update-user.dto.ts",
    "entities/user.entity.ts",
]


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class TestBuildEntityContext:
    def test_names(self):
        ctx = build_entity_context(parse_entity_dsl("BlogPost\nid:uuid@id"))
        assert ctx["name"] == "BlogPost"
        assert ctx["name_pascal"] == "BlogPost"
        assert ctx["name_kebab"] == "blog-post"
        assert ctx["name_camel"] == "blogPost"
        assert ctx["plural_pascal"] == "BlogPosts"
        assert ctx["plural_kebab"] == "blog-posts"

    def test_create_fields_exclude_id(self, user_entity):
        ctx = build_entity_context(user_entity)
        assert [f["name"] for f in ctx["fields"]] == user_entity.field_names
        assert "id" not in [f["name"] for f in ctx["create_fields"]]

    def test_validators_sorted_and_include_optional(self, user_entity):
        ctx = build_entity_context(user_entity)
        assert ctx["validators"] == ["IsDateString", "IsOptional", "IsString"]

    def test_sample_payload_uses_required_fields(self, user_entity):
        ctx = build_entity_context(user_entity)
        assert json.loads(ctx["sample_payload"]) == {"email": "test@example.com"}
        assert ctx["sample_key"] == "email"

    def test_sample_payload_fallback(self):
        ctx = build_entity_context(parse_entity_dsl("Note\nid:uuid@id\nbody:text?"))
        assert json.loads(ctx["sample_payload"]) == {"name": "Test Note"}
        assert ctx["sample_key"] == "name"


class TestTypeHelpers:
    @pytest.mark.parametrize(
        "token, expected",
        [("string", "string"), ("int", "number"), ("boolean", "boolean"),
         ("datetime", "Date"), ("json", "any"), ("unknown", "string")],
    )
    def test_ts_type(self, token, expected):
        assert ts_type(token) == expected

    def test_decorators_for_optional_field(self):
        field = EntityField(name="name", type=FieldType.STRING, optional=True)
        assert field_decorators(field) == [
            "@IsString()",
            "@IsOptional()",
            "@ApiProperty({ description: 'name', required: false })",
        ]

    def test_decorators_for_json_field(self):
        field = EntityField(name="meta", type=FieldType.JSON)
        assert field_decorators(field) == ["@ApiProperty({ description: 'meta' })"]

    def test_sample_values(self):
        assert sample_value(EntityField(name="count", type=FieldType.INT)) == 42
        assert sample_value(EntityField(name="homepageUrl", type=FieldType.STRING)) == (
            "https://example.com/test"
        )
        assert sample_value(EntityField(name="title", type=FieldType.STRING)) == "test-title"


# ---------------------------------------------------------------------------
# SourceWriter
# ---------------------------------------------------------------------------


class TestSourceWriter:
    @pytest.mark.asyncio
    async def test_writes_module_files(self, generator_config, user_entity):
        report = await SourceWriter(generator_config).generate(user_entity)

        module_dir = generator_config.modules_path / "user"
        assert report.written == [module_dir / name for name in MODULE_FILES]
        assert report.skipped == []
        for name in MODULE_FILES:
            assert (module_dir / name).is_file()

    @pytest.mark.asyncio
    async def test_rendered_content(self, generator_config, post_entity):
        await SourceWriter(generator_config).generate(post_entity)
        module_dir = generator_config.modules_path / "post"

        service = (module_dir / "post.service.ts").read_text(encoding="utf-8")
        assert "export class PostService" in service
        assert "this.prisma.post.findMany" in service

        controller = (module_dir / "post.controller.ts").read_text(encoding="utf-8")
        assert "@Controller('post')" in controller
        assert "@ApiTags('Posts')" in controller

        dto = (module_dir / "dto" / "create-post.dto.ts").read_text(encoding="utf-8")
        assert "export class CreatePostDto" in dto
        assert "  title: string;" in dto
        assert "  content?: string;" in dto
        assert "  id:" not in dto
        assert "from 'class-validator'" in dto

        entity = (module_dir / "entities" / "post.entity.ts").read_text(encoding="utf-8")
        assert "  id: string;" in entity
        assert "  publishedAt?: Date;" in entity

    @pytest.mark.asyncio
    async def test_existing_files_are_kept(self, generator_config, user_entity):
        service = generator_config.modules_path / "user" / "user.service.ts"
        service.parent.mkdir(parents=True)
        service.write_text("// hand written\n", encoding="utf-8")

        report = await SourceWriter(generator_config).generate(user_entity)

        assert report.skipped == [service]
        assert len(report.written) == len(MODULE_FILES) - 1
        assert service.read_text(encoding="utf-8") == "// hand written\n"

    @pytest.mark.asyncio
    async def test_overwrite_replaces_files(self, generator_config, user_entity):
        config = generator_config.model_copy(update={"overwrite": True})
        service = config.modules_path / "user" / "user.service.ts"
        service.parent.mkdir(parents=True)
        service.write_text("// hand written\n", encoding="utf-8")

        report = await SourceWriter(config).generate(user_entity)

        assert report.skipped == []
        assert "export class UserService" in service.read_text(encoding="utf-8")
