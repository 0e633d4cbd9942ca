"""Tests for the Jinja2 TemplateRenderer.

Covers:
- Bundled template discovery
- Naming filters registered per renderer instance
- Strict undefined handling
- render_to_file writing nested output paths
"""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from backend_generator.writer.templates import DEFAULT_FILTERS, TemplateRenderer


pytestmark = pytest.mark.unit


class TestTemplateDiscovery:
    def test_bundled_templates(self):
        templates = TemplateRenderer().list_templates()
        assert "module/controller.ts.j2" in templates
        assert "module/dto/create-dto.ts.j2" in templates
        assert "tests/e2e-spec.ts.j2" in templates
        assert templates == sorted(templates)

    def test_prefix_filter(self):
        templates = TemplateRenderer().list_templates("tests")
        assert templates == ["tests/e2e-spec.ts.j2", "tests/service.spec.ts.j2"]

    def test_missing_prefix(self):
        assert TemplateRenderer().list_templates("nope") == []

    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.txt.j2").write_text("Hello {{ name }}!", encoding="utf-8")
        renderer = TemplateRenderer(template_dir=tmp_path)
        assert renderer.list_templates() == ["hello.txt.j2"]
        assert renderer.render("hello.txt.j2", {"name": "World"}) == "Hello World!"


class TestFilters:
    @pytest.mark.parametrize(
        "expr, expected",
        [
            ("{{ 'BlogPost' | kebab_case }}", "blog-post"),
            ("{{ 'blog-post' | pascal_case }}", "BlogPost"),
            ("{{ 'BlogPost' | camel_case }}", "blogPost"),
            ("{{ 'BlogPost' | snake_case }}", "blog_post"),
            ("{{ 'Category' | pluralize }}", "Categories"),
            ("{{ 'Categories' | singularize }}", "Category"),
        ],
    )
    def test_default_filters(self, expr, expected):
        assert TemplateRenderer().render_string(expr, {}) == expected

    def test_filters_are_per_instance(self):
        shouting = TemplateRenderer(filters={"shout": str.upper})
        plain = TemplateRenderer()

        assert shouting.render_string("{{ 'hi' | shout }}", {}) == "HI"
        assert "shout" not in plain.env.filters
        assert set(DEFAULT_FILTERS) <= set(plain.env.filters)

    def test_register_filter(self):
        renderer = TemplateRenderer()
        renderer.register_filter("twice", lambda s: s * 2)
        assert renderer.render_string("{{ 'ab' | twice }}", {}) == "abab"

    def test_quotes_are_not_escaped(self):
        assert TemplateRenderer().render_string("{{ v }}", {"v": "'a' & \"b\""}) == "'a' & \"b\""


class TestRendering:
    def test_undefined_variable_raises(self):
        with pytest.raises(UndefinedError):
            TemplateRenderer().render_string("{{ missing }}", {})

    @pytest.mark.asyncio
    async def test_render_to_file(self, tmp_path: Path):
        renderer = TemplateRenderer()
        out = tmp_path / "deep" / "user" / "user.module.ts"
        result = await renderer.render_to_file(
            "module/module.ts.j2",
            out,
            {"name_pascal": "User", "name_kebab": "user"},
        )
        assert result == out
        content = out.read_text(encoding="utf-8")
        assert "export class UserModule {}" in content
        assert "from './user.controller'" in content
