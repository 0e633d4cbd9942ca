"""Shared pieces of the per-entity file writers.

``build_entity_context`` turns an ``Entity`` into the Jinja2 context used by
every source and test template; ``EntityWriter`` handles the
render-unless-exists bookkeeping.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from backend_generator.config import GeneratorConfig
from backend_generator.dsl.models import Entity, EntityField
from backend_generator.utils import camel_case, kebab_case, pascal_case, pluralize

from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Type mapping
# ---------------------------------------------------------------------------

_TS_TYPE_MAP: dict[str, str] = {
    "string": "string",
    "text": "string",
    "uuid": "string",
    "int": "number",
    "bigint": "number",
    "float": "number",
    "decimal": "number",
    "boolean": "boolean",
    "date": "Date",
    "datetime": "Date",
    "json": "any",
}

_VALIDATOR_MAP: dict[str, str] = {
    "string": "IsString",
    "text": "IsString",
    "int": "IsNumber",
    "bigint": "IsNumber",
    "float": "IsNumber",
    "decimal": "IsNumber",
    "boolean": "IsBoolean",
    "date": "IsDateString",
    "datetime": "IsDateString",
    "uuid": "IsUUID",
}


def ts_type(field_type: str) -> str:
    """TypeScript type for a DSL type token (``string`` when unknown)."""
    return _TS_TYPE_MAP.get(getattr(field_type, "value", field_type), "string")


def field_decorators(field: EntityField) -> list[str]:
    """class-validator / Swagger decorators for a create-DTO property."""
    decorators: list[str] = []
    validator = _VALIDATOR_MAP.get(field.type.value)
    if validator:
        decorators.append(f"@{validator}()")
    if field.optional:
        decorators.append("@IsOptional()")
    required = ", required: false" if field.optional else ""
    decorators.append(f"@ApiProperty({{ description: '{field.name}'{required} }})")
    return decorators


def sample_value(field: EntityField) -> Any:
    """Return a sample JSON-serializable value for use in test payloads."""
    fname = field.name.lower()
    kind = field.type.value
    if "email" in fname:
        return "test@example.com"
    if "url" in fname or "link" in fname:
        return "https://example.com/test"
    if kind in ("int", "bigint"):
        return 42
    if kind in ("float", "decimal"):
        return 99.99
    if kind == "boolean":
        return True
    if kind in ("date", "datetime"):
        return "2025-01-01T00:00:00.000Z"
    if kind == "uuid":
        return "00000000-0000-4000-8000-000000000001"
    if kind == "json":
        return {"key": "value"}
    return f"test-{field.name}"


def build_entity_context(entity: Entity) -> dict[str, Any]:
    """Build the Jinja2 template context for one entity.

    Adds the derived names (``name_pascal``, ``name_kebab``, ``name_camel``,
    ``plural_pascal``, ``plural_kebab``), enriched field dicts and the sample
    create payload used by the generated tests.
    """
    fields = [
        {
            "name": f.name,
            "type": f.type.value,
            "optional": f.optional,
            "is_id": f.is_id,
            "ts_type": ts_type(f.type),
            "decorators": field_decorators(f),
        }
        for f in entity.fields
    ]
    create_fields = [f for f in entity.fields if not f.is_id]
    validators = {
        _VALIDATOR_MAP[f.type.value] for f in create_fields if f.type.value in _VALIDATOR_MAP
    }
    if any(f.optional for f in create_fields):
        validators.add("IsOptional")

    payload = {
        f.name: sample_value(f)
        for f in create_fields
        if not f.optional and f.default_value is None
    }
    if not payload:
        payload = {"name": f"Test {entity.name}"}
    payload_key = next(iter(payload))

    return {
        "entity": entity,
        "name": entity.name,
        "name_pascal": pascal_case(entity.name),
        "name_kebab": kebab_case(entity.name),
        "name_camel": camel_case(entity.name),
        "plural_pascal": pascal_case(pluralize(entity.name)),
        "plural_kebab": kebab_case(pluralize(entity.name)),
        "fields": fields,
        "create_fields": [f for f in fields if not f["is_id"]],
        "validators": sorted(validators),
        "sample_payload": json.dumps(payload),
        "sample_key": payload_key,
    }


# ---------------------------------------------------------------------------
# Writer base
# ---------------------------------------------------------------------------

class FileReport(BaseModel):
    """Files produced by one writer run."""
    written: list[Path] = Field(default_factory=list)
    skipped: list[Path] = Field(default_factory=list)

    def extend(self, other: "FileReport") -> None:
        self.written.extend(other.written)
        self.skipped.extend(other.skipped)


class EntityWriter:
    """Base class for writers that render a fixed set of templates per entity.

    Subclasses list ``(template, relative output path)`` pairs in
    :meth:`outputs`; output paths may use ``{kebab}`` as a placeholder.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()

    def base_dir(self, entity: Entity) -> Path:
        raise NotImplementedError

    def outputs(self) -> list[tuple[str, str]]:
        raise NotImplementedError

    async def generate(self, entity: Entity) -> FileReport:
        """Render every template for *entity*.

        Existing files are left untouched unless ``config.overwrite`` is set.
        """
        context = build_entity_context(entity)
        root = self.base_dir(entity)
        report = FileReport()

        for template_name, output_name in self.outputs():
            out = root / output_name.format(kebab=context["name_kebab"])
            if out.exists() and not self.config.overwrite:
                report.skipped.append(out)
                continue
            report.written.append(
                await self.renderer.render_to_file(template_name, out, context)
            )

        return report
