"""NestJS module generation for a parsed entity.

Writes one module directory per entity under ``<modules_dir>/<kebab>/``:
module, controller, service, create/update DTOs and the entity class.
"""

from __future__ import annotations

from pathlib import Path

from backend_generator.dsl.models import Entity
from backend_generator.utils import kebab_case

from .base import EntityWriter


class SourceWriter(EntityWriter):
    """Renders the NestJS CRUD module for an entity."""

    def base_dir(self, entity: Entity) -> Path:
        return self.config.modules_path / kebab_case(entity.name)

    def outputs(self) -> list[tuple[str, str]]:
        return [
            ("module/module.ts.j2", "{kebab}.module.ts"),
            ("module/controller.ts.j2", "{kebab}.controller.ts"),
            ("module/service.ts.j2", "{kebab}.service.ts"),
            ("module/dto/create-dto.ts.j2", "dto/create-{kebab}.dto.ts"),
            ("module/dto/update-dto.ts.j2", "dto/update-{kebab}.dto.ts"),
            ("module/entities/entity.ts.j2", "entities/{kebab}.entity.ts"),
        ]
