"""CRUD generation orchestrator.

Takes parsed entities and generates, for each one, the Prisma model, the
NestJS module files and the test scaffolding.  Every entity is validated
before anything is written; a batch is also checked for relationships that
point at entities outside the batch.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field

from backend_generator.config import GeneratorConfig
from backend_generator.dsl.models import Entity
from backend_generator.dsl.validator import check_references, validate_entity
from backend_generator.prisma.schema_writer import SchemaWriter
from backend_generator.utils import print_info, print_warning
from backend_generator.writer import FileReport, SourceWriter, TemplateRenderer, TestWriter


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class EntityValidationError(Exception):
    """Raised when one or more entities fail validation."""

    def __init__(self, errors: list[str], entity_name: str | None = None) -> None:
        self.errors = list(errors)
        self.entity_name = entity_name
        subject = f"Entity {entity_name}" if entity_name else "Entity batch"
        super().__init__(f"{subject} validation failed:\n" + "\n".join(self.errors))


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class GenerationResult(BaseModel):
    """Outcome of generating one entity."""

    entity: str = Field(..., description="Entity name")
    model_appended: bool = Field(
        default=False, description="Whether the Prisma model was added to the schema"
    )
    written: list[Path] = Field(default_factory=list, description="Files written")
    skipped: list[Path] = Field(
        default_factory=list, description="Existing files left untouched"
    )


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class CrudGenerator:
    """Generates CRUD code for parsed entities.

    For each entity:
    - Prisma ``model`` block appended to the schema file
    - NestJS module, controller, service, DTOs and entity class
    - Jest unit spec and e2e spec (unless ``skip_tests``)
    """

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config
        self.renderer = TemplateRenderer()
        self.schema_writer = SchemaWriter(config)
        self.source_writer = SourceWriter(config, self.renderer)
        self.test_writer = TestWriter(config, self.renderer)

    # -- Public API --------------------------------------------------------

    async def generate(self, entity: Entity) -> GenerationResult:
        """Validate *entity* and generate all of its files.

        Raises:
            EntityValidationError: If ``validate_entity`` reports anything.
                Nothing is written in that case.
            SchemaFileNotFoundError: If the Prisma schema file is missing.
        """
        errors = validate_entity(entity)
        if errors:
            raise EntityValidationError(errors, entity.name)
        return await self._generate_validated(entity)

    async def generate_all(self, entities: Iterable[Entity]) -> list[GenerationResult]:
        """Validate a batch of entities, then generate them in order.

        All entities are validated (and, when ``check_references`` is on,
        cross-checked) before the first file is written.
        """
        batch = list(entities)
        errors: list[str] = []
        for entity in batch:
            errors.extend(f"{entity.name}: {e}" for e in validate_entity(entity))
        if self.config.check_references:
            errors.extend(check_references(batch))
        if errors:
            raise EntityValidationError(errors)

        results: list[GenerationResult] = []
        for entity in batch:
            results.append(await self._generate_validated(entity))
        return results

    # -- Steps -------------------------------------------------------------

    async def _generate_validated(self, entity: Entity) -> GenerationResult:
        appended = await self.schema_writer.append_model(entity)
        if not appended:
            print_warning(
                f"Model {entity.name} already exists in {self.config.schema_file}; left unchanged"
            )

        report = FileReport()
        report.extend(await self.source_writer.generate(entity))
        if not self.config.skip_tests:
            report.extend(await self.test_writer.generate(entity))

        if self.config.verbose:
            for path in report.written:
                print_info(f"wrote {path}")
            for path in report.skipped:
                print_info(f"kept  {path}")

        return GenerationResult(
            entity=entity.name,
            model_appended=appended,
            written=report.written,
            skipped=report.skipped,
        )
