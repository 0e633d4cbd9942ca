"""Command-line entry point for the backend generator.

Usage::

    backend-generator add-crud --spec entities.dsl
    backend-generator add-crud --entity User --fields "id:uuid@id,email:string@unique"
    backend-generator parse entities.dsl --model
    backend-generator validate entities.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from rich.prompt import Prompt
from rich.syntax import Syntax
from rich.table import Table

from backend_generator.config import GeneratorConfig
from backend_generator.dsl import (
    DslError,
    DslErrorKind,
    Entity,
    check_references,
    load_spec_file,
    parse_entities_dsl,
    parse_entity_dsl,
    validate_entity,
)
from backend_generator.generator import CrudGenerator, EntityValidationError, GenerationResult
from backend_generator.prisma import generate_model
from backend_generator.utils import (
    console,
    kebab_case,
    print_error,
    print_success,
    print_summary_table,
)

DEFAULT_FIELDS = (
    "id:uuid@id@default(cuid()),"
    "email:string@unique,"
    "name:string?,"
    "createdAt:datetime@default(now()),"
    "updatedAt:datetime@default(now())"
)


# ---------------------------------------------------------------------------
# Entity input
# ---------------------------------------------------------------------------


def split_field_list(fields: str) -> list[str]:
    """Split a comma-separated field list, ignoring commas inside parentheses.

    ``"a:int,b:uuid@relation(User,many-to-one)"`` gives two declarations.
    """
    items: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in fields:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch == "," and depth == 0:
            items.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    items.append("".join(current).strip())
    return [item for item in items if item]


def entity_from_field_list(name: str, fields: str) -> Entity:
    """Build DSL text from an entity name and a field list and parse it."""
    dsl = "\n".join([name.strip(), *split_field_list(fields)])
    return parse_entity_dsl(dsl)


def _require_entities(entities: list[Entity]) -> list[Entity]:
    if not entities:
        raise DslError(DslErrorKind.EMPTY_INPUT, "Empty DSL input")
    return entities


async def _load_spec(path: str) -> list[Entity]:
    return _require_entities(await load_spec_file(path))


async def _load_entities(args: argparse.Namespace) -> list[Entity]:
    if args.spec:
        return await _load_spec(args.spec)

    if args.entity:
        fields = args.fields
        if fields is None:
            fields = Prompt.ask(
                f"Enter fields for {args.entity} (comma-separated, format: name:type[?][@modifiers])",
                default=DEFAULT_FIELDS,
                console=console,
            )
        return [entity_from_field_list(args.entity, fields)]

    if sys.stdin.isatty():
        console.print("[dim]Enter entity DSL, finish with Ctrl-D:[/dim]")
    text = await asyncio.to_thread(sys.stdin.read)
    return _require_entities(parse_entities_dsl(text))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _report(results: list[GenerationResult], config: GeneratorConfig) -> None:
    for result in results:
        kebab = kebab_case(result.entity)
        print_success(f"CRUD operations generated for {result.entity}!")
        summary = {
            "Prisma model": "appended" if result.model_appended else "already present",
            "Module": str(config.modules_dir / kebab),
            "Files written": str(len(result.written)),
            "Files kept": str(len(result.skipped)),
        }
        if not config.skip_tests:
            summary["Tests"] = str(config.tests_dir / kebab)
        print_summary_table(summary, title=result.entity)

    console.print("[blue]Next steps:[/blue]")
    console.print("  1. Review the generated files")
    console.print("  2. Run prisma generate and create a migration")
    console.print("  3. Run the tests")


async def _add_crud(args: argparse.Namespace) -> None:
    config = GeneratorConfig.from_env(
        project_root=Path(args.project_root) if args.project_root else None,
        skip_tests=True if args.skip_tests else None,
        overwrite=True if args.overwrite else None,
        verbose=True if args.verbose else None,
    )
    entities = await _load_entities(args)
    generator = CrudGenerator(config)
    if len(entities) == 1:
        results = [await generator.generate(entities[0])]
    else:
        results = await generator.generate_all(entities)
    _report(results, config)


def _entity_table(entity: Entity) -> Table:
    table = Table(title=entity.name, show_header=True, header_style="bold cyan")
    for column in ("Field", "Type", "Optional", "Unique", "Id", "Default", "Relation"):
        table.add_column(column)
    for field in entity.fields:
        relation = (
            f"{field.relation_target} ({field.relation_type.value})"
            if field.has_relation
            else ""
        )
        table.add_row(
            field.name,
            field.type.value,
            "yes" if field.optional else "",
            "yes" if field.unique else "",
            "yes" if field.is_id else "",
            field.default_value or "",
            relation,
        )
    return table


async def _parse(args: argparse.Namespace) -> None:
    entities = await _load_spec(args.path)
    if args.json:
        payload = [e.model_dump(mode="json", by_alias=True) for e in entities]
        console.print_json(json.dumps(payload))
        return
    for entity in entities:
        console.print(_entity_table(entity))
        if args.model:
            console.print(Syntax(generate_model(entity), "prisma", theme="ansi_dark"))


async def _validate(args: argparse.Namespace) -> None:
    entities = await _load_spec(args.path)
    errors: list[str] = []
    for entity in entities:
        errors.extend(f"{entity.name}: {e}" for e in validate_entity(entity))
    if len(entities) > 1:
        errors.extend(check_references(entities))
    if errors:
        raise EntityValidationError(errors)
    print_success(f"{len(entities)} entities valid")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="backend-generator",
        description="Backend generator -- CRUD code from an entity DSL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  backend-generator add-crud --spec entities.dsl\n"
            "  backend-generator add-crud --entity User\n"
            "  backend-generator parse entities.dsl --model\n"
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add-crud", help="Generate CRUD operations for entities")
    source = add.add_mutually_exclusive_group()
    source.add_argument("--spec", "-s", help="Path to an entity DSL or JSON specification file")
    source.add_argument("--entity", "-e", help="Entity name; fields are prompted for")
    add.add_argument(
        "--fields",
        default=None,
        help="Comma-separated field declarations for --entity",
    )
    add.add_argument("--skip-tests", action="store_true", help="Skip test generation")
    add.add_argument("--overwrite", action="store_true", help="Replace existing files")
    add.add_argument("--project-root", "-C", default=None, help="Project directory (default: .)")
    add.add_argument("--verbose", "-v", action="store_true", help="List every file written")
    add.set_defaults(handler=_add_crud)

    parse = sub.add_parser("parse", help="Parse a specification file and print the entities")
    parse.add_argument("path", help="Entity DSL or JSON specification file")
    parse.add_argument("--json", action="store_true", help="Print entities as JSON")
    parse.add_argument("--model", action="store_true", help="Also print the Prisma model")
    parse.set_defaults(handler=_parse)

    validate = sub.add_parser("validate", help="Validate a specification file")
    validate.add_argument("path", help="Entity DSL or JSON specification file")
    validate.set_defaults(handler=_validate)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``backend-generator``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "add-crud" and args.fields is not None and not args.entity:
        parser.error("--fields requires --entity")

    try:
        asyncio.run(args.handler(args))
    except (DslError, EntityValidationError, OSError, ValueError) as exc:
        print_error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
