"""Shared utility functions for the backend generator.

Provides identifier case conversion and pluralisation used by the schema
projection and the templates, small file-system helpers, and the Rich-based
console output used by the generator and the CLI.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------

_WORD_BOUNDARY = re.compile(r"[-_\s]+")


def _words(value: str) -> list[str]:
    """Split an identifier into lower-case words.

    Handles ``PascalCase``, ``camelCase``, ``snake_case``, ``kebab-case``
    and space separated input, keeping acronym runs together
    (``HTTPRequest`` -> ``["http", "request"]``).
    """
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1 \2", value.strip())
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", s1)
    return [w.lower() for w in _WORD_BOUNDARY.split(s2) if w]


def snake_case(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    return "_".join(_words(value))


def kebab_case(value: str) -> str:
    """Convert ``SomeThing`` or ``some_thing`` to ``some-thing``."""
    return "-".join(_words(value))


def pascal_case(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    return "".join(w[0].upper() + w[1:] for w in _words(value))


def camel_case(value: str) -> str:
    """Convert ``some-thing`` or ``SomeThing`` to ``someThing``."""
    pascal = pascal_case(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def pluralize(value: str) -> str:
    """Naive English plural.

    Examples::

        pluralize("Post")     -> "Posts"
        pluralize("Category") -> "Categories"
        pluralize("Box")      -> "Boxes"
    """
    if not value:
        return value
    lower = value.lower()
    if lower.endswith("y") and not lower.endswith(("ay", "ey", "iy", "oy", "uy")):
        return value[:-1] + "ies"
    if lower.endswith(("s", "sh", "ch", "x", "z")):
        return value + "es"
    return value + "s"


def singularize(value: str) -> str:
    """Inverse of :func:`pluralize` for the suffixes it produces."""
    lower = value.lower()
    if lower.endswith("ies") and len(value) > 3:
        return value[:-3] + "y"
    if lower.endswith(("ses", "shes", "ches", "xes", "zes")):
        return value[:-2]
    if lower.endswith("s") and not lower.endswith("ss"):
        return value[:-1]
    return value


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    ensure_dir(path.parent)
    path.write_text(content, encoding="utf-8")


async def write_text(path: str | Path, content: str) -> Path:
    """Write *content* to *path* in a worker thread, creating parent dirs."""
    out = Path(path)
    await asyncio.to_thread(_write_file, out, content)
    return out


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_info(message: str) -> None:
    """Print a dim informational message."""
    console.print(f"[dim]{escape(message)}[/dim]")

