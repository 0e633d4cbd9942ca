"""Backend generator configuration.

Centralised, typed configuration for CRUD generation.  Settings use a
Pydantic v2 model so they are validated at construction time and can be
serialised to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip().lower() in _TRUTHY


class GeneratorConfig(BaseModel):
    """Where and how CRUD files are generated.

    All relative paths are resolved against ``project_root``.  Instances are
    typically created once by the CLI and passed to ``CrudGenerator``.
    """

    project_root: Path = Field(default=Path("."))
    schema_path: Path = Field(
        default=Path("prisma/schema.prisma"), description="Prisma schema file"
    )
    modules_dir: Path = Field(
        default=Path("src/modules"), description="Root of the per-entity source modules"
    )
    tests_dir: Path = Field(default=Path("test"), description="Root of generated tests")
    skip_tests: bool = Field(default=False, description="Do not generate test scaffolding")
    check_references: bool = Field(
        default=True, description="Check relationship targets across a batch"
    )
    overwrite: bool = Field(default=False, description="Replace existing generated files")
    verbose: bool = Field(default=False, description="Print every written file")

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def schema_file(self) -> Path:
        """Absolute-or-root-relative path of the Prisma schema."""
        return self.project_root / self.schema_path

    @property
    def modules_path(self) -> Path:
        """Directory that holds one sub-directory per entity module."""
        return self.project_root / self.modules_dir

    @property
    def tests_path(self) -> Path:
        """Directory that holds one test sub-directory per entity."""
        return self.project_root / self.tests_dir

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "GeneratorConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, **overrides: Any) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            BG_PROJECT_ROOT, BG_SCHEMA_PATH, BG_MODULES_DIR, BG_TESTS_DIR,
            BG_SKIP_TESTS, BG_CHECK_REFERENCES, BG_OVERWRITE, BG_VERBOSE.

        Keyword *overrides* win over the environment; ``None`` values are
        ignored so CLI flags that were not given fall through.
        """
        kwargs: dict[str, Any] = {}
        for key, var in (
            ("project_root", "BG_PROJECT_ROOT"),
            ("schema_path", "BG_SCHEMA_PATH"),
            ("modules_dir", "BG_MODULES_DIR"),
            ("tests_dir", "BG_TESTS_DIR"),
        ):
            if os.environ.get(var):
                kwargs[key] = Path(os.environ[var])

        for key, var in (
            ("skip_tests", "BG_SKIP_TESTS"),
            ("check_references", "BG_CHECK_REFERENCES"),
            ("overwrite", "BG_OVERWRITE"),
            ("verbose", "BG_VERBOSE"),
        ):
            flag = _env_flag(var)
            if flag is not None:
                kwargs[key] = flag

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)
