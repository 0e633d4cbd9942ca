"""Shared pytest fixtures for the backend generator test suite.

Provides reusable fixtures for:
- Sample entity DSL documents (single entity and batches)
- Pre-parsed entities
- Temporary NestJS/Prisma project directories
- Generator configuration pointing at the temporary project
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from backend_generator.config import GeneratorConfig
from backend_generator.dsl import Entity, parse_entity_dsl


# ---------------------------------------------------------------------------
# DSL documents
# ---------------------------------------------------------------------------

USER_DSL = textwrap.dedent("""\
    User
    id:uuid@id@default(cuid())
    email:string@unique
    name:string?
    createdAt:datetime@default(now())
    updatedAt:datetime@default(now())
""")

POST_DSL = textwrap.dedent("""\
    Post
    id:uuid@id@default(cuid())
    title:string
    content:text?
    authorId:uuid@relation(User,many-to-one)
    publishedAt:datetime?
""")

SCHEMA_HEADER = textwrap.dedent("""\
    generator client {
      provider = "prisma-client-js"
    }

    datasource db {
      provider = "postgresql"
      url      = env("DATABASE_URL")
    }
""")


@pytest.fixture
def user_dsl() -> str:
    """DSL for a User entity with id, unique email and optional name."""
    return USER_DSL


@pytest.fixture
def post_dsl() -> str:
    """DSL for a Post entity with a many-to-one relation to User."""
    return POST_DSL


@pytest.fixture
def batch_dsl() -> str:
    """User and Post separated by a blank line."""
    return USER_DSL + "\n" + POST_DSL


@pytest.fixture
def user_entity() -> Entity:
    return parse_entity_dsl(USER_DSL)


@pytest.fixture
def post_entity() -> Entity:
    return parse_entity_dsl(POST_DSL)


# ---------------------------------------------------------------------------
# Project directories
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary project with an existing ``prisma/schema.prisma``."""
    project_dir = tmp_path / "test-project"
    schema = project_dir / "prisma" / "schema.prisma"
    schema.parent.mkdir(parents=True)
    schema.write_text(SCHEMA_HEADER, encoding="utf-8")
    yield project_dir


@pytest.fixture
def generator_config(tmp_project_dir: Path) -> GeneratorConfig:
    """Configuration rooted at the temporary project."""
    return GeneratorConfig(project_root=tmp_project_dir)
