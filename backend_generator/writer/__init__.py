"""Source and test file writers for parsed entities.

Quick usage::

    from backend_generator.config import GeneratorConfig
    from backend_generator.writer import SourceWriter, TemplateRenderer, TestWriter

    config = GeneratorConfig(project_root="./my-api")
    renderer = TemplateRenderer()
    report = await SourceWriter(config, renderer).generate(entity)
"""

from backend_generator.writer.base import FileReport, build_entity_context
from backend_generator.writer.source_writer import SourceWriter
from backend_generator.writer.templates import TemplateRenderer
from backend_generator.writer.test_writer import TestWriter

__all__ = [
    "FileReport",
    "SourceWriter",
    "TemplateRenderer",
    "TestWriter",
    "build_entity_context",
]
