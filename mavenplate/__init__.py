"""Mavenplate - template-driven project generation for Maven artifacts.

Renders Jinja2 templates once per configured artifact, optionally caching
each artifact's payload from a Maven repository first.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .cli import main
from .engine import Engine, GenerationReport, generate

__all__ = ["Engine", "GenerationReport", "generate", "main"]
