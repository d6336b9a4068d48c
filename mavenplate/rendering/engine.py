"""Template rendering engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from ..core.errors import OutputWriteError, RenderFailedError
from ..core.models import ArtifactCoordinate, RenderModel, TemplateConfig
from .io import atomic_write_text
from .paths import resolve_output_path

logger = logging.getLogger(__name__)

MODEL_NAME = "Model"


class Renderer(Protocol):
    """Rendering backend: turns template text plus a model into output text."""

    def render(self, template_text: str, model: RenderModel) -> str: ...


class JinjaRenderer:
    """Jinja2 backend exposing the model as ``Model``.

    Undefined names fail loudly, so a typo such as ``Model.pakageId`` is
    reported instead of rendering an empty string.
    """

    def __init__(self, environment: Environment | None = None) -> None:
        self.environment = environment or Environment(
            undefined=StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._compiled: dict[str, Template] = {}

    def render(self, template_text: str, model: RenderModel) -> str:
        template = self._compiled.get(template_text)
        if template is None:
            template = self.environment.from_string(template_text)
            self._compiled[template_text] = template
        return template.render({MODEL_NAME: model})


def load_template_text(template: TemplateConfig, base_path: Path) -> str:
    """Return the template source, reading it from disk when file-based.

    Args:
        template: Template configuration
        base_path: Directory relative template files resolve against

    Returns:
        Template text
    """
    template_path = template.template_file
    if template_path is None:
        return template.template_text or ""

    if not template_path.is_absolute():
        template_path = base_path / template_path
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")

    return template_path.read_text(encoding="utf-8")


def render_one(
    template: TemplateConfig,
    model: RenderModel,
    coordinate: ArtifactCoordinate,
    base_path: Path,
    renderer: Renderer,
) -> Path:
    """Render one template for one artifact and write the result.

    Existing output is overwritten, so identical inputs give identical files.

    Args:
        template: Template to render
        model: Render model for the artifact
        coordinate: Artifact identity used for the output path
        base_path: Base output directory
        renderer: Rendering backend

    Returns:
        Output file path
    """
    logger.debug(f"Rendering template {template.name} for {coordinate.key}")

    try:
        text = load_template_text(template, base_path)
    except (OSError, UnicodeDecodeError) as e:
        raise RenderFailedError(template.name, coordinate, str(e)) from e

    try:
        rendered_text = renderer.render(text, model)
    except TemplateError as e:
        raise RenderFailedError(template.name, coordinate, f"{type(e).__name__}: {e}") from e
    except Exception as e:
        # Backends are pluggable; any error they raise belongs to this template.
        raise RenderFailedError(template.name, coordinate, repr(e)) from e

    output_path = resolve_output_path(template.output_pattern, coordinate, base_path)
    try:
        atomic_write_text(output_path, rendered_text)
    except (OSError, UnicodeEncodeError) as e:
        raise OutputWriteError(output_path, coordinate, str(e)) from e

    logger.info(f"Rendered {template.name} → {output_path}")
    return output_path
