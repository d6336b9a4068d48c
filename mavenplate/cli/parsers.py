"""CLI argument parsers and validators."""

from __future__ import annotations

from pathlib import Path

import typer

from ..core.models import ArtifactConfig, TemplateConfig


def parse_template(value: str) -> TemplateConfig:
    """Parse a template argument in format TEMPLATE=OUTPUT_PATTERN."""
    if "=" not in value:
        raise typer.BadParameter(f"Must be TEMPLATE=OUTPUT_PATTERN, got: {value!r}")
    tpl, pattern = value.split("=", 1)
    if not tpl or not pattern:
        raise typer.BadParameter(f"Must be TEMPLATE=OUTPUT_PATTERN, got: {value!r}")
    return TemplateConfig(template_file=Path(tpl).resolve(), output_pattern=pattern)


def parse_artifact(value: str) -> ArtifactConfig:
    """Parse an artifact argument in format GROUP:ARTIFACT:VERSION[@PACKAGING]."""
    coordinate, _, packaging = value.partition("@")
    parts = coordinate.split(":")
    if len(parts) != 3 or not all(parts):
        raise typer.BadParameter(f"Must be GROUP:ARTIFACT:VERSION, got: {value!r}")
    group_id, artifact_id, version = parts
    return ArtifactConfig(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        packaging=packaging or "jar",
    )
