"""Error types raised during generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine import GenerationReport
    from .models import ArtifactCoordinate


class MavenplateError(Exception):
    """Base class for all generation errors."""


class ConfigInvalidError(MavenplateError, ValueError):
    """Raised before any I/O when the configuration cannot be used."""


class FetchFailedError(MavenplateError):
    """Raised when an artifact payload cannot be retrieved."""

    def __init__(self, coordinate: ArtifactCoordinate, reason: str) -> None:
        super().__init__(f"Failed to fetch {coordinate.key}: {reason}")
        self.coordinate = coordinate
        self.reason = reason


class ArtifactNotFoundError(LookupError):
    """Raised by repositories when a payload does not exist."""


class RenderFailedError(MavenplateError):
    """Raised when a template cannot be rendered for an artifact."""

    def __init__(self, template: str, coordinate: ArtifactCoordinate, reason: str) -> None:
        super().__init__(f"Failed to render {template} for {coordinate.key}: {reason}")
        self.template = template
        self.coordinate = coordinate
        self.reason = reason


class OutputWriteError(MavenplateError):
    """Raised when a rendered file or payload cannot be written to disk."""

    def __init__(self, path: object, coordinate: ArtifactCoordinate, reason: str) -> None:
        super().__init__(f"Failed to write {path} for {coordinate.key}: {reason}")
        self.path = path
        self.coordinate = coordinate
        self.reason = reason


class GenerationFailedError(MavenplateError):
    """Raised after a collect-and-continue run that recorded failures."""

    def __init__(self, report: GenerationReport) -> None:
        lines = [f"{len(report.failures)} failure(s) during generation:"]
        lines.extend(f"  - {failure}" for failure in report.failures)
        super().__init__("\n".join(lines))
        self.report = report
