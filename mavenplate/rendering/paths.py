"""Output path pattern expansion."""

from __future__ import annotations

import os
import re
from pathlib import Path

from ..core.models import ArtifactCoordinate

_TOKEN_PATTERN = re.compile(r"\{([^{}]+)\}")


def coordinate_tokens(artifact: ArtifactCoordinate) -> dict[str, str]:
    """Token values for an artifact, keyed by lowercase token name."""
    return {
        "groupid": artifact.group_id,
        "artifactid": artifact.artifact_id,
        "version": artifact.version,
    }


def expand_tokens(pattern: str, artifact: ArtifactCoordinate) -> str:
    """Substitute ``{token}`` placeholders, matching names case-insensitively.

    Unknown tokens are left as written.
    """
    values = coordinate_tokens(artifact)

    def _replace(match: re.Match[str]) -> str:
        return values.get(match.group(1).strip().lower(), match.group(0))

    return _TOKEN_PATTERN.sub(_replace, pattern)


def resolve_output_path(
    pattern: str, artifact: ArtifactCoordinate, base_path: Path
) -> Path:
    """Expand an output pattern and anchor it at the base path.

    Args:
        pattern: Output pattern, e.g. ``generated/{artifactid}.csproj``
        artifact: Artifact whose identity fills the tokens
        base_path: Directory relative patterns are joined onto

    Returns:
        Normalized output file path
    """
    relative = expand_tokens(pattern, artifact)
    return Path(os.path.normpath(base_path / relative))
