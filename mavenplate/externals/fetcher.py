"""Conditional download of artifact payloads into the externals cache."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.errors import FetchFailedError, OutputWriteError
from ..core.models import ArtifactConfig, GenerationConfig
from ..rendering.io import atomic_write_bytes, ensure_dir
from .repository import Fetch

logger = logging.getLogger(__name__)


def externals_path(externals_dir: Path, artifact: ArtifactConfig) -> Path:
    """Cache location: ``<externals_dir>/<group_id>/<artifact_id>.<packaging>``."""
    return externals_dir / artifact.group_id / f"{artifact.artifact_id}.{artifact.packaging}"


def maybe_fetch(
    config: GenerationConfig, artifact: ArtifactConfig, fetch: Fetch | None
) -> Path | None:
    """Download the artifact payload when the config asks for externals.

    Does nothing at all, not even creating the externals directory, when
    downloading is disabled.

    Args:
        config: Generation config
        artifact: Artifact to fetch
        fetch: Repository fetch capability

    Returns:
        Cached payload path, or None when downloading is disabled
    """
    if not config.download_externals:
        logger.debug(f"Skipping download of {artifact.key}")
        return None

    externals_dir = config.externals_root
    if externals_dir is None or fetch is None:
        raise FetchFailedError(artifact, "downloading is enabled but not configured")

    target = externals_path(externals_dir, artifact)
    try:
        payload = fetch(
            artifact.group_id,
            artifact.artifact_id,
            artifact.version,
            extension=artifact.packaging,
        )
    except Exception as e:
        raise FetchFailedError(artifact, f"{type(e).__name__}: {e}") from e

    try:
        ensure_dir(externals_dir)
        atomic_write_bytes(target, payload)
    except OSError as e:
        raise OutputWriteError(target, artifact, str(e)) from e

    logger.info(f"Fetched {artifact.key} → {target}")
    return target
