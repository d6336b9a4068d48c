"""Per-artifact render model construction."""

from __future__ import annotations

from ..core.models import ArtifactConfig, RenderModel


def default_package_id(group_id: str, artifact_id: str) -> str:
    return f"{group_id}.{artifact_id}"


def build_model(artifact: ArtifactConfig) -> RenderModel:
    """Project an artifact config into the model exposed to templates.

    Non-empty overrides always win over derived defaults:
    ``package_id`` falls back to ``<group_id>.<artifact_id>``,
    ``package_version`` to the coordinate version and ``display_name`` to
    the artifact id.

    Args:
        artifact: Configured artifact

    Returns:
        Immutable render model
    """
    return RenderModel(
        package_id=artifact.package_id
        or default_package_id(artifact.group_id, artifact.artifact_id),
        package_version=artifact.package_version or artifact.version,
        display_name=artifact.display_name or artifact.artifact_id,
        group_id=artifact.group_id,
        artifact_id=artifact.artifact_id,
        version=artifact.version,
        packaging=artifact.packaging,
        metadata=dict(artifact.metadata),
    )
