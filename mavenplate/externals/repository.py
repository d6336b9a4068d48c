"""Maven repository clients that satisfy the fetch capability."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..core.errors import ArtifactNotFoundError
from ..core.settings import RepositorySettings

logger = logging.getLogger(__name__)


class Fetch(Protocol):
    def __call__(
        self, group_id: str, artifact_id: str, version: str, *, extension: str = "jar"
    ) -> bytes: ...


class TransientRepositoryError(Exception):
    """Raised for repository failures worth retrying (timeouts, 5xx)."""


def artifact_path(group_id: str, artifact_id: str, version: str, extension: str) -> str:
    """Standard Maven layout path, e.g. ``androidx/annotation/annotation/1.0.2/annotation-1.0.2.jar``."""
    group_path = group_id.replace(".", "/")
    return f"{group_path}/{artifact_id}/{version}/{artifact_id}-{version}.{extension}"


class MavenRepository:
    """HTTP client for a remote Maven repository."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 60.0,
        retries: int = 3,
        backoff: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retries = max(1, retries)
        self.backoff = backoff
        self.session = session or requests.Session()

    def url_for(
        self, group_id: str, artifact_id: str, version: str, extension: str = "jar"
    ) -> str:
        return f"{self.base_url}/{artifact_path(group_id, artifact_id, version, extension)}"

    def _download(self, url: str) -> bytes:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise TransientRepositoryError(f"{url}: {e}") from e

        if response.status_code == 404:
            raise ArtifactNotFoundError(f"Not found in repository: {url}")
        if response.status_code >= 500:
            raise TransientRepositoryError(f"{url}: HTTP {response.status_code}")
        response.raise_for_status()
        return response.content

    def fetch(
        self, group_id: str, artifact_id: str, version: str, *, extension: str = "jar"
    ) -> bytes:
        """Download one artifact payload, retrying transient failures.

        Args:
            group_id: Maven group id
            artifact_id: Maven artifact id
            version: Maven version
            extension: Payload extension (jar, aar, pom)

        Returns:
            Payload bytes
        """
        url = self.url_for(group_id, artifact_id, version, extension)
        logger.debug(f"Downloading {url}")

        retrying = Retrying(
            reraise=True,
            retry=retry_if_exception_type(TransientRepositoryError),
            stop=stop_after_attempt(self.retries),
            wait=wait_exponential(multiplier=self.backoff, min=0, max=30),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )
        return retrying(self._download, url)

    __call__ = fetch


class DirectoryRepository:
    """Local directory laid out like a Maven repository."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def fetch(
        self, group_id: str, artifact_id: str, version: str, *, extension: str = "jar"
    ) -> bytes:
        path = self.root / artifact_path(group_id, artifact_id, version, extension)
        if not path.exists():
            raise ArtifactNotFoundError(f"Not found in repository: {path}")
        return path.read_bytes()

    __call__ = fetch


def create_repository(settings: RepositorySettings) -> MavenRepository | DirectoryRepository:
    """Build the repository client selected by settings."""
    if settings.repository == "directory":
        if settings.repository_dir is None:
            raise ValueError("repository_dir is required for a directory repository")
        logger.debug(f"Using directory repository at {settings.repository_dir}")
        return DirectoryRepository(settings.repository_dir)

    logger.debug(f"Using Maven repository at {settings.base_url}")
    return MavenRepository(
        settings.base_url, timeout=settings.timeout, retries=settings.retries
    )
