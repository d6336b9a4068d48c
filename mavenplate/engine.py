"""Generation engine: fetch externals and render templates for every artifact."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .core.errors import (
    ConfigInvalidError,
    FetchFailedError,
    GenerationFailedError,
    MavenplateError,
    OutputWriteError,
    RenderFailedError,
)
from .core.models import ArtifactConfig, ArtifactCoordinate, GenerationConfig
from .core.settings import RepositorySettings
from .externals.fetcher import maybe_fetch
from .externals.repository import Fetch, create_repository
from .rendering.engine import JinjaRenderer, Renderer, render_one
from .rendering.model import build_model

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Failure:
    """One failed stage of one artifact."""

    coordinate: ArtifactCoordinate
    stage: str
    reason: str
    template: str | None = None

    def __str__(self) -> str:
        where = f" [{self.template}]" if self.template else ""
        return f"{self.coordinate.key} {self.stage}{where}: {self.reason}"


@dataclass
class ArtifactResult:
    coordinate: ArtifactCoordinate
    payload: Path | None = None
    outputs: list[Path] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)
    cancelled: bool = False


@dataclass
class GenerationReport:
    """Outcome of a run, in configured artifact order."""

    results: list[ArtifactResult] = field(default_factory=list)

    @property
    def outputs(self) -> list[Path]:
        return [path for result in self.results for path in result.outputs]

    @property
    def payloads(self) -> list[Path]:
        return [result.payload for result in self.results if result.payload is not None]

    @property
    def failures(self) -> list[Failure]:
        return [failure for result in self.results for failure in result.failures]

    @property
    def cancelled(self) -> list[ArtifactCoordinate]:
        return [result.coordinate for result in self.results if result.cancelled]

    @property
    def ok(self) -> bool:
        return not self.failures


def validate_config(
    config: GenerationConfig, fetch: Fetch | None = None, *, require_fetch: bool = True
) -> None:
    """Reject configs that cannot produce a run, before touching the disk.

    Args:
        config: Generation config
        fetch: Fetch capability the run would use
        require_fetch: Whether a missing fetch capability is an error when
            downloading is enabled

    Raises:
        ConfigInvalidError: On the first problem found
    """
    if not config.templates:
        raise ConfigInvalidError("At least one template is required")
    if not config.artifacts:
        raise ConfigInvalidError("At least one artifact is required")

    seen: set[str] = set()
    for artifact in config.artifacts:
        if artifact.key in seen:
            raise ConfigInvalidError(f"Duplicate artifact: {artifact.key}")
        seen.add(artifact.key)

    if config.download_externals:
        if config.externals_dir is None:
            raise ConfigInvalidError("externalsDir is required when downloadExternals is true")
        if fetch is None and require_fetch:
            raise ConfigInvalidError("A fetch capability is required when downloadExternals is true")


class Engine:
    """Generation engine bound to its fetch and render capabilities."""

    def __init__(self, fetch: Fetch | None = None, renderer: Renderer | None = None) -> None:
        self.fetch = fetch
        self.renderer = renderer or JinjaRenderer()

    def generate(
        self, config: GenerationConfig, cancel: threading.Event | None = None
    ) -> GenerationReport:
        """Run generation for every configured artifact.

        Artifacts are processed in configured order (or concurrently when
        ``max_workers > 1``); each artifact's payload is fetched once, before
        any of its templates render. By default failures are collected and
        raised together once every artifact has been attempted; with
        ``fail_fast`` the first failure is raised immediately.

        Args:
            config: Generation config
            cancel: When set, no further artifact pipelines are started

        Returns:
            Report of written files and fetched payloads

        Raises:
            ConfigInvalidError: Before any I/O when the config is unusable
            GenerationFailedError: After the run when failures were collected
        """
        validate_config(config, self.fetch)
        cancel = cancel or threading.Event()

        logger.info(
            f"Generating {len(config.templates)} template(s) for "
            f"{len(config.artifacts)} artifact(s)"
        )

        if config.max_workers > 1:
            results = self._run_parallel(config, cancel)
        else:
            results = [
                self._run_artifact(config, artifact, cancel)
                for artifact in config.artifacts
            ]

        report = GenerationReport(results=results)
        if report.cancelled:
            logger.warning(f"Cancelled before processing {len(report.cancelled)} artifact(s)")
        if report.failures:
            raise GenerationFailedError(report)

        logger.info(f"Successfully generated {len(report.outputs)} file(s)")
        return report

    def _run_parallel(
        self, config: GenerationConfig, cancel: threading.Event
    ) -> list[ArtifactResult]:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            futures = [
                pool.submit(self._run_artifact, config, artifact, cancel)
                for artifact in config.artifacts
            ]
            try:
                return [future.result() for future in futures]
            except MavenplateError:
                for future in futures:
                    future.cancel()
                raise

    def _run_artifact(
        self,
        config: GenerationConfig,
        artifact: ArtifactConfig,
        cancel: threading.Event,
    ) -> ArtifactResult:
        result = ArtifactResult(coordinate=artifact.coordinate)
        if cancel.is_set():
            result.cancelled = True
            return result

        try:
            result.payload = maybe_fetch(config, artifact, self.fetch)
        except (FetchFailedError, OutputWriteError) as e:
            self._record(config, result, "fetch", e)
            return result

        model = build_model(artifact)
        for template in config.templates:
            try:
                output = render_one(
                    template, model, artifact, config.base_path, self.renderer
                )
            except RenderFailedError as e:
                self._record(config, result, "render", e, template.name)
            except OutputWriteError as e:
                self._record(config, result, "write", e, template.name)
            else:
                result.outputs.append(output)

        return result

    @staticmethod
    def _record(
        config: GenerationConfig,
        result: ArtifactResult,
        stage: str,
        error: MavenplateError,
        template: str | None = None,
    ) -> None:
        logger.error(str(error))
        if config.fail_fast:
            raise error
        reason = getattr(error, "reason", str(error))
        result.failures.append(Failure(result.coordinate, stage, reason, template))


def generate(
    config: GenerationConfig,
    *,
    fetch: Fetch | None = None,
    renderer: Renderer | None = None,
    cancel: threading.Event | None = None,
) -> GenerationReport:
    """Generate files for a config.

    When downloading is enabled and no fetch capability is given, the
    repository is chosen from ``MAVENPLATE_*`` environment settings.
    """
    if fetch is None and config.download_externals:
        fetch = create_repository(RepositorySettings()).fetch
    return Engine(fetch=fetch, renderer=renderer).generate(config, cancel=cancel)
