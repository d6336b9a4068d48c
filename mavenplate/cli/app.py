"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import typer
from typing_extensions import Annotated

from ..core.config import load_config
from ..core.errors import ConfigInvalidError, GenerationFailedError, MavenplateError
from ..core.models import GenerationConfig
from ..core.settings import RepositorySettings
from ..engine import Engine, validate_config
from ..externals.repository import Fetch, create_repository
from .parsers import parse_artifact, parse_template

logger = logging.getLogger(__name__)

EXIT_FAILURES = 1
EXIT_CONFIG_INVALID = 2

app = typer.Typer(
    name="mavenplate",
    help="Generate per-artifact project files from Jinja2 templates.",
)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="JSON or YAML generation config.",
        metavar="FILE",
    ),
]
TemplateOption = Annotated[
    list[str],
    typer.Option(
        "--template",
        help="Add a template (format: TEMPLATE=OUTPUT_PATTERN). Repeatable.",
        metavar="TEMPLATE=OUTPUT_PATTERN",
    ),
]
ArtifactOption = Annotated[
    list[str],
    typer.Option(
        "--artifact",
        help="Add an artifact (format: GROUP:ARTIFACT:VERSION[@PACKAGING]). Repeatable.",
        metavar="COORDINATE",
    ),
]
BasePathOption = Annotated[
    str,
    typer.Option(
        "--base-path",
        help="Base output directory (default: config directory, or cwd).",
        metavar="DIR",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def build_config(
    config_path: Path | None,
    templates: list[str],
    artifacts: list[str],
    overrides: dict[str, Any],
) -> GenerationConfig:
    """Merge the config file (if any) with command line additions."""
    if config_path is not None:
        config = load_config(config_path, overrides)
    else:
        data = {k: v for k, v in overrides.items() if v is not None}
        data.setdefault("basePath", Path.cwd())
        try:
            config = GenerationConfig.model_validate(data)
        except ValueError as e:
            raise ConfigInvalidError(str(e)) from e

    extra_templates = [parse_template(value) for value in templates]
    extra_artifacts = [parse_artifact(value) for value in artifacts]
    if extra_templates or extra_artifacts:
        config = config.model_copy(
            update={
                "templates": [*config.templates, *extra_templates],
                "artifacts": [*config.artifacts, *extra_artifacts],
            }
        )
    return config


@app.command()
def generate(
    config_path: ConfigOption = None,
    templates: TemplateOption = [],
    artifacts: ArtifactOption = [],
    base_path: BasePathOption = "",
    externals_dir: Annotated[
        str,
        typer.Option(
            "--externals-dir",
            help="Cache directory for downloaded payloads.",
            metavar="DIR",
        ),
    ] = "",
    download: Annotated[
        Optional[bool],
        typer.Option(
            "--download/--no-download",
            help="Download artifact payloads (default: from config).",
        ),
    ] = None,
    fail_fast: Annotated[
        bool,
        typer.Option(
            "--fail-fast",
            help="Stop at the first failure instead of collecting them.",
        ),
    ] = False,
    workers: Annotated[
        Optional[int],
        typer.Option(
            "--workers",
            "-j",
            min=1,
            help="Artifacts processed in parallel (default: from config, or 1).",
        ),
    ] = None,
    repository: Annotated[
        Optional[str],
        typer.Option(
            "--repository",
            help="Repository kind: google, central or directory (env: MAVENPLATE_REPOSITORY).",
        ),
    ] = None,
    repository_url: Annotated[
        Optional[str],
        typer.Option(
            "--repository-url",
            help="Maven repository URL or directory (overrides --repository default).",
            metavar="URL",
        ),
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Render every template for every configured artifact."""
    _configure_logging(verbose)
    logger.debug("Starting mavenplate")

    overrides: dict[str, Any] = {
        "basePath": Path(base_path).absolute() if base_path else None,
        "externalsDir": externals_dir or None,
        "downloadExternals": download,
        "failFast": fail_fast or None,
        "maxWorkers": workers,
    }

    try:
        config = build_config(config_path, templates, artifacts, overrides)
        fetch = None
        if config.download_externals:
            fetch = _create_fetch(repository, repository_url)
        report = Engine(fetch=fetch).generate(config)
    except ConfigInvalidError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=EXIT_CONFIG_INVALID) from e
    except GenerationFailedError as e:
        typer.echo(str(e), err=True)
        typer.echo(
            f"Generated {len(e.report.outputs)} file(s) with "
            f"{len(e.report.failures)} failure(s)"
        )
        raise typer.Exit(code=EXIT_FAILURES) from e
    except MavenplateError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=EXIT_FAILURES) from e

    typer.echo(
        f"Generated {len(report.outputs)} file(s), "
        f"fetched {len(report.payloads)} payload(s)"
    )


@app.command()
def validate(
    config_path: ConfigOption = None,
    templates: TemplateOption = [],
    artifacts: ArtifactOption = [],
    base_path: BasePathOption = "",
    verbose: VerboseOption = False,
) -> None:
    """Check a configuration without writing or downloading anything."""
    _configure_logging(verbose)

    try:
        config = build_config(
            config_path,
            templates,
            artifacts,
            {"basePath": Path(base_path).absolute() if base_path else None},
        )
        validate_config(config, require_fetch=False)
    except ConfigInvalidError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=EXIT_CONFIG_INVALID) from e

    typer.echo(
        f"Configuration OK: {len(config.artifacts)} artifact(s), "
        f"{len(config.templates)} template(s)"
    )


def _create_fetch(repository: str | None, repository_url: str | None) -> Fetch:
    """Build the fetch capability from CLI flags layered over env settings."""
    updates: dict[str, Any] = {}
    if repository:
        updates["repository"] = repository
    if repository_url and repository == "directory":
        updates["repository_dir"] = Path(repository_url)
    elif repository_url:
        updates["repository_url"] = repository_url

    try:
        settings = RepositorySettings(**updates)
        return create_repository(settings).fetch
    except ValueError as e:
        raise ConfigInvalidError(f"Invalid repository settings: {e}") from e


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
