"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from mavenplate.core.models import ArtifactConfig

PROJECT_TEMPLATE = """
<Project Sdk="Microsoft.NET.Sdk">
	<PropertyGroup>
		<TargetFrameworks>monoandroid9.0</TargetFrameworks>
		<AssemblyName>{{ Model.packageId }}</AssemblyName>
	</PropertyGroup>
	<PropertyGroup>
		<PackageId>{{ Model.packageId }}</PackageId>
		<Title>Xamarin Android Support Library - {{ Model.displayName }}</Title>
		<PackageVersion>{{ Model.packageVersion }}</PackageVersion>
	</PropertyGroup>
</Project>"""


def expected_project(package_version: str) -> str:
    return f"""
<Project Sdk="Microsoft.NET.Sdk">
	<PropertyGroup>
		<TargetFrameworks>monoandroid9.0</TargetFrameworks>
		<AssemblyName>Xamarin.AndroidX.Annotation</AssemblyName>
	</PropertyGroup>
	<PropertyGroup>
		<PackageId>Xamarin.AndroidX.Annotation</PackageId>
		<Title>Xamarin Android Support Library - annotation</Title>
		<PackageVersion>{package_version}</PackageVersion>
	</PropertyGroup>
</Project>"""


class FakeFetch:
    """Fetch capability that records calls and serves canned payloads."""

    def __init__(self, failures: dict[str, Exception] | None = None) -> None:
        self.calls: list[tuple[str, str, str, str]] = []
        self.failures = failures or {}

    def __call__(
        self, group_id: str, artifact_id: str, version: str, *, extension: str = "jar"
    ) -> bytes:
        self.calls.append((group_id, artifact_id, version, extension))
        error = self.failures.get(artifact_id)
        if error is not None:
            raise error
        return f"payload:{group_id}:{artifact_id}:{version}".encode()


@pytest.fixture
def root_dir(tmp_path: Path) -> Path:
    """Return a temporary root directory for generated output."""
    root = tmp_path / "root"
    root.mkdir()
    return root


@pytest.fixture
def create_template(root_dir: Path) -> Callable[..., Path]:
    """Return a factory writing template files under the root directory."""

    def _create(
        contents: str = '<Project Sdk="Microsoft.NET.Sdk"></Project>',
        filename: str = "Template.csproj.j2",
    ) -> Path:
        template = root_dir / filename
        template.write_text(contents, encoding="utf-8")
        return template

    return _create


@pytest.fixture
def annotation_artifact() -> ArtifactConfig:
    return ArtifactConfig(
        group_id="androidx.annotation",
        artifact_id="annotation",
        version="1.0.2",
        package_id="Xamarin.AndroidX.Annotation",
    )


@pytest.fixture
def fake_fetch() -> FakeFetch:
    return FakeFetch()
