"""Domain models for artifact generation configuration and render context."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    extra="forbid",
)


class ArtifactCoordinate(BaseModel):
    """Identity of a remote Maven payload."""

    model_config = _MODEL_CONFIG

    group_id: str = Field(..., min_length=1, description="Maven group id")
    artifact_id: str = Field(..., min_length=1, description="Maven artifact id")
    version: str = Field(..., min_length=1, description="Maven version")

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def __str__(self) -> str:
        return self.key


class ArtifactConfig(ArtifactCoordinate):
    """A configured artifact with optional package overrides."""

    package_id: str | None = Field(default=None, description="Package id override")
    package_version: str | None = Field(
        default=None, description="Package version override"
    )
    display_name: str | None = Field(default=None, description="Display name override")
    packaging: str = Field(
        default="jar", min_length=1, description="Payload file extension (jar, aar)"
    )
    metadata: dict[str, str] = Field(
        default_factory=dict, description="Free-form values passed to templates"
    )

    @property
    def coordinate(self) -> ArtifactCoordinate:
        return ArtifactCoordinate(
            group_id=self.group_id, artifact_id=self.artifact_id, version=self.version
        )


class TemplateConfig(BaseModel):
    """A template source paired with an output path pattern."""

    model_config = _MODEL_CONFIG

    template_file: Path | None = Field(default=None, description="Template file path")
    template_text: str | None = Field(default=None, description="Inline template text")
    output_pattern: str = Field(
        ..., min_length=1, description="Output path, e.g. generated/{artifactid}.csproj"
    )

    @model_validator(mode="after")
    def _exactly_one_source(self) -> TemplateConfig:
        if (self.template_file is None) == (self.template_text is None):
            raise ValueError("Exactly one of templateFile or templateText is required")
        return self

    @property
    def name(self) -> str:
        """Short label used in logs and failure reports."""
        if self.template_file is not None:
            return str(self.template_file)
        return f"<inline:{self.output_pattern}>"


class GenerationConfig(BaseModel):
    """Root configuration for one generation run."""

    model_config = _MODEL_CONFIG

    base_path: Path = Field(..., description="Base output directory")
    externals_dir: Path | None = Field(
        default=None, description="Cache directory for downloaded payloads"
    )
    download_externals: bool = Field(default=False, description="Fetch payloads")
    templates: list[TemplateConfig] = Field(default_factory=list)
    artifacts: list[ArtifactConfig] = Field(default_factory=list)
    fail_fast: bool = Field(default=False, description="Stop at the first failure")
    max_workers: int = Field(default=1, ge=1, description="Parallel artifact pipelines")

    @field_validator("base_path", mode="before")
    @classmethod
    def _base_path_not_empty(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            raise ValueError("basePath must not be empty")
        return value

    @property
    def externals_root(self) -> Path | None:
        """Externals directory with relative paths anchored at the base path."""
        if self.externals_dir is None:
            return None
        if self.externals_dir.is_absolute():
            return self.externals_dir
        return self.base_path / self.externals_dir


class RenderModel(BaseModel):
    """Read-only per-artifact view handed to templates as ``Model``.

    Fields resolve by Python name (``Model.package_id``) or by the camelCase
    name used in configuration files (``Model.packageId``).
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    package_id: str
    package_version: str
    display_name: str
    group_id: str
    artifact_id: str
    version: str
    packaging: str = "jar"
    metadata: dict[str, str] = Field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        for name, field in type(self).model_fields.items():
            if key in (name, field.alias):
                return getattr(self, name)
        raise KeyError(key)
