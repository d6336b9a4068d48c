from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

GOOGLE_MAVEN_URL = "https://dl.google.com/dl/android/maven2"
MAVEN_CENTRAL_URL = "https://repo1.maven.org/maven2"


class RepositorySettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MAVENPLATE_", case_sensitive=False)

    repository: Literal["google", "central", "directory"] = "google"
    repository_url: str | None = None
    repository_dir: Path | None = None
    timeout: float = 60.0
    retries: int = 3

    @property
    def base_url(self) -> str:
        if self.repository_url:
            return self.repository_url
        if self.repository == "central":
            return MAVEN_CENTRAL_URL
        return GOOGLE_MAVEN_URL
