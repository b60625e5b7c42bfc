from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bitrise_publisher.errors import NotFoundError

DEFAULT_API_BASE_URL = "https://api.bitrise.io/v0.1"
DEFAULT_PATTERN = "**/*.{html,js,wasm,png,json,jpeg,jpg,tiff,bmp,gif}"


def _normalise_base_url(url: str) -> str:
    """Strip trailing slashes so request paths can be joined with "/"."""
    return url.rstrip("/") or DEFAULT_API_BASE_URL


@dataclass(frozen=True)
class WorkingDirs:
    """Layout of the local working directory.

    Publish packs everything under ``base``. A fetched artifact is
    restored into ``expected_dir``.
    """

    base: Path
    expected_dir: Path


class Settings(BaseSettings):
    """Publisher settings loaded from environment variables.

    Bitrise injects BITRISE_APP_SLUG, BITRISE_DEPLOY_DIR and
    BITRISE_BUILD_URL into every build step; those fields (and the API
    credentials) are read under their plain names. Every other field is read
    with the REG_BITRISE_ prefix, e.g. REG_BITRISE_WORKING_DIR.

    The object is frozen: build it once with ``get_settings()`` and pass it
    to the orchestrator.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REG_BITRISE_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # Bitrise API
    bitrise_api_key: str = Field("", validation_alias="bitrise_api_key")
    bitrise_api_base_url: str = Field(DEFAULT_API_BASE_URL, validation_alias="bitrise_api_base_url")

    @field_validator("bitrise_api_base_url", mode="before")
    @classmethod
    def normalise_base_url(cls, v: str) -> str:
        return _normalise_base_url(v)

    # Injected by the Bitrise build environment.
    bitrise_app_slug: str = Field("", validation_alias="bitrise_app_slug")
    bitrise_deploy_dir: str = Field("", validation_alias="bitrise_deploy_dir")
    bitrise_build_url: str = Field("", validation_alias="bitrise_build_url")

    # Artifact lookup. success_filter decides whether success_only is sent
    # to Bitrise as a query parameter ("request") or checked on each
    # listed build ("client").
    artifact_name: str = "artifact"
    success_only: bool = True
    success_filter: Literal["request", "client"] = "request"

    # Local layout
    pattern: str = DEFAULT_PATTERN
    working_dir: str = ".reg"
    expected_dir_name: str = "expected"
    path_prefix_to_strip: Optional[str] = None

    # Skip all network traffic; publish still writes the archive locally.
    no_emit: bool = False

    request_timeout: float = 30.0

    debug: bool = False

    def resolve_app_slug(self) -> str:
        if not self.bitrise_app_slug:
            raise NotFoundError("The appSlug is missing")
        return self.bitrise_app_slug

    def working_dirs(self) -> WorkingDirs:
        base = Path(self.working_dir)
        return WorkingDirs(
            base=base,
            expected_dir=base / self.expected_dir_name,
        )

    def resolve_deploy_dir(self) -> Path:
        """Directory the archive is written to; Bitrise deploys its contents."""
        if self.bitrise_deploy_dir:
            return Path(self.bitrise_deploy_dir)
        return self.working_dirs().base

    def report_url(self) -> str:
        return f"{self.bitrise_build_url}/?tab=artifacts"

    @property
    def archive_filename(self) -> str:
        return f"{self.artifact_name}.zip"


def get_settings() -> Settings:
    return Settings()
