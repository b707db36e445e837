"""Flash messenger configuration."""

from functools import lru_cache
from typing import Any, Mapping

from pydantic_settings import BaseSettings, SettingsConfigDict

from flash_messenger.models import FlashConfig, StorageBackend, Style


class FlashSettings(BaseSettings):
    """Application-wide flash settings, read from FLASH_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="FLASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    SESSION_NAME: str = "flash"
    DEFAULT_STYLE: Style = Style("<div>", "</div>")
    STYLES: dict[str, Style] = {}  # JSON, e.g. {"error": ["<p>", "</p>"]}
    SPLIT_DEFAULT: bool = False
    MERGE_FORM_ERRORS: bool = True
    STORAGE_BACKEND: StorageBackend = StorageBackend.SESSION

    def as_config(self) -> dict[str, Any]:
        """Return the settings keyed by FlashConfig field names."""
        return {key.lower(): value for key, value in self.model_dump().items()}


@lru_cache
def get_settings() -> FlashSettings:
    """Return the settings object."""
    return FlashSettings()


def resolve_config(
    overrides: FlashConfig | Mapping[str, Any] | None = None,
    settings: FlashSettings | None = None,
) -> FlashConfig:
    """Merge the global settings with explicit overrides.

    Built-in defaults are overridden by the global settings, which are in
    turn overridden by ``overrides``. Only the fields explicitly set on a
    ``FlashConfig`` override count; unknown mapping keys are ignored.
    """
    if settings is None:
        settings = get_settings()
    values = settings.as_config()
    if isinstance(overrides, FlashConfig):
        values.update(overrides.model_dump(exclude_unset=True))
    elif overrides:
        values.update(overrides)
    return FlashConfig.model_validate(values)
