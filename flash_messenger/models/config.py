"""Data models for flash messenger configuration."""

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict


class StorageBackend(str, Enum):
    """Where deferred messages are kept between requests."""

    SESSION = "session"
    COOKIE = "cookie"


class Style(NamedTuple):
    """HTML wrapped around a message or a group of messages."""

    prefix: str
    suffix: str


class FlashConfig(BaseModel):
    """Pydantic model for the messenger configuration."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    session_name: str = "flash"
    default_style: Style = Style("<div>", "</div>")
    styles: dict[str, Style] = {}
    split_default: bool = False
    merge_form_errors: bool = True
    storage_backend: StorageBackend = StorageBackend.SESSION

    def style_for(self, message_type: str) -> Style:
        """Return the style configured for a type, or the default style."""
        return self.styles.get(message_type, self.default_style)
