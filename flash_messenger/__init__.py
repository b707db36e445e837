"""Flash messages for FastAPI and Starlette applications."""

from flash_messenger.config import FlashSettings, get_settings
from flash_messenger.dependencies import get_messenger
from flash_messenger.exceptions import FlashError, InvalidMessage, MissingArgument
from flash_messenger.messenger import FlashMessenger
from flash_messenger.middleware import FlashdataMiddleware
from flash_messenger.models import FlashConfig, StorageBackend, Style

__all__ = [
    "FlashConfig",
    "FlashError",
    "FlashMessenger",
    "FlashSettings",
    "FlashdataMiddleware",
    "InvalidMessage",
    "MissingArgument",
    "StorageBackend",
    "Style",
    "get_messenger",
    "get_settings",
]
