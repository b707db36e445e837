"""Models for the flash messenger."""

from .config import FlashConfig, StorageBackend, Style

__all__ = [
    "FlashConfig",
    "StorageBackend",
    "Style",
]
