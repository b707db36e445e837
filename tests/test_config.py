import pytest
from pydantic import ValidationError

from flash_messenger.config import FlashSettings, get_settings, resolve_config
from flash_messenger.models import FlashConfig, StorageBackend, Style


def test_defaults() -> None:
    """Test the built-in configuration."""
    config = resolve_config()
    assert config.session_name == "flash"
    assert config.default_style == Style("<div>", "</div>")
    assert config.styles == {}
    assert config.split_default is False
    assert config.merge_form_errors is True
    assert config.storage_backend == StorageBackend.SESSION


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that FLASH_* variables configure the global settings."""
    monkeypatch.setenv("FLASH_SPLIT_DEFAULT", "true")
    monkeypatch.setenv("FLASH_STORAGE_BACKEND", "cookie")
    monkeypatch.setenv("FLASH_STYLES", '{"error": ["<p>", "</p>"]}')
    get_settings.cache_clear()

    config = resolve_config()
    assert config.split_default is True
    assert config.storage_backend == StorageBackend.COOKIE
    assert config.styles == {"error": Style("<p>", "</p>")}


def test_explicit_config_beats_settings() -> None:
    """Test the precedence of explicit overrides over global settings."""
    settings = FlashSettings(SESSION_NAME="global", SPLIT_DEFAULT=True)
    config = resolve_config({"session_name": "explicit"}, settings)
    assert config.session_name == "explicit"
    assert config.split_default is True


def test_flash_config_only_overrides_set_fields() -> None:
    """Test that unset FlashConfig fields do not mask the settings."""
    settings = FlashSettings(MERGE_FORM_ERRORS=False)
    config = resolve_config(FlashConfig(split_default=True), settings)
    assert config.split_default is True
    assert config.merge_form_errors is False


def test_unknown_keys_are_ignored() -> None:
    """Test that unrecognized configuration keys are dropped silently."""
    config = resolve_config({"colour": "red", "split_default": True})
    assert config.split_default is True
    assert not hasattr(config, "colour")


def test_invalid_values_are_rejected() -> None:
    """Test that recognized keys are validated."""
    with pytest.raises(ValidationError):
        resolve_config({"split_default": "sometimes"})
    with pytest.raises(ValidationError):
        resolve_config({"storage_backend": "database"})
    with pytest.raises(ValidationError):
        resolve_config({"default_style": ["<div>"]})


def test_style_for() -> None:
    """Test per-type style lookup with the default fallback."""
    config = FlashConfig(styles={"error": ["<p>", "</p>"]})
    assert config.style_for("error") == Style("<p>", "</p>")
    assert config.style_for("success") == Style("<div>", "</div>")
