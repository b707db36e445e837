"""FastAPI dependencies."""

from fastapi import Depends, Request

from flash_messenger.config import FlashSettings, get_settings
from flash_messenger.messenger import FlashMessenger

MESSENGER_STATE = "flash_messenger"


def get_messenger(
    request: Request, settings: FlashSettings = Depends(get_settings)
) -> FlashMessenger:
    """Get the flash messenger of the current request."""
    messenger = getattr(request.state, MESSENGER_STATE, None)
    if messenger is None:
        messenger = FlashMessenger.from_request(request, settings.as_config())
        setattr(request.state, MESSENGER_STATE, messenger)
    return messenger
