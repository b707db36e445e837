"""Exceptions raised by the flash messenger."""


class FlashError(Exception):
    """Base class for flash messenger errors."""

    pass


class InvalidMessage(FlashError, TypeError):
    """Exception for a non-scalar message or a non-string message type."""

    pass


class MissingArgument(FlashError, TypeError):
    """Exception for a typed helper called without a message."""

    pass
