"""Flash messenger: queue messages by type and render them as HTML."""

import logging
from typing import Any, Callable, Mapping

from starlette.requests import HTTPConnection

from flash_messenger.config import resolve_config
from flash_messenger.exceptions import InvalidMessage, MissingArgument
from flash_messenger.forms import FormErrors, get_form_errors
from flash_messenger.middleware import get_cookie_jar
from flash_messenger.models import FlashConfig, StorageBackend
from flash_messenger.storage import (
    CookieStorage,
    FlashStorage,
    MessageStore,
    SessionStorage,
)

logger = logging.getLogger(__name__)

SCALAR_TYPES = (str, int, float, bool)

_MISSING: Any = object()


def message_text(value: Any) -> str:
    """Return the text of a scalar, with booleans as ``"1"`` and ``""``."""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def format_message(message: Any, data: Any = "") -> str:
    """Apply printf-style positional substitution to a message.

    A list or tuple supplies several values, anything else a single one.
    Empty data leaves the message untouched, and values the template does
    not use are ignored.
    """
    text = message_text(message)
    if data is None or data == "" or (isinstance(data, (list, tuple)) and not data):
        return text
    values = tuple(data) if isinstance(data, (list, tuple)) else (data,)
    if not all(isinstance(value, SCALAR_TYPES) for value in values):
        raise InvalidMessage("Message data must be scalar values.")
    for count in range(len(values), -1, -1):
        try:
            return text % values[:count]
        except TypeError as e:
            if "not all arguments converted" not in str(e):
                raise InvalidMessage(f"Cannot format message {message!r}: {e}") from e
        except ValueError as e:
            raise InvalidMessage(f"Cannot format message {message!r}: {e}") from e
    return text


def merge_messages(persisted: MessageStore, immediate: MessageStore) -> MessageStore:
    """Merge two stores, persisted types and messages first."""
    merged = {key: list(value) for key, value in persisted.items()}
    for key, value in immediate.items():
        merged.setdefault(key, []).extend(value)
    return merged


def render_messages(messages: MessageStore, config: FlashConfig, split: bool) -> str:
    """Render a message store to HTML using the configured styles."""
    output = []
    for message_type, values in messages.items():
        prefix, suffix = config.style_for(message_type)
        if split:
            output.extend(f"{prefix}{value}{suffix}" for value in values)
        else:
            items = "".join(f"<li>{value}</li>" for value in values)
            output.append(f"{prefix}<ul>{items}</ul>{suffix}")
    return "".join(output)


def _typed(message_type: str, display_now: bool = False) -> Callable[..., Any]:
    name = f"{message_type}_now" if display_now else message_type

    def add(self: "FlashMessenger", message: Any = _MISSING, data: Any = "") -> Any:
        if message is _MISSING:
            raise MissingArgument(f"{name}() requires a message.")
        return self.add_message(message, data, message_type, display_now)

    add.__name__ = name
    if display_now:
        add.__doc__ = f"Show a '{message_type}' message on this request."
    else:
        add.__doc__ = f"Flash a '{message_type}' message for the next request."
    return add


class FlashMessenger:
    """Request-scoped flash message queue.

    Messages are either deferred, in which case they are persisted through
    ``storage`` and shown on the next request, or displayed now, in which
    case they only live on this instance.

    :param storage: Backend holding deferred messages.
    :param config: Explicit overrides on top of the global settings.
    :param form_errors: Callable returning the current validation errors.
    """

    def __init__(
        self,
        storage: FlashStorage,
        config: FlashConfig | Mapping[str, Any] | None = None,
        form_errors: FormErrors | None = None,
    ):
        """Initialize the messenger.

        ``storage`` is used as given; ``config.storage_backend`` only picks
        the backend in ``from_request``.
        """
        self.config = resolve_config(config)
        self.storage = storage
        self.form_errors = form_errors
        self.pending: MessageStore = storage.queued()
        self.immediate: MessageStore = {}
        if isinstance(storage, CookieStorage) != (
            self.config.storage_backend == StorageBackend.COOKIE
        ):
            logger.warning(
                f"Storage {type(storage).__name__} does not match the configured "
                f"'{self.config.storage_backend.value}' backend"
            )

    @classmethod
    def from_request(
        cls,
        request: HTTPConnection,
        config: FlashConfig | Mapping[str, Any] | None = None,
    ) -> "FlashMessenger":
        """Build a messenger bound to the session or cookies of a request."""
        resolved = resolve_config(config)
        storage: FlashStorage
        if resolved.storage_backend == StorageBackend.COOKIE:
            storage = CookieStorage(
                request.cookies, get_cookie_jar(request.scope), resolved.session_name
            )
        else:
            storage = SessionStorage(request.session, resolved.session_name)
        return cls(storage, resolved, form_errors=get_form_errors(request))

    def add_message(
        self,
        message: Any,
        data: Any = "",
        message_type: str = "default",
        display_now: bool = False,
    ) -> "FlashMessenger":
        """Add a message of the given type.

        Deferred messages are persisted for the next request; with
        ``display_now`` the message is only shown on this request.
        """
        if not isinstance(message, SCALAR_TYPES) or not isinstance(message_type, str):
            raise InvalidMessage("Invalid message type/value entered.")

        formatted = format_message(message, data)
        if display_now:
            self.immediate.setdefault(message_type, []).append(formatted)
        else:
            self.pending.setdefault(message_type, []).append(formatted)
            self.storage.save(self.pending)
        logger.debug(f"Added '{message_type}' message (display_now={display_now})")
        return self

    error = _typed("error")
    error_now = _typed("error", display_now=True)
    success = _typed("success")
    success_now = _typed("success", display_now=True)
    info = _typed("info")
    info_now = _typed("info", display_now=True)
    warning = _typed("warning")
    warning_now = _typed("warning", display_now=True)
    notice = _typed("notice")
    notice_now = _typed("notice", display_now=True)

    def _current_form_errors(self) -> list[str]:
        if self.form_errors is None:
            return []
        return [str(error) for error in self.form_errors()]

    def display(self, message_type: str = "", split: bool | None = None) -> str:
        """Return the HTML for the messages of one type, or of all types.

        Validation errors are included for ``"form"`` and for all types,
        and for ``"error"`` when ``merge_form_errors`` is set. Nothing is
        cleared; stored messages expire with the backend.
        """
        persisted = self.storage.load()
        immediate = {key: list(value) for key, value in self.immediate.items()}

        merge_errors = self.config.merge_form_errors
        if message_type in ("", "form") or (merge_errors and message_type == "error"):
            if merge_errors and message_type in ("", "error"):
                bucket = "error"
            else:
                bucket = "form"
            for error in self._current_form_errors():
                immediate.setdefault(bucket, []).append(error)

        if split is None:
            split = self.config.split_default

        if message_type:
            persisted = (
                {message_type: persisted[message_type]}
                if message_type in persisted
                else {}
            )
            immediate = (
                {message_type: immediate[message_type]}
                if message_type in immediate
                else {}
            )

        return render_messages(merge_messages(persisted, immediate), self.config, split)
