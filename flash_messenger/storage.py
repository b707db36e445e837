"""Storage backends for deferred flash messages."""

import base64
import binascii
import json
import logging
from typing import Any, Iterator, Mapping, MutableMapping, Protocol

logger = logging.getLogger(__name__)

MessageStore = dict[str, list[str]]

FLASHDATA_NEW = "__flash_new__"
FLASHDATA_OLD = "__flash_old__"


def encode_messages(messages: Mapping[str, list[str]]) -> str:
    """Encode a message store as base64 of its JSON form."""
    return base64.b64encode(json.dumps(messages).encode("utf-8")).decode("ascii")


def decode_messages(value: str | None) -> MessageStore:
    """Decode a cookie value back into a message store.

    Missing or corrupt values decode to an empty store.
    """
    if not value:
        return {}
    try:
        data = json.loads(base64.b64decode(value, validate=True))
    except (binascii.Error, ValueError, RecursionError) as e:
        logger.debug(f"Ignoring undecodable flash cookie: {e}")
        return {}
    return clean_messages(data)


def clean_messages(data: Any) -> MessageStore:
    """Keep only the list-valued entries of a stored mapping."""
    if not isinstance(data, dict):
        return {}
    return {
        str(key): list(value) for key, value in data.items() if isinstance(value, list)
    }


class FlashStorage(Protocol):
    """Persistence used by the messenger for deferred messages."""

    def load(self) -> MessageStore:
        """Return the messages persisted by the previous request."""
        ...

    def queued(self) -> MessageStore:
        """Return the messages already queued for the next request."""
        ...

    def save(self, messages: MessageStore) -> None:
        """Replace the messages queued for the next request."""
        ...


class SessionFlashdata:
    """Flashdata kept in a session mapping.

    Values set during one request are readable during the next one only.
    ``age()`` must run once at the start of every request.
    """

    def __init__(self, session: MutableMapping[str, Any]):
        """Initialize the flashdata over a session mapping."""
        self.session = session

    def age(self) -> None:
        """Make the last request's flashdata current and drop the older one."""
        incoming = self.session.pop(FLASHDATA_NEW, None)
        if incoming:
            self.session[FLASHDATA_OLD] = incoming
        else:
            self.session.pop(FLASHDATA_OLD, None)

    def get_flashdata(self, key: str) -> Any:
        return self.session.get(FLASHDATA_OLD, {}).get(key)

    def set_flashdata(self, key: str, value: Any) -> None:
        # Reassign so the session sees a modified value.
        outgoing = dict(self.session.get(FLASHDATA_NEW, {}))
        outgoing[key] = value
        self.session[FLASHDATA_NEW] = outgoing

    def queued(self, key: str) -> Any:
        return self.session.get(FLASHDATA_NEW, {}).get(key)


class SessionStorage:
    """Keep deferred messages in session flashdata."""

    def __init__(self, session: MutableMapping[str, Any], name: str):
        """Initialize the storage for the flashdata key ``name``."""
        self.flashdata = SessionFlashdata(session)
        self.name = name

    def load(self) -> MessageStore:
        return clean_messages(self.flashdata.get_flashdata(self.name))

    def queued(self) -> MessageStore:
        return clean_messages(self.flashdata.queued(self.name))

    def save(self, messages: MessageStore) -> None:
        self.flashdata.set_flashdata(self.name, messages)
        logger.debug(f"Stored flash messages in session key '{self.name}'")


class CookieJar:
    """Cookies queued for the response of the current request."""

    def __init__(self) -> None:
        """Initialize an empty jar."""
        self.cookies: dict[str, str] = {}

    def set(self, name: str, value: str) -> None:
        """Queue a cookie, replacing any earlier value of the same name."""
        self.cookies[name] = value

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.cookies.items())

    def __len__(self) -> int:
        return len(self.cookies)


class CookieStorage:
    """Keep deferred messages in an encoded cookie.

    The outgoing cookie is reset when the storage is created, so the
    messages are only kept if something is flashed during this request.
    """

    def __init__(self, cookies: Mapping[str, str], jar: CookieJar, name: str):
        """Initialize the storage and clear the outgoing cookie."""
        self.cookies = cookies
        self.jar = jar
        self.name = name
        self.jar.set(self.name, "")

    def load(self) -> MessageStore:
        return decode_messages(self.cookies.get(self.name))

    def queued(self) -> MessageStore:
        return {}

    def save(self, messages: MessageStore) -> None:
        self.jar.set(self.name, encode_messages(messages))
        logger.debug(f"Queued flash cookie '{self.name}'")
