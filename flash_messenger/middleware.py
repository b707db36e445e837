"""ASGI middleware driving the per-request flash storage."""

import logging
from typing import Any, Literal, MutableMapping

from starlette.datastructures import MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flash_messenger.storage import CookieJar, SessionFlashdata

logger = logging.getLogger(__name__)

COOKIE_JAR_KEY = "flash_messenger.cookies"


def get_cookie_jar(scope: MutableMapping[str, Any]) -> CookieJar:
    """Return the cookie jar of the current request."""
    try:
        return scope[COOKIE_JAR_KEY]
    except KeyError:
        raise RuntimeError(
            "FlashdataMiddleware must be installed to use cookie storage."
        ) from None


class FlashdataMiddleware:
    """Age session flashdata and send queued flash cookies.

    Add it before ``SessionMiddleware`` so that it runs inside it and
    sees the loaded session.
    """

    def __init__(
        self,
        app: ASGIApp,
        cookie_path: str = "/",
        cookie_max_age: int | None = None,
        cookie_secure: bool = False,
        cookie_samesite: Literal["lax", "strict", "none"] = "lax",
    ) -> None:
        self.app = app
        self.cookie_path = cookie_path
        self.cookie_max_age = cookie_max_age
        self.cookie_secure = cookie_secure
        self.cookie_samesite = cookie_samesite

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if "session" in scope:
            SessionFlashdata(scope["session"]).age()
        else:
            logger.debug("No session in scope; session flashdata is unavailable")

        jar = CookieJar()
        scope[COOKIE_JAR_KEY] = jar

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start" and len(jar):
                headers = MutableHeaders(scope=message)
                for name, value in jar:
                    headers.append("set-cookie", self.cookie_header(name, value))
            await send(message)

        await self.app(scope, receive, send_wrapper)

    def cookie_header(self, name: str, value: str) -> str:
        """Build the Set-Cookie header for a queued cookie.

        An empty value deletes the cookie.
        """
        response = Response()
        if value:
            response.set_cookie(
                name,
                value,
                max_age=self.cookie_max_age,
                path=self.cookie_path,
                secure=self.cookie_secure,
                httponly=True,
                samesite=self.cookie_samesite,
            )
        else:
            response.delete_cookie(
                name,
                path=self.cookie_path,
                secure=self.cookie_secure,
                httponly=True,
                samesite=self.cookie_samesite,
            )
        return response.headers["set-cookie"]
