import os
from typing import Iterator

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware

from flash_messenger import (
    FlashMessenger,
    FlashSettings,
    FlashdataMiddleware,
    get_messenger,
    get_settings,
)
from flash_messenger.forms import set_form_errors
from flash_messenger.templates import templates


def create_app() -> FastAPI:
    """Build a small application exercising the messenger."""
    app = FastAPI()
    app.add_middleware(FlashdataMiddleware)
    app.add_middleware(SessionMiddleware, secret_key="test-secret-key")

    @app.post("/flash/{message_type}")
    def post_flash(
        message_type: str,
        message: str,
        now: bool = False,
        flash: FlashMessenger = Depends(get_messenger),
    ) -> Response:
        flash.add_message(message, message_type=message_type, display_now=now)
        if now:
            return HTMLResponse(flash.display())
        return RedirectResponse(url="/display", status_code=303)

    @app.get("/display")
    def get_display(
        message_type: str = "",
        split: bool | None = None,
        flash: FlashMessenger = Depends(get_messenger),
    ) -> HTMLResponse:
        return HTMLResponse(flash.display(message_type, split))

    @app.post("/form")
    def post_form(
        request: Request, flash: FlashMessenger = Depends(get_messenger)
    ) -> HTMLResponse:
        set_form_errors(request, ["Field is required"])
        return HTMLResponse(flash.display())

    @app.get("/template")
    def get_template(request: Request) -> Response:
        return templates.TemplateResponse(request, "flash.html")

    return app


@pytest.fixture(autouse=True)
def settings_cleanup(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in list(os.environ):
        if name.startswith("FLASH_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client


@pytest.fixture
def cookie_client(app: FastAPI) -> Iterator[TestClient]:
    app.dependency_overrides[get_settings] = lambda: FlashSettings(
        STORAGE_BACKEND="cookie"
    )
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
