"""Jinja2 templates configuration."""

from pathlib import Path

import jinja2
from fastapi.templating import Jinja2Templates
from markupsafe import Markup
from starlette.requests import Request

from flash_messenger.config import get_settings
from flash_messenger.dependencies import get_messenger


def flash_messages(
    request: Request, message_type: str = "", split: bool | None = None
) -> Markup:
    """Render the flash messages of a request inside a template.

    The HTML is marked safe, so messages are output verbatim. Settings come
    from the application's ``get_settings`` override when one is set.
    """
    overrides = getattr(request.app, "dependency_overrides", {})
    settings = overrides.get(get_settings, get_settings)()
    messenger = get_messenger(request, settings)
    return Markup(messenger.display(message_type, split))


def install(env: jinja2.Environment) -> jinja2.Environment:
    """Register the flash globals on a Jinja2 environment."""
    env.globals["flash_messages"] = flash_messages
    return env


env = install(
    jinja2.Environment(
        loader=jinja2.FileSystemLoader(Path(__file__).parent.resolve() / "templates"),
        autoescape=True,
    )
)

templates = Jinja2Templates(env=env)
