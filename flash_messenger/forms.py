"""Form validation errors for the current request."""

from typing import Callable, Iterable, Sequence

from pydantic import ValidationError
from starlette.requests import HTTPConnection

FORM_ERRORS_STATE = "flash_form_errors"

FormErrors = Callable[[], Sequence[str]]


def set_form_errors(request: HTTPConnection, errors: Iterable[str]) -> None:
    """Replace the validation errors recorded for this request."""
    setattr(request.state, FORM_ERRORS_STATE, [str(error) for error in errors])


def add_form_errors(request: HTTPConnection, errors: Iterable[str]) -> None:
    """Append validation errors to the ones recorded for this request."""
    current = list(getattr(request.state, FORM_ERRORS_STATE, []))
    current.extend(str(error) for error in errors)
    setattr(request.state, FORM_ERRORS_STATE, current)


def validation_messages(exc: ValidationError) -> list[str]:
    """Turn a pydantic validation error into one message per failure."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        if location:
            messages.append(f"{location}: {error['msg']}")
        else:
            messages.append(error["msg"])
    return messages


def get_form_errors(request: HTTPConnection) -> FormErrors:
    """Return a callable reading the validation errors of ``request``."""

    def current_errors() -> list[str]:
        return list(getattr(request.state, FORM_ERRORS_STATE, []))

    return current_errors
