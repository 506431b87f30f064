from __future__ import annotations

from typing import Any, Mapping

from starlette.requests import HTTPConnection

from .props import Props, ValidationErrors

_PROPS_KEY = "inertia_props"
_VALIDATION_ERRORS_KEY = "inertia_validation_errors"


def with_props(conn: HTTPConnection, props: Mapping[str, Any]) -> None:
    """
    Attach props to the current request.

    They rank above shared props and below the props passed to `render`. Stored on
    `request.state`, so any `Request` built over the same scope sees them.
    """
    current: Props = dict(getattr(conn.state, _PROPS_KEY, None) or {})
    current.update(props)
    setattr(conn.state, _PROPS_KEY, current)


def with_prop(conn: HTTPConnection, key: str, value: Any) -> None:
    with_props(conn, {key: value})


def props_from_request(conn: HTTPConnection) -> Props:
    return dict(getattr(conn.state, _PROPS_KEY, None) or {})


def with_validation_errors(conn: HTTPConnection, errors: Mapping[str, str]) -> None:
    current: ValidationErrors = dict(getattr(conn.state, _VALIDATION_ERRORS_KEY, None) or {})
    current.update({str(k): str(v) for k, v in errors.items()})
    setattr(conn.state, _VALIDATION_ERRORS_KEY, current)


def validation_errors_from_request(conn: HTTPConnection) -> ValidationErrors:
    return dict(getattr(conn.state, _VALIDATION_ERRORS_KEY, None) or {})
