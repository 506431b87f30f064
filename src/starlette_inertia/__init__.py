"""
Server-side Inertia.js adapter for Starlette and FastAPI.

- `Inertia`: shared configuration plus `render` / `location` / `back`
- `InertiaMiddleware`: protocol rules (asset version, empty responses, 303s)
- `lazy` / `always` / `deferred`: prop kinds resolved per request
"""
from __future__ import annotations

from .config import DEFAULT_SSR_URL, InertiaSettings, version_from_file
from .context import (
    props_from_request,
    validation_errors_from_request,
    with_prop,
    with_props,
    with_validation_errors,
)
from .errors import (
    InertiaError,
    PayloadEncodingError,
    PreRenderUnavailable,
    PropResolutionError,
    TemplateRenderError,
)
from .headers import is_inertia_request
from .inertia import Inertia
from .middleware import InertiaMiddleware, get_inertia, install_inertia
from .models import Page, SsrPage
from .props import PartialReload, Prop, PropKind, always, deferred, lazy, plain

__all__ = [
    "DEFAULT_SSR_URL",
    "Inertia",
    "InertiaError",
    "InertiaMiddleware",
    "InertiaSettings",
    "Page",
    "PartialReload",
    "PayloadEncodingError",
    "PreRenderUnavailable",
    "Prop",
    "PropKind",
    "PropResolutionError",
    "SsrPage",
    "TemplateRenderError",
    "always",
    "deferred",
    "get_inertia",
    "install_inertia",
    "is_inertia_request",
    "lazy",
    "plain",
    "props_from_request",
    "validation_errors_from_request",
    "version_from_file",
    "with_prop",
    "with_props",
    "with_validation_errors",
]
