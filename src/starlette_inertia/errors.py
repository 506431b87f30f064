from __future__ import annotations

from typing import Optional


class InertiaError(Exception):
    """Base class for every error raised by the adapter."""


class PropResolutionError(InertiaError):
    """A prop producer raised while the page props were being resolved."""

    def __init__(self, prop: str, message: Optional[str] = None) -> None:
        self.prop = prop
        super().__init__(message or f"cannot resolve prop {prop!r}")


class TemplateRenderError(InertiaError):
    """The root template could not be loaded or rendered."""


class PayloadEncodingError(InertiaError):
    """The page object could not be encoded to JSON."""


class PreRenderUnavailable(InertiaError):
    """
    The SSR service could not produce markup (transport error, non-200, bad body).

    Never escapes `Inertia.render`: the pipeline logs it and bootstraps client-side.
    """
