"""
Helpers for asserting on Inertia responses in application tests.

    page = assert_from_response(client.get("/users"))
    page.assert_component("Users/Index")
    page.assert_props({"users": [...], "errors": {}})
"""
from __future__ import annotations

import html
import json
import re
from typing import Any, Dict, Iterable, Mapping, Optional

from .headers import (
    HEADER_INERTIA,
    HEADER_PARTIAL_COMPONENT,
    HEADER_PARTIAL_EXCEPT,
    HEADER_PARTIAL_ONLY,
    HEADER_VERSION,
)

_DATA_PAGE_RE = re.compile(r'<div\b[^>]*\bdata-page="([^"]*)"', re.IGNORECASE)


class AssertablePage:
    def __init__(self, page: Mapping[str, Any]) -> None:
        self.component = page.get("component")
        self.props: Dict[str, Any] = dict(page.get("props") or {})
        self.url = page.get("url")
        self.version = page.get("version")

    def assert_component(self, want: str) -> None:
        assert self.component == want, f"component={self.component!r}, want={want!r}"

    def assert_props(self, want: Mapping[str, Any]) -> None:
        assert self.props == dict(want), f"props={self.props!r}, want={dict(want)!r}"

    def assert_version(self, want: str) -> None:
        assert self.version == want, f"version={self.version!r}, want={want!r}"

    def assert_url(self, want: str) -> None:
        assert self.url == want, f"url={self.url!r}, want={want!r}"


def assert_from_json(text: str) -> AssertablePage:
    return AssertablePage(json.loads(text))


def assert_from_html(text: str) -> AssertablePage:
    """Read the page object out of the `data-page` attribute of the app container."""
    match = _DATA_PAGE_RE.search(text)
    assert match is not None, "no element with a data-page attribute in the document"
    return assert_from_json(html.unescape(match.group(1)))


def assert_from_response(response: Any) -> AssertablePage:
    """Accepts anything with `.headers` and `.text` (httpx / TestClient responses)."""
    if response.headers.get(HEADER_INERTIA):
        return assert_from_json(response.text)
    return assert_from_html(response.text)


def inertia_headers(
    version: Optional[str] = None,
    *,
    partial_component: Optional[str] = None,
    only: Iterable[str] = (),
    except_: Iterable[str] = (),
) -> Dict[str, str]:
    """Request headers the Inertia client sends for a visit or a partial reload."""
    headers = {HEADER_INERTIA: "true"}
    if version is not None:
        headers[HEADER_VERSION] = version
    if partial_component:
        headers[HEADER_PARTIAL_COMPONENT] = partial_component
    only = list(only)
    if only:
        headers[HEADER_PARTIAL_ONLY] = ",".join(only)
    except_ = list(except_)
    if except_:
        headers[HEADER_PARTIAL_EXCEPT] = ",".join(except_)
    return headers
