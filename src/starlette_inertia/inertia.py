from __future__ import annotations

import json
import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

import httpx
from jinja2 import BaseLoader, Environment, FileSystemLoader, TemplateError
from markupsafe import Markup
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import HTMLResponse, RedirectResponse, Response

from .config import InertiaSettings
from .context import props_from_request, validation_errors_from_request
from .errors import PayloadEncodingError, PreRenderUnavailable, TemplateRenderError
from .headers import (
    CONTENT_TYPE_JSON,
    HEADER_INERTIA,
    HEADER_LOCATION,
    is_inertia_request,
    referer_from_request,
    request_uri,
)
from .models import Page, SsrPage
from .props import PartialReload, merge_props, resolve_props

_logger = logging.getLogger(__name__)

JsonEncoder = Callable[[Any], Union[str, bytes]]

# Reserved root template keys.
TEMPLATE_HEAD_KEY = "inertiaHead"
TEMPLATE_BODY_KEY = "inertia"


def default_json_encoder(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class Inertia:
    """
    Inertia adapter: shared configuration plus the render pipeline.

    Create one instance at startup and share it between requests; nothing on it
    changes after construction.
    """

    def __init__(
        self,
        settings: InertiaSettings,
        *,
        shared_props: Optional[Mapping[str, Any]] = None,
        shared_template_data: Optional[Mapping[str, Any]] = None,
        shared_template_funcs: Optional[Mapping[str, Callable[..., Any]]] = None,
        json_encoder: Optional[JsonEncoder] = None,
        ssr_client: Optional[httpx.AsyncClient] = None,
        template_loader: Optional[BaseLoader] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings
        self._shared_props = MappingProxyType(dict(shared_props or {}))
        self._shared_template_data = MappingProxyType(dict(shared_template_data or {}))
        self._shared_template_funcs = MappingProxyType(dict(shared_template_funcs or {}))
        self._json_encoder: JsonEncoder = json_encoder or default_json_encoder
        self._ssr_client = ssr_client
        self.logger = logger or _logger
        self._templates = Environment(
            loader=template_loader or FileSystemLoader(settings.template_dir),
            autoescape=True,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "Inertia":
        return cls(InertiaSettings.from_env(), **kwargs)

    @property
    def version(self) -> str:
        return self.settings.version

    @property
    def container_id(self) -> str:
        return self.settings.container_id

    @property
    def ssr_url(self) -> Optional[str]:
        return self.settings.ssr_url

    @property
    def shared_props(self) -> Mapping[str, Any]:
        return self._shared_props

    def shared_prop(self, key: str) -> Tuple[Any, bool]:
        if key in self._shared_props:
            return self._shared_props[key], True
        return None, False

    def build_page(self, request: Request, component: str, props: Optional[Mapping[str, Any]] = None) -> Page:
        """Resolve props (shared < request < render call) into the page object."""
        partial = PartialReload.from_headers(request.headers) if is_inertia_request(request) else None
        merged = merge_props(self._shared_props, props_from_request(request), props)
        resolved = resolve_props(merged, component, partial, validation_errors_from_request(request))
        return Page(component=component, props=resolved, url=request_uri(request), version=self.version)

    def encode_page(self, page: Page) -> bytes:
        try:
            encoded = self._json_encoder(page.as_dict())
        except Exception as e:
            raise PayloadEncodingError(f"cannot encode page of {page.component!r}: {e}") from e
        return encoded.encode("utf-8") if isinstance(encoded, str) else bytes(encoded)

    async def render(
        self,
        request: Request,
        component: str,
        props: Optional[Mapping[str, Any]] = None,
        *,
        template_data: Optional[Mapping[str, Any]] = None,
        template_funcs: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> Response:
        """
        Render `component`.

        Inertia visits get the page object as JSON. Full page loads get the root
        template, with SSR markup when the SSR service answers, otherwise with a
        container element holding the page for client-side boot.
        """
        page = self.build_page(request, component, props)
        page_json = self.encode_page(page)

        if is_inertia_request(request):
            return Response(
                content=page_json,
                status_code=200,
                media_type=CONTENT_TYPE_JSON,
                headers={HEADER_INERTIA: "true"},
            )

        head, body = await self._page_markup(page_json)
        html = self._render_root_template(head, body, template_data, template_funcs)
        return HTMLResponse(html)

    def location(self, request: Request, url: str, status_code: int = 302) -> Response:
        """
        Redirect to `url`.

        For Inertia visits this is a 409 with `X-Inertia-Location`, so the client
        performs a full page visit instead of following a redirect over XHR.
        """
        if is_inertia_request(request):
            return Response(status_code=409, headers={HEADER_LOCATION: url})
        return RedirectResponse(url, status_code=status_code)

    def back(self, request: Request, status_code: int = 302) -> Response:
        return self.location(request, referer_from_request(request), status_code)

    async def _page_markup(self, page_json: bytes) -> Tuple[Markup, Markup]:
        if self.ssr_url:
            try:
                ssr = await self._ssr(page_json)
            except PreRenderUnavailable as e:
                self.logger.warning("ssr unavailable, rendering client-side: %s", e)
            else:
                return Markup("\n".join(ssr.head)), Markup(ssr.body)

        container = Markup('<div id="{}" data-page="{}"></div>').format(
            self.container_id, page_json.decode("utf-8")
        )
        return Markup(""), container

    async def _ssr(self, page_json: bytes) -> SsrPage:
        url = f"{str(self.ssr_url).rstrip('/')}/render"
        headers = {"Content-Type": CONTENT_TYPE_JSON}
        timeout = self.settings.ssr_timeout
        try:
            if self._ssr_client is not None:
                resp = await self._ssr_client.post(url, content=page_json, headers=headers, timeout=timeout)
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    resp = await client.post(url, content=page_json, headers=headers)
        except httpx.HTTPError as e:
            raise PreRenderUnavailable(f"request to {url} failed: {e}") from e

        if resp.status_code != 200:
            raise PreRenderUnavailable(f"{url} responded with status {resp.status_code}")

        try:
            return SsrPage.model_validate_json(resp.content)
        except ValidationError as e:
            raise PreRenderUnavailable(f"{url} returned an invalid body: {e}") from e

    def _render_root_template(
        self,
        head: Markup,
        body: Markup,
        template_data: Optional[Mapping[str, Any]],
        template_funcs: Optional[Mapping[str, Callable[..., Any]]],
    ) -> str:
        context: Dict[str, Any] = merge_props(
            self._shared_template_data,
            self._shared_template_funcs,
            template_data,
            template_funcs,
        )
        context[TEMPLATE_HEAD_KEY] = head
        context[TEMPLATE_BODY_KEY] = body
        try:
            template = self._templates.get_template(self.settings.root_template)
            return template.render(context)
        except TemplateError as e:
            raise TemplateRenderError(f"cannot render root template {self.settings.root_template!r}: {e}") from e
