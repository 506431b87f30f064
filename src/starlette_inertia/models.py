from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """The page object sent to the client, either as JSON or inside the root template."""
    model_config = ConfigDict(frozen=True)

    component: str = Field(..., description="Client-side component name, e.g. 'Users/Index'")
    props: Dict[str, Any] = Field(default_factory=dict, description="Resolved props; always holds 'errors'")
    url: str = Field(..., description="Request URI (path and query)")
    version: str = Field(default="", description="Current asset version")

    def as_dict(self) -> Dict[str, Any]:
        # Plain dict keeps prop values untouched for the configured JSON encoder.
        return {"component": self.component, "props": self.props, "url": self.url, "version": self.version}


class SsrPage(BaseModel):
    """Successful response of the SSR service's `/render` endpoint."""

    head: List[str] = Field(default_factory=list, description="Raw HTML fragments for <head>")
    body: str = Field(..., description="Raw HTML for the app container")
