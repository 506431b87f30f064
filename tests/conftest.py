from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import unquote

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if _SRC.exists():
    sys.path.insert(0, str(_SRC))


ROOT_TEMPLATE = """<html>
<head>{{ inertiaHead }}</head>
<body>{{ inertia }}</body>
</html>"""


@pytest.fixture
def make_request():
    from starlette.requests import Request

    def _make(method: str = "GET", target: str = "/", headers: Optional[Dict[str, str]] = None) -> Request:
        path, _, query = target.partition("?")
        scope = {
            "type": "http",
            "method": method,
            "scheme": "http",
            "server": ("testserver", 80),
            "root_path": "",
            "path": unquote(path),
            "raw_path": path.encode("latin-1"),
            "query_string": query.encode("latin-1"),
            "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()],
        }
        return Request(scope)

    return _make


@pytest.fixture
def make_inertia():
    from jinja2 import DictLoader

    from starlette_inertia import Inertia, InertiaSettings

    def _make(templates: Optional[Dict[str, str]] = None, **kwargs) -> Inertia:
        settings_kwargs = {
            k: kwargs.pop(k) for k in ("version", "container_id", "ssr_url", "ssr_timeout") if k in kwargs
        }
        settings = InertiaSettings(root_template="app.html", **settings_kwargs)
        loader = DictLoader(templates or {"app.html": ROOT_TEMPLATE})
        return Inertia(settings, template_loader=loader, **kwargs)

    return _make
