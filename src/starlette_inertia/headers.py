from __future__ import annotations

from typing import List, Mapping, Optional
from urllib.parse import quote

from starlette.requests import HTTPConnection

# Request headers.
HEADER_INERTIA = "X-Inertia"
HEADER_VERSION = "X-Inertia-Version"
HEADER_PARTIAL_COMPONENT = "X-Inertia-Partial-Component"
HEADER_PARTIAL_ONLY = "X-Inertia-Partial-Data"
HEADER_PARTIAL_EXCEPT = "X-Inertia-Partial-Except"
HEADER_REFERER = "Referer"

# Response headers.
HEADER_LOCATION = "X-Inertia-Location"

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_HTML = "text/html"

# Mutating methods that must not replay a 302.
SEE_OTHER_METHODS = frozenset({"PUT", "PATCH", "DELETE"})


def is_inertia_request(conn: HTTPConnection) -> bool:
    """True when the request was sent by the Inertia client (marker header present)."""
    return HEADER_INERTIA in conn.headers


def is_see_other_method(method: str) -> bool:
    return str(method or "").upper() in SEE_OTHER_METHODS


def inertia_version_from_request(conn: HTTPConnection) -> str:
    return conn.headers.get(HEADER_VERSION, "")


def referer_from_request(conn: HTTPConnection) -> str:
    return conn.headers.get(HEADER_REFERER, "")


def request_uri(conn: HTTPConnection) -> str:
    """
    Path plus query string, as sent on the request line.

    Built from the raw (still percent-encoded) path so `%2F` and non-ASCII
    segments survive and the result is always safe to put in a header.
    """
    scope = conn.scope
    root_path: str = scope.get("root_path") or ""
    raw_path: Optional[bytes] = scope.get("raw_path")
    if raw_path:
        # Some servers include the query in raw_path.
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = quote(scope.get("path") or "")
    if root_path and not path.startswith(root_path):
        path = root_path + path
    query = (scope.get("query_string") or b"").decode("latin-1")
    return f"{path}?{query}" if query else path


def split_header_list(headers: Mapping[str, str], name: str) -> List[str]:
    """Parse a comma-separated header value; blanks are dropped."""
    raw: Optional[str] = headers.get(name)
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
