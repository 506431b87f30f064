from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SSR_URL = "http://127.0.0.1:13714"


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or "").strip() or default


def version_from_file(path: Union[str, Path]) -> str:
    """Asset version = md5 of a build manifest, so it changes whenever the assets do."""
    data = Path(path).read_bytes()
    return hashlib.md5(data).hexdigest()


class InertiaSettings(BaseModel):
    """Process-wide adapter settings. Built once at startup."""
    model_config = ConfigDict(frozen=True)

    root_template: str = Field(..., description="Root template name, e.g. 'app.html'")
    template_dir: str = Field(default="templates", description="Directory the root template is loaded from")
    container_id: str = Field(default="app", description="id of the element the client app mounts on")
    version: str = Field(default="", description="Current asset version")
    ssr_url: Optional[str] = Field(default=None, description="SSR service base URL; None disables SSR")
    ssr_timeout: float = Field(default=5.0, gt=0, description="Timeout (seconds) for the SSR call")

    @classmethod
    def from_env(cls, **overrides) -> "InertiaSettings":
        """
        Build settings from env vars (after loading `.env` and `.env.local`).

        - `INERTIA_ROOT_TEMPLATE` (default `app.html`)
        - `INERTIA_TEMPLATE_DIR`, `INERTIA_CONTAINER_ID`
        - `INERTIA_VERSION`, or `INERTIA_VERSION_FILE` to hash a manifest
        - `INERTIA_SSR=1` enables SSR at `INERTIA_SSR_URL` (default 127.0.0.1:13714)
        - `INERTIA_SSR_TIMEOUT` seconds
        """
        load_dotenv(".env")
        load_dotenv(".env.local", override=True)

        version = _env_str("INERTIA_VERSION")
        version_file = _env_str("INERTIA_VERSION_FILE")
        if not version and version_file:
            version = version_from_file(version_file)

        ssr_url: Optional[str] = None
        if _env_bool("INERTIA_SSR", default=False):
            ssr_url = _env_str("INERTIA_SSR_URL", DEFAULT_SSR_URL)

        values = {
            "root_template": _env_str("INERTIA_ROOT_TEMPLATE", "app.html"),
            "template_dir": _env_str("INERTIA_TEMPLATE_DIR", "templates"),
            "container_id": _env_str("INERTIA_CONTAINER_ID", "app"),
            "version": version,
            "ssr_url": ssr_url,
            "ssr_timeout": _env_float("INERTIA_SSR_TIMEOUT", 5.0),
        }
        values.update(overrides)
        return cls(**values)
