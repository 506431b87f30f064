from __future__ import annotations

import hashlib
import os

import pytest
from pydantic import ValidationError

from starlette_inertia.config import DEFAULT_SSR_URL, InertiaSettings, version_from_file

_ENV = (
    "INERTIA_ROOT_TEMPLATE",
    "INERTIA_TEMPLATE_DIR",
    "INERTIA_CONTAINER_ID",
    "INERTIA_VERSION",
    "INERTIA_VERSION_FILE",
    "INERTIA_SSR",
    "INERTIA_SSR_URL",
    "INERTIA_SSR_TIMEOUT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    # load_dotenv writes straight into os.environ; give each test its own copy.
    monkeypatch.setattr(os, "environ", os.environ.copy())
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env files out of the picture.
    monkeypatch.chdir(tmp_path)


def test_defaults():
    s = InertiaSettings.from_env()
    assert s.root_template == "app.html"
    assert s.template_dir == "templates"
    assert s.container_id == "app"
    assert s.version == ""
    assert s.ssr_url is None
    assert s.ssr_timeout == 5.0


def test_reads_env(monkeypatch):
    monkeypatch.setenv("INERTIA_ROOT_TEMPLATE", "root.html")
    monkeypatch.setenv("INERTIA_CONTAINER_ID", "main")
    monkeypatch.setenv("INERTIA_VERSION", "v1")
    monkeypatch.setenv("INERTIA_SSR", "true")
    monkeypatch.setenv("INERTIA_SSR_TIMEOUT", "1.5")

    s = InertiaSettings.from_env()
    assert (s.root_template, s.container_id, s.version) == ("root.html", "main", "v1")
    assert s.ssr_url == DEFAULT_SSR_URL
    assert s.ssr_timeout == 1.5


def test_ssr_url_only_used_when_switched_on(monkeypatch):
    monkeypatch.setenv("INERTIA_SSR_URL", "http://node:13714")
    assert InertiaSettings.from_env().ssr_url is None

    monkeypatch.setenv("INERTIA_SSR", "1")
    assert InertiaSettings.from_env().ssr_url == "http://node:13714"


def test_bad_timeout_uses_default(monkeypatch):
    monkeypatch.setenv("INERTIA_SSR_TIMEOUT", "soon")
    assert InertiaSettings.from_env().ssr_timeout == 5.0
    monkeypatch.setenv("INERTIA_SSR_TIMEOUT", "-3")
    assert InertiaSettings.from_env().ssr_timeout == 5.0


def test_env_file_is_loaded(tmp_path):
    (tmp_path / ".env").write_text("INERTIA_VERSION=from-dotenv\n", encoding="utf-8")
    assert InertiaSettings.from_env().version == "from-dotenv"


def test_version_from_manifest(monkeypatch, tmp_path):
    manifest = tmp_path / "manifest.json"
    manifest.write_bytes(b'{"app.js": "app.123.js"}')
    monkeypatch.setenv("INERTIA_VERSION_FILE", str(manifest))

    want = hashlib.md5(manifest.read_bytes()).hexdigest()
    assert version_from_file(manifest) == want
    assert InertiaSettings.from_env().version == want


def test_overrides_win():
    assert InertiaSettings.from_env(version="pinned").version == "pinned"


def test_settings_are_frozen_and_validated():
    s = InertiaSettings(root_template="app.html")
    with pytest.raises(ValidationError):
        s.version = "x"
    with pytest.raises(ValidationError):
        InertiaSettings(root_template="app.html", ssr_timeout=0)
