"""Tests for gunicorn configuration."""
from __future__ import annotations

import importlib.util
import os
from unittest.mock import patch


def _load(name: str = "gunicorn_conf"):
    spec = importlib.util.spec_from_file_location(name, "gunicorn.conf.py")
    assert spec is not None
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)  # type: ignore[union-attr]
    return mod


class TestGunicornConfig:
    def test_config_loads(self) -> None:
        mod = _load()
        assert hasattr(mod, "bind")
        assert hasattr(mod, "workers")
        assert hasattr(mod, "worker_class")
        assert hasattr(mod, "timeout")
        assert hasattr(mod, "on_starting")

    def test_default_bind(self) -> None:
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GUNICORN_BIND", None)
            os.environ.pop("PORT", None)
            mod = _load()
        assert mod.bind == "0.0.0.0:4242"

    def test_port_override(self) -> None:
        with patch.dict(os.environ, {"PORT": "9000"}):
            os.environ.pop("GUNICORN_BIND", None)
            mod = _load("gunicorn_conf_port")
        assert mod.bind.endswith(":9000")

    def test_worker_class_is_uvicorn(self) -> None:
        assert "uvicorn" in _load().worker_class

    def test_env_override_workers(self) -> None:
        with patch.dict(os.environ, {"GUNICORN_WORKERS": "4"}):
            mod = _load("gunicorn_conf_custom")
        assert mod.workers == 4

    def test_preload_defaults_false(self) -> None:
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GUNICORN_PRELOAD", None)
            mod = _load("gunicorn_conf_preload")
        assert mod.preload_app is False
