"""Pytest configuration and fixtures."""

import importlib
import sys
from pathlib import Path

import pytest

# Add package path to sys.path
packages_dir = Path(__file__).parent.parent / "packages"
sys.path.insert(0, str(packages_dir / "htmlbind"))

from htmlbind.core import config as config_module  # noqa: E402
from htmlbind.core.config import RuntimeConfig  # noqa: E402
from htmlbind.core.element import Element  # noqa: E402
from htmlbind.core.registry import WidgetRegistry  # noqa: E402
from htmlbind.core.runtime import WidgetRuntime  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch):
    """Keep the user's home config and env override out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.delenv("HTMLBIND_CONFIG", raising=False)
    monkeypatch.setattr(config_module, "_RUNTIME_CONFIG_CACHE", None)
    yield home


@pytest.fixture
def registry():
    """A fresh registry per test."""
    return WidgetRegistry()


@pytest.fixture
def runtime(registry):
    """Runtime over the per-test registry with default configuration."""
    return WidgetRuntime(registry, config=RuntimeConfig())


@pytest.fixture
def element():
    return Element("plot", width=400, height=300)


class CallRecorder:
    """Builds widget callbacks that append ``(phase, args)`` to ``calls``."""

    def __init__(self):
        self.calls = []

    def phases(self):
        return [phase for phase, _ in self.calls]

    def callbacks(self, *, fail=()):
        def initialize(element, width, height):
            self.calls.append(("initialize", (width, height)))
            if "initialize" in fail:
                raise RuntimeError("initialize boom")
            return {"renders": []}

        def render(element, payload, state):
            self.calls.append(("render", payload))
            if "render" in fail:
                raise ValueError("render boom")
            state["renders"].append(payload)

        def resize(element, width, height, state):
            self.calls.append(("resize", (width, height)))
            if "resize" in fail:
                raise RuntimeError("resize boom")

        def destroy(element, state):
            self.calls.append(("destroy", state))
            if "destroy" in fail:
                raise RuntimeError("destroy boom")

        return {
            "initialize": initialize,
            "render": render,
            "resize": resize,
            "destroy": destroy,
        }


@pytest.fixture
def recorder():
    return CallRecorder()


@pytest.fixture
def recorded_widget(registry, recorder):
    """Register a widget named 'recorded' whose callbacks log into ``recorder``."""
    registry.register("recorded", "output", recorder.callbacks())
    return recorder


@pytest.fixture
def write_module(tmp_path, monkeypatch):
    """Write an importable module into a temporary sys.path entry."""
    mod_dir = tmp_path / "mods"
    mod_dir.mkdir()
    monkeypatch.syspath_prepend(str(mod_dir))

    def _write(name, source):
        (mod_dir / f"{name}.py").write_text(source, encoding="utf-8")
        sys.modules.pop(name, None)
        importlib.invalidate_caches()
        return name

    yield _write
