"""Tests for plugin discovery and the built-in widgets."""

import logging
from types import SimpleNamespace

from htmlbind import plugins
from htmlbind.core.config import RuntimeConfig
from htmlbind.core.element import Element
from htmlbind.plugins import load_plugins, register_entry_points, register_from_paths
from htmlbind.widgets import register_builtins

PLUGIN_SOURCE = """
from htmlbind.core.protocols import WidgetDefinition

def _render(el, payload, state):
    el.content = ("gauge", payload["value"])

def register_widgets(registry):
    registry.add(WidgetDefinition("gauge", render=_render))
"""


def test_register_from_paths(registry, write_module, caplog):
    good = write_module("gauge_plugin", PLUGIN_SOURCE)
    hookless = write_module("hookless_plugin", "X = 1\n")
    with caplog.at_level(logging.WARNING, logger="htmlbind"):
        loaded = register_from_paths(registry, [good, hookless, "no_such_plugin_mod"])
    assert loaded == [good]
    assert "gauge" in registry
    assert "[961]" in caplog.text and "[962]" in caplog.text


def test_register_from_paths_duplicate_is_skipped(registry, write_module, caplog):
    name = write_module("gauge_plugin_dup", PLUGIN_SOURCE)
    assert register_from_paths(registry, [name]) == [name]
    with caplog.at_level(logging.WARNING, logger="htmlbind"):
        assert register_from_paths(registry, [name]) == []
    assert "[963]" in caplog.text


def test_register_entry_points(registry, monkeypatch):
    eps = [
        SimpleNamespace(name="ext", module="ext_pkg.widgets", attr="EXT", value="ext_pkg.widgets:EXT"),
        SimpleNamespace(name="bad name", module="x", attr="Y", value="x:Y"),
    ]
    monkeypatch.setattr(plugins, "entry_points", lambda group: eps if group == "grp" else [])
    assert register_entry_points(registry, "grp") == ["ext"]
    meta = registry.list()["ext"]
    assert meta["module_path"] == "ext_pkg.widgets:EXT"
    assert meta["entry_point"] == "grp"


def test_load_plugins_uses_config(registry, write_module, monkeypatch):
    name = write_module("gauge_plugin_cfg", PLUGIN_SOURCE)
    monkeypatch.setattr(plugins, "entry_points", lambda group: [])
    load_plugins(registry, RuntimeConfig(plugin_modules=[name]))
    assert registry.names() == ["echo", "gauge"]


def test_register_builtins_is_idempotent(registry):
    register_builtins(registry)
    register_builtins(registry)
    assert registry.names() == ["echo"]


def test_echo_widget(registry, runtime):
    register_builtins(registry)
    el = Element("out", width=300, height=200)
    inst = runtime.bind(el, "echo")
    assert inst.state.size == (300, 200)
    assert inst.state.last_payload is None

    runtime.set_payload(el, {"text": "hi"})
    assert el.content == "hi"
    runtime.set_payload(el, {"text": "bye"})
    assert inst.state.last_payload == {"text": "bye"}
    assert inst.state.renders == 2

    runtime.notify_resize(el, 10, 20)
    assert inst.state.size == (10, 20)


def test_echo_without_text_shows_payload(registry, runtime):
    register_builtins(registry)
    el = Element("out")
    runtime.bind(el, "echo", payload={"rows": (1, 2)})
    assert el.content == {"rows": [1, 2]}
