from pathlib import Path

import pytest
import yaml
from htmlbind.core.config import RuntimeConfig, load_runtime_config
from htmlbind.core.errors import HBConfigError


def _write(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


def test_package_defaults():
    config = load_runtime_config(force_reload=True)
    assert isinstance(config, RuntimeConfig)
    assert config.default_size == (960, 500)
    assert config.entry_point_group == "htmlbind.widgets"


def test_override_chain(isolate_config, tmp_path, monkeypatch):
    _write(isolate_config / ".htmlbind" / "config.yaml", {"default_width": 100, "thread_safe": True})
    env_file = _write(tmp_path / "env.yaml", {"default_width": 200})
    monkeypatch.setenv("HTMLBIND_CONFIG", str(env_file))
    explicit = _write(tmp_path / "explicit.yaml", {"default_height": 50})

    config = load_runtime_config(force_reload=True, config_path=explicit)
    assert config.default_width == 200
    assert config.default_height == 50
    assert config.thread_safe is True


def test_cache_and_force_reload(isolate_config):
    first = load_runtime_config(force_reload=True)
    assert load_runtime_config() is first

    _write(isolate_config / ".htmlbind" / "config.yaml", {"default_width": 10})
    assert load_runtime_config().default_width == 960
    assert load_runtime_config(force_reload=True).default_width == 10


def test_invalid_user_config_is_rejected(isolate_config):
    _write(isolate_config / ".htmlbind" / "config.yaml", {"unknown_key": 1})
    with pytest.raises(HBConfigError, match=r"\[502\]"):
        load_runtime_config(force_reload=True)


def test_missing_explicit_config(tmp_path):
    with pytest.raises(HBConfigError, match=r"\[501\]"):
        load_runtime_config(config_path=tmp_path / "missing.yaml")


def test_blank_plugin_module_rejected():
    with pytest.raises(Exception):
        RuntimeConfig(plugin_modules=["  "])


def test_manifest_dirs_resolved(tmp_path):
    config = RuntimeConfig(manifest_dirs=[str(tmp_path)])
    assert config.get_manifest_dirs() == [tmp_path.resolve()]
