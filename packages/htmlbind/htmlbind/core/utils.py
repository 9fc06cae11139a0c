"""htmlbind: Core Utilities
---------------------------------------------------------
Shared helpers for the configuration and manifest layers: YAML loading with
error mapping, deep dictionary merging, and dotted-path import.

Public API
----------
``load_yaml_file`` : Load a YAML mapping with error handling
``deep_merge_dicts`` : Recursive dictionary merge
``import_target`` : Resolve ``module:attr`` or ``module.attr`` paths
"""

from __future__ import annotations

from importlib import import_module
from pathlib import Path
from typing import Any

try:
    from ruamel.yaml import YAML

    _yaml: Any = YAML(typ="safe")
except ImportError:
    import yaml as _yaml  # type: ignore[import-untyped,no-redef]

from .errors import HBConfigError, HBIOError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file whose top level is a mapping.

    Parameters
    ----------
    path : Path
        Path to the YAML file.

    Returns
    -------
    dict[str, Any]
        Loaded data; an empty file yields an empty dict.

    Raises
    ------
    HBIOError
        - [100] File does not exist.
    HBConfigError
        - [500] File cannot be parsed or its top level is not a mapping.

    """
    path = Path(path)
    if not path.exists():
        raise HBIOError(f"[100] File not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            if hasattr(_yaml, "safe_load"):
                data = _yaml.safe_load(f)
            else:
                data = _yaml.load(f)
    except Exception as e:
        raise HBConfigError(f"[500] Failed to parse YAML file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise HBConfigError(
            f"[500] Expected a mapping at the top of {path}, got {type(data).__name__}"
        )
    return dict(data)


def deep_merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override values taking precedence."""
    result = dict(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def import_target(target: str) -> Any:
    """Import a dotted target supporting ``module:attr`` or ``module.attr``.

    Raises
    ------
    ImportError
        The module cannot be imported.
    AttributeError
        The attribute does not exist in the imported module.
    """
    attr_name: str | None
    if ":" in target:
        module_name, attr_name = target.split(":", 1)
    elif "." in target:
        module_name, attr_name = target.rsplit(".", 1)
    else:
        module_name, attr_name = target, None
    mod = import_module(module_name)
    if attr_name is None:
        return mod
    if not hasattr(mod, attr_name):
        raise AttributeError(f"Target '{target}' not found")
    return getattr(mod, attr_name)
