"""
htmlbind: Widget plugins
------------------------
Discover and register widgets provided by third-party packages or local
modules.

Behavior
- Entry points: scan the ``htmlbind.widgets`` group and lazily register each
    discovered target by dotted path.
- Module paths: import the given modules and call their
    ``register_widgets(registry)`` function.

Notes
- Faulty entry points or imports are logged and skipped; the registry can be
    inspected afterwards.
- ``load_plugins`` runs both discovery steps plus the built-ins, driven by
    the runtime configuration.
"""

from importlib import import_module
from importlib.metadata import entry_points

from .core.config import RuntimeConfig, load_runtime_config
from .core.errors import get_logger
from .core.registry import WidgetRegistry
from .widgets import register_builtins

__all__ = [
    "register_entry_points",
    "register_from_paths",
    "load_plugins",
]


def register_entry_points(
    registry: WidgetRegistry, group: str = "htmlbind.widgets"
) -> list[str]:
    """
    Discover and lazily register widgets via Python entry points.

    Parameters
    ----------
    registry : WidgetRegistry
        Registry to populate.
    group : str, default "htmlbind.widgets"
        Entry point group to scan.

    Returns
    -------
    list of str
        Names that were registered.

    Examples
    --------
    >>> register_entry_points(default_registry)  # doctest: +SKIP
    """
    log = get_logger()
    registered: list[str] = []
    for ep in entry_points(group=group):
        target = f"{ep.module}:{ep.attr}" if ep.attr else ep.value
        try:
            # 'name' becomes the registry key
            registry.register_lazy(ep.name, target, entry_point=group)
        except Exception as e:
            log.warning(f"[960] Skipping widget entry point '{ep.name}' ({target}): {e}")
            continue
        registered.append(ep.name)
    return registered


def register_from_paths(registry: WidgetRegistry, paths: list[str]) -> list[str]:
    """
    Import modules and let each register its widgets.

    Each module must define ``register_widgets(registry)``. Modules that fail
    to import, lack the hook, or raise from it are logged and skipped.

    Returns
    -------
    list of str
        Module paths whose hook ran successfully.

    Examples
    --------
    >>> register_from_paths(registry, ["myplugin.widgets"])  # doctest: +SKIP
    """
    log = get_logger()
    loaded: list[str] = []
    for path in paths:
        try:
            module = import_module(path)
        except Exception as e:
            log.warning(f"[961] Could not import widget module '{path}': {e}")
            continue
        hook = getattr(module, "register_widgets", None)
        if not callable(hook):
            log.warning(f"[962] Widget module '{path}' has no register_widgets(registry)")
            continue
        try:
            hook(registry)
        except Exception as e:
            log.warning(f"[963] register_widgets in '{path}' failed: {e}")
            continue
        loaded.append(path)
    return loaded


def load_plugins(
    registry: WidgetRegistry, config: RuntimeConfig | None = None
) -> WidgetRegistry:
    """Populate ``registry`` with built-ins, configured modules and entry points."""
    config = config if config is not None else load_runtime_config()
    register_builtins(registry)
    register_from_paths(registry, list(config.plugin_modules))
    register_entry_points(registry, config.entry_point_group)
    return registry
