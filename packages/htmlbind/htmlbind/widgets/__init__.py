"""
htmlbind: Built-in Widgets
--------------------------
Widgets shipped with the package. They are registered lazily, so importing
this subpackage does not import the widget modules themselves.

Usage
-----
Registry keys:
`echo`
"""

from ..core.registry import WidgetRegistry

__all__ = ["BUILTINS", "register_builtins"]

BUILTINS = {
    "echo": "htmlbind.widgets.echo:ECHO",
}


def register_builtins(registry: WidgetRegistry) -> None:
    """Lazily register every built-in widget not already present in ``registry``."""
    for name, target in BUILTINS.items():
        if name not in registry:
            registry.register_lazy(name, target, builtin=True)
