"""
htmlbind - Widget Lifecycle Runtime for Host-to-Browser Visualization Bindings
=============================================================================
A small runtime that enforces the embedding contract between a data-producing
host caller and a rendering target: named widget definitions are registered
once, bound to elements, fed payloads, resized and unbound in a fixed order.

License : MIT
Version : 0.1.0

Notes
-----
Importing the package does not populate ``default_registry``; call
``htmlbind.plugins.load_plugins(default_registry)`` (or
``register_builtins``) to register built-in and third-party widgets.

Examples
--------
>>> from htmlbind import WidgetRegistry, WidgetRuntime, Element
>>> reg = WidgetRegistry()
>>> @reg.decorator("label")
... def render(element, payload, state):
...     element.content = payload["text"]
>>> rt = WidgetRuntime(reg)
>>> el = Element("out")
>>> _ = rt.bind(el, "label", payload={"text": "hi"})
>>> el.content
'hi'
"""

from .core.element import Element
from .core.errors import (
    CallbackFailure,
    DuplicateNameError,
    HBError,
    NotBoundError,
    UnknownWidgetError,
)
from .core.payload import RawExpression, encode_payload, raw
from .core.protocols import InstanceState, WidgetDefinition, WidgetKind
from .core.registry import WidgetRegistry, default_registry, register, register_lazy
from .core.runtime import WidgetInstance, WidgetRuntime
from .core.sizing import SizingPolicy

__version__ = "0.1.0"

__all__ = [
    "Element",
    "CallbackFailure",
    "DuplicateNameError",
    "HBError",
    "NotBoundError",
    "UnknownWidgetError",
    "RawExpression",
    "encode_payload",
    "raw",
    "InstanceState",
    "WidgetDefinition",
    "WidgetKind",
    "WidgetRegistry",
    "default_registry",
    "register",
    "register_lazy",
    "WidgetInstance",
    "WidgetRuntime",
    "SizingPolicy",
    "__version__",
]
