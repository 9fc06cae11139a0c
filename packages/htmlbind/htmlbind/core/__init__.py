"""htmlbind: core subpackage
---------------------------------------------------------
Registry, lifecycle runtime, payload codec, sizing policy, dependency
manifests, configuration and the error taxonomy.
"""

from .errors import (
    CallbackFailure,
    DuplicateNameError,
    HBError,
    NotBoundError,
    UnknownWidgetError,
)
from .payload import RawExpression, encode_payload, raw
from .protocols import InstanceState, WidgetDefinition, WidgetKind
from .registry import WidgetRegistry, default_registry
from .runtime import WidgetInstance, WidgetRuntime
from .sizing import SizingPolicy

__all__ = [
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
    "WidgetInstance",
    "WidgetRuntime",
    "SizingPolicy",
]
