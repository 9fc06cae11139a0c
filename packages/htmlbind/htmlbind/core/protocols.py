"""htmlbind: Widget Definitions and Callback Protocols
---------------------------------------------------------
Structural contracts for the callbacks a widget author supplies, and the
immutable ``WidgetDefinition`` record the registry stores.

Public API
----------
``WidgetKind`` : Enumeration of widget kinds (currently only ``output``)
``WidgetDefinition`` : Frozen record of name, kind, callbacks and sizing
``InstanceState`` : Default opaque state for widgets without ``initialize``
``InitializeCallback``, ``RenderCallback``, ``ResizeCallback``,
``DestroyCallback`` : Callback signatures

Notes
-----
- Dispatch is a plain field check on the definition; the runtime never
  inspects callback objects beyond ``callable()``.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import SimpleNamespace
from typing import Any, Protocol

from .errors import HBRegistryError
from .sizing import SizingPolicy

__all__ = [
    "WidgetKind",
    "WidgetDefinition",
    "InstanceState",
    "InitializeCallback",
    "RenderCallback",
    "ResizeCallback",
    "DestroyCallback",
]


class WidgetKind(str, Enum):
    """Kinds of widget a definition can describe."""

    OUTPUT = "output"


class InstanceState(SimpleNamespace):
    """Attribute bag used as instance state when a widget has no initializer."""


class InitializeCallback(Protocol):
    def __call__(self, element: Any, width: float, height: float) -> Any: ...


class RenderCallback(Protocol):
    def __call__(self, element: Any, payload: Any, state: Any) -> None: ...


class ResizeCallback(Protocol):
    def __call__(self, element: Any, width: float, height: float, state: Any) -> None: ...


class DestroyCallback(Protocol):
    def __call__(self, element: Any, state: Any) -> None: ...


@dataclass(frozen=True)
class WidgetDefinition:
    """A named, registered widget binding.

    Parameters
    ----------
    name : str
        Registry key of the widget.
    render : RenderCallback
        Mandatory; called once per payload with ``(element, payload, state)``.
    kind : WidgetKind, default ``WidgetKind.OUTPUT``
        Widget kind; strings are coerced.
    initialize : InitializeCallback, optional
        Called once per element with ``(element, width, height)``; the return
        value becomes the instance state.
    resize : ResizeCallback, optional
        Called with ``(element, width, height, state)`` on geometry changes.
    destroy : DestroyCallback, optional
        Called with ``(element, state)`` when the element is unbound.
    sizing : SizingPolicy
        How ``bind`` obtains initial dimensions.

    Raises
    ------
    HBRegistryError
        - [407] ``render`` is missing or a callback slot is not callable.
        - [408] Unknown widget kind.

    Examples
    --------
    >>> d = WidgetDefinition("echo", render=lambda el, p, s: None)
    >>> d.kind is WidgetKind.OUTPUT
    True
    """

    name: str
    render: RenderCallback
    kind: WidgetKind = WidgetKind.OUTPUT
    initialize: InitializeCallback | None = None
    resize: ResizeCallback | None = None
    destroy: DestroyCallback | None = None
    sizing: SizingPolicy = field(default_factory=SizingPolicy)

    def __post_init__(self) -> None:
        if not callable(self.render):
            raise HBRegistryError(
                f"[407] Widget '{self.name}' must define a callable render callback"
            )
        for slot in ("initialize", "resize", "destroy"):
            cb = getattr(self, slot)
            if cb is not None and not callable(cb):
                raise HBRegistryError(
                    f"[407] Widget '{self.name}': {slot} must be callable or None"
                )
        if not isinstance(self.kind, WidgetKind):
            try:
                kind = WidgetKind(str(self.kind).strip().lower())
            except ValueError:
                raise HBRegistryError(
                    f"[408] Widget '{self.name}': unknown kind {self.kind!r}"
                ) from None
            object.__setattr__(self, "kind", kind)

    @property
    def callbacks(self) -> list[str]:
        """Names of the callback slots this definition fills."""
        return [
            slot
            for slot in ("initialize", "render", "resize", "destroy")
            if getattr(self, slot) is not None
        ]

    def renamed(self, name: str) -> "WidgetDefinition":
        """Return a copy registered under another name."""
        return WidgetDefinition(
            name=name,
            render=self.render,
            kind=self.kind,
            initialize=self.initialize,
            resize=self.resize,
            destroy=self.destroy,
            sizing=self.sizing,
        )
