"""htmlbind: Lifecycle Runtime
----------------------------
Drives widget instances through their lifecycle in response to external
triggers: page load (``bind``), payload updates (``set_payload``), container
resizes (``notify_resize``) and element removal (``unbind``).

Behavior
--------
- Per element the order is strictly ``bind -> initialize (once) ->
  {set_payload, notify_resize}* -> unbind (once)``. Elements are independent.
- All operations run synchronously on the caller's turn. Nothing is deferred,
  retried or logged on the caller's behalf.
- Exceptions raised by widget callbacks propagate as ``CallbackFailure``
  (chained to the original). A failed ``render`` or ``resize`` leaves the
  instance bound; a failed ``initialize`` leaves no instance; a failed
  ``destroy`` is raised after the bookkeeping is gone.
- Elements are referenced weakly. If an element is garbage collected without
  being unbound, its bookkeeping is dropped; the destroy hook is skipped
  because there is no element left to pass to it.

Notes
-----
- Callers must serialize operations on the same element. With
  ``thread_safe=True`` each instance additionally carries a re-entrant lock
  so a multi-threaded host cannot interleave render and resize.
"""

import threading
import weakref
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass, field
from typing import Any

from .config import RuntimeConfig, load_runtime_config
from .errors import CallbackFailure, HBStateError, NotBoundError, get_logger
from .payload import Payload, normalize_payload
from .protocols import InstanceState, WidgetDefinition
from .registry import WidgetRegistry
from .sizing import check_dimensions, resolve_size

__all__ = [
    "WidgetInstance",
    "WidgetRuntime",
]

logger = get_logger()


@dataclass
class WidgetInstance:
    """Live binding of a widget definition to one element.

    Attributes
    ----------
    definition : WidgetDefinition
        The bound widget.
    element_ref : weakref.ref
        Weak reference to the element; the runtime never owns its lifetime.
    state : Any
        Opaque value returned by ``initialize`` (or an empty
        ``InstanceState``). Only the widget's callbacks interpret it.
    width, height : float
        Last known dimensions.
    payload : dict or None
        Last payload delivered to ``render``.
    """

    definition: WidgetDefinition
    element_ref: weakref.ref
    state: Any
    width: float
    height: float
    payload: dict[str, Any] | None = None
    lock: AbstractContextManager[Any] | None = field(default=None, repr=False)

    @property
    def element(self) -> Any:
        return self.element_ref()

    @property
    def size(self) -> tuple[float, float]:
        return self.width, self.height

    def guard(self) -> AbstractContextManager[Any]:
        return self.lock if self.lock is not None else nullcontext()


class WidgetRuntime:
    """Lifecycle runtime bound to an explicit registry.

    Parameters
    ----------
    registry : WidgetRegistry
        Source of widget definitions.
    config : RuntimeConfig, optional
        Runtime configuration; loaded with ``load_runtime_config`` when omitted.
    thread_safe : bool, optional
        Overrides ``config.thread_safe``.

    Examples
    --------
    >>> reg = WidgetRegistry()
    >>> _ = reg.register("echo", "output", {"render": lambda el, p, s: None})
    >>> rt = WidgetRuntime(reg, config=RuntimeConfig())
    >>> class El: pass
    >>> el = El()
    >>> _ = rt.bind(el, "echo")
    >>> rt.set_payload(el, {"text": "hi"})
    >>> rt.unbind(el)
    True
    """

    def __init__(
        self,
        registry: WidgetRegistry,
        *,
        config: RuntimeConfig | None = None,
        thread_safe: bool | None = None,
    ) -> None:
        self.registry = registry
        self.config = config if config is not None else load_runtime_config()
        self.thread_safe = self.config.thread_safe if thread_safe is None else thread_safe
        self._instances: dict[int, WidgetInstance] = {}

    # --------------------------- bookkeeping ---------------------------
    def _lookup(self, element: Any) -> WidgetInstance | None:
        inst = self._instances.get(id(element))
        if inst is not None and inst.element is element:
            return inst
        return None

    def _require(self, element: Any, operation: str) -> WidgetInstance:
        inst = self._lookup(element)
        if inst is None:
            raise NotBoundError(element, operation)
        return inst

    def _track(self, element: Any) -> weakref.ref:
        key = id(element)

        def _collected(ref: weakref.ref) -> None:
            inst = self._instances.get(key)
            if inst is not None and inst.element_ref is ref:
                del self._instances[key]
                logger.debug(f"Dropped instance of '{inst.definition.name}' for collected element")

        try:
            return weakref.ref(element, _collected)
        except TypeError as e:
            raise HBStateError(
                f"[703] Element of type {type(element).__name__} does not support weak references"
            ) from e

    def is_bound(self, element: Any) -> bool:
        return self._lookup(element) is not None

    def instance(self, element: Any) -> WidgetInstance | None:
        """Return the live instance for ``element``, if any."""
        return self._lookup(element)

    def __len__(self) -> int:
        return len(self._instances)

    # --------------------------- lifecycle ---------------------------
    def bind(
        self,
        element: Any,
        name: str,
        *,
        width: float | None = None,
        height: float | None = None,
        payload: Payload | None = None,
    ) -> WidgetInstance:
        """Bind ``element`` to the widget registered as ``name``.

        On the first bind of an element, ``initialize(element, width,
        height)`` runs exactly once and its return value becomes the instance
        state. Binding an already bound element to the same widget keeps the
        existing instance. When ``payload`` is given it is rendered
        afterwards, exactly as ``set_payload`` would.

        Raises
        ------
        UnknownWidgetError
            - [404] ``name`` is not registered; no instance is created.
        HBConfigError
            - [510] Fixed-size widget bound without width and height.
            - [511] Invalid dimensions.
        HBStateError
            - [702] ``element`` is already bound to another widget.
            - [703] ``element`` cannot be weakly referenced.
        CallbackFailure
            - [800] ``initialize`` (phase ``"initialize"``) or ``render``
              raised.
        """
        definition = self.registry.get(name)
        inst = self._lookup(element)
        if inst is not None:
            if inst.definition.name != definition.name:
                raise HBStateError(
                    f"[702] Element {element!r} is already bound to widget "
                    f"'{inst.definition.name}', cannot bind '{definition.name}'"
                )
        else:
            w, h = resolve_size(
                definition.sizing,
                element,
                width,
                height,
                fallback=self.config.default_size,
            )
            ref = self._track(element)
            state: Any = InstanceState()
            if definition.initialize is not None:
                try:
                    result = definition.initialize(element, w, h)
                except Exception as e:
                    raise CallbackFailure("initialize", definition.name, element, e) from e
                if result is not None:
                    state = result
            inst = WidgetInstance(
                definition=definition,
                element_ref=ref,
                state=state,
                width=w,
                height=h,
                lock=threading.RLock() if self.thread_safe else None,
            )
            self._instances[id(element)] = inst
            logger.debug(f"Bound widget '{definition.name}' ({w}x{h})")

        if payload is not None:
            self.set_payload(element, payload)
        return inst

    def set_payload(self, element: Any, payload: Payload) -> None:
        """Render ``payload`` into the instance bound to ``element``.

        The payload is validated and copied at the boundary, stored as the
        instance's current payload (replacing, never merging, the previous
        one) and handed to ``render(element, payload, state)`` exactly once.

        Raises
        ------
        NotBoundError
            - [701] ``element`` has no instance.
        HBPayloadError
            - [600-604] ``payload`` is not structurally serializable.
        CallbackFailure
            - [800] ``render`` raised; the instance stays bound.
        """
        inst = self._require(element, "set_payload")
        data = normalize_payload(payload)
        with inst.guard():
            inst.payload = data
            try:
                inst.definition.render(element, data, inst.state)
            except Exception as e:
                raise CallbackFailure("render", inst.definition.name, element, e) from e

    def notify_resize(self, element: Any, width: float, height: float) -> None:
        """Record new geometry and forward it to the widget's ``resize``.

        A no-op beyond recording the size when the widget declares no
        ``resize`` callback. Valid before any payload has been set.

        Raises
        ------
        NotBoundError
            - [701] ``element`` has no instance.
        HBConfigError
            - [511] Invalid dimensions.
        CallbackFailure
            - [800] ``resize`` raised; the instance stays bound.
        """
        inst = self._require(element, "notify_resize")
        w, h = check_dimensions(width, height)
        with inst.guard():
            inst.width, inst.height = w, h
            resize = inst.definition.resize
            if resize is None:
                return
            try:
                resize(element, w, h, inst.state)
            except Exception as e:
                raise CallbackFailure("resize", inst.definition.name, element, e) from e

    def unbind(self, element: Any) -> bool:
        """Release the instance bound to ``element``.

        Idempotent: returns False without doing anything when ``element`` is
        not bound.

        Raises
        ------
        CallbackFailure
            - [800] ``destroy`` raised; the element is already unbound.
        """
        inst = self._lookup(element)
        if inst is None:
            return False
        with inst.guard():
            if self._instances.get(id(element)) is not inst:
                return False
            del self._instances[id(element)]
            state, inst.state = inst.state, None
            logger.debug(f"Unbound widget '{inst.definition.name}'")
            destroy = inst.definition.destroy
            if destroy is not None:
                try:
                    destroy(element, state)
                except Exception as e:
                    raise CallbackFailure("destroy", inst.definition.name, element, e) from e
        return True
