"""htmlbind: Widget Registry
--------------------------
Process-scoped table mapping widget names to immutable ``WidgetDefinition``
records, with eager and dotted-path lazy registration.

Behavior
--------
- Names are normalized (stripped, lowercased). A name can be registered only
  once for the lifetime of the registry; the first registration stays active
  when a duplicate is rejected.
- Lazy entries store a dotted path (``pkg.mod:attr`` or ``pkg.mod.attr``) and
  are imported on first lookup. The target may be a ``WidgetDefinition`` or a
  zero-argument callable returning one.
- ``seal()`` turns the registry read-only once load-time registration is done.

Notes
-----
- ``default_registry`` is the process-wide instance populated by plugins and
  built-ins. ``WidgetRuntime`` always receives its registry explicitly, so
  tests can use private registries.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .errors import DuplicateNameError, HBRegistryError, UnknownWidgetError, get_logger
from .protocols import WidgetDefinition, WidgetKind
from .sizing import SizingPolicy
from .utils import import_target

__all__ = [
    "WidgetRegistry",
    "default_registry",
    "register",
    "register_lazy",
]

_VALID_NAME = re.compile(r"^[a-z][a-z0-9_.-]{0,63}$")
_CALLBACK_SLOTS = ("initialize", "render", "resize", "destroy")


@dataclass
class _Entry:
    """Internal record describing a registry entry. Not part of the public API."""

    source: str  # "eager" | "dotted"
    definition: WidgetDefinition | None = None
    target: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)


class WidgetRegistry:
    """Registry of named widget definitions.

    Methods
    -------
    register(name, kind, callbacks, *, sizing=None, **meta) -> WidgetDefinition
        Register callbacks (or a prebuilt definition) eagerly. Raises
        DuplicateNameError on duplicates (- [400]).
    register_lazy(name, target, **meta) -> None
        Register a dotted path for deferred import. Raises DuplicateNameError
        on duplicates (- [400]).
    decorator(name, kind="output", **callbacks) -> Callable
        Decorator that registers the decorated render function.
    get(name) -> WidgetDefinition
        Resolve a definition. Raises UnknownWidgetError (- [404]).
    list() -> dict[str, dict[str, Any]]
        Entries with metadata.

    Examples
    --------
    >>> reg = WidgetRegistry()
    >>> _ = reg.register("echo", "output", {"render": lambda el, p, s: None})
    >>> "echo" in reg
    True
    """

    def __init__(self) -> None:
        self._table: dict[str, _Entry] = {}
        self._sealed = False

    # --------------------------- utilities ---------------------------
    @staticmethod
    def _key(name: str) -> str:
        return str(name).strip().lower()

    def _check_writable(self, name: str) -> str:
        """Normalize and validate a name about to be registered."""
        if self._sealed:
            raise HBRegistryError(f"[405] Registry is sealed; cannot register '{name}'")
        key = self._key(name)
        if not _VALID_NAME.match(key):
            raise HBRegistryError(f"[406] Invalid widget name: {name!r}")
        if key in self._table:
            raise DuplicateNameError(key)
        return key

    @staticmethod
    def _stamp(meta: Mapping[str, Any], *, delayed: bool) -> dict[str, Any]:
        full_meta = dict(meta or {})
        full_meta.setdefault("registered_at", datetime.now(UTC).isoformat())
        full_meta.setdefault("delayed_import", delayed)
        return full_meta

    # --------------------------- registration ---------------------------
    def register(
        self,
        name: str,
        kind: WidgetKind | str = WidgetKind.OUTPUT,
        callbacks: Mapping[str, Any] | WidgetDefinition | None = None,
        *,
        sizing: SizingPolicy | Mapping[str, Any] | None = None,
        **meta: Any,
    ) -> WidgetDefinition:
        """Register a widget definition immediately.

        Parameters
        ----------
        name : str
            Public key (case-insensitive).
        kind : WidgetKind or str, default "output"
            Widget kind. Ignored when ``callbacks`` is a ``WidgetDefinition``.
        callbacks : Mapping[str, Callable] or WidgetDefinition
            Mapping with a mandatory ``render`` entry and optional
            ``initialize``, ``resize`` and ``destroy`` entries, or a prebuilt
            definition (renamed to ``name`` when needed).
        sizing : SizingPolicy or Mapping, optional
            Sizing policy; defaults to auto-sizing.
        **meta : Any
            Optional metadata stored with the entry (e.g. ``description``).

        Returns
        -------
        WidgetDefinition
            The stored definition.

        Raises
        ------
        DuplicateNameError
            - [400] ``name`` is already registered.
        HBRegistryError
            - [405] Registry is sealed.
            - [406] ``name`` is not a valid widget name.
            - [407] Missing ``render`` or unknown callback slot.
        """
        key = self._check_writable(name)
        if isinstance(callbacks, WidgetDefinition):
            definition = callbacks if callbacks.name == key else callbacks.renamed(key)
        else:
            definition = self._build(key, kind, callbacks or {}, sizing)
        self._table[key] = _Entry(
            source="eager", definition=definition, meta=self._stamp(meta, delayed=False)
        )
        get_logger().debug(f"Registered widget '{key}' ({definition.kind.value})")
        return definition

    def add(self, definition: WidgetDefinition, **meta: Any) -> WidgetDefinition:
        """Register a prebuilt definition under its own name."""
        return self.register(definition.name, definition.kind, definition, **meta)

    def register_lazy(self, name: str, target: str, **meta: Any) -> None:
        """Register by dotted path without importing until first lookup.

        Raises
        ------
        DuplicateNameError
            - [400] ``name`` is already registered.
        HBRegistryError
            - [405] Registry is sealed.
            - [406] ``name`` is not a valid widget name.
        """
        key = self._check_writable(name)
        full_meta = self._stamp(meta, delayed=True)
        full_meta.setdefault("module_path", target)
        self._table[key] = _Entry(source="dotted", target=str(target), meta=full_meta)
        get_logger().debug(f"Registered widget '{key}' lazily from {target}")

    @staticmethod
    def _build(
        name: str,
        kind: WidgetKind | str,
        callbacks: Mapping[str, Any],
        sizing: SizingPolicy | Mapping[str, Any] | None,
    ) -> WidgetDefinition:
        unknown = set(callbacks) - set(_CALLBACK_SLOTS)
        if unknown:
            raise HBRegistryError(
                f"[407] Widget '{name}': unknown callback slot(s) {sorted(unknown)}"
            )
        if callbacks.get("render") is None:
            raise HBRegistryError(f"[407] Widget '{name}' must define a render callback")
        if sizing is None:
            policy = SizingPolicy()
        elif isinstance(sizing, SizingPolicy):
            policy = sizing
        else:
            policy = SizingPolicy.model_validate(dict(sizing))
        return WidgetDefinition(
            name=name,
            kind=kind,  # type: ignore[arg-type]
            render=callbacks["render"],
            initialize=callbacks.get("initialize"),
            resize=callbacks.get("resize"),
            destroy=callbacks.get("destroy"),
            sizing=policy,
        )

    # --------------------------- decorators ---------------------------
    def decorator(
        self,
        name: str,
        kind: WidgetKind | str = WidgetKind.OUTPUT,
        *,
        initialize: Callable[..., Any] | None = None,
        resize: Callable[..., Any] | None = None,
        destroy: Callable[..., Any] | None = None,
        sizing: SizingPolicy | Mapping[str, Any] | None = None,
        **meta: Any,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Return a decorator that registers the decorated render function."""

        def _wrap(render: Callable[..., Any]) -> Callable[..., Any]:
            callbacks = {
                "render": render,
                "initialize": initialize,
                "resize": resize,
                "destroy": destroy,
            }
            self.register(name, kind, callbacks, sizing=sizing, **meta)
            return render

        return _wrap

    # --------------------------- lookup ---------------------------
    def get(self, name: str) -> WidgetDefinition:
        """Resolve a widget definition by name.

        Raises
        ------
        UnknownWidgetError
            - [404] No widget is registered under ``name``.
        HBRegistryError
            - [402] A lazily registered target failed to import or build.
            - [403] A lazy target did not produce a ``WidgetDefinition``.
        """
        key = self._key(name)
        entry = self._table.get(key)
        if entry is None:
            raise UnknownWidgetError(key)
        if entry.definition is None:
            entry.definition = self._resolve(key, entry)
        return entry.definition

    def _resolve(self, key: str, entry: _Entry) -> WidgetDefinition:
        assert entry.target is not None
        try:
            obj = import_target(entry.target)
            if not isinstance(obj, WidgetDefinition) and callable(obj):
                obj = obj()
        except Exception as e:
            raise HBRegistryError(
                f"[402] Failed to load widget '{key}' from '{entry.target}': {e}"
            ) from e
        if not isinstance(obj, WidgetDefinition):
            raise HBRegistryError(
                f"[403] Target '{entry.target}' for widget '{key}' is not a "
                f"WidgetDefinition (got {type(obj).__name__})"
            )
        get_logger().debug(f"Resolved lazy widget '{key}' from {entry.target}")
        return obj if obj.name == key else obj.renamed(key)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) in self._table

    def __len__(self) -> int:
        return len(self._table)

    def names(self) -> list[str]:
        return sorted(self._table)

    # --------------------------- lifecycle ---------------------------
    def seal(self) -> None:
        """Make the registry read-only."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    # --------------------------- introspection ---------------------------
    def list(self) -> dict[str, dict[str, Any]]:
        """List entries with metadata.

        Lazy entries that were never looked up report ``resolved=False`` and
        carry no kind or sizing information.
        """
        out: dict[str, dict[str, Any]] = {}
        for name in sorted(self._table):
            entry = self._table[name]
            info: dict[str, Any] = {
                "source": entry.source,
                "resolved": entry.definition is not None,
                **entry.meta,
            }
            d = entry.definition
            if d is not None:
                info["kind"] = d.kind.value
                info["sizing"] = d.sizing.mode
                info["callbacks"] = d.callbacks
            out[name] = info
        return out


# Process-wide registry populated at import/plugin-discovery time
default_registry = WidgetRegistry()


def register(name: str, kind: WidgetKind | str = WidgetKind.OUTPUT, **options: Any):
    """Decorator form registration on ``default_registry``.

    Examples
    --------
    >>> @register("hello_widget")  # doctest: +SKIP
    ... def render(element, payload, state):
    ...     element.text = payload["text"]
    """
    return default_registry.decorator(name, kind, **options)


def register_lazy(name: str, target: str, **meta: Any) -> None:
    """Register a dotted path on ``default_registry``."""
    default_registry.register_lazy(name, target, **meta)
