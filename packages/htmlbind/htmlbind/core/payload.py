"""htmlbind: Payload Codec
------------------------
Validation and JSON encoding of the data/options bundle a host wrapper hands
to a widget instance.

Behavior
--------
- A payload is a mapping from string keys to scalars, nested mappings,
  sequences, numpy arrays/scalars, or ``RawExpression`` leaves.
- ``RawExpression`` marks live code (e.g. a JavaScript formatter function).
  It is an opaque leaf: this module never evaluates it. ``encode_payload``
  emits its source text and lists its path under ``evals`` so the rendering
  side knows what to evaluate.
- Host-only objects (arbitrary class instances, callables, sets, bytes) and
  reference cycles are rejected with the offending dotted path.

Notes
-----
- Paths are dotted and relative to the payload root; list indices appear as
  numeric segments (``"series.0.formatter"``).
"""

import json
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

from .errors import HBPayloadError

__all__ = [
    "Payload",
    "RawExpression",
    "raw",
    "validate_payload",
    "normalize_payload",
    "find_raw_expressions",
    "encode_payload",
]

Payload = Mapping[str, Any]

_SCALARS = (str, int, float, bool, type(None))


@dataclass(frozen=True)
class RawExpression:
    """Source code to be evaluated by the rendering side.

    Examples
    --------
    >>> RawExpression("function(x) { return x * 2; }").code
    'function(x) { return x * 2; }'
    """

    code: str

    def __post_init__(self) -> None:
        if not isinstance(self.code, str):
            raise HBPayloadError(
                f"[601] RawExpression code must be a string, got {type(self.code).__name__}"
            )

    def __str__(self) -> str:
        return self.code


def raw(code: str) -> RawExpression:
    """Shorthand for ``RawExpression(code)``."""
    return RawExpression(code)


def _join(path: str, segment: Any) -> str:
    return f"{path}.{segment}" if path else str(segment)


def _walk(obj: Any, path: str, stack: set[int]) -> Iterator[tuple[str, Any]]:
    """Yield ``(path, leaf)`` pairs, validating structure along the way."""
    if isinstance(obj, RawExpression) or isinstance(obj, _SCALARS):
        yield path, obj
        return
    if isinstance(obj, (np.ndarray, np.generic)):
        if obj.dtype == object:
            raise HBPayloadError(
                f"[604] Object-dtype array at '{path or '<root>'}' is not serializable",
                path,
            )
        yield path, obj
        return
    if isinstance(obj, Mapping) or isinstance(obj, (list, tuple)):
        if id(obj) in stack:
            raise HBPayloadError(f"[603] Reference cycle at '{path or '<root>'}'", path)
        stack.add(id(obj))
        try:
            if isinstance(obj, Mapping):
                for key, value in obj.items():
                    if not isinstance(key, str):
                        raise HBPayloadError(
                            f"[602] Non-string key {key!r} at '{path or '<root>'}'", path
                        )
                    yield from _walk(value, _join(path, key), stack)
            else:
                for i, value in enumerate(obj):
                    yield from _walk(value, _join(path, i), stack)
        finally:
            stack.discard(id(obj))
        return
    raise HBPayloadError(
        f"[604] Value of type {type(obj).__name__} at '{path or '<root>'}' "
        "cannot cross the host/browser boundary",
        path,
    )


def validate_payload(payload: Any) -> None:
    """Check that ``payload`` is structurally serializable.

    Raises
    ------
    HBPayloadError
        - [600] The payload is not a mapping.
        - [602] A mapping key is not a string.
        - [603] The payload contains a reference cycle.
        - [604] A value is a host-only object.
    """
    if not isinstance(payload, Mapping):
        raise HBPayloadError(
            f"[600] Payload must be a mapping, got {type(payload).__name__}"
        )
    for _ in _walk(payload, "", set()):
        pass


def _normalize(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return {k: _normalize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_normalize(v) for v in obj]
    if isinstance(obj, (np.ndarray, np.generic)):
        return obj.tolist()
    return obj


def normalize_payload(payload: Payload) -> dict[str, Any]:
    """Return a validated plain-Python copy of ``payload``.

    Mappings become dicts, tuples become lists and numpy arrays/scalars become
    lists and Python scalars. ``RawExpression`` leaves are kept as-is.
    """
    validate_payload(payload)
    return _normalize(payload)


def find_raw_expressions(payload: Payload) -> list[str]:
    """Dotted paths of every ``RawExpression`` in ``payload``, in walk order."""
    validate_payload(payload)
    return [path for path, leaf in _walk(payload, "", set()) if isinstance(leaf, RawExpression)]


def _to_json_ready(obj: Any) -> Any:
    if isinstance(obj, RawExpression):
        return obj.code
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if isinstance(obj, dict):
        return {k: _to_json_ready(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_json_ready(v) for v in obj]
    return obj


def encode_payload(payload: Payload, **json_kwargs: Any) -> str:
    """Encode ``payload`` as the JSON document a rendering target consumes.

    The document has the shape ``{"x": <payload>, "evals": [<paths>]}``.
    Raw expressions are replaced by their code string and their paths listed
    under ``evals``. Non-finite floats (NaN, infinities) become ``null``.

    Examples
    --------
    >>> encode_payload({"fmt": raw("f")})
    '{"x": {"fmt": "f"}, "evals": ["fmt"]}'
    """
    data = normalize_payload(payload)
    evals = find_raw_expressions(data)
    return json.dumps(
        {"x": _to_json_ready(data), "evals": evals}, allow_nan=False, **json_kwargs
    )
