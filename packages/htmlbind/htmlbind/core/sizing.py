"""htmlbind: Sizing Policy
------------------------
Declares how a widget obtains its initial dimensions when it is bound.

Behavior
--------
- ``auto`` widgets fill their container: explicit dimensions win, otherwise
  the element's own ``width``/``height`` (minus padding) are measured, then
  the policy defaults, then the runtime defaults.
- ``fixed`` widgets require the caller to pass both dimensions to ``bind``.

Notes
-----
- The policy only affects how ``bind`` picks dimensions; it never changes the
  lifecycle ordering.
"""

import math
from numbers import Real
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import HBConfigError

__all__ = [
    "SizingPolicy",
    "check_dimensions",
    "measure_element",
    "resolve_size",
]


class SizingPolicy(BaseModel):
    """Sizing behaviour of a widget definition.

    Parameters
    ----------
    mode : {'auto', 'fixed'}
        ``auto`` fills the container; ``fixed`` needs explicit dimensions.
    default_width, default_height : int, optional
        Fallback dimensions for ``auto`` widgets when the element cannot be
        measured.
    padding : int
        Pixels subtracted from each side of a measured container.

    Examples
    --------
    >>> SizingPolicy(mode="fixed").is_fixed
    True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Literal["auto", "fixed"] = Field("auto", description="Sizing mode")
    default_width: int | None = Field(default=None, ge=0)
    default_height: int | None = Field(default=None, ge=0)
    padding: int = Field(default=0, ge=0, description="Padding per side in pixels")

    @property
    def is_fixed(self) -> bool:
        return self.mode == "fixed"


def check_dimensions(width: Any, height: Any) -> tuple[float, float]:
    """Validate a ``(width, height)`` pair and return it as numbers.

    Raises
    ------
    HBConfigError
        - [511] A dimension is not a number, not finite, or negative.
    """
    for label, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, Real):
            raise HBConfigError(f"[511] {label} must be a number, got {value!r}")
        if not math.isfinite(value):
            raise HBConfigError(f"[511] {label} must be finite, got {value!r}")
        if value < 0:
            raise HBConfigError(f"[511] {label} must be >= 0, got {value!r}")
    return width, height


def measure_element(element: Any) -> tuple[float | None, float | None]:
    """Read the element's current ``width``/``height`` attributes, if finite numbers."""
    out: list[float | None] = []
    for attr in ("width", "height"):
        value = getattr(element, attr, None)
        if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
            value = None
        out.append(value)
    return out[0], out[1]


def resolve_size(
    policy: SizingPolicy,
    element: Any,
    width: float | None = None,
    height: float | None = None,
    *,
    fallback: tuple[int, int] = (960, 500),
) -> tuple[float, float]:
    """Pick the dimensions ``initialize`` receives for a new instance.

    Parameters
    ----------
    policy : SizingPolicy
        Policy of the widget being bound.
    element : Any
        The element being bound; measured for ``auto`` widgets.
    width, height : float, optional
        Explicit dimensions supplied by the caller of ``bind``.
    fallback : tuple[int, int]
        Runtime-wide defaults used when nothing else applies.

    Returns
    -------
    tuple[float, float]
        ``(width, height)``.

    Raises
    ------
    HBConfigError
        - [510] A fixed-size widget was bound without both dimensions.
        - [511] An explicit dimension is invalid.
    """
    if policy.is_fixed:
        if width is None or height is None:
            raise HBConfigError(
                "[510] fixed-size widget requires explicit width and height"
            )
        return check_dimensions(width, height)

    measured_w, measured_h = measure_element(element)
    pad = 2 * policy.padding
    if measured_w is not None:
        measured_w = max(0, measured_w - pad)
    if measured_h is not None:
        measured_h = max(0, measured_h - pad)

    w = _first(width, measured_w, policy.default_width, fallback[0])
    h = _first(height, measured_h, policy.default_height, fallback[1])
    return check_dimensions(w, h)


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None
