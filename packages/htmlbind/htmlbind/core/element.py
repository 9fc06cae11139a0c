"""htmlbind: Headless Element
---------------------------
Minimal DOM-like rendering target for documents built without a browser and
for tests. Any object that supports weak references can be bound; this class
only adds the attributes the built-in widgets and the sizing policy read.
"""

from dataclasses import dataclass, field
from typing import Any

__all__ = ["Element"]


@dataclass(eq=False)
class Element:
    """A rendering target with an id, a measured size and free-form content.

    Attributes
    ----------
    id : str
        Element id.
    width, height : float, optional
        Measured container size; ``None`` when unknown.
    content : Any
        Whatever the bound widget last rendered.
    attrs : dict
        Extra attributes a widget may set (class names, styles, ...).
    """

    id: str
    width: float | None = None
    height: float | None = None
    content: Any = None
    attrs: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<Element #{self.id}>"
