"""htmlbind: Echo widget
----------------------
Reference output widget. It keeps the last payload in its instance state and
writes its ``text`` field (or the whole payload) into the element content.
Useful as a smoke test for hosts and as a template for widget authors.
"""

from typing import Any

from ..core.protocols import InstanceState, WidgetDefinition

__all__ = ["ECHO"]


def initialize(element: Any, width: float, height: float) -> InstanceState:
    return InstanceState(last_payload=None, size=(width, height), renders=0)


def render(element: Any, payload: dict[str, Any], state: InstanceState) -> None:
    state.last_payload = payload
    state.renders += 1
    if hasattr(element, "content"):
        element.content = payload.get("text", payload)


def resize(element: Any, width: float, height: float, state: InstanceState) -> None:
    state.size = (width, height)


ECHO = WidgetDefinition(
    name="echo",
    initialize=initialize,
    render=render,
    resize=resize,
)
