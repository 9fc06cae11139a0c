"""Lifecycle contract between the runtime and widget definitions."""

from __future__ import annotations

import pytest
from htmlbind.core.element import Element
from htmlbind.core.errors import (
    CallbackFailure,
    DuplicateNameError,
    NotBoundError,
    UnknownWidgetError,
)
from htmlbind.core.protocols import InstanceState


def test_initialize_once_then_render_per_payload(runtime, element, recorded_widget):
    runtime.bind(element, "recorded")
    runtime.set_payload(element, {"n": 1})
    runtime.set_payload(element, {"n": 2})
    runtime.unbind(element)

    assert recorded_widget.phases() == ["initialize", "render", "render", "destroy"]
    assert [args for phase, args in recorded_widget.calls if phase == "render"] == [
        {"n": 1},
        {"n": 2},
    ]


def test_resize_before_any_payload(runtime, element, recorded_widget):
    runtime.bind(element, "recorded")
    runtime.notify_resize(element, 640, 480)

    assert recorded_widget.phases() == ["initialize", "resize"]
    assert runtime.instance(element).payload is None
    assert runtime.instance(element).size == (640, 480)


def test_resize_without_callback_is_noop(registry, runtime, element):
    registry.register("plain", "output", {"render": lambda el, p, s: None})
    runtime.bind(element, "plain")
    runtime.notify_resize(element, 10, 20)
    assert runtime.instance(element).size == (10, 20)


def test_unbind_twice_is_noop(runtime, element, recorded_widget):
    runtime.bind(element, "recorded")
    assert runtime.unbind(element) is True
    assert runtime.unbind(element) is False
    assert recorded_widget.phases().count("destroy") == 1


def test_unknown_widget_creates_no_instance(runtime, element):
    with pytest.raises(UnknownWidgetError):
        runtime.bind(element, "missing")
    assert not runtime.is_bound(element)
    assert runtime.unbind(element) is False


def test_duplicate_registration_keeps_first(registry, runtime, element):
    registry.register("echo", "output", {"render": lambda el, p, s: setattr(el, "content", "first")})
    with pytest.raises(DuplicateNameError):
        registry.register("echo", "output", {"render": lambda el, p, s: setattr(el, "content", "second")})

    runtime.bind(element, "echo", payload={})
    assert element.content == "first"


def test_echo_payload_is_replaced_not_merged(registry, runtime, element):
    def render(el, payload, state):
        state.last_payload = payload

    registry.register("echo", "output", {"render": render})
    runtime.bind(element, "echo")

    runtime.set_payload(element, {"text": "hi", "extra": 1})
    state = runtime.instance(element).state
    assert state.last_payload["text"] == "hi"

    runtime.set_payload(element, {"text": "bye"})
    assert state.last_payload == {"text": "bye"}
    assert runtime.instance(element).payload == {"text": "bye"}


def test_failing_render_keeps_instance_bound(registry, runtime, element, recorder):
    registry.register("fragile", "output", recorder.callbacks(fail={"render"}))
    runtime.bind(element, "fragile")

    with pytest.raises(CallbackFailure) as excinfo:
        runtime.set_payload(element, {"x": 1})

    err = excinfo.value
    assert err.phase == "render"
    assert err.widget == "fragile"
    assert err.element is element
    assert isinstance(err.original, ValueError)
    assert err.__cause__ is err.original

    assert runtime.is_bound(element)
    assert runtime.unbind(element) is True


def test_failing_resize_keeps_instance_bound(registry, runtime, element, recorder):
    registry.register("fragile", "output", recorder.callbacks(fail={"resize"}))
    runtime.bind(element, "fragile")
    with pytest.raises(CallbackFailure) as excinfo:
        runtime.notify_resize(element, 1, 1)
    assert excinfo.value.phase == "resize"
    assert runtime.is_bound(element)


def test_failing_initialize_leaves_no_instance(registry, runtime, element, recorder):
    registry.register("fragile", "output", recorder.callbacks(fail={"initialize"}))
    with pytest.raises(CallbackFailure) as excinfo:
        runtime.bind(element, "fragile")
    assert excinfo.value.phase == "initialize"
    assert not runtime.is_bound(element)
    assert runtime.unbind(element) is False


def test_failing_destroy_still_unbinds(registry, runtime, element, recorder):
    registry.register("fragile", "output", recorder.callbacks(fail={"destroy"}))
    runtime.bind(element, "fragile")
    with pytest.raises(CallbackFailure) as excinfo:
        runtime.unbind(element)
    assert excinfo.value.phase == "destroy"
    assert not runtime.is_bound(element)
    assert runtime.unbind(element) is False


def test_operations_on_unbound_element(runtime, element):
    with pytest.raises(NotBoundError):
        runtime.set_payload(element, {})
    with pytest.raises(NotBoundError):
        runtime.notify_resize(element, 1, 1)


def test_rebind_same_widget_does_not_reinitialize(runtime, element, recorded_widget):
    first = runtime.bind(element, "recorded")
    second = runtime.bind(element, "recorded", payload={"a": 1})
    assert first is second
    assert recorded_widget.phases() == ["initialize", "render"]


def test_default_state_without_initialize(registry, runtime, element):
    seen = []
    registry.register("bare", "output", {"render": lambda el, p, s: seen.append(s)})
    runtime.bind(element, "bare", payload={})
    assert isinstance(seen[0], InstanceState)


def test_elements_are_independent(runtime, recorded_widget):
    a, b = Element("a"), Element("b")
    runtime.bind(a, "recorded")
    runtime.bind(b, "recorded")
    runtime.set_payload(a, {"who": "a"})
    runtime.unbind(b)

    assert runtime.is_bound(a)
    assert not runtime.is_bound(b)
    assert runtime.instance(a).state["renders"] == [{"who": "a"}]
