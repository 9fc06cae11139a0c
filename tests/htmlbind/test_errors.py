import logging

import pytest
from htmlbind.core.errors import (
    CallbackFailure,
    DuplicateNameError,
    HBError,
    HBIOError,
    HBRegistryError,
    HBStateError,
    NotBoundError,
    UnknownWidgetError,
    configure_logging,
    get_logger,
)


@pytest.fixture
def restore_logger():
    yield
    configure_logging()


def test_hierarchy():
    assert issubclass(DuplicateNameError, HBRegistryError)
    assert issubclass(UnknownWidgetError, HBRegistryError)
    assert issubclass(NotBoundError, HBStateError)
    assert issubclass(CallbackFailure, HBError)


def test_coded_messages():
    assert str(DuplicateNameError("echo")) == "[400] Duplicate widget registration: echo"
    assert str(UnknownWidgetError("ghost")) == "[404] Unknown widget: ghost"
    assert str(NotBoundError("el", "set_payload")).startswith("[701] set_payload")


def test_callback_failure_identity():
    original = KeyError("k")
    err = CallbackFailure("resize", "chart", "el", original)
    assert (err.phase, err.widget, err.element, err.original) == ("resize", "chart", "el", original)
    assert "resize callback of widget 'chart'" in str(err)


def test_get_logger_singleton():
    assert get_logger() is get_logger()
    assert get_logger().name == "htmlbind"


def test_configure_logging_file(tmp_path, restore_logger):
    log_file = tmp_path / "htmlbind.log"
    configure_logging(verbose=True, log_file=str(log_file))
    logger = get_logger()
    assert logger.level == logging.DEBUG
    logger.debug("hello file")
    for h in logger.handlers:
        h.flush()
    assert "hello file" in log_file.read_text(encoding="utf-8")


def test_configure_logging_bad_file(tmp_path, restore_logger):
    with pytest.raises(HBIOError, match=r"\[101\]"):
        configure_logging(log_file=str(tmp_path / "missing_dir" / "x.log"))
