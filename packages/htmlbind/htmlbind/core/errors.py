"""htmlbind: Error Taxonomy and Logging
-------------------------------------

Exception types, warnings, and the shared logger for htmlbind. Every error
raised by the registry, the lifecycle runtime, the payload codec or the
configuration layer inherits from ``HBError`` and carries a numeric code in
its message (``"[404] Unknown widget: ..."``).

Error Hierarchy
---------------
- HBError: Base exception for all htmlbind errors
- HBIOError: File access errors (100-199)
- HBRegistryError: Registration and lookup errors (400-499)
  - DuplicateNameError: Name already registered (400)
  - UnknownWidgetError: Name not registered (404)
- HBConfigError: Configuration and sizing errors (500-599)
- HBPayloadError: Payload is not structurally serializable (600-699)
- HBStateError: Instance bookkeeping errors (700-799)
  - NotBoundError: Element has no live instance (701)
- CallbackFailure: A widget callback raised (800)

Logging
-------
The shared logger is named "htmlbind". The runtime only emits DEBUG traces on
it; errors are raised to the caller and never logged on their behalf.
"""

import logging
import os
from typing import Any

__all__ = [
    "HBError",
    "HBIOError",
    "HBRegistryError",
    "DuplicateNameError",
    "UnknownWidgetError",
    "HBConfigError",
    "HBPayloadError",
    "HBStateError",
    "NotBoundError",
    "CallbackFailure",
    "HBWarning",
    "get_logger",
    "configure_logging",
]


# =============================================================================
# Exception Hierarchy
# =============================================================================


class HBError(Exception):
    """Base exception for all htmlbind errors."""

    pass


class HBIOError(HBError):
    """File access errors (Code 100-199).

    Raised when a manifest or configuration file cannot be found or read.
    """

    pass


class HBRegistryError(HBError):
    """Registration and lookup errors (Code 400-499)."""

    pass


class DuplicateNameError(HBRegistryError):
    """A widget name was registered twice (Code 400).

    The earlier registration is left untouched.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"[400] Duplicate widget registration: {name}")
        self.name = name


class UnknownWidgetError(HBRegistryError):
    """A widget name was requested that has no definition (Code 404)."""

    def __init__(self, name: str) -> None:
        super().__init__(f"[404] Unknown widget: {name}")
        self.name = name


class HBConfigError(HBError):
    """Configuration-related errors (Code 500-599).

    Raised when runtime configuration, manifests or sizing arguments are
    invalid, e.g. a fixed-size widget bound without explicit dimensions.
    """

    pass


class HBPayloadError(HBError):
    """Payload validation errors (Code 600-699).

    Raised when a payload contains values that cannot cross the host/browser
    boundary (non-string keys, host-only objects, reference cycles).
    """

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class HBStateError(HBError):
    """Instance bookkeeping errors (Code 700-799)."""

    pass


class NotBoundError(HBStateError):
    """An operation targeted an element with no live instance (Code 701).

    This indicates an ordering bug in the caller.
    """

    def __init__(self, element: Any, operation: str) -> None:
        super().__init__(f"[701] {operation}: element {element!r} is not bound")
        self.element = element
        self.operation = operation


class CallbackFailure(HBError):
    """A user-supplied widget callback raised (Code 800).

    The original exception is available as ``original`` and is also chained
    as ``__cause__``.

    Attributes
    ----------
    phase : str
        Lifecycle phase the callback belonged to: ``"initialize"``,
        ``"render"``, ``"resize"`` or ``"destroy"``.
    widget : str
        Name of the widget definition.
    element : Any
        The element the callback was invoked for.
    original : BaseException
        The exception raised inside the callback.
    """

    def __init__(
        self, phase: str, widget: str, element: Any, original: BaseException
    ) -> None:
        super().__init__(
            f"[800] {phase} callback of widget '{widget}' failed for "
            f"element {element!r}: {type(original).__name__}: {original}"
        )
        self.phase = phase
        self.widget = widget
        self.element = element
        self.original = original


# =============================================================================
# Warning Hierarchy
# =============================================================================


class HBWarning(Warning):
    """Base warning for all htmlbind warnings."""

    pass


# =============================================================================
# Logger Configuration
# =============================================================================

_logger: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Get the shared htmlbind logger instance.

    Returns
    -------
    logging.Logger
        The singleton logger named "htmlbind" configured at INFO level by
        default with a console handler. Handlers are created lazily on first use.

    Examples
    --------
    >>> logger = get_logger()
    >>> logger.name
    'htmlbind'

    """
    global _logger
    if _logger is None:
        _logger = logging.getLogger("htmlbind")
        _logger.setLevel(logging.INFO)
        if not _logger.handlers:
            h = logging.StreamHandler()
            fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            h.setFormatter(fmt)
            _logger.addHandler(h)
    return _logger


def configure_logging(
    verbose: bool = False,
    log_file: str | None = None,
    as_json: bool = False,
    suppress_warnings: bool = False,
) -> None:
    """Configure the shared logger outputs and warning capture.

    Parameters
    ----------
    verbose : bool, default False
        When True, set logger level to DEBUG; otherwise INFO.
    log_file : str or None, default None
        Optional file path to append logs to.
    as_json : bool, default False
        Emit logs in a compact JSON line format when True; otherwise plain text.
    suppress_warnings : bool, default False
        Route Python warnings into logging and raise their level to ERROR when
        True; otherwise capture warnings at WARNING level.

    Raises
    ------
    HBIOError
        - [101] The log file cannot be opened.

    """
    logger = get_logger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    ch = logging.StreamHandler()
    if as_json:
        fmt = logging.Formatter(
            '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","msg":"%(message)s"}'
        )
    else:
        fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:
        try:
            fh = logging.FileHandler(os.fspath(log_file), encoding="utf-8")
        except OSError as e:
            raise HBIOError(f"[101] Cannot open log file {log_file}: {e}") from e
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(
        logging.ERROR if suppress_warnings else logging.WARNING
    )
