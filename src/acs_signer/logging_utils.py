"""Opt-in log output for the ``acs_signer`` package.

The signer runs inside a host process that owns the root logger, so nothing
here touches it. Modules log through ``logging.getLogger(__name__)`` and stay
silent unless the host configures logging. ``configure_logging`` is for hosts
that want the signer's records on stderr (and optionally a file) without
setting up logging themselves; it only attaches handlers to the package
logger, and calling it again swaps out the handlers it installed before.
"""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path

from acs_signer.config import LoggingSettings, load_settings

PACKAGE_LOGGER = "acs_signer"

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_installed_handlers: list[logging.Handler] = []
_handlers_lock = threading.Lock()

_logger = logging.getLogger(__name__)


def _build_handlers(settings: LoggingSettings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if settings.file:
        try:
            Path(settings.file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(settings.file))
        except OSError as exc:
            _logger.warning("Failed to open log file %s: %s", settings.file, exc)

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _remove_installed(package_logger: logging.Logger) -> None:
    for handler in _installed_handlers:
        package_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()


def configure_logging(settings: LoggingSettings | None = None) -> logging.Logger:
    """Send ``acs_signer`` records to stderr and the configured log file.

    Records stop propagating to the host's handlers while these are installed,
    so they are not emitted twice. Returns the package logger.
    """
    if settings is None:
        settings = load_settings().logging
    level = getattr(logging, settings.level.upper(), logging.INFO)
    handlers = _build_handlers(settings)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    with _handlers_lock:
        _remove_installed(package_logger)
        for handler in handlers:
            package_logger.addHandler(handler)
        _installed_handlers.extend(handlers)
        package_logger.setLevel(level)
        package_logger.propagate = False
    return package_logger


def reset_logging() -> None:
    """Undo :func:`configure_logging`, handing records back to the host."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    with _handlers_lock:
        _remove_installed(package_logger)
        package_logger.setLevel(logging.NOTSET)
        package_logger.propagate = True
