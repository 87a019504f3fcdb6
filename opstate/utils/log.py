"""Logging setup for applications embedding opstate.

Library modules only ever call ``logging.getLogger(__name__)``; nothing is
configured on import.  Applications (and the test-suite) call
:func:`configure_logging` once at startup.
"""

from __future__ import annotations

import logging

from opstate.config import get_settings

LOGGER_NAME = "opstate"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a stream handler to the ``opstate`` logger and set its level.

    *level* defaults to ``Settings.log_level``.  Calling this repeatedly only
    adjusts the level; a second handler is never added.
    """

    resolved = (level or get_settings().log_level).upper()
    numeric = logging.getLevelName(resolved)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {resolved!r}")

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s - %(name)s - %(message)s"))
        logger.addHandler(handler)

    logger.setLevel(numeric)
    return logger
