"""Centralized logging configuration for the ``expense_analysis`` package.

This module provides two public helpers:

- ``configure_logging(...)``: attach a single ``StreamHandler`` to the package
  root logger (``"expense_analysis"``). Called once by the CLI at startup.
- ``get_logger(name)``: acquire a logger by name, ensuring that the package
  root logger has at least a ``NullHandler`` attached when not configured.

Library modules never attach their own handlers. They call
``get_logger("expense_analysis.<module>")`` and rely on the host application
(or the CLI) to configure output.
"""

from __future__ import annotations

import logging
import os
import sys

_PKG_LOGGER_NAME = "expense_analysis"
_ENV_LEVEL = "EXPENSE_ANALYSIS_LOG_LEVEL"
_CONFIGURED = False
_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
# Bound at import so later sys.stderr swaps (e.g. test output capture) do not
# redirect an already configured handler.
_LOG_STREAM = sys.stderr


def _level_from_name(name: str) -> int | None:
    # Numeric strings or standard level names (INFO/DEBUG/etc.).
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        parsed = _level_from_name(level)
        if parsed is not None:
            return parsed
    env_val = os.getenv(_ENV_LEVEL)
    if env_val:
        parsed = _level_from_name(env_val)
        if parsed is not None:
            return parsed
    return logging.INFO


def configure_logging(level: int | str | None = None) -> None:
    """Configure the package root logger exactly once.

    Parameters
    ----------
    level:
        Logging level as ``int`` or level-name string. If ``None``, defaults to
        ``EXPENSE_ANALYSIS_LOG_LEVEL`` when set, otherwise ``logging.INFO``.
    Records go to ``sys.stderr`` as ``"<time> <logger> <LEVEL> <message>"``.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(_LOG_STREAM)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, attaching a ``NullHandler`` to the package root
    when logging has not been configured yet."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
