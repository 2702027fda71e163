"""Environment switches shared by the command line and the REPL."""

from __future__ import annotations

import logging
import os

_TRUTHY = ("1", "true", "yes", "on")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def debug_enabled() -> bool:
    """WOLANG_DEBUG turns on DEBUG logging (e.g. token queue rollbacks)."""
    return _env_flag("WOLANG_DEBUG")


def debug_py_trace_enabled() -> bool:
    """WOLANG_DEBUG_PY_TRACE prints the Python traceback alongside syntax errors."""
    return _env_flag("WOLANG_DEBUG_PY_TRACE")


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug_enabled() else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
