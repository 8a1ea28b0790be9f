"""
Log module for task scripts: info, warn, error, debug.
"""

import logging
from types import SimpleNamespace
from typing import Any

SCRIPT_LOGGER_NAME = "text_transformer.script"

logger = logging.getLogger(SCRIPT_LOGGER_NAME)


def make_log_module(
    *,
    logger_instance: logging.Logger | None = None,
    extra: dict[str, Any] | None = None,
) -> Any:
    """Build the `log` object: info, warn, error, debug. extra (e.g. script, task) is attached to every record."""
    log = logger_instance or logger
    ext = extra or {}

    def _log(level: int, msg: Any, *args: Any) -> None:
        log.log(level, str(msg), *args, extra=dict(ext) if ext else None)

    def info(msg: Any, *args: Any) -> None:
        _log(logging.INFO, msg, *args)

    def warn(msg: Any, *args: Any) -> None:
        _log(logging.WARNING, msg, *args)

    def error(msg: Any, *args: Any) -> None:
        _log(logging.ERROR, msg, *args)

    def debug(msg: Any, *args: Any) -> None:
        _log(logging.DEBUG, msg, *args)

    return SimpleNamespace(info=info, warn=warn, error=error, debug=debug)
