"""The ``SitePress`` logger.

Modules log through :data:`logger`; the CLI calls :func:`configure` once
per invocation to pick the level and an optional rotating log file.
Records go to stderr so command output on stdout stays parseable.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

LOGGER_NAME: Final[str] = "SitePress"
_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024

_LevelT = Union[int, str]


def _handlers(fmt: str, log_file: str | Path | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=_MAX_LOG_BYTES, backupCount=3, encoding="utf-8")
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set level and handlers of the project logger.

    With ``replace_handlers`` the previous handlers are closed and dropped,
    otherwise the new ones are added next to them.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    for handler in _handlers(log_format, log_file):
        lg.addHandler(handler)

    lg.propagate = False
    return lg


def init_logging(level: _LevelT = "INFO", log_file: str | Path | None = None) -> logging.Logger:
    return configure(level=level, log_file=log_file)


logger: logging.Logger = init_logging()

__all__ = ["LOGGER_NAME", "logger", "configure", "init_logging"]
