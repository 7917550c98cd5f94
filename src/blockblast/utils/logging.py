from __future__ import annotations

import logging
from typing import Union

from rich.logging import RichHandler


LEVELS = ("debug", "info", "warning", "error")


def parse_level(level: Union[str, int]) -> int:
    """Map a CLI level name (or an int level) to a logging level"""
    if isinstance(level, int):
        return level
    name = str(level).lower()
    if name not in LEVELS:
        raise ValueError(f"unknown log level {level!r}, expected one of {', '.join(LEVELS)}")
    return getattr(logging, name.upper())


def setup_logger(*, name: str = "blockblast", use_rich: bool = True, level: Union[str, int] = "info") -> logging.Logger:
    """Configure the package logger; engine modules log under ``blockblast.*``.

    Rich output is for interactive runs, the plain formatter for piped logs.
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(parse_level(level))

    handler: logging.Handler
    if use_rich:
        handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["LEVELS", "parse_level", "setup_logger"]
