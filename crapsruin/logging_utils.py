import logging
import sys
from typing import Optional


_LEVELS_BY_VERBOSE = {
    0: logging.WARNING,  # default
    1: logging.INFO,
    2: logging.DEBUG,    # 2 or more -> DEBUG
}


def setup_logging(verbose_count: int = 0, logger_name: Optional[str] = None) -> logging.Logger:
    """
    Configure the root (or named) logger from a -v count.

    -v  -> INFO
    -vv -> DEBUG (every roll and settlement)
    default -> WARNING

    Idempotent: calling it again only changes the level.
    """
    level = _LEVELS_BY_VERBOSE.get(verbose_count, logging.DEBUG)
    logger = logging.getLogger(logger_name or "")
    logger.setLevel(level)

    already_configured = any(getattr(h, "_crapsruin_handler", False) for h in logger.handlers)
    if not already_configured:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler._crapsruin_handler = True  # type: ignore[attr-defined]
        fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%H:%M:%S"))
        logger.addHandler(handler)

    return logger
