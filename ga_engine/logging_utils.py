"""
Logging setup for the GA engine.

Library modules only create module-level loggers; handlers are installed
by the application (the CLI) through configure_logging.
"""

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
TRUNCATION_MARKER = "... [TRUNCATED]"


class SizeLimitedFormatter(logging.Formatter):
    """
    Formatter that truncates over-long messages.

    The limit applies to the rendered message only, not to the timestamp
    and level prefix.
    """

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, max_msg_sz: int = 512):
        if max_msg_sz <= len(TRUNCATION_MARKER):
            raise ValueError(f"max_msg_sz must exceed {len(TRUNCATION_MARKER)} characters")
        super().__init__(fmt, datefmt)
        self.max_msg_sz = max_msg_sz

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if len(message) <= self.max_msg_sz:
            return super().format(record)

        original_msg, original_args = record.msg, record.args
        record.msg = message[:self.max_msg_sz - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER
        record.args = None
        try:
            return super().format(record)
        finally:
            record.msg, record.args = original_msg, original_args


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(
    level: Union[int, str] = "INFO",
    log_file: Optional[str] = None,
    max_msg_sz: int = 512
) -> logging.Logger:
    """
    Install console (and optional file) handlers on the engine loggers.

    Calling it again replaces the handlers installed by a previous call.

    Args:
        level: Logging level name or number
        log_file: Optional path of a log file (appended to)
        max_msg_sz: Maximum rendered message length

    Returns:
        The configured "ga_engine" logger
    """
    formatter = SizeLimitedFormatter(LOG_FORMAT, DATE_FORMAT, max_msg_sz=max_msg_sz)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    resolved = _resolve_level(level)
    logger = logging.getLogger("ga_engine")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
    return logger
