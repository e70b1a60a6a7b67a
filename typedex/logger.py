# typedex/logger.py
import logging
import os

from typedex import config

_logger = logging.getLogger("typedex")


def _configure():
    if _logger.handlers:
        return
    _logger.setLevel(logging.INFO)
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    stream = logging.StreamHandler()
    stream.setFormatter(fmt)
    _logger.addHandler(stream)
    if not config.LOG_FILE:
        return
    try:
        d = os.path.dirname(config.LOG_FILE)
        if d:
            os.makedirs(d, exist_ok=True)
        fh = logging.FileHandler(config.LOG_FILE, encoding="utf-8")
        fh.setFormatter(fmt)
        _logger.addHandler(fh)
    except OSError as e:
        _logger.warning(f"file logging disabled: {e}")


_configure()


def set_verbose(on: bool):
    """Enable/disable verbose cache logs."""
    config.ENABLE_VERBOSE_LOGGING = bool(on)


def is_verbose() -> bool:
    return config.ENABLE_VERBOSE_LOGGING


def log_action(message: str, level: int = logging.INFO):
    _logger.log(level, message)


def log_verbose(message: str):
    """Only emitted while verbose logging is on (cache hits and the like)."""
    if config.ENABLE_VERBOSE_LOGGING:
        _logger.info(message)
