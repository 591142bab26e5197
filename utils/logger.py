import functools
import logging
import time
from typing import Optional

# Verbosity of ``log_calls``
LOG_LEVELS = {"NONE": 0, "BASIC": 1, "DETAILED": 2}
LOG_LEVEL = LOG_LEVELS["BASIC"]  # Can be changed at runtime

_CALLS_LOGGER = logging.getLogger("tilemap.calls")


def log_calls(func):
    """Decorator logging calls to ``func`` and how long they took."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if LOG_LEVEL == 0 or not _CALLS_LOGGER.isEnabledFor(logging.DEBUG):
            return func(*args, **kwargs)

        _CALLS_LOGGER.debug("Call %s args=%r kwargs=%r", func.__qualname__, args, kwargs)
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time

        if LOG_LEVEL >= 2:
            _CALLS_LOGGER.debug("Return %s: %r", func.__qualname__, result)
        _CALLS_LOGGER.debug("Elapsed %s: %.6f s", func.__qualname__, elapsed)
        return result

    return wrapper


_GENERATION_LOGGER_NAME = "tilemap"
_GENERATION_LOGGER: Optional[logging.Logger] = None


def get_generation_logger(level: int | str = logging.WARNING) -> logging.Logger:
    """Return the shared root logger of the layout generator.

    The first call installs a stream handler; later calls only adjust the level.
    """

    global _GENERATION_LOGGER
    if _GENERATION_LOGGER is not None:
        _GENERATION_LOGGER.setLevel(level)
        return _GENERATION_LOGGER

    logger = logging.getLogger(_GENERATION_LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)

    logger.propagate = True
    _GENERATION_LOGGER = logger
    return logger


def configure_module_logging(level: int | str = logging.WARNING) -> None:
    """Route ``modules.tilemap`` records through the generator's handler."""

    get_generation_logger(level)
    module_logger = logging.getLogger("modules.tilemap")
    module_logger.setLevel(level)
    if not module_logger.handlers:
        module_logger.handlers = list(logging.getLogger(_GENERATION_LOGGER_NAME).handlers)
