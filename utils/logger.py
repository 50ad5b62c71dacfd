import functools
import logging
import time
from typing import Optional, Union

_ROOT_LOGGER_NAME = "navmesh"
_HANDLER_NAME = "navmesh-configured"
_LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Union[int, str] = logging.WARNING, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """Attach a stream handler to the package loggers and set their level.

    Module loggers are created with ``logging.getLogger(__name__)`` under the
    ``core`` package; both ``core`` and the ``navmesh`` logger used by
    :func:`log_calls` are configured.  The handler is tagged by name, and a
    later call replaces the handler installed by an earlier one.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    handler.set_name(_HANDLER_NAME)

    for name in (_ROOT_LOGGER_NAME, "core"):
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for previous in [h for h in logger.handlers if h.get_name() == _HANDLER_NAME]:
            logger.removeHandler(previous)
        logger.addHandler(handler)
    return logging.getLogger(_ROOT_LOGGER_NAME)


def log_calls(func):
    """Decorator logging calls of ``func`` and their execution time at DEBUG."""
    logger = logging.getLogger(f"{_ROOT_LOGGER_NAME}.calls")

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not logger.isEnabledFor(logging.DEBUG):
            return func(*args, **kwargs)

        logger.debug("Call %s", func.__qualname__)
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time
        logger.debug("Return %s after %.6f s", func.__qualname__, elapsed)
        return result

    return wrapper
