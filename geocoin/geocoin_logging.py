"""This provides logging functionality for Geocoin.

It is built on the standard library logging module. All loggers live under a
single ``GEOCOIN`` hierarchy, so the whole package can be switched on or off
in one place. Use ``log_to_stderr`` to get output on the console.

"""

import inspect
import logging
from functools import wraps
from logging import DEBUG, INFO

__all__ = [
    "DEBUG",
    "INFO",
    "create_module_logger",
    "get_module_logger",
    "log_to_stderr",
    "method_logger",
]

GEOCOIN_LOGGER_NAME = "GEOCOIN"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_loggers: dict[str, logging.Logger] = {}


def create_module_logger(name: str | None = None) -> logging.Logger:
    """Create a module level logger.

    Args:
        name: name of the module, defaults to the module of the caller

    """
    if name is None:
        frm = inspect.stack()[1]
        mod = inspect.getmodule(frm[0])
        name = mod.__name__
    logger = logging.getLogger(f"{GEOCOIN_LOGGER_NAME}.{name}")
    _loggers[name] = logger
    return logger


def get_module_logger(name: str) -> logging.Logger:
    """Return the module logger for name, creating it when needed."""
    try:
        return _loggers[name]
    except KeyError:
        return create_module_logger(name)


def method_logger(name: str):
    """Decorator that logs every call of the wrapped method at debug level.

    Args:
        name: name of the module in which the method is defined

    """
    logger = get_module_logger(name)

    def decorator(method):
        signature = inspect.signature(method)

        @wraps(method)
        def wrapper(self, *args, **kwargs):
            if logger.isEnabledFor(logging.DEBUG):
                bound = signature.bind(self, *args, **kwargs)
                arguments = {k: v for k, v in bound.arguments.items() if k != "self"}
                logger.debug(
                    f"calling {type(self).__name__}.{method.__name__} with {arguments}"
                )
            return method(self, *args, **kwargs)

        return wrapper

    return decorator


def log_to_stderr(level: int | None = None, fmt: str = DEFAULT_FORMAT):
    """Log all Geocoin messages to stderr.

    Args:
        level: the logging level, e.g. ``DEBUG`` or ``INFO``
        fmt: format string for the handler

    """
    logger = logging.getLogger(GEOCOIN_LOGGER_NAME)
    if level is not None:
        logger.setLevel(level)

    if not any(getattr(h, "_geocoin_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        handler._geocoin_handler = True
        logger.addHandler(handler)
    return logger
