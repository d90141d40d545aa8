"""Call logging for the store and engine layers."""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from typing import Any, Callable, TypeVar

from btcc_fantasy.config import get_settings

F = TypeVar("F", bound=Callable[..., Any])

LOGGER_NAME = "btcc_fantasy.engine"
LOG_FILE_NAME = "engine_calls.log"

# Overrides for the settings-provided location (tests point these at tmp_path)
_LOG_DIR: str | None = None
_LOG_FILE: str | None = None

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def _log_paths() -> tuple[str, str]:
    log_dir = _LOG_DIR or get_settings().log_dir
    log_file = _LOG_FILE or os.path.join(log_dir, LOG_FILE_NAME)
    return log_dir, log_file


def get_logger() -> logging.Logger:
    """Return the file logger, creating log dir and handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    with _logger_lock:
        if _logger is not None:
            return _logger

        log_dir, log_file = _log_paths()
        os.makedirs(log_dir, exist_ok=True)

        _logger = logging.getLogger(LOGGER_NAME)
        _logger.setLevel(logging.DEBUG)
        _logger.propagate = False

        if not _logger.handlers:
            handler = logging.FileHandler(log_file, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"),
            )
            _logger.addHandler(handler)

    return _logger


def _summarise(value: Any) -> str:
    # Write batches can hold hundreds of documents
    if isinstance(value, (list, tuple)):
        return f"<{len(value)} items>"
    return repr(value)


def _describe_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    # Skip 'self'
    arg_parts = [_summarise(a) for a in args[1:]]
    arg_parts += [f"{k}={_summarise(v)}" for k, v in kwargs.items()]
    return ", ".join(arg_parts)


def log_store_call(fn: F) -> F:
    """Decorator that logs document-store method calls."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger()
        arg_str = _describe_args(args, kwargs)
        logger.info("CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
            elapsed = time.monotonic() - start
            if result is None:
                count = 0
            elif isinstance(result, (list, tuple)):
                count = len(result)
            else:
                count = 1
            logger.info(
                "OK: %s(%s) -> %d items (%.3fs)",
                fn.__qualname__, arg_str, count, elapsed,
            )
            return result
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                "FAIL: %s(%s) -> %s: %s (%.3fs)",
                fn.__qualname__, arg_str, type(exc).__name__, exc, elapsed,
            )
            raise

    return wrapper  # type: ignore[return-value]


def log_engine_call(fn: F) -> F:
    """Decorator that logs engine service calls."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger()
        arg_str = _describe_args(args, kwargs)
        logger.info("ENGINE CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info(
                "ENGINE OK: %s -> %.3fs", fn.__qualname__, elapsed,
            )
            return result
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                "ENGINE FAIL: %s -> %s: %s (%.3fs)",
                fn.__qualname__, type(exc).__name__, exc, elapsed,
            )
            raise

    return wrapper  # type: ignore[return-value]
