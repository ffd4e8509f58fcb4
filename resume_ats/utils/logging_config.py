"""
Logging setup for the Resume ATS service.

Everything logs under the ``resume_ats`` namespace. The preset is picked from
``ENVIRONMENT``; ``LOG_LEVEL`` overrides the preset level and ``LOG_DIR`` moves
the rotating log files.
"""
import functools
import inspect
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

ROOT_LOGGER = "resume_ats"

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-36s | %(funcName)-22s:%(lineno)-4d | %(message)s",
}

# environment -> (level, write log files, format)
PRESETS = {
    "production": ("INFO", True, "detailed"),
    "development": ("DEBUG", True, "detailed"),
    "testing": ("WARNING", False, "simple"),
}

MAX_LOG_BYTES = 5 * 1024 * 1024


def _file_handler(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(path),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": 3,
        "encoding": "utf8",
    }


def setup_logging(level: str = "INFO", log_to_file: bool = True, format_style: str = "detailed") -> None:
    """
    Configure the ``resume_ats`` logger tree.

    Scores and analyses go to the daily log, errors additionally to a
    separate file so failed feedback calls and DB errors are easy to find.
    """
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": format_style if format_style in FORMATS else "detailed",
            "stream": "ext://sys.stdout",
        }
    }

    if log_to_file:
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        day = datetime.now().strftime('%Y%m%d')
        handlers["file"] = _file_handler(log_dir / f"resume_ats_{day}.log", level)
        handlers["error_file"] = _file_handler(log_dir / f"resume_ats_errors_{day}.log", "ERROR")

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in FORMATS.items()
        },
        "handlers": handlers,
        "loggers": {
            ROOT_LOGGER: {"level": level, "handlers": list(handlers), "propagate": False},
        },
    })

    get_logger("logging").debug(f"Logging configured - level {level}, files: {log_to_file}")


def configure_for_environment() -> None:
    """Apply the preset for ``ENVIRONMENT`` (development when unset)."""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    level, log_to_file, format_style = PRESETS.get(environment, PRESETS["production"])
    setup_logging(
        level=os.getenv("LOG_LEVEL", level).upper(),
        log_to_file=log_to_file,
        format_style=format_style,
    )


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``resume_ats`` namespace (module names already are)."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def log_function_call(func):
    """
    Log entry, duration and failure of a call at debug level.
    Exceptions are logged and re-raised unchanged.
    """
    logger = get_logger(func.__module__)

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()
            logger.debug(f"Entering {func.__name__}")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in {func.__name__} after {time.time() - start_time:.3f}s: {e}")
                raise
            logger.debug(f"Completed {func.__name__} in {time.time() - start_time:.3f}s")
            return result
        return async_wrapper

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        start_time = time.time()
        logger.debug(f"Entering {func.__name__}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error in {func.__name__} after {time.time() - start_time:.3f}s: {e}")
            raise
        logger.debug(f"Completed {func.__name__} in {time.time() - start_time:.3f}s")
        return result
    return sync_wrapper


class PerformanceMonitor:
    """Times a block; warns when it runs past ``threshold_ms``."""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.elapsed_ms = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.time() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(
                f"{self.operation_name} took {self.elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)"
            )
        else:
            self.logger.debug(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False


configure_for_environment()
