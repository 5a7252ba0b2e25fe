"""
Logging configuration for the openapi_to_code generator.

Usage in generator modules:
    from openapi_to_code.log import get_logger
    logger = get_logger(__name__)

The root logger name is "openapi_to_code". Log levels are controlled by the CLI.
"""

import logging
import sys

_LOGGER_NAME = "openapi_to_code"


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Return a child logger under the openapi_to_code hierarchy.

    Args:
        name: Module __name__, or None for the root openapi_to_code logger.

    Returns:
        logging.Logger instance
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name.rsplit('.', 1)[-1]}")


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the openapi_to_code logger hierarchy.

    Levels:
        --verbose / -v  -> DEBUG   (per-schema and per-operation detail)
        (default)       -> INFO    (phase headers + summary lines)
        --quiet / -q    -> WARNING (warnings and errors only)

    Args:
        verbose: Enable DEBUG-level output.
        quiet:   Suppress INFO output (WARNING+ only).
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    # Reconfigure the existing handler when called more than once
    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_GeneratorFormatter())
    root_logger.addHandler(handler)
    root_logger.propagate = False


class _GeneratorFormatter(logging.Formatter):
    """Plain messages, with the level name prepended for warnings and errors."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            return f"{record.levelname.lower()}: {message}"
        return message
