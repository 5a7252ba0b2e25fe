"""
Optional formatting of generated Python files with ruff or black.
"""

from __future__ import annotations

from .base import Formatter, FormatterFailure
from .black_formatter import BlackFormatter
from .ruff_formatter import RuffFormatter

FORMATTERS: dict[str, type[Formatter]] = {cls.name: cls for cls in (RuffFormatter, BlackFormatter)}


def get_formatter(tool: str) -> Formatter:
    """
    Instantiate the formatter named in FormatterConfig.tool.

    Raises:
        ValueError: If no formatter has that name
    """
    cls = FORMATTERS.get(tool.strip().lower())
    if cls is None:
        raise ValueError(f"Unsupported formatter {tool!r}, expected one of: {', '.join(FORMATTERS)}")
    return cls()


__all__ = [
    "FORMATTERS",
    "BlackFormatter",
    "Formatter",
    "FormatterFailure",
    "RuffFormatter",
    "get_formatter",
]
