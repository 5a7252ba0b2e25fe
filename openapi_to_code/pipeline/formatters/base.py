"""
Base class for post-processing formatters of generated Python code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...log import get_logger
from ..config import FormatterConfig

logger = get_logger(__name__)


class FormatterFailure(Exception):
    """Raised by a formatter backend when it rejects the generated code."""


class Formatter(ABC):
    """
    A formatter backend, checked once and applied to each generated Python file.

    Subclasses implement `_detect` and `_format`. A failing backend never blocks
    generation: the code is logged and written unformatted.
    """

    # Value of FormatterConfig.tool selecting this formatter
    name: str = ""

    def __init__(self):
        self._available: bool | None = None

    def is_available(self) -> bool:
        """Whether the backing tool is installed."""
        if self._available is None:
            self._available = self._detect()
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format generated code.

        Args:
            code: Python source
            config: Formatter settings

        Returns:
            The formatted code, or `code` itself when the tool is missing or fails
        """
        if not self.is_available():
            return code
        try:
            return self._format(code, config)
        except FormatterFailure as e:
            logger.warning("%s could not format generated code: %s", self.name, e)
            return code

    @abstractmethod
    def _detect(self) -> bool:
        """Check for the tool."""

    @abstractmethod
    def _format(self, code: str, config: FormatterConfig) -> str:
        """Run the tool, raising FormatterFailure on rejection."""
