"""
Formatting through the black library, imported lazily.
"""

from __future__ import annotations

import importlib
from types import ModuleType

from ..config import FormatterConfig
from .base import Formatter, FormatterFailure


class BlackFormatter(Formatter):
    name = "black"

    def __init__(self):
        super().__init__()
        self._module: ModuleType | None = None

    def _detect(self) -> bool:
        try:
            self._module = importlib.import_module("black")
        except ImportError:
            return False
        return True

    def _mode(self, config: FormatterConfig):
        black = self._module
        targets = set()
        if config.target_version:
            version = getattr(black.TargetVersion, config.target_version.upper(), None)
            if version is not None:
                targets.add(version)
        return black.Mode(
            target_versions=targets,
            line_length=config.line_length,
            string_normalization=config.string_normalization,
            magic_trailing_comma=config.magic_trailing_comma,
        )

    def _format(self, code: str, config: FormatterConfig) -> str:
        try:
            return self._module.format_str(code, mode=self._mode(config))
        except self._module.InvalidInput as e:
            raise FormatterFailure(str(e)) from e
