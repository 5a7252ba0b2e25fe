"""
Atomic file writer for generated output.

Ensures that a write interrupted half-way never leaves a truncated file
behind, and that generated Python is syntactically valid before it lands.
"""

from __future__ import annotations

import ast
import json
import tempfile
from pathlib import Path

from ..errors import OutputValidationError
from ..log import get_logger
from .config import FormatterConfig, OutputConfig
from .formatters import Formatter, get_formatter

logger = get_logger(__name__)


def language_for(path: Path) -> str:
    """Return the validation language of an output path."""
    return {".py": "python", ".json": "json"}.get(path.suffix, "text")


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def write(self, path: Path, content: str, language: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("python", "json" or "text")
            validate: Whether to validate before finalizing

        Raises:
            OutputValidationError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures an atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self.validate_content(path, content, language)

            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def validate_content(self, path: Path, content: str, language: str) -> None:
        """Validate content based on language.

        Raises:
            OutputValidationError: If validation fails
        """
        if language == "python":
            try:
                ast.parse(content)
            except SyntaxError as e:
                raise OutputValidationError(f"Generated Python code for {path} is not valid: {e}") from e
        elif language == "json":
            try:
                json.loads(content)
            except ValueError as e:
                raise OutputValidationError(f"Generated JSON for {path} is not valid: {e}") from e


class OutputWriter:
    """Formats and writes every file of a generation run."""

    def __init__(
        self,
        output: OutputConfig | None = None,
        formatter_config: FormatterConfig | None = None,
        atomic_writer: AtomicWriter | None = None,
    ):
        self.output = output or OutputConfig()
        self.formatter_config = formatter_config or FormatterConfig()
        self.atomic_writer = atomic_writer or AtomicWriter()
        self.written: list[Path] = []
        self._formatter: Formatter | None = None
        if self.formatter_config.enabled:
            self._formatter = get_formatter(self.formatter_config.tool)
            if not self._formatter.is_available():
                logger.warning("Formatter %s is not installed, writing unformatted code", self._formatter.name)
                self._formatter = None

    def __call__(self, path: Path, content: str) -> None:
        self.write_file(path, content)

    def write_file(self, path: Path, content: str) -> None:
        """
        Write one generated file.

        Args:
            path: Target path
            content: File content
        """
        path = Path(path)
        language = language_for(path)
        if language == "python" and self._formatter is not None:
            content = self._formatter.format(content, self.formatter_config)

        if self.output.atomic_write:
            self.atomic_writer.write(path, content, language, validate=self.output.validate_before_write)
        else:
            if self.output.validate_before_write:
                self.atomic_writer.validate_content(path, content, language)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        self.written.append(path)
        logger.debug("Wrote %s", path)
