"""
Formatting through the `ruff format` command, fed on stdin.
"""

from __future__ import annotations

import shutil
import subprocess

from ..config import FormatterConfig
from .base import Formatter, FormatterFailure

# Seconds allowed for a single `ruff format` call
RUFF_TIMEOUT = 30


class RuffFormatter(Formatter):
    name = "ruff"

    def _detect(self) -> bool:
        return shutil.which("ruff") is not None

    @staticmethod
    def command(config: FormatterConfig) -> list[str]:
        """Build the `ruff format` argument list for a config."""
        args = ["ruff", "format", "--stdin-filename", "generated.py"]
        if config.line_length:
            args += ["--line-length", str(config.line_length)]
        if config.target_version:
            args += ["--target-version", config.target_version]
        return args

    def _format(self, code: str, config: FormatterConfig) -> str:
        try:
            completed = subprocess.run(
                self.command(config), input=code, capture_output=True, text=True, timeout=RUFF_TIMEOUT
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise FormatterFailure(str(e)) from e
        if completed.returncode != 0:
            raise FormatterFailure(completed.stderr.strip() or f"exit status {completed.returncode}")
        return completed.stdout
