"""
Template environment shared by the emitters and the built-in plugins.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2

TEMPLATE_DIR = Path(__file__).parent.parent.parent / "templates"


def _py_str(value: Any) -> str:
    """Render a value as a double-quoted Python string literal."""
    return json.dumps(str(value), ensure_ascii=False)


def _docstring(value: Any) -> str:
    """Make text safe to place inside a triple-quoted docstring."""
    text = " ".join(str(value or "").split()).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    # A trailing quote would merge with the closing delimiter
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    return text


def create_environment(language: str = "python") -> jinja2.Environment:
    """
    Create the Jinja2 environment for a template language directory.

    Args:
        language: Sub-directory of the templates directory

    Returns:
        Configured environment
    """
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR / language)),
        keep_trailing_newline=True,
        lstrip_blocks=True,
        trim_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["py_str"] = _py_str
    env.filters["docstring"] = _docstring
    return env
