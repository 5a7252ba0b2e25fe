"""
Detection of the kind of project the generator runs in.
"""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Any

from .log import get_logger

logger = get_logger(__name__)

# Distribution name at the start of a requirement string, e.g. "fastapi[all]>=0.100"
_REQUIREMENT_NAME_PATTERN = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def requirement_name(requirement: str) -> str:
    """Return the normalized distribution name of a requirement string."""
    match = _REQUIREMENT_NAME_PATTERN.match(requirement)
    if not match:
        return ""
    return re.sub(r"[-_.]+", "-", match.group(1)).lower()


def _pyproject_requirements(pyproject: dict[str, Any]) -> list[str]:
    project = pyproject.get("project") or {}
    requirements = list(project.get("dependencies") or [])
    for extra in (project.get("optional-dependencies") or {}).values():
        requirements.extend(extra)
    poetry = (pyproject.get("tool") or {}).get("poetry") or {}
    requirements.extend((poetry.get("dependencies") or {}).keys())
    return [r for r in requirements if isinstance(r, str)]


def project_requirements(root: Path) -> list[str]:
    """
    Collect the declared requirements of a project.

    Reads ``pyproject.toml`` (PEP 621 and Poetry tables) and every
    ``requirements*.txt`` of the project root.

    Args:
        root: Project root directory

    Returns:
        Requirement strings, in file order
    """
    requirements: list[str] = []
    pyproject_path = root / "pyproject.toml"
    if pyproject_path.is_file():
        try:
            with open(pyproject_path, "rb") as f:
                requirements.extend(_pyproject_requirements(tomllib.load(f)))
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring unreadable %s: %s", pyproject_path, e)

    for requirements_path in sorted(root.glob("requirements*.txt")):
        try:
            text = requirements_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable %s: %s", requirements_path, e)
            continue
        for line in text.splitlines():
            line = line.split("#", 1)[0].strip()
            if line and not line.startswith("-"):
                requirements.append(line)
    return requirements


def is_fastapi_project(root: Path | None = None) -> bool:
    """Check if the project at ``root`` (the working directory by default) depends on FastAPI."""
    root = Path.cwd() if root is None else Path(root)
    detected = any(requirement_name(r) == "fastapi" for r in project_requirements(root))
    logger.debug("FastAPI project %sdetected in %s", "" if detected else "not ", root)
    return detected
