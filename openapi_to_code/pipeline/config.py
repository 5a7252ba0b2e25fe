"""
Configuration for the code generator pipeline.

A configuration file is the JSON form of `CodeGeneratorConfig.to_dict()`;
any subset of keys may be given, the rest keep their defaults.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass
class OutputConfig:
    """How generated files reach the disk.

    Attributes:
        validate_before_write: Parse generated Python and JSON before it replaces the target
        atomic_write: Write through a temporary file and rename it into place
    """

    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Optional formatting pass over generated Python files."""

    enabled: bool = False
    # "ruff" or "black"
    tool: str = "ruff"
    line_length: int = 100
    # ruff/black target, e.g. "py312"
    target_version: str = "py312"
    # black only
    string_normalization: bool = True
    magic_trailing_comma: bool = True


@dataclass
class CodeGeneratorConfig:
    """Options of one generation run."""

    # Plugin ids or aliases, run in order
    plugins: list[str] = field(default_factory=lambda: ["httpx"])
    output_dir: str = "outputs"
    # Relative to output_dir
    models_file: str = "models/api_models.py"
    add_generation_comment: bool = True
    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """
        Create a config from a dictionary.

        Unknown top-level keys are ignored. A single plugin may be given as a string.

        Raises:
            TypeError: If a nested section has a key its dataclass does not define
        """
        config = CodeGeneratorConfig()
        sections = {"formatter": FormatterConfig, "output": OutputConfig}
        for key, value in d.items():
            if key in sections and isinstance(value, dict):
                setattr(config, key, sections[key](**value))
            elif key == "plugins":
                config.plugins = [value] if isinstance(value, str) else list(value)
            elif hasattr(config, key):
                setattr(config, key, value)
        return config

    def to_dict(self) -> dict:
        """Convert the config to plain JSON-compatible data."""
        return asdict(self)
