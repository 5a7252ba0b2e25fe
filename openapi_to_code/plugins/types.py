"""
Plugin contract: the types shared by the registry, the runner and the backends.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..pipeline.analyzer.analyzer import AnalysisResult
from ..pipeline.analyzer.descriptors import OperationTypeMap
from ..pipeline.document import ApiDocument
from ..pipeline.emitters.operations import ClientOperation


class PluginKind(str, Enum):
    """What a plugin produces."""

    HTTP_CLIENT = "http-client"
    PROTOCOL_TOOL_SERVER = "protocol-tool-server"


class ArtifactKind(str, Enum):
    """Classification of a generated file."""

    SERVICE = "service"
    REPORT = "report"
    TYPE_COVERAGE = "type-coverage"
    MANIFEST = "manifest"
    OTHER = "other"


@dataclass(frozen=True)
class CanRunSuccess:
    """The plugin can run in this context."""


@dataclass(frozen=True)
class CanRunFailure:
    """The plugin cannot run; it may name another plugin to try instead."""

    reason: str
    fallback_plugin_id: str | None = None


CanRunResult = CanRunSuccess | CanRunFailure


@dataclass(frozen=True)
class OutputArtifact:
    """A file a plugin declares it will produce."""

    kind: ArtifactKind
    path: Path
    label: str = ""


@dataclass
class PluginOutputPaths:
    """The outputs of a plugin, resolved before generation."""

    artifacts: list[OutputArtifact] = field(default_factory=list)
    service_path: Path | None = None
    report_path: Path | None = None
    type_coverage_report_path: Path | None = None


@dataclass(frozen=True)
class PluginFile:
    """A generated file."""

    path: Path
    content: str


@dataclass
class GenerateResult:
    """The files a plugin generated and the number of methods or tools in them."""

    files: list[PluginFile] = field(default_factory=list)
    method_count: int = 0


@dataclass
class PluginContext:
    """Everything a plugin may read while running. Shared read-only by all plugins of a run."""

    document: ApiDocument
    analysis: AnalysisResult
    operations: list[ClientOperation]
    base_output_path: Path
    models_path: Path
    file_header: str
    is_fastapi_project: bool
    write_file: Callable[[Path, str], None]

    @property
    def operation_types(self) -> OperationTypeMap:
        return self.analysis.operation_types

    @property
    def type_name_map(self) -> dict[str, str]:
        return self.analysis.type_name_map

    @property
    def models_module(self) -> str:
        """Dotted module path of the models file, relative to the output directory."""
        relative = self.models_path.relative_to(self.base_output_path).with_suffix("")
        return ".".join(relative.parts)


@dataclass
class PluginExecutionResult:
    """The outcome of one requested plugin."""

    requested_id: str
    executed_id: str
    kind: PluginKind
    method_count: int
    artifacts: list[OutputArtifact] = field(default_factory=list)
    service_path: Path | None = None
    report_path: Path | None = None
    type_coverage_report_path: Path | None = None


class GeneratorPlugin(ABC):
    """Abstract base class for output backends."""

    # Canonical id and alternative names, matched case-insensitively
    id: str = ""
    aliases: tuple[str, ...] = ()
    kind: PluginKind = PluginKind.HTTP_CLIENT

    @abstractmethod
    def can_run(self, context: PluginContext) -> CanRunResult:
        """
        Probe whether the plugin can run in this context.

        Args:
            context: The run context

        Returns:
            CanRunSuccess, or CanRunFailure with a reason and an optional fallback id
        """

    @abstractmethod
    def resolve_outputs(self, context: PluginContext) -> PluginOutputPaths:
        """
        Resolve the paths the plugin will write.

        Args:
            context: The run context

        Returns:
            Declared artifacts and the notable paths among them
        """

    @abstractmethod
    def generate(self, context: PluginContext) -> GenerateResult:
        """
        Generate the plugin's files. Writing them is left to the runner.

        Args:
            context: The run context

        Returns:
            The generated files and method count
        """
