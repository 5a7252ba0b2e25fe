"""
Pipeline generator: runs a whole generation for one API document.

1. Analyze the document into named types and operation types
2. Bind every operation to a client method signature
3. Render and write the models module
4. Run the requested plugins, which write their own files
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .. import __version__
from ..log import get_logger
from ..plugins import PluginContext, PluginExecutionResult, PluginRegistry, PluginRunner, create_default_registry
from ..plugins.registry import normalize_plugin_ids
from ..project import is_fastapi_project
from .analyzer import AnalysisResult, DocumentAnalyzer, NameRegistry
from .config import CodeGeneratorConfig
from .document import ApiDocument, validate_document
from .emitters import ModelsEmitter, PythonTypeEmitter, build_client_operations
from .writer import OutputWriter

logger = get_logger(__name__)

DEFAULT_COMMAND_LINE = "openapi_to_code"
PACKAGE_MARKER = '"""Generated package."""\n'


@dataclass
class GenerationResult:
    """What a generation run produced."""

    analysis: AnalysisResult
    models_path: Path
    plugin_results: list[PluginExecutionResult] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)


class PipelineGenerator:
    """Generates typed Python code from an OpenAPI or Swagger document."""

    def __init__(
        self,
        document: ApiDocument | dict[str, Any],
        config: CodeGeneratorConfig | None = None,
        command_line: str | None = None,
        registry: PluginRegistry | None = None,
        project_root: Path | None = None,
    ):
        """
        Initialize the generator.

        Args:
            document: The API document, raw or wrapped
            config: Generator configuration
            command_line: Command line recorded in the generation comment
            registry: Plugin registry (the built-in plugins by default)
            project_root: Directory inspected to detect a FastAPI project (the working directory by default)

        Raises:
            DocumentError: If a raw document is not structurally valid
        """
        if not isinstance(document, ApiDocument):
            validate_document(document)
            document = ApiDocument(document)
        self.document = document
        self.config = config or CodeGeneratorConfig()
        self.command_line = command_line or DEFAULT_COMMAND_LINE
        self.registry = registry or create_default_registry()
        self.project_root = project_root

    def _generate_comment(self) -> str:
        """Generate the comment line placed at the top of every generated Python file."""
        if not self.config.add_generation_comment:
            return ""
        source = f"{self.document.title} {self.document.version}".strip()
        return f"# Generated by openapi_to_code v{__version__} : {self.command_line}\n# Source: {source}"

    def _package_markers(self, output_dir: Path, models_path: Path) -> list[Path]:
        """``__init__.py`` files making the output directory and the models directories importable."""
        markers = [output_dir / "__init__.py"]
        for parent in reversed(models_path.relative_to(output_dir).parents):
            if parent != Path("."):
                markers.append(output_dir / parent / "__init__.py")
        return markers

    def generate(self) -> GenerationResult:
        """
        Run the generation and write every file.

        Returns:
            GenerationResult with the analysis, the models path and one result per plugin

        Raises:
            PluginError: If a requested plugin is unknown or cannot be run
            OutputValidationError: If a generated Python file does not parse
        """
        output_dir = Path(self.config.output_dir)
        models_path = output_dir / self.config.models_file
        header = self._generate_comment()

        logger.info("Analyzing %s %s", self.document.title, self.document.version)
        analysis = DocumentAnalyzer().analyze(self.document, NameRegistry())
        logger.info(
            "Resolved %d named types for %d paths",
            len(analysis.named_types),
            len(analysis.operation_types),
        )

        # Operations first: their annotations may hoist helper types into the models module
        emitter = PythonTypeEmitter(analysis.registry, analysis.named_types)
        operations = build_client_operations(self.document, analysis, emitter)
        # Parameter schemas are only resolved while building operations
        analysis.declare_unresolved_references()
        models_source = ModelsEmitter(emitter).render(analysis.named_types, header)

        writer = OutputWriter(self.config.output, self.config.formatter)
        for marker in self._package_markers(output_dir, models_path):
            writer(marker, PACKAGE_MARKER)
        writer(models_path, models_source)

        context = PluginContext(
            document=self.document,
            analysis=analysis,
            operations=operations,
            base_output_path=output_dir,
            models_path=models_path,
            file_header=header,
            is_fastapi_project=is_fastapi_project(self.project_root),
            write_file=writer,
        )
        plugin_ids = normalize_plugin_ids(self.config.plugins) or ["httpx"]
        plugin_results = PluginRunner(self.registry).run(plugin_ids, context)

        for result in plugin_results:
            if result.requested_id != result.executed_id:
                logger.info("Plugin %s ran as %s", result.requested_id, result.executed_id)
            for artifact in result.artifacts:
                logger.info("  %s: %s", artifact.label or artifact.kind.value, artifact.path)
        logger.info("Generated %d files in %s", len(writer.written), output_dir)

        return GenerationResult(
            analysis=analysis,
            models_path=models_path,
            plugin_results=plugin_results,
            written=list(writer.written),
        )
