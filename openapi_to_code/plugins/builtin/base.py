"""
Shared machinery of the template-rendered HTTP client backends.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ...pipeline.emitters import AnnotationImports, ClientOperation, create_environment
from ...pipeline.reports import create_missing_definitions_report, create_type_coverage_report, render_report
from ..types import (
    ArtifactKind,
    CanRunResult,
    CanRunSuccess,
    GenerateResult,
    GeneratorPlugin,
    OutputArtifact,
    PluginContext,
    PluginFile,
    PluginKind,
    PluginOutputPaths,
)

PACKAGE_MARKER = '"""Generated package."""\n'


def merged_imports(operations: list[ClientOperation], *typing_names: str) -> AnnotationImports:
    """Collect the names every operation annotation needs."""
    imports = AnnotationImports(typing=set(typing_names))
    for operation in operations:
        imports.update(operation.imports)
    return imports


def package_file(directory: Path) -> PluginFile:
    """The ``__init__.py`` that makes a plugin directory importable."""
    return PluginFile(directory / "__init__.py", PACKAGE_MARKER)


class HttpClientPlugin(GeneratorPlugin):
    """
    A backend rendering the client operations through one template.

    Subclasses set the output directory, the service file name and the
    template, and may add template variables with ``template_context``.
    """

    kind = PluginKind.HTTP_CLIENT

    directory: str = "http_client"
    service_file: str = "api_client.py"
    template_name: str = ""
    label: str = "HTTP client"

    # Inserted before ".json" in the report file names
    report_suffix: str = ""

    # Whether resolve_outputs lists the artifacts
    declare_artifacts: bool = True

    # Typing names the template uses regardless of the operations
    base_typing_names: tuple[str, ...] = ("Any",)

    def can_run(self, context: PluginContext) -> CanRunResult:
        return CanRunSuccess()

    def output_directory(self, context: PluginContext) -> Path:
        return context.base_output_path / self.directory

    def resolve_outputs(self, context: PluginContext) -> PluginOutputPaths:
        directory = self.output_directory(context)
        service_path = directory / self.service_file
        report_path = directory / f"missing-swagger-definitions{self.report_suffix}.json"
        type_coverage_report_path = directory / f"type-coverage-report{self.report_suffix}.json"
        artifacts = []
        if self.declare_artifacts:
            artifacts = [
                OutputArtifact(ArtifactKind.SERVICE, service_path, self.label),
                OutputArtifact(ArtifactKind.REPORT, report_path, "Missing definitions report"),
                OutputArtifact(ArtifactKind.TYPE_COVERAGE, type_coverage_report_path, "Type coverage report"),
            ]
        return PluginOutputPaths(
            artifacts=artifacts,
            service_path=service_path,
            report_path=report_path,
            type_coverage_report_path=type_coverage_report_path,
        )

    def template_context(self, context: PluginContext) -> dict[str, Any]:
        """Extra variables for the service template."""
        return {}

    def render_service(self, context: PluginContext) -> str:
        """Render the service module."""
        imports = merged_imports(context.operations, *self.base_typing_names)
        template = create_environment("python").get_template(self.template_name)
        return template.render(
            header=context.file_header,
            title=context.document.title,
            version=context.document.version,
            models_module=context.models_module,
            typing_imports=sorted(imports.typing),
            model_imports=sorted(imports.models),
            operations=context.operations,
            **self.template_context(context),
        )

    def generate(self, context: PluginContext) -> GenerateResult:
        outputs = self.resolve_outputs(context)
        missing_definitions = create_missing_definitions_report(context.document, context.analysis)
        type_coverage = create_type_coverage_report(context.document, context.analysis)
        files = [
            package_file(self.output_directory(context)),
            PluginFile(outputs.service_path, self.render_service(context)),
            PluginFile(outputs.report_path, render_report(missing_definitions)),
            PluginFile(outputs.type_coverage_report_path, render_report(type_coverage)),
        ]
        return GenerateResult(files=files, method_count=len(context.operations))
