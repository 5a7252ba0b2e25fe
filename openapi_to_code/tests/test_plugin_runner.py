"""
Tests for the plugin registry and runner.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import make_document

from openapi_to_code.errors import CircularPluginFallbackError, PluginCannotRunError, PluginError, UnknownPluginError
from openapi_to_code.pipeline.analyzer import DocumentAnalyzer
from openapi_to_code.plugins import (
    ArtifactKind,
    CanRunFailure,
    CanRunSuccess,
    GenerateResult,
    GeneratorPlugin,
    OutputArtifact,
    PluginContext,
    PluginFile,
    PluginKind,
    PluginOutputPaths,
    PluginRegistry,
    PluginRunner,
    create_default_registry,
    normalize_plugin_ids,
)

OUTPUT = Path("out")


class FakePlugin(GeneratorPlugin):
    """A plugin whose can_run result and files are fixed up front."""

    def __init__(self, plugin_id, aliases=(), fallback=None, can_run=True, declare=True):
        self.id = plugin_id
        self.aliases = aliases
        self.fallback = fallback
        self.runnable = can_run
        self.declare = declare
        self.checked = 0

    def can_run(self, context):
        self.checked += 1
        if self.runnable:
            return CanRunSuccess()
        return CanRunFailure(f"{self.id} cannot run here", self.fallback)

    def resolve_outputs(self, context):
        path = context.base_output_path / self.id / "service.py"
        if not self.declare:
            return PluginOutputPaths()
        return PluginOutputPaths(artifacts=[OutputArtifact(ArtifactKind.SERVICE, path)], service_path=path)

    def generate(self, context):
        path = context.base_output_path / self.id / "service.py"
        return GenerateResult(files=[PluginFile(path, f"# {self.id}\n")], method_count=3)


@pytest.fixture
def written():
    return []


@pytest.fixture
def context(written):
    document = make_document()
    return PluginContext(
        document=document,
        analysis=DocumentAnalyzer().analyze(document),
        operations=[],
        base_output_path=OUTPUT,
        models_path=OUTPUT / "models" / "api_models.py",
        file_header="",
        is_fastapi_project=False,
        write_file=lambda path, content: written.append((path, content)),
    )


class TestPluginRegistry:
    """Tests for PluginRegistry"""

    def test_resolve_by_id_and_alias(self):
        plugin = FakePlugin("alpha", aliases=("a", "First"))
        registry = PluginRegistry([plugin])
        assert registry.resolve("alpha") is plugin
        assert registry.resolve(" FIRST ") is plugin
        assert registry.resolve("beta") is None

    def test_duplicate_names_rejected(self):
        with pytest.raises(PluginError, match='"a"'):
            PluginRegistry([FakePlugin("alpha", aliases=("a",)), FakePlugin("a")])

    def test_get_all_keeps_order(self):
        plugins = [FakePlugin("b"), FakePlugin("a")]
        assert PluginRegistry(plugins).get_all() == plugins

    def test_default_registry(self):
        registry = create_default_registry()
        assert [plugin.id for plugin in registry.get_all()] == ["httpx", "requests", "fastapi", "mcp"]
        assert registry.resolve("http-client").id == "httpx"
        assert registry.resolve("fetch").id == "httpx"
        assert registry.resolve("rq").id == "requests"
        assert registry.resolve("FA").id == "fastapi"
        assert registry.resolve("mcp").kind == PluginKind.PROTOCOL_TOOL_SERVER

    def test_normalize_plugin_ids(self):
        assert normalize_plugin_ids([" HTTPX", "", "mcp", "httpx", "  "]) == ["httpx", "mcp"]


class TestPluginSelection:
    """Tests for PluginRunner.select"""

    def test_runnable_plugin(self, context):
        runner = PluginRunner(PluginRegistry([FakePlugin("a")]))
        assert runner.select("A", context).id == "a"

    def test_fallback(self, context):
        runner = PluginRunner(PluginRegistry([FakePlugin("a", can_run=False, fallback="b"), FakePlugin("b")]))
        assert runner.select("a", context).id == "b"

    def test_fallback_chain(self, context):
        registry = PluginRegistry(
            [
                FakePlugin("a", can_run=False, fallback="b"),
                FakePlugin("b", can_run=False, fallback="c"),
                FakePlugin("c"),
            ]
        )
        assert PluginRunner(registry).select("a", context).id == "c"

    def test_unknown_plugin_message_contains_id(self, context):
        runner = PluginRunner(PluginRegistry([FakePlugin("a")]))
        with pytest.raises(UnknownPluginError) as exc_info:
            runner.select("No-Such_Plugin", context)
        assert "No-Such_Plugin" in str(exc_info.value)
        assert exc_info.value.plugin_id == "No-Such_Plugin"

    def test_unknown_fallback(self, context):
        runner = PluginRunner(PluginRegistry([FakePlugin("a", can_run=False, fallback="ghost")]))
        with pytest.raises(UnknownPluginError, match="ghost"):
            runner.select("a", context)

    def test_cannot_run_without_fallback(self, context):
        runner = PluginRunner(PluginRegistry([FakePlugin("a", can_run=False)]))
        with pytest.raises(PluginCannotRunError, match="a cannot run here"):
            runner.select("a", context)

    def test_circular_fallback(self, context):
        a = FakePlugin("a", can_run=False, fallback="b")
        b = FakePlugin("b", can_run=False, fallback="a")
        runner = PluginRunner(PluginRegistry([a, b]))
        with pytest.raises(CircularPluginFallbackError) as exc_info:
            runner.select("a", context)
        assert exc_info.value.chain == ("a", "b", "a")
        assert str(exc_info.value) == 'Circular fallback detected while resolving plugin "a": a -> b -> a.'
        assert (a.checked, b.checked) == (1, 1)

    def test_self_fallback(self, context):
        runner = PluginRunner(PluginRegistry([FakePlugin("a", can_run=False, fallback="a")]))
        with pytest.raises(CircularPluginFallbackError):
            runner.select("a", context)


class TestPluginRun:
    """Tests for PluginRunner.run"""

    def test_fallback_execution_result(self, context, written):
        runner = PluginRunner(PluginRegistry([FakePlugin("a", can_run=False, fallback="b"), FakePlugin("b")]))
        (result,) = runner.run(["a"], context)
        assert result.requested_id == "a"
        assert result.executed_id == "b"
        assert result.method_count == 3
        assert result.service_path == OUTPUT / "b" / "service.py"
        assert written == [(OUTPUT / "b" / "service.py", "# b\n")]

    def test_runs_in_requested_order(self, context, written):
        runner = PluginRunner(PluginRegistry([FakePlugin("a"), FakePlugin("b")]))
        results = runner.run(["b", "a"], context)
        assert [result.executed_id for result in results] == ["b", "a"]
        assert [path for path, _ in written] == [OUTPUT / "b" / "service.py", OUTPUT / "a" / "service.py"]

    def test_circular_fallback_writes_nothing(self, context, written):
        runner = PluginRunner(
            PluginRegistry([FakePlugin("a", can_run=False, fallback="b"), FakePlugin("b", can_run=False, fallback="a")])
        )
        with pytest.raises(CircularPluginFallbackError):
            runner.run(["a"], context)
        assert written == []

    def test_failure_keeps_earlier_files(self, context, written):
        runner = PluginRunner(PluginRegistry([FakePlugin("a")]))
        with pytest.raises(UnknownPluginError):
            runner.run(["a", "missing"], context)
        assert len(written) == 1

    def test_undeclared_artifacts_default_to_files(self, context):
        runner = PluginRunner(PluginRegistry([FakePlugin("a", declare=False)]))
        (result,) = runner.run(["a"], context)
        assert result.artifacts == [OutputArtifact(ArtifactKind.OTHER, OUTPUT / "a" / "service.py")]
        assert result.service_path is None


class TestPluginContext:
    """Tests for PluginContext helpers"""

    def test_models_module(self, context):
        assert context.models_module == "models.api_models"
        assert context.operation_types == {}
        assert context.type_name_map == {}
