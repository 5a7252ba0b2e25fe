import json
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .errors import OpenApiToCodeError
from .log import configure_logging, get_logger
from .pipeline import CodeGeneratorConfig, PipelineGenerator, load_document
from .pipeline.formatters import FORMATTERS

logger = get_logger(__name__)


def _split_plugin_ids(values) -> list[str]:
    """Accept both repeated options and comma separated lists."""
    return [part for value in values for part in value.split(",") if part.strip()]


def load_config(path) -> CodeGeneratorConfig:
    """Load a generator configuration from a JSON file."""
    try:
        with open(path) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid configuration file {path}: {e}") from e
    except TypeError as e:
        raise click.ClickException(f"Invalid configuration in {path}: {e}") from e

    if config.formatter.tool.lower() not in FORMATTERS:
        raise click.ClickException(
            f"Unsupported formatter {config.formatter.tool!r} in {path}, expected one of: {', '.join(FORMATTERS)}"
        )
    return config


@click.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option(
    "--plugin",
    "-p",
    "plugins",
    multiple=True,
    help="Plugin id or alias to run (repeatable, or comma separated): httpx, requests, fastapi, mcp",
)
@click.option("--output", "-o", default=None, type=click.Path(file_okay=False), help="Output directory")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option(
    "--format/--no-format",
    "format_code",
    default=None,
    help="Format generated Python with the configured formatter (ruff by default)",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show per-schema and per-operation detail")
@click.option("--quiet", "-q", is_flag=True, default=False, help="Only show warnings and errors")
def openapi_to_code(input_path, plugins, output, config, format_code, verbose, quiet):
    """Generate typed Python models, clients and reports from an OpenAPI document."""
    configure_logging(verbose=verbose, quiet=quiet)

    if config is not None:
        config = load_config(config)
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the configuration file
    plugin_ids = _split_plugin_ids(plugins)
    if plugin_ids:
        config.plugins = plugin_ids
    if output is not None:
        config.output_dir = output
    if format_code is not None:
        config.formatter.enabled = format_code

    try:
        document = load_document(Path(input_path))
        codegen = PipelineGenerator(document, config, command_line=reconstruct_command_line(openapi_to_code))
        result = codegen.generate()
    except OpenApiToCodeError as e:
        raise click.ClickException(str(e)) from e

    for plugin_result in result.plugin_results:
        logger.info("%s: %d methods", plugin_result.executed_id, plugin_result.method_count)
