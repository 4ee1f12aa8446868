"""CLI entry point for openapi-tool-compiler."""

import json
import logging
from pathlib import Path

import click

from openapi_tool_compiler.config import CompilerSettings
from openapi_tool_compiler.errors import DocumentLoadError
from openapi_tool_compiler.parser.base import ToolDefinition
from openapi_tool_compiler.parser.swagger import parse_openapi


def _compile_doc(doc_path: Path, base_url: str | None, exclude: tuple[str, ...]) -> dict[str, ToolDefinition]:
    """Compile a document file, turning load errors into CLI errors."""
    settings = CompilerSettings(base_url=base_url, removed_params=frozenset(exclude))
    try:
        return parse_openapi(doc_path, settings)
    except DocumentLoadError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """OpenAPI Tool Compiler: compile OpenAPI operations into tool definitions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command(name="compile")
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output JSON file (default: stdout).")
@click.option("--base-url", default=None, help="Override the document's server URL.")
@click.option("--exclude", multiple=True, help="Parameter name to remove from every tool (repeatable).")
def compile_cmd(doc_path: Path, output: Path | None, base_url: str | None, exclude: tuple[str, ...]):
    """Compile an OpenAPI document into a JSON tool catalog."""
    tools = _compile_doc(doc_path, base_url, exclude)
    catalog = {name: tool.to_dict() for name, tool in tools.items()}
    text = json.dumps(catalog, indent=2, ensure_ascii=False)

    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(f"Compiled {len(tools)} tools to {output}", err=True)


@main.command(name="list")
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--base-url", default=None, help="Override the document's server URL.")
@click.option("--exclude", multiple=True, help="Parameter name to remove from every tool (repeatable).")
def list_cmd(doc_path: Path, base_url: str | None, exclude: tuple[str, ...]):
    """List the tools an OpenAPI document compiles to."""
    tools = _compile_doc(doc_path, base_url, exclude)
    for name, tool in tools.items():
        click.echo(f"{tool.execute.method:<7} {tool.execute.url} {name}")
    click.echo(f"Found {len(tools)} tools.", err=True)
