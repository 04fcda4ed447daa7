"""CLI entry point for swagger-gen."""

import importlib
import logging
from pathlib import Path

import click

from swagger_gen.config import GeneratorConfig, load_config
from swagger_gen.errors import SwaggerGenError
from swagger_gen.generator.document import Generator
from swagger_gen.generator.render import FORMATS, render


def _load_target(target: str):
    """Resolve ``module:attr`` to the callable that registers the API."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise click.BadParameter("expected MODULE:ATTR", param_hint="TARGET")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", param_hint="TARGET") from e
    register = getattr(module, attr, None)
    if not callable(register):
        raise click.BadParameter(f"{module_name} has no callable {attr}", param_hint="TARGET")
    return register


@click.group()
def main():
    """Swagger Gen: build Swagger 2.0 documents from Python dataclasses."""
    pass


@main.command()
@click.argument("target")
@click.option("-c", "--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML file with the document header.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file path; stdout when omitted.")
@click.option("--format", "fmt", default="json", type=click.Choice(FORMATS), help="Output format.")
@click.option("-v", "--verbose", is_flag=True, help="Log reflection details.")
def generate(target: str, config_path: Path | None, output: Path | None, fmt: str, verbose: bool):
    """Generate a document from TARGET, a MODULE:ATTR callable taking a Generator."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    register = _load_target(target)
    try:
        config = load_config(config_path) if config_path else GeneratorConfig()
        gen = Generator.from_config(config)
        register(gen)
        document = gen.document()
    except SwaggerGenError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Found {len(document.paths)} paths and {len(document.definitions or {})} definitions.", err=True)
    result = render(document, fmt)

    if output is None:
        click.echo(result)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")
    click.echo(f"Document saved to {output}", err=True)
