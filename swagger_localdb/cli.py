"""CLI entry point for swagger-to-localdb."""

import logging
from pathlib import Path

import click

from swagger_localdb import __version__
from swagger_localdb.codegen import generate as generate_tree
from swagger_localdb.config import load_config
from swagger_localdb.loader import SpecValidationError, load_spec
from swagger_localdb.normalizer import normalize
from swagger_localdb.seed import load_seed_data


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(version=__version__)
def main():
    """Generate TypeScript API files with IndexedDB mock implementations from OpenAPI specs."""
    pass


@main.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=Path("./generated-api"), show_default=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for generated files.")
@click.option("-d", "--db-name", default="mockApiDB", show_default=True, help="IndexedDB database name.")
@click.option("--delay", default=200, show_default=True, type=click.IntRange(min=0), help="Response delay simulation in milliseconds.")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Path to a JSON or YAML configuration file.")
@click.option("--seed", "seed_path", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Path to a JSON or YAML seed data file.")
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging.")
@click.option("--validation/--no-validation", default=True, help="Enable schema validation in generated code.")
def generate(input_path: Path, output: Path, db_name: str, delay: int, config_path: Path | None,
             seed_path: Path | None, verbose: bool, validation: bool):
    """Generate TypeScript API files from an OpenAPI specification."""
    _setup_logging(verbose)

    config = load_config(
        config_path,
        db_name=db_name,
        response_delay=delay,
        enable_logging=verbose,
        enable_validation=validation,
    )
    if verbose:
        click.echo(f"Configuration: {config.model_dump_json(indent=2)}")

    seed = load_seed_data(seed_path)

    click.echo(f"Parsing {input_path}...")
    try:
        document = load_spec(input_path)
    except SpecValidationError as e:
        raise click.ClickException(str(e)) from e

    ir = normalize(document)
    click.echo(f"Found {len(ir.operations)} endpoints and {len(ir.schemas)} schemas.")

    click.echo("Generating TypeScript files...")
    written = generate_tree(ir, output, config, seed)

    click.echo(f"Generated {len(written)} files in {output}")
    for path in sorted(written):
        click.echo(f"  {path.relative_to(output)}")
