"""CLI entry point for oasgen."""

import logging
from pathlib import Path

import click

from oasgen.config import GeneratorConfig, load_config
from oasgen.errors import OasgenError
from oasgen.generator import Generator
from oasgen.writer import write_document


def _build_config(config_path: Path | None, **overrides) -> GeneratorConfig:
    config = load_config(config_path) if config_path else GeneratorConfig()
    return config.merged(**overrides)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """oasgen: generate OpenAPI 3 documents from annotated Go handlers."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("src_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the OpenAPI document.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config file.")
@click.option("--module-path", default=None, help="Only scan handlers under this directory.")
@click.option("--handler-path", default=None, help="Further restrict handlers to this directory.")
@click.option("--tag", "filter_tag", default=None, help="Only keep operations carrying this tag.")
@click.option("--schema-without-pkg", is_flag=True, default=False, help="Key schemas by type name only.")
@click.option("--lenient", is_flag=True, default=False, help="Skip declarations with errors instead of aborting.")
@click.option("--yaml", "as_yaml", is_flag=True, default=False, help="Write YAML instead of JSON.")
@click.option("--title", default=None, help="API title.")
@click.option("--api-version", default=None, help="API version.")
def generate(
    src_dir: Path,
    output: Path,
    config_path: Path | None,
    module_path: str | None,
    handler_path: str | None,
    filter_tag: str | None,
    schema_without_pkg: bool,
    lenient: bool,
    as_yaml: bool,
    title: str | None,
    api_version: str | None,
):
    """Generate an OpenAPI document from the Go sources in SRC_DIR."""
    try:
        config = _build_config(
            config_path,
            source_root=src_dir,
            module_path=module_path,
            handler_path=handler_path,
            filter_tag=filter_tag,
            schema_without_pkg=True if schema_without_pkg else None,
            strict=False if lenient else None,
            title=title,
            version=api_version,
        )
        click.echo(f"Scanning {src_dir}...")
        generator = Generator(config)
        openapi = generator.run()
        write_document(openapi, output, as_yaml=as_yaml)
    except OasgenError as e:
        raise click.ClickException(str(e)) from e

    for declaration, error in generator.skipped:
        click.echo(f"  Skipped {declaration}: {error}", err=True)
    click.echo(f"Found {len(openapi.paths)} paths, {len(openapi.components.schemas)} schemas.")
    click.echo(f"OpenAPI document saved to {output}")
