"""CLI entry point for oas-scaffold."""

import json
from collections import Counter
from pathlib import Path

import click

from oas_scaffold.config import GeneratorConfig
from oas_scaffold.engine import Engine, parse_spec
from oas_scaffold.errors import ScaffoldError
from oas_scaffold.logging_config import configure_logging
from oas_scaffold.parser.loader import load_spec


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
def main(verbose: bool):
    """oas-scaffold — generate an application scaffold from an OpenAPI v3 document."""
    configure_logging("DEBUG" if verbose else None)


@main.command()
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory the lib/ tree is written under.")
@click.option("--ext", "extension", default=None, help="Extension of generated files.")
@click.option("--api-version", default=None, help="Version registered by the bootstrap file.")
@click.option("--workers", "max_workers", type=int, default=None, help="Number of emission threads.")
def generate(spec_path: Path, output: Path | None, extension: str | None, api_version: str | None, max_workers: int | None):
    """Parse SPEC_PATH and write models, services, controllers and main."""
    try:
        config = GeneratorConfig.from_env(
            output_dir=output,
            extension=extension,
            api_version=api_version,
            max_workers=max_workers,
        )

        click.echo(f"Parsing {spec_path}...")
        spec = load_spec(spec_path)
        stores = parse_spec(spec, config)
        click.echo(
            f"Found {len(stores.models)} models, {len(stores.services)} services, "
            f"{len(stores.controllers)} controllers."
        )

        click.echo(f"Generating into {config.lib_dir}...")
        results = Engine(config).process(stores)
    except ScaffoldError as e:
        raise click.ClickException(str(e)) from e

    for result in results:
        click.echo(f"  {result.outcome.value:<11} {result.path}")
    counts = Counter(r.outcome.value for r in results)
    summary = ", ".join(f"{n} {outcome}" for outcome, n in sorted(counts.items()))
    click.echo(f"Done! {len(results)} files ({summary})")


@main.command()
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--kind", default="all", type=click.Choice(["all", "model", "service", "controller"]), help="Resource kind to print.")
def inspect(spec_path: Path, kind: str):
    """Parse SPEC_PATH and print the intermediate representation as JSON."""
    try:
        stores = parse_spec(load_spec(spec_path), GeneratorConfig.from_env())
    except ScaffoldError as e:
        raise click.ClickException(str(e)) from e

    selected = {
        "model": stores.models,
        "service": stores.services,
        "controller": stores.controllers,
    }
    if kind != "all":
        selected = {kind: selected[kind]}

    payload = {
        f"{name}s": {key: node.model_dump(mode="json") for key, node in store.list().items()}
        for name, store in selected.items()
    }
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
