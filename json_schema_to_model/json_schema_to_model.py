import json
import logging

import click

from .cli_utils import reconstruct_command_line
from .errors import SchemaModelError
from .pipeline import ClassGeneratorConfig, GeneratorInput, PipelineGenerator
from .pipeline.repository.uris import extract_schema_name, to_uri

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def default_package_name(location: str) -> str:
    """The package of an input without explicit package: the file name up to the first dot."""
    stem = extract_schema_name(to_uri(location)).split(".")[0]
    return "".join(c for c in stem.lower() if c.isalnum() or c == "_") or "model"


@click.command()
@click.option("--package", "-p", "packages", multiple=True, help="Package of each input, in input order")
@click.option("--search", "-s", "search_locations", multiple=True, help="Location for resolving relative references")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--dialect", default=None, type=click.Choice(["auto", "draft-03", "draft-04", "2020-12"]))
@click.option("--header", default=None, type=click.Path(exists=True, resolve_path=True), help="File prepended to every generated file")
@click.option("--log-level", default="WARNING", type=click.Choice(LOG_LEVELS, case_sensitive=False))
@click.option("--dry-run", is_flag=True, default=False, help="Print the classes and their schema URIs instead of writing files")
@click.argument("inputs", nargs=-1)
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def json_schema_to_model(packages, search_locations, config, dialect, header, log_level, dry_run, inputs, output):
    logging.basicConfig(level=getattr(logging, log_level.upper()), format="%(levelname)s %(name)s: %(message)s")

    config_dict = {}
    if config is not None:
        with open(config) as f:
            config_dict = json.load(f)
    generator_config = ClassGeneratorConfig.from_dict(config_dict)
    if dialect is not None:
        generator_config.dialect = dialect

    header_code = None
    if header is not None:
        with open(header, encoding="utf-8") as f:
            header_code = f.read()

    if len(packages) > len(inputs):
        raise click.UsageError(f"Got {len(packages)} packages for {len(inputs)} inputs")
    generator_inputs = [GeneratorInput.from_dict(d) for d in config_dict.get("inputs", [])]
    for index, location in enumerate(inputs):
        package_name = packages[index] if index < len(packages) else default_package_name(location)
        generator_inputs.append(GeneratorInput(location, package_name, header_code))
    if not generator_inputs:
        raise click.UsageError("No input schemas given")

    generator = PipelineGenerator(
        generator_inputs,
        generator_config,
        list(search_locations),
        generation_comment=reconstruct_command_line(json_schema_to_model),
    )
    try:
        if dry_run:
            model = generator.build()
            for class_name, uris in model.class_uris.items():
                click.echo(class_name)
                for uri in uris:
                    click.echo(f"    {uri}")
        else:
            generator.write(output)
    except (SchemaModelError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    diagnostics = generator.context.diagnostics
    if len(diagnostics) > 0:
        click.echo(f"{len(diagnostics)} diagnostics, see the log for details", err=True)
