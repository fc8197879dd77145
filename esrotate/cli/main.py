"""
esrotate CLI entry point

Resolves rotated index names, creates the current index, and writes documents
to it, using the connection described in the configuration file and the
``ESROTATE_*`` environment variables.
"""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from voluptuous import MultipleInvalid

from esrotate import __version__
from esrotate.client import ElasticClient
from esrotate.config import configure_logging, load_config, validate_config
from esrotate.exceptions import ConfigurationError, EsrotateException
from esrotate.rotation import Rotation, get_index_name
from esrotate.validators import validate_options


# Default config file location
DEFAULT_CONFIG_PATH = Path.home() / ".esrotate" / "config.yml"

ROTATION_CHOICES = [member.name.lower() for member in Rotation]


def get_default_config_file():
    """
    Get the default configuration file path if it exists.

    :returns: Path to ~/.esrotate/config.yml if it exists, None otherwise
    """
    if DEFAULT_CONFIG_PATH.is_file():
        return str(DEFAULT_CONFIG_PATH)
    return None


def get_client_from_context(ctx):
    """
    Get or create an :py:class:`~.esrotate.client.ElasticClient` from the CLI
    context.

    This lazily creates the client on first use.
    """
    if ctx.obj.get("client") is None:
        config = ctx.obj.get("configdict", {})
        try:
            ctx.obj["client"] = ElasticClient.from_config(validate_config(config))
        except EsrotateException as e:
            click.echo(f"Error connecting to Elasticsearch: {e}", err=True)
            ctx.exit(1)
    return ctx.obj["client"]


def get_command_options(ctx, command, **options):
    """Validate command options, exiting on bad input."""
    try:
        return validate_options(command, options)
    except MultipleInvalid as e:
        click.echo(f"Invalid options: {e}", err=True)
        ctx.exit(1)


def read_json(ctx, source, what):
    """Parse the JSON body read from ``source``, exiting on bad input."""
    try:
        body = json.load(source)
    except ValueError as e:
        click.echo(f"Invalid JSON {what}: {e}", err=True)
        ctx.exit(1)
    if not isinstance(body, dict):
        click.echo(f"The {what} must be a JSON object", err=True)
        ctx.exit(1)
    return body


def echo_response(response):
    """Print the body of an Elasticsearch response as JSON."""
    click.echo(json.dumps(getattr(response, "body", response), sort_keys=True))


rotation_option = click.option(
    "-r",
    "--rotation",
    type=click.Choice(ROTATION_CHOICES, case_sensitive=False),
    default="day",
    show_default=True,
    help="How often a new index is started",
)


@click.group()
@click.version_option(version=__version__, prog_name="esrotate")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Do not send anything to Elasticsearch, only show what would happen",
)
@click.pass_context
def cli(ctx, config_path, dry_run):
    """
    esrotate - write to time rotated Elasticsearch indices

    Every request carries the ``esecure`` header with the configured
    secondary secret.

    \b
    Configuration:
      Default config file: ~/.esrotate/config.yml
      Override with: --config /path/to/config.yml

    \b
    Available commands:
      index-name      Print the current index name
      ping            Check the cluster can be reached
      create-index    Create the current index
      write           Write a document to the current index
    """
    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run

    if config_path is None:
        config_path = get_default_config_file()
        if config_path:
            click.echo(f"Using default config: {config_path}", err=True)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        ctx.exit(1)

    ctx.obj["configdict"] = config
    ctx.obj["config_path"] = config_path
    try:
        configure_logging(config)
    except OSError as e:
        click.echo(f"Configuration error: unable to open log file: {e}", err=True)
        ctx.exit(1)

    # Client will be created lazily when needed
    ctx.obj["client"] = None


@cli.command(name="index-name")
@click.argument("base_name")
@rotation_option
@click.pass_context
def index_name(ctx, base_name, rotation):
    """
    Print the name of the current index for BASE_NAME
    """
    options = get_command_options(ctx, "index_name", base_name=base_name, rotation=rotation)
    click.echo(get_index_name(options["base_name"], options["rotation"]))


@cli.command()
@click.option(
    "-p",
    "--porcelain",
    is_flag=True,
    default=False,
    help="Machine-readable output (tab-separated values, no formatting)",
)
@click.pass_context
def ping(ctx, porcelain):
    """
    Check the cluster can be reached and show its health
    """
    client = get_client_from_context(ctx)
    try:
        info = client.validate()
    except EsrotateException as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    fields = ["cluster_name", "status", "version", "number_of_nodes"]
    if porcelain:
        click.echo("\t".join(str(info.get(field)) for field in fields))
        return

    table = Table(title="Elasticsearch")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field in fields:
        table.add_row(field, str(info.get(field)))
    Console().print(table)


@cli.command(name="create-index")
@click.argument("base_name")
@rotation_option
@click.option(
    "-m",
    "--mapping",
    type=click.File("r"),
    default="-",
    show_default=True,
    help="JSON file with the create index body (settings, mappings, aliases). '-' reads STDIN",
)
@click.pass_context
def create_index(ctx, base_name, rotation, mapping):
    """
    Create the current index for BASE_NAME
    """
    loggit = logging.getLogger("esrotate.cli")
    options = get_command_options(ctx, "create_index", base_name=base_name, rotation=rotation)
    body = read_json(ctx, mapping, "mapping")

    if ctx.obj["dry_run"]:
        name = get_index_name(options["base_name"], options["rotation"])
        loggit.info("DRY-RUN MODE.  No changes will be made.")
        click.echo(f'DRY-RUN: create_index "{name}" with body: {json.dumps(body, sort_keys=True)}')
        return

    client = get_client_from_context(ctx)
    try:
        response = client.create_index_mapping(options["base_name"], options["rotation"], body)
    except EsrotateException as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    echo_response(response)


@cli.command()
@click.argument("base_name")
@rotation_option
@click.option(
    "-d",
    "--document",
    type=click.File("r"),
    default="-",
    show_default=True,
    help="JSON file with the document to write. '-' reads STDIN",
)
@click.pass_context
def write(ctx, base_name, rotation, document):
    """
    Write one document to the current index for BASE_NAME
    """
    loggit = logging.getLogger("esrotate.cli")
    options = get_command_options(ctx, "write", base_name=base_name, rotation=rotation)
    body = read_json(ctx, document, "document")

    if ctx.obj["dry_run"]:
        name = get_index_name(options["base_name"], options["rotation"])
        loggit.info("DRY-RUN MODE.  No changes will be made.")
        click.echo(f'DRY-RUN: write to "{name}": {json.dumps(body, sort_keys=True)}')
        return

    client = get_client_from_context(ctx)
    try:
        response = client.write_entity(options["base_name"], options["rotation"], body)
    except EsrotateException as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    echo_response(response)


def main():
    """Console script entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
