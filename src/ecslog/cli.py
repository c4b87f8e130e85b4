"""
ECS Formatter CLI

Reads JSON-lines log records and writes one ECS document per line.
"""

import sys
import json
import logging
from typing import Any, Dict, Iterator, Optional, TextIO

import click

from utils.config_loader import ConfigLoader
from utils.logger import setup_logging
from .formatter import EcsFormatter, FormatterConfig
from .schema import SchemaIndex, SchemaLoadError, ECS_SCHEMA_URL


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'config/config.yaml'


def load_config(config_path: Optional[str]) -> ConfigLoader:
    """Load and validate the config file; without one every lookup falls back to defaults."""
    loader = ConfigLoader(config_path or DEFAULT_CONFIG_PATH)
    if not config_path:
        return loader

    loader.load()
    if not loader.validate():
        raise ValueError(f"Invalid configuration: {config_path}")
    return loader


def read_records(stream: TextIO) -> Iterator[Dict[str, Any]]:
    for lineno, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue

        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning(f"Skipping line {lineno}: invalid JSON ({e})")
            continue

        if not isinstance(record, dict):
            logger.warning(f"Skipping line {lineno}: record is not an object")
            continue

        yield record


@click.command()
@click.option(
    '--config',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to configuration file'
)
@click.option(
    '--schema',
    default=None,
    help='ECS schema file or URL (overrides config)'
)
@click.option(
    '--tag',
    'tags',
    multiple=True,
    help='Tag added to every document (repeatable)'
)
@click.option(
    '--no-log-origin',
    is_flag=True,
    help='Pass file/line/class/function through instead of building log.origin'
)
@click.argument('input_file', type=click.File('r'), default='-')
def cli(config, schema, tags, no_log_origin, input_file):
    """Format JSON-lines log records as Elastic Common Schema documents"""

    try:
        loader = load_config(config)
        formatterConfig = FormatterConfig.from_dict(loader.get('formatter'))
        if tags:
            formatterConfig.tags = list(tags)
        if no_log_origin:
            formatterConfig.use_log_origin_from_context = False

        source = schema or loader.get('schema.source', ECS_SCHEMA_URL)
        timeout = loader.get('schema.timeout', 30)

        setup_logging(loader.config)
        schemaIndex = SchemaIndex.from_source(source, timeout=timeout)
        formatter = EcsFormatter.from_config(schemaIndex, formatterConfig)

        for record in read_records(input_file):
            sys.stdout.write(formatter.format(record))

    except SchemaLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    cli()
