# === FILE: adrules/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point of AdRules.

Commands:
  sync      Download all sources, compile them and write the final rule list
  fetch     Download and merge sources only (no compiler)
  sources   Print the parsed source list
  config    Print the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml or built-in defaults)
  --concurrency INT   Parallel downloads (overrides config)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...; default $ADRULES_LOG_LEVEL or INFO)
  --log-file PATH     Log file (console only if omitted)
  --log-format FORMAT Logging format string

Example:
  adrules --config configs/default.yaml sync --json reports/summary.json
"""
import asyncio
import sys
from pathlib import Path

import click

from adrules import __version__
from adrules.config import load_config
from adrules.engine import Engine
from adrules.errors import AdRulesError
from adrules.logger import DEFAULT_FORMAT, init_logging
from adrules.report.json_report import render_json
from adrules.sources import read_sources

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='AdRules, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON configuration file.'
)
@click.option(
    '--concurrency', '-n', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Number of parallel downloads (overrides config).'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level (default: $ADRULES_LOG_LEVEL or INFO)'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (console only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, concurrency, log_level, log_file, log_format):
    """AdRules: merge remote ad-blocking rule lists into one compiled list."""
    logger = init_logging(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    if concurrency is not None:
        cfg = cfg.model_copy(update={'concurrency': concurrency})
    logger.debug('Configuration loaded: %s', config_path or 'defaults')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('sync', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also save the run summary as JSON'
)
@click.pass_context
def sync(ctx, json_output):
    """Download, merge, compile and publish the rule list."""
    cfg = ctx.obj['config']
    try:
        result = Engine(cfg).run()
    except (AdRulesError, OSError, UnicodeDecodeError) as e:
        print_error(str(e))

    if result.nothing_to_do:
        click.echo('No rule sources configured; nothing to do.')
        return

    summary = result.summary
    click.echo(
        f'Sources: {summary.total} (success: {summary.success}, failed: {summary.failure}); '
        f'rules: {result.rule_count}'
    )
    for path in result.outputs:
        click.echo(f'Output: {path}')

    if json_output:
        try:
            saved = render_json(summary, json_output, rule_count=result.rule_count)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Failed to save JSON report: {e}')


@cli.command('fetch', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Write the merged payload here instead of stdout'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the run summary as JSON'
)
@click.pass_context
def fetch(ctx, output, json_output):
    """Download and merge the sources without compiling them."""
    cfg = ctx.obj['config']
    try:
        urls = read_sources(cfg.rules_file)
        payload, summary = asyncio.run(Engine(cfg).download(urls))
    except (AdRulesError, OSError, UnicodeDecodeError) as e:
        print_error(str(e))

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(payload)
        click.echo(f'Merged payload: {output} ({len(payload)} bytes)', err=True)
    else:
        click.echo(payload, nl=False)

    if json_output:
        try:
            saved = render_json(summary, json_output)
            click.echo(f'JSON report: {saved}', err=True)
        except OSError as e:
            print_error(f'Failed to save JSON report: {e}')


@cli.command('sources', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_sources(ctx):
    """Print the source URLs in the order they are merged."""
    cfg = ctx.obj['config']
    try:
        urls = read_sources(cfg.rules_file)
    except (OSError, UnicodeDecodeError) as e:
        print_error(str(e))
    for url in urls:
        click.echo(url)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
