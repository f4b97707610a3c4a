#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for ProphageSignal.

This module provides the main CLI entry point and all subcommands for
denoising prophage prediction signals and scoring them against true labels.
"""

import sys
import logging
import click
from pathlib import Path
import yaml
from importlib.metadata import PackageNotFoundError, version as dist_version

from .version import __version__
from .algorithms import ALGORITHMS
from .config.schema import LOG_LEVELS, load_config, save_config_template, validate_config
from .errors import ParameterUsageError, SignalError
from .evaluation import evaluate_labels
from .io import convert_probability_files, read_label_column, read_label_table, write_json
from .utils.pipeline import DenoisePipeline

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])

logger = logging.getLogger(__name__)


class AlgorithmUsageError(click.UsageError):
    """Usage error for algorithm arguments; exits with status 1."""
    exit_code = 1


def _configure_logging(level: str, log_file=None):
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S',
        handlers=handlers,
        force=True,
    )


def _fail(error: Exception):
    click.echo(f"✗ Error: {error}", err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose (DEBUG) logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.option('--config', '-c', 'config_file', type=click.Path(dir_okay=False),
              help='Configuration file (YAML)')
@click.pass_context
def main(ctx, verbose, quiet, config_file):
    """
    ProphageSignal: denoise binary prophage calls along a genome

    Smooths per-position predicted labels with one of five multi-threaded
    algorithms (mwa, rle, dbscan, median, ccl) and reports accuracy,
    precision, recall, F1 and MCC before and after denoising.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet

    try:
        config = load_config(Path(config_file) if config_file else None)
    except SignalError as e:
        _fail(e)
    ctx.obj['CONFIG'] = config

    level = str(config['logging'].get('level') or 'INFO').upper()
    if level not in LOG_LEVELS:
        level = 'INFO'
    if verbose:
        level = 'DEBUG'
    elif quiet:
        level = 'ERROR'
    _configure_logging(level, config['logging'].get('log_file'))


# ============================================================================
# Denoising Commands
# ============================================================================

@main.command(context_settings=dict(ignore_unknown_options=True))
@click.argument('input_file', type=click.Path(dir_okay=False))
@click.argument('output_file', type=click.Path(dir_okay=False))
@click.argument('algorithm')
@click.argument('args', nargs=-1)
@click.option('--metrics-json', type=click.Path(dir_okay=False), default=None,
              help='Also write the run and before/after metrics as JSON '
                   '(metrics null without true labels)')
@click.option('--no-metrics', is_flag=True, help='Skip evaluation against true labels')
@click.pass_context
def denoise(ctx, input_file, output_file, algorithm, args, metrics_json, no_metrics):
    """
    Denoise predicted labels and write a single-column label table.

    ARGS are the algorithm parameters followed by an optional thread count
    (default: all hardware threads):

    \b
      mwa <window_size> <threshold>   Moving Window Average
      rle <min_length>                Run Length Encoding
      dbscan <eps> <min_pts>          DBSCAN
      median <window_size>            Median Filter
      ccl <min_size> <gap_tolerance>  Connected Component Labeling

    Parameters omitted on the command line are read from the
    algorithms.<name> section of --config.

    \b
    Example:
      prophage-signal denoise input.csv output.csv mwa 5 0.6 4
    """
    pipeline = DenoisePipeline(ctx.obj['CONFIG'])

    try:
        result = pipeline.run(input_file, output_file, algorithm, args,
                              evaluate=not no_metrics)
        if metrics_json:
            if result.report is None:
                logger.warning(
                    f"No metrics for {input_file}; {metrics_json} records the run only"
                )
            write_json(metrics_json, result.to_dict())
    except ParameterUsageError as e:
        raise AlgorithmUsageError(str(e), ctx=ctx)
    except SignalError as e:
        _fail(e)

    click.echo(f"Processing complete. Output written to {output_file}")

    if result.report:
        click.echo(result.report.summary())


@main.command()
@click.argument('input_file', type=click.Path(dir_okay=False))
@click.option('--labels', '-l', 'labels_file', type=click.Path(dir_okay=False), default=None,
              help='Denoised label table (from `denoise`) to score alongside the raw predictions')
@click.pass_context
def evaluate(ctx, input_file, labels_file):
    """Score the predictions in INPUT_FILE (and optionally a denoised table) against its true labels."""
    io_config = ctx.obj['CONFIG']['io']

    try:
        table = read_label_table(
            input_file,
            predicted_column=io_config['predicted_column'],
            true_column=io_config['true_column'],
            delimiter=io_config['delimiter'],
        )
        if not table.has_truth:
            _fail(f"{input_file} has no true label column ({io_config['true_column']})")
        cleaned = read_label_column(labels_file) if labels_file else None
        report = evaluate_labels(table.true, table.predicted, cleaned)
    except SignalError as e:
        _fail(e)

    click.echo(report.summary())


@main.command()
def algorithms():
    """List available algorithms and their parameters."""
    for spec in ALGORITHMS.values():
        click.echo(f"{spec.usage():<32} {spec.title}")
        for param in spec.parameters:
            click.echo(f"    {param.name:<16} {param.kind.__name__:<6} {param.description}")


# ============================================================================
# Probability Conversion
# ============================================================================

@main.command()
@click.argument('input_files', nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option('--threshold', '-t', type=float, default=None,
              help='Probability of class 1 at or above which a label is 1 (default: 0.5)')
@click.option('--output-dir', '-o', type=click.Path(file_okay=False), default=None,
              help='Directory for converted tables (default: beside each input)')
@click.pass_context
def threshold(ctx, input_files, threshold, output_dir):
    """
    Convert `Seq_ID,[p0, p1]` probability tables into labeled tables.

    Each output is named processed_<input name>. Files that fail are
    reported and skipped; the command fails only if every file fails.
    """
    settings = ctx.obj['CONFIG']['threshold']
    if threshold is None:
        threshold = settings['probability']
    if not 0.0 <= threshold <= 1.0:
        _fail(f"Threshold must be within [0, 1], got {threshold}")

    result = convert_probability_files(
        input_files,
        threshold=threshold,
        output_dir=output_dir,
        prefix=settings.get('output_prefix', 'processed_'),
    )

    for path in result.converted:
        click.echo(f"✓ Output written to: {path}")
    for path in result.failed:
        click.echo(f"✗ Failed: {path}", err=True)

    if result.all_failed:
        sys.exit(1)


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='prophage_signal_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t',
              type=click.Choice(['default'] + list(ALGORITHMS)),
              default='default', help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
    except (SignalError, OSError) as e:
        _fail(e)

    click.echo(f"✓ Configuration file created: {output}")
    if template == 'default':
        click.echo("\nAlgorithm parameters are left empty; fill in the algorithm you use.")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = load_config(Path(config_file))
    except SignalError as e:
        _fail(e)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")
    click.echo(f"  Algorithm: {config['run']['algorithm'] or 'not set'}")
    click.echo(f"  Threads: {config['hardware']['threads'] or 'auto'}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = load_config(Path(config_file))
    except SignalError as e:
        _fail(e)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)

    click.echo("\nAlgorithm:")
    algorithm = config['run']['algorithm']
    click.echo(f"  Selected: {algorithm or 'not set'}")
    for name, params in config['algorithms'].items():
        set_params = {k: v for k, v in (params or {}).items() if v is not None}
        if set_params:
            click.echo(f"  {name}: " + ", ".join(f"{k}={v}" for k, v in set_params.items()))

    click.echo("\nHardware:")
    click.echo(f"  Threads: {config['hardware']['threads'] or 'auto'}")

    click.echo("\nTables:")
    click.echo(f"  Predicted column: {config['io']['predicted_column']}")
    click.echo(f"  True column: {config['io']['true_column']}")

    click.echo("\nLogging:")
    click.echo(f"  Level: {config['logging']['level']}")


# ============================================================================
# Utility Commands
# ============================================================================

@main.command()
def version():
    """Show version information."""
    click.echo(f"ProphageSignal v{__version__}")
    click.echo("\nDependencies:")

    for label, dist in (("NumPy", "numpy"), ("Click", "click"), ("PyYAML", "PyYAML")):
        try:
            click.echo(f"  {label}: {dist_version(dist)}")
        except PackageNotFoundError:
            click.echo(f"  {label}: not installed")


if __name__ == '__main__':
    sys.exit(main())
