#!/usr/bin/env python3
"""
Picture Organizer CLI

Copies pictures and other media from input directories into a year/month
tree below an output directory. Identical files are skipped, clashing names
get a numeric suffix, and the input directories are never modified.
"""

import sys
import logging
import queue
import click
from pathlib import Path
from colorama import init, Fore, Style
from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

# Add the picture_organizer package to path
sys.path.insert(0, str(Path(__file__).parent))

from picture_organizer import (
    BackgroundRun,
    Config,
    ConfigError,
    DirectoryScanner,
    OrganizeReporter,
    validate_file_name,
)
from picture_organizer.utils import format_bytes, get_available_space

# Initialize colorama for cross-platform colored output
init()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Will be reconfigured after config is loaded
_file_handler = None


def setup_logging(level: str = 'INFO', log_dir: Path = None):
    """Send log records to stdout and, with ``log_dir``, to picture_organizer.log."""
    global _file_handler
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if not log_dir:
        return
    log_dir.mkdir(parents=True, exist_ok=True)
    # One log file per process, even when the group callback runs again
    if _file_handler is not None:
        root_logger.removeHandler(_file_handler)
    _file_handler = logging.FileHandler(log_dir / 'picture_organizer.log', encoding='utf-8')
    _file_handler.setFormatter(formatter)
    root_logger.addHandler(_file_handler)


def _echo(color: str, message: str):
    click.echo(f"{color}{message}{Style.RESET_ALL}")
    sys.stdout.flush()


def print_header(title: str):
    rule = '=' * 60
    _echo(Fore.CYAN, f"\n{rule}\n{title.center(60)}\n{rule}\n")


def print_success(message: str):
    _echo(Fore.GREEN, f"OK: {message}")


def print_warning(message: str):
    _echo(Fore.YELLOW, f"WARN: {message}")


def print_error(message: str):
    _echo(Fore.RED, f"ERROR: {message}")


def print_info(message: str):
    _echo(Fore.BLUE, f"INFO: {message}")


@click.group()
@click.option('--config', '-c', help='Path to configuration file')
@click.option('--log-level', '-l', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level (overrides config)')
@click.pass_context
def cli(ctx, config, log_level):
    """Picture Organizer - copy media into a dated year/month tree."""

    try:
        config_obj = Config(config)
    except Exception as e:
        setup_logging(log_level or 'INFO')
        print_error(f"Failed to load configuration: {e}")
        sys.exit(1)

    log_dir = config_obj.get_log_dir()
    setup_logging(log_level or config_obj.get_log_level(), Path(log_dir) if log_dir else None)

    errors = config_obj.validate_config(require_roots=False)
    if errors:
        print_error("Configuration validation failed:")
        for error in errors:
            click.echo(f"  - {error}")
        sys.exit(1)

    ctx.ensure_object(dict)
    ctx.obj['config'] = config_obj


@cli.command()
@click.argument('inputs', nargs=-1, type=click.Path(file_okay=False))
@click.option('--output', '-o', type=click.Path(file_okay=False), help='Output root directory (overrides config)')
@click.option('--dry-run/--no-dry-run', default=None, help='Perform dry run (override config)')
@click.option('--report', '-r', help='Save summary report to specific file')
@click.option('--progress/--no-progress', default=True, help='Show a progress bar')
@click.pass_context
def run(ctx, inputs, output, dry_run, report, progress):
    """Organize INPUTS (or the configured input directories) into the output root."""

    print_header("PICTURE ORGANIZER")

    config = ctx.obj['config']
    if inputs:
        config.set('organizer.input_roots', list(inputs))
    if output:
        config.set('organizer.output_root', output)
    if dry_run is not None:
        config.set('organizer.dry_run', dry_run)

    errors = config.validate_config()
    if errors:
        print_error("Cannot start:")
        for error in errors:
            click.echo(f"  - {error}")
        sys.exit(1)

    try:
        worker = BackgroundRun(config, config.get_input_roots(), messages=queue.Queue())
    except ConfigError as e:
        print_error(str(e))
        sys.exit(1)

    if config.is_dry_run():
        print_info("Running in DRY RUN mode - nothing will be copied")

    space_warning = worker.organizer.check_free_space()
    if space_warning:
        print_warning(space_warning)

    for root in config.get_input_roots():
        print_info(f"Input: {root}")
    print_info(f"Output: {worker.organizer.output_root}")

    results = None
    worker.start()
    with logging_redirect_tqdm(), tqdm(total=0, unit='files', desc='Organizing', disable=not progress) as pbar:
        try:
            while True:
                kind, payload = worker.messages.get()
                if kind == 'progress':
                    pbar.total = payload.total
                    pbar.n = payload.processed
                    pbar.set_postfix_str(payload.text, refresh=False)
                    pbar.refresh()
                elif kind == 'complete':
                    results = payload
                    break
                elif kind == 'error':
                    break
        except KeyboardInterrupt:
            print_warning("Cancelling after the current file...")
            worker.cancel()
            results = worker.wait()

    if results is None:
        print_error(worker.error or "Organizing did not complete")
        sys.exit(1)

    reporter = OrganizeReporter()
    if report:
        report_file = reporter.save_report(results, report)
        print_success(f"Report saved: {report_file}")

    click.echo("\n" + reporter.generate_summary_report(results))
    if results['success']:
        print_success("Processing completed")
    else:
        print_warning(f"Processing completed with {len(results['errors'])} problems")
    sys.stdout.flush()


@cli.command()
@click.argument('inputs', nargs=-1, type=click.Path(file_okay=False))
@click.pass_context
def count(ctx, inputs):
    """Count the files a run over INPUTS would process."""

    config = ctx.obj['config']
    roots = list(inputs) or config.get_input_roots()
    if not roots:
        print_error("No input directories given")
        sys.exit(1)

    scanner = DirectoryScanner()
    total = 0
    for root in roots:
        root_count = scanner.count_files([root])
        total += root_count
        click.echo(f"  - {root}: {root_count:,} files")
    print_success(f"Total: {total:,} files")


@cli.command('check-name')
@click.argument('names', nargs=-1, required=True)
def check_name(names):
    """Check whether file NAMES can be used at the destination."""

    invalid = 0
    for name in names:
        error = validate_file_name(name)
        if error:
            invalid += 1
            print_error(f"{name}: {error}")
        else:
            print_success(name)
    if invalid:
        sys.exit(1)


@cli.command()
@click.pass_context
def status(ctx):
    """Show the effective configuration and free space at the output root."""

    print_header("ORGANIZER STATUS")

    config = ctx.obj['config']
    click.echo(f"Configuration: {config.config_path or 'built-in defaults'}")
    click.echo(f"Dry run mode: {config.is_dry_run()}")
    click.echo(f"Month locale: {config.get_month_locale()}")
    click.echo(f"Extensions: {' '.join(config.get_extensions())}")
    click.echo()

    roots = config.get_input_roots()
    if not roots:
        click.echo("  [ ] Input directories: none configured")
    for root in roots:
        if Path(root).is_dir():
            print_success(f"Input: {root}")
        else:
            print_warning(f"Input missing: {root}")

    output_root = config.get_output_root()
    if output_root:
        available = get_available_space(Path(output_root))
        print_info(f"Output: {output_root} ({format_bytes(available)} free)")
    else:
        click.echo("  [ ] Output directory: not configured")

    sys.stdout.flush()


if __name__ == '__main__':
    cli()
