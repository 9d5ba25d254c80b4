"""
Command Line Interface for LogFollower.

This module provides a CLI for following a log file, parsing a log file
once, and managing the configuration file.
"""

import click
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .main import run_tail, run_parse, run_config
from .__version__ import __version__


def _apply_verbosity(verbose: int) -> None:
    if verbose == 1:
        os.environ['LOGFOLLOWER_LOG_LEVEL'] = 'INFO'
    elif verbose >= 2:
        os.environ['LOGFOLLOWER_LOG_LEVEL'] = 'DEBUG'


@click.group(help="LogFollower - follow a log file and report parsed entries as they are appended.")
@click.version_option(__version__, '--version', '-v', prog_name='LogFollower')
def cli() -> None:
    """
    LogFollower - follow a log file and report parsed entries as they are appended.

    Usage Examples:
      logfollower tail app.log                      # Follow a log file
      logfollower tail app.log --format json        # One JSON object per entry
      logfollower parse app.log                     # Parse the whole file once
      logfollower config --list                     # Show configuration
    """


@cli.command(help="Follow a log file, printing entries as they are appended.")
@click.argument('log_path', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--config', '-c', type=click.Path(exists=True, path_type=Path),
              help='Path to configuration file')
@click.option('--interval', '-i', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Polling interval in seconds (default: 1)')
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']),
              default='text', help='Output format (default: text)')
@click.option('--max-passes', type=click.IntRange(min=1), default=None,
              help='Exit after this many read passes')
@click.option('--show-batches', is_flag=True, help='Print the offset reached after every pass')
@click.option('--paused', is_flag=True,
              help='Start with reading suspended; send SIGUSR1 to toggle')
@click.option('--verbose', '-V', count=True, help='Increase verbosity (use -VV for debug)')
def tail(log_path: Path, config: Optional[Path], interval: Optional[float], output_format: str,
         max_passes: Optional[int], show_batches: bool, paused: bool, verbose: int) -> None:
    """
    Follow a log file, printing entries as they are appended.

    The whole file is read on the first pass, then the file is polled for
    growth. A file that shrinks (truncated or rotated) is read again from
    the start. Exits with status 1 if the file cannot be opened.

    Examples:
      logfollower tail /var/log/app.log
      logfollower tail app.log -i 0.5 --show-batches
      logfollower tail app.log --max-passes 1 --format json
    """
    _apply_verbosity(verbose)
    exit_code = run_tail(log_path, config_path=config, interval=interval,
                         output_format=output_format, max_passes=max_passes,
                         show_batches=show_batches, paused=paused or None)
    sys.exit(exit_code)


@cli.command(help="Parse a log file once and output its entries.")
@click.argument('log_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--config', '-c', type=click.Path(exists=True, path_type=Path),
              help='Path to configuration file')
@click.option('--output', '-o', type=click.Path(path_type=Path),
              help='Output file for parsed entries')
@click.option('--format', 'output_format', type=click.Choice(['json', 'yaml', 'text']),
              default='text', help='Output format (default: text)')
@click.option('--verbose', '-V', count=True, help='Increase verbosity (use -VV for debug)')
def parse(log_path: Path, config: Optional[Path], output: Optional[Path],
          output_format: str, verbose: int) -> None:
    """
    Parse a log file once and output its entries.

    Examples:
      logfollower parse app.log
      logfollower parse app.log --format json -o entries.json
    """
    _apply_verbosity(verbose)
    exit_code = run_parse(log_path, config_path=config, output_path=output,
                          output_format=output_format)
    sys.exit(exit_code)


@cli.command(help="Manage the LogFollower configuration file.")
@click.option('--config', '-c', type=click.Path(path_type=Path),
              help='Path to configuration file (default: ./logfollower.yaml)')
@click.option('--set', 'set_options', nargs=2, multiple=True, metavar='KEY VALUE',
              help='Set a configuration option, e.g. --set tailer.poll_interval 2')
@click.option('--get', 'get_option', type=str, default=None, metavar='KEY',
              help='Print a configuration option')
@click.option('--list', 'list_config', is_flag=True, help='Print the configuration')
@click.option('--validate', 'validate_config', is_flag=True, help='Validate the configuration')
@click.option('--reset', 'reset_config', is_flag=True, help='Write the default configuration')
def config(config: Optional[Path], set_options: List[Tuple[str, str]], get_option: Optional[str],
           list_config: bool, validate_config: bool, reset_config: bool) -> None:
    """
    Manage the LogFollower configuration file.

    Examples:
      logfollower config --reset
      logfollower config --set tailer.poll_interval 0.5
      logfollower config --get tailer.poll_interval
      logfollower config --validate
    """
    exit_code = run_config(config_path=config, set_options=list(set_options),
                           get_option=get_option, list_config=list_config,
                           validate_config=validate_config, reset_config=reset_config)
    sys.exit(exit_code)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
