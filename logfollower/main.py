"""
Main application entry points for LogFollower.

This module provides the functions behind the command line: following a
log file, parsing a log file once, and managing the configuration file.
"""

import sys
import json
import logging
import signal
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console

from .config.config import Config, ConfigError
from .config.settings import Settings
from .core.event_bus import BATCH_END, ERROR, NEW_ENTRY, SIZE_CHANGED, Event
from .core.tailer import Tailer
from .parsers.line_parser import LineParser
from .utils.formatting import FormattingUtils
from .utils.log_setup import setup_logging


logger = logging.getLogger(__name__)


def _load_config(config_path: Optional[Path], cli_options: Optional[Dict[str, Any]] = None) -> Config:
    config = Config.load(config_path)
    if cli_options:
        config.apply_cli_overrides(cli_options)
    setup_logging(config.logging.level, Path(config.logging.file) if config.logging.file else None)
    return config


def run_tail(log_path: Path, config_path: Optional[Path] = None,
             interval: Optional[float] = None, output_format: str = 'text',
             max_passes: Optional[int] = None, show_batches: bool = False,
             paused: Optional[bool] = None, console: Optional[Console] = None) -> int:
    """
    Follow a log file and print its entries until interrupted.

    Args:
        log_path: Log file to follow
        config_path: Path to configuration file
        interval: Polling interval in seconds
        output_format: 'text' or 'json'
        max_passes: Stop after this many read passes
        show_batches: Print a marker with the offset reached after every pass
        paused: Start with reading suspended (SIGUSR1 toggles the pause)
        console: Console to print to

    Returns:
        Exit code
    """
    try:
        config = _load_config(config_path, {'poll_interval': interval, 'paused': paused})
    except ConfigError as e:
        logger.error(str(e))
        return 2

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        return 2

    console = console or Console()
    done = threading.Event()
    failures: List[str] = []
    passes = 0

    def on_entry(event: Event):
        if output_format == 'json':
            console.out(json.dumps(event.data.to_dict()), highlight=False)
        else:
            console.print(FormattingUtils.styled_log_entry(event.data), soft_wrap=True)

    def on_size(event: Event):
        logger.debug(f"{log_path}: {FormattingUtils.format_bytes(event.data)}")

    def on_batch_end(event: Event):
        nonlocal passes
        passes += 1
        if show_batches:
            console.print(f"-- end of batch at offset {event.data} --", style='dim')
        if max_passes and passes >= max_passes:
            tailer.close()
            done.set()

    def on_error(event: Event):
        failures.append(event.data)
        done.set()

    tailer = Tailer(config=config)
    tailer.subscribe(NEW_ENTRY, on_entry)
    tailer.subscribe(SIZE_CHANGED, on_size)
    tailer.subscribe(BATCH_END, on_batch_end)
    tailer.subscribe(ERROR, on_error)

    previous_handler = None
    if hasattr(signal, 'SIGUSR1') and threading.current_thread() is threading.main_thread():
        previous_handler = signal.signal(signal.SIGUSR1,
                                         lambda signum, frame: tailer.set_paused(not tailer.is_paused()))

    try:
        tailer.set_path(log_path)
        while not done.wait(0.2):
            pass
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        tailer.close()
        if previous_handler is not None:
            signal.signal(signal.SIGUSR1, previous_handler)

    if failures:
        for failure in failures:
            console.print(failure, style="bold red", markup=False, soft_wrap=True)
        return 1
    return 0


def run_parse(log_path: Path, config_path: Optional[Path] = None,
              output_path: Optional[Path] = None, output_format: str = 'text') -> int:
    """
    Parse a whole log file once and output its entries.

    Args:
        log_path: Log file to parse
        config_path: Path to configuration file
        output_path: Output file for parsed entries (default: stdout)
        output_format: Output format ('json', 'yaml', 'text')

    Returns:
        Exit code
    """
    try:
        config = _load_config(config_path)
        parser = LineParser(config)
        with open(log_path, 'rb') as stream:
            entries = []
            parser.on_new_entry = entries.append
            parser.parse_stream(stream, chunk_size=config.tailer.chunk_size, final=True)
    except (ConfigError, OSError) as e:
        logger.error(f"Parse error: {str(e)}")
        return 1

    if output_format == 'json':
        output = json.dumps([entry.to_dict() for entry in entries], indent=2)
    elif output_format == 'yaml':
        output = yaml.dump([entry.to_dict() for entry in entries], default_flow_style=False)
    else:
        output = "\n".join(FormattingUtils.format_log_entry(entry) for entry in entries)

    if output_path:
        with open(output_path, 'w') as f:
            f.write(output + "\n")
    else:
        print(output)
    return 0


def run_config(config_path: Optional[Path] = None, set_options: Optional[List[tuple]] = None,
               get_option: Optional[str] = None, list_config: bool = False,
               validate_config: bool = False, reset_config: bool = False) -> int:
    """
    Run configuration management commands.

    Args:
        config_path: Configuration file to operate on
        set_options: (section.option, value) pairs to write
        get_option: section.option to print
        list_config: Print the whole configuration
        validate_config: Validate the configuration
        reset_config: Overwrite the file with defaults

    Returns:
        Exit code
    """
    config_path = Path(config_path or Settings.DEFAULT_CONFIG_PATH)

    if reset_config:
        Config().save(config_path)
        print(f"Configuration reset to defaults: {config_path}")
        return 0

    try:
        config = Config.load(config_path)
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 1

    if set_options:
        for key, value in set_options:
            section_obj, option = _resolve_option(config, key)
            if section_obj is None:
                print(f"Unknown option: {key}. Use 'section.option' format", file=sys.stderr)
                return 1
            current_value = getattr(section_obj, option)
            try:
                if isinstance(current_value, bool):
                    value = value.lower() in ['true', '1', 'yes', 'on']
                elif isinstance(current_value, int):
                    value = int(value)
                elif isinstance(current_value, float):
                    value = float(value)
            except ValueError:
                print(f"Invalid value for {key}: {value}", file=sys.stderr)
                return 1
            setattr(section_obj, option, value)

        config.save(config_path)
        print(f"Configuration updated: {config_path}")

    if get_option:
        section_obj, option = _resolve_option(config, get_option)
        if section_obj is None:
            print(f"Unknown option: {get_option}", file=sys.stderr)
            return 1
        print(f"{get_option} = {getattr(section_obj, option)}")

    if validate_config:
        errors = config.validate()
        if errors:
            for error in errors:
                print(f"Configuration error: {error}", file=sys.stderr)
            return 1
        print("Configuration is valid")

    if list_config:
        print(yaml.dump(config.to_dict(), default_flow_style=False), end='')

    return 0


def _resolve_option(config: Config, key: str):
    parts = key.split('.')
    if len(parts) != 2:
        return None, None
    section, option = parts
    section_obj = getattr(config, section, None)
    if section_obj is None or not hasattr(section_obj, option):
        return None, None
    return section_obj, option
