import argparse
import logging
import sys
from typing import List, Optional

from loadfire import __version__
from loadfire.config import load_config
from loadfire.data_loader import load_data
from loadfire.dispatcher import run_load_test
from loadfire.errors import ConfigError, DataLoadError
from loadfire.reporter import ProgressPrinter, print_summary
from loadfire.settings import settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='loadfire', description='Fire a burst of concurrent HTTP requests and report latency')
    parser.add_argument('-c', '--config', required=True, help='Path to the YAML configuration file')
    parser.add_argument('--no-progress', action='store_true', help='Do not print the live progress line')
    parser.add_argument('--log-level', help='Logging level (defaults to LOADFIRE_LOG_LEVEL or WARNING)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        level = settings.get_log_level(args.log_level)
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args.config)
        settings.get_request_timeout()
    except ConfigError as e:
        print(f"Failed to read config: {e}", file=sys.stderr)
        return 1

    try:
        rows = load_data(config.data_file) if config.data_file else []
    except DataLoadError as e:
        print(f"Error during load test: {e}", file=sys.stderr)
        return 1

    progress = None
    if settings.PROGRESS and not args.no_progress:
        progress = ProgressPrinter(config.request_count)
    try:
        stats = run_load_test(config, rows, observer=progress)
    except KeyboardInterrupt:
        print("\n>>> Interrupted, no summary produced", file=sys.stderr)
        return 130
    finally:
        if progress is not None:
            progress.close()

    print_summary(stats)
    return 0


if __name__ == '__main__':
    sys.exit(main())
