"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
photo catalog command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..config import DEFAULT_DB_FILENAME


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description='Catalog image files, tag them with keywords and find duplicates',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  %(prog)s
      Open the default catalog ({DEFAULT_DB_FILENAME}) in the interactive shell

  %(prog)s holidays
      Open holidays.json (the .json suffix is added when missing)

  %(prog)s photos.json -c "ADD /path/to/photos -r" -c DUPLICATES -c SAVE
      Run commands without the interactive shell

Type HELP in the shell for the list of commands.
        """
    )

    # Positional argument
    parser.add_argument(
        'db_file',
        type=Path,
        nargs='?',
        default=None,
        help=f'Catalog file to open. Default: {DEFAULT_DB_FILENAME} (or the configured db_file)'
    )

    parser.add_argument(
        '-c', '--command',
        action='append',
        dest='commands',
        metavar='COMMAND',
        help='Run a shell command and exit (repeatable, runs in order)'
    )

    # Output options
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['photos.json', '-c', 'STATS'])
        >>> args.db_file
        PosixPath('photos.json')
        >>> args.commands
        ['STATS']
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
