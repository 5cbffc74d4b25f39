"""
CLI package for Photo Catalog.

Provides the interactive command shell for building and querying a catalog:
adding files, tagging them with keywords, listing, rescanning and resolving
duplicates.

Public API:
- main: Entry point for CLI execution
- CLIOrchestrator: CLI session orchestration class
- CommandInterpreter: Executes shell commands against a catalog
- parse_command_line: Parse a shell input line into a Command
"""

from __future__ import annotations

from .orchestrator import CLIOrchestrator, setup_logging
from .arg_parser import create_parser, parse_arguments
from .commands import CommandInterpreter, ShellSettings
from .interactive import Command, ask_yes_no, parse_command_line, split_arguments
from .reporting import print_duplicate_report


def main(argv=None) -> int:
    """
    Main entry point for the CLI.

    Delegates to CLIOrchestrator to execute the complete workflow.

    Returns:
        Exit code (0 for success, 1 for error)

    Examples:
        >>> # Called from __main__.py
        >>> exit_code = main()
        >>> sys.exit(exit_code)
    """
    orchestrator = CLIOrchestrator(argv)
    return orchestrator.run()


__all__ = [
    # Main entry point
    'main',
    # Core classes
    'CLIOrchestrator',
    'CommandInterpreter',
    'ShellSettings',
    'Command',
    # Utilities
    'setup_logging',
    'create_parser',
    'parse_arguments',
    'parse_command_line',
    'split_arguments',
    'ask_yes_no',
    'print_duplicate_report',
]
