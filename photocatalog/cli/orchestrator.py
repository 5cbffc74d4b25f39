"""
CLI workflow orchestration for Photo Catalog.

Provides the CLIOrchestrator class that coordinates the CLI session from
argument parsing through opening the catalog to the command loop.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..catalog import Catalog, CatalogStore, LoadStatus, open_catalog, resolve_db_filename
from ..user_config import get_user_config
from .arg_parser import parse_arguments
from .commands import CommandInterpreter, ShellSettings
from .interactive import parse_command_line
from .reporting import print_banner, print_load_status, print_statistics


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates a CLI session.

    Manages the complete lifecycle from argument parsing through opening the
    catalog and running commands, either from -c options or interactively.
    """

    PROMPT = '> '

    def __init__(self, argv=None, input_func: Callable[[str], str] = input):
        """
        Initialize the orchestrator.

        Args:
            argv: Argument list (default: sys.argv)
            input_func: Function reading one line of input (default: input)
        """
        self.argv = argv
        self.input_func = input_func
        self.logger = None
        self.args = None
        self.catalog: Optional[Catalog] = None
        self.store: Optional[CatalogStore] = None
        self.load_status: Optional[LoadStatus] = None
        self.interpreter: Optional[CommandInterpreter] = None

    def run(self) -> int:
        """
        Execute the CLI session.

        Returns:
            Exit code (0 for success, 1 if the catalog file could not be
            loaded in batch mode)

        Workflow phases:
        1. Setup & argument parsing
        2. Open the catalog
        3. Run commands (batch or interactive)
        """
        # Phase 1: Setup
        self._setup_phase()

        # Phase 2: Open catalog
        exit_code = self._open_phase()
        if exit_code != 0:
            return exit_code

        # Phase 3: Commands
        if self.args.commands:
            return self._batch_phase()
        return self._interactive_phase()

    def _setup_phase(self) -> None:
        """Phase 1: Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

    def _open_phase(self) -> int:
        """
        Phase 2: Open the catalog file and report how it went.

        Returns:
            0 for success, 1 if a batch run would risk overwriting an
            unreadable catalog
        """
        config = get_user_config()
        path = resolve_db_filename(self.args.db_file or config.db_file)

        self.store = CatalogStore(path)
        self.catalog, self.load_status = open_catalog(path)

        settings = ShellSettings(
            recursive=config.recursive_scan,
            prefer_exif_timestamp=config.prefer_exif_timestamp,
            show_progress=config.show_progress and not self.args.no_progress,
        )
        self.interpreter = CommandInterpreter(
            self.catalog, self.store, settings, input_func=self.input_func
        )

        if not self.args.commands:
            print_banner()
        print_load_status(self.load_status, path)

        if self.args.commands and self.load_status in (LoadStatus.CORRUPT, LoadStatus.READ_ERROR):
            self.logger.error("Refusing to run commands against an unreadable catalog file")
            return 1

        print_statistics(self.catalog.statistics())
        return 0

    def _batch_phase(self) -> int:
        """Phase 3a: Run the -c commands in order, then stop."""
        for line in self.args.commands:
            command = parse_command_line(line)
            self.logger.debug(f"Running command: {line}")
            if self.interpreter.execute(command):
                break
        return 0

    def _interactive_phase(self) -> int:
        """Phase 3b: Read and execute commands until EXIT."""
        while True:
            try:
                line = self.input_func(self.PROMPT)
            except (EOFError, KeyboardInterrupt):
                print()
                if self.catalog.dirty:
                    self.logger.warning("Input closed with unsaved changes; they were not saved")
                return 0

            if self.interpreter.execute(parse_command_line(line)):
                return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
