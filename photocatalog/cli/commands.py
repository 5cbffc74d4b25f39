"""
Command interpreter for the interactive shell.

Each shell command maps to a handler that validates its arguments, calls the
catalog or a scanner workflow, and prints the outcome. Catalog errors are
reported and never stop the shell.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional

from ..catalog import Catalog, CatalogStore
from ..config import PROGRAM_NAME, RESERVED_KEYWORDS
from ..errors import CatalogError, NotFoundError, PersistenceIOError
from ..models import normalize_keyword
from ..scanner import add_path, rescan, resolve_duplicates
from .interactive import Command, ask_yes_no
from .reporting import (
    print_banner,
    print_duplicate_report,
    print_entry_details,
    print_file_list,
    print_help,
    print_names,
    print_statistics,
    print_status,
    print_sync_summary,
)


logger = logging.getLogger(__name__)


@dataclass
class ShellSettings:
    """Options applied to shell commands."""
    recursive: bool = False
    prefer_exif_timestamp: bool = True
    show_progress: bool = True


def canonical_path(path: str) -> str:
    """Return the absolute, symlink-free form of a path (which need not exist)."""
    return os.path.realpath(os.path.abspath(os.path.expanduser(path)))


class CommandInterpreter:
    """
    Executes shell commands against a catalog.

    Usage:
        interpreter = CommandInterpreter(catalog, CatalogStore('photo_db.json'))
        quit_requested = interpreter.execute(parse_command_line('ADD /photos -r'))
    """

    def __init__(
        self,
        catalog: Catalog,
        store: CatalogStore,
        settings: Optional[ShellSettings] = None,
        input_func: Callable[[str], str] = input,
    ):
        """
        Initialize the interpreter.

        Args:
            catalog: Catalog the commands operate on
            store: Store used by SAVE and EXIT
            settings: Shell options (defaults if None)
            input_func: Function reading answers to questions (default: input)
        """
        self.catalog = catalog
        self.store = store
        self.settings = settings or ShellSettings()
        self.input_func = input_func

        self._handlers: dict[str, Callable[[tuple[str, ...]], bool]] = {}
        for names, handler in (
            (('H', 'HELP'), self._help),
            (('AB', 'ABOUT'), self._about),
            (('E', 'X', 'EXIT'), self._exit),
            (('SAVE',), self._save),
            (('A', 'ADD'), self._add),
            (('AK',), self._add_keyword),
            (('R', 'REMOVE'), self._remove),
            (('RK',), self._remove_keyword),
            (('L', 'LIST'), self._list),
            (('D', 'DETAILS'), self._details),
            (('DUP', 'DD', 'DUPLICATES'), self._duplicates),
            (('S', 'SCAN'), self._scan),
            (('STATS',), self._stats),
        ):
            for name in names:
                self._handlers[name] = handler

    def execute(self, command: Command) -> bool:
        """
        Execute one command.

        Args:
            command: Parsed command (see parse_command_line)

        Returns:
            True if the shell should quit
        """
        if not command.name:
            return False

        handler = self._handlers.get(command.name.upper())
        if handler is None:
            print_status('unknown_command')
            return False

        try:
            return handler(command.args)
        except CatalogError as e:
            logger.debug(f"{command.name} failed: {e}")
            print(f"ERROR: {e}")
        except ValueError as e:
            print(f"ERROR: {e}")
        return False

    def _ids_for_path(self, path: str) -> Optional[frozenset]:
        """Ids of the cataloged file at path, or of the cataloged files in directory path."""
        canonical = canonical_path(path)
        return self.catalog.find_by_path(canonical) or self.catalog.find_in_directory(canonical)

    def _save_catalog(self) -> bool:
        try:
            self.store.save(self.catalog)
        except PersistenceIOError as e:
            print_status('write_error')
            print(f"  {e}")
            return False
        print_status('saved')
        return True

    # ------------------------------------------------------------------
    # Handlers: each takes the argument tuple and returns the quit signal
    # ------------------------------------------------------------------

    def _help(self, args) -> bool:
        print_help()
        return False

    def _about(self, args) -> bool:
        print_banner()
        print(f"Catalog file: {self.store.path}")
        return False

    def _exit(self, args) -> bool:
        if not self.catalog.dirty:
            return True

        answer = ask_yes_no(
            "There are unsaved changes. Do you want to save them?",
            cancel=True,
            input_func=self.input_func,
        )
        if answer == 'Y':
            return self._save_catalog()
        return answer == 'N'

    def _save(self, args) -> bool:
        if self.catalog.dirty:
            self._save_catalog()
        else:
            print_status('no_changes')
        return False

    def _add(self, args) -> bool:
        flags = [a for a in args if a.lower() == '-r']
        paths = [a for a in args if a.lower() != '-r']
        if len(paths) != 1:
            print_status('invalid_arguments')
            return False

        try:
            summary = add_path(
                self.catalog,
                os.path.expanduser(paths[0]),
                recursive=bool(flags) or self.settings.recursive,
                show_progress=self.settings.show_progress,
                prefer_exif_timestamp=self.settings.prefer_exif_timestamp,
            )
        except NotFoundError:
            print_status('path_not_found')
            return False

        print_sync_summary("Add", summary)
        return False

    def _change_keyword(self, args, adding: bool) -> bool:
        if len(args) != 2:
            print_status('invalid_arguments')
            return False

        keyword = normalize_keyword(args[0])
        if keyword in RESERVED_KEYWORDS:
            print_status('reserved_keyword')
            return False

        file_ids = self._ids_for_path(args[1])
        if file_ids is None:
            print_status('not_cataloged')
            return False

        for file_id in file_ids:
            if adding:
                self.catalog.add_keyword(keyword, file_id)
            else:
                self.catalog.remove_keyword(keyword, file_id)

        action = "added to" if adding else "removed from"
        print(f"Keyword {keyword} {action} {len(file_ids)} files.")
        return False

    def _add_keyword(self, args) -> bool:
        return self._change_keyword(args, adding=True)

    def _remove_keyword(self, args) -> bool:
        return self._change_keyword(args, adding=False)

    def _remove(self, args) -> bool:
        if len(args) != 1:
            print_status('invalid_arguments')
            return False

        file_ids = self._ids_for_path(args[0])
        if file_ids is None:
            print_status('not_cataloged')
            return False

        for file_id in sorted(file_ids):
            self.catalog.remove_file(file_id)
        print(f"Removed {len(file_ids)} files from the catalog.")
        return False

    def _list(self, args) -> bool:
        if not args:
            print_names("Directories", self.catalog.directories())
            print_names("Keywords", self.catalog.keywords())
            return False

        if len(args) != 2 or args[0].upper() not in ('F', 'D', 'K'):
            print_status('invalid_arguments')
            return False

        kind, key = args[0].upper(), args[1]
        if kind in ('F', 'D'):
            key = canonical_path(key)
        file_ids = self.catalog.get_file_ids(key, kind)
        print_file_list(self.catalog, file_ids, key)
        return False

    def _details(self, args) -> bool:
        if len(args) != 1:
            print_status('invalid_arguments')
            return False

        file_id = self.catalog.get_file_id(canonical_path(args[0]))
        if file_id is None:
            print_status('not_cataloged')
            return False

        print_entry_details(self.catalog.get_entry(file_id))
        return False

    def _duplicates(self, args) -> bool:
        if len(args) > 1:
            print_status('invalid_arguments')
            return False

        file_ids = None
        if args:
            file_ids = self._ids_for_path(args[0])
            if file_ids is None:
                print_status('not_cataloged')
                return False

        results = resolve_duplicates(
            self.catalog, file_ids, show_progress=self.settings.show_progress
        )
        print_duplicate_report(self.catalog, results)
        return False

    def _scan(self, args) -> bool:
        if len(args) > 1:
            print_status('invalid_arguments')
            return False

        file_ids = None
        if args:
            file_ids = self._ids_for_path(args[0])
            if file_ids is None:
                print_status('not_cataloged')
                return False

        summary = rescan(
            self.catalog,
            file_ids,
            show_progress=self.settings.show_progress,
            prefer_exif_timestamp=self.settings.prefer_exif_timestamp,
        )
        print_sync_summary("Scan", summary)
        return False

    def _stats(self, args) -> bool:
        print(f"{PROGRAM_NAME} catalog: {self.store.path}")
        print_statistics(self.catalog.statistics())
        return False


__all__ = [
    'CommandInterpreter',
    'ShellSettings',
    'canonical_path',
]
