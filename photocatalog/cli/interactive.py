"""
Interactive prompts for the CLI interface.

Provides command-line parsing for the shell and yes/no confirmation.
"""

from __future__ import annotations

from typing import Callable, NamedTuple


class Command(NamedTuple):
    """A shell command: its (upper-cased) name and its arguments."""
    name: str
    args: tuple[str, ...] = ()


def split_arguments(line: str) -> list[str]:
    """
    Split a command line into words.

    Words are separated by whitespace. Double quotes group words containing
    spaces; a quoted word may be empty. An unterminated quote takes the rest
    of the line.

    Examples:
        >>> split_arguments('AK holiday "/photos/summer 2023"')
        ['AK', 'holiday', '/photos/summer 2023']
        >>> split_arguments('ADD "/photos/new folder')
        ['ADD', '/photos/new folder']
    """
    words = []
    current = []
    inside_quotes = False

    for char in line:
        if char == '"':
            if inside_quotes:
                words.append(''.join(current))
                current = []
            inside_quotes = not inside_quotes
        elif char.isspace() and not inside_quotes:
            if current:
                words.append(''.join(current))
                current = []
        else:
            current.append(char)

    if current:
        words.append(''.join(current))
    return words


def parse_command_line(line: str) -> Command:
    """
    Parse a shell input line into a Command.

    Returns:
        Command with an empty name for a blank line

    Examples:
        >>> parse_command_line('list d "/photos/2023"')
        Command(name='LIST', args=('d', '/photos/2023'))
    """
    words = split_arguments(line)
    if not words:
        return Command('')
    return Command(words[0].upper(), tuple(words[1:]))


def ask_yes_no(
    message: str,
    cancel: bool = False,
    input_func: Callable[[str], str] = input,
) -> str:
    """
    Ask a Yes/No (or Yes/No/Cancel) question until a valid answer is given.

    Args:
        message: Question to show
        cancel: Also offer Cancel
        input_func: Function reading one answer (default: input)

    Returns:
        'Y', 'N' or 'C'. End of input counts as Cancel (or No when Cancel
        is not offered).

    Examples:
        >>> ask_yes_no('There are unsaved changes. Save them?', cancel=True)
        There are unsaved changes. Save them? (Yes/No/Cancel): y
        'Y'
    """
    prompt = " (Yes/No/Cancel): " if cancel else " (Yes/No): "

    while True:
        try:
            response = input_func(message + prompt).strip().lower()
        except EOFError:
            return 'C' if cancel else 'N'

        if response in ('y', 'yes'):
            return 'Y'
        if response in ('n', 'no'):
            return 'N'
        if cancel and response in ('c', 'cancel'):
            return 'C'
        print("Invalid response. Please enter 'Yes', 'No'" + (", or 'Cancel'." if cancel else "."))


__all__ = [
    'Command',
    'split_arguments',
    'parse_command_line',
    'ask_yes_no',
]
