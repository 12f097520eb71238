# src/taskbook/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import EXIT_COMMAND, CommandResult, ResultKind
from ..core.errors import (
    AmbiguousCommandError,
    DateInputError,
    IndexInputError,
    StorageError,
    StorageErrorKind,
    UnknownCommandError,
)
from ..core.state import AppState

logger = logging.getLogger(__name__)

DIVIDER = "_" * 60
PROMPT = "> "

Reader = Callable[[str], str]
Writer = Callable[[str], None]


def _hint_for(result: CommandResult) -> str | None:
    """One-line tip for the most common mistakes."""
    error = result.error
    if isinstance(error, (UnknownCommandError, AmbiguousCommandError)):
        return "Tip: type 'list' to see your tasks, 'todo <description>' to add one, or 'help'."
    if isinstance(error, IndexInputError):
        return "Tip: use 'list' to see task numbers, then use those numbers in your command."
    if isinstance(error, DateInputError):
        return "Tip: use the format yyyy-MM-dd for dates (e.g., 2024-12-25)."
    if isinstance(error, StorageError) and error.kind is StorageErrorKind.DISK_FULL:
        return "Tip: free up some disk space and try again."
    if error is not None and "description" in error.message.lower():
        return "Tip: make sure to provide a description for your task."
    return None


def format_result(result: CommandResult) -> list[str]:
    """Render a result as the lines of one divider block."""
    if result.kind is ResultKind.ERROR:
        body = [f"Error: {line}" if i == 0 else line for i, line in enumerate(result.lines())]
        hint = _hint_for(result)
        if hint:
            body += ["", hint]
    else:
        body = result.lines()
    return _framed(body)


def _framed(lines: list[str]) -> list[str]:
    return [DIVIDER, *(f" {line}" for line in lines), DIVIDER]


def _block(write: Writer, lines: list[str]) -> None:
    for line in _framed(lines):
        write(line)


def run_console_loop(state: AppState, *, read: Reader = input, write: Writer = print) -> None:
    """
    Read one line at a time until `bye`, EOF or Ctrl+C.

    `bye` never reaches the interpreter. Every other non-empty line does, and
    its result (or error) is printed as one block.
    """
    app_name = state.settings.app_name
    logger.info("Console connector started (tasks=%d).", state.tasks.size())

    if state.load_warning:
        notice = [f"Data loading issue: {state.load_warning}"]
        notice.append("Note: starting with an empty task list. Your tasks will be saved automatically.")
        _block(write, notice)

    _block(write, [f"Hello! I'm {app_name}", "What can I do for you?"])

    while True:
        try:
            user_input = read(PROMPT)
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        if user_input.strip().lower() == EXIT_COMMAND:
            logger.info("Console exit command received.")
            break

        try:
            result = state.interpreter.handle(user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            _block(write, ["Internal error while handling a command."])
            continue

        if result.kind is ResultKind.NOOP:
            continue
        if result.kind is ResultKind.ERROR:
            logger.info("Command error (%s): %s", result.command, result.message[0] if result.message else "")

        for line in format_result(result):
            write(line)

    _block(write, ["Bye. Hope to see you again soon!"])
    logger.info("Console connector finished.")
