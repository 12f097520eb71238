# src/taskbook/cli/commands.py

"""
Command interpreter: one raw input line in, one CommandResult out.

Every line goes through the same steps:
- length check, trim, collapse whitespace runs
- resolve the leading token (exact name/alias, then a unique prefix)
- the handler validates its arguments before touching the task list
- a handler that mutates returns a Mutation; the interpreter saves the whole
  list once and rolls the change back if the save fails
"""

from __future__ import annotations

import contextlib
import logging
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import assert_never

from ..config import Settings
from ..core.errors import (
    AmbiguousCommandError,
    CorruptRecordError,
    DateInputError,
    IndexInputError,
    StorageError,
    TaskbookError,
    TaskTypeError,
    UnknownCommandError,
    UserInputError,
)
from ..core.events import NullObserver, StoreEvent
from ..core.ports import StoreObserver, TaskStorage
from ..tasks.task_list import TaskList
from ..tasks.task_models import DATE_MAX, DATE_MIN, Deadline, Event, Task, Todo
from ..tasks.task_storage import (
    EVENT_RANGE_SEPARATOR,
    FIELD_SEPARATOR,
    format_line,
    parse_iso_date,
    parse_line,
)

logger = logging.getLogger(__name__)

EXIT_COMMAND = "bye"

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_WHITESPACE = re.compile(r"\s+")
_INTEGER = re.compile(r"[+-]?[0-9]+")

BY_MARKER = "/by "
FROM_MARKER = "/from "
TO_MARKER = "/to "


class ResultKind(StrEnum):
    OK = "ok"
    ERROR = "error"
    NOOP = "noop"


@dataclass(slots=True)
class CommandResult:
    """
    Structured outcome handed back to the front end.

    `tasks` holds (1-based number or None, task) pairs; a None number means the
    task is shown without its position (e.g. right after it was added).
    """

    command: str | None
    kind: ResultKind
    message: list[str] = field(default_factory=list)
    tasks: list[tuple[int | None, Task]] = field(default_factory=list)
    footer: list[str] = field(default_factory=list)
    error: TaskbookError | None = None

    @property
    def ok(self) -> bool:
        return self.kind is not ResultKind.ERROR

    def lines(self) -> list[str]:
        out = list(self.message)
        for number, task in self.tasks:
            prefix = f"{number}." if number is not None else "  "
            out.append(f" {prefix} {task.render()}")
        out.extend(self.footer)
        return out

    @classmethod
    def failure(cls, command: str | None, error: TaskbookError) -> CommandResult:
        return cls(command=command, kind=ResultKind.ERROR, message=[error.message], error=error)


@dataclass(slots=True)
class Mutation:
    """A change already applied to the task list, plus how to take it back."""

    result: CommandResult
    undo: Callable[[], None]


@dataclass(frozen=True, slots=True)
class Limits:
    max_input_length: int = 2000
    max_description_length: int = 1000
    max_keyword_length: int = 100
    date_min: date = DATE_MIN
    date_max: date = DATE_MAX

    @classmethod
    def from_settings(cls, settings: Settings) -> Limits:
        # The task model never accepts dates outside DATE_MIN..DATE_MAX.
        return cls(
            max_input_length=settings.max_input_length,
            max_description_length=settings.max_description_length,
            max_keyword_length=settings.max_keyword_length,
            date_min=max(settings.date_min, DATE_MIN),
            date_max=min(settings.date_max, DATE_MAX),
        )


@dataclass(slots=True)
class CommandContext:
    tasks: TaskList
    limits: Limits
    registry: CommandRegistry


CommandHandler = Callable[[CommandContext, str], "CommandResult | Mutation"]


@dataclass(frozen=True, slots=True)
class CommandSpec:
    name: str
    handler: CommandHandler
    help_text: str
    usage: str


class CommandRegistry:
    """Command table with exact, alias and unique-prefix lookup."""

    def __init__(self) -> None:
        self._commands: dict[str, CommandSpec] = {}
        self._aliases: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        *,
        usage: str | None = None,
        aliases: list[str] | None = None,
    ) -> None:
        key = name.lower()
        self._commands[key] = CommandSpec(
            name=key,
            handler=handler,
            help_text=help_text,
            usage=usage or key,
        )
        for alias in aliases or []:
            self._aliases[alias.lower()] = key

    def names(self) -> list[str]:
        return list(self._commands)

    def resolve(self, token: str) -> CommandSpec:
        """
        Exact name or alias wins; otherwise the token must be a prefix of
        exactly one command name ("del" -> delete, "d" is ambiguous).
        """
        key = token.lower()
        if key in self._commands:
            return self._commands[key]
        if key in self._aliases:
            return self._commands[self._aliases[key]]

        candidates = [name for name in self._commands if name.startswith(key)]
        if len(candidates) == 1:
            return self._commands[candidates[0]]
        if len(candidates) > 1:
            raise AmbiguousCommandError(token, sorted(candidates))
        raise UnknownCommandError(
            f"Unknown command '{token}'. Try: {', '.join(self.names())}, {EXIT_COMMAND}."
        )

    def build_help(self) -> list[str]:
        specs = list(self._commands.values())
        width = max([len(s.usage) for s in specs] + [len(EXIT_COMMAND)])
        lines = ["Available commands:"]
        for spec in specs:
            lines.append(f"  {spec.usage.ljust(width)}  - {spec.help_text}")
        lines.append(f"  {EXIT_COMMAND.ljust(width)}  - Exit the program.")
        lines.append("Examples:")
        lines.extend(
            [
                "  todo Read a book",
                "  deadline Submit assignment /by 2024-12-25",
                "  event Team meeting /from 2pm /to 4pm",
                "  mark 1",
                "  find book",
            ]
        )
        return lines


# ---- argument helpers ----


def normalize_line(line: str, max_length: int) -> str:
    if len(line) > max_length:
        raise UserInputError(f"Input is too long (max {max_length} characters).")
    return _WHITESPACE.sub(" ", line.strip())


def _parse_index(args: str, command: str, tasks: TaskList) -> int:
    """Validate a 1-based task number and return the 0-based index."""
    parts = args.split()
    if len(parts) != 1:
        raise IndexInputError(f"Usage: {command} <positive integer>")
    raw = parts[0]
    if not _INTEGER.fullmatch(raw):
        raise IndexInputError("Index must be a positive integer.")
    value = int(raw)
    if not INT32_MIN <= value <= INT32_MAX:
        raise IndexInputError("Index is out of the supported integer range.")
    if value <= 0:
        raise IndexInputError("Index must be a positive integer.")
    if tasks.is_empty():
        raise IndexInputError("Your list is empty.")
    if value > tasks.size():
        raise IndexInputError(f"Invalid index for {command}. Use 1..{tasks.size()}")
    return value - 1


def _check_description(description: str, limits: Limits, label: str) -> str:
    if not description:
        raise UserInputError(f"{label} needs a non-empty description.")
    if len(description) > limits.max_description_length:
        raise UserInputError(
            f"Description is too long (max {limits.max_description_length} characters)."
        )
    if FIELD_SEPARATOR in description:
        raise UserInputError(f"Description cannot contain '{FIELD_SEPARATOR.strip()}' surrounded by spaces.")
    return description


def _parse_date(raw: str, limits: Limits) -> date:
    try:
        value = parse_iso_date(raw)
    except ValueError:
        raise DateInputError("Invalid date. Use yyyy-MM-dd, e.g., 2019-10-15.") from None
    if not limits.date_min <= value <= limits.date_max:
        raise DateInputError(
            f"Date must be between {limits.date_min.isoformat()} and {limits.date_max.isoformat()}."
        )
    return value


def _split_marker(args: str, marker: str) -> tuple[str, str] | None:
    pos = args.find(marker)
    if pos < 0:
        return None
    return args[:pos].strip(), args[pos + len(marker) :].strip()


def _count_line(tasks: TaskList) -> str:
    n = tasks.size()
    return f"Now you have {n} task{'' if n == 1 else 's'} in the list."


def _ensure_storable(task: Task) -> None:
    """Reject a task whose task-file line would not decode back to the same task."""
    try:
        stored = parse_line(format_line(task))
    except CorruptRecordError:
        stored = None
    if stored != task:
        raise UserInputError(
            "This task cannot be saved as typed. Avoid a '|' at the start or end of a field."
        )


def _added(ctx: CommandContext, command: str, task: Task) -> Mutation:
    _ensure_storable(task)
    ctx.tasks.add(task)

    def undo() -> None:
        ctx.tasks.remove(ctx.tasks.size() - 1)

    result = CommandResult(
        command=command,
        kind=ResultKind.OK,
        message=["Got it. I've added this task:"],
        tasks=[(None, task)],
        footer=[_count_line(ctx.tasks)],
    )
    return Mutation(result=result, undo=undo)


# ---- handlers ----


def cmd_list(ctx: CommandContext, args: str) -> CommandResult:
    if ctx.tasks.is_empty():
        return CommandResult(command="list", kind=ResultKind.OK, message=["Your list is empty."])
    return CommandResult(
        command="list",
        kind=ResultKind.OK,
        message=["Here are the tasks in your list:"],
        tasks=[(i, t) for i, t in enumerate(ctx.tasks, start=1)],
    )


def _set_done(ctx: CommandContext, args: str, command: str, done: bool) -> Mutation:
    index = _parse_index(args, command, ctx.tasks)
    task = ctx.tasks.get(index)
    previous = task.is_done

    if done:
        task.mark_done()
        header = "Nice! I've marked this task as done:"
    else:
        task.mark_not_done()
        header = "OK, I've marked this task as not done yet:"

    def undo() -> None:
        if previous:
            task.mark_done()
        else:
            task.mark_not_done()

    result = CommandResult(command=command, kind=ResultKind.OK, message=[header], tasks=[(None, task)])
    return Mutation(result=result, undo=undo)


def cmd_mark(ctx: CommandContext, args: str) -> Mutation:
    return _set_done(ctx, args, "mark", True)


def cmd_unmark(ctx: CommandContext, args: str) -> Mutation:
    return _set_done(ctx, args, "unmark", False)


def cmd_todo(ctx: CommandContext, args: str) -> Mutation:
    description = _check_description(args.strip(), ctx.limits, "Todo")
    return _added(ctx, "todo", Todo(description))


def cmd_deadline(ctx: CommandContext, args: str) -> Mutation:
    split = _split_marker(args, BY_MARKER)
    if split is None:
        raise UserInputError("Usage: deadline <description> /by yyyy-MM-dd")
    description, raw_date = split
    if not description or not raw_date:
        raise UserInputError("Deadline description and /by must be non-empty.")
    _check_description(description, ctx.limits, "Deadline")
    due = _parse_date(raw_date, ctx.limits)
    return _added(ctx, "deadline", Deadline(description, due=due))


def cmd_event(ctx: CommandContext, args: str) -> Mutation:
    from_pos = args.find(FROM_MARKER)
    to_pos = args.find(TO_MARKER)
    if from_pos < 0 or to_pos < 0 or to_pos <= from_pos:
        raise UserInputError("Usage: event <description> /from <start> /to <end>")

    description = args[:from_pos].strip()
    start = args[from_pos + len(FROM_MARKER) : to_pos].strip()
    end = args[to_pos + len(TO_MARKER) :].strip()
    if not description or not start or not end:
        raise UserInputError("Event description, /from, and /to must be non-empty.")

    _check_description(description, ctx.limits, "Event")
    if FIELD_SEPARATOR in start or FIELD_SEPARATOR in end:
        raise UserInputError(f"Event times cannot contain '{FIELD_SEPARATOR.strip()}' surrounded by spaces.")
    # The task file stores "<start> to <end>" and splits on the first " to ".
    stored = f"{start}{EVENT_RANGE_SEPARATOR}{end}".partition(EVENT_RANGE_SEPARATOR)
    if (stored[0], stored[2]) != (start, end):
        raise UserInputError("Event start cannot contain the word 'to' as a separate word.")

    return _added(ctx, "event", Event(description, start=start, end=end))


def cmd_delete(ctx: CommandContext, args: str) -> Mutation:
    index = _parse_index(args, "delete", ctx.tasks)
    removed = ctx.tasks.remove(index)

    def undo() -> None:
        ctx.tasks.insert(index, removed)

    result = CommandResult(
        command="delete",
        kind=ResultKind.OK,
        message=["Noted. I've removed this task:"],
        tasks=[(None, removed)],
        footer=[_count_line(ctx.tasks)],
    )
    return Mutation(result=result, undo=undo)


def cmd_find(ctx: CommandContext, args: str) -> CommandResult:
    keyword = args.strip()
    if not keyword:
        raise UserInputError("Find needs a non-empty keyword.")
    if len(keyword) > ctx.limits.max_keyword_length:
        raise UserInputError(f"Keyword is too long (max {ctx.limits.max_keyword_length} characters).")

    matches = ctx.tasks.find_by_text(keyword)
    if not matches:
        return CommandResult(command="find", kind=ResultKind.OK, message=[f"No tasks match '{keyword}'."])
    return CommandResult(
        command="find",
        kind=ResultKind.OK,
        message=["Here are the matching tasks in your list:"],
        tasks=[(i + 1, t) for i, t in matches],
    )


def cmd_snooze(ctx: CommandContext, args: str) -> Mutation:
    split = _split_marker(args, TO_MARKER)
    if split is None:
        raise UserInputError("Usage: snooze <number> /to yyyy-MM-dd")
    raw_index, raw_date = split
    index = _parse_index(raw_index, "snooze", ctx.tasks)
    task = ctx.tasks.get(index)

    match task:
        case Deadline():
            pass
        case Todo() | Event():
            raise TaskTypeError(
                f"Only deadline tasks can be snoozed; task {index + 1} is a {type(task).__name__.lower()}."
            )
        case _:
            assert_never(task)

    new_due = _parse_date(raw_date, ctx.limits)
    previous = task.due
    task.reschedule(new_due)

    def undo() -> None:
        task.reschedule(previous)

    result = CommandResult(
        command="snooze",
        kind=ResultKind.OK,
        message=["OK, I've rescheduled this task:"],
        tasks=[(None, task)],
    )
    return Mutation(result=result, undo=undo)


def cmd_help(ctx: CommandContext, args: str) -> CommandResult:
    return CommandResult(command="help", kind=ResultKind.OK, message=ctx.registry.build_help())


def build_default_registry() -> CommandRegistry:
    reg = CommandRegistry()
    reg.register("list", cmd_list, "Show all tasks.")
    reg.register("todo", cmd_todo, "Add a todo.", usage="todo <description>")
    reg.register(
        "deadline",
        cmd_deadline,
        "Add a task due on a date.",
        usage="deadline <desc> /by yyyy-MM-dd",
    )
    reg.register(
        "event",
        cmd_event,
        "Add an event with a start and an end.",
        usage="event <desc> /from <start> /to <end>",
    )
    reg.register("mark", cmd_mark, "Mark a task as done.", usage="mark <number>")
    reg.register("unmark", cmd_unmark, "Mark a task as not done.", usage="unmark <number>")
    reg.register("delete", cmd_delete, "Delete a task.", usage="delete <number>")
    reg.register("find", cmd_find, "Search tasks by keyword.", usage="find <keyword>")
    reg.register(
        "snooze",
        cmd_snooze,
        "Move a deadline to a new date.",
        usage="snooze <number> /to yyyy-MM-dd",
    )
    reg.register("help", cmd_help, "Show this help message.", aliases=["?"])
    return reg


registry = build_default_registry()


class CommandInterpreter:
    """
    Dispatches input lines against a TaskList and its storage.

    validate + mutate + persist runs under one lock, so a caller sharing the
    interpreter across threads still sees each command as one unit.
    """

    def __init__(
        self,
        tasks: TaskList,
        storage: TaskStorage,
        *,
        limits: Limits | None = None,
        observer: StoreObserver | None = None,
        command_registry: CommandRegistry | None = None,
        lock: threading.RLock | None = None,
        rollback_on_save_failure: bool = True,
    ) -> None:
        self._tasks = tasks
        self._storage = storage
        self._limits = limits or Limits()
        self._observer: StoreObserver = observer or NullObserver()
        self._registry = command_registry or registry
        self._lock = lock if lock is not None else threading.RLock()
        self._rollback = rollback_on_save_failure

    @property
    def tasks(self) -> TaskList:
        return self._tasks

    def handle(self, line: str) -> CommandResult:
        """Like execute(), but user/storage errors come back as an error result."""
        try:
            return self.execute(line)
        except TaskbookError as e:
            logger.debug("Command failed code=%s: %s", e.code, e.message)
            return CommandResult.failure(self._command_name(line), e)

    def execute(self, line: str) -> CommandResult:
        normalized = normalize_line(line, self._limits.max_input_length)
        if not normalized:
            return CommandResult(command=None, kind=ResultKind.NOOP)

        token, _, args = normalized.partition(" ")
        spec = self._registry.resolve(token)
        ctx = CommandContext(tasks=self._tasks, limits=self._limits, registry=self._registry)

        with self._lock:
            outcome = spec.handler(ctx, args)
            match outcome:
                case Mutation():
                    self._persist(spec.name, outcome)
                    return outcome.result
                case CommandResult():
                    return outcome
                case _:
                    assert_never(outcome)

    def _persist(self, command: str, mutation: Mutation) -> None:
        try:
            self._storage.save(self._tasks.snapshot())
        except StorageError:
            if self._rollback:
                mutation.undo()
                self._observer.notify(StoreEvent.ROLLED_BACK, command=command)
            raise

    def _command_name(self, line: str) -> str | None:
        parts = line.split(maxsplit=1)
        if not parts:
            return None
        token = parts[0]
        with contextlib.suppress(UserInputError):
            return self._registry.resolve(token).name
        return None
