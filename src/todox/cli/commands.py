"""Subcommand handlers for the todox CLI."""

import argparse
import logging
from pathlib import Path

from ..errors import TodoxError
from ..host import Severity, TerminalHost
from ..models import TodoxConfig
from ..services import CommandService, extract_tags
from .output import header

logger = logging.getLogger(__name__)

CLEAR_PRIORITY = ("none", "-")


def parse_rows(value: str) -> tuple[int, int]:
    """
    Parse a 1-based inclusive row range into a 0-based half-open range.

    Examples: "3" -> (2, 3), "2:4" -> (1, 4)
    """
    first, _, last = value.partition(":")
    try:
        start = int(first)
        end = int(last) if last else start
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid row range: {value}") from e
    if start < 1 or end < start:
        raise argparse.ArgumentTypeError(f"Invalid row range: {value}")
    return (start - 1, end)


def parse_row(value: str) -> int:
    start, end = parse_rows(value)
    if end - start != 1:
        raise argparse.ArgumentTypeError(f"Expected a single row: {value}")
    return start


def add_subcommands(parser: argparse.ArgumentParser) -> None:
    """Register the todox subcommands on ``parser``."""
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    def add(name: str, help_text: str) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "-f",
            "--file",
            type=Path,
            default=None,
            help="Todo file to operate on (default: first configured file)",
        )
        return sub

    sub = add("add", "Capture a new task (prompts when TEXT is omitted)")
    sub.add_argument("text", nargs="*", help="Task text")

    add("list", "Print the tasks with their row numbers")

    sub = add("sort", "Sort tasks by date, priority, project, context or due")
    sub.add_argument("mode", nargs="?", default="date", help="Sort mode (default: date)")

    add("archive", "Move completed tasks to the done file")

    sub = add("toggle", "Toggle completion of a task")
    sub.add_argument("row", type=parse_row, help="1-based row number")

    sub = add("priority", "Set the priority of a task (prompts when LETTER is omitted)")
    sub.add_argument("row", type=parse_row, help="1-based row number")
    sub.add_argument("letter", nargs="?", default=None, help="A-Z, or 'none' to clear")

    sub = add("tag", "Add project tags to tasks (prompts when TAG is omitted)")
    sub.add_argument("rows", type=parse_rows, help="Row or START:END range, 1-based")
    sub.add_argument("tags", nargs="*", help="Tags to add, with or without '+'")

    add("tags", "List project tags used in the todo file")
    add("open", "Open a todo file in $EDITOR")
    add("done", "Open a done file in $EDITOR")


def run_command(args: argparse.Namespace, config: TodoxConfig, host: TerminalHost) -> int:
    """
    Run the selected subcommand.

    Returns:
        Exit code (0 = success, 1 = an error was reported)
    """
    commands = CommandService(config, host)
    path: Path | None = args.file.expanduser() if args.file else None
    target = path or config.active_file
    logger.debug("Running %s on %s", args.command, target)

    if args.command == "open":
        commands.open_todo()
    elif args.command == "done":
        commands.open_done(path)
    elif args.command == "add":
        text = " ".join(args.text)
        if text:
            if target is None:
                host.notify("No todo files configured", Severity.ERROR)
            else:
                commands.capture(target, text)
        else:
            commands.capture_todo(path)
    elif target is None:
        host.notify("No todo files configured", Severity.ERROR)
    elif args.command in ("list", "tags"):
        _print_collection(commands, target, host, tags_only=args.command == "tags")
    elif args.command == "sort":
        commands.sort_by(target, args.mode)
    elif args.command == "archive":
        commands.move_done_tasks(target)
    elif args.command == "toggle":
        commands.toggle_todo_state(target, args.row)
    elif args.command == "priority":
        if args.letter is None:
            commands.add_priority(target, args.row)
        elif args.letter.lower() in CLEAR_PRIORITY:
            commands.apply_priority(target, args.row, None)
        elif len(args.letter) == 1 and args.letter.isalpha():
            commands.apply_priority(target, args.row, args.letter.upper())
        else:
            host.notify(f"Invalid priority: {args.letter}", Severity.ERROR)
    elif args.command == "tag":
        start, end = args.rows
        if args.tags:
            commands.apply_project_tags(target, start, end, [t.lstrip("+") for t in args.tags])
        else:
            commands.add_project_tag(target, start, end)

    return 1 if host.error_count else 0


def _print_collection(
    commands: CommandService, path: Path, host: TerminalHost, *, tags_only: bool
) -> None:
    try:
        lines = commands.repository.load(path)
    except TodoxError as e:
        host.notify(str(e), Severity.ERROR)
        return

    if tags_only:
        for tag in extract_tags(lines):
            print(f"+{tag}")
        return

    width = len(str(len(lines)))
    for row, line in enumerate(lines, start=1):
        if line.strip():
            print(f"{row:>{width}} {line}")
        else:
            header(f"{row:>{width}}")
