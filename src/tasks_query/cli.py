"""CLI entry point: run a query over markdown task files.

This module handles command-line argument parsing, logging setup, reading
task files and rendering the grouped result.
"""

from __future__ import annotations

import argparse
import json
import logging
import logging.handlers
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .config import Config, load_config
from .exceptions import ConfigError, TaskFileError
from .query import Query, TaskGroups
from .serializer import DefaultTaskSerializer
from .task import Task

logger = logging.getLogger(__name__)

_HEADING_STYLES = ("bold magenta", "bold cyan", "bold green", "bold")


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    ``extra_context`` values such as paths, calendar values and reminder
    lists are written with ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "context": {"function": record.funcName, "line": record.lineno},
        }
        entry["context"].update(getattr(record, "extra_context", {}))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def _setup_logging(config: Config, debug: bool) -> None:
    """Setup structured JSON logging to the configured rotating file.

    Args:
        config: Configuration holding the log file and rotation sizes
        debug: Enable debug level logging
    """
    config.log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    file_handler = logging.handlers.RotatingFileHandler(
        config.log_file,
        maxBytes=config.log_max_bytes,
        backupCount=config.log_backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(JSONFormatter())
    file_handler.setLevel(logging.DEBUG if debug else logging.INFO)

    root_logger.addHandler(file_handler)

    logger.info(
        "Logging initialized",
        extra={"extra_context": {"log_file": str(config.log_file), "debug": debug}},
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="tasks-query",
        description="Filter, sort and group emoji-annotated markdown tasks",
    )

    parser.add_argument("files", nargs="+", type=Path, help="Markdown files to read tasks from")

    query_source = parser.add_mutually_exclusive_group(required=True)
    query_source.add_argument(
        "-q",
        "--query",
        action="append",
        metavar="INSTRUCTION",
        help="Query instruction (repeat for several lines)",
    )
    query_source.add_argument(
        "--query-file",
        type=Path,
        help="File holding the query, one instruction per line",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=Path("./config.json"),
        help="Path to config.json (default: ./config.json, defaults if missing)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the plain text form of the groups instead of styled output",
    )

    return parser.parse_args(argv)


def read_tasks(
    paths: Sequence[Path], serializer: DefaultTaskSerializer, global_filter: str = ""
) -> list[Task]:
    """Read every task line from the given markdown files.

    Raises:
        TaskFileError: If a file cannot be read
    """
    tasks: list[Task] = []
    for path in paths:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as err:
            raise TaskFileError(f"Cannot read {path}: {err}") from err

        for line_number, line in enumerate(content.splitlines(), start=1):
            task = Task.from_line(
                line,
                serializer,
                path=str(path),
                line_number=line_number,
                global_filter=global_filter,
            )
            if task is not None:
                tasks.append(task)

        logger.debug(
            "Read task file",
            extra={"extra_context": {"path": str(path), "task_count": len(tasks)}},
        )
    return tasks


def _read_query(args: argparse.Namespace) -> str:
    if args.query_file is not None:
        try:
            return args.query_file.read_text(encoding="utf-8")
        except OSError as err:
            raise TaskFileError(f"Cannot read {args.query_file}: {err}") from err
    return "\n".join(args.query)


def render_groups(
    groups: TaskGroups, serializer: DefaultTaskSerializer, console: Console
) -> None:
    """Print headings and task lines with Rich styling."""
    for group in groups:
        for heading in group.group_headings:
            style = _HEADING_STYLES[min(heading.nesting_level, len(_HEADING_STYLES) - 1)]
            indent = "  " * heading.nesting_level
            console.print(Text(f"{indent}{heading.display_name or '(empty)'}", style=style))
        indent = "  " * len(group.group_names)
        for task in group.tasks:
            console.print(Text(f"{indent}{task.to_file_line(serializer).strip()}"))

    count = groups.total_tasks_count()
    console.print(Text(f"\n{count} task{'s' if count != 1 else ''}", style="dim"))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        Exit code (0=success, 1=query errors, 2=configuration or file errors)
    """
    args = _parse_args(argv)
    console = Console()

    try:
        config = load_config(args.config)
    except ConfigError as err:
        console.print(Text(f"Error: {err}", style="red"))
        return 2

    _setup_logging(config, args.debug)
    serializer = DefaultTaskSerializer(time_format=config.time_format)

    try:
        query = Query(_read_query(args))
        tasks = read_tasks(args.files, serializer, config.global_filter)
    except TaskFileError as err:
        console.print(Text(f"Error: {err}", style="red"))
        logger.error("Cannot read input", extra={"extra_context": {"error": str(err)}})
        return 2

    if query.has_errors:
        for error in query.errors:
            console.print(Text(str(error), style="red"))
        logger.info(
            "Query has errors",
            extra={"extra_context": {"error_count": len(query.errors)}},
        )
        return 1

    if query.explain_requested:
        console.print(Panel(query.explain(), title="Explanation", border_style="dim"))

    groups = query.apply(tasks)
    logger.info(
        "Query applied",
        extra={
            "extra_context": {
                "task_count": len(tasks),
                "match_count": groups.total_tasks_count(),
                "group_count": len(groups),
            }
        },
    )

    if args.plain:
        sys.stdout.write(str(groups))
    else:
        render_groups(groups, serializer, console)
    return 0


if __name__ == "__main__":
    sys.exit(main())
