import json
from pathlib import Path

import click

from agt.cli.output import machine_output, user_output
from agt.core.structured_log import DEFAULT_TAIL_LINES, default_log_path, tail_log

_LEVEL_COLORS = {"WARNING": "yellow", "ERROR": "red", "CRITICAL": "red"}
_BASE_KEYS = ("timestamp", "level", "logger", "message")


def format_record(record: dict[str, object]) -> str:
    level = str(record.get("level", ""))
    extra = {key: value for key, value in record.items() if key not in _BASE_KEYS}
    line = f"{record.get('timestamp', '')} {click.style(f'{level:<7}', fg=_LEVEL_COLORS.get(level))}"
    line += f" {record.get('message', '')}"
    if extra:
        line += " " + click.style(json.dumps(extra, default=str), dim=True)
    return line


@click.command("logs")
@click.option(
    "-n",
    "--lines",
    type=click.IntRange(min=1),
    default=DEFAULT_TAIL_LINES,
    show_default=True,
    help="Number of records to show.",
)
@click.option(
    "--path",
    "log_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Log file to read (defaults to AGT_LOG_FILE or ~/.agt/agt.log).",
)
def logs_cmd(lines: int, log_path: Path | None) -> None:
    """Show the most recent entries of the agt log."""
    path = log_path if log_path is not None else default_log_path()
    records = tail_log(path, lines)
    if not records:
        user_output(f"No log entries in {path}")
        return
    for record in records:
        machine_output(format_record(record))
