from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .results import CommandResult

POST_COLUMNS = ("id", "author", "text")


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool


def _error_title(error_type: str) -> str:
    mapping = {
        "usage_error": "Syntax error",
        "validation_error": "Invalid input",
        "io_error": "I/O error",
    }
    return mapping.get((error_type or "").strip(), "Error")


def _format_scalar_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _kv_table(obj: dict[str, Any]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("field")
    table.add_column("value")
    for k, v in obj.items():
        table.add_row(str(k), Text(_format_scalar_value(v)))
    return table


def _posts_table(rows: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    for column in POST_COLUMNS:
        table.add_column(column, overflow="fold")
    for row in rows:
        table.add_row(*[Text(_format_scalar_value(row.get(c))) for c in POST_COLUMNS])
    return table


def _render_human_data(command: str, data: Any) -> Any:
    if not isinstance(data, dict):
        return Text(_format_scalar_value(data))
    if command == "version":
        return Text(str(data.get("version", "")), style="bold")
    if command == "match":
        posts = data.get("posts")
        if posts is None:
            return Text(str(data.get("count", 0)))
        footer = Text(f"{data.get('count', len(posts))} matching post(s)")
        return Group(_posts_table(posts), footer) if posts else footer
    return _kv_table(data)


def render_result(result: CommandResult, *, settings: RenderSettings) -> int:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return 0

    if not result.ok:
        if result.error is not None:
            title = _error_title(result.error.type)
            stderr.print(Text(f"{title}: {result.error.message}"))
        else:
            stderr.print("Error")
        return 0

    stdout.print(_render_human_data(result.command, result.data))
    if not settings.quiet:
        for warning in result.warnings:
            stderr.print(Text(f"Warning: {warning}"))
    return 0
