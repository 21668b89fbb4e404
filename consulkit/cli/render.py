from __future__ import annotations

import json
import re
import sys
from dataclasses import dataclass
from typing import Any, cast

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    normalized = (error_type or "").strip()
    mapping = {
        "usage_error": "Usage error",
        "not_found": "Not found",
        "validation_error": "Validation error",
        "io_error": "I/O error",
        "config_error": "Configuration error",
        "auth_error": "Authentication error",
        "forbidden": "Permission denied",
        "rate_limited": "Rate limited",
        "server_error": "Server error",
        "network_error": "Network error",
        "decode_error": "Unexpected response",
        "api_error": "API error",
        "internal_error": "Internal error",
    }
    return mapping.get(normalized, "Error")


def _render_error_details(
    *,
    stderr: Console,
    hint: str | None,
    details: dict[str, Any] | None,
    settings: RenderSettings,
) -> None:
    if settings.quiet:
        return
    if hint:
        stderr.print(f"Hint: {hint}")
    if details and settings.verbosity >= 1:
        stderr.print(_kv_table(details))


_CAMEL_BREAK_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _humanize_title(value: str) -> str:
    raw = (value or "").strip()
    if not raw:
        return ""
    raw = raw.replace("_", " ").replace("-", " ")
    raw = _CAMEL_BREAK_RE.sub(" ", raw)
    raw = " ".join(raw.split())
    return raw[:1].upper() + raw[1:]


def _format_scalar_value(*, key: str | None, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        if all(isinstance(v, (str, int, float)) for v in value):
            return ", ".join(str(v) for v in value)
        return f"list ({len(value):,} items)"
    if isinstance(value, dict):
        flat = all(not isinstance(v, (dict, list)) for v in value.values())
        if value and flat and len(value) <= 3:
            return ", ".join(f"{k}={v}" for k, v in value.items())
        return f"object ({len(value):,} keys)"
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _columns_for(rows: list[dict[str, Any]]) -> list[str]:
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def _table_from_rows(rows: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    columns = _columns_for(rows)
    for c in columns:
        table.add_column(c)
    for row in rows:
        table.add_row(*[_format_scalar_value(key=c, value=row.get(c)) for c in columns])
    return table


def _kv_table(obj: dict[str, Any]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("field")
    table.add_column("value")
    for k, v in obj.items():
        table.add_row(str(k), _format_scalar_value(key=str(k), value=v))
    return table


def _render_section(*, title: str | None, value: Any, verbosity: int) -> Any:
    renderables: list[Any] = []
    if title:
        renderables.append(Text(_humanize_title(title), style="bold"))

    if isinstance(value, list) and value and all(isinstance(x, dict) for x in value):
        renderables.append(_table_from_rows(cast(list[dict[str, Any]], value)))
    elif isinstance(value, list):
        renderables.append(Text("\n".join(str(v) for v in value) if value else "(none)"))
    elif isinstance(value, dict):
        renderables.append(_kv_table(value))
        if verbosity >= 1:
            # Nested tables only with -v to keep default output short.
            for k, v in value.items():
                if isinstance(v, (dict, list)) and v:
                    renderables.append(_render_section(title=k, value=v, verbosity=verbosity))
    else:
        renderables.append(Text(str(value)))

    return Group(*renderables) if len(renderables) > 1 else renderables[0]


def _render_human_data(*, data: Any, verbosity: int) -> Any:
    if data is None:
        return Panel.fit(Text("OK"))
    if isinstance(data, dict):
        if len(data) == 1:
            only_key = str(next(iter(data)))
            return _render_section(title=only_key, value=data[only_key], verbosity=verbosity)
        if all(not isinstance(v, (dict, list)) for v in data.values()):
            return _kv_table(data)
        sections = [
            _render_section(title=str(k), value=v, verbosity=verbosity) for k, v in data.items()
        ]
        return Group(*sections)
    return _render_section(title=None, value=data, verbosity=verbosity)


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
            stderr.print(f"{title}: {result.error.message}")
            _render_error_details(
                stderr=stderr,
                hint=result.error.hint,
                details=result.error.details,
                settings=settings,
            )
        else:
            stderr.print("Error")
        return 0

    renderable: Any
    if result.command == "version" and isinstance(result.data, dict):
        renderable = Text(result.data.get("version", ""), style="bold")
    elif result.command == "kv get" and isinstance(result.data, dict) and "value" in result.data:
        # Plain values print as-is so output can be piped.
        stdout.out(str(result.data["value"] or ""), highlight=False)
        return 0
    else:
        renderable = _render_human_data(data=result.data, verbosity=settings.verbosity)

    stdout.print(renderable)
    return 0
