"""
Command execution.

Every command body is a ``fn(ctx, warnings) -> CommandOutput`` closure handed to
``run_command``, which times it, wraps the outcome in a ``CommandResult``,
prints it in the selected format and exits with the right code.
"""

from __future__ import annotations

import json
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from rich.console import Console

from consulkit.api.response import ApiResponse

from .click_compat import click
from .context import CLIContext, build_result, error_info_for_exception, exit_code_for_exception
from .render import RenderSettings, render_result
from .results import CommandResult


@dataclass(frozen=True, slots=True)
class CommandOutput:
    data: Any | None = None
    warnings: list[str] | None = None
    # Source of meta.consul (index, known leader, ...)
    response: ApiResponse[Any] | None = None
    api_called: bool = False
    exit_code: int = 0


CommandFn = Callable[[CLIContext, list[str]], CommandOutput]


def _write_json(result: CommandResult) -> None:
    payload = result.model_dump(by_alias=True, mode="json")
    if payload["meta"].get("consul") is None:
        payload["meta"].pop("consul", None)
    sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")


def _stderr_notes(ctx: CLIContext, result: CommandResult) -> list[str]:
    if ctx.quiet:
        return []
    notes = [f"Warning: {w}" for w in result.warnings]
    consul = result.meta.consul
    if consul and ctx.verbosity >= 1:
        notes.append("consul: " + " ".join(f"{k}={v}" for k, v in sorted(consul.items())))
    return notes


def emit_result(ctx: CLIContext, result: CommandResult) -> None:
    if ctx.output == "json":
        _write_json(result)
        return
    settings = RenderSettings(output="table", quiet=ctx.quiet, verbosity=ctx.verbosity)
    render_result(result, settings=settings)
    notes = _stderr_notes(ctx, result)
    if notes:
        stderr = Console(file=sys.stderr, force_terminal=False)
        for note in notes:
            stderr.print(note, highlight=False)


def _client_address(ctx: CLIContext) -> str | None:
    client = ctx._client
    return client.settings.address if client is not None else None


def run_command(ctx: CLIContext, *, command: str, fn: CommandFn) -> None:
    """Run ``fn`` and exit; never returns normally."""
    started = time.time()
    warnings: list[str] = []
    try:
        out = fn(ctx, warnings)
    except Exception as exc:
        failed = build_result(
            ok=False,
            command=command,
            started_at=started,
            data=None,
            warnings=warnings,
            address=_client_address(ctx),
            error=error_info_for_exception(exc),
        )
        emit_result(ctx, failed)
        raise click.exceptions.Exit(exit_code_for_exception(exc)) from exc

    result = build_result(
        ok=True,
        command=command,
        started_at=started,
        data=out.data,
        warnings=out.warnings or warnings,
        address=_client_address(ctx) if out.api_called else None,
        response=out.response,
    )
    emit_result(ctx, result)
    raise click.exceptions.Exit(out.exit_code)
