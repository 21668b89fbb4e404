from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from consulkit.api.features import Features
from consulkit.models.kv import KVPair

from ..click_compat import RichCommand, RichGroup, click
from ..context import CLIContext
from ..errors import CLIError
from ..options import features_options, output_options
from ..runner import CommandOutput, run_command


@click.group(name="kv", cls=RichGroup)
def kv_group() -> None:
    """Key/value store commands."""


def _pair_payload(pair: KVPair, *, base64: bool) -> dict[str, Any]:
    value: str | None
    if base64:
        value = pair.value
    else:
        value = pair.text_value()
    return {
        "key": pair.key,
        "value": value,
        "flags": pair.flags,
        "session": pair.session,
        "lockIndex": pair.lock_index,
        "createIndex": pair.create_index,
        "modifyIndex": pair.modify_index,
    }


def _read_value(value: str | None, file: str | None) -> bytes:
    if value is not None and file is not None:
        raise CLIError.usage("Pass either VALUE or --file, not both.")
    if file == "-" or (value is None and file is None):
        return sys.stdin.buffer.read()
    if file is not None:
        path = Path(file)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise CLIError.io("read", path, exc, exit_code=2) from exc
    return (value or "").encode("utf-8")


@kv_group.command(name="get", cls=RichCommand)
@click.argument("key", type=str)
@click.option("--recurse", is_flag=True, help="Read every key under KEY as a prefix.")
@click.option("--base64", "as_base64", is_flag=True, help="Show values base64-encoded.")
@click.option("--dc", type=str, default=None, help="Datacenter (defaults to the agent's).")
@click.option("--ns", type=str, default=None, help="Namespace (Enterprise).")
@features_options
@output_options
@click.pass_obj
def kv_get(
    ctx: CLIContext,
    *,
    key: str,
    recurse: bool,
    as_base64: bool,
    dc: str | None,
    ns: str | None,
    features: Features | None,
) -> None:
    """
    Read a key.

    Examples:

    - `consulkit kv get app/config`
    - `consulkit kv get app/ --recurse --json`
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        client = ctx.get_client()
        resp = client.kv.read(key, dc=dc, ns=ns, recurse=recurse, features=features)
        pairs = [_pair_payload(p, base64=as_base64) for p in resp.response]
        if recurse:
            data: Any = {"entries": pairs}
        elif pairs:
            data = pairs[-1]
        else:
            data = None
        return CommandOutput(data=data, response=resp, api_called=True)

    run_command(ctx, command="kv get", fn=fn)


@kv_group.command(name="put", cls=RichCommand)
@click.argument("key", type=str)
@click.argument("value", type=str, required=False)
@click.option(
    "--file",
    type=click.Path(dir_okay=False, allow_dash=True),
    default=None,
    help="Read the value from a file ('-' for stdin).",
)
@click.option("--flags", type=click.IntRange(min=0), default=None, help="Opaque flags to store.")
@click.option("--cas", type=click.IntRange(min=0), default=None, help="Check-and-set index.")
@click.option("--acquire", type=str, default=None, help="Session to acquire the lock with.")
@click.option("--release", type=str, default=None, help="Session to release the lock from.")
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@output_options
@click.pass_obj
def kv_put(
    ctx: CLIContext,
    *,
    key: str,
    value: str | None,
    file: str | None,
    flags: int | None,
    cas: int | None,
    acquire: str | None,
    release: str | None,
    dc: str | None,
    ns: str | None,
) -> None:
    """
    Write a key.

    VALUE is stored as UTF-8; use --file for binary data. With neither, the
    value is read from stdin.
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        payload = _read_value(value, file)
        client = ctx.get_client()
        resp = client.kv.set(
            key,
            payload,
            acquire=acquire,
            cas=cas,
            dc=dc,
            flags=flags,
            ns=ns,
            release=release,
        )
        exit_code = 0
        if not resp.response:
            warnings.append("Write was not applied (check-and-set or lock condition not met).")
            exit_code = 1
        return CommandOutput(
            data={"key": key, "written": resp.response, "bytes": len(payload)},
            warnings=warnings,
            response=resp,
            api_called=True,
            exit_code=exit_code,
        )

    run_command(ctx, command="kv put", fn=fn)


@kv_group.command(name="delete", cls=RichCommand)
@click.argument("key", type=str)
@click.option("--recurse", is_flag=True, help="Delete every key under KEY as a prefix.")
@click.option("--cas", type=click.IntRange(min=0), default=None, help="Check-and-set index.")
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@output_options
@click.pass_obj
def kv_delete(
    ctx: CLIContext,
    *,
    key: str,
    recurse: bool,
    cas: int | None,
    dc: str | None,
    ns: str | None,
) -> None:
    """Delete a key (or a prefix with --recurse)."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        client = ctx.get_client()
        resp = client.kv.delete(key, cas=cas, dc=dc, ns=ns, recurse=recurse)
        return CommandOutput(
            data={"key": key, "deleted": resp.response},
            response=resp,
            api_called=True,
            exit_code=0 if resp.response else 1,
        )

    run_command(ctx, command="kv delete", fn=fn)


@kv_group.command(name="keys", cls=RichCommand)
@click.argument("prefix", type=str, default="")
@click.option("--separator", type=str, default=None, help="List keys only up to this separator.")
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def kv_keys(
    ctx: CLIContext,
    *,
    prefix: str,
    separator: str | None,
    dc: str | None,
    ns: str | None,
    features: Features | None,
) -> None:
    """List keys under PREFIX."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        client = ctx.get_client()
        resp = client.kv.keys(prefix, dc=dc, ns=ns, separator=separator, features=features)
        return CommandOutput(data={"keys": resp.response}, response=resp, api_called=True)

    run_command(ctx, command="kv keys", fn=fn)
