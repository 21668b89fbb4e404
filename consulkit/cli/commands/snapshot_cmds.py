from __future__ import annotations

from pathlib import Path

from ..click_compat import RichCommand, RichGroup, click
from ..context import CLIContext
from ..errors import CLIError
from ..options import output_options
from ..runner import CommandOutput, run_command


@click.group(name="snapshot", cls=RichGroup)
def snapshot_group() -> None:
    """Snapshot save/restore commands."""


@snapshot_group.command(name="save", cls=RichCommand)
@click.argument("path", type=click.Path(dir_okay=False, writable=True))
@click.option("--stale", is_flag=True, help="Allow a non-leader server to produce the snapshot.")
@click.option("--dc", type=str, default=None)
@click.option("--force", is_flag=True, help="Overwrite PATH if it exists.")
@output_options
@click.pass_obj
def snapshot_save(
    ctx: CLIContext, *, path: str, stale: bool, dc: str | None, force: bool
) -> None:
    """Write a snapshot archive of the cluster state to PATH."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        target = Path(path)
        if target.exists() and not force:
            raise CLIError.usage(f"{target} already exists.", hint="Pass --force to overwrite.")
        resp = ctx.get_client().snapshot.save(dc=dc, stale=stale or None)
        try:
            target.write_bytes(resp.response)
        except OSError as exc:
            raise CLIError.io("write", target, exc) from exc
        return CommandOutput(
            data={"path": str(target), "bytes": len(resp.response)},
            response=resp,
            api_called=True,
        )

    run_command(ctx, command="snapshot save", fn=fn)


@snapshot_group.command(name="restore", cls=RichCommand)
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--dc", type=str, default=None)
@output_options
@click.pass_obj
def snapshot_restore(ctx: CLIContext, *, path: str, dc: str | None) -> None:
    """Restore the cluster state from the snapshot archive at PATH."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        source = Path(path)
        try:
            data = source.read_bytes()
        except OSError as exc:
            raise CLIError.io("read", source, exc) from exc
        ctx.get_client().snapshot.restore(data, dc=dc)
        return CommandOutput(
            data={"path": str(source), "bytes": len(data), "restored": True}, api_called=True
        )

    run_command(ctx, command="snapshot restore", fn=fn)
