from __future__ import annotations

from typing import Any

from consulkit.api.features import Features
from consulkit.models.session import SessionBehavior, SessionEntry

from ..click_compat import RichCommand, RichGroup, click
from ..context import CLIContext
from ..options import features_options, output_options
from ..runner import CommandOutput, run_command


@click.group(name="session", cls=RichGroup)
def session_group() -> None:
    """Session commands (locks and leader election)."""


def _session_row(entry: SessionEntry) -> dict[str, Any]:
    return {
        "ID": entry.id,
        "Name": entry.name or None,
        "Node": entry.node,
        "Behavior": entry.behavior,
        "TTL": entry.ttl or None,
        "LockDelay": entry.lock_delay,
    }


@session_group.command(name="list", cls=RichCommand)
@click.option("--node", type=str, default=None, help="Only sessions belonging to NODE.")
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def session_list(
    ctx: CLIContext,
    *,
    node: str | None,
    dc: str | None,
    ns: str | None,
    features: Features | None,
) -> None:
    """List active sessions."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        sessions = ctx.get_client().sessions
        if node is not None:
            resp = sessions.node(node, dc=dc, ns=ns, features=features)
        else:
            resp = sessions.list(dc=dc, ns=ns, features=features)
        rows = [_session_row(s) for s in resp.response]
        return CommandOutput(data={"sessions": rows}, response=resp, api_called=True)

    run_command(ctx, command="session list", fn=fn)


@session_group.command(name="info", cls=RichCommand)
@click.argument("uuid", type=str)
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def session_info(
    ctx: CLIContext, *, uuid: str, dc: str | None, ns: str | None, features: Features | None
) -> None:
    """Show one session."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().sessions.info(uuid, dc=dc, ns=ns, features=features)
        rows = [_session_row(s) for s in resp.response]
        if not rows:
            warnings.append(f"Session {uuid} not found (it may have expired).")
        return CommandOutput(
            data={"sessions": rows},
            warnings=warnings,
            response=resp,
            api_called=True,
            exit_code=0 if rows else 4,
        )

    run_command(ctx, command="session info", fn=fn)


@session_group.command(name="create", cls=RichCommand)
@click.option("--name", type=str, default=None)
@click.option("--node", type=str, default=None, help="Node to bind to (defaults to the agent).")
@click.option("--ttl", type=str, default=None, help="Invalidate unless renewed (e.g. 30s).")
@click.option(
    "--behavior",
    type=click.Choice([b.value for b in SessionBehavior]),
    default=None,
    help="What happens to held locks when the session is invalidated.",
)
@click.option("--lock-delay", type=str, default=None, help="Lock delay (e.g. 15s).")
@click.option("--dc", type=str, default=None)
@output_options
@click.pass_obj
def session_create(
    ctx: CLIContext,
    *,
    name: str | None,
    node: str | None,
    ttl: str | None,
    behavior: str | None,
    lock_delay: str | None,
    dc: str | None,
) -> None:
    """
    Create a session and print its ID.

    Examples:

    - `consulkit session create --name leader --ttl 15s`
    - `consulkit session create --behavior delete --json`
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().sessions.create(
            name=name,
            node=node,
            ttl=ttl,
            behavior=behavior,
            lock_delay=lock_delay,
            dc=dc,
        )
        return CommandOutput(data={"id": resp.response.id}, response=resp, api_called=True)

    run_command(ctx, command="session create", fn=fn)


@session_group.command(name="destroy", cls=RichCommand)
@click.argument("uuid", type=str)
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@output_options
@click.pass_obj
def session_destroy(ctx: CLIContext, *, uuid: str, dc: str | None, ns: str | None) -> None:
    """Destroy a session, releasing any locks it holds."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        ctx.get_client().sessions.destroy(uuid, dc=dc, ns=ns)
        return CommandOutput(data={"id": uuid, "destroyed": True}, api_called=True)

    run_command(ctx, command="session destroy", fn=fn)


@session_group.command(name="renew", cls=RichCommand)
@click.argument("uuid", type=str)
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@output_options
@click.pass_obj
def session_renew(ctx: CLIContext, *, uuid: str, dc: str | None, ns: str | None) -> None:
    """Renew a TTL session."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().sessions.renew(uuid, dc=dc, ns=ns)
        rows = [_session_row(s) for s in resp.response]
        return CommandOutput(data={"sessions": rows}, response=resp, api_called=True)

    run_command(ctx, command="session renew", fn=fn)
