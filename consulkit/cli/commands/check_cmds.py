from __future__ import annotations

from consulkit.api.features import Features

from ..click_compat import RichCommand, RichGroup, click
from ..context import CLIContext
from ..errors import CLIError
from ..options import features_options, output_options
from ..runner import CommandOutput, run_command


@click.group(name="check", cls=RichGroup)
def check_group() -> None:
    """Local agent check commands."""


@check_group.command(name="list", cls=RichCommand)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def check_list(ctx: CLIContext, *, ns: str | None, features: Features | None) -> None:
    """List checks registered on the local agent."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().checks.list(ns=ns, features=features)
        rows = [
            {
                "CheckID": check_id,
                "Name": check.name,
                "Status": check.status,
                "ServiceID": check.service_id or None,
                "Type": check.type,
            }
            for check_id, check in sorted(resp.response.items())
        ]
        return CommandOutput(data={"checks": rows}, response=resp, api_called=True)

    run_command(ctx, command="check list", fn=fn)


@check_group.command(name="register", cls=RichCommand)
@click.argument("name", type=str)
@click.option("--id", "check_id", type=str, default=None, help="Check ID (defaults to NAME).")
@click.option("--ttl", type=str, default=None, help="TTL check with this interval (e.g. 30s).")
@click.option("--http", type=str, default=None, help="HTTP URL to poll.")
@click.option("--tcp", type=str, default=None, help="host:port to connect to.")
@click.option("--interval", type=str, default=None, help="Polling interval for HTTP/TCP.")
@click.option("--service-id", type=str, default=None, help="Associate with a service.")
@click.option("--notes", type=str, default=None)
@output_options
@click.pass_obj
def check_register(
    ctx: CLIContext,
    *,
    name: str,
    check_id: str | None,
    ttl: str | None,
    http: str | None,
    tcp: str | None,
    interval: str | None,
    service_id: str | None,
    notes: str | None,
) -> None:
    """Register a TTL, HTTP or TCP check with the local agent."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        kinds = [k for k in (ttl, http, tcp) if k is not None]
        if len(kinds) != 1:
            raise CLIError.usage("Specify exactly one of --ttl, --http or --tcp.")
        if (http or tcp) and interval is None:
            raise CLIError.usage("--interval is required for HTTP and TCP checks.")
        ctx.get_client().checks.register(
            name,
            id=check_id,
            ttl=ttl,
            http=http,
            tcp=tcp,
            interval=interval,
            service_id=service_id,
            notes=notes,
        )
        return CommandOutput(
            data={"check": check_id or name, "registered": True}, api_called=True
        )

    run_command(ctx, command="check register", fn=fn)


@check_group.command(name="deregister", cls=RichCommand)
@click.argument("check_id", type=str)
@click.option("--ns", type=str, default=None)
@output_options
@click.pass_obj
def check_deregister(ctx: CLIContext, *, check_id: str, ns: str | None) -> None:
    """Remove a check from the local agent."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        ctx.get_client().checks.deregister(check_id, ns=ns)
        return CommandOutput(data={"check": check_id, "deregistered": True}, api_called=True)

    run_command(ctx, command="check deregister", fn=fn)


_TTL_COMMANDS = {"pass": "passing", "warn": "warning", "fail": "critical"}


def _ttl_command(name: str) -> click.Command:
    status = _TTL_COMMANDS[name]

    @click.command(name=name, cls=RichCommand, help=f"Mark TTL check CHECK_ID as {status}.")
    @click.argument("check_id", type=str)
    @click.option("--note", type=str, default=None, help="Text stored as the check output.")
    @output_options
    @click.pass_obj
    def _cmd(ctx: CLIContext, *, check_id: str, note: str | None) -> None:
        def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
            checks = ctx.get_client().checks
            update = {"pass": checks.ttl_pass, "warn": checks.ttl_warn, "fail": checks.ttl_fail}
            update[name](check_id, note=note)
            return CommandOutput(data={"check": check_id, "status": status}, api_called=True)

        run_command(ctx, command=f"check {name}", fn=fn)

    return _cmd


for _name in _TTL_COMMANDS:
    check_group.add_command(_ttl_command(_name))
