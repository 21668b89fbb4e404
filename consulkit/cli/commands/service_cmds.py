from __future__ import annotations

from consulkit.api.features import Features
from consulkit.models.check import AgentServiceCheck

from ..click_compat import RichCommand, RichGroup, click
from ..context import CLIContext
from ..errors import CLIError
from ..options import features_options, output_options
from ..runner import CommandOutput, run_command
from ._serialize import to_cli


@click.group(name="service", cls=RichGroup)
def service_group() -> None:
    """Local agent service commands."""


def _parse_meta(pairs: tuple[str, ...]) -> dict[str, str] | None:
    if not pairs:
        return None
    meta: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise CLIError.usage(f"Invalid --meta value {pair!r}; expected KEY=VALUE.")
        meta[key] = value
    return meta


@service_group.command(name="list", cls=RichCommand)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def service_list(ctx: CLIContext, *, ns: str | None, features: Features | None) -> None:
    """List services registered on the local agent."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().services.list(ns=ns, features=features)
        rows = [
            {
                "ID": service_id,
                "Service": svc.service,
                "Address": svc.address or None,
                "Port": svc.port,
                "Tags": svc.tags,
            }
            for service_id, svc in sorted(resp.response.items())
        ]
        return CommandOutput(data={"services": rows}, response=resp, api_called=True)

    run_command(ctx, command="service list", fn=fn)


@service_group.command(name="get", cls=RichCommand)
@click.argument("service_id", type=str)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def service_get(
    ctx: CLIContext, *, service_id: str, ns: str | None, features: Features | None
) -> None:
    """Show the full definition of a local service."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().services.read(service_id, ns=ns, features=features)
        return CommandOutput(
            data={"service": to_cli(resp.response)}, response=resp, api_called=True
        )

    run_command(ctx, command="service get", fn=fn)


@service_group.command(name="register", cls=RichCommand)
@click.argument("name", type=str)
@click.option(
    "--id", "service_id", type=str, default=None, help="Instance ID (defaults to NAME)."
)
@click.option("--address", type=str, default=None)
@click.option("--port", type=click.IntRange(0, 65535), default=None)
@click.option("--tag", "tags", type=str, multiple=True, help="Tag (repeatable).")
@click.option("--meta", type=str, multiple=True, help="KEY=VALUE metadata (repeatable).")
@click.option("--ttl", type=str, default=None, help="Attach a TTL check with this interval.")
@click.option("--ns", type=str, default=None)
@output_options
@click.pass_obj
def service_register(
    ctx: CLIContext,
    *,
    name: str,
    service_id: str | None,
    address: str | None,
    port: int | None,
    tags: tuple[str, ...],
    meta: tuple[str, ...],
    ttl: str | None,
    ns: str | None,
) -> None:
    """
    Register a service with the local agent.

    Examples:

    - `consulkit service register web --port 8080 --tag primary`
    - `consulkit service register worker --ttl 30s --meta version=2`
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        check = AgentServiceCheck(ttl=ttl) if ttl is not None else None
        ctx.get_client().services.register(
            name,
            id=service_id,
            address=address,
            port=port,
            tags=list(tags) or None,
            meta=_parse_meta(meta),
            check=check,
            ns=ns,
        )
        return CommandOutput(
            data={"service": service_id or name, "registered": True}, api_called=True
        )

    run_command(ctx, command="service register", fn=fn)


@service_group.command(name="deregister", cls=RichCommand)
@click.argument("service_id", type=str)
@click.option("--ns", type=str, default=None)
@output_options
@click.pass_obj
def service_deregister(ctx: CLIContext, *, service_id: str, ns: str | None) -> None:
    """Remove a service (and its checks) from the local agent."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        ctx.get_client().services.deregister(service_id, ns=ns)
        return CommandOutput(data={"service": service_id, "deregistered": True}, api_called=True)

    run_command(ctx, command="service deregister", fn=fn)


@service_group.command(name="maintenance", cls=RichCommand)
@click.argument("service_id", type=str)
@click.option("--enable/--disable", default=True, help="Enter or leave maintenance mode.")
@click.option("--reason", type=str, default=None, help="Reason shown on the maintenance check.")
@click.option("--ns", type=str, default=None)
@output_options
@click.pass_obj
def service_maintenance(
    ctx: CLIContext, *, service_id: str, enable: bool, reason: str | None, ns: str | None
) -> None:
    """Toggle maintenance mode for a local service."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        ctx.get_client().services.maintenance(service_id, enable=enable, reason=reason, ns=ns)
        return CommandOutput(
            data={"service": service_id, "maintenance": enable}, api_called=True
        )

    run_command(ctx, command="service maintenance", fn=fn)


@service_group.command(name="health", cls=RichCommand)
@click.argument("service_id", type=str)
@click.option("--ns", type=str, default=None)
@output_options
@click.pass_obj
def service_health(ctx: CLIContext, *, service_id: str, ns: str | None) -> None:
    """
    Show the local agent's view of one service instance's health.

    The agent answers 429 (warning) or 503 (critical) for unhealthy instances;
    those exit with code 5.
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().services.health_by_id(service_id, ns=ns)
        info = resp.response
        data = {
            "ServiceID": service_id,
            "AggregatedStatus": info.aggregated_status,
            "Checks": [c.name for c in info.checks or []],
        }
        return CommandOutput(data=data, response=resp, api_called=True)

    run_command(ctx, command="service health", fn=fn)
