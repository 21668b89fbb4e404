from __future__ import annotations

from typing import Any

from consulkit.api.features import Features
from consulkit.models.check import HealthCheck
from consulkit.models.health import CheckState

from ..click_compat import RichCommand, RichGroup, click
from ..context import CLIContext
from ..options import features_options, output_options
from ..runner import CommandOutput, run_command


@click.group(name="health", cls=RichGroup)
def health_group() -> None:
    """Health commands."""


def _check_row(check: HealthCheck) -> dict[str, Any]:
    return {
        "Node": check.node,
        "CheckID": check.check_id,
        "Name": check.name,
        "Status": check.status,
        "ServiceName": check.service_name or None,
        "Output": (check.output or "").strip() or None,
    }


def _unhealthy(checks: list[HealthCheck]) -> bool:
    return any(c.status == CheckState.CRITICAL.value for c in checks)


@health_group.command(name="service", cls=RichCommand)
@click.argument("name", type=str)
@click.option("--passing", is_flag=True, help="Only instances whose checks all pass.")
@click.option("--tag", type=str, default=None, help="Only instances with this tag.")
@click.option("--dc", type=str, default=None)
@click.option("--near", type=str, default=None)
@click.option("--ns", type=str, default=None)
@click.option("--peer", type=str, default=None, help="Cluster peer the service is imported from.")
@features_options
@output_options
@click.pass_obj
def health_service(
    ctx: CLIContext,
    *,
    name: str,
    passing: bool,
    tag: str | None,
    dc: str | None,
    near: str | None,
    ns: str | None,
    peer: str | None,
    features: Features | None,
) -> None:
    """
    Show the instances of service NAME and their aggregated health.

    Examples:

    - `consulkit health service web --passing`
    - `consulkit health service web --filter 'Service.Port == 8080' --json`
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().health.service(
            name,
            dc=dc,
            near=near,
            ns=ns,
            passing=passing or None,
            peer=peer,
            tag=tag,
            features=features,
        )
        rows: list[dict[str, Any]] = []
        for entry in resp.response:
            node = entry.node
            svc = entry.service
            rows.append(
                {
                    "Node": node.node if node else None,
                    "Address": (svc.address if svc else None) or (node.address if node else None),
                    "ServiceID": svc.id if svc else None,
                    "Port": svc.port if svc else None,
                    "Status": entry.aggregated_status,
                }
            )
        return CommandOutput(data={"instances": rows}, response=resp, api_called=True)

    run_command(ctx, command="health service", fn=fn)


@health_group.command(name="node", cls=RichCommand)
@click.argument("node", type=str)
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def health_node(
    ctx: CLIContext, *, node: str, dc: str | None, ns: str | None, features: Features | None
) -> None:
    """List the checks on NODE. Exits 1 if any is critical."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().health.node(node, dc=dc, ns=ns, features=features)
        return CommandOutput(
            data={"checks": [_check_row(c) for c in resp.response]},
            response=resp,
            api_called=True,
            exit_code=1 if _unhealthy(resp.response) else 0,
        )

    run_command(ctx, command="health node", fn=fn)


@health_group.command(name="checks", cls=RichCommand)
@click.argument("service", type=str)
@click.option("--dc", type=str, default=None)
@click.option("--near", type=str, default=None)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def health_checks(
    ctx: CLIContext,
    *,
    service: str,
    dc: str | None,
    near: str | None,
    ns: str | None,
    features: Features | None,
) -> None:
    """List the checks of every instance of SERVICE."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().health.checks(
            service, dc=dc, near=near, ns=ns, features=features
        )
        return CommandOutput(
            data={"checks": [_check_row(c) for c in resp.response]},
            response=resp,
            api_called=True,
        )

    run_command(ctx, command="health checks", fn=fn)


@health_group.command(name="state", cls=RichCommand)
@click.argument(
    "state",
    type=click.Choice([s.value for s in CheckState]),
    default=CheckState.ANY.value,
)
@click.option("--dc", type=str, default=None)
@click.option("--near", type=str, default=None)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def health_state(
    ctx: CLIContext,
    *,
    state: str,
    dc: str | None,
    near: str | None,
    ns: str | None,
    features: Features | None,
) -> None:
    """List checks in STATE (any, passing, warning, critical)."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().health.state(
            CheckState(state), dc=dc, near=near, ns=ns, features=features
        )
        return CommandOutput(
            data={"checks": [_check_row(c) for c in resp.response]},
            response=resp,
            api_called=True,
        )

    run_command(ctx, command="health state", fn=fn)
