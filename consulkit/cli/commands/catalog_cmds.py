from __future__ import annotations

from consulkit.api.features import Features

from ..click_compat import RichCommand, RichGroup, click
from ..context import CLIContext
from ..options import features_options, output_options
from ..runner import CommandOutput, run_command
from ._serialize import to_cli


@click.group(name="catalog", cls=RichGroup)
def catalog_group() -> None:
    """Catalog commands (nodes, services, datacenters)."""


@catalog_group.command(name="datacenters", cls=RichCommand)
@features_options
@output_options
@click.pass_obj
def catalog_datacenters(ctx: CLIContext, *, features: Features | None) -> None:
    """List known datacenters, nearest first."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().catalog.datacenters(features=features)
        return CommandOutput(data={"datacenters": resp.response}, response=resp, api_called=True)

    run_command(ctx, command="catalog datacenters", fn=fn)


@catalog_group.command(name="nodes", cls=RichCommand)
@click.option("--dc", type=str, default=None)
@click.option("--near", type=str, default=None, help="Sort by round-trip time from this node.")
@features_options
@output_options
@click.pass_obj
def catalog_nodes(
    ctx: CLIContext, *, dc: str | None, near: str | None, features: Features | None
) -> None:
    """
    List nodes.

    Examples:

    - `consulkit catalog nodes`
    - `consulkit catalog nodes --filter 'Meta.rack == "r1"'`
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().catalog.nodes(dc=dc, near=near, features=features)
        rows = [
            {
                "Node": n.node,
                "ID": n.id,
                "Address": n.address,
                "Datacenter": n.datacenter,
                "Meta": n.meta,
            }
            for n in resp.response
        ]
        return CommandOutput(data={"nodes": rows}, response=resp, api_called=True)

    run_command(ctx, command="catalog nodes", fn=fn)


@catalog_group.command(name="services", cls=RichCommand)
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def catalog_services(
    ctx: CLIContext, *, dc: str | None, ns: str | None, features: Features | None
) -> None:
    """List service names and their tags."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().catalog.services(dc=dc, ns=ns, features=features)
        rows = [{"Service": name, "Tags": tags} for name, tags in sorted(resp.response.items())]
        return CommandOutput(data={"services": rows}, response=resp, api_called=True)

    run_command(ctx, command="catalog services", fn=fn)


@catalog_group.command(name="service", cls=RichCommand)
@click.argument("name", type=str)
@click.option("--tag", type=str, default=None, help="Only instances with this tag.")
@click.option("--connect", is_flag=True, help="List Connect-capable instances instead.")
@click.option("--dc", type=str, default=None)
@click.option("--near", type=str, default=None)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def catalog_service(
    ctx: CLIContext,
    *,
    name: str,
    tag: str | None,
    connect: bool,
    dc: str | None,
    near: str | None,
    ns: str | None,
    features: Features | None,
) -> None:
    """List the nodes providing service NAME."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        catalog = ctx.get_client().catalog
        lookup = catalog.connect if connect else catalog.service
        resp = lookup(name, dc=dc, near=near, ns=ns, tag=tag, features=features)
        rows = [
            {
                "Node": s.node,
                "Address": s.service_address or s.address,
                "ServiceID": s.service_id,
                "Port": s.service_port,
                "Tags": s.service_tags,
            }
            for s in resp.response
        ]
        return CommandOutput(data={"instances": rows}, response=resp, api_called=True)

    run_command(ctx, command="catalog service", fn=fn)


@catalog_group.command(name="node", cls=RichCommand)
@click.argument("node", type=str)
@click.option("--dc", type=str, default=None)
@click.option("--ns", type=str, default=None)
@features_options
@output_options
@click.pass_obj
def catalog_node(
    ctx: CLIContext, *, node: str, dc: str | None, ns: str | None, features: Features | None
) -> None:
    """Show a node and the services registered on it."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        resp = ctx.get_client().catalog.node_services(node, dc=dc, ns=ns, features=features)
        return CommandOutput(data=to_cli(resp.response), response=resp, api_called=True)

    run_command(ctx, command="catalog node", fn=fn)
