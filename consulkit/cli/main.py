from __future__ import annotations

from pathlib import Path

import consulkit

from .click_compat import RichGroup, click
from .context import CLIContext
from .logging import configure_logging, restore_logging


@click.group(
    name="consulkit",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option("--dotenv/--no-dotenv", default=False, help="Opt-in .env loading.")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=".env",
)
@click.option("--address", type=str, default=None, help="Consul address (CONSUL_HTTP_ADDR).")
@click.option("--token", type=str, default=None, help="ACL token (CONSUL_HTTP_TOKEN).")
@click.option(
    "--token-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Read the ACL token from a file (CONSUL_HTTP_TOKEN_FILE).",
)
@click.option("--ca-cert", type=click.Path(dir_okay=False), default=None, help="CA certificate.")
@click.option(
    "--ca-path", type=click.Path(file_okay=False), default=None, help="Directory of CA files."
)
@click.option("--client-cert", type=click.Path(dir_okay=False), default=None)
@click.option("--client-key", type=click.Path(dir_okay=False), default=None)
@click.option("--insecure", is_flag=True, help="Skip TLS certificate verification.")
@click.option(
    "--api-version",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="HTTP API version prefix.",
)
@click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
@click.version_option(version=consulkit.__version__, prog_name="consulkit")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    dotenv: bool,
    env_file: str,
    address: str | None,
    token: str | None,
    token_file: str | None,
    ca_cert: str | None,
    ca_path: str | None,
    client_cert: str | None,
    client_key: str | None,
    insecure: bool,
    api_version: int,
    timeout: float | None,
) -> None:
    if click_ctx.invoked_subcommand is None:
        # No args: show help; no network calls.
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    out = "json" if json_flag else output

    click_ctx.obj = CLIContext(
        output=out,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        dotenv=dotenv,
        env_file=Path(env_file),
        address=address,
        token=token,
        token_file=token_file,
        ca_cert=ca_cert,
        ca_path=ca_path,
        client_cert=client_cert,
        client_key=client_key,
        insecure=insecure,
        api_version=api_version,
        timeout=timeout,
    )

    click_ctx.call_on_close(click_ctx.obj.close)

    previous_logging = configure_logging(verbosity=verbose, quiet=quiet)
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.catalog_cmds import catalog_group as _catalog_group  # noqa: E402
from .commands.check_cmds import check_group as _check_group  # noqa: E402
from .commands.health_cmds import health_group as _health_group  # noqa: E402
from .commands.kv_cmds import kv_group as _kv_group  # noqa: E402
from .commands.service_cmds import service_group as _service_group  # noqa: E402
from .commands.session_cmds import session_group as _session_group  # noqa: E402
from .commands.snapshot_cmds import snapshot_group as _snapshot_group  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_kv_group)
cli.add_command(_catalog_group)
cli.add_command(_health_group)
cli.add_command(_service_group)
cli.add_command(_check_group)
cli.add_command(_session_group)
cli.add_command(_snapshot_group)
