"""
pandaconf CLI — pandaconf show | get | pid-file | tls-check
"""
import logging
from typing import Any

import click
import yaml

from pandaconf.config.compat import resolve_admin_tls, resolve_kafka_tls
from pandaconf.config.loader import LayeredConfig, load_config
from pandaconf.config.schema import Config
from pandaconf.config.tls import materialize, read_local_file
from pandaconf.core.exceptions import ConfigError

_MISSING = object()


def _fail(error: ConfigError) -> None:
    click.echo(f"Error {int(error.error_code)}: {error.message}", err=True)
    raise SystemExit(1)


def _load(ctx: click.Context) -> LayeredConfig:
    try:
        return load_config(ctx.obj["config_path"], ctx.obj["overrides"])
    except ConfigError as e:
        _fail(e)


def _document(layered: LayeredConfig, pristine: bool) -> Config:
    if not pristine:
        return layered.effective
    document = layered.pristine()
    if document is None:
        click.echo("No configuration file was loaded; nothing to show.", err=True)
        raise SystemExit(1)
    return document


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return yaml.safe_dump(value, sort_keys=False, default_flow_style=False).rstrip("\n")
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


@click.group()
@click.version_option(package_name="pandaconf")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (default: ./redpanda.yaml, then /etc/redpanda/redpanda.yaml)",
)
@click.option("--set", "overrides", multiple=True, metavar="KEY=VALUE", help="Override a value, e.g. redpanda.node_id=2")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Log level",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, overrides: tuple[str, ...], log_level: str) -> None:
    """pandaconf — inspect node configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s - %(name)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["overrides"] = list(overrides)


@cli.command()
@click.option("--pristine", is_flag=True, help="Show the file as written, without defaults or overrides")
@click.option("--format", "fmt", type=click.Choice(["yaml", "json"]), default="yaml", help="Output format")
@click.pass_context
def show(ctx: click.Context, pristine: bool, fmt: str) -> None:
    """Print the effective (or pristine) configuration."""
    document = _document(_load(ctx), pristine)
    text = document.to_json() if fmt == "json" else document.to_yaml()
    click.echo(text.rstrip("\n"))


@cli.command()
@click.argument("key")
@click.option("--pristine", is_flag=True, help="Read from the file as written")
@click.pass_context
def get(ctx: click.Context, key: str, pristine: bool) -> None:
    """Print one value by dotted KEY, e.g. redpanda.kafka_api.0.port."""
    document = _document(_load(ctx), pristine)
    value = document.get_nested(key, _MISSING)
    if value is _MISSING:
        click.echo(f"Key not found: {key}", err=True)
        raise SystemExit(1)
    click.echo(_format_value(value))


@cli.command("pid-file")
@click.pass_context
def pid_file(ctx: click.Context) -> None:
    """Print the node's lock file path."""
    layered = _load(ctx)
    try:
        click.echo(layered.effective.pid_file())
    except ConfigError as e:
        _fail(e)


@cli.command("tls-check")
@click.option("--api", type=click.Choice(["kafka", "admin"]), default="kafka", help="Which API's TLS to check")
@click.pass_context
def tls_check(ctx: click.Context, api: str) -> None:
    """Load the CLI's TLS credentials for an API and report what they provide."""
    rpk = _load(ctx).effective.rpk
    tls = resolve_kafka_tls(rpk) if api == "kafka" else resolve_admin_tls(rpk)
    if tls is None:
        click.echo(f"{api} API: TLS not configured")
        return

    try:
        result = materialize(tls, read_local_file)
    except ConfigError as e:
        _fail(e)

    roots = tls.truststore_file if result.trusted_roots is not None else "system defaults"
    identity = tls.cert_file if result.presents_certificate else "none"
    click.echo(f"{api} API: TLS ok")
    click.echo(f"  trust roots: {roots}")
    click.echo(f"  client certificate: {identity}")


if __name__ == "__main__":
    cli()
