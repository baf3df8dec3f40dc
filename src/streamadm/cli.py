"""Command-line interface for streamadm."""

from __future__ import annotations

import re

import click

from streamadm.admin import AdminAPIError, new_admin_api
from streamadm.config import ConfigError, load_config
from streamadm.out import die, say, say_json, setup_logging
from streamadm.recovery import (
    ALL_TOPICS_PATTERN,
    RecoveryClient,
    RecoveryStatus,
    WatchTimeout,
    start_failure_message,
    status_failure_message,
    watch_recovery,
)
from streamadm.recovery.watch import DEFAULT_TERMINAL_STATES


@click.group()
@click.option("--config", "-c", type=click.Path(), help="Configuration file path")
@click.option("--admin-hosts", help="Comma-separated admin API addresses")
@click.option("--user", help="Basic auth username")
@click.option("--password", help="Basic auth password")
@click.option("--tls/--no-tls", "tls_enabled", default=None, help="Use TLS for admin API calls")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(
    ctx: click.Context,
    config: str | None,
    admin_hosts: str | None,
    user: str | None,
    password: str | None,
    tls_enabled: bool | None,
    verbose: bool,
) -> None:
    """streamadm - administer a log-streaming cluster."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config
    ctx.obj["overrides"] = {
        "admin_hosts": admin_hosts,
        "username": user,
        "password": password,
        "tls_enabled": tls_enabled,
    }
    setup_logging(verbose)


@cli.group()
def topic() -> None:
    """Manage topics."""


@topic.group()
def autorestore() -> None:
    """Interact with the autorestore process."""


def _build_client(ctx: click.Context) -> RecoveryClient:
    try:
        config = load_config(ctx.obj.get("config_path"), overrides=ctx.obj.get("overrides"))
    except ConfigError as e:
        die(f"unable to load config: {e}")

    factory = ctx.obj.get("admin_factory", new_admin_api)
    try:
        return RecoveryClient.from_config(config, factory)
    except (ValueError, OSError) as e:
        die(f"unable to initialize admin client: {e}")


def _validate_pattern(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not value:
        raise click.BadParameter("pattern must not be empty")
    try:
        re.compile(value)
    except re.error as e:
        raise click.BadParameter(f"invalid regular expression: {e}") from e
    return value


@autorestore.command()
@click.option(
    "--topic-name-pattern",
    default=ALL_TOPICS_PATTERN,
    show_default=True,
    callback=_validate_pattern,
    help=(
        "A regex pattern to match topic names against. Only topics whose "
        "names match this pattern will be restored. If not passed, all "
        "topics will be restored."
    ),
)
@click.pass_context
def start(ctx: click.Context, topic_name_pattern: str) -> None:
    """Start the autorestore process."""
    with _build_client(ctx) as client:
        try:
            result = client.start_recovery(topic_name_pattern)
        except AdminAPIError as e:
            die(start_failure_message(e))

    if ctx.obj.get("verbose"):
        say(f"Cluster response: {result.code} {result.message}")
    say("Successfully started auto-restore")


@autorestore.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option("--watch", "-w", is_flag=True, help="Keep polling until recovery settles")
@click.option("--interval", default=5.0, show_default=True, help="Seconds between polls")
@click.option(
    "--until-state",
    multiple=True,
    default=DEFAULT_TERMINAL_STATES,
    show_default=True,
    help="State that ends --watch (repeatable)",
)
@click.option("--timeout", type=float, help="Give up watching after this many seconds")
@click.pass_context
def status(
    ctx: click.Context,
    fmt: str,
    watch: bool,
    interval: float,
    until_state: tuple[str, ...],
    timeout: float | None,
) -> None:
    """Fetch the status of the autorestore process."""
    if interval <= 0:
        raise click.BadParameter("must be positive", param_hint="--interval")
    if timeout is not None and timeout < 0:
        raise click.BadParameter("must not be negative", param_hint="--timeout")

    def show(snapshot: RecoveryStatus) -> None:
        if fmt == "json":
            say_json(snapshot.to_dict())
        else:
            say(f"Auto-restore status: {snapshot.state}")

    with _build_client(ctx) as client:
        try:
            if not watch:
                show(client.poll_recovery_status())
                return

            for snapshot in watch_recovery(
                client,
                interval=interval,
                terminal_states=until_state,
                timeout=timeout,
            ):
                show(snapshot)
        except AdminAPIError as e:
            die(status_failure_message(e))
        except WatchTimeout as e:
            die(str(e))


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
