"""CLI entry point for quackstream."""

from __future__ import annotations

import json

import click

from .core.enums import QuackPolicy, TimelinePolicy
from .core.errors import CommandScriptError, ConfigError


@click.group()
def main() -> None:
    """Quackstream event-sourcing playground."""


@main.command()
@click.argument("commands", nargs=-1, required=True)
@click.option("--config", default=None, help="TOML config file path")
@click.option(
    "--timeline-policy",
    type=click.Choice([p.value for p in TimelinePolicy]),
    default=None,
    help="How Deleted affects the timeline",
)
@click.option(
    "--quack-policy",
    type=click.Choice([p.value for p in QuackPolicy]),
    default=None,
    help="Whether quacking after delete is allowed",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--log-level", default=None, help="Override log level")
def run(
    commands: tuple[str, ...],
    config: str | None,
    timeline_policy: str | None,
    quack_policy: str | None,
    as_json: bool,
    log_level: str | None,
) -> None:
    """Run COMMANDS (quack:<content> or delete) against a fresh message."""
    from .core.config import load_settings
    from .domain.events import event_to_dict
    from .main import parse_script
    from .main import run as run_script
    from .observability.logger import bind_correlation_id, setup_logging

    try:
        script = parse_script(commands)
    except CommandScriptError as exc:
        raise click.UsageError(str(exc)) from exc

    overrides: dict = {}
    if timeline_policy:
        overrides.setdefault("policy", {})["timeline_policy"] = timeline_policy
    if quack_policy:
        overrides.setdefault("policy", {})["quack_policy"] = quack_policy
    if log_level:
        overrides.setdefault("observability", {})["log_level"] = log_level

    try:
        settings = load_settings(config_path=config, overrides=overrides)
        setup_logging(settings.observability)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    bind_correlation_id()
    report = run_script(script, settings)

    if as_json:
        click.echo(json.dumps({
            "events": [event_to_dict(e) for e in report.events],
            "outcomes": [r.outcome.value for r in report.results],
            "count": report.count,
            "timeline": [item.content for item in report.timeline],
        }, indent=2))
        return

    click.echo("Events:")
    for seq, event in enumerate(report.events, start=1):
        payload = event_to_dict(event)
        kind = payload.pop("kind")
        click.echo(f"  {seq:>3}  {kind}  {payload or ''}".rstrip())
    click.echo(f"Quack count: {report.count}")
    click.echo("Timeline:")
    for item in report.timeline:
        click.echo(f"  - {item.content}")
