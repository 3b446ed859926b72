"""texprep resolve — resolve import settings for a single texture."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from texprep.cli.rules import load_rules_or_exit, load_state_or_exit, rules_opt
from texprep.core.resolver import InvalidPolicyConfig
from texprep.models.config import ResolveConfig
from texprep.models.plan import STATUS_APPLY, STATUS_UNREADABLE
from texprep.pipeline.planner import plan_texture
from texprep.utils import fmt_dims, fmt_list

console = Console()


def resolve_cmd(
    image: str = typer.Argument(..., help="Texture file to resolve"),
    rules_path: str = rules_opt,
    platform: str = typer.Option("Standalone", "-p", "--platform", help="Build target name"),
    current_format: Optional[str] = typer.Option(
        None, "-f", "--current-format", help="Format currently set for this platform"
    ),
    state: Optional[str] = typer.Option(
        None, "-s", "--state", help="JSON file of current formats per texture and platform"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the plan entry as JSON"),
) -> None:
    """Resolve the import settings one texture would receive."""
    if not Path(image).is_file():
        typer.echo(f"Error: {image} is not a file", err=True)
        raise typer.Exit(1)

    rules = load_rules_or_exit(rules_path)
    config = ResolveConfig(platform=platform)
    format_state = load_state_or_exit(state)
    if current_format is not None:
        config.default_format = current_format
        format_state = {}

    try:
        entry = plan_texture(image, rules, config, format_state)
    except InvalidPolicyConfig as exc:
        console.print(f"[red]Invalid policy config:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(orjson.dumps(entry.to_dict(), option=orjson.OPT_INDENT_2).decode())
        if entry.status == STATUS_UNREADABLE:
            raise typer.Exit(1)
        return

    if entry.status == STATUS_UNREADABLE:
        console.print(f"[red]Could not read {escape(image)}:[/red] {escape(entry.reason)}")
        raise typer.Exit(1)

    table = Table(title=escape(entry.name), show_header=False, border_style="blue")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("Platform", escape(entry.platform))
    table.add_row("Native size", fmt_dims(entry.width, entry.height))
    table.add_row("Alpha", "yes" if entry.has_alpha else "no")
    table.add_row("Current format", escape(entry.current_format))
    table.add_row("Status", entry.status)
    table.add_row("Rule", escape(entry.rule or "-"))
    if entry.reason:
        table.add_row("Reason", escape(entry.reason))

    settings = entry.settings
    if entry.status == STATUS_APPLY and settings is not None:
        table.add_row("Target size", str(settings.target_size))
        table.add_row("Target format", escape(settings.target_format))
        table.add_row("Compression quality", str(settings.compression_quality))
        table.add_row("NPOT scale", settings.npot_scale.value)
        table.add_row("Force linear", str(settings.force_linear))
        table.add_row("Read/Write", str(settings.enable_read_write))
        table.add_row("Platforms", escape(fmt_list(settings.applied_platforms)))

    console.print(table)
