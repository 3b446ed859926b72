"""texprep plan and show commands."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from texprep.cli.rules import load_rules_or_exit, load_state_or_exit, rules_opt
from texprep.core.resolver import InvalidPolicyConfig
from texprep.io.plan_io import read_plan
from texprep.models.config import ResolveConfig
from texprep.models.plan import STATUS_APPLY

console = Console()


def plan(
    directory: str = typer.Argument(..., help="Directory of textures to plan"),
    rules_path: str = rules_opt,
    platform: str = typer.Option("Standalone", "-p", "--platform", help="Build target name"),
    output: str = typer.Option("./texprep_plan.jsonl", "-o", "--output", help="Plan output path"),
    state: Optional[str] = typer.Option(
        None, "-s", "--state", help="JSON file of current formats per texture and platform"
    ),
    default_format: str = typer.Option(
        "Automatic", "--default-format", help="Current format assumed when state has no entry"
    ),
    extensions: Optional[str] = typer.Option(
        None, "--extensions", help="Comma-separated extensions"
    ),
) -> None:
    """Resolve every texture under a directory and write a JSONL plan."""
    from texprep.pipeline.planner import run_plan

    dir_path = Path(directory)
    if not dir_path.is_dir():
        typer.echo(f"Error: {directory} is not a valid directory", err=True)
        raise typer.Exit(1)

    rules = load_rules_or_exit(rules_path)
    config = ResolveConfig(platform=platform, default_format=default_format)
    if extensions:
        config.extensions = tuple(f".{e.strip().lstrip('.')}" for e in extensions.split(","))
    format_state = load_state_or_exit(state)

    try:
        run_plan(str(dir_path), output, rules, config, format_state, rules_path=rules_path)
    except InvalidPolicyConfig as exc:
        console.print(f"[red]Invalid policy config:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def show(
    plan_path: str = typer.Option(..., "-m", "--plan", help="Path to plan JSONL"),
) -> None:
    """Summarise a plan file."""
    meta, entries = read_plan(plan_path)
    if not entries:
        console.print("[red]No entries found.[/red]")
        raise typer.Exit(1)

    by_status = Counter(e.status for e in entries)
    by_rule = Counter(e.rule for e in entries if e.status == STATUS_APPLY and e.rule)
    by_size = Counter(e.settings.target_size for e in entries if e.settings is not None)

    table = Table(title="Plan Summary", show_header=False, border_style="blue")
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Total textures", f"{len(entries):,}")
    for status, count in sorted(by_status.items()):
        table.add_row(f"  {status}", f"{count:,}")
    table.add_row("Rules applied", escape(", ".join(f"{k} ({v})" for k, v in by_rule.items())))
    table.add_row(
        "Target sizes", ", ".join(f"{k} ({v})" for k, v in sorted(by_size.items()))
    )
    if meta:
        table.add_row("Platform", escape(meta.platform))
        table.add_row("Input dir", escape(meta.input_dir))
        table.add_row("Created", meta.created_at)

    console.print(table)
