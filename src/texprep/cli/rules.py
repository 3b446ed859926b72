"""texprep rules — list and validate policy rules."""

from __future__ import annotations

from typing import Optional

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from texprep.core.resolver import InvalidPolicyConfig, order_rules, select_rule
from texprep.io.plan_io import read_format_state
from texprep.io.rules_io import load_rules
from texprep.models.policy import PolicyRule
from texprep.models.texture import TextureFacts
from texprep.utils import fmt_list

console = Console()

rules_opt = typer.Option(..., "-r", "--rules", help="Rules YAML file or directory")


def load_rules_or_exit(path: str) -> list[PolicyRule]:
    """Load and validate rules, turning config errors into exit code 1."""
    try:
        return load_rules(path)
    except FileNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)
    except InvalidPolicyConfig as exc:
        console.print(f"[red]Invalid policy config:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def load_state_or_exit(path: str | None) -> dict[str, dict[str, str]]:
    """Read the current-format state file, turning bad files into exit code 1."""
    if not path:
        return {}
    try:
        return read_format_state(path)
    except (OSError, orjson.JSONDecodeError, ValueError) as exc:
        console.print(f"[red]Cannot read state file:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def rules_cmd(
    rules_path: str = rules_opt,
    platform: Optional[str] = typer.Option(
        None, "-p", "--platform", help="Highlight the rule selected for this platform"
    ),
) -> None:
    """List rules in evaluation order and validate every pattern."""
    rules = load_rules_or_exit(rules_path)
    if not rules:
        console.print("[yellow]No rules found.[/yellow]")
        return

    selected: PolicyRule | None = None
    if platform is not None:
        try:
            selected = select_rule(rules, TextureFacts(platform_name=platform))
        except InvalidPolicyConfig as exc:
            console.print(f"[red]Invalid policy config:[/red] {escape(str(exc))}")
            raise typer.Exit(1)

    table = Table(title=f"Policy rules ({len(rules)})", border_style="blue")
    table.add_column("#", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Order", justify="right")
    table.add_column("Platforms")
    table.add_column("Skip formats")
    table.add_column("Max size", justify="right")
    table.add_column("x Native", justify="right")
    table.add_column("RGB / RGBA")

    for i, rule in enumerate(order_rules(rules), start=1):
        marker = " [green]<- selected[/green]" if rule is selected else ""
        table.add_row(
            str(i),
            escape(rule.name) + marker,
            str(rule.sort_order),
            escape(fmt_list(rule.platform_patterns)),
            escape(fmt_list(rule.skip_format_patterns)),
            str(rule.max_texture_size),
            f"{rule.native_res_multiplier:g}",
            f"{escape(rule.rgb_format)} / {escape(rule.rgba_format)}",
        )
    console.print(table)

    if platform is not None and selected is None:
        console.print(f"[yellow]No rule matches platform '{escape(platform)}'.[/yellow]")

    console.print("[green]All rules valid.[/green]")
