"""Batch pre-pass: resolve import settings for every texture in a directory."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from texprep.core.resolver import compute_settings, expand_overrides, select_rule
from texprep.io.image_reader import (
    NativeSizeProvider,
    discover_images,
    read_has_alpha,
    read_native_size,
    texture_name,
)
from texprep.io.plan_io import append_entries, create_plan, lookup_format
from texprep.models.config import ResolveConfig
from texprep.models.plan import (
    STATUS_APPLY,
    STATUS_NO_RULE,
    STATUS_SKIP,
    STATUS_UNREADABLE,
    PlanEntry,
    PlanMeta,
)
from texprep.models.policy import PolicyRule
from texprep.models.texture import TextureAsset, TextureFacts

logger = logging.getLogger(__name__)
console = Console()


def plan_texture(
    asset_path: str,
    rules: Sequence[PolicyRule],
    config: ResolveConfig,
    format_state: dict[str, dict[str, str]] | None = None,
    size_provider: NativeSizeProvider = read_native_size,
    alpha_provider: Callable[[str], bool] = read_has_alpha,
) -> PlanEntry:
    """Resolve one texture into a plan entry.

    Unreadable images become STATUS_UNREADABLE entries. InvalidPolicyConfig
    propagates to the caller.
    """
    name = texture_name(asset_path)
    current_format = lookup_format(
        format_state or {}, asset_path, config.platform, config.default_format
    )
    entry = PlanEntry(
        path=asset_path, name=name, platform=config.platform, current_format=current_format
    )

    try:
        width, height = size_provider(asset_path)
        has_alpha = alpha_provider(asset_path)
    except OSError as exc:
        logger.warning("Could not read %s: %s", asset_path, exc)
        entry.status = STATUS_UNREADABLE
        entry.reason = str(exc)
        return entry

    entry.width, entry.height, entry.has_alpha = width, height, has_alpha
    facts = TextureFacts(
        name=name,
        platform_name=config.platform,
        has_alpha=has_alpha,
        native_width=width,
        native_height=height,
        current_format_name=current_format,
    )

    rule = select_rule(rules, facts, TextureAsset(asset_path=asset_path))
    if rule is None:
        entry.reason = f"no rule matches platform {config.platform!r}"
        return entry

    entry.rule = rule.name
    settings = compute_settings(rule, facts)
    if settings is None:
        entry.status = STATUS_SKIP
        entry.reason = f"current format {current_format!r} already acceptable"
        return entry

    entry.status = STATUS_APPLY
    entry.settings = settings
    entry.overrides = expand_overrides(settings)
    return entry


def run_plan(
    input_dir: str,
    output_path: str,
    rules: Sequence[PolicyRule],
    config: ResolveConfig,
    format_state: dict[str, dict[str, str]] | None = None,
    rules_path: str = "",
) -> dict[str, int]:
    """Plan every texture under input_dir into a JSONL file. Returns counts per status."""
    console.print(f"[bold]Discovering textures in[/bold] {input_dir} ...")
    all_images = discover_images(input_dir, config.extensions)
    console.print(f"  Found [bold]{len(all_images):,}[/bold] textures")

    meta = PlanMeta(
        input_dir=os.path.abspath(input_dir),
        rules_path=rules_path,
        platform=config.platform,
        total_files=len(all_images),
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    create_plan(output_path, meta)

    counts = {STATUS_APPLY: 0, STATUS_SKIP: 0, STATUS_NO_RULE: 0, STATUS_UNREADABLE: 0}
    if not all_images:
        console.print("[yellow]No textures found.[/yellow]")
        return counts

    buffer: list[PlanEntry] = []
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]Resolving textures"),
        BarColumn(bar_width=40),
        MofNCompleteColumn(),
        TextColumn("•"),
        TimeElapsedColumn(),
        console=console,
    )
    with progress:
        task = progress.add_task("Resolving", total=len(all_images))
        for path in all_images:
            entry = plan_texture(path, rules, config, format_state)
            buffer.append(entry)
            counts[entry.status] += 1
            progress.update(task, advance=1)

            if len(buffer) >= config.checkpoint_every:
                append_entries(output_path, buffer)
                buffer.clear()

    # Flush remaining buffer
    if buffer:
        append_entries(output_path, buffer)

    console.print()
    console.print("[bold green]Plan complete![/bold green]")
    console.print(f"  Apply: [bold]{counts[STATUS_APPLY]:,}[/bold]")
    console.print(f"  Skip: {counts[STATUS_SKIP]:,}")
    console.print(f"  No rule: {counts[STATUS_NO_RULE]:,}")
    if counts[STATUS_UNREADABLE]:
        console.print(f"  Unreadable: [red]{counts[STATUS_UNREADABLE]:,}[/red]")
    console.print(f"  Plan: {Path(output_path)}")
    return counts
