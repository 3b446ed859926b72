"""JSONL plan read/write and the current-format state file."""

from __future__ import annotations

import os
from pathlib import Path

import orjson

from texprep.models.plan import PLAN_META_KEY, PlanEntry, PlanMeta


def create_plan(path: str | Path, meta: PlanMeta) -> None:
    """Create a fresh plan file with only the metadata header (truncates existing)."""
    path = Path(path)
    meta_line = orjson.dumps(meta.to_dict(), option=orjson.OPT_APPEND_NEWLINE)
    path.write_bytes(meta_line)


def append_entries(path: str | Path, entries: list[PlanEntry]) -> None:
    """Append entries to a JSONL plan file."""
    path = Path(path)
    with open(path, "ab") as f:
        for entry in entries:
            f.write(orjson.dumps(entry.to_dict(), option=orjson.OPT_APPEND_NEWLINE))
        f.flush()
        os.fsync(f.fileno())


def read_plan(path: str | Path) -> tuple[PlanMeta | None, list[PlanEntry]]:
    """Read a JSONL plan, skipping corrupt lines."""
    path = Path(path)
    if not path.exists():
        return None, []

    meta: PlanMeta | None = None
    entries: list[PlanEntry] = []

    with open(path, "rb") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                data = orjson.loads(line)
            except orjson.JSONDecodeError:
                continue
            if not isinstance(data, dict):
                continue

            if data.get(PLAN_META_KEY) and meta is None:
                meta = PlanMeta.from_dict(data)
            else:
                entries.append(PlanEntry.from_dict(data))

    return meta, entries


def read_format_state(path: str | Path) -> dict[str, dict[str, str]]:
    """Load {texture_path: {platform: current_format}} from a JSON file.

    Keys are normalised with os.path.normpath so lookups match discovered paths.
    """
    data = orjson.loads(Path(path).read_bytes())
    if not isinstance(data, dict):
        raise ValueError(f"Format state must be a JSON object: {path}")

    state: dict[str, dict[str, str]] = {}
    for tex_path, per_platform in data.items():
        if not isinstance(per_platform, dict):
            continue
        state[os.path.normpath(tex_path)] = {str(k): str(v) for k, v in per_platform.items()}
    return state


def lookup_format(
    state: dict[str, dict[str, str]],
    asset_path: str,
    platform: str,
    default: str,
) -> str:
    return state.get(os.path.normpath(asset_path), {}).get(platform, default)
