"""Data models for preprocessing plan records."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from texprep.models.texture import PlatformOverride, ResolvedSettings

STATUS_APPLY = "apply"
STATUS_SKIP = "skip"
STATUS_NO_RULE = "no_rule"
STATUS_UNREADABLE = "unreadable"


@dataclass(slots=True)
class PlanEntry:
    # Identity
    path: str = ""
    name: str = ""
    platform: str = ""

    # Source facts
    width: int = 0
    height: int = 0
    has_alpha: bool = False
    current_format: str = ""

    # Outcome
    status: str = STATUS_NO_RULE
    rule: str | None = None
    reason: str = ""
    settings: ResolvedSettings | None = None
    overrides: list[PlatformOverride] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "path": self.path,
            "name": self.name,
            "platform": self.platform,
            "width": self.width,
            "height": self.height,
            "has_alpha": self.has_alpha,
            "current_format": self.current_format,
            "status": self.status,
            "rule": self.rule,
            "reason": self.reason,
        }
        d["settings"] = self.settings.to_dict() if self.settings else None
        d["overrides"] = [o.to_dict() for o in self.overrides]
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlanEntry:
        st = data.get("settings")
        ov = data.get("overrides") or []
        entry = cls(
            **{
                k: v
                for k, v in data.items()
                if k in cls.__dataclass_fields__ and k not in ("settings", "overrides")
            }
        )
        if st and isinstance(st, dict):
            entry.settings = ResolvedSettings.from_dict(st)
        entry.overrides = [PlatformOverride.from_dict(o) for o in ov if isinstance(o, dict)]
        return entry


PLAN_META_KEY = "__plan_meta__"


@dataclass(slots=True)
class PlanMeta:
    input_dir: str = ""
    rules_path: str = ""
    platform: str = ""
    schema_version: int = 1
    total_files: int = 0
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d[PLAN_META_KEY] = True
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlanMeta:
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
