"""Per-texture input facts and resolved output settings."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from texprep.models.policy import NPOTScale


@dataclass(frozen=True, slots=True)
class TextureFacts:
    name: str = ""
    platform_name: str = ""
    has_alpha: bool = False
    native_width: int = 0
    native_height: int = 0
    current_format_name: str = ""


@dataclass(frozen=True, slots=True)
class TextureAsset:
    """Minimal asset context: just the project-relative or absolute path."""

    asset_path: str = ""


@dataclass(frozen=True, slots=True)
class ResolvedSettings:
    target_size: int = 0
    target_format: str = ""
    compression_quality: int = 0
    force_linear: bool = False
    enable_read_write: bool = False
    npot_scale: NPOTScale = NPOTScale.TO_NEAREST
    applied_platforms: tuple[str, ...] = ()
    rule_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["npot_scale"] = self.npot_scale.value
        d["applied_platforms"] = list(self.applied_platforms)
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolvedSettings:
        kwargs = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "npot_scale" in kwargs:
            kwargs["npot_scale"] = NPOTScale(kwargs["npot_scale"])
        if "applied_platforms" in kwargs:
            kwargs["applied_platforms"] = tuple(kwargs["applied_platforms"])
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class PlatformOverride:
    """One per-platform settings block as the host importer expects it."""

    name: str = ""
    overridden: bool = True
    max_texture_size: int = 0
    format: str = ""
    compression_quality: int = 0
    allows_alpha_splitting: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlatformOverride:
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
