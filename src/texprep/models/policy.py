"""Policy rule model for texture import preprocessing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class NPOTScale(str, Enum):
    """Non-power-of-two handling applied by the host importer."""

    NONE = "None"
    TO_NEAREST = "ToNearest"
    TO_LARGER = "ToLarger"
    TO_SMALLER = "ToSmaller"


class CompressionQuality(int, Enum):
    FAST = 0
    NORMAL = 50
    BEST = 100


DEFAULT_PLATFORMS: tuple[str, ...] = ("Android", "iOS", "Standalone", "Default")


class AssetContext(Protocol):
    """The part of a host asset the applicability filter needs."""

    @property
    def asset_path(self) -> str: ...


@dataclass(frozen=True, slots=True)
class PolicyRule:
    name: str = ""
    sort_order: int = 0

    # Selection
    platform_patterns: tuple[str, ...] = DEFAULT_PLATFORMS
    match_paths: tuple[str, ...] = ()
    ignore_paths: tuple[str, ...] = ()

    # Skip options
    skip_format_patterns: tuple[str, ...] = ()
    force_preprocess: bool = False

    # Texture settings
    max_texture_size: int = 4096
    enable_read_write: bool = False
    force_linear: bool = False
    npot_scale: NPOTScale = NPOTScale.TO_NEAREST
    native_res_multiplier: float = 1.0

    # Compression settings
    rgb_format: str = "Automatic"
    rgba_format: str = "Automatic"
    compression_quality: int = CompressionQuality.NORMAL.value
