"""Configuration models with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ResolveConfig:
    platform: str = "Standalone"
    default_format: str = "Automatic"
    checkpoint_every: int = 500
    extensions: tuple[str, ...] = (
        ".png",
        ".jpg",
        ".jpeg",
        ".tga",
        ".tif",
        ".tiff",
        ".bmp",
        ".psd",
        ".webp",
        ".gif",
    )
