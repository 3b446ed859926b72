"""Image discovery and header-only reads of native size and alpha (Pillow)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from PIL import Image

_ALPHA_MODES = {"RGBA", "LA", "PA", "RGBa", "La"}


class NativeSizeProvider(Protocol):
    def __call__(self, asset_path: str) -> tuple[int, int]: ...


def discover_images(
    root: str | Path,
    extensions: tuple[str, ...],
) -> list[str]:
    """Recursively discover image files under root, sorted by path."""
    root = Path(root)
    found: list[str] = []
    ext_set = {e.lower() for e in extensions}
    for dirpath, _dirnames, filenames in os.walk(root):
        for fn in filenames:
            if any(fn.lower().endswith(ext) for ext in ext_set):
                found.append(os.path.join(dirpath, fn))
    found.sort()
    return found


def _has_alpha(img: Image.Image) -> bool:
    if img.mode in _ALPHA_MODES:
        return True
    return "transparency" in img.info


def read_native_size(asset_path: str) -> tuple[int, int]:
    """Source pixel dimensions, read from the file header only."""
    with Image.open(asset_path) as img:
        return img.size


def read_has_alpha(asset_path: str) -> bool:
    with Image.open(asset_path) as img:
        return _has_alpha(img)


def texture_name(asset_path: str) -> str:
    """Asset name as the host shows it: file name without extension."""
    return Path(asset_path).stem
