"""Programmatic texture and rule fixtures."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

MOBILE_RULES = """\
rules:
  - name: mobile
    sort_order: 0
    platform_patterns: [Android, iOS]
    skip_format_patterns: [ASTC]
    max_texture_size: 1024
    native_res_multiplier: 0.5
    rgb_format: ASTC_6x6
    rgba_format: ASTC_4x4
    compression_quality: Best
    npot_scale: ToLarger
  - name: desktop
    sort_order: 1
    platform_patterns: [Standalone]
    max_texture_size: 4096
    rgb_format: DXT1
    rgba_format: DXT5
    force_linear: true
"""


@pytest.fixture
def tmp_texture_dir(tmp_path: Path) -> Path:
    """Directory with opaque, alpha, palette-transparent and corrupt textures."""
    tex_dir = tmp_path / "textures"
    (tex_dir / "ui").mkdir(parents=True)

    arr = np.random.randint(0, 255, (2000, 1000, 3), dtype=np.uint8)
    Image.fromarray(arr).save(tex_dir / "rock_albedo.png")

    arr = np.random.randint(0, 255, (200, 300, 4), dtype=np.uint8)
    Image.fromarray(arr).save(tex_dir / "ui" / "button.png")

    arr = np.random.randint(0, 255, (64, 64, 3), dtype=np.uint8)
    Image.fromarray(arr).save(tex_dir / "noise.jpg")

    with open(tex_dir / "broken.png", "wb") as f:
        f.write(b"not a real image file content")

    return tex_dir


@pytest.fixture
def opaque_texture(tmp_path: Path) -> str:
    arr = np.random.randint(0, 255, (2000, 1000, 3), dtype=np.uint8)
    path = tmp_path / "wall.png"
    Image.fromarray(arr).save(path)
    return str(path)


@pytest.fixture
def alpha_texture(tmp_path: Path) -> str:
    arr = np.random.randint(0, 255, (100, 60, 4), dtype=np.uint8)
    path = tmp_path / "leaf.png"
    Image.fromarray(arr).save(path)
    return str(path)


@pytest.fixture
def rules_file(tmp_path: Path) -> str:
    path = tmp_path / "rules.yml"
    path.write_text(MOBILE_RULES)
    return str(path)
