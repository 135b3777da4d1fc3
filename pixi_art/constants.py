# pixi_art/constants.py
"""
Global tunables used across the project.

- Alpha visibility threshold
- Sharpen and k-means constants
- Control ranges (palette size, detail percent, resolution index)
- Export and batch defaults
"""
from __future__ import annotations

from typing import Tuple

# ==============
# Pixel buffers
# ==============
ALPHA_OPAQUE_MIN: int = 128  # alpha >= this is opaque and gets quantised
CHANNELS: int = 4  # R, G, B, A

# =================
# Sharpen (detail)
# =================
SHARPEN_GAIN: float = 4.0  # diff * amount * gain; keeps the 0..1 control visible

# ===================
# Quantize (k-means)
# ===================
KMEANS_ITERATIONS: int = 5

# =========
# Controls
# =========
PALETTE_MIN: int = 2
PALETTE_MAX: int = 64
PALETTE_DEFAULT: int = 8

DETAIL_MIN: int = 0
DETAIL_MAX: int = 100
DETAIL_DEFAULT: int = 0

RESOLUTION_BASE_EXP: int = 4  # size = 2 ** (base + index)
RESOLUTION_INDEX_MIN: int = 0
RESOLUTION_INDEX_MAX: int = 6  # 16 .. 1024 px
RESOLUTION_INDEX_DEFAULT: int = 2  # 64 px

# =======
# Export
# =======
UPSCALE_DEFAULT: int = 20
OUTPUT_SUFFIX: str = "_pixi"
IMAGE_EXTS: Tuple[str, ...] = (".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp")
RESAMPLE_CHOICES: Tuple[str, ...] = ("nearest", "bilinear", "bicubic", "lanczos")
RESAMPLE_DEFAULT: str = "nearest"
