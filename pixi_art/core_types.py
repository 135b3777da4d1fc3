# pixi_art/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, errors and lightweight validators.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from .constants import (
    CHANNELS,
    DETAIL_MAX,
    DETAIL_MIN,
    PALETTE_MAX,
    PALETTE_MIN,
    RESOLUTION_BASE_EXP,
    RESOLUTION_INDEX_MAX,
    RESOLUTION_INDEX_MIN,
)

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

PixelBuffer = NDArray[np.uint8]  # (H, W, 4) RGBA
Samples = NDArray[np.float64]  # (N, 3) RGB rows of opaque pixels
Centroids = NDArray[np.float64]  # (k, 3) real-valued RGB
Labels = NDArray[np.intp]  # (N,) centroid index per sample


# Errors


class ConfigError(ValueError):
    """Invalid pipeline configuration (palette size, detail amount, controls)."""


class ImageLoadError(ValueError):
    """Input could not be decoded as an image."""


# Value objects


@dataclass(frozen=True)
class PaletteFit:
    """Fitted k-means palette with per-centroid sample counts of the last pass."""

    centroids: Centroids  # shape (k, 3)
    counts: NDArray[np.int64]  # shape (k,)

    @property
    def k(self) -> int:
        return int(self.centroids.shape[0])


@dataclass(frozen=True)
class PipelineConfig:
    """
    Settings for one stylize run.

    width   : target width in px handed to the resizer
    colours : palette size k (>= 1)
    amount  : sharpen amount in [0, 1]
    """

    width: int
    colours: int
    amount: float = 0.0

    def __post_init__(self) -> None:
        if int(self.width) < 1:
            raise ConfigError(f"width must be >= 1, got {self.width}")
        validate_palette_size(self.colours)
        validate_amount(self.amount)

    @classmethod
    def from_controls(
        cls, resolution_index: int, palette_size: int, detail_percent: int
    ) -> "PipelineConfig":
        """Build a config from the slider-style controls (index, colours, percent)."""
        if not RESOLUTION_INDEX_MIN <= int(resolution_index) <= RESOLUTION_INDEX_MAX:
            raise ConfigError(
                f"resolution index must be in [{RESOLUTION_INDEX_MIN}, "
                f"{RESOLUTION_INDEX_MAX}], got {resolution_index}"
            )
        if not PALETTE_MIN <= int(palette_size) <= PALETTE_MAX:
            raise ConfigError(
                f"palette size must be in [{PALETTE_MIN}, {PALETTE_MAX}], got {palette_size}"
            )
        return cls(
            width=resolution_from_index(resolution_index),
            colours=int(palette_size),
            amount=detail_percent_to_amount(detail_percent),
        )


# Small helpers


def resolution_from_index(index: int) -> int:
    """Resolution control index to target width: 2 ** (4 + index)."""
    return 2 ** (RESOLUTION_BASE_EXP + int(index))


def detail_percent_to_amount(percent: int) -> float:
    """Map the 0..100 detail control to a sharpen amount in [0, 1]."""
    if not DETAIL_MIN <= int(percent) <= DETAIL_MAX:
        raise ConfigError(
            f"detail percent must be in [{DETAIL_MIN}, {DETAIL_MAX}], got {percent}"
        )
    return int(percent) / 100.0


def validate_palette_size(k: int) -> int:
    """Return k as int or raise ConfigError when it is not an integer >= 1."""
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise ConfigError(f"palette size must be an integer, got {k!r}")
    if k < 1:
        raise ConfigError(f"palette size must be >= 1, got {k}")
    return int(k)


def validate_amount(amount: float) -> float:
    """Return amount as float or raise ConfigError outside [0, 1]."""
    a = float(amount)
    if not math.isfinite(a) or a < 0.0 or a > 1.0:
        raise ConfigError(f"sharpen amount must be in [0, 1], got {amount}")
    return a


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def assert_pixel_buffer(buffer: np.ndarray) -> PixelBuffer:
    """Validate a uint8 (H,W,4) buffer with H,W >= 1 and return it typed."""
    if not isinstance(buffer, np.ndarray):
        raise TypeError(f"expected numpy array, got {type(buffer).__name__}")
    if buffer.dtype != np.uint8 or buffer.ndim != 3 or buffer.shape[-1] != CHANNELS:
        raise TypeError(
            f"expected uint8 (H,W,{CHANNELS}) buffer, got {buffer.dtype} {buffer.shape}"
        )
    if buffer.shape[0] < 1 or buffer.shape[1] < 1:
        raise ValueError(f"buffer must be at least 1x1, got {buffer.shape[:2]}")
    return buffer  # type: ignore[return-value]


def assert_same_shape(before: PixelBuffer, after: PixelBuffer) -> None:
    """Raise ValueError when a stage changed the buffer dimensions."""
    if before.shape != after.shape:
        raise ValueError(f"stage changed buffer shape {before.shape} -> {after.shape}")


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "PixelBuffer",
    "Samples",
    "Centroids",
    "Labels",
    # errors
    "ConfigError",
    "ImageLoadError",
    # value objects
    "PaletteFit",
    "PipelineConfig",
    # helpers
    "resolution_from_index",
    "detail_percent_to_amount",
    "validate_palette_size",
    "validate_amount",
    "rgb_to_hex",
    "assert_pixel_buffer",
    "assert_same_shape",
]
