# pixi_art/sharpen.py
from __future__ import annotations

"""
Detail (unsharp mask) stage.

Exports:
  neighbour_average(rgb) -> float64 [H,W,3]
  sharpen(buffer, amount, *, debug=False) -> PixelBuffer

Notes:
  - 4-neighbour average with edge clamping (up, down, left, right).
  - result = clamp(v + (v - avg) * amount * SHARPEN_GAIN, 0, 255), rounded
    half-to-even into uint8.
  - Reads the source array and writes a fresh one, so the per-pixel result
    never depends on visiting order.
  - Every pixel is processed, transparent ones included. Alpha is copied as is.
"""

import numpy as np

from .constants import SHARPEN_GAIN
from .core_types import PixelBuffer, assert_pixel_buffer, validate_amount
from .utils import debug_log, key_value_pairs_to_string


def neighbour_average(rgb: np.ndarray) -> np.ndarray:
    """Mean of the up/down/left/right neighbours per channel, edges clamped."""
    src = rgb.astype(np.float64, copy=False)
    padded = np.pad(src, ((1, 1), (1, 1), (0, 0)), mode="edge")
    up = padded[:-2, 1:-1]
    down = padded[2:, 1:-1]
    left = padded[1:-1, :-2]
    right = padded[1:-1, 2:]
    return (up + down + left + right) * 0.25


def sharpen(buffer: PixelBuffer, amount: float, *, debug: bool = False) -> PixelBuffer:
    """
    Apply a single-pass unsharp mask to the RGB channels.

    Args:
      buffer : uint8 [H,W,4] RGBA
      amount : sharpen strength in [0, 1]; 0 returns an exact copy
      debug  : print how many channel values changed
    Returns:
      New uint8 [H,W,4] buffer. Alpha is byte-identical to the input.
    Raises:
      ConfigError when amount is outside [0, 1].
    """
    assert_pixel_buffer(buffer)
    amount = validate_amount(amount)

    out = buffer.copy()
    if amount == 0.0:
        return out

    src = buffer[..., :3].astype(np.float64)
    diff = src - neighbour_average(src)
    sharpened = np.clip(src + diff * amount * SHARPEN_GAIN, 0.0, 255.0)
    out[..., :3] = np.rint(sharpened).astype(np.uint8)

    if debug:
        changed = int(np.count_nonzero(out[..., :3] != buffer[..., :3]))
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Sharpen", amount),
                    ("Size", f"{buffer.shape[1]}x{buffer.shape[0]}"),
                    ("Changed channels", changed),
                ]
            )
        )
    return out


__all__ = ["neighbour_average", "sharpen"]
