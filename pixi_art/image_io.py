# pixi_art/image_io.py
from __future__ import annotations

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import UPSCALE_DEFAULT
from .core_types import ImageLoadError, PixelBuffer, assert_pixel_buffer

"""
Image I/O helpers around the stylize core.

  load_image_rgba   : decode any Pillow-readable file into an RGBA buffer
  target_size       : aspect-preserving (width, height) for a target width
  resize_to_width   : downsample a buffer to the working resolution
  upscale_nearest   : integer nearest-neighbour upscale for export
  save_png_rgba     : lossless PNG encode
"""


def pillow_resample_from_name(name: str) -> Image.Resampling:
    """Map a string to a Pillow resampling filter enum."""
    if name == "nearest":
        return Image.Resampling.NEAREST
    if name == "bilinear":
        return Image.Resampling.BILINEAR
    if name == "bicubic":
        return Image.Resampling.BICUBIC
    if name == "lanczos":
        return Image.Resampling.LANCZOS
    raise ValueError(f"unknown resample filter: {name!r}")


def load_image_rgba(path: Path) -> PixelBuffer:
    """
    Load an image with Pillow, honour EXIF orientation and return (H,W,4) uint8.
    Raises ImageLoadError when the file is not a decodable image.
    """
    try:
        with Image.open(path) as im0:
            im = ImageOps.exif_transpose(im0)
            rgba = im.convert("RGBA")
    except Image.DecompressionBombError as e:
        raise ImageLoadError(f"image too large: {path}") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageLoadError(f"not a readable image: {path}") from e
    return np.array(rgba, dtype=np.uint8)


def target_size(src_w: int, src_h: int, dst_w: int) -> Tuple[int, int]:
    """(dst_w, round(dst_w * src_h / src_w)), height at least 1."""
    if src_w <= 0 or src_h <= 0:
        raise ValueError(f"invalid source size {src_w}x{src_h}")
    if dst_w <= 0:
        raise ValueError(f"invalid target width {dst_w}")
    dst_h = int(round(dst_w * src_h / float(src_w)))
    return dst_w, max(1, dst_h)


def resize_to_width(
    buffer: PixelBuffer,
    dst_w: int,
    resample: Image.Resampling = Image.Resampling.NEAREST,
) -> PixelBuffer:
    """Resize an RGBA buffer to dst_w, keeping the aspect ratio."""
    assert_pixel_buffer(buffer)
    H0, W0, _ = buffer.shape
    size = target_size(W0, H0, dst_w)
    if size == (W0, H0):
        return buffer.copy()
    im = Image.fromarray(buffer)
    im2 = im.resize(size, resample=resample)
    return np.array(im2, dtype=np.uint8)


def upscale_nearest(buffer: PixelBuffer, factor: int = UPSCALE_DEFAULT) -> PixelBuffer:
    """Replicate each pixel into a factor x factor block (no smoothing)."""
    assert_pixel_buffer(buffer)
    if int(factor) < 1:
        raise ValueError(f"upscale factor must be >= 1, got {factor}")
    f = int(factor)
    if f == 1:
        return buffer.copy()
    return np.repeat(np.repeat(buffer, f, axis=0), f, axis=1)


def save_png_rgba(path: Path, buffer: PixelBuffer) -> Path:
    """Save an RGBA buffer as PNG; forces a .png suffix. Returns the written path."""
    assert_pixel_buffer(buffer)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(buffer).save(path, format="PNG")
    return path


__all__ = [
    "pillow_resample_from_name",
    "load_image_rgba",
    "target_size",
    "resize_to_width",
    "upscale_nearest",
    "save_png_rgba",
]
