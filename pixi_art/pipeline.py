# pixi_art/pipeline.py
from __future__ import annotations

"""
Stylize pipeline.

Exports:
  stylize(buffer, config, rng=None, *, debug=False) -> PixelBuffer
    sharpen(config.amount) then quantize(config.colours). Order is fixed.
  process_image_file(src_path, out_path, config, *, scale, resample_name, rng, debug) -> Path
    load -> resize -> stylize -> upscale -> save -> report.
"""

import time
from pathlib import Path
from typing import Optional

import numpy as np

from .constants import OUTPUT_SUFFIX, RESAMPLE_DEFAULT, UPSCALE_DEFAULT
from .core_types import PipelineConfig, PixelBuffer, assert_same_shape
from .image_io import (
    load_image_rgba,
    pillow_resample_from_name,
    resize_to_width,
    save_png_rgba,
    upscale_nearest,
)
from .quantize import quantize
from .sharpen import sharpen
from .utils import (
    colour_usage_report,
    debug_log,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    opaque_mask,
    print_banner,
    print_config_line,
)


def stylize(
    buffer: PixelBuffer,
    config: PipelineConfig,
    rng: Optional[np.random.Generator] = None,
    *,
    debug: bool = False,
) -> PixelBuffer:
    """Sharpen, then quantize. Returns a new buffer of the same shape."""
    sharpened = sharpen(buffer, config.amount, debug=debug)
    assert_same_shape(buffer, sharpened)
    quantized = quantize(sharpened, config.colours, rng, debug=debug)
    assert_same_shape(buffer, quantized)
    return quantized


def default_output_path(src_path: Path, outdir: Optional[Path] = None) -> Path:
    """<stem>_pixi.png next to the source, or inside outdir."""
    name = f"{src_path.stem}{OUTPUT_SUFFIX}.png"
    return (outdir / name) if outdir else src_path.with_name(name)


def process_image_file(
    src_path: Path,
    out_path: Optional[Path],
    config: PipelineConfig,
    *,
    scale: int = UPSCALE_DEFAULT,
    resample_name: str = RESAMPLE_DEFAULT,
    rng: Optional[np.random.Generator] = None,
    debug: bool = False,
) -> Path:
    """
    Process a single image path end-to-end:
      load -> resize to config.width -> stylize -> upscale x scale -> save -> report.
    Returns the written PNG path.
    """
    t_start = time.perf_counter()
    if out_path is None:
        out_path = default_output_path(src_path)

    print_banner(src_path.name)

    buffer = load_image_rgba(src_path)
    height0, width0 = buffer.shape[0], buffer.shape[1]
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width0}x{height0}"),
                    ("Opaque", int(np.count_nonzero(opaque_mask(buffer)))),
                ]
            )
        )

    t_resize0 = time.perf_counter()
    small = resize_to_width(
        buffer, config.width, resample=pillow_resample_from_name(resample_name)
    )
    t_resize1 = time.perf_counter()
    height, width = small.shape[0], small.shape[1]

    print_config_line(
        "stylize",
        [
            ("Size", f"{width}x{height}"),
            ("Colours", config.colours),
            ("Detail", config.amount),
            ("Resample", resample_name),
            ("Scale", scale),
        ],
        debug=debug,
    )

    styled = stylize(small, config, rng, debug=debug)
    t_after_map = time.perf_counter()

    written = save_png_rgba(out_path, upscale_nearest(styled, scale))
    t_after_save = time.perf_counter()

    log(f"Wrote {written.name} | size={width * scale}x{height * scale}")
    log("Colours used:")
    for hex_code, count in colour_usage_report(styled):
        log(f"  {hex_code}: {count:,}")
    opaque_pixels = int(np.count_nonzero(opaque_mask(styled)))
    log(f"Opaque pixels: {opaque_pixels:,}")

    if debug:
        debug_log(
            f"Total {format_total_duration_compact(t_after_save - t_start)}  "
            f"(load={format_seconds_compact(t_resize0 - t_start)}, "
            f"resize={format_seconds_compact(t_resize1 - t_resize0)}, "
            f"stylize={format_seconds_compact(t_after_map - t_resize1)}, "
            f"save={format_seconds_compact(t_after_save - t_after_map)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_after_save - t_start)}")
    return written


__all__ = ["stylize", "default_output_path", "process_image_file"]
