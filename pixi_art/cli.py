# pixi_art/cli.py
"""
pixi_art command line.

Usage:
  pixi-art INPUT [--outdir DIR] [--resolution I | --width PX] [--colours K]
           [--detail PCT] [--scale N] [--resample nearest|bilinear|bicubic|lanczos]
           [--seed S] [--jobs J] [--debug]

Input:
  An image or a folder of images. Alpha is preserved; only pixels with
  alpha >= 128 are recoloured.

Output:
  PNG. Writes <stem>_pixi.png next to INPUT unless --outdir is given.

Notes:
  Working width is 2 ** (4 + resolution) px unless --width is set.
  --seed makes palette picks reproducible; each file gets its own generator.
"""

from __future__ import annotations

import argparse
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import (
    DETAIL_DEFAULT,
    IMAGE_EXTS,
    OUTPUT_SUFFIX,
    PALETTE_DEFAULT,
    PALETTE_MAX,
    PALETTE_MIN,
    RESAMPLE_CHOICES,
    RESAMPLE_DEFAULT,
    RESOLUTION_INDEX_DEFAULT,
    RESOLUTION_INDEX_MAX,
    RESOLUTION_INDEX_MIN,
    UPSCALE_DEFAULT,
)
from .core_types import (
    ConfigError,
    PipelineConfig,
    detail_percent_to_amount,
)
from .pipeline import default_output_path, process_image_file
from .utils import (
    capture_log_output,
    debug_log,
    enable_line_buffered_stdout,
    error,
    key_value_pairs_to_string,
    print_banner,
    print_config_line,
    warn,
)

# CLI args & small helpers


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        resolution: resolution index (width = 2 ** (4 + index))
        width: optional explicit working width, overrides resolution
        colours: palette size
        detail: sharpen percent 0..100
        scale: export upscale factor
        resample: resize filter name
        seed: optional int seed
        jobs: files processed in parallel
        debug: bool for verbose stage details
    """
    parser = argparse.ArgumentParser(
        prog="pixi-art",
        description="Turn image(s) into low-colour pixel art.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    size = parser.add_mutually_exclusive_group()
    size.add_argument(
        "--resolution",
        type=int,
        choices=range(RESOLUTION_INDEX_MIN, RESOLUTION_INDEX_MAX + 1),
        default=RESOLUTION_INDEX_DEFAULT,
        help="Working width index: 0=16px, 1=32px, ... 6=1024px.",
    )
    size.add_argument(
        "--width", type=int, default=None, help="Explicit working width in px."
    )
    parser.add_argument(
        "--colours",
        type=int,
        default=PALETTE_DEFAULT,
        help=f"Palette size ({PALETTE_MIN}-{PALETTE_MAX}).",
    )
    parser.add_argument(
        "--detail",
        type=int,
        default=DETAIL_DEFAULT,
        help="Edge sharpening before colour reduction, percent 0-100.",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=UPSCALE_DEFAULT,
        help="Nearest-neighbour upscale factor for the saved PNG.",
    )
    parser.add_argument(
        "--resample",
        choices=list(RESAMPLE_CHOICES),
        default=RESAMPLE_DEFAULT,
        help="Downscale filter.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose stage details")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Resolve parsed arguments into a validated PipelineConfig."""
    if args.width is None:
        return PipelineConfig.from_controls(args.resolution, args.colours, args.detail)
    if not PALETTE_MIN <= args.colours <= PALETTE_MAX:
        raise ConfigError(
            f"palette size must be in [{PALETTE_MIN}, {PALETTE_MAX}], got {args.colours}"
        )
    return PipelineConfig(
        width=args.width,
        colours=args.colours,
        amount=detail_percent_to_amount(args.detail),
    )


def collect_images(src: Path) -> List[Path]:
    """Image files in a folder (non-recursive), skipping earlier outputs."""
    files = [
        p
        for p in src.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.endswith(OUTPUT_SUFFIX)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Per-file processing


def _process_one_live(
    path: Path,
    config: PipelineConfig,
    args: argparse.Namespace,
    rng: np.random.Generator,
) -> bool:
    """Process a single file and stream logs to stdout. Returns success."""
    if path.stem.endswith(OUTPUT_SUFFIX):
        print_banner(path.name)
        debug_log(f"skipped output artifact ({OUTPUT_SUFFIX})")
        return True
    try:
        process_image_file(
            path,
            default_output_path(path, args.outdir),
            config,
            scale=args.scale,
            resample_name=args.resample,
            rng=rng,
            debug=args.debug,
        )
    except (ValueError, OSError) as e:
        error(f"{path.name}: {e}")
        return False
    return True


def _process_one_captured(
    path: Path,
    config: PipelineConfig,
    args: argparse.Namespace,
    rng: np.random.Generator,
) -> Tuple[str, str, bool]:
    """
    Process a single file with log capture.

    Useful for concurrent execution where output should be printed in order.
    Returns (stdout text, stderr text, success).
    """
    with capture_log_output() as cap:
        ok = _process_one_live(path, config, args, rng)
    return cap.out.getvalue(), cap.err.getvalue(), ok


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering. Returns the exit status.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    try:
        config = build_config(args)
        if args.scale < 1:
            raise ConfigError(f"scale must be >= 1, got {args.scale}")
    except ConfigError as e:
        error(str(e))
        return 2

    print_config_line(
        "run",
        [
            ("CPU cores", os.cpu_count() or 1),
            ("Jobs", args.jobs),
            ("Width", config.width),
            ("Colours", config.colours),
            ("Detail", config.amount),
        ],
        debug=False,
    )
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Resample", args.resample),
                    ("Scale", args.scale),
                    ("Seed", "-" if args.seed is None else args.seed),
                ]
            )
        )

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    files = collect_images(src) if src.is_dir() else [src]
    if src.is_dir() and args.debug:
        debug_log(
            key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)])
        )
    if not files:
        warn(f"no images in {src}")
        return 0

    seeds = np.random.SeedSequence(args.seed).spawn(len(files))
    rngs = [np.random.default_rng(s) for s in seeds]

    if args.jobs <= 1 or len(files) <= 1:
        results = [
            _process_one_live(p, config, args, rng) for p, rng in zip(files, rngs)
        ]
    else:
        with ThreadPoolExecutor(max_workers=args.jobs) as ex:
            futures = [
                ex.submit(_process_one_captured, p, config, args, rng)
                for p, rng in zip(files, rngs)
            ]
            blocks = [f.result() for f in futures]
        for out_text, err_text, _ok in blocks:
            print(out_text, end="", flush=True)
            if err_text:
                print(err_text, end="", file=sys.stderr, flush=True)
        results = [ok for _out, _err, ok in blocks]

    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
