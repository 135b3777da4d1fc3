#!/usr/bin/env python3
"""
pixi_art.py
Turn an image (or a folder of images) into low-colour pixel art.

Usage:
  python pixi_art.py INPUT --resolution 2 --colours 8 --detail 30 --seed 1 --debug

Pipeline:
  resize to 2 ** (4 + resolution) px wide -> unsharp mask (detail) ->
  k-means palette (colours) -> x20 nearest upscale -> PNG.

Output:
  <stem>_pixi.png next to INPUT, or in --outdir.

Notes:
  Options and batch handling live in pixi_art.cli.
"""

import sys

from pixi_art.cli import main

if __name__ == "__main__":
    sys.exit(main())
