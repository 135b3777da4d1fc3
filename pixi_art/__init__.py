# pixi_art/__init__.py
"""
pixi_art package.

Purpose:
  Turn raster images into low-colour pixel art: unsharp-mask detail pass,
  then k-means palette reduction. See pixi_art.cli for the command line.

Public API:
  stylize         : sharpen + quantize with a PipelineConfig.
  sharpen         : unsharp mask on an RGBA buffer.
  quantize        : k-means palette reduction on an RGBA buffer.
  fit_palette     : k-means fit on raw RGB samples.
  PipelineConfig  : width / colours / amount settings.
  core_types      : shared type aliases, errors and validators.
  image_io        : load / resize / upscale / save helpers (Pillow).
  utils           : colour report and tidy logging.

Quick start:
  import numpy as np
  from pixi_art import PipelineConfig, stylize
  out = stylize(buf, PipelineConfig(width=64, colours=8, amount=0.3),
                rng=np.random.default_rng(0))
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import image_io
from . import utils

from .core_types import ConfigError, ImageLoadError, PaletteFit, PipelineConfig
from .sharpen import sharpen
from .quantize import fit_palette, quantize
from .pipeline import stylize

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "image_io",
    "utils",
    "ConfigError",
    "ImageLoadError",
    "PaletteFit",
    "PipelineConfig",
    "sharpen",
    "quantize",
    "fit_palette",
    "stylize",
]
