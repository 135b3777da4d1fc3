# pixi_art/quantize.py
from __future__ import annotations

"""
Palette reduction with Lloyd's k-means in RGB space.

Exports:
  opaque_samples(buffer) -> float64 [N,3]
  nearest_centroid(points, centroids) -> intp [N]
  fit_palette(samples, k, rng, *, iterations=KMEANS_ITERATIONS, debug=False) -> PaletteFit
  palette_colours(fit) -> uint8 [k,3]
  quantize(buffer, k, rng=None, *, debug=False) -> PixelBuffer

Notes:
  - Samples are the RGB rows of pixels with alpha >= 128, in scan order,
    duplicates kept. Other pixels are never touched.
  - Centroids start as k samples drawn uniformly with replacement.
  - Fixed iteration count. Ties go to the lowest centroid index.
  - A centroid that receives no samples is reseeded with a fresh random
    sample; reseeds are drawn in ascending centroid order.
  - All randomness comes from the generator passed in.
"""

from typing import Optional

import numpy as np

from .constants import KMEANS_ITERATIONS
from .core_types import (
    Centroids,
    Labels,
    PaletteFit,
    PixelBuffer,
    Samples,
    assert_pixel_buffer,
    validate_palette_size,
)
from .utils import debug_log, key_value_pairs_to_string, opaque_mask

# Rows per distance block in nearest_centroid; bounds the (rows, k) temporaries.
_CHUNK_ROWS = 65_536


def opaque_samples(buffer: PixelBuffer) -> Samples:
    """RGB rows (float64) of every opaque pixel, in row-major scan order."""
    assert_pixel_buffer(buffer)
    return buffer[opaque_mask(buffer), :3].astype(np.float64)


def _draw_sample(samples: Samples, rng: np.random.Generator) -> np.ndarray:
    """One sample row picked uniformly at random."""
    return samples[int(rng.integers(0, samples.shape[0]))]


def nearest_centroid(points: np.ndarray, centroids: Centroids) -> Labels:
    """
    Index of the nearest centroid per point by squared Euclidean RGB distance.
    np.argmin keeps the first minimum, so exact ties resolve to the lowest index.
    """
    pts = np.asarray(points, dtype=np.float64)
    cen = np.asarray(centroids, dtype=np.float64)
    labels = np.empty((pts.shape[0],), dtype=np.intp)
    for start in range(0, pts.shape[0], _CHUNK_ROWS):
        block = pts[start : start + _CHUNK_ROWS]
        diff = block[:, None, :] - cen[None, :, :]
        dist2 = diff[..., 0] ** 2 + diff[..., 1] ** 2 + diff[..., 2] ** 2
        labels[start : start + block.shape[0]] = np.argmin(dist2, axis=1)
    return labels


def fit_palette(
    samples: Samples,
    k: int,
    rng: np.random.Generator,
    *,
    iterations: int = KMEANS_ITERATIONS,
    debug: bool = False,
) -> PaletteFit:
    """
    Fit k centroids to the samples with Lloyd's algorithm.

    Args:
      samples    : float [N,3] RGB rows, N >= 1
      k          : number of centroids (>= 1)
      rng        : random source for the initial picks and empty-cluster reseeds
      iterations : assignment/update passes
      debug      : print per-iteration cluster stats
    Returns:
      PaletteFit with float64 centroids [k,3] and the sample counts of the
      last assignment pass (a reseeded centroid reports 0).
    """
    k = validate_palette_size(k)
    samples = np.asarray(samples, dtype=np.float64)
    n = int(samples.shape[0])
    if n == 0:
        raise ValueError("cannot fit a palette to zero samples")

    centroids: Centroids = np.empty((k, 3), dtype=np.float64)
    for j in range(k):
        centroids[j] = _draw_sample(samples, rng)

    counts = np.zeros((k,), dtype=np.int64)
    for it in range(iterations):
        labels = nearest_centroid(samples, centroids)

        # Per-centroid sums and counts for this pass.
        counts = np.bincount(labels, minlength=k).astype(np.int64, copy=False)
        sums = np.stack(
            [np.bincount(labels, weights=samples[:, c], minlength=k) for c in range(3)],
            axis=1,
        )

        updated = centroids.copy()
        filled = counts > 0
        updated[filled] = sums[filled] / counts[filled, None]

        empty = np.flatnonzero(~filled)
        for j in empty.tolist():
            updated[j] = _draw_sample(samples, rng)

        if debug:
            shift = float(np.max(np.abs(updated - centroids)))
            debug_log(
                key_value_pairs_to_string(
                    [
                        ("Iter", it + 1),
                        ("Samples", n),
                        ("K", k),
                        ("Empty", int(empty.size)),
                        ("Max shift", shift),
                    ]
                )
            )
        centroids = updated

    return PaletteFit(centroids=centroids, counts=counts)


def palette_colours(fit: PaletteFit) -> np.ndarray:
    """Centroids rounded half-to-even into uint8 RGB rows."""
    return np.rint(np.clip(fit.centroids, 0.0, 255.0)).astype(np.uint8)


def quantize(
    buffer: PixelBuffer,
    k: int,
    rng: Optional[np.random.Generator] = None,
    *,
    debug: bool = False,
) -> PixelBuffer:
    """
    Reduce opaque pixels to at most k colours.

    Args:
      buffer : uint8 [H,W,4] RGBA
      k      : palette size (>= 1)
      rng    : random source; a fresh default_rng() is used when omitted
      debug  : print k-means stats
    Returns:
      New uint8 [H,W,4] buffer. Pixels with alpha < 128 and all alpha values
      are copied unchanged. With no opaque pixels the result equals the input.
    Raises:
      ConfigError when k is not an integer >= 1.
    """
    assert_pixel_buffer(buffer)
    k = validate_palette_size(k)

    out = buffer.copy()
    mask = opaque_mask(buffer)
    if not np.any(mask):
        if debug:
            debug_log("quantize: no opaque pixels, nothing to do")
        return out

    if rng is None:
        rng = np.random.default_rng()

    samples = opaque_samples(buffer)
    fit = fit_palette(samples, k, rng, debug=debug)

    labels = nearest_centroid(samples, fit.centroids)
    out[mask, :3] = palette_colours(fit)[labels]

    if debug:
        used = int(np.unique(labels).size)
        debug_log(
            key_value_pairs_to_string(
                [("Opaque", int(samples.shape[0])), ("K", k), ("Colours used", used)]
            )
        )
    return out


__all__ = [
    "opaque_samples",
    "nearest_centroid",
    "fit_palette",
    "palette_colours",
    "quantize",
]
