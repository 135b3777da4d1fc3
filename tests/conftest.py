"""Shared fixtures for pixi_art tests"""

import struct
import zlib
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pytest
from PIL import Image


class ScriptedRng:
    """Stand-in for numpy.random.Generator that replays fixed integer draws."""

    def __init__(self, draws: Iterable[int]):
        self._draws: List[int] = list(draws)
        self.calls = 0

    @property
    def remaining(self) -> int:
        return len(self._draws)

    def integers(self, low, high=None, size=None):
        assert size is None, "only scalar draws are scripted"
        if high is None:
            low, high = 0, low
        if not self._draws:
            raise AssertionError("scripted rng exhausted")
        value = self._draws.pop(0)
        assert low <= value < high, f"scripted draw {value} outside [{low}, {high})"
        self.calls += 1
        return value


def make_buffer(
    pixels: Sequence[Tuple[int, ...]], width: Optional[int] = None
) -> np.ndarray:
    """Build an (H,W,4) uint8 buffer from RGB or RGBA tuples in scan order."""
    rows = [tuple(p) + (255,) if len(p) == 3 else tuple(p) for p in pixels]
    arr = np.array(rows, dtype=np.uint8)
    w = len(rows) if width is None else width
    return arr.reshape(-1, w, 4)


def _png_chunk(tag: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(tag + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)


def write_oversized_png(path: Path, width: int = 20000, height: int = 20000) -> Path:
    """Header-only RGBA PNG whose declared size trips Pillow's decompression bomb guard."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", ihdr) + _png_chunk(b"IEND", b"")
    )
    return path


@pytest.fixture
def two_cluster_buffer():
    """4x1 opaque buffer with two well separated colour groups."""
    return make_buffer([(0, 0, 0), (10, 0, 0), (250, 250, 250), (255, 255, 255)])


@pytest.fixture
def random_buffer():
    """8x6 RGBA buffer with random colours and mixed alpha."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(6, 8, 4), dtype=np.uint8)


@pytest.fixture
def opaque_random_buffer():
    """8x8 fully opaque random buffer."""
    rng = np.random.default_rng(99)
    buf = rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
    buf[..., 3] = 255
    return buf


@pytest.fixture
def sample_png(tmp_path):
    """32x16 RGBA PNG with a gradient and a transparent corner."""
    ys, xs = np.mgrid[0:16, 0:32]
    arr = np.zeros((16, 32, 4), dtype=np.uint8)
    arr[..., 0] = (xs * 8).astype(np.uint8)
    arr[..., 1] = (ys * 16).astype(np.uint8)
    arr[..., 2] = 128
    arr[..., 3] = 255
    arr[:4, :4, 3] = 0
    path = tmp_path / "sample.png"
    Image.fromarray(arr).save(path)
    return path
