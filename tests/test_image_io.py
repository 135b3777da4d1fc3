"""Unit tests for Pillow-backed load / resize / export helpers"""

import numpy as np
import pytest
from PIL import Image

from conftest import write_oversized_png

from pixi_art.core_types import ImageLoadError
from pixi_art.image_io import (
    load_image_rgba,
    pillow_resample_from_name,
    resize_to_width,
    save_png_rgba,
    target_size,
    upscale_nearest,
)


class TestLoad:
    """Loader"""

    def test_loads_rgba(self, sample_png):
        buf = load_image_rgba(sample_png)
        assert buf.shape == (16, 32, 4)
        assert buf.dtype == np.uint8
        assert buf[0, 0, 3] == 0
        assert buf[10, 10, 3] == 255

    def test_rgb_file_gets_opaque_alpha(self, tmp_path):
        path = tmp_path / "rgb.png"
        Image.new("RGB", (3, 2), (10, 20, 30)).save(path)
        buf = load_image_rgba(path)
        assert buf.shape == (2, 3, 4)
        assert np.all(buf[..., 3] == 255)
        assert buf[1, 2, :3].tolist() == [10, 20, 30]

    def test_rejects_non_image(self, tmp_path):
        path = tmp_path / "notes.png"
        path.write_bytes(b"definitely not a png")
        with pytest.raises(ImageLoadError):
            load_image_rgba(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageLoadError):
            load_image_rgba(tmp_path / "missing.png")

    def test_oversized_image_is_a_load_error(self, tmp_path):
        path = write_oversized_png(tmp_path / "huge.png")
        with pytest.raises(ImageLoadError, match="too large"):
            load_image_rgba(path)


class TestResize:
    """Resizer"""

    @pytest.mark.parametrize(
        "src,dst_w,expected",
        [((100, 50), 16, (16, 8)), ((32, 16), 8, (8, 4)), ((3, 1000), 16, (16, 5333))],
    )
    def test_target_size_keeps_aspect(self, src, dst_w, expected):
        assert target_size(src[0], src[1], dst_w) == expected

    def test_target_height_at_least_one(self):
        assert target_size(1000, 1, 16) == (16, 1)

    @pytest.mark.parametrize("args", [(0, 5, 16), (5, 0, 16), (5, 5, 0)])
    def test_target_size_rejects_bad_sizes(self, args):
        with pytest.raises(ValueError):
            target_size(*args)

    def test_resize_to_width(self, sample_png):
        buf = load_image_rgba(sample_png)
        small = resize_to_width(buf, 8)
        assert small.shape == (4, 8, 4)
        assert small.dtype == np.uint8

    def test_same_size_returns_copy(self):
        buf = np.full((2, 4, 4), 7, dtype=np.uint8)
        out = resize_to_width(buf, 4)
        np.testing.assert_array_equal(out, buf)
        assert out is not buf

    def test_resample_names(self):
        assert pillow_resample_from_name("nearest") == Image.Resampling.NEAREST
        assert pillow_resample_from_name("lanczos") == Image.Resampling.LANCZOS
        with pytest.raises(ValueError):
            pillow_resample_from_name("cubic-ish")


class TestExport:
    """Upscale and PNG encode"""

    def test_upscale_replicates_blocks(self):
        buf = np.array([[[1, 2, 3, 255], [9, 8, 7, 0]]], dtype=np.uint8)
        big = upscale_nearest(buf, 3)
        assert big.shape == (3, 6, 4)
        assert np.all(big[:, :3] == buf[0, 0])
        assert np.all(big[:, 3:] == buf[0, 1])

    def test_upscale_rejects_zero(self):
        with pytest.raises(ValueError):
            upscale_nearest(np.zeros((1, 1, 4), dtype=np.uint8), 0)

    def test_save_is_lossless_and_forces_png(self, tmp_path):
        rng = np.random.default_rng(5)
        buf = rng.integers(0, 256, size=(5, 7, 4), dtype=np.uint8)
        written = save_png_rgba(tmp_path / "out" / "art.jpg", buf)
        assert written.suffix == ".png"
        assert written.exists()
        with Image.open(written) as im:
            assert im.mode == "RGBA"
            np.testing.assert_array_equal(np.array(im), buf)
