import io
import logging

import pytest
from PIL import Image as PILImage

from rasterkit import AspectRatioMode, Image
from rasterkit.scaling import is_valid_size, resolve_size


def make_image(size=(100, 50), mode="RGB", color="red") -> Image:
    return Image.from_pil(PILImage.new(mode, size, color=color))


def load_png(tmp_path, size=(100, 50)) -> Image:
    path = tmp_path / "src.png"
    PILImage.new("RGB", size, color="blue").save(path)
    image = Image()
    assert image.load(path)
    return image


def test_resolve_size_modes():
    assert resolve_size(30, 70, 100, 50, AspectRatioMode.IGNORE_ASPECT_RATIO) == (30, 70)
    assert resolve_size(30, 70, 100, 50, AspectRatioMode.KEEP_ASPECT_RATIO) == (30, 15)
    assert resolve_size(30, 70, 100, 50, AspectRatioMode.KEEP_ASPECT_RATIO_BY_EXPANDING) == (140, 70)


def test_resolve_size_floors_derived_side():
    # 33 * 50 / 100 = 16.5
    assert resolve_size(33, 0, 100, 50, AspectRatioMode.KEEP_ASPECT_RATIO) == (33, 16)
    # 7 * 3 / 9 = 2.33
    assert resolve_size(0, 7, 3, 9, AspectRatioMode.KEEP_ASPECT_RATIO_BY_EXPANDING) == (2, 7)


def test_resolve_size_zero_source_side():
    assert not is_valid_size(resolve_size(10, 10, 0, 5, AspectRatioMode.KEEP_ASPECT_RATIO))
    assert not is_valid_size(resolve_size(10, 10, 5, 0, AspectRatioMode.KEEP_ASPECT_RATIO_BY_EXPANDING))


def test_resolve_size_rejects_unknown_mode():
    with pytest.raises(TypeError):
        resolve_size(10, 10, 5, 5, "keep")


def test_scaled_ignoring_aspect_ratio_uses_exact_size():
    image = make_image()
    result = image.scaled(13, 77)
    assert (result.width, result.height) == (13, 77)
    assert not result.is_null()


def test_scaled_keep_aspect_ratio_derives_height():
    result = make_image().scaled(50, 999, AspectRatioMode.KEEP_ASPECT_RATIO)
    assert (result.width, result.height) == (50, 25)


def test_scaled_to_height():
    result = make_image().scaled_to_height(10)
    assert (result.width, result.height) == (20, 10)


def test_scaled_to_width_is_idempotent_for_equal_target(tmp_path):
    image = load_png(tmp_path)
    first = image.scaled_to_width(50)
    second = first.scaled_to_width(50)
    assert (first.width, first.height) == (50, 25)
    assert (second.width, second.height) == (50, 25)


@pytest.mark.parametrize(
    "width,height,mode",
    [
        (0, 10, AspectRatioMode.IGNORE_ASPECT_RATIO),
        (10, -1, AspectRatioMode.IGNORE_ASPECT_RATIO),
        (1, 0, AspectRatioMode.KEEP_ASPECT_RATIO),  # 1 * 50 / 100 floors to 0
        (-4, 10, AspectRatioMode.KEEP_ASPECT_RATIO),
        (0, 0, AspectRatioMode.KEEP_ASPECT_RATIO_BY_EXPANDING),
    ],
)
def test_invalid_geometry_yields_null_image(width, height, mode, caplog):
    with caplog.at_level(logging.WARNING):
        result = make_image().scaled(width, height, mode)
    assert result.is_null()
    assert (result.width, result.height) == (-1, -1)
    assert "Invalid scale target" in caplog.text


def test_scaling_a_null_image_yields_null():
    assert Image().scaled(10, 10).is_null()
    assert Image().scaled_to_width(10).is_null()


def test_scaled_copy_inherits_format_not_source(tmp_path):
    image = load_png(tmp_path)
    result = image.scaled(10, 10)
    assert result.format == "png"
    assert result.file_name is None


def test_scaling_never_mutates_source(tmp_path):
    image = load_png(tmp_path)
    before = image.to_bytes()
    image.scaled(10, 10)
    image.scaled_to_height(200)
    assert (image.width, image.height) == (100, 50)
    assert image.to_bytes() == before


def test_resampling_averages_area():
    src = PILImage.new("L", (2, 1))
    src.putpixel((0, 0), 0)
    src.putpixel((1, 0), 255)
    result = Image.from_pil(src).scaled(1, 1)

    pixel = PILImage.open(io.BytesIO(result.to_bytes())).getpixel((0, 0))
    assert all(channel in (127, 128) for channel in pixel)


def test_scaled_palette_image_is_truecolor():
    image = make_image(size=(20, 20))
    image.set_color_count(4)
    assert image.color_count() > 0
    assert image.scaled(10, 10).color_count() == 0


def test_scaling_keeps_alpha():
    src = PILImage.new("RGBA", (4, 4), (255, 0, 0, 0))
    result = Image.from_pil(src).scaled(2, 2)
    with PILImage.open(io.BytesIO(result.to_bytes())) as out:
        assert out.mode == "RGBA"
        assert out.getpixel((0, 0))[3] == 0
