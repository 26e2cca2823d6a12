"""Pixel buffers backed by Pillow.

The :class:`~rasterkit.image.Image` handle never touches Pillow directly.
It holds an object satisfying :class:`PixelBuffer`, which covers the five
things the handle needs from a codec library: decoding, encoding,
resampling, palette quantization and inspection.  :class:`PillowBuffer`
is the only implementation shipped; swapping the codec library means
writing another class with the same surface.

Buffers are owned by exactly one handle.  They cannot be copied with
:mod:`copy`; a new buffer only comes out of a decode, a resample or an
explicit :meth:`PillowBuffer.from_image`.
"""

from __future__ import annotations

import io
import os
from typing import Any, BinaryIO, Dict, List, Optional, Protocol, Union

from PIL import Image

# Pillow signals bad input through several unrelated exception types
PILLOW_ERRORS = (
    OSError,
    ValueError,
    EOFError,
    SyntaxError,
    Image.DecompressionBombError,
)

FileTarget = Union[str, os.PathLike, BinaryIO]


class CodecError(OSError):
    """Raised when the codec library rejects a decode or encode request."""


class PixelBuffer(Protocol):
    """Capabilities the image handle relies on."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def encode(self, target: FileTarget, pil_format: str, params: Dict[str, Any]) -> None: ...

    def resampled(self, width: int, height: int) -> "PixelBuffer": ...

    def quantize(self, colors: int) -> None: ...

    def color_count(self) -> int: ...


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


# Modes the BMP writer stores directly
_BMP_MODES = ("1", "L", "P", "RGB", "RGBA")


def _bmp_mode(image: Image.Image) -> str:
    if _has_alpha(image):
        return "RGBA"
    if len(image.getbands()) == 1:
        return "L"
    return "RGB"


class PillowBuffer:
    """Owned raster held as a :class:`PIL.Image.Image`."""

    __slots__ = ("_image",)

    def __init__(self, image: Image.Image) -> None:
        self._image = image

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_image(cls, image: Image.Image) -> "PillowBuffer":
        """Take a private copy of an existing Pillow image."""
        return cls(image.copy())

    @classmethod
    def open(cls, path: Union[str, os.PathLike], formats: List[str]) -> "PillowBuffer":
        """Decode *path* using only the decoders listed in *formats*.

        Raises:
            CodecError: if the file is unreadable or no decoder accepts it.
        """
        try:
            with Image.open(path, formats=formats) as src:
                src.load()
                decoded = src.copy()
        except PILLOW_ERRORS as exc:
            raise CodecError(f"Cannot decode {os.fspath(path)}: {exc}") from exc
        return cls(decoded)

    @classmethod
    def from_bytes(cls, data: bytes, formats: List[str]) -> "PillowBuffer":
        """Decode an in-memory byte string.

        Raises:
            CodecError: if no decoder in *formats* accepts the data.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise CodecError(f"Expected bytes, got {type(data).__name__}")
        try:
            with Image.open(io.BytesIO(bytes(data)), formats=formats) as src:
                src.load()
                decoded = src.copy()
        except PILLOW_ERRORS as exc:
            raise CodecError(f"Cannot decode image data: {exc}") from exc
        return cls(decoded)

    def __copy__(self):
        raise TypeError("PillowBuffer is owned by a single image and cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("PillowBuffer is owned by a single image and cannot be copied")

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    def color_count(self) -> int:
        """Number of palette entries in use; 0 for truecolor rasters."""
        if self._image.mode != "P":
            return 0
        used = self._image.getcolors(maxcolors=256)
        if used is None:
            return 0
        return len(used)

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------
    def _truecolor(self) -> Image.Image:
        image = self._image
        target = "RGBA" if _has_alpha(image) else "RGB"
        if image.mode == target:
            return image
        return image.convert(target)

    def resampled(self, width: int, height: int) -> "PillowBuffer":
        """Return a new truecolor buffer of ``width`` x ``height``.

        The BOX filter averages every source pixel that falls under a
        destination pixel, over the full extent of both rasters.
        """
        source = self._truecolor()
        result = source.resize((width, height), Image.Resampling.BOX)
        return PillowBuffer(result)

    def quantize(self, colors: int) -> None:
        """Replace the raster with a dithered palette of at most *colors* entries."""
        source = self._image
        if source.mode not in ("RGB", "RGBA"):
            source = self._truecolor()
        method = (
            Image.Quantize.FASTOCTREE if source.mode == "RGBA" else Image.Quantize.MEDIANCUT
        )
        self._image = source.quantize(
            colors=colors,
            method=method,
            dither=Image.Dither.FLOYDSTEINBERG,
        )

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------
    def encode(self, target: FileTarget, pil_format: str, params: Optional[Dict[str, Any]] = None) -> None:
        """Write the raster to *target* (a path or a binary stream).

        Raises:
            CodecError: if the encoder or the underlying I/O fails.
        """
        image = self._image
        if pil_format == "JPEG" and image.mode not in ("RGB", "L", "CMYK"):
            image = image.convert("RGB")
        elif pil_format == "BMP" and image.mode not in _BMP_MODES:
            image = image.convert(_bmp_mode(image))
        try:
            image.save(target, format=pil_format, **(params or {}))
        except PILLOW_ERRORS as exc:
            raise CodecError(f"Cannot encode {pil_format}: {exc}") from exc
