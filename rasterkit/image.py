"""The :class:`Image` handle: decoded pixels plus width, height and format.

An image is either *null* (no pixel buffer, both dimensions ``-1``, no
format) or *valid*.  Loading, decoding and scaling report expected
failures through return values: ``load`` and ``save`` return ``False``,
``from_data`` and ``scaled`` return a null image.  Nothing here raises
for a bad file, a bad byte string or an impossible target size.

Example::

    image = Image()
    if image.load("photo.png"):
        thumb = image.scaled_to_width(120)
        thumb.save("thumb.png")
"""

from __future__ import annotations

import io
import logging
import os
import sys
from typing import BinaryIO, Optional, Union

from PIL import Image as PILImage

from . import config
from .backend import CodecError, PillowBuffer, PixelBuffer
from .codec import decode_bytes, decode_file, encode, load_format, resolve_save_format
from .scaling import AspectRatioMode, is_valid_size, resolve_size
from .validation import file_suffix, has_url_scheme

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class Image:
    """Owned raster with its dimensions, format and source path."""

    __slots__ = ("_buffer", "_width", "_height", "_format", "_file_name")

    def __init__(self) -> None:
        self._buffer: Optional[PixelBuffer] = None
        self._width: int = config.NULL_DIMENSION
        self._height: int = config.NULL_DIMENSION
        self._format: Optional[str] = None
        self._file_name: Optional[str] = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def _from_buffer(cls, buffer: PixelBuffer, fmt: Optional[str] = None) -> "Image":
        image = cls()
        image._bind(buffer)
        image._format = fmt
        return image

    def _bind(self, buffer: PixelBuffer) -> None:
        # Dimensions always come from the decoded raster itself
        self._buffer = buffer
        self._width = buffer.width
        self._height = buffer.height

    @classmethod
    def from_data(cls, data: bytes) -> "Image":
        """Decode an image from an in-memory byte string.

        The format is left unset; :meth:`save` then falls back to its
        ``format_hint``.

        Args:
            data: Encoded PNG, GIF, JPEG or BMP bytes.

        Returns:
            Image: The decoded image, or a null image if decoding failed.
        """
        try:
            buffer = decode_bytes(data)
        except CodecError as exc:
            LOGGER.warning("Image data could not be decoded: %s", exc)
            return cls()
        return cls._from_buffer(buffer)

    @classmethod
    def from_pil(cls, pil_image: PILImage.Image) -> "Image":
        """Wrap a copy of an existing Pillow image. The format is left unset."""
        return cls._from_buffer(PillowBuffer.from_image(pil_image))

    # ------------------------------------------------------------------
    # Loading and saving
    # ------------------------------------------------------------------
    def load(self, file_name: PathLike) -> bool:
        """Load the image stored at *file_name*.

        The decoder is chosen from the file extension alone (``png``,
        ``gif``, ``jpg`` or ``jpeg``).  On any failure the image keeps
        whatever state it had before the call.

        Args:
            file_name: Path of the file to read.

        Returns:
            bool: True if the image was loaded.
        """
        if has_url_scheme(file_name):
            LOGGER.warning("Refusing to load %s: URLs are not supported", file_name)
            return False

        suffix = file_suffix(file_name)
        pil_format = load_format(suffix)
        if pil_format is None:
            LOGGER.warning("Unsupported image format %r for %s", suffix, file_name)
            return False

        try:
            buffer = decode_file(file_name, pil_format)
        except CodecError as exc:
            LOGGER.warning("Failed to load %s: %s", file_name, exc)
            return False

        self._bind(buffer)
        self._format = suffix
        self._file_name = os.fspath(file_name)
        LOGGER.debug("Loaded %s (%dx%d %s)", self._file_name, self._width, self._height, suffix)
        return True

    def save(
        self,
        file_name: Optional[Union[PathLike, BinaryIO]] = None,
        format_hint: str = config.DEFAULT_FORMAT,
        quality: int = config.DEFAULT_QUALITY,
    ) -> bool:
        """Save the image to *file_name* using its format, or *format_hint*.

        The image's own format always takes precedence over the hint, and
        an unrecognised format is written as PNG.  ``quality`` runs from 0
        (smallest file) to 100 (largest file); ``-1`` keeps the encoder
        default.  GIF and BMP ignore it.

        Args:
            file_name: Target path or writable binary stream.  ``None``
                writes the encoded bytes to standard output.
            format_hint: Format used when the image has none of its own.
            quality: Compression quality, 0-100 or -1.

        Returns:
            bool: True if the encoder wrote the image.
        """
        if self._buffer is None:
            LOGGER.warning("Cannot save a null image")
            return False

        fmt = resolve_save_format(self._format, format_hint)
        to_stdout = file_name is None
        target = getattr(sys.stdout, "buffer", None) if to_stdout else file_name
        if target is None:
            LOGGER.warning("Standard output has no binary buffer to write to")
            return False
        try:
            encode(self._buffer, target, fmt, quality)
            if to_stdout:
                target.flush()
        except (CodecError, OSError) as exc:
            LOGGER.warning("Failed to save image as %s: %s", fmt, exc)
            return False

        LOGGER.debug("Saved %dx%d image as %s", self._width, self._height, fmt)
        return True

    def to_bytes(self, format_hint: str = config.DEFAULT_FORMAT, quality: int = config.DEFAULT_QUALITY) -> bytes:
        """Encode the image in memory, with the same rules as :meth:`save`.

        Returns ``b""`` for a null image or when encoding fails.
        """
        stream = io.BytesIO()
        if not self.save(stream, format_hint, quality):
            return b""
        return stream.getvalue()

    # ------------------------------------------------------------------
    # Scaling and palette
    # ------------------------------------------------------------------
    def scaled(
        self,
        width: int,
        height: int,
        aspect_ratio_mode: AspectRatioMode = AspectRatioMode.IGNORE_ASPECT_RATIO,
    ) -> "Image":
        """Return a copy scaled to a ``width`` x ``height`` box.

        The aspect ratio mode decides which side is authoritative; see
        :func:`rasterkit.scaling.resolve_size`.  The whole source is
        resampled into the whole target with an area-averaging filter.
        The copy keeps this image's format and has no source path.

        Returns:
            Image: The scaled copy, or a null image when this image is null
            or either resolved side is zero or negative.
        """
        size = resolve_size(width, height, self._width, self._height, aspect_ratio_mode)
        if self._buffer is None:
            LOGGER.warning("Cannot scale a null image")
            return Image()
        if not is_valid_size(size):
            LOGGER.warning("Invalid scale target %dx%d", *size)
            return Image()

        scaled = Image._from_buffer(self._buffer.resampled(*size), self._format)
        LOGGER.debug("Scaled %dx%d -> %dx%d", self._width, self._height, *size)
        return scaled

    def scaled_to_height(self, height: int) -> "Image":
        """Return a copy scaled to *height*, width following the aspect ratio."""
        return self.scaled(0, height, AspectRatioMode.KEEP_ASPECT_RATIO_BY_EXPANDING)

    def scaled_to_width(self, width: int) -> "Image":
        """Return a copy scaled to *width*, height following the aspect ratio."""
        return self.scaled(width, 0, AspectRatioMode.KEEP_ASPECT_RATIO)

    def set_color_count(self, color_count: int) -> None:
        """Reduce this image, in place, to a palette of at most *color_count* colours.

        The reduction is dithered.  Counts above 256 are clamped; counts
        below 1 leave the image untouched.  A null image is left as is.
        """
        if self._buffer is None:
            return
        if color_count < 1:
            LOGGER.warning("Ignoring palette size %d: at least one colour is required", color_count)
            return
        self._buffer.quantize(min(int(color_count), config.MAX_PALETTE_COLORS))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def format(self) -> Optional[str]:
        return self._format

    @property
    def file_name(self) -> Optional[str]:
        """Path the image was loaded from; ``None`` for built or derived images."""
        return self._file_name

    def color_count(self) -> int:
        """Return the size of the colour table in use, 0 for truecolor images."""
        if self._buffer is None:
            return 0
        return self._buffer.color_count()

    def is_null(self) -> bool:
        return self._buffer is None

    def valid(self, x: int, y: int) -> bool:
        """True if ``(x, y)`` lies strictly inside the image.

        Both the zero row/column and the far edge are excluded.
        """
        return 0 < x < self._width and 0 < y < self._height

    def __bool__(self) -> bool:
        return self._buffer is not None

    def __repr__(self) -> str:
        if self._buffer is None:
            return "Image(null)"
        return f"Image({self._width}x{self._height}, format={self._format!r})"


__all__ = ["Image", "AspectRatioMode"]
