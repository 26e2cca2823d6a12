"""Format dispatch between file extensions, format names and Pillow codecs.

Loading is driven purely by the file extension; saving by the image's own
format, then the caller's hint.  Nothing here sniffs content to pick a
format, except :func:`decode_bytes`, which has no name to go on and lets
Pillow try each recognised decoder in turn.
"""

from __future__ import annotations

import os
from typing import Any, Callable, Dict, Optional, Tuple, Union

from . import config
from .backend import FileTarget, PillowBuffer, PixelBuffer


def normalize_quality(quality: Optional[int]) -> Optional[int]:
    """Map a 0-100 quality onto the encoder range.

    Returns ``None`` for the encoder default (any negative value or
    ``None``).  Values above ``QUALITY_MAX`` are clamped.
    """
    if quality is None or quality < config.QUALITY_MIN:
        return None
    return min(int(quality), config.QUALITY_MAX)


def _png_params(quality: Optional[int]) -> Dict[str, Any]:
    # 0 -> smallest file, 100 -> stored uncompressed
    if quality is None:
        return {}
    span = config.QUALITY_MAX - config.QUALITY_MIN
    level = round((config.QUALITY_MAX - quality) * config.PNG_COMPRESS_LEVEL_MAX / span)
    return {"compress_level": level}


def _jpeg_params(quality: Optional[int]) -> Dict[str, Any]:
    if quality is None:
        return {}
    return {"quality": quality}


def _no_params(quality: Optional[int]) -> Dict[str, Any]:
    return {}


_ENCODER_PARAMS: Dict[str, Callable[[Optional[int]], Dict[str, Any]]] = {
    "PNG": _png_params,
    "JPEG": _jpeg_params,
    "GIF": _no_params,
    "BMP": _no_params,
}


def load_format(suffix: str) -> Optional[str]:
    """Return the Pillow decoder name for a file *suffix*, or ``None``."""
    return config.LOAD_FORMATS.get(suffix)


def resolve_save_format(image_format: Optional[str], format_hint: Optional[str]) -> str:
    """Pick the format key to encode with.

    The image's own format wins over the caller's hint.  Unknown or
    missing formats resolve to ``DEFAULT_FORMAT``.
    """
    fmt = image_format or format_hint or config.DEFAULT_FORMAT
    fmt = str(fmt).lower()
    if fmt not in config.SAVE_FORMATS:
        return config.DEFAULT_FORMAT
    return fmt


def encoder_for(fmt: str, quality: Optional[int] = config.DEFAULT_QUALITY) -> Tuple[str, Dict[str, Any]]:
    """Return ``(pillow_format, save_params)`` for a resolved format key."""
    pil_format = config.SAVE_FORMATS.get(fmt, config.SAVE_FORMATS[config.DEFAULT_FORMAT])
    params = _ENCODER_PARAMS[pil_format](normalize_quality(quality))
    return pil_format, params


def decode_file(path: Union[str, os.PathLike], pil_format: str) -> PixelBuffer:
    """Decode *path* with the single decoder for *pil_format*.

    Raises:
        CodecError: on unreadable files or data the decoder rejects.
    """
    return PillowBuffer.open(path, [pil_format])


def decode_bytes(data: bytes) -> PixelBuffer:
    """Decode raw bytes with any recognised decoder.

    Raises:
        CodecError: if none of ``DECODE_FORMATS`` accepts the data.
    """
    return PillowBuffer.from_bytes(data, list(config.DECODE_FORMATS))


def encode(buffer: PixelBuffer, target: FileTarget, fmt: str, quality: Optional[int] = config.DEFAULT_QUALITY) -> str:
    """Encode *buffer* to *target* and return the Pillow format used.

    Raises:
        CodecError: if the encoder or the write fails.
    """
    pil_format, params = encoder_for(fmt, quality)
    buffer.encode(target, pil_format, params)
    return pil_format


__all__ = [
    "normalize_quality",
    "load_format",
    "resolve_save_format",
    "encoder_for",
    "decode_file",
    "decode_bytes",
    "encode",
]
