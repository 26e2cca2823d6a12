"""Raster image loading, scaling, palette reduction and saving."""

from .image import Image
from .scaling import AspectRatioMode

__all__ = ["Image", "AspectRatioMode"]
