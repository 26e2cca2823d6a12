# config.py
"""
Configuration constants for rasterkit
"""

# Formats accepted by Image.load, keyed by file extension
LOAD_FORMATS = {
    'png': 'PNG',
    'gif': 'GIF',
    'jpg': 'JPEG',
    'jpeg': 'JPEG',
}

# Formats with a dedicated encoder; anything else is written as PNG
SAVE_FORMATS = {
    'gif': 'GIF',
    'jpg': 'JPEG',
    'jpeg': 'JPEG',
    'bmp': 'BMP',
    'png': 'PNG',
}

# Decoders tried when building an image from raw bytes
DECODE_FORMATS = ['PNG', 'GIF', 'JPEG', 'BMP']

# Save defaults
DEFAULT_FORMAT = 'png'
DEFAULT_QUALITY = -1  # encoder default
QUALITY_MIN = 0
QUALITY_MAX = 100
PNG_COMPRESS_LEVEL_MAX = 9

# Palette reduction
MAX_PALETTE_COLORS = 256

# Width/height reported by a null image
NULL_DIMENSION = -1
