"""
palettekit Colors Module

Turns decoded colour samples into dominance-ordered palettes using the
clustering engine, and maps samples back onto their palette colours.
"""

from .extraction import (
    rgb_to_hex, hex_to_rgb, validate_samples, to_color_space, from_color_space,
    cluster_palette, recolor_samples,
)

__all__ = [
    "rgb_to_hex", "hex_to_rgb", "validate_samples", "to_color_space",
    "from_color_space", "cluster_palette", "recolor_samples",
]
