"""Utility functions for spritebuffer.

Modules:
- loader: File service used by the decoders and Pillow frame export.
- shrink: 2x2 box-filter downscaling of RGBA arrays.
"""
from .loader import Files, MemoryFiles, save_frame
from .shrink import downscale_half

__all__ = [
    "Files",
    "MemoryFiles",
    "save_frame",
    "downscale_half",
]
