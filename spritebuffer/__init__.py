"""Decode PNG and JPEG sprite frames into premultiplied RGBA pixel buffers."""
from __future__ import annotations

from .blending import BlendingMode, ImageFileData  # noqa: F401
from .buffer import BufferState, PixelBuffer, mipmap_chain  # noqa: F401
from .codecs import (  # noqa: F401
    IMAGE_EXTENSIONS,
    JPEG_EXTENSIONS,
    PNG_EXTENSIONS,
    image_extensions,
    load_frames,
    read_image,
)
from .errors import AllocationError, ImageDecodeError, SpriteBufferError  # noqa: F401
from .premultiply import premultiply, premultiply_array  # noqa: F401
from .utils.loader import Files, MemoryFiles, save_frame  # noqa: F401
from .utils.shrink import downscale_half  # noqa: F401

__all__ = [
    "BlendingMode",
    "ImageFileData",
    "BufferState",
    "PixelBuffer",
    "mipmap_chain",
    "IMAGE_EXTENSIONS",
    "JPEG_EXTENSIONS",
    "PNG_EXTENSIONS",
    "image_extensions",
    "load_frames",
    "read_image",
    "AllocationError",
    "ImageDecodeError",
    "SpriteBufferError",
    "premultiply",
    "premultiply_array",
    "Files",
    "MemoryFiles",
    "save_frame",
    "downscale_half",
]
