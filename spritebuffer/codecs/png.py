"""PNG decoding through Pillow.

Pillow reads the PNG header when the file is opened, so the frame size is
checked against the buffer before any pixel data is decoded. Every PNG
colour type and bit depth is normalized to straight 8-bit RGBA:

- palette images are expanded, with tRNS entries becoming alpha
- grayscale is expanded to RGB, sub-byte depths scaled up to 8 bits
- 16-bit samples are scaled down to 8 bits
- images without alpha get a fully opaque alpha channel

Interlaced images are deinterlaced by Pillow.
"""
from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import BinaryIO, NamedTuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..buffer import PixelBuffer
from ..errors import AllocationError
from ..utils.loader import Files
from .common import prepare_frame

logger = logging.getLogger(__name__)

Array = np.ndarray

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# Pillow modes for 16-bit grayscale PNGs.
_WIDE_GRAY_MODES = ("I", "I;16", "I;16B", "I;16L")


class PngHeader(NamedTuple):
    width: int
    height: int
    bit_depth: int
    color_type: int


def read_header(stream: BinaryIO) -> PngHeader:
    """Read the IHDR chunk at the start of ``stream`` and rewind it.

    Pillow hides the stored bit depth once it has picked a mode, and tRNS
    keys are stored at that depth.
    """
    raw = stream.read(len(PNG_SIGNATURE) + 8 + 13)
    stream.seek(0)
    if len(raw) < 33 or raw[:8] != PNG_SIGNATURE or raw[12:16] != b"IHDR":
        raise UnidentifiedImageError("missing PNG signature or IHDR chunk")
    width, height, bit_depth, color_type = struct.unpack(">IIBB", raw[16:26])
    return PngHeader(width, height, bit_depth, color_type)


def _scale_16_to_8(values: Array) -> Array:
    """Scale 16-bit samples to 8 bits, rounding to nearest."""
    return ((values.astype(np.uint32) * 255 + 32895) >> 16).astype(np.uint8)


def _with_alpha(color: Array, transparent: Array) -> Array:
    """Stack an alpha channel onto ``color``: 0 where ``transparent``, else 255."""
    alpha = np.where(transparent, 0, 255).astype(np.uint8)
    if color.ndim == 2:
        return np.dstack([color, color, color, alpha])
    return np.dstack([color, alpha])


def to_rgba(im: Image.Image, bit_depth: int = 8) -> Array:
    """Convert a Pillow image to an (H, W, 4) uint8 RGBA array.

    ``bit_depth`` is the depth stored in the file. Colour-key transparency
    is matched at that depth before samples are reduced to 8 bits.
    """
    key = im.info.get("transparency")

    if im.mode in _WIDE_GRAY_MODES:
        values = np.asarray(im).astype(np.uint32)
        transparent = values == key if isinstance(key, int) else np.zeros(values.shape, dtype=bool)
        return _with_alpha(_scale_16_to_8(values), transparent)

    if im.mode == "L" and bit_depth < 8 and isinstance(key, int):
        # Pillow scales 2- and 4-bit samples up to 8 bits but keeps the raw key.
        gray = np.asarray(im, dtype=np.uint8)
        return _with_alpha(gray, gray == key * (255 // ((1 << bit_depth) - 1)))

    if im.mode == "RGB" and bit_depth == 16 and isinstance(key, tuple):
        # Pillow keeps the high byte of 16-bit samples; the key is still 16-bit.
        rgb = np.asarray(im, dtype=np.uint8)
        high = np.array([k >> 8 for k in key], dtype=np.uint8)
        return _with_alpha(rgb, (rgb == high).all(axis=-1))

    if im.mode != "RGBA":
        im = im.convert("RGBA")
    return np.asarray(im, dtype=np.uint8)


def read_png(path: Path, buffer: PixelBuffer, frame: int, files: Files) -> bool:
    """Decode the PNG at ``path`` into ``frame`` of ``buffer``.

    Returns False if the file is missing, unreadable or the wrong size.
    Raises AllocationError if the buffer could not be allocated or the image
    is too large to decode.
    """
    stream = files.open(path)
    if stream is None:
        return False

    with stream:
        try:
            header = read_header(stream)
            im = Image.open(stream, formats=["PNG"])
        except Image.DecompressionBombError as e:
            message = f"Failed to allocate contiguous memory for \"{path}\""
            logger.error(message)
            raise AllocationError(message) from e
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            logger.error("Unable to read \"%s\" as PNG: %s", path, e)
            return False

        with im:
            width, height = im.size
            if not prepare_frame(buffer, path, width, height, frame):
                return False

            try:
                pixels = to_rgba(im, header.bit_depth)
            except (OSError, SyntaxError, ValueError) as e:
                logger.error("Unable to decode \"%s\": %s", path, e)
                return False

    buffer.frame(frame)[...] = pixels
    return True
