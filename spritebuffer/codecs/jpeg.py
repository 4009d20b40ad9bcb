"""JPEG decoding through OpenCV.

The whole file is read into memory and decoded with ``cv2.imdecode``. The
result is converted to RGBA, which gives every pixel full opacity since
JPEG carries no alpha. EXIF orientation is ignored so pixels come out in
stored order.
"""
from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from ..buffer import PixelBuffer
from ..errors import ImageDecodeError
from ..utils.loader import Files
from .common import prepare_frame

logger = logging.getLogger(__name__)

Array = np.ndarray

# Maximum number of rows copied into the buffer per read call.
SCANLINE_BATCH = 16

_IMREAD_FLAGS = cv2.IMREAD_COLOR | cv2.IMREAD_IGNORE_ORIENTATION


def decode_rgba(data: bytes) -> Array:
    """Decode JPEG bytes to an (H, W, 4) uint8 RGBA array."""
    buf = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(buf, _IMREAD_FLAGS)
    if img is None:
        raise ImageDecodeError("OpenCV failed to decode image")
    # OpenCV uses BGR
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)


class ScanlineReader(object):
    """Hands out rows of a decoded image a batch at a time."""

    def __init__(self, pixels: Array, batch: int = SCANLINE_BATCH):
        self.pixels = pixels
        self.batch = max(1, batch)
        self.output_scanline = 0

    def read_scanlines(self, rows: list, max_lines: int) -> int:
        """Copy up to ``max_lines`` rows into ``rows``; return the count copied.

        Rows are written starting at ``rows[output_scanline]``.
        """
        start = self.output_scanline
        count = min(max_lines, self.batch, len(self.pixels) - start)
        for y in range(start, start + count):
            rows[y][...] = self.pixels[y]
        self.output_scanline += count
        return count


def read_jpeg(path: Path, buffer: PixelBuffer, frame: int, files: Files) -> bool:
    """Decode the JPEG at ``path`` into ``frame`` of ``buffer``.

    Returns False if the file is empty, undecodable or the wrong size.
    Raises AllocationError if the buffer could not be allocated.
    """
    data = files.read(path)
    if not data:
        return False

    try:
        pixels = decode_rgba(data)
    except (ImageDecodeError, cv2.error) as e:
        logger.error("Unable to read \"%s\" as JPEG: %s", path, e)
        return False

    height, width = pixels.shape[:2]
    if not prepare_frame(buffer, path, width, height, frame):
        return False

    rows = [buffer.row(y, frame) for y in range(height)]
    reader = ScanlineReader(pixels)
    remaining = height
    while remaining:
        remaining -= reader.read_scanlines(rows, remaining)
    return True
