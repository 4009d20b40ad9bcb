"""File access for the decoders and frame export through Pillow.

Decoders never open files themselves. They go through a :class:`Files`
service so callers can serve sprites from archives, memory or tests.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


class Files(object):
    """Default file service reading from the local filesystem."""

    def open(self, path: Union[str, Path]) -> Optional[BinaryIO]:
        """Open ``path`` as a seekable binary stream, or return None."""
        try:
            return Path(path).open("rb")
        except OSError as e:
            logger.warning("Unable to open \"%s\": %s", path, e)
            return None

    def read(self, path: Union[str, Path]) -> bytes:
        """Return the full contents of ``path``; empty bytes if it can't be read."""
        try:
            return Path(path).read_bytes()
        except OSError as e:
            logger.warning("Unable to read \"%s\": %s", path, e)
            return b""


class MemoryFiles(Files):
    """File service over an in-memory mapping of path -> bytes."""

    def __init__(self, contents: Optional[dict] = None):
        self.contents = {str(k): v for k, v in (contents or {}).items()}

    def open(self, path: Union[str, Path]) -> Optional[BinaryIO]:
        data = self.contents.get(str(path))
        if data is None:
            logger.warning("Unable to open \"%s\": no such entry", path)
            return None
        return io.BytesIO(data)

    def read(self, path: Union[str, Path]) -> bytes:
        data = self.contents.get(str(path))
        if data is None:
            logger.warning("Unable to read \"%s\": no such entry", path)
            return b""
        return data


def save_frame(buffer, frame: int, path: Union[str, Path]) -> None:
    """Save one frame of a PixelBuffer as an RGBA image file via Pillow.

    Parameters
    ----------
    buffer : PixelBuffer
        An allocated buffer.
    frame : int
        Index of the frame to write.
    path : str | Path
        Output file path. The format is inferred from the extension.
    """
    arr = buffer.frame(frame)
    if arr.dtype != np.uint8:
        raise TypeError("frame must have dtype=uint8")

    p = Path(path)
    im = Image.fromarray(np.ascontiguousarray(arr))
    im.save(p)
