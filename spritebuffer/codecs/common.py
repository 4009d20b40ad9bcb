"""Allocate-and-validate step shared by the PNG and JPEG decoders."""
from __future__ import annotations

import logging
from pathlib import Path

from ..buffer import PixelBuffer
from ..errors import AllocationError

logger = logging.getLogger(__name__)


def prepare_frame(buffer: PixelBuffer, path: Path, width: int, height: int, frame: int) -> bool:
    """Size ``buffer`` for an image and check that ``frame`` may be written.

    The first frame read into an empty buffer fixes its dimensions. Every
    later frame must match them exactly. Nothing is written to the buffer
    here apart from the allocation itself.

    Returns
    -------
    bool
        True if the decoder may write ``width`` x ``height`` pixels into
        ``frame``; False (after logging the reason) otherwise.

    Raises
    ------
    AllocationError
        If the pixel storage could not be allocated.
    """
    if not 0 <= frame < buffer.frames:
        logger.error(
            "Skipped processing \"%s\": frame %d is outside the buffer's %d frame(s)",
            path, frame, buffer.frames,
        )
        return False

    try:
        buffer.allocate(width, height)
    except MemoryError as e:
        message = f"Failed to allocate contiguous memory for \"{path}\""
        logger.error(message)
        raise AllocationError(message) from e

    if not width or not height or width != buffer.width or height != buffer.height:
        message = f"Skipped processing \"{path}\":\n\tAll image frames must have equal "
        if width and width != buffer.width:
            logger.error("%swidth: expected %d but was %d", message, buffer.width, width)
        if height and height != buffer.height:
            logger.error("%sheight: expected %d but was %d", message, buffer.height, height)
        return False

    return True
