"""Multi-frame RGBA pixel storage.

A :class:`PixelBuffer` holds every frame of a sprite in one contiguous NumPy
array of shape ``(frames, height, width, 4)`` with channels in R, G, B, A
order. Read as little-endian 32-bit words (see :meth:`PixelBuffer.packed`)
each pixel has alpha in its top byte.

The buffer is allocated at most once. The first successful ``allocate`` fixes
the dimensions for every frame; later calls are ignored until ``clear``.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional

import numpy as np

from .utils.shrink import downscale_half

Array = np.ndarray

CHANNELS = 4


class BufferState(Enum):
    """Allocation state of a PixelBuffer."""
    EMPTY = "empty"
    ALLOCATED = "allocated"


class PixelBuffer(object):
    """Frames of identical size stored in a single RGBA8888 array."""

    def __init__(self, frames: int = 1):
        self._width = 0
        self._height = 0
        self._frames = frames
        self._pixels: Optional[Array] = None

    def __repr__(self) -> str:
        return (
            f"PixelBuffer(width={self._width}, height={self._height}, "
            f"frames={self._frames}, state={self.state.value})"
        )

    @property
    def state(self) -> BufferState:
        return BufferState.EMPTY if self._pixels is None else BufferState.ALLOCATED

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def frames(self) -> int:
        return self._frames

    @property
    def pixels(self) -> Optional[Array]:
        """The ``(frames, height, width, 4)`` array, or None before allocation."""
        return self._pixels

    def clear(self, frames: int = 1) -> None:
        """Release the pixel storage and set the frame count for the next allocation."""
        self._pixels = None
        self._width = 0
        self._height = 0
        self._frames = frames

    def allocate(self, width: int, height: int) -> None:
        """Allocate storage for ``frames`` images of ``width`` x ``height``.

        Does nothing if the buffer is already allocated or any dimension is
        zero. Raises MemoryError if the array cannot be allocated.
        """
        if self._pixels is not None or not width or not height or not self._frames:
            return

        shape = (self._frames, height, width, CHANNELS)
        try:
            pixels = np.zeros(shape, dtype=np.uint8)
        except ValueError as e:
            # NumPy reports sizes beyond the address space as ValueError.
            raise MemoryError(f"cannot allocate pixel array of shape {shape}") from e

        self._pixels = pixels
        self._width = width
        self._height = height

    def frame(self, frame: int) -> Array:
        """Return a ``(height, width, 4)`` view of one frame."""
        if self._pixels is None:
            raise IndexError("pixel buffer is not allocated")
        if not 0 <= frame < self._frames:
            raise IndexError(f"frame {frame} out of range [0, {self._frames})")
        return self._pixels[frame]

    def row(self, y: int, frame: int = 0) -> Array:
        """Return a ``(width, 4)`` view of row ``y`` of ``frame``.

        The view shares memory with the buffer, so decoders write scanlines
        into it directly.
        """
        pixels = self.frame(frame)
        if not 0 <= y < self._height:
            raise IndexError(f"row {y} out of range [0, {self._height})")
        return pixels[y]

    def packed(self) -> Optional[Array]:
        """Return the pixels as a ``(frames, height, width)`` uint32 view.

        Each word is ``alpha << 24 | blue << 16 | green << 8 | red``.
        """
        if self._pixels is None:
            return None
        return self._pixels.view("<u4")[..., 0]

    def shrink_to_half_size(self) -> None:
        """Replace the contents with a 2x2 box-filtered half-size copy.

        Odd trailing rows and columns are dropped. If either halved
        dimension is zero the buffer ends up unallocated with that size.
        """
        result = PixelBuffer(self._frames)
        result.allocate(self._width // 2, self._height // 2)
        if result._pixels is not None:
            result._pixels[...] = downscale_half(self._pixels)

        self._width = self._width // 2
        self._height = self._height // 2
        self._pixels = result._pixels

    def copy(self) -> "PixelBuffer":
        """Return an independent copy of this buffer."""
        result = PixelBuffer(self._frames)
        result._width = self._width
        result._height = self._height
        if self._pixels is not None:
            result._pixels = self._pixels.copy()
        return result


def mipmap_chain(buffer: PixelBuffer, levels: int) -> Iterator[PixelBuffer]:
    """Yield up to ``levels`` successively halved copies of ``buffer``.

    Stops early once halving would leave a zero-sized image. ``buffer``
    itself is not modified.
    """
    if levels < 0:
        raise ValueError("levels must be >= 0")
    current = buffer
    for _ in range(levels):
        if current.width < 2 or current.height < 2:
            return
        current = current.copy()
        current.shrink_to_half_size()
        yield current
