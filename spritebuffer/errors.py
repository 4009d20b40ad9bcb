"""Exception types raised by spritebuffer."""
from __future__ import annotations


class SpriteBufferError(RuntimeError):
    """Base class for errors raised while loading sprite images."""


class AllocationError(SpriteBufferError):
    """The pixel buffer for an asset could not be allocated.

    Raised instead of a plain ``False`` result so callers can abandon the
    asset (or free memory and retry) at their loading boundary.
    """


class ImageDecodeError(SpriteBufferError):
    """A file could not be decoded into the pixel buffer."""
