"""Image decoders and the unified entry-point for reading sprite frames.

Exported API
------------
- read_image(buffer, data, frame=0, files=None)
- load_frames(sources, files=None)
- image_extensions()

Supported formats
-----------------
- PNG  : ``.png``                    (decoded with Pillow)
- JPEG : ``.jpg``, ``.jpeg``, ``.jpe`` (decoded with OpenCV)

Implementation notes
--------------------
After a successful decode the frame is premultiplied unless the file is
already premultiplied. PNG frames are always premultiplied; JPEG frames
only when drawn additively, since JPEG has no alpha to fold in otherwise.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from ..blending import BlendingMode, ImageFileData
from ..buffer import PixelBuffer
from ..errors import ImageDecodeError
from ..premultiply import premultiply
from ..utils.loader import Files
from .jpeg import read_jpeg
from .png import read_png

logger = logging.getLogger(__name__)

PNG_EXTENSIONS = frozenset({".png"})
JPEG_EXTENSIONS = frozenset({".jpg", ".jpeg", ".jpe"})
IMAGE_EXTENSIONS = PNG_EXTENSIONS | JPEG_EXTENSIONS


def image_extensions() -> frozenset:
    """Return every file extension ``read_image`` can decode."""
    return IMAGE_EXTENSIONS


def read_image(
    buffer: PixelBuffer,
    data: ImageFileData,
    frame: int = 0,
    files: Optional[Files] = None,
) -> bool:
    """Decode the file described by ``data`` into ``frame`` of ``buffer``.

    Parameters
    ----------
    buffer : PixelBuffer
        Destination. Allocated by the first frame read into it.
    data : ImageFileData
        The file to read and how it is blended.
    frame : int
        Frame index to fill.
    files : Files | None
        File service; the local filesystem if None.

    Returns
    -------
    bool
        False if the extension isn't supported or the frame could not be
        decoded. In both cases the frame's pixels are left untouched.

    Raises
    ------
    AllocationError
        If the buffer could not be allocated for this image.
    """
    is_png = data.extension in PNG_EXTENSIONS
    is_jpeg = data.extension in JPEG_EXTENSIONS
    if not is_png and not is_jpeg:
        return False

    if files is None:
        files = Files()

    if is_png and not read_png(data.path, buffer, frame, files):
        return False
    if is_jpeg and not read_jpeg(data.path, buffer, frame, files):
        return False

    if data.blending_mode is not BlendingMode.PREMULTIPLIED_ALPHA:
        if is_png or (is_jpeg and data.blending_mode is BlendingMode.ADDITIVE):
            premultiply(buffer, frame, data.blending_mode)
    return True


def load_frames(
    sources: Iterable[Union[str, Path, ImageFileData]],
    files: Optional[Files] = None,
) -> PixelBuffer:
    """Read each source into consecutive frames of a new buffer.

    Paths are described with :meth:`ImageFileData.from_path`, so their
    blending mode and frame number come from the file name. Frames are
    stored in frame-number order, whatever order they are given in.

    Raises
    ------
    ValueError
        If there are no sources, or they name more than one sprite.
    ImageDecodeError
        Naming the first source that could not be read.
    AllocationError
        If the buffer could not be allocated.
    """
    items = [s if isinstance(s, ImageFileData) else ImageFileData.from_path(s) for s in sources]
    if not items:
        raise ValueError("at least one image is required")
    sprites = sorted({(data.name, data.is_2x) for data in items})
    if len(sprites) > 1:
        names = ", ".join(name + ("@2x" if is_2x else "") for name, is_2x in sprites)
        raise ValueError(f"frames belong to more than one sprite: {names}")
    items.sort(key=lambda data: data.frame_number)

    buffer = PixelBuffer()
    buffer.clear(len(items))
    for index, data in enumerate(items):
        if not read_image(buffer, data, index, files):
            raise ImageDecodeError(f"Unable to load frame {index} from \"{data.path}\"")
        logger.debug("Loaded frame %d from \"%s\"", index, data.path)
    return buffer


__all__ = [
    "PNG_EXTENSIONS",
    "JPEG_EXTENSIONS",
    "IMAGE_EXTENSIONS",
    "image_extensions",
    "read_image",
    "load_frames",
]
