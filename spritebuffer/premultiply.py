"""In-place alpha premultiplication of one buffer frame.

Each colour channel becomes ``channel * alpha // 255`` (truncating). The
alpha written back depends on the blending mode:

- default       : alpha unchanged
- half-additive : ``alpha >> 2``
- additive      : 0, only the premultiplied colour is kept

This is a one-way transform. Reapplying it only leaves pixels unchanged
where alpha is 255.
"""
from __future__ import annotations

import numpy as np

from .blending import BlendingMode
from .buffer import PixelBuffer

Array = np.ndarray


def premultiply_array(arr: Array, mode: BlendingMode = BlendingMode.DEFAULT) -> None:
    """Premultiply an RGBA uint8 array of shape (..., 4) in place."""
    if not isinstance(arr, np.ndarray) or arr.ndim < 1 or arr.shape[-1] != 4:
        raise ValueError("arr must be an RGBA array with shape (..., 4)")
    if arr.dtype != np.uint8:
        raise TypeError("arr must have dtype=uint8")
    if mode is BlendingMode.PREMULTIPLIED_ALPHA:
        raise ValueError("premultiplied images must not be premultiplied again")

    alpha = arr[..., 3:4].astype(np.uint16)
    color = arr[..., :3].astype(np.uint16)
    # 255 * 255 fits in uint16.
    color *= alpha
    color //= 255
    arr[..., :3] = color

    if mode is BlendingMode.HALF_ADDITIVE:
        arr[..., 3] >>= 2
    elif mode is BlendingMode.ADDITIVE:
        arr[..., 3] = 0


def premultiply(buffer: PixelBuffer, frame: int, mode: BlendingMode = BlendingMode.DEFAULT) -> None:
    """Premultiply every pixel of ``frame`` in ``buffer`` in place."""
    premultiply_array(buffer.frame(frame), mode)
