"""Half-size box filtering for RGBA NumPy arrays.

Each output pixel is the rounded mean of a 2x2 block of input pixels,
computed per channel as ``(a + b + c + d + 2) // 4``. Channels are averaged
as raw bytes; no alpha weighting or gamma correction is applied.
"""
from __future__ import annotations

import numpy as np

Array = np.ndarray


def downscale_half(arr: Array) -> Array:
    """Downscale RGBA image(s) to half width and height.

    Parameters
    ----------
    arr : np.ndarray
        Array of shape (..., H, W, 4), dtype=uint8. Leading axes (such as a
        frame axis) are preserved.

    Returns
    -------
    np.ndarray
        Array of shape (..., H // 2, W // 2, 4), dtype=uint8. A trailing odd
        row or column of the input is ignored.
    """
    if not isinstance(arr, np.ndarray) or arr.ndim < 3 or arr.shape[-1] != 4:
        raise ValueError("arr must be an RGBA array with shape (..., H, W, 4)")
    if arr.dtype != np.uint8:
        raise TypeError("arr must have dtype=uint8")

    h = arr.shape[-3] // 2
    w = arr.shape[-2] // 2
    src = arr[..., : 2 * h, : 2 * w, :]

    # Four bytes plus the rounding bias never exceed 1022, so uint16 is enough.
    acc = src[..., 0::2, 0::2, :].astype(np.uint16)
    acc += src[..., 0::2, 1::2, :]
    acc += src[..., 1::2, 0::2, :]
    acc += src[..., 1::2, 1::2, :]
    acc += 2
    acc //= 4
    return acc.astype(np.uint8)
