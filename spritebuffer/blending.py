"""Blending modes and the sprite file descriptor.

Sprite frames are named ``<name><sep><frame>[@2x].<ext>`` where the
separator selects how the frame is blended at render time:

- ``-`` : default (opaque or straight alpha)
- ``+`` : additive
- ``~`` : half-additive
- ``=`` : premultiplied alpha (the file is already premultiplied)
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class BlendingMode(Enum):
    """How a sprite's alpha is combined with the scene."""
    DEFAULT = "default"
    PREMULTIPLIED_ALPHA = "premultiplied"
    ADDITIVE = "additive"
    HALF_ADDITIVE = "half-additive"


SEPARATORS = {
    "-": BlendingMode.DEFAULT,
    "+": BlendingMode.ADDITIVE,
    "~": BlendingMode.HALF_ADDITIVE,
    "=": BlendingMode.PREMULTIPLIED_ALPHA,
}

_FRAME_RE = re.compile(r"^(?P<name>.*?)(?P<sep>[-+~=])(?P<frame>\d+)$")


@dataclass(frozen=True)
class ImageFileData:
    """Read-only description of one image file to decode."""
    path: Path
    extension: str
    blending_mode: BlendingMode = BlendingMode.DEFAULT
    frame_number: int = 0
    is_2x: bool = False

    @property
    def name(self) -> str:
        """Sprite name with the frame suffix, @2x marker and extension removed."""
        stem = self.path.name[: len(self.path.name) - len(self.extension)]
        if self.is_2x:
            stem = stem[: -len("@2x")]
        match = _FRAME_RE.match(stem)
        return match.group("name") if match else stem

    @classmethod
    def from_path(
        cls,
        path: Union[str, Path],
        blending_mode: Optional[BlendingMode] = None,
    ) -> "ImageFileData":
        """Describe ``path``, deriving blend mode and frame from the file name.

        Parameters
        ----------
        path : str | Path
            Image file path.
        blending_mode : BlendingMode | None
            Overrides the mode encoded in the file name when given.
        """
        p = Path(path)
        extension = p.suffix.lower()
        stem = p.name[: len(p.name) - len(p.suffix)]

        is_2x = stem.endswith("@2x")
        if is_2x:
            stem = stem[: -len("@2x")]

        mode = BlendingMode.DEFAULT
        frame_number = 0
        match = _FRAME_RE.match(stem)
        if match:
            mode = SEPARATORS[match.group("sep")]
            frame_number = int(match.group("frame"))

        if blending_mode is not None:
            mode = blending_mode
        return cls(p, extension, mode, frame_number, is_2x)
