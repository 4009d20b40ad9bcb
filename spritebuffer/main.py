"""Command-line entry point for spritebuffer.

Loads one or more image files as the frames of a single sprite, applies
the premultiplication implied by each file's blending mode, optionally
halves the result a number of times, and writes every frame back out as
an RGBA PNG.

Usage example:
    python -m spritebuffer.main -i ship+0.png ship+1.png -o out --shrink 1
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .blending import BlendingMode, ImageFileData
from .codecs import image_extensions, load_frames
from .errors import SpriteBufferError
from .utils.loader import save_frame

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv : list[str] | None
        Optional list of arguments for testing. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="spritebuffer",
        description=(
            "Decode PNG/JPEG sprite frames into one premultiplied RGBA buffer "
            "and write the frames back out."
        ),
    )

    parser.add_argument(
        "-i", "--input", required=True, nargs="+", help="Image files, one per frame, in order"
    )
    parser.add_argument("-o", "--outdir", required=True, help="Output directory for PNG frames")
    parser.add_argument(
        "--blend",
        type=str,
        default=None,
        choices=[mode.value for mode in BlendingMode],
        help=(
            "Blending mode for every frame. Default: taken from each file name "
            "(name-0 default, name+0 additive, name~0 half-additive, name=0 premultiplied)."
        ),
    )
    parser.add_argument(
        "--shrink",
        type=int,
        default=0,
        help="Number of times to halve the sprite with a 2x2 box filter (>=0).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every loaded frame")

    return parser.parse_args(argv)


def validate_args(ns: argparse.Namespace) -> None:
    """Validate argument values and raise ValueError for invalid inputs."""
    if ns.shrink < 0:
        raise ValueError("--shrink must be an integer >= 0")
    supported = image_extensions()
    for name in ns.input:
        p = Path(name)
        if p.suffix.lower() not in supported:
            raise ValueError(f"Unsupported image type: {name}")
        if not p.exists():
            raise ValueError(f"Input file not found: {name}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry function for the CLI.

    Returns
    -------
    int
        Exit status code: 0 on success, 1 if loading failed, 2 for bad arguments.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        validate_args(args)
    except ValueError as e:
        logger.error("Argument error: %s", e)
        return 2

    mode = BlendingMode(args.blend) if args.blend else None
    sources = [ImageFileData.from_path(name, mode) for name in args.input]

    try:
        buffer = load_frames(sources)
    except ValueError as e:
        logger.error("Argument error: %s", e)
        return 2
    except SpriteBufferError as e:
        logger.error("%s", e)
        return 1

    for _ in range(args.shrink):
        if buffer.width < 2 or buffer.height < 2:
            logger.warning("Sprite is %dx%d; not shrinking further", buffer.width, buffer.height)
            break
        buffer.shrink_to_half_size()

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    for frame in range(buffer.frames):
        save_frame(buffer, frame, outdir / f"frame_{frame:06d}.png")

    logger.info("Wrote %d %dx%d frame(s) to %s", buffer.frames, buffer.width, buffer.height, outdir)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
