from __future__ import annotations

import unittest
from unittest import mock

import numpy as np

from spritebuffer import buffer as buffer_module
from spritebuffer.buffer import BufferState, PixelBuffer, mipmap_chain


def filled(width: int, height: int, frames: int = 1) -> PixelBuffer:
    buf = PixelBuffer(frames)
    buf.allocate(width, height)
    return buf


class AllocateTest(unittest.TestCase):
    def test_dimensions_before_allocation(self) -> None:
        buf = PixelBuffer(3)
        self.assertEqual((buf.width, buf.height, buf.frames), (0, 0, 3))
        self.assertIs(buf.state, BufferState.EMPTY)
        self.assertIsNone(buf.pixels)

    def test_allocate_fixes_dimensions(self) -> None:
        for width, height, frames in [(1, 1, 1), (7, 3, 2), (64, 32, 5)]:
            buf = filled(width, height, frames)
            self.assertEqual((buf.width, buf.height, buf.frames), (width, height, frames))
            self.assertEqual(buf.pixels.shape, (frames, height, width, 4))
            self.assertEqual(buf.pixels.dtype, np.uint8)
            self.assertIs(buf.state, BufferState.ALLOCATED)

    def test_second_allocate_is_ignored(self) -> None:
        buf = filled(8, 4, 2)
        pixels = buf.pixels
        buf.allocate(16, 16)
        self.assertEqual((buf.width, buf.height, buf.frames), (8, 4, 2))
        self.assertIs(buf.pixels, pixels)

    def test_zero_dimensions_do_not_allocate(self) -> None:
        for width, height in [(0, 4), (4, 0), (0, 0)]:
            buf = filled(width, height)
            self.assertIs(buf.state, BufferState.EMPTY)
            self.assertEqual((buf.width, buf.height), (0, 0))

        buf = PixelBuffer(0)
        buf.allocate(4, 4)
        self.assertIs(buf.state, BufferState.EMPTY)

    def test_clear_allows_reallocation(self) -> None:
        buf = filled(8, 8)
        buf.clear(3)
        self.assertIs(buf.state, BufferState.EMPTY)
        self.assertEqual((buf.width, buf.height, buf.frames), (0, 0, 3))
        buf.allocate(2, 5)
        self.assertEqual(buf.pixels.shape, (3, 5, 2, 4))

    def test_clear_defaults_to_one_frame(self) -> None:
        buf = PixelBuffer(4)
        buf.clear()
        self.assertEqual(buf.frames, 1)

    def test_oversized_allocation_raises_memory_error(self) -> None:
        buf = PixelBuffer()
        with mock.patch.object(buffer_module.np, "zeros", side_effect=ValueError("array is too big")):
            with self.assertRaises(MemoryError):
                buf.allocate(10, 10)
        self.assertIs(buf.state, BufferState.EMPTY)
        self.assertEqual((buf.width, buf.height), (0, 0))


class ViewTest(unittest.TestCase):
    def test_row_is_a_view_into_the_right_frame(self) -> None:
        buf = filled(3, 2, 2)
        buf.row(1, 1)[...] = (10, 20, 30, 40)
        self.assertEqual(buf.row(1, 1).shape, (3, 4))
        self.assertTrue((buf.pixels[1, 1] == (10, 20, 30, 40)).all())
        self.assertEqual(int(buf.pixels[0].sum()), 0)
        self.assertEqual(int(buf.pixels[1, 0].sum()), 0)

    def test_row_bounds(self) -> None:
        buf = filled(3, 2, 2)
        for y, frame in [(-1, 0), (2, 0), (0, 2), (0, -1)]:
            with self.assertRaises(IndexError):
                buf.row(y, frame)

    def test_views_require_allocation(self) -> None:
        with self.assertRaises(IndexError):
            PixelBuffer().row(0, 0)
        with self.assertRaises(IndexError):
            PixelBuffer().frame(0)

    def test_packed_puts_alpha_in_top_byte(self) -> None:
        buf = filled(1, 1)
        buf.row(0)[0] = (0x11, 0x22, 0x33, 0x44)
        self.assertEqual(buf.packed().shape, (1, 1, 1))
        self.assertEqual(int(buf.packed()[0, 0, 0]), 0x44332211)
        self.assertIsNone(PixelBuffer().packed())


class ShrinkTest(unittest.TestCase):
    def test_uniform_color_is_preserved(self) -> None:
        buf = filled(4, 4)
        buf.pixels[...] = (12, 34, 56, 78)
        buf.shrink_to_half_size()
        self.assertEqual((buf.width, buf.height, buf.frames), (2, 2, 1))
        self.assertTrue((buf.pixels == (12, 34, 56, 78)).all())

    def test_rounds_half_up(self) -> None:
        buf = filled(2, 2)
        buf.pixels[0, :, :, 0] = [[0, 0], [0, 2]]     # 4 // 4 = 1
        buf.pixels[0, :, :, 1] = [[0, 0], [0, 1]]     # 3 // 4 = 0
        buf.pixels[0, :, :, 2] = [[255, 255], [255, 254]]
        buf.pixels[0, :, :, 3] = [[1, 2], [3, 4]]     # 12 // 4 = 3
        buf.shrink_to_half_size()
        self.assertEqual(buf.pixels[0, 0, 0].tolist(), [1, 0, 255, 3])

    def test_odd_width_drops_last_column(self) -> None:
        buf = filled(5, 4)
        for x in range(5):
            buf.pixels[0, :, x] = (x * 10, 0, 0, 255)
        buf.pixels[0, :, 4] = (250, 250, 250, 0)
        buf.shrink_to_half_size()
        self.assertEqual((buf.width, buf.height), (2, 2))
        # (0 + 10 + 0 + 10 + 2) // 4 and (20 + 30 + 20 + 30 + 2) // 4
        self.assertEqual(buf.pixels[0, 0, :, 0].tolist(), [5, 25])
        self.assertTrue((buf.pixels[..., 3] == 255).all())

    def test_frames_are_filtered_independently(self) -> None:
        buf = filled(2, 2, 3)
        for frame in range(3):
            buf.pixels[frame] = frame * 50
        buf.shrink_to_half_size()
        self.assertEqual(buf.pixels.shape, (3, 1, 1, 4))
        for frame in range(3):
            self.assertTrue((buf.pixels[frame] == frame * 50).all())

    def test_single_pixel_shrinks_to_empty(self) -> None:
        buf = filled(1, 1)
        buf.shrink_to_half_size()
        self.assertIs(buf.state, BufferState.EMPTY)
        self.assertEqual((buf.width, buf.height), (0, 0))


class MipmapTest(unittest.TestCase):
    def test_chain_stops_at_one_pixel(self) -> None:
        buf = filled(8, 4)
        buf.pixels[...] = 9
        sizes = [(level.width, level.height) for level in mipmap_chain(buf, 10)]
        self.assertEqual(sizes, [(4, 2), (2, 1)])
        self.assertEqual((buf.width, buf.height), (8, 4))

    def test_negative_levels(self) -> None:
        with self.assertRaises(ValueError):
            list(mipmap_chain(filled(2, 2), -1))


if __name__ == "__main__":
    unittest.main()
