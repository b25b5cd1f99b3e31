from __future__ import annotations

import unittest

from luvatrix_axis import SegmentConfigError
from luvatrix_axis.segments import SegmentSpec, layout_segments, validate_segments


def _two_segments(**first: object) -> list[SegmentSpec]:
    return [
        SegmentSpec(from_value=0.0, to_value=10.0, split_number=5, **first),  # type: ignore[arg-type]
        SegmentSpec(from_value=10.0, to_value=20.0, split_number=5),
    ]


class SegmentLayoutTests(unittest.TestCase):
    def test_uniform_split_divides_by_total_split_count(self) -> None:
        layouts = layout_segments(_two_segments(), 100.0, 5)
        self.assertEqual([l.size for l in layouts], [50.0, 50.0])
        self.assertEqual([l.left for l in layouts], [0.0, 50.0])
        self.assertEqual(layouts[1].extent, (50.0, 100.0))
        self.assertEqual([l.interval for l in layouts], [2.0, 2.0])

    def test_uniform_split_weights_segments_by_split_number(self) -> None:
        segments = [
            SegmentSpec(from_value=0.0, to_value=10.0, split_number=2),
            SegmentSpec(from_value=10.0, to_value=100.0, split_number=8),
        ]
        layouts = layout_segments(segments, 300.0, 5)
        self.assertAlmostEqual(layouts[0].size, 60.0)
        self.assertAlmostEqual(layouts[1].size, 240.0)

    def test_first_segment_minor_mismatch_keeps_minor_spacing_uniform(self) -> None:
        layouts = layout_segments(_two_segments(minor_split_number=2), 100.0, 5)
        first, second = layouts
        self.assertAlmostEqual(first.size, 200.0 / 7.0)
        self.assertAlmostEqual(second.size, 500.0 / 7.0)
        first_minor_px = first.size / 5 / 2
        second_minor_px = second.size / 5 / 5
        self.assertAlmostEqual(first_minor_px, second_minor_px)

    def test_first_segment_minor_matching_default_needs_no_correction(self) -> None:
        layouts = layout_segments(_two_segments(minor_split_number=5), 100.0, 5)
        self.assertEqual([l.size for l in layouts], [50.0, 50.0])

    def test_single_segment_fills_axis(self) -> None:
        segments = [SegmentSpec(from_value=0.0, to_value=3.0, split_number=3, minor_split_number=2)]
        layouts = layout_segments(segments, 90.0, 5)
        self.assertEqual(layouts[0].size, 90.0)
        self.assertEqual(layouts[0].extent, (0.0, 90.0))

    def test_explicit_lengths_mix_with_fixed_tick_pixels(self) -> None:
        segments = [
            SegmentSpec(from_value=0.0, to_value=10.0, length=0.3),
            SegmentSpec(from_value=10.0, to_value=20.0, split_number=5, tick_pixels=4.0),
            SegmentSpec(from_value=20.0, to_value=30.0, length=0.2),
        ]
        layouts = layout_segments(segments, 200.0, 5)
        self.assertAlmostEqual(layouts[0].size, 60.0)
        self.assertAlmostEqual(layouts[1].size, 20.0)
        # The last segment absorbs whatever remains.
        self.assertAlmostEqual(layouts[2].size, 120.0)
        self.assertAlmostEqual(layouts[2].left, 80.0)

    def test_missing_tick_pixels_defaults_to_five(self) -> None:
        segments = [
            SegmentSpec(from_value=0.0, to_value=1.0, split_number=4),
            SegmentSpec(from_value=1.0, to_value=2.0, length=0.5),
        ]
        layouts = layout_segments(segments, 100.0, 5)
        self.assertEqual(layouts[0].size, 20.0)
        self.assertEqual(layouts[1].size, 80.0)

    def test_sizes_sum_to_axis_length_in_every_mode(self) -> None:
        configs = [
            _two_segments(),
            _two_segments(minor_split_number=3),
            [
                SegmentSpec(from_value=0.0, to_value=0.1, split_number=3),
                SegmentSpec(from_value=0.1, to_value=0.7, split_number=7),
                SegmentSpec(from_value=0.7, to_value=1.3, split_number=11),
            ],
            [
                SegmentSpec(from_value=-5.0, to_value=1.0, length=1.0 / 3.0),
                SegmentSpec(from_value=1.0, to_value=2.0, tick_pixels=0.01),
                SegmentSpec(from_value=2.0, to_value=9.0, length=0.1),
            ],
        ]
        for segments in configs:
            for axis_length in (1.0, 97.3, 333.0, 1024.0):
                with self.subTest(segments=segments, axis_length=axis_length):
                    layouts = layout_segments(segments, axis_length, 5)
                    self.assertAlmostEqual(sum(l.size for l in layouts), axis_length, places=9)
                    rights = [l.right for l in layouts]
                    self.assertEqual(rights, sorted(rights))
                    for prev, nxt in zip(layouts, layouts[1:]):
                        self.assertEqual(prev.right, nxt.left)

    def test_zero_split_number_falls_back_to_default(self) -> None:
        segments = [SegmentSpec(from_value=0.0, to_value=10.0, split_number=0)]
        layouts = layout_segments(segments, 50.0, 5)
        self.assertEqual(layouts[0].interval, 2.0)

    def test_zero_axis_length_gives_zero_sized_segments(self) -> None:
        segments = [
            SegmentSpec(from_value=0.0, to_value=1.0, split_number=4),
            SegmentSpec(from_value=1.0, to_value=2.0, length=0.5),
        ]
        for layouts in (layout_segments(segments, 0.0, 5), layout_segments(_two_segments(), 0.0, 5)):
            self.assertEqual([l.size for l in layouts], [0.0, 0.0])
            self.assertEqual([l.extent for l in layouts], [(0.0, 0.0), (0.0, 0.0)])

    def test_fixed_pixel_segments_never_overflow_the_axis(self) -> None:
        segments = [
            SegmentSpec(from_value=0.0, to_value=1.0, split_number=4),
            SegmentSpec(from_value=1.0, to_value=2.0, tick_pixels=30.0),
            SegmentSpec(from_value=2.0, to_value=3.0, length=0.5),
        ]
        layouts = layout_segments(segments, 10.0, 5)
        self.assertEqual([l.size for l in layouts], [10.0, 0.0, 0.0])
        self.assertTrue(all(l.size >= 0 for l in layouts))
        lefts = [l.left for l in layouts]
        self.assertEqual(lefts, sorted(lefts))

    def test_negative_axis_length_rejected(self) -> None:
        with self.assertRaises(ValueError):
            layout_segments(_two_segments(), -1.0, 5)


class SegmentValidationTests(unittest.TestCase):
    def test_empty_segment_list_rejected(self) -> None:
        with self.assertRaisesRegex(SegmentConfigError, "at least one segment"):
            validate_segments([])

    def test_non_positive_span_rejected(self) -> None:
        with self.assertRaisesRegex(SegmentConfigError, "to > from"):
            validate_segments([SegmentSpec(from_value=3.0, to_value=3.0)])

    def test_gap_between_segments_rejected(self) -> None:
        segments = [
            SegmentSpec(from_value=0.0, to_value=10.0),
            SegmentSpec(from_value=11.0, to_value=20.0),
        ]
        with self.assertRaisesRegex(SegmentConfigError, "not contiguous"):
            validate_segments(segments)

    def test_negative_split_number_rejected(self) -> None:
        with self.assertRaises(SegmentConfigError):
            validate_segments([SegmentSpec(from_value=0.0, to_value=1.0, split_number=-2)])

    def test_non_positive_tick_pixels_rejected(self) -> None:
        with self.assertRaises(SegmentConfigError):
            validate_segments([SegmentSpec(from_value=0.0, to_value=1.0, tick_pixels=0.0)])

    def test_non_finite_bounds_rejected(self) -> None:
        with self.assertRaises(SegmentConfigError):
            validate_segments([SegmentSpec(from_value=0.0, to_value=float("inf"))])


if __name__ == "__main__":
    unittest.main()
