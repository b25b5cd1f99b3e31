from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
import math

from luvatrix_axis.errors import SegmentConfigError

LOGGER = logging.getLogger(__name__)

DEFAULT_SPLIT_NUMBER = 5
DEFAULT_TICK_PIXELS = 5.0


@dataclass(frozen=True)
class SegmentSpec:
    from_value: float
    to_value: float
    split_number: int | None = None
    minor_split_number: int | None = None
    length: float | None = None
    tick_pixels: float | None = None

    @property
    def span(self) -> float:
        return self.to_value - self.from_value

    @property
    def resolved_split_number(self) -> int:
        # 0 and None both mean "use the default".
        return self.split_number or DEFAULT_SPLIT_NUMBER

    @property
    def interval(self) -> float:
        return self.span / self.resolved_split_number

    @property
    def has_length(self) -> bool:
        return self.length is not None and self.length > 0


@dataclass(frozen=True)
class SegmentLayout:
    index: int
    interval: float
    left: float
    size: float

    @property
    def extent(self) -> tuple[float, float]:
        return (self.left, self.left + self.size)

    @property
    def right(self) -> float:
        return self.left + self.size


def validate_segments(segments: Sequence[SegmentSpec]) -> tuple[SegmentSpec, ...]:
    if not segments:
        raise SegmentConfigError("at least one segment is required")
    out = tuple(segments)
    for i, seg in enumerate(out):
        if not (math.isfinite(seg.from_value) and math.isfinite(seg.to_value)):
            raise SegmentConfigError(f"segment {i} bounds must be finite")
        if seg.to_value <= seg.from_value:
            raise SegmentConfigError(
                f"segment {i} must have to > from (got from={seg.from_value}, to={seg.to_value})"
            )
        if seg.split_number is not None and seg.split_number < 0:
            raise SegmentConfigError(f"segment {i} split_number must be >= 0")
        if seg.minor_split_number is not None and seg.minor_split_number < 0:
            raise SegmentConfigError(f"segment {i} minor_split_number must be >= 0")
        if seg.length is not None and (not math.isfinite(seg.length) or seg.length < 0):
            raise SegmentConfigError(f"segment {i} length must be a finite fraction >= 0")
        if seg.tick_pixels is not None and (not math.isfinite(seg.tick_pixels) or seg.tick_pixels <= 0):
            raise SegmentConfigError(f"segment {i} tick_pixels must be > 0")
        if i > 0:
            prev = out[i - 1]
            if seg.from_value != prev.to_value:
                raise SegmentConfigError(
                    f"segments {i - 1} and {i} are not contiguous: {prev.to_value} != {seg.from_value}"
                )
    return out


def layout_segments(
    segments: Sequence[SegmentSpec],
    axis_pixel_length: float,
    minor_split_number_default: int,
) -> tuple[SegmentLayout, ...]:
    """Assign a pixel offset and size to every segment.

    When any segment declares a proportional ``length`` each segment is sized
    on its own (``length * axis_pixel_length``, or ``tick_pixels * split_number``
    for segments without a length). Otherwise the axis is split uniformly by
    the total split count, with the first segment widened or narrowed so its
    minor tick spacing matches the rest of the axis when it declares its own
    ``minor_split_number``.

    No segment is given more than what remains of the axis, and the last
    segment always takes ``axis_pixel_length`` minus the preceding sizes, so the
    sizes sum to the axis length exactly and never go negative.
    """
    if axis_pixel_length < 0 or not math.isfinite(axis_pixel_length):
        raise ValueError("axis_pixel_length must be a finite value >= 0")
    segs = validate_segments(segments)

    if any(seg.has_length for seg in segs):
        sizes = _explicit_sizes(segs, axis_pixel_length)
    else:
        sizes = _uniform_split_sizes(segs, axis_pixel_length, minor_split_number_default)

    layouts: list[SegmentLayout] = []
    left = 0.0
    last = len(segs) - 1
    for i, seg in enumerate(segs):
        # Never hand out more than what is left of the axis, so extents stay ordered.
        size = min(sizes[i], axis_pixel_length - left)
        if i == last:
            size = axis_pixel_length - left
        layouts.append(SegmentLayout(index=i, interval=seg.interval, left=left, size=size))
        left += size
    LOGGER.debug("laid out %d segments over %.3f px", len(layouts), axis_pixel_length)
    return tuple(layouts)


def _explicit_sizes(segs: Sequence[SegmentSpec], axis_pixel_length: float) -> list[float]:
    sizes: list[float] = []
    for seg in segs:
        if seg.has_length:
            assert seg.length is not None
            sizes.append(seg.length * axis_pixel_length)
        else:
            tick_pixels = seg.tick_pixels or DEFAULT_TICK_PIXELS
            sizes.append(tick_pixels * seg.resolved_split_number)
    return sizes


def _uniform_split_sizes(
    segs: Sequence[SegmentSpec],
    axis_pixel_length: float,
    minor_split_number_default: int,
) -> list[float]:
    total_splits = sum(seg.resolved_split_number for seg in segs)
    per_split = axis_pixel_length / total_splits
    first = segs[0]
    first_minor = first.minor_split_number
    default_minor = minor_split_number_default or DEFAULT_SPLIT_NUMBER
    if len(segs) == 1 or not first_minor or first_minor == default_minor:
        return [seg.resolved_split_number * per_split for seg in segs]

    # Keep the minor step of the first segment equal to the minor step of the
    # segments that follow it.
    first_splits = first.resolved_split_number
    ratio = first_minor / default_minor
    per_split = axis_pixel_length / (first_splits * ratio + total_splits - first_splits)
    first_seg_len = first_splits * per_split * ratio
    return [first_seg_len] + [seg.resolved_split_number * per_split for seg in segs[1:]]
