from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import datetime as dt
import logging
from typing import TYPE_CHECKING, Protocol

import numpy as np

from luvatrix_axis.errors import AxisLayoutError
from luvatrix_axis.segments import (
    DEFAULT_SPLIT_NUMBER,
    SegmentLayout,
    SegmentSpec,
    layout_segments,
    validate_segments,
)

if TYPE_CHECKING:
    from luvatrix_axis.axis import Axis

LOGGER = logging.getLogger(__name__)

# Decimal digits kept on generated minor tick values.
ROUND_PRECISION = 10


@dataclass(frozen=True)
class Tick:
    value: float
    segment_index: int | None = None


class Scale(Protocol):
    def get_extent(self) -> tuple[float, float]:
        ...

    def normalize(self, value: float) -> float:
        ...

    def scale(self, t: float) -> float:
        ...

    def get_ticks(self) -> list[Tick]:
        ...

    def get_minor_ticks(self, split_number: int) -> list[list[float]]:
        ...


def normalize_linear(value: float, extent: tuple[float, float]) -> float:
    lo, hi = extent
    if hi == lo:
        return 0.5
    return (value - lo) / (hi - lo)


def round_tick(value: float) -> float:
    return float(np.round(value, ROUND_PRECISION))


class IntervalScale:
    """Linear scale over a data extent with nice major ticks."""

    def __init__(self, extent: tuple[float, float] = (0.0, 1.0), *, split_number: int = DEFAULT_SPLIT_NUMBER) -> None:
        if split_number <= 0:
            raise ValueError("split_number must be > 0")
        self._extent = (float(extent[0]), float(extent[1]))
        self.split_number = split_number

    def get_extent(self) -> tuple[float, float]:
        return self._extent

    def set_extent(self, vmin: float, vmax: float) -> None:
        if not (np.isfinite(vmin) and np.isfinite(vmax)):
            raise ValueError("extent bounds must be finite")
        self._extent = (float(vmin), float(vmax))

    def union_extent(self, values: Iterable[float]) -> None:
        arr = np.asarray(list(values), dtype=np.float64)
        arr = arr[np.isfinite(arr)]
        if arr.size == 0:
            return
        lo, hi = self._extent
        self._extent = (min(lo, float(np.min(arr))), max(hi, float(np.max(arr))))

    def nice_extent(self) -> None:
        lo, hi = self._extent
        if lo == hi:
            delta = max(1.0, abs(lo) * 0.5)
            lo, hi = lo - delta, hi + delta
        step = _nice_number((hi - lo) / self.split_number, round_result=True)
        self._extent = (float(np.floor(lo / step) * step), float(np.ceil(hi / step) * step))

    def normalize(self, value: float) -> float:
        return normalize_linear(value, self._extent)

    def scale(self, t: float) -> float:
        lo, hi = self._extent
        return lo + t * (hi - lo)

    def get_ticks(self) -> list[Tick]:
        lo, hi = self._extent
        values = generate_nice_ticks(lo, hi, self.split_number + 1)
        eps = max(abs(hi - lo), 1.0) * 1e-12
        return [Tick(value=float(v)) for v in values if lo - eps <= v <= hi + eps]

    def get_minor_ticks(self, split_number: int) -> list[list[float]]:
        ticks = self.get_ticks()
        out: list[list[float]] = []
        for prev, nxt in zip(ticks, ticks[1:]):
            out.append(_subdivide(prev.value, nxt.value, nxt.value - prev.value, split_number))
        return out


class SegmentsScale(IntervalScale):
    """Scale whose domain is split into contiguous segments of their own density.

    Each segment maps onto its own pixel range, computed by
    :func:`luvatrix_axis.segments.layout_segments` whenever the owning axis is
    laid out. Descriptors are validated once here; the layout records are kept
    separately and keyed by segment index.
    """

    def __init__(
        self,
        segments: Sequence[SegmentSpec],
        *,
        extent: tuple[float, float] | None = None,
        split_number: int = DEFAULT_SPLIT_NUMBER,
    ) -> None:
        configured = validate_segments(segments)
        if extent is None:
            extent = (configured[0].from_value, configured[-1].to_value)
        super().__init__(extent, split_number=split_number)
        self._configured = configured
        self._segments: tuple[SegmentSpec, ...] = configured
        self._layouts: tuple[SegmentLayout, ...] | None = None
        self._axis_length = 0.0

    @property
    def segments(self) -> tuple[SegmentSpec, ...]:
        return self._segments

    @property
    def configured_segments(self) -> tuple[SegmentSpec, ...]:
        return self._configured

    @property
    def axis_length(self) -> float:
        return self._axis_length

    @property
    def has_layout(self) -> bool:
        return self._layouts is not None

    def get_layouts(self) -> tuple[SegmentLayout, ...]:
        if self._layouts is None:
            raise AxisLayoutError("segments have not been laid out; call update_segments first")
        return self._layouts

    def update_segments(self, axis_pixel_extent: tuple[float, float], axis: "Axis | None" = None) -> None:
        axis_size = abs(axis_pixel_extent[1] - axis_pixel_extent[0])
        segments = list(self._configured)
        last_to = segments[-1].to_value
        data_max = self.get_extent()[1]
        if data_max > last_to:
            LOGGER.debug("appending trailing segment [%s, %s] to cover data extent", last_to, data_max)
            segments.append(SegmentSpec(from_value=last_to, to_value=data_max))
        minor_default = axis.minor_split_number if axis is not None else DEFAULT_SPLIT_NUMBER
        self._segments = tuple(segments)
        self._layouts = layout_segments(self._segments, axis_size, minor_default)
        self._axis_length = axis_size

    @staticmethod
    def normalize_within_segment(value: float, segment_extent: tuple[float, float]) -> float:
        return normalize_linear(value, (0.0, segment_extent[1] - segment_extent[0]))

    def find_segment_index(self, value: float) -> int:
        segments = self._segments
        for i, seg in enumerate(segments):
            if value < seg.to_value:
                return i
        return len(segments) - 1

    def normalize(self, value: float) -> float:
        if self._layouts is None or self._axis_length <= 0:
            return normalize_linear(value, (self._segments[0].from_value, self._segments[-1].to_value))
        i = self.find_segment_index(value)
        seg = self._segments[i]
        layout = self._layouts[i]
        frac = self.normalize_within_segment(value - seg.from_value, (seg.from_value, seg.to_value))
        return (layout.left + frac * layout.size) / self._axis_length

    def scale(self, t: float) -> float:
        if self._layouts is None or self._axis_length <= 0:
            lo, hi = self._segments[0].from_value, self._segments[-1].to_value
            return lo + t * (hi - lo)
        px = t * self._axis_length
        layout = self._layouts[0]
        for candidate in self._layouts:
            if px < candidate.left:
                break
            layout = candidate
        seg = self._segments[layout.index]
        if layout.size == 0:
            return seg.from_value
        return seg.from_value + (px - layout.left) / layout.size * seg.span

    def get_ticks(self) -> list[Tick]:
        ticks: list[Tick] = []
        last = len(self._segments) - 1
        for i, seg in enumerate(self._segments):
            interval = seg.interval
            ticks.append(Tick(value=seg.from_value, segment_index=i))
            ticks.extend(
                Tick(value=seg.from_value + j * interval, segment_index=i)
                for j in range(1, seg.resolved_split_number)
            )
            if i == last:
                # Taken from the descriptor so the axis ends exactly on `to`.
                ticks.append(Tick(value=seg.to_value, segment_index=i))
        return ticks

    def get_minor_ticks(self, split_number: int) -> list[list[float]]:
        return self.subdivide_ticks(self.get_ticks(), split_number)

    def subdivide_ticks(self, ticks: Sequence[Tick], split_number: int) -> list[list[float]]:
        out: list[list[float]] = []
        for prev, nxt in zip(ticks, ticks[1:]):
            idx = prev.segment_index
            if idx is None or not 0 <= idx < len(self._segments):
                continue
            seg = self._segments[idx]
            n = seg.minor_split_number or split_number
            out.append(_subdivide(prev.value, nxt.value, seg.interval, n))
        return out


class TimeSegmentsScale(SegmentsScale):
    """Segmented scale over time; values are epoch milliseconds (UTC)."""

    @staticmethod
    def to_value(moment: dt.datetime | dt.date | float) -> float:
        return to_epoch_ms(moment)

    @staticmethod
    def to_datetime(value: float) -> dt.datetime:
        return dt.datetime.fromtimestamp(value / 1000.0, tz=dt.timezone.utc)

    def tick_datetimes(self) -> list[dt.datetime]:
        return [self.to_datetime(tick.value) for tick in self.get_ticks()]


def to_epoch_ms(moment: dt.datetime | dt.date | float) -> float:
    if isinstance(moment, dt.datetime):
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=dt.timezone.utc)
        return moment.timestamp() * 1000.0
    if isinstance(moment, dt.date):
        return to_epoch_ms(dt.datetime(moment.year, moment.month, moment.day, tzinfo=dt.timezone.utc))
    return float(moment)


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)
    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.floor(vmin / step) * step
    tick_max = np.ceil(vmax / step) * step
    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Snap float drift such as -4.44e-16 back onto the step grid.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def _subdivide(prev: float, nxt: float, interval: float, split_number: int) -> list[float]:
    if split_number <= 1:
        return []
    minor_interval = interval / split_number
    group: list[float] = []
    for count in range(split_number - 1):
        value = round_tick(prev + (count + 1) * minor_interval)
        # A short first or last gap can be narrower than a full interval.
        if prev < value < nxt:
            group.append(value)
    return group


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)
    if round_result:
        thresholds = ((1.5, 1.0), (3.0, 2.0), (7.0, 5.0))
        nice_frac = next((nice for limit, nice in thresholds if frac < limit), 10.0)
    else:
        thresholds = ((1.0, 1.0), (2.0, 2.0), (5.0, 5.0))
        nice_frac = next((nice for limit, nice in thresholds if frac <= limit), 10.0)
    return float(nice_frac * (10**exp))
