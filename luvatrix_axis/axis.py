from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

import numpy as np

from luvatrix_axis.scales import Scale, SegmentsScale
from luvatrix_axis.segments import DEFAULT_SPLIT_NUMBER

if TYPE_CHECKING:
    from luvatrix_axis.grid import CartesianGrid

DimensionName = Literal["x", "y"]
AxisPosition = Literal["top", "bottom", "left", "right"]


@dataclass(frozen=True)
class TickCoord:
    coord: float
    tick_value: float


class Axis:
    """Maps scale values onto a pixel extent on the axis's own line.

    The scale is injected and may be swapped between layout passes; the axis
    never owns its lifecycle.
    """

    def __init__(
        self,
        dim: DimensionName,
        scale: Scale,
        coord_extent: tuple[float, float],
        *,
        minor_split_number: int = DEFAULT_SPLIT_NUMBER,
        inverse: bool = False,
    ) -> None:
        if dim not in ("x", "y"):
            raise ValueError(f"unsupported axis dimension: {dim}")
        if minor_split_number <= 0:
            raise ValueError("minor_split_number must be > 0")
        self.dim: DimensionName = dim
        self.scale = scale
        self.minor_split_number = minor_split_number
        self.inverse = inverse
        self._extent = (float(coord_extent[0]), float(coord_extent[1]))

    def get_extent(self) -> tuple[float, float]:
        return self._extent

    def set_extent(self, start: float, end: float) -> None:
        self._extent = (float(start), float(end))

    def get_pixel_extent(self) -> tuple[float, float]:
        a, b = self._extent
        return (min(a, b), max(a, b))

    @property
    def length(self) -> float:
        return abs(self._extent[1] - self._extent[0])

    def contain(self, coord: float) -> bool:
        lo, hi = self.get_pixel_extent()
        return lo <= coord <= hi

    def update_layout(self) -> None:
        if isinstance(self.scale, SegmentsScale):
            self.scale.update_segments(self._extent, self)

    def data_to_coord(self, value: float, clamp: bool = False) -> float:
        t = self.scale.normalize(value)
        if clamp:
            t = float(np.clip(t, 0.0, 1.0))
        p0, p1 = self._extent
        return p0 + t * (p1 - p0)

    def coord_to_data(self, coord: float, clamp: bool = False) -> float:
        p0, p1 = self._extent
        t = 0.5 if p1 == p0 else (coord - p0) / (p1 - p0)
        if clamp:
            t = float(np.clip(t, 0.0, 1.0))
        value = self.scale.scale(t)
        if clamp:
            lo, hi = self.scale.get_extent()
            value = float(np.clip(value, min(lo, hi), max(lo, hi)))
        return value

    def get_ticks_coords(self, clamp: bool = False) -> list[TickCoord]:
        coords = [
            TickCoord(coord=self.data_to_coord(tick.value), tick_value=tick.value)
            for tick in self.scale.get_ticks()
        ]
        if clamp and coords:
            p0, p1 = self._extent
            coords[0] = TickCoord(coord=p0, tick_value=coords[0].tick_value)
            coords[-1] = TickCoord(coord=p1, tick_value=coords[-1].tick_value)
        return coords

    def get_minor_ticks_coords(self) -> list[list[TickCoord]]:
        return [
            [TickCoord(coord=self.data_to_coord(value), tick_value=value) for value in group]
            for group in self.scale.get_minor_ticks(self.minor_split_number)
        ]


class Axis2D(Axis):
    """Axis placed on one side of a cartesian grid."""

    def __init__(
        self,
        dim: DimensionName,
        scale: Scale,
        coord_extent: tuple[float, float],
        *,
        position: AxisPosition | None = None,
        minor_split_number: int = DEFAULT_SPLIT_NUMBER,
        inverse: bool = False,
    ) -> None:
        super().__init__(dim, scale, coord_extent, minor_split_number=minor_split_number, inverse=inverse)
        self.position: AxisPosition = position or ("bottom" if dim == "x" else "left")
        # Injected by the grid that lays this axis out.
        self.index = 0
        self.grid: CartesianGrid | None = None

    def is_horizontal(self) -> bool:
        return self.position in ("top", "bottom")

    def to_global_coord(self, coord: float) -> float:
        if self.grid is None:
            return coord
        return self.grid.axis_to_global(self, coord)

    def to_local_coord(self, coord: float) -> float:
        if self.grid is None:
            return coord
        return self.grid.axis_to_local(self, coord)

    def get_global_extent(self, ascending: bool = False) -> tuple[float, float]:
        p0, p1 = self.get_extent()
        g0 = self.to_global_coord(p0)
        g1 = self.to_global_coord(p1)
        if ascending and g0 > g1:
            return (g1, g0)
        return (g0, g1)

    def point_to_data(self, point: tuple[float, float], clamp: bool = False) -> float:
        component = point[0] if self.dim == "x" else point[1]
        return self.coord_to_data(self.to_local_coord(component), clamp)
