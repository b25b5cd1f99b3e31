from __future__ import annotations

from dataclasses import dataclass
import logging

from luvatrix_axis.axis import Axis2D, DimensionName

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridRect:
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("grid width and height must be >= 0")


@dataclass(frozen=True)
class _AxisTransform:
    base: float
    extent_sum: float
    flip: bool

    def to_global(self, coord: float) -> float:
        if self.flip:
            return self.extent_sum - coord + self.base
        return coord + self.base

    def to_local(self, coord: float) -> float:
        if self.flip:
            return self.extent_sum - coord + self.base
        return coord - self.base


class CartesianGrid:
    """Owns the pixel rectangle its axes are drawn in.

    Axes keep a plain reference back to the grid; the grid outlives them within
    a render pass and installs their local/global transforms on every update.
    Screen y grows downward, so y axes are flipped when mapped to global space.
    """

    def __init__(self, rect: GridRect) -> None:
        self._rect = rect
        self._axes: list[Axis2D] = []
        self._transforms: dict[int, _AxisTransform] = {}

    @property
    def rect(self) -> GridRect:
        return self._rect

    @property
    def axes(self) -> tuple[Axis2D, ...]:
        return tuple(self._axes)

    def add_axis(self, axis: Axis2D) -> Axis2D:
        if axis.grid is not None and axis.grid is not self:
            raise ValueError("axis already belongs to another grid")
        axis.index = sum(1 for a in self._axes if a.dim == axis.dim)
        axis.grid = self
        self._axes.append(axis)
        return axis

    def get_axis(self, dim: DimensionName, index: int = 0) -> Axis2D:
        for axis in self._axes:
            if axis.dim == dim and axis.index == index:
                return axis
        raise KeyError(f"no {dim} axis with index {index}")

    def resize(self, rect: GridRect) -> None:
        self._rect = rect
        self.update()

    def update(self) -> None:
        rect = self._rect
        for axis in self._axes:
            horizontal = axis.is_horizontal()
            extent = (0.0, rect.width) if horizontal else (0.0, rect.height)
            if axis.inverse:
                extent = (extent[1], extent[0])
            axis.set_extent(*extent)
            axis.update_layout()
            self._transforms[id(axis)] = _AxisTransform(
                base=rect.x if horizontal else rect.y,
                extent_sum=extent[0] + extent[1],
                flip=axis.dim == "y",
            )
        LOGGER.debug("grid laid out %d axes in %s", len(self._axes), rect)

    def axis_to_global(self, axis: Axis2D, coord: float) -> float:
        return self._transform_for(axis).to_global(coord)

    def axis_to_local(self, axis: Axis2D, coord: float) -> float:
        return self._transform_for(axis).to_local(coord)

    def data_to_point(self, values: tuple[float, float], x_index: int = 0, y_index: int = 0) -> tuple[float, float]:
        x_axis = self.get_axis("x", x_index)
        y_axis = self.get_axis("y", y_index)
        return (
            x_axis.to_global_coord(x_axis.data_to_coord(values[0])),
            y_axis.to_global_coord(y_axis.data_to_coord(values[1])),
        )

    def point_to_data(self, point: tuple[float, float], x_index: int = 0, y_index: int = 0) -> tuple[float, float]:
        return (
            self.get_axis("x", x_index).point_to_data(point),
            self.get_axis("y", y_index).point_to_data(point),
        )

    def _transform_for(self, axis: Axis2D) -> _AxisTransform:
        transform = self._transforms.get(id(axis))
        if transform is None:
            raise KeyError("axis has not been laid out by this grid; call update first")
        return transform
