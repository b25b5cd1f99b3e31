from luvatrix_axis.axis import Axis, Axis2D, TickCoord
from luvatrix_axis.config import AxisOptions, build_axis, build_scale, load_axis_options, parse_axis_options
from luvatrix_axis.errors import AxisLayoutError, SegmentConfigError
from luvatrix_axis.grid import CartesianGrid, GridRect
from luvatrix_axis.scales import IntervalScale, SegmentsScale, Tick, TimeSegmentsScale
from luvatrix_axis.segments import SegmentLayout, SegmentSpec, layout_segments

__all__ = [
    "Axis",
    "Axis2D",
    "AxisLayoutError",
    "AxisOptions",
    "CartesianGrid",
    "GridRect",
    "IntervalScale",
    "SegmentConfigError",
    "SegmentLayout",
    "SegmentSpec",
    "SegmentsScale",
    "Tick",
    "TickCoord",
    "TimeSegmentsScale",
    "build_axis",
    "build_scale",
    "layout_segments",
    "load_axis_options",
    "parse_axis_options",
]
