from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import datetime as dt
import logging
from pathlib import Path
import tomllib
from typing import Any, Literal

from luvatrix_axis.axis import Axis2D, AxisPosition, DimensionName
from luvatrix_axis.errors import SegmentConfigError
from luvatrix_axis.scales import IntervalScale, SegmentsScale, TimeSegmentsScale, to_epoch_ms
from luvatrix_axis.segments import DEFAULT_SPLIT_NUMBER, SegmentSpec

LOGGER = logging.getLogger(__name__)

ScaleType = Literal["segments", "time_segments", "value"]

_SCALE_TYPES = ("segments", "time_segments", "value")
_POSITIONS = ("top", "bottom", "left", "right")
_AXIS_KEYS = {"type", "dim", "position", "inverse", "split_number", "minor_split_number", "segments"}
_SEGMENT_KEYS = {"from", "to", "split_number", "minor_split_number", "length", "tick_pixels"}


@dataclass(frozen=True)
class AxisOptions:
    segments: tuple[SegmentSpec, ...]
    scale_type: ScaleType = "segments"
    dim: DimensionName = "x"
    position: AxisPosition | None = None
    inverse: bool = False
    split_number: int = DEFAULT_SPLIT_NUMBER
    minor_split_number: int = DEFAULT_SPLIT_NUMBER


def load_axis_options(path: str | Path) -> AxisOptions:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"axis config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    axis = raw.get("axis")
    if not isinstance(axis, Mapping):
        raise SegmentConfigError(f"{config_path}: missing [axis] table")
    return parse_axis_options(axis)


def parse_axis_options(raw: Mapping[str, Any]) -> AxisOptions:
    _warn_unknown_keys(raw, _AXIS_KEYS, "axis")
    scale_type = str(raw.get("type", "segments"))
    if scale_type not in _SCALE_TYPES:
        raise SegmentConfigError(f"unsupported axis type: {scale_type}")
    dim = str(raw.get("dim", "x"))
    if dim not in ("x", "y"):
        raise SegmentConfigError(f"unsupported axis dim: {dim}")
    position = raw.get("position")
    if position is not None and position not in _POSITIONS:
        raise SegmentConfigError(f"unsupported axis position: {position}")
    raw_segments = raw.get("segments", [])
    if not isinstance(raw_segments, Sequence) or isinstance(raw_segments, (str, bytes)):
        raise SegmentConfigError("segments must be a list of tables")
    segments = tuple(_parse_segment(i, seg) for i, seg in enumerate(raw_segments))
    if scale_type != "value" and not segments:
        raise SegmentConfigError("at least one segment is required")
    return AxisOptions(
        segments=segments,
        scale_type=scale_type,  # type: ignore[arg-type]
        dim=dim,  # type: ignore[arg-type]
        position=position,
        inverse=_coerce_bool(raw.get("inverse", False), "inverse"),
        split_number=_coerce_positive_int(raw.get("split_number", DEFAULT_SPLIT_NUMBER), "split_number"),
        minor_split_number=_coerce_positive_int(
            raw.get("minor_split_number", DEFAULT_SPLIT_NUMBER), "minor_split_number"
        ),
    )


def build_scale(
    options: AxisOptions, data_extent: tuple[float, float] | None = None
) -> IntervalScale:
    if options.scale_type == "value":
        scale = IntervalScale(data_extent or (0.0, 1.0), split_number=options.split_number)
        scale.nice_extent()
        return scale
    cls = TimeSegmentsScale if options.scale_type == "time_segments" else SegmentsScale
    scale = cls(options.segments, split_number=options.split_number)
    if data_extent is not None:
        scale.union_extent(data_extent)
    return scale


def build_axis(
    options: AxisOptions, data_extent: tuple[float, float] | None = None
) -> Axis2D:
    return Axis2D(
        options.dim,
        build_scale(options, data_extent),
        (0.0, 0.0),
        position=options.position,
        minor_split_number=options.minor_split_number,
        inverse=options.inverse,
    )


def _parse_segment(index: int, raw: Any) -> SegmentSpec:
    if not isinstance(raw, Mapping):
        raise SegmentConfigError(f"segment {index} must be a table")
    _warn_unknown_keys(raw, _SEGMENT_KEYS, f"segment {index}")
    try:
        from_value = _coerce_bound(raw["from"], f"segment {index} from")
        to_value = _coerce_bound(raw["to"], f"segment {index} to")
    except KeyError as exc:
        raise SegmentConfigError(f"segment {index} missing required field: {exc.args[0]}") from exc
    return SegmentSpec(
        from_value=from_value,
        to_value=to_value,
        split_number=_coerce_optional_int(raw.get("split_number"), f"segment {index} split_number"),
        minor_split_number=_coerce_optional_int(
            raw.get("minor_split_number"), f"segment {index} minor_split_number"
        ),
        length=_coerce_optional_float(raw.get("length"), f"segment {index} length"),
        tick_pixels=_coerce_optional_float(raw.get("tick_pixels"), f"segment {index} tick_pixels"),
    )


def _coerce_bound(value: Any, field: str) -> float:
    if isinstance(value, (dt.datetime, dt.date)):
        return to_epoch_ms(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SegmentConfigError(f"{field} must be a number or datetime")
    return float(value)


def _coerce_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise SegmentConfigError(f"{field} must be a boolean")
    return value


def _coerce_optional_int(value: Any, field: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise SegmentConfigError(f"{field} must be an integer")
    return value


def _coerce_positive_int(value: Any, field: str) -> int:
    out = _coerce_optional_int(value, field)
    if out is None or out <= 0:
        raise SegmentConfigError(f"{field} must be > 0")
    return out


def _coerce_optional_float(value: Any, field: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SegmentConfigError(f"{field} must be a number")
    return float(value)


def _warn_unknown_keys(raw: Mapping[str, Any], known: set[str], where: str) -> None:
    unknown = sorted(set(raw) - known)
    if unknown:
        LOGGER.warning("ignoring unknown %s keys: %s", where, ", ".join(unknown))
