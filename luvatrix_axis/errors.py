from __future__ import annotations


class SegmentConfigError(ValueError):
    """Raised when segment descriptors or axis options are malformed."""


class AxisLayoutError(RuntimeError):
    """Raised when pixel geometry is requested before a layout pass."""
