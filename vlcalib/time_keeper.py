"""Normalisation of LiDAR frame and per-point timestamps."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from .console import Style, styled

logger = logging.getLogger(__name__)


def _warn(message: str) -> None:
    logger.warning(styled(message, Style.YELLOW))


def _as_points(values) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 4))
    if arr.ndim != 2 or arr.shape[1] not in (3, 4):
        raise ValueError(f"points must have shape (N, 3) or (N, 4), got {arr.shape}")
    if arr.shape[1] == 3:
        arr = np.hstack([arr, np.ones((arr.shape[0], 1))])
    return arr.copy()


@dataclass
class RawPoints:
    """A raw LiDAR frame as read from a recording."""

    stamp: float = 0.0
    times: List[float] = field(default_factory=list)
    intensities: List[float] = field(default_factory=list)
    points: np.ndarray = field(default_factory=lambda: np.zeros((0, 4)))

    def __post_init__(self) -> None:
        self.stamp = float(self.stamp)
        self.times = [float(t) for t in self.times]
        self.intensities = [float(v) for v in self.intensities]
        self.points = _as_points(self.points)

    def size(self) -> int:
        """Number of points."""
        return len(self.points)


@dataclass
class AbsPointTimeParams:
    """How absolute per-point timestamps are handled."""

    replace_frame_timestamp: bool = True
    wrt_first_frame_timestamp: bool = True


class TimeKeeper:
    """Unifies frame and per-point timestamp conventions."""

    def __init__(self, abs_params: AbsPointTimeParams | None = None) -> None:
        self.abs_params = abs_params if abs_params is not None else AbsPointTimeParams()

        self._first_warning = True
        self._last_points_stamp = -1.0
        self._last_imu_stamp = -1.0

        self._num_scans = 0
        self._first_points_stamp = 0.0
        self._estimated_scan_duration = -1.0
        self._point_time_offset = 0.0

    def validate_imu_stamp(self, imu_stamp: float) -> bool:
        """Check IMU data against earlier data; False means the sample should be skipped."""
        imu_diff = imu_stamp - self._last_imu_stamp
        if self._last_imu_stamp < 0.0:
            pass
        elif imu_stamp < self._last_imu_stamp:
            _warn("warning: IMU timestamp rewind detected!!")
            _warn(f"       : current:{imu_stamp:.6f} last:{self._last_imu_stamp:.6f} diff:{imu_diff:.6f}")
            return False
        elif imu_diff > 0.1:
            _warn("warning: large time gap between consecutive IMU data!!")
            _warn(f"       : current:{imu_stamp:.6f} last:{self._last_imu_stamp:.6f} diff:{imu_diff:.6f}")
        self._last_imu_stamp = imu_stamp

        points_diff = imu_stamp - self._last_points_stamp
        if self._last_points_stamp > 0.0 and abs(points_diff) > 1.0:
            _warn("warning: large time difference between points and imu!!")
            _warn(f"       : points:{self._last_points_stamp:.6f} imu:{imu_stamp:.6f} diff:{points_diff:.6f}")

        return True

    def process(self, points: RawPoints) -> bool:
        """Rewrite the frame's timestamps in place; False means the frame should be skipped."""
        self._replace_points_stamp(points)

        time_diff = points.stamp - self._last_points_stamp
        if self._last_points_stamp < 0.0:
            pass
        elif time_diff < 0.0:
            _warn("warning: point timestamp rewind detected!!")
            _warn(f"       : current:{points.stamp:.6f} last:{self._last_points_stamp:.6f} diff:{time_diff:.6f}")
            return False
        elif time_diff > 0.5:
            _warn("warning: large time gap between consecutive LiDAR frames!!")
            _warn(f"       : current:{points.stamp:.6f} last:{self._last_points_stamp:.6f} diff:{time_diff:.6f}")

        self._last_points_stamp = points.stamp
        return True

    def _replace_points_stamp(self, points: RawPoints) -> None:
        n = points.size()

        if not points.times:
            if self._first_warning:
                _warn("warning: per-point timestamps are not given!!")
                _warn("       : use pseudo per-point timestamps based on the order of points")
                self._first_warning = False

            points.times = [0.0] * n
            scan_duration = self._estimate_scan_duration(points.stamp)
            if scan_duration > 0.0:
                points.times = [scan_duration * i / n for i in range(n)]
            return

        if len(points.times) != n:
            _warn("warning: # of timestamps and # of points mismatch!!")
            points.times = (points.times + [0.0] * n)[:n]
            return

        if points.times[0] < 1.0:
            return

        params = self.abs_params
        if self._first_warning:
            _warn(f"warning: large point timestamp ({points.times[-1]:.6f} > 1.0) found!!")
            _warn("       : assume that point times are absolute and convert them to relative")
            _warn(
                f"       : replace_frame_stamp={int(params.replace_frame_timestamp)} "
                f"wrt_first_frame_timestamp={int(params.wrt_first_frame_timestamp)}"
            )

        if params.replace_frame_timestamp:
            first_time = points.times[0]
            if not params.wrt_first_frame_timestamp or abs(points.stamp - first_time) < 1.0:
                if self._first_warning:
                    _warn("warning: use first point timestamp as frame timestamp")
                    _warn(f"       : frame={points.stamp:.6f} point={first_time:.6f}")
                self._point_time_offset = 0.0
                points.stamp = first_time
            else:
                if self._first_warning:
                    diff = points.stamp - first_time
                    _warn("warning: point timestamp is too apart from frame timestamp!!")
                    _warn("       : use time offset w.r.t. the first frame timestamp")
                    _warn(f"       : frame={points.stamp:.6f} point={first_time:.6f} diff={diff:.6f}")
                    self._point_time_offset = diff
                points.stamp = first_time + self._point_time_offset

            points.times = [t - first_time for t in points.times]

        self._first_warning = False

    def _estimate_scan_duration(self, stamp: float) -> float:
        if self._estimated_scan_duration > 0.0:
            return self._estimated_scan_duration

        previous = self._num_scans
        self._num_scans += 1
        if previous == 0:
            self._first_points_stamp = stamp
            return -1.0

        scan_duration = (stamp - self._first_points_stamp) / (self._num_scans - 1)
        if self._num_scans == 1000:
            _warn(f"estimated scan duration:{scan_duration}")
            self._estimated_scan_duration = scan_duration

        return scan_duration