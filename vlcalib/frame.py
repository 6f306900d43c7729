"""Point cloud frames with per-point attributes, and frame operations."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional

import numpy as np


def _vectors(values, w: float, what: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 4))
    if arr.ndim != 2 or arr.shape[1] not in (3, 4):
        raise ValueError(f"{what} must have shape (N, 3) or (N, 4), got {arr.shape}")
    if arr.shape[1] == 3:
        arr = np.hstack([arr, np.full((arr.shape[0], 1), w)])
    return arr.copy()


def _matrices(values) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 4, 4))
    if arr.ndim != 3 or arr.shape[1:] not in ((3, 3), (4, 4)):
        raise ValueError(f"covs must have shape (N, 3, 3) or (N, 4, 4), got {arr.shape}")
    if arr.shape[1] == 3:
        padded = np.zeros((arr.shape[0], 4, 4))
        padded[:, :3, :3] = arr
        return padded
    return arr.copy()


def _scalars(values, what: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float).reshape(-1) if np.size(values) else np.zeros(0)
    if np.ndim(values) > 1:
        raise ValueError(f"{what} must be one-dimensional")
    return arr.copy()


class Frame:
    """A point cloud holding homogeneous points and optional per-point attributes."""

    def __init__(self, points=None) -> None:
        self.points: Optional[np.ndarray] = None
        self.times: Optional[np.ndarray] = None
        self.normals: Optional[np.ndarray] = None
        self.covs: Optional[np.ndarray] = None
        self.intensities: Optional[np.ndarray] = None
        self.aux_attributes: Dict[str, np.ndarray] = {}
        self._num_points: Optional[int] = None
        if points is not None:
            self.add_points(points)

    def size(self) -> int:
        """Number of points."""
        return self._num_points or 0

    def __len__(self) -> int:
        return self.size()

    def has_points(self) -> bool:
        return self.points is not None

    def has_times(self) -> bool:
        return self.times is not None

    def has_normals(self) -> bool:
        return self.normals is not None

    def has_covs(self) -> bool:
        return self.covs is not None

    def has_intensities(self) -> bool:
        return self.intensities is not None

    def _claim(self, count: int, what: str) -> None:
        if self._num_points is None:
            self._num_points = count
        elif count != self._num_points:
            raise ValueError(f"{what} has {count} entries but the frame has {self._num_points} points")

    def add_times(self, times) -> None:
        """Set per-point timestamps."""
        arr = _scalars(times, "times")
        self._claim(len(arr), "times")
        self.times = arr

    def add_points(self, points) -> None:
        """Set point coordinates; 3D points get w = 1."""
        arr = _vectors(points, 1.0, "points")
        self._claim(len(arr), "points")
        self.points = arr

    def add_normals(self, normals) -> None:
        """Set point normals; 3D normals get w = 0."""
        arr = _vectors(normals, 0.0, "normals")
        self._claim(len(arr), "normals")
        self.normals = arr

    def add_covs(self, covs) -> None:
        """Set point covariances; 3x3 matrices are embedded in 4x4 zeros."""
        arr = _matrices(covs)
        self._claim(len(arr), "covs")
        self.covs = arr

    def add_intensities(self, intensities) -> None:
        """Set point intensities."""
        arr = _scalars(intensities, "intensities")
        self._claim(len(arr), "intensities")
        self.intensities = arr

    def add_aux_attribute(self, name: str, values) -> None:
        """Store an additional named per-point attribute."""
        self.aux_attributes[name] = np.array(values)


def sample(frame: Frame, indices: Iterable[int]) -> Frame:
    """Return a new frame holding the points at ``indices``, in that order."""
    idx = np.asarray(list(indices), dtype=np.intp).reshape(-1)
    sampled = Frame()
    for name in ("points", "times", "normals", "covs", "intensities"):
        values = getattr(frame, name)
        if values is not None:
            setattr(sampled, name, values[idx].copy())
    sampled.aux_attributes = {name: values[idx].copy() for name, values in frame.aux_attributes.items()}
    sampled._num_points = len(idx)
    return sampled


def filter_points(frame: Frame, pred: Callable[[np.ndarray], Any]) -> Frame:
    """Keep the points for which ``pred(point)`` is true."""
    points = frame.points if frame.points is not None else ()
    return sample(frame, [i for i, point in enumerate(points) if pred(point)])


def filter_by_index(frame: Frame, pred: Callable[[int], Any]) -> Frame:
    """Keep the points whose index satisfies ``pred``."""
    return sample(frame, [i for i in range(frame.size()) if pred(i)])


def sort_points(frame: Frame, key: Callable[[int], Any]) -> Frame:
    """Reorder points by ``key(index)``."""
    return sample(frame, sorted(range(frame.size()), key=key))


def sort_by_time(frame: Frame) -> Frame:
    """Reorder points by their timestamps."""
    if frame.times is None:
        raise ValueError("frame has no per-point times")
    return sample(frame, np.argsort(frame.times, kind="stable"))