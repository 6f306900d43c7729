"""Incremental voxel map for nearest neighbor search over accumulated points."""

from __future__ import annotations

import logging
from itertools import product
from typing import Dict, List, Optional, Tuple

import numpy as np

from .frame import Frame
from .nearest_neighbor import KnnResult, NearestNeighborSearch, empty_knn_result

logger = logging.getLogger(__name__)

Coord = Tuple[int, int, int]

_POINT_ID_BITS = 32
_VOXEL_ID_BITS = 32
_POINT_ID_MASK = (1 << _POINT_ID_BITS) - 1
_MAX_VOXELS = (1 << _VOXEL_ID_BITS) - 1


class LinearContainer:
    """Points of one voxel stored in a flat list."""

    def __init__(self, lru_count: int) -> None:
        self.last_lru_count = lru_count
        self.serial_id = 0
        self.points: List[np.ndarray] = []
        self.normals: List[np.ndarray] = []
        self.covs: List[np.ndarray] = []
        self.intensities: List[float] = []

    def __len__(self) -> int:
        return len(self.points)

    def _far_enough(self, point: np.ndarray, insertion_dist_sq_thresh: float) -> bool:
        if not self.points:
            return True
        diffs = np.asarray(self.points) - point
        return float(np.min(np.einsum("ij,ij->i", diffs, diffs))) > insertion_dist_sq_thresh

    def insert(self, point, insertion_dist_sq_thresh: float) -> None:
        """Add ``point`` unless a stored point lies within the threshold."""
        point = np.asarray(point, dtype=float).copy()
        if self._far_enough(point, insertion_dist_sq_thresh):
            self.points.append(point)

    def insert_from_frame(self, frame: Frame, i: int, insertion_dist_sq_thresh: float) -> None:
        """Add point ``i`` of ``frame`` with its attributes unless a stored point is too close."""
        point = frame.points[i].copy()
        if not self._far_enough(point, insertion_dist_sq_thresh):
            return
        self.points.append(point)
        if frame.normals is not None:
            self.normals.append(frame.normals[i].copy())
        if frame.covs is not None:
            self.covs.append(frame.covs[i].copy())
        if frame.intensities is not None:
            self.intensities.append(float(frame.intensities[i]))


def neighbor_offsets(neighbor_voxel_mode: int) -> List[Coord]:
    """Voxel offsets searched around a query voxel: 1, 7, 19 or 27 of them."""
    cube = list(product((-1, 0, 1), repeat=3))
    if neighbor_voxel_mode == 1:
        return [(0, 0, 0)]
    if neighbor_voxel_mode == 7:
        return [(0, 0, 0), (1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1)]
    if neighbor_voxel_mode == 19:
        return [c for c in cube if not all(abs(v) == 1 for v in c)]
    if neighbor_voxel_mode == 27:
        return cube
    raise ValueError(f"invalid neighbor voxel mode {neighbor_voxel_mode}; must be 1, 7, 19, or 27")


def _calc_index(voxel_id: int, point_id: int) -> int:
    return (voxel_id << _POINT_ID_BITS) | point_id


class IVox(NearestNeighborSearch):
    """Voxel hash map of points with least-recently-used voxel eviction."""

    def __init__(self, voxel_resolution: float, insertion_dist_thresh: float, lru_thresh: int) -> None:
        self.voxel_resolution = voxel_resolution
        self.insertion_dist_sq_thresh = insertion_dist_thresh * insertion_dist_thresh
        self.lru_cycle = 10
        self.lru_thresh = lru_thresh
        self.lru_count = 0
        self.offsets = neighbor_offsets(7)

        self._points_available = False
        self._normals_available = False
        self._covs_available = False
        self._intensities_available = False

        self._voxelmap: Dict[Coord, LinearContainer] = {}
        self._voxels: List[LinearContainer] = []

    def has_points(self) -> bool:
        return self._points_available

    def has_normals(self) -> bool:
        return self._normals_available

    def has_covs(self) -> bool:
        return self._covs_available

    def has_intensities(self) -> bool:
        return self._intensities_available

    def voxel_coord(self, point) -> Coord:
        """Integer coordinate of the voxel containing ``point``."""
        scaled = np.floor(np.asarray(point, dtype=float)[:3] / self.voxel_resolution)
        return tuple(int(v) for v in scaled)  # type: ignore[return-value]

    def _check_attributes(self, frame: Frame) -> None:
        if not frame.has_points():
            raise ValueError("frame has no points")
        if not self._points_available:
            self._points_available = frame.has_points()
            self._normals_available = frame.has_normals()
            self._covs_available = frame.has_covs()
            self._intensities_available = frame.has_intensities()
            return
        for name, available, present in (
            ("normals", self._normals_available, frame.has_normals()),
            ("covs", self._covs_available, frame.has_covs()),
            ("intensities", self._intensities_available, frame.has_intensities()),
        ):
            if available != present:
                raise ValueError(f"inconsistent input point attributes ({name})")

    def insert(self, frame: Frame) -> None:
        """Insert the points of ``frame`` and evict voxels that were not used recently."""
        self._check_attributes(frame)
        self.lru_count += 1

        for i in range(frame.size()):
            coord = self.voxel_coord(frame.points[i])
            voxel = self._voxelmap.get(coord)
            if voxel is None:
                voxel = self._voxelmap[coord] = LinearContainer(self.lru_count)
            voxel.last_lru_count = self.lru_count
            voxel.insert_from_frame(frame, i, self.insertion_dist_sq_thresh)

        lru_horizon = self.lru_count - self.lru_thresh
        if lru_horizon > 0 and self.lru_count % self.lru_cycle == 0:
            self._voxelmap = {
                coord: voxel for coord, voxel in self._voxelmap.items() if voxel.last_lru_count >= lru_horizon
            }

        if len(self._voxelmap) >= _MAX_VOXELS:
            logger.warning("warning: too many voxels!! drop old voxels")
            newest = sorted(self._voxelmap.items(), key=lambda item: item[1].last_lru_count, reverse=True)
            self._voxelmap = dict(newest[:_MAX_VOXELS])

        self._voxels = list(self._voxelmap.values())
        for serial_id, voxel in enumerate(self._voxels):
            voxel.serial_id = serial_id

    def _neighbor_voxels(self, pt):
        query = np.asarray(pt, dtype=float).reshape(-1)
        point = np.array([query[0], query[1], query[2], 1.0])
        cx, cy, cz = self.voxel_coord(point)
        for dx, dy, dz in self.offsets:
            voxel = self._voxelmap.get((cx + dx, cy + dy, cz + dz))
            if voxel is None:
                continue
            voxel.last_lru_count = self.lru_count
            yield point, voxel

    def nearest_neighbor_search(self, pt) -> KnnResult:
        """Find the closest stored point to ``pt`` among the neighboring voxels."""
        best_index: Optional[int] = None
        min_dist = float("inf")
        for point, voxel in self._neighbor_voxels(pt):
            for i, stored in enumerate(voxel.points):
                diff = point - stored
                dist = float(diff @ diff)
                if dist > min_dist:
                    continue
                best_index = _calc_index(voxel.serial_id, i)
                min_dist = dist
        if best_index is None:
            return empty_knn_result()
        return KnnResult(np.array([best_index], dtype=np.int64), np.array([min_dist]))

    def knn_search(self, pt, k: int) -> KnnResult:
        """Find up to ``k`` closest stored points to ``pt`` among the neighboring voxels."""
        if k == 1:
            return self.nearest_neighbor_search(pt)
        neighbors = []
        for point, voxel in self._neighbor_voxels(pt):
            for i, stored in enumerate(voxel.points):
                diff = point - stored
                neighbors.append((_calc_index(voxel.serial_id, i), float(diff @ diff)))
        neighbors.sort(key=lambda item: item[1])
        neighbors = neighbors[: max(int(k), 0)]
        if not neighbors:
            return empty_knn_result()
        indices, dists = zip(*neighbors)
        return KnnResult(np.array(indices, dtype=np.int64), np.array(dists))

    def _locate(self, i: int) -> Tuple[LinearContainer, int]:
        i = int(i)
        return self._voxels[i >> _POINT_ID_BITS], i & _POINT_ID_MASK

    def point(self, i: int) -> np.ndarray:
        voxel, j = self._locate(i)
        return voxel.points[j]

    def normal(self, i: int) -> np.ndarray:
        voxel, j = self._locate(i)
        return voxel.normals[j]

    def cov(self, i: int) -> np.ndarray:
        voxel, j = self._locate(i)
        return voxel.covs[j]

    def intensity(self, i: int) -> float:
        voxel, j = self._locate(i)
        return voxel.intensities[j]

    def voxel_points(self) -> np.ndarray:
        """All stored points, voxel by voxel."""
        points = [p for voxel in self._voxels for p in voxel.points]
        return np.array(points) if points else np.zeros((0, 4))

    def voxel_normals(self) -> np.ndarray:
        """All stored normals, voxel by voxel."""
        if not self.has_normals():
            logger.warning("warning: iVox doesn't have normals!!")
            return np.zeros((0, 4))
        normals = [n for voxel in self._voxels for n in voxel.normals]
        return np.array(normals) if normals else np.zeros((0, 4))

    def voxel_covs(self) -> np.ndarray:
        """All stored covariances, voxel by voxel."""
        if not self.has_covs():
            logger.warning("warning: iVox doesn't have covs!!")
            return np.zeros((0, 4, 4))
        covs = [c for voxel in self._voxels for c in voxel.covs]
        return np.array(covs) if covs else np.zeros((0, 4, 4))