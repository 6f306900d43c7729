"""Accumulation of LiDAR frames into a single voxelized point cloud."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from .frame import Frame


class PointCloudIntegrator(ABC):
    """Interface of classes that merge successive frames into one cloud."""

    @abstractmethod
    def insert_points(self, raw_points: Frame) -> None:
        """Add a frame of points."""

    @abstractmethod
    def get_points(self) -> Frame:
        """Return the integrated point cloud."""


@dataclass
class StaticPointCloudIntegratorParams:
    """Parameters of the static point cloud integrator."""

    voxel_resolution: float = 0.05
    min_distance: float = 1.0


class StaticPointCloudIntegrator(PointCloudIntegrator):
    """Integrates frames from a LiDAR that does not move, keeping one point per voxel."""

    def __init__(self, params: StaticPointCloudIntegratorParams | None = None) -> None:
        self.params = params if params is not None else StaticPointCloudIntegratorParams()
        self._voxelgrid: Dict[Tuple[int, int, int], np.ndarray] = {}

    def insert_points(self, raw_points: Frame) -> None:
        """Store the frame's points; the latest point in a voxel replaces earlier ones."""
        if not raw_points.has_points() or not raw_points.has_intensities():
            raise ValueError("frame must have points and intensities")

        points = raw_points.points
        keep = np.linalg.norm(points[:, :3], axis=1) >= self.params.min_distance
        coords = np.floor(points[:, :3] / self.params.voxel_resolution).astype(np.int64)

        for point, intensity, coord in zip(points[keep], raw_points.intensities[keep], coords[keep]):
            key = (int(coord[0]), int(coord[1]), int(coord[2]))
            self._voxelgrid[key] = np.array([point[0], point[1], point[2], intensity])

    def get_points(self) -> Frame:
        """Return one single-precision point with its intensity per occupied voxel."""
        if self._voxelgrid:
            values = np.array(list(self._voxelgrid.values()), dtype=np.float32)
        else:
            values = np.zeros((0, 4), dtype=np.float32)
        frame = Frame(values[:, :3].astype(float))
        frame.add_intensities(values[:, 3].astype(float))
        return frame