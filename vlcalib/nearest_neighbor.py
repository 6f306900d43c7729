"""Nearest neighbor search over point cloud frames."""

from __future__ import annotations

import logging
from typing import NamedTuple

import numpy as np
from scipy.spatial import cKDTree

from .frame import Frame

logger = logging.getLogger(__name__)


class KnnResult(NamedTuple):
    """Indices of found neighbors and their squared distances, nearest first."""

    indices: np.ndarray
    sq_dists: np.ndarray


def empty_knn_result() -> KnnResult:
    """A search result holding no neighbors."""
    return KnnResult(np.zeros(0, dtype=np.intp), np.zeros(0))


class NearestNeighborSearch:
    """Interface of k-nearest neighbor search structures."""

    def knn_search(self, pt, k: int) -> KnnResult:
        """Find up to ``k`` neighbors of ``pt``; the base structure finds none."""
        return empty_knn_result()


class KdTree(NearestNeighborSearch):
    """KD-tree based nearest neighbor search over the points of a frame."""

    def __init__(self, frame: Frame) -> None:
        if not frame.has_points():
            raise ValueError("frame has no points")
        self.frame = frame
        self.search_eps = -1.0
        if frame.size() == 0:
            logger.error("error: empty frame is given for KdTree")
            self._tree = None
        else:
            self._tree = cKDTree(frame.points[:, :3], leafsize=10)

    def knn_search(self, pt, k: int) -> KnnResult:
        """Find up to ``k`` nearest points to ``pt``, nearest first."""
        if self._tree is None:
            return empty_knn_result()
        k = min(int(k), self.frame.size())
        if k <= 0:
            return empty_knn_result()
        query = np.asarray(pt, dtype=float).reshape(-1)[:3]
        eps = self.search_eps if self.search_eps > 0.0 else 0.0
        dists, indices = self._tree.query(query, k=k, eps=eps)
        dists = np.atleast_1d(np.asarray(dists, dtype=float))
        indices = np.atleast_1d(np.asarray(indices)).astype(np.intp)
        return KnnResult(indices, dists**2)