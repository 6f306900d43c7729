import numpy as np
import pytest

from vlcalib.frame import Frame
from vlcalib.nearest_neighbor import KdTree, NearestNeighborSearch


def _line_frame(n=10):
    return Frame([[float(i), 0.0, 0.0] for i in range(n)])


def test_base_search_finds_nothing():
    result = NearestNeighborSearch().knn_search([0.0, 0.0, 0.0], 3)
    assert len(result.indices) == 0
    assert len(result.sq_dists) == 0


def test_point_in_set_is_its_own_nearest():
    frame = _line_frame()
    tree = KdTree(frame)
    for i in range(frame.size()):
        result = tree.knn_search(frame.points[i], 1)
        assert list(result.indices) == [i]
        assert result.sq_dists[0] == pytest.approx(0.0)


def test_knn_returns_nearest_in_order():
    tree = KdTree(_line_frame())
    result = tree.knn_search([3.2, 0.0, 0.0], 3)
    assert list(result.indices) == [3, 4, 2]
    assert np.all(np.diff(result.sq_dists) >= 0)


def test_squared_distances_match_points():
    frame = _line_frame()
    tree = KdTree(frame)
    query = np.array([4.6, 1.0, -0.5])
    result = tree.knn_search(query, 4)
    for index, sq in zip(result.indices, result.sq_dists):
        diff = frame.points[index, :3] - query
        assert sq == pytest.approx(float(diff @ diff))


def test_k_larger_than_cloud_returns_all():
    tree = KdTree(_line_frame(4))
    result = tree.knn_search([0.0, 0.0, 0.0], 10)
    assert sorted(result.indices) == [0, 1, 2, 3]


def test_homogeneous_query_accepted():
    tree = KdTree(_line_frame())
    result = tree.knn_search([7.0, 0.0, 0.0, 1.0], 1)
    assert list(result.indices) == [7]


def test_approximate_search_still_finds_neighbors():
    tree = KdTree(_line_frame())
    tree.search_eps = 0.5
    result = tree.knn_search([5.0, 0.0, 0.0], 2)
    assert len(result.indices) == 2
    assert 5 in result.indices


def test_empty_frame_gives_no_results():
    tree = KdTree(Frame(np.zeros((0, 3))))
    result = tree.knn_search([0.0, 0.0, 0.0], 1)
    assert len(result.indices) == 0


def test_frame_without_points_rejected():
    with pytest.raises(ValueError):
        KdTree(Frame())