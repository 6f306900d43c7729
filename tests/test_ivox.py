import numpy as np
import pytest

from vlcalib.frame import Frame
from vlcalib.ivox import IVox, LinearContainer, neighbor_offsets


def _ivox_with(points, **attrs):
    ivox = IVox(1.0, 0.05, 100)
    frame = Frame(points)
    for name, values in attrs.items():
        getattr(frame, f"add_{name}")(values)
    ivox.insert(frame)
    return ivox


@pytest.mark.parametrize("mode", [1, 7, 19, 27])
def test_neighbor_offsets_count_and_unique(mode):
    offsets = neighbor_offsets(mode)
    assert len(offsets) == mode
    assert len(set(offsets)) == mode
    assert (0, 0, 0) in offsets


def test_neighbor_offsets_19_excludes_corners():
    assert all(not all(abs(v) == 1 for v in o) for o in neighbor_offsets(19))


def test_invalid_neighbor_mode_raises():
    with pytest.raises(ValueError):
        neighbor_offsets(5)


def test_linear_container_rejects_close_points():
    container = LinearContainer(0)
    container.insert([0.0, 0.0, 0.0, 1.0], 0.01)
    container.insert([0.05, 0.0, 0.0, 1.0], 0.01)
    container.insert([0.5, 0.0, 0.0, 1.0], 0.01)
    assert len(container) == 2


def test_voxel_coord_floors():
    ivox = IVox(1.0, 0.05, 100)
    assert ivox.voxel_coord([-0.5, 1.5, 2.0, 1.0]) == (-1, 1, 2)


def test_nearest_neighbor_returns_stored_point():
    ivox = _ivox_with([[0.2, 0.2, 0.2], [0.8, 0.8, 0.8], [1.5, 0.5, 0.5]])
    result = ivox.nearest_neighbor_search([0.25, 0.2, 0.2])
    assert len(result.indices) == 1
    assert np.allclose(ivox.point(result.indices[0]), [0.2, 0.2, 0.2, 1.0])


def test_far_query_finds_nothing():
    ivox = _ivox_with([[0.2, 0.2, 0.2]])
    assert len(ivox.knn_search([50.0, 50.0, 50.0], 1).indices) == 0
    assert len(ivox.knn_search([50.0, 50.0, 50.0], 3).indices) == 0


def test_knn_sorted_and_limited():
    points = [[0.2, 0.2, 0.2], [0.8, 0.8, 0.8], [1.5, 0.5, 0.5]]
    ivox = _ivox_with(points)
    two = ivox.knn_search([0.5, 0.5, 0.5], 2)
    assert len(two.indices) == 2
    assert np.all(np.diff(two.sq_dists) >= 0)

    everything = ivox.knn_search([0.5, 0.5, 0.5], 10)
    found = sorted(tuple(ivox.point(i)[:3]) for i in everything.indices)
    assert found == sorted(tuple(p) for p in points)
    for index, sq in zip(everything.indices, everything.sq_dists):
        diff = ivox.point(index)[:3] - np.array([0.5, 0.5, 0.5])
        assert sq == pytest.approx(float(diff @ diff))


def test_insertion_threshold_drops_duplicates():
    ivox = _ivox_with([[0.5, 0.5, 0.5], [0.52, 0.5, 0.5]])
    assert len(ivox.voxel_points()) == 1


def test_attributes_are_kept_with_points():
    normals = [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]
    ivox = _ivox_with([[0.2, 0.2, 0.2], [3.5, 0.5, 0.5]], normals=normals, intensities=[0.25, 0.75])
    assert ivox.has_normals() and ivox.has_intensities() and not ivox.has_covs()
    index = ivox.knn_search([3.5, 0.5, 0.5], 1).indices[0]
    assert np.allclose(ivox.normal(index), [0.0, 1.0, 0.0, 0.0])
    assert ivox.intensity(index) == 0.75
    assert len(ivox.voxel_normals()) == 2
    assert len(ivox.voxel_covs()) == 0


def test_covs_are_kept():
    covs = np.stack([np.eye(3), 2 * np.eye(3)])
    ivox = _ivox_with([[0.2, 0.2, 0.2], [3.5, 0.5, 0.5]], covs=covs)
    index = ivox.knn_search([0.2, 0.2, 0.2], 1).indices[0]
    assert np.allclose(ivox.cov(index)[:3, :3], np.eye(3))
    assert ivox.voxel_covs().shape == (2, 4, 4)


def test_inconsistent_attributes_raise():
    ivox = _ivox_with([[0.2, 0.2, 0.2]], normals=[[1.0, 0.0, 0.0]])
    with pytest.raises(ValueError):
        ivox.insert(Frame([[0.5, 0.5, 0.5]]))


def test_frame_without_points_raises():
    with pytest.raises(ValueError):
        IVox(1.0, 0.05, 100).insert(Frame())


def test_lru_eviction_drops_stale_voxels():
    ivox = IVox(1.0, 0.05, 2)
    ivox.insert(Frame([[0.5, 0.5, 0.5]]))
    for _ in range(9):
        ivox.insert(Frame([[100.5, 100.5, 100.5]]))
    remaining = ivox.voxel_points()
    assert len(remaining) == 1
    assert np.allclose(remaining[0], [100.5, 100.5, 100.5, 1.0])