# vlcalib

Building blocks for preparing LiDAR and camera data for extrinsic calibration:
derivative-free optimisers, point cloud frames, nearest-neighbour search over a
KD-tree or an incremental voxel map, timestamp normalisation for LiDAR and IMU
data, and accumulation of static scans into a voxel grid.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Modules

### Optimisation

- `vlcalib.optimizer`: the abstract `Optimizer` base class and the
  `OptimizationResult` dataclass (`converged`, `num_iterations`, `x`, `y`).
  `set_callback(f)` registers a function called with the current best estimate
  after each iteration; `set_particles_callback(f)` registers one called with all
  current samples (only `NelderMead` calls it).
- `vlcalib.nelder_mead`: `NelderMead`, a downhill simplex search configured with
  `NelderMeadParams` (`init_step`, `alpha`, `gamma`, `rho`, `sigma`,
  `max_iterations`, `convergence_var_thresh`). The run stops early, with
  `converged` set, once the summed variance of the simplex vertices falls below
  the threshold. A zero-dimensional `x0` raises `ValueError`.
- `vlcalib.directional_direct_search`: `DirectionalDirectSearch`, which steps along
  each coordinate axis while the value does not increase, growing the step after
  an improving sweep and shrinking it otherwise. Configured with
  `DirectionalDirectSearchParams` (`init_alpha`, `min_alpha`, `alpha_dec_factor`,
  `alpha_inc_factor`, `max_iterations`).

### Point clouds

- `vlcalib.frame`: `Frame`, a point container holding homogeneous `(N, 4)` points
  and optional `times`, `normals`, `covs` (`(N, 4, 4)`) and `intensities`, plus
  named entries in `aux_attributes`. The `add_*` methods accept 3D or homogeneous
  input (points get w = 1, normals w = 0, 3x3 covariances are embedded in 4x4) and
  raise `ValueError` when the count disagrees with the frame's size. Frame
  operations: `sample(frame, indices)`, `filter_points(frame, pred)`,
  `filter_by_index(frame, pred)`, `sort_points(frame, key)` and
  `sort_by_time(frame)`; each returns a new frame.
- `vlcalib.time_keeper`: `RawPoints` (a frame as read from a recording: `stamp`,
  `times`, `intensities`, `points`), `AbsPointTimeParams` and `TimeKeeper`.
  `TimeKeeper.process(points)` rewrites timestamps in place so that per-point
  times are relative to the first point, synthesises them from the estimated scan
  duration when they are missing, and returns `False` for a frame whose stamp goes
  backwards. `validate_imu_stamp(stamp)` returns `False` for an IMU stamp that
  goes backwards. Anomalies are reported through the `logging` module.
- `vlcalib.point_cloud_integrator`: the `PointCloudIntegrator` interface and
  `StaticPointCloudIntegrator`, configured with `StaticPointCloudIntegratorParams`
  (`voxel_resolution`, `min_distance`). It drops points closer than
  `min_distance`, keeps the latest point in each voxel, and returns one point with
  its intensity per occupied voxel from `get_points()`. Frames without points or
  intensities raise `ValueError`.

### Nearest-neighbour search

- `vlcalib.nearest_neighbor`: the `NearestNeighborSearch` interface, whose
  `knn_search(pt, k)` returns a `KnnResult` named tuple of `indices` and
  `sq_dists`, nearest first, and `KdTree`, a KD-tree over the points of a frame
  (set `search_eps` above zero for approximate search). `empty_knn_result()`
  gives a result with no neighbours.
- `vlcalib.ivox`: `IVox`, an incremental voxel map. `insert(frame)` adds points
  (skipping any within `insertion_dist_thresh` of a stored point in the same
  voxel) and periodically evicts voxels not touched within `lru_thresh`
  insertions. Searches look in the query voxel and its six face neighbours by
  default (`neighbor_offsets` also provides 1, 19 and 27). Returned indices encode
  voxel and point; pass them to `point`, `normal`, `cov` or `intensity`.
  Inserting a frame whose optional attributes differ from earlier frames raises
  `ValueError`. `LinearContainer` holds the points of one voxel.

### Utilities

- `vlcalib.median_filter`: `StatisticalMedianFilter(queue_size, seed)`, a running
  median over a reservoir-sampled set of values.
- `vlcalib.spatial_hash`: `vector3i_hash` and `xor_vector3i_hash`, 64-bit hashes of
  integer voxel coordinates.
- `vlcalib.console`: the `Style` enum of ANSI escape sequences and
  `styled(text, *styles)`, which wraps text in styles followed by a reset.

## Examples

Minimise a quadratic with the simplex optimiser:

```python
import numpy as np
from vlcalib.nelder_mead import NelderMead, NelderMeadParams

optimizer = NelderMead(NelderMeadParams())
result = optimizer.optimize(lambda x: float(np.sum((x - 1.0) ** 2)), np.zeros(3))
print(result.x, result.y, result.converged)
```

Accumulate a static scan into a voxel grid and search it:

```python
import numpy as np
from vlcalib.frame import Frame
from vlcalib.nearest_neighbor import KdTree
from vlcalib.point_cloud_integrator import (
    StaticPointCloudIntegrator,
    StaticPointCloudIntegratorParams,
)

integrator = StaticPointCloudIntegrator(StaticPointCloudIntegratorParams())
scan = Frame(np.random.uniform(-10, 10, size=(1000, 3)))
scan.add_intensities(np.random.rand(1000))
integrator.insert_points(scan)
cloud = integrator.get_points()

tree = KdTree(cloud)
neighbors = tree.knn_search([0.0, 0.0, 5.0], 3)
print(cloud.size(), neighbors.indices, neighbors.sq_dists)
```

## What this package does not do

It has no command-line tool and reads no recordings, images or point cloud
files: frames are built from arrays you supply. It does not render LiDAR
images, project points through camera models, estimate point covariances,
or integrate scans from a moving LiDAR; only static accumulation is provided.
There is no viewer or other visual output.