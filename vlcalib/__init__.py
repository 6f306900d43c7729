"""Point cloud frames, voxel-based neighbour search, timestamp handling and derivative-free optimisers for LiDAR-camera calibration."""

__version__ = "0.1.0"

__all__ = [
    "console",
    "directional_direct_search",
    "frame",
    "ivox",
    "median_filter",
    "nearest_neighbor",
    "nelder_mead",
    "optimizer",
    "point_cloud_integrator",
    "spatial_hash",
    "time_keeper",
]