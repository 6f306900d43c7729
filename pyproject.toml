[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vlcalib"
version = "0.1.0"
description = "Point cloud frames, voxel-based neighbour search, timestamp handling and derivative-free optimisers for LiDAR-camera calibration"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = ["lidar", "calibration", "point cloud", "voxel", "kd-tree", "nelder-mead", "optimization"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["vlcalib"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
