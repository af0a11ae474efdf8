[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dogbot"
version = "0.1.0"
description = "Quadruped robot toolkit: lidar result codes and message decoding, scan ordering, shared robot state, visual odometry pose helpers and bundle adjustment"
requires-python = ">=3.10"
keywords = ["lidar", "rplidar", "robotics", "odometry", "bundle-adjustment"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["dogbot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
