"""Lidar result codes and message decoding, scan ordering, shared robot state, visual odometry pose helpers and bundle adjustment for a quadruped robot."""

__version__ = "0.1.0"