"""
Top-level package for the differential-drive robot simulator.

Components:
- kinematics: poses, wheel state and exact SE(2) differential-drive integration
- noise: seedable actuation, slip and sensor noise
- world: arena walls and circular obstacles
- collision: single-pass footprint/obstacle overlap resolution
- sensors: ray-cast laser scanner and body-frame obstacle detections
- history: fixed-capacity pose ring buffer
- simulation: per-tick orchestration, reset and teleport
- config: YAML-backed startup configuration
- render: pygame-based visualization
"""

from .errors import ConfigurationError, SimulationError
from .kinematics import KinematicModel, Pose2D, RobotModel, WheelConfig, WheelVelocity
from .noise import NoiseModel
from .world import Obstacle, Wall, World
from .collision import CollisionResolver
from .sensors import LaserConfig, LaserScan, ObstacleDetection, RangeSensor
from .history import PoseHistory
from .config import NoiseConfig, SimConfig, load_yaml
from .simulation import Simulation, TickResult

__all__ = [
    "ConfigurationError",
    "SimulationError",
    "KinematicModel",
    "Pose2D",
    "RobotModel",
    "WheelConfig",
    "WheelVelocity",
    "NoiseModel",
    "Obstacle",
    "Wall",
    "World",
    "CollisionResolver",
    "LaserConfig",
    "LaserScan",
    "ObstacleDetection",
    "RangeSensor",
    "PoseHistory",
    "NoiseConfig",
    "SimConfig",
    "load_yaml",
    "Simulation",
    "TickResult",
]
