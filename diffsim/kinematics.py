from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple
import logging
import math

from .errors import ConfigurationError
from .geometry_utils import EPSILON

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pose2D:
    """Configuration of the robot body in world coordinates.

    Attributes
    ----------
    x : float
        X position (meters).
    y : float
        Y position (meters).
    theta : float
        Heading (radians), CCW from +x. Not wrapped by integration.
    """

    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "theta": self.theta}


@dataclass(frozen=True)
class WheelConfig:
    """Accumulated wheel angles (radians)."""

    left: float = 0.0
    right: float = 0.0

    def __add__(self, other: "WheelConfig") -> "WheelConfig":
        return WheelConfig(self.left + other.left, self.right + other.right)

    def to_dict(self) -> Dict[str, float]:
        return {"left": self.left, "right": self.right}


@dataclass(frozen=True)
class WheelVelocity:
    """Commanded wheel angular velocities (rad/s)."""

    left: float = 0.0
    right: float = 0.0

    def __mul__(self, scale: float) -> "WheelVelocity":
        return WheelVelocity(self.left * scale, self.right * scale)


@dataclass(frozen=True)
class RobotModel:
    """Geometric constants of the differential-drive robot.

    Attributes
    ----------
    track_width : float
        Distance between the two wheels (meters).
    wheel_radius : float
        Wheel radius (meters).
    collision_radius : float
        Radius of the circular footprint used for obstacle contact (meters).
    """

    track_width: float
    wheel_radius: float
    collision_radius: float = 0.0

    def __post_init__(self) -> None:
        if not self.track_width > 0.0:
            raise ConfigurationError(f"track_width must be positive, got {self.track_width}")
        if not self.wheel_radius > 0.0:
            raise ConfigurationError(f"wheel_radius must be positive, got {self.wheel_radius}")
        if self.collision_radius < 0.0:
            raise ConfigurationError(
                f"collision_radius must not be negative, got {self.collision_radius}"
            )


class KinematicModel:
    """Differential-drive forward kinematics.

    Wheel increments are turned into a body twist, and the twist is
    integrated with the closed-form SE(2) exponential so that a constant
    curvature step lands exactly on its arc.
    """

    def __init__(self, robot: RobotModel) -> None:
        self.robot = robot

    # ------------------------------------------------------------------
    # Wheel increments
    # ------------------------------------------------------------------
    def wheel_increments(self, velocity: WheelVelocity, dt: float) -> WheelConfig:
        """Wheel angle change over one step of length dt.

        A single-step rotation larger than pi is logged as a warning; the
        step still proceeds with the computed increment.
        """
        increments = WheelConfig(velocity.left * dt, velocity.right * dt)
        if abs(increments.left) > math.pi or abs(increments.right) > math.pi:
            logger.warning(
                "This step's wheel increment is more than pi! left=%.4f right=%.4f",
                increments.left,
                increments.right,
            )
        return increments

    # ------------------------------------------------------------------
    # Twist and integration
    # ------------------------------------------------------------------
    def body_twist(self, increments: WheelConfig) -> Tuple[float, float]:
        """Return (angular, linear) body displacement for the given increments."""
        r = self.robot.wheel_radius
        angular = r * (increments.right - increments.left) / self.robot.track_width
        linear = r * (increments.right + increments.left) / 2.0
        return angular, linear

    def integrate(
        self,
        pose: Pose2D,
        wheels: WheelConfig,
        increments: WheelConfig,
    ) -> Tuple[Pose2D, WheelConfig]:
        """Apply wheel increments to pose and wheel state."""
        angular, linear = self.body_twist(increments)

        if abs(angular) < EPSILON:
            # Straight line along current heading
            x = pose.x + linear * math.cos(pose.theta)
            y = pose.y + linear * math.sin(pose.theta)
            new_pose = Pose2D(x=x, y=y, theta=pose.theta)
        else:
            # Arc about the instantaneous center of curvature, in body frame
            dx_body = linear * math.sin(angular) / angular
            dy_body = linear * (1.0 - math.cos(angular)) / angular
            c = math.cos(pose.theta)
            s = math.sin(pose.theta)
            x = pose.x + c * dx_body - s * dy_body
            y = pose.y + s * dx_body + c * dy_body
            new_pose = Pose2D(x=x, y=y, theta=pose.theta + angular)

        return new_pose, wheels + increments

    def forward(
        self,
        pose: Pose2D,
        wheels: WheelConfig,
        velocity: WheelVelocity,
        dt: float,
    ) -> Tuple[Pose2D, WheelConfig]:
        """Noise-free step: wheel_increments followed by integrate."""
        return self.integrate(pose, wheels, self.wheel_increments(velocity, dt))

