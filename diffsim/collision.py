from __future__ import annotations

from typing import Sequence, Tuple
import math

from .geometry_utils import distance
from .kinematics import Pose2D
from .world import Obstacle


class CollisionResolver:
    """Pushes the robot's circular footprint out of static obstacles.

    Obstacles are visited once, in configured order. An overlapping robot
    is moved straight away from the obstacle center until it touches the
    obstacle tangentially; heading is left untouched. A robot wedged
    between obstacles can keep some overlap after the pass.
    """

    def __init__(self, collision_radius: float, obstacles: Sequence[Obstacle]) -> None:
        self.collision_radius = collision_radius
        self.obstacles = tuple(obstacles)

    def overlap(self, pose: Pose2D, obstacle: Obstacle) -> float:
        """Signed gap between footprint and obstacle; negative means overlap."""
        return distance(obstacle.x, obstacle.y, pose.x, pose.y) - (
            obstacle.r + self.collision_radius
        )

    def is_colliding(self, pose: Pose2D) -> bool:
        return any(self.overlap(pose, obs) < 0.0 for obs in self.obstacles)

    def resolve(self, pose: Pose2D) -> Tuple[Pose2D, bool]:
        """Return the corrected pose and whether any collision was found."""
        collided = False
        x, y = pose.x, pose.y
        for obs in self.obstacles:
            dx = x - obs.x
            dy = y - obs.y
            d = math.hypot(dx, dy)
            overlap = d - (obs.r + self.collision_radius)
            if overlap >= 0.0:
                continue
            collided = True
            if d > 0.0:
                ux, uy = dx / d, dy / d
            else:
                # Centers coincide: back out against the heading
                ux, uy = -math.cos(pose.theta), -math.sin(pose.theta)
            x += ux * -overlap
            y += uy * -overlap
        return Pose2D(x=x, y=y, theta=pose.theta), collided
