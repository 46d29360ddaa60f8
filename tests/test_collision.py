from __future__ import annotations

import math

from diffsim.collision import CollisionResolver
from diffsim.kinematics import Pose2D
from diffsim.world import Obstacle


def test_overlap_pushed_to_tangent_point() -> None:
    resolver = CollisionResolver(collision_radius=0.1, obstacles=[Obstacle(1.0, 0.0, 0.2)])
    pose, collided = resolver.resolve(Pose2D(x=0.75, y=0.0, theta=0.3))

    assert collided
    assert math.isclose(pose.x, 0.7, abs_tol=1e-12)
    assert math.isclose(pose.y, 0.0, abs_tol=1e-12)
    assert pose.theta == 0.3


def test_push_is_along_obstacle_to_robot_direction() -> None:
    obs = Obstacle(1.0, 0.0, 0.2)
    resolver = CollisionResolver(collision_radius=0.1, obstacles=[obs])
    pose, collided = resolver.resolve(Pose2D(x=0.9, y=0.1, theta=-1.0))

    assert collided
    assert math.isclose(math.hypot(pose.x - obs.x, pose.y - obs.y), 0.3, rel_tol=1e-9)
    # Still on the initial obstacle->robot ray (-1, 1)
    assert math.isclose(pose.x - obs.x, -(pose.y - obs.y), rel_tol=1e-9)
    assert pose.theta == -1.0


def test_no_collision_leaves_pose_untouched() -> None:
    resolver = CollisionResolver(collision_radius=0.1, obstacles=[Obstacle(1.0, 0.0, 0.2)])
    start = Pose2D(x=0.0, y=0.0, theta=0.0)
    pose, collided = resolver.resolve(start)
    assert not collided
    assert pose == start


def test_single_pass_can_leave_residual_overlap() -> None:
    # Robot wedged between two obstacles that are closer than its diameter allows
    obstacles = [Obstacle(0.0, 0.0, 0.2), Obstacle(0.5, 0.0, 0.2)]
    resolver = CollisionResolver(collision_radius=0.1, obstacles=obstacles)
    pose, collided = resolver.resolve(Pose2D(x=0.25, y=0.0, theta=0.0))

    assert collided
    # First obstacle pushes to x=0.3, second pushes back to x=0.2
    assert math.isclose(pose.x, 0.2, abs_tol=1e-12)
    assert resolver.is_colliding(pose)
    assert resolver.overlap(pose, obstacles[0]) < 0.0


def test_coincident_centers_back_out_against_heading() -> None:
    resolver = CollisionResolver(collision_radius=0.1, obstacles=[Obstacle(1.0, 1.0, 0.2)])
    pose, collided = resolver.resolve(Pose2D(x=1.0, y=1.0, theta=0.0))
    assert collided
    assert math.isclose(pose.x, 0.7, abs_tol=1e-12)
    assert math.isclose(pose.y, 1.0, abs_tol=1e-12)
