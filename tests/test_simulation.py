from __future__ import annotations

import logging
import math
import random

import pytest

from diffsim.config import NoiseConfig
from diffsim.errors import ConfigurationError
from diffsim.kinematics import Pose2D, WheelConfig
from diffsim.sensors import LaserConfig
from diffsim.simulation import Simulation
from diffsim.world import World


def test_zero_command_leaves_pose_unchanged(make_config) -> None:
    sim = Simulation(make_config(x0=0.4, y0=-0.2, theta0=0.7))
    for _ in range(25):
        result = sim.step()
    assert sim.pose == Pose2D(0.4, -0.2, 0.7)
    assert sim.wheels == WheelConfig()
    assert result.tick == 25
    assert not result.collided


def test_equal_wheels_advance_along_heading(make_config) -> None:
    sim = Simulation(make_config(theta0=math.pi / 2.0))
    v = 5.0
    sim.set_wheel_command(v, v)
    sim.step()

    dist = 0.033 * v * sim.config.dt
    assert sim.pose.x == pytest.approx(0.0, abs=1e-12)
    assert sim.pose.y == pytest.approx(dist)
    assert sim.pose.theta == math.pi / 2.0


def test_opposite_wheels_rotate_in_place(make_config) -> None:
    sim = Simulation(make_config(latch_command=True))
    sim.set_wheel_command(-4.0, 4.0)
    thetas = [sim.step().pose.theta for _ in range(20)]
    assert sim.pose.x == 0.0
    assert sim.pose.y == 0.0
    assert all(b > a for a, b in zip(thetas, thetas[1:]))


def test_command_is_consumed_each_tick_unless_latched(make_config) -> None:
    sim = Simulation(make_config())
    sim.set_wheel_command(5.0, 5.0)
    first = sim.step().pose
    second = sim.step().pose
    assert first.x > 0.0
    assert second == first

    latched = Simulation(make_config(latch_command=True))
    latched.set_wheel_command(5.0, 5.0)
    a = latched.step().pose
    b = latched.step().pose
    assert b.x == pytest.approx(2.0 * a.x)


def test_motor_command_conversion_and_limit(make_config) -> None:
    sim = Simulation(make_config(motor_cmd_max=100.0, motor_cmd_per_rad_sec=0.5, encoder_ticks_per_rad=10.0))
    sim.set_wheel_command(1000.0, -40.0)
    result = sim.step()

    dt = sim.config.dt
    assert result.wheels.left == pytest.approx(100.0 * 0.5 * dt)
    assert result.wheels.right == pytest.approx(-40.0 * 0.5 * dt)
    assert result.encoders == pytest.approx((10.0 * result.wheels.left, 10.0 * result.wheels.right))


def test_large_command_warns_and_still_moves(make_config, caplog: pytest.LogCaptureFixture) -> None:
    sim = Simulation(make_config(rate=1.0))
    sim.set_wheel_command(4.0, 4.0)
    with caplog.at_level(logging.WARNING, logger="diffsim.kinematics"):
        sim.step()
    assert any("more than pi" in rec.message for rec in caplog.records)
    assert sim.pose.x == pytest.approx(0.033 * 4.0)


def test_collision_keeps_robot_outside_obstacle(make_config) -> None:
    cfg = make_config(obstacles_x=[0.5], obstacles_y=[0.0], obstacles_r=0.1, latch_command=True)
    sim = Simulation(cfg)
    sim.set_wheel_command(10.0, 10.0)
    collided = False
    for _ in range(300):
        result = sim.step()
        collided = collided or result.collided
        gap = math.hypot(result.pose.x - 0.5, result.pose.y)
        assert gap >= 0.1 + 0.11 - 1e-9
    assert collided
    assert sim.pose.theta == 0.0


def test_slip_accumulates_into_wheel_state(make_config) -> None:
    f = 0.01
    sim = Simulation(make_config(seed=7, noise=NoiseConfig(slip_fraction=f)))

    replay = random.Random(7)
    slip1 = (replay.uniform(-f, f), replay.uniform(-f, f))
    slip2 = (replay.uniform(-f, f), replay.uniform(-f, f))

    first = sim.step().wheels
    assert first.left == slip1[0]
    assert first.right == slip1[1]

    second = sim.step().wheels
    assert second.left == pytest.approx(slip1[0] + slip2[0], abs=1e-15)
    assert second.right == pytest.approx(slip1[1] + slip2[1], abs=1e-15)
    assert sim.wheels == second
    # Pose is unaffected by slip
    assert sim.pose == Pose2D()


def test_same_seed_same_trajectory(make_config) -> None:
    noise = NoiseConfig(input_noise=0.001, slip_fraction=0.01, basic_sensor_variance=0.001)
    results = []
    for _ in range(2):
        sim = Simulation(make_config(seed=123, noise=noise, latch_command=True))
        sim.set_wheel_command(3.0, 5.0)
        results.append((sim.run(30), sim.detect_obstacles()))
    assert results[0] == results[1]


def test_teleport_is_exact(make_config) -> None:
    sim = Simulation(make_config(latch_command=True))
    sim.set_wheel_command(3.0, 6.0)
    sim.run(10)

    sim.teleport(0.0, 0.0, 0.0)
    assert sim.pose == Pose2D(0.0, 0.0, 0.0)
    assert sim.scan()[0] == pytest.approx(2.5)


def test_teleport_into_obstacle_skips_collision_until_next_tick(
    make_config, caplog: pytest.LogCaptureFixture
) -> None:
    sim = Simulation(make_config(obstacles_x=[1.0], obstacles_y=[0.0], obstacles_r=0.2))
    with caplog.at_level(logging.WARNING, logger="diffsim.simulation"):
        sim.teleport(1.05, 0.0, 0.3)

    assert sim.pose == Pose2D(1.05, 0.0, 0.3)
    assert sim.collision.is_colliding(sim.pose)
    assert any("into an obstacle" in rec.message for rec in caplog.records)

    result = sim.step()
    assert result.collided
    assert result.pose.x == pytest.approx(1.0 + 0.2 + 0.11)
    assert result.pose.y == pytest.approx(0.0, abs=1e-12)
    assert result.pose.theta == 0.3


def test_reset_restores_startup_pose(make_config) -> None:
    cfg = make_config(
        x0=-0.5,
        y0=0.3,
        theta0=0.2,
        obstacles_x=[0.0],
        obstacles_y=[0.35],
        obstacles_r=0.1,
        latch_command=True,
    )
    sim = Simulation(cfg)
    sim.set_wheel_command(10.0, 10.0)
    results = sim.run(200)
    assert any(r.collided for r in results)

    sim.reset()
    assert sim.tick == 0
    assert sim.pose == Pose2D(-0.5, 0.3, 0.2)
    assert len(sim.world.obstacles) == 1


def test_history_is_bounded(make_config) -> None:
    sim = Simulation(make_config(history_size=3, latch_command=True))
    sim.set_wheel_command(5.0, 5.0)
    results = sim.run(7)
    assert len(sim.history) == 3
    assert sim.history.poses() == [r.pose for r in results[-3:]]


def test_mismatched_obstacles_rejected(make_config) -> None:
    with pytest.raises(ConfigurationError):
        make_config(obstacles_x=[1.0, 2.0], obstacles_y=[1.0])
    with pytest.raises(ConfigurationError):
        World.from_xy(5.0, 3.0, xs=[1.0], ys=[], radius=0.1)


def test_zero_sample_laser_warns(make_config, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="diffsim.simulation"):
        sim = Simulation(make_config(laser=LaserConfig(sample_count=0)))
    assert sim.scan() == []
    assert any("0 samples" in rec.message for rec in caplog.records)


def test_tick_result_record(make_config) -> None:
    sim = Simulation(make_config())
    record = sim.step().to_dict()
    assert record["tick"] == 1
    assert set(record) >= {"x", "y", "theta", "encoder_left", "encoder_right", "collided"}
