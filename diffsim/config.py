"""
Startup configuration for the simulator.

Configuration lives in YAML files (see ``configs/sim.yaml``) and is mapped
onto dataclasses here. Every value has a default, so a partial file only
overrides what it names. Invalid values raise ``ConfigurationError``
before any simulator object is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import math

import yaml

from .errors import ConfigurationError
from .kinematics import Pose2D, RobotModel
from .sensors import LaserConfig
from .world import World


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: top level of a config file must be a mapping")
    return data


@dataclass
class NoiseConfig:
    """Noise parameters.

    input_noise and basic_sensor_variance are variances; slip_fraction is
    the half-width of the uniform slip interval. max_range is the obstacle
    detection cutoff, negative to disable it.
    """

    input_noise: float = 0.0
    slip_fraction: float = 0.0
    basic_sensor_variance: float = 0.0
    max_range: float = -1.0

    def __post_init__(self) -> None:
        if self.input_noise < 0.0:
            raise ConfigurationError(f"input_noise must not be negative, got {self.input_noise}")
        if self.basic_sensor_variance < 0.0:
            raise ConfigurationError(
                f"basic_sensor_variance must not be negative, got {self.basic_sensor_variance}"
            )


@dataclass
class SimConfig:
    rate: float = 200.0
    sensor_rate: float = 5.0
    seed: Optional[int] = None
    history_size: int = 10
    latch_command: bool = False

    x0: float = 0.0
    y0: float = 0.0
    theta0: float = 0.0
    motor_cmd_max: Optional[float] = None
    motor_cmd_per_rad_sec: float = 1.0
    encoder_ticks_per_rad: float = 1.0
    robot: RobotModel = field(
        default_factory=lambda: RobotModel(track_width=0.16, wheel_radius=0.033, collision_radius=0.11)
    )

    arena_x_length: float = 5.0
    arena_y_length: float = 3.0
    obstacles_x: List[float] = field(default_factory=list)
    obstacles_y: List[float] = field(default_factory=list)
    obstacles_r: float = 0.0

    noise: NoiseConfig = field(default_factory=NoiseConfig)
    laser: LaserConfig = field(default_factory=LaserConfig)

    def __post_init__(self) -> None:
        if not self.rate > 0.0:
            raise ConfigurationError(f"rate must be positive, got {self.rate}")
        if not self.sensor_rate > 0.0:
            raise ConfigurationError(f"sensor_rate must be positive, got {self.sensor_rate}")
        if self.history_size <= 0:
            raise ConfigurationError(f"history_size must be positive, got {self.history_size}")
        if self.motor_cmd_max is not None and self.motor_cmd_max <= 0.0:
            raise ConfigurationError(f"motor_cmd_max must be positive, got {self.motor_cmd_max}")
        if len(self.obstacles_x) != len(self.obstacles_y):
            raise ConfigurationError(
                "Mismatch obstacle x y numbers: "
                f"{len(self.obstacles_x)} x values, {len(self.obstacles_y)} y values"
            )
        for name in ("x0", "y0", "theta0"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be finite")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def dt(self) -> float:
        """Main tick period (seconds)."""
        return 1.0 / self.rate

    @property
    def initial_pose(self) -> Pose2D:
        return Pose2D(self.x0, self.y0, self.theta0)

    def build_world(self) -> World:
        return World.from_xy(
            x_length=self.arena_x_length,
            y_length=self.arena_y_length,
            xs=self.obstacles_x,
            ys=self.obstacles_y,
            radius=self.obstacles_r,
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "SimConfig":
        """Build a config from the sections of a YAML document."""
        sim_cfg = cfg.get("sim", {}) or {}
        robot_cfg = cfg.get("robot", {}) or {}
        arena_cfg = cfg.get("arena", {}) or {}
        obstacles_cfg = cfg.get("obstacles", {}) or {}
        noise_cfg = cfg.get("noise", {}) or {}
        laser_cfg = cfg.get("laser", {}) or {}

        try:
            robot = RobotModel(
                track_width=float(robot_cfg.get("track_width", 0.16)),
                wheel_radius=float(robot_cfg.get("wheel_radius", 0.033)),
                collision_radius=float(robot_cfg.get("collision_radius", 0.11)),
            )
            noise = NoiseConfig(
                input_noise=float(noise_cfg.get("input_noise", 0.0)),
                slip_fraction=float(noise_cfg.get("slip_fraction", 0.0)),
                basic_sensor_variance=float(noise_cfg.get("basic_sensor_variance", 0.0)),
                max_range=float(noise_cfg.get("max_range", -1.0)),
            )
            no_return = laser_cfg.get("no_return_range")
            laser = LaserConfig(
                range_max=float(laser_cfg.get("range_max", 3.5)),
                range_min=float(laser_cfg.get("range_min", 0.12)),
                angle_increment=float(laser_cfg.get("angle_increment", 2.0 * math.pi / 360.0)),
                sample_count=int(laser_cfg.get("sample_count", 360)),
                resolution=float(laser_cfg.get("resolution", 0.0174533)),
                noise_level=float(laser_cfg.get("noise_level", 0.0)),
                no_return_range=float(no_return) if no_return is not None else None,
            )
            seed = sim_cfg.get("seed", cfg.get("seed"))
            motor_cmd_max = robot_cfg.get("motor_cmd_max")
            latch_command = sim_cfg.get("latch_command", False)
            if not isinstance(latch_command, bool):
                raise ConfigurationError(
                    f"latch_command must be true or false, got {latch_command!r}"
                )
            return cls(
                rate=float(sim_cfg.get("rate", 200.0)),
                sensor_rate=float(sim_cfg.get("sensor_rate", 5.0)),
                seed=int(seed) if seed is not None else None,
                history_size=int(sim_cfg.get("history_size", 10)),
                latch_command=latch_command,
                x0=float(robot_cfg.get("x0", 0.0)),
                y0=float(robot_cfg.get("y0", 0.0)),
                theta0=float(robot_cfg.get("theta0", 0.0)),
                motor_cmd_max=float(motor_cmd_max) if motor_cmd_max is not None else None,
                motor_cmd_per_rad_sec=float(robot_cfg.get("motor_cmd_per_rad_sec", 1.0)),
                encoder_ticks_per_rad=float(robot_cfg.get("encoder_ticks_per_rad", 1.0)),
                robot=robot,
                arena_x_length=float(arena_cfg.get("x_length", 5.0)),
                arena_y_length=float(arena_cfg.get("y_length", 3.0)),
                obstacles_x=[float(v) for v in obstacles_cfg.get("x", []) or []],
                obstacles_y=[float(v) for v in obstacles_cfg.get("y", []) or []],
                obstacles_r=float(obstacles_cfg.get("r", 0.0)),
                noise=noise,
                laser=laser,
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid configuration value: {exc}") from exc

    @classmethod
    def from_yaml(cls, path: str) -> "SimConfig":
        return cls.from_dict(load_yaml(path))
