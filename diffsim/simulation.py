from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import logging
import random

from .collision import CollisionResolver
from .config import SimConfig
from .geometry_utils import clamp
from .history import PoseHistory
from .kinematics import KinematicModel, Pose2D, WheelConfig, WheelVelocity
from .noise import NoiseModel
from .sensors import LaserScan, ObstacleDetection, RangeSensor
from .world import World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    """Outputs of one main tick.

    Attributes
    ----------
    tick : int
        Tick counter after this step.
    pose : Pose2D
        Committed pose.
    wheels : WheelConfig
        Wheel angles including slip (rad).
    encoders : tuple[float, float]
        Wheel angles in encoder ticks (left, right).
    collided : bool
        True if collision resolution moved the robot this tick.
    """

    tick: int
    pose: Pose2D
    wheels: WheelConfig
    encoders: Tuple[float, float]
    collided: bool

    def to_dict(self) -> Dict[str, Any]:
        """Flat record for logging/telemetry."""
        return {
            "tick": self.tick,
            "x": self.pose.x,
            "y": self.pose.y,
            "theta": self.pose.theta,
            "wheel_left": self.wheels.left,
            "wheel_right": self.wheels.right,
            "encoder_left": self.encoders[0],
            "encoder_right": self.encoders[1],
            "collided": self.collided,
        }


class Simulation:
    """Differential-drive robot in a static arena, advanced one tick at a time.

    The host feeds wheel commands with ``set_wheel_command`` and calls
    ``step`` at the configured rate. Sensor queries (``scan``,
    ``laser_scan``, ``detect_obstacles``) read the last committed pose and
    must only be issued between ticks. All state changes happen in
    ``step``, ``reset`` and ``teleport``.

    Parameters
    ----------
    config : SimConfig
        Startup configuration.
    world : World, optional
        Arena and obstacles. Built from ``config`` when omitted.
    rng : random.Random, optional
        Shared noise engine. A new one seeded with ``config.seed`` is
        created when omitted.

    Raises
    ------
    ConfigurationError
        If the obstacle lists in ``config`` do not match.
    """

    def __init__(
        self,
        config: SimConfig,
        world: Optional[World] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.world = world if world is not None else config.build_world()
        self.rng = rng if rng is not None else random.Random(config.seed)

        self.kinematics = KinematicModel(config.robot)
        self.noise = NoiseModel(
            self.rng,
            input_variance=config.noise.input_noise,
            slip_fraction=config.noise.slip_fraction,
            sensor_variance=config.noise.basic_sensor_variance,
        )
        self.collision = CollisionResolver(config.robot.collision_radius, self.world.obstacles)
        self.sensor = RangeSensor(
            config.laser,
            self.noise,
            detection_range=config.noise.max_range,
        )
        if config.laser.sample_count == 0:
            logger.warning("Requested 0 samples in sim laser! Laser scans will be empty.")

        self._pose = config.initial_pose
        self._wheels = WheelConfig()
        self._tick = 0
        self._pending_command: Optional[WheelVelocity] = None
        self._latched_command = WheelVelocity()
        self.history = PoseHistory(config.history_size)

    @classmethod
    def from_yaml(cls, path: str, rng: Optional[random.Random] = None) -> "Simulation":
        return cls(SimConfig.from_yaml(path), rng=rng)

    # ------------------------------------------------------------------
    # Host input
    # ------------------------------------------------------------------
    def set_wheel_command(self, left: float, right: float) -> None:
        """Store the latest wheel command, in motor command units."""
        limit = self.config.motor_cmd_max
        if limit is not None:
            left = clamp(left, -limit, limit)
            right = clamp(right, -limit, limit)
        self._pending_command = WheelVelocity(float(left), float(right))

    def _take_command(self) -> WheelVelocity:
        if self._pending_command is not None:
            self._latched_command = self._pending_command
            self._pending_command = None
            return self._latched_command
        if self.config.latch_command:
            return self._latched_command
        return WheelVelocity()

    # ------------------------------------------------------------------
    # Main tick
    # ------------------------------------------------------------------
    def step(self) -> TickResult:
        """Advance the simulation by one tick."""
        command = self._take_command()
        velocity = command * self.config.motor_cmd_per_rad_sec

        increments = self.kinematics.wheel_increments(velocity, self.config.dt)
        noisy_increments = self.noise.perturb_increments(increments)
        pose, wheels = self.kinematics.integrate(self._pose, self._wheels, noisy_increments)

        pose, collided = self.collision.resolve(pose)

        # Slip drifts the wheel state itself, so it carries into the next tick
        wheels = self.noise.apply_slip(wheels)

        self._pose = pose
        self._wheels = wheels
        self._tick += 1
        self.history.append(pose)

        logger.debug(
            "tick %d cmd=%s increments=%s noisy=%s pose=%s wheels=%s collided=%s",
            self._tick,
            command,
            increments,
            noisy_increments,
            pose,
            wheels,
            collided,
        )
        return TickResult(
            tick=self._tick,
            pose=pose,
            wheels=wheels,
            encoders=self.encoders,
            collided=collided,
        )

    def run(self, ticks: int) -> List[TickResult]:
        """Step ``ticks`` times with the current command handling."""
        return [self.step() for _ in range(ticks)]

    # ------------------------------------------------------------------
    # Host-triggered operations
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Zero the tick counter and restore the startup pose."""
        self._tick = 0
        self._pose = self.config.initial_pose
        logger.info("Simulation reset to %s", self._pose)

    def teleport(self, x: float, y: float, theta: float) -> None:
        """Place the robot at (x, y, theta), bypassing kinematics and collisions."""
        self._pose = Pose2D(float(x), float(y), float(theta))
        if not self.world.is_inside(self._pose.x, self._pose.y):
            logger.warning("Teleported outside the arena to %s", self._pose)
        elif self.collision.is_colliding(self._pose):
            logger.warning("Teleported into an obstacle at %s", self._pose)
        else:
            logger.info("Teleported to %s", self._pose)

    # ------------------------------------------------------------------
    # Sensors
    # ------------------------------------------------------------------
    def scan(self) -> List[float]:
        return self.sensor.scan(self.world, self._pose)

    def laser_scan(self) -> LaserScan:
        return self.sensor.laser_scan(self.world, self._pose)

    def detect_obstacles(self) -> List[ObstacleDetection]:
        return self.sensor.detect_obstacles(self.world, self._pose)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def pose(self) -> Pose2D:
        return self._pose

    @property
    def wheels(self) -> WheelConfig:
        return self._wheels

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def encoders(self) -> Tuple[float, float]:
        """Wheel angles converted to encoder ticks (left, right)."""
        k = self.config.encoder_ticks_per_rad
        return k * self._wheels.left, k * self._wheels.right

    def to_dict(self) -> Dict[str, Any]:
        """Serialize current state to a dict for logging/telemetry."""
        return {
            "tick": self._tick,
            "pose": self._pose.to_dict(),
            "wheels": self._wheels.to_dict(),
            "world": self.world.to_dict(),
        }
