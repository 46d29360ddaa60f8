from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import math

from .errors import ConfigurationError
from .geometry_utils import dot, magnitude, perpendicular, unit_vector, world_to_body
from .kinematics import Pose2D
from .noise import NoiseModel
from .world import Wall, World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaserConfig:
    """Configuration for the simulated 2D laser scanner.

    Attributes
    ----------
    range_max : float
        Maximum range (meters). Obstacles farther than this are ignored.
    range_min : float
        Minimum range (meters), reported in scan metadata.
    angle_increment : float
        Angle between consecutive samples (radians).
    sample_count : int
        Number of samples per scan; 0 disables the scanner.
    resolution : float
        Angular resolution (radians), reported in scan metadata.
    noise_level : float
        Standard deviation of Gaussian noise on valid hits (meters).
    no_return_range : float or None
        Value reported for rays that hit nothing. Defaults to range_max - 1.
    """

    range_max: float = 3.5
    range_min: float = 0.12
    angle_increment: float = 2.0 * math.pi / 360.0
    sample_count: int = 360
    resolution: float = 0.0174533
    noise_level: float = 0.0
    no_return_range: Optional[float] = None

    def __post_init__(self) -> None:
        if self.range_max <= 0.0:
            raise ConfigurationError(f"laser range_max must be positive, got {self.range_max}")
        if self.range_min < 0.0 or self.range_min > self.range_max:
            raise ConfigurationError(
                f"laser range_min must be in [0, range_max], got {self.range_min}"
            )
        if self.sample_count < 0:
            raise ConfigurationError(
                f"laser sample_count must not be negative, got {self.sample_count}"
            )
        if self.noise_level < 0.0:
            raise ConfigurationError(
                f"laser noise_level must not be negative, got {self.noise_level}"
            )

    @property
    def missing_range(self) -> float:
        """Range substituted for rays without an intersection."""
        if self.no_return_range is not None:
            return self.no_return_range
        return self.range_max - 1.0


@dataclass
class LaserScan:
    """One full laser sweep plus the metadata needed to interpret it."""

    angle_min: float
    angle_max: float
    angle_increment: float
    range_min: float
    range_max: float
    ranges: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "angle_min": self.angle_min,
            "angle_max": self.angle_max,
            "angle_increment": self.angle_increment,
            "range_min": self.range_min,
            "range_max": self.range_max,
            "ranges": list(self.ranges),
        }


@dataclass(frozen=True)
class ObstacleDetection:
    """Obstacle position as seen from the robot body frame.

    Attributes
    ----------
    index : int
        Position of the obstacle in the world's obstacle list.
    x : float
        Forward offset (meters), with sensor noise.
    y : float
        Leftward offset (meters), with sensor noise.
    r : float
        Obstacle radius (meters).
    visible : bool
        False when the obstacle lies beyond the detection range.
    """

    index: int
    x: float
    y: float
    r: float
    visible: bool


class RangeSensor:
    """Ray-casting range sensor against circular obstacles and arena walls.

    Parameters
    ----------
    config : LaserConfig
        Laser parameters.
    noise : NoiseModel
        Shared noise source for laser and detection noise.
    detection_range : float
        Cutoff for obstacle detections (meters); negative disables it.
    """

    def __init__(
        self,
        config: LaserConfig,
        noise: NoiseModel,
        detection_range: float = -1.0,
    ) -> None:
        self.config = config
        self.noise = noise
        self.detection_range = detection_range

    # ------------------------------------------------------------------
    # Ray primitives
    # ------------------------------------------------------------------
    def ray_obstacle_distance(
        self,
        ray_x: float,
        ray_y: float,
        to_center_x: float,
        to_center_y: float,
        radius: float,
    ) -> Optional[float]:
        """Distance along a unit ray to the near side of a circle.

        ``to_center`` is the vector from the ray origin to the circle center.
        Returns None when the circle is out of range, behind the origin or
        missed by the ray.
        """
        if magnitude(to_center_x, to_center_y) - radius > self.config.range_max:
            return None

        # Projection of the center onto the ray
        proj = dot(to_center_x, to_center_y, ray_x, ray_y)
        if proj < 0.0:
            return None

        perp_x = to_center_x - proj * ray_x
        perp_y = to_center_y - proj * ray_y
        center_to_ray = magnitude(perp_x, perp_y)
        if center_to_ray > radius:
            return None

        half_chord = math.sqrt(radius * radius - center_to_ray * center_to_ray)
        ray_length = proj - half_chord
        if ray_length < 0.0:
            logger.error(
                "Intersection behind the ray! dist: %.6f ray: (%.4f, %.4f) "
                "to obstacle: (%.4f, %.4f) projected: %.6f obs to ray: %.6f",
                ray_length,
                ray_x,
                ray_y,
                to_center_x,
                to_center_y,
                proj,
                center_to_ray,
            )
        return ray_length

    def ray_wall_distance(
        self,
        ray_x: float,
        ray_y: float,
        wall: Wall,
        origin_x: float,
        origin_y: float,
    ) -> Optional[float]:
        """Distance along a unit ray from origin to a wall segment, or None."""
        perp_x, perp_y = perpendicular(ray_x, ray_y)

        a1_x = wall.x1 - origin_x
        a1_y = wall.y1 - origin_y
        a2_x = wall.x2 - origin_x
        a2_y = wall.y2 - origin_y

        # Along-ray components of both endpoints
        b1 = dot(a1_x, a1_y, ray_x, ray_y)
        b2 = dot(a2_x, a2_y, ray_x, ray_y)
        if b1 < 0.0 and b2 < 0.0:
            return None

        # Across-ray components; same sign means the segment is to one side
        c1 = dot(a1_x, a1_y, perp_x, perp_y)
        c2 = dot(a2_x, a2_y, perp_x, perp_y)
        if c1 * c2 > 0.0:
            return None

        c1_mag = abs(c1)
        c2_mag = abs(c2)
        if c1_mag + c2_mag == 0.0:
            # Ray runs along the segment
            return None

        hit = b1 + c1_mag * (b2 - b1) / (c1_mag + c2_mag)
        logger.debug("wall %s b1=%.4f b2=%.4f c1=%.4f c2=%.4f hit=%.4f", wall, b1, b2, c1, c2, hit)
        if hit < 0.0:
            return None
        return hit

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def cast(self, world: World, pose: Pose2D, body_angle: float) -> Optional[float]:
        """Range along a body-frame angle, or None when nothing is hit.

        The nearest obstacle hit wins. Walls are only tested when no
        obstacle is hit; inside a closed rectangle at most one wall faces
        the ray, so the first wall hit is taken.
        """
        ray_x, ray_y = unit_vector(body_angle + pose.theta)

        closest: Optional[float] = None
        for obs in world.obstacles:
            hit = self.ray_obstacle_distance(ray_x, ray_y, obs.x - pose.x, obs.y - pose.y, obs.r)
            if hit is not None and (closest is None or hit < closest):
                closest = hit

        if closest is None:
            for wall in world.walls:
                hit = self.ray_wall_distance(ray_x, ray_y, wall, pose.x, pose.y)
                if hit is not None:
                    closest = hit
                    break
        return closest

    def scan(self, world: World, pose: Pose2D) -> List[float]:
        """Perform a full sweep from the given pose.

        Parameters
        ----------
        world : World
            Obstacles and arena walls.
        pose : Pose2D
            Scanner pose in world frame.

        Returns
        -------
        list[float]
            ``sample_count`` ranges starting at body angle 0. Rays without
            an intersection report ``config.missing_range``.
        """
        cfg = self.config
        ranges: List[float] = []
        for i in range(cfg.sample_count):
            r = self.cast(world, pose, i * cfg.angle_increment)
            if r is None:
                ranges.append(cfg.missing_range)
                continue
            if cfg.noise_level > 0.0:
                r = max(0.0, r + self.noise.gauss(cfg.noise_level))
            ranges.append(r)
        return ranges

    def laser_scan(self, world: World, pose: Pose2D) -> LaserScan:
        """Full sweep wrapped with its angular and range metadata."""
        cfg = self.config
        return LaserScan(
            angle_min=0.0,
            angle_max=max(cfg.sample_count - 1, 0) * cfg.angle_increment,
            angle_increment=cfg.angle_increment,
            range_min=cfg.range_min,
            range_max=cfg.range_max,
            ranges=self.scan(world, pose),
        )

    def detect_obstacles(self, world: World, pose: Pose2D) -> List[ObstacleDetection]:
        """Report every obstacle in the body frame, flagging those out of range."""
        detections: List[ObstacleDetection] = []
        for i, obs in enumerate(world.obstacles):
            bx, by = world_to_body(obs.x, obs.y, pose.x, pose.y, pose.theta)
            rng = magnitude(bx, by)
            visible = not (self.detection_range >= 0.0 and rng > self.detection_range)
            detections.append(
                ObstacleDetection(
                    index=i,
                    x=bx + self.noise.sensor_noise(),
                    y=by + self.noise.sensor_noise(),
                    r=obs.r,
                    visible=visible,
                )
            )
        return detections

