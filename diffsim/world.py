from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from .errors import ConfigurationError


@dataclass(frozen=True)
class Obstacle:
    """Static circular obstacle in world coordinates.

    Attributes
    ----------
    x : float
        X coordinate of the circle center (meters).
    y : float
        Y coordinate of the circle center (meters).
    r : float
        Radius (meters).
    """

    x: float
    y: float
    r: float


@dataclass(frozen=True)
class Wall:
    """Arena boundary segment from (x1, y1) to (x2, y2)."""

    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def endpoints(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        return (self.x1, self.y1), (self.x2, self.y2)


def arena_walls(x_length: float, y_length: float) -> Tuple[Wall, ...]:
    """Four segments of a rectangle centered on the world origin."""
    hx = x_length / 2.0
    hy = y_length / 2.0
    return (
        Wall(hx, hy, -hx, hy),  # +y
        Wall(-hx, hy, -hx, -hy),  # -x
        Wall(-hx, -hy, hx, -hy),  # -y
        Wall(hx, -hy, hx, hy),  # +x
    )


class World:
    """Static arena: rectangular boundary plus circular obstacles.

    Coordinates are centered on the arena:
    - x in [-x_length/2, x_length/2]
    - y in [-y_length/2, y_length/2]

    Obstacles and walls never change after construction. Obstacle order is
    significant, collisions are resolved in this order.

    Parameters
    ----------
    x_length : float
        Arena size along x (meters).
    y_length : float
        Arena size along y (meters).
    obstacles : list[Obstacle]
        Obstacle list, in configured order.
    """

    def __init__(
        self,
        x_length: float,
        y_length: float,
        obstacles: Optional[Sequence[Obstacle]] = None,
    ) -> None:
        if x_length <= 0.0 or y_length <= 0.0:
            raise ConfigurationError(
                f"arena dimensions must be positive, got {x_length} x {y_length}"
            )
        self.x_length = float(x_length)
        self.y_length = float(y_length)
        self.obstacles: Tuple[Obstacle, ...] = tuple(obstacles) if obstacles is not None else ()
        self.walls: Tuple[Wall, ...] = arena_walls(self.x_length, self.y_length)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_xy(
        cls,
        x_length: float,
        y_length: float,
        xs: Sequence[float],
        ys: Sequence[float],
        radius: float,
    ) -> "World":
        """Create world from parallel obstacle coordinate lists sharing one radius.

        Raises
        ------
        ConfigurationError
            If the coordinate lists differ in length or the radius is negative.
        """
        if len(xs) != len(ys):
            raise ConfigurationError(
                f"Mismatch obstacle x y numbers: {len(xs)} x values, {len(ys)} y values"
            )
        if radius < 0.0:
            raise ConfigurationError(f"obstacle radius must not be negative, got {radius}")
        obstacles = [Obstacle(float(x), float(y), float(radius)) for x, y in zip(xs, ys)]
        return cls(x_length=x_length, y_length=y_length, obstacles=obstacles)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize world description to a Python dict."""
        return {
            "arena": {"x_length": self.x_length, "y_length": self.y_length},
            "obstacles": {
                "x": [o.x for o in self.obstacles],
                "y": [o.y for o in self.obstacles],
                "r": self.obstacle_radius,
            },
        }

    # ------------------------------------------------------------------
    # Utility
    # ------------------------------------------------------------------
    @property
    def obstacle_radius(self) -> float:
        """Shared obstacle radius, 0.0 for an empty world."""
        return self.obstacles[0].r if self.obstacles else 0.0

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Return (xmin, ymin, xmax, ymax)."""
        hx = self.x_length / 2.0
        hy = self.y_length / 2.0
        return (-hx, -hy, hx, hy)

    def is_inside(self, x: float, y: float) -> bool:
        xmin, ymin, xmax, ymax = self.bounds
        return xmin <= x <= xmax and ymin <= y <= ymax

