"""
Geometry utilities for the differential-drive simulator.

Provides vector helpers, angle normalization and world/body frame
transforms used by kinematics, collision resolution and ray casting.
"""

from __future__ import annotations

from typing import Tuple
import math


# ---------------------------------------------------------------------------
# Tolerances
# ---------------------------------------------------------------------------

EPSILON = 1e-12


def almost_equal(a: float, b: float, tol: float = EPSILON) -> bool:
    """True if |a - b| < tol."""
    return abs(a - b) < tol


# ---------------------------------------------------------------------------
# Angle helpers
# ---------------------------------------------------------------------------


def wrap_angle(theta: float) -> float:
    """Wrap angle to [-pi, pi) radians."""
    return (theta + math.pi) % (2.0 * math.pi) - math.pi


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------


def dot(ax: float, ay: float, bx: float, by: float) -> float:
    return ax * bx + ay * by


def magnitude(dx: float, dy: float) -> float:
    return math.hypot(dx, dy)


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def perpendicular(dx: float, dy: float) -> Tuple[float, float]:
    """Vector rotated +90 degrees (CCW)."""
    return -dy, dx


def unit_vector(angle: float) -> Tuple[float, float]:
    return math.cos(angle), math.sin(angle)


# ---------------------------------------------------------------------------
# Transform: world <-> body frame
# ---------------------------------------------------------------------------


def world_to_body(
    wx: float,
    wy: float,
    ox: float,
    oy: float,
    yaw: float,
) -> Tuple[float, float]:
    """
    Transform world point (wx, wy) to body frame with origin (ox, oy) and heading yaw.
    Body +x is forward (cos(yaw), sin(yaw)).
    """
    dx = wx - ox
    dy = wy - oy
    c = math.cos(yaw)
    s = math.sin(yaw)
    bx = c * dx + s * dy
    by = -s * dx + c * dy
    return bx, by


def body_to_world(
    bx: float,
    by: float,
    ox: float,
    oy: float,
    yaw: float,
) -> Tuple[float, float]:
    """Transform body frame (bx, by) to world with origin (ox, oy) and heading yaw."""
    c = math.cos(yaw)
    s = math.sin(yaw)
    wx = ox + c * bx - s * by
    wy = oy + s * bx + c * by
    return wx, wy


# ---------------------------------------------------------------------------
# Clamping
# ---------------------------------------------------------------------------


def clamp(value: float, vmin: float, vmax: float) -> float:
    """Clamp value to [vmin, vmax]."""
    return max(vmin, min(vmax, value))
