from __future__ import annotations

from typing import Any

import pytest

from diffsim.config import NoiseConfig, SimConfig
from diffsim.kinematics import RobotModel
from diffsim.sensors import LaserConfig


@pytest.fixture
def make_config():
    """Factory for small, noise-free configs; keyword overrides win."""

    def _make(**overrides: Any) -> SimConfig:
        params: dict = dict(
            rate=100.0,
            seed=0,
            robot=RobotModel(track_width=0.16, wheel_radius=0.033, collision_radius=0.11),
            arena_x_length=5.0,
            arena_y_length=3.0,
            noise=NoiseConfig(),
            laser=LaserConfig(sample_count=360),
        )
        params.update(overrides)
        return SimConfig(**params)

    return _make
