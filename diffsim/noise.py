from __future__ import annotations

import math
import random

from .geometry_utils import almost_equal
from .kinematics import WheelConfig


class NoiseModel:
    """Stochastic actuation and sensing noise.

    Three channels share one pseudorandom engine:

    - input noise: Gaussian added to each moving wheel's per-step increment
    - slip noise: uniform drift added to the wheel state after integration
    - sensor noise: Gaussian added to each reported detection coordinate

    The engine is a plain ``random.Random`` and is not thread-safe; a host
    driving the model from several threads must serialize access to it or
    hand each writer its own engine.

    Parameters
    ----------
    rng : random.Random
        Shared engine. Seed it for reproducible runs.
    input_variance : float
        Variance of the per-step wheel increment noise (rad^2).
    slip_fraction : float
        Half-width of the uniform slip interval (rad).
    sensor_variance : float
        Variance of the detection coordinate noise (m^2).
    """

    def __init__(
        self,
        rng: random.Random,
        input_variance: float = 0.0,
        slip_fraction: float = 0.0,
        sensor_variance: float = 0.0,
    ) -> None:
        if input_variance < 0.0 or sensor_variance < 0.0:
            raise ValueError("noise variances must not be negative")
        self.rng = rng
        self.input_variance = input_variance
        self.slip_fraction = abs(slip_fraction)
        self.sensor_variance = sensor_variance

        self._input_std = math.sqrt(input_variance)
        self._sensor_std = math.sqrt(sensor_variance)

    # ------------------------------------------------------------------
    # Actuation
    # ------------------------------------------------------------------
    def perturb_increments(self, increments: WheelConfig) -> WheelConfig:
        """Add input noise to the wheels that are actually commanded to turn."""
        left = increments.left
        right = increments.right
        if self._input_std > 0.0:
            if not almost_equal(left, 0.0):
                left += self.rng.gauss(0.0, self._input_std)
            if not almost_equal(right, 0.0):
                right += self.rng.gauss(0.0, self._input_std)
        return WheelConfig(left, right)

    def apply_slip(self, wheels: WheelConfig) -> WheelConfig:
        """Return wheel state with slip drift; the result replaces the true state."""
        if self.slip_fraction <= 0.0:
            return wheels
        return WheelConfig(
            wheels.left + self.rng.uniform(-self.slip_fraction, self.slip_fraction),
            wheels.right + self.rng.uniform(-self.slip_fraction, self.slip_fraction),
        )

    # ------------------------------------------------------------------
    # Sensing
    # ------------------------------------------------------------------
    def sensor_noise(self) -> float:
        """One draw of detection noise for a single reported coordinate."""
        if self._sensor_std <= 0.0:
            return 0.0
        return self.rng.gauss(0.0, self._sensor_std)

    def gauss(self, std: float) -> float:
        """Zero-mean Gaussian draw with the given standard deviation."""
        if std <= 0.0:
            return 0.0
        return self.rng.gauss(0.0, std)
