from __future__ import annotations

import math
import random

import pytest

from diffsim.kinematics import WheelConfig
from diffsim.noise import NoiseModel


def test_input_noise_skips_stationary_wheel() -> None:
    noise = NoiseModel(random.Random(1), input_variance=0.01)
    out = noise.perturb_increments(WheelConfig(0.0, 0.1))
    assert out.left == 0.0
    assert out.right != 0.1


def test_input_noise_is_reproducible_with_seed() -> None:
    a = NoiseModel(random.Random(42), input_variance=0.04)
    b = NoiseModel(random.Random(42), input_variance=0.04)
    inc = WheelConfig(0.2, -0.3)
    assert a.perturb_increments(inc) == b.perturb_increments(inc)


def test_input_noise_uses_variance_not_std() -> None:
    variance = 0.04
    noise = NoiseModel(random.Random(7), input_variance=variance)
    expected = random.Random(7).gauss(0.0, math.sqrt(variance))
    out = noise.perturb_increments(WheelConfig(0.5, 0.0))
    assert out.left == pytest.approx(0.5 + expected)


def test_slip_stays_within_fraction() -> None:
    noise = NoiseModel(random.Random(3), slip_fraction=0.02)
    for _ in range(200):
        out = noise.apply_slip(WheelConfig(1.0, -1.0))
        assert abs(out.left - 1.0) <= 0.02
        assert abs(out.right + 1.0) <= 0.02


def test_no_noise_configured_is_identity() -> None:
    noise = NoiseModel(random.Random(0))
    wheels = WheelConfig(0.3, 0.4)
    assert noise.perturb_increments(wheels) == wheels
    assert noise.apply_slip(wheels) == wheels
    assert noise.sensor_noise() == 0.0
    assert noise.gauss(0.0) == 0.0


def test_channels_share_one_engine() -> None:
    rng = random.Random(5)
    noise = NoiseModel(rng, input_variance=0.01, sensor_variance=0.01)
    noise.perturb_increments(WheelConfig(0.1, 0.1))
    first_sensor = noise.sensor_noise()

    replay = random.Random(5)
    replay.gauss(0.0, 0.1)
    replay.gauss(0.0, 0.1)
    assert first_sensor == pytest.approx(replay.gauss(0.0, 0.1))


def test_negative_variance_rejected() -> None:
    with pytest.raises(ValueError):
        NoiseModel(random.Random(0), input_variance=-1.0)
