from __future__ import annotations

import pytest

from diffsim.history import PoseHistory
from diffsim.kinematics import Pose2D


def test_history_evicts_oldest_first() -> None:
    history = PoseHistory(capacity=3)
    for i in range(5):
        history.append(Pose2D(float(i), 0.0, 0.0))

    assert len(history) == 3
    assert [p.x for p in history.poses()] == [2.0, 3.0, 4.0]
    assert history.as_array().shape == (3, 3)


def test_history_partial_fill() -> None:
    history = PoseHistory(capacity=4)
    assert history.poses() == []

    history.append(Pose2D(1.0, 2.0, 3.0))
    assert len(history) == 1
    assert history.poses() == [Pose2D(1.0, 2.0, 3.0)]


def test_history_rejects_zero_capacity() -> None:
    with pytest.raises(ValueError):
        PoseHistory(0)
