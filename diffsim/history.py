from __future__ import annotations

from typing import List

import numpy as np

from .kinematics import Pose2D


class PoseHistory:
    """Fixed-capacity ring buffer of poses.

    Poses are stored as rows (x, y, theta) of a preallocated array. Once
    full, each append overwrites the oldest row.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"history capacity must be positive, got {capacity}")
        self.capacity = int(capacity)
        self._buffer = np.zeros((self.capacity, 3), dtype=np.float64)
        self._head = 0  # next write position
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def append(self, pose: Pose2D) -> None:
        self._buffer[self._head] = (pose.x, pose.y, pose.theta)
        self._head = (self._head + 1) % self.capacity
        self._size = min(self._size + 1, self.capacity)

    def as_array(self) -> np.ndarray:
        """Copy of stored poses, oldest first, shape (len, 3)."""
        if self._size < self.capacity:
            return self._buffer[: self._size].copy()
        return np.roll(self._buffer, -self._head, axis=0)

    def poses(self) -> List[Pose2D]:
        return [Pose2D(float(x), float(y), float(t)) for x, y, t in self.as_array()]
