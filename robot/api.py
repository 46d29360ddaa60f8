from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class RobotAPI(ABC):
    """Abstract interface the host uses to drive a differential-drive robot."""

    @abstractmethod
    def reset(self) -> None:
        """Return the robot to its startup state."""

    @abstractmethod
    def read_sensors(self) -> Dict[str, Any]:
        """Return sensor readings (e.g., encoders, laser scan, detections)."""

    @abstractmethod
    def get_state(self) -> Dict[str, float]:
        """Return high-level state: position and orientation."""

    @abstractmethod
    def send_command(self, left: float, right: float) -> None:
        """Send left and right wheel velocity commands to the robot."""

    @abstractmethod
    def stop(self) -> None:
        """Immediately stop the robot (safe state)."""
