from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

from diffsim.simulation import Simulation, TickResult
from robot.api import RobotAPI
from telemetry.logger import TelemetryLogger


class SimRobot(RobotAPI):
    """RobotAPI wrapper around the Simulation.

    ``send_command`` only latches the wheel command; the host advances time
    by calling ``tick``. When a telemetry logger is given, every tick result
    is appended to it.
    """

    def __init__(
        self,
        sim: Simulation,
        telemetry_logger: Optional[TelemetryLogger] = None,
    ) -> None:
        self.sim = sim
        self.telemetry_logger = telemetry_logger
        self.last_result: Optional[TickResult] = None

    def reset(self) -> None:
        self.sim.reset()
        self.last_result = None

    def teleport(self, x: float, y: float, theta: float) -> None:
        self.sim.teleport(x, y, theta)

    def tick(self) -> TickResult:
        self.last_result = self.sim.step()
        if self.telemetry_logger is not None:
            self.telemetry_logger.log_step(self.last_result.to_dict())
        return self.last_result

    def read_sensors(self) -> Dict[str, Any]:
        left, right = self.sim.encoders
        return {
            "pose": self.sim.pose.to_dict(),
            "encoders": {"left": left, "right": right},
            "laser_ranges": self.sim.scan(),
            "detections": [asdict(d) for d in self.sim.detect_obstacles()],
            "collided": self.last_result.collided if self.last_result is not None else False,
        }

    def get_state(self) -> Dict[str, float]:
        state: Dict[str, float] = dict(self.sim.pose.to_dict())
        state["tick"] = float(self.sim.tick)
        return state

    def send_command(self, left: float, right: float) -> None:
        self.sim.set_wheel_command(float(left), float(right))

    def stop(self) -> None:
        # Send zero velocities
        self.send_command(0.0, 0.0)
