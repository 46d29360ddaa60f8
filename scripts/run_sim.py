from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Ensure project root is on path when running this script directly
_script_dir = Path(__file__).resolve().parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pygame

from diffsim.config import SimConfig, load_yaml
from diffsim.render import PygameRenderer
from diffsim.sensors import ObstacleDetection
from diffsim.simulation import Simulation
from robot.sim_robot import SimRobot
from telemetry.logger import TelemetryLogger

logger = logging.getLogger("run_sim")

WHEEL_CMD_STEP = 20.0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Differential-drive simulator with keyboard teleop.")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/sim.yaml",
        help="Path to sim YAML config.",
    )
    parser.add_argument("--headless", action="store_true", help="Run without a window.")
    parser.add_argument("--ticks", type=int, default=1000, help="Ticks to run in headless mode.")
    parser.add_argument("--left", type=float, default=0.0, help="Left wheel command (headless).")
    parser.add_argument("--right", type=float, default=0.0, help="Right wheel command (headless).")
    parser.add_argument("--telemetry", type=str, default=None, help="JSONL telemetry output path.")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def run_headless(robot: SimRobot, ticks: int, left: float, right: float, sensor_every: int) -> None:
    for i in range(ticks):
        robot.send_command(left, right)
        result = robot.tick()
        if (i + 1) % sensor_every == 0:
            visible = sum(1 for d in robot.sim.detect_obstacles() if d.visible)
            logger.info(
                "tick %d pose=(%.3f, %.3f, %.3f) collided=%s visible_obstacles=%d",
                result.tick,
                result.pose.x,
                result.pose.y,
                result.pose.theta,
                result.collided,
                visible,
            )


def run_interactive(robot: SimRobot, render_cfg: Dict[str, Any], sensor_every: int) -> None:
    sim = robot.sim
    cfg = sim.config
    renderer = PygameRenderer(
        world=sim.world,
        window_width=int(render_cfg.get("window_width", 1000)),
        window_height=int(render_cfg.get("window_height", 600)),
        collision_radius=cfg.robot.collision_radius,
        show_laser=bool(render_cfg.get("show_laser", True)),
        show_trail=bool(render_cfg.get("show_trail", True)),
    )
    fps_target = int(render_cfg.get("fps", 60))
    ticks_per_frame = max(1, int(round(cfg.rate / fps_target)))

    left_cmd = 0.0
    right_cmd = 0.0
    ranges: List[float] = []
    detections: List[ObstacleDetection] = []

    print("Keyboard teleop: W/S forward/back, A/D turn, SPACE stop, R reset, T teleport home, ESC quit.")

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    left_cmd = 0.0
                    right_cmd = 0.0
                elif event.key == pygame.K_w:
                    left_cmd += WHEEL_CMD_STEP
                    right_cmd += WHEEL_CMD_STEP
                elif event.key == pygame.K_s:
                    left_cmd -= WHEEL_CMD_STEP
                    right_cmd -= WHEEL_CMD_STEP
                elif event.key == pygame.K_a:
                    left_cmd -= WHEEL_CMD_STEP
                    right_cmd += WHEEL_CMD_STEP
                elif event.key == pygame.K_d:
                    left_cmd += WHEEL_CMD_STEP
                    right_cmd -= WHEEL_CMD_STEP
                elif event.key == pygame.K_r:
                    robot.reset()
                elif event.key == pygame.K_t:
                    robot.teleport(0.0, 0.0, 0.0)

        for _ in range(ticks_per_frame):
            robot.send_command(left_cmd, right_cmd)
            result = robot.tick()
            if result.tick % sensor_every == 0 or not ranges:
                ranges = sim.scan()
                detections = sim.detect_obstacles()

        fps = renderer.tick(fps_target)
        renderer.draw(
            pose=sim.pose,
            trail=sim.history.poses(),
            laser_ranges=ranges,
            laser_config=cfg.laser,
            detections=detections,
            tick=sim.tick,
            fps=fps,
        )

    renderer.close()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    raw_cfg = load_yaml(args.config)
    sim = Simulation(SimConfig.from_dict(raw_cfg))
    logger.info("Starting simulation: %s", sim.to_dict())
    sensor_every = max(1, int(round(sim.config.rate / sim.config.sensor_rate)))

    telemetry = TelemetryLogger(args.telemetry) if args.telemetry else None
    robot = SimRobot(sim, telemetry_logger=telemetry)
    try:
        if args.headless:
            run_headless(robot, args.ticks, args.left, args.right, sensor_every)
        else:
            run_interactive(robot, raw_cfg.get("render", {}) or {}, sensor_every)
    finally:
        if telemetry is not None:
            telemetry.close()


if __name__ == "__main__":
    main()
