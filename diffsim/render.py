from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
import math

import pygame

from .geometry_utils import body_to_world, wrap_angle
from .kinematics import Pose2D
from .sensors import LaserConfig, ObstacleDetection
from .world import World


Color = Tuple[int, int, int]

THEME = {
    "bg": (18, 22, 32),
    "grid": (28, 34, 48),
    "wall": (220, 60, 60),
    "obstacle_fill": (170, 50, 50),
    "obstacle_edge": (230, 90, 90),
    "detection": (90, 230, 120),
    "detection_hidden": (60, 90, 70),
    "robot_fill": (100, 220, 255),
    "robot_outline": (40, 140, 200),
    "robot_arrow": (140, 240, 255),
    "trail_start": (60, 160, 200),
    "trail_end": (100, 220, 255),
    "hud_bg": (28, 34, 48),
    "hud_border": (55, 65, 88),
    "hud_text": (200, 220, 255),
    "laser_close": (255, 90, 90),
    "laser_far": (100, 200, 255),
}


class PygameRenderer:
    """Top-down 2D view of the arena, obstacles, robot and sensors.

    Coordinates:
    - The arena center (world origin) is mapped to the window center.
    - Y axis is flipped so that world +y is up while screen y increases downward.
    """

    def __init__(
        self,
        world: World,
        window_width: int,
        window_height: int,
        collision_radius: float,
        show_laser: bool = True,
        show_trail: bool = True,
    ) -> None:
        pygame.init()
        pygame.display.set_caption("Differential Drive Simulation")
        self.screen = pygame.display.set_mode((window_width, window_height))
        self.clock = pygame.time.Clock()

        self.world = world
        self.window_width = window_width
        self.window_height = window_height
        self.collision_radius = collision_radius
        self.show_laser = show_laser
        self.show_trail = show_trail

        # Scale from meters to pixels
        self.scale_x = window_width / world.x_length
        self.scale_y = window_height / world.y_length

    # ------------------------------------------------------------------
    # Coordinate transforms
    # ------------------------------------------------------------------
    def _world_to_screen(self, x: float, y: float) -> Tuple[int, int]:
        """Convert world coordinates to pygame screen coordinates."""
        xmin, ymin, _, _ = self.world.bounds
        sx = int((x - xmin) * self.scale_x)
        sy = int(self.window_height - (y - ymin) * self.scale_y)
        return sx, sy

    def _meters_to_pixels(self, r: float) -> int:
        """Convert a length in meters to pixels (average of axes)."""
        return int(r * 0.5 * (self.scale_x + self.scale_y))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _draw_grid(self) -> None:
        step_m = 0.5
        xmin, ymin, xmax, ymax = self.world.bounds
        x = 0.0
        while x <= xmax:
            for gx in {x, -x}:
                pygame.draw.line(
                    self.screen, THEME["grid"], self._world_to_screen(gx, ymin), self._world_to_screen(gx, ymax), 1
                )
            x += step_m
        y = 0.0
        while y <= ymax:
            for gy in {y, -y}:
                pygame.draw.line(
                    self.screen, THEME["grid"], self._world_to_screen(xmin, gy), self._world_to_screen(xmax, gy), 1
                )
            y += step_m

    def draw(
        self,
        pose: Pose2D,
        trail: Optional[Sequence[Pose2D]] = None,
        laser_ranges: Optional[List[float]] = None,
        laser_config: Optional[LaserConfig] = None,
        detections: Optional[List[ObstacleDetection]] = None,
        tick: int = 0,
        fps: float = 0.0,
    ) -> None:
        """Render one frame."""
        self.screen.fill(THEME["bg"])
        self._draw_grid()

        for wall in self.world.walls:
            start, end = wall.endpoints
            pygame.draw.line(
                self.screen, THEME["wall"], self._world_to_screen(*start), self._world_to_screen(*end), 3
            )

        for obs in self.world.obstacles:
            center = self._world_to_screen(obs.x, obs.y)
            radius_px = max(2, self._meters_to_pixels(obs.r))
            pygame.draw.circle(self.screen, THEME["obstacle_fill"], center, radius_px)
            pygame.draw.circle(self.screen, THEME["obstacle_edge"], center, radius_px, 2)

        if self.show_trail and trail is not None and len(trail) >= 2:
            pts = [self._world_to_screen(p.x, p.y) for p in trail]
            n = len(pts) - 1
            start, end = THEME["trail_start"], THEME["trail_end"]
            for i in range(n):
                t = (i + 1) / max(n, 1)
                color = tuple(int(start[k] + t * (end[k] - start[k])) for k in range(3))
                pygame.draw.line(self.screen, color, pts[i], pts[i + 1], 2 if i == n - 1 else 1)

        if self.show_laser and laser_ranges and laser_config is not None:
            self._draw_laser(pose, laser_ranges, laser_config)

        if detections:
            self._draw_detections(pose, detections)

        self._draw_robot(pose)
        self._draw_hud(pose, tick, fps)
        pygame.display.flip()

    def _draw_robot(self, pose: Pose2D) -> None:
        center = self._world_to_screen(pose.x, pose.y)
        radius_px = max(2, self._meters_to_pixels(self.collision_radius))
        pygame.draw.circle(self.screen, THEME["robot_fill"], center, radius_px, 0)
        pygame.draw.circle(self.screen, THEME["robot_outline"], center, radius_px, 2)

        arrow_len = 2.0 * self.collision_radius
        head = self._world_to_screen(
            pose.x + math.cos(pose.theta) * arrow_len,
            pose.y + math.sin(pose.theta) * arrow_len,
        )
        pygame.draw.line(self.screen, THEME["robot_arrow"], center, head, 3)

    def _draw_laser(self, pose: Pose2D, ranges: List[float], config: LaserConfig) -> None:
        origin = self._world_to_screen(pose.x, pose.y)
        close, far = THEME["laser_close"], THEME["laser_far"]
        for i, r in enumerate(ranges):
            t = min(1.0, max(0.0, r / config.range_max))
            color = tuple(int(close[k] + t * (far[k] - close[k])) for k in range(3))
            angle = pose.theta + i * config.angle_increment
            end = self._world_to_screen(pose.x + r * math.cos(angle), pose.y + r * math.sin(angle))
            pygame.draw.line(self.screen, color, origin, end, 1)

    def _draw_detections(self, pose: Pose2D, detections: List[ObstacleDetection]) -> None:
        for det in detections:
            wx, wy = body_to_world(det.x, det.y, pose.x, pose.y, pose.theta)
            color = THEME["detection"] if det.visible else THEME["detection_hidden"]
            radius_px = max(2, self._meters_to_pixels(det.r))
            pygame.draw.circle(self.screen, color, self._world_to_screen(wx, wy), radius_px, 2)

    def _draw_hud(self, pose: Pose2D, tick: int, fps: float) -> None:
        pad = 10
        font = pygame.font.SysFont("monospace", 13)
        text = f"  tick={tick}  x={pose.x:.3f} y={pose.y:.3f} th={wrap_angle(pose.theta):.3f}  FPS={fps:.1f}  "
        surf = font.render(text, True, THEME["hud_text"])
        r = surf.get_rect(topleft=(pad, pad))
        panel = r.inflate(pad, pad)
        pygame.draw.rect(self.screen, THEME["hud_bg"], panel)
        pygame.draw.rect(self.screen, THEME["hud_border"], panel, 1)
        self.screen.blit(surf, (panel.x + 4, panel.y + 4))

    def tick(self, target_fps: int) -> float:
        """Cap frame rate and return achieved FPS."""
        fps = self.clock.get_fps()
        self.clock.tick(target_fps)
        return fps

    def close(self) -> None:
        pygame.quit()
