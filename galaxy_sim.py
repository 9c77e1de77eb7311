#!/usr/bin/env python3
"""
Galaxy simulator application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a pygame viewport thread and the Dear PyGui control
  window (running on the main thread).
- Shares a SimulationController that owns the simulation; every access to it is
  guarded by its re-entrant lock.
- Loads the scenario named on the command line (a .csv data file or a .json
  template) or one of the built-in presets.

Threading model
- PygameRenderer runs in a background thread: it handles viewport input, feeds
  wall-clock time to the controller (the only caller of Simulation.step) and
  draws a snapshot of the bodies.
- The UI class runs in the main thread via Dear PyGui. It refreshes readouts and
  the velocity chart on a periodic frame callback.

Running
1) Install dependencies: `pip install pygame dearpygui`
2) Run this module: `python galaxy_sim.py scenarios/earth_moon.csv`
   or `python galaxy_sim.py --preset comet-shower`

Viewport keys: Space pause/resume, P save a PNG screenshot, F re-frame camera,
arrows pan, mouse wheel zoom, left click select a body.
"""

import argparse
import logging
import math
import os
import sys
import threading
import time
from typing import Optional, Tuple

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from galaxy.bodies import Body
from galaxy.camera import Camera2D
from galaxy.constants import (
    BACKGROUND_COLOR,
    COMET_COLOR,
    COMET_SELECTED_COLOR,
    HUD_COLOR,
    MIN_PAINTED_SIZE,
    PLANET_COLOR,
    PLANET_SELECTED_COLOR,
    SAFE_COORD_LIMIT,
    TRAJECTORY_COLOR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from galaxy.controller import SimulationController
from galaxy.errors import ScenarioError
from galaxy.presets import PRESETS
from galaxy.scenario_loader import load_scenario

logger = logging.getLogger("galaxy_sim")

EXPORT_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "export")

PAN_PIXELS_PER_SECOND = 600
# arrow key -> pan direction in screen pixels
PAN_KEYS = {
    pygame.K_LEFT: (1, 0),
    pygame.K_RIGHT: (-1, 0),
    pygame.K_UP: (0, 1),
    pygame.K_DOWN: (0, -1),
}

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: drives the controller, draws bodies and trajectories.
    Handles selection, camera panning and zoom.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.camera = Camera2D()
        self.surface = None
        self.clock = None
        self.running = True
        self.export_requested = False

    def auto_frame_camera(self):
        """Adjust camera to fit all bodies into view with margin."""
        snapshot = self.sim.snapshot()
        if not snapshot.bodies:
            return
        self.camera.fit(self.sim.simulation.world.bounding_rectangle(snapshot.bodies), margin=1.5)

    def run(self):
        pygame.init()
        pygame.display.set_caption("Galaxy Simulator - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.auto_frame_camera()

        last_time = time.perf_counter()
        while self.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events(real_dt)
            self.sim.update(now)
            self.draw()
            if self.export_requested:
                self.export_png()
                self.export_requested = False

            self.clock.tick(120)

        pygame.quit()

    def handle_events(self, real_dt):
        pressed = pygame.key.get_pressed()
        step = PAN_PIXELS_PER_SECOND * real_dt
        for key, (dx, dy) in PAN_KEYS.items():
            if pressed[key]:
                self.camera.pan_pixels(dx * step, dy * step)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYUP:
                if event.key == pygame.K_SPACE:
                    self.sim.toggle_running()
                elif event.key == pygame.K_p:
                    self.export_requested = True
                elif event.key == pygame.K_f:
                    self.auto_frame_camera()

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0 / 1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                world = self.camera.screen_to_world(pygame.mouse.get_pos())
                self.sim.select_at(world, pick_radius=self.camera.mpp * MIN_PAINTED_SIZE)

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        snapshot = self.sim.snapshot()
        for b in snapshot.bodies:
            self.draw_trajectory(surf, b)
        for b in snapshot.bodies:
            self.draw_body(surf, b, b is snapshot.selected)

        days = snapshot.time / 86400.0
        state = "Running" if snapshot.running else "Paused"
        draw_text(surf, "Space: Pause/Resume | P: PNG | F: Frame | Wheel: zoom | Arrows: pan | Click: select",
                  10, 10, HUD_COLOR)
        draw_text(surf, f"Time: {days:.2f} days  Speed-up: {snapshot.speed_up:g}x  "
                        f"Bodies: {len(snapshot.bodies)}  [{state}]", 10, 30, HUD_COLOR)
        pygame.display.flip()

    def painted_size(self, body: Body) -> int:
        return max(MIN_PAINTED_SIZE, int(body.width / self.camera.mpp))

    def draw_body(self, surf, body: Body, selected: bool):
        center = _safe_point(self.camera.world_to_screen(body.position))
        if center is None:
            return
        size = min(self.painted_size(body), SAFE_COORD_LIMIT)
        if body.is_planet:
            color = PLANET_SELECTED_COLOR if selected else PLANET_COLOR
            gfxdraw.filled_circle(surf, center[0], center[1], max(1, size // 2), color)
            gfxdraw.aacircle(surf, center[0], center[1], max(1, size // 2), color)
        else:
            color = COMET_SELECTED_COLOR if selected else COMET_COLOR
            pygame.draw.rect(surf, color, pygame.Rect(center[0] - size // 2, center[1] - size // 2, size, size))

    def draw_trajectory(self, surf, body: Body):
        """Older samples are drawn smaller and fainter than recent ones."""
        positions = body.trajectory.values()
        count = len(positions)
        if count == 0:
            return
        full = self.painted_size(body)
        for i, p in enumerate(positions, start=1):
            pt = _safe_point(self.camera.world_to_screen(p))
            if pt is None:
                continue
            size = max(1, full * i // count)
            alpha = 0.1 + 0.4 * i / count
            color = tuple(int(c * alpha) for c in TRAJECTORY_COLOR)
            if body.is_planet:
                gfxdraw.filled_circle(surf, pt[0], pt[1], max(1, size // 2), color)
            else:
                pygame.draw.rect(surf, color, pygame.Rect(pt[0] - size // 2, pt[1] - size // 2, size, size))

    def export_png(self):
        os.makedirs(EXPORT_DIR, exist_ok=True)
        path = os.path.join(EXPORT_DIR, "galaxy.png")
        try:
            pygame.image.save(self.surface, path)
        except pygame.error as e:
            logger.error("Could not export %s: %s", path, e)
            return
        logger.info("Exported viewport to %s", path)

_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if _cached_font is None:
        if not pygame.font.get_init():
            pygame.font.init()
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))

def _safe_point(pt) -> Optional[Tuple[int, int]]:
    x, y = pt
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    x, y = int(x), int(y)
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: run controls, speed-up, presets, readouts and the
    velocity chart of the selected body.
    """
    def __init__(self, sim: SimulationController, renderer: PygameRenderer):
        self.sim = sim
        self.renderer = renderer
        self.status_msg_id = None
        self.time_id = None
        self.selected_id = None
        self.series_ids = {}  # body name -> line series
        self.x_axis_id = None
        self.y_axis_id = None
        self._build_ui()
        self._schedule_sync()

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Galaxy Simulator - Controls', width=520, height=620)

        with dpg.window(label="Controls", width=500, height=600, pos=(10, 10), tag="main_window"):
            dpg.add_text("Simulation Controls")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Pause/Resume", callback=self._toggle_play)
                dpg.add_button(label="2x Faster", callback=lambda: self.sim.faster())
                dpg.add_button(label="Reset", callback=lambda: self.sim.reset_speed())
                dpg.add_button(label="2x Slower", callback=lambda: self.sim.slower())
            with dpg.group(horizontal=True):
                dpg.add_button(label="Export PNG", callback=self._request_export)
                dpg.add_button(label="Auto-fit Camera", callback=self.renderer.auto_frame_camera)
            self.time_id = dpg.add_text("")

            dpg.add_separator()
            dpg.add_text("Presets")
            with dpg.group(horizontal=True):
                dpg.add_combo(list(PRESETS), default_value=next(iter(PRESETS)), width=260, tag="preset_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_preset(dpg.get_value("preset_combo")))

            dpg.add_separator()
            dpg.add_text("Selected Body")
            self.selected_id = dpg.add_text("(click a body in the viewport)")
            dpg.add_button(label="Clear Charts", callback=lambda: self.sim.clear_charted())
            with dpg.plot(label="Speed of clicked bodies", height=300, width=-1):
                dpg.add_plot_legend()
                self.x_axis_id = dpg.add_plot_axis(dpg.mvXAxis, label="sample")
                self.y_axis_id = dpg.add_plot_axis(dpg.mvYAxis, label="speed (m/s)")

            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _schedule_sync(self):
        """Reschedule the periodic sync callback (~10Hz at 60 FPS)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str):
        dpg.set_value(self.status_msg_id, msg)

    def _toggle_play(self):
        running = self.sim.toggle_running()
        self._set_status(f"Simulation {'running' if running else 'paused'}.")

    def _request_export(self):
        self.renderer.export_requested = True
        self._set_status(f"Exporting to {EXPORT_DIR}")

    def load_preset(self, name: str):
        scenario = PRESETS[name]()
        self.sim.replace_simulation(scenario.build(), time.perf_counter())
        self.renderer.auto_frame_camera()
        self._set_status(f"Loaded preset: {scenario.name}")

    def _sync_ui_with_sim(self):
        snapshot = self.sim.snapshot()
        dpg.set_value(self.time_id, f"Time: {snapshot.time / 86400.0:.2f} days, "
                                    f"speed-up {snapshot.speed_up:g}x, {len(snapshot.bodies)} bodies")
        b = snapshot.selected
        if b is not None:
            dpg.set_value(self.selected_id,
                          f"{b.name} ({b.kind.value}) m={b.mass:.3e} kg |v|={b.velocity.magnitude:.3e} m/s")
        else:
            dpg.set_value(self.selected_id, "(click a body in the viewport)")
        self._sync_charts()
        self._schedule_sync()

    def _sync_charts(self):
        """One line series per charted body; series of bodies no longer charted are dropped."""
        charted = self.sim.charted_speeds()
        names = {name for name, _ in charted}
        for name in list(self.series_ids):
            if name not in names:
                dpg.delete_item(self.series_ids.pop(name))
        for name, speeds in charted:
            if name not in self.series_ids:
                self.series_ids[name] = dpg.add_line_series([], [], label=name, parent=self.y_axis_id)
            dpg.set_value(self.series_ids[name], [list(range(len(speeds))), speeds])
        if charted:
            dpg.fit_axis_data(self.x_axis_id)
            dpg.fit_axis_data(self.y_axis_id)

# ============================================================
# Application Entry
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Gravitational N-body simulator with collisions.")
    parser.add_argument("scenario", nargs="?", help="scenario file (.csv data file or .json template)")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="earth-moon",
                        help="built-in scenario used when no file is given")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every simulation step")
    return parser.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')
    try:
        scenario = load_scenario(args.scenario) if args.scenario else PRESETS[args.preset]()
        simulation = scenario.build()
    except ScenarioError as e:
        logger.error("%s", e)
        return 1

    sim = SimulationController(simulation)
    renderer = PygameRenderer(sim)
    ui = UI(sim, renderer)

    with dpg.handler_registry():
        dpg.add_key_release_handler(key=dpg.mvKey_Spacebar, callback=lambda: ui._toggle_play())

    sim.launch(time.perf_counter())
    renderer.start()
    try:
        dpg.start_dearpygui()
    finally:
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()
    return 0

if __name__ == "__main__":
    sys.exit(main())
