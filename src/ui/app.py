"""
pygame application shell for the Atomica sandbox.

Loads a YAML scene, wires the panels and controllers together and runs the
frame loop: events, one controller update (which ticks the engine at the
chosen speed), then render.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

try:
    import pygame
except ImportError:  # pragma: no cover
    pygame = None  # type: ignore

from sim import PhysicsEngine, SimulationSnapshot
from src.config_loader import (
    SimulationBundle,
    build_simulation,
    load_simulation_from_yaml,
    load_yaml_config,
)
from src.logging_setup import configure_logging
from .viewport import SandboxViewport
from .panels import ElementPalettePanel, ControlDockPanel, InspectorPanel
from .controllers import SimulationController, UIController

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_SCENE = PROJECT_ROOT / "config" / "presets" / "water_demo.yaml"


@dataclass
class AppConfig:
    width: int = 1200
    height: int = 800
    title: str = "Atomica Sandbox"
    target_fps: int = 60
    enable_vsync: bool = False

    @classmethod
    def from_mapping(cls, window: Mapping[str, Any]) -> "AppConfig":
        defaults = cls()
        return cls(
            width=int(window.get("width", defaults.width)),
            height=int(window.get("height", defaults.height)),
            title=str(window.get("title", defaults.title)),
            target_fps=int(window.get("target_fps", defaults.target_fps)),
            enable_vsync=bool(window.get("enable_vsync", defaults.enable_vsync)),
        )


@dataclass
class AppState:
    running: bool = True
    clock: Optional["pygame.time.Clock"] = field(default=None, repr=False)


class AtomicaApp:
    """
    High-level pygame application manager.

    Keyboard shortcuts mirror the control dock: SPACE run/pause, `.` single
    step, B bond, F fission, U fusion, E electron jump, arrow keys pan, ESC quit.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        scene_path: Optional[Path] = None,
        engine: Optional[PhysicsEngine] = None,
    ):
        if pygame is None:
            raise RuntimeError("pygame is not installed. Install it to run the sandbox.")
        self.scene_path = Path(scene_path) if scene_path else None
        bundle = self._load_scene() if engine is None else None
        if config is None:
            config = AppConfig.from_mapping(bundle.window if bundle else {})
        self.config = config
        self.state = AppState()
        self.screen: Optional["pygame.Surface"] = None
        self.engine = engine or (bundle.engine if bundle else PhysicsEngine())
        self.sim_controller = SimulationController(self.engine)
        self.viewport: Optional[SandboxViewport] = None
        self.palette_panel: Optional[ElementPalettePanel] = None
        self.control_panel: Optional[ControlDockPanel] = None
        self.inspector_panel: Optional[InspectorPanel] = None
        self.ui_controller: Optional[UIController] = None
        self._latest_snapshot: Optional[SimulationSnapshot] = None

    def setup(self) -> None:
        """Initialize pygame context and create root surfaces."""
        pygame.init()
        flags = pygame.SCALED if self.config.enable_vsync else 0
        self.screen = pygame.display.set_mode((self.config.width, self.config.height), flags)
        pygame.display.set_caption(self.config.title)
        self.state.clock = pygame.time.Clock()

        font = pygame.font.SysFont("Helvetica", 18)
        sidebar_width = 320
        dock_height = 160

        viewport_rect = pygame.Rect(0, 0, self.config.width - sidebar_width, self.config.height - dock_height)
        palette_rect = pygame.Rect(
            self.config.width - sidebar_width, 0, sidebar_width, self.config.height - dock_height - 200
        )
        control_rect = pygame.Rect(
            0, self.config.height - dock_height, self.config.width - sidebar_width, dock_height
        )
        inspector_rect = pygame.Rect(
            self.config.width - sidebar_width,
            palette_rect.bottom,
            sidebar_width,
            self.config.height - palette_rect.bottom,
        )

        self.viewport = SandboxViewport(viewport_rect)
        self.palette_panel = ElementPalettePanel(
            rect=palette_rect,
            font=font,
            on_element_selected=self._on_element_selected,
        )
        self.control_panel = ControlDockPanel(
            rect=control_rect,
            font=font,
            on_toggle_run=self.sim_controller.toggle_running,
            on_step=self._step_once,
            on_reset=self._reset_simulation,
            on_speed_change=self._on_speed_change,
            on_bond=self.sim_controller.bond_first_two,
            on_fission=self.sim_controller.trigger_fission,
            on_fusion=self.sim_controller.trigger_fusion,
            on_electron_jump=self.sim_controller.trigger_electron_jump,
            on_orbital_change=self.sim_controller.adjust_target_orbital,
        )
        self.inspector_panel = InspectorPanel(rect=inspector_rect, font=font)
        self._rebuild_ui_controller()
        self._latest_snapshot = self.sim_controller.snapshot()

    def handle_event(self, event: "pygame.event.Event") -> None:
        """Dispatch a single pygame event."""
        if event.type == pygame.QUIT:
            self.state.running = False
            return

        if event.type == pygame.KEYDOWN:
            controller = self.sim_controller
            if event.key == pygame.K_ESCAPE:
                self.state.running = False
                return
            if event.key == pygame.K_SPACE:
                controller.toggle_running()
            elif event.key == pygame.K_PERIOD:
                controller.step(1)
            elif event.key == pygame.K_b:
                controller.bond_first_two()
            elif event.key == pygame.K_f:
                controller.trigger_fission()
            elif event.key == pygame.K_u:
                controller.trigger_fusion()
            elif event.key == pygame.K_e:
                controller.trigger_electron_jump()

        if self.ui_controller:
            self.ui_controller.handle_event(event)

    def update(self, dt_seconds: float) -> None:
        """Advance simulation and UI state."""
        if self.ui_controller:
            self._latest_snapshot = self.ui_controller.update(dt_seconds)

    def render(self) -> None:
        """Render the current frame."""
        if self.screen is None or self._latest_snapshot is None or self.ui_controller is None:
            return
        self.screen.fill((10, 10, 30))
        self.ui_controller.render(self.screen, self._latest_snapshot)
        pygame.display.flip()

    def run(self) -> None:
        """Main loop entry point."""
        if self.screen is None or self.state.clock is None:
            self.setup()

        assert self.state.clock is not None
        logger.info("Starting sandbox loop at %d fps", self.config.target_fps)
        while self.state.running:
            dt_ms = self.state.clock.tick(self.config.target_fps)
            dt_seconds = dt_ms / 1000.0
            for event in pygame.event.get():
                self.handle_event(event)
            self.update(dt_seconds)
            self.render()

        pygame.quit()

    def spawn_atom(self, atomic_number: int, position_m: tuple[float, float]) -> None:
        """Instantiate a new atom when the user drops an element on the viewport."""
        atom = self.sim_controller.spawn_atom(atomic_number, (position_m[0], position_m[1], 0.0))
        if self.ui_controller:
            self.ui_controller.select_atom_by_id(atom.id)

    def _step_once(self) -> None:
        self.sim_controller.step(1)

    def _reset_simulation(self) -> None:
        bundle = self._load_scene()
        self.engine = bundle.engine if bundle else PhysicsEngine()
        self.sim_controller = SimulationController(self.engine)
        if self.viewport:
            self.viewport.set_selected_atom(None)
        if self.control_panel:
            self.control_panel.on_toggle_run = self.sim_controller.toggle_running
            self.control_panel.on_bond = self.sim_controller.bond_first_two
            self.control_panel.on_fission = self.sim_controller.trigger_fission
            self.control_panel.on_fusion = self.sim_controller.trigger_fusion
            self.control_panel.on_electron_jump = self.sim_controller.trigger_electron_jump
            self.control_panel.on_orbital_change = self.sim_controller.adjust_target_orbital
        self._rebuild_ui_controller()
        self._latest_snapshot = self.sim_controller.snapshot()
        logger.info("Simulation reset")

    def _rebuild_ui_controller(self) -> None:
        if not all([self.viewport, self.palette_panel, self.control_panel, self.inspector_panel]):
            return
        self.ui_controller = UIController(
            simulation_controller=self.sim_controller,
            viewport=self.viewport,
            palette_panel=self.palette_panel,
            control_panel=self.control_panel,
            inspector_panel=self.inspector_panel,
            spawn_atom_callback=self.spawn_atom,
        )
        if self.control_panel:
            self.control_panel.is_running = self.sim_controller.is_running
            self.control_panel.speed_multiplier = self.sim_controller.speed_multiplier

    def _load_scene(self) -> Optional[SimulationBundle]:
        path = self.scene_path or DEFAULT_SCENE
        if not path.exists():
            logger.warning("Scene file %s not found; starting with an empty sandbox", path)
            return None
        return load_simulation_from_yaml(path)

    def _on_element_selected(self, atomic_number: int) -> None:
        logger.debug("Palette selection Z=%d", atomic_number)

    def _on_speed_change(self, multiplier: float) -> None:
        self.sim_controller.speed_multiplier = multiplier


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="atomica", description="Interactive atomic physics sandbox.")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_SCENE,
        help="YAML scene to load (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the logging level from the scene file (DEBUG, INFO, ...)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_arg_parser().parse_args(argv)
    data: Dict[str, Any] = load_yaml_config(args.config) if args.config.exists() else {}
    logging_config = data.get("logging") or {}
    configure_logging(
        level=args.log_level or logging_config.get("level", "INFO"),
        log_file=logging_config.get("file"),
    )
    if not data:
        logger.warning("Scene file %s not found; starting with an empty sandbox", args.config)
    bundle = build_simulation(data)
    logger.info("Loaded scene %r from %s", bundle.metadata.get("name", "?"), args.config)
    app = AtomicaApp(
        config=AppConfig.from_mapping(bundle.window),
        scene_path=args.config,
        engine=bundle.engine,
    )
    app.run()


if __name__ == "__main__":
    main()
