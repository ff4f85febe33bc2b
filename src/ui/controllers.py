"""
Controller layer connecting the pygame UI and the physics engine.

`SimulationController` has no pygame dependency: it owns the frame cadence
and the explicit bonding/nuclear/orbital triggers so they can be driven from
tests or scripts as well as from the panels.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

try:
    import pygame
except ImportError:  # pragma: no cover
    pygame = None  # type: ignore

from sim import Atom, PhysicsEngine, SimulationSnapshot
from src.chem_data import default_mass_number, element_name
from src.physics_utils import Vector, clamp, vector_add

if TYPE_CHECKING:  # pragma: no cover
    from .viewport import SandboxViewport
    from .panels import ElementPalettePanel, ControlDockPanel, InspectorPanel

logger = logging.getLogger(__name__)

BOND_LABEL_SECONDS = 5.0
NUCLEAR_LABEL_SECONDS = 10.0
ORBITAL_LABEL_SECONDS = 8.0
MAX_MESSAGES = 6
FISSILE_MIN_Z = 90
PAN_STEP_PX = 40


@dataclass
class EnergyLabel:
    position: Vector
    energy_ev: float
    remaining_s: float
    text: str

    @property
    def font_scale(self) -> float:
        return clamp(abs(self.energy_ev) / 10.0, 0.5, 2.0)


@dataclass
class SimulationController:
    engine: PhysicsEngine
    is_running: bool = False
    speed_multiplier: float = 1.0
    target_orbital: int = 3
    labels: List[EnergyLabel] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    _step_accumulator: float = 0.0

    def toggle_running(self) -> None:
        self.is_running = not self.is_running

    def step(self, steps: int = 1) -> None:
        for _ in range(steps):
            self.engine.tick()

    def reset(self) -> None:
        self.is_running = False
        self._step_accumulator = 0.0
        self.labels.clear()
        self.messages.clear()

    def update(self, dt_seconds: float) -> None:
        self.update_labels(dt_seconds)
        if not self.is_running:
            return
        self._step_accumulator += self.speed_multiplier
        steps = int(self._step_accumulator)
        if steps >= 1:
            self.step(steps)
            self._step_accumulator -= steps

    def update_labels(self, dt_seconds: float) -> None:
        for label in self.labels:
            label.remaining_s -= dt_seconds
        self.labels = [label for label in self.labels if label.remaining_s > 0.0]

    def snapshot(self) -> SimulationSnapshot:
        return self.engine.snapshot()

    def spawn_atom(
        self,
        atomic_number: int,
        position: Vector,
        mass_number: Optional[int] = None,
    ) -> Atom:
        if mass_number is None:
            mass_number = default_mass_number(atomic_number)
        atom = Atom(atomic_number, max(mass_number, atomic_number), position)
        self.engine.add_atom(atom)
        self._post(f"Created {element_name(atomic_number)}-{atom.mass_number}")
        return atom

    def bond_first_two(self) -> Optional[float]:
        atoms = self.engine.atoms
        if len(atoms) < 2:
            self._post("Bonding needs at least two atoms.")
            return None
        atom_a, atom_b = atoms[0], atoms[1]
        bond = self.engine.bond_atoms(atom_a, atom_b)
        midpoint = tuple((a + b) / 2.0 for a, b in zip(atom_a.position, atom_b.position))
        self._label(midpoint, bond.energy_ev, BOND_LABEL_SECONDS, f"{bond.bond_type.name} {bond.energy_ev:.2f} eV")
        self._report(bond.energy_ev, f"Bonded {atom_a.symbol}-{atom_b.symbol}: {bond.energy_ev:.2f} eV")
        return bond.energy_ev

    def trigger_fission(self) -> Optional[float]:
        atom = next((a for a in self.engine.atoms if a.atomic_number >= FISSILE_MIN_Z), None)
        if atom is None:
            self._post(f"Fission needs an atom with Z >= {FISSILE_MIN_Z}.")
            return None
        energy = self.engine.trigger_fission(atom)
        self._label(vector_add(atom.position, (0.0, 1.0, 0.0)), energy, NUCLEAR_LABEL_SECONDS, _format_ev(energy))
        self._report(energy, f"Fission: {energy:.4e} eV")
        return energy

    def trigger_fusion(self) -> Optional[float]:
        atoms = self.engine.atoms
        if len(atoms) < 2:
            self._post("Fusion needs at least two atoms.")
            return None
        energy = self.engine.trigger_fusion(atoms[0], atoms[1])
        self._label(vector_add(atoms[0].position, (0.0, 1.0, 0.0)), energy, NUCLEAR_LABEL_SECONDS, _format_ev(energy))
        self._report(energy, f"Fusion: {energy:.4e} eV")
        return energy

    def trigger_electron_jump(self, new_level: Optional[int] = None) -> Optional[float]:
        atoms = self.engine.atoms
        if not atoms:
            self._post("Electron jump needs an atom.")
            return None
        atom = atoms[0]
        electrons = atom.electrons
        if not electrons:
            self._post(f"{atom.symbol}#{atom.id} has no electrons.")
            return None
        level = self.target_orbital if new_level is None else new_level
        from_level = electrons[0].orbital_level
        delta_e = self.engine.trigger_electron_jump(atom, level)
        if self.engine.last_diagnostic:
            self._post(self.engine.last_diagnostic)
            return delta_e
        transition = self.engine.orbital_model.describe_transition(from_level, level, delta_e)
        if math.isinf(transition.wavelength_nm):
            text = f"dE = {delta_e:+.3f} eV"
        else:
            text = f"dE = {delta_e:+.3f} eV, {transition.wavelength_nm:.0f} nm ({transition.band.value})"
        self._label(vector_add(atom.position, (0.0, 1.5, 0.0)), delta_e, ORBITAL_LABEL_SECONDS, text)
        self._post(f"n={from_level} -> n={level}: {text}")
        return delta_e

    def adjust_target_orbital(self, delta: int) -> None:
        self.target_orbital = max(1, self.target_orbital + delta)

    def _label(self, position: Vector, energy_ev: float, duration_s: float, text: str) -> None:
        self.labels.append(EnergyLabel(position, energy_ev, duration_s, text))

    def _report(self, energy: float, success: str) -> None:
        if energy == 0.0 and self.engine.last_diagnostic:
            self._post(self.engine.last_diagnostic)
        else:
            self._post(success)

    def _post(self, message: str) -> None:
        logger.info(message)
        self.messages.append(message)
        del self.messages[:-MAX_MESSAGES]


def _format_ev(energy_ev: float) -> str:
    if abs(energy_ev) >= 1e6:
        return f"{energy_ev / 1e6:.2f} MeV"
    return f"{energy_ev:.2f} eV"


def _pan_delta(key: int) -> Optional[tuple[int, int]]:
    # Arrow keys move the camera, so the scene shifts the opposite way.
    if key == pygame.K_LEFT:
        return (PAN_STEP_PX, 0)
    if key == pygame.K_RIGHT:
        return (-PAN_STEP_PX, 0)
    if key == pygame.K_UP:
        return (0, PAN_STEP_PX)
    if key == pygame.K_DOWN:
        return (0, -PAN_STEP_PX)
    return None


class UIController:
    """
    Routes pygame events to panels and handles drag/drop atom placement.
    """

    def __init__(
        self,
        simulation_controller: SimulationController,
        viewport: "SandboxViewport",
        palette_panel: "ElementPalettePanel",
        control_panel: "ControlDockPanel",
        inspector_panel: "InspectorPanel",
        spawn_atom_callback: Callable[[int, tuple[float, float]], None],
    ):
        if pygame is None:
            raise RuntimeError("pygame must be installed to use UIController.")
        self.simulation_controller = simulation_controller
        self.viewport = viewport
        self.palette_panel = palette_panel
        self.control_panel = control_panel
        self.inspector_panel = inspector_panel
        self.spawn_atom = spawn_atom_callback
        self.dragging_atomic_number: Optional[int] = None
        self.selected_atom_id: Optional[int] = None
        self._latest_snapshot: Optional[SimulationSnapshot] = None

    def handle_event(self, event: "pygame.event.Event") -> None:
        if event.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            if hasattr(event, "pos"):
                pos = event.pos
                if self.palette_panel.rect.collidepoint(pos):
                    self.palette_panel.handle_event(event)
                    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                        if self.palette_panel.drag_atomic_number:
                            self.dragging_atomic_number = self.palette_panel.drag_atomic_number
                else:
                    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and self.viewport.rect.collidepoint(pos):
                        if not self.dragging_atomic_number:
                            self._select_atom_at(pos)
                    if event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.dragging_atomic_number:
                        if self.viewport.rect.collidepoint(pos):
                            world_pos = self.viewport.screen_to_world(pos)
                            self.spawn_atom(self.dragging_atomic_number, world_pos)
                    if event.type == pygame.MOUSEBUTTONUP:
                        self.dragging_atomic_number = None
        if event.type == pygame.MOUSEWHEEL and self.viewport.rect.collidepoint(pygame.mouse.get_pos()):
            self.viewport.zoom(1.1 if event.y > 0 else 1.0 / 1.1)
        if event.type == pygame.KEYDOWN:
            delta = _pan_delta(event.key)
            if delta is not None:
                self.viewport.pan(delta)

        self.control_panel.handle_event(event)

    def update(self, dt_seconds: float) -> SimulationSnapshot:
        controller = self.simulation_controller
        controller.update(dt_seconds)
        snapshot = controller.snapshot()
        self._latest_snapshot = snapshot
        self.control_panel.is_running = controller.is_running
        self.control_panel.speed_multiplier = controller.speed_multiplier
        self.control_panel.target_orbital = controller.target_orbital
        self.viewport.set_selected_atom(self.selected_atom_id)
        self._update_inspector(snapshot)
        return snapshot

    def render(self, screen: "pygame.Surface", snapshot: SimulationSnapshot) -> None:
        viewport_surface = screen.subsurface(self.viewport.rect)
        self.viewport.render(viewport_surface, snapshot, self.simulation_controller.labels)
        self.palette_panel.render(screen)
        self.control_panel.render(screen)
        self.inspector_panel.render(screen)

        if self.dragging_atomic_number:
            mx, my = pygame.mouse.get_pos()
            label = self.palette_panel.font.render(
                self.palette_panel.symbol_for(self.dragging_atomic_number), True, (255, 255, 255)
            )
            screen.blit(label, label.get_rect(center=(mx, my)))

    def select_atom_by_id(self, atom_id: Optional[int]) -> None:
        self.selected_atom_id = atom_id
        self.viewport.set_selected_atom(atom_id)
        if self._latest_snapshot:
            self._update_inspector(self._latest_snapshot)

    def _select_atom_at(self, position_px: tuple[int, int]) -> None:
        if self._latest_snapshot is None:
            return
        max_pick_distance = 24.0
        chosen_id: Optional[int] = None
        best_distance = float("inf")
        for atom in self._latest_snapshot.atom_states:
            atom_px = self.viewport.world_to_screen(atom.position)
            distance = math.hypot(atom_px[0] - position_px[0], atom_px[1] - position_px[1])
            if distance < max_pick_distance and distance < best_distance:
                best_distance = distance
                chosen_id = atom.id
        self.select_atom_by_id(chosen_id)

    def _update_inspector(self, snapshot: SimulationSnapshot) -> None:
        engine = self.simulation_controller.engine
        summary = {
            "Atoms": str(len(engine.atoms)),
            "Molecules": str(snapshot.molecule_count),
            "Time (s)": f"{snapshot.time_s:.2f}",
            "Kinetic (eV)": f"{engine.total_kinetic_energy_ev():.3e}",
        }
        self.inspector_panel.messages = list(self.simulation_controller.messages)
        if self.selected_atom_id is None:
            self.inspector_panel.update_selection(None, summary)
            return
        atom = next((a for a in snapshot.atom_states if a.id == self.selected_atom_id), None)
        if atom is None:
            self.selected_atom_id = None
            self.viewport.set_selected_atom(None)
            self.inspector_panel.update_selection(None, summary)
            return
        levels = ", ".join(str(level) for level in atom.orbital_levels[:8]) or "-"
        if len(atom.orbital_levels) > 8:
            levels += ", ..."
        binding = engine.reactor.binding_energy_per_nucleon_ev(atom.atomic_number, atom.mass_number)
        info: Dict[str, str] = {
            "Element": f"{element_name(atom.atomic_number)} ({atom.symbol}-{atom.mass_number})",
            "Position (m)": f"{atom.position[0]:.2f}, {atom.position[1]:.2f}, {atom.position[2]:.2f}",
            "Electrons": str(len(atom.orbital_levels)),
            "Orbital levels": levels,
            "Net charge (e)": f"{atom.net_charge_e:+d}",
            "Binding/nucleon": f"{binding / 1e6:.2f} MeV",
        }
        info.update(summary)
        self.inspector_panel.update_selection(atom.id, info)
