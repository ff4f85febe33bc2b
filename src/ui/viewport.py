"""
Sandbox viewport rendering helpers for the pygame UI.

The viewport consumes `SimulationSnapshot` objects from `sim.py` and draws
bonds, nuclei, electrons and transient energy labels with basic pygame
primitives. The z axis is ignored; the scene is viewed from above.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

try:
    import pygame
except ImportError:  # pragma: no cover
    pygame = None  # type: ignore

from src.chem_data import BondType, element_color
from src.physics_utils import Vector

if TYPE_CHECKING:  # pragma: no cover
    from sim import AtomState, BondState, SimulationSnapshot
    from .controllers import EnergyLabel

Color = Tuple[int, int, int]


@dataclass
class ViewportConfig:
    width: int
    height: int
    background_color: Color = (15, 15, 30)
    nucleus_radius_px: int = 10
    electron_radius_px: int = 3
    electron_ring_px: int = 14
    electron_color: Color = (120, 200, 255)
    bond_color: Color = (180, 180, 180)
    selection_color: Color = (255, 255, 0)
    label_color: Color = (255, 230, 120)
    label_font_size: int = 16


class SandboxViewport:
    """
    Manages world-to-screen transforms and rendering calls for the sandbox.
    """

    def __init__(self, rect: "pygame.Rect", config: Optional[ViewportConfig] = None):
        if pygame is None:
            raise RuntimeError("pygame must be installed to use SandboxViewport.")
        self.rect = rect
        self.config = config or ViewportConfig(width=rect.width, height=rect.height)
        self.pan_offset_m = (0.0, 0.0)
        self.zoom_m_to_px = 40.0  # pixels per metre
        self.selected_atom_id: Optional[int] = None
        self._fonts: Dict[int, "pygame.font.Font"] = {}

    def world_to_screen(self, position_m: Vector) -> Tuple[int, int]:
        x_m, y_m, _ = position_m
        px = int((x_m - self.pan_offset_m[0]) * self.zoom_m_to_px) + self.rect.centerx
        py = int((y_m - self.pan_offset_m[1]) * self.zoom_m_to_px) + self.rect.centery
        return px, py

    def screen_to_world(self, position_px: Tuple[int, int]) -> Tuple[float, float]:
        x_px, y_px = position_px
        x_m = (x_px - self.rect.centerx) / self.zoom_m_to_px + self.pan_offset_m[0]
        y_m = (y_px - self.rect.centery) / self.zoom_m_to_px + self.pan_offset_m[1]
        return x_m, y_m

    def render(
        self,
        surface: "pygame.Surface",
        snapshot: "SimulationSnapshot",
        labels: Sequence["EnergyLabel"] = (),
    ) -> None:
        surface.fill(self.config.background_color)
        if pygame is None:
            return

        atoms_by_id: Dict[int, "AtomState"] = {atom.id: atom for atom in snapshot.atom_states}

        # Bonds first so atoms sit on top.
        for bond in snapshot.bonds:
            atom_i = atoms_by_id.get(bond.atom_i)
            atom_j = atoms_by_id.get(bond.atom_j)
            if atom_i is None or atom_j is None:
                continue
            start = self._to_local(atom_i.position)
            end = self._to_local(atom_j.position)
            self._draw_bond(surface, start, end, bond)

        for atom in snapshot.atom_states:
            self._draw_atom(surface, atom)

        for label in labels:
            self._draw_label(surface, label)

    def pan(self, delta_pixels: Tuple[int, int]) -> None:
        dx_m = delta_pixels[0] / self.zoom_m_to_px
        dy_m = delta_pixels[1] / self.zoom_m_to_px
        self.pan_offset_m = (
            self.pan_offset_m[0] - dx_m,
            self.pan_offset_m[1] - dy_m,
        )

    def zoom(self, factor: float) -> None:
        self.zoom_m_to_px = max(1.0, self.zoom_m_to_px * factor)

    def set_selected_atom(self, atom_id: Optional[int]) -> None:
        self.selected_atom_id = atom_id

    def _to_local(self, position_m: Vector) -> Tuple[int, int]:
        """Screen point relative to the viewport surface."""
        px, py = self.world_to_screen(position_m)
        return px - self.rect.x, py - self.rect.y

    def _draw_atom(self, surface: "pygame.Surface", atom: "AtomState") -> None:
        pos_px = self._to_local(atom.position)
        self._draw_electrons(surface, pos_px, atom)
        pygame.draw.circle(surface, element_color(atom.atomic_number), pos_px, self.config.nucleus_radius_px)
        if atom.id == self.selected_atom_id:
            pygame.draw.circle(
                surface,
                self.config.selection_color,
                pos_px,
                self.config.nucleus_radius_px + 3,
                width=2,
            )

    def _draw_electrons(self, surface: "pygame.Surface", center: Tuple[int, int], atom: "AtomState") -> None:
        """
        Electrons are drawn on rings around the nucleus, one ring per orbital
        level, since their simulated positions usually coincide with it.
        """
        per_level: Dict[int, List[int]] = {}
        for index, level in enumerate(atom.orbital_levels):
            per_level.setdefault(level, []).append(index)
        for level, members in per_level.items():
            radius = self.config.nucleus_radius_px + level * self.config.electron_ring_px // 2
            for slot in range(len(members)):
                angle = 2.0 * math.pi * slot / len(members)
                point = (
                    int(center[0] + radius * math.cos(angle)),
                    int(center[1] + radius * math.sin(angle)),
                )
                pygame.draw.circle(surface, self.config.electron_color, point, self.config.electron_radius_px)

    def _draw_label(self, surface: "pygame.Surface", label: "EnergyLabel") -> None:
        size = max(8, int(self.config.label_font_size * label.font_scale))
        font = self._fonts.get(size)
        if font is None:
            font = pygame.font.SysFont("Helvetica", size)
            self._fonts[size] = font
        text = font.render(label.text, True, self.config.label_color)
        surface.blit(text, text.get_rect(center=self._to_local(label.position)))

    def _draw_bond(
        self, surface: "pygame.Surface", start: Tuple[int, int], end: Tuple[int, int], bond: "BondState"
    ) -> None:
        dx = end[0] - start[0]
        dy = end[1] - start[1]
        length = math.hypot(dx, dy)
        if length == 0:
            return
        color = self._bond_color(bond.bond_type)
        if bond.bond_type in (BondType.IONIC, BondType.HYDROGEN):
            self._draw_dashed_line(surface, start, end, color)
            return
        order = max(1, bond.order)
        if order == 1:
            pygame.draw.line(surface, color, start, end, width=2)
            return

        ux = -dy / length
        uy = dx / length
        spacing = 4
        center_index = (order - 1) / 2.0
        for idx in range(order):
            offset = (idx - center_index) * spacing
            offset_start = (
                int(start[0] + ux * offset),
                int(start[1] + uy * offset),
            )
            offset_end = (
                int(end[0] + ux * offset),
                int(end[1] + uy * offset),
            )
            pygame.draw.line(surface, color, offset_start, offset_end, width=2)

    def _bond_color(self, bond_type: BondType) -> Color:
        if bond_type is BondType.IONIC:
            return (255, 180, 80)
        if bond_type is BondType.METALLIC:
            return (150, 200, 255)
        if bond_type is BondType.HYDROGEN:
            return (120, 160, 255)
        return self.config.bond_color

    def _draw_dashed_line(
        self, surface: "pygame.Surface", start: Tuple[int, int], end: Tuple[int, int], color: Color
    ) -> None:
        dx = end[0] - start[0]
        dy = end[1] - start[1]
        length = math.hypot(dx, dy)
        if length == 0:
            return
        dash_length = 8
        gap = 6
        steps = max(1, int(length // (dash_length + gap)))
        ux = dx / length
        uy = dy / length
        cursor = 0.0
        for _ in range(steps):
            dash_start = (
                int(start[0] + ux * cursor),
                int(start[1] + uy * cursor),
            )
            dash_end = (
                int(start[0] + ux * (cursor + dash_length)),
                int(start[1] + uy * (cursor + dash_length)),
            )
            pygame.draw.line(surface, color, dash_start, dash_end, width=2)
            cursor += dash_length + gap
