"""
Panel components for the pygame UI (element palette, control dock, inspector).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

try:
    import pygame
except ImportError:  # pragma: no cover
    pygame = None  # type: ignore

from src.chem_data import PALETTE_ATOMIC_NUMBERS, element_color, element_symbol


@dataclass
class ElementPalettePanel:
    rect: "pygame.Rect"
    font: "pygame.font.Font"
    on_element_selected: Callable[[int], None]
    atomic_numbers: List[int] = field(default_factory=lambda: list(PALETTE_ATOMIC_NUMBERS))
    columns: int = 4
    tile_size: Tuple[int, int] = (68, 52)
    tile_margin: int = 6
    hover_atomic_number: Optional[int] = None
    drag_atomic_number: Optional[int] = None

    def symbol_for(self, atomic_number: int) -> str:
        return element_symbol(atomic_number)

    def render(self, surface: "pygame.Surface") -> None:
        if pygame is None:
            return
        pygame.draw.rect(surface, (20, 20, 40), self.rect)
        x0, y0 = self.rect.topleft
        for index, atomic_number in enumerate(self.atomic_numbers):
            tile_rect = self._tile_rect(index, x0, y0)
            if tile_rect.right > self.rect.right:
                continue
            color = (60, 60, 90)
            if atomic_number == self.hover_atomic_number:
                color = (90, 90, 130)
            pygame.draw.rect(surface, color, tile_rect, border_radius=6)
            pygame.draw.circle(surface, element_color(atomic_number), (tile_rect.x + 10, tile_rect.y + 10), 4)
            label = self.font.render(self.symbol_for(atomic_number), True, (220, 220, 240))
            surface.blit(label, label.get_rect(center=tile_rect.center))
            number = self.font.render(str(atomic_number), True, (150, 150, 170))
            surface.blit(number, (tile_rect.right - number.get_width() - 4, tile_rect.y + 2))

            if self.drag_atomic_number == atomic_number:
                pygame.draw.rect(surface, (255, 255, 0), tile_rect, width=2, border_radius=6)

    def handle_event(self, event: "pygame.event.Event") -> None:
        if pygame is None:
            return
        if event.type == pygame.MOUSEMOTION:
            self.hover_atomic_number = self._atomic_number_at(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            atomic_number = self._atomic_number_at(event.pos)
            if atomic_number:
                self.drag_atomic_number = atomic_number
                self.on_element_selected(atomic_number)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.drag_atomic_number = None

    def _tile_rect(self, index: int, x0: int, y0: int) -> "pygame.Rect":
        row = index // self.columns
        col = index % self.columns
        return pygame.Rect(
            x0 + col * (self.tile_size[0] + self.tile_margin),
            y0 + row * (self.tile_size[1] + self.tile_margin),
            self.tile_size[0],
            self.tile_size[1],
        )

    def _atomic_number_at(self, position: Tuple[int, int]) -> Optional[int]:
        x0, y0 = self.rect.topleft
        x, y = position
        if not self.rect.collidepoint(x, y):
            return None
        col = (x - x0) // (self.tile_size[0] + self.tile_margin)
        row = (y - y0) // (self.tile_size[1] + self.tile_margin)
        if col >= self.columns:
            return None
        index = int(row * self.columns + col)
        if index < 0 or index >= len(self.atomic_numbers):
            return None
        return self.atomic_numbers[index]


@dataclass
class ControlDockPanel:
    rect: "pygame.Rect"
    font: "pygame.font.Font"
    on_toggle_run: Callable[[], None]
    on_step: Callable[[], None]
    on_reset: Callable[[], None]
    on_speed_change: Callable[[float], None]
    on_bond: Callable[[], None]
    on_fission: Callable[[], None]
    on_fusion: Callable[[], None]
    on_electron_jump: Callable[[], None]
    on_orbital_change: Callable[[int], None]
    is_running: bool = False
    speed_multiplier: float = 1.0
    target_orbital: int = 3
    min_speed: float = 0.25
    max_speed: float = 4.0
    _button_rects: Dict[str, "pygame.Rect"] = field(default_factory=dict, init=False, repr=False)
    _slider_track: Optional["pygame.Rect"] = field(default=None, init=False, repr=False)
    _slider_handle: Optional["pygame.Rect"] = field(default=None, init=False, repr=False)
    _slider_drag_active: bool = field(default=False, init=False, repr=False)

    def render(self, surface: "pygame.Surface") -> None:
        if pygame is None:
            return
        pygame.draw.rect(surface, (25, 25, 45), self.rect)
        status_text = "Running" if self.is_running else "Paused"
        status_surf = self.font.render(f"Status: {status_text}", True, (230, 230, 240))
        surface.blit(status_surf, (self.rect.x + 16, self.rect.y + 12))

        rows = [
            [("run", "Pause" if self.is_running else "Run"), ("step", "Step"), ("reset", "Reset")],
            [
                ("bond", "Bond"),
                ("fission", "Fission"),
                ("fusion", "Fusion"),
                ("jump", f"Jump n={self.target_orbital}"),
                ("orbital_down", "-"),
                ("orbital_up", "+"),
            ],
        ]
        self._button_rects = {}
        for row_index, row in enumerate(rows):
            x = self.rect.x + 16
            y = self.rect.y + 40 + row_index * 44
            for key, label in row:
                width = 36 if key.startswith("orbital") else 100
                rect = pygame.Rect(x, y, width, 36)
                pygame.draw.rect(surface, (45, 45, 70), rect, border_radius=6)
                text_surface = self.font.render(label, True, (240, 240, 255))
                surface.blit(text_surface, text_surface.get_rect(center=rect.center))
                self._button_rects[key] = rect
                x += width + 12

        # Speed slider
        track_rect = pygame.Rect(self.rect.x + 380, self.rect.y + 58, 240, 12)
        pygame.draw.rect(surface, (60, 60, 90), track_rect, border_radius=6)
        self._slider_track = track_rect

        normalized = (self.speed_multiplier - self.min_speed) / (self.max_speed - self.min_speed)
        normalized = max(0.0, min(1.0, normalized))
        handle_x = track_rect.x + int(normalized * track_rect.width)
        handle_rect = pygame.Rect(handle_x - 6, track_rect.y - 4, 12, 20)
        pygame.draw.rect(surface, (200, 200, 255), handle_rect, border_radius=4)
        self._slider_handle = handle_rect

        speed_label = self.font.render(f"Speed: {self.speed_multiplier:.2f}x", True, (220, 220, 235))
        surface.blit(speed_label, (track_rect.x, track_rect.y - 28))

    def handle_event(self, event: "pygame.event.Event") -> None:
        if pygame is None:
            return

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if hasattr(event, "pos"):
                pos = event.pos
                for key, rect in self._button_rects.items():
                    if rect.collidepoint(pos):
                        self._dispatch(key)
                        return
                if self._slider_track and self._slider_track.collidepoint(pos):
                    self._slider_drag_active = True
                    self._set_speed_from_position(pos[0])
                elif self._slider_handle and self._slider_handle.collidepoint(pos):
                    self._slider_drag_active = True

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._slider_drag_active = False
            if hasattr(event, "pos") and self._slider_track and self._slider_track.collidepoint(event.pos):
                self._set_speed_from_position(event.pos[0])

        elif event.type == pygame.MOUSEMOTION and self._slider_drag_active:
            self._set_speed_from_position(event.pos[0])

    def _dispatch(self, key: str) -> None:
        actions: Dict[str, Callable[[], None]] = {
            "run": self.on_toggle_run,
            "step": self.on_step,
            "reset": self.on_reset,
            "bond": self.on_bond,
            "fission": self.on_fission,
            "fusion": self.on_fusion,
            "jump": self.on_electron_jump,
            "orbital_down": lambda: self.on_orbital_change(-1),
            "orbital_up": lambda: self.on_orbital_change(1),
        }
        actions[key]()

    def _set_speed_from_position(self, x_pos: int) -> None:
        if self._slider_track is None:
            return
        track = self._slider_track
        normalized = (x_pos - track.x) / track.width
        normalized = max(0.0, min(1.0, normalized))
        new_speed = self.min_speed + normalized * (self.max_speed - self.min_speed)
        self.speed_multiplier = new_speed
        self.on_speed_change(new_speed)


@dataclass
class InspectorPanel:
    rect: "pygame.Rect"
    font: "pygame.font.Font"
    selected_atom_id: Optional[int] = None
    selected_info: Dict[str, str] = field(default_factory=dict)
    messages: List[str] = field(default_factory=list)

    def render(self, surface: "pygame.Surface") -> None:
        if pygame is None:
            return
        pygame.draw.rect(surface, (18, 18, 32), self.rect)
        title = "Inspector" if self.selected_atom_id is not None else "Simulation Info"
        surface.blit(self.font.render(title, True, (200, 200, 210)), (self.rect.x + 12, self.rect.y + 12))
        y = self.rect.y + 40
        for key, value in self.selected_info.items():
            label = self.font.render(f"{key}: {value}", True, (180, 180, 190))
            surface.blit(label, (self.rect.x + 12, y))
            y += 20
        y += 8
        for message in self.messages[-4:]:
            if y > self.rect.bottom - 20:
                break
            label = self.font.render(message, True, (140, 200, 160))
            surface.blit(label, (self.rect.x + 12, y))
            y += 20

    def update_selection(self, atom_id: Optional[int], info: Dict[str, str]) -> None:
        self.selected_atom_id = atom_id
        self.selected_info = info
