"""Tests for the headless SimulationController actions and label lifetime."""

from __future__ import annotations

import pytest

from src.physics_utils import RYDBERG_EV
from src.ui.controllers import (
    BOND_LABEL_SECONDS,
    MAX_MESSAGES,
    NUCLEAR_LABEL_SECONDS,
    EnergyLabel,
    SimulationController,
)


@pytest.fixture
def controller(engine) -> SimulationController:
    return SimulationController(engine)


def test_paused_controller_does_not_tick(controller):
    controller.update(0.016)
    assert controller.engine.current_step == 0


def test_running_controller_ticks_by_speed(controller):
    controller.toggle_running()
    controller.update(0.016)
    assert controller.engine.current_step == 1

    controller.speed_multiplier = 0.5
    controller.update(0.016)
    assert controller.engine.current_step == 1
    controller.update(0.016)
    assert controller.engine.current_step == 2

    controller.speed_multiplier = 3.0
    controller.update(0.016)
    assert controller.engine.current_step == 5


def test_spawn_atom_uses_default_mass_number(controller):
    atom = controller.spawn_atom(8, (1.0, 0.0, 0.0))
    assert atom.mass_number == 16
    assert controller.engine.atoms == [atom]
    assert controller.messages[-1] == "Created Oxygen-16"


def test_bond_needs_two_atoms(controller):
    controller.spawn_atom(1, (0.0, 0.0, 0.0))
    assert controller.bond_first_two() is None
    assert controller.labels == []


def test_bond_first_two_pushes_label(controller):
    controller.spawn_atom(7, (0.0, 0.0, 0.0))
    controller.spawn_atom(7, (2.0, 0.0, 0.0))

    energy = controller.bond_first_two()

    assert energy == pytest.approx(10.0)
    label = controller.labels[-1]
    assert label.position == (1.0, 0.0, 0.0)
    assert label.remaining_s == BOND_LABEL_SECONDS
    assert "TRIPLE" in label.text
    assert "N-N" in controller.messages[-1]


def test_fission_without_heavy_atom(controller):
    controller.spawn_atom(6, (0.0, 0.0, 0.0))
    assert controller.trigger_fission() is None


def test_fission_on_u235(controller):
    controller.spawn_atom(92, (0.0, 0.0, 0.0), mass_number=235)
    energy = controller.trigger_fission()
    assert energy > 1e8
    assert controller.labels[-1].remaining_s == NUCLEAR_LABEL_SECONDS
    assert controller.labels[-1].text.endswith("MeV")


def test_fission_on_u238_surfaces_diagnostic(controller):
    controller.spawn_atom(92, (0.0, 0.0, 0.0))
    assert controller.trigger_fission() == 0.0
    assert "U-235" in controller.messages[-1]


def test_fusion_of_spawned_isotopes(controller):
    controller.spawn_atom(1, (0.0, 0.0, 0.0), mass_number=2)
    controller.spawn_atom(1, (1.0, 0.0, 0.0), mass_number=3)
    assert controller.trigger_fusion() == pytest.approx(17.59e6, rel=1e-2)
    assert controller.messages[-1].startswith("Fusion:")


def test_electron_jump_reports_wavelength(controller):
    controller.spawn_atom(1, (0.0, 0.0, 0.0))
    delta = controller.trigger_electron_jump()
    assert delta == pytest.approx(RYDBERG_EV * 8.0 / 9.0)
    assert "nm (ultraviolet)" in controller.labels[-1].text

    assert controller.trigger_electron_jump(2) < 0.0
    assert "n=3 -> n=2" in controller.messages[-1]
    assert "visible" in controller.messages[-1]


def test_electron_jump_to_invalid_level(controller):
    controller.spawn_atom(1, (0.0, 0.0, 0.0))
    assert controller.trigger_electron_jump(0) == 0.0
    assert controller.labels == []
    assert "positive integer" in controller.messages[-1]


def test_electron_jump_on_bare_nucleus(controller):
    atom = controller.spawn_atom(1, (0.0, 0.0, 0.0))
    atom.remove_electron(atom.electrons[0])
    assert controller.trigger_electron_jump() is None


def test_labels_expire(controller):
    controller.labels.append(EnergyLabel((0.0, 0.0, 0.0), 4.5, 1.0, "short"))
    controller.labels.append(EnergyLabel((0.0, 0.0, 0.0), 4.5, 3.0, "long"))

    controller.update_labels(1.0)
    assert [label.text for label in controller.labels] == ["long"]
    controller.update_labels(2.5)
    assert controller.labels == []


def test_label_font_scale_is_clamped():
    assert EnergyLabel((0.0, 0.0, 0.0), 0.2, 1.0, "").font_scale == 0.5
    assert EnergyLabel((0.0, 0.0, 0.0), 15.0, 1.0, "").font_scale == 1.5
    assert EnergyLabel((0.0, 0.0, 0.0), 1.7e8, 1.0, "").font_scale == 2.0


def test_target_orbital_never_drops_below_one(controller):
    controller.adjust_target_orbital(-10)
    assert controller.target_orbital == 1
    controller.adjust_target_orbital(2)
    assert controller.target_orbital == 3


def test_message_log_is_bounded(controller):
    for index in range(MAX_MESSAGES + 4):
        controller.spawn_atom(1, (float(index), 0.0, 0.0))
    assert len(controller.messages) == MAX_MESSAGES


def test_reset_clears_transient_state(controller):
    controller.toggle_running()
    controller.spawn_atom(1, (0.0, 0.0, 0.0))
    controller.trigger_electron_jump()
    controller.reset()
    assert controller.is_running is False
    assert controller.labels == []
    assert controller.messages == []


def _ui_controller(controller, pygame):
    from types import SimpleNamespace

    from src.ui.controllers import UIController
    from src.ui.viewport import SandboxViewport

    viewport = SandboxViewport(pygame.Rect(0, 0, 400, 300))
    ignore = SimpleNamespace(rect=pygame.Rect(0, 0, 0, 0), handle_event=lambda event: None)
    return UIController(controller, viewport, ignore, ignore, ignore, lambda z, pos: None)


def test_arrow_keys_pan_the_viewport(controller):
    pygame = pytest.importorskip("pygame")
    ui = _ui_controller(controller, pygame)
    origin_px = ui.viewport.world_to_screen((0.0, 0.0, 0.0))

    ui.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT))

    assert ui.viewport.pan_offset_m[0] == pytest.approx(-1.0)
    shifted_px = ui.viewport.world_to_screen((0.0, 0.0, 0.0))
    assert shifted_px == (origin_px[0] + 40, origin_px[1])

    ui.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_DOWN))
    assert ui.viewport.pan_offset_m == pytest.approx((-1.0, 1.0))


def test_other_keys_leave_the_viewport_alone(controller):
    pygame = pytest.importorskip("pygame")
    ui = _ui_controller(controller, pygame)

    ui.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_b))

    assert ui.viewport.pan_offset_m == (0.0, 0.0)
