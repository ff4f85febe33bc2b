"""Tests for particle construction, integration, and atom bookkeeping."""

from __future__ import annotations

import pytest

from sim import Atom, Electron, Nucleus, Particle, ParticleKind
from src.physics_utils import ELECTRON_MASS, ELEMENTARY_CHARGE, NEUTRON_MASS, PROTON_MASS


def test_bare_particle_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Particle((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 1.0, 0.0)


def test_nucleus_mass_and_charge_follow_composition():
    nucleus = Nucleus((0.0, 0.0, 0.0), atomic_number=2, mass_number=4)
    assert nucleus.kind is ParticleKind.NUCLEUS
    assert nucleus.mass == pytest.approx(2 * PROTON_MASS + 2 * NEUTRON_MASS)
    assert nucleus.charge == pytest.approx(2 * ELEMENTARY_CHARGE)
    assert nucleus.velocity == (0.0, 0.0, 0.0)


def test_nucleus_build_places_nucleus():
    nucleus = Nucleus.build(92, 235, (1.0, 0.0, 0.0))
    assert nucleus.position == (1.0, 0.0, 0.0)
    assert nucleus.charge == pytest.approx(92 * ELEMENTARY_CHARGE)


def test_nucleus_rejects_mass_number_below_atomic_number():
    with pytest.raises(ValueError):
        Nucleus((0.0, 0.0, 0.0), atomic_number=3, mass_number=2)


def test_nucleus_without_nucleons_has_no_mass():
    with pytest.raises(ValueError):
        Nucleus((0.0, 0.0, 0.0), atomic_number=0, mass_number=0)


def test_electron_defaults():
    electron = Electron((1, 2, 3))
    assert electron.kind is ParticleKind.ELECTRON
    assert electron.position == (1.0, 2.0, 3.0)
    assert electron.mass == ELECTRON_MASS
    assert electron.charge == -ELEMENTARY_CHARGE
    assert electron.orbital_level == 1


def test_electron_rejects_level_below_one():
    with pytest.raises(ValueError):
        Electron((0.0, 0.0, 0.0), orbital_level=0)


def test_integrate_updates_velocity_before_position():
    electron = Electron((0.0, 0.0, 0.0))
    force = (1e-30, 0.0, 0.0)
    electron.integrate(force, 2.0)

    acceleration = 1e-30 / ELECTRON_MASS
    assert electron.velocity[0] == pytest.approx(2.0 * acceleration)
    # Semi-implicit Euler moves with the freshly updated velocity.
    assert electron.position[0] == pytest.approx(4.0 * acceleration)
    assert electron.position[1:] == (0.0, 0.0)


def test_neutral_atom_has_z_electrons_at_ground_level():
    atom = Atom(8, 16, (1.0, 0.0, 0.0))
    assert atom.symbol == "O"
    assert len(atom.electrons) == 8
    assert atom.net_charge_e == 0
    assert all(e.orbital_level == 1 for e in atom.electrons)
    assert all(e.position == atom.position for e in atom.electrons)


def test_atom_ids_are_unique():
    first = Atom(1, 1)
    second = Atom(1, 1)
    assert first.id != second.id


def test_set_position_preserves_electron_offsets():
    atom = Atom(2, 4)
    electrons = atom.electrons
    electrons[0].position = (0.1, 0.0, 0.0)
    electrons[1].position = (0.0, -0.2, 0.0)

    atom.set_position((1.0, 2.0, 3.0))

    assert atom.position == (1.0, 2.0, 3.0)
    assert electrons[0].position == pytest.approx((1.1, 2.0, 3.0))
    assert electrons[1].position == pytest.approx((1.0, 1.8, 3.0))


def test_electrons_property_returns_a_copy():
    atom = Atom(1, 1)
    atom.electrons.clear()
    assert len(atom.electrons) == 1


def test_remove_electron_matches_identity():
    atom = Atom(1, 1)
    lookalike = Electron(atom.position)
    assert atom.remove_electron(lookalike) is False
    assert len(atom.electrons) == 1

    assert atom.remove_electron(atom.electrons[0]) is True
    assert atom.electrons == []
    assert atom.net_charge_e == 1


def test_add_electron_makes_an_anion():
    atom = Atom(9, 19)
    atom.add_electron(Electron(atom.position))
    assert atom.net_charge_e == -1


def test_particles_lists_nucleus_first():
    atom = Atom(3, 7)
    particles = atom.particles()
    assert particles[0] is atom.nucleus
    assert len(particles) == 4
