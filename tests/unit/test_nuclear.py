"""Tests for the fission/fusion energy model."""

from __future__ import annotations

import logging

import pytest

from sim import Nucleus
from src import nuclear
from src.nuclear import NuclearReactor
from src.physics_utils import AMU_TO_KG, JOULES_TO_EV, SPEED_OF_LIGHT


def _nucleus(z: int, a: int) -> Nucleus:
    return Nucleus((0.0, 0.0, 0.0), atomic_number=z, mass_number=a)


def test_fission_of_u235_matches_mass_defect():
    reactor = NuclearReactor()
    energy = reactor.simulate_fission(_nucleus(92, 235))

    delta_m = nuclear.fission_mass_defect_amu()
    assert delta_m > 0
    assert energy == pytest.approx(delta_m * AMU_TO_KG * SPEED_OF_LIGHT ** 2 * JOULES_TO_EV)
    # Roughly 173 MeV per event.
    assert 1.6e8 < energy < 1.9e8


@pytest.mark.parametrize("z, a", [(92, 238), (6, 12), (1, 1)])
def test_fission_rejects_other_nuclides(z, a, caplog):
    reactor = NuclearReactor()
    with caplog.at_level(logging.WARNING, logger="src.nuclear"):
        assert reactor.simulate_fission(_nucleus(z, a)) == 0.0
    assert f"Z={z}, A={a}" in reactor.last_diagnostic
    assert caplog.records


def test_fusion_of_deuterium_tritium_in_either_order():
    reactor = NuclearReactor()
    forward = reactor.simulate_fusion(_nucleus(1, 2), _nucleus(1, 3))
    backward = reactor.simulate_fusion(_nucleus(1, 3), _nucleus(1, 2))
    assert forward > 0.0
    assert forward == backward
    assert forward == pytest.approx(17.59e6, rel=1e-2)


@pytest.mark.parametrize(
    "pair",
    [((1, 1), (1, 1)), ((1, 2), (1, 2)), ((1, 3), (1, 3)), ((2, 4), (1, 2))],
)
def test_fusion_rejects_other_pairs(pair):
    reactor = NuclearReactor()
    assert reactor.simulate_fusion(_nucleus(*pair[0]), _nucleus(*pair[1])) == 0.0
    assert "deuterium-tritium" in reactor.last_diagnostic


def test_reactions_do_not_mutate_nuclei():
    reactor = NuclearReactor()
    uranium = _nucleus(92, 235)
    reactor.simulate_fission(uranium)
    assert (uranium.atomic_number, uranium.mass_number) == (92, 235)


def test_non_positive_mass_defect_releases_nothing(monkeypatch, caplog):
    monkeypatch.setattr(nuclear, "fission_mass_defect_amu", lambda: -0.8)
    reactor = NuclearReactor()
    with caplog.at_level(logging.WARNING, logger="src.nuclear"):
        assert reactor.simulate_fission(_nucleus(92, 235)) == 0.0
    assert "non-positive mass defect" in reactor.last_diagnostic
    assert any("non-positive" in record.getMessage() for record in caplog.records)


def test_successful_reaction_is_logged_at_info(caplog):
    reactor = NuclearReactor()
    with caplog.at_level(logging.INFO, logger="src.nuclear"):
        reactor.simulate_fusion(_nucleus(1, 2), _nucleus(1, 3))
    assert any(record.levelno == logging.INFO for record in caplog.records)
    assert reactor.last_diagnostic is None


def test_binding_energy_per_nucleon_peaks_near_iron():
    reactor = NuclearReactor()
    iron = reactor.binding_energy_per_nucleon_ev(26, 56)
    uranium = reactor.binding_energy_per_nucleon_ev(92, 235)
    assert 8.5e6 < iron < 9.0e6
    assert uranium < iron


def test_binding_energy_per_nucleon_of_impossible_nuclides():
    reactor = NuclearReactor()
    assert reactor.binding_energy_per_nucleon_ev(0, 0) == 0.0
    assert reactor.binding_energy_per_nucleon_ev(5, 3) == 0.0
