"""
Hydrogen-like orbital energies and electron transitions.

Energy of level n for nuclear charge Z:

    E(n) = -Rydberg * Z^2 / n^2     (eV)

A transition reports dE = E(new) - E(current); positive values mean a photon
was absorbed, negative values mean one was emitted.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from src.physics_utils import PHOTON_EV_NM, RYDBERG_EV

if TYPE_CHECKING:  # pragma: no cover
    from sim import Atom, Electron

logger = logging.getLogger(__name__)

ULTRAVIOLET_EDGE_NM = 380.0
INFRARED_EDGE_NM = 750.0


class SpectralBand(Enum):
    ULTRAVIOLET = "ultraviolet"
    VISIBLE = "visible"
    INFRARED = "infrared"


@dataclass(frozen=True)
class Transition:
    from_level: int
    to_level: int
    delta_e_ev: float
    wavelength_nm: float
    band: SpectralBand

    @property
    def absorbed(self) -> bool:
        return self.delta_e_ev > 0.0


def photon_wavelength_nm(delta_e_ev: float) -> float:
    if delta_e_ev == 0.0:
        return math.inf
    return PHOTON_EV_NM / abs(delta_e_ev)


def classify_band(wavelength_nm: float) -> SpectralBand:
    if wavelength_nm < ULTRAVIOLET_EDGE_NM:
        return SpectralBand.ULTRAVIOLET
    if wavelength_nm <= INFRARED_EDGE_NM:
        return SpectralBand.VISIBLE
    return SpectralBand.INFRARED


class OrbitalModel:
    def __init__(self, rydberg_ev: float = RYDBERG_EV, logger_: Optional[logging.Logger] = None):
        self.rydberg_ev = rydberg_ev
        self.logger = logger_ or logger
        self.last_diagnostic: Optional[str] = None

    def orbital_energy_ev(self, atomic_number: int, level: int) -> float:
        if level < 1:
            raise ValueError(f"Orbital level must be a positive integer, got {level}.")
        return -self.rydberg_ev * (atomic_number * atomic_number) / (level * level)

    def jump(self, electron: "Electron", atom: "Atom", new_level: int) -> float:
        """Move `electron` to `new_level` and return the photon energy dE in eV."""
        self.last_diagnostic = None
        if new_level < 1:
            self.last_diagnostic = f"Target orbital level must be a positive integer, got {new_level}."
            self.logger.warning(self.last_diagnostic)
            return 0.0

        current_level = electron.orbital_level
        initial = self.orbital_energy_ev(atom.atomic_number, current_level)
        final = self.orbital_energy_ev(atom.atomic_number, new_level)
        delta_e = final - initial
        electron.orbital_level = new_level

        self.logger.info(
            "Electron jumped from n=%d to n=%d in atom with Z=%d: dE = %.6f eV",
            current_level,
            new_level,
            atom.atomic_number,
            delta_e,
        )
        return delta_e

    def describe_transition(self, from_level: int, to_level: int, delta_e_ev: float) -> Transition:
        wavelength = photon_wavelength_nm(delta_e_ev)
        return Transition(
            from_level=from_level,
            to_level=to_level,
            delta_e_ev=delta_e_ev,
            wavelength_nm=wavelength,
            band=classify_band(wavelength),
        )
