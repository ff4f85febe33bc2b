"""
Mass-defect energy release for two hard-coded nuclear reaction channels.

Supported reactions:
    - Neutron-induced fission: n + U-235 -> Ba-141 + Kr-92 + 3n
    - Deuterium-tritium fusion: D + T -> He-4 + n

Nuclei are only read (atomic and mass numbers); no product particles are
spawned and the arguments are never mutated.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from src.physics_utils import binding_energy_mev, mass_defect_to_ev

if TYPE_CHECKING:  # pragma: no cover
    from sim import Nucleus

logger = logging.getLogger(__name__)

# Rest masses in atomic mass units
MASS_NEUTRON_AMU = 1.008_665
MASS_U235_AMU = 235.043_929_9
MASS_BA141_AMU = 140.914_411
MASS_KR92_AMU = 91.926_156
MASS_DEUTERIUM_AMU = 2.014_101_78
MASS_TRITIUM_AMU = 3.016_049_27
MASS_HE4_AMU = 4.002_603_25

FISSION_NEUTRONS_RELEASED = 3

URANIUM_235 = (92, 235)
DEUTERIUM = (1, 2)
TRITIUM = (1, 3)


def fission_mass_defect_amu() -> float:
    initial = MASS_U235_AMU + MASS_NEUTRON_AMU
    final = MASS_BA141_AMU + MASS_KR92_AMU + FISSION_NEUTRONS_RELEASED * MASS_NEUTRON_AMU
    return initial - final


def fusion_mass_defect_amu() -> float:
    initial = MASS_DEUTERIUM_AMU + MASS_TRITIUM_AMU
    final = MASS_HE4_AMU + MASS_NEUTRON_AMU
    return initial - final


def _nuclide(nucleus: "Nucleus") -> tuple[int, int]:
    return nucleus.atomic_number, nucleus.mass_number


class NuclearReactor:
    """
    Computes the energy (eV) released by fission or fusion events.

    Unsupported nuclides and non-positive mass defects are not errors: a
    warning is logged, `last_diagnostic` describes the problem and 0.0 is
    returned so the caller can surface it.
    """

    def __init__(self, logger_: Optional[logging.Logger] = None):
        self.logger = logger_ or logger
        self.last_diagnostic: Optional[str] = None

    def simulate_fission(self, nucleus: "Nucleus") -> float:
        self.last_diagnostic = None
        if _nuclide(nucleus) != URANIUM_235:
            return self._reject(
                "Fission is only supported for U-235 (got Z=%d, A=%d)." % _nuclide(nucleus)
            )
        # TODO: hand Ba-141, Kr-92 and the released neutrons to the caller once
        # the engine can register free nucleons.
        return self._release("Fission of U-235", fission_mass_defect_amu())

    def simulate_fusion(self, nucleus_a: "Nucleus", nucleus_b: "Nucleus") -> float:
        self.last_diagnostic = None
        pair = {_nuclide(nucleus_a), _nuclide(nucleus_b)}
        if pair != {DEUTERIUM, TRITIUM}:
            return self._reject(
                "Fusion is only supported for deuterium-tritium (got %s and %s)."
                % (_nuclide(nucleus_a), _nuclide(nucleus_b))
            )
        return self._release("Fusion of D-T", fusion_mass_defect_amu())

    def binding_energy_per_nucleon_ev(self, atomic_number: int, mass_number: int) -> float:
        """Liquid-drop binding energy per nucleon in eV (0.0 for impossible nuclides)."""
        if mass_number <= 0:
            return 0.0
        return binding_energy_mev(mass_number, atomic_number) / mass_number * 1e6

    def _release(self, label: str, mass_defect_amu: float) -> float:
        if mass_defect_amu <= 0:
            return self._reject(
                f"{label} produced a non-positive mass defect ({mass_defect_amu:.6f} amu); no energy released."
            )
        energy_ev = mass_defect_to_ev(mass_defect_amu)
        self.logger.info(
            "%s: mass defect = %.6f amu, energy released = %.4e eV",
            label,
            mass_defect_amu,
            energy_ev,
        )
        return energy_ev

    def _reject(self, message: str) -> float:
        self.last_diagnostic = message
        self.logger.warning(message)
        return 0.0
