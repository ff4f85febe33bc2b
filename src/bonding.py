"""
Rule-table bond classification and tabulated bond energies.

This is deliberately not an electronegativity model: a handful of diatomic
cases are recognised and everything else falls back to a single bond.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Mapping, Optional

from src.chem_data import BOND_ENERGIES_EV, BondType

if TYPE_CHECKING:  # pragma: no cover
    from sim import Atom, Bond

logger = logging.getLogger(__name__)

HYDROGEN = 1
NITROGEN = 7
OXYGEN = 8


class BondCalculator:
    """Classifies an atom pair and maps bond types to energies in eV."""

    def __init__(
        self,
        energies_ev: Optional[Mapping[BondType, float]] = None,
        logger_: Optional[logging.Logger] = None,
    ):
        table = BOND_ENERGIES_EV if energies_ev is None else energies_ev
        self._energies: Dict[BondType, float] = dict(table)
        self.logger = logger_ or logger
        self.last_diagnostic: Optional[str] = None

    def determine_type(self, atom_a: "Atom", atom_b: "Atom") -> BondType:
        z_a = atom_a.atomic_number
        z_b = atom_b.atomic_number
        if z_a == HYDROGEN and z_b == HYDROGEN:
            return BondType.SINGLE
        if {z_a, z_b} == {HYDROGEN, OXYGEN}:
            return BondType.SINGLE
        if z_a == OXYGEN and z_b == OXYGEN:
            return BondType.DOUBLE
        if z_a == NITROGEN and z_b == NITROGEN:
            return BondType.TRIPLE
        return BondType.SINGLE

    def energy_for(self, bond_type: BondType) -> float:
        """Tabulated energy; 0.0 signals a missing table entry."""
        self.last_diagnostic = None
        energy = self._energies.get(bond_type)
        if energy is None:
            self.last_diagnostic = f"Bond energy not found for type {bond_type!r}"
            self.logger.warning(self.last_diagnostic)
            return 0.0
        return energy

    def create_bond(self, atom_a: "Atom", atom_b: "Atom") -> "Bond":
        from sim import Bond

        bond_type = self.determine_type(atom_a, atom_b)
        return Bond(atom_a, atom_b, bond_type, self.energy_for(bond_type))

    def set_energy(self, bond_type: BondType, energy_ev: float) -> None:
        self._energies[bond_type] = float(energy_ev)
