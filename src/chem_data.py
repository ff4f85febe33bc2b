"""Element metadata and tabulated bond energies used by the sandbox."""

from __future__ import annotations

from enum import Enum


class BondType(Enum):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    IONIC = "ionic"
    METALLIC = "metallic"
    HYDROGEN = "hydrogen"


# Representative dissociation energies in eV.
BOND_ENERGIES_EV = {
    BondType.SINGLE: 4.5,
    BondType.DOUBLE: 8.0,
    BondType.TRIPLE: 10.0,
    BondType.IONIC: 5.0,
    BondType.METALLIC: 2.0,
    BondType.HYDROGEN: 0.2,
}

ELEMENTS = {
    1: {"symbol": "H", "name": "Hydrogen", "mass_number": 1, "color": (255, 255, 255)},
    2: {"symbol": "He", "name": "Helium", "mass_number": 4, "color": (217, 255, 255)},
    3: {"symbol": "Li", "name": "Lithium", "mass_number": 7, "color": (204, 128, 255)},
    4: {"symbol": "Be", "name": "Beryllium", "mass_number": 9, "color": (194, 255, 0)},
    5: {"symbol": "B", "name": "Boron", "mass_number": 11, "color": (255, 181, 181)},
    6: {"symbol": "C", "name": "Carbon", "mass_number": 12, "color": (80, 80, 80)},
    7: {"symbol": "N", "name": "Nitrogen", "mass_number": 14, "color": (48, 80, 248)},
    8: {"symbol": "O", "name": "Oxygen", "mass_number": 16, "color": (255, 13, 13)},
    9: {"symbol": "F", "name": "Fluorine", "mass_number": 19, "color": (144, 224, 80)},
    10: {"symbol": "Ne", "name": "Neon", "mass_number": 20, "color": (179, 227, 245)},
    36: {"symbol": "Kr", "name": "Krypton", "mass_number": 84, "color": (92, 184, 209)},
    56: {"symbol": "Ba", "name": "Barium", "mass_number": 138, "color": (0, 201, 0)},
    92: {"symbol": "U", "name": "Uranium", "mass_number": 238, "color": (0, 143, 255)},
}

PALETTE_ATOMIC_NUMBERS = list(range(1, 11))


def element_symbol(atomic_number: int) -> str:
    entry = ELEMENTS.get(atomic_number)
    return entry["symbol"] if entry else f"Z{atomic_number}"


def element_name(atomic_number: int) -> str:
    entry = ELEMENTS.get(atomic_number)
    return entry["name"] if entry else "Unknown"


def default_mass_number(atomic_number: int) -> int:
    """Most common mass number, falling back to 2Z for unlisted elements."""
    entry = ELEMENTS.get(atomic_number)
    if entry:
        return int(entry["mass_number"])
    return max(1, 2 * atomic_number)


def element_color(atomic_number: int) -> tuple[int, int, int]:
    entry = ELEMENTS.get(atomic_number)
    return entry["color"] if entry else (200, 200, 200)
