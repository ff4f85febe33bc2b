"""
Shared constants, unit conversions, and vector helpers for the Atomica core.

Unit conventions:
    - Positions: metres
    - Velocities: metres / second
    - Mass: kilograms (nuclear bookkeeping in atomic mass units)
    - Charges: coulombs
    - Time step: seconds
    - Reported energies: electron volts (eV)
"""

from __future__ import annotations

import math
from typing import Tuple


Vector = Tuple[float, float, float]

ELEMENTARY_CHARGE = 1.602_176_634e-19  # C
ELECTRON_MASS = 9.109_383_701_5e-31  # kg
PROTON_MASS = 1.672_621_923_69e-27  # kg
NEUTRON_MASS = 1.674_927_498_04e-27  # kg
SPEED_OF_LIGHT = 299_792_458.0  # m/s
PLANCK_CONSTANT = 6.626_070_15e-34  # J s
BOLTZMANN_CONSTANT = 1.380_649e-23  # J/K
AVOGADRO = 6.022_140_76e23

EV_TO_JOULES = 1.602_176_634e-19
JOULES_TO_EV = 6.241_509_074e18
AMU_TO_KG = 1.660_539_066_60e-27
KG_TO_AMU = 6.022_140_76e26

COULOMB_CONSTANT = 8.9875e9  # N m^2 / C^2
COINCIDENCE_EPSILON = 1e-9  # m
RYDBERG_EV = 13.605_693
PHOTON_EV_NM = 1240.0

# Semi-empirical mass formula coefficients (MeV)
SEMF_VOLUME = 15.75
SEMF_SURFACE = 17.8
SEMF_COULOMB = 0.711
SEMF_ASYMMETRY = 23.7
SEMF_PAIRING = 11.18


def vector_add(a: Vector, b: Vector) -> Vector:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vector_sub(a: Vector, b: Vector) -> Vector:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def vector_scale(v: Vector, scalar: float) -> Vector:
    return (v[0] * scalar, v[1] * scalar, v[2] * scalar)


def vector_length(v: Vector) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def vector_zero() -> Vector:
    return (0.0, 0.0, 0.0)


def vector_normalize(v: Vector) -> Vector:
    length = vector_length(v)
    if length > COINCIDENCE_EPSILON:
        return vector_scale(v, 1.0 / length)
    return vector_zero()


def distance(a: Vector, b: Vector) -> float:
    return vector_length(vector_sub(b, a))


def as_vector(value) -> Vector:
    """Coerce any 3-item iterable of numbers into a float tuple."""
    values = list(value)
    if len(values) != 3:
        raise ValueError("Vectors must contain exactly 3 components.")
    return float(values[0]), float(values[1]), float(values[2])


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def joules_to_ev(joules: float) -> float:
    return joules * JOULES_TO_EV


def ev_to_joules(ev: float) -> float:
    return ev * EV_TO_JOULES


def amu_to_kg(amu: float) -> float:
    return amu * AMU_TO_KG


def kg_to_amu(kg: float) -> float:
    return kg * KG_TO_AMU


def mass_defect_to_ev(delta_m_amu: float) -> float:
    """E = mc^2 for a mass defect given in amu, reported in eV."""
    energy_j = delta_m_amu * AMU_TO_KG * SPEED_OF_LIGHT * SPEED_OF_LIGHT
    return energy_j * JOULES_TO_EV


def binding_energy_mev(mass_number: int, atomic_number: int) -> float:
    """
    Liquid-drop (Weizsaecker) binding energy in MeV.

    Returns 0.0 for impossible nuclides and never reports a negative binding.
    """
    a = mass_number
    z = atomic_number
    if a <= 0 or z < 0 or z > a:
        return 0.0
    n = a - z

    volume = SEMF_VOLUME * a
    surface = SEMF_SURFACE * a ** (2.0 / 3.0)
    coulomb = SEMF_COULOMB * z * (z - 1) / a ** (1.0 / 3.0)
    asymmetry = SEMF_ASYMMETRY * ((n - z) ** 2) / a

    pairing = 0.0
    if z % 2 == 0 and n % 2 == 0:
        pairing = SEMF_PAIRING / math.sqrt(a)
    elif z % 2 == 1 and n % 2 == 1:
        pairing = -SEMF_PAIRING / math.sqrt(a)

    return max(0.0, volume - surface - coulomb - asymmetry + pairing)
