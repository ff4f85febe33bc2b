"""
Atomica simulation core: particles, atoms, bonds, and the per-frame engine.

Unit conventions:
    - Positions: metres
    - Velocities: m/s
    - Time step: seconds
    - Mass: kg
    - Charges: coulombs
    - Energies reported to callers: eV

The engine only integrates Coulomb forces inside `tick`. Bonding, nuclear
reactions and orbital transitions are explicit triggers fired by the
application layer and never happen autonomously during a tick.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional

from src.bonding import BondCalculator
from src.chem_data import BondType, element_symbol
from src.nuclear import NuclearReactor
from src.orbitals import OrbitalModel
from src.physics_utils import (
    COINCIDENCE_EPSILON,
    COULOMB_CONSTANT,
    ELECTRON_MASS,
    ELEMENTARY_CHARGE,
    NEUTRON_MASS,
    PROTON_MASS,
    Vector,
    as_vector,
    joules_to_ev,
    vector_add,
    vector_length,
    vector_scale,
    vector_sub,
    vector_zero,
)

__all__ = [
    "Atom",
    "AtomState",
    "Bond",
    "BondState",
    "BondType",
    "CoulombSolver",
    "Electron",
    "Molecule",
    "Nucleus",
    "Particle",
    "ParticleKind",
    "PhysicsEngine",
    "SimulationSettings",
    "SimulationSnapshot",
]

logger = logging.getLogger(__name__)


class ParticleKind(Enum):
    NUCLEUS = "nucleus"
    ELECTRON = "electron"


@dataclass(eq=False)
class Particle:
    """
    Shared kinematic record for nuclei and electrons.

    Only the `Nucleus` and `Electron` specialisations can be instantiated.
    Equality is identity so that containers remove the exact instance.
    """

    position: Vector
    velocity: Vector
    mass: float
    charge: float

    kind: ClassVar[Optional[ParticleKind]] = None

    def __post_init__(self) -> None:
        if self.kind is None:
            raise TypeError("Particle is abstract; create a Nucleus or an Electron.")
        if not self.mass > 0.0:
            raise ValueError(f"Particle mass must be positive, got {self.mass!r}.")
        self.position = as_vector(self.position)
        self.velocity = as_vector(self.velocity)

    def integrate(self, force: Vector, dt: float) -> None:
        """Semi-implicit Euler: update velocity from the force, then position."""
        acceleration = vector_scale(force, 1.0 / self.mass)
        self.velocity = vector_add(self.velocity, vector_scale(acceleration, dt))
        self.position = vector_add(self.position, vector_scale(self.velocity, dt))


@dataclass(eq=False)
class Nucleus(Particle):
    velocity: Vector = field(default_factory=vector_zero)
    mass: float = field(default=0.0, init=False)
    charge: float = field(default=0.0, init=False)
    atomic_number: int = 1
    mass_number: int = 1

    kind: ClassVar[Optional[ParticleKind]] = ParticleKind.NUCLEUS

    def __post_init__(self) -> None:
        if self.atomic_number < 0:
            raise ValueError(f"Atomic number must be >= 0, got {self.atomic_number}.")
        if self.mass_number < self.atomic_number:
            raise ValueError(
                f"Mass number ({self.mass_number}) cannot be below atomic number ({self.atomic_number})."
            )
        neutrons = self.mass_number - self.atomic_number
        self.mass = self.atomic_number * PROTON_MASS + neutrons * NEUTRON_MASS
        self.charge = self.atomic_number * ELEMENTARY_CHARGE
        super().__post_init__()

    @classmethod
    def build(cls, atomic_number: int, mass_number: int, position: Vector = (0.0, 0.0, 0.0)) -> "Nucleus":
        return cls(position, atomic_number=atomic_number, mass_number=mass_number)


@dataclass(eq=False)
class Electron(Particle):
    velocity: Vector = field(default_factory=vector_zero)
    mass: float = field(default=ELECTRON_MASS, init=False)
    charge: float = field(default=-ELEMENTARY_CHARGE, init=False)
    orbital_level: int = 1

    kind: ClassVar[Optional[ParticleKind]] = ParticleKind.ELECTRON

    def __post_init__(self) -> None:
        if self.orbital_level < 1:
            raise ValueError(f"Orbital level must be >= 1, got {self.orbital_level}.")
        super().__post_init__()


class Atom:
    """
    One nucleus plus an ordered list of electrons.

    A neutral atom is built with Z electrons at n=1, co-located with the
    nucleus. The atom's position is its nucleus's position.
    """

    _ids = itertools.count(1)

    def __init__(self, atomic_number: int, mass_number: int, position: Vector = (0.0, 0.0, 0.0)):
        position = as_vector(position)
        self.id: int = next(Atom._ids)
        self._nucleus = Nucleus.build(atomic_number, mass_number, position)
        self._electrons: List[Electron] = [Electron(position) for _ in range(atomic_number)]

    def __repr__(self) -> str:
        return (
            f"Atom(id={self.id}, {self.symbol}-{self.mass_number}, "
            f"electrons={len(self._electrons)}, position={self.position})"
        )

    @property
    def nucleus(self) -> Nucleus:
        return self._nucleus

    @property
    def electrons(self) -> List[Electron]:
        return list(self._electrons)

    @property
    def atomic_number(self) -> int:
        return self._nucleus.atomic_number

    @property
    def mass_number(self) -> int:
        return self._nucleus.mass_number

    @property
    def symbol(self) -> str:
        return element_symbol(self.atomic_number)

    @property
    def position(self) -> Vector:
        return self._nucleus.position

    @property
    def net_charge_e(self) -> int:
        return self.atomic_number - len(self._electrons)

    def set_position(self, position: Vector) -> None:
        """Move the nucleus and rigidly shift every electron by the same delta."""
        position = as_vector(position)
        delta = vector_sub(position, self._nucleus.position)
        self._nucleus.position = position
        for electron in self._electrons:
            electron.position = vector_add(electron.position, delta)

    def add_electron(self, electron: Electron) -> None:
        self._electrons.append(electron)

    def remove_electron(self, electron: Electron) -> bool:
        for index, candidate in enumerate(self._electrons):
            if candidate is electron:
                del self._electrons[index]
                return True
        return False

    def particles(self) -> List[Particle]:
        return [self._nucleus, *self._electrons]


class Bond:
    """
    Association between two atoms owned elsewhere.

    Atoms and type are fixed at construction; only the energy can change.
    """

    def __init__(self, atom1: Atom, atom2: Atom, bond_type: BondType, energy_ev: float):
        self._atom1 = atom1
        self._atom2 = atom2
        self._bond_type = bond_type
        self.energy_ev = float(energy_ev)

    def __repr__(self) -> str:
        return (
            f"Bond({self._atom1.symbol}#{self._atom1.id}-{self._atom2.symbol}#{self._atom2.id}, "
            f"{self._bond_type.name}, {self.energy_ev} eV)"
        )

    @property
    def atom1(self) -> Atom:
        return self._atom1

    @property
    def atom2(self) -> Atom:
        return self._atom2

    @property
    def bond_type(self) -> BondType:
        return self._bond_type

    @property
    def order(self) -> int:
        return {BondType.DOUBLE: 2, BondType.TRIPLE: 3}.get(self._bond_type, 1)

    def involves(self, atom: Atom) -> bool:
        return atom is self._atom1 or atom is self._atom2


@dataclass(eq=False)
class Molecule:
    """Atoms and bonds grouped for display; atoms are shared with the engine."""

    name: str = ""
    atoms: List[Atom] = field(default_factory=list)
    bonds: List[Bond] = field(default_factory=list)

    def add_atom(self, atom: Atom) -> None:
        self.atoms.append(atom)

    def add_bond(self, bond: Bond) -> None:
        self.bonds.append(bond)


class CoulombSolver:
    """
    Pairwise electrostatic forces over a flat particle list.

    O(N^2) by design; the sandbox targets tens to low hundreds of particles.
    """

    def __init__(
        self,
        coulomb_constant: float = COULOMB_CONSTANT,
        coincidence_epsilon: float = COINCIDENCE_EPSILON,
    ):
        self.coulomb_constant = coulomb_constant
        self.coincidence_epsilon = coincidence_epsilon

    def compute_forces(self, particles: List[Particle]) -> List[Vector]:
        forces: List[Vector] = [vector_zero() for _ in particles]
        for i, a in enumerate(particles):
            for j in range(i + 1, len(particles)):
                b = particles[j]
                r_vec = vector_sub(a.position, b.position)
                r = vector_length(r_vec)
                # Coincident particles exert no force on each other.
                if r < self.coincidence_epsilon:
                    continue
                magnitude = self.coulomb_constant * a.charge * b.charge / (r * r)
                force = vector_scale(r_vec, magnitude / r)
                forces[i] = vector_add(forces[i], force)
                forces[j] = vector_sub(forces[j], force)
        return forces

    def potential_energy_ev(self, particles: List[Particle]) -> float:
        energy_j = 0.0
        for i, a in enumerate(particles):
            for j in range(i + 1, len(particles)):
                b = particles[j]
                r = vector_length(vector_sub(a.position, b.position))
                if r < self.coincidence_epsilon:
                    continue
                energy_j += self.coulomb_constant * a.charge * b.charge / r
        return joules_to_ev(energy_j)


@dataclass
class SimulationSettings:
    timestep_s: float = 1.0 / 60.0
    coincidence_epsilon: float = COINCIDENCE_EPSILON
    coulomb_constant: float = COULOMB_CONSTANT


@dataclass
class AtomState:
    id: int
    atomic_number: int
    mass_number: int
    symbol: str
    position: Vector
    velocity: Vector
    electron_positions: List[Vector]
    orbital_levels: List[int]
    net_charge_e: int


@dataclass
class BondState:
    atom_i: int
    atom_j: int
    bond_type: BondType
    order: int
    energy_ev: float


@dataclass
class SimulationSnapshot:
    step_index: int
    time_s: float
    atom_states: List[AtomState]
    bonds: List[BondState] = field(default_factory=list)
    molecule_count: int = 0


class PhysicsEngine:
    """
    Owns every simulated atom and molecule and advances them one frame at a time.

    `atoms` is the flat list of everything that gets integrated. Atoms pulled
    in through `add_molecule` are appended there as well, so an atom may be
    listed in both its molecule and the engine.
    """

    def __init__(
        self,
        settings: Optional[SimulationSettings] = None,
        logger_: Optional[logging.Logger] = None,
    ):
        self.settings = settings or SimulationSettings()
        self.logger = logger_ or logger
        self._atoms: List[Atom] = []
        self._molecules: List[Molecule] = []
        self.current_step: int = 0
        self.time_s: float = 0.0
        self.last_diagnostic: Optional[str] = None

        self.solver = CoulombSolver(
            coulomb_constant=self.settings.coulomb_constant,
            coincidence_epsilon=self.settings.coincidence_epsilon,
        )
        self.bond_calculator = BondCalculator(logger_=self.logger)
        self.reactor = NuclearReactor(logger_=self.logger)
        self.orbital_model = OrbitalModel(logger_=self.logger)

    @property
    def atoms(self) -> List[Atom]:
        return list(self._atoms)

    @property
    def molecules(self) -> List[Molecule]:
        return list(self._molecules)

    def add_atom(self, atom: Atom) -> None:
        self._atoms.append(atom)
        self.logger.debug("Registered %r", atom)

    def add_molecule(self, molecule: Molecule) -> None:
        self._molecules.append(molecule)
        for atom in molecule.atoms:
            self.add_atom(atom)

    def flatten_particles(self) -> List[Particle]:
        particles: List[Particle] = []
        for atom in self._atoms:
            particles.extend(atom.particles())
        return particles

    def tick(self, dt: Optional[float] = None) -> None:
        """Advance one frame: gather particles, solve Coulomb forces, integrate."""
        dt_s = self.settings.timestep_s if dt is None else dt
        particles = self.flatten_particles()
        forces = self.solver.compute_forces(particles)
        for particle, force in zip(particles, forces):
            particle.integrate(force, dt_s)
        self.current_step += 1
        self.time_s += dt_s

    def bond_atoms(self, atom_a: Atom, atom_b: Atom, name: str = "") -> Bond:
        """Bond two atoms into a new molecule and register it with the engine."""
        bond = self.bond_calculator.create_bond(atom_a, atom_b)
        self.last_diagnostic = self.bond_calculator.last_diagnostic
        molecule = Molecule(name=name or f"{atom_a.symbol}-{atom_b.symbol}")
        molecule.add_atom(atom_a)
        molecule.add_atom(atom_b)
        molecule.add_bond(bond)
        self.add_molecule(molecule)
        self.logger.info(
            "Bonded %s-%s (%s): %.2f eV", atom_a.symbol, atom_b.symbol, bond.bond_type.name, bond.energy_ev
        )
        return bond

    def trigger_fission(self, atom: Atom) -> float:
        energy = self.reactor.simulate_fission(atom.nucleus)
        self.last_diagnostic = self.reactor.last_diagnostic
        return energy

    def trigger_fusion(self, atom_a: Atom, atom_b: Atom) -> float:
        energy = self.reactor.simulate_fusion(atom_a.nucleus, atom_b.nucleus)
        self.last_diagnostic = self.reactor.last_diagnostic
        return energy

    def trigger_electron_jump(self, atom: Atom, new_level: int, electron_index: int = 0) -> float:
        electrons = atom.electrons
        if not 0 <= electron_index < len(electrons):
            self.last_diagnostic = (
                f"{atom.symbol}#{atom.id} has no electron at index {electron_index}."
            )
            self.logger.warning(self.last_diagnostic)
            return 0.0
        delta_e = self.orbital_model.jump(electrons[electron_index], atom, new_level)
        self.last_diagnostic = self.orbital_model.last_diagnostic
        return delta_e

    def unique_atoms(self) -> List[Atom]:
        seen = set()
        unique: List[Atom] = []
        for atom in self._atoms:
            if atom.id in seen:
                continue
            seen.add(atom.id)
            unique.append(atom)
        return unique

    def total_kinetic_energy_ev(self) -> float:
        energy_j = 0.0
        for atom in self.unique_atoms():
            for particle in atom.particles():
                speed = vector_length(particle.velocity)
                energy_j += 0.5 * particle.mass * speed * speed
        return joules_to_ev(energy_j)

    def potential_energy_ev(self) -> float:
        particles: List[Particle] = []
        for atom in self.unique_atoms():
            particles.extend(atom.particles())
        return self.solver.potential_energy_ev(particles)

    def snapshot(self) -> SimulationSnapshot:
        atom_states = [
            AtomState(
                id=atom.id,
                atomic_number=atom.atomic_number,
                mass_number=atom.mass_number,
                symbol=atom.symbol,
                position=atom.position,
                velocity=atom.nucleus.velocity,
                electron_positions=[electron.position for electron in atom.electrons],
                orbital_levels=[electron.orbital_level for electron in atom.electrons],
                net_charge_e=atom.net_charge_e,
            )
            for atom in self.unique_atoms()
        ]
        bonds = [
            BondState(
                atom_i=bond.atom1.id,
                atom_j=bond.atom2.id,
                bond_type=bond.bond_type,
                order=bond.order,
                energy_ev=bond.energy_ev,
            )
            for molecule in self._molecules
            for bond in molecule.bonds
        ]
        return SimulationSnapshot(
            step_index=self.current_step,
            time_s=self.time_s,
            atom_states=atom_states,
            bonds=bonds,
            molecule_count=len(self._molecules),
        )
