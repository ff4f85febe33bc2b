"""
Utilities for loading Atomica scenes from YAML configuration files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import yaml

from sim import Atom, Bond, BondType, Molecule, PhysicsEngine, SimulationSettings
from src.physics_utils import as_vector

logger = logging.getLogger(__name__)


@dataclass
class SimulationBundle:
    """Container returned by configuration loader."""

    engine: PhysicsEngine
    metadata: Dict[str, Any]
    logging: Dict[str, Any] = field(default_factory=dict)
    window: Dict[str, Any] = field(default_factory=dict)
    atoms_by_key: Dict[str, Atom] = field(default_factory=dict)


def load_simulation_from_yaml(
    path: Path,
    *,
    engine_logger: Optional[logging.Logger] = None,
) -> SimulationBundle:
    """Load a PhysicsEngine populated with the scene described in a YAML config."""
    data = load_yaml_config(Path(path))
    bundle = build_simulation(data, engine_logger=engine_logger)
    logger.info(
        "Loaded scene %r from %s: %d atoms, %d molecules",
        bundle.metadata.get("name", "?"),
        path,
        len(bundle.engine.atoms),
        len(bundle.engine.molecules),
    )
    return bundle


def build_simulation(
    data: Dict[str, Any],
    *,
    engine_logger: Optional[logging.Logger] = None,
) -> SimulationBundle:
    settings = _build_settings(data.get("simulation") or {})
    engine = PhysicsEngine(settings, logger_=engine_logger)
    _apply_bond_energies(engine, data.get("bond_energies_ev") or {})

    system = data.get("system") or {}
    atoms = _build_atoms(system.get("atoms") or [])
    molecules = [
        _build_molecule(entry, atoms, engine) for entry in system.get("molecules") or []
    ]

    in_molecule: Set[str] = set()
    for entry in system.get("molecules") or []:
        in_molecule.update(str(key) for key in entry.get("atoms", []))

    for molecule in molecules:
        engine.add_molecule(molecule)
    for key, atom in atoms.items():
        if key not in in_molecule:
            engine.add_atom(atom)

    return SimulationBundle(
        engine=engine,
        metadata=data.get("metadata") or {},
        logging=data.get("logging") or {},
        window=data.get("window") or {},
        atoms_by_key=atoms,
    )


def load_yaml_config(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle)
    if not isinstance(content, dict):
        raise ValueError(f"YAML file {path} must contain a mapping at the root.")
    return content


def _build_settings(config: Dict[str, Any]) -> SimulationSettings:
    defaults = SimulationSettings()
    timestep = float(config.get("timestep_s", defaults.timestep_s))
    if timestep <= 0:
        raise ValueError("simulation.timestep_s must be positive.")
    return SimulationSettings(
        timestep_s=timestep,
        coincidence_epsilon=float(config.get("coincidence_epsilon", defaults.coincidence_epsilon)),
        coulomb_constant=float(config.get("coulomb_constant", defaults.coulomb_constant)),
    )


def _apply_bond_energies(engine: PhysicsEngine, overrides: Dict[str, Any]) -> None:
    """Overlay per-type energies on the default table; unlisted types keep their defaults."""
    for name, value in overrides.items():
        engine.bond_calculator.set_energy(_parse_bond_type(name), float(value))


def _build_atoms(atom_list: List[Dict[str, Any]]) -> Dict[str, Atom]:
    atoms: Dict[str, Atom] = {}
    for index, entry in enumerate(atom_list):
        key = str(entry.get("id", index))
        if key in atoms:
            raise ValueError(f"Duplicate atom id {key!r} in system.atoms.")
        if "atomic_number" not in entry:
            raise ValueError(f"Atom {key!r} requires an atomic_number.")
        atomic_number = int(entry["atomic_number"])
        mass_number = int(entry.get("mass_number", atomic_number))
        position = as_vector(entry.get("position", (0.0, 0.0, 0.0)))
        atom = Atom(atomic_number, mass_number, position)
        velocity = entry.get("velocity")
        if velocity is not None:
            atom.nucleus.velocity = as_vector(velocity)
        atoms[key] = atom
    return atoms


def _build_molecule(entry: Dict[str, Any], atoms: Dict[str, Atom], engine: PhysicsEngine) -> Molecule:
    molecule = Molecule(name=str(entry.get("name", "")))
    for key in entry.get("atoms", []):
        molecule.add_atom(_lookup_atom(atoms, key))

    for bond_entry in entry.get("bonds", []):
        pair = bond_entry.get("atoms") or []
        if len(pair) != 2:
            raise ValueError(f"Bond in molecule {molecule.name!r} must reference exactly 2 atoms.")
        atom_a = _lookup_atom(atoms, pair[0])
        atom_b = _lookup_atom(atoms, pair[1])
        calculator = engine.bond_calculator
        if "type" in bond_entry:
            bond_type = _parse_bond_type(bond_entry["type"])
        else:
            bond_type = calculator.determine_type(atom_a, atom_b)
        if "energy_ev" in bond_entry:
            energy = float(bond_entry["energy_ev"])
        else:
            energy = calculator.energy_for(bond_type)
        molecule.add_bond(Bond(atom_a, atom_b, bond_type, energy))
    return molecule


def _lookup_atom(atoms: Dict[str, Atom], key: Any) -> Atom:
    try:
        return atoms[str(key)]
    except KeyError:
        raise ValueError(f"Unknown atom id {key!r} referenced in system.molecules.") from None


def _parse_bond_type(name: Any) -> BondType:
    try:
        return BondType[str(name).upper()]
    except KeyError:
        raise ValueError(f"Unknown bond type {name!r}.") from None
