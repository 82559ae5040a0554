"""Initial guesses and Fock-diagonalisation updates for restricted SCF."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from scfcore.fock_operator import restricted_fock
from scfcore.linalg import generalized_eigensolve
from scfcore.matrix_builder import density_matrix, fock_matrix, integrals_driver
from scfcore.operators import (
    Density,
    ElectronNuclearAttraction,
    ElectronRepulsion,
    KineticEnergy,
    OperatorSum,
    OverlapOperator,
)

__all__ = [
    "Wavefunction",
    "count_electrons",
    "diagonalization_update",
    "core_guess",
]

Evaluator = Callable[[Any], np.ndarray]


@dataclass(eq=False)
class Wavefunction:
    """A restricted determinant: occupied orbital indices and the orbitals.

    ``coefficients`` holds the orbitals as columns over the AO basis and
    ``energies`` their orbital energies.
    """

    orbital_indices: tuple[int, ...]
    coefficients: np.ndarray
    energies: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __post_init__(self) -> None:
        self.orbital_indices = tuple(sorted(set(int(i) for i in self.orbital_indices)))
        self.coefficients = np.asarray(self.coefficients, dtype=float)
        if self.coefficients.ndim != 2:
            raise ValueError(
                "orbital coefficients must be a matrix, "
                f"got rank {self.coefficients.ndim}"
            )
        self.energies = np.asarray(self.energies, dtype=float)

    @property
    def n_aos(self) -> int:
        """Number of atomic orbitals the orbitals are expanded in."""
        return self.coefficients.shape[0]

    @property
    def n_orbitals(self) -> int:
        """Number of orbitals held by this wavefunction."""
        return self.coefficients.shape[1]

    def occupations(self) -> tuple[float, ...]:
        """Occupation weight of every orbital: one if occupied, else zero."""
        occupied = set(self.orbital_indices)
        beyond = [i for i in occupied if i >= self.n_orbitals or i < 0]
        if beyond:
            raise ValueError(
                f"occupied orbitals {sorted(beyond)} do not exist; "
                f"the wavefunction has {self.n_orbitals} orbitals"
            )
        return tuple(1.0 if i in occupied else 0.0 for i in range(self.n_orbitals))

    def density(self) -> np.ndarray:
        """AO density matrix of the occupied orbitals."""
        return density_matrix(self.coefficients, self.occupations())


def _ao_evaluator(evaluator: Evaluator) -> Evaluator:
    def evaluate(operator: Any) -> np.ndarray:
        return integrals_driver(operator, evaluator, xc_potential=evaluator)

    return evaluate


def count_electrons(hamiltonian: Iterable[tuple[float, Any]]) -> int:
    """Number of electrons the terms of ``hamiltonian`` act on.

    Every electronic term must agree on that number; nuclear terms are ignored.
    """
    n_electrons = 0

    def record(n: int) -> None:
        nonlocal n_electrons
        if n_electrons == 0:
            n_electrons = n
        elif n_electrons != n:
            raise ValueError("Deduced a different number of electrons")

    for _, operator in hamiltonian:
        if isinstance(operator, (KineticEnergy, ElectronNuclearAttraction)):
            record(operator.electrons)
        elif isinstance(operator, ElectronRepulsion):
            record(operator.electrons)
            record(operator.rhs_electrons)
    return n_electrons


def diagonalization_update(
    fock: OperatorSum, old_guess: Wavefunction, evaluator: Evaluator
) -> Wavefunction:
    """New orbitals from solving ``F C = S C e`` for the given Fock operator.

    The occupied orbital indices of ``old_guess`` carry over unchanged.
    """
    ao = _ao_evaluator(evaluator)
    f_matrix = fock_matrix(fock, ao)
    if f_matrix is None:
        raise ValueError("the Fock operator has no terms to diagonalise")
    s_matrix = ao(OverlapOperator())
    expected = (old_guess.n_aos, old_guess.n_aos)
    for name, matrix in (("Fock", f_matrix), ("overlap", s_matrix)):
        if matrix.shape != expected:
            raise ValueError(
                f"{name} matrix has shape {matrix.shape}, expected {expected}"
            )
    values, vectors = generalized_eigensolve(f_matrix, s_matrix)
    return Wavefunction(old_guess.orbital_indices, vectors, values)


def core_guess(
    hamiltonian: OperatorSum, n_aos: int, evaluator: Evaluator
) -> Wavefunction:
    """Initial guess from the Fock operator of a zero density (core Hamiltonian).

    The lowest half of the electron count in orbitals is occupied; the number
    of electrons must be even.
    """
    fock = restricted_fock(hamiltonian, Density(), one_electron=True)
    n_electrons = count_electrons(hamiltonian)
    if n_electrons % 2 != 0:
        raise ValueError("Assumed even number of electrons")
    zero_guess = Wavefunction(
        range(n_electrons // 2), np.zeros((n_aos, 0)), np.zeros(0)
    )
    return diagonalization_update(fock, zero_guess, evaluator)