"""Builders for AO matrices and determinant expectation values."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Optional

import numpy as np

from scfcore.operators import (
    Coulomb,
    DensityOperator,
    ElectronNuclearAttraction,
    Exchange,
    ExchangeCorrelation,
    KineticEnergy,
    OperatorSum,
)

__all__ = [
    "density_matrix",
    "fock_matrix",
    "integrals_driver",
    "determinant_value",
    "electronic_energy",
]

Evaluator = Callable[[Any], np.ndarray]

DEFAULT_CUTOFF = 1e-16


def density_matrix(
    coefficients, weights: Sequence[float], cutoff: float = DEFAULT_CUTOFF
) -> np.ndarray:
    """AO density matrix ``C_occ C_occ^T`` of the orbitals in the ensemble.

    An orbital is part of the ensemble when the magnitude of its weight is at
    least ``cutoff``. The ensemble must be the leading, contiguous block of
    orbitals.
    """
    c = np.asarray(coefficients, dtype=float)
    if c.ndim != 2:
        raise ValueError(f"orbital coefficients must be a matrix, got rank {c.ndim}")
    participants = [i for i, w in enumerate(weights) if abs(w) >= cutoff]
    if participants != list(range(len(participants))):
        raise ValueError(
            "Please shuffle your orbitals so that the ensemble is a "
            "contiguous slice of the orbitals."
        )
    n_occ = len(participants)
    if n_occ > c.shape[1]:
        raise ValueError(
            f"{n_occ} occupied orbitals requested but only {c.shape[1]} exist"
        )
    occupied = c[:, :n_occ]
    return occupied @ occupied.T


def fock_matrix(fock: OperatorSum, evaluator: Evaluator) -> Optional[np.ndarray]:
    """AO matrix of a Fock operator: the weighted sum of its terms' matrices.

    ``evaluator`` maps a single operator to its AO matrix. An empty Fock
    operator has no matrix and gives ``None``.
    """
    total: Optional[np.ndarray] = None
    for coefficient, operator in fock:
        term = np.asarray(evaluator(operator), dtype=float) * coefficient
        total = term if total is None else total + term
    return total


def integrals_driver(
    operator: Any,
    fundamental: Evaluator,
    density_builder: Optional[Evaluator] = None,
    xc_potential: Optional[Evaluator] = None,
) -> np.ndarray:
    """AO matrix of ``operator``, dispatched on its kind.

    Density operators go to ``density_builder`` (by default
    :func:`density_matrix`), exchange-correlation potentials go to
    ``xc_potential`` and everything else goes to ``fundamental``.
    """
    if isinstance(operator, DensityOperator):
        if density_builder is None:
            return density_matrix(operator.coefficients, operator.weights)
        return np.asarray(density_builder(operator), dtype=float)
    if isinstance(operator, ExchangeCorrelation):
        if xc_potential is None:
            raise RuntimeError("no evaluator is set for the XC potential")
        return np.asarray(xc_potential(operator), dtype=float)
    return np.asarray(fundamental(operator), dtype=float)


def _one_electron(operator: Any) -> Any:
    if isinstance(operator, KineticEnergy):
        return KineticEnergy(1)
    if isinstance(operator, ElectronNuclearAttraction):
        return ElectronNuclearAttraction(1, operator.nuclei)
    if isinstance(operator, Coulomb):
        return Coulomb(1, operator.density)
    if isinstance(operator, Exchange):
        return Exchange(1, operator.density)
    raise TypeError(
        f"no determinant expectation value for operator {type(operator).__name__}"
    )


def determinant_value(
    coefficients, occupations: Sequence[float], operator: Any, evaluator: Evaluator
) -> float:
    """Expectation value of a one-electron operator for a determinant.

    The determinant's density matrix and the operator's one-electron AO matrix
    are both obtained from ``evaluator`` and fully contracted.
    """
    rho = np.asarray(evaluator(DensityOperator(coefficients, occupations)), dtype=float)
    t = np.asarray(evaluator(_one_electron(operator)), dtype=float)
    return float(np.sum(rho * t))


def electronic_energy(
    coefficients,
    occupations: Sequence[float],
    hamiltonian: OperatorSum,
    evaluator: Evaluator,
    xc_energy: Optional[Callable[[Any, Sequence[float], Any], float]] = None,
) -> float:
    """Electronic energy of a determinant for an electronic Hamiltonian.

    Exchange-correlation terms are evaluated by
    ``xc_energy(coefficients, occupations, operator)``; all other terms by
    :func:`determinant_value`. Each value is scaled by its coefficient.
    """
    energy = 0.0
    for coefficient, operator in hamiltonian:
        if isinstance(operator, ExchangeCorrelation):
            if xc_energy is None:
                raise RuntimeError("no evaluator is set for the XC energy")
            value = float(xc_energy(coefficients, occupations, operator))
        else:
            value = determinant_value(coefficients, occupations, operator, evaluator)
        energy += coefficient * value
    return energy