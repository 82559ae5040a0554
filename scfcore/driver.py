"""The self-consistent field loop and the SCF energy driver."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from scfcore.coulombs_law import coulombs_law
from scfcore.fock_operator import restricted_fock
from scfcore.guess import Wavefunction, core_guess, diagonalization_update
from scfcore.linalg import commutator
from scfcore.matrix_builder import electronic_energy, fock_matrix, integrals_driver
from scfcore.operators import (
    Density,
    ElectronRepulsion,
    NuclearRepulsion,
    OperatorSum,
    OverlapOperator,
)

__all__ = ["SCFSettings", "SCFResult", "scf_loop", "scf_energy"]

logger = logging.getLogger(__name__)

Evaluator = Callable[[Any], np.ndarray]


@dataclass(frozen=True)
class SCFSettings:
    """Iteration limit and convergence thresholds of the SCF loop."""

    max_iterations: int = 20
    energy_tolerance: float = 1.0e-6
    density_tolerance: float = 1.0e-6
    gradient_tolerance: float = 1.0e-6


@dataclass(frozen=True)
class SCFResult:
    """Outcome of a converged SCF calculation."""

    energy: float
    electronic_energy: float
    nuclear_repulsion_energy: float
    wavefunction: Wavefunction
    iterations: int


def _ao_evaluator(evaluator: Evaluator) -> Evaluator:
    def evaluate(operator: Any) -> np.ndarray:
        return integrals_driver(operator, evaluator, xc_potential=evaluator)

    return evaluate


def _nuclear_repulsion(hamiltonian: OperatorSum) -> float:
    terms = [op for _, op in hamiltonian if isinstance(op, NuclearRepulsion)]
    if not terms:
        return 0.0
    v_nn = terms[-1]
    return coulombs_law(v_nn.lhs, v_nn.rhs)


def scf_loop(
    hamiltonian: OperatorSum,
    guess: Wavefunction,
    evaluator: Evaluator,
    settings: Optional[SCFSettings] = None,
) -> SCFResult:
    """Iterate a restricted SCF from ``guess`` until it converges.

    Convergence needs the change in energy, the largest change in the density
    matrix and the squared orbital gradient ``FPS - SPF`` all below their
    tolerances. Raises RuntimeError when the iteration limit is reached.
    """
    settings = settings or SCFSettings()
    ao = _ao_evaluator(evaluator)

    e_nuclear = _nuclear_repulsion(hamiltonian)
    core_terms = [
        (c, op)
        for c, op in hamiltonian.electronic()
        if not isinstance(op, ElectronRepulsion)
    ]
    s = ao(OverlapOperator())

    psi_old = guess
    rho_old = Density(psi_old.density(), psi_old.coefficients)
    e_old = 0.0

    iteration = 0
    while iteration < settings.max_iterations:
        f_old = restricted_fock(hamiltonian, rho_old, one_electron=True)
        psi_new = diagonalization_update(f_old, psi_old, evaluator)

        p_new = psi_new.density()
        rho_new = Density(p_new, psi_new.coefficients)

        f_many = restricted_fock(hamiltonian, rho_new)
        h_new = OperatorSum(core_terms + list(f_many))
        occupations = psi_new.occupations()
        e_new = electronic_energy(psi_new.coefficients, occupations, h_new, ao)
        logger.info(
            "SCF iteration = %d:  Electronic Energy = %.12f", iteration, e_new
        )

        converged = False
        if iteration > 0:
            de = e_new - e_old
            dp_norm = float(np.max(np.abs(p_new - rho_old.value), initial=0.0))

            f_new = restricted_fock(hamiltonian, rho_new, one_electron=True)
            f_matrix = fock_matrix(f_new, ao)
            grad = commutator(f_matrix, p_new, s)
            grad_norm = float(np.sum(grad * grad.T))

            logger.info("  dE = %.3e", de)
            logger.info("  dP = %.3e", dp_norm)
            logger.info("  dG = %.3e", grad_norm)

            converged = (
                abs(de) < settings.energy_tolerance
                and abs(grad_norm) < settings.gradient_tolerance
                and abs(dp_norm) < settings.density_tolerance
            )

        e_old = e_new
        psi_old = psi_new
        rho_old = rho_new
        if converged:
            break
        iteration += 1

    if iteration == settings.max_iterations:
        raise RuntimeError("SCF failed to converge")

    return SCFResult(
        energy=e_old + e_nuclear,
        electronic_energy=e_old,
        nuclear_repulsion_energy=e_nuclear,
        wavefunction=psi_old,
        iterations=iteration + 1,
    )


def scf_energy(
    hamiltonian: OperatorSum,
    n_aos: int,
    evaluator: Evaluator,
    settings: Optional[SCFSettings] = None,
) -> float:
    """Total SCF energy, starting from the core guess."""
    psi0 = core_guess(hamiltonian, n_aos, evaluator)
    return scf_loop(hamiltonian, psi0, evaluator, settings).energy