"""Builders for restricted Fock and Kohn-Sham operators."""

from __future__ import annotations

from typing import Any

from scfcore.operators import (
    Coulomb,
    Density,
    ElectronNuclearAttraction,
    ElectronRepulsion,
    Exchange,
    ExchangeCorrelation,
    KineticEnergy,
    OperatorSum,
)

__all__ = ["restricted_fock", "kohn_sham_fock"]


def _electrons(operator: Any, one_electron: bool) -> int:
    return 1 if one_electron else operator.electrons


def _build(hamiltonian: OperatorSum, one_electron: bool, repulsion) -> OperatorSum:
    """Map each electronic term of ``hamiltonian`` onto the Fock operator.

    Kinetic and electron-nuclear terms map to themselves with coefficient one;
    the electron-electron repulsion is handed to ``repulsion``. Any other term
    is an error.
    """
    fock = OperatorSum()
    for _, op in hamiltonian.electronic():
        electrons = _electrons(op, one_electron) if hasattr(op, "electrons") else None
        if isinstance(op, KineticEnergy):
            fock.add(1.0, KineticEnergy(electrons))
        elif isinstance(op, ElectronNuclearAttraction):
            fock.add(1.0, ElectronNuclearAttraction(electrons, op.nuclei))
        elif isinstance(op, ElectronRepulsion):
            repulsion(fock, electrons)
        else:
            raise TypeError(
                f"cannot map operator {type(op).__name__} onto a Fock operator"
            )
    return fock


def restricted_fock(
    hamiltonian: OperatorSum, density: Density, one_electron: bool = False
) -> OperatorSum:
    """Restricted Fock operator: electron repulsion becomes ``2J - K``.

    An empty density counts as zero, in which case ``2J - K`` is left out.
    With ``one_electron`` the operators act on a single electron.
    """

    def repulsion(fock: OperatorSum, electrons: int) -> None:
        if density.is_empty():
            return
        fock.add(2.0, Coulomb(electrons, density))
        fock.add(-1.0, Exchange(electrons, density))

    return _build(hamiltonian, one_electron, repulsion)


def kohn_sham_fock(
    hamiltonian: OperatorSum,
    density: Density,
    functional: Any,
    one_electron: bool = False,
) -> OperatorSum:
    """Restricted Kohn-Sham operator: electron repulsion becomes ``2J + X``.

    ``X`` is the exchange-correlation potential of ``functional``. An empty
    density counts as zero, in which case ``2J + X`` is left out.
    """

    def repulsion(fock: OperatorSum, electrons: int) -> None:
        if density.is_empty():
            return
        fock.add(2.0, Coulomb(electrons, density))
        fock.add(1.0, ExchangeCorrelation(functional, electrons, density))

    return _build(hamiltonian, one_electron, repulsion)