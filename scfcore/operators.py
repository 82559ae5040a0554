"""Quantum-mechanical operators and densities used to build Fock operators."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import numpy as np

from scfcore.coulombs_law import PointCharge

__all__ = [
    "Density",
    "KineticEnergy",
    "ElectronNuclearAttraction",
    "ElectronRepulsion",
    "NuclearRepulsion",
    "Coulomb",
    "Exchange",
    "ExchangeCorrelation",
    "DensityOperator",
    "OverlapOperator",
    "OperatorSum",
]


@dataclass(eq=False)
class Density:
    """An electron density: its AO density matrix and the orbitals behind it.

    A density without a matrix is empty and is treated as a zero density.
    """

    value: Optional[np.ndarray] = None
    orbitals: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        if self.value is not None:
            self.value = np.asarray(self.value, dtype=float)
        if self.orbitals is not None:
            self.orbitals = np.asarray(self.orbitals, dtype=float)

    def is_empty(self) -> bool:
        """True if this density carries no matrix."""
        return self.value is None


def _as_nuclei(nuclei: Sequence[PointCharge]) -> tuple[PointCharge, ...]:
    return tuple(nuclei)


@dataclass(frozen=True)
class KineticEnergy:
    """Kinetic energy of ``electrons`` electrons."""

    electrons: int = 1


@dataclass(frozen=True)
class ElectronNuclearAttraction:
    """Attraction between ``electrons`` electrons and a set of nuclei."""

    electrons: int
    nuclei: tuple[PointCharge, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "nuclei", _as_nuclei(self.nuclei))


@dataclass(frozen=True)
class ElectronRepulsion:
    """Repulsion between two groups of electrons (by default the same group)."""

    electrons: int
    rhs_electrons: Optional[int] = None

    def __post_init__(self) -> None:
        if self.rhs_electrons is None:
            object.__setattr__(self, "rhs_electrons", self.electrons)


@dataclass(frozen=True)
class NuclearRepulsion:
    """Repulsion between two sets of nuclei."""

    lhs: tuple[PointCharge, ...]
    rhs: tuple[PointCharge, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "lhs", _as_nuclei(self.lhs))
        object.__setattr__(self, "rhs", _as_nuclei(self.rhs))


@dataclass(frozen=True)
class Coulomb:
    """Coulomb (J) operator of electrons interacting with a density."""

    electrons: int
    density: Density


@dataclass(frozen=True)
class Exchange:
    """Exchange (K) operator of electrons interacting with a density."""

    electrons: int
    density: Density


@dataclass(frozen=True)
class ExchangeCorrelation:
    """Exchange-correlation potential for a functional and a density."""

    functional: Any
    electrons: int
    density: Density


@dataclass(frozen=True, eq=False)
class DensityOperator:
    """Density operator built from orbital coefficients and occupation weights."""

    coefficients: np.ndarray
    weights: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "coefficients", np.asarray(self.coefficients, dtype=float)
        )
        object.__setattr__(self, "weights", tuple(float(w) for w in self.weights))


@dataclass(frozen=True)
class OverlapOperator:
    """The identity operator whose AO matrix is the overlap matrix."""


Operator = Union[
    KineticEnergy,
    ElectronNuclearAttraction,
    ElectronRepulsion,
    NuclearRepulsion,
    Coulomb,
    Exchange,
    ExchangeCorrelation,
    DensityOperator,
    OverlapOperator,
]


@dataclass
class OperatorSum:
    """A linear combination of operators, kept in insertion order."""

    terms: list[tuple[float, Any]] = field(default_factory=list)

    def add(self, coefficient: float, operator: Any) -> None:
        """Append ``coefficient * operator`` to the sum."""
        self.terms.append((float(coefficient), operator))

    def electronic(self) -> OperatorSum:
        """The sum without its nuclear-nuclear repulsion terms."""
        return OperatorSum(
            [(c, op) for c, op in self.terms if not isinstance(op, NuclearRepulsion)]
        )

    def __iter__(self) -> Iterator[tuple[float, Any]]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def __getitem__(self, index: int) -> tuple[float, Any]:
        return self.terms[index]