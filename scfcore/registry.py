"""A registry of named modules and the submodules wired into their slots."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Optional

__all__ = ["ModuleRegistry", "load_modules"]


@dataclass
class _Entry:
    slots: dict[str, Optional[str]] = field(default_factory=dict)


class ModuleRegistry:
    """Named modules, each with named slots that point at other modules."""

    def __init__(self) -> None:
        self._modules: dict[str, _Entry] = {}

    def add_module(self, name: str, submodules: Iterable[str] = ()) -> None:
        """Register ``name`` with the given (initially unset) submodule slots."""
        if name in self._modules:
            raise ValueError(f"module {name!r} is already registered")
        self._modules[name] = _Entry({slot: None for slot in submodules})

    def _entry(self, name: str) -> _Entry:
        try:
            return self._modules[name]
        except KeyError:
            raise KeyError(f"no module named {name!r}") from None

    def change_submod(self, name: str, slot: str, target: str) -> None:
        """Point the slot ``slot`` of module ``name`` at module ``target``."""
        entry = self._entry(name)
        if slot not in entry.slots:
            raise KeyError(f"module {name!r} has no submodule slot {slot!r}")
        self._entry(target)
        entry.slots[slot] = target

    def submodule(self, name: str, slot: str) -> Optional[str]:
        """The module wired into ``slot`` of ``name``, or None if unset."""
        entry = self._entry(name)
        if slot not in entry.slots:
            raise KeyError(f"module {name!r} has no submodule slot {slot!r}")
        return entry.slots[slot]

    def slots(self, name: str) -> tuple[str, ...]:
        """The submodule slot names of ``name``, in declaration order."""
        return tuple(self._entry(name).slots)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)


_MODULES: dict[str, tuple[str, ...]] = {
    "SCF Driver": ("Hamiltonian", "Guess", "Optimizer"),
    "Loop": (
        "Electronic energy",
        "Density matrix",
        "Guess update",
        "One-electron Fock operator",
        "Fock operator",
        "Fock matrix builder",
        "Charge-charge",
        "Overlap matrix builder",
    ),
    "Generalized eigensolve via Eigen": (),
    "AO Restricted Fock Op": (),
    "Restricted Fock Op": (),
    "AO Restricted One-Electron Fock Op": (),
    "Restricted One-Electron Fock Op": (),
    "AO Restricted Kohn-Sham Op": (),
    "Restricted Kohn-Sham Op": (),
    "AO Restricted One-Electron Kohn-Sham Op": (),
    "Restricted One-Electron Kohn-Sham Op": (),
    "Core guess": ("Build Fock operator", "Guess updater"),
    "SCF integral driver": ("Fundamental matrices", "Density matrix", "XC Potential"),
    "Density matrix builder": (),
    "Determinant driver": ("Two center evaluator", "Fock matrix"),
    "Electronic energy": ("determinant driver", "XC Energy"),
    "Fock matrix builder": ("Two center evaluator",),
    "Diagonalization Fock update": (
        "Fock matrix builder",
        "Diagonalizer",
        "Overlap matrix builder",
    ),
    "Coulomb's Law": (),
}

_DEFAULTS: tuple[tuple[str, str, str], ...] = (
    ("Loop", "Electronic energy", "Electronic energy"),
    ("Loop", "Density matrix", "Density matrix builder"),
    ("Loop", "Guess update", "Diagonalization Fock update"),
    ("Loop", "One-electron Fock operator", "Restricted One-Electron Fock Op"),
    ("Loop", "Fock operator", "Restricted Fock Op"),
    ("Loop", "Charge-charge", "Coulomb's Law"),
    ("Loop", "Fock matrix builder", "Fock matrix builder"),
    ("SCF Driver", "Guess", "Core guess"),
    ("SCF Driver", "Optimizer", "Loop"),
    ("Core guess", "Build Fock operator", "Restricted One-Electron Fock Op"),
    ("Core guess", "Guess updater", "Diagonalization Fock update"),
    ("SCF integral driver", "Density matrix", "Density matrix builder"),
    ("Fock matrix builder", "Two center evaluator", "SCF integral driver"),
    ("Determinant driver", "Two center evaluator", "SCF integral driver"),
    ("Determinant driver", "Fock matrix", "Fock matrix builder"),
    ("Electronic energy", "determinant driver", "Determinant driver"),
    ("Diagonalization Fock update", "Diagonalizer", "Generalized eigensolve via Eigen"),
    ("Diagonalization Fock update", "Fock matrix builder", "Fock matrix builder"),
)


def load_modules(registry: ModuleRegistry) -> ModuleRegistry:
    """Register every SCF module and wire up the default submodules."""
    for name, slots in _MODULES.items():
        registry.add_module(name, slots)
    for name, slot, target in _DEFAULTS:
        registry.change_submod(name, slot, target)
    return registry