"""Charge-charge interaction energy via Coulomb's law."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

__all__ = ["PointCharge", "coulombs_law"]


@dataclass(frozen=True)
class PointCharge:
    """A point charge located at (x, y, z), in atomic units."""

    charge: float
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: PointCharge) -> float:
        """Euclidean distance between this charge and ``other``."""
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )


def coulombs_law(lhs: Iterable[PointCharge], rhs: Iterable[PointCharge]) -> float:
    """Interaction energy between two sets of point charges.

    The sets must be either disjoint or identical. When they are identical,
    each unique pair is counted once: the inner sum over ``rhs`` stops as soon
    as it reaches the charge currently taken from ``lhs``.
    """
    rhs_charges = list(rhs)
    energy = 0.0
    for qi in lhs:
        for qj in rhs_charges:
            if qi == qj:
                break
            energy += qi.charge * qj.charge / qi.distance_to(qj)
    return energy