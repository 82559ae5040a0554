import numpy as np
import pytest

from scfcore.coulombs_law import PointCharge
from scfcore.matrix_builder import (
    density_matrix,
    determinant_value,
    electronic_energy,
    fock_matrix,
    integrals_driver,
)
from scfcore.operators import (
    Coulomb,
    Density,
    DensityOperator,
    ElectronNuclearAttraction,
    ExchangeCorrelation,
    KineticEnergy,
    NuclearRepulsion,
    OperatorSum,
    OverlapOperator,
)

T = np.array([[1.0, 0.2], [0.2, 0.7]])
V = np.array([[-2.0, -0.4], [-0.4, -1.5]])
S = np.array([[1.0, 0.3], [0.3, 1.0]])
NUCLEI = (PointCharge(1.0, 0.0, 0.0, 0.0),)


def _fundamental(op):
    if isinstance(op, KineticEnergy):
        return T
    if isinstance(op, ElectronNuclearAttraction):
        return V
    if isinstance(op, OverlapOperator):
        return S
    raise TypeError(type(op).__name__)


def _evaluator(op):
    return integrals_driver(op, _fundamental)


def _diagonal_sum(m):
    return float(m.diagonal().sum())


def test_density_matrix_selects_occupied_block():
    c = np.eye(3)
    p = density_matrix(c, [2.0, 2.0, 0.0])
    np.testing.assert_allclose(p, np.diag([1.0, 1.0, 0.0]))


def test_density_matrix_is_symmetric_and_idempotent_for_orthonormal_orbitals():
    theta = 0.4
    c = np.array([[np.cos(theta), -np.sin(theta)], [np.sin(theta), np.cos(theta)]])
    p = density_matrix(c, [1.0, 0.0])
    np.testing.assert_allclose(p, p.T)
    np.testing.assert_allclose(p @ p, p, atol=1e-12)
    assert _diagonal_sum(p) == pytest.approx(1.0)


def test_density_matrix_cutoff_excludes_small_weights():
    c = np.eye(2)
    p = density_matrix(c, [1.0, 1e-3], cutoff=1e-2)
    np.testing.assert_allclose(p, np.diag([1.0, 0.0]))


def test_density_matrix_non_contiguous_raises():
    with pytest.raises(ValueError, match="contiguous"):
        density_matrix(np.eye(3), [0.0, 2.0, 2.0])


def test_density_matrix_too_many_occupied_raises():
    with pytest.raises(ValueError):
        density_matrix(np.eye(2)[:, :1], [1.0, 1.0])


def test_fock_matrix_sums_weighted_terms():
    fock = OperatorSum()
    fock.add(1.0, KineticEnergy(1))
    fock.add(2.0, ElectronNuclearAttraction(1, NUCLEI))
    np.testing.assert_allclose(fock_matrix(fock, _fundamental), T + 2.0 * V)


def test_fock_matrix_empty_is_none():
    assert fock_matrix(OperatorSum(), _fundamental) is None


def test_integrals_driver_dispatches_density_operator():
    c = np.eye(2)
    result = integrals_driver(DensityOperator(c, (1.0, 0.0)), _fundamental)
    np.testing.assert_allclose(result, density_matrix(c, (1.0, 0.0)))


def test_integrals_driver_uses_custom_density_builder():
    result = integrals_driver(
        DensityOperator(np.eye(2), (1.0, 0.0)),
        _fundamental,
        density_builder=lambda op: S,
    )
    np.testing.assert_allclose(result, S)


def test_integrals_driver_falls_back_to_fundamental():
    np.testing.assert_allclose(integrals_driver(OverlapOperator(), _fundamental), S)


def test_integrals_driver_xc_without_evaluator_raises():
    xc = ExchangeCorrelation("pbe0", 1, Density(np.eye(2)))
    with pytest.raises(RuntimeError):
        integrals_driver(xc, _fundamental)


def test_integrals_driver_xc_potential():
    xc = ExchangeCorrelation("pbe0", 1, Density(np.eye(2)))
    result = integrals_driver(xc, _fundamental, xc_potential=lambda op: T)
    np.testing.assert_allclose(result, T)


def test_determinant_value_picks_occupied_diagonal():
    value = determinant_value(np.eye(2), (1.0, 0.0), KineticEnergy(4), _evaluator)
    assert value == pytest.approx(T[0, 0])


def test_determinant_value_maps_to_one_electron_operator():
    seen = []

    def evaluator(op):
        seen.append(op)
        return _evaluator(op)

    determinant_value(np.eye(2), (1.0, 1.0), KineticEnergy(6), evaluator)
    assert seen[1] == KineticEnergy(1)
    assert _diagonal_sum(T) == pytest.approx(
        determinant_value(np.eye(2), (1.0, 1.0), KineticEnergy(6), _evaluator)
    )


def test_determinant_value_unsupported_operator_raises():
    with pytest.raises(TypeError):
        determinant_value(
            np.eye(2), (1.0, 0.0), NuclearRepulsion(NUCLEI, NUCLEI), _evaluator
        )


def test_determinant_value_coulomb_uses_density():
    density = Density(np.eye(2))

    def evaluator(op):
        if isinstance(op, Coulomb):
            assert op.electrons == 1
            assert op.density is density
            return S
        return _evaluator(op)

    value = determinant_value(np.eye(2), (1.0, 0.0), Coulomb(2, density), evaluator)
    assert value == pytest.approx(S[0, 0])


def test_electronic_energy_is_linear_in_terms():
    h = OperatorSum()
    h.add(1.0, KineticEnergy(2))
    h.add(0.5, ElectronNuclearAttraction(2, NUCLEI))
    c = np.eye(2)
    occ = (1.0, 0.0)
    expected = determinant_value(c, occ, KineticEnergy(2), _evaluator) + 0.5 * (
        determinant_value(c, occ, ElectronNuclearAttraction(2, NUCLEI), _evaluator)
    )
    assert electronic_energy(c, occ, h, _evaluator) == pytest.approx(expected)


def test_electronic_energy_xc_term():
    h = OperatorSum()
    h.add(2.0, ExchangeCorrelation("pbe0", 2, Density(np.eye(2))))
    calls = []

    def xc_energy(c, occ, op):
        calls.append(op.functional)
        return 3.0

    assert electronic_energy(np.eye(2), (1.0, 0.0), h, _evaluator, xc_energy) == 6.0
    assert calls == ["pbe0"]


def test_electronic_energy_xc_without_evaluator_raises():
    h = OperatorSum()
    h.add(1.0, ExchangeCorrelation("pbe0", 2, Density(np.eye(2))))
    with pytest.raises(RuntimeError):
        electronic_energy(np.eye(2), (1.0, 0.0), h, _evaluator)


def test_electronic_energy_empty_hamiltonian_is_zero():
    assert electronic_energy(np.eye(2), (1.0, 0.0), OperatorSum(), _evaluator) == 0.0