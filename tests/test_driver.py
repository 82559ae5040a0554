import numpy as np
import pytest

from scfcore.coulombs_law import PointCharge, coulombs_law
from scfcore.driver import SCFSettings, scf_energy, scf_loop
from scfcore.guess import core_guess
from scfcore.linalg import commutator
from scfcore.operators import (
    Coulomb,
    ElectronNuclearAttraction,
    ElectronRepulsion,
    Exchange,
    KineticEnergy,
    NuclearRepulsion,
    OperatorSum,
    OverlapOperator,
)

T = np.array([[-1.0, -0.5], [-0.5, 0.5]])
V = np.array([[-0.5, 0.0], [0.0, -0.2]])
NUCLEI = (PointCharge(1.0), PointCharge(1.0, z=1.4))


def make_eri(u, n=2):
    eri = np.zeros((n, n, n, n))
    for m in range(n):
        eri[m, m, m, m] = u
    return eri


def make_evaluator(t=T, v=V, u=1.0):
    s = np.eye(t.shape[0])
    eri = make_eri(u, t.shape[0])

    def evaluator(op):
        if isinstance(op, OverlapOperator):
            return s
        if isinstance(op, KineticEnergy):
            return t
        if isinstance(op, ElectronNuclearAttraction):
            return v
        if isinstance(op, Coulomb):
            return np.einsum("mnls,ls->mn", eri, op.density.value)
        if isinstance(op, Exchange):
            return np.einsum("mlns,ls->mn", eri, op.density.value)
        raise TypeError(type(op).__name__)

    return evaluator, eri


def make_hamiltonian(n=2, nuclear=True):
    h = OperatorSum()
    h.add(1.0, KineticEnergy(n))
    h.add(1.0, ElectronNuclearAttraction(n, NUCLEI))
    h.add(1.0, ElectronRepulsion(n))
    if nuclear:
        h.add(1.0, NuclearRepulsion(NUCLEI, NUCLEI))
    return h


def run(h, evaluator, settings=None):
    return scf_loop(h, core_guess(h, 2, evaluator), evaluator, settings)


def test_hubbard_dimer_rhf_energy():
    hopping = np.array([[0.0, -1.0], [-1.0, 0.0]])
    evaluator, _ = make_evaluator(t=hopping, v=np.zeros((2, 2)), u=2.0)
    result = run(make_hamiltonian(nuclear=False), evaluator)
    # RHF energy of the half-filled Hubbard dimer is -2t + U/2.
    assert result.electronic_energy == pytest.approx(-1.0)
    assert result.energy == pytest.approx(result.electronic_energy)
    assert result.nuclear_repulsion_energy == 0.0


def test_converged_orbitals_are_self_consistent():
    evaluator, eri = make_evaluator()
    result = run(make_hamiltonian(), evaluator)
    wf = result.wavefunction
    p = wf.density()
    j = np.einsum("mnls,ls->mn", eri, p)
    k = np.einsum("mlns,ls->mn", eri, p)
    f = T + V + 2.0 * j - k
    np.testing.assert_allclose(
        f @ wf.coefficients, wf.coefficients * wf.energies, atol=1e-3
    )
    assert np.max(np.abs(commutator(f, p, np.eye(2)))) < 1e-3


def test_total_energy_includes_nuclear_repulsion():
    evaluator, _ = make_evaluator()
    result = run(make_hamiltonian(), evaluator)
    assert result.nuclear_repulsion_energy == pytest.approx(
        coulombs_law(NUCLEI, NUCLEI)
    )
    assert result.energy == pytest.approx(
        result.electronic_energy + result.nuclear_repulsion_energy
    )


def test_without_repulsion_energy_is_twice_lowest_orbital():
    evaluator, _ = make_evaluator(u=0.0)
    result = run(make_hamiltonian(nuclear=False), evaluator)
    assert result.electronic_energy == pytest.approx(
        2.0 * np.linalg.eigvalsh(T + V)[0]
    )


@pytest.mark.parametrize("max_iterations", [0, 1])
def test_too_few_iterations_fail(max_iterations):
    evaluator, _ = make_evaluator()
    with pytest.raises(RuntimeError):
        run(make_hamiltonian(), evaluator, SCFSettings(max_iterations=max_iterations))


def test_iterations_within_limit():
    evaluator, _ = make_evaluator()
    settings = SCFSettings(max_iterations=20)
    result = run(make_hamiltonian(), evaluator, settings)
    assert 2 <= result.iterations <= settings.max_iterations


def test_scf_energy_matches_loop():
    evaluator, _ = make_evaluator()
    h = make_hamiltonian()
    assert scf_energy(h, 2, evaluator) == pytest.approx(run(h, evaluator).energy)


def test_scf_energy_odd_electrons():
    evaluator, _ = make_evaluator()
    with pytest.raises(ValueError):
        scf_energy(make_hamiltonian(3), 2, evaluator)