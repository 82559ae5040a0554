# scfcore

Building blocks for restricted self-consistent field (SCF) calculations.
A Hamiltonian is written as an `OperatorSum` of operator terms. The AO
integrals come from an *evaluator*: a callable that you supply. It takes
one operator term and returns that term's AO matrix as a NumPy array.
Any integral backend can sit underneath it.

## Installation

```
pip install scfcore
pip install "scfcore[test]"   # with the test dependencies
```

## Modules

### `scfcore.coulombs_law`

- `PointCharge(charge, x, y, z)` is a frozen dataclass. It has a
  `distance_to(other)` method.
- `coulombs_law(lhs, rhs)` sums `q_i q_j / r_ij` over two sets of charges.
  The two sets must be either disjoint or identical. When they are
  identical, each pair is counted once and self-interaction is skipped.

### `scfcore.operators`

This module holds the operator terms:

- `KineticEnergy`
- `ElectronNuclearAttraction`
- `ElectronRepulsion`
- `NuclearRepulsion`
- `Coulomb`
- `Exchange`
- `ExchangeCorrelation`
- `DensityOperator`
- `OverlapOperator`

It also holds two containers:

- `Density(value, orbitals)` holds an AO density matrix and the orbitals
  behind it. `is_empty()` is true when it has no matrix. An empty density
  is treated as a zero density.
- `OperatorSum` keeps `(coefficient, operator)` terms in insertion order.
  - `add(coefficient, operator)` appends a term.
  - `electronic()` returns the sum without its `NuclearRepulsion` terms.
  - An `OperatorSum` can be iterated, indexed and measured with `len`.

### `scfcore.linalg`

- `commutator(a, b, s)` returns `A B S - S B A`. It raises `ValueError`
  unless all three inputs are matrices.
- `generalized_eigensolve(a, b)` solves `A v = λ B v` for a symmetric `A`
  and a positive-definite `B`. It returns the eigenvalues in ascending
  order and the eigenvectors as the columns of a matrix.

### `scfcore.fock_operator`

- `restricted_fock(hamiltonian, density, one_electron=False)` builds a
  restricted Fock operator. The electron repulsion becomes `2J - K`.
- `kohn_sham_fock(hamiltonian, density, functional, one_electron=False)`
  builds a restricted Kohn–Sham operator. The electron repulsion becomes
  `2J + XC`.

In both functions:

- Kinetic and electron–nuclear terms carry over unchanged.
- An empty density leaves out the two-electron part.
- Any other kind of term raises `TypeError`.

### `scfcore.matrix_builder`

- `density_matrix(coefficients, weights, cutoff=1e-16)` returns
  `C_occ C_occ^T`. The orbitals whose weight has magnitude at least
  `cutoff` must form a leading, contiguous block. If they do not, it
  raises `ValueError`.
- `fock_matrix(fock, evaluator)` returns the coefficient-weighted sum of
  the AO matrices of the terms. For an empty operator it returns `None`.
- `integrals_driver(operator, fundamental, density_builder=None, xc_potential=None)`
  sends each kind of operator to its own callable:
  - A `DensityOperator` goes to `density_builder`. When that is `None`,
    `density_matrix` is used.
  - An `ExchangeCorrelation` goes to `xc_potential`.
  - Every other operator goes to `fundamental`.
- `determinant_value(coefficients, occupations, operator, evaluator)`
  contracts a determinant's density matrix with the matrix of a
  one-electron operator.
- `electronic_energy(coefficients, occupations, hamiltonian, evaluator, xc_energy=None)`
  sums the terms of the Hamiltonian, each scaled by its coefficient.
  `ExchangeCorrelation` terms go to `xc_energy`.

### `scfcore.registry`

`ModuleRegistry` records named components and their named submodule
slots. It has these methods:

- `add_module(name, submodules)`
- `change_submod(name, slot, target)`
- `submodule(name, slot)`
- `slots(name)`

`load_modules(registry)` registers the SCF component names, for example
`"Loop"`, `"SCF Driver"`, `"Core guess"` and `"Fock matrix builder"`. It
also wires up their default slots. The registry stores names only; it
does not run anything.

### `scfcore.guess`

- `Wavefunction(orbital_indices, coefficients, energies)` is a restricted
  determinant. It has these members:
  - `n_aos`
  - `n_orbitals`
  - `occupations()`
  - `density()`
- `count_electrons(hamiltonian)` returns the electron count shared by the
  electronic terms. It raises `ValueError` if the terms disagree.
- `diagonalization_update(fock, old_guess, evaluator)` solves
  `F C = S C ε` and keeps the occupied indices of `old_guess`.
- `core_guess(hamiltonian, n_aos, evaluator)` diagonalizes the
  zero-density, one-electron Fock operator. It occupies the lowest
  `n_electrons // 2` orbitals. An odd electron count raises `ValueError`.

### `scfcore.driver`

- `SCFSettings` holds the loop settings. The defaults are:
  - `max_iterations=20`
  - `energy_tolerance=1e-6`
  - `density_tolerance=1e-6`
  - `gradient_tolerance=1e-6`
- `scf_loop(hamiltonian, guess, evaluator, settings=None)` iterates a
  restricted Hartree–Fock SCF and returns an `SCFResult`. The result has
  these fields:
  - `energy`
  - `electronic_energy`
  - `nuclear_repulsion_energy`
  - `wavefunction`
  - `iterations`

  The loop has converged when three quantities are all below their
  tolerances:
  - the change in energy
  - the largest change in the density matrix
  - the squared orbital gradient `FPS - SPF`

  If the loop reaches `max_iterations` first, it raises `RuntimeError`.
- `scf_energy(hamiltonian, n_aos, evaluator, settings=None)` starts from
  the core guess and returns the total energy as a float.

Progress is logged through the `logging` module under the logger
`scfcore.driver`.

## The evaluator

The SCF functions call the evaluator with the following terms:

- `OverlapOperator()`
- `KineticEnergy(1)`
- `ElectronNuclearAttraction(1, nuclei)`
- `Coulomb(1, density)` and `Exchange(1, density)`. In both,
  `density.value` is the AO density matrix.

Density operators are turned into matrices by the package itself.

## Example

```python
from scfcore.coulombs_law import PointCharge, coulombs_law

charges = [PointCharge(1.0, 0.0, 0.0, 0.0), PointCharge(1.0, 0.0, 0.0, 1.4)]
print(coulombs_law(charges, charges))  # 1 / 1.4
```

A Hamiltonian for a two-electron system:

```python
from scfcore.operators import (
    ElectronNuclearAttraction, ElectronRepulsion, KineticEnergy,
    NuclearRepulsion, OperatorSum,
)
from scfcore.driver import SCFSettings, scf_energy

hamiltonian = OperatorSum()
hamiltonian.add(1.0, KineticEnergy(2))
hamiltonian.add(1.0, ElectronNuclearAttraction(2, charges))
hamiltonian.add(1.0, ElectronRepulsion(2))
hamiltonian.add(1.0, NuclearRepulsion(charges, charges))

energy = scf_energy(hamiltonian, n_aos, evaluator, SCFSettings())
```

Here `n_aos` is the size of your AO basis. `evaluator` is your integral
callable, as described above.

## What this package does not do

- It computes no integrals, so you must supply the evaluator.
- It does not read molecules or basis sets.
- It has no command-line program.
- The SCF loop is restricted Hartree–Fock only:
  - It uses no DIIS or damping.
  - `kohn_sham_fock` builds the Kohn–Sham operator, but the loop does
    not use it.
  - The exchange-correlation energies and potentials must come from
    callables that you provide.

## Running the tests

```
pytest
```