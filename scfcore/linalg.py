"""Dense linear algebra used by the SCF procedure."""

from __future__ import annotations

import numpy as np
import scipy.linalg

__all__ = ["commutator", "generalized_eigensolve"]


def commutator(a, b, s) -> np.ndarray:
    """The generalised commutator ``A B S - S B A``.

    With ``A`` the Fock matrix, ``B`` the density matrix and ``S`` the overlap
    matrix this is the orbital gradient.
    """
    a, b, s = (np.asarray(m, dtype=float) for m in (a, b, s))
    if a.ndim != 2 or b.ndim != 2 or s.ndim != 2:
        raise ValueError(
            "Input matrix rank not 2!\n"
            f"Matrix 1 Rank: {a.ndim}\nMatrix 2 Rank: {b.ndim}\n"
            f"Matrix 3 Rank: {s.ndim}\n"
        )
    return a @ b @ s - s @ b @ a


def generalized_eigensolve(a, b) -> tuple[np.ndarray, np.ndarray]:
    """Solve ``A v = lambda B v`` for symmetric ``A`` and positive-definite ``B``.

    Returns the eigenvalues in ascending order and the eigenvectors as the
    columns of a matrix, normalised so that ``V.T @ B @ V`` is the identity.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"matrix A must be square, got shape {a.shape}")
    if b.shape != a.shape:
        raise ValueError(f"matrix B has shape {b.shape}, expected {a.shape}")
    try:
        values, vectors = scipy.linalg.eigh(a, b)
    except np.linalg.LinAlgError as exc:
        raise ValueError(f"generalized eigenproblem failed: {exc}") from exc
    return values, vectors