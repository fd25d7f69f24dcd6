"""
Design Efficiency Analysis
Concurrence and information matrices, Jacobi eigenvalues, A- and D-efficiency
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from core.constants import (
    JACOBI_TOLERANCE,
    JACOBI_MAX_SWEEPS,
    EFFICIENCY_ZERO_TOLERANCE,
    ROW_SUM_TOLERANCE,
)

logger = logging.getLogger(__name__)

# replicate -> block -> treatment ids
ReplicateStructure = Sequence[Sequence[Sequence[int]]]


@dataclass
class EigenResult:
    """Eigenvalues of a symmetric matrix (descending) and solver status"""
    eigenvalues: List[float]
    converged: bool
    rotations: int


@dataclass
class EfficiencyReport:
    """A- and D-efficiency of a block design"""
    a_efficiency: float
    d_efficiency: float
    converged: bool = True
    degenerate: bool = False

    def to_dict(self) -> dict:
        return {
            "a_efficiency": self.a_efficiency,
            "d_efficiency": self.d_efficiency,
            "converged": self.converged,
            "degenerate": self.degenerate,
        }


def build_concurrence_matrix(structure: ReplicateStructure, t: int) -> np.ndarray:
    """
    Count how often each pair of treatments shares a block.

    Args:
        structure: One location's design, replicate -> block -> treatment ids (1-based)
        t: Number of treatments

    Returns:
        t x t symmetric integer matrix. Entry [i][j] is the number of blocks
        containing both treatment i+1 and j+1; the diagonal is the number of
        blocks containing each treatment.
    """
    concurrence = np.zeros((t, t), dtype=int)

    for replicate in structure:
        for block in replicate:
            for i in block:
                for j in block:
                    concurrence[i - 1, j - 1] += 1

    return concurrence


def build_information_matrix(concurrence: np.ndarray, r: int, k: int) -> np.ndarray:
    """
    Build the treatment information matrix (C-matrix) of an equireplicate,
    equal-block-size design.

    C = r(k-1)/k on the diagonal and -lambda_ij/k off the diagonal.

    Args:
        concurrence: t x t concurrence matrix
        r: Number of replicates
        k: Block size

    Returns:
        t x t symmetric float matrix
    """
    info = -np.asarray(concurrence, dtype=float) / k
    np.fill_diagonal(info, r * (k - 1) / k)
    return info


def check_row_sums(info: np.ndarray, tolerance: float = ROW_SUM_TOLERANCE) -> bool:
    """True if every row of the information matrix sums to zero within tolerance"""
    return bool(np.all(np.abs(info.sum(axis=1)) <= tolerance))


def _off_diagonal_maxima(a: np.ndarray, rows: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Largest off-diagonal magnitude of each given row and its first column index"""
    positions = np.arange(len(rows))
    off = np.abs(a[rows])
    off[positions, rows] = -1.0
    idx = off.argmax(axis=1)
    return off[positions, idx], idx


def jacobi_eigenvalues(
    matrix: np.ndarray,
    tolerance: float = JACOBI_TOLERANCE,
    max_sweeps: int = JACOBI_MAX_SWEEPS
) -> EigenResult:
    """
    Eigenvalues of a real symmetric matrix by the classical Jacobi method.

    Each step zeroes the largest off-diagonal element with a plane rotation.
    Iteration stops when that element falls below ``tolerance`` or after
    ``max_sweeps * n(n-1)/2`` rotations. Hitting the cap is not an error:
    the current diagonal is returned with ``converged=False``.

    The largest off-diagonal magnitude of every row is kept up to date, so
    a rotation only rescans the rows it can have changed instead of the
    whole matrix.

    Args:
        matrix: Square symmetric matrix (not modified)
        tolerance: Convergence threshold on the largest off-diagonal magnitude
        max_sweeps: Rotation budget, in sweeps of n(n-1)/2 rotations

    Returns:
        EigenResult with eigenvalues sorted in descending order

    Raises:
        ValueError: If the matrix is not square or not symmetric

    Examples:
        >>> jacobi_eigenvalues(np.array([[2.0, 1.0], [1.0, 2.0]])).eigenvalues
        [3.0, 1.0]
    """
    a = np.array(matrix, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Jacobi solver needs a square matrix, got shape {a.shape}")
    if not np.allclose(a, a.T):
        raise ValueError("Jacobi solver needs a symmetric matrix")

    n = a.shape[0]
    max_rotations = max_sweeps * n * (n - 1) // 2
    rotations = 0
    converged = n < 2

    if not converged:
        row_val, row_idx = _off_diagonal_maxima(a, np.arange(n))

    while not converged and rotations < max_rotations:
        # First row holding the largest element; its column is past the row
        p = int(np.argmax(row_val))
        if row_val[p] < tolerance:
            converged = True
            break
        q = int(row_idx[p])
        if q < p:
            p, q = q, p

        apq = a[p, q]
        app = a[p, p]
        aqq = a[q, q]

        theta = (aqq - app) / (2.0 * apq)
        sign = 1.0 if theta >= 0 else -1.0
        t_rot = sign / (abs(theta) + math.sqrt(1.0 + theta * theta))
        c = 1.0 / math.sqrt(1.0 + t_rot * t_rot)
        s = c * t_rot

        # Rotate columns/rows p and q, then fix the 2x2 pivot block
        rotated = a[:, [p, q]] @ np.array([[c, s], [-s, c]])
        a[:, [p, q]] = rotated
        a[[p, q], :] = rotated.T

        a[p, p] = app - t_rot * apq
        a[q, q] = aqq + t_rot * apq
        a[p, q] = 0.0
        a[q, p] = 0.0

        # Only columns p and q changed outside rows p and q
        changed = np.abs(rotated)
        best_val = changed.max(axis=1)
        best_idx = np.where(changed[:, 1] > changed[:, 0], q, p)
        grew = best_val > row_val
        stale = ~grew & ((best_val == row_val) | (row_idx == p) | (row_idx == q))
        row_val[grew] = best_val[grew]
        row_idx[grew] = best_idx[grew]
        stale[p] = True
        stale[q] = True
        rows = np.flatnonzero(stale)
        row_val[rows], row_idx[rows] = _off_diagonal_maxima(a, rows)

        rotations += 1

    if not converged:
        # Cap reached without checking the final state
        converged = bool(row_val.max() < tolerance)
        if not converged:
            logger.debug(f"[EFFICIENCY] Jacobi stopped after {rotations} rotations without converging")

    eigenvalues = sorted((float(v) for v in np.diag(a)), reverse=True)
    return EigenResult(eigenvalues=eigenvalues, converged=converged, rotations=rotations)


def calculate_efficiencies(eigenvalues: Sequence[float], t: int, r: int) -> EfficiencyReport:
    """
    Convert information-matrix eigenvalues into A- and D-efficiency.

    The smallest eigenvalue (the structural zero of C) is dropped. The
    remaining t-1 eigenvalues divided by r are the canonical efficiency
    factors e_h:

    - A-efficiency = (t-1) / sum(1/e_h)  (harmonic mean)
    - D-efficiency = exp(sum(ln e_h) / (t-1))  (geometric mean)

    Factors at or below EFFICIENCY_ZERO_TOLERANCE count as zero, which sends
    both efficiencies to 0. Non-finite results are reported as 0 with
    ``degenerate=True``.

    Args:
        eigenvalues: The t eigenvalues of C, any order
        t: Number of treatments
        r: Number of replicates

    Returns:
        EfficiencyReport
    """
    active = sorted(eigenvalues, reverse=True)[:t - 1]
    factors = [mu / r for mu in active]

    sum_inverse = 0.0
    sum_log = 0.0
    for e in factors:
        if e > EFFICIENCY_ZERO_TOLERANCE:
            sum_inverse += 1.0 / e
            sum_log += math.log(e)
        else:
            sum_inverse = math.inf
            sum_log = -math.inf

    a_eff = (t - 1) / sum_inverse if sum_inverse > 0 else math.nan
    d_eff = math.exp(sum_log / (t - 1)) if factors else math.nan

    degenerate = False
    if not math.isfinite(a_eff) or a_eff == 0.0:
        degenerate = True
        a_eff = 0.0
    if not math.isfinite(d_eff) or d_eff == 0.0:
        degenerate = True
        d_eff = 0.0

    if degenerate:
        logger.warning(
            "[EFFICIENCY] Degenerate design (disconnected or singular information matrix); "
            "efficiencies reported as 0"
        )

    return EfficiencyReport(a_efficiency=a_eff, d_efficiency=d_eff, degenerate=degenerate)


def compute_design_efficiency(structure: ReplicateStructure, t: int, k: int, r: int) -> EfficiencyReport:
    """
    Full efficiency chain for one location's design.

    Args:
        structure: Replicate -> block -> treatment ids for the reference location
        t: Number of treatments
        k: Block size
        r: Number of replicates

    Returns:
        EfficiencyReport including the solver's convergence status
    """
    concurrence = build_concurrence_matrix(structure, t)
    info = build_information_matrix(concurrence, r, k)

    if not check_row_sums(info):
        # Only possible when the structure is not resolvable with constant r and k
        logger.warning("[EFFICIENCY] Information matrix rows do not sum to zero")

    eig = jacobi_eigenvalues(info)
    report = calculate_efficiencies(eig.eigenvalues, t, r)
    report.converged = eig.converged

    logger.info(
        f"[EFFICIENCY] t={t}, k={k}, r={r}: A={report.a_efficiency:.4f}, "
        f"D={report.d_efficiency:.4f}, rotations={eig.rotations}"
    )
    return report
