# rodsteward/kernel/solve.py
"""Penalty-method linear solve with restraint handling and mechanism detection."""

import logging
from typing import Iterable, List, Optional

import numpy as np

from ..config import CONFIG
from ..errors import RodStewardError
from .dof import DOFManager

logger = logging.getLogger(__name__)


class AnalysisSingularError(RodStewardError, RuntimeError):
    """Raised when the structure is a mechanism or the system cannot be solved."""
    pass


def unsupported_rotations(K: np.ndarray, dof: DOFManager, n_nodes: int) -> List[int]:
    """
    Rotational DOFs that no member gives any stiffness.

    A positive semi-definite K with a zero diagonal entry has the whole row
    and column zero, so these DOFs are decoupled and carry no load.
    """
    return [
        d for node in range(n_nodes) for d in dof.rotational_dofs(node)
        if K[d, d] == 0.0
    ]


def check_stability(K: np.ndarray, free_dofs: Iterable[int], cond_limit: float) -> float:
    """
    Condition number of K reduced to `free_dofs`.

    Raises:
        AnalysisSingularError: If K is not finite or cond > cond_limit
    """
    free = np.asarray(sorted(set(free_dofs)), dtype=int)
    if not np.all(np.isfinite(K)):
        raise AnalysisSingularError("Stiffness matrix has non-finite entries. Check section properties and geometry.")
    if len(free) == 0:
        return 1.0

    cond = np.linalg.cond(K[np.ix_(free, free)])
    if not np.isfinite(cond) or cond > cond_limit:
        raise AnalysisSingularError(
            f"Unstable system (cond={cond:.2e}). Check restraints. Need cond < {cond_limit:.0e}."
        )
    return float(cond)


def solve_penalty(
    K: np.ndarray,
    F: np.ndarray,
    restrained_nodes: Iterable[int],
    dof: DOFManager,
    penalty: Optional[float] = None,
    cond_limit: Optional[float] = None,
) -> np.ndarray:
    """
    Solve K·U = F with translational restraints applied by the penalty method.

    Rotational DOFs without stiffness are pinned first. At each restrained
    vertex the three translational diagonal entries become the vertex's
    largest translational diagonal times `penalty` and their loads are
    zeroed. After the single solve, restrained DOFs are set exactly to zero.

    Args:
        K: Global stiffness matrix (ndof x ndof), not modified
        F: Global load vector (ndof,), not modified
        restrained_nodes: Vertices with all translations restrained
        dof: DOF manager used to build K
        penalty: Penalty multiplier (default CONFIG.penalty_factor)
        cond_limit: Max condition number of the unrestrained system
            (default CONFIG.cond_limit)

    Returns:
        U: Displacement vector (ndof,)

    Raises:
        AnalysisSingularError: If the structure is unstable or the solve fails
    """
    penalty = CONFIG.penalty_factor if penalty is None else penalty
    cond_limit = CONFIG.cond_limit if cond_limit is None else cond_limit

    ndof = K.shape[0]
    n_nodes = ndof // dof.dof_per_node
    K = np.array(K, dtype=float)
    F = np.array(F, dtype=float)

    pinned = unsupported_rotations(K, dof, n_nodes)
    restrained = [d for node in sorted(set(restrained_nodes)) for d in dof.translational_dofs(node)]

    blocked = set(pinned) | set(restrained)
    check_stability(K, [d for d in range(ndof) if d not in blocked], cond_limit)

    for d in pinned:
        K[d, d] = 1.0
        F[d] = 0.0

    for node in sorted(set(restrained_nodes)):
        tdofs = dof.translational_dofs(node)
        big = max(K[d, d] for d in tdofs) * penalty
        if big <= 0.0:
            big = penalty
        for d in tdofs:
            K[d, d] = big
            F[d] = 0.0

    try:
        U = np.linalg.solve(K, F)
    except np.linalg.LinAlgError as err:
        raise AnalysisSingularError(f"Linear solve failed: {err}") from err

    if not np.all(np.isfinite(U)):
        raise AnalysisSingularError("Linear solve produced non-finite displacements.")

    U[restrained] = 0.0
    logger.debug("solved %d DOFs: %d restrained, %d pinned rotations", ndof, len(restrained), len(pinned))
    return U
