# rodsteward/kernel/assemble.py
"""
ASSEMBLY: Global Stiffness and Load Vector
==========================================

Scatter-add of element contributions into the global system. Assembly does
not care what the element is; each contribution is just a DOF map and a
square matrix (or vector) in global coordinates:

    K = zeros(ndof × ndof)
    for dof_map, ke in contributions:
        K[dof_map[a], dof_map[b]] += ke[a, b]

For the rod frame every contribution is a 10×10 member matrix mapped onto
the two 5-DOF blocks of its end vertices.
"""

from typing import Dict, List, Sequence, Tuple

import numpy as np


def assemble_global_K(
    ndof: int,
    contributions: List[Tuple[List[int], np.ndarray]]
) -> np.ndarray:
    """
    Assemble the global stiffness matrix.

    Parameters:
    -----------
    ndof : int
        Total number of DOFs (5 × number of vertices for the rod frame)
    contributions : List[Tuple[List[int], np.ndarray]]
        (dof_map, ke) per element, ke of shape (len(dof_map), len(dof_map))
        already rotated to global coordinates

    Returns:
    --------
    np.ndarray
        Global stiffness matrix K, shape (ndof, ndof), symmetric positive
        semi-definite until restraints are applied
    """
    K = np.zeros((ndof, ndof), dtype=float)

    for dof_map, ke in contributions:
        n_element_dofs = len(dof_map)

        assert ke.shape == (n_element_dofs, n_element_dofs), \
            f"Element ke shape {ke.shape} doesn't match dof_map length {n_element_dofs}"

        idx = np.asarray(dof_map, dtype=int)
        K[np.ix_(idx, idx)] += ke

    return K


def nodal_load_vector(
    ndof: int,
    loads: Dict[int, Sequence[float]],
    dof_per_node: int
) -> np.ndarray:
    """
    Global load vector from point loads at vertices.

    Parameters:
    -----------
    ndof : int
        Total number of DOFs
    loads : Dict[int, Sequence[float]]
        vertex → force components (Fx, Fy, Fz); shorter sequences fill the
        leading DOFs only, rotational DOFs are never loaded here
    dof_per_node : int
        DOFs per vertex

    Example:
    --------
    >>> F = nodal_load_vector(10, {1: (0.0, 0.0, -500.0)}, dof_per_node=5)
    >>> float(F[7])
    -500.0
    """
    F = np.zeros(ndof, dtype=float)
    for node_id, components in loads.items():
        base = dof_per_node * node_id
        for i, val in enumerate(components):
            F[base + i] += val
    return F
