# rodsteward/kernel/dof.py
"""
DOF MANAGER: Node/DOF to Global Index Mapping
=============================================

PURPOSE:
--------
Maps (vertex, local_dof) to the row/column of the global stiffness matrix.
The rod frame model carries FIVE DOFs per vertex, torsion being left out:

    0  u    translation along global X
    1  v    translation along global Y
    2  w    translation along global Z
    3  θy   bending rotation about global Y
    4  θz   bending rotation about global Z

USAGE:
------
    dof = DOFManager(dof_per_node=5)
    dof.idx(node_id=2, local_dof=1)     # → 11
    dof.element_dof_map([0, 3])         # → [0..4, 15..19]
"""

from dataclasses import dataclass
from typing import List

# local DOF slots of a 5-DOF vertex
TRANSLATIONS = (0, 1, 2)
ROTATIONS = (3, 4)


@dataclass(frozen=True)
class DOFManager:
    """
    Degree-of-freedom indexing with a fixed number of DOFs per node.

    Examples:
    ---------
    >>> dof = DOFManager(dof_per_node=5)
    >>> dof.idx(1, 0)
    5
    >>> dof.ndof(4)
    20
    """
    dof_per_node: int

    def idx(self, node_id: int, local_dof: int) -> int:
        """Global DOF index of a node's local DOF."""
        return self.dof_per_node * node_id + local_dof

    def ndof(self, n_nodes: int) -> int:
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_id: int) -> List[int]:
        """
        All global DOF indices of one node.

        >>> DOFManager(dof_per_node=5).node_dofs(2)
        [10, 11, 12, 13, 14]
        """
        base = self.dof_per_node * node_id
        return list(range(base, base + self.dof_per_node))

    def translational_dofs(self, node_id: int) -> List[int]:
        """Global indices of u, v, w at a node."""
        return [self.idx(node_id, k) for k in TRANSLATIONS]

    def rotational_dofs(self, node_id: int) -> List[int]:
        """Global indices of θy, θz at a node."""
        return [self.idx(node_id, k) for k in ROTATIONS]

    def element_dof_map(self, node_ids: List[int]) -> List[int]:
        """
        Scatter/gather map for an element connecting `node_ids`.

        >>> DOFManager(dof_per_node=5).element_dof_map([0, 2])
        [0, 1, 2, 3, 4, 10, 11, 12, 13, 14]
        """
        result = []
        for node_id in node_ids:
            result.extend(self.node_dofs(node_id))
        return result


DOF_ROD_FRAME = DOFManager(dof_per_node=5)   # u, v, w, θy, θz
