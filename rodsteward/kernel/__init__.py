# rodsteward/kernel - Element-agnostic structural analysis core
"""
KERNEL: DOF INDEXING, ASSEMBLY, SOLVE
=====================================

The plumbing of the structural analysis, independent of the element:

- A way to map (vertex, local_dof) → global index (DOFManager)
- Scatter-add assembly of element matrices
- A penalty-method solve with mechanism detection
- Euler buckling helpers

The rod frame element itself lives in rodsteward.frame.
"""

from .dof import DOFManager, DOF_ROD_FRAME
from .solve import solve_penalty, AnalysisSingularError

__all__ = ['DOFManager', 'DOF_ROD_FRAME', 'solve_penalty', 'AnalysisSingularError']
