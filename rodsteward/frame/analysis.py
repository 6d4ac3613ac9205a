# rodsteward/frame/analysis.py
"""
STRUCTURAL ANALYSIS: Rod Frame Under Point Loads
================================================

PURPOSE:
--------
Runs a linear static analysis of the rod graph treated as a space frame:

    1. One 10×10 member per edge (rodsteward.frame.elements)
    2. Scatter-add into the global 5N × 5N stiffness (rodsteward.kernel)
    3. Point loads (Fx, Fy, Fz) at vertices
    4. Penalty-method restraints on the translations of restrained
       vertices, mechanism check, single solve
    5. Member end forces, extreme-fibre stresses and utilization

STRESSES:
---------
From the local end forces f of a member:

    σa      = (f[5] − f[0]) / (2A)                 axial, tension positive
    σb(i)   = |f[3]| / Sy + |f[4]| / Sz            bending at end i
    σb(j)   = |f[8]| / Sy + |f[9]| / Sz            bending at end j

    stress pair = [min, max] of σa ± σb(i), σa ± σb(j)

UTILIZATION:
------------
The peak stress magnitude is checked against one allowable, chosen by the
sign of the minimum stress. A member with any compression uses the lesser
of Fu and the Euler critical stress σcr = π²·E·min(Iy, Iz) / (L²·A):

    peak        = max(|min|, |max|)
    utilization = peak / min(Fu, σcr)   if min < 0
                  peak / Fu             otherwise
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..errors import InvalidInputError
from ..kernel.assemble import assemble_global_K, nodal_load_vector
from ..kernel.buckling import euler_critical_stress
from ..kernel.dof import DOF_ROD_FRAME
from ..kernel.solve import solve_penalty
from ..model import Edge, Graph
from .elements import member_end_forces, rod_global_stiffness
from .model import SectionProperties

logger = logging.getLogger(__name__)

Loads = Union[np.ndarray, Mapping[int, Sequence[float]]]


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    """
    Output of analyze().

    Attributes:
    -----------
    K : np.ndarray
        Assembled global stiffness (before restraints), shape (5N, 5N)
    displacements : np.ndarray
        Global displacement vector U, shape (5N,)
    end_forces : Dict[Edge, np.ndarray]
        Local member end forces, shape (10,) per member
    stresses : Dict[Edge, Tuple[float, float]]
        [min, max] extreme-fibre stress per member
    utilization : Dict[Edge, float]
        Utilization ratio per member
    lengths : Dict[Edge, float]
        Member lengths
    """
    K: np.ndarray
    displacements: np.ndarray
    end_forces: Dict[Edge, np.ndarray]
    stresses: Dict[Edge, Tuple[float, float]]
    utilization: Dict[Edge, float]
    lengths: Dict[Edge, float]

    @property
    def nodal_displacements(self) -> np.ndarray:
        """Shape (N, 5): [u, v, w, θy, θz] per vertex."""
        return self.displacements.reshape(-1, DOF_ROD_FRAME.dof_per_node)

    @property
    def max_utilization(self) -> float:
        return max(self.utilization.values(), default=0.0)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per member: edge ends, length, stress pair, utilization."""
        rows = []
        for edge, (s_min, s_max) in self.stresses.items():
            rows.append({
                'start': edge[0],
                'end': edge[1],
                'length': self.lengths[edge],
                'stress_min': s_min,
                'stress_max': s_max,
                'utilization': self.utilization[edge],
            })
        return pd.DataFrame(rows, columns=['start', 'end', 'length', 'stress_min', 'stress_max', 'utilization'])


def member_stresses(f: np.ndarray, section: SectionProperties) -> Tuple[float, float]:
    """[min, max] extreme-fibre stress from local end forces."""
    axial = (f[5] - f[0]) / (2.0 * section.A)
    bend_i = abs(f[3]) / section.Sy + abs(f[4]) / section.Sz
    bend_j = abs(f[8]) / section.Sy + abs(f[9]) / section.Sz
    extremes = (axial + bend_i, axial - bend_i, axial + bend_j, axial - bend_j)
    return float(min(extremes)), float(max(extremes))


def member_utilization(stress_pair: Tuple[float, float], section: SectionProperties, L: float) -> float:
    """Peak stress over the governing allowable (yield or buckling)."""
    s_min, s_max = stress_pair
    sigma_cr = euler_critical_stress(section.E, section.Iy, section.Iz, L, section.A)

    peak = max(abs(s_min), abs(s_max))
    allowable = min(section.Fu, sigma_cr) if s_min < 0 else section.Fu
    return float(peak / allowable)


def _load_map(loads: Optional[Loads], n_vertices: int) -> Dict[int, Tuple[float, float, float]]:
    if loads is None:
        return {}

    if isinstance(loads, Mapping):
        items = loads.items()
    else:
        arr = np.asarray(loads, dtype=float)
        if arr.shape != (n_vertices, 3):
            raise InvalidInputError(f"Load array must have shape ({n_vertices}, 3), got {arr.shape}")
        items = enumerate(arr)

    result = {}
    for vertex, components in items:
        vertex = int(vertex)
        if not (0 <= vertex < n_vertices):
            raise InvalidInputError(f"Load applied to unknown vertex {vertex}")
        vec = np.asarray(components, dtype=float)
        if vec.shape != (3,) or not np.all(np.isfinite(vec)):
            raise InvalidInputError(f"Load at vertex {vertex} must be 3 finite components, got {components!r}")
        result[vertex] = tuple(vec)
    return result


def _restraint_list(restraints: Iterable[int], n_vertices: int) -> list:
    result = sorted({int(v) for v in restraints})
    for v in result:
        if not (0 <= v < n_vertices):
            raise InvalidInputError(f"Restraint on unknown vertex {v}")
    return result


def analyze(
    graph: Graph,
    section: SectionProperties,
    restraints: Iterable[int],
    loads: Optional[Loads] = None,
    penalty: Optional[float] = None,
    cond_limit: Optional[float] = None,
) -> AnalysisResult:
    """
    Linear static analysis of the rod frame.

    Parameters:
    -----------
    graph : Graph
        Vertices and edges; every edge is a member
    section : SectionProperties
        Shared member section and material
    restraints : Iterable[int]
        Vertices whose three translations are held
    loads : np.ndarray or Mapping[int, Sequence[float]], optional
        (N, 3) array or {vertex: (Fx, Fy, Fz)}
    penalty : float, optional
        Penalty multiplier (default CONFIG.penalty_factor)
    cond_limit : float, optional
        Mechanism threshold (default CONFIG.cond_limit)

    Returns:
    --------
    AnalysisResult

    Raises:
    -------
    InvalidInputError
        Bad restraint/load indices or zero-length members
    AnalysisSingularError
        If the structure is a mechanism or the solve fails
    """
    dof = DOF_ROD_FRAME
    n = graph.n_vertices
    ndof = dof.ndof(n)

    load_map = _load_map(loads, n)
    restrained = _restraint_list(restraints, n)

    members = {}
    contributions = []
    for edge in graph.edges:
        i, j = edge
        k_local, R, k_global, L = rod_global_stiffness(section, graph.vertices[i], graph.vertices[j])
        dof_map = dof.element_dof_map([i, j])
        members[edge] = (k_local, R, dof_map, L)
        contributions.append((dof_map, k_global))

    K = assemble_global_K(ndof, contributions)
    F = nodal_load_vector(ndof, load_map, dof.dof_per_node)
    U = solve_penalty(K, F, restrained, dof, penalty=penalty, cond_limit=cond_limit)

    end_forces = {}
    stresses = {}
    utilization = {}
    lengths = {}
    for edge, (k_local, R, dof_map, L) in members.items():
        f = member_end_forces(k_local, R, U[dof_map])
        pair = member_stresses(f, section)
        end_forces[edge] = f
        stresses[edge] = pair
        utilization[edge] = member_utilization(pair, section, L)
        lengths[edge] = L

    U.flags.writeable = False
    K.flags.writeable = False

    result = AnalysisResult(
        K=K,
        displacements=U,
        end_forces=end_forces,
        stresses=stresses,
        utilization=utilization,
        lengths=lengths,
    )
    logger.debug("analyzed %d members, max utilization %.3g", len(members), result.max_utilization)
    return result
