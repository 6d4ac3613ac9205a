# rodsteward/geometry/rods.py
"""
ROD MESHES: Trimmed Centerlines and Tubular Meshes
==================================================

Each edge becomes a straight rod, cut short at both ends by the directed
offsets so it stops inside the joint bores:

    start = p_i + offset(i→j) · d
    end   = p_j − offset(j→i) · d          d = unit(p_j − p_i)

The mesh is a regular N-gon prism around the trimmed segment with flat
centre-fan caps. Vertex layout (N = sides):

    0            start cap centre
    1            end cap centre
    2 .. N+1     ring at start
    N+2 .. 2N+1  ring at end

Rods whose offsets consume the whole edge raise RodDegenerateError; the
generation pass records the issue and skips the rod.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
import trimesh

from ..errors import RodDegenerateError
from ..model import DirectedEdge, Edge, Graph, Issue
from .frames import profile_ring
from .mesh import band, fan, make_mesh

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class RodGeometry:
    """
    One trimmed rod.

    Attributes:
    -----------
    edge : Edge
        Canonical (i, j) edge key
    start : np.ndarray
        Trimmed centerline start point (near vertex i)
    end : np.ndarray
        Trimmed centerline end point (near vertex j)
    mesh : trimesh.Trimesh
        Closed tubular mesh around the centerline
    """
    edge: Edge
    start: np.ndarray
    end: np.ndarray
    mesh: trimesh.Trimesh

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    @property
    def centerline(self) -> np.ndarray:
        """Shape (2, 3): [start, end]."""
        return np.vstack([self.start, self.end])


def rod_mesh(start: np.ndarray, end: np.ndarray, radius: float, sides: int) -> trimesh.Trimesh:
    direction = end - start
    ring = profile_ring(radius, sides, direction)

    vertices = np.vstack([start, end, ring + start, ring + end])

    ring_start = np.arange(2, sides + 2)
    ring_end = np.arange(sides + 2, 2 * sides + 2)
    faces = np.vstack([
        fan(0, ring_start, flip=True),
        band(ring_start, ring_end),
        fan(1, ring_end),
    ])
    return make_mesh(vertices, faces)


def build_rod(
    graph: Graph,
    edge: Edge,
    offsets: Dict[DirectedEdge, float],
    radius: float,
    sides: int,
) -> RodGeometry:
    """
    Trim one edge and mesh it.

    Raises:
    -------
    RodDegenerateError
        If the two offsets leave no rod (trimmed length <= 0)
    """
    i, j = edge
    p_i = graph.vertices[i]
    p_j = graph.vertices[j]
    length = graph.edge_length(edge)

    o_start = offsets.get(DirectedEdge(i, j), 0.0)
    o_end = offsets.get(DirectedEdge(j, i), 0.0)
    trimmed = length - o_start - o_end

    if trimmed <= 0.0:
        raise RodDegenerateError(
            edge,
            f"Rod {edge} not created: offsets {o_start:.4g} + {o_end:.4g} exceed edge length "
            f"{length:.4g}. Reduce the radius or tolerance, or lengthen the edge."
        )

    d = (p_j - p_i) / length
    start = p_i + o_start * d
    end = p_j - o_end * d

    return RodGeometry(edge=edge, start=start, end=end, mesh=rod_mesh(start, end, radius, sides))


def generate_rods(
    graph: Graph,
    offsets: Dict[DirectedEdge, float],
    radius: float,
    sides: int,
) -> Tuple[Dict[Edge, RodGeometry], List[Issue]]:
    """
    Build every rod of the graph.

    Returns:
    --------
    rods : Dict[Edge, RodGeometry]
        Rods keyed by canonical edge, in graph edge order
    issues : List[Issue]
        One 'rod_degenerate' entry per skipped edge
    """
    rods: Dict[Edge, RodGeometry] = {}
    issues: List[Issue] = []

    for edge in graph.edges:
        try:
            rods[edge] = build_rod(graph, edge, offsets, radius, sides)
        except RodDegenerateError as err:
            logger.warning("%s", err)
            issues.append(Issue(err.kind, err.key, str(err)))

    logger.debug("built %d rods, skipped %d", len(rods), len(issues))
    return rods, issues
