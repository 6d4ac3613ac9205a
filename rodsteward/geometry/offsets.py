# rodsteward/geometry/offsets.py
"""
ROD OFFSETS: How Far to Trim Each Rod at Each Joint
===================================================

PURPOSE:
--------
Several rods meet at every vertex. Each rod ends inside the bore of a joint
arm (a sleeve of outer radius R_o = r + t + e and inner radius
R_i = r + e, where r is the rod radius, t the joint wall thickness and e
the fit tolerance). If the rods ran all the way to the vertex the sleeves
would overlap, so every rod is cut short by an OFFSET at each end.

GEOMETRY:
---------
For two rods meeting at angle θ, the sleeves stop overlapping at the
distance d from the vertex where the outer cylinder of one sleeve clears
the inner bore of the other:

    θ ≥ 90°:   d = R_o · sin θ
    θ < 90°:   d = sqrt(R_o² + R_i² + 2·R_o·R_i·cos θ − R_i²·sin² θ) / sin θ

Both are floored at t + e so an arm always has a solid base. Collinear
pairs (sin θ = 0) get exactly t + e.

cos θ and sin θ come from the dot product and the cross-product magnitude
rather than from arccos, which loses precision near 0° and 180°.

KEYING:
-------
Each pairwise value is written to BOTH directed edges of the pair, keeping
the running maximum. A vertex with a single rod gets a fixed stub of r / 2.

    offsets[DirectedEdge(v, n)]  → trim at v on the rod toward n
"""

import logging
import math
from typing import Dict

import numpy as np

from ..model import DirectedEdge, Graph

logger = logging.getLogger(__name__)


def pair_offset(
    v1: np.ndarray,
    v2: np.ndarray,
    inner_radius: float,
    outer_radius: float,
    base: float,
) -> float:
    """
    Clearance distance for two sleeves along v1 and v2.

    Parameters:
    -----------
    v1, v2 : np.ndarray
        Vectors from the shared vertex toward each neighbor (any length)
    inner_radius, outer_radius : float
        Bore and outside radius of a joint arm
    base : float
        Minimum offset (joint thickness + tolerance)

    Returns:
    --------
    float
        Offset distance from the vertex, always finite and >= base
    """
    m1 = float(np.dot(v1, v1))
    m2 = float(np.dot(v2, v2))
    dot = float(np.dot(v1, v2))
    mag = math.sqrt(m1 * m2)

    if mag == 0.0:
        return base

    cos_ang = dot / mag
    # clamp: rounding can push m1*m2 - dot² slightly below zero
    sin_ang = math.sqrt(max(m1 * m2 - dot * dot, 0.0)) / mag

    if not math.isfinite(sin_ang) or sin_ang == 0.0:
        return base

    if cos_ang <= 0.0:
        return max(base, outer_radius * sin_ang)

    ro, ri = outer_radius, inner_radius
    radicand = ro * ro + ri * ri + 2.0 * ro * ri * cos_ang - ri * ri * sin_ang * sin_ang
    return max(base, math.sqrt(radicand) / sin_ang)


def calculate_offsets(
    graph: Graph,
    radius: float,
    joint_thickness: float,
    tolerance: float,
) -> Dict[DirectedEdge, float]:
    """
    Offset for every directed edge of the graph.

    Parameters:
    -----------
    graph : Graph
        Vertices and edges
    radius : float
        Rod radius
    joint_thickness : float
        Joint wall thickness
    tolerance : float
        Fit tolerance between rod and bore

    Returns:
    --------
    Dict[DirectedEdge, float]
        Trim distance at `start` for the rod toward `end`. Vertices with no
        edges contribute no entries.

    Example:
    --------
    >>> g = Graph.build([(0, 0, 0), (10, 0, 0)], [(0, 1)])
    >>> calculate_offsets(g, radius=2.0, joint_thickness=1.0, tolerance=0.0)
    {DirectedEdge(start=0, end=1): 1.0, DirectedEdge(start=1, end=0): 1.0}
    """
    inner = radius + tolerance
    outer = radius + joint_thickness + tolerance
    base = joint_thickness + tolerance

    offsets: Dict[DirectedEdge, float] = {}
    adjacency = graph.adjacency()

    for vertex in range(graph.n_vertices):
        connected = adjacency[vertex]

        if len(connected) == 1:
            offsets[DirectedEdge(vertex, connected[0])] = radius / 2
            continue

        for a in range(len(connected)):
            for b in range(a + 1, len(connected)):
                v_end, v_compare = connected[a], connected[b]
                offset = pair_offset(
                    graph.edge_vector(vertex, v_end),
                    graph.edge_vector(vertex, v_compare),
                    inner, outer, base,
                )
                for key in (DirectedEdge(vertex, v_end), DirectedEdge(vertex, v_compare)):
                    offsets[key] = max(offset, offsets.get(key, offset))

    logger.debug("computed %d directed offsets for %d vertices", len(offsets), graph.n_vertices)
    return offsets
