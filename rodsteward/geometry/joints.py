# rodsteward/geometry/joints.py
"""
JOINT MESHES: Hollow Arms Bridged by a Core
===========================================

PURPOSE:
--------
A joint is the printed part that sits at a vertex and receives the ends of
every rod meeting there. It is built from simple pieces whose boundaries
coincide by construction, then welded, instead of a true solid union:

    ARM   one per incident rod: a solid sleeve from the vertex out to
          offset + joint_length, with a bore of radius r + e starting at
          the offset (where the trimmed rod ends)
    CORE  a solid bridging all arms at the vertex, built by a pluggable
          JointCoreStrategy (convex hull of the arms' outer corners by
          default)

ARM LAYOUT:
-----------
N = sides, t = unit direction from the vertex along the rod, rings run
counter-clockwise about t:

    0             vertex (base cap centre)
    1             bore bottom centre, offset along t
    2 .. N+1      outer ring at the vertex
    N+2 .. 2N+1   outer ring at the arm end
    2N+2 .. 3N+1  inner ring at the bore bottom
    3N+2 .. 4N+1  inner ring at the arm end

Faces: base cap, outer wall, end annulus, inner wall, bore bottom. The
shell is closed and every face points out of the material.

At the far end of an edge t is reversed; the same rings are used in
reverse order so the bore corners still line up with the rod's corners.

CORE STRATEGIES:
----------------
    'hull'   ConvexHullCore: scipy ConvexHull (Qhull) of the collected
             outer corner points
    'none'   NoCore: arms only

Failures are local: an arm that would run past the far vertex raises
JointOverlapError and is skipped; a degenerate hull (a single arm, or
exactly collinear arms, give coplanar points) raises HullDegenerateError
and the joint keeps its welded arms without a core.
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np
import trimesh
from scipy.spatial import ConvexHull, QhullError

from ..config import CONFIG
from ..errors import HullDegenerateError, InvalidInputError, JointOverlapError
from ..model import DirectedEdge, Edge, GeneratorParams, Graph, Issue
from .frames import profile_ring, unit
from .mesh import append_meshes, band, fan, make_mesh, weld
from .rods import RodGeometry

logger = logging.getLogger(__name__)


# =============================================================================
# Arms
# =============================================================================

def arm_mesh(
    origin: np.ndarray,
    direction: np.ndarray,
    outer_ring: np.ndarray,
    inner_ring: np.ndarray,
    offset: float,
    reach: float,
) -> trimesh.Trimesh:
    """
    Closed hollow sleeve from `origin` to `origin + reach·direction`.

    Parameters:
    -----------
    origin : np.ndarray
        Joint vertex position
    direction : np.ndarray
        Unit vector from the vertex along the rod
    outer_ring, inner_ring : np.ndarray
        (sides, 3) profiles around the origin, counter-clockwise about
        `direction`, with matching corner order
    offset : float
        Depth at which the bore starts
    reach : float
        Total arm length (offset + joint length)
    """
    sides = len(outer_ring)
    bore = origin + offset * direction
    tip = origin + reach * direction

    vertices = np.vstack([
        origin,
        bore,
        origin + outer_ring,
        tip + outer_ring,
        bore + inner_ring,
        tip + inner_ring,
    ])

    outer_base = np.arange(2, sides + 2)
    outer_tip = outer_base + sides
    inner_bore = outer_tip + sides
    inner_tip = inner_bore + sides

    faces = np.vstack([
        fan(0, outer_base, flip=True),
        band(outer_base, outer_tip),
        band(outer_tip, inner_tip),
        band(inner_bore, inner_tip, flip=True),
        fan(1, inner_bore),
    ])
    return make_mesh(vertices, faces)


def build_arm(
    graph: Graph,
    key: DirectedEdge,
    offsets: Dict[DirectedEdge, float],
    joint_length: float,
    outer_ring: np.ndarray,
    inner_ring: np.ndarray,
) -> trimesh.Trimesh:
    """
    Arm of the joint at `key.start` for the rod toward `key.end`.

    Raises:
    -------
    JointOverlapError
        If offset + joint_length does not fit inside the edge
    """
    length = float(np.linalg.norm(graph.edge_vector(key.start, key.end)))
    offset = offsets[key]
    reach = offset + joint_length

    if reach >= length:
        raise JointOverlapError(
            key,
            f"Joint arm at vertex {key.start} toward {key.end} not created: arm length "
            f"{reach:.4g} reaches past the edge length {length:.4g}. Reduce the joint length or radius."
        )

    direction = unit(graph.edge_vector(key.start, key.end))
    return arm_mesh(graph.vertices[key.start], direction, outer_ring, inner_ring, offset, reach)


# =============================================================================
# Core strategies
# =============================================================================

class JointCoreStrategy:
    """
    Builds the piece that bridges the arms at one vertex.

    Subclasses implement build(), returning a mesh or None, and raise
    HullDegenerateError when the points do not allow a core.
    """
    name = 'base'

    def build(self, vertex: int, points: np.ndarray) -> Optional[trimesh.Trimesh]:
        raise NotImplementedError


class NoCore(JointCoreStrategy):
    """Arms only; the joint is the weld of its arms."""
    name = 'none'

    def build(self, vertex: int, points: np.ndarray) -> Optional[trimesh.Trimesh]:
        return None


class ConvexHullCore(JointCoreStrategy):
    """
    Convex hull of the outer corner points of every arm at the vertex.

    Qhull works on coordinates centred on the point cloud and scaled so the
    largest magnitude is about `working_scale`, which keeps its precision
    thresholds meaningful for small real-world dimensions. The hull faces
    index back into the original points, so no rescaling error reaches the
    output. Faces are flipped where needed to agree with the outward plane
    normals Qhull reports.
    """
    name = 'hull'

    def __init__(self, working_scale: float = None):
        self.working_scale = working_scale if working_scale is not None else CONFIG.hull_working_scale

    def build(self, vertex: int, points: np.ndarray) -> Optional[trimesh.Trimesh]:
        points = np.asarray(points, dtype=float)
        centred = points - points.mean(axis=0)
        extent = np.abs(centred).max() if len(points) else 0.0
        if extent <= 0.0:
            raise HullDegenerateError(vertex, f"Joint core at vertex {vertex} skipped: no spread in core points")

        try:
            hull = ConvexHull(centred * (self.working_scale / extent))
        except (QhullError, ValueError) as err:
            raise HullDegenerateError(
                vertex,
                f"Joint core at vertex {vertex} skipped: convex hull is degenerate "
                f"(coplanar or too few points); joint may be non-manifold"
            ) from err

        simplices = np.array(hull.simplices, dtype=np.int64)
        tri = points[simplices]
        normals = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
        flip = np.einsum('ij,ij->i', normals, hull.equations[:, :3]) < 0
        simplices[flip] = simplices[flip][:, [0, 2, 1]]

        used = np.unique(simplices)
        reindex = np.full(len(points), -1, dtype=np.int64)
        reindex[used] = np.arange(len(used))
        return make_mesh(points[used], reindex[simplices])


CORE_STRATEGIES = {
    ConvexHullCore.name: ConvexHullCore,
    NoCore.name: NoCore,
}


def get_core_strategy(name: str) -> JointCoreStrategy:
    """Instantiate a core strategy by its configured name."""
    try:
        return CORE_STRATEGIES[name]()
    except KeyError:
        raise InvalidInputError(
            f"Unknown joint core strategy {name!r}; expected one of {sorted(CORE_STRATEGIES)}"
        ) from None


# =============================================================================
# Generation pass
# =============================================================================

def generate_joints(
    graph: Graph,
    rods: Dict[Edge, RodGeometry],
    offsets: Dict[DirectedEdge, float],
    params: GeneratorParams,
    core: Optional[JointCoreStrategy] = None,
) -> Tuple[Dict[int, trimesh.Trimesh], List[Issue]]:
    """
    Build the welded joint mesh of every vertex.

    Parameters:
    -----------
    graph : Graph
        Vertices and edges
    rods : Dict[Edge, RodGeometry]
        Surviving rods; edges missing here get no arms
    offsets : Dict[DirectedEdge, float]
        Output of calculate_offsets()
    params : GeneratorParams
        Radius, sides, joint length/thickness and tolerance
    core : JointCoreStrategy, optional
        Overrides the strategy named by params.core

    Returns:
    --------
    joints : Dict[int, trimesh.Trimesh]
        One merged mesh per vertex that has at least one arm
    issues : List[Issue]
        'joint_overlap' and 'hull_degenerate' entries
    """
    if core is None:
        core = get_core_strategy(params.core)

    arms: Dict[int, List[trimesh.Trimesh]] = {v: [] for v in range(graph.n_vertices)}
    core_points: Dict[int, List[np.ndarray]] = {v: [] for v in range(graph.n_vertices)}
    issues: List[Issue] = []

    for edge in graph.edges:
        if edge not in rods:
            continue

        i, j = edge
        d = unit(graph.edge_vector(i, j))
        outer = profile_ring(params.outer_radius, params.sides, d)
        inner = profile_ring(params.inner_radius, params.sides, d)

        ends = (
            (DirectedEdge(i, j), outer, inner),
            (DirectedEdge(j, i), outer[::-1], inner[::-1]),
        )
        for key, outer_ring, inner_ring in ends:
            try:
                arm = build_arm(graph, key, offsets, params.joint_length, outer_ring, inner_ring)
            except JointOverlapError as err:
                logger.warning("%s", err)
                issues.append(Issue(err.kind, err.key, str(err)))
                continue
            arms[key.start].append(arm)
            core_points[key.start].append(graph.vertices[key.start] + outer_ring)

    joints: Dict[int, trimesh.Trimesh] = {}
    for vertex in range(graph.n_vertices):
        if not core_points[vertex]:
            continue

        pieces = list(arms[vertex])
        try:
            core_mesh = core.build(vertex, np.vstack(core_points[vertex]))
        except HullDegenerateError as err:
            logger.warning("%s", err)
            issues.append(Issue(err.kind, err.key, str(err)))
            core_mesh = None
        if core_mesh is not None:
            pieces.insert(0, core_mesh)

        joints[vertex] = weld(append_meshes(pieces), params.tolerance)

    logger.debug("built %d joints with %s core", len(joints), core.name)
    return joints, issues
