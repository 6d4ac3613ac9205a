# rodsteward/geometry/collision.py
"""
CLASH DIAGNOSTIC: Which Rods and Joints Intersect
=================================================

PURPOSE:
--------
After generation, every rod and joint mesh is tested against the others so
the caller can highlight parts that would collide when printed and
assembled. Nothing is modified; the result is a ClashSet.

CANDIDATE PAIRS:
----------------
    rod  / rod     every unordered pair
    rod  / joint   unless the rod's edge is incident to the joint's vertex
                   (a rod always sits inside its own joints' bores)
    joint / joint  every unordered pair

Each pair is keyed canonically, lower key first, so it is tested once. A
pair whose two members are both already flagged is skipped.

TEST:
-----
1. Whole-mesh bounding boxes must overlap.
2. Triangle bounding boxes narrow the pairs to test.
3. Exact triangle-triangle test by separating axes. For two triangles the
   candidate axes are the two face normals, the nine cross products of
   their edges, and the six in-plane edge normals that separate coplanar
   triangles. If no axis separates the projections, they intersect.

Only surfaces are compared: a mesh lying entirely inside another without
touching its surface is not reported.
"""

import logging
from itertools import combinations
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Tuple

import numpy as np
import trimesh

from ..config import CONFIG
from ..model import Edge
from .rods import RodGeometry

logger = logging.getLogger(__name__)

# triangle pairs tested per vectorised batch
BATCH = 4096


@dataclass(frozen=True)
class ClashSet:
    """
    Parts found to intersect another part.

    Attributes:
    -----------
    rods : FrozenSet[Edge]
        Canonical edge keys of clashing rods
    joints : FrozenSet[int]
        Vertex keys of clashing joints
    """
    rods: FrozenSet[Edge] = field(default_factory=frozenset)
    joints: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def empty(self) -> bool:
        return not self.rods and not self.joints


def _edges(tri: np.ndarray) -> np.ndarray:
    """(M, 3, 3) triangle edge vectors p1-p0, p2-p1, p0-p2."""
    return np.roll(tri, -1, axis=1) - tri


def triangles_intersect(tri_a: np.ndarray, tri_b: np.ndarray, eps: float = None) -> np.ndarray:
    """
    Pairwise separating-axis test.

    Parameters:
    -----------
    tri_a, tri_b : np.ndarray
        (M, 3, 3) triangles; row k of tri_a is tested against row k of tri_b
    eps : float, optional
        Projection gap below which intervals count as touching

    Returns:
    --------
    np.ndarray
        (M,) bool, True where the triangles touch or intersect
    """
    if eps is None:
        eps = CONFIG.collision_epsilon

    tri_a = np.asarray(tri_a, dtype=float)
    tri_b = np.asarray(tri_b, dtype=float)

    ea = _edges(tri_a)
    eb = _edges(tri_b)
    na = np.cross(ea[:, 0], ea[:, 1])
    nb = np.cross(eb[:, 0], eb[:, 1])

    axes = [na, nb]
    for i in range(3):
        for j in range(3):
            axes.append(np.cross(ea[:, i], eb[:, j]))
    for i in range(3):
        axes.append(np.cross(na, ea[:, i]))
        axes.append(np.cross(nb, eb[:, i]))
    axes = np.stack(axes, axis=1)

    # normalise; near-zero axes (parallel edges, degenerate triangles) can't separate
    norms = np.linalg.norm(axes, axis=2)
    scale = norms.max(axis=1, keepdims=True)
    valid = norms > 1e-12 * np.where(scale > 0.0, scale, 1.0)
    axes = np.where(valid[..., None], axes / np.where(valid, norms, 1.0)[..., None], 0.0)

    pa = np.einsum('mkd,mvd->mkv', axes, tri_a)
    pb = np.einsum('mkd,mvd->mkv', axes, tri_b)

    separated = (pa.max(axis=2) < pb.min(axis=2) - eps) | (pb.max(axis=2) < pa.min(axis=2) - eps)
    return ~separated.any(axis=1)


def _boxes_overlap(lo_a, hi_a, lo_b, hi_b, eps) -> np.ndarray:
    return np.all((lo_a <= hi_b + eps) & (lo_b <= hi_a + eps), axis=-1)


def _candidate_pairs(tri_a: np.ndarray, tri_b: np.ndarray, eps: float) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
    """Index arrays of triangle pairs whose bounding boxes overlap, in batches."""
    lo_a, hi_a = tri_a.min(axis=1), tri_a.max(axis=1)
    lo_b, hi_b = tri_b.min(axis=1), tri_b.max(axis=1)

    rows = max(1, BATCH // max(len(tri_b), 1))
    for start in range(0, len(tri_a), rows):
        stop = min(start + rows, len(tri_a))
        hit = _boxes_overlap(
            lo_a[start:stop, None], hi_a[start:stop, None],
            lo_b[None], hi_b[None], eps,
        )
        ia, ib = np.nonzero(hit)
        if len(ia):
            yield ia + start, ib


def meshes_intersect(mesh_a: trimesh.Trimesh, mesh_b: trimesh.Trimesh, eps: float = None) -> bool:
    """True if any triangle of mesh_a touches any triangle of mesh_b."""
    if eps is None:
        eps = CONFIG.collision_epsilon

    bounds_a = mesh_a.bounds
    bounds_b = mesh_b.bounds
    if bounds_a is None or bounds_b is None:
        return False
    if not _boxes_overlap(bounds_a[0], bounds_a[1], bounds_b[0], bounds_b[1], eps):
        return False

    tri_a = np.asarray(mesh_a.triangles)
    tri_b = np.asarray(mesh_b.triangles)

    # drop triangles outside the other mesh's box before pairing
    keep_a = _boxes_overlap(tri_a.min(axis=1), tri_a.max(axis=1), bounds_b[0], bounds_b[1], eps)
    keep_b = _boxes_overlap(tri_b.min(axis=1), tri_b.max(axis=1), bounds_a[0], bounds_a[1], eps)
    tri_a = tri_a[keep_a]
    tri_b = tri_b[keep_b]
    if len(tri_a) == 0 or len(tri_b) == 0:
        return False

    for ia, ib in _candidate_pairs(tri_a, tri_b, eps):
        if triangles_intersect(tri_a[ia], tri_b[ib], eps).any():
            return True
    return False


def _rod_in_joint(rod_key: tuple, joint_key: tuple) -> bool:
    return rod_key[0] == 'rod' and joint_key[0] == 'joint' and joint_key[1] in rod_key[1]


def detect_clashes(
    rods: Dict[Edge, RodGeometry],
    joints: Dict[int, trimesh.Trimesh],
    eps: float = None,
) -> ClashSet:
    """
    Flag every rod and joint that intersects another part.

    Parameters:
    -----------
    rods : Dict[Edge, RodGeometry]
        Rods keyed by canonical edge
    joints : Dict[int, trimesh.Trimesh]
        Joint meshes keyed by vertex
    eps : float, optional
        Touch tolerance, defaults to CONFIG.collision_epsilon

    Returns:
    --------
    ClashSet
    """
    parts: Dict[tuple, trimesh.Trimesh] = {}
    for edge, rod in rods.items():
        parts[('rod', edge)] = rod.mesh
    for vertex, mesh in joints.items():
        parts[('joint', vertex)] = mesh

    flagged = set()
    tested = 0

    # sorted keys give each unordered pair once, lower key first
    for first, second in combinations(sorted(parts), 2):
        if _rod_in_joint(first, second) or _rod_in_joint(second, first):
            continue
        if first in flagged and second in flagged:
            continue

        tested += 1
        if meshes_intersect(parts[first], parts[second], eps):
            flagged.add(first)
            flagged.add(second)

    clashes = ClashSet(
        rods=frozenset(key[1] for key in flagged if key[0] == 'rod'),
        joints=frozenset(key[1] for key in flagged if key[0] == 'joint'),
    )
    logger.debug(
        "tested %d part pairs: %d rods, %d joints clash",
        tested, len(clashes.rods), len(clashes.joints),
    )
    return clashes


def clash_report(clashes: ClashSet) -> List[str]:
    """Human-readable lines for a ClashSet, rods first."""
    lines = [f"rod {edge[0]}-{edge[1]} intersects another part" for edge in sorted(clashes.rods)]
    lines += [f"joint {vertex} intersects another part" for vertex in sorted(clashes.joints)]
    return lines
