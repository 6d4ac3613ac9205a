# rodsteward/geometry/mesh.py
"""
MESH HELPERS: Building, Appending and Welding Triangle Meshes
=============================================================

All generated geometry is a trimesh.Trimesh created with process=False, so
vertex order and face indices are exactly what the builders enumerate.

FACE ENUMERATION:
-----------------
Rods and joint arms are built from rings of `sides` points that run
counter-clockwise about an axis direction t. Two helpers produce the
triangles between them:

    fan(center, ring)        cap triangles, normal +t (flip=True for -t)
    band(lower, upper)       wall quads split in two, normal pointing away
                             from the axis (flip=True to face the axis)

"lower" is the ring with the smaller coordinate along t.

WELDING:
--------
weld() merges vertices closer than a distance limit, always keeping the
lowest index of a cluster, then drops faces that collapsed and vertices
nothing references any more. This is how the arms and the core of a joint
become one mesh without a boolean union.
"""

from typing import List, Sequence

import numpy as np
import trimesh
from scipy.spatial import cKDTree


def make_mesh(vertices: np.ndarray, faces: np.ndarray) -> trimesh.Trimesh:
    return trimesh.Trimesh(
        vertices=np.asarray(vertices, dtype=float),
        faces=np.asarray(faces, dtype=np.int64).reshape(-1, 3),
        process=False,
    )


def fan(center: int, ring: Sequence[int], flip: bool = False) -> np.ndarray:
    ring = np.asarray(ring, dtype=np.int64)
    nxt = np.roll(ring, -1)
    c = np.full_like(ring, center)
    if flip:
        return np.column_stack([c, nxt, ring])
    return np.column_stack([c, ring, nxt])


def band(lower: Sequence[int], upper: Sequence[int], flip: bool = False) -> np.ndarray:
    lower = np.asarray(lower, dtype=np.int64)
    upper = np.asarray(upper, dtype=np.int64)
    lower_next = np.roll(lower, -1)
    upper_next = np.roll(upper, -1)
    if flip:
        first = np.column_stack([lower, upper_next, lower_next])
        second = np.column_stack([lower, upper, upper_next])
    else:
        first = np.column_stack([lower, lower_next, upper_next])
        second = np.column_stack([lower, upper_next, upper])
    # interleave so each quad's two triangles stay adjacent
    return np.stack([first, second], axis=1).reshape(-1, 3)


def append_meshes(meshes: List[trimesh.Trimesh]) -> trimesh.Trimesh:
    """Concatenate meshes into one, keeping every vertex and face."""
    if len(meshes) == 1:
        return meshes[0].copy()
    return trimesh.util.concatenate(meshes)


def merge_map(points: np.ndarray, limit: float) -> np.ndarray:
    """
    Representative index for every point.

    A point maps to the lowest-indexed representative within `limit`;
    exact duplicates always merge, even when limit is 0.
    """
    n = len(points)
    target = np.arange(n)
    if n < 2:
        return target

    tree = cKDTree(points)
    pairs = tree.query_pairs(r=max(limit, 0.0), output_type='ndarray')
    if len(pairs) == 0:
        return target

    pairs = np.sort(pairs, axis=1)
    order = np.lexsort((pairs[:, 0], pairs[:, 1]))
    for i, j in pairs[order]:
        # i < j; j joins i's cluster unless j already found a lower one
        root = target[i]
        if target[j] == j and root != j:
            target[j] = root
    return target


def weld(mesh: trimesh.Trimesh, limit: float) -> trimesh.Trimesh:
    """Merge vertices closer than `limit` and clean up collapsed faces."""
    target = merge_map(np.asarray(mesh.vertices), limit)
    faces = target[np.asarray(mesh.faces)]

    keep = (faces[:, 0] != faces[:, 1]) & (faces[:, 1] != faces[:, 2]) & (faces[:, 0] != faces[:, 2])
    faces = faces[keep]

    used = np.unique(faces)
    reindex = np.full(len(mesh.vertices), -1, dtype=np.int64)
    reindex[used] = np.arange(len(used))

    return make_mesh(np.asarray(mesh.vertices)[used], reindex[faces])


def is_closed(mesh: trimesh.Trimesh) -> bool:
    """Every edge shared by exactly two faces, with opposite directions."""
    faces = np.asarray(mesh.faces)
    if len(faces) == 0:
        return False
    directed = np.concatenate([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]])
    forward = {tuple(e) for e in directed}
    if len(forward) != len(directed):
        return False
    return all((b, a) in forward for a, b in forward)
