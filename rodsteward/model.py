# rodsteward/model.py
"""
CORE DATA MODEL: Graph, Directed Edges and Generator Parameters
===============================================================

PURPOSE:
--------
Every component in the package (offsets, rods, joints, collisions and the
structural engine) works on the same indexing scheme:

    vertices   ordered 3D points, identified by position in the sequence
    edges      unordered vertex pairs, stored canonically as (min, max)

Offsets are direction dependent: trimming a rod at vertex 3 toward vertex 7
is a different quantity from trimming it at vertex 7 toward vertex 3. Those
are keyed by the small value type DirectedEdge(start, end).

IMMUTABILITY:
-------------
A Graph is frozen once built. The vertex array is flagged read-only so a
running generation or analysis pass cannot be disturbed by the caller.
"""

import hashlib
from dataclasses import dataclass, field, asdict
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

import numpy as np

from .config import CONFIG
from .errors import InvalidInputError


Edge = Tuple[int, int]


class DirectedEdge(NamedTuple):
    """Ordered vertex pair: the rod leaving `start` toward `end`."""
    start: int
    end: int

    def reversed(self) -> 'DirectedEdge':
        return DirectedEdge(self.end, self.start)


def edge_key(a: int, b: int) -> Edge:
    """Canonical (min, max) key for an unordered edge."""
    return (a, b) if a < b else (b, a)


@dataclass(frozen=True, eq=False)
class Graph:
    """
    A rod structure: vertex positions plus edge connectivity.

    Parameters:
    -----------
    vertices : np.ndarray
        Shape (N, 3) float array of vertex positions (read-only)

    edges : Tuple[Edge, ...]
        Canonical (min, max) vertex index pairs, in input order

    Use Graph.build() to construct one from plain lists; it validates
    indices and canonicalizes edge keys.

    Examples:
    ---------
    >>> g = Graph.build([(0, 0, 0), (100, 0, 0), (0, 100, 0)], [(0, 1), (2, 0)])
    >>> g.edges
    ((0, 1), (0, 2))
    >>> g.neighbors(0)
    [1, 2]
    """
    vertices: np.ndarray
    edges: Tuple[Edge, ...]

    @classmethod
    def build(cls, vertices: Iterable[Sequence[float]], edges: Iterable[Sequence[int]]) -> 'Graph':
        pts = np.array(list(vertices), dtype=float)
        if pts.size == 0:
            pts = pts.reshape(0, 3)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise InvalidInputError(f"Vertices must be an (N, 3) array, got shape {pts.shape}")
        if not np.all(np.isfinite(pts)):
            raise InvalidInputError("Vertices contain non-finite coordinates")
        pts.flags.writeable = False

        n = len(pts)
        canonical: List[Edge] = []
        seen = set()
        for e in edges:
            a, b = int(e[0]), int(e[1])
            if not (0 <= a < n and 0 <= b < n):
                raise InvalidInputError(f"Edge ({a}, {b}) references a vertex outside 0..{n - 1}")
            if a == b:
                raise InvalidInputError(f"Edge ({a}, {b}) is a self-loop")
            key = edge_key(a, b)
            if key in seen:
                raise InvalidInputError(f"Duplicate edge {key}")
            seen.add(key)
            canonical.append(key)

        return cls(vertices=pts, edges=tuple(canonical))

    @property
    def n_vertices(self) -> int:
        return len(self.vertices)

    def adjacency(self) -> Dict[int, List[int]]:
        """Neighbor lists for every vertex, in edge order."""
        adj: Dict[int, List[int]] = {v: [] for v in range(self.n_vertices)}
        for a, b in self.edges:
            adj[a].append(b)
            adj[b].append(a)
        return adj

    def neighbors(self, vertex: int) -> List[int]:
        return self.adjacency()[vertex]

    def edge_vector(self, start: int, end: int) -> np.ndarray:
        return self.vertices[end] - self.vertices[start]

    def edge_length(self, edge: Edge) -> float:
        return float(np.linalg.norm(self.edge_vector(*edge)))

    def fingerprint(self) -> str:
        """Stable hash of vertex coordinates and connectivity."""
        h = hashlib.sha1()
        h.update(np.ascontiguousarray(self.vertices, dtype=float).tobytes())
        h.update(repr(self.edges).encode())
        return h.hexdigest()


@dataclass(frozen=True)
class GeneratorParams:
    """
    Scalar parameters of a generation pass.

    Attributes:
    -----------
    sides : int
        Number of sides of the rod / joint cross-section polygon (>= 3)
    radius : float
        Rod radius (> 0)
    joint_thickness : float
        Joint wall thickness (>= 0)
    joint_length : float
        Length of each joint arm beyond the rod offset (>= 0)
    tolerance : float
        Fit clearance between rod and bore, also the joint weld distance (>= 0)
    core : str
        Joint core strategy name ('hull' or 'none')
    check_clashes : bool
        Whether the generation pass runs the collision diagnostic

    Raises:
    -------
    InvalidInputError
        On construction, if any value is out of range
    """
    sides: int = field(default_factory=lambda: CONFIG.default_sides)
    radius: float = field(default_factory=lambda: CONFIG.default_radius)
    joint_thickness: float = field(default_factory=lambda: CONFIG.default_joint_thickness)
    joint_length: float = field(default_factory=lambda: CONFIG.default_joint_length)
    tolerance: float = field(default_factory=lambda: CONFIG.default_tolerance)
    core: str = field(default_factory=lambda: CONFIG.default_core)
    check_clashes: bool = True

    def __post_init__(self):
        if isinstance(self.sides, bool) or int(self.sides) != self.sides or self.sides < 3:
            raise InvalidInputError(f"sides must be an integer >= 3, got {self.sides}")
        if not (self.radius > 0):
            raise InvalidInputError(f"radius must be > 0, got {self.radius}")
        if not (self.joint_thickness >= 0):
            raise InvalidInputError(f"joint_thickness must be >= 0, got {self.joint_thickness}")
        if not (self.joint_length >= 0):
            raise InvalidInputError(f"joint_length must be >= 0, got {self.joint_length}")
        if not (self.tolerance >= 0):
            raise InvalidInputError(f"tolerance must be >= 0, got {self.tolerance}")
        object.__setattr__(self, 'sides', int(self.sides))

    @property
    def inner_radius(self) -> float:
        """Bore radius of a joint arm."""
        return self.radius + self.tolerance

    @property
    def outer_radius(self) -> float:
        """Outside radius of a joint arm."""
        return self.radius + self.joint_thickness + self.tolerance

    def fingerprint(self) -> str:
        return repr(sorted(asdict(self).items()))


@dataclass(frozen=True)
class Issue:
    """
    A recoverable problem found during a generation pass.

    kind : 'rod_degenerate' | 'joint_overlap' | 'hull_degenerate'
    key  : edge tuple, DirectedEdge or vertex index the issue belongs to
    """
    kind: str
    key: object
    message: str
