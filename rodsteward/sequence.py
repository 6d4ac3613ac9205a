# rodsteward/sequence.py
"""
Assembly order of joints and rods.

Starting from one joint, the structure is walked breadth-first: every rod
leaving the current joint that has not been placed yet is added, followed
by the joint at its far end if that joint is new. New joints are queued
and processed in the order they were placed.

    joint s, rod (s,a), joint a, rod (s,b), joint b, rod (a,b), ...

Only the component connected to the start joint is sequenced.
"""

from collections import deque
from typing import List, NamedTuple, Optional

from .errors import InvalidInputError
from .model import Graph


class Part(NamedTuple):
    """One step of the assembly: kind is 'joint' (vertex index) or 'rod' (edge index)."""
    kind: str
    index: int


def assembly_sequence(graph: Graph, start: int, last: Optional[int] = None) -> List[Part]:
    """
    Breadth-first construction order from joint `start`.

    Parameters:
    -----------
    graph : Graph
        Vertices and edges; rod indices refer to positions in graph.edges
    start : int
        First joint to place
    last : int, optional
        Index of the last part to return, so at most last + 1 parts

    Raises:
    -------
    InvalidInputError
        If start is not a vertex or last is negative
    """
    if not (0 <= start < graph.n_vertices):
        raise InvalidInputError(f"Start joint {start} is not a vertex of the graph")
    if last is not None and last < 0:
        raise InvalidInputError(f"last must be >= 0, got {last}")

    incident = {v: [] for v in range(graph.n_vertices)}
    for index, (a, b) in enumerate(graph.edges):
        incident[a].append(index)
        incident[b].append(index)

    parts = [Part('joint', start)]
    placed_rods = set()
    placed_joints = {start}
    queue = deque([start])

    while queue:
        vertex = queue.popleft()
        for index in incident[vertex]:
            if index in placed_rods:
                continue
            parts.append(Part('rod', index))
            placed_rods.add(index)

            a, b = graph.edges[index]
            far = b if a == vertex else a
            if far not in placed_joints:
                parts.append(Part('joint', far))
                placed_joints.add(far)
                queue.append(far)

    if last is not None:
        return parts[:last + 1]
    return parts
