# rodsteward/pipeline.py
"""
GENERATION PIPELINE: Graph → Offsets → Rods → Joints → Clashes
==============================================================

PURPOSE:
--------
generate() is the single entry point for geometry. Every call builds fresh
collections from its inputs and returns one frozen GenerationResult, so two
calls with the same graph and parameters give identical meshes.

    offsets   calculate_offsets()    Dict[DirectedEdge, float]
    rods      generate_rods()        Dict[Edge, RodGeometry]
    joints    generate_joints()      Dict[int, trimesh.Trimesh]
    clashes   detect_clashes()       ClashSet (empty if check_clashes=False)
    issues    recoverable problems from the rod and joint passes

Generator is a small memo the CALLER owns: it remembers the last input
fingerprint and result and skips regeneration when nothing changed. The
module itself keeps no state between calls.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import trimesh

from .geometry.collision import ClashSet, detect_clashes
from .geometry.joints import JointCoreStrategy, generate_joints, get_core_strategy
from .geometry.offsets import calculate_offsets
from .geometry.rods import RodGeometry, generate_rods
from .model import DirectedEdge, Edge, GeneratorParams, Graph, Issue

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class GenerationResult:
    """
    Everything one generation pass produced.

    Attributes:
    -----------
    offsets : Dict[DirectedEdge, float]
        Trim distance per directed edge
    rods : Dict[Edge, RodGeometry]
        Trimmed rods, missing for degenerate edges
    joints : Dict[int, trimesh.Trimesh]
        Welded joint mesh per vertex with at least one arm
    clashes : ClashSet
        Intersecting rods and joints
    issues : Tuple[Issue, ...]
        Recoverable problems, rods first then joints
    """
    offsets: Dict[DirectedEdge, float]
    rods: Dict[Edge, RodGeometry]
    joints: Dict[int, trimesh.Trimesh]
    clashes: ClashSet
    issues: Tuple[Issue, ...]

    def issues_of(self, kind: str) -> Tuple[Issue, ...]:
        return tuple(issue for issue in self.issues if issue.kind == kind)


def generate(
    graph: Graph,
    params: Optional[GeneratorParams] = None,
    core: Optional[JointCoreStrategy] = None,
) -> GenerationResult:
    """
    Run a full generation pass.

    Parameters:
    -----------
    graph : Graph
        Vertices and edges
    params : GeneratorParams, optional
        Defaults to GeneratorParams() (values from CONFIG)
    core : JointCoreStrategy, optional
        Overrides the strategy named by params.core

    Raises:
    -------
    InvalidInputError
        If params.core names no known strategy
    """
    if params is None:
        params = GeneratorParams()
    if core is None:
        core = get_core_strategy(params.core)

    offsets = calculate_offsets(graph, params.radius, params.joint_thickness, params.tolerance)
    rods, rod_issues = generate_rods(graph, offsets, params.radius, params.sides)
    joints, joint_issues = generate_joints(graph, rods, offsets, params, core=core)

    if params.check_clashes:
        clashes = detect_clashes(rods, joints)
    else:
        clashes = ClashSet()

    issues = tuple(rod_issues) + tuple(joint_issues)
    logger.debug(
        "generated %d rods, %d joints, %d issues for %d vertices",
        len(rods), len(joints), len(issues), graph.n_vertices,
    )
    return GenerationResult(offsets=offsets, rods=rods, joints=joints, clashes=clashes, issues=issues)


class Generator:
    """
    Caller-owned memo around generate().

    Example:
    --------
    >>> gen = Generator()
    >>> first = gen.run(graph, params)
    >>> gen.run(graph, params) is first
    True
    """

    def __init__(self):
        self._last_key: Optional[str] = None
        self._last_result: Optional[GenerationResult] = None

    @staticmethod
    def fingerprint(graph: Graph, params: GeneratorParams) -> str:
        return graph.fingerprint() + ':' + params.fingerprint()

    def run(self, graph: Graph, params: Optional[GeneratorParams] = None) -> GenerationResult:
        if params is None:
            params = GeneratorParams()
        key = self.fingerprint(graph, params)
        if key == self._last_key and self._last_result is not None:
            logger.debug("generation inputs unchanged, reusing last result")
            return self._last_result

        result = generate(graph, params)
        self._last_key = key
        self._last_result = result
        return result

    def clear(self) -> None:
        self._last_key = None
        self._last_result = None
