# rodsteward/geometry - Mesh generation for rods and joints
"""
GEOMETRY: OFFSETS, RODS, JOINTS, CLASHES
========================================

    frames.py      shared local frame and cross-section ring
    mesh.py        trimesh construction, concatenation and welding
    offsets.py     per directed edge trim distances
    rods.py        trimmed rod meshes
    joints.py      hollow arm + core joint meshes
    collision.py   rod / joint clash diagnostic
"""

from .offsets import calculate_offsets, pair_offset
from .rods import RodGeometry, generate_rods
from .joints import (
    JointCoreStrategy,
    ConvexHullCore,
    NoCore,
    get_core_strategy,
    generate_joints,
)
from .collision import ClashSet, detect_clashes, meshes_intersect

__all__ = [
    'calculate_offsets',
    'pair_offset',
    'RodGeometry',
    'generate_rods',
    'JointCoreStrategy',
    'ConvexHullCore',
    'NoCore',
    'get_core_strategy',
    'generate_joints',
    'ClashSet',
    'detect_clashes',
    'meshes_intersect',
]
