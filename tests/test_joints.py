# tests/test_joints.py
"""
JOINT TESTS: Arms, Cores and Welding
====================================

A joint is the weld of one hollow arm per incident rod plus a core. The
tests check:
- an arm is a closed shell with the expected material volume
- the convex hull core is closed, outward and degenerate input is reported
- joint overlap and hull failures become Issues instead of exceptions
"""

import math

import numpy as np
import pytest

from rodsteward.errors import HullDegenerateError, InvalidInputError
from rodsteward.geometry.frames import profile_ring
from rodsteward.geometry.joints import (
    ConvexHullCore,
    NoCore,
    arm_mesh,
    generate_joints,
    get_core_strategy,
)
from rodsteward.geometry.mesh import is_closed
from rodsteward.geometry.offsets import calculate_offsets
from rodsteward.geometry.rods import generate_rods
from rodsteward.model import GeneratorParams, Graph


def ngon_area(radius, sides):
    return 0.5 * sides * radius ** 2 * math.sin(2 * math.pi / sides)


def tetrahedron(edge=100.0):
    h = edge * math.sqrt(2.0 / 3.0)
    r = edge / math.sqrt(3.0)
    base = [(r * math.cos(a), r * math.sin(a), 0.0) for a in (0.0, 2 * math.pi / 3, 4 * math.pi / 3)]
    vertices = base + [(0.0, 0.0, h)]
    edges = [(0, 1), (1, 2), (0, 2), (0, 3), (1, 3), (2, 3)]
    return Graph.build(vertices, edges)


def joints_for(graph, params, core=None):
    offsets = calculate_offsets(graph, params.radius, params.joint_thickness, params.tolerance)
    rods, _ = generate_rods(graph, offsets, params.radius, params.sides)
    return generate_joints(graph, rods, offsets, params, core=core)


class TestArmMesh:
    """A single hollow arm."""

    def test_arm_is_closed_with_sleeve_volume(self):
        sides, ro, ri = 6, 5.0, 3.0
        direction = np.array([0.0, 1.0, 1.0]) / math.sqrt(2.0)
        offset, reach = 4.0, 24.0

        mesh = arm_mesh(
            np.array([1.0, 2.0, 3.0]), direction,
            profile_ring(ro, sides, direction), profile_ring(ri, sides, direction),
            offset, reach,
        )

        assert len(mesh.vertices) == 4 * sides + 2
        assert len(mesh.faces) == 8 * sides
        assert is_closed(mesh)

        expected = ngon_area(ro, sides) * reach - ngon_area(ri, sides) * (reach - offset)
        assert np.isclose(mesh.volume, expected)

    def test_reversed_rings_keep_orientation(self):
        sides = 8
        direction = np.array([1.0, 0.0, 0.0])
        outer = profile_ring(4.0, sides, direction)[::-1]
        inner = profile_ring(2.0, sides, direction)[::-1]

        mesh = arm_mesh(np.zeros(3), -direction, outer, inner, 2.0, 12.0)

        assert is_closed(mesh)
        assert mesh.volume > 0


class TestCoreStrategies:
    """Convex hull and no-core strategies."""

    def test_hull_of_cube_corners(self):
        corners = np.array([(x, y, z) for x in (0, 1) for y in (0, 1) for z in (0, 1)], dtype=float)
        mesh = ConvexHullCore().build(0, corners * 0.01)

        assert len(mesh.faces) == 12
        assert is_closed(mesh)
        assert np.isclose(mesh.volume, 1e-6)

    def test_hull_keeps_original_coordinates(self):
        rng = np.random.default_rng(3)
        points = rng.uniform(-2.0, 2.0, size=(30, 3)) + 1000.0
        mesh = ConvexHullCore().build(0, points)

        for v in np.asarray(mesh.vertices):
            assert np.any(np.all(points == v, axis=1))
        assert mesh.volume > 0

    def test_coplanar_points_raise(self):
        points = np.array([(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0), (2, 3, 0)], dtype=float)

        with pytest.raises(HullDegenerateError) as info:
            ConvexHullCore().build(7, points)
        assert info.value.key == 7
        assert info.value.kind == 'hull_degenerate'

    def test_no_core_returns_none(self):
        assert NoCore().build(0, np.eye(3)) is None

    def test_strategy_lookup(self):
        assert isinstance(get_core_strategy('hull'), ConvexHullCore)
        assert isinstance(get_core_strategy('none'), NoCore)
        with pytest.raises(InvalidInputError):
            get_core_strategy('sphere')


class TestGenerateJoints:
    """Full joint pass over a graph."""

    def test_tetrahedron_has_four_clean_joints(self):
        params = GeneratorParams(sides=6, radius=3.0, joint_thickness=2.0, joint_length=20.0, tolerance=0.1)
        joints, issues = joints_for(tetrahedron(), params)

        assert issues == []
        assert sorted(joints) == [0, 1, 2, 3]
        for mesh in joints.values():
            assert len(mesh.faces) > 0
            assert np.all(np.isfinite(mesh.vertices))

    def test_weld_merges_shared_vertex(self):
        params = GeneratorParams(sides=6, radius=3.0, joint_thickness=2.0, joint_length=20.0, tolerance=0.1)
        joints, _ = joints_for(tetrahedron(), params, core=NoCore())

        # three arms of 4N + 2 vertices, the joint vertex itself shared
        assert len(joints[0].vertices) <= 3 * (4 * 6 + 2) - 2

    def test_single_edge_reports_degenerate_hull(self):
        params = GeneratorParams(sides=6, radius=1.0, joint_thickness=0.5, joint_length=5.0, tolerance=0.1)
        graph = Graph.build([(0, 0, 0), (30, 0, 0)], [(0, 1)])
        joints, issues = joints_for(graph, params)

        assert sorted(joints) == [0, 1]
        assert sorted(issue.key for issue in issues) == [0, 1]
        assert all(issue.kind == 'hull_degenerate' for issue in issues)
        # no core: each joint is a single closed arm
        assert all(is_closed(mesh) for mesh in joints.values())

    def test_no_core_has_no_hull_issues(self):
        params = GeneratorParams(sides=6, radius=1.0, joint_thickness=0.5, joint_length=5.0, tolerance=0.1, core='none')
        graph = Graph.build([(0, 0, 0), (30, 0, 0)], [(0, 1)])
        joints, issues = joints_for(graph, params)

        assert issues == []
        assert len(joints) == 2

    def test_joint_overlap_skips_arm(self):
        params = GeneratorParams(sides=6, radius=1.0, joint_thickness=0.5, joint_length=20.0, tolerance=0.1)
        graph = Graph.build([(0, 0, 0), (10, 0, 0)], [(0, 1)])
        joints, issues = joints_for(graph, params)

        assert joints == {}
        assert len(issues) == 2
        assert {issue.kind for issue in issues} == {'joint_overlap'}
        assert {tuple(issue.key) for issue in issues} == {(0, 1), (1, 0)}

    def test_edges_without_rods_get_no_arms(self):
        params = GeneratorParams()
        graph = tetrahedron()
        offsets = calculate_offsets(graph, params.radius, params.joint_thickness, params.tolerance)
        joints, issues = generate_joints(graph, {}, offsets, params)

        assert joints == {}
        assert issues == []
