# tests/test_collision.py
"""
CLASH TESTS: Triangle and Mesh Intersection
===========================================

Two parallel rods of radius r are flagged when their axes are closer than
2r and cleared when farther apart. The triangle test is checked on the
usual crossing, separated and coplanar configurations.
"""

import logging

import numpy as np

from rodsteward.geometry.collision import (
    ClashSet,
    clash_report,
    detect_clashes,
    meshes_intersect,
    triangles_intersect,
)
from rodsteward.geometry.rods import rod_mesh
from rodsteward.model import GeneratorParams, Graph
from rodsteward.pipeline import generate


def tri(*points):
    return np.array(points, dtype=float)[None]


class TestTriangleIntersect:
    """Separating axis test on triangle pairs."""

    def test_crossing_triangles(self):
        a = tri((0, 0, 0), (2, 0, 0), (0, 2, 0))
        b = tri((0.5, 0.5, -1), (0.5, 0.5, 1), (1.5, -0.5, 0))
        assert triangles_intersect(a, b)[0]

    def test_separated_triangles(self):
        a = tri((0, 0, 0), (1, 0, 0), (0, 1, 0))
        b = tri((0, 0, 1), (1, 0, 1), (0, 1, 1))
        assert not triangles_intersect(a, b)[0]

    def test_coplanar_overlap(self):
        a = tri((0, 0, 0), (2, 0, 0), (0, 2, 0))
        b = tri((0.5, 0.5, 0), (3, 0.5, 0), (0.5, 3, 0))
        assert triangles_intersect(a, b)[0]

    def test_coplanar_disjoint(self):
        # only an in-plane edge normal separates these
        a = tri((0, 0, 0), (1, 0, 0), (0, 1, 0))
        b = tri((1, 1, 0), (2, 1, 0), (1, 2, 0))
        assert not triangles_intersect(a, b)[0]

    def test_batched_pairs(self):
        a = np.concatenate([
            tri((0, 0, 0), (2, 0, 0), (0, 2, 0)),
            tri((0, 0, 0), (1, 0, 0), (0, 1, 0)),
        ])
        b = np.concatenate([
            tri((0.5, 0.5, -1), (0.5, 0.5, 1), (1.5, -0.5, 0)),
            tri((0, 0, 5), (1, 0, 5), (0, 1, 5)),
        ])
        assert list(triangles_intersect(a, b)) == [True, False]


class TestMeshesIntersect:
    """Whole-mesh test."""

    def test_overlapping_rods(self):
        a = rod_mesh(np.array([0.0, 0, 0]), np.array([10.0, 0, 0]), 1.0, 8)
        b = rod_mesh(np.array([5.0, -5, 0]), np.array([5.0, 5, 0]), 1.0, 8)
        assert meshes_intersect(a, b)

    def test_far_rods(self):
        a = rod_mesh(np.array([0.0, 0, 0]), np.array([10.0, 0, 0]), 1.0, 8)
        b = rod_mesh(np.array([0.0, 0, 50]), np.array([10.0, 0, 50]), 1.0, 8)
        assert not meshes_intersect(a, b)


class TestParallelRods:
    """Flags set and cleared by axis distance."""

    PARAMS = GeneratorParams(sides=8, radius=1.0, joint_thickness=0.2, joint_length=2.0, tolerance=0.0)

    def parallel(self, distance):
        graph = Graph.build(
            [(0, 0, 0), (20, 0, 0), (0, distance, 0), (20, distance, 0)],
            [(0, 1), (2, 3)],
        )
        return generate(graph, self.PARAMS)

    def test_closer_than_diameter_flagged(self):
        result = self.parallel(1.5)
        assert result.clashes.rods == frozenset({(0, 1), (2, 3)})

    def test_farther_than_diameter_clear(self):
        result = self.parallel(2.5)
        assert result.clashes.empty

    def test_rod_inside_own_joints_not_flagged(self):
        graph = Graph.build([(0, 0, 0), (30, 0, 0)], [(0, 1)])
        result = generate(graph, self.PARAMS)
        assert result.clashes == ClashSet()

    def test_each_pair_tested_once(self, caplog):
        result = self.parallel(2.5)
        caplog.set_level(logging.DEBUG, logger="rodsteward.geometry.collision")

        detect_clashes(result.rods, result.joints)

        # 2 rods and 4 joints: 15 pairs less 4 rod-in-own-joint pairs
        assert "tested 11 part pairs: 0 rods, 0 joints clash" in caplog.messages


class TestDetectClashes:
    """Direct use on prebuilt parts."""

    def test_joint_pair_flagged(self):
        graph = Graph.build(
            [(0, 0, 0), (20, 0, 0), (0, 1.0, 0), (0, 1.0, 20)],
            [(0, 1), (2, 3)],
        )
        result = generate(graph, GeneratorParams(sides=8, radius=1.0, joint_thickness=0.5,
                                                 joint_length=2.0, tolerance=0.0, check_clashes=False))
        clashes = detect_clashes(result.rods, result.joints)

        assert {0, 2} <= clashes.joints
        assert result.clashes.empty

    def test_report_lines(self):
        clashes = ClashSet(rods=frozenset({(1, 2)}), joints=frozenset({4}))
        assert clash_report(clashes) == [
            "rod 1-2 intersects another part",
            "joint 4 intersects another part",
        ]
