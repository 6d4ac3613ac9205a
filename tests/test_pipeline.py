# tests/test_pipeline.py
"""
PIPELINE TESTS: Validation, Determinism and the Generator Memo
==============================================================
"""

import math

import numpy as np
import pytest

from rodsteward import Generator, GeneratorParams, Graph, InvalidInputError, generate
from rodsteward.geometry.joints import NoCore
from rodsteward.model import DirectedEdge


def tetrahedron(edge=100.0):
    h = edge * math.sqrt(2.0 / 3.0)
    r = edge / math.sqrt(3.0)
    base = [(r * math.cos(a), r * math.sin(a), 0.0) for a in (0.0, 2 * math.pi / 3, 4 * math.pi / 3)]
    return Graph.build(base + [(0.0, 0.0, h)], [(0, 1), (1, 2), (0, 2), (0, 3), (1, 3), (2, 3)])


class TestInputValidation:
    """Fatal input errors are raised before any geometry is built."""

    @pytest.mark.parametrize("kwargs", [
        {'sides': 2},
        {'sides': 4.5},
        {'radius': 0.0},
        {'radius': -1.0},
        {'joint_thickness': -0.1},
        {'joint_length': -1.0},
        {'tolerance': -0.01},
    ])
    def test_bad_params(self, kwargs):
        with pytest.raises(InvalidInputError):
            GeneratorParams(**kwargs)

    def test_unknown_core(self):
        with pytest.raises(InvalidInputError):
            generate(tetrahedron(), GeneratorParams(core='blob'))

    @pytest.mark.parametrize("vertices, edges", [
        ([(0, 0, 0), (1, 0, 0)], [(0, 2)]),
        ([(0, 0, 0), (1, 0, 0)], [(1, 1)]),
        ([(0, 0, 0), (1, 0, 0)], [(0, 1), (1, 0)]),
        ([(0, 0), (1, 0)], [(0, 1)]),
        ([(0, 0, float('nan')), (1, 0, 0)], [(0, 1)]),
    ])
    def test_bad_graph(self, vertices, edges):
        with pytest.raises(InvalidInputError):
            Graph.build(vertices, edges)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            GeneratorParams(radius=0.0)


class TestGenerate:
    """A full pass over a clean structure."""

    def test_tetrahedron(self):
        result = generate(tetrahedron(), GeneratorParams(radius=3.0, joint_thickness=2.0, joint_length=20.0))

        assert len(result.rods) == 6
        assert sorted(result.joints) == [0, 1, 2, 3]
        assert len(result.offsets) == 12
        assert result.issues == ()
        assert result.clashes.empty

    def test_graph_is_read_only(self):
        graph = tetrahedron()
        with pytest.raises(ValueError):
            graph.vertices[0, 0] = 5.0

    def test_skip_clash_check(self):
        graph = Graph.build([(0, 0, 0), (20, 0, 0), (0, 1.5, 0), (20, 1.5, 0)], [(0, 1), (2, 3)])
        params = GeneratorParams(sides=8, radius=1.0, joint_thickness=0.2, joint_length=2.0,
                                 tolerance=0.0, check_clashes=False)
        assert generate(graph, params).clashes.empty

    def test_issues_grouped_by_kind(self):
        graph = Graph.build([(0, 0, 0), (30, 0, 0)], [(0, 1)])
        result = generate(graph, GeneratorParams(radius=1.0, joint_thickness=0.5, joint_length=5.0))

        assert len(result.issues_of('hull_degenerate')) == 2
        assert result.issues_of('rod_degenerate') == ()

    def test_core_override(self):
        graph = Graph.build([(0, 0, 0), (30, 0, 0)], [(0, 1)])
        result = generate(graph, GeneratorParams(radius=1.0, joint_thickness=0.5, joint_length=5.0), core=NoCore())
        assert result.issues == ()


class TestDeterminism:
    """Identical inputs give identical geometry."""

    def test_two_passes_match(self):
        params = GeneratorParams(radius=3.0, joint_thickness=2.0, joint_length=20.0)
        first = generate(tetrahedron(), params)
        second = generate(tetrahedron(), params)

        assert first is not second
        assert first.offsets == second.offsets
        for edge, rod in first.rods.items():
            other = second.rods[edge]
            assert np.allclose(rod.mesh.vertices, other.mesh.vertices, atol=1e-9, rtol=0)
            assert np.array_equal(rod.mesh.faces, other.mesh.faces)
        for vertex, mesh in first.joints.items():
            other = second.joints[vertex]
            assert len(mesh.vertices) == len(other.vertices)
            assert len(mesh.faces) == len(other.faces)
            assert np.allclose(mesh.vertices, other.vertices, atol=1e-9, rtol=0)
            assert np.array_equal(mesh.faces, other.faces)

    def test_offsets_keyed_by_directed_edge(self):
        result = generate(tetrahedron())
        assert all(isinstance(key, DirectedEdge) for key in result.offsets)


class TestGeneratorMemo:
    """The caller-owned memo."""

    def test_unchanged_inputs_reuse_result(self):
        gen = Generator()
        params = GeneratorParams()
        first = gen.run(tetrahedron(), params)

        assert gen.run(tetrahedron(), GeneratorParams()) is first

    def test_changed_params_regenerate(self):
        gen = Generator()
        first = gen.run(tetrahedron(), GeneratorParams(radius=3.0))
        second = gen.run(tetrahedron(), GeneratorParams(radius=2.0))

        assert second is not first
        assert gen.run(tetrahedron(), GeneratorParams(radius=2.0)) is second

    def test_changed_graph_regenerates(self):
        gen = Generator()
        first = gen.run(tetrahedron(100.0))
        assert gen.run(tetrahedron(120.0)) is not first

    def test_clear(self):
        gen = Generator()
        first = gen.run(tetrahedron())
        gen.clear()
        assert gen.run(tetrahedron()) is not first
