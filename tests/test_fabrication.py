# tests/test_fabrication.py
"""
CUT LIST TESTS: Trimmed Lengths and Length Bins
===============================================
"""

import numpy as np
import pandas as pd

from rodsteward import GeneratorParams, Graph, generate
from rodsteward.fabrication import cut_list, length_bins, rod_lengths


def star():
    # three rods of different lengths from a common vertex, all at right angles
    vertices = [(0, 0, 0), (100, 0, 0), (0, 60, 0), (0, 0, 60.3)]
    return Graph.build(vertices, [(0, 1), (0, 2), (0, 3)])


PARAMS = GeneratorParams(radius=2.0, joint_thickness=1.0, joint_length=10.0, tolerance=0.1)


class TestRodLengths:
    """Lengths come from the trimmed rods."""

    def test_sorted_trimmed_lengths(self):
        result = generate(star(), PARAMS)
        lengths = rod_lengths(result)

        assert [edge for edge, _ in lengths] == [(0, 2), (0, 3), (0, 1)]
        values = [length for _, length in lengths]
        assert values == sorted(values)

        outer = PARAMS.outer_radius
        expected = 100.0 - outer - PARAMS.radius / 2
        assert np.isclose(dict(lengths)[(0, 1)], expected)


class TestLengthBins:
    """Grouping within tolerance of the bin's first length."""

    def test_groups_within_tolerance(self):
        lengths = [((0, 1), 10.0), ((1, 2), 10.3), ((2, 3), 10.6), ((3, 4), 20.0)]
        bins = length_bins(lengths, tolerance=0.5)

        assert list(bins.values()) == [[(0, 1), (1, 2)], [(2, 3)], [(3, 4)]]
        assert list(bins) == ["L1 (10.0)", "L2 (10.6)", "L3 (20.0)"]

    def test_empty(self):
        assert length_bins([]) == {}


class TestCutList:
    """Table output."""

    def test_columns_and_bins(self):
        df = cut_list(generate(star(), PARAMS), bin_tolerance=0.5)

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['edge', 'start', 'end', 'length', 'bin']
        assert len(df) == 3
        # the two short rods differ by 0.3 and share a bin
        assert df['bin'].iloc[0] == df['bin'].iloc[1]
        assert df['bin'].iloc[2] != df['bin'].iloc[0]
