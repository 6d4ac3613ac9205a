# rodsteward/fabrication.py
"""
Cut list for the trimmed rods of a generation result.

Rods are reported by their TRIMMED length (edge length minus both end
offsets), which is what has to be cut from stock. Rods of nearly the same
length are grouped into bins so they can be cut in batches.
"""

from typing import Dict, List, Optional, Tuple

import pandas as pd

from .config import CONFIG
from .model import Edge
from .pipeline import GenerationResult


def rod_lengths(result: GenerationResult) -> List[Tuple[Edge, float]]:
    """
    Trimmed length of every generated rod.

    Returns:
    --------
    List of (edge, length) tuples sorted by length
    """
    lengths = [(edge, rod.length) for edge, rod in result.rods.items()]
    return sorted(lengths, key=lambda x: x[1])


def length_bins(
    lengths: List[Tuple[Edge, float]],
    tolerance: Optional[float] = None,
) -> Dict[str, List[Edge]]:
    """
    Group rods into length bins.

    A rod joins the first bin whose reference length (the length of the rod
    that opened it) is within `tolerance`; otherwise it opens a new bin.
    Feed it sorted lengths for compact bins.

    Returns:
    --------
    Dict mapping bin name, e.g. "L1 (94.2)", to the edges in that bin
    """
    if tolerance is None:
        tolerance = CONFIG.length_bin_tolerance
    if not lengths:
        return {}

    bins: List[Tuple[float, List[Edge]]] = []
    for edge, length in lengths:
        for ref_length, edges in bins:
            if abs(length - ref_length) <= tolerance:
                edges.append(edge)
                break
        else:
            bins.append((length, [edge]))

    return {
        f"L{n + 1} ({ref_length:.1f})": edges
        for n, (ref_length, edges) in enumerate(bins)
    }


def cut_list(result: GenerationResult, bin_tolerance: Optional[float] = None) -> pd.DataFrame:
    """
    Cut list table: one row per rod with its bin label, sorted by length.

    Columns: edge, start, end, length, bin
    """
    lengths = rod_lengths(result)
    bin_of = {}
    for name, edges in length_bins(lengths, bin_tolerance).items():
        for edge in edges:
            bin_of[edge] = name

    rows = [
        {'edge': edge, 'start': edge[0], 'end': edge[1], 'length': length, 'bin': bin_of[edge]}
        for edge, length in lengths
    ]
    return pd.DataFrame(rows, columns=['edge', 'start', 'end', 'length', 'bin'])
