# rodsteward - Rod-and-joint structures: printable joints, trimmed rods, frame analysis
"""
RODSTEWARD: Printable Joints for Rod Structures
===============================================

This package provides:
- Joint meshes for 3D printing, one per vertex of a rod graph
- Trimmed rod lengths and meshes, with a cut list
- A clash diagnostic between rods and joints
- Linear static analysis of the rod frame with buckling utilization

ARCHITECTURE:
-------------
    model.py        Graph, DirectedEdge, GeneratorParams, Issue
    geometry/       Offsets, rod meshes, joint meshes, clashes
    pipeline.py     generate() and the caller-owned Generator memo
    kernel/         DOF indexing, assembly, penalty solve, buckling
    frame/          5-DOF rod frame element and analyze()
    sequence.py     Breadth-first assembly order
    fabrication.py  Rod cut list
    config.py       Defaults
    errors.py       Exceptions
"""

import logging

from .errors import RodStewardError, InvalidInputError
from .model import DirectedEdge, Graph, GeneratorParams, Issue
from .pipeline import GenerationResult, Generator, generate
from .kernel import AnalysisSingularError
from .frame import SectionProperties, AnalysisResult, analyze
from .sequence import Part, assembly_sequence

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
