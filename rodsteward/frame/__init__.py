# rodsteward/frame - Rod frame structural analysis
"""
FRAME: 5-DOF SPACE FRAME OF THE ROD GRAPH
=========================================

    model.py      SectionProperties (E, A, Iy, Iz, Sy, Sz, Fu)
    elements.py   10×10 member stiffness and rotation
    analysis.py   analyze() → AnalysisResult

USAGE:
------
    from rodsteward import Graph
    from rodsteward.frame import SectionProperties, analyze

    section = SectionProperties.solid_rod(radius=3.0, E=2000.0, Fu=40.0)
    result = analyze(graph, section, restraints=[0, 1, 2], loads={3: (0, 0, -50)})
    result.to_dataframe()
"""

from .model import SectionProperties
from .elements import rod_local_stiffness, rod_rotation, rod_global_stiffness
from .analysis import AnalysisResult, analyze

__all__ = [
    'SectionProperties',
    'rod_local_stiffness',
    'rod_rotation',
    'rod_global_stiffness',
    'AnalysisResult',
    'analyze',
]
