# rodsteward/frame/model.py
"""
SECTION PROPERTIES: Material and Cross-Section of the Rods
==========================================================

PURPOSE:
--------
Every member of the rod frame shares one section. The analysis needs:

    E        Young's modulus
    A        cross-sectional area
    Iy, Iz   second moments of area about local y and local z
    Sy, Sz   elastic section moduli (I / extreme fibre distance)
    Fu       allowable (ultimate) stress

Rods are round stock, so the two helpers below derive the geometric
constants from a radius:

    solid rod   A = πr²          I = πr⁴/4            S = I / r
    tube        A = π(ro² − ri²)  I = π(ro⁴ − ri⁴)/4   S = I / ro

UNITS:
------
Any consistent set. With millimetres and newtons, E and Fu are in MPa.
"""

import math
from dataclasses import dataclass

from ..errors import InvalidInputError


@dataclass(frozen=True)
class SectionProperties:
    """
    Material and section constants of a rod member. All values must be
    finite and > 0.

    Examples:
    ---------
    >>> sec = SectionProperties.solid_rod(radius=3.0, E=2000.0, Fu=40.0)
    >>> round(sec.A, 3)
    28.274
    """
    E: float
    A: float
    Iy: float
    Iz: float
    Sy: float
    Sz: float
    Fu: float

    def __post_init__(self):
        for name in ('E', 'A', 'Iy', 'Iz', 'Sy', 'Sz', 'Fu'):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise InvalidInputError(f"Section property {name} must be finite and > 0, got {value}")

    @classmethod
    def solid_rod(cls, radius: float, E: float, Fu: float) -> 'SectionProperties':
        """Solid circular rod of the given radius."""
        if not (radius > 0):
            raise InvalidInputError(f"Rod radius must be > 0, got {radius}")
        A = math.pi * radius ** 2
        I = math.pi * radius ** 4 / 4.0
        S = I / radius
        return cls(E=E, A=A, Iy=I, Iz=I, Sy=S, Sz=S, Fu=Fu)

    @classmethod
    def tube(cls, outer_radius: float, inner_radius: float, E: float, Fu: float) -> 'SectionProperties':
        """Circular hollow section."""
        if not (0 <= inner_radius < outer_radius):
            raise InvalidInputError(
                f"Tube radii must satisfy 0 <= inner < outer, got inner={inner_radius}, outer={outer_radius}"
            )
        A = math.pi * (outer_radius ** 2 - inner_radius ** 2)
        I = math.pi * (outer_radius ** 4 - inner_radius ** 4) / 4.0
        S = I / outer_radius
        return cls(E=E, A=A, Iy=I, Iz=I, Sy=S, Sz=S, Fu=Fu)
