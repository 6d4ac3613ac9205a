# rodsteward/kernel/buckling.py
"""Euler buckling of pinned-pinned rods."""

import numpy as np


def euler_buckling_load(E: float, I: float, L: float, k: float = 1.0) -> float:
    """
    Euler critical buckling load for a column.

    P_cr = π²EI / (kL)²

    Args:
        E: Young's modulus
        I: Moment of inertia about the weak axis
        L: Member length
        k: Effective length factor (1.0 for pinned-pinned)

    Returns:
        Critical buckling load P_cr
    """
    Le = k * L
    return (np.pi ** 2 * E * I) / (Le ** 2)


def euler_critical_stress(E: float, Iy: float, Iz: float, L: float, A: float) -> float:
    """
    Critical compressive stress of a member, buckling about its weaker axis.

    σ_cr = π²·E·min(Iy, Iz) / (L²·A)
    """
    if A <= 0 or L <= 0:
        return float('inf')
    return euler_buckling_load(E, min(Iy, Iz), L) / A
