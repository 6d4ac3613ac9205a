# rodsteward/config.py
"""
Library configuration and defaults.

Functions in the package take explicit keyword arguments and fall back to
the values held here when an argument is left as None.
"""

from dataclasses import dataclass


@dataclass
class RodStewardConfig:
    """Global library configuration."""

    # Default generator parameters (millimetres)
    default_sides: int = 6
    default_radius: float = 3.0
    default_joint_thickness: float = 2.0
    default_joint_length: float = 20.0
    default_tolerance: float = 0.1
    default_core: str = 'hull'

    # Convex hull core: points are centred and scaled so their largest
    # coordinate magnitude is about this value before Qhull sees them
    hull_working_scale: float = 1000.0

    # Structural analysis
    penalty_factor: float = 1e10   # restrained translational stiffness multiplier
    cond_limit: float = 1e12       # max condition number of the unrestrained system

    # Collision detection: separating gap below this counts as contact
    collision_epsilon: float = 1e-9

    # Cut list: rods within this length of a bin reference share the bin
    length_bin_tolerance: float = 0.5


# Global config instance
CONFIG = RodStewardConfig()
