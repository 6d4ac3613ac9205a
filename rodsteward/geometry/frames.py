# rodsteward/geometry/frames.py
"""
Local frames and cross-section profiles.

One frame convention is shared by the rod meshes, the joint arms and the
structural rotation matrix, so a rod's polygon corners line up with the
bore of the arm that receives it:

    x = unit tangent
    y = normalize(up × x)      up = world Z, or world X if x is vertical
    z = x × y
"""

import numpy as np

WORLD_X = np.array([1.0, 0.0, 0.0])
WORLD_Z = np.array([0.0, 0.0, 1.0])

# |cos| above this means the tangent is treated as vertical
VERTICAL_COS = 1.0 - 1e-9


def unit(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    if n <= 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return v / n


def local_axes(direction: np.ndarray) -> np.ndarray:
    """
    Direction-cosine matrix of a member or rod.

    Returns a 3×3 array whose rows are the local x, y, z axes expressed in
    global coordinates.
    """
    x = unit(np.asarray(direction, dtype=float))
    up = WORLD_X if abs(x[2]) > VERTICAL_COS else WORLD_Z
    y = unit(np.cross(up, x))
    z = np.cross(x, y)
    return np.vstack([x, y, z])


def profile_ring(radius: float, sides: int, direction: np.ndarray) -> np.ndarray:
    """
    Regular polygon around the origin, perpendicular to `direction`.

    Corners lie on the circle of `radius` and run counter-clockwise
    about `direction`. Shape (sides, 3).
    """
    axes = local_axes(direction)
    theta = 2.0 * np.pi * np.arange(sides) / sides
    return radius * (np.outer(np.cos(theta), axes[1]) + np.outer(np.sin(theta), axes[2]))
