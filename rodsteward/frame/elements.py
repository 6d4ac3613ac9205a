# rodsteward/frame/elements.py
"""
ROD FRAME ELEMENT: 10×10 Stiffness and Rotation
===============================================

ENGINEERING MODEL:
------------------
Each rod is an Euler-Bernoulli beam with FIVE DOFs per end, no torsion.
Local DOF order (node i then node j):

    0 u_i   1 v_i   2 w_i   3 θy_i   4 θz_i
    5 u_j   6 v_j   7 w_j   8 θy_j   9 θz_j

with x along the member. Bending in the local x-y plane uses (v, θz) and
Iz; bending in the local x-z plane uses (w, θy) and Iy. The x-z plane terms
coupling w and θy carry the opposite sign to the x-y plane ones because a
positive θy turns +z toward +x.

ROTATION:
---------
λ is the 3×3 direction-cosine matrix (rows = local x, y, z in global
coordinates, see rodsteward.geometry.frames.local_axes). The global
rotational DOFs are θY and θZ, so the rotational 2×2 block is the part of λ
relating local y/z to global Y/Z:

    ρ = λ[1:3, 1:3]
    R = diag(λ, ρ, λ, ρ)          (10×10)
    k_global = Rᵀ · k_local · R

Members whose local y/z axes are not spanned by global Y/Z (vertical rods,
whose local z is global X) lose part of their bending stiffness in this
reduced rotation; torsion-free 5-DOF models accept that.
"""

from typing import Tuple

import numpy as np

from ..errors import InvalidInputError
from ..geometry.frames import local_axes
from .model import SectionProperties


def member_geometry(p_i: np.ndarray, p_j: np.ndarray) -> Tuple[float, np.ndarray]:
    """
    Length and direction-cosine matrix of a member from p_i to p_j.

    Raises:
    -------
    InvalidInputError
        If the end points coincide
    """
    d = np.asarray(p_j, dtype=float) - np.asarray(p_i, dtype=float)
    L = float(np.linalg.norm(d))
    if L <= 0.0:
        raise InvalidInputError(f"Member has zero length (both ends at {tuple(p_i)})")
    return L, local_axes(d)


def rod_local_stiffness(E: float, A: float, Iy: float, Iz: float, L: float) -> np.ndarray:
    """
    Local stiffness matrix in member coordinates.
    DOF order: [u_i, v_i, w_i, θy_i, θz_i, u_j, v_j, w_j, θy_j, θz_j]
    """
    EA_L = E * A / L
    L2 = L * L
    L3 = L2 * L
    EIy = E * Iy
    EIz = E * Iz

    k = np.zeros((10, 10), dtype=float)

    # axial
    k[0, 0] = EA_L
    k[0, 5] = -EA_L
    k[5, 5] = EA_L

    # x-y plane: v, θz
    k[1, 1] = 12 * EIz / L3
    k[1, 4] = 6 * EIz / L2
    k[1, 6] = -12 * EIz / L3
    k[1, 9] = 6 * EIz / L2
    k[4, 4] = 4 * EIz / L
    k[4, 6] = -6 * EIz / L2
    k[4, 9] = 2 * EIz / L
    k[6, 6] = 12 * EIz / L3
    k[6, 9] = -6 * EIz / L2
    k[9, 9] = 4 * EIz / L

    # x-z plane: w, θy
    k[2, 2] = 12 * EIy / L3
    k[2, 3] = -6 * EIy / L2
    k[2, 7] = -12 * EIy / L3
    k[2, 8] = -6 * EIy / L2
    k[3, 3] = 4 * EIy / L
    k[3, 7] = 6 * EIy / L2
    k[3, 8] = 2 * EIy / L
    k[7, 7] = 12 * EIy / L3
    k[7, 8] = 6 * EIy / L2
    k[8, 8] = 4 * EIy / L

    # mirror the upper triangle
    return k + k.T - np.diag(np.diag(k))


def rod_rotation(lam: np.ndarray) -> np.ndarray:
    """10×10 transform from global DOFs to local DOFs."""
    rho = lam[1:3, 1:3]
    R = np.zeros((10, 10), dtype=float)
    R[0:3, 0:3] = lam
    R[3:5, 3:5] = rho
    R[5:8, 5:8] = lam
    R[8:10, 8:10] = rho
    return R


def rod_global_stiffness(
    section: SectionProperties,
    p_i: np.ndarray,
    p_j: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, float]:
    """
    Member matrices for one rod.

    Returns:
    --------
    k_local : np.ndarray
        10×10 local stiffness
    R : np.ndarray
        10×10 rotation
    k_global : np.ndarray
        Rᵀ · k_local · R
    L : float
        Member length
    """
    L, lam = member_geometry(p_i, p_j)
    k_local = rod_local_stiffness(section.E, section.A, section.Iy, section.Iz, L)
    R = rod_rotation(lam)
    return k_local, R, R.T @ k_local @ R, L


def member_end_forces(k_local: np.ndarray, R: np.ndarray, u_member: np.ndarray) -> np.ndarray:
    """
    Local end forces f = k_local · R · u_member.

    Returns shape (10,): [N_i, V_yi, V_zi, M_yi, M_zi, N_j, V_yj, V_zj, M_yj, M_zj]
    acting on the member at its ends, in member coordinates.
    """
    return k_local @ (R @ u_member)
