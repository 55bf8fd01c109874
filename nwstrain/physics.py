import logging
import numpy as np

from nwstrain import _constants
from nwstrain.config import AVERAGING_CONVENTIONS
from nwstrain.exceptions import ConfigurationError, GeometryInconsistency

logger = logging.getLogger(__name__)

# This module contains physical objects and their related functionalities


def get_lattice_mismatch_bimetal(avgc, weights, lc):
    """
    Lattice mismatch of the two regions of a bimetal strip

    Parameters
    ----------
    avgc : int, averaging convention
        1 : alpha_j = (lc_j - lc_1) / lc_1
        2 : alpha_j = (lc_j - lc_avg) / lc_j
        3 : alpha_j = (lc_j - lc_avg) / lc_avg
    weights : sequence of 2 floats, region widths A_1, A_2
    lc : sequence of 2 floats, region lattice constants

    lc_avg = (lc_1 A_1 + lc_2 A_2) / (A_1 + A_2)

    Returns
    -------
    eps0 : ndarray (2,), isotropic eigenstrain alpha * (1 + alpha / 2)
    alpha : ndarray (2,), lattice mismatch
    """
    if avgc not in AVERAGING_CONVENTIONS:
        logger.error(f"You entered avgc = {avgc}")
        raise ConfigurationError(f"invalid averaging convention, choose one of {AVERAGING_CONVENTIONS}")

    weights = np.array(weights, dtype=float)
    lc = np.array(lc, dtype=float)
    if weights.shape != (2,) or lc.shape != (2,):
        raise ConfigurationError("weights and lattice constants must have two components")
    if np.any(weights <= 0.0):
        logger.error(f"You entered weights = {weights}")
        raise GeometryInconsistency("region weights must be positive")
    if np.any(lc <= 0.0):
        raise ConfigurationError(f"lattice constants must be positive, got {lc}")

    lc_avg = np.sum(lc * weights) / np.sum(weights)

    if avgc == 1:
        alpha = (lc - lc[0]) / lc[0]
    elif avgc == 2:
        alpha = (lc - lc_avg) / lc
    elif avgc == 3:
        alpha = (lc - lc_avg) / lc_avg

    eps0 = alpha * (1 + alpha / 2)
    return eps0, alpha


def lattice_constants_from_factor(latfac):
    """Lattice constants [lc_ref, lc_ref * (1 + latfac)]"""
    return np.array([_constants.lc_ref, _constants.lc_ref * (1 + latfac)])


class MisfitStrain:
    """
    Per region misfit of a bimetal strip

    Init Parameters
    ----------
    geometry : BimetalGeometry
    lc : sequence of 2 floats, lattice constants of region 1 and 2
    avgc : int, averaging convention

    Attributes
    ----------
    eps0 : ndarray (2,)
    alpha : ndarray (2,)
    """
    def __init__(self, geometry, lc, avgc=2):
        self.geometry = geometry
        self.lc = np.array(lc, dtype=float)
        self.avgc = avgc
        self.eps0, self.alpha = get_lattice_mismatch_bimetal(avgc, geometry.region_widths, self.lc)

    @classmethod
    def from_factor(cls, geometry, latfac, avgc=2):
        return cls(geometry, lattice_constants_from_factor(latfac), avgc=avgc)

    @classmethod
    def from_materials(cls, geometry, datasets, avgc=2, lattice_axis=2):
        # lattice constants of the region materials, by default along the c / [111] axis
        lc = [md.lattice_constants[lattice_axis] for md in datasets]
        return cls(geometry, lc, avgc=avgc)

    def eigenstrains(self):
        """Region tag -> eps0"""
        return {1: self.eps0[0], 2: self.eps0[1]}

    def __repr__(self):
        return f"MisfitStrain(eps0={self.eps0}, alpha={self.alpha})"


class DisplacementField:
    """
    Finite element displacement

    Init Parameters
    ----------
    fs : FemSpace
    u : ndarray (ndof,), dof = node * dim + component
    history : list of (step, t, iteration, residual)
    """
    def __init__(self, fs, u, history=None):
        self.fs = fs
        self.u = np.asarray(u, dtype=float)
        self.history = list(history) if history is not None else []

    @property
    def nodal(self):
        return self.u.reshape((self.fs.ng_nodes, self.fs.dim))

    def interp(self, coords):
        """Displacement at the points coords (npt, dim)"""
        return self.fs.interp(coords, self.nodal)

    def deformed_nodes(self):
        return self.fs.nodes + self.nodal

    def max_displacement(self):
        return np.max(np.linalg.norm(self.nodal, axis=1))


class BendingStatistics:
    """
    Bending of the deformed strip centerline

    Attributes
    ----------
    angle : float, bending angle [deg]
    curvature : float, mean curvature [1/nm]
    dist_bend : float, distance tip - base [nm]
    farthest_point : ndarray (2,), tip - base in (length, thickness) coordinates
    side : int, +1 when the tip lies ahead of the base along the length, -1 otherwise
    deflection : float, signed thickness displacement of the tip
    concave_region : int, region on the concave side (0 for a straight strip)
    """
    def __init__(self, angle, curvature, dist_bend, farthest_point, side, deflection, concave_region):
        self.angle = angle
        self.curvature = curvature
        self.dist_bend = dist_bend
        self.farthest_point = np.asarray(farthest_point)
        self.side = side
        self.deflection = deflection
        self.concave_region = concave_region

    def as_dict(self):
        return {
            'angle' : self.angle,
            'curvature' : self.curvature,
            'dist_bend' : self.dist_bend,
            'farthest_point' : self.farthest_point,
            'side' : self.side,
            'deflection' : self.deflection,
            'concave_region' : self.concave_region,
        }

    def __repr__(self):
        return (
            f"BendingStatistics(angle={self.angle:.6g}, curvature={self.curvature:.6g}, "
            f"dist_bend={self.dist_bend:.6g}, side={self.side})"
        )


def menger_curvature(a, b, c):
    """
    Signed curvature of the circle through three planar points
    kappa = 2 cross(b - a, c - a) / (|b - a| |c - b| |c - a|)
    """
    a = np.atleast_2d(a)
    b = np.atleast_2d(b)
    c = np.atleast_2d(c)
    ab = b - a
    ac = c - a
    cross = ab[:, 0] * ac[:, 1] - ab[:, 1] * ac[:, 0]
    den = np.linalg.norm(ab, axis=1) * np.linalg.norm(c - b, axis=1) * np.linalg.norm(ac, axis=1)
    return 2.0 * cross / den


def chord_angle(dist_bend, curvature, side=1):
    """Bending angle [deg] of an arc of given chord and curvature"""
    x = np.clip(0.5 * dist_bend * curvature, 0.0, 1.0)
    angle = np.degrees(np.arcsin(x))
    if side <= 0:
        angle = 180.0 - angle
    return angle


def centerline(geometry, nsamples=41):
    """Undeformed centerline points, mid thickness (and mid width in 3D)"""
    s = np.linspace(0.0, geometry.length, nsamples)
    pts = np.zeros((nsamples, geometry.dim))
    pts[:, 0] = 0.5 * geometry.thickness
    if geometry.dim == 3:
        pts[:, 1] = 0.5 * geometry.width
    pts[:, geometry.length_axis] = s
    return pts


def compute_statistics(displacement, geometry, nsamples=41, window=(0.2, 0.8)):
    """
    Bending statistics of the deformed centerline

    Parameters
    ----------
    displacement : DisplacementField
    geometry : BimetalGeometry
    nsamples : int, centerline samples along the length
    window : (float, float), fractions of the length where the curvature is averaged

    Returns
    -------
    BendingStatistics
    """
    if nsamples < 3:
        raise ConfigurationError(f"at least 3 centerline samples are needed, got {nsamples}")
    if not (0.0 <= window[0] < window[1] <= 1.0):
        raise ConfigurationError(f"invalid curvature window {window}")

    X = centerline(geometry, nsamples)
    p = X + displacement.interp(X)

    # (length, thickness) plane
    q = np.column_stack([p[:, geometry.length_axis], p[:, 0]])
    base = q[0]
    tip = q[-1]

    farthest_point = tip - base
    side = 1 if farthest_point[0] > 0 else -1
    dist_bend = np.linalg.norm(farthest_point)

    s = X[:, geometry.length_axis] / geometry.length
    idx = np.where((s >= window[0] - 1e-12) & (s <= window[1] + 1e-12))[0]
    if idx.shape[0] < 3:
        raise ConfigurationError("not enough centerline samples inside the curvature window")
    st = max(1, (idx.shape[0] - 1) // 4)
    i0 = idx[:idx.shape[0] - 2 * st]
    kappa = menger_curvature(q[i0], q[i0 + st], q[i0 + 2 * st])
    curvature = float(np.abs(np.mean(kappa)))

    angle = float(chord_angle(dist_bend, curvature, side))

    deflection = float(farthest_point[1])
    if deflection < 0.0:
        concave_region = 1
    elif deflection > 0.0:
        concave_region = 2
    else:
        concave_region = 0

    return BendingStatistics(
        angle=angle,
        curvature=curvature,
        dist_bend=float(dist_bend),
        farthest_point=farthest_point,
        side=side,
        deflection=deflection,
        concave_region=concave_region,
    )


def analytic_curvature(E, alpha, h):
    """
    Curvature of a bilayer with mismatch (Timoshenko)

    Parameters
    ----------
    E : (E1, E2), moduli of the layers
    alpha : (alpha1, alpha2), lattice mismatch of the layers
    h : (h1, h2), thicknesses of the layers

    kappa = |6 f (1+m)^2 / ((h1+h2) (3 (1+m)^2 + (1+mn) (m^2 + 1/(mn))))|
    f = (alpha2 - alpha1) (2 + alpha1 + alpha2) / 2, m = h1/h2, n = E1/E2
    """
    E1, E2 = E
    alpha1, alpha2 = alpha
    h1, h2 = h
    if h1 <= 0 or h2 <= 0:
        raise GeometryInconsistency("layer thicknesses must be positive")
    if E1 <= 0 or E2 <= 0:
        raise ConfigurationError("layer moduli must be positive")

    factor = 0.5 * (alpha2 - alpha1) * (2 + alpha1 + alpha2)
    m = h1 / h2
    n = E1 / E2
    den = (h1 + h2) * (3 * (1 + m)**2 + (1 + m * n) * (m**2 + 1 / (m * n)))
    return abs(6 * factor * (1 + m)**2 / den)
