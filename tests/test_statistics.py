import numpy as np
import pytest

from nwstrain import ConfigurationError, GeometryInconsistency
from nwstrain.fem import BimetalGeometry
from nwstrain.physics import (
    menger_curvature,
    chord_angle,
    centerline,
    compute_statistics,
    analytic_curvature,
)


class ArcDisplacement:
    """Maps the centerline of a 2D strip onto a circular arc bending towards region 1"""
    def __init__(self, geometry, kappa):
        self.geometry = geometry
        self.kappa = kappa

    def interp(self, X):
        k = self.kappa
        s = X[:, 1]
        x = X[:, 0] - (1 - np.cos(k * s)) / k
        y = np.sin(k * s) / k
        return np.column_stack([x - X[:, 0], y - s])


class ZeroDisplacement:
    def interp(self, X):
        return np.zeros_like(X)


def test_menger_curvature_on_circle():
    R = 7.0
    th = np.array([0.1, 0.5, 1.2])
    p = R * np.column_stack([np.cos(th), np.sin(th)])
    # counterclockwise is positive
    assert menger_curvature(p[0], p[1], p[2])[0] == pytest.approx(1 / R)
    assert menger_curvature(p[2], p[1], p[0])[0] == pytest.approx(-1 / R)
    assert menger_curvature([0, 0], [1, 1], [2, 2])[0] == 0.0


def test_chord_angle():
    assert chord_angle(100.0, 0.0) == 0.0
    assert chord_angle(2.0, 1.0) == pytest.approx(90.0)
    assert chord_angle(1.0, 1.0) == pytest.approx(30.0)
    assert chord_angle(1.0, 1.0, side=-1) == pytest.approx(150.0)
    # clipped for chords longer than the diameter
    assert chord_angle(3.0, 1.0) == pytest.approx(90.0)


def test_centerline():
    X = centerline(BimetalGeometry([50, 2000], 0.25), nsamples=5)
    np.testing.assert_allclose(X[:, 0], 25.0)
    np.testing.assert_allclose(X[:, 1], [0, 500, 1000, 1500, 2000])
    X3 = centerline(BimetalGeometry([10, 20, 40], 0.5), nsamples=3)
    np.testing.assert_allclose(X3, [[5, 10, 0], [5, 10, 20], [5, 10, 40]])


def test_straight_strip():
    geometry = BimetalGeometry([50, 2000], 0.5)
    stats = compute_statistics(ZeroDisplacement(), geometry)
    assert stats.curvature == 0.0
    assert stats.angle == 0.0
    assert stats.dist_bend == pytest.approx(2000.0)
    assert stats.side == 1
    assert stats.deflection == 0.0
    assert stats.concave_region == 0


def test_circular_arc():
    geometry = BimetalGeometry([50, 2000], 0.5)
    k = 5e-4
    L = geometry.length
    stats = compute_statistics(ArcDisplacement(geometry, k), geometry, nsamples=41)
    assert stats.curvature == pytest.approx(k, rel=1e-10)
    assert stats.dist_bend == pytest.approx(2 * np.sin(k * L / 2) / k)
    # the chord angle of an arc is half its central angle
    assert stats.angle == pytest.approx(np.degrees(k * L / 2))
    np.testing.assert_allclose(stats.farthest_point, [np.sin(k * L) / k, -(1 - np.cos(k * L)) / k])
    assert stats.side == 1
    assert stats.deflection < 0
    assert stats.concave_region == 1
    d = stats.as_dict()
    assert set(d) == {'angle', 'curvature', 'dist_bend', 'farthest_point', 'side', 'deflection', 'concave_region'}


def test_arc_bending_beyond_quarter_turn():
    geometry = BimetalGeometry([50, 2000], 0.5)
    # central angle 4 rad, the tip lies behind the clamp
    k = 4.0 / geometry.length
    stats = compute_statistics(ArcDisplacement(geometry, k), geometry)
    assert stats.side == -1
    assert stats.curvature == pytest.approx(k)
    assert stats.angle == pytest.approx(np.degrees(2.0))


def test_invalid_statistics_parameters():
    geometry = BimetalGeometry([50, 2000], 0.5)
    with pytest.raises(ConfigurationError):
        compute_statistics(ZeroDisplacement(), geometry, nsamples=2)
    with pytest.raises(ConfigurationError):
        compute_statistics(ZeroDisplacement(), geometry, window=(0.8, 0.2))
    with pytest.raises(ConfigurationError):
        compute_statistics(ZeroDisplacement(), geometry, nsamples=5, window=(0.3, 0.4))


def test_analytic_curvature_symmetric_bilayer():
    # m = n = 1: kappa = 3/2 factor / h
    alpha = (-0.01, 0.01)
    factor = 0.5 * 0.02 * 2.0
    assert analytic_curvature((1.0, 1.0), alpha, (25.0, 25.0)) == pytest.approx(1.5 * factor / 50.0)


def test_analytic_curvature_is_symmetric_in_the_layers():
    k12 = analytic_curvature((1.0, 2.0), (-0.01, 0.005), (10.0, 30.0))
    k21 = analytic_curvature((2.0, 1.0), (0.005, -0.01), (30.0, 10.0))
    assert k12 == pytest.approx(k21)
    assert analytic_curvature((1.0, 2.0), (0.01, 0.01), (10.0, 30.0)) == 0.0


def test_analytic_curvature_errors():
    with pytest.raises(GeometryInconsistency):
        analytic_curvature((1.0, 1.0), (0.0, 0.01), (0.0, 10.0))
    with pytest.raises(ConfigurationError):
        analytic_curvature((0.0, 1.0), (0.0, 0.01), (10.0, 10.0))
