import numpy as np
import pytest

from nwstrain import ConfigurationError, GeometryInconsistency
from nwstrain.fem import BimetalGeometry
from nwstrain.materials import get_material_dataset
from nwstrain.physics import get_lattice_mismatch_bimetal, lattice_constants_from_factor, MisfitStrain


def test_identical_lattice_constants_give_no_misfit():
    for avgc in (1, 2, 3):
        eps0, alpha = get_lattice_mismatch_bimetal(avgc, [12.5, 37.5], [5.0, 5.0])
        np.testing.assert_allclose(alpha, 0.0)
        np.testing.assert_allclose(eps0, 0.0)


def test_averaging_conventions():
    weights = [12.5, 37.5]
    lc = [5.0, 5.1]
    lc_avg = (5.0 * 12.5 + 5.1 * 37.5) / 50.0

    _, alpha = get_lattice_mismatch_bimetal(1, weights, lc)
    np.testing.assert_allclose(alpha, [0.0, 0.02])

    _, alpha = get_lattice_mismatch_bimetal(2, weights, lc)
    np.testing.assert_allclose(alpha, [(5.0 - lc_avg) / 5.0, (5.1 - lc_avg) / 5.1])

    eps0, alpha = get_lattice_mismatch_bimetal(3, weights, lc)
    np.testing.assert_allclose(alpha, [(5.0 - lc_avg) / lc_avg, (5.1 - lc_avg) / lc_avg])
    np.testing.assert_allclose(eps0, alpha * (1 + alpha / 2))


def test_invalid_averaging_convention():
    with pytest.raises(ConfigurationError):
        get_lattice_mismatch_bimetal(4, [1.0, 1.0], [5.0, 5.1])


def test_non_positive_weights():
    with pytest.raises(GeometryInconsistency):
        get_lattice_mismatch_bimetal(2, [0.0, 1.0], [5.0, 5.1])


def test_lattice_factor():
    np.testing.assert_allclose(lattice_constants_from_factor(0.02), [5.0, 5.1])


def test_misfit_from_factor_uses_region_widths():
    geometry = BimetalGeometry([50, 2000], 0.25)
    misfit = MisfitStrain.from_factor(geometry, 0.02, avgc=2)
    eps0, alpha = get_lattice_mismatch_bimetal(2, [12.5, 37.5], [5.0, 5.1])
    np.testing.assert_allclose(misfit.alpha, alpha)
    np.testing.assert_allclose(misfit.eps0, eps0)
    # thin region 1 is compressed, region 2 barely strained
    assert misfit.alpha[0] < 0 < misfit.alpha[1]
    assert abs(misfit.alpha[0]) > abs(misfit.alpha[1])
    assert misfit.eigenstrains() == {1: misfit.eps0[0], 2: misfit.eps0[1]}


def test_misfit_from_materials():
    geometry = BimetalGeometry([50, 600], 0.5)
    datasets = [
        get_material_dataset('Test', x=0.0, symmetry='ZincBlende2D'),
        get_material_dataset('Test', x=0.02, symmetry='ZincBlende2D'),
    ]
    misfit = MisfitStrain.from_materials(geometry, datasets, avgc=1)
    np.testing.assert_allclose(misfit.lc, [5.0, 5.1])
    np.testing.assert_allclose(misfit.alpha, [0.0, 0.02])
