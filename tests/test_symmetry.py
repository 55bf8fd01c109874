import numpy as np
import pytest

from nwstrain import ConfigurationError
from nwstrain.config import CRYSTAL_SYMMETRIES
from nwstrain.materials import get_material_dataset, lame_parameters, isotropic_elasticity_tensor
from nwstrain.symmetry import (
    get_tensors,
    zincblende001_tensors,
    zincblende111_constants,
    voigt_to_tensor,
    tensor_to_voigt,
    rotate_elasticity_tensor,
    rotation_111,
    plane_strain_projection,
    effective_modulus,
)


@pytest.mark.parametrize("symmetry", CRYSTAL_SYMMETRIES)
def test_tensors_are_symmetric_with_positive_diagonal(symmetry):
    md = get_material_dataset('InGaAs', x=0.3, symmetry=symmetry)
    C, E = get_tensors(md)
    np.testing.assert_allclose(C, C.T, atol=1e-20)
    assert np.all(np.diag(C) > 0)
    if symmetry == 'ZincBlende2D':
        assert C.shape == (3, 3)
        assert E.shape == (2, 6)
    else:
        assert C.shape == (6, 6)
        assert E.shape == (3, 6)


def test_unit_scaling():
    md = get_material_dataset('GaAs', symmetry='ZincBlende001')
    C, E = get_tensors(md)
    assert C[0, 0] == pytest.approx(122.1e-9)
    assert C[3, 3] == pytest.approx(60.0e-9)
    assert E[0, 3] == pytest.approx(-0.2381e-9)


def test_unsupported_symmetry():
    md = get_material_dataset('GaAs', symmetry='ZincBlende001')
    with pytest.raises(ConfigurationError):
        get_tensors(md, symmetry='Hexagonal')


def test_111_variants_select_couplings():
    md = get_material_dataset('GaAs', symmetry='ZincBlende111_C14')
    C14, _ = get_tensors(md, 'ZincBlende111_C14')
    C15, _ = get_tensors(md, 'ZincBlende111_C15')
    Cboth, _ = get_tensors(md, 'ZincBlende111_C14_C15')
    assert C14[0, 3] != 0 and C14[0, 4] == 0
    assert C15[0, 3] == 0 and C15[0, 4] != 0
    assert Cboth[0, 3] != 0 and Cboth[0, 4] != 0


def test_wurtzite_quasi_cubic_constants():
    md = get_material_dataset('GaAs', symmetry='Wurtzite0001')
    C, _ = get_tensors(md)
    C11, C12, C44 = 122.1, 56.6, 60.0
    assert C[2, 2] == pytest.approx(1e-9 * (2 * C11 + 4 * C12 + 8 * C44) / 6)
    assert C[5, 5] == pytest.approx(1e-9 * (C11 - C12 + 4 * C44) / 6)
    # transverse isotropy
    assert C[5, 5] == pytest.approx(0.5 * (C[0, 0] - C[0, 1]))


def test_voigt_roundtrip_and_minor_symmetries():
    md = get_material_dataset('GaAs', symmetry='ZincBlende111_C14_C15')
    C, _ = get_tensors(md)
    C4 = voigt_to_tensor(C)
    np.testing.assert_allclose(C4, np.swapaxes(C4, 0, 1))
    np.testing.assert_allclose(C4, np.swapaxes(C4, 2, 3))
    np.testing.assert_allclose(tensor_to_voigt(C4), C)


def test_identity_rotation():
    md = get_material_dataset('GaAs', symmetry='ZincBlende001')
    C, _ = zincblende001_tensors(md)
    np.testing.assert_allclose(rotate_elasticity_tensor(C, np.eye(3)), C, atol=1e-20)


def test_rotation_onto_111_frame():
    md = get_material_dataset('GaAs', symmetry='ZincBlende001')
    C, _ = zincblende001_tensors(md)
    R = rotation_111()
    np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-14)

    Cr = rotate_elasticity_tensor(C, R) / 1e-9
    c = zincblende111_constants(md('C11'), md('C12'), md('C44'))
    assert Cr[0, 0] == pytest.approx(c['C11p'])
    assert Cr[1, 1] == pytest.approx(c['C11p'])
    assert Cr[2, 2] == pytest.approx(c['C33p'])
    assert Cr[0, 1] == pytest.approx(c['C12p'])
    assert Cr[0, 2] == pytest.approx(c['C13p'])
    assert Cr[3, 3] == pytest.approx(c['C44p'])
    assert Cr[5, 5] == pytest.approx(c['C66p'])
    # the trigonal coupling lands on C14 or C15 depending on the in-plane axes
    assert np.hypot(Cr[0, 3], Cr[0, 4]) == pytest.approx(abs(c['C14p']))


def test_111_constants_relations():
    c = zincblende111_constants(122.1, 56.6, 60.0)
    assert c['C66p'] == pytest.approx(0.5 * (c['C11p'] - c['C12p']))
    assert c['C15p'] == pytest.approx(c['C14p'])


def test_plane_strain_projection():
    C = np.arange(36, dtype=float).reshape(6, 6)
    P = plane_strain_projection(C)
    np.testing.assert_allclose(P, C[np.ix_([0, 1, 5], [0, 1, 5])])
    np.testing.assert_allclose(plane_strain_projection(P), P)


def test_effective_modulus_isotropic():
    E, nu = 2.0, 0.3
    lam, mu = lame_parameters(E, nu)
    C3 = isotropic_elasticity_tensor(lam, mu, dim=3)
    C2 = isotropic_elasticity_tensor(lam, mu, dim=2)
    assert effective_modulus(C3, 2) == pytest.approx(E)
    assert effective_modulus(C2, 1) == pytest.approx(E / (1 - nu**2))
