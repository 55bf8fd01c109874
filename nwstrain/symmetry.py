import logging
import numpy as np

from nwstrain import _constants
from nwstrain.config import CRYSTAL_SYMMETRIES
from nwstrain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

########################################################################################
# Elasticity and piezoelectric tensors per crystal symmetry.
#
# Voigt order: [xx, yy, zz, yz, xz, xy]
# Stiffness in N/nm^2 (GPa * 1e-9), piezoelectric constants in C/nm^2.
#
# Schulz et al., "Symmetry-adapted calculations of strain and polarization fields
# in (111)-oriented zinc-blende quantum dots", Phys. Rev. B 84, 125312 (2011)
########################################################################################


def zincblende001_tensors(md):
    C11 = md('C11')
    C12 = md('C12')
    C44 = md('C44')

    # Equation (4)
    C = _constants.tensor_scale * np.array([
        [C11, C12, C12,   0,   0,   0],
        [C12, C11, C12,   0,   0,   0],
        [C12, C12, C11,   0,   0,   0],
        [  0,   0,   0, C44,   0,   0],
        [  0,   0,   0,   0, C44,   0],
        [  0,   0,   0,   0,   0, C44]
    ])

    # Equation (22)
    E14zb = md('E14zb')
    E = _constants.tensor_scale * np.array([
        [0, 0, 0, E14zb,     0,     0],
        [0, 0, 0,     0, E14zb,     0],
        [0, 0, 0,     0,     0, E14zb]
    ])
    return C, E


def zincblende2d_tensors(md):
    C11 = md('C11')
    C12 = md('C12')
    C44 = md('C44')

    # plane problem, Voigt order [xx, yy, xy]
    C = _constants.tensor_scale * np.array([
        [C11, C12,   0],
        [C12, C11,   0],
        [  0,   0, C44]
    ])

    E14zb = md('E14zb')
    E = _constants.tensor_scale * np.array([
        [E14zb,     0, 0, 0, 0, 0],
        [    0, E14zb, 0, 0, 0, 0]
    ])
    return C, E


def zincblende111_constants(C11, C12, C44):
    """Cubic constants expressed in the (111)-oriented basis"""
    sr2 = _constants.sr2
    C11p = (1/2)*(C11 + C12) + C44
    C12p = (1/6)*(C11 + 5*C12) - (1/3)*C44
    C44p = (1/3)*(C11 - C12 + C44)
    C33p = (3/2)*C11p - (1/2)*C12p - C44p
    C13p = -(1/2)*C11p + (3/2)*C12p + C44p
    C14p = sr2/6*(-C11 + C12 + 2*C44)
    C15p = (1/sr2)*C11p - (1/sr2)*C12p - sr2*C44p
    C66p = (1/2)*(C11p - C12p)
    return {
        'C11p' : C11p,
        'C12p' : C12p,
        'C13p' : C13p,
        'C14p' : C14p,
        'C15p' : C15p,
        'C33p' : C33p,
        'C44p' : C44p,
        'C66p' : C66p,
    }


def zincblende111_tensors(md, variant):
    """
    variant : str, 'C14', 'C15' or 'C14_C15', selects the off-diagonal couplings
    """
    c = zincblende111_constants(md('C11'), md('C12'), md('C44'))
    C11p, C12p, C13p, C33p = c['C11p'], c['C12p'], c['C13p'], c['C33p']
    C44p, C66p = c['C44p'], c['C66p']
    C14p = c['C14p'] if variant in ('C14', 'C14_C15') else 0.0
    C15p = c['C15p'] if variant in ('C15', 'C14_C15') else 0.0

    # Equation (14)
    C = _constants.tensor_scale * np.array([
        [C11p,  C12p,  C13p,  C14p,  C15p,     0],
        [C12p,  C11p,  C13p, -C14p, -C15p,     0],
        [C13p,  C13p,  C33p,     0,     0,     0],
        [C14p, -C14p,     0,  C44p,     0, -C15p],
        [C15p, -C15p,     0,     0,  C44p,  C14p],
        [   0,     0,     0, -C15p,  C14p,  C66p]
    ])

    # Equation (27)
    E14zb = md('E14zb')
    E11 = - np.sqrt(2/3) * E14zb
    E12 = np.sqrt(2/3) * E14zb
    E15 = - np.sqrt(1/3) * E14zb
    E31 = E15
    E33 = 2/np.sqrt(3) * E14zb
    E = _constants.tensor_scale * np.array([
        [E11, E12,   0,   0, E15,   0],
        [  0,   0,   0, E15,   0, E12],
        [E31, E31, E33,   0,   0,   0]
    ])
    return C, E


def wurtzite0001_tensors(md):
    C11 = md('C11')
    C12 = md('C12')
    C44 = md('C44')
    C11wz = (1/6) * (3*C11 + 3*C12 + 6*C44)
    C33wz = (1/6) * (2*C11 + 4*C12 + 8*C44)
    C12wz = (1/6) * (1*C11 + 5*C12 - 2*C44)
    C13wz = (1/6) * (2*C11 + 4*C12 - 4*C44)
    C44wz = (1/6) * (2*C11 - 2*C12 + 2*C44)
    C66wz = (1/6) * (1*C11 - 1*C12 + 4*C44)

    # Equation (7)
    C = _constants.tensor_scale * np.array([
        [C11wz, C12wz, C13wz,     0,     0,     0],
        [C12wz, C11wz, C13wz,     0,     0,     0],
        [C13wz, C13wz, C33wz,     0,     0,     0],
        [    0,     0,     0, C44wz,     0,     0],
        [    0,     0,     0,     0, C44wz,     0],
        [    0,     0,     0,     0,     0, C66wz]
    ])

    # Equation (25), native or quasi-cubic constants resolved by the dataset
    E31wz = md('E31wz')
    E33wz = md('E33wz')
    E15wz = md('E15wz')
    E = _constants.tensor_scale * np.array([
        [    0,     0,     0,     0, E15wz,     0],
        [    0,     0,     0, E15wz,     0,     0],
        [E31wz, E31wz, E33wz,     0,     0,     0]
    ])
    return C, E


TENSOR_BUILDERS = {
    'ZincBlende001' : zincblende001_tensors,
    'ZincBlende2D' : zincblende2d_tensors,
    'ZincBlende111_C14' : lambda md: zincblende111_tensors(md, 'C14'),
    'ZincBlende111_C15' : lambda md: zincblende111_tensors(md, 'C15'),
    'ZincBlende111_C14_C15' : lambda md: zincblende111_tensors(md, 'C14_C15'),
    'Wurtzite0001' : wurtzite0001_tensors,
}


def get_tensors(md, symmetry=None):
    """
    Elasticity and piezoelectric tensors of a material dataset

    Parameters
    ----------
    md : MaterialDataset
    symmetry : str, crystal symmetry tag (default: the symmetry of the dataset)

    Returns
    -------
    C : ndarray, Voigt stiffness (6x6, or 3x3 for ZincBlende2D) [N/nm^2]
    E : ndarray, piezoelectric tensor (3x6, or 2x6 for ZincBlende2D) [C/nm^2]
    """
    if symmetry is None:
        symmetry = md.symmetry
    builder = TENSOR_BUILDERS.get(symmetry)
    if builder is None:
        logger.error(f"You entered symmetry = {symmetry}")
        raise ConfigurationError(f"unsupported crystal symmetry, choose one of {CRYSTAL_SYMMETRIES}")
    return builder(md)


########################################################################################
# Voigt utilities
########################################################################################

VOIGT_3D = {
    (0, 0) : 0, (1, 1) : 1, (2, 2) : 2,
    (1, 2) : 3, (2, 1) : 3,
    (0, 2) : 4, (2, 0) : 4,
    (0, 1) : 5, (1, 0) : 5,
}

VOIGT_2D = {
    (0, 0) : 0, (1, 1) : 1,
    (0, 1) : 2, (1, 0) : 2,
}

# rows/columns of the 6x6 matrix kept in a plane (x, y) problem
PLANE_INDICES = [0, 1, 5]


def _voigt_map(C):
    if C.shape == (6, 6):
        return VOIGT_3D, 3
    elif C.shape == (3, 3):
        return VOIGT_2D, 2
    raise ConfigurationError(f"invalid Voigt matrix shape {C.shape}")


def voigt_to_tensor(C):
    """Fourth order stiffness C_ijkl from a 6x6 (3D) or 3x3 (2D) Voigt matrix"""
    C = np.asarray(C, dtype=float)
    vmap, d = _voigt_map(C)
    C4 = np.zeros((d, d, d, d))
    for (i, j), I in vmap.items():
        for (k, l), J in vmap.items():
            C4[i, j, k, l] = C[I, J]
    return C4


def tensor_to_voigt(C4):
    d = C4.shape[0]
    vmap = VOIGT_3D if d == 3 else VOIGT_2D
    n = 6 if d == 3 else 3
    C = np.zeros((n, n))
    for (i, j), I in vmap.items():
        for (k, l), J in vmap.items():
            C[I, J] = C4[i, j, k, l]
    return C


def rotate_elasticity_tensor(C, R):
    """
    Express a 6x6 Voigt stiffness in the basis given by the rows of the orthogonal matrix R
    C'_ijkl = R_ia R_jb R_kc R_ld C_abcd
    """
    C4 = voigt_to_tensor(C)
    C4r = np.einsum('ia,jb,kc,ld,abcd->ijkl', R, R, R, R, C4)
    return tensor_to_voigt(C4r)


def rotation_111():
    """Rows: x' = [11-2], y' = [-110], z' = [111]"""
    return np.array([
        [ 1.0, 1.0, -2.0] / np.sqrt(6.0),
        [-1.0, 1.0,  0.0] / np.sqrt(2.0),
        [ 1.0, 1.0,  1.0] / np.sqrt(3.0),
    ])


def plane_strain_projection(C):
    """Restrict a 6x6 Voigt stiffness to the (xx, yy, xy) plane strain components"""
    C = np.asarray(C, dtype=float)
    if C.shape == (3, 3):
        return C
    return C[np.ix_(PLANE_INDICES, PLANE_INDICES)]


def effective_modulus(C, axis):
    """Axial modulus 1/S_aa along a normal Voigt component (S = C^-1)"""
    S = np.linalg.inv(np.asarray(C, dtype=float))
    return 1.0 / S[axis, axis]
