import logging
from types import MappingProxyType
import numpy as np

from nwstrain import _constants
from nwstrain._database import params, alloys
from nwstrain.config import CRYSTAL_SYMMETRIES, LATTICE_RULES
from nwstrain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# This module resolves the material constants of an alloy for a given
# composition and crystal symmetry


def interpolate(x, value_a, value_b):
    """Linear mixing of end member values, x=0 gives A and x=1 gives B"""
    return x * value_b + (1 - x) * value_a


def resolve_piezoelectric_constants(member):
    """
    Return the piezoelectric constants of an end member.

    Native wurtzite constants are used when available, otherwise they are
    derived from E14zb in the quasi-cubic approximation
    (Bernardini, Fiorentini and Vanderbilt, Phys. Rev. B 56, R10024 (1997)).
    """
    E14zb = member['E14zb']
    E31wz = member.get('E31wz', -1 / np.sqrt(3) * E14zb)
    E33wz = member.get('E33wz', 2 / np.sqrt(3) * E14zb)
    E15wz = member.get('E15wz', E31wz)
    return {
        'E14zb' : E14zb,
        'E31wz' : E31wz,
        'E33wz' : E33wz,
        'E15wz' : E15wz,
    }


def lattice_vector(alc, alc_wz, symmetry, lattice_rule='symmetry'):
    """
    Select the lattice constant vector [A] appropriate to the crystal symmetry

    Parameters
    ----------
    alc : float, cubic lattice constant
    alc_wz : sequence of two floats, wurtzite lattice constants a, c
    symmetry : str, crystal symmetry tag
    lattice_rule : str, 'symmetry' or 'isotropic'
    """
    if lattice_rule == 'isotropic':
        return alc * np.ones(3)
    if symmetry in ('ZincBlende001', 'ZincBlende2D'):
        return alc * np.ones(3)
    elif symmetry in ('ZincBlende111_C14', 'ZincBlende111_C15', 'ZincBlende111_C14_C15'):
        return np.array([alc / _constants.sr2, alc / _constants.sr2, alc / _constants.sr34])
    elif symmetry == 'Wurtzite0001':
        return np.array([alc_wz[0], alc_wz[0], alc_wz[1]])
    else:
        logger.error(f"You entered symmetry = {symmetry}")
        raise ConfigurationError(f"unsupported crystal symmetry, choose one of {CRYSTAL_SYMMETRIES}")


class MaterialDataset:
    """
    Material constants of an alloy at fixed composition and crystal symmetry

    Attributes
    ----------
    name : str, alloy record name
    x : float, composition
    symmetry : str, crystal symmetry tag
    elastic_constants : read-only mapping, C11, C12, C44 [GPa]
    piezoelectric_constants : read-only mapping, E14zb, E31wz, E33wz, E15wz [C/m^2]
    lattice_constants : ndarray (3,), [A]
    psp : ndarray (3,), spontaneous polarization [C/m^2]
    kappar : float, relative dielectric constant
    """
    def __init__(
            self,
            name,
            x,
            symmetry,
            elastic_constants,
            piezoelectric_constants,
            lattice_constants,
            psp,
            kappar,
            label=None
        ):
        self.name = name
        self.x = x
        self.symmetry = symmetry
        self.elastic_constants = MappingProxyType(dict(elastic_constants))
        self.piezoelectric_constants = MappingProxyType(dict(piezoelectric_constants))

        self.lattice_constants = np.array(lattice_constants, dtype=float)
        self.lattice_constants.setflags(write=False)
        self.psp = np.array(psp, dtype=float)
        self.psp.setflags(write=False)

        self.kappar = kappar
        self.label = label if label is not None else name

    def __call__(self, key):
        # access any scalar constant by key, e.g. md('C11')
        if key in self.elastic_constants:
            return self.elastic_constants[key]
        if key in self.piezoelectric_constants:
            return self.piezoelectric_constants[key]
        if key == 'kappar':
            return self.kappar
        raise KeyError(key)

    def __str__(self):
        return self.label

    def __repr__(self):
        return f"MaterialDataset({self.label}, {self.symmetry})"


def get_material_dataset(alloy, x=0.0, symmetry='ZincBlende001', database=None, alloy_records=None):
    """
    Build the MaterialDataset of an alloy by linear interpolation of its end members

    Parameters
    ----------
    alloy : str, name of the alloy record (e.g. 'InGaAs')
    x : float, composition in [0, 1]
    symmetry : str, crystal symmetry tag
    database : dict, end member parameters (default: internal database)
    alloy_records : dict, alloy records (default: internal database)

    Returns
    -------
    MaterialDataset
    """
    if database is None:
        database = params
    if alloy_records is None:
        alloy_records = alloys

    if alloy not in alloy_records:
        logger.error(f"You entered alloy = {alloy}")
        logger.error(f'Available alloys: {list(alloy_records.keys())}')
        raise ConfigurationError("Unavailable alloy - choose an available alloy or update the parameters database")
    if not (0.0 <= x <= 1.0):
        logger.error(f"You entered x = {x}")
        raise ConfigurationError("alloy composition must be in [0, 1]")
    if symmetry not in CRYSTAL_SYMMETRIES:
        logger.error(f"You entered symmetry = {symmetry}")
        raise ConfigurationError(f"unsupported crystal symmetry, choose one of {CRYSTAL_SYMMETRIES}")

    record = alloy_records[alloy]
    lattice_rule = record.get('lattice_rule', 'symmetry')
    if lattice_rule not in LATTICE_RULES:
        raise ConfigurationError(f"invalid lattice rule '{lattice_rule}' in alloy record {alloy}")
    member_a = database[record['A']]
    member_b = database[record['B']]

    # elastic constants
    elastic_constants = {}
    for key in ('C11', 'C12', 'C44'):
        elastic_constants[key] = interpolate(x, member_a[key], member_b[key])

    # piezoelectric constants, resolved per end member before mixing
    piezo_a = resolve_piezoelectric_constants(member_a)
    piezo_b = resolve_piezoelectric_constants(member_b)
    piezoelectric_constants = {}
    for key in piezo_a.keys():
        piezoelectric_constants[key] = interpolate(x, piezo_a[key], piezo_b[key])

    # lattice constants, scalar parameters first, then the symmetry specific vector
    alc = interpolate(x, member_a['alc'], member_b['alc'])
    alc_wz = [
        interpolate(x, member_a['alc_wz'][0], member_b['alc_wz'][0]),
        interpolate(x, member_a['alc_wz'][1], member_b['alc_wz'][1]),
    ]
    lc = lattice_vector(alc, alc_wz, symmetry, lattice_rule)

    psp = interpolate(x, np.array(member_a['Psp']), np.array(member_b['Psp']))
    kappar = interpolate(x, member_a['kappar'], member_b['kappar'])

    label = record.get('label', alloy).format(x=x, y=1 - x)

    return MaterialDataset(
        alloy,
        x,
        symmetry,
        elastic_constants,
        piezoelectric_constants,
        lc,
        psp,
        kappar,
        label=label
    )


def lame_parameters(E, nu):
    """Lame constants (lambda, mu) from Young's modulus and Poisson ratio"""
    E = np.asarray(E, dtype=float)
    nu = np.asarray(nu, dtype=float)
    if np.any(nu <= -1.0) or np.any(nu >= 0.5):
        raise ConfigurationError(f"Poisson's ratio must be in (-1, 0.5), got {nu}")
    mu = E / (2 * (1 + nu))
    lam = E * nu / ((1 - 2 * nu) * (1 + nu))
    return lam, mu


def isotropic_elasticity_tensor(lam, mu, dim=3):
    """
    Isotropic stiffness in Voigt notation.

    dim=3 gives the 6x6 matrix [xx, yy, zz, yz, xz, xy], dim=2 the plane
    strain 3x3 matrix [xx, yy, xy]. No unit scaling is applied.
    """
    if dim == 3:
        C = np.zeros((6, 6))
        C[:3, :3] = lam
        C[np.arange(3), np.arange(3)] = lam + 2 * mu
        C[np.arange(3, 6), np.arange(3, 6)] = mu
    elif dim == 2:
        C = np.array([
            [lam + 2 * mu, lam,          0.0],
            [lam,          lam + 2 * mu, 0.0],
            [0.0,          0.0,          mu ]
        ])
    else:
        raise ConfigurationError(f"invalid dimension {dim}")
    return C


def isotropic_tensor_from_dataset(md, dim=3):
    """Isotropic stiffness [N/nm^2] from the cubic constants, lambda = C11 - 2 C44, mu = C44"""
    lam = md('C11') - 2 * md('C44')
    mu = md('C44')
    return _constants.tensor_scale * isotropic_elasticity_tensor(lam, mu, dim=dim)
