import numpy as np

from nwstrain.exceptions import ConfigurationError, GeometryInconsistency
from nwstrain.symmetry import voigt_to_tensor


class Elasticity:
    """
    St.Venant-Kirchhoff elasticity with a per-region isotropic eigenstrain

    At embedding value t the stored energy density is

        psi = 1/2 (E - t eps0 I) : C : (E - t eps0 I)
        E = sym(H) + t s / 2 H^T H,   H = grad u

    s = 1 for the nonlinear strain model, 0 otherwise.

    Init Parameters
    ----------
    tensors : dict, region tag -> Voigt stiffness (3x3 in 2D, 6x6 in 3D)
    eigenstrains : dict, region tag -> eps0
    nonlinear : bool, include the geometric nonlinearity
    piezo_tensors : dict, region tag -> piezoelectric tensor (stored, not coupled)
    """
    def __init__(self, tensors, eigenstrains, nonlinear=True, piezo_tensors=None):
        if set(tensors.keys()) != set(eigenstrains.keys()):
            raise ConfigurationError("tensors and eigenstrains must be given for the same regions")
        self.tensors = tensors
        self.eigenstrains = eigenstrains
        self.nonlinear = nonlinear
        self.piezo_tensors = piezo_tensors if piezo_tensors is not None else {}

        self.C4 = {reg: voigt_to_tensor(C) for reg, C in tensors.items()}

    def _region_data(self, fs):
        # per-element fourth order stiffness and eigenstrain
        d = fs.dim
        t_l = fs.mesh.t_l
        missing = set(np.unique(t_l)) - set(self.C4.keys())
        if missing:
            raise ConfigurationError(f"no elasticity tensor for regions {sorted(missing)}")
        for reg, C4 in self.C4.items():
            if C4.shape[0] != d:
                raise GeometryInconsistency(
                    f"elasticity tensor of region {reg} is {C4.shape[0]}D, the mesh is {d}D"
                )
        Ce = np.array([self.C4[reg] for reg in t_l])
        eps0 = np.array([self.eigenstrains[reg] for reg in t_l], dtype=float)
        return Ce, eps0

    def kinematics(self, fs, u, t):
        """
        Displacement gradient, deformation gradient and elastic strain at the Gauss points

        Parameters
        ----------
        fs : FemSpace
        u : ndarray (ndof,), displacement, dof = node * dim + component
        t : float, embedding value
        """
        d = fs.dim
        a = t * (1.0 if self.nonlinear else 0.0)
        U = u.reshape((fs.ng_nodes, d))[fs.conec]
        H = np.einsum('ebi,eqbj->eqij', U, fs.G)
        F = np.eye(d) + a * H
        E = 0.5 * (H + np.swapaxes(H, 2, 3)) + 0.5 * a * np.einsum('eqki,eqkj->eqij', H, H)
        _, eps0 = self._region_data(fs)
        Eel = E - t * eps0[:, None, None, None] * np.eye(d)
        return H, F, Eel, a

    def energy(self, fs, u, t):
        """Total stored energy"""
        Ce, _ = self._region_data(fs)
        _, _, Eel, _ = self.kinematics(fs, u, t)
        S = np.einsum('eijkl,eqkl->eqij', Ce, Eel)
        psi = 0.5 * np.einsum('eqij,eqij->eq', S, Eel)
        return np.sum(psi * fs.wdet)

    def get_elmat(self, fs, u, t):
        """
        Element tangent matrices and residual vectors of all elements

        Returns
        -------
        kelm : ndarray (nelem, nd, nd)
        relm : ndarray (nelem, nd), nd = nodelm * dim
        """
        d = fs.dim
        nel = fs.mesh.nelem
        nd = fs.nodelm * d

        Ce, _ = self._region_data(fs)
        _, F, Eel, a = self.kinematics(fs, u, t)

        # second Piola-Kirchhoff and first Piola-Kirchhoff stress
        S = np.einsum('eIJKL,eqKL->eqIJ', Ce, Eel)
        P = np.einsum('eqiK,eqKJ->eqiJ', F, S)

        relm = np.einsum('eqiJ,eqbJ,eq->ebi', P, fs.G, fs.wdet)

        # consistent tangent A_iJkL = a delta_ik S_LJ + F_iM C_MJNL F_kN
        A = np.einsum('eqiM,eMJNL,eqkN->eqiJkL', F, Ce, F, optimize=True)
        if a != 0.0:
            A = A + a * np.einsum('ik,eqLJ->eqiJkL', np.eye(d), S)
        kelm = np.einsum('eqbJ,eqiJkL,eqcL,eq->ebick', fs.G, A, fs.G, fs.wdet, optimize=True)

        return kelm.reshape((nel, nd, nd)), relm.reshape((nel, nd))
