import logging
import numpy as np
from scipy.sparse import coo_matrix, csr_matrix
from scipy.sparse.linalg import spsolve

from nwstrain import _common
from nwstrain.exceptions import ConfigurationError, SolverNonConvergence

logger = logging.getLogger(__name__)

# NonlinearSystem states
IDLE = 'idle'
ASSEMBLING = 'assembling'
ITERATING = 'iterating'
CONVERGED = 'converged'
FAILED = 'failed'


class EmbeddingSchedule:
    """
    Embedding values t_k = k/N, k = 1..N, with the per-step budgets

    Init Parameters
    ----------
    nsteps : int, number of continuation steps N
    tres : float, target residual norm of every step
    maxits : int, maximum number of Newton updates per step
    """
    def __init__(self, nsteps, tres=1e-10, maxits=20):
        if int(nsteps) != nsteps or nsteps < 1:
            raise ConfigurationError(f"invalid number of embedding steps {nsteps}")
        if not tres > 0.0:
            raise ConfigurationError(f"target residual must be positive, got {tres}")
        if int(maxits) != maxits or maxits < 1:
            raise ConfigurationError(f"invalid maximum number of iterations {maxits}")
        self.nsteps = int(nsteps)
        self.tres = tres
        self.maxits = int(maxits)
        self.values = np.arange(1, self.nsteps + 1) / self.nsteps

    def __iter__(self):
        return iter(enumerate(self.values, start=1))

    def __len__(self):
        return self.nsteps


######################## SYSTEM SOLVER ######################

class NonlinearSystem:
    """
    Newton iteration for the elasticity operator on a finite element space,
    homogeneous Dirichlet condition on the clamped nodes.

    Init Parameters
    ----------
    fs : FemSpace
    v : Elasticity, operator with get_elmat and energy

    Attributes
    ----------
    state : str, idle / assembling / iterating / converged / failed
    u : ndarray (ndof,), current displacement
    history : list of (step, t, iteration, residual)
    """
    def __init__(self, fs, v):
        self.fs = fs
        self.v = v
        self.ncom = fs.dim

        # tangent global matrix and residual vector (set when assembly)
        self.Kgl = None
        self.Rgl = None

        self.u = np.zeros(fs.ndof)
        self.history = []
        self.state = IDLE

        # dof table of all elements
        self.kloce = _common.get_loce(fs.conec, ncom=self.ncom)

        fixed = _common.get_loce(fs.bn[:, None], ncom=self.ncom).flatten()
        self.fixed_dofs = np.unique(fixed)
        self.free_dofs = _common.get_free_dofs(fs.ndof, self.fixed_dofs)

    def assembly(self, u, t):
        """Assemble the reduced tangent matrix and residual vector at displacement u"""
        self.state = ASSEMBLING
        nn = self.fs.ndof
        kelm, relm = self.v.get_elmat(self.fs, u, t)

        nd = self.kloce.shape[1]
        row_kgl = np.repeat(self.kloce, nd, axis=1).flatten()
        col_kgl = np.tile(self.kloce, (1, nd)).flatten()
        Kgl = coo_matrix((kelm.flatten(), (row_kgl, col_kgl)), shape=(nn, nn)).tocsr()
        Rgl = np.bincount(self.kloce.flatten(), weights=relm.flatten(), minlength=nn)

        # impose boundary conditions
        Kgl = delete_from_csr(Kgl, row_indices=self.fixed_dofs, col_indices=self.fixed_dofs)
        Rgl = Rgl[self.free_dofs]

        self.Kgl = Kgl
        self.Rgl = Rgl
        return Kgl, Rgl

    def residual_norm(self, u, t):
        self.assembly(u, t)
        return np.linalg.norm(self.Rgl)

    def energy(self, u, t):
        return self.v.energy(self.fs, u, t)

    def newton_direction(self):
        du = np.zeros(self.fs.ndof)
        du[self.free_dofs] = -spsolve(self.Kgl.tocsc(), self.Rgl)
        return du

    def _check(self, step, it, res, maxits):
        # failure when the residual is not finite or the iteration budget is spent
        if not np.isfinite(res) or it == maxits:
            self.state = FAILED
            logger.error(f"step {step}: no convergence after {it} iterations, residual = {res:.3e}")
            raise SolverNonConvergence(step, res, it)

    def newton(self, u0, t, tres, maxits, step=1, verbosity=0):
        """
        Newton iteration at fixed embedding value t, started from u0

        Returns the converged displacement, raises SolverNonConvergence
        """
        level = logging.DEBUG if verbosity < 1 else logging.INFO
        u = u0.copy()
        for it in range(maxits + 1):
            res = self.residual_norm(u, t)
            self.history.append((step, t, it, res))
            logger.log(level, f"step {step} (t = {t:.4f}) iteration {it} : residual = {res:.6e}")
            if res <= tres:
                self.state = CONVERGED
                return u
            self._check(step, it, res, maxits)
            self.state = ITERATING
            u = u + self.newton_direction()

    def damped_newton(self, u0, t, tres, maxits, step=1, verbosity=0, min_damping=1/64):
        """
        Newton directions damped by halving until the stored energy decreases

        Returns the converged displacement, raises SolverNonConvergence
        """
        level = logging.DEBUG if verbosity < 1 else logging.INFO
        u = u0.copy()
        for it in range(maxits + 1):
            res = self.residual_norm(u, t)
            self.history.append((step, t, it, res))
            if res <= tres:
                self.state = CONVERGED
                return u
            self._check(step, it, res, maxits)
            self.state = ITERATING

            du = self.newton_direction()
            # descent direction for the energy: dPsi = R . du < 0
            if np.dot(self.Rgl, du[self.free_dofs]) > 0.0:
                du = -du

            e0 = self.energy(u, t)
            # energy differences below rounding are not resolved
            etol = 1e-13 * abs(e0)
            tau = 1.0
            while True:
                e1 = self.energy(u + tau * du, t)
                if (np.isfinite(e1) and e1 <= e0 + etol) or tau <= min_damping:
                    break
                tau *= 0.5
            u = u + tau * du
            logger.log(level, f"iteration {it} : residual = {res:.6e}, damping = {tau:g}, energy = {e1:.6e}")


def solve_by_embedding(system, schedule, verbosity=0):
    """
    Parameter continuation: one Newton solve per embedding value,
    each started from the solution of the previous step.

    Parameters
    ----------
    system : NonlinearSystem
    schedule : EmbeddingSchedule
    verbosity : int, 0 logs the iterations at DEBUG level, >=1 at INFO level

    Returns
    -------
    u : ndarray (ndof,), displacement at t = 1
    """
    level = logging.DEBUG if verbosity < 1 else logging.INFO
    system.history = []
    u = np.zeros(system.fs.ndof)
    for step, t in schedule:
        try:
            u = system.newton(u, t, schedule.tres, schedule.maxits, step=step, verbosity=verbosity)
        except SolverNonConvergence:
            # no partial result is retained
            system.u = np.zeros(system.fs.ndof)
            raise
        logger.log(level, f"embedding step {step}/{len(schedule)} converged (t = {t:.4f})")
    system.u = u
    return u


def solve_by_damping(system, tres=1e-10, maxits=100, verbosity=0, min_damping=1/64):
    """
    Damped Newton iteration of the fully embedded (t = 1) problem

    Same convergence contract as solve_by_embedding, failures are reported with step 1.
    """
    system.history = []
    u = np.zeros(system.fs.ndof)
    try:
        u = system.damped_newton(u, 1.0, tres, maxits, step=1, verbosity=verbosity, min_damping=min_damping)
    except SolverNonConvergence:
        system.u = np.zeros(system.fs.ndof)
        raise
    system.u = u
    return u


################ BOUNDARY CONDITIONS ################
def delete_from_csr(mat, row_indices=[], col_indices=[]):
    """
    Remove the rows (denoted by ``row_indices``) and columns (denoted by ``col_indices``) from the CSR sparse matrix ``mat``.
    WARNING: Indices of altered axes are reset in the returned matrix
    """
    if not isinstance(mat, csr_matrix):
        raise ValueError("works only for CSR format -- use .tocsr() first")

    rows = list(row_indices)
    cols = list(col_indices)

    if len(rows) > 0 and len(cols) > 0:
        row_mask = np.ones(mat.shape[0], dtype=bool)
        row_mask[rows] = False
        col_mask = np.ones(mat.shape[1], dtype=bool)
        col_mask[cols] = False
        return mat[row_mask][:,col_mask]
    elif len(rows) > 0:
        mask = np.ones(mat.shape[0], dtype=bool)
        mask[rows] = False
        return mat[mask]
    elif len(cols) > 0:
        mask = np.ones(mat.shape[1], dtype=bool)
        mask[cols] = False
        return mat[:,mask]
    else:
        return mat
