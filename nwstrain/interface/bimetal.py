import logging
import numpy as np

from nwstrain.config import STRAIN_MODELS, AVERAGING_CONVENTIONS
from nwstrain.exceptions import ConfigurationError, GeometryInconsistency
from nwstrain.fem import BimetalGeometry, BimetalMesh, FemSpace
from nwstrain.fem.problem import Elasticity
from nwstrain.fem.solver import EmbeddingSchedule, NonlinearSystem, solve_by_embedding, solve_by_damping
from nwstrain.materials import get_material_dataset, lame_parameters, isotropic_elasticity_tensor
from nwstrain.symmetry import get_tensors, plane_strain_projection, effective_modulus
from nwstrain.physics import (
    MisfitStrain,
    DisplacementField,
    compute_statistics,
    analytic_curvature,
    chord_angle,
)

logger = logging.getLogger(__name__)


class BimetalProblem:
    """
    Bending of a bimetal strip under lattice misfit

    Elastic constants are given either as isotropic (E, nu) pairs or as
    alloy names with compositions and a crystal symmetry. The lattice
    constants come from lattice_constants, from the lattice factor latfac
    or from the region materials, in this order.

    Init Parameters
    ----------
    scale : sequence of 2 or 3 lengths [nm], thickness first, length last
    mb : float, material border fraction in (0, 1)
    materials : (str, str), alloy names of region 1 and 2
    compositions : (float, float), alloy compositions
    symmetry : str, crystal symmetry tag
    E, nu : (float, float), isotropic moduli and Poisson ratios
    latfac : float, lattice factor, lc = [5, 5 (1 + latfac)]
    lattice_constants : (float, float), explicit lattice constants
    avgc : int, averaging convention of the misfit
    strainm : str, 'LinearStrain' or 'NonlinearStrain'
    full_nonlin : bool, keep the nonlinear strain terms (nonlinear model only)
    use_emb : bool, embedding solver (True) or damping solver (False)
    nsteps, tres, maxits : embedding steps, target residual, iterations per step
    femorder : int, polynomial order
    nrefs : int, uniform refinements of the mesh
    verbosity : int, 0 logs solver iterations at DEBUG level, >=1 at INFO level
    """
    def __init__(
            self,
            scale,
            mb,
            materials=None,
            compositions=(0.0, 0.0),
            symmetry='ZincBlende2D',
            E=None,
            nu=None,
            latfac=None,
            lattice_constants=None,
            avgc=2,
            strainm='NonlinearStrain',
            full_nonlin=True,
            use_emb=True,
            nsteps=4,
            tres=1e-12,
            maxits=100,
            femorder=2,
            nrefs=0,
            verbosity=0,
        ):
        self.geometry = BimetalGeometry(scale, mb)
        self.geometry.check_order(femorder)

        if strainm not in STRAIN_MODELS:
            logger.error(f"You entered strainm = {strainm}")
            raise ConfigurationError(f"invalid strain model, choose one of {STRAIN_MODELS}")
        if avgc not in AVERAGING_CONVENTIONS:
            logger.error(f"You entered avgc = {avgc}")
            raise ConfigurationError(f"invalid averaging convention, choose one of {AVERAGING_CONVENTIONS}")

        self.materials = materials
        self.compositions = compositions
        self.symmetry = symmetry
        self.E = E
        self.nu = nu
        self.avgc = avgc
        self.strainm = strainm
        self.full_nonlin = full_nonlin
        self.nonlinear = bool(full_nonlin) and strainm == 'NonlinearStrain'
        self.use_emb = use_emb
        self.femorder = femorder
        self.nrefs = nrefs
        self.verbosity = verbosity

        if use_emb:
            self.schedule = EmbeddingSchedule(nsteps, tres=tres, maxits=maxits)
        else:
            # budgets are validated the same way
            EmbeddingSchedule(1, tres=tres, maxits=maxits)
            self.schedule = None
        self.nsteps = nsteps
        self.tres = tres
        self.maxits = maxits

        self._set_tensors()
        self._set_misfit(latfac, lattice_constants)

        self.mesh = None
        self.fs = None
        self.system = None
        self.solution = None

    def _set_tensors(self):
        dim = self.geometry.dim
        if (self.E is None) != (self.nu is None):
            raise ConfigurationError("E and nu must be given together")
        if self.E is not None and self.materials is not None:
            raise ConfigurationError("give either isotropic moduli (E, nu) or materials, not both")

        self.datasets = None
        if self.E is not None:
            if len(self.E) != 2 or len(self.nu) != 2:
                raise ConfigurationError("E and nu need one value per region")
            lam, mu = lame_parameters(self.E, self.nu)
            C = [isotropic_elasticity_tensor(lam[i], mu[i], dim=dim) for i in range(2)]
            Epz = [np.zeros((dim, 6)) for i in range(2)]
            self.labels = ['region 1', 'region 2']
        elif self.materials is not None:
            if len(self.materials) != 2 or len(self.compositions) != 2:
                raise ConfigurationError("materials and compositions need one value per region")
            self.datasets = [
                get_material_dataset(alloy, x=x, symmetry=self.symmetry)
                for alloy, x in zip(self.materials, self.compositions)
            ]
            C = []
            Epz = []
            for md in self.datasets:
                Ci, Ei = get_tensors(md)
                if dim == 2:
                    Ci = plane_strain_projection(Ci)
                elif Ci.shape != (6, 6):
                    raise GeometryInconsistency(f"symmetry {self.symmetry} provides a plane tensor, the strip is 3D")
                C.append(Ci)
                Epz.append(Ei)
            self.labels = [str(md) for md in self.datasets]
        else:
            raise ConfigurationError("either isotropic moduli (E, nu) or materials must be given")

        self.tensors = {1: C[0], 2: C[1]}
        self.piezo_tensors = {1: Epz[0], 2: Epz[1]}

    def _set_misfit(self, latfac, lattice_constants):
        if lattice_constants is not None:
            self.misfit = MisfitStrain(self.geometry, lattice_constants, avgc=self.avgc)
        elif latfac is not None:
            self.misfit = MisfitStrain.from_factor(self.geometry, latfac, avgc=self.avgc)
        elif self.datasets is not None:
            self.misfit = MisfitStrain.from_materials(self.geometry, self.datasets, avgc=self.avgc)
        else:
            raise ConfigurationError("lattice constants, lattice factor or materials must be given")
        self.latfac = latfac

    def run(self):
        """Mesh, assemble and solve, returns the DisplacementField"""
        self.mesh = BimetalMesh(self.geometry, nrefs=self.nrefs, reg2mat={1: self.labels[0], 2: self.labels[1]})
        self.fs = FemSpace(self.mesh, self.femorder)
        self.mesh.size_print()
        logger.info(f"{self.fs.ndof} degrees of freedom, order {self.femorder}")

        v = Elasticity(
            self.tensors,
            self.misfit.eigenstrains(),
            nonlinear=self.nonlinear,
            piezo_tensors=self.piezo_tensors
        )
        self.system = NonlinearSystem(self.fs, v)

        if self.use_emb:
            u = solve_by_embedding(self.system, self.schedule, verbosity=self.verbosity)
        else:
            u = solve_by_damping(self.system, tres=self.tres, maxits=self.maxits, verbosity=self.verbosity)

        self.solution = DisplacementField(self.fs, u, history=self.system.history)
        return self.solution

    def statistics(self, nsamples=41, window=(0.2, 0.8)):
        if self.solution is None:
            raise RuntimeError("run() must be called before computing statistics")
        return compute_statistics(self.solution, self.geometry, nsamples=nsamples, window=window)

    def effective_moduli(self):
        # axial moduli along the strip, plane strain in 2D
        axis = 1 if self.geometry.dim == 2 else 2
        return [effective_modulus(self.tensors[reg], axis) for reg in (1, 2)]

    def curvature_moduli(self):
        # the scalar E when given, effective moduli for material tensors
        if self.E is not None:
            return [float(e) for e in self.E]
        return self.effective_moduli()

    def analytic_curvature(self):
        return analytic_curvature(self.curvature_moduli(), self.misfit.alpha, self.geometry.region_widths)

    def compare(self, nsamples=41, window=(0.2, 0.8)):
        """
        Simulated and analytic bending

        Returns
        -------
        dict with the BendingStatistics ('stats'), 'curvature', 'analytic_curvature',
        'angle', 'analytic_angle' and 'relative_error' of the curvature
        """
        stats = self.statistics(nsamples=nsamples, window=window)
        kana = self.analytic_curvature()
        rel = abs(stats.curvature - kana) / kana if kana > 0 else np.nan
        return {
            'stats' : stats,
            'curvature' : stats.curvature,
            'analytic_curvature' : kana,
            'angle' : stats.angle,
            'analytic_angle' : float(chord_angle(stats.dist_bend, kana, stats.side)),
            'relative_error' : rel,
        }
