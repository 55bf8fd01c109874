#!/usr/bin/env python
"""
Bending of bimetal strips under lattice misfit

This script sweeps lattice factors, strip scales and material borders,
solves the nonlinear elasticity problem of every configuration and compares
the simulated bending with the analytic bilayer curvature.

Key features:
- Parameter continuation (embedding) or damped Newton solver
- MPI parallelization over configurations (round robin)
- One .npz output file per configuration, reused unless force = True
- Overview plot of curvature and bending angle vs lattice mismatch
"""

# =============================================================================
# GENERAL IMPORTS AND SETUP
# =============================================================================

import os                               # Operating system interface for file operations
import itertools                        # Cartesian product of the sweep parameters

import numpy as np                      # Fundamental numerical computing package

from mpi4py import MPI                  # Python bindings for MPI parallelization

import logging                          # Logging library for structured output control

import matplotlib
matplotlib.use('Agg')                   # No display needed
import matplotlib.pyplot as plt

# =============================================================================
# CORE LIBRARY IMPORTS
# =============================================================================

from nwstrain import tic, toc           # Timing functions
from nwstrain import library_header     # Display library version information
from nwstrain import BimetalProblem     # Geometry, tensors, misfit and solver driver
from nwstrain import SolverNonConvergence, ConfigurationError
from nwstrain.materials import get_material_dataset
from nwstrain._database import alloys   # Alloy records of the material database
from nwstrain.visualization import plot_deformed, plot_bending_sweep

# =============================================================================
# LOCAL IMPORTS
# =============================================================================

from nwstrain.utilities import *
from nwstrain.config import *

# =============================================================================
# SCRIPT PARAMETERS
# =============================================================================

SCRIPT_NAME = 'Bimetal bending under lattice misfit'

# =============================================================================
# IMPORT INPUT PARAMETERS
# =============================================================================

from indata import *

# =============================================================================
# OUTPUT DIRECTORY SETUP
# =============================================================================

cdir = os.getcwd()
outdata_path = os.path.join(cdir, directory_name)
log_file = os.path.join(outdata_path, LOG_FILE_NAME + ".log")

# =============================================================================
# MPI SETUP AND PROCESS INITIALIZATION
# =============================================================================

comm = MPI.COMM_WORLD                  # Global communicator including all MPI processes
rank = comm.Get_rank()                 # Process rank (0 to size-1), 0 is the master process
size = comm.Get_size()                 # Total number of MPI processes

if rank == 0:
    os.makedirs(outdata_path, exist_ok=True)

comm.Barrier()

# =============================================================================
# CONFIGURE LOGGING SYSTEM
# =============================================================================

# NOTE: This logging configuration must come after nwstrain imports to avoid
# duplicate library headers in the log output
logging.basicConfig(
    format='[%(asctime)s %(levelname)s] %(message)s',  # Timestamp and level for each message
    filename=log_file,                 # Direct all log output to file (not console)
    datefmt='%H:%M:%S',                # Time format: hours:minutes:seconds (no date)
    filemode='w',                      # Overwrite existing log file on each run
    level=logging.INFO                 # Minimum logging level (INFO and above)
)
logger = logging.getLogger(__name__)

if rank == 0:
    print(f'\nAll log messages sent to file: {log_file}\n')

comm.Barrier()

# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def consistency_checks():
    """
    Perform consistency checks on the input parameters from indata.py.
    Raises:
        ValueError: If any parameter is invalid, inconsistent, or out of range.
    """
    if not isinstance(directory_name, str) or not directory_name:
        logger.error(f"You entered directory_name = {directory_name}")
        raise ValueError("directory_name must be a non-empty string.")

    # Elastic properties, isotropic moduli or materials
    if (E is None) == (materials is None):
        logger.error(f"You entered E = {E}, materials = {materials}")
        raise ValueError("give either isotropic moduli (E, nu) or materials.")
    if E is not None:
        if not (isinstance(E, list) and len(E) == 2 and all(e > 0 for e in E)):
            logger.error(f"You entered E = {E}")
            raise ValueError("E must be a list of two positive numbers.")
        if not (isinstance(nu, list) and len(nu) == 2 and all(-1.0 < n < 0.5 for n in nu)):
            logger.error(f"You entered nu = {nu}")
            raise ValueError("nu must be a list of two numbers in (-1, 0.5).")
    else:
        if not (isinstance(materials, list) and len(materials) == 2):
            logger.error(f"You entered materials = {materials}")
            raise ValueError("materials must be a list of two alloy names.")
        if any(m not in alloys for m in materials):
            logger.error(f"You entered materials = {materials}")
            logger.error(f'Available alloys: {list(alloys.keys())}')
            raise ValueError("Unavailable alloy(s) - Choose an available alloy or update the parameters database")
        if not (isinstance(compositions, list) and len(compositions) == 2 and all(0.0 <= x <= 1.0 for x in compositions)):
            logger.error(f"You entered compositions = {compositions}")
            raise ValueError("compositions must be a list of two numbers in [0, 1].")
        if symmetry not in CRYSTAL_SYMMETRIES:
            logger.error(f"You entered symmetry = {symmetry}")
            raise ValueError(f"symmetry must be in {CRYSTAL_SYMMETRIES}.")

    # Lattice mismatch
    if not (isinstance(latfac_set, list) and len(latfac_set) > 0):
        logger.error(f"You entered latfac_set = {latfac_set}")
        raise ValueError("latfac_set must be a non-empty list of numbers.")
    if avgc not in AVERAGING_CONVENTIONS:
        logger.error(f"You entered avgc = {avgc}")
        raise ValueError(f"avgc must be in {AVERAGING_CONVENTIONS}.")

    # Geometry
    if not (isinstance(scale_set, list) and all(len(s) in (2, 3) and all(l > 0 for l in s) for s in scale_set)):
        logger.error(f"You entered scale_set = {scale_set}")
        raise ValueError("scale_set must be a list of 2 or 3 positive lengths per entry.")
    if any(not (0.0 < mb < 1.0) for mb in mb_set):
        logger.error(f"You entered mb_set = {mb_set}")
        raise ValueError("Each material border must be in (0, 1).")

    # Nonlinear solver
    if strainm not in STRAIN_MODELS:
        logger.error(f"You entered strainm = {strainm}")
        raise ValueError(f"strainm must be in {STRAIN_MODELS}.")
    if not (isinstance(nsteps, int) and nsteps > 0):
        logger.error(f"You entered nsteps = {nsteps}")
        raise ValueError("nsteps must be a positive integer.")
    if not (isinstance(maxits, int) and maxits > 0):
        logger.error(f"You entered maxits = {maxits}")
        raise ValueError("maxits must be a positive integer.")
    if not tres > 0:
        logger.error(f"You entered tres = {tres}")
        raise ValueError("tres must be positive.")

    # Discretization
    if not (isinstance(femorder, int) and femorder > 0):
        logger.error(f"You entered femorder = {femorder}")
        raise ValueError("femorder must be a positive integer.")
    if femorder > 2 and any(len(s) == 3 for s in scale_set):
        logger.error(f"You entered femorder = {femorder}, scale_set = {scale_set}")
        raise ValueError("femorder above 2 is only available for 2D strips.")
    if not (isinstance(nrefs, int) and nrefs >= 0):
        logger.error(f"You entered nrefs = {nrefs}")
        raise ValueError("nrefs must be a non-negative integer.")

    return True

def savename(conf):
    """File name of a configuration, built from the swept and the fixed parameters"""
    parameters = {
        'latfac' : f"{conf['latfac']:.4f}",
        'scale' : [float(s) for s in conf['scale']],
        'mb' : float(conf['mb']),
    }
    if materials is None:
        parameters['E'] = [float(e) for e in E]
        parameters['nu'] = [float(n) for n in nu]
    else:
        parameters['materials'] = materials
        parameters['compositions'] = [float(x) for x in compositions]
        parameters['symmetry'] = symmetry
    parameters.update(
        avgc=avgc, femorder=femorder, nrefs=nrefs, strainm=strainm, full_nonlin=full_nonlin
    )
    return dataset_name(parameters)

def run_configuration(conf):
    """
    Solve one configuration and save the results.

    Returns the comparison dict, or None when the solver did not converge.
    """
    file_name = os.path.join(outdata_path, savename(conf))
    if os.path.isfile(file_name) and not force:
        logger.info(f"Skipping dataset {savename(conf)}, because it already exists (and force = {force})...")
        data = np.load(file_name)
        return {key: float(data[key]) for key in ('curvature', 'analytic_curvature', 'angle', 'analytic_angle')}

    logger.info("")
    logger.info(f"Running dataset {savename(conf)}...")

    problem = BimetalProblem(
        scale=conf['scale'],
        mb=conf['mb'],
        materials=materials,
        compositions=compositions,
        symmetry=symmetry,
        E=E,
        nu=nu,
        latfac=conf['latfac'],
        avgc=avgc,
        strainm=strainm,
        full_nonlin=full_nonlin,
        use_emb=use_emb,
        nsteps=nsteps,
        tres=tres,
        maxits=maxits,
        femorder=femorder,
        nrefs=nrefs,
        verbosity=verbosity,
    )
    log_bimetal_configuration(problem.geometry, problem.misfit, problem.labels)

    tic()
    try:
        solution = problem.run()
    except SolverNonConvergence as e:
        logger.warning(f"{savename(conf)} skipped: {e}")
        return None
    logger.info(f"{DLM}Solve time [s] : {toc(False):.2f}")

    comparison = problem.compare(nsamples=nsamples, window=window)
    log_bending_statistics(comparison)

    stats = comparison['stats']
    np.savez(
        file_name,
        scale=np.array(conf['scale']),
        mb=conf['mb'],
        latfac=conf['latfac'],
        misfit_strain=problem.misfit.eps0,
        alpha=problem.misfit.alpha,
        nodes=solution.fs.nodes,
        conec=solution.fs.conec,
        displacement=solution.nodal,
        residual_history=np.array(solution.history),
        curvature=comparison['curvature'],
        analytic_curvature=comparison['analytic_curvature'],
        angle=comparison['angle'],
        analytic_angle=comparison['analytic_angle'],
        dist_bend=stats.dist_bend,
        farthest_point=stats.farthest_point,
        deflection=stats.deflection,
        concave_region=stats.concave_region,
    )

    if generate_png_graphs:
        fig = plot_deformed(solution, **plotting_preferencies_deformed)
        fig.savefig(file_name.replace('.npz', '.png'), bbox_inches="tight")
        plt.close(fig)

    return comparison

# =============================================================================
# MAIN CALCULATION FUNCTION
# =============================================================================

def main():
    """
    Main sweep routine

    1. Parameter validation
    2. Distribution of the configurations over the MPI processes
    3. Solution and statistics of every configuration
    4. Overview plot on rank 0
    """
    if rank == 0:
        print_header(SCRIPT_NAME)
        library_header()

        try:
            consistency_checks()
        except ValueError as e:
            execution_aborted(e, rank)
        else:
            logger.info("")
            logger.info(f'Input parameters consistency checks passed')

        if materials is not None:
            try:
                for alloy, x in zip(materials, compositions):
                    log_material_params(get_material_dataset(alloy, x=x, symmetry=symmetry))
            except ConfigurationError as e:
                execution_aborted(e, rank)

        log_solver_parameters(strainm, full_nonlin, use_emb, nsteps, tres, maxits, femorder, nrefs)

    comm.Barrier()

    # all the configurations of the sweep, round robin over the processes
    configurations = [
        {'scale': list(scale), 'mb': mb, 'latfac': float(latfac)}
        for scale, mb, latfac in itertools.product(scale_set, mb_set, latfac_set)
    ]
    local_indices = list(range(rank, len(configurations), size))

    if rank == 0:
        log_computational_system_information(size, len(local_indices))

    local_results = []
    for i in local_indices:
        conf = configurations[i]
        try:
            comparison = run_configuration(conf)
        except ConfigurationError as e:
            logger.error(f"{savename(conf)}: {e}")
            comparison = None
        if comparison is not None:
            local_results.append((i, {key: comparison[key] for key in ('curvature', 'analytic_curvature', 'angle', 'analytic_angle')}))

    all_results = comm.gather(local_results, root=0)

    if rank == 0:
        results = dict(r for part in all_results for r in part)
        logger.info("")
        logger.info(f'{len(results)} of {len(configurations)} configurations converged')

        if generate_png_graphs:
            for mb in mb_set:
                curves = {}
                for scale in scale_set:
                    idx = [
                        i for i, c in enumerate(configurations)
                        if c['mb'] == mb and c['scale'] == list(scale) and i in results
                    ]
                    if len(idx) == 0:
                        continue
                    idx.sort(key=lambda i: configurations[i]['latfac'])
                    curves[f"d = {scale[0]}"] = {
                        key: np.array([results[i][key] for i in idx])
                        for key in ('curvature', 'analytic_curvature', 'angle', 'analytic_angle')
                    }
                    curves[f"d = {scale[0]}"]['lattice_mismatch'] = np.array([configurations[i]['latfac'] for i in idx])
                if len(curves) == 0:
                    continue
                fig = plot_bending_sweep(
                    latfac_set,
                    curves,
                    title=f"Region 1: {int(mb*100)}%, Region 2: {int((1-mb)*100)}%"
                )
                fig.savefig(os.path.join(outdata_path, f'curvature_angle_material_border={mb}.png'), bbox_inches="tight")
                plt.close(fig)

    comm.Barrier()
    execution_successful(rank)

if __name__ == "__main__":
    main()
