"""
Utility Functions for scripts based on the nwstrain library.

This module provides the logging, error handling and system information
helpers shared by the scripts.

Functions:
    execution_aborted: Handle fatal errors and exit gracefully
    execution_successful: Log successful completion
    host_IP: Log hostname and IP for distributed debugging
    print_header: Create formatted header for the script
    log_material_params: Display the resolved constants of a material
    log_bimetal_configuration: Show geometry and misfit setup in tabular form
    log_solver_parameters: Display nonlinear solver settings
    log_computational_system_information: Show MPI configuration
    log_bending_statistics: Display simulated and analytic bending
"""

from datetime import datetime            # Date/time stamps for logs
import logging                          # For structured log output
import socket                           # For network debugging information
import sys                              # System-specific parameters and functions

from nwstrain.config import *

# Initialize module logger for consistent formatting
logger = logging.getLogger(__name__)

# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def execution_aborted(e, rank=None):
    """
    Handle execution errors by logging the exception and exiting gracefully.

    Args:
        e (Exception or str): The exception or error message that caused the execution to abort

    Note:
        - All MPI processes must reach this function for proper termination
        - Only rank 0 logs detailed error messages to avoid duplicates
    """
    if rank == 0:
        logger.error(f"{str(e)}")
        logger.error(f"Execution aborted.")

    # ALL processes exit with error code
    sys.exit(1)

def execution_successful(rank=None):
    """
    Log successful completion of the simulation.

    NOTE: All MPI processes must reach this function for proper termination.
    """
    if rank == 0:
        logger.info("")
        logger.info('Normal successful completion.')
        print('Normal successful completion.')

    sys.exit(0)

def host_IP():
    """
    Log hostname and IP address for debugging distributed calculations.
    """
    try:
        hname = socket.gethostname()
        hip = socket.gethostbyname(hname)
        logger.info(f'{DLM}Hostname       : {hname}')
        logger.info(f"{DLM}IP Address     : {hip}")
    except OSError:
        # Network resolution can fail in some cluster environments
        logger.warning("Unable to get hostname and IP address")

def print_header(script_name):
    """
    Print formatted header with script name and execution date.

    Args:
        script_name (str): Name of the script being executed
    """
    BAR_LENGTH = 80                      # Total width of header bar

    current_date = datetime.now().strftime("%Y-%m-%d")

    shift = (BAR_LENGTH - len(script_name)) // 2  # Center alignment offset

    logger.info('=' * BAR_LENGTH)
    logger.info(f'{" " * shift}{script_name}')
    logger.info(f'{" " * shift}Running on {current_date}')
    logger.info('=' * BAR_LENGTH)

def log_material_params(md):
    """
    Log the resolved constants of a MaterialDataset in a formatted table.

    Args:
        md (MaterialDataset): material constants at fixed composition and symmetry
    """
    cell_width = 14                      # Column width for parameter display

    line1_items = [f"{key}={value:.4g}".ljust(cell_width) for key, value in md.elastic_constants.items()]
    line2_items = [f"{key}={value:.4g}".ljust(cell_width) for key, value in md.piezoelectric_constants.items()]
    line3_items = [f"a{i}={value:.5g}".ljust(cell_width) for i, value in enumerate(md.lattice_constants)]

    logger.info("")
    logger.info(f'Material : {md.label} (x = {md.x:g}, {md.symmetry})')
    logger.info(f'   {" | ".join(line1_items)}')
    logger.info(f'   {" | ".join(line2_items)}')
    logger.info(f'   {" | ".join(line3_items)}')

def log_bimetal_configuration(geometry, misfit, labels):
    """
    Log the strip geometry and the per region misfit in tabular form.

    Args:
        geometry (BimetalGeometry): strip geometry
        misfit (MisfitStrain): per region misfit
        labels (list): material labels of region 1 and 2
    """
    logger.info("")
    logger.info('Bimetal Configuration Summary')
    logger.info("-----------------------------")
    logger.info(FMT_STR.format('Scale [nm]', list(geometry.scale)))
    logger.info(FMT_STR.format('Material border', geometry.mb))
    logger.info(FMT_STR.format('Averaging convention', misfit.avgc))
    logger.info('          Material         Width [nm]   Lattice const.   alpha          eps0')
    logger.info('-' * 88)
    for i in range(2):
        logger.info(
            f'region {i+1}  {labels[i]:<16} {geometry.region_widths[i]:<12.4g} '
            f'{misfit.lc[i]:<16.6g} {misfit.alpha[i]:<14.6e} {misfit.eps0[i]:.6e}'
        )
    logger.info('-' * 88)

def log_solver_parameters(strainm, full_nonlin, use_emb, nsteps, tres, maxits, femorder, nrefs):
    """
    Log the nonlinear solver settings.
    """
    logger.info("")
    logger.info('Nonlinear Solver Parameters')
    logger.info(f'{DLM}Strain model          : {strainm}')
    logger.info(f'{DLM}Full nonlinearity     : {full_nonlin}')
    logger.info(f'{DLM}Solver                : {"embedding" if use_emb else "damping"}')
    if use_emb:
        logger.info(f'{DLM}Embedding steps       : {nsteps}')
    logger.info(f'{DLM}Target residual       : {tres:.2e}')
    logger.info(f'{DLM}Max iterations        : {maxits}')
    logger.info(f'{DLM}FEM order             : {femorder}')
    logger.info(f'{DLM}Refinements           : {nrefs}')

def log_computational_system_information(size, nconf_local):
    """
    Log computational system configuration and MPI setup.

    Args:
        size (int): Total number of MPI processes
        nconf_local (int): Configurations handled by this process
    """
    logger.info("")
    logger.info('Computational System Configuration')
    host_IP()
    logger.info(f'{DLM}MPI processes  : {size}')
    logger.info(f"{DLM}Configurations/process : {nconf_local}")

def log_bending_statistics(comparison):
    """
    Log simulated and analytic bending.

    Args:
        comparison (dict): output of BimetalProblem.compare()
    """
    stats = comparison['stats']
    logger.info("")
    logger.info('Bending Statistics')
    logger.info(f'{DLM}Bend distance [nm]    : {stats.dist_bend:.6g}')
    logger.info(f'{DLM}Tip deflection [nm]   : {stats.deflection:.6g}')
    logger.info(f'{DLM}Concave region        : {stats.concave_region}')
    logger.info(f'{DLM}simulation ===> R = {1/stats.curvature if stats.curvature > 0 else float("inf"):.6g} | curvature = {stats.curvature:.6e} | bending angle = {stats.angle:.4f} deg')
    kana = comparison['analytic_curvature']
    logger.info(f'{DLM}analytic   ===> R = {1/kana if kana > 0 else float("inf"):.6g} | curvature = {kana:.6e} | bending angle = {comparison["analytic_angle"]:.4f} deg')
    logger.info(f'{DLM}Relative curvature error : {comparison["relative_error"]:.3e}')

def dataset_name(parameters):
    """
    File name of a sweep dataset.

    Args:
        parameters (dict): every parameter that changes the result, in the
            order they appear in the name. Lists are joined with 'x', None
            values are written as 'none'.
    """
    def fmt(value):
        if value is None:
            return 'none'
        if isinstance(value, (list, tuple)):
            return 'x'.join(fmt(v) for v in value)
        if isinstance(value, float):
            return f'{value:g}'
        return str(value)

    return '_'.join(f'{key}={fmt(value)}' for key, value in parameters.items()) + '.npz'
