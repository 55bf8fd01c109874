"""
Input Parameters for Bimetal Bending Sweeps

This configuration file contains all parameters needed to simulate the
bending of a two-region strip under lattice misfit for a grid of lattice
factors, strip scales and material borders, and to compare the simulated
curvature with the analytic bilayer curvature.

Parameter Categories:
    - File Configuration: Output directory
    - Execution Control: Output formats and reuse of existing results
    - Elastic Properties: Isotropic moduli or alloy materials
    - Lattice Mismatch: Lattice factors and averaging convention
    - Geometry: Strip scales and material borders
    - Nonlinear Solver: Strain model, solver type and budgets
    - Discretization: Element order and refinements
    - Statistics and Plotting
"""

import numpy as np                # Importing numpy for numerical operations

# =====================
# FILE CONFIGURATION
# =====================

directory_name = "outdata"        # Directory where all output files will be saved
                                  # Created automatically if it doesn't exist
                                  # One .npz file per configuration

# =====================
# EXECUTION CONTROL FLAGS
# =====================

generate_png_graphs = True        # If True, plot the deformed strip of every
                                  # configuration and the sweep overview in .png format

force = False                     # If False, configurations with an existing
                                  # output file are read back instead of recomputed

# =====================
# ELASTIC PROPERTIES
# =====================

# Either isotropic moduli (E, nu) or alloy materials, set the other to None
E = [1e-6, 1e-6]                  # Young's moduli of region 1 and 2 [N/nm^2]
nu = [0.15, 0.15]                 # Poisson ratios of region 1 and 2

materials = None                  # Alloys of region 1 and 2, e.g. ["InGaAs", "GaAs"]
                                  # Must exist in the nwstrain alloy database
compositions = [0.0, 0.0]         # Alloy compositions x in [0, 1]
symmetry = "ZincBlende2D"         # Crystal symmetry tag, see config.CRYSTAL_SYMMETRIES

# =====================
# LATTICE MISMATCH
# =====================

latfac_set = list(np.arange(0.0, 0.2 + 1e-9, 0.02))
                                  # Lattice factors between region 1 and 2
                                  # lc = [5, 5*(1+latfac)]
avgc = 2                          # Averaging convention of the misfit (1, 2 or 3)

# =====================
# GEOMETRY
# =====================

scale_set = [[50, 2000], [100, 2000]]
                                  # Strip dimensions [nm], thickness first, length last
                                  # Three values give a 3D strip (thickness, width, length)
mb_set = [0.25, 0.5, 0.75]        # Share of region 1 in the thickness

# =====================
# NONLINEAR SOLVER
# =====================

strainm = "NonlinearStrain"       # Strain model, 'LinearStrain' or 'NonlinearStrain'
full_nonlin = True                # Use the complete nonlinear model
                                  # (ignored with the linear strain model)
use_emb = True                    # Embedding (True) or damping (False) solver
nsteps = 4                        # Number of embedding steps
maxits = 100                      # Max number of iterations in each embedding step
tres = 1e-12                      # Target residual in each embedding step

# =====================
# DISCRETIZATION
# =====================

femorder = 3                      # Order of the finite element discretization
                                  # (above 2 only for 2D strips)
nrefs = 1                         # Number of uniform refinements before solve

# =====================
# STATISTICS AND PLOTTING
# =====================

nsamples = 41                     # Centerline samples along the strip length
window = (0.2, 0.8)               # Fractions of the length where the curvature is averaged

verbosity = 0                     # 0: solver iterations logged at DEBUG level
                                  # 1: solver iterations logged at INFO level

plotting_preferencies_deformed = {
    'subdiv' : 2,                 # Refinements of the plot triangulation
    'magnification' : 1.0,        # Displacement magnification
    'cmapin' : 'rainbow',
    'levels' : 21,
}
