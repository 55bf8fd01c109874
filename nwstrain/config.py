"""
Configuration Constants for scripts based on the nwstrain library.

These constants control formatting, validation, and output behavior


Constants:
    I/O and Formatting:
        DLM: Standard delimiter for text output and log spacing
        FMT_STR: Template for consistent log message formatting
        LOG_FILE_NAME: Base name for simulation log files

    Validation Lists:
        CRYSTAL_SYMMETRIES: Valid crystal symmetry tags
        AVERAGING_CONVENTIONS: Valid lattice constant averaging conventions
        STRAIN_MODELS: Valid strain models of the elasticity operator
        LATTICE_RULES: Valid lattice constant selection rules of alloy records

Usage:
    Import this module to access consistent formatting and validation
    constants across the entire simulation codebase.
"""

# =============================================================================
# INPUT/OUTPUT FORMATTING CONSTANTS
# =============================================================================

# Text formatting and spacing controls
DLM = '   '                              # Delimiter for text files and log spacings
                                         # Creates consistent column alignment of log messages

FMT_STR = "   {:<30} : {}"               # Log message formatting template with two
                                         # placeholders, 1st 30 char, left justified
                                         # Format: "   Parameter Name           : Value"

LOG_FILE_NAME = 'logfile'                # Base name for log file (without extension)
                                         # Full log file will be: logfile.log
                                         # Located in the output directory set by indata

# =============================================================================
# VALIDATION CONSTANTS
# =============================================================================

# Valid input parameter options for error checking and user guidance
# used by input validation functions

CRYSTAL_SYMMETRIES = ['ZincBlende001',               # Valid crystal symmetry tags
                      'ZincBlende2D',                # - cubic, (001) oriented
                      'ZincBlende111_C14',           # - cubic, reduced to the plane
                      'ZincBlende111_C15',           # - cubic, rotated on (111), with
                      'ZincBlende111_C14_C15',       #   C14, C15 or both couplings
                      'Wurtzite0001']                # - hexagonal, (0001) oriented

AVERAGING_CONVENTIONS = [1, 2, 3]                    # Reference lattice constant of the misfit:
                                                     # - 1: lattice constant of region 1
                                                     # - 2: weighted average, normalized by lc_i
                                                     # - 3: weighted average, normalized by lc_avg

STRAIN_MODELS = ['LinearStrain', 'NonlinearStrain']  # Valid strain models
                                                     # Nonlinear adds 1/2 grad(u)^T grad(u)

LATTICE_RULES = ['symmetry', 'isotropic']            # Lattice vector of an alloy record:
                                                     # - 'symmetry': selected by crystal symmetry
                                                     # - 'isotropic': cubic constant repeated
