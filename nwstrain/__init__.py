from ._constants import *
from ._common import *
from .exceptions import *
from .materials import *
from .symmetry import *
from .physics import *
from .fem import *
from .interface.bimetal import BimetalProblem

try:
    from mpi4py import MPI
    comm = MPI.COMM_WORLD
    rank = comm.Get_rank()
except ImportError:
    # If MPI is not available, assume single process
    rank = 0

# =============================================================================
# LOGGING SYSTEM SETUP
# =============================================================================
import logging
from datetime import datetime
from importlib import metadata

# =============================================================================
# HEADER
# =============================================================================
def library_header():
    """Output a header for the library to standard output."""

    # Get metadata from installed package
    try:
        pkg_info = metadata.metadata("nwstrain")
        name = pkg_info["Name"]
        version = pkg_info["Version"]
    except metadata.PackageNotFoundError:
        name = "nwstrain"
        version = "(not installed)"
    current_date = datetime.now().strftime("%Y-%m-%d")

    header_lines = [
        " ",
        "=" * 80,
        f"{name} v{version} initialized on {current_date}",
        "A Python library for misfit strain driven bending of bimetal nanostructures",
        "=" * 80,
    ]

    logger = logging.getLogger(__name__)

    # Check if logging is properly configured
    if logger.hasHandlers() or logging.getLogger().hasHandlers():
        for line in header_lines:
            logger.info(line)
    else:
        # No logging configuration yet, use print to stdout
        for line in header_lines:
            print(line)

# Call library_header only on rank 0
if rank == 0:
    library_header()
