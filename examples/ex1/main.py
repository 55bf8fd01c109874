"""
In this example an In(0.2)Ga(0.8)As / GaAs strip is bent by the lattice mismatch
of its two regions. The bending is compared with the analytic bilayer curvature
and the deformed strip is plotted into the folder OUTDATA
"""

################# import section ######################
import os
import logging

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

# base
from nwstrain import tic, toc
from nwstrain import BimetalProblem
from nwstrain.utilities import log_bimetal_configuration, log_bending_statistics
from nwstrain.visualization import plot_deformed

# input file
import indata
################################################################

################### General settings ###############

# where to write output data
path = indata.path
os.makedirs(path, exist_ok=True)

logging.basicConfig(
    format='[%(asctime)s %(levelname)s] %(message)s',
    filename=os.path.join(path, 'logfile.log'),
    datefmt='%H:%M:%S',
    filemode='w',
    level=logging.INFO
)
logger = logging.getLogger(__name__)

############# Bimetal bending #############

def main():

    problem = BimetalProblem(
        scale=indata.scale,
        mb=indata.mb,
        materials=indata.materials,
        compositions=indata.compositions,
        symmetry=indata.symmetry,
        avgc=indata.avgc,
        strainm=indata.strainm,
        full_nonlin=indata.full_nonlin,
        use_emb=indata.use_emb,
        nsteps=indata.nsteps,
        tres=indata.tres,
        maxits=indata.maxits,
        femorder=indata.femorder,
        nrefs=indata.nrefs,
    )
    log_bimetal_configuration(problem.geometry, problem.misfit, problem.labels)

    solution = problem.run()
    logger.info(f"Number of Newton iterations = {len(solution.history)}")
    logger.info(f"Maximum displacement [nm] = {solution.max_displacement():.4f}")

    comparison = problem.compare(nsamples=indata.nsamples)
    log_bending_statistics(comparison)

    np.savez(
        os.path.join(path, 'solution.npz'),
        nodes=solution.fs.nodes,
        conec=solution.fs.conec,
        displacement=solution.nodal,
    )

    fig = plot_deformed(solution, subdiv=2, magnification=indata.magnification)
    fig.savefig(os.path.join(path, 'deformed.png'), bbox_inches="tight")
    plt.close(fig)


if __name__=='__main__':
    tic()
    main()
    toc()
