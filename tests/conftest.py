import matplotlib
matplotlib.use('Agg')

import pytest

from nwstrain import BimetalProblem


@pytest.fixture(scope="module")
def small_mismatch_problem():
    # thin strip, small misfit, quadratic elements
    problem = BimetalProblem(
        scale=[50, 600],
        mb=0.5,
        E=[1e-6, 1e-6],
        nu=[0.15, 0.15],
        latfac=0.002,
        nsteps=2,
        tres=1e-12,
        maxits=50,
        femorder=2,
        nrefs=0,
    )
    problem.run()
    return problem
