import logging

import matplotlib.pyplot as plt
import numpy as np
import pytest

from nwstrain.materials import get_material_dataset
from nwstrain.utilities import (
    execution_aborted,
    execution_successful,
    print_header,
    log_material_params,
    log_bimetal_configuration,
    log_solver_parameters,
    log_bending_statistics,
    dataset_name,
)
from nwstrain.visualization import plot_deformed, plot_bending_sweep


def test_log_blocks(caplog, small_mismatch_problem):
    caplog.set_level(logging.INFO)
    problem = small_mismatch_problem
    print_header('Bimetal test')
    log_material_params(get_material_dataset('InGaAs', x=0.2, symmetry='Wurtzite0001'))
    log_bimetal_configuration(problem.geometry, problem.misfit, problem.labels)
    log_solver_parameters('NonlinearStrain', True, True, 2, 1e-12, 50, 2, 0)
    log_bending_statistics(problem.compare())
    text = caplog.text
    assert 'Bimetal test' in text
    assert 'In_0.2Ga_0.8As' in text
    assert 'Material border' in text
    assert 'Embedding steps' in text
    assert 'Relative curvature error' in text


def test_execution_exit_codes():
    with pytest.raises(SystemExit) as excinfo:
        execution_aborted(ValueError('bad input'), rank=0)
    assert excinfo.value.code == 1
    with pytest.raises(SystemExit) as excinfo:
        execution_successful(rank=1)
    assert excinfo.value.code == 0


def test_dataset_name_covers_the_physical_parameters():
    base = dict(latfac='0.0200', scale=[50.0, 2000.0], mb=0.25, E=[1e-6, 1e-6], nu=[0.15, 0.15], avgc=2, femorder=3)
    name = dataset_name(base)
    assert name == 'latfac=0.0200_scale=50x2000_mb=0.25_E=1e-06x1e-06_nu=0.15x0.15_avgc=2_femorder=3.npz'
    # runs differing only in a fixed parameter do not share a file
    assert dataset_name(dict(base, nu=[0.0, 0.45])) != name
    assert dataset_name(dict(base, avgc=1)) != name
    assert dataset_name(dict(base, materials=['InGaAs', 'GaAs'], compositions=None)).endswith(
        '_materials=InGaAsxGaAs_compositions=none.npz'
    )


def test_plot_deformed(small_mismatch_problem):
    fig = plot_deformed(small_mismatch_problem.solution, subdiv=1, magnification=5.0)
    assert len(fig.axes) == 2
    plt.close(fig)


def test_plot_bending_sweep():
    latfac = np.array([0.0, 0.01, 0.02])
    curves = {
        'd = 50' : {
            'curvature' : np.array([0.0, 2e-4, 4e-4]),
            'analytic_curvature' : np.array([0.0, 2.1e-4, 4.2e-4]),
            'angle' : np.array([0.0, 10.0, 20.0]),
            'analytic_angle' : np.array([0.0, 10.5, 21.0]),
        }
    }
    fig = plot_bending_sweep(latfac, curves, title='Region 1: 25%, Region 2: 75%')
    ax1, ax2 = fig.axes
    assert len(ax1.lines) == 2
    np.testing.assert_allclose(ax2.lines[0].get_xdata(), [0.0, 1.0, 2.0])
    plt.close(fig)
