import numpy as np
import pytest
from scipy.sparse import csr_matrix

from nwstrain import ConfigurationError, SolverNonConvergence, BimetalProblem
from nwstrain._common import get_loce, get_free_dofs
from nwstrain.fem import BimetalGeometry, BimetalMesh, FemSpace, Elasticity
from nwstrain.fem.solver import (
    EmbeddingSchedule,
    NonlinearSystem,
    solve_by_embedding,
    solve_by_damping,
    delete_from_csr,
    IDLE,
    CONVERGED,
    FAILED,
)
from nwstrain.materials import lame_parameters, isotropic_elasticity_tensor


def make_system(scale=(4, 16), order=2, nonlinear=True, eps0=(-0.01, 0.01)):
    geometry = BimetalGeometry(scale, 0.5)
    fs = FemSpace(BimetalMesh(geometry), order)
    lam, mu = lame_parameters(1.0, 0.3)
    C = isotropic_elasticity_tensor(lam, mu, dim=fs.dim)
    v = Elasticity({1: C, 2: C}, {1: eps0[0], 2: eps0[1]}, nonlinear=nonlinear)
    return NonlinearSystem(fs, v)


def test_embedding_schedule():
    schedule = EmbeddingSchedule(4, tres=1e-8, maxits=10)
    np.testing.assert_allclose(schedule.values, [0.25, 0.5, 0.75, 1.0])
    steps = list(schedule)
    assert [s for s, _ in steps] == [1, 2, 3, 4]
    assert steps[-1][1] == 1.0
    assert len(schedule) == 4


@pytest.mark.parametrize("kwargs", [
    dict(nsteps=0),
    dict(nsteps=2.5),
    dict(nsteps=2, tres=0.0),
    dict(nsteps=2, maxits=0),
])
def test_invalid_schedule(kwargs):
    with pytest.raises(ConfigurationError):
        EmbeddingSchedule(**kwargs)


def test_get_loce():
    np.testing.assert_array_equal(get_loce([0, 2], ncom=2), [0, 1, 4, 5])
    np.testing.assert_array_equal(get_loce([[0, 2], [1, 3]], ncom=3), [[0, 1, 2, 6, 7, 8], [3, 4, 5, 9, 10, 11]])
    np.testing.assert_array_equal(get_free_dofs(5, [0, 3]), [1, 2, 4])


def test_delete_from_csr():
    mat = csr_matrix(np.arange(16, dtype=float).reshape(4, 4))
    out = delete_from_csr(mat, row_indices=[0, 2], col_indices=[0, 2])
    np.testing.assert_allclose(out.toarray(), [[5.0, 7.0], [13.0, 15.0]])
    assert delete_from_csr(mat, row_indices=[1]).shape == (3, 4)
    assert delete_from_csr(mat, col_indices=[1]).shape == (4, 3)
    assert delete_from_csr(mat) is mat
    with pytest.raises(ValueError):
        delete_from_csr(mat.tocoo(), row_indices=[0])


def test_clamped_dofs():
    system = make_system()
    fs = system.fs
    assert system.state == IDLE
    assert system.fixed_dofs.shape[0] == fs.bn.shape[0] * fs.dim
    assert system.free_dofs.shape[0] + system.fixed_dofs.shape[0] == fs.ndof
    np.testing.assert_allclose(fs.nodes[system.fixed_dofs // fs.dim, -1], 0.0)


def test_reduced_system_is_symmetric():
    system = make_system()
    rng = np.random.default_rng(1)
    u = 0.05 * rng.standard_normal(system.fs.ndof)
    K, R = system.assembly(u, 1.0)
    n = system.free_dofs.shape[0]
    assert K.shape == (n, n)
    assert R.shape == (n,)
    np.testing.assert_allclose(K.toarray(), K.toarray().T, atol=1e-10)


@pytest.mark.parametrize("nonlinear", [True, False])
def test_residual_is_energy_gradient(nonlinear):
    system = make_system(nonlinear=nonlinear)
    rng = np.random.default_rng(2)
    u = np.zeros(system.fs.ndof)
    u[system.free_dofs] = 0.05 * rng.standard_normal(system.free_dofs.shape[0])
    d = np.zeros(system.fs.ndof)
    d[system.free_dofs] = rng.standard_normal(system.free_dofs.shape[0])
    t = 0.7

    _, R = system.assembly(u, t)
    h = 1e-6
    dpsi = (system.energy(u + h * d, t) - system.energy(u - h * d, t)) / (2 * h)
    assert dpsi == pytest.approx(np.dot(R, d[system.free_dofs]), rel=1e-6)


def test_tangent_is_residual_derivative():
    system = make_system()
    rng = np.random.default_rng(3)
    u = np.zeros(system.fs.ndof)
    u[system.free_dofs] = 0.05 * rng.standard_normal(system.free_dofs.shape[0])
    d = np.zeros(system.fs.ndof)
    d[system.free_dofs] = rng.standard_normal(system.free_dofs.shape[0])
    t = 1.0

    K, _ = system.assembly(u, t)
    Kd = K @ d[system.free_dofs]
    h = 1e-6
    _, Rp = system.assembly(u + h * d, t)
    Rp = Rp.copy()
    _, Rm = system.assembly(u - h * d, t)
    np.testing.assert_allclose((Rp - Rm) / (2 * h), Kd, rtol=1e-5, atol=1e-8 * np.abs(Kd).max())


def test_zero_misfit_converges_without_updates():
    system = make_system(eps0=(0.0, 0.0))
    u = solve_by_embedding(system, EmbeddingSchedule(2, tres=1e-12, maxits=5))
    np.testing.assert_allclose(u, 0.0)
    assert system.state == CONVERGED
    assert [h[2] for h in system.history] == [0, 0]


def test_embedding_solution_has_small_residual():
    system = make_system()
    schedule = EmbeddingSchedule(3, tres=1e-10, maxits=30)
    u = solve_by_embedding(system, schedule)
    assert system.state == CONVERGED
    assert system.residual_norm(u, 1.0) <= 1e-10
    np.testing.assert_allclose(u[system.fixed_dofs], 0.0)
    # one entry per Newton iteration, steps in order
    steps = [h[0] for h in system.history]
    assert steps == sorted(steps)
    assert set(steps) == {1, 2, 3}


def test_damping_and_embedding_agree():
    u_emb = solve_by_embedding(make_system(), EmbeddingSchedule(2, tres=1e-10, maxits=30))
    system = make_system()
    u_dmp = solve_by_damping(system, tres=1e-10, maxits=60)
    assert system.state == CONVERGED
    assert {h[0] for h in system.history} == {1}
    np.testing.assert_allclose(u_dmp, u_emb, rtol=1e-6, atol=1e-9 * np.abs(u_emb).max())


def test_non_convergence_is_reported():
    system = make_system()
    schedule = EmbeddingSchedule(2, tres=1e-30, maxits=1)
    with pytest.raises(SolverNonConvergence) as excinfo:
        solve_by_embedding(system, schedule)
    err = excinfo.value
    assert err.step == 1
    assert err.iterations == 1
    assert err.residual > 1e-30
    assert system.state == FAILED
    # no partial result
    np.testing.assert_allclose(system.u, 0.0)


def test_damping_non_convergence_is_reported():
    system = make_system()
    with pytest.raises(SolverNonConvergence) as excinfo:
        solve_by_damping(system, tres=1e-30, maxits=2)
    assert excinfo.value.step == 1
    assert excinfo.value.iterations == 2


def test_problem_reports_non_convergence():
    problem = BimetalProblem(
        scale=[50, 600],
        mb=0.5,
        E=[1e-6, 1e-6],
        nu=[0.15, 0.15],
        latfac=0.01,
        nsteps=2,
        tres=1e-30,
        maxits=1,
        femorder=1,
    )
    with pytest.raises(SolverNonConvergence):
        problem.run()
    assert problem.solution is None
