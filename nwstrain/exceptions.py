class ConfigurationError(ValueError):
    """Unsupported or out of range configuration value."""


class GeometryInconsistency(ConfigurationError):
    """Geometry parameters that cannot describe a bimetal strip."""


class SolverNonConvergence(RuntimeError):
    """
    A nonlinear solve exceeded its iteration budget.

    Attributes
    ----------
    step : int, embedding step (1-based) at which the solve failed
    residual : float, last residual norm
    iterations : int, number of Newton updates performed in that step
    """
    def __init__(self, step, residual, iterations):
        self.step = step
        self.residual = residual
        self.iterations = iterations
        RuntimeError.__init__(
            self,
            "nonlinear solver did not converge in step {} after {} iterations "
            "(residual = {:.3e})".format(step, iterations, residual)
        )
