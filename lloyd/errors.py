"""Exceptions raised by lloyd."""


class LloydError(Exception):
    pass


class ConfigurationError(LloydError, ValueError):
    """Invalid input to a clustering run, detected before iterating."""


class EmptyClusterError(LloydError, ArithmeticError):
    def __init__(self, index, iteration):
        super().__init__(
            "cluster %d has no points at iteration %d" % (index, iteration))
        self.index = index
        self.iteration = iteration


class ConvergenceError(LloydError, RuntimeError):
    def __init__(self, iterations, displacement):
        super().__init__(
            "no convergence after %d iterations (max displacement %g)"
            % (iterations, displacement))
        self.iterations = iterations
        self.displacement = displacement


class DegenerateDataError(LloydError, ValueError):
    """A dimension has zero variance and cannot be normalized."""


class PointSourceError(LloydError, ValueError):
    pass
