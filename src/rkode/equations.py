########################################################################################
##
##                       FIRST ORDER ORDINARY DIFFERENTIAL EQUATIONS
##                                  (equations.py)
##
########################################################################################

# IMPORTS ==============================================================================

from .errors import DimensionMismatchError


# CLASSES ==============================================================================

class ODE:
    """First order ODE 'y' = f(t, y)' as seen by the integrators.

    The state may be split into a main set, which takes part in the error
    control of the adaptive integrators, and trailing secondary components
    that are merely carried along.

    Parameters
    ----------
    func : callable
        right-hand side 'func(t, y) -> dy'
    dimension : None | int
        dimension of the state, checked against the initial state if given
    main_dimension : None | int
        dimension of the main set, defaults to the full state dimension
    """

    def __init__(self, func, dimension=None, main_dimension=None):

        if not callable(func):
            raise ValueError(f"right-hand side must be callable, got {type(func).__name__}")

        if dimension is not None and dimension < 1:
            raise ValueError(f"dimension must be positive, got {dimension}")

        if main_dimension is not None:
            if main_dimension < 1:
                raise ValueError(f"main dimension must be positive, got {main_dimension}")
            if dimension is not None and main_dimension > dimension:
                raise DimensionMismatchError(dimension, main_dimension, "main set dimension")

        self.func = func
        self.dimension = dimension
        self.main_dimension = main_dimension


    def __call__(self, t, y):
        return self.func(t, y)


    def __repr__(self):
        return f"ODE(dimension={self.dimension}, main_dimension={self.main_dimension})"


    def check(self, n):
        """Validate the dimensions against a state of length 'n'
        and return the effective main set dimension

        Parameters
        ----------
        n : int
            length of the initial state vector

        Returns
        -------
        main : int
            dimension of the main set
        """

        if self.dimension is not None and self.dimension != n:
            raise DimensionMismatchError(self.dimension, n, "state dimension")

        main = n if self.main_dimension is None else self.main_dimension
        if main > n:
            raise DimensionMismatchError(n, main, "main set dimension")

        return main


def as_ode(ode):
    """Wrap plain callables into an 'ODE'"""
    return ode if isinstance(ode, ODE) else ODE(ode)
