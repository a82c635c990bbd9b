########################################################################################
##
##                             EXPLICIT EULER INTEGRATOR
##                                (solvers/euler.py)
##
########################################################################################

# IMPORTS ==============================================================================

from functools import lru_cache

from ._rungekutta import RungeKuttaIntegrator
from ..tableau import ButcherTableau


# TABLEAU ==============================================================================

@lru_cache(maxsize=None)
def tableau(field):
    return ButcherTableau(name="EUF", c=[], a=[], b=[field.one], order=1, field=field)


# DENSE OUTPUT =========================================================================

def dense_output(field, theta, theta_h, one_minus_theta_h, from_start):
    """Linear interpolation along the single stage derivative"""
    if from_start:
        return [theta_h], [field.one]
    return [-one_minus_theta_h], [field.one]


# SOLVERS ==============================================================================

class EUF(RungeKuttaIntegrator):
    """Explicit forward Euler method. First-order, single-stage.

    .. math::

        y_{n+1} = y_n + h \\, f(t_n, y_n)

    Characteristics
    ---------------
    * Order: 1
    * Stages: 1
    * Explicit, fixed timestep
    * Dense output: linear

    Note
    ----
    Cheapest explicit method per step but only first-order accurate.
    Mostly useful as a reference and for convergence studies.

    References
    ----------
    .. [1] Hairer, E., Nørsett, S. P., & Wanner, G. (1993). "Solving Ordinary
           Differential Equations I: Nonstiff Problems". Springer Series in
           Computational Mathematics, Vol. 8.
           :doi:`10.1007/978-3-540-78862-1`

    """

    name = "EUF"

    def __init__(self, step, **integrator_kwargs):
        super().__init__(step, **integrator_kwargs)

        self.tableau = tableau(self.field)
        self.dense_output = dense_output
