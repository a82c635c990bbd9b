########################################################################################
##
##                         EXPLICIT MIDPOINT RUNGE-KUTTA INTEGRATOR
##                               (solvers/midpoint.py)
##
########################################################################################

# IMPORTS ==============================================================================

from functools import lru_cache

from ._rungekutta import RungeKuttaIntegrator
from ..tableau import ButcherTableau


# TABLEAU ==============================================================================

@lru_cache(maxsize=None)
def tableau(field):
    """Butcher tableau of the explicit midpoint method in 'field'"""
    r = field.ratio
    return ButcherTableau(
        name="RKMP2",
        c=[r(1, 2)],
        a=[[r(1, 2)]],
        b=[field.zero, field.one],
        order=2,
        field=field
        )


# DENSE OUTPUT =========================================================================

def dense_output(field, theta, theta_h, one_minus_theta_h, from_start):
    """Quadratic continuous extension of the midpoint method"""

    dot2 = 2 * theta
    dot1 = 1 - dot2

    if from_start:
        c1 = theta_h * (1 - theta)
        c2 = theta_h * theta
    else:
        c1 = one_minus_theta_h * theta
        c2 = -one_minus_theta_h * (1 + theta)

    return [c1, c2], [dot1, dot2]


# SOLVERS ==============================================================================

class RKMP2(RungeKuttaIntegrator):
    """Explicit midpoint method, two stages and 2nd order.

    .. math::

        k_1 &= f(t_n,\\; y_n) \\\\
        k_2 &= f\\!\\left(t_n + \\tfrac{h}{2},\\; y_n + \\tfrac{h}{2}\\,k_1\\right) \\\\
        y_{n+1} &= y_n + h\\,k_2

    Characteristics
    ---------------
    * Order: 2
    * Stages: 2
    * Explicit, fixed timestep
    * Dense output: quadratic

    References
    ----------
    .. [1] Hairer, E., Nørsett, S. P., & Wanner, G. (1993). "Solving Ordinary
           Differential Equations I: Nonstiff Problems". Springer Series in
           Computational Mathematics, Vol. 8.
           :doi:`10.1007/978-3-540-78862-1`

    """

    name = "RKMP2"

    def __init__(self, step, **integrator_kwargs):
        super().__init__(step, **integrator_kwargs)

        #butcher tableau in the field of the integrator
        self.tableau = tableau(self.field)

        #continuous extension
        self.dense_output = dense_output
