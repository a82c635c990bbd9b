########################################################################################
##
##                  KUTTA 3/8-RULE EXPLICIT RUNGE-KUTTA INTEGRATOR
##                                (solvers/rk38.py)
##
########################################################################################

# IMPORTS ==============================================================================

from functools import lru_cache

from ._rungekutta import RungeKuttaIntegrator
from ..tableau import ButcherTableau


# TABLEAU ==============================================================================

@lru_cache(maxsize=None)
def tableau(field):
    """Butcher tableau of the 3/8 rule in 'field'"""
    r = field.ratio
    return ButcherTableau(
        name="RK38",
        c=[r(1, 3), r(2, 3), field.one],
        a=[
            [r(1, 3)],
            [r(-1, 3), field.one],
            [field.one, -field.one, field.one]
            ],
        b=[r(1, 8), r(3, 8), r(3, 8), r(1, 8)],
        order=4,
        field=field
        )


# DENSE OUTPUT =========================================================================

def dense_output(field, theta, theta_h, one_minus_theta_h, from_start):
    """Cubic continuous extension of the 3/8 rule"""

    dot3 = 3 * theta / 4
    dot1 = dot3 * (4 * theta - 5) + 1
    dot2 = dot3 * (5 - 6 * theta)
    dot4 = dot3 * (2 * theta - 1)

    four_theta2 = 4 * theta * theta

    if from_start:
        s = theta_h / 8
        c1 = s * (2 * four_theta2 - 15 * theta + 8)
        c2 = 3 * s * (5 * theta - four_theta2)
        c3 = 3 * s * theta
        c4 = s * (four_theta2 - 3 * theta)
    else:
        s = -one_minus_theta_h / 8
        c1 = s * (2 * four_theta2 - 7 * theta + 1)
        c2 = 3 * s * (theta + 1 - four_theta2)
        c3 = 3 * s * (theta + 1)
        c4 = s * (theta + 1 + four_theta2)

    return [c1, c2, c3, c4], [dot1, dot2, dot3, dot4]


# SOLVERS ==============================================================================

class RK38(RungeKuttaIntegrator):
    """Kutta's 3/8 rule, a four-stage 4th order explicit Runge-Kutta method.

    Slightly more accurate than the classical method for the same cost, at
    the price of one more nonzero entry in the stage matrix.

    Characteristics
    ---------------
    * Order: 4
    * Stages: 4
    * Explicit, fixed timestep
    * Dense output: cubic

    References
    ----------
    .. [1] Kutta, W. (1901). "Beitrag zur näherungsweisen Integration totaler
           Differentialgleichungen". Zeitschrift für Mathematik und Physik,
           46, 435-453.

    """

    name = "RK38"

    def __init__(self, step, **integrator_kwargs):
        super().__init__(step, **integrator_kwargs)

        self.tableau = tableau(self.field)
        self.dense_output = dense_output
