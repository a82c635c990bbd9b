########################################################################################
##
##                      GILL FOURTH ORDER RUNGE-KUTTA INTEGRATOR
##                                (solvers/gill.py)
##
########################################################################################

# IMPORTS ==============================================================================

from functools import lru_cache

from ._rungekutta import RungeKuttaIntegrator
from ..tableau import ButcherTableau


# TABLEAU ==============================================================================

@lru_cache(maxsize=None)
def tableau(field):
    """Butcher tableau of Gill's method in 'field'"""
    r = field.ratio
    sqrt2 = field.sqrt(2)
    two = field.convert(2)
    return ButcherTableau(
        name="RKG4",
        c=[r(1, 2), r(1, 2), field.one],
        a=[
            [r(1, 2)],
            [(sqrt2 - 1) / 2, (two - sqrt2) / 2],
            [field.zero, -sqrt2 / 2, (two + sqrt2) / 2]
            ],
        b=[r(1, 6), (two - sqrt2) / 6, (two + sqrt2) / 6, r(1, 6)],
        order=4,
        field=field
        )


@lru_cache(maxsize=None)
def _weights(field):
    """Split '1 -/+ 1/sqrt(2)' of the two middle stages"""
    inv_sqrt2 = field.one / field.sqrt(2)
    return field.one - inv_sqrt2, field.one + inv_sqrt2


# DENSE OUTPUT =========================================================================

def dense_output(field, theta, theta_h, one_minus_theta_h, from_start):
    """Cubic continuous extension of Gill's method"""

    w2, w3 = _weights(field)

    two_theta = 2 * theta
    four_theta2 = two_theta * two_theta

    dot1 = theta * (two_theta - 3) + 1
    cdot23 = two_theta * (1 - theta)
    dot4 = theta * (two_theta - 1)

    if from_start:
        s = theta_h / 6
        c1 = s * ((6 - 9 * theta) + four_theta2)
        c23 = s * (6 * theta - four_theta2)
        c4 = s * (four_theta2 - 3 * theta)
    else:
        s = one_minus_theta_h / 6
        c1 = -s * ((1 - 5 * theta) + four_theta2)
        c23 = -s * ((2 + two_theta) - four_theta2)
        c4 = -s * ((1 + theta) + four_theta2)

    return [c1, c23 * w2, c23 * w3, c4], [dot1, cdot23 * w2, cdot23 * w3, dot4]


# SOLVERS ==============================================================================

class RKG4(RungeKuttaIntegrator):
    """Gill's four-stage, 4th order explicit Runge-Kutta method.

    A variant of the classical method with coefficients chosen to reduce
    the accumulation of round-off errors. Its tableau involves
    :math:`\\sqrt{2}`, which is evaluated in the field of the integrator.

    Characteristics
    ---------------
    * Order: 4
    * Stages: 4
    * Explicit, fixed timestep
    * Dense output: cubic

    References
    ----------
    .. [1] Gill, S. (1951). "A process for the step-by-step integration of
           differential equations in an automatic digital computing machine".
           Mathematical Proceedings of the Cambridge Philosophical Society,
           47(1), 96-108.
           :doi:`10.1017/S0305004100026414`

    """

    name = "RKG4"

    def __init__(self, step, **integrator_kwargs):
        super().__init__(step, **integrator_kwargs)

        #butcher tableau in the field of the integrator
        self.tableau = tableau(self.field)

        #continuous extension
        self.dense_output = dense_output
