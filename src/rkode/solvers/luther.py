########################################################################################
##
##                    LUTHER SIXTH ORDER RUNGE-KUTTA INTEGRATOR
##                               (solvers/luther.py)
##
########################################################################################

# IMPORTS ==============================================================================

from functools import lru_cache

from ._rungekutta import RungeKuttaIntegrator
from ..tableau import ButcherTableau


# TABLEAU ==============================================================================

@lru_cache(maxsize=None)
def tableau(field):
    """Butcher tableau of Luther's method in 'field'"""

    r = field.ratio
    q = field.sqrt(21)

    def lin(p, k, d):
        #'(p + k*sqrt(21)) / d'
        return (field.convert(p) + k * q) / d

    return ButcherTableau(
        name="RKL6",
        c=[field.one, r(1, 2), r(2, 3), lin(7, -1, 14), lin(7, 1, 14), field.one],
        a=[
            [field.one],
            [r(3, 8), r(1, 8)],
            [r(8, 27), r(2, 27), r(8, 27)],
            [lin(-21, 9, 392), lin(-56, 8, 392), lin(336, -48, 392), lin(-63, 3, 392)],
            [lin(-1155, -255, 1960), lin(-280, -40, 1960), lin(0, -320, 1960),
             lin(63, 363, 1960), lin(2352, 392, 1960)],
            [lin(330, 105, 180), r(120, 180), lin(-200, 280, 180),
             lin(126, -189, 180), lin(-686, -126, 180), lin(490, -70, 180)]
            ],
        b=[r(1, 20), field.zero, r(16, 45), field.zero, r(49, 180), r(49, 180), r(1, 20)],
        order=6,
        field=field
        )


@lru_cache(maxsize=None)
def _constants(field):
    """Irrational coefficients of the continuous extension"""

    q = field.sqrt(21)

    def lin(k, p):
        return k * q + p

    return {
        "c5": (lin(-49, -49), lin(287, 392), lin(-357, -637), lin(343, 833)),
        "c6": (lin(49, -49), lin(-287, 392), lin(357, -637), lin(-343, 833)),
        "d5": (lin(49, 49), lin(-847, -1372), lin(1029, 2254)),
        "d6": (lin(-49, 49), lin(847, -1372), lin(-1029, 2254)),
        }


# DENSE OUTPUT =========================================================================

def dense_output(field, theta, theta_h, one_minus_theta_h, from_start):
    """Quartic continuous extension of Luther's method"""

    r = field.ratio
    k = _constants(field)
    c5a, c5b, c5c, c5d = k["c5"]
    c6a, c6b, c6c, c6d = k["c6"]

    dot1 = theta * (theta * (theta * (21 * theta - 47) + 36) - r(54, 5)) + 1
    dot3 = theta * (theta * (theta * (112 * theta - r(608, 3)) + r(320, 3)) - r(208, 15))
    dot4 = theta * (theta * (theta * (r(-567, 5) * theta + r(972, 5)) - r(486, 5)) + r(324, 25))
    dot5 = theta * (theta * (theta * (c5a / 5 * theta + c5b / 15) + c5c / 30) + c5d / 150)
    dot6 = theta * (theta * (theta * (c6a / 5 * theta + c6b / 15) + c6c / 30) + c6d / 150)
    dot7 = theta * (theta * (3 * theta - 3) + r(3, 5))

    if from_start:
        s = theta_h
        c1 = s * (theta * (theta * (theta * (r(21, 5) * theta - r(47, 4)) + 12) - r(27, 5)) + 1)
        c3 = s * (theta * (theta * (theta * (r(112, 5) * theta - r(152, 3)) + r(320, 9)) - r(104, 15)))
        c4 = s * (theta * (theta * (theta * (r(-567, 25) * theta + r(243, 5)) - r(162, 5)) + r(162, 25)))
        c5 = s * (theta * (theta * (theta * (c5a / 25 * theta + c5b / 60) + c5c / 90) + c5d / 300))
        c6 = s * (theta * (theta * (theta * (c6a / 25 * theta + c6b / 60) + c6c / 90) + c6d / 300))
        c7 = s * (theta * (theta * (r(3, 4) * theta - 1) + r(3, 10)))
    else:
        d5a, d5b, d5c = k["d5"]
        d6a, d6b, d6c = k["d6"]
        s = one_minus_theta_h
        c1 = s * (theta * (theta * (theta * (r(-21, 5) * theta + r(151, 20)) - r(89, 20)) + r(19, 20)) - r(1, 20))
        c3 = s * (theta * (theta * (theta * (r(-112, 5) * theta + r(424, 15)) - r(328, 45)) - r(16, 45)) - r(16, 45))
        c4 = s * (theta * (theta * (theta * (r(567, 25) * theta - r(648, 25)) + r(162, 25))))
        c5 = s * (theta * (theta * (theta * (d5a / 25 * theta + d5b / 300) + d5c / 900) - r(49, 180)) - r(49, 180))
        c6 = s * (theta * (theta * (theta * (d6a / 25 * theta + d6b / 300) + d6c / 900) - r(49, 180)) - r(49, 180))
        c7 = s * (theta * (theta * (r(-3, 4) * theta + r(1, 4)) - r(1, 20)) - r(1, 20))

    zero = field.zero

    return [c1, zero, c3, c4, c5, c6, c7], [dot1, zero, dot3, dot4, dot5, dot6, dot7]


# SOLVERS ==============================================================================

class RKL6(RungeKuttaIntegrator):
    """Luther's seven-stage, 6th order explicit Runge-Kutta method.

    A high order fixed step method whose coefficients involve
    :math:`\\sqrt{21}`, evaluated in the field of the integrator so that
    extended precision fields keep the full order.

    Characteristics
    ---------------
    * Order: 6
    * Stages: 7
    * Explicit, fixed timestep
    * Dense output: quartic

    Note
    ----
    Well suited for smooth problems with tight accuracy requirements where
    the step is known a priori. The continuous extension is of lower order
    than the method itself.

    References
    ----------
    .. [1] Luther, H. A. (1968). "An explicit sixth-order Runge-Kutta
           formula". Mathematics of Computation, 22(102), 434-436.
           :doi:`10.1090/S0025-5718-68-99876-1`

    """

    name = "RKL6"

    def __init__(self, step, **integrator_kwargs):
        super().__init__(step, **integrator_kwargs)

        #butcher tableau in the field of the integrator
        self.tableau = tableau(self.field)

        #continuous extension
        self.dense_output = dense_output
