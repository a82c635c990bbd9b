########################################################################################
##
##                 HIGHAM-HALL ADAPTIVE TIMESTEPPING RUNGE-KUTTA INTEGRATOR
##                                (solvers/rkhh54.py)
##
########################################################################################

# IMPORTS ==============================================================================

from functools import lru_cache

from ._embedded import EmbeddedRungeKuttaIntegrator
from ..tableau import ButcherTableau


# TABLEAU ==============================================================================

@lru_cache(maxsize=None)
def tableau(field):
    """Extended Butcher tableau of the Higham-Hall 5(4) pair in 'field'"""
    r = field.ratio
    zero, one = field.zero, field.one
    return ButcherTableau(
        name="RKHH54",
        c=[r(2, 9), r(1, 3), r(1, 2), r(3, 5), one, one],
        a=[
            [  r(2, 9)],
            [ r(1, 12),     r(1, 4)],
            [  r(1, 8),        zero,    r(3, 8)],
            [r(91, 500), r(-27, 100), r(78, 125), r(8, 125)],
            [r(-11, 20),   r(27, 20),   r(12, 5), r(-36, 5), r(5, 1)],
            [ r(1, 12),        zero,  r(27, 32),  r(-4, 3), r(125, 96), r(5, 48)]
            ],
        b=[r(1, 12), zero, r(27, 32), r(-4, 3), r(125, 96), r(5, 48), zero],
        e=[r(-1, 20), zero, r(81, 160), r(-6, 5), r(25, 32), r(1, 16), r(-1, 10)],
        order=5,
        fsal=6,
        field=field
        )


# DENSE OUTPUT =========================================================================

def dense_output(field, theta, theta_h, one_minus_theta_h, from_start):
    """Quartic continuous extension of the Higham-Hall pair, built from
    the first six stages only"""

    r = field.ratio
    zero = field.zero

    dot0 = theta * (theta * (theta * -10 + 16) - r(15, 2)) + 1
    dot2 = theta * (theta * (theta * r(135, 2) - r(729, 8)) + r(459, 16))
    dot3 = theta * (theta * (theta * -120 + 152) - 44)
    dot4 = theta * (theta * (theta * r(125, 2) - r(625, 8)) + r(375, 16))
    dot5 = theta * r(5, 8) * (2 * theta - 1)

    #polynomial parts shared by both branches
    p0 = theta * (theta * (theta * r(-5, 2) + r(16, 3)) - r(15, 4)) + 1
    p2 = theta * (theta * (theta * r(135, 8) - r(243, 8)) + r(459, 32))
    p3 = theta * (theta * (theta * -30 + r(152, 3)) - 22)
    p4 = theta * (theta * (theta * r(125, 8) - r(625, 24)) + r(375, 32))
    p5 = theta * (theta * r(5, 12) - r(5, 16))

    if from_start:
        coeffs = [theta_h * p for p in (p0, zero, p2, p3, p4, p5)]
    else:
        h = theta_h + one_minus_theta_h
        b = tableau(field).b
        coeffs = [h * (theta * p - b[k]) for k, p in enumerate((p0, zero, p2, p3, p4, p5))]

    return coeffs + [zero], [dot0, zero, dot2, dot3, dot4, dot5, zero]


# SOLVERS ==============================================================================

class RKHH54(EmbeddedRungeKuttaIntegrator):
    """Higham-Hall 5(4) pair. Seven stages, 5th order with embedded 4th
    order error estimate.

    The pair was designed for good stability of the step size controller.
    Its last stage is evaluated at the propagated state, so it is reused as
    first stage of the next step and an accepted step costs six evaluations.

    Characteristics
    ---------------
    * Order: 5 (propagating) / 4 (embedded)
    * Stages: 7 (FSAL)
    * Explicit, adaptive timestep
    * Dense output: quartic

    References
    ----------
    .. [1] Higham, D. J., & Hall, G. (1990). "Embedded Runge-Kutta formulae
           with stable equilibrium states". Journal of Computational and
           Applied Mathematics, 29(1), 25-33.
           :doi:`10.1016/0377-0427(90)90193-3`

    """

    name = "RKHH54"

    def __init__(self, *solver_args, **solver_kwargs):
        super().__init__(*solver_args, **solver_kwargs)

        #extended butcher tableau in the field of the integrator
        self.tableau = tableau(self.field)

        #continuous extension
        self.dense_output = dense_output
