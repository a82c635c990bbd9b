########################################################################################
##
##                EXPLICIT ADAPTIVE TIMESTEPPING RUNGE-KUTTA INTEGRATORS
##                                (solvers/rkdp54.py)
##
########################################################################################

# IMPORTS ==============================================================================

from functools import lru_cache

import numpy as np

from ._embedded import EmbeddedRungeKuttaIntegrator
from ..tableau import ButcherTableau


# TABLEAU ==============================================================================

@lru_cache(maxsize=None)
def tableau(field):
    """Extended Butcher tableau of the Dormand-Prince 5(4) pair in 'field'"""
    r = field.ratio
    zero, one = field.zero, field.one
    return ButcherTableau(
        name="RKDP54",
        c=[r(1, 5), r(3, 10), r(4, 5), r(8, 9), one, one],
        a=[
            [      r(1, 5)],
            [     r(3, 40),         r(9, 40)],
            [    r(44, 45),       r(-56, 15),       r(32, 9)],
            [r(19372, 6561), r(-25360, 2187), r(64448, 6561), r(-212, 729)],
            [ r(9017, 3168),     r(-355, 33), r(46732, 5247),   r(49, 176), r(-5103, 18656)],
            [    r(35, 384),             zero,   r(500, 1113),  r(125, 192),  r(-2187, 6784), r(11, 84)]
            ],
        b=[r(35, 384), zero, r(500, 1113), r(125, 192), r(-2187, 6784), r(11, 84), zero],
        e=[r(71, 57600), zero, r(-71, 16695), r(71, 1920), r(-17253, 339200), r(22, 525), r(-1, 40)],
        order=5,
        fsal=6,
        field=field
        )


@lru_cache(maxsize=None)
def _constants(field):
    """Stage weights of the blocks 'v1' and 'v4' of the continuous extension"""
    r = field.ratio
    zero = field.zero
    a7 = tableau(field).b
    d = [
        r(-12715105075, 11282082432),
        zero,
        r(87487479700, 32700410799),
        r(-10690763975, 1880347072),
        r(701980252875, 199316789632),
        r(-1453857185, 822651844),
        r(69997945, 29380423)
        ]
    return a7, np.array(d, dtype=field.dtype)


# DENSE OUTPUT =========================================================================

def dense_output(field, theta, theta_h, one_minus_theta_h, from_start):
    """Quartic continuous extension of Shampine for the Dormand-Prince pair.

    The extension is a combination of four blocks of stage derivatives

        v1 = sum(b K),  v2 = K0 - v1,  v3 = 2 v1 - K0 - K6,  v4 = sum(d K)

    whose weights are folded into one weight per stage here.
    """

    b, d = _constants(field)

    eta = 1 - theta
    two_theta = 2 * theta

    dot2 = 1 - two_theta
    dot3 = theta * (2 - 3 * theta)
    dot4 = two_theta * (1 + theta * (two_theta - 3))

    if from_start:
        s = theta_h
        w1, w2, w3, w4 = 1, eta, theta * eta, theta * eta * eta
    else:
        s = -one_minus_theta_h
        w1, w2, w3, w4 = 1, -theta, -theta * theta, -theta * theta * eta

    def stages(w1, w2, w3, w4):
        #fold the blocks into stage weights
        weights = (w1 - w2 + 2 * w3) * b + w4 * d
        weights[0] = weights[0] + (w2 - w3)
        weights[6] = weights[6] - w3
        return weights

    coeffs = s * stages(w1, w2, w3, w4)
    coeffs_dot = stages(1, dot2, dot3, dot4)

    return list(coeffs), list(coeffs_dot)


# SOLVERS ==============================================================================

class RKDP54(EmbeddedRungeKuttaIntegrator):
    """Dormand-Prince 5(4) pair (DOPRI5). Seven stages, 5th order with
    embedded 4th order error estimate.

    The industry-standard adaptive explicit integrator and the basis of MATLAB's
    ``ode45``. Has the FSAL property, the last stage of an accepted step is
    the derivative at its end and is reused as first stage of the next step,
    so an accepted step costs six evaluations.

    Characteristics
    ---------------
    * Order: 5 (propagating) / 4 (embedded)
    * Stages: 7 (FSAL)
    * Explicit, adaptive timestep
    * Dense output: quartic

    Note
    ----
    Recommended default for smooth non-stiff problems. If the integration
    needs excessive step rejections or very small steps, the problem is
    likely stiff and explicit methods are not the right tool.

    References
    ----------
    .. [1] Dormand, J. R., & Prince, P. J. (1980). "A family of embedded
           Runge-Kutta formulae". Journal of Computational and Applied
           Mathematics, 6(1), 19-26.
           :doi:`10.1016/0771-050X(80)90013-3`
    .. [2] Shampine, L. F. (1986). "Some Practical Runge-Kutta Formulas".
           Mathematics of Computation, 46(173), 135-150.
           :doi:`10.1090/S0025-5718-1986-0815836-3`

    """

    name = "RKDP54"

    def __init__(self, *solver_args, **solver_kwargs):
        super().__init__(*solver_args, **solver_kwargs)

        #extended butcher tableau in the field of the integrator
        self.tableau = tableau(self.field)

        #continuous extension
        self.dense_output = dense_output
