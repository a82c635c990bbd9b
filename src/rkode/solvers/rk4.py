########################################################################################
##
##                       CLASSICAL EXPLICIT RUNGE-KUTTA INTEGRATOR
##                                 (solvers/rk4.py)
##
########################################################################################

# IMPORTS ==============================================================================

from functools import lru_cache

from ._rungekutta import RungeKuttaIntegrator
from ..tableau import ButcherTableau


# TABLEAU ==============================================================================

@lru_cache(maxsize=None)
def tableau(field):
    """Butcher tableau of the classical Runge-Kutta method in 'field'"""
    r = field.ratio
    return ButcherTableau(
        name="RK4",
        c=[r(1, 2), r(1, 2), field.one],
        a=[
            [r(1, 2)],
            [field.zero, r(1, 2)],
            [field.zero, field.zero, field.one]
            ],
        b=[r(1, 6), r(1, 3), r(1, 3), r(1, 6)],
        order=4,
        field=field
        )


# DENSE OUTPUT =========================================================================

def dense_output(field, theta, theta_h, one_minus_theta_h, from_start):
    """Cubic continuous extension of the classical Runge-Kutta method.

    Parameters
    ----------
    field : Field
        scalar field
    theta : scalar
        fraction of the step
    theta_h : scalar
        time elapsed since the start of the step
    one_minus_theta_h : scalar
        time remaining until the end of the step
    from_start : bool
        interpolate from the start (True) or the end (False) of the step

    Returns
    -------
    coeffs : list[scalar]
        weights of the stage derivatives for the state
    coeffs_dot : list[scalar]
        weights of the stage derivatives for the derivative
    """

    one_minus_theta = 1 - theta
    one_minus_2theta = 1 - 2 * theta

    dot1 = one_minus_theta * one_minus_2theta
    dot23 = 2 * theta * one_minus_theta
    dot4 = -theta * one_minus_2theta

    four_theta2 = 4 * theta * theta

    if from_start:
        s = theta_h / 6
        c1 = s * ((four_theta2 - 9 * theta) + 6)
        c23 = s * (6 * theta - four_theta2)
        c4 = s * (four_theta2 - 3 * theta)
    else:
        s = one_minus_theta_h / 6
        c1 = s * ((-four_theta2 + 5 * theta) - 1)
        c23 = s * ((four_theta2 - 2 * theta) - 2)
        c4 = s * ((-four_theta2 - theta) - 1)

    return [c1, c23, c23, c4], [dot1, dot23, dot23, dot4]


# SOLVERS ==============================================================================

class RK4(RungeKuttaIntegrator):
    """Classical four-stage, 4th order explicit Runge-Kutta method.

    .. math::

        k_1 &= f(t_n,\\; y_n) \\\\
        k_2 &= f\\!\\left(t_n + \\tfrac{h}{2},\\; y_n + \\tfrac{h}{2}\\,k_1\\right) \\\\
        k_3 &= f\\!\\left(t_n + \\tfrac{h}{2},\\; y_n + \\tfrac{h}{2}\\,k_2\\right) \\\\
        k_4 &= f(t_n + h,\\; y_n + h\\,k_3) \\\\
        y_{n+1} &= y_n + \\tfrac{h}{6}(k_1 + 2k_2 + 2k_3 + k_4)

    Characteristics
    ---------------
    * Order: 4
    * Stages: 4
    * Explicit, fixed timestep
    * Dense output: cubic

    Note
    ----
    The standard fixed-step explicit integrator. Provides a good cost-to-accuracy
    ratio for non-stiff problems where the step is known a priori. When accuracy
    demands vary during a run, adaptive methods like ``RKDP54`` are more
    efficient because they concentrate steps where the dynamics change rapidly.

    References
    ----------
    .. [1] Kutta, W. (1901). "Beitrag zur näherungsweisen Integration totaler
           Differentialgleichungen". Zeitschrift für Mathematik und Physik,
           46, 435-453.
    .. [2] Hairer, E., Nørsett, S. P., & Wanner, G. (1993). "Solving Ordinary
           Differential Equations I: Nonstiff Problems". Springer Series in
           Computational Mathematics, Vol. 8.
           :doi:`10.1007/978-3-540-78862-1`

    """

    name = "RK4"

    def __init__(self, step, **integrator_kwargs):
        super().__init__(step, **integrator_kwargs)

        #butcher tableau in the field of the integrator
        self.tableau = tableau(self.field)

        #continuous extension
        self.dense_output = dense_output
