########################################################################################
##
##               STAGE EVALUATION AND FIXED STEP RUNGE-KUTTA INTEGRATORS
##                            (solvers/_rungekutta.py)
##
########################################################################################

# IMPORTS ==============================================================================

import numpy as np

from ._integrator import Integrator
from ..state import ODEStateAndDerivative
from ..interpolation import RungeKuttaStepInterpolator


# STAGES ===============================================================================

def compute_stages(tableau, derivatives, step_start, step_size):
    """Stage derivatives of an explicit Runge-Kutta step.

    The first stage reuses the derivative at the start of the step, every
    following stage costs exactly one call of 'derivatives'.

    Parameters
    ----------
    tableau : ButcherTableau
        coefficients of the method
    derivatives : callable
        right-hand side 'derivatives(t, y)'
    step_start : ODEStateAndDerivative
        state and derivative at the start of the step
    step_size : scalar
        signed step size

    Returns
    -------
    yDotK : array[field]
        stage derivatives, shape '(stages, dimension)'
    """

    t, y = step_start.time, step_start.state

    yDotK = np.empty((tableau.stages, len(y)), dtype=y.dtype)
    yDotK[0] = step_start.derivative

    for k in range(1, tableau.stages):
        y_tmp = y + step_size * np.dot(tableau.a[k-1], yDotK[:k])
        yDotK[k] = derivatives(t + tableau.c[k-1] * step_size, y_tmp)

    return yDotK


def propagate(tableau, y, step_size, yDotK):
    """State at the end of the step from the propagation weights"""
    return y + step_size * np.dot(tableau.b, yDotK)


# BASE FIXED STEP INTEGRATOR ===========================================================

class RungeKuttaIntegrator(Integrator):
    """Base class for explicit Runge-Kutta integrators with fixed step.

    The step size is constant except for the last step, which is shortened
    to land exactly on the final time. The derivative at the end of each
    step is evaluated once, so every step starts from a complete state and
    derivative pair.

    Notes
    -----
    Not to be used directly! Concrete methods set 'tableau' and
    'dense_output' in their constructor.

    Parameters
    ----------
    step : float
        magnitude of the integration step, the sign is ignored
    field : None | str | int | Field
        scalar field of the integration
    max_evaluations : None | int
        budget of right-hand side evaluations per 'integrate' call
    log : bool
        flag for logging the start and the end of integrations
    """

    def __init__(self, step, field=None, max_evaluations=None, log=True):
        super().__init__(field=field, max_evaluations=max_evaluations, log=log)

        if step == 0:
            raise ValueError("integration step must be nonzero")

        self.step = self.field.convert(abs(step))

        #set by the concrete methods
        self.tableau = None
        self.dense_output = None


    def _integrate(self, run):

        tableau = self.tableau
        derivatives = self._derivatives(run)

        #first step, possibly truncated
        start = run.step_start.time
        if run.forward:
            run.step_size = self.step if start + self.step < run.final_time else run.final_time - start
        else:
            run.step_size = -self.step if start - self.step > run.final_time else run.final_time - start

        while not run.is_last_step:

            y = run.step_start.state

            yDotK = compute_stages(tableau, derivatives, run.step_start, run.step_size)
            y_end = propagate(tableau, y, run.step_size, yDotK)

            #derivative at the end of the step
            t_end = run.step_start.time + run.step_size
            y_dot_end = derivatives(t_end, y_end)
            step_end = ODEStateAndDerivative(t_end, y_end, y_dot_end)

            interpolator = RungeKuttaStepInterpolator(
                self.dense_output,
                self.field,
                run.forward,
                yDotK,
                run.step_start,
                step_end
                )

            self.accept_step(run, interpolator)

            if not run.is_last_step:
                start = run.step_start.time
                next_time = start + run.step_size
                next_is_last = next_time >= run.final_time if run.forward else next_time <= run.final_time
                if next_is_last:
                    run.step_size = run.final_time - start


    def single_step(self, func, t0, y0, t):
        """Fast single step without handlers, counting or dense output.

        Does not touch any state of the integrator, so it is safe to call
        concurrently as long as 'func' is reentrant.

        Parameters
        ----------
        func : callable
            right-hand side 'func(t, y) -> dy'
        t0 : scalar
            start time of the step
        y0 : array_like
            state at 't0'
        t : scalar
            end time of the step

        Returns
        -------
        y : array[field]
            state at 't'
        """

        field = self.field

        def derivatives(t, y):
            return field.array(func(t, y))

        t0, t = field.convert(t0), field.convert(t)
        y0 = field.array(y0)
        h = t - t0

        step_start = ODEStateAndDerivative(t0, y0, derivatives(t0, y0))
        yDotK = compute_stages(self.tableau, derivatives, step_start, h)

        return propagate(self.tableau, y0, h, yDotK)
