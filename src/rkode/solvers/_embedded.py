########################################################################################
##
##                  EMBEDDED RUNGE-KUTTA INTEGRATORS WITH ERROR CONTROL
##                             (solvers/_embedded.py)
##
########################################################################################

# IMPORTS ==============================================================================

from ._adaptive import AdaptiveStepsizeIntegrator
from ._rungekutta import compute_stages, propagate
from ..state import ODEStateAndDerivative
from ..interpolation import RungeKuttaStepInterpolator
from ..utils.logger import get_logger
from .._constants import SOL_ERROR_INIT


logger = get_logger(__name__)


# BASE EMBEDDED INTEGRATOR =============================================================

class EmbeddedRungeKuttaIntegrator(AdaptiveStepsizeIntegrator):
    """Base class for explicit Runge-Kutta integrators with an embedded
    lower order method for the local error estimate.

    Trial steps are repeated with a smaller step while the normalized error
    estimate is at least 1. After an accepted step the next step is
    predicted from the same estimate and shortened to land exactly on the
    final time when it would cross it. Methods with the 'first same as
    last' property reuse their last stage as derivative at the end of the
    step, all others spend one extra evaluation per accepted step.

    Notes
    -----
    Not to be used directly! Concrete methods set 'tableau' and
    'dense_output' in their constructor.
    """

    def __init__(self, *solver_args, **solver_kwargs):
        super().__init__(*solver_args, **solver_kwargs)

        #set by the concrete methods
        self.tableau = None
        self.dense_output = None


    def _crosses(self, run, time):
        return time >= run.final_time if run.forward else time <= run.final_time


    def _integrate(self, run):

        field = self.field
        tableau = self.tableau
        derivatives = self._derivatives(run)
        n = run.main_dimension

        first_time = True
        h_new = field.zero

        while not run.is_last_step:

            error = field.convert(SOL_ERROR_INIT)

            while error >= 1:

                y = run.step_start.state

                if first_time:
                    scale = self.scale(y, n)
                    h_new = self.initialize_step(
                        run.forward, tableau.order, scale, run.step_start, derivatives
                        )
                    first_time = False

                run.step_size = h_new

                #do not step over the final time
                start = run.step_start.time
                if self._crosses(run, start + run.step_size):
                    run.step_size = run.final_time - start

                yDotK = compute_stages(tableau, derivatives, run.step_start, run.step_size)
                y_tmp = propagate(tableau, y, run.step_size, yDotK)

                error = self.estimate_error(yDotK, y, y_tmp, run.step_size, n)

                if error >= 1:
                    self.rejected_steps += 1
                    logger.debug(
                        f"{self} rejected step h={field.real(run.step_size):.3e} "
                        f"at t={field.real(start)} (error {field.real(error):.3e})"
                        )
                    factor = self.step_factor(error)
                    h_new = self.filter_step(run.step_size * factor, run.forward, False)

            #local error is small enough, accept the step
            t_end = run.step_start.time + run.step_size
            if tableau.fsal is None:
                y_dot_end = derivatives(t_end, y_tmp)
            else:
                y_dot_end = yDotK[tableau.fsal]
            step_end = ODEStateAndDerivative(t_end, y_tmp, y_dot_end)

            interpolator = RungeKuttaStepInterpolator(
                self.dense_output,
                field,
                run.forward,
                yDotK,
                run.step_start,
                step_end
                )

            self.accept_step(run, interpolator)

            if not run.is_last_step:

                #predict the next step from the current error
                start = run.step_start.time
                scaled_h = run.step_size * self.step_factor(error)
                next_is_last = self._crosses(run, start + scaled_h)
                h_new = self.filter_step(scaled_h, run.forward, next_is_last)

                #clamping may have moved the step over the final time again
                if self._crosses(run, start + h_new):
                    h_new = run.final_time - start
