########################################################################################
##
##                        BASE CLASS OF THE ODE INTEGRATORS
##                            (solvers/_integrator.py)
##
##      The integrator instances only hold configuration and the statistics
##      of the last run. Everything that changes during an integration lives
##      in a '_RunState' that is created by 'integrate' and discarded when
##      the call returns, so instances can be reused sequentially.
##
########################################################################################

# IMPORTS ==============================================================================

from functools import partial

from ..fields import get_field
from ..state import ODEState, ODEStateAndDerivative
from ..equations import as_ode
from ..handlers import Action
from ..errors import (
    DimensionMismatchError,
    IntegrationError,
    IntegrationSpanTooSmallError
    )
from ..utils.counter import EvaluationCounter
from ..utils.logger import get_logger
from .._constants import SPAN_ULPS_MIN


logger = get_logger(__name__)


# RUN STATE ============================================================================

class _RunState:
    """Mutable state of one 'integrate' call

    Attributes
    ----------
    ode : ODE
        equation being integrated
    counter : EvaluationCounter
        evaluation budget of the run
    forward : bool
        integration direction
    final_time : scalar
        target time
    main_dimension : int
        dimension of the main set of the state
    step_start : ODEStateAndDerivative
        state at the start of the current step
    step_size : scalar
        signed size of the current step
    is_last_step : bool
        flag for the last step
    """

    __slots__ = (
        "ode",
        "counter",
        "forward",
        "final_time",
        "main_dimension",
        "step_start",
        "step_size",
        "is_last_step"
        )

    def __init__(self, ode, counter, forward, final_time, main_dimension):
        self.ode = ode
        self.counter = counter
        self.forward = forward
        self.final_time = final_time
        self.main_dimension = main_dimension
        self.step_start = None
        self.step_size = None
        self.is_last_step = False


# BASE INTEGRATOR CLASS ================================================================

class Integrator:
    """Base class of the integrators, manages the field, the evaluation
    budget, the step handlers and the lifecycle of an integration.

    Notes
    -----
    Not to be used directly! Subclasses implement '_integrate(run)'.

    Parameters
    ----------
    field : None | str | int | Field
        scalar field of the integration, see 'get_field'
    max_evaluations : None | int
        budget of right-hand side evaluations per 'integrate' call
    log : bool
        flag for logging the start and the end of integrations

    Attributes
    ----------
    step_handlers : list[StepHandler]
        handlers notified after every accepted step
    evaluations : int
        evaluations of the right-hand side during the last run
    accepted_steps : int
        accepted steps of the last run
    rejected_steps : int
        rejected trial steps of the last run
    """

    name = None

    def __init__(self, field=None, max_evaluations=None, log=True):

        self.field = get_field(field)
        self.max_evaluations = max_evaluations
        self.log = log

        self.step_handlers = []

        #statistics of the last run
        self.evaluations = 0
        self.accepted_steps = 0
        self.rejected_steps = 0


    def __str__(self):
        return self.name or type(self).__name__


    # handlers -------------------------------------------------------------------------

    def add_step_handler(self, handler):
        self.step_handlers.append(handler)


    def clear_step_handlers(self):
        self.step_handlers = []


    # evaluation -----------------------------------------------------------------------

    def compute_derivatives(self, run, t, y):
        """Evaluate the right-hand side once, counting the evaluation

        Parameters
        ----------
        run : _RunState
            state of the current integration
        t : scalar
            evaluation time
        y : array[field]
            state vector

        Returns
        -------
        dy : array[field]
            derivative 'f(t, y)'
        """
        run.counter.increment()
        dy = self.field.array(run.ode(t, y))
        if len(dy) != len(y):
            raise DimensionMismatchError(len(y), len(dy), "derivative dimension")
        return dy


    # lifecycle ------------------------------------------------------------------------

    def sanity_checks(self, initial_state, final_time):
        """Reject integration spans that are too small to be resolved

        Parameters
        ----------
        initial_state : ODEState
            state at the start of the integration
        final_time : scalar
            target time
        """
        t0 = initial_state.time
        threshold = SPAN_ULPS_MIN * self.field.ulp(max(abs(t0), abs(final_time)))
        span = abs(final_time - t0)
        if span <= threshold:
            raise IntegrationSpanTooSmallError(
                self.field.real(span), self.field.real(threshold)
                )


    def check_configuration(self, run):
        """Hook for configuration checks against the dimensions of the run,
        called before any evaluation of the right-hand side"""
        pass


    def _coerce_state(self, initial_state):
        if isinstance(initial_state, ODEState):
            t0, y0 = initial_state.time, initial_state.state
        else:
            t0, y0 = initial_state
        return ODEState(self.field.convert(t0), self.field.array(y0))


    def _start(self, ode, initial_state, final_time):
        """Build the run state, evaluate the initial derivative and
        initialize the step handlers"""

        ode = as_ode(ode)
        initial_state = self._coerce_state(initial_state)
        final_time = self.field.convert(final_time)

        self.sanity_checks(initial_state, final_time)

        main_dimension = ode.check(initial_state.dimension)

        run = _RunState(
            ode=ode,
            counter=EvaluationCounter(self.max_evaluations),
            forward=final_time > initial_state.time,
            final_time=final_time,
            main_dimension=main_dimension
            )

        self.check_configuration(run)

        t0, y0 = initial_state.time, initial_state.state
        y_dot0 = self.compute_derivatives(run, t0, y0)
        run.step_start = ODEStateAndDerivative(t0, y0, y_dot0)

        for handler in self.step_handlers:
            handler.init(run.step_start, final_time)

        return run


    def accept_step(self, run, interpolator):
        """Make the end of the interpolated step the new step start
        and notify the step handlers

        Parameters
        ----------
        run : _RunState
            state of the current integration
        interpolator : RungeKuttaStepInterpolator
            dense output of the accepted step
        """

        run.step_start = interpolator.global_current_state
        self.accepted_steps += 1

        t = run.step_start.time
        is_last = run.is_last_step or abs(t - run.final_time) <= self.field.ulp(run.final_time)

        stop = False
        for handler in self.step_handlers:
            if handler.handle_step(interpolator, is_last) is Action.STOP:
                stop = True

        if stop and not is_last and self.log:
            logger.info(f"{self} stopped by step handler at t={self.field.real(t)}")

        run.is_last_step = is_last or stop


    def integrate(self, ode, initial_state, final_time):
        """Integrate 'ode' from 'initial_state' to 'final_time'.

        Parameters
        ----------
        ode : ODE | callable
            equation to integrate, plain callables 'f(t, y)' are wrapped
        initial_state : ODEState | tuple
            initial state or '(t0, y0)' pair
        final_time : scalar
            target time, may be smaller than the initial time

        Returns
        -------
        state : ODEStateAndDerivative
            state at the end of the integration, which is 'final_time'
            unless a step handler stopped the integration early
        """

        self.evaluations = 0
        self.accepted_steps = 0
        self.rejected_steps = 0

        run = self._start(ode, initial_state, final_time)

        if self.log:
            logger.info(
                f"{self} integrating from t={self.field.real(run.step_start.time)} "
                f"to t={self.field.real(run.final_time)} "
                f"(dimension {run.step_start.dimension}, field '{self.field.name}')"
                )

        try:
            self._integrate(run)
        except IntegrationError as E:
            logger.error(f"{self} failed at t={self.field.real(run.step_start.time)}: {E}")
            raise
        finally:
            self.evaluations = run.counter.count

        if self.log:
            logger.info(
                f"{self} finished at t={self.field.real(run.step_start.time)} "
                f"(steps: {self.accepted_steps} accepted, {self.rejected_steps} rejected, "
                f"evaluations: {self.evaluations})"
                )

        return run.step_start


    def _integrate(self, run):
        raise NotImplementedError


    def _derivatives(self, run):
        """Counted right-hand side bound to the run"""
        return partial(self.compute_derivatives, run)
