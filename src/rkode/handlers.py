########################################################################################
##
##                         STEP HANDLERS FOR ACCEPTED STEPS
##                                  (handlers.py)
##
##      After every accepted step the integrators call 'handle_step' of all
##      registered handlers with the dense output interpolator of the step.
##      Handlers can sample the step, store it or stop the integration.
##
########################################################################################

# IMPORTS ==============================================================================

import math
import bisect

from enum import Enum


# ENUMS ================================================================================

class Action(Enum):
    """Request of a step handler to the integrator"""
    CONTINUE = 0
    STOP = 1


class StepNormalizerMode(Enum):
    """Placement of the normalized steps.

    INCREMENT : samples at 't0 + k*h'
    MULTIPLES : samples at integer multiples of 'h'
    """
    INCREMENT = 0
    MULTIPLES = 1


class StepNormalizerBounds(Enum):
    """Inclusion of the integration bounds in the normalized output"""
    NEITHER = (False, False)
    FIRST = (True, False)
    LAST = (False, True)
    BOTH = (True, True)

    @property
    def first_included(self):
        return self.value[0]

    @property
    def last_included(self):
        return self.value[1]


# BASE CLASSES =========================================================================

class StepHandler:
    """Base class for handlers of accepted integration steps.

    Notes
    -----
    Returning 'Action.STOP' from 'handle_step' ends the integration after
    the current step, the integrator then returns the state at the end of
    that step.
    """

    def init(self, initial_state, final_time):
        """Called once before the first step

        Parameters
        ----------
        initial_state : ODEStateAndDerivative
            state at the start of the integration
        final_time : scalar
            target time of the integration
        """
        pass


    def handle_step(self, interpolator, is_last):
        """Called after every accepted step

        Parameters
        ----------
        interpolator : RungeKuttaStepInterpolator
            dense output of the step
        is_last : bool
            flag for the last step of the integration

        Returns
        -------
        action : None | Action
            'Action.STOP' to terminate the integration early
        """
        return None


class FixedStepHandler:
    """Base class for handlers receiving states on a regular time grid"""

    def init(self, initial_state, final_time):
        pass


    def handle_step(self, state, is_last):
        """Called for every point of the grid

        Parameters
        ----------
        state : ODEStateAndDerivative
            state at the grid point
        is_last : bool
            flag for the last grid point

        Returns
        -------
        action : None | Action
            'Action.STOP' to terminate the integration early
        """
        return None


# SAMPLING =============================================================================

class StepNormalizer(StepHandler):
    """Adapter turning the variable steps of an integrator into samples
    on a fixed grid for a 'FixedStepHandler'.

    The grid points are computed from the dense output of the steps, so
    sampling does not cost any additional evaluations of the right-hand
    side.

    Parameters
    ----------
    h : float
        spacing of the grid, the sign is ignored
    handler : FixedStepHandler
        handler receiving the grid states
    mode : StepNormalizerMode
        placement of the grid points
    bounds : StepNormalizerBounds
        inclusion of the start and end of the integration
    """

    def __init__(
        self,
        h,
        handler,
        mode=StepNormalizerMode.INCREMENT,
        bounds=StepNormalizerBounds.FIRST
        ):

        if h == 0:
            raise ValueError("normalized step must be nonzero")

        self.h = abs(h)
        self.handler = handler
        self.mode = mode
        self.bounds = bounds

        self._reset()


    def _reset(self):
        self._first_time = None
        self._last = None
        self._forward = True
        self._step = self.h
        self._stop = False


    def init(self, initial_state, final_time):
        self._reset()
        self.handler.init(initial_state, final_time)


    def handle_step(self, interpolator, is_last):

        #first call, start from the beginning of the step
        if self._last is None:
            start = interpolator.previous_state
            self._first_time = start.time
            self._last = interpolator.interpolate(start.time)
            self._forward = interpolator.current_state.time >= start.time
            self._step = self.h if self._forward else -self.h

        field = interpolator.field
        step = field.convert(self._step)
        last_time = self._last.time

        if self.mode is StepNormalizerMode.INCREMENT:
            next_time = last_time + step
        else:
            next_time = field.convert(math.floor(field.real(last_time / step)) + 1) * step
            if abs(next_time - last_time) <= field.ulp(last_time):
                next_time = next_time + step

        #all grid points within the current step
        while self._is_in_step(next_time, interpolator):
            self._emit(False)
            self._last = interpolator.interpolate(next_time)
            next_time = next_time + step

        if is_last:
            end = interpolator.current_state.time
            add_last = self.bounds.last_included and self._last.time != end
            self._emit(not add_last)
            if add_last:
                self._last = interpolator.interpolate(end)
                self._emit(True)

        return Action.STOP if self._stop else None


    def _is_in_step(self, time, interpolator):
        end = interpolator.current_state.time
        return time <= end if self._forward else time >= end


    def _emit(self, is_last):
        """Pass the stored grid state to the fixed step handler"""
        if not self.bounds.first_included and self._last.time == self._first_time:
            return
        if self.handler.handle_step(self._last, is_last) is Action.STOP:
            self._stop = True


# STORAGE ==============================================================================

class ContinuousOutputModel(StepHandler):
    """Step handler storing the interpolators of all steps.

    After the integration the model answers 'interpolate(time)' anywhere
    in the integrated range. Models of consecutive integrations can be
    merged with 'append'.
    """

    def __init__(self):
        self.steps = []
        self.forward = True
        self._ends = []


    def __len__(self):
        return len(self.steps)


    def init(self, initial_state, final_time):
        self.steps = []
        self.forward = True
        self._ends = []


    def handle_step(self, interpolator, is_last):
        if not self.steps:
            self.forward = interpolator.is_forward
        self._add(interpolator)


    def _add(self, interpolator):
        self.steps.append(interpolator)
        t = interpolator.current_state.time
        self._ends.append(t if self.forward else -t)


    @property
    def initial_time(self):
        if not self.steps:
            raise ValueError("no steps stored")
        return self.steps[0].previous_state.time


    @property
    def final_time(self):
        if not self.steps:
            raise ValueError("no steps stored")
        return self.steps[-1].current_state.time


    def append(self, model):
        """Append the steps of another model, which has to continue
        the integration of this one in the same direction

        Parameters
        ----------
        model : ContinuousOutputModel
            model to append
        """

        if not model.steps:
            return

        if self.steps:

            dim = self.steps[0].global_previous_state.dimension
            other = model.steps[0].global_previous_state.dimension
            if dim != other:
                raise ValueError(f"dimension mismatch: {dim} != {other}")

            if self.forward != model.forward:
                raise ValueError("propagation direction mismatch")

            last = self.steps[-1]
            gap = abs(model.initial_time - self.final_time)
            if gap > 1e-3 * abs(last.step_size):
                raise ValueError(f"hole of size {gap} between the models")

        else:
            self.forward = model.forward

        for interpolator in model.steps:
            self._add(interpolator)


    def interpolate(self, time):
        """State and derivative at 'time' from the step covering it

        Parameters
        ----------
        time : scalar
            evaluation time

        Returns
        -------
        state : ODEStateAndDerivative
            interpolated state and derivative
        """

        if not self.steps:
            raise ValueError("no steps stored")

        key = time if self.forward else -time
        index = min(bisect.bisect_left(self._ends, key), len(self.steps) - 1)

        return self.steps[index].interpolate(time)
