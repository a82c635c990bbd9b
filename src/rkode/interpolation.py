########################################################################################
##
##                     DENSE OUTPUT OF ACCEPTED RUNGE-KUTTA STEPS
##                               (interpolation.py)
##
##      Every accepted step is wrapped into an interpolator that owns a copy of
##      the stage derivatives and the boundary states of the step. The method
##      specific continuous extension is a plain function (the 'dense_output'
##      strategy) returning the weights of the stage derivatives for a given
##      step fraction 'theta', so no evaluations of the right-hand side happen
##      during interpolation.
##
########################################################################################

# IMPORTS ==============================================================================

import copy
import warnings

import numpy as np

from .state import ODEStateAndDerivative
from .errors import ExtrapolationWarning
from ._constants import INTERPOLATION_TOLERANCE


# CLASS ================================================================================

class RungeKuttaStepInterpolator:
    """Continuous extension of one accepted Runge-Kutta step.

    The interpolated state is a linear combination of the cached stage
    derivatives added to one of the two step boundaries

    .. math::

        y(t_n + \\theta h) = y_{anchor} + \\sum_k w_k(\\theta) \\, K_k

    where the anchor is the start of the step for 'theta <= 0.5' and the
    end of the step otherwise. The derivative is the combination with the
    derivative weights of the strategy, not a numerical differentiation.

    Parameters
    ----------
    dense_output : callable
        strategy 'dense_output(field, theta, theta_h, one_minus_theta_h, from_start)'
        returning the state and derivative weights of the stages
    field : Field
        scalar field of the integration
    forward : bool
        integration direction
    yDotK : array_like
        stage derivatives of the step, shape '(stages, dimension)', copied
    global_previous : ODEStateAndDerivative
        state at the start of the step
    global_current : ODEStateAndDerivative
        state at the end of the step
    soft_previous : None | ODEStateAndDerivative
        start of the range the interpolator is restricted to
    soft_current : None | ODEStateAndDerivative
        end of the range the interpolator is restricted to
    """

    def __init__(
        self,
        dense_output,
        field,
        forward,
        yDotK,
        global_previous,
        global_current,
        soft_previous=None,
        soft_current=None
        ):

        self.dense_output = dense_output
        self.field = field
        self.forward = bool(forward)

        #private copy of the stage derivatives
        self.yDotK = np.array(yDotK, dtype=field.dtype, copy=True)
        self.yDotK.setflags(write=False)

        self.global_previous_state = global_previous
        self.global_current_state = global_current
        self.previous_state = global_previous if soft_previous is None else soft_previous
        self.current_state = global_current if soft_current is None else soft_current


    def __repr__(self):
        return (f"{type(self).__name__}(t0={self.previous_state.time}, "
                f"t1={self.current_state.time}, stages={len(self.yDotK)})")


    @property
    def is_forward(self):
        return self.forward


    @property
    def step_size(self):
        """Signed size of the full step"""
        return self.global_current_state.time - self.global_previous_state.time


    def restrict_step(self, previous_state, current_state):
        """Interpolator for a sub range of the step.

        The stage derivatives are shared with this instance, only the
        soft bounds change.

        Parameters
        ----------
        previous_state : ODEStateAndDerivative
            new start of the soft range
        current_state : ODEStateAndDerivative
            new end of the soft range

        Returns
        -------
        interpolator : RungeKuttaStepInterpolator
            restricted interpolator
        """
        restricted = copy.copy(self)
        restricted.previous_state = previous_state
        restricted.current_state = current_state
        return restricted


    def _check_range(self, time):
        """Warn about queries outside of the soft range"""

        t0, t1 = self.previous_state.time, self.current_state.time
        lo, hi = (t0, t1) if t0 <= t1 else (t1, t0)
        slack = INTERPOLATION_TOLERANCE * abs(self.step_size)

        if time < lo - slack or time > hi + slack:
            warnings.warn(
                f"interpolation at t={self.field.real(time)} outside of "
                f"[{self.field.real(lo)}, {self.field.real(hi)}]",
                ExtrapolationWarning,
                stacklevel=3
                )


    def interpolate(self, time, anchor=None):
        """Evaluate the continuous extension at 'time'.

        Parameters
        ----------
        time : scalar
            evaluation time, usually inside the soft range of the step
        anchor : None | str
            'None' picks the boundary closest to 'time', 'start' and 'end'
            force interpolation from the start or the end of the step

        Returns
        -------
        state : ODEStateAndDerivative
            interpolated state and derivative
        """

        if anchor not in (None, "start", "end"):
            raise ValueError(f"anchor must be None, 'start' or 'end', got '{anchor}'")

        time = self.field.convert(time)
        self._check_range(time)

        previous, current = self.global_previous_state, self.global_current_state

        #step boundaries are stored exactly
        if anchor != "end" and time == previous.time:
            return previous
        if anchor != "start" and time == current.time:
            return current

        theta_h = time - previous.time
        one_minus_theta_h = current.time - time
        h = current.time - previous.time
        theta = theta_h / h

        from_start = theta <= 0.5 if anchor is None else anchor == "start"

        coeffs, coeffs_dot = self.dense_output(
            self.field, theta, theta_h, one_minus_theta_h, from_start
            )

        base = previous.state if from_start else current.state
        state = base + np.dot(np.array(coeffs, dtype=self.field.dtype), self.yDotK)
        derivative = np.dot(np.array(coeffs_dot, dtype=self.field.dtype), self.yDotK)

        return ODEStateAndDerivative(time, state, derivative)
