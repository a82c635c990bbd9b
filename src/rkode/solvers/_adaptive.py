########################################################################################
##
##                   STEP SIZE CONTROL OF ADAPTIVE ODE INTEGRATORS
##                             (solvers/_adaptive.py)
##
########################################################################################

# IMPORTS ==============================================================================

import numpy as np

from ._integrator import Integrator
from ..errors import DimensionMismatchError, StepSizeTooSmallError
from .._constants import (
    SOL_SAFETY,
    SOL_SCALE_MIN,
    SOL_SCALE_MAX,
    SOL_STEP_MIN,
    SOL_STEP_MAX,
    SOL_TOLERANCE_LTE_ABS,
    SOL_TOLERANCE_LTE_REL,
    INIT_NORM_NEGLIGIBLE,
    INIT_STEP_FALLBACK,
    INIT_STEP_FRACTION,
    INIT_TRUNCATION_TARGET,
    INIT_INVERSE_NEGLIGIBLE,
    INIT_GROWTH_MAX,
    INIT_STEP_SHRINK,
    INIT_TIME_CANCELLATION
    )


# BASE ADAPTIVE INTEGRATOR =============================================================

class AdaptiveStepsizeIntegrator(Integrator):
    """Base class for integrators with local error control.

    Holds the step bounds and the tolerances of the local truncation error
    and implements the building blocks of the step size control: the
    initial step heuristic, the clamping of steps to the bounds and the
    controller that rescales the step from the error estimate.

    Tolerances are either scalars or vectors with one entry per component
    of the main set of the state. A scalar tolerance paired with a vector
    is applied to every component.

    Notes
    -----
    Not to be used directly!

    Parameters
    ----------
    min_step : float
        minimal step magnitude
    max_step : float
        maximal step magnitude
    tolerance_lte_abs : float | array_like
        absolute tolerance of the local truncation error
    tolerance_lte_rel : float | array_like
        relative tolerance of the local truncation error
    field : None | str | int | Field
        scalar field of the integration
    max_evaluations : None | int
        budget of right-hand side evaluations per 'integrate' call
    log : bool
        flag for logging the start and the end of integrations
    safety : float
        safety factor of the step size controller
    min_reduction : float
        lower bound of the step rescale factor
    max_growth : float
        upper bound of the step rescale factor
    initial_step : None | float
        user supplied first step, ignored if outside of the step bounds
    """

    def __init__(
        self,
        min_step=SOL_STEP_MIN,
        max_step=SOL_STEP_MAX,
        tolerance_lte_abs=SOL_TOLERANCE_LTE_ABS,
        tolerance_lte_rel=SOL_TOLERANCE_LTE_REL,
        field=None,
        max_evaluations=None,
        log=True,
        safety=SOL_SAFETY,
        min_reduction=SOL_SCALE_MIN,
        max_growth=SOL_SCALE_MAX,
        initial_step=None
        ):
        super().__init__(field=field, max_evaluations=max_evaluations, log=log)

        self.set_step_size_control(min_step, max_step, tolerance_lte_abs, tolerance_lte_rel)

        #controller parameters
        self.safety = safety
        self.min_reduction = min_reduction
        self.max_growth = max_growth

        if initial_step is not None:
            self.initial_step = initial_step


    # configuration --------------------------------------------------------------------

    def set_step_size_control(self, min_step, max_step, tolerance_lte_abs, tolerance_lte_rel):
        """Set the step bounds and the tolerances, this discards a
        previously supplied initial step

        Parameters
        ----------
        min_step : float
            minimal step magnitude
        max_step : float
            maximal step magnitude
        tolerance_lte_abs : float | array_like
            absolute tolerance of the local truncation error
        tolerance_lte_rel : float | array_like
            relative tolerance of the local truncation error
        """

        field = self.field

        min_step, max_step = abs(min_step), abs(max_step)
        if max_step < min_step:
            raise ValueError(f"maximal step {max_step} smaller than minimal step {min_step}")

        self.min_step = field.convert(min_step)
        self.max_step = field.convert(max_step)

        self.tolerance_lte_abs = self._tolerance(tolerance_lte_abs)
        self.tolerance_lte_rel = self._tolerance(tolerance_lte_rel)

        self._initial_step = None


    def _tolerance(self, tol):
        if np.ndim(tol) == 0:
            tol = self.field.convert(tol)
            if tol < 0:
                raise ValueError(f"tolerance must be non-negative, got {tol}")
            return tol
        tol = self.field.array(tol)
        if np.any(tol < 0):
            raise ValueError("tolerances must be non-negative")
        return tol


    @property
    def initial_step(self):
        """User supplied first step magnitude, 'None' if the heuristic is used"""
        return self._initial_step


    @initial_step.setter
    def initial_step(self, value):
        if value is None or value < self.min_step or value > self.max_step:
            self._initial_step = None
        else:
            self._initial_step = self.field.convert(value)


    @property
    def vector_tolerance(self):
        return np.ndim(self.tolerance_lte_abs) > 0 or np.ndim(self.tolerance_lte_rel) > 0


    def tolerances(self, n):
        """Absolute and relative tolerances broadcast to 'n' components

        Parameters
        ----------
        n : int
            dimension of the main set

        Returns
        -------
        tol_abs : array[field]
        tol_rel : array[field]
        """
        out = []
        for tol in (self.tolerance_lte_abs, self.tolerance_lte_rel):
            if np.ndim(tol) == 0:
                out.append(self.field.array([tol] * n))
            else:
                out.append(tol)
        return tuple(out)


    def check_configuration(self, run):
        """Tolerance vectors have to match the main set dimension"""
        n = run.main_dimension
        for tol in (self.tolerance_lte_abs, self.tolerance_lte_rel):
            if np.ndim(tol) > 0 and len(tol) != n:
                raise DimensionMismatchError(n, len(tol), "tolerance vector length")


    # step size control ----------------------------------------------------------------

    def scale(self, y, n):
        """Componentwise error scale 'abs + rel*|y|' of the main set"""
        tol_abs, tol_rel = self.tolerances(n)
        return tol_abs + tol_rel * np.abs(y[:n])


    def initialize_step(self, forward, order, scale, state0, derivatives):
        """Heuristic for the first step of an adaptive integration.

        Estimates the scaled norms of the first and the second derivative
        with one explicit Euler trial step and picks the step that brings
        the leading local truncation term of a method of the given order
        to a small fraction of the tolerance.

        Parameters
        ----------
        forward : bool
            integration direction
        order : int
            order of the method
        scale : array[field]
            componentwise error scale of the main set
        state0 : ODEStateAndDerivative
            state and derivative at the start of the integration
        derivatives : callable
            counted right-hand side, called once

        Returns
        -------
        h : scalar
            signed first step
        """

        field = self.field

        if self._initial_step is not None:
            return self._initial_step if forward else -self._initial_step

        n = len(scale)
        y0, y_dot0 = state0.state, state0.derivative

        ratio = y0[:n] / scale
        y_on_scale2 = np.sum(ratio * ratio)
        ratio = y_dot0[:n] / scale
        y_dot_on_scale2 = np.sum(ratio * ratio)

        #rough guess from the time scale 'y/y''
        if y_on_scale2 < INIT_NORM_NEGLIGIBLE or y_dot_on_scale2 < INIT_NORM_NEGLIGIBLE:
            h = field.convert(INIT_STEP_FALLBACK)
        else:
            h = field.convert(INIT_STEP_FRACTION) * field.sqrt(y_on_scale2 / y_dot_on_scale2)

        if not forward:
            h = -h

        #euler trial step for the second derivative
        y1 = y0 + h * y_dot0
        y_dot1 = derivatives(state0.time + h, y1)

        ratio = (y_dot1[:n] - y_dot0[:n]) / scale
        y_ddot_on_scale = field.sqrt(np.sum(ratio * ratio)) / abs(h)

        max_inv2 = max(field.sqrt(y_dot_on_scale2), y_ddot_on_scale)

        if max_inv2 < INIT_INVERSE_NEGLIGIBLE:
            h1 = max(field.convert(INIT_STEP_FALLBACK), INIT_STEP_SHRINK * abs(h))
        else:
            h1 = field.pow(INIT_TRUNCATION_TARGET / max_inv2, field.ratio(1, order))

        h = min(INIT_GROWTH_MAX * abs(h), h1)

        #avoid cancellation when computing 't1 - t0'
        h = max(h, INIT_TIME_CANCELLATION * abs(state0.time))

        h = min(max(h, self.min_step), self.max_step)

        return h if forward else -h


    def filter_step(self, h, forward, accept_small):
        """Clamp a signed step to the step bounds.

        Parameters
        ----------
        h : scalar
            signed step
        forward : bool
            integration direction
        accept_small : bool
            raise steps below the minimum to the minimum instead of failing

        Returns
        -------
        h : scalar
            bounded signed step
        """

        filtered = h

        if abs(h) < self.min_step:
            if not accept_small:
                raise StepSizeTooSmallError(self.field.real(abs(h)), self.field.real(self.min_step))
            filtered = self.min_step if forward else -self.min_step

        if filtered > self.max_step:
            filtered = self.max_step
        elif filtered < -self.max_step:
            filtered = -self.max_step

        return filtered


    def estimate_error(self, yDotK, y0, y1, h, n=None):
        """Normalized RMS of the local truncation error over the main set.

        .. math::

            E = \\sqrt{\\frac{1}{n} \\sum_{j<n} \\left( \\frac{h \\sum_k e_k K_{k,j}}{tol_j} \\right)^2}

        with 'tol_j = abs_j + rel_j * max(|y0_j|, |y1_j|)'.

        Parameters
        ----------
        yDotK : array[field]
            stage derivatives of the trial step
        y0 : array[field]
            state at the start of the step
        y1 : array[field]
            propagated state at the end of the step
        h : scalar
            signed step size
        n : None | int
            dimension of the main set, defaults to the full state

        Returns
        -------
        error : scalar
            error estimate, the step is acceptable if below 1
        """

        n = len(y0) if n is None else n
        tol_abs, tol_rel = self.tolerances(n)

        err = np.dot(self.tableau.e, yDotK[:, :n])
        tol = tol_abs + tol_rel * np.maximum(np.abs(y0[:n]), np.abs(y1[:n]))
        ratio = h * err / tol

        return self.field.sqrt(np.sum(ratio * ratio) / n)


    def step_factor(self, error):
        """Rescale factor of the step for a given error estimate"""
        if error <= 0:
            return self.field.convert(self.max_growth)
        factor = self.safety * self.field.pow(error, self.field.ratio(-1, self.tableau.order))
        return min(self.field.convert(self.max_growth), max(self.field.convert(self.min_reduction), factor))
