########################################################################################
##
##                           EXCEPTIONS AND WARNINGS OF RKODE
##                                    (errors.py)
##
########################################################################################

# CONFIGURATION ERRORS =================================================================

class DimensionMismatchError(ValueError):
    """Raised when vector sizes do not match the dimension of the ODE,
    for example a tolerance vector whose length differs from the main set
    dimension or a right-hand side returning a derivative of the wrong size.

    Parameters
    ----------
    expected : int
        expected dimension
    actual : int
        dimension that was found
    what : str
        description of the offending quantity
    """

    def __init__(self, expected, actual, what="dimension"):
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} mismatch: expected {expected}, got {actual}")


class IntegrationSpanTooSmallError(ValueError):
    """Raised when the requested integration interval is too small
    to be distinguished from zero in the arithmetic of the field."""

    def __init__(self, span, threshold):
        self.span = span
        self.threshold = threshold
        super().__init__(f"integration span {span} too small (threshold {threshold})")


# RUNTIME ERRORS =======================================================================

class IntegrationError(RuntimeError):
    """Base class for fatal conditions that abort an integration."""
    pass


class StepSizeTooSmallError(IntegrationError):
    """Raised by the step size controller when the step that would
    satisfy the error tolerances is smaller than the minimal step.

    Parameters
    ----------
    step : float
        magnitude of the rejected step
    min_step : float
        minimal allowed step magnitude
    """

    def __init__(self, step, min_step):
        self.step = step
        self.min_step = min_step
        super().__init__(
            f"minimal step size ({min_step:.2e}) reached, integration needs {step:.2e}"
            )


class MaxEvaluationsExceededError(IntegrationError):
    """Raised when the number of right-hand side evaluations
    exceeds the budget of the evaluation counter."""

    def __init__(self, maximal_count):
        self.maximal_count = maximal_count
        super().__init__(f"maximal count ({maximal_count}) exceeded")


# WARNINGS =============================================================================

class ExtrapolationWarning(UserWarning):
    """Emitted when dense output is requested outside of the step range."""
    pass
