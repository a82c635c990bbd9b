from .solvers import (
    EUF,
    RKMP2,
    RK4,
    RKG4,
    RK38,
    RKL6,
    RKDP54,
    RKHH54
    )

from .equations import ODE
from .state import ODEState, ODEStateAndDerivative
from .fields import RealField, MPMathField, get_field
from .tableau import ButcherTableau
from .interpolation import RungeKuttaStepInterpolator
from .handlers import (
    Action,
    StepHandler,
    FixedStepHandler,
    StepNormalizer,
    StepNormalizerMode,
    StepNormalizerBounds,
    ContinuousOutputModel
    )
from .errors import (
    IntegrationError,
    DimensionMismatchError,
    StepSizeTooSmallError,
    MaxEvaluationsExceededError,
    IntegrationSpanTooSmallError,
    ExtrapolationWarning
    )
from .utils.logger import setup_logging

__version__ = "0.1.0"
