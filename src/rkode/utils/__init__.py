from .counter import EvaluationCounter
from .logger import get_logger, setup_logging
