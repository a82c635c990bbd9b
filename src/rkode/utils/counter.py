########################################################################################
##
##                        EVALUATION BUDGET OF THE INTEGRATORS
##                               (utils/counter.py)
##
########################################################################################

# IMPORTS ==============================================================================

from ..errors import MaxEvaluationsExceededError


# CLASS ================================================================================

class EvaluationCounter:
    """Counts evaluations of the right-hand side and enforces a budget.

    Parameters
    ----------
    maximal_count : None | int
        maximal number of evaluations, unlimited if 'None'
    """

    def __init__(self, maximal_count=None):

        if maximal_count is not None and maximal_count < 0:
            raise ValueError(f"maximal count must be non-negative, got {maximal_count}")

        self.maximal_count = maximal_count
        self.count = 0


    def __int__(self):
        return self.count


    def __repr__(self):
        return f"EvaluationCounter(count={self.count}, maximal_count={self.maximal_count})"


    def can_increment(self, n=1):
        """Check if the budget allows 'n' more evaluations"""
        return self.maximal_count is None or self.count + n <= self.maximal_count


    def increment(self):
        """Register one evaluation, raises 'MaxEvaluationsExceededError'
        if the budget is exhausted"""
        if not self.can_increment():
            raise MaxEvaluationsExceededError(self.maximal_count)
        self.count += 1


    def reset(self):
        self.count = 0
