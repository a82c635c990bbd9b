########################################################################################
##
##                         IMMUTABLE ODE STATE SNAPSHOTS
##                                   (state.py)
##
########################################################################################

# IMPORTS ==============================================================================

import numpy as np

from .errors import DimensionMismatchError


# HELPERS ==============================================================================

def _frozen_copy(values):
    """Copy 'values' into a read-only 1-D array, keeping object dtypes"""
    arr = np.array(values, dtype=getattr(values, "dtype", None), copy=True)
    arr = np.atleast_1d(arr).ravel()
    arr.setflags(write=False)
    return arr


# CLASSES ==============================================================================

class ODEState:
    """Time and state vector of an ODE at one instant.

    The state vector is copied on construction and stored read-only, so a
    snapshot can never be corrupted by later mutations of the array it was
    built from.

    Parameters
    ----------
    time : scalar
        time of the snapshot
    state : array_like
        state vector at 'time'
    """

    __slots__ = ("time", "state")

    def __init__(self, time, state):
        object.__setattr__(self, "time", time)
        object.__setattr__(self, "state", _frozen_copy(state))


    def __setattr__(self, name, value):
        raise AttributeError(f"'{type(self).__name__}' is immutable")


    def __len__(self):
        return len(self.state)


    def __repr__(self):
        return f"{type(self).__name__}(time={self.time}, state={self.state})"


    @property
    def dimension(self):
        return len(self.state)


class ODEStateAndDerivative(ODEState):
    """Time, state vector and time derivative of an ODE at one instant.

    Produced by one evaluation of the right-hand side. The derivative must
    have the same length as the state.

    Parameters
    ----------
    time : scalar
        time of the snapshot
    state : array_like
        state vector at 'time'
    derivative : array_like
        derivative 'f(time, state)'
    """

    __slots__ = ("derivative",)

    def __init__(self, time, state, derivative):
        super().__init__(time, state)

        derivative = _frozen_copy(derivative)
        if len(derivative) != len(self.state):
            raise DimensionMismatchError(len(self.state), len(derivative), "derivative dimension")

        object.__setattr__(self, "derivative", derivative)


    def __repr__(self):
        return (f"{type(self).__name__}(time={self.time}, "
                f"state={self.state}, derivative={self.derivative})")
