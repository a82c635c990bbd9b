#########################################################################################
##
##        rkode example of adaptive integration with dense output on a fixed grid
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np
import matplotlib.pyplot as plt

from rkode import (
    ODE,
    ContinuousOutputModel,
    FixedStepHandler,
    StepNormalizer,
    StepNormalizerBounds,
    setup_logging
    )
from rkode.solvers import RKDP54


# MODEL DEFINITION ======================================================================

#van der pol oscillator, moderately nonlinear
mu = 2.0

def van_der_pol(t, y):
    x, v = y
    return np.array([v, mu*(1 - x**2)*v - x])

ode = ODE(van_der_pol, dimension=2)


# STEP HANDLERS =========================================================================

class GridRecorder(FixedStepHandler):
    """Collects the states on the output grid"""

    def __init__(self):
        self.time = []
        self.state = []

    def handle_step(self, state, is_last):
        self.time.append(state.time)
        self.state.append(state.state)


grid = GridRecorder()
model = ContinuousOutputModel()


# INTEGRATION ===========================================================================

if __name__ == "__main__":

    setup_logging()

    solver = RKDP54(tolerance_lte_abs=1e-8, tolerance_lte_rel=1e-6)
    solver.add_step_handler(StepNormalizer(0.1, grid, bounds=StepNormalizerBounds.BOTH))
    solver.add_step_handler(model)

    final = solver.integrate(ode, (0.0, [2.0, 0.0]), 20.0)

    print(final)

    #accepted step boundaries of the variable step integration
    steps = np.array([model.initial_time] + [I.current_state.time for I in model.steps])

    #dense evaluation between the steps
    t_dense = np.linspace(model.initial_time, model.final_time, 2000)
    y_dense = np.array([model.interpolate(t).state for t in t_dense])

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(8, 6), tight_layout=True, sharex=True)

    ax1.plot(t_dense, y_dense[:, 0], lw=1.5, label="dense output")
    ax1.plot(grid.time, np.array(grid.state)[:, 0], ".", label="grid 0.1")
    ax1.set_ylabel("x")
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    ax2.semilogy(steps[1:], np.diff(steps), ".-")
    ax2.set_xlabel("time")
    ax2.set_ylabel("step size")
    ax2.grid(True, alpha=0.3)

    plt.show()
