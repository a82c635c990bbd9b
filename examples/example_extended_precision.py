#########################################################################################
##
##          rkode example comparing double and extended precision integration
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np
import matplotlib.pyplot as plt

from rkode import MPMathField, setup_logging
from rkode.solvers import RKL6


# MODEL DEFINITION ======================================================================

#y' = -2ty^2 with exact solution y = 1/(1+t^2)
def riccati(t, y):
    return -2 * t * y * y


# CONVERGENCE STUDY =====================================================================

if __name__ == "__main__":

    setup_logging()

    F = MPMathField(40)
    t_end = 2

    exact = 1 / (1 + F.convert(t_end)**2)

    steps = [2**-k for k in range(2, 10)]
    err_real, err_mp = [], []

    for h in steps:

        #double precision
        S = RKL6(h, log=False).integrate(riccati, (0.0, [1.0]), t_end)
        err_real.append(abs(S.state[0] - float(exact)))

        #40 digits
        S = RKL6(F.ratio(1, round(1/h)), field=F, log=False).integrate(riccati, (0, [1]), t_end)
        err_mp.append(float(abs(S.state[0] - exact)))

    #reference slope of a 6th order method
    ref = err_mp[0] * (np.array(steps) / steps[0])**6

    plt.figure(figsize=(7, 5))
    plt.loglog(steps, err_real, "o-", label="real (float64)")
    plt.loglog(steps, err_mp, "s-", label="mpmath (40 digits)")
    plt.loglog(steps, ref, "k--", lw=1, label="order 6")
    plt.xlabel("step size")
    plt.ylabel("error at t=2")
    plt.title("Luther's method in different fields")
    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.show()
