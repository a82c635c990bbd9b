########################################################################################
##
##                                     TESTS FOR 
##                     the continuous extensions of all methods
##
########################################################################################

# IMPORTS ==============================================================================

import unittest
import numpy as np

from rkode.solvers import euler, midpoint, rk4, gill, rk38, luther, rkdp54, rkhh54
from rkode.solvers._rungekutta import compute_stages, propagate
from rkode.state import ODEStateAndDerivative
from rkode.interpolation import RungeKuttaStepInterpolator
from rkode.fields import REAL, MPMathField


# HELPERS ==============================================================================

METHODS = [euler, midpoint, rk4, gill, rk38, luther, rkdp54, rkhh54]

#bound of the local interpolation error for 'h = 0.05'
BOUNDS = {
    euler: 1e-3,
    midpoint: 1e-4,
    rk4: 1e-6,
    gill: 1e-6,
    rk38: 1e-6,
    luther: 1e-6,
    rkdp54: 1e-6,
    rkhh54: 1e-6,
    }


def oscillator(t, y):
    return np.array([y[1], -y[0]], dtype=y.dtype)


def rotation(y0, s):
    """Exact solution of the oscillator after time 's'"""
    return np.array([
        y0[0]*np.cos(s) + y0[1]*np.sin(s),
        -y0[0]*np.sin(s) + y0[1]*np.cos(s)
        ])


def make_step(method, field=REAL, t0=0.3, h=0.05, y0=(1.0, 0.5)):
    """Interpolator of a single step of 'method'"""

    T = method.tableau(field)
    t0, h = field.convert(t0), field.convert(h)
    y0 = field.array(y0)

    start = ODEStateAndDerivative(t0, y0, oscillator(t0, y0))
    K = compute_stages(T, oscillator, start, h)
    y1 = propagate(T, y0, h, K)

    #fsal methods reuse the last stage
    y_dot1 = K[T.fsal] if T.fsal is not None else oscillator(t0 + h, y1)
    end = ODEStateAndDerivative(t0 + h, y1, y_dot1)

    return RungeKuttaStepInterpolator(method.dense_output, field, h > 0, K, start, end)


# TESTS ================================================================================

class TestContinuousExtensions(unittest.TestCase):
    """
    Test the dense output strategies of every method
    """

    def test_branch_continuity(self):

        for method in METHODS:
            for h in [0.05, -0.05]:

                with self.subTest(method=method.__name__, h=h):

                    I = make_step(method, h=h)
                    tm = I.previous_state.time + 0.5 * h

                    S = I.interpolate(tm, anchor="start")
                    E = I.interpolate(tm, anchor="end")

                    np.testing.assert_allclose(S.state, E.state, rtol=1e-12, atol=1e-14)
                    np.testing.assert_allclose(S.derivative, E.derivative, rtol=1e-12, atol=1e-14)


    def test_boundaries(self):

        for method in METHODS:
            for h in [0.05, -0.05]:

                with self.subTest(method=method.__name__, h=h):

                    I = make_step(method, h=h)
                    P, C = I.previous_state, I.current_state

                    #polynomials reproduce the states at the opposite boundary
                    S = I.interpolate(P.time, anchor="end")
                    np.testing.assert_allclose(S.state, P.state, rtol=1e-13, atol=1e-15)
                    np.testing.assert_allclose(S.derivative, P.derivative, rtol=1e-13, atol=1e-15)

                    S = I.interpolate(C.time, anchor="start")
                    np.testing.assert_allclose(S.state, C.state, rtol=1e-13, atol=1e-15)


    def test_end_derivative(self):

        #quartic extension of the FSAL pair matches the end derivative
        I = make_step(rkdp54)
        C = I.current_state

        S = I.interpolate(C.time, anchor="start")
        np.testing.assert_allclose(S.derivative, C.derivative, rtol=1e-13, atol=1e-15)


    def test_accuracy(self):

        for method in METHODS:

            with self.subTest(method=method.__name__):

                I = make_step(method)
                P = I.previous_state

                for s in [0.01, 0.02, 0.025, 0.03, 0.04]:
                    S = I.interpolate(P.time + s)
                    np.testing.assert_allclose(S.state, rotation(P.state, s), atol=BOUNDS[method])


    def test_extended_precision(self):

        F = MPMathField(40)

        for method in METHODS:

            with self.subTest(method=method.__name__):

                I = make_step(method, field=F, t0=F.ratio(3, 10), h=F.ratio(1, 20))
                tm = I.previous_state.time + F.ratio(1, 40)

                S = I.interpolate(tm, anchor="start")
                E = I.interpolate(tm, anchor="end")

                self.assertEqual(S.state.dtype, object)
                for a, b in zip(S.state, E.state):
                    self.assertLess(abs(a - b), 1e-35)


# RUN TESTS LOCALLY ====================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
