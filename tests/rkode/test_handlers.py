########################################################################################
##
##                                     TESTS FOR 
##                                   'handlers.py'
##
########################################################################################

# IMPORTS ==============================================================================

import unittest
import numpy as np

from rkode.handlers import (
    Action,
    StepHandler,
    FixedStepHandler,
    StepNormalizer,
    StepNormalizerMode,
    StepNormalizerBounds,
    ContinuousOutputModel
    )
from rkode.solvers import RKDP54, RK4


# HELPERS ==============================================================================

def decay(t, y):
    return -y


class Recorder(FixedStepHandler):
    """Collects the grid states"""

    def __init__(self, stop_time=None):
        self.stop_time = stop_time
        self.times = []
        self.states = []
        self.last = []
        self.initialized = False

    def init(self, initial_state, final_time):
        self.initialized = True

    def handle_step(self, state, is_last):
        self.times.append(float(state.time))
        self.states.append(state.state[0])
        self.last.append(is_last)
        if self.stop_time is not None and state.time >= self.stop_time:
            return Action.STOP


def make_solver():
    return RKDP54(tolerance_lte_abs=1e-9, tolerance_lte_rel=1e-9, log=False)


# TESTS ================================================================================

class TestStepHandler(unittest.TestCase):
    """
    Test the handler contract of the integrators
    """

    def test_calls(self):

        class Counter(StepHandler):
            def __init__(self):
                self.inits = 0
                self.flags = []
            def init(self, initial_state, final_time):
                self.inits += 1
                self.t0 = initial_state.time
                self.t1 = final_time
            def handle_step(self, interpolator, is_last):
                self.flags.append(is_last)

        H = Counter()
        Sol = RK4(0.25, log=False)
        Sol.add_step_handler(H)
        Sol.integrate(decay, (0.0, [1.0]), 1.0)

        self.assertEqual(H.inits, 1)
        self.assertEqual(H.t0, 0.0)
        self.assertEqual(H.t1, 1.0)
        self.assertEqual(H.flags, [False, False, False, True])

        Sol.clear_step_handlers()
        self.assertEqual(Sol.step_handlers, [])


    def test_stop(self):

        class Stopper(StepHandler):
            def handle_step(self, interpolator, is_last):
                if interpolator.current_state.time >= 0.5:
                    return Action.STOP

        Sol = RK4(0.25, log=False)
        Sol.add_step_handler(Stopper())
        S = Sol.integrate(decay, (0.0, [1.0]), 1.0)

        #terminates after the step reaching t=0.5
        self.assertEqual(S.time, 0.5)
        self.assertEqual(Sol.accepted_steps, 2)
        self.assertAlmostEqual(S.state[0], np.exp(-0.5), 4)


class TestStepNormalizer(unittest.TestCase):
    """
    Test sampling of variable steps on a fixed grid
    """

    def _run(self, t0=0.0, t1=0.9, h=0.25, **kwargs):
        R = Recorder()
        Sol = make_solver()
        Sol.add_step_handler(StepNormalizer(h, R, **kwargs))
        Sol.integrate(decay, (t0, [np.exp(-t0)]), t1)
        return R


    def test_init(self):

        R = Recorder()
        N = StepNormalizer(-0.1, R)

        self.assertEqual(N.h, 0.1)
        self.assertEqual(N.mode, StepNormalizerMode.INCREMENT)
        self.assertEqual(N.bounds, StepNormalizerBounds.FIRST)

        with self.assertRaises(ValueError):
            StepNormalizer(0.0, R)


    def test_bounds(self):

        expected = {
            StepNormalizerBounds.NEITHER: [0.25, 0.5, 0.75],
            StepNormalizerBounds.FIRST: [0.0, 0.25, 0.5, 0.75],
            StepNormalizerBounds.LAST: [0.25, 0.5, 0.75, 0.9],
            StepNormalizerBounds.BOTH: [0.0, 0.25, 0.5, 0.75, 0.9],
            }

        for bounds, times in expected.items():
            with self.subTest(bounds=bounds):

                R = self._run(bounds=bounds)

                self.assertTrue(R.initialized)
                np.testing.assert_allclose(R.times, times, atol=1e-12)

                #only the last sample is flagged
                self.assertEqual(R.last, [False] * (len(times) - 1) + [True])

                #sampled from the dense output
                np.testing.assert_allclose(R.states, np.exp(-np.array(R.times)), atol=1e-7)


    def test_modes(self):

        R = self._run(t0=0.1, mode=StepNormalizerMode.INCREMENT, bounds=StepNormalizerBounds.NEITHER)
        np.testing.assert_allclose(R.times, [0.35, 0.6, 0.85], atol=1e-12)

        R = self._run(t0=0.1, mode=StepNormalizerMode.MULTIPLES, bounds=StepNormalizerBounds.NEITHER)
        np.testing.assert_allclose(R.times, [0.25, 0.5, 0.75], atol=1e-12)


    def test_backward(self):

        R = self._run(t0=0.9, t1=0.0, bounds=StepNormalizerBounds.BOTH)

        np.testing.assert_allclose(R.times, [0.9, 0.65, 0.4, 0.15, 0.0], atol=1e-12)
        np.testing.assert_allclose(R.states, np.exp(-np.array(R.times)), atol=1e-7)


    def test_stop(self):

        R = Recorder(stop_time=0.5)
        Sol = make_solver()
        Sol.add_step_handler(StepNormalizer(0.25, R))
        S = Sol.integrate(decay, (0.0, [1.0]), 2.0)

        #stopped at the end of the step containing the next grid point
        self.assertLess(S.time, 2.0)
        self.assertGreaterEqual(S.time, 0.5)
        self.assertEqual(R.times[-1], 0.5)


class TestContinuousOutputModel(unittest.TestCase):
    """
    Test storage of the dense output of a whole integration
    """

    def _run(self, t0, t1):
        M = ContinuousOutputModel()
        Sol = make_solver()
        Sol.add_step_handler(M)
        Sol.integrate(decay, (t0, [np.exp(-t0)]), t1)
        return M, Sol


    def test_interpolate(self):

        M, Sol = self._run(0.0, 2.0)

        self.assertEqual(len(M), Sol.accepted_steps)
        self.assertEqual(M.initial_time, 0.0)
        self.assertAlmostEqual(M.final_time, 2.0, 12)
        self.assertTrue(M.forward)

        for t in np.linspace(0.0, 2.0, 23):
            S = M.interpolate(t)
            self.assertAlmostEqual(S.state[0], np.exp(-t), 7)
            self.assertAlmostEqual(S.derivative[0], -np.exp(-t), 5)


    def test_backward(self):

        M, Sol = self._run(2.0, 0.0)

        self.assertFalse(M.forward)
        self.assertEqual(M.initial_time, 2.0)

        for t in [1.9, 1.2, 0.3]:
            self.assertAlmostEqual(M.interpolate(t).state[0], np.exp(-t), 7)


    def test_empty(self):

        M = ContinuousOutputModel()

        with self.assertRaises(ValueError):
            M.interpolate(0.0)
        with self.assertRaises(ValueError):
            M.initial_time


    def test_append(self):

        M1, _ = self._run(0.0, 1.0)
        M2, _ = self._run(float(M1.final_time), 2.0)

        n1, n2 = len(M1), len(M2)
        M1.append(M2)

        self.assertEqual(len(M1), n1 + n2)
        self.assertAlmostEqual(M1.final_time, 2.0, 12)
        self.assertAlmostEqual(M1.interpolate(1.5).state[0], np.exp(-1.5), 7)

        #appending nothing is a no-op
        M1.append(ContinuousOutputModel())
        self.assertEqual(len(M1), n1 + n2)

        #empty model takes over
        M3 = ContinuousOutputModel()
        M3.append(M2)
        self.assertEqual(len(M3), n2)


    def test_append_invalid(self):

        M1, _ = self._run(0.0, 1.0)

        #gap between the models
        M2, _ = self._run(1.5, 2.0)
        with self.assertRaises(ValueError):
            M1.append(M2)

        #direction mismatch
        M3, _ = self._run(2.0, 1.0)
        with self.assertRaises(ValueError):
            M1.append(M3)


# RUN TESTS LOCALLY ====================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
