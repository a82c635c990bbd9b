########################################################################################
##
##                                     TESTS FOR 
##                                'utils/logger.py'
##
########################################################################################

# IMPORTS ==============================================================================

import io
import logging
import unittest

from rkode.utils.logger import get_logger, setup_logging, ROOT
from rkode.solvers import RK4, RKDP54


# HELPERS ==============================================================================

def decay(t, y):
    return -y


class ListHandler(logging.Handler):
    """Keeps the emitted records"""

    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


# TESTS ================================================================================

class TestGetLogger(unittest.TestCase):
    """
    Test the logger namespace
    """

    def test_names(self):

        self.assertEqual(get_logger().name, ROOT)
        self.assertEqual(get_logger("rkode").name, "rkode")
        self.assertEqual(get_logger("rkode.solvers.rk4").name, "rkode.solvers.rk4")
        self.assertEqual(get_logger("scripts").name, "rkode.scripts")


    def test_null_handler(self):

        handlers = logging.getLogger(ROOT).handlers
        self.assertTrue(any(isinstance(h, logging.NullHandler) for h in handlers))


class TestSetupLogging(unittest.TestCase):
    """
    Test the handler installed for scripts
    """

    def setUp(self):
        self.logger = logging.getLogger(ROOT)
        self.level = self.logger.level
        self.handlers = list(self.logger.handlers)


    def tearDown(self):
        for handler in list(self.logger.handlers):
            if handler not in self.handlers:
                self.logger.removeHandler(handler)
        self.logger.setLevel(self.level)


    def test_stream(self):

        stream = io.StringIO()
        setup_logging(stream=stream, format_string="%(levelname)s:%(message)s")

        RK4(0.5).integrate(decay, (0.0, [1.0]), 1.0)

        lines = stream.getvalue().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith("INFO:RK4 integrating"))
        self.assertTrue(lines[1].startswith("INFO:RK4 finished"))


    def test_no_duplicates(self):

        first, second = io.StringIO(), io.StringIO()
        setup_logging(stream=first)
        setup_logging(stream=second)

        added = [h for h in self.logger.handlers if h not in self.handlers]
        self.assertEqual(len(added), 1)

        get_logger("tests").warning("once")
        self.assertEqual(first.getvalue(), "")
        self.assertEqual(second.getvalue().count("once"), 1)


    def test_level(self):

        stream = io.StringIO()
        setup_logging(level=logging.WARNING, stream=stream)

        RK4(0.5).integrate(decay, (0.0, [1.0]), 1.0)
        self.assertEqual(stream.getvalue(), "")


class TestIntegratorLogging(unittest.TestCase):
    """
    Test the messages of the integrators
    """

    def setUp(self):
        self.logger = logging.getLogger(ROOT)
        self.level = self.logger.level
        self.handler = ListHandler()
        self.logger.addHandler(self.handler)
        self.logger.setLevel(logging.DEBUG)


    def tearDown(self):
        self.logger.removeHandler(self.handler)
        self.logger.setLevel(self.level)


    def test_info(self):

        with self.assertLogs(ROOT, level="INFO") as cm:
            RKDP54().integrate(decay, (0.0, [1.0]), 1.0)

        self.assertEqual(len(cm.records), 2)
        self.assertIn("RKDP54 integrating from t=0.0 to t=1.0", cm.output[0])
        self.assertIn("accepted", cm.output[1])


    def test_silent(self):

        RKDP54(log=False).integrate(decay, (0.0, [1.0]), 1.0)

        infos = [r for r in self.handler.records if r.levelno >= logging.INFO]
        self.assertEqual(infos, [])


    def test_rejections(self):

        Sol = RKDP54(tolerance_lte_abs=1e-10, tolerance_lte_rel=1e-10, initial_step=1.0, log=False)
        Sol.integrate(decay, (0.0, [1.0]), 5.0)

        debug = [r for r in self.handler.records if r.levelno == logging.DEBUG]
        self.assertEqual(len(debug), Sol.rejected_steps)
        self.assertGreater(len(debug), 0)
        self.assertIn("rejected step", debug[0].getMessage())
        self.assertEqual(debug[0].name, "rkode.solvers._embedded")


# RUN TESTS LOCALLY ====================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
