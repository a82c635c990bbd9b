########################################################################################
##
##                                     TESTS FOR 
##                                   'tableau.py'
##
########################################################################################

# IMPORTS ==============================================================================

import unittest
import numpy as np

from rkode.tableau import ButcherTableau
from rkode.fields import REAL, MPMathField

from rkode.solvers import euler, midpoint, rk4, gill, rk38, luther, rkdp54, rkhh54


# TESTS ================================================================================

class TestButcherTableau(unittest.TestCase):
    """
    Test construction and validation of the tableau record
    """

    def test_init(self):

        T = ButcherTableau(
            name="heun",
            c=[1.0],
            a=[[1.0]],
            b=[0.5, 0.5],
            order=2
            )

        self.assertEqual(T.stages, 2)
        self.assertEqual(len(T), 2)
        self.assertEqual(T.order, 2)
        self.assertFalse(T.is_embedded)
        self.assertEqual(T.fsal, None)

        #stored read-only
        with self.assertRaises(ValueError):
            T.b[0] = 1.0
        with self.assertRaises(ValueError):
            T.a[0][0] = 0.0


    def test_embedded(self):

        T = ButcherTableau(
            name="heun-euler",
            c=[1.0],
            a=[[1.0]],
            b=[0.5, 0.5],
            e=[-0.5, 0.5],
            order=2,
            fsal=None
            )

        self.assertTrue(T.is_embedded)
        np.testing.assert_array_equal(T.e, [-0.5, 0.5])


    def test_invalid_shapes(self):

        #stage fractions
        with self.assertRaises(ValueError):
            ButcherTableau("x", c=[1.0, 1.0], a=[[1.0]], b=[0.5, 0.5], order=2)

        #number of rows
        with self.assertRaises(ValueError):
            ButcherTableau("x", c=[1.0], a=[[1.0], [0.5, 0.5]], b=[0.5, 0.5], order=2)

        #row length
        with self.assertRaises(ValueError):
            ButcherTableau("x", c=[1.0], a=[[1.0, 0.0]], b=[0.5, 0.5], order=2)

        #error weights
        with self.assertRaises(ValueError):
            ButcherTableau("x", c=[1.0], a=[[1.0]], b=[0.5, 0.5], e=[1.0], order=2)

        #fsal index
        with self.assertRaises(ValueError):
            ButcherTableau("x", c=[1.0], a=[[1.0]], b=[0.5, 0.5], order=2, fsal=2)

        #order
        with self.assertRaises(ValueError):
            ButcherTableau("x", c=[1.0], a=[[1.0]], b=[0.5, 0.5], order=0)

        #empty
        with self.assertRaises(ValueError):
            ButcherTableau("x", c=[], a=[], b=[], order=1)


    def test_inconsistent_weights(self):

        with self.assertRaises(ValueError):
            ButcherTableau("x", c=[1.0], a=[[1.0]], b=[0.5, 0.6], order=2)


class TestMethodTableaux(unittest.TestCase):
    """
    Test the coefficients of all concrete methods
    """

    modules = [euler, midpoint, rk4, gill, rk38, luther, rkdp54, rkhh54]

    def _check_consistency(self, T, tol):

        #row sums of the stage matrix equal the stage fractions
        for c, row in zip(T.c, T.a):
            self.assertLess(abs(sum(row) - c), tol)

        #propagation weights sum to one
        self.assertLess(abs(sum(T.b) - 1), tol)

        #error weights are differences of two consistent weight sets
        if T.is_embedded:
            self.assertLess(abs(sum(T.e)), tol)


    def test_consistency_real(self):

        for mod in self.modules:
            with self.subTest(method=mod.__name__):
                self._check_consistency(mod.tableau(REAL), 1e-14)


    def test_consistency_mpmath(self):

        F = MPMathField(40)

        for mod in self.modules:
            with self.subTest(method=mod.__name__):
                T = mod.tableau(F)
                self.assertEqual(T.b.dtype, object)
                self._check_consistency(T, 1e-36)


    def test_shapes(self):

        expected = {
            euler: (1, 1),
            midpoint: (2, 2),
            rk4: (4, 4),
            gill: (4, 4),
            rk38: (4, 4),
            luther: (7, 6),
            rkdp54: (7, 5),
            rkhh54: (7, 5),
            }

        for mod, (stages, order) in expected.items():
            with self.subTest(method=mod.__name__):
                T = mod.tableau(REAL)
                self.assertEqual(T.stages, stages)
                self.assertEqual(T.order, order)


    def test_embedded(self):

        for mod in [rkdp54, rkhh54]:
            self.assertTrue(mod.tableau(REAL).is_embedded)

        for mod in [euler, midpoint, rk4, gill, rk38, luther]:
            self.assertFalse(mod.tableau(REAL).is_embedded)


    def test_fsal(self):

        for mod in [rkdp54, rkhh54]:

            T = mod.tableau(REAL)

            #last stage is evaluated at the propagated state
            self.assertEqual(T.fsal, 6)
            self.assertEqual(T.c[-1], 1.0)
            np.testing.assert_array_equal(T.a[-1], T.b[:-1])
            self.assertEqual(T.b[-1], 0.0)


    def test_cached(self):

        F = MPMathField(35)

        self.assertIs(rk4.tableau(REAL), rk4.tableau(REAL))
        self.assertIs(luther.tableau(F), luther.tableau(MPMathField(35)))


    def test_irrational_coefficients(self):

        F = MPMathField(40)
        T = gill.tableau(F)

        #exact to the precision of the field
        sqrt2 = F.sqrt(2)
        self.assertLess(abs(T.b[1] - (2 - sqrt2) / 6), 1e-39)
        self.assertGreater(abs(T.b[1] - F.convert(float(T.b[1]))), 1e-25)


# RUN TESTS LOCALLY ====================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
