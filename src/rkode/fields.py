########################################################################################
##
##                          SCALAR FIELDS FOR THE ODE INTEGRATORS
##                                    (fields.py)
##
##      The integration engine never assumes native floating point semantics.
##      Time, state, stage derivatives and tableau coefficients are elements of
##      a 'Field' which provides conversion, exact rationals, square roots and
##      powers. Vectors are numpy arrays, 'float64' for the real field and
##      'object' arrays of 'mpmath' numbers for extended precision.
##
########################################################################################

# IMPORTS ==============================================================================

import numpy as np

from mpmath.ctx_mp import MPContext


# BASE CLASS ===========================================================================

class Field:
    """Base class for the scalar type used by the integrators.

    Everything above this class is written against the capability set
    '+ - * / sqrt pow abs compare', so the same engine runs on ordinary
    doubles and on extended precision numbers.

    Notes
    -----
    Not to be used directly!

    Attributes
    ----------
    name : str
        identifier of the field
    dtype : numpy.dtype
        dtype of the numpy arrays holding field elements
    """

    name = None
    dtype = None

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()


    def __hash__(self):
        return hash((type(self).__name__, self._key()))


    def __repr__(self):
        return f"{type(self).__name__}()"


    def _key(self):
        return ()


    @property
    def zero(self):
        return self.convert(0)


    @property
    def one(self):
        return self.convert(1)


    def convert(self, value):
        """Convert a python number into an element of the field"""
        raise NotImplementedError


    def ratio(self, p, q):
        """Exact rational 'p/q' evaluated with the field division

        Parameters
        ----------
        p : int
            numerator
        q : int
            denominator

        Returns
        -------
        r : scalar
            field element closest to 'p/q'
        """
        return self.convert(p) / self.convert(q)


    def sqrt(self, x):
        raise NotImplementedError


    def pow(self, x, e):
        return self.convert(x) ** self.convert(e)


    def abs(self, x):
        return abs(x)


    def real(self, x):
        """Python float approximation of a field element"""
        return float(x)


    def ulp(self, x):
        """Spacing of the field elements in the neighbourhood of 'x'"""
        raise NotImplementedError


    def array(self, values):
        """Build a 1-D array of field elements from 'values' (always a copy)"""
        flat = np.ravel(np.asarray(values, dtype=object))
        return np.array([self.convert(v) for v in flat], dtype=self.dtype)


# REAL NUMBERS =========================================================================

class RealField(Field):
    """IEEE double precision numbers, backed by 'numpy.float64'."""

    name = "real"
    dtype = np.float64

    def convert(self, value):
        return np.float64(value)


    def sqrt(self, x):
        return np.sqrt(np.float64(x))


    def pow(self, x, e):
        return np.float64(x) ** float(e)


    def ulp(self, x):
        return np.spacing(np.abs(np.float64(x)))


    def array(self, values):
        return np.array(np.ravel(values), dtype=np.float64)


# EXTENDED PRECISION ===================================================================

class MPMathField(Field):
    """Arbitrary precision floating point numbers from 'mpmath'.

    Each instance owns a private 'mpmath' context, so different precisions
    can coexist without touching the global 'mpmath.mp' settings.

    Parameters
    ----------
    dps : int
        number of decimal digits of precision
    """

    name = "mpmath"
    dtype = object

    def __init__(self, dps=30):

        if dps < 1:
            raise ValueError(f"precision must be positive, got {dps} digits")

        self.dps = int(dps)

        #private arithmetic context
        self.ctx = MPContext()
        self.ctx.dps = self.dps


    def __repr__(self):
        return f"MPMathField(dps={self.dps})"


    def _key(self):
        return (self.dps,)


    def convert(self, value):
        return self.ctx.mpf(value)


    def sqrt(self, x):
        return self.ctx.sqrt(self.convert(x))


    def pow(self, x, e):
        return self.ctx.power(self.convert(x), self.convert(e))


    def ulp(self, x):
        x = abs(self.convert(x))
        return self.ctx.eps * x if x else self.ctx.eps


# HELPERS ==============================================================================

REAL = RealField()


def get_field(field=None):
    """Resolve the scalar field of an integrator.

    Parameters
    ----------
    field : None | str | int | Field
        'None' or 'real' for doubles, 'mpmath' for 30 digits of extended
        precision, an integer for an 'MPMathField' with that many digits,
        or an already constructed field

    Returns
    -------
    field : Field
        resolved field instance
    """

    if field is None:
        return REAL

    if isinstance(field, Field):
        return field

    if isinstance(field, str):
        if field == RealField.name:
            return REAL
        if field == MPMathField.name:
            return MPMathField()
        raise ValueError(f"unknown field '{field}'")

    if isinstance(field, (int, np.integer)) and not isinstance(field, bool):
        return MPMathField(int(field))

    raise TypeError(f"cannot build a field from {type(field).__name__}")
