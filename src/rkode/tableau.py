########################################################################################
##
##                         BUTCHER TABLEAUX OF EXPLICIT RK METHODS
##                                   (tableau.py)
##
########################################################################################

# IMPORTS ==============================================================================

import numpy as np

from ._constants import TOLERANCE


# HELPERS ==============================================================================

def _readonly(arr):
    arr.setflags(write=False)
    return arr


# CLASS ================================================================================

class ButcherTableau:
    """Coefficients of an explicit, optionally embedded, Runge-Kutta method.

    The first stage of an explicit method always starts at the beginning of
    the step with an empty row of the stage matrix, so both are omitted:

    .. math::

        \\begin{array}{c|cccc}
            0       &        &        &        &         \\\\
            c_1     & a_{10} &        &        &         \\\\
            \\vdots  & \\vdots & \\ddots &        &         \\\\
            c_{s-1} & a_{s-2,0} & \\cdots & a_{s-2,s-2} &  \\\\
            \\hline
                    & b_0    & \\cdots &        & b_{s-1}
        \\end{array}

    All coefficients are elements of one scalar field and are stored as
    read-only numpy arrays.

    Parameters
    ----------
    name : str
        name of the method
    c : array_like
        'stages - 1' time fractions of the stages (the leading zero omitted)
    a : list[array_like]
        'stages - 1' rows of the strictly lower triangular stage matrix,
        row 'i' holding 'i + 1' entries
    b : array_like
        'stages' propagation weights
    order : int
        order of the propagated solution
    e : None | array_like
        'stages' error weights of the embedded pair (high minus low order)
    fsal : None | int
        index of the stage whose derivative equals the derivative at the
        end of the step ('first same as last')
    field : None | Field
        scalar field of the coefficients, only used for the consistency check
    """

    def __init__(self, name, c, a, b, order, e=None, fsal=None, field=None):

        self.name = name
        self.order = int(order)

        if self.order < 1:
            raise ValueError(f"'{name}': order must be positive, got {order}")

        self.b = _readonly(np.array(b, dtype=getattr(b, "dtype", None)))
        s = len(self.b)

        if s < 1:
            raise ValueError(f"'{name}': tableau needs at least one stage")

        self.c = _readonly(np.array(c, dtype=self.b.dtype).reshape(-1))
        if len(self.c) != s - 1:
            raise ValueError(f"'{name}': expected {s-1} stage fractions, got {len(self.c)}")

        if len(a) != s - 1:
            raise ValueError(f"'{name}': expected {s-1} stage matrix rows, got {len(a)}")

        rows = []
        for i, row in enumerate(a):
            row = _readonly(np.array(row, dtype=self.b.dtype).reshape(-1))
            if len(row) != i + 1:
                raise ValueError(
                    f"'{name}': stage matrix row {i} must have {i+1} entries, got {len(row)}"
                    )
            rows.append(row)
        self.a = tuple(rows)

        if e is None:
            self.e = None
        else:
            self.e = _readonly(np.array(e, dtype=self.b.dtype).reshape(-1))
            if len(self.e) != s:
                raise ValueError(f"'{name}': expected {s} error weights, got {len(self.e)}")

        if fsal is not None and not 0 <= fsal < s:
            raise ValueError(f"'{name}': fsal index {fsal} out of range for {s} stages")
        self.fsal = fsal

        #propagation weights need to be consistent
        total = sum(self.b[1:], self.b[0])
        tol = TOLERANCE if field is None else max(TOLERANCE, 100 * field.real(field.ulp(1)))
        if abs(float(total) - 1.0) > tol:
            raise ValueError(f"'{name}': propagation weights sum to {float(total)}, not 1")


    def __repr__(self):
        return f"ButcherTableau(name='{self.name}', stages={self.stages}, order={self.order})"


    def __len__(self):
        return self.stages


    @property
    def stages(self):
        return len(self.b)


    @property
    def is_embedded(self):
        """Tableau carries error weights and can drive adaptive steps"""
        return self.e is not None
