from .euler import EUF
from .midpoint import RKMP2
from .rk4 import RK4
from .gill import RKG4
from .rk38 import RK38
from .luther import RKL6
from .rkdp54 import RKDP54
from .rkhh54 import RKHH54
