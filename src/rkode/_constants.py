########################################################################################
##
##                            GLOBAL CONSTANTS AND DEFAULTS
##                                  (_constants.py)
##
########################################################################################

# NUMERICS =============================================================================

#relative tolerance for tableau consistency checks (sum(b) == 1), scaled by precision
TOLERANCE = 1e-12


# STEPSIZE CONTROL =====================================================================

#safety factor for the step size controller
SOL_SAFETY = 0.9

#bounds for the timestep rescale factor
SOL_SCALE_MIN = 0.2
SOL_SCALE_MAX = 10.0

#default tolerances for the local truncation error
SOL_TOLERANCE_LTE_ABS = 1e-6
SOL_TOLERANCE_LTE_REL = 1e-3

#default step bounds for adaptive integrators
SOL_STEP_MIN = 0.0
SOL_STEP_MAX = float("inf")

#initial error value that forces at least one trial step
SOL_ERROR_INIT = 10.0


# INITIAL STEP HEURISTIC ===============================================================

#squared scaled norms below this are treated as negligible
INIT_NORM_NEGLIGIBLE = 1e-10

#fallback rough guess for degenerate scales
INIT_STEP_FALLBACK = 1e-6

#fraction of the 'y/y'' time scale used for the rough guess
INIT_STEP_FRACTION = 0.01

#target for the local truncation term 'h^order * max(|y'|, |y''|)'
INIT_TRUNCATION_TARGET = 0.01

#maximum inverse time scale considered to be zero
INIT_INVERSE_NEGLIGIBLE = 1e-15

#growth bound relative to the rough guess
INIT_GROWTH_MAX = 100.0

#fraction of the rough guess used when the derivatives vanish
INIT_STEP_SHRINK = 0.001

#relative floor to avoid cancellation when computing 't1 - t0'
INIT_TIME_CANCELLATION = 1e-12


# SANITY CHECKS ========================================================================

#integration spans below this many ulps of the end points are rejected
SPAN_ULPS_MIN = 1000


# DENSE OUTPUT =========================================================================

#relative overshoot of the step fraction tolerated without an extrapolation warning
INTERPOLATION_TOLERANCE = 1e-10
