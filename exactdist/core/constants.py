"""
Numerical constants and tolerances for the exact distribution engine.

These are the process-wide defaults. Scoped overrides for the values that
callers commonly tune are available through :class:`exactdist.core.context.Settings`.
"""

# Rational conversion
RATIO_PRECISION = 100  # significant digits kept by Ratio.from_number
DISPLAY_PRECISION = 5  # decimals used when rounding tables and CDF targets

# Continuous tabulation
DATAPOINTS = 21  # abscissas per continuous table
MAX_X_PRECISION = 5  # cap on decimals reported for abscissas
PREFERRED_X_PRECISION = 2  # significant digits of a rounded increment
EDGE = 0.01  # inward offset when a density is infinite at its bounds
TARGET_QUANTILE = 0.99  # right boundary of quantile-bounded tables

# Summaries
SUMMARY_PRECISION = 2

# Iteration caps
MAX_DYNAMIC_TERMS = 10_000  # unbounded discrete support
TAIL_DEVIATIONS = 20  # standard deviations past the mean a dynamic table may reach
MAX_BISECTION_ITERATIONS = 200
SERIES_MAX_ITERATIONS = 1_000
CONTINUED_FRACTION_MAX_ITERATIONS = 1_000
NEWTON_MAX_ITERATIONS = 100

# Tolerances
SERIES_TOLERANCE = 1e-15
CONTINUED_FRACTION_TOLERANCE = 1e-15
NEWTON_TOLERANCE = 1e-12
FD_STEP = 1e-6  # central-difference step for estimated derivatives
LENTZ_TINY = 1e-300  # guard against zero denominators in Lentz's algorithm

# Poisson: above this rate e^-lambda is built as an exact power of e^-(lambda/k)
EXP_SPLIT_THRESHOLD = 700.0
