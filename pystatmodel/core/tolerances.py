"""
Numerical tolerances and display constants.

Defines the precision expectations used when comparing computed
statistics, and the thresholds that decide when an information matrix is
too ill-conditioned to invert.

Used by the covariance estimator, the summary formatters and the test
suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Double precision reference
FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='fp64',
    description='double precision, well-conditioned problems',
)

# Double precision, ill-conditioned problems (cond > 1e4)
FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='fp64_ill_conditioned',
    description='double precision, ill-conditioned (cond > 1e4)',
)

# An information matrix with a 2-norm condition number above this is
# treated as singular. Rounding in an exactly rank-deficient X'WX leaves
# condition numbers of order 1/(n*eps), about 1e14 and up, so the cutoff
# sits well below that; at 1e12 the inverse still keeps about four
# significant digits in float64.
INVERSION_CONDITION_THRESHOLD = 1e12

# Condition number above which results are reported as ill-conditioned.
ILL_CONDITIONED_THRESHOLD = 1e4

# Display string for statistics that are not available.
NA_MARKER = 'NA'


def select_tolerance(condition_number: float | None = None) -> ToleranceTier:
    """Select the tolerance tier for a problem with the given conditioning."""
    if condition_number is not None and condition_number > ILL_CONDITIONED_THRESHOLD:
        return FP64_ILL_CONDITIONED
    return FP64
