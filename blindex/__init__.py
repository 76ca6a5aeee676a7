"""
blindex: the simple blinding index for randomized controlled trials.

Estimates the difference in correct-guess probabilities between two trial
arms with a Wilson-type CI and the p-value dual to it.

Public API is re-exported here for convenience.
"""

from importlib.metadata import PackageNotFoundError, version as _version

# ---- Version ----
try:
    __version__ = _version("blindex")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# ---- Re-exports ----
from .stats import (  # noqa: F401
    DEFAULT_CONF_LEVEL,
    DEFAULT_SWITCH_POINT,
    DEFAULT_Z,
    BlindingIndexResult,
    DomainError,
    RootBranch,
    WilsonCI,
    compute_blinding_index,
    find_z_value,
    select_branch,
    wilson_bounds,
    wilson_ci_diff,
)

from .utils import (  # noqa: F401
    Counts,
    blinding_index,
    counts_from_matrix,
    counts_from_scalars,
    results_to_frame,
)

__all__ = [
    "__version__",
    # stats
    "DEFAULT_CONF_LEVEL",
    "DEFAULT_SWITCH_POINT",
    "DEFAULT_Z",
    "BlindingIndexResult",
    "DomainError",
    "RootBranch",
    "WilsonCI",
    "compute_blinding_index",
    "find_z_value",
    "select_branch",
    "wilson_bounds",
    "wilson_ci_diff",
    # utils
    "Counts",
    "blinding_index",
    "counts_from_matrix",
    "counts_from_scalars",
    "results_to_frame",
]
