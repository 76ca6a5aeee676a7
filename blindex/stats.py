"""
blindex/stats.py

Core statistics for the simple blinding index.

Dependencies:
  - numpy
  - scipy

What's included:
  - Wilson score bounds for a single binomial proportion
  - Newcombe's hybrid Wilson CI (method 10) for p_A - p_B
  - z-value / p-value dual to that CI, found by root finding on the
    CI boundary equations
  - compute_blinding_index: validation + CI + p-value in one call

References:
  Newcombe RG (1998). Interval estimation for the difference between
  independent proportions: comparison of eleven methods. Stat Med 17:873-890.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Tuple

import numpy as np
import pandas as pd
from scipy import stats
from scipy.optimize import brentq

logger = logging.getLogger(__name__)


# -------------------------
# Defaults
# -------------------------

DEFAULT_SWITCH_POINT = 1e-12
DEFAULT_CONF_LEVEL = 0.95
DEFAULT_Z = float(stats.norm.ppf(0.975))

# Search interval for the dual z-value
Z_BRACKET: Tuple[float, float] = (0.0, 1000.0)

class DomainError(ValueError):
    """Raised when an argument lies outside the domain of the blinding index."""

    def __init__(self, argument: str, value: Any, message: str):
        super().__init__(f"{message} Got {argument}={value!r}.")
        self.argument = argument
        self.value = value


# -------------------------
# Results
# -------------------------

@dataclass(frozen=True)
class WilsonCI:
    est: float
    lwr_ci: float
    upr_ci: float

@dataclass(frozen=True)
class BlindingIndexResult:
    est: float
    lwr_ci: float
    upr_ci: float
    p_value: float
    z_value: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def to_frame(self) -> pd.DataFrame:
        """One-row DataFrame with columns est, lwr_ci, upr_ci, p_value, z_value."""
        return pd.DataFrame([self.to_dict()])


# -------------------------
# CI estimator
# -------------------------

def wilson_bounds(k: float, n: float, z: float = DEFAULT_Z) -> Tuple[float, float]:
    """
    Wilson score interval for k successes out of n at critical value z.

    Both roots of the quadratic (p_hat - p)^2 = z^2 p (1 - p) / n, clipped
    to [0, 1] against rounding at k = 0 and k = n.
    """
    z2 = z * z
    center = (2 * k + z2) / 2 / (n + z2)
    half = z / (n + z2) * np.sqrt(max(z2 / 4 + k * (1 - k / n), 0.0))
    return float(np.clip(center - half, 0.0, 1.0)), float(np.clip(center + half, 0.0, 1.0))

def wilson_ci_diff(n_AA: float, n_BA: float, n_AB: float, n_BB: float,
                   z: float = DEFAULT_Z) -> WilsonCI:
    """
    Difference p_A - p_B with Newcombe's hybrid Wilson CI (method 10).

    p_A = n_AA / (n_AA + n_BA) and p_B = n_AB / (n_AB + n_BB). The lower
    limit combines the Wilson lower bound for p_A with the upper bound for
    p_B, and vice versa for the upper limit, so the interval is asymmetric
    about the estimate. Both arm totals must be positive.
    """
    m = n_AA + n_BA
    n = n_AB + n_BB
    p_A = n_AA / m
    p_B = n_AB / n
    est = p_A - p_B

    l1, u1 = wilson_bounds(n_AA, m, z)
    l2, u2 = wilson_bounds(n_AB, n, z)

    delta = z * np.sqrt(l1 * (1 - l1) / m + u2 * (1 - u2) / n)
    epsilon = np.sqrt((p_A - u1) ** 2 + (l2 - p_B) ** 2)

    return WilsonCI(est=float(est), lwr_ci=float(est - delta), upr_ci=float(est + epsilon))


# -------------------------
# Dual z-value / p-value
# -------------------------

class RootBranch(enum.Enum):
    DEGENERATE = "degenerate"  # z* = 0, no root finding
    POSITIVE = "positive"      # lower CI limit crosses zero
    NEGATIVE = "negative"      # upper CI limit crosses zero

def select_branch(est: float, switch_point: float = DEFAULT_SWITCH_POINT) -> RootBranch:
    """
    Pick how z* is obtained for a given estimate.

    Estimates within switch_point of 0 or of +-1 are degenerate. At
    |est| == switch_point the numeric branch applies; est == 0 with a zero
    switch point goes to POSITIVE.
    """
    if abs(est) < switch_point or abs(est) > 1 - switch_point:
        return RootBranch.DEGENERATE
    if est >= switch_point:
        return RootBranch.POSITIVE
    return RootBranch.NEGATIVE

def _boundary_equation(n_AA: float, m: float, n_AB: float, n: float,
                       branch: RootBranch) -> Callable[[float], float]:
    # (p_A - a)^2 + (b - p_B)^2 - (p_A - p_B)^2, expanded; zero exactly where
    # the CI limit at critical value z passes through 0.
    p_A = n_AA / m
    p_B = n_AB / n
    lower_side = branch is RootBranch.POSITIVE

    def equation(z: float) -> float:
        l1, u1 = wilson_bounds(n_AA, m, z)
        l2, u2 = wilson_bounds(n_AB, n, z)
        a, b = (l1, u2) if lower_side else (u1, l2)
        return a ** 2 + b ** 2 - 2 * p_A * a - 2 * p_B * b + 2 * p_A * p_B

    return equation

def find_z_value(n_AA: float, n_BA: float, n_AB: float, n_BB: float,
                 switch_point: float = DEFAULT_SWITCH_POINT,
                 bracket: Tuple[float, float] = Z_BRACKET) -> float:
    """
    Non-negative critical value z* at which the one-sided Wilson CI limit
    reaches zero.

    Raises DomainError if the boundary equation does not change sign on
    `bracket`.
    """
    m = n_AA + n_BA
    n = n_AB + n_BB
    est = n_AA / m - n_AB / n

    branch = select_branch(est, switch_point)
    logger.debug("est=%g switch_point=%g -> %s branch", est, switch_point, branch.value)
    if branch is RootBranch.DEGENERATE:
        return 0.0

    equation = _boundary_equation(n_AA, m, n_AB, n, branch)
    lo, hi = bracket
    try:
        z_star = brentq(equation, lo, hi)
    except ValueError as exc:
        raise DomainError(
            "z", bracket,
            f"No sign change of the {branch.value} boundary equation on the bracket.",
        ) from exc

    logger.debug("z*=%.10g after root finding on [%g, %g]", z_star, lo, hi)
    return float(z_star)

def p_value_from_z(z: float) -> float:
    """Two-sided p-value 2 * (1 - Phi(|z|))."""
    return float(2 * stats.norm.sf(abs(z)))


# -------------------------
# Blinding index
# -------------------------

def _check_unit_interval(argument: str, value: float) -> None:
    if not (0 <= value <= 1):
        raise DomainError(argument, value, f"Argument {argument} must lie in the interval [0, 1].")

def validate_inputs(n_AA: float, n_BA: float, n_AB: float, n_BB: float,
                    switch_point: float = DEFAULT_SWITCH_POINT,
                    conf_level: float = DEFAULT_CONF_LEVEL) -> None:
    for name, value in (("n_AA", n_AA), ("n_BA", n_BA), ("n_AB", n_AB), ("n_BB", n_BB)):
        if not (value >= 0):
            raise DomainError(name, value, f"Argument {name} cannot be negative.")
        if not np.isfinite(value):
            raise DomainError(name, value, f"Argument {name} must be finite.")
    if not (n_AA + n_BA > 0):
        raise DomainError("(n_AA, n_BA)", (n_AA, n_BA), "n_AA+n_BA must be strictly positive.")
    if not (n_AB + n_BB > 0):
        raise DomainError("(n_AB, n_BB)", (n_AB, n_BB), "n_AB+n_BB must be strictly positive.")
    _check_unit_interval("switch_point", switch_point)
    _check_unit_interval("conf_level", conf_level)

def compute_blinding_index(
    n_AA: float, n_BA: float, n_AB: float, n_BB: float,
    switch_point: float = DEFAULT_SWITCH_POINT,
    conf_level: float = DEFAULT_CONF_LEVEL,
) -> BlindingIndexResult:
    """
    Estimate the blinding index, its Wilson CI, and the p-value and z-value
    dual to the CI.

    - n_AA: in arm A, guessed A
    - n_BA: in arm A, guessed B
    - n_AB: in arm B, guessed A
    - n_BB: in arm B, guessed B

    Counts are non-negative reals, usually integers. An estimate of 0 means
    perfect blinding, 1 means none.
    """
    validate_inputs(n_AA, n_BA, n_AB, n_BB, switch_point, conf_level)
    n_AA, n_BA, n_AB, n_BB = float(n_AA), float(n_BA), float(n_AB), float(n_BB)

    z_star = find_z_value(n_AA, n_BA, n_AB, n_BB, switch_point=switch_point)
    zcrit = float(stats.norm.ppf(1 - (1 - conf_level) / 2))
    ci = wilson_ci_diff(n_AA, n_BA, n_AB, n_BB, z=zcrit)

    return BlindingIndexResult(
        est=ci.est,
        lwr_ci=ci.lwr_ci,
        upr_ci=ci.upr_ci,
        p_value=p_value_from_z(z_star),
        # + 0.0 turns a -0.0 from a degenerate negative estimate into 0.0
        z_value=float(np.sign(ci.est) * z_star) + 0.0,
    )
