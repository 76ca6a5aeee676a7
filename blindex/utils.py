"""
blindex/utils.py

Utility functions used across the repo:
  - Normalizing the accepted call forms (four scalars, 2x2 table) to counts
  - blinding_index: dispatching front end to compute_blinding_index
  - Formatting / tabulating results for reports
"""

from __future__ import annotations
from dataclasses import asdict, is_dataclass
from numbers import Real
from typing import Any, Dict, Iterable, NamedTuple, Sequence, Tuple

import numpy as np
import pandas as pd

from .stats import (
    DEFAULT_CONF_LEVEL,
    DEFAULT_SWITCH_POINT,
    BlindingIndexResult,
    DomainError,
    compute_blinding_index,
)

RESULT_COLUMNS = ["est", "lwr_ci", "upr_ci", "p_value", "z_value"]


# -------------------------
# Input adapters
# -------------------------

class Counts(NamedTuple):
    n_AA: float
    n_BA: float
    n_AB: float
    n_BB: float

def _as_count(name: str, x: Any) -> float:
    if isinstance(x, (bool, np.bool_)) or not isinstance(x, (Real, np.integer, np.floating)):
        raise TypeError(f"{name} must be a real number, got {type(x).__name__}")
    return float(x)

def counts_from_scalars(n_AA: Any, n_BA: Any, n_AB: Any, n_BB: Any) -> Counts:
    """Four integer or real counts -> Counts of floats."""
    return Counts(
        _as_count("n_AA", n_AA),
        _as_count("n_BA", n_BA),
        _as_count("n_AB", n_AB),
        _as_count("n_BB", n_BB),
    )

def counts_from_matrix(freq_table: Any) -> Counts:
    """
    2x2 frequency table -> Counts.

    Columns are the true arm (A, B), rows the guessed arm (A, B):

        [[n_AA, n_AB],
         [n_BA, n_BB]]
    """
    arr = np.asarray(freq_table)
    if arr.shape != (2, 2):
        raise DomainError("freq_table", arr.shape, "Frequency table must be 2x2.")
    if not (np.issubdtype(arr.dtype, np.integer) or np.issubdtype(arr.dtype, np.floating)):
        raise TypeError(f"freq_table must hold integers or reals, got dtype {arr.dtype}")
    arr = arr.astype(float)
    return Counts(arr[0, 0], arr[1, 0], arr[0, 1], arr[1, 1])

def blinding_index(*args: Any,
                   switch_point: float = DEFAULT_SWITCH_POINT,
                   conf_level: float = DEFAULT_CONF_LEVEL) -> BlindingIndexResult:
    """
    Blinding index from either a 2x2 table or four counts.

    Examples:
      blinding_index(56, 14, 48, 32)
      blinding_index([[56, 48], [14, 32]])
    """
    if len(args) == 1:
        counts = counts_from_matrix(args[0])
    elif len(args) == 4:
        counts = counts_from_scalars(*args)
    else:
        raise TypeError(
            f"blinding_index expects a 2x2 table or four counts, got {len(args)} arguments"
        )
    return compute_blinding_index(*counts, switch_point=switch_point, conf_level=conf_level)


# -------------------------
# Reporting / formatting
# -------------------------

def as_report_dict(obj) -> Dict:
    """
    Convert dataclass or dict-like result to a plain dict for JSON/printing.
    """
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    raise TypeError("Expected dataclass or dict.")

def results_to_frame(results: Iterable[BlindingIndexResult],
                     index: Sequence[Any] | None = None) -> pd.DataFrame:
    """Stack results into a DataFrame, one row per table."""
    rows = [as_report_dict(r) for r in results]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS, index=index)

def fmt_float(x: float, digits: int = 4) -> str:
    return f"{x:.{digits}f}"

def fmt_pvalue(p: float) -> str:
    if p < 1e-4:
        return "<1e-4"
    return f"{p:.4f}"

def fmt_ci(ci: Tuple[float, float], digits: int = 4) -> str:
    lo, hi = ci
    return f"[{lo:.{digits}f}, {hi:.{digits}f}]"

def format_report(res: BlindingIndexResult, conf_level: float = DEFAULT_CONF_LEVEL,
                  digits: int = 4) -> str:
    pct = f"{100.0 * conf_level:g}%"
    return "\n".join([
        f"Blinding index: {fmt_float(res.est, digits)}",
        f"{pct} CI:       {fmt_ci((res.lwr_ci, res.upr_ci), digits)}",
        f"z-value:        {fmt_float(res.z_value, digits)}",
        f"p-value:        {fmt_pvalue(res.p_value)}",
    ])
