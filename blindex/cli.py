from __future__ import annotations

import argparse
import json
import logging
from typing import List, Optional

from .stats import DEFAULT_CONF_LEVEL, DEFAULT_SWITCH_POINT, DomainError
from .utils import as_report_dict, blinding_index, format_report


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="blindex",
        description="Blinding index for a 2x2 table of true vs. guessed trial arm.",
    )
    ap.add_argument("n_AA", type=float, help="In arm A, guessed A")
    ap.add_argument("n_BA", type=float, help="In arm A, guessed B")
    ap.add_argument("n_AB", type=float, help="In arm B, guessed A")
    ap.add_argument("n_BB", type=float, help="In arm B, guessed B")
    ap.add_argument("--conf-level", type=float, default=DEFAULT_CONF_LEVEL)
    ap.add_argument("--switch-point", type=float, default=DEFAULT_SWITCH_POINT,
                    help="Estimates closer than this to 0 or +-1 get z=0")
    ap.add_argument("--digits", type=int, default=4)
    ap.add_argument("--json", action="store_true", help="Print the result as JSON")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> None:
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        res = blinding_index(args.n_AA, args.n_BA, args.n_AB, args.n_BB,
                             switch_point=args.switch_point, conf_level=args.conf_level)
    except DomainError as exc:
        ap.error(str(exc))

    if args.json:
        print(json.dumps(as_report_dict(res), indent=2))
    else:
        print(format_report(res, conf_level=args.conf_level, digits=args.digits))
