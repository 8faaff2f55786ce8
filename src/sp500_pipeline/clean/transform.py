"""Pre-stage transformations on the validated observation frame."""
from __future__ import annotations

import logging

import pandas as pd

log = logging.getLogger(__name__)


def filter_year_range(pdf: pd.DataFrame, start_year: int, end_year: int) -> pd.DataFrame:
    """Keep observations whose calendar year lies in ``[start_year, end_year]``.

    An empty result is not an error; downstream stages emit empty tables.

    Args:
        pdf: Validated observation frame with a datetime64 `date` column.
        start_year: Lower inclusive bound.
        end_year: Upper inclusive bound.

    Returns:
        Filtered copy with a fresh positional index, in input order.
    """
    if pdf.empty:
        return pdf.copy()

    years = pdf["date"].dt.year
    out = pdf[(years >= start_year) & (years <= end_year)].reset_index(drop=True)

    if out.empty:
        log.warning(
            "No observations between %d and %d (input spans %s to %s)",
            start_year,
            end_year,
            pdf["date"].min().date(),
            pdf["date"].max().date(),
        )
    else:
        log.info("Kept %d of %d observations for %d-%d", len(out), len(pdf), start_year, end_year)
    return out
