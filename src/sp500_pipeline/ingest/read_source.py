"""Read the observation series from a CSV file.

The public dataset ships headers such as ``Real Price`` or ``SP500``; they
are normalized to the snake_case schema names used by `models.Observation`.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import pandas as pd

log = logging.getLogger(__name__)

# normalized header -> schema column
COLUMN_ALIASES = {
    "sp500": "nominal_price",
    "s&p500": "nominal_price",
    "cpi": "consumer_price_index",
    "cape": "pe10",
}


def normalize_column(name: str) -> str:
    """Return the snake_case schema name for a raw CSV header."""
    key = re.sub(r"[\s\-]+", "_", str(name).strip().lower())
    return COLUMN_ALIASES.get(key, key)


def read_observations_csv(path: Path) -> pd.DataFrame:
    """Load the CSV at `path` into a DataFrame with normalized headers.

    Args:
        path: CSV file with one row per observation.

    Returns:
        pandas.DataFrame; `date` is left as read and parsed during validation.

    Raises:
        FileNotFoundError: if `path` does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"Observation source not found: {path}")

    pdf = pd.read_csv(path)
    pdf = pdf.rename(columns={c: normalize_column(c) for c in pdf.columns})
    log.info("Read %d rows with %d columns from %s", len(pdf), len(pdf.columns), path)
    return pdf
