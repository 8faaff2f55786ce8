"""Fan-out of independent column computations.

Growth and rolling columns depend only on their own ordered series, so each
one is built as a dask delayed task and the results are joined back on the
shared key (`year` or `date`).
"""
from __future__ import annotations

import logging
from functools import reduce
from typing import Any, Callable, Sequence

import pandas as pd
from dask import delayed, compute  # type: ignore[attr-defined]

log = logging.getLogger(__name__)


def compute_columns(
    fn: Callable[..., pd.DataFrame],
    calls: Sequence[tuple[Any, ...]],
    scheduler: str = "threads",
) -> list[pd.DataFrame]:
    """Run ``fn(*args)`` for every args tuple in `calls` as delayed tasks.

    Returns:
        The frames in the same order as `calls`.
    """
    tasks = [delayed(fn)(*args) for args in calls]
    results = compute(*tasks, scheduler=scheduler)
    log.debug("Computed %d column tasks", len(tasks))
    return list(results)


def merge_on(key: str, base: pd.DataFrame, frames: Sequence[pd.DataFrame]) -> pd.DataFrame:
    """Left-join each frame onto `base` by `key`, keeping `base` row order."""
    return reduce(
        lambda left, right: left.merge(right, on=key, how="left", validate="one_to_one"),
        frames,
        base,
    )
