"""Sinks for the computed result tables.

Tables are small, so each one is materialized to records, checked against
its Pydantic row model where one exists, and upserted into a MongoDB
collection named after the table. A CSV directory sink is provided for
offline use.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

import pandas as pd
from pydantic import BaseModel

from sp500_pipeline.config import Settings
from sp500_pipeline.db import bulk_upsert, get_client, get_db
from sp500_pipeline.models import DecadeAggregate, GrowthRecord, YearlyAggregate

log = logging.getLogger(__name__)

# Upsert key per table; an empty key means the collection is replaced.
TABLE_KEYS: dict[str, list[str]] = {
    "base_metrics": ["date"],
    "derived_metrics": ["date"],
    "yearly_averages": ["year"],
    "yearly_growth": ["year"],
    "decade_summary": ["decade"],
    "inflation_cycles": ["year"],
    "rolling_stats": ["date"],
    "period_returns": ["date"],
    "correlations": [],
    "regressions": ["model"],
    "price_forecast": ["year"],
}

TABLE_MODELS: dict[str, type[BaseModel]] = {
    "yearly_averages": YearlyAggregate,
    "yearly_growth": GrowthRecord,
    "decade_summary": DecadeAggregate,
}


def _to_document(row: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a table row to BSON-safe values (NaN -> None, Timestamp -> datetime)."""
    doc: dict[str, Any] = {}
    for k, v in row.items():
        if v is None or (isinstance(v, float) and math.isnan(v)):
            doc[k] = None
        elif isinstance(v, pd.Timestamp):
            doc[k] = v.to_pydatetime()
        elif hasattr(v, "item") and not isinstance(v, (str, bytes, datetime)):
            doc[k] = v.item()
        else:
            doc[k] = v
    return doc


def table_documents(name: str, df: pd.DataFrame) -> list[dict[str, Any]]:
    """Return the rows of table `name` as validated Mongo documents.

    Raises:
        pydantic.ValidationError: if a row does not match the table's model.
    """
    docs = [_to_document(r) for r in df.to_dict(orient="records")]
    model = TABLE_MODELS.get(name)
    if model is not None:
        docs = [model.model_validate(d).model_dump() for d in docs]
    return docs


def load_tables(
    tables: Mapping[str, pd.DataFrame],
    settings: Settings,
    db: Any | None = None,
) -> dict[str, int]:
    """Write every result table into MongoDB.

    Args:
        tables: Output of `pipeline.run_analysis`.
        settings: Provides the Mongo URI and database name when `db` is None.
        db: Optional database handle (anything indexable by collection name).

    Returns:
        Mapping of table name to number of documents written.
    """
    if db is None:
        db = get_db(get_client(settings.mongo_uri), settings.mongo_db)

    written: dict[str, int] = {}
    for name, df in tables.items():
        collection = db[name]
        log.info("Writing result table: %s", name)

        docs = table_documents(name, df)
        if not docs:
            log.warning("No rows to load for %s", name)
            written[name] = 0
            continue

        keys = TABLE_KEYS.get(name, [])
        if keys:
            written[name] = bulk_upsert(collection, docs, keys)
        else:
            collection.delete_many({})
            collection.insert_many(docs)
            written[name] = len(docs)

        log.info("Table load complete for %s: %d rows", name, written[name])
    return written


def write_tables_csv(tables: Mapping[str, pd.DataFrame], out_dir: Path) -> list[Path]:
    """Write each table to ``<out_dir>/<name>.csv`` and return the paths."""
    out_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []
    for name, df in tables.items():
        path = out_dir / f"{name}.csv"
        df.to_csv(path, index=False)
        paths.append(path)
        log.info("Wrote %s (%d rows)", path, len(df))
    return paths
