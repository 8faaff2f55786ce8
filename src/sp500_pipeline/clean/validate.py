"""Validation of the observation series.

Every record is validated against the strict Pydantic `Observation` model;
dates must be unique and strictly increasing. Any violation is a structural
problem with the input and aborts the run with `SchemaViolation`, naming the
offending record and field. Missing values are not violations: they are
carried as nulls into the analytical stages.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any

import pandas as pd
from pydantic import ValidationError

from sp500_pipeline.models import OBSERVATION_FIELDS, Observation
from sp500_pipeline.stages.nulls import is_null

log = logging.getLogger(__name__)


class SchemaViolation(ValueError):
    """Raised when the input series does not match the observation schema.

    Attributes:
        fields: Names of the offending fields.
        record: Zero-based position of the offending record, if any.
    """

    def __init__(self, message: str, fields: list[str] | None = None, record: int | None = None):
        super().__init__(message)
        self.fields = fields or []
        self.record = record


def _coerce_date(value: Any) -> Any:
    """Turn timestamps and ISO strings into `datetime.date`; leave others as-is."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip())
        except ValueError:
            return value
    return value


def _prepare(rec: dict[str, Any]) -> dict[str, Any]:
    out = {k: (None if is_null(v) else v) for k, v in rec.items()}
    out["date"] = _coerce_date(out["date"])
    return out


def validate_observations(pdf: pd.DataFrame) -> pd.DataFrame:
    """Validate a raw observation frame and return it in canonical form.

    Args:
        pdf: Frame with at least the `OBSERVATION_FIELDS` columns.

    Returns:
        DataFrame with exactly the schema columns, `date` as datetime64 and
        metrics as float64 (missing values as NaN), in input order.

    Raises:
        SchemaViolation: on a missing column, a record failing the model, or
            duplicate / non-increasing dates.
    """
    missing = [c for c in OBSERVATION_FIELDS if c not in pdf.columns]
    if missing:
        raise SchemaViolation(f"Missing required column(s): {', '.join(missing)}", fields=missing)

    observations: list[Observation] = []
    for i, rec in enumerate(pdf[list(OBSERVATION_FIELDS)].to_dict(orient="records")):
        prepared = _prepare(rec)
        try:
            observations.append(Observation.model_validate(prepared))
        except ValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise SchemaViolation(
                f"Record {i} (date={rec.get('date')!r}) has invalid field(s) "
                f"{', '.join(fields)}: {e.errors()[0]['msg']}",
                fields=fields,
                record=i,
            ) from e

        if i > 0 and observations[i].date <= observations[i - 1].date:
            kind = "Duplicate" if observations[i].date == observations[i - 1].date else "Out-of-order"
            raise SchemaViolation(
                f"{kind} date at record {i}: {observations[i].date} follows "
                f"{observations[i - 1].date}",
                fields=["date"],
                record=i,
            )

    out = pd.DataFrame(
        [o.model_dump() for o in observations], columns=list(OBSERVATION_FIELDS)
    )
    out["date"] = pd.to_datetime(out["date"])
    for col in OBSERVATION_FIELDS[1:]:
        out[col] = out[col].astype("float64")

    log.info("Validated %d observations", len(out))
    return out
