from __future__ import annotations


# =============================================================================
# task_table.py (tabular records -> Task models)
#
# Task data usually arrives as a table (a DataFrame built from a query,
# a CSV, a spreadsheet...). This module turns rows into validated Task
# models while keeping the row order, which is the chart's row order.
#
#   - blank rows are skipped (with a warning)
#   - NaN / NaT cells become None before Pydantic sees them
#   - validation errors are re-raised with the offending row number
# =============================================================================

import logging
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd
from pydantic import ValidationError

from gantt_models import Task

logger = logging.getLogger(__name__)

TASK_COLUMNS = ["label", "date", "status", "type", "meeting"]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _clean_record(record: Mapping[str, Any]) -> Dict[str, Any]:
    # pandas will represent blanks as NaN (float), which pydantic treats as an invalid string.
    return {k: (None if _is_blank(v) else v) for k, v in record.items() if k in TASK_COLUMNS}


def tasks_from_records(records: Iterable[Mapping[str, Any]]) -> List[Task]:
    out: List[Task] = []
    for row_no, record in enumerate(records, start=1):
        cleaned = _clean_record(record)
        if all(v is None for v in cleaned.values()):
            logger.warning("skipping blank task row %d", row_no)
            continue
        try:
            out.append(Task(**cleaned))
        except ValidationError as ve:
            raise ValueError(f"Task row {row_no} is invalid: {ve}") from ve
    return out


def tasks_from_dataframe(df: pd.DataFrame) -> List[Task]:
    """Validate a DataFrame of tasks. Required columns: label, date, status."""
    missing = [c for c in ("label", "date", "status") if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required column(s): {', '.join(missing)}. Expected: {', '.join(TASK_COLUMNS)}.")
    return tasks_from_records(df.to_dict(orient="records"))


def tasks_to_dataframe(tasks: Iterable[Task]) -> pd.DataFrame:
    return pd.DataFrame([t.model_dump() for t in tasks], columns=TASK_COLUMNS)
