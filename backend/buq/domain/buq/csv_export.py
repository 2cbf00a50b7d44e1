"""CSV rendering of the quantification preparation report."""

from __future__ import annotations

import csv
import io
from typing import Mapping
from uuid import UUID

from .types import BottomUpQuantification

REPORT_FILENAME = "buq_quantification_preparation_report.csv"

HEADERS = (
    "Orderable ID",
    "Annual Adjusted Consumption",
    "Verified Annual Adjusted Consumption",
    "Forecasted Demand",
    "Remark",
)


def _cell(value: object) -> str:
    return "" if value is None else str(value)


def render_preparation_report(
    buq: BottomUpQuantification, remark_names: Mapping[UUID, str | None]
) -> bytes:
    """One row per line item, in line-item order, with remarks shown by name."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADERS)
    for item in buq.line_items:
        remark = remark_names.get(item.remark_id) if item.remark_id else None
        writer.writerow(
            [
                _cell(item.orderable_id),
                _cell(item.annual_adjusted_consumption),
                _cell(item.verified_annual_adjusted_consumption),
                _cell(item.forecasted_demand),
                _cell(remark),
            ]
        )
    return buffer.getvalue().encode("utf-8")
