"""
View helpers: turn the state store into what the page template renders.

Kept free of FastAPI so the rendering rules (banner class, table columns,
cell text) can be tested on their own.
"""

import json
from typing import Any, Dict, List, Optional

from fundmanager.core.config import settings
from fundmanager.schemas.fund import FORM_FIELDS, Fund, FundCategory, RiskLevel, to_text
from fundmanager.services.state import FundManagerState

ACTIONS_COLUMN = "Actions"

# Substrings that mark a status message as an error (case-insensitive).
_ERROR_MARKERS = ("error", "failed")

# One entry per form input, in FORM_FIELDS order.
FORM_INPUTS: List[Dict[str, Any]] = [
    {"name": "fundId", "type": "number", "placeholder": "Fund ID"},
    {"name": "fundName", "type": "text", "placeholder": "Fund Name"},
    {
        "name": "category",
        "type": "select",
        "options": [("", "Select Category")] + [(c.value, c.value) for c in FundCategory],
    },
    {
        "name": "riskLevel",
        "type": "select",
        "options": [("", "Select Risk")] + [(r.value, r.value) for r in RiskLevel],
    },
    {"name": "aum", "type": "text", "placeholder": "AUM (numbers)"},
    {"name": "expenseRatio", "type": "text", "placeholder": "Expense Ratio (e.g. 0.012)"},
    {"name": "nav", "type": "text", "placeholder": "NAV"},
    {"name": "launchDate", "type": "date", "placeholder": "Launch Date"},
    {"name": "description", "type": "text", "placeholder": "Short description"},
]


def banner_class(message: str) -> Optional[str]:
    """``"error"``/``"success"`` for the status banner, ``None`` when empty."""
    if not message:
        return None
    lowered = message.lower()
    return "error" if any(marker in lowered for marker in _ERROR_MARKERS) else "success"


def table_columns() -> List[str]:
    return [*FORM_FIELDS, ACTIONS_COLUMN]


def cell_text(value: Any) -> str:
    """Table cell text; booleans render as nothing, like null."""
    if isinstance(value, bool):
        return ""
    return to_text(value)


def table_rows(funds: List[Fund]) -> List[Dict[str, Any]]:
    rows = []
    for fund in funds:
        wire = fund.to_wire()
        rows.append(
            {
                "fund_id": fund.fund_id,
                "cells": [cell_text(wire.get(name)) for name in FORM_FIELDS],
            }
        )
    return rows


def build_page_context(state: FundManagerState) -> Dict[str, Any]:
    """Template context for ``index.html``."""
    values = state.form.model_dump(by_alias=True)
    inputs = [
        {
            **field,
            "value": values[field["name"]],
            "readonly": state.edit_mode and field["name"] == "fundId",
        }
        for field in FORM_INPUTS
    ]
    lookup_dump = (
        json.dumps(state.lookup_result.source(), indent=2)
        if state.lookup_result is not None
        else None
    )
    return {
        "title": settings.PROJECT_NAME,
        "status_message": state.status_message,
        "banner_class": banner_class(state.status_message),
        "edit_mode": state.edit_mode,
        "form_heading": "Edit Fund" if state.edit_mode else "Add Fund",
        "inputs": inputs,
        "lookup_id": state.lookup_id,
        "lookup_dump": lookup_dump,
        "columns": table_columns(),
        "rows": table_rows(state.funds),
    }
