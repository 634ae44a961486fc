"""
Pydantic schemas for fund records and the fund form.

Two shapes are kept apart on purpose:

- :class:`Fund` is what the backend returns.  It is parsed leniently: only
  ``fundId`` is required, everything else may be missing or null, and extra
  fields are preserved for the lookup dump.
- :class:`FundForm` is the in-progress draft behind the HTML form.  Every
  field is text until the draft is turned into a request payload by
  :meth:`FundForm.to_payload`.

Wire names are camelCase (the backend's JSON); Python attributes are
snake_case with camelCase aliases.
"""

import math
import re
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

# Ordered field names shared by the form and the table columns.
FORM_FIELDS = (
    "fundId",
    "fundName",
    "category",
    "riskLevel",
    "aum",
    "expenseRatio",
    "nav",
    "launchDate",
    "description",
)

DECIMAL_FIELDS = ("aum", "expenseRatio", "nav")

# Leading decimal literal, as accepted by a browser's number parsing.
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class FundCategory(str, Enum):
    """Options offered by the category dropdown."""

    EQUITY = "Equity"
    DEBT = "Debt"
    HYBRID = "Hybrid"
    MONEY_MARKET = "Money Market"


class RiskLevel(str, Enum):
    """Options offered by the risk-level dropdown."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


Number = Union[int, float]


def parse_number(text: str) -> Optional[Number]:
    """
    Parse the whole (trimmed) text as a number.

    Integral values come back as ``int``.  Anything that is not entirely a
    decimal literal yields ``None``, which is sent to the backend as JSON
    ``null``.  So does a literal too large for a float.
    """
    stripped = text.strip()
    if not _NUMBER_PREFIX.fullmatch(stripped):
        return None
    value = float(stripped)
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def parse_decimal(text: str) -> Optional[float]:
    """
    Parse the leading decimal literal of ``text``.

    ``"12.5"`` gives ``12.5`` and ``"12abc"`` gives ``12.0``; text without a
    numeric prefix yields ``None``, as does a prefix that overflows a float.
    """
    match = _NUMBER_PREFIX.match(text.strip())
    if match is None:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def to_text(value: Any) -> str:
    """Render a backend value as form text: nullish becomes ``""``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Fund(BaseModel):
    """A fund record as returned by the backend."""

    fund_id: int = Field(..., alias="fundId", description="Unique fund identifier")
    fund_name: Optional[str] = Field(default=None, alias="fundName")
    category: Optional[str] = Field(default=None, examples=["Equity"])
    risk_level: Optional[str] = Field(default=None, alias="riskLevel", examples=["Moderate"])
    aum: Optional[float] = Field(default=None, description="Assets under management")
    expense_ratio: Optional[float] = Field(default=None, alias="expenseRatio", examples=[0.012])
    nav: Optional[float] = Field(default=None, description="Net asset value per unit")
    launch_date: Optional[str] = Field(default=None, alias="launchDate", examples=["2020-01-31"])
    description: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    _source: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @classmethod
    def from_backend(cls, body: Any) -> "Fund":
        """Validate a backend record and remember the body as it was sent."""
        fund = cls.model_validate(body)
        if isinstance(body, dict):
            fund._source = dict(body)
        return fund

    def to_wire(self) -> Dict[str, Any]:
        """The record keyed by wire names, extra backend fields included."""
        return self.model_dump(by_alias=True)

    def source(self) -> Dict[str, Any]:
        """
        The record exactly as the backend sent it: key order, number types
        and omitted fields untouched.  Falls back to :meth:`to_wire` for a
        record not read through :meth:`from_backend`.
        """
        return dict(self._source) if self._source is not None else self.to_wire()


class FundForm(BaseModel):
    """The fund form draft; every field is text."""

    fund_id: str = Field(default="", alias="fundId")
    fund_name: str = Field(default="", alias="fundName")
    category: str = ""
    risk_level: str = Field(default="", alias="riskLevel")
    aum: str = ""
    expense_ratio: str = Field(default="", alias="expenseRatio")
    nav: str = ""
    launch_date: str = Field(default="", alias="launchDate")
    description: str = ""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def from_fund(cls, fund: Fund) -> "FundForm":
        """Draft pre-filled from a record: numbers as text, nullish as ``""``."""
        wire = fund.to_wire()
        return cls.model_validate({name: to_text(wire.get(name)) for name in FORM_FIELDS})

    def with_changes(self, values: Mapping[str, Any], *, lock_fund_id: bool = False) -> "FundForm":
        """
        Return a copy with the submitted form fields applied.

        Keys are wire names; unknown keys are ignored.  With ``lock_fund_id``
        the draft keeps its current ``fundId`` whatever was submitted.
        """
        data = self.model_dump(by_alias=True)
        for name in FORM_FIELDS:
            if name in values:
                data[name] = "" if values[name] is None else str(values[name])
        if lock_fund_id:
            data["fundId"] = self.fund_id
        return FundForm.model_validate(data)

    def to_payload(self) -> Dict[str, Any]:
        """
        Build the JSON body for add/update.

        ``fundId`` is parsed as a number; ``aum``, ``expenseRatio`` and ``nav``
        are parsed as decimals with blank text meaning ``0``.  The remaining
        fields are sent as their text.
        """
        payload: Dict[str, Any] = self.model_dump(by_alias=True)
        payload["fundId"] = parse_number(self.fund_id)
        for name in DECIMAL_FIELDS:
            text = payload[name]
            payload[name] = parse_decimal(text) if text.strip() else 0
        return payload
