"""Fund schemas shared by the gateway, the state store and the views."""

from fundmanager.schemas.fund import FORM_FIELDS, Fund, FundForm  # noqa: F401
