"""
Fund manager: the user-facing operations of the fund screen.

Each operation validates locally where needed, calls the gateway, and
records the outcome in the state store.  Backend failures are caught here
and turned into status messages; nothing raised by the gateway reaches the
routes.

After every successful mutation the full list is fetched again; the
new list is never patched locally.
"""

import logging
from typing import Any, Mapping, Optional

from fundmanager.core.exceptions import BackendCallFailed, FormValidationError, NotFoundException
from fundmanager.schemas.fund import FundForm
from fundmanager.services.gateway import FundGateway
from fundmanager.services.state import FundManagerState

logger = logging.getLogger(__name__)


class FundManager:
    """Runs add/update/delete/list/lookup against one state store."""

    def __init__(self, gateway: FundGateway, state: Optional[FundManagerState] = None):
        self._gateway = gateway
        self.state = state if state is not None else FundManagerState()

    # ── Queries ──

    async def fetch_all_funds(self, *, report_failure: bool = True) -> bool:
        """
        Replace the fund list with the backend's.

        On failure the list is left as it was.  ``report_failure=False`` is
        used for the refresh that follows a mutation, so the mutation's own
        success message stays visible.
        """
        try:
            funds = await self._gateway.list_all()
        except BackendCallFailed as exc:
            logger.warning("Could not load fund list: %s", exc.message)
            if report_failure:
                self.state.funds_load_failed()
            return False
        self.state.funds_loaded(funds)
        return True

    async def get_fund_by_id(self, lookup_id: Optional[str] = None) -> None:
        """Look up one fund by the text in the lookup field."""
        if lookup_id is not None:
            self.state.lookup_requested(lookup_id)
        try:
            fund = await self._gateway.get(self.state.lookup_id)
        except BackendCallFailed as exc:
            logger.info("Lookup of fund %r failed: %s", self.state.lookup_id, exc.message)
            self.state.lookup_failed()
            return
        self.state.lookup_succeeded(fund)

    # ── Form ──

    def change_form(self, values: Mapping[str, Any]) -> None:
        self.state.form_changed(values)

    def edit_fund(self, fund_id: int) -> None:
        """
        Enter update mode for a row of the current list.

        Raises :class:`NotFoundException` if the id is not in the list.
        """
        fund = self.state.find_fund(fund_id)
        if fund is None:
            raise NotFoundException("Fund", fund_id)
        self.state.editing_started(fund)

    def cancel_edit(self) -> None:
        self.state.form_reset()

    # ── Commands ──

    async def add_fund(self) -> bool:
        """Create a fund from the draft; returns True on success."""
        try:
            validate_form(self.state.form)
        except FormValidationError as exc:
            self.state.validation_rejected(exc.message)
            return False

        try:
            await self._gateway.add(self.state.form.to_payload())
        except BackendCallFailed:
            self.state.add_failed()
            return False

        logger.info("Added fund %s", self.state.form.fund_id)
        self.state.fund_added()
        await self.fetch_all_funds(report_failure=False)
        self.state.form_reset()
        return True

    async def update_fund(self) -> bool:
        """Full replacement of the fund named by the draft's ``fundId``."""
        try:
            validate_form(self.state.form)
        except FormValidationError as exc:
            self.state.validation_rejected(exc.message)
            return False

        try:
            await self._gateway.update(self.state.form.to_payload())
        except BackendCallFailed:
            self.state.update_failed()
            return False

        logger.info("Updated fund %s", self.state.form.fund_id)
        self.state.fund_updated()
        await self.fetch_all_funds(report_failure=False)
        self.state.form_reset()
        return True

    async def delete_fund(self, fund_id: Any) -> bool:
        """Delete by id; the backend's reply becomes the status message."""
        try:
            message = await self._gateway.delete(fund_id)
        except BackendCallFailed:
            self.state.delete_failed()
            return False

        logger.info("Deleted fund %s", fund_id)
        self.state.fund_deleted(message)
        await self.fetch_all_funds(report_failure=False)
        return True


# ── Validation ──

# Required fields, checked in order; the first blank one is reported.
_REQUIRED_FIELDS = (("fund_id", "fundId"), ("fund_name", "fundName"))


def validate_form(form: FundForm) -> None:
    """
    Reject a draft whose ``fundId`` or ``fundName`` is blank.

    Nothing else is checked locally: ranges, enum membership and dates are
    left to the backend.
    """
    for attribute, wire_name in _REQUIRED_FIELDS:
        if not getattr(form, attribute).strip():
            raise FormValidationError(f"Please fill out the {wire_name} field.", field=wire_name)
