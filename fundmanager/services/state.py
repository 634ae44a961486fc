"""
State store for the fund management screen.

One container holds everything the page renders.  It is only changed through
the named operations below, one per outcome, so every transition between
create and update mode can be followed in the logs.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from fundmanager.schemas.fund import Fund, FundForm

logger = logging.getLogger(__name__)

# ── Status messages ──
MSG_FETCH_FAILED = "Failed to fetch funds."
MSG_ADDED = "Mutual fund added successfully."
MSG_ADD_FAILED = "Error adding fund."
MSG_UPDATED = "Mutual fund updated successfully."
MSG_UPDATE_FAILED = "Error updating fund."
MSG_DELETED = "Deleted successfully."
MSG_DELETE_FAILED = "Error deleting fund."
MSG_NOT_FOUND = "Fund not found."


@dataclass
class FundManagerState:
    """
    Everything the fund management page shows.

    ``funds`` is a copy of the backend's last list response; ``form`` is the
    draft behind the add/edit form; ``edit_mode`` is False while creating and
    True while updating.
    """

    funds: List[Fund] = field(default_factory=list)
    form: FundForm = field(default_factory=FundForm)
    lookup_id: str = ""
    lookup_result: Optional[Fund] = None
    status_message: str = ""
    edit_mode: bool = False

    def _set_status(self, message: str) -> None:
        self.status_message = message
        logger.debug("Status message set to %r", message)

    # ── List ──

    def funds_loaded(self, funds: List[Fund]) -> None:
        self.funds = list(funds)
        logger.debug("Fund list replaced (%d rows)", len(self.funds))

    def funds_load_failed(self) -> None:
        self._set_status(MSG_FETCH_FAILED)

    # ── Form ──

    def form_changed(self, values: Mapping[str, Any]) -> None:
        """Apply submitted form fields; ``fundId`` stays fixed in update mode."""
        self.form = self.form.with_changes(values, lock_fund_id=self.edit_mode)

    def validation_rejected(self, message: str) -> None:
        self._set_status(message)

    def editing_started(self, fund: Fund) -> None:
        self.form = FundForm.from_fund(fund)
        self.edit_mode = True
        self._set_status(f"Editing fund with ID {fund.fund_id}")
        logger.debug("Entered update mode for fund %s", fund.fund_id)

    def form_reset(self) -> None:
        self.form = FundForm()
        self.edit_mode = False
        logger.debug("Form reset; create mode")

    # ── Mutations ──

    def fund_added(self) -> None:
        self._set_status(MSG_ADDED)

    def add_failed(self) -> None:
        self._set_status(MSG_ADD_FAILED)

    def fund_updated(self) -> None:
        self._set_status(MSG_UPDATED)

    def update_failed(self) -> None:
        self._set_status(MSG_UPDATE_FAILED)

    def fund_deleted(self, message: str) -> None:
        self._set_status(message or MSG_DELETED)

    def delete_failed(self) -> None:
        self._set_status(MSG_DELETE_FAILED)

    # ── Lookup ──

    def lookup_requested(self, lookup_id: str) -> None:
        self.lookup_id = lookup_id

    def lookup_succeeded(self, fund: Fund) -> None:
        self.lookup_result = fund
        self._set_status("")

    def lookup_failed(self) -> None:
        self.lookup_result = None
        self._set_status(MSG_NOT_FOUND)

    def find_fund(self, fund_id: int) -> Optional[Fund]:
        """Row in the current list with this id, if any."""
        return next((fund for fund in self.funds if fund.fund_id == fund_id), None)
