from __future__ import annotations

import logging

from printbill.debounce import Debouncer
from printbill.errors import BackendUnavailableError
from printbill.models.bill import Bill
from printbill.services.bill_service import BillService
from printbill.settings import settings

logger = logging.getLogger(__name__)


class BillListView:
    """The visible bill list and the search text that filters it."""

    def __init__(self, service: BillService, debounce_ms: int | None = None) -> None:
        self.service = service
        self.search_text = ""
        self.bills: list[Bill] = []
        self.error: str | None = None
        if debounce_ms is None:
            debounce_ms = settings.search_debounce_ms
        self._debouncer = Debouncer(debounce_ms / 1000, self.refresh)

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    def refresh(self) -> list[Bill]:
        """Re-read the list for the current search text. Keeps the old list on failure."""
        try:
            self.bills = self.service.list_bills(self.search_text)
            self.error = None
        except BackendUnavailableError as exc:
            logger.warning("Listing bills failed search=%r: %s", self.search_text, exc)
            self.error = exc.user_message
        return self.bills

    def on_search_input(self, text: str) -> None:
        """Keystroke handler for front-ends that see every key press.

        The query runs once typing pauses. Line-at-a-time callers such as the
        CLI use :meth:`search_now` instead.
        """
        self.search_text = text
        if not text.strip():
            self._debouncer.cancel()
            self.refresh()
            return
        self._debouncer.call()

    def search_now(self, text: str) -> list[Bill]:
        self._debouncer.cancel()
        self.search_text = text
        return self.refresh()

    def clear_search(self) -> list[Bill]:
        return self.search_now("")
