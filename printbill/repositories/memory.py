from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path

from printbill.constants import UTC
from printbill.errors import BackendUnavailableError, BillNotFoundError
from printbill.models.bill import Bill, BillDraft, BillPatch
from printbill.repositories.base import BillRepository

logger = logging.getLogger(__name__)


class InMemoryBillRepository(BillRepository):
    """Process-local bill store, optionally mirrored to a JSON file.

    Without ``path`` the store lives only as long as the object does. With a
    path, the file is read once at construction and rewritten after every
    mutation.
    """

    def __init__(self, path: str | None = None) -> None:
        self.path = Path(path) if path else None
        self._bills: dict[str, Bill] = {}
        if self.path is not None:
            self._load()

    def _load(self) -> None:
        assert self.path is not None
        if not self.path.exists():
            logger.info("No bill file at %s, starting empty", self.path)
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            bills = [Bill.model_validate(item) for item in raw]
        except (OSError, ValueError):
            logger.exception("Could not read bills from %s, starting empty", self.path)
            return
        self._bills = {bill.id: bill for bill in bills}
        logger.info("Loaded %d bills from %s", len(self._bills), self.path)

    def _commit(self, bills: dict[str, Bill]) -> None:
        """Persist ``bills`` and make them current; nothing changes on failure."""
        if self.path is None:
            self._bills = bills
            return
        payload = [bill.model_dump(mode="json") for bill in bills.values()]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise BackendUnavailableError(f"Could not write bills to {self.path}") from exc
        self._bills = bills

    def _ordered(self) -> list[Bill]:
        # Reverse insertion first so bills sharing a timestamp keep newest-first.
        newest_first = reversed(list(self._bills.values()))
        return sorted(newest_first, key=lambda b: b.created_at, reverse=True)

    def _get(self, bill_id: str) -> Bill:
        bill = self._bills.get(bill_id)
        if bill is None:
            raise BillNotFoundError(bill_id)
        return bill

    def list_all(self) -> list[Bill]:
        return [bill.model_copy() for bill in self._ordered()]

    def get_by_id(self, bill_id: str) -> Bill:
        return self._get(bill_id).model_copy()

    def search(self, term: str) -> list[Bill]:
        if not term.strip():
            return self.list_all()
        return [bill.model_copy() for bill in self._ordered() if bill.matches(term)]

    def create(self, draft: BillDraft) -> Bill:
        bill = Bill(
            **draft.model_dump(exclude={"total_amount"}),
            id=str(uuid.uuid4()),
            created_at=datetime.now(UTC),
        )
        self._commit({**self._bills, bill.id: bill})
        return bill.model_copy()

    def update(self, bill_id: str, patch: BillPatch) -> Bill:
        current = self._get(bill_id)
        merged = patch.apply_to(current)
        self._commit({**self._bills, bill_id: merged})
        return merged.model_copy()

    def delete(self, bill_id: str) -> bool:
        self._get(bill_id)
        self._commit({key: bill for key, bill in self._bills.items() if key != bill_id})
        return True
