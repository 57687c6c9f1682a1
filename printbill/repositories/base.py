from abc import ABC, abstractmethod

from printbill.models.bill import Bill, BillDraft, BillPatch


class BillRepository(ABC):
    """CRUD + search over bills.

    Every mutation is durable before it returns. Lookups of unknown ids raise
    ``BillNotFoundError``; transport failures raise ``BackendUnavailableError``.
    Listings are ordered newest ``created_at`` first.
    """

    @abstractmethod
    def list_all(self) -> list[Bill]: ...

    @abstractmethod
    def get_by_id(self, bill_id: str) -> Bill: ...

    @abstractmethod
    def search(self, term: str) -> list[Bill]: ...

    @abstractmethod
    def create(self, draft: BillDraft) -> Bill: ...

    @abstractmethod
    def update(self, bill_id: str, patch: BillPatch) -> Bill: ...

    @abstractmethod
    def delete(self, bill_id: str) -> bool: ...
