"""In-memory analysis store."""

import threading
from typing import Dict, List, Optional

from ..interfaces.store import IAnalysisStore, StoredAnalysis


class InMemoryAnalysisStore(IAnalysisStore):
    """
    Dictionary-backed store for a single process.

    Keeps records by document id and an insertion-ordered list of
    document ids per deal.
    """

    def __init__(self):
        self._records: Dict[str, StoredAnalysis] = {}
        self._deal_documents: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def save(self, record: StoredAnalysis) -> None:
        with self._lock:
            previous = self._records.get(record.document_id)
            if previous is not None and previous.deal_id != record.deal_id:
                self._unlink(record.document_id, previous.deal_id)
            self._records[record.document_id] = record
            if record.deal_id is not None:
                documents = self._deal_documents.setdefault(record.deal_id, [])
                if record.document_id not in documents:
                    documents.append(record.document_id)

    def get(self, document_id: str) -> Optional[StoredAnalysis]:
        with self._lock:
            return self._records.get(document_id)

    def delete(self, document_id: str) -> bool:
        with self._lock:
            record = self._records.pop(document_id, None)
            if record is None:
                return False
            self._unlink(document_id, record.deal_id)
            return True

    def list_for_deal(self, deal_id: str) -> List[StoredAnalysis]:
        with self._lock:
            return [
                self._records[doc_id]
                for doc_id in self._deal_documents.get(deal_id, [])
                if doc_id in self._records
            ]

    def _unlink(self, document_id: str, deal_id: Optional[str]) -> None:
        """Remove a document from its deal association. Caller holds the lock."""
        if deal_id is None:
            return
        documents = self._deal_documents.get(deal_id)
        if documents and document_id in documents:
            documents.remove(document_id)
            if not documents:
                del self._deal_documents[deal_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
