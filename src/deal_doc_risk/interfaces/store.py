"""Analysis store interface for the deal document risk scoring core."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ..models.analysis import DocumentAnalysis


@dataclass(frozen=True)
class StoredAnalysis:
    """
    An analysis together with the full text it was computed from.

    The retained source text is what makes re-analysis possible; the
    analysis itself only keeps a truncated snapshot.
    """
    analysis: DocumentAnalysis
    source_text: str
    deal_id: Optional[str] = None

    @property
    def document_id(self) -> str:
        return self.analysis.document_id


class IAnalysisStore(ABC):
    """
    Abstract key-value store for document analyses.

    The scoring core never owns this state; the pipeline receives a store
    by injection.
    """

    @abstractmethod
    def save(self, record: StoredAnalysis) -> None:
        """
        Insert or replace the record for its document id.

        Args:
            record: The analysis and retained source text.
        """
        pass

    @abstractmethod
    def get(self, document_id: str) -> Optional[StoredAnalysis]:
        """
        Look up a stored analysis.

        Args:
            document_id: Document identifier.

        Returns:
            The stored record, or None if unknown.
        """
        pass

    @abstractmethod
    def delete(self, document_id: str) -> bool:
        """
        Remove a stored analysis and its deal association.

        Returns:
            True if a record existed.
        """
        pass

    @abstractmethod
    def list_for_deal(self, deal_id: str) -> List[StoredAnalysis]:
        """
        List analyses associated with a deal, oldest first.

        Args:
            deal_id: CRM deal identifier.
        """
        pass
