"""Document analyzer interface for the deal document risk scoring core."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..models.enums import DocumentType
from ..models.findings import DealBlocker, DocumentRisk, ExtractedEntity, MissingTerm


class IDocumentAnalyzer(ABC):
    """
    Abstract interface for document finding extraction.

    Rule-based and AI-backed implementations share these signatures so
    they can be layered and substituted for each other.
    """

    @property
    def name(self) -> str:
        """Short identifier recorded in analysis metadata."""
        return type(self).__name__

    @abstractmethod
    def extract_entities(self, text: str) -> List[ExtractedEntity]:
        """
        Extract entities (dates, amounts, durations, ...) from text.

        Args:
            text: Extracted document text.

        Returns:
            Entities in discovery order. May be empty.
        """
        pass

    @abstractmethod
    def identify_risks(self, text: str, document_type: DocumentType) -> List[DocumentRisk]:
        """
        Identify risks in the document.

        Args:
            text: Extracted document text.
            document_type: Classification of the document.

        Returns:
            Risks, each with a unique id. May be empty.
        """
        pass

    @abstractmethod
    def identify_missing_terms(
        self, text: str, document_type: DocumentType
    ) -> List[MissingTerm]:
        """
        Identify expected terms absent from the document.

        Args:
            text: Extracted document text.
            document_type: Selects the required-term checklist.

        Returns:
            Missing terms. May be empty.
        """
        pass

    @abstractmethod
    def identify_blockers(
        self,
        text: str,
        risks: Sequence[DocumentRisk],
        missing_terms: Sequence[MissingTerm],
    ) -> List[DealBlocker]:
        """
        Derive deal blockers from the text and earlier findings.

        Args:
            text: Extracted document text.
            risks: Risks identified for the document.
            missing_terms: Missing terms identified for the document.

        Returns:
            Blockers, each with a unique id.
        """
        pass

    @abstractmethod
    def generate_summary(self, text: str, document_type: DocumentType) -> str:
        """
        Produce a short human-readable summary of the document.

        Args:
            text: Extracted document text.
            document_type: Classification of the document.

        Returns:
            Summary text.
        """
        pass
