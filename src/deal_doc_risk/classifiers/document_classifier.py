"""Document type classification.

Maps raw text plus a filename onto one of the fixed DocumentType values,
which selects the required-term checklist used downstream.
"""

from dataclasses import dataclass
from typing import List

from ..models.enums import DocumentType


@dataclass
class FilenameRule:
    """Filename substrings that identify a document type."""
    document_type: DocumentType
    substrings: List[str]


@dataclass
class ContentPattern:
    """Content keywords associated with a document type."""
    document_type: DocumentType
    keywords: List[str]


class DocumentClassifier:
    """
    Keyword-based document classifier.

    Filename rules are checked first in priority order and the first
    hit wins. Otherwise each content pattern counts how many of its
    keywords occur in the text; the first pattern reaching min_matches
    wins, with no tie-break on the count itself.
    """

    def __init__(self, min_matches: int = 2):
        self._min_matches = min_matches
        self._filename_rules = self._build_filename_rules()
        self._content_patterns = self._build_content_patterns()

    def _build_filename_rules(self) -> List[FilenameRule]:
        """Filename rules in priority order."""
        return [
            FilenameRule(DocumentType.NDA, ["nda", "non-disclosure"]),
            FilenameRule(DocumentType.PROPOSAL, ["proposal"]),
            FilenameRule(DocumentType.CONTRACT, ["contract"]),
            FilenameRule(DocumentType.AGREEMENT, ["agreement"]),
            FilenameRule(DocumentType.INVOICE, ["invoice"]),
            FilenameRule(DocumentType.SOW, ["sow", "statement of work"]),
            FilenameRule(DocumentType.MSA, ["msa", "master service"]),
        ]

    def _build_content_patterns(self) -> List[ContentPattern]:
        """Content patterns in declared iteration order."""
        return [
            ContentPattern(
                DocumentType.NDA,
                ["non-disclosure", "confidential information", "proprietary"],
            ),
            ContentPattern(
                DocumentType.PROPOSAL,
                ["proposal", "proposed solution", "pricing", "quote"],
            ),
            ContentPattern(
                DocumentType.CONTRACT,
                ["agreement", "terms and conditions", "hereby agree"],
            ),
            ContentPattern(
                DocumentType.INVOICE,
                ["invoice", "bill to", "payment due", "amount due"],
            ),
            ContentPattern(
                DocumentType.SOW,
                ["statement of work", "deliverables", "scope of work"],
            ),
            ContentPattern(
                DocumentType.MSA,
                ["master service agreement", "master agreement"],
            ),
        ]

    def classify(self, text: str, filename: str) -> DocumentType:
        """
        Classify a document.

        Args:
            text: Extracted document text.
            filename: Original filename.

        Returns:
            The detected DocumentType, UNKNOWN if nothing matches.
        """
        by_name = self.classify_filename(filename)
        if by_name is not DocumentType.UNKNOWN:
            return by_name
        return self.classify_content(text)

    def classify_filename(self, filename: str) -> DocumentType:
        """Classify by filename substrings alone."""
        name_lower = (filename or "").lower()
        for rule in self._filename_rules:
            if any(s in name_lower for s in rule.substrings):
                return rule.document_type
        return DocumentType.UNKNOWN

    def classify_content(self, text: str) -> DocumentType:
        """Classify by counting content keywords."""
        text_lower = (text or "").lower()
        for pattern in self._content_patterns:
            if self.count_matches(text_lower, pattern) >= self._min_matches:
                return pattern.document_type
        return DocumentType.UNKNOWN

    @staticmethod
    def count_matches(text_lower: str, pattern: ContentPattern) -> int:
        return sum(1 for kw in pattern.keywords if kw in text_lower)
