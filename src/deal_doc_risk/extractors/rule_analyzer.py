"""Rule-based document analyzer.

This module implements IDocumentAnalyzer with regex and keyword rules.
It needs no external services and is the layer every other analyzer
falls back to.
"""

import re
import uuid
from typing import List, Optional, Sequence

from ..config.models import TermChecklists
from ..interfaces.analyzer import IDocumentAnalyzer
from ..models.enums import (
    BlockerType,
    DocumentType,
    RiskCategory,
    RiskSeverity,
    TermImportance,
)
from ..models.findings import (
    DealBlocker,
    DocumentRisk,
    EntityLocation,
    ExtractedEntity,
    MissingTerm,
)
from .patterns import (
    ENTITY_PATTERNS,
    SIGNATURE_KEYWORDS,
    STANDARD_CLAUSES,
    UNFAVORABLE_PATTERNS,
    default_checklists,
)


def _new_id() -> str:
    return str(uuid.uuid4())


class RuleBasedAnalyzer(IDocumentAnalyzer):
    """
    Pattern-matching analyzer.

    Every operation is a pure function of its inputs apart from the
    random identifiers assigned to risks and blockers.
    """

    def __init__(self, checklists: Optional[TermChecklists] = None):
        self._checklists = checklists or default_checklists()

    @property
    def name(self) -> str:
        return "rules"

    def extract_entities(self, text: str) -> List[ExtractedEntity]:
        """
        Collect every regex match as an entity.

        Families are applied in order (dates, amounts, durations) and
        overlapping matches from different patterns are all kept.
        """
        entities: List[ExtractedEntity] = []
        if not text:
            return entities

        for family in ENTITY_PATTERNS:
            for pattern in family.patterns:
                for match in pattern.finditer(text):
                    entities.append(
                        ExtractedEntity(
                            type=family.entity_type,
                            value=match.group(0),
                            confidence=family.confidence,
                            location=EntityLocation(position=f"{match.start()}-{match.end()}"),
                        )
                    )
        return entities

    def identify_risks(self, text: str, document_type: DocumentType) -> List[DocumentRisk]:
        """
        Flag absent standard clauses and unfavorable language.

        Clause presence and unfavorable patterns are checked independently.
        """
        risks: List[DocumentRisk] = []
        text = text or ""
        text_lower = text.lower()

        for clause in STANDARD_CLAUSES:
            if any(kw in text_lower for kw in clause.keywords):
                continue
            risks.append(
                DocumentRisk(
                    id=_new_id(),
                    category=RiskCategory.MISSING_CLAUSE,
                    severity=RiskSeverity.MEDIUM,
                    title=f"Missing {clause.name} clause",
                    description=f"The document does not appear to contain a {clause.name} clause.",
                    recommendation=f"Add a {clause.name} clause to protect your interests.",
                )
            )

        for unfavorable in UNFAVORABLE_PATTERNS:
            if not unfavorable.pattern.search(text):
                continue
            title_lower = unfavorable.title.lower()
            risks.append(
                DocumentRisk(
                    id=_new_id(),
                    category=RiskCategory.UNFAVORABLE_TERMS,
                    severity=unfavorable.severity,
                    title=unfavorable.title,
                    description=f"The document contains {title_lower} language that may be unfavorable.",
                    recommendation=f"Review and potentially negotiate the {title_lower} terms.",
                )
            )

        return risks

    def identify_missing_terms(
        self, text: str, document_type: DocumentType
    ) -> List[MissingTerm]:
        """Report checklist entries whose keywords are all absent."""
        text_lower = (text or "").lower()
        missing: List[MissingTerm] = []

        for requirement in self._checklists.for_type(document_type):
            if requirement.is_present(text_lower):
                continue
            missing.append(
                MissingTerm(
                    term=requirement.term,
                    importance=requirement.importance,
                    description=f"The document is missing a {requirement.term} section.",
                    impact=f"Without {requirement.term}, the document may be incomplete or unenforceable.",
                )
            )
        return missing

    def identify_blockers(
        self,
        text: str,
        risks: Sequence[DocumentRisk],
        missing_terms: Sequence[MissingTerm],
    ) -> List[DealBlocker]:
        """
        Derive blockers from the signature check, critical risks and
        required missing terms.
        """
        text_lower = (text or "").lower()
        blockers: List[DealBlocker] = []

        if not any(kw in text_lower for kw in SIGNATURE_KEYWORDS):
            blockers.append(
                DealBlocker(
                    id=_new_id(),
                    type=BlockerType.MISSING_SIGNATURE,
                    title="Signatures Required",
                    description="The document requires signatures to be legally binding.",
                    required_action="Obtain signatures from all parties.",
                )
            )

        for risk in risks:
            if risk.severity is not RiskSeverity.CRITICAL:
                continue
            blockers.append(
                DealBlocker(
                    id=_new_id(),
                    type=BlockerType.LEGAL_REVIEW,
                    title=f"Critical Risk: {risk.title}",
                    description=risk.description,
                    required_action=risk.recommendation,
                )
            )

        for term in missing_terms:
            if term.importance is not TermImportance.REQUIRED:
                continue
            blockers.append(
                DealBlocker(
                    id=_new_id(),
                    type=BlockerType.NEGOTIATION_REQUIRED,
                    title=f"Missing: {term.term}",
                    description=term.description,
                    required_action=f"Add {term.term} to the document.",
                )
            )

        return blockers

    def generate_summary(self, text: str, document_type: DocumentType) -> str:
        """Word count plus the opening of the first paragraph."""
        text = text or ""
        word_count = len(re.split(r"\s+", text))
        first_paragraph = text.split("\n\n")[0][:200]
        return (
            f"This is a {document_type.value} document containing approximately "
            f"{word_count} words. {first_paragraph}..."
        )
