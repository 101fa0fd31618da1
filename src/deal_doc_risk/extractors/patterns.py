"""Pattern catalog for rule-based document analysis.

This module holds the regex families, clause keyword sets, unfavorable
language patterns and default term checklists used when no AI analyzer
is available.
"""

import re
from dataclasses import dataclass
from typing import List, Pattern

from ..config.models import TermChecklists, TermRequirement
from ..models.enums import DocumentType, EntityType, RiskSeverity


@dataclass
class EntityPattern:
    """A regex family producing entities of one type."""
    entity_type: EntityType
    patterns: List[Pattern[str]]
    confidence: float


@dataclass
class ClauseCheck:
    """A standard clause and the keywords that evidence it."""
    name: str
    keywords: List[str]


@dataclass
class UnfavorablePattern:
    """Language that makes a document less favorable."""
    title: str
    pattern: Pattern[str]
    severity: RiskSeverity


_MONTHS = (
    "January|February|March|April|May|June|July|August|"
    "September|October|November|December"
)

ENTITY_PATTERNS: List[EntityPattern] = [
    EntityPattern(
        entity_type=EntityType.DATE,
        patterns=[
            re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b"),
            re.compile(r"\b\d{1,2}-\d{1,2}-\d{2,4}\b"),
            re.compile(rf"\b(?:{_MONTHS})\s+\d{{1,2}},?\s+\d{{4}}\b", re.IGNORECASE),
        ],
        confidence=0.8,
    ),
    EntityPattern(
        entity_type=EntityType.AMOUNT,
        patterns=[re.compile(r"\$[\d,]+(?:\.\d{2})?")],
        confidence=0.9,
    ),
    EntityPattern(
        entity_type=EntityType.TERM_DURATION,
        patterns=[
            re.compile(r"(?:term|duration|period)\s+(?:of\s+)?\d+\s+(?:years?|months?|days?)", re.IGNORECASE),
            re.compile(r"\d+\s*(?:year|month|day)\s*(?:term|agreement|contract)", re.IGNORECASE),
        ],
        confidence=0.7,
    ),
]

STANDARD_CLAUSES: List[ClauseCheck] = [
    ClauseCheck("termination", ["termination", "terminate", "cancellation"]),
    ClauseCheck("liability", ["liability", "limitation of liability", "damages"]),
    ClauseCheck("indemnification", ["indemnify", "indemnification", "hold harmless"]),
    ClauseCheck("confidentiality", ["confidential", "proprietary", "non-disclosure"]),
    ClauseCheck("governing law", ["governing law", "jurisdiction", "venue"]),
]

UNFAVORABLE_PATTERNS: List[UnfavorablePattern] = [
    UnfavorablePattern("Unlimited Liability", re.compile(r"unlimited liability", re.IGNORECASE), RiskSeverity.HIGH),
    UnfavorablePattern("Rights Waiver", re.compile(r"waive.*rights?", re.IGNORECASE), RiskSeverity.MEDIUM),
    UnfavorablePattern("Auto-Renewal", re.compile(r"automatic renewal", re.IGNORECASE), RiskSeverity.LOW),
    UnfavorablePattern("Non-Compete Clause", re.compile(r"non-compete", re.IGNORECASE), RiskSeverity.MEDIUM),
]

SIGNATURE_KEYWORDS: List[str] = ["signature", "signed by"]


def default_checklists() -> TermChecklists:
    """Required-term checklists for contracts, NDAs and proposals."""
    return TermChecklists(
        checklists={
            DocumentType.CONTRACT: [
                TermRequirement("Effective Date", ["effective date", "commencement date", "start date"]),
                TermRequirement("Term Duration", ["term", "duration", "period"]),
                TermRequirement("Payment Terms", ["payment", "compensation", "fee", "price"]),
                TermRequirement("Termination Clause", ["termination", "terminate", "cancel"]),
                TermRequirement("Signatures", ["signature", "signed", "executed"]),
            ],
            DocumentType.NDA: [
                TermRequirement(
                    "Definition of Confidential Information",
                    ["confidential information", "proprietary information"],
                ),
                TermRequirement("Obligations of Receiving Party", ["receiving party", "recipient"]),
                TermRequirement("Term of Confidentiality", ["term", "duration", "period"]),
                TermRequirement("Permitted Disclosures", ["permitted disclosure", "exceptions"]),
            ],
            DocumentType.PROPOSAL: [
                TermRequirement("Scope of Work", ["scope", "deliverables", "services"]),
                TermRequirement("Timeline", ["timeline", "schedule", "milestones"]),
                TermRequirement("Pricing", ["price", "cost", "fee", "investment"]),
                TermRequirement("Terms and Conditions", ["terms", "conditions"]),
            ],
        },
        fallback_type=DocumentType.CONTRACT,
    )
