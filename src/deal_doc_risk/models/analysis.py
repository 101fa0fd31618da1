"""Input and aggregate analysis models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enums import DocumentType
from .findings import DealBlocker, DocumentRisk, ExtractedEntity, MissingTerm
from .scoring import RequiredAction, RiskScore


@dataclass(frozen=True)
class DocumentInput:
    """
    Text handed to the core by the ingestion collaborator.

    The text is already extracted from its source format. confidence is
    the upstream extraction confidence and is only carried through.
    """
    text: str
    filename: str
    document_type: Optional[str] = None
    confidence: Optional[float] = None


@dataclass(frozen=True)
class DocumentAnalysis:
    """
    Complete analysis of a single document.

    Created once per upload. raw_text is a truncated snapshot for audit
    and debugging, not for re-analysis.
    """
    document_id: str
    filename: str
    document_type: DocumentType
    uploaded_at: str
    analyzed_at: str
    risk_score: RiskScore
    summary: str
    entities: List[ExtractedEntity] = field(default_factory=list)
    risks: List[DocumentRisk] = field(default_factory=list)
    missing_terms: List[MissingTerm] = field(default_factory=list)
    blockers: List[DealBlocker] = field(default_factory=list)
    required_actions: List[RequiredAction] = field(default_factory=list)
    raw_text: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
