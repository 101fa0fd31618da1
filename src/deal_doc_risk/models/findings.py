"""Finding data models produced by document analyzers."""

from dataclasses import dataclass, field
from typing import List, Optional

from .enums import BlockerType, EntityType, RiskCategory, RiskSeverity, TermImportance


@dataclass(frozen=True)
class EntityLocation:
    """Where an entity was found in the source text."""
    page: Optional[int] = None
    position: Optional[str] = None  # "start-end" character span


@dataclass(frozen=True)
class ExtractedEntity:
    """
    Entity extracted from document text.

    Entities have no identity beyond their position in the
    sequence an analyzer returns.
    """
    type: EntityType
    value: str
    confidence: float
    location: Optional[EntityLocation] = None


@dataclass(frozen=True)
class DocumentRisk:
    """
    A named concern about document content.

    Category and severity together drive the scoring weight.
    """
    id: str
    category: RiskCategory
    severity: RiskSeverity
    title: str
    description: str
    recommendation: str
    related_clauses: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class MissingTerm:
    """An expected clause or field absent from the document."""
    term: str
    importance: TermImportance
    description: str
    impact: str


@dataclass(frozen=True)
class DealBlocker:
    """
    A condition that must be resolved before the deal can progress.

    Blockers are derived from risks, missing terms, or the signature check.
    """
    id: str
    type: BlockerType
    title: str
    description: str
    required_action: str
    assigned_to: Optional[str] = None
    due_date: Optional[str] = None
