"""Data models and enums for the deal document risk scoring core."""

from .enums import (
    ActionPriority,
    ActionStatus,
    BlockerType,
    DocumentType,
    EntityType,
    RiskCategory,
    RiskGrade,
    RiskSeverity,
    ScoreTrend,
    TermImportance,
)
from .findings import DealBlocker, DocumentRisk, EntityLocation, ExtractedEntity, MissingTerm
from .scoring import RequiredAction, RiskBreakdown, RiskScore
from .analysis import DocumentAnalysis, DocumentInput

__all__ = [
    # Enums
    "ActionPriority",
    "ActionStatus",
    "BlockerType",
    "DocumentType",
    "EntityType",
    "RiskCategory",
    "RiskGrade",
    "RiskSeverity",
    "ScoreTrend",
    "TermImportance",
    # Finding models
    "DealBlocker",
    "DocumentRisk",
    "EntityLocation",
    "ExtractedEntity",
    "MissingTerm",
    # Scoring models
    "RequiredAction",
    "RiskBreakdown",
    "RiskScore",
    # Aggregate models
    "DocumentAnalysis",
    "DocumentInput",
]
