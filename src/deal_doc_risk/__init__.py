"""
Deal Document Risk Scoring

Classifies business documents, extracts entities, risks, missing terms and
deal blockers, and turns them into a 0-100 risk score, a letter grade and
a prioritized list of required actions.
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import (
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
from .models.findings import DealBlocker, DocumentRisk, EntityLocation, ExtractedEntity, MissingTerm
from .models.scoring import RequiredAction, RiskBreakdown, RiskScore
from .models.analysis import DocumentAnalysis, DocumentInput
from .classifiers import DocumentClassifier
from .extractors import FallbackAnalyzer, OpenAIAnalyzer, RuleBasedAnalyzer, create_analyzer
from .scoring import ActionPrioritizer, RiskScorer, format_risk_score, grade_color, severity_label
from .config import (
    AnalyzerSettings,
    ConfigurationError,
    ConfigurationManager,
    ScoringConfiguration,
    TermChecklists,
    TermRequirement,
    ValidationResult,
)
from .exceptions import (
    AnalyzerError,
    AnalyzerResponseError,
    DocumentNotFoundError,
    DocumentRiskError,
)
from .interfaces import IAnalysisStore, IDocumentAnalyzer, StoredAnalysis
from .serialization import AnalysisSerializer
from .storage import DatabaseManager, InMemoryAnalysisStore, SqlAnalysisStore
from .pipeline import AnalysisPipeline, PipelineConfig, PipelineStats

__all__ = [
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
    "DealBlocker",
    "DocumentRisk",
    "EntityLocation",
    "ExtractedEntity",
    "MissingTerm",
    "RequiredAction",
    "RiskBreakdown",
    "RiskScore",
    "DocumentAnalysis",
    "DocumentInput",
    "DocumentClassifier",
    "FallbackAnalyzer",
    "OpenAIAnalyzer",
    "RuleBasedAnalyzer",
    "create_analyzer",
    "ActionPrioritizer",
    "RiskScorer",
    "format_risk_score",
    "grade_color",
    "severity_label",
    "AnalyzerSettings",
    "ConfigurationError",
    "ConfigurationManager",
    "ScoringConfiguration",
    "TermChecklists",
    "TermRequirement",
    "ValidationResult",
    "AnalyzerError",
    "AnalyzerResponseError",
    "DocumentNotFoundError",
    "DocumentRiskError",
    "IAnalysisStore",
    "IDocumentAnalyzer",
    "StoredAnalysis",
    "AnalysisSerializer",
    "DatabaseManager",
    "InMemoryAnalysisStore",
    "SqlAnalysisStore",
    "AnalysisPipeline",
    "PipelineConfig",
    "PipelineStats",
]
