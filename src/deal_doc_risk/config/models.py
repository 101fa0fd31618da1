"""Data models for configuration management."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..models.enums import DocumentType, RiskCategory, RiskGrade, RiskSeverity, TermImportance


DEFAULT_CATEGORY_WEIGHTS: Dict[RiskCategory, int] = {
    RiskCategory.MISSING_CLAUSE: 15,
    RiskCategory.UNFAVORABLE_TERMS: 20,
    RiskCategory.COMPLIANCE_ISSUE: 25,
    RiskCategory.LIABILITY_EXPOSURE: 30,
    RiskCategory.TERMINATION_RISK: 15,
    RiskCategory.PAYMENT_RISK: 20,
    RiskCategory.LEGAL_AMBIGUITY: 10,
}

DEFAULT_SEVERITY_MULTIPLIERS: Dict[RiskSeverity, float] = {
    RiskSeverity.LOW: 0.25,
    RiskSeverity.MEDIUM: 0.5,
    RiskSeverity.HIGH: 0.75,
    RiskSeverity.CRITICAL: 1.0,
}

DEFAULT_IMPORTANCE_PENALTIES: Dict[TermImportance, int] = {
    TermImportance.REQUIRED: 10,
    TermImportance.RECOMMENDED: 5,
    TermImportance.OPTIONAL: 2,
}

# Inclusive upper bounds; anything above the last band is F.
DEFAULT_GRADE_BANDS: List[Tuple[int, RiskGrade]] = [
    (20, RiskGrade.A),
    (40, RiskGrade.B),
    (60, RiskGrade.C),
    (80, RiskGrade.D),
]


@dataclass
class ScoringConfiguration:
    """
    Tables driving the risk scoring engine.

    The defaults reproduce the production scoring rules; callers can load
    alternative tables through ConfigurationManager.
    """
    category_weights: Dict[RiskCategory, int] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS)
    )
    default_weight: int = 10
    severity_multipliers: Dict[RiskSeverity, float] = field(
        default_factory=lambda: dict(DEFAULT_SEVERITY_MULTIPLIERS)
    )
    importance_penalties: Dict[TermImportance, int] = field(
        default_factory=lambda: dict(DEFAULT_IMPORTANCE_PENALTIES)
    )
    blocker_penalty: int = 5
    overall_cap: int = 100
    bucket_cap: int = 25
    grade_bands: List[Tuple[int, RiskGrade]] = field(
        default_factory=lambda: list(DEFAULT_GRADE_BANDS)
    )

    def weight_for(self, category: RiskCategory) -> int:
        return self.category_weights.get(category, self.default_weight)


@dataclass
class TermRequirement:
    """A checklist entry: a term and the keywords that evidence it."""
    term: str
    keywords: List[str]
    importance: TermImportance = TermImportance.REQUIRED

    def is_present(self, text_lower: str) -> bool:
        """Check whether any keyword appears in lower-cased text."""
        return any(kw.lower() in text_lower for kw in self.keywords)


@dataclass
class TermChecklists:
    """
    Required-term checklists keyed by document type.

    Types without their own checklist reuse the fallback type's list.
    """
    checklists: Dict[DocumentType, List[TermRequirement]] = field(default_factory=dict)
    fallback_type: DocumentType = DocumentType.CONTRACT

    def for_type(self, document_type: DocumentType) -> List[TermRequirement]:
        if document_type in self.checklists:
            return self.checklists[document_type]
        return self.checklists.get(self.fallback_type, [])


@dataclass
class AnalyzerSettings:
    """Settings for the optional AI-backed analyzer."""
    openai_api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    timeout: float = 30.0  # seconds, per remote call
    max_retries: int = 1
    entity_char_limit: int = 8000
    risk_char_limit: int = 8000
    summary_char_limit: int = 4000
    summary_max_tokens: int = 200

    @property
    def is_configured(self) -> bool:
        """True when a credential for the remote analyzer is present."""
        return bool(self.openai_api_key and self.openai_api_key.strip())

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "AnalyzerSettings":
        """
        Build settings from environment variables.

        Reads OPENAI_API_KEY, DOC_RISK_OPENAI_MODEL, DOC_RISK_OPENAI_TIMEOUT
        and DOC_RISK_OPENAI_MAX_RETRIES.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            model=env.get("DOC_RISK_OPENAI_MODEL", defaults.model),
            timeout=float(env.get("DOC_RISK_OPENAI_TIMEOUT", defaults.timeout)),
            max_retries=int(env.get("DOC_RISK_OPENAI_MAX_RETRIES", defaults.max_retries)),
        )


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result


@dataclass
class SystemConfiguration:
    """Complete configuration of the scoring core."""
    scoring: ScoringConfiguration = field(default_factory=ScoringConfiguration)
    checklists: Optional[TermChecklists] = None
    version: int = 1
    metadata: Dict[str, Any] = field(default_factory=dict)
