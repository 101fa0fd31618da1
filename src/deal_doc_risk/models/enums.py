"""Enumerations for the deal document risk scoring core."""

from enum import Enum


class DocumentType(Enum):
    """Business document classifications."""
    CONTRACT = "contract"
    NDA = "nda"
    PROPOSAL = "proposal"
    AGREEMENT = "agreement"
    INVOICE = "invoice"
    SOW = "sow"
    MSA = "msa"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value) -> "DocumentType":
        """Normalise an external value, falling back to UNKNOWN."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class EntityType(Enum):
    """Kinds of entities extracted from document text."""
    PARTY_NAME = "party_name"
    DATE = "date"
    AMOUNT = "amount"
    TERM_DURATION = "term_duration"
    PAYMENT_TERMS = "payment_terms"
    LIABILITY_CLAUSE = "liability_clause"
    TERMINATION_CLAUSE = "termination_clause"
    CONFIDENTIALITY_CLAUSE = "confidentiality_clause"
    INDEMNIFICATION_CLAUSE = "indemnification_clause"
    GOVERNING_LAW = "governing_law"
    SIGNATURE = "signature"
    CONTACT_INFO = "contact_info"


class RiskCategory(Enum):
    """Categories of document risk."""
    MISSING_CLAUSE = "missing_clause"
    UNFAVORABLE_TERMS = "unfavorable_terms"
    COMPLIANCE_ISSUE = "compliance_issue"
    LIABILITY_EXPOSURE = "liability_exposure"
    TERMINATION_RISK = "termination_risk"
    PAYMENT_RISK = "payment_risk"
    LEGAL_AMBIGUITY = "legal_ambiguity"


class RiskSeverity(Enum):
    """Severity levels for risks."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TermImportance(Enum):
    """How important a missing term is."""
    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


class BlockerType(Enum):
    """Conditions that halt deal progress."""
    MISSING_SIGNATURE = "missing_signature"
    PENDING_APPROVAL = "pending_approval"
    LEGAL_REVIEW = "legal_review"
    NEGOTIATION_REQUIRED = "negotiation_required"
    COMPLIANCE_CHECK = "compliance_check"
    MISSING_DOCUMENT = "missing_document"


class RiskGrade(Enum):
    """Letter grades, A being the lowest risk."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class ScoreTrend(Enum):
    """Direction of a score relative to a previous analysis."""
    IMPROVING = "improving"
    STABLE = "stable"
    WORSENING = "worsening"


class ActionPriority(Enum):
    """Priority of a required action. Lower rank sorts first."""
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    ActionPriority.URGENT: 0,
    ActionPriority.HIGH: 1,
    ActionPriority.MEDIUM: 2,
    ActionPriority.LOW: 3,
}


class ActionStatus(Enum):
    """Lifecycle status of a required action."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
