"""Risk score and required action models."""

from dataclasses import dataclass
from typing import Optional

from .enums import ActionPriority, ActionStatus, RiskGrade, ScoreTrend


@dataclass(frozen=True)
class RiskBreakdown:
    """Per-bucket risk contributions, each clamped to [0, 25] on its own."""
    missing_clauses: int = 0
    unfavorable_terms: int = 0
    compliance_issues: int = 0
    liability_exposure: int = 0


@dataclass(frozen=True)
class RiskScore:
    """
    Normalised document risk score.

    overall is in [0, 100] where 0 is the lowest risk. The breakdown
    buckets are capped independently, so they need not sum to overall.
    """
    overall: int
    breakdown: RiskBreakdown
    grade: RiskGrade
    trend: Optional[ScoreTrend] = None


@dataclass(frozen=True)
class RequiredAction:
    """A prioritised remediation item."""
    id: str
    priority: ActionPriority
    action: str
    reason: str
    deadline: Optional[str] = None
    status: ActionStatus = ActionStatus.PENDING
