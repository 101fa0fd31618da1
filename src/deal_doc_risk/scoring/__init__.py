"""Risk scoring and action prioritization."""

from .risk_scorer import (
    CATEGORY_BUCKETS,
    RiskScorer,
    format_risk_score,
    grade_color,
    round_half_up,
    severity_label,
)
from .action_prioritizer import ActionPrioritizer

__all__ = [
    "CATEGORY_BUCKETS",
    "RiskScorer",
    "ActionPrioritizer",
    "format_risk_score",
    "grade_color",
    "round_half_up",
    "severity_label",
]
