"""Risk scoring engine.

Aggregates risks, missing terms and blockers into a 0-100 score, a
four-bucket breakdown and a letter grade. Scoring is a pure reduction over
the inputs, so reordering any input collection yields the same score.
"""

import math
from dataclasses import replace
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..config.models import ScoringConfiguration
from ..models.enums import RiskCategory, RiskGrade, RiskSeverity, ScoreTrend
from ..models.findings import DealBlocker, DocumentRisk, MissingTerm
from ..models.scoring import RiskBreakdown, RiskScore


MISSING_CLAUSES = "missing_clauses"
UNFAVORABLE_TERMS = "unfavorable_terms"
COMPLIANCE_ISSUES = "compliance_issues"
LIABILITY_EXPOSURE = "liability_exposure"

BUCKETS: Tuple[str, ...] = (
    MISSING_CLAUSES,
    UNFAVORABLE_TERMS,
    COMPLIANCE_ISSUES,
    LIABILITY_EXPOSURE,
)

# Every category routes into exactly one breakdown bucket.
CATEGORY_BUCKETS: Dict[RiskCategory, str] = {
    RiskCategory.MISSING_CLAUSE: MISSING_CLAUSES,
    RiskCategory.UNFAVORABLE_TERMS: UNFAVORABLE_TERMS,
    RiskCategory.TERMINATION_RISK: UNFAVORABLE_TERMS,
    RiskCategory.PAYMENT_RISK: UNFAVORABLE_TERMS,
    RiskCategory.COMPLIANCE_ISSUE: COMPLIANCE_ISSUES,
    RiskCategory.LEGAL_AMBIGUITY: COMPLIANCE_ISSUES,
    RiskCategory.LIABILITY_EXPOSURE: LIABILITY_EXPOSURE,
}


def round_half_up(value: float) -> int:
    """Round halves upward, e.g. 12.5 -> 13 (Python's round() gives 12)."""
    return int(math.floor(value + 0.5))


class RiskScorer:
    """
    Weighted risk scoring engine.

    Each risk contributes weight[category] * multiplier[severity] to the
    total and to its category's bucket. Missing terms add a flat penalty
    by importance to the total and to the missing-clauses bucket. Blockers
    add a flat penalty to the total only. The overall score and each
    bucket are capped separately.
    """

    def __init__(self, config: Optional[ScoringConfiguration] = None):
        self._config = config or ScoringConfiguration()

    @property
    def config(self) -> ScoringConfiguration:
        return self._config

    def risk_contribution(self, risk: DocumentRisk) -> float:
        """Weighted contribution of a single risk."""
        multiplier = self._config.severity_multipliers.get(risk.severity, 0.0)
        return self._config.weight_for(risk.category) * multiplier

    def term_penalty(self, term: MissingTerm) -> int:
        """Flat penalty for a single missing term."""
        return self._config.importance_penalties.get(term.importance, 0)

    def _contributions(
        self,
        risks: Iterable[DocumentRisk],
        missing_terms: Iterable[MissingTerm],
    ) -> Iterable[Tuple[Optional[str], float]]:
        """Yield (bucket, amount) pairs for every risk and missing term."""
        for risk in risks:
            yield CATEGORY_BUCKETS.get(risk.category), self.risk_contribution(risk)
        for term in missing_terms:
            yield MISSING_CLAUSES, self.term_penalty(term)

    def score(
        self,
        risks: Sequence[DocumentRisk],
        missing_terms: Sequence[MissingTerm],
        blockers: Sequence[DealBlocker],
    ) -> RiskScore:
        """
        Compute the risk score.

        Args:
            risks: Identified risks.
            missing_terms: Identified missing terms.
            blockers: Identified deal blockers.

        Returns:
            A freshly computed RiskScore.
        """
        contributions = list(self._contributions(risks, missing_terms))

        total = sum(amount for _, amount in contributions)
        total += self._config.blocker_penalty * len(blockers)

        bucket_totals = {
            bucket: sum(amount for b, amount in contributions if b == bucket)
            for bucket in BUCKETS
        }

        overall = min(self._config.overall_cap, round_half_up(total))
        breakdown = RiskBreakdown(
            **{
                bucket: min(self._config.bucket_cap, round_half_up(value))
                for bucket, value in bucket_totals.items()
            }
        )
        return RiskScore(overall=overall, breakdown=breakdown, grade=self.grade_for(overall))

    def grade_for(self, overall: int) -> RiskGrade:
        """Map a score onto its grade band; above every band is F."""
        for upper, grade in self._config.grade_bands:
            if overall <= upper:
                return grade
        return RiskGrade.F

    @staticmethod
    def with_trend(score: RiskScore, previous: Optional[RiskScore]) -> RiskScore:
        """Annotate a score with its direction relative to a previous score."""
        if previous is None:
            return score
        if score.overall < previous.overall:
            trend = ScoreTrend.IMPROVING
        elif score.overall > previous.overall:
            trend = ScoreTrend.WORSENING
        else:
            trend = ScoreTrend.STABLE
        return replace(score, trend=trend)


_GRADE_COLORS: Dict[RiskGrade, str] = {
    RiskGrade.A: "#00875A",
    RiskGrade.B: "#36B37E",
    RiskGrade.C: "#FFAB00",
    RiskGrade.D: "#FF8B00",
    RiskGrade.F: "#DE350B",
}

_SEVERITY_LABELS: Dict[RiskSeverity, str] = {
    RiskSeverity.LOW: "Low Risk",
    RiskSeverity.MEDIUM: "Medium Risk",
    RiskSeverity.HIGH: "High Risk",
    RiskSeverity.CRITICAL: "Critical Risk",
}


def grade_color(grade: RiskGrade) -> str:
    """Hex display color for a grade, green (A) through red (F)."""
    return _GRADE_COLORS[grade]


def severity_label(severity) -> str:
    """Display label for a severity; unknown values are returned as-is."""
    if isinstance(severity, str):
        try:
            severity = RiskSeverity(severity)
        except ValueError:
            return severity
    return _SEVERITY_LABELS.get(severity, str(severity))


def format_risk_score(score: RiskScore) -> str:
    """Short display form, e.g. "B (70% safe)"."""
    return f"{score.grade.value} ({100 - score.overall}% safe)"
