"""Required action derivation and ordering."""

import uuid
from typing import List, Sequence

from ..models.enums import (
    ActionPriority,
    ActionStatus,
    BlockerType,
    RiskSeverity,
    TermImportance,
)
from ..models.findings import DealBlocker, DocumentRisk, MissingTerm
from ..models.scoring import RequiredAction


_RISK_PRIORITIES = {
    RiskSeverity.CRITICAL: ActionPriority.URGENT,
    RiskSeverity.HIGH: ActionPriority.HIGH,
}


class ActionPrioritizer:
    """
    Derives a ranked list of required actions from analysis findings.

    Actions are generated from risks, then blockers, then missing terms,
    with no de-duplication between the three sources. The result is
    stably sorted by priority rank, so equal priorities keep generation
    order.
    """

    def prioritize(
        self,
        risks: Sequence[DocumentRisk],
        missing_terms: Sequence[MissingTerm],
        blockers: Sequence[DealBlocker],
    ) -> List[RequiredAction]:
        actions = (
            self._from_risks(risks)
            + self._from_blockers(blockers)
            + self._from_missing_terms(missing_terms)
        )
        # sorted() is stable
        return sorted(actions, key=lambda a: a.priority.rank)

    def _from_risks(self, risks: Sequence[DocumentRisk]) -> List[RequiredAction]:
        """Critical risks become urgent actions, high risks high ones."""
        return [
            self._action(_RISK_PRIORITIES[risk.severity], risk.recommendation, risk.description)
            for risk in risks
            if risk.severity in _RISK_PRIORITIES
        ]

    def _from_blockers(self, blockers: Sequence[DealBlocker]) -> List[RequiredAction]:
        return [
            self._action(
                ActionPriority.URGENT
                if blocker.type is BlockerType.MISSING_SIGNATURE
                else ActionPriority.HIGH,
                blocker.required_action,
                blocker.description,
            )
            for blocker in blockers
        ]

    def _from_missing_terms(self, missing_terms: Sequence[MissingTerm]) -> List[RequiredAction]:
        return [
            self._action(ActionPriority.MEDIUM, f"Add {term.term} to the document", term.impact)
            for term in missing_terms
            if term.importance is TermImportance.REQUIRED
        ]

    @staticmethod
    def _action(priority: ActionPriority, action: str, reason: str) -> RequiredAction:
        return RequiredAction(
            id=str(uuid.uuid4()),
            priority=priority,
            action=action,
            reason=reason,
            status=ActionStatus.PENDING,
        )
