"""Serialization and deserialization of DocumentAnalysis structures."""

import json
from typing import Any, Dict, Optional

from .models.analysis import DocumentAnalysis
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
from .models.findings import (
    DealBlocker,
    DocumentRisk,
    EntityLocation,
    ExtractedEntity,
    MissingTerm,
)
from .models.scoring import RequiredAction, RiskBreakdown, RiskScore


class AnalysisSerializer:
    """
    Converts DocumentAnalysis to and from plain dictionaries and JSON.

    Enum members are written as their values; deserialize(serialize(a))
    reproduces an equal analysis.
    """

    @staticmethod
    def serialize(analysis: DocumentAnalysis) -> str:
        """
        Serialize a DocumentAnalysis to JSON string.

        Args:
            analysis: The analysis to serialize.

        Returns:
            JSON string representation of the analysis.
        """
        return json.dumps(
            AnalysisSerializer.to_dict(analysis),
            ensure_ascii=False,
            indent=2
        )

    @staticmethod
    def deserialize(json_str: str) -> DocumentAnalysis:
        """
        Deserialize a JSON string to a DocumentAnalysis.

        Raises:
            ValueError: If the JSON is invalid or malformed.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {str(e)}")

        return AnalysisSerializer.from_dict(data)

    @staticmethod
    def to_dict(analysis: DocumentAnalysis) -> Dict[str, Any]:
        """Convert DocumentAnalysis to dictionary."""
        return {
            "document_id": analysis.document_id,
            "filename": analysis.filename,
            "document_type": analysis.document_type.value,
            "uploaded_at": analysis.uploaded_at,
            "analyzed_at": analysis.analyzed_at,
            "entities": [AnalysisSerializer._entity_to_dict(e) for e in analysis.entities],
            "risks": [AnalysisSerializer._risk_to_dict(r) for r in analysis.risks],
            "missing_terms": [
                {
                    "term": t.term,
                    "importance": t.importance.value,
                    "description": t.description,
                    "impact": t.impact,
                }
                for t in analysis.missing_terms
            ],
            "blockers": [AnalysisSerializer._blocker_to_dict(b) for b in analysis.blockers],
            "risk_score": AnalysisSerializer.score_to_dict(analysis.risk_score),
            "required_actions": [
                {
                    "id": a.id,
                    "priority": a.priority.value,
                    "action": a.action,
                    "reason": a.reason,
                    "deadline": a.deadline,
                    "status": a.status.value,
                }
                for a in analysis.required_actions
            ],
            "summary": analysis.summary,
            "raw_text": analysis.raw_text,
            "metadata": analysis.metadata,
        }

    @staticmethod
    def _entity_to_dict(entity: ExtractedEntity) -> Dict[str, Any]:
        location = None
        if entity.location is not None:
            location = {"page": entity.location.page, "position": entity.location.position}
        return {
            "type": entity.type.value,
            "value": entity.value,
            "confidence": entity.confidence,
            "location": location,
        }

    @staticmethod
    def _risk_to_dict(risk: DocumentRisk) -> Dict[str, Any]:
        return {
            "id": risk.id,
            "category": risk.category.value,
            "severity": risk.severity.value,
            "title": risk.title,
            "description": risk.description,
            "recommendation": risk.recommendation,
            "related_clauses": list(risk.related_clauses),
        }

    @staticmethod
    def _blocker_to_dict(blocker: DealBlocker) -> Dict[str, Any]:
        return {
            "id": blocker.id,
            "type": blocker.type.value,
            "title": blocker.title,
            "description": blocker.description,
            "required_action": blocker.required_action,
            "assigned_to": blocker.assigned_to,
            "due_date": blocker.due_date,
        }

    @staticmethod
    def score_to_dict(score: RiskScore) -> Dict[str, Any]:
        """Convert RiskScore to dictionary."""
        return {
            "overall": score.overall,
            "breakdown": {
                "missing_clauses": score.breakdown.missing_clauses,
                "unfavorable_terms": score.breakdown.unfavorable_terms,
                "compliance_issues": score.breakdown.compliance_issues,
                "liability_exposure": score.breakdown.liability_exposure,
            },
            "grade": score.grade.value,
            "trend": score.trend.value if score.trend else None,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> DocumentAnalysis:
        """Convert dictionary to DocumentAnalysis."""
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for DocumentAnalysis")

        required_fields = ["document_id", "filename", "risk_score"]
        for field in required_fields:
            if field not in data:
                raise ValueError(f"Missing required field '{field}' in DocumentAnalysis")

        try:
            return DocumentAnalysis(
                document_id=data["document_id"],
                filename=data["filename"],
                document_type=DocumentType.parse(data.get("document_type")),
                uploaded_at=data.get("uploaded_at", ""),
                analyzed_at=data.get("analyzed_at", ""),
                entities=[AnalysisSerializer._dict_to_entity(e) for e in data.get("entities", [])],
                risks=[AnalysisSerializer._dict_to_risk(r) for r in data.get("risks", [])],
                missing_terms=[
                    MissingTerm(
                        term=t["term"],
                        importance=TermImportance(t["importance"]),
                        description=t.get("description", ""),
                        impact=t.get("impact", ""),
                    )
                    for t in data.get("missing_terms", [])
                ],
                blockers=[AnalysisSerializer._dict_to_blocker(b) for b in data.get("blockers", [])],
                risk_score=AnalysisSerializer.dict_to_score(data["risk_score"]),
                required_actions=[
                    RequiredAction(
                        id=a["id"],
                        priority=ActionPriority(a["priority"]),
                        action=a["action"],
                        reason=a.get("reason", ""),
                        deadline=a.get("deadline"),
                        status=ActionStatus(a.get("status", ActionStatus.PENDING.value)),
                    )
                    for a in data.get("required_actions", [])
                ],
                summary=data.get("summary", ""),
                raw_text=data.get("raw_text", ""),
                metadata=data.get("metadata") or {},
            )
        except KeyError as e:
            raise ValueError(f"Missing required field {e} in DocumentAnalysis")

    @staticmethod
    def _dict_to_entity(data: Dict[str, Any]) -> ExtractedEntity:
        location: Optional[EntityLocation] = None
        if data.get("location"):
            location = EntityLocation(
                page=data["location"].get("page"),
                position=data["location"].get("position"),
            )
        return ExtractedEntity(
            type=EntityType(data["type"]),
            value=data["value"],
            confidence=data["confidence"],
            location=location,
        )

    @staticmethod
    def _dict_to_risk(data: Dict[str, Any]) -> DocumentRisk:
        return DocumentRisk(
            id=data["id"],
            category=RiskCategory(data["category"]),
            severity=RiskSeverity(data["severity"]),
            title=data["title"],
            description=data.get("description", ""),
            recommendation=data.get("recommendation", ""),
            related_clauses=list(data.get("related_clauses") or []),
        )

    @staticmethod
    def _dict_to_blocker(data: Dict[str, Any]) -> DealBlocker:
        return DealBlocker(
            id=data["id"],
            type=BlockerType(data["type"]),
            title=data["title"],
            description=data.get("description", ""),
            required_action=data.get("required_action", ""),
            assigned_to=data.get("assigned_to"),
            due_date=data.get("due_date"),
        )

    @staticmethod
    def dict_to_score(data: Dict[str, Any]) -> RiskScore:
        """Convert dictionary to RiskScore."""
        breakdown = data.get("breakdown") or {}
        return RiskScore(
            overall=data["overall"],
            breakdown=RiskBreakdown(
                missing_clauses=breakdown.get("missing_clauses", 0),
                unfavorable_terms=breakdown.get("unfavorable_terms", 0),
                compliance_issues=breakdown.get("compliance_issues", 0),
                liability_exposure=breakdown.get("liability_exposure", 0),
            ),
            grade=RiskGrade(data["grade"]),
            trend=ScoreTrend(data["trend"]) if data.get("trend") else None,
        )
