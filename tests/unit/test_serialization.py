"""Unit tests for DocumentAnalysis serialization."""

import json

import pytest

from deal_doc_risk.extractors import RuleBasedAnalyzer
from deal_doc_risk.models.analysis import DocumentInput
from deal_doc_risk.models.enums import DocumentType, RiskGrade, ScoreTrend
from deal_doc_risk.models.scoring import RiskBreakdown, RiskScore
from deal_doc_risk.pipeline import AnalysisPipeline
from deal_doc_risk.serialization import AnalysisSerializer


@pytest.fixture
def analysis():
    pipeline = AnalysisPipeline(analyzer=RuleBasedAnalyzer())
    return pipeline.analyze(
        DocumentInput(
            text="Proposal for Globex. Fee of $12,000.00 due 03/01/2025. Unlimited liability applies.",
            filename="globex_proposal.pdf",
            confidence=0.93,
        )
    )


class TestAnalysisSerializer:
    """Tests for AnalysisSerializer."""

    def test_json_round_trip(self, analysis):
        restored = AnalysisSerializer.deserialize(AnalysisSerializer.serialize(analysis))

        assert restored == analysis

    def test_enums_written_as_values(self, analysis):
        data = json.loads(AnalysisSerializer.serialize(analysis))

        assert data["document_type"] == "proposal"
        assert data["risk_score"]["grade"] == analysis.risk_score.grade.value
        assert data["risks"][0]["category"] in {"missing_clause", "unfavorable_terms"}
        assert data["metadata"]["source_confidence"] == 0.93

    def test_score_with_trend(self):
        score = RiskScore(
            overall=42,
            breakdown=RiskBreakdown(missing_clauses=10, liability_exposure=25),
            grade=RiskGrade.C,
            trend=ScoreTrend.IMPROVING,
        )

        data = AnalysisSerializer.score_to_dict(score)

        assert data["trend"] == "improving"
        assert AnalysisSerializer.dict_to_score(data) == score

    def test_unknown_document_type_becomes_unknown(self, analysis):
        data = AnalysisSerializer.to_dict(analysis)
        data["document_type"] = "memo"

        assert AnalysisSerializer.from_dict(data).document_type == DocumentType.UNKNOWN

    def test_missing_required_field(self, analysis):
        data = AnalysisSerializer.to_dict(analysis)
        del data["risk_score"]

        with pytest.raises(ValueError, match="risk_score"):
            AnalysisSerializer.from_dict(data)

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Invalid JSON"):
            AnalysisSerializer.deserialize("{not json")
