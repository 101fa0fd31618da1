"""Integration tests for the end-to-end analysis pipeline."""

import json
import uuid
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from deal_doc_risk.config import AnalyzerSettings
from deal_doc_risk.exceptions import DocumentNotFoundError
from deal_doc_risk.extractors import RuleBasedAnalyzer, create_analyzer
from deal_doc_risk.models.analysis import DocumentInput
from deal_doc_risk.models.enums import (
    ActionPriority,
    BlockerType,
    DocumentType,
    EntityType,
    RiskCategory,
    RiskGrade,
    RiskSeverity,
    ScoreTrend,
)
from deal_doc_risk.models.findings import DocumentRisk
from deal_doc_risk.pipeline import AnalysisPipeline, PipelineConfig
from deal_doc_risk.scoring import RiskScorer
from deal_doc_risk.storage import DatabaseManager, SqlAnalysisStore


CLEAN_CONTRACT = """SUPPLY CONTRACT

This contract is entered into as of the Effective Date of January 15, 2024 between Acme Corp and Globex LLC.

1. Term. The initial term of 12 months begins on the Effective Date.
2. Payment. Globex shall pay a fee of $25,000.00 within 30 days of invoice.
3. Termination. Either party may terminate this contract on 30 days written notice.
4. Limitation of Liability. Neither party's liability shall exceed the fees paid.
5. Indemnification. Each party shall indemnify and hold harmless the other party.
6. Confidentiality. Each party shall protect the other's confidential information.
7. Governing Law. This contract is governed by the laws of Delaware.

Signed by the authorized representatives of both parties.
Signature: ____________
"""

RISKY_CONTRACT = CLEAN_CONTRACT + (
    "\n8. The Customer accepts unlimited liability for all claims."
    "\n9. This contract is subject to automatic renewal each year."
)


class AdjustableAnalyzer(RuleBasedAnalyzer):
    """Rule analyzer that can be told to report additional risks."""

    def __init__(self):
        super().__init__()
        self.extra_risks = []

    def identify_risks(self, text, document_type):
        return super().identify_risks(text, document_type) + list(self.extra_risks)


@pytest.fixture
def pipeline():
    return AnalysisPipeline(analyzer=RuleBasedAnalyzer())


class TestAnalyze:
    """Tests for single-document analysis."""

    def test_clean_contract(self, pipeline):
        analysis = pipeline.analyze(DocumentInput(text=CLEAN_CONTRACT, filename="acme_contract.pdf"))

        assert analysis.document_type == DocumentType.CONTRACT
        assert analysis.risks == []
        assert analysis.missing_terms == []
        assert analysis.blockers == []
        assert analysis.required_actions == []
        assert analysis.risk_score.overall == 0
        assert analysis.risk_score.grade == RiskGrade.A
        entity_types = {e.type for e in analysis.entities}
        assert {EntityType.DATE, EntityType.AMOUNT, EntityType.TERM_DURATION} <= entity_types
        assert analysis.summary.startswith("This is a contract document")

    def test_risky_contract(self, pipeline):
        analysis = pipeline.analyze(DocumentInput(text=RISKY_CONTRACT, filename="acme_contract.pdf"))

        assert [r.title for r in analysis.risks] == ["Unlimited Liability", "Auto-Renewal"]
        assert analysis.risk_score.overall == 20
        assert analysis.risk_score.breakdown.unfavorable_terms == 20
        assert analysis.risk_score.grade == RiskGrade.A
        assert [a.priority for a in analysis.required_actions] == [ActionPriority.HIGH]

    def test_empty_document(self, pipeline):
        analysis = pipeline.analyze(DocumentInput(text="", filename="scan.pdf"))

        assert analysis.document_type == DocumentType.UNKNOWN
        assert len(analysis.risks) == 5
        assert len(analysis.missing_terms) == 5
        assert [b.type for b in analysis.blockers][0] == BlockerType.MISSING_SIGNATURE
        assert len(analysis.blockers) == 6
        assert analysis.risk_score.overall == 100
        assert analysis.risk_score.breakdown.missing_clauses == 25
        assert analysis.risk_score.grade == RiskGrade.F
        assert analysis.required_actions[0].priority == ActionPriority.URGENT
        assert len(analysis.required_actions) == 11

    def test_score_matches_findings(self, pipeline):
        analysis = pipeline.analyze(DocumentInput(text=RISKY_CONTRACT[:400], filename="draft.txt"))

        expected = RiskScorer().score(analysis.risks, analysis.missing_terms, analysis.blockers)

        assert analysis.risk_score == expected

    def test_actions_sorted_by_priority(self, pipeline):
        analysis = pipeline.analyze(DocumentInput(text="Unlimited liability.", filename="nda.pdf"))

        ranks = [a.priority.rank for a in analysis.required_actions]
        assert ranks == sorted(ranks)

    def test_type_hint_is_used(self, pipeline):
        analysis = pipeline.analyze(
            DocumentInput(text=CLEAN_CONTRACT, filename="acme_contract.pdf", document_type="NDA")
        )

        assert analysis.document_type == DocumentType.NDA
        assert analysis.metadata["document_type_source"] == "input"

    def test_unrecognised_type_hint_falls_back_to_classifier(self, pipeline):
        analysis = pipeline.analyze(
            DocumentInput(text=CLEAN_CONTRACT, filename="acme_contract.pdf", document_type="memo")
        )

        assert analysis.document_type == DocumentType.CONTRACT
        assert analysis.metadata["document_type_source"] == "classifier"

    def test_raw_text_is_truncated(self, pipeline):
        text = CLEAN_CONTRACT + "x" * 6000

        analysis = pipeline.analyze(DocumentInput(text=text, filename="contract.pdf"))

        assert len(analysis.raw_text) == 5000
        assert text.startswith(analysis.raw_text)

    def test_metadata(self, pipeline):
        analysis = pipeline.analyze(
            DocumentInput(text=CLEAN_CONTRACT, filename="contract.pdf", confidence=0.87)
        )

        assert analysis.metadata["analyzer"] == "rules"
        assert analysis.metadata["source_confidence"] == 0.87
        assert analysis.metadata["text_length"] == len(CLEAN_CONTRACT)
        assert set(analysis.metadata["stage_timings"]) == {
            "extract_entities",
            "identify_risks",
            "identify_missing_terms",
            "generate_summary",
            "identify_blockers",
            "score",
        }
        assert analysis.uploaded_at == analysis.analyzed_at

    def test_sequential_and_parallel_agree(self):
        parallel = AnalysisPipeline(analyzer=RuleBasedAnalyzer())
        sequential = AnalysisPipeline(
            config=PipelineConfig(parallel_extraction=False), analyzer=RuleBasedAnalyzer()
        )
        document = DocumentInput(text=RISKY_CONTRACT, filename="contract.pdf")

        first = parallel.analyze(document)
        second = sequential.analyze(document)

        assert first.risk_score == second.risk_score
        assert first.entities == second.entities
        assert first.summary == second.summary

    def test_stats(self, pipeline):
        pipeline.analyze(DocumentInput(text="a", filename="a.pdf"))
        pipeline.analyze(DocumentInput(text="b", filename="b.pdf"))

        assert pipeline.get_stats().total_analyses == 2
        assert pipeline.get_performance_stats()["identify_risks"]["count"] == 2

    def test_stats_under_concurrent_analyses(self, pipeline):
        documents = [DocumentInput(text=CLEAN_CONTRACT, filename=f"c{i}.pdf") for i in range(20)]

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(pipeline.analyze, documents))

        stats = pipeline.get_stats()
        assert stats.total_analyses == 20
        assert stats.average_processing_time == pytest.approx(stats.total_processing_time / 20)

    def test_stats_are_a_snapshot(self, pipeline):
        snapshot = pipeline.get_stats()
        pipeline.analyze(DocumentInput(text="a", filename="a.pdf"))

        assert snapshot.total_analyses == 0
        assert pipeline.get_stats().total_analyses == 1


class TestAnalyzerSelection:
    """Tests for analyzer configuration through the pipeline."""

    def test_defaults_to_rules_without_credential(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        pipeline = AnalysisPipeline()

        assert pipeline.analyzer.name == "rules"

    def test_failing_remote_analyzer_matches_rules(self, pipeline):
        client = MagicMock()
        client.chat.completions.create.side_effect = ConnectionError("network down")
        remote_pipeline = AnalysisPipeline(
            analyzer=create_analyzer(AnalyzerSettings(openai_api_key="sk-test"), client=client)
        )
        document = DocumentInput(text=RISKY_CONTRACT, filename="contract.pdf")

        degraded = remote_pipeline.analyze(document)
        baseline = pipeline.analyze(document)

        assert degraded.risk_score == baseline.risk_score
        assert degraded.summary == baseline.summary
        assert degraded.metadata["analyzer"] == "openai:gpt-4o-mini>rules"

    def test_config_directory(self, tmp_path):
        (tmp_path / "scoring.json").write_text(
            json.dumps({"blocker_penalty": 0}), encoding="utf-8"
        )
        pipeline = AnalysisPipeline(
            config=PipelineConfig(config_dir=str(tmp_path)), analyzer=RuleBasedAnalyzer()
        )

        analysis = pipeline.analyze(DocumentInput(text="", filename="scan.pdf"))

        assert analysis.risk_score.overall == 88
        assert analysis.risk_score.grade == RiskGrade.F


class TestStoredAnalyses:
    """Tests for submit, retrieval and re-analysis."""

    def test_submit_get_list_delete(self, pipeline):
        first = pipeline.submit(DocumentInput(text=CLEAN_CONTRACT, filename="a_contract.pdf"), deal_id="deal-7")
        second = pipeline.submit(DocumentInput(text=RISKY_CONTRACT, filename="b_contract.pdf"), deal_id="deal-7")
        pipeline.submit(DocumentInput(text="", filename="other.pdf"))

        assert pipeline.get(first.document_id) == first
        assert [a.document_id for a in pipeline.list_for_deal("deal-7")] == [
            first.document_id,
            second.document_id,
        ]

        assert pipeline.delete(first.document_id) is True
        assert pipeline.delete(first.document_id) is False
        assert [a.document_id for a in pipeline.list_for_deal("deal-7")] == [second.document_id]

    def test_get_unknown_document(self, pipeline):
        with pytest.raises(DocumentNotFoundError) as exc_info:
            pipeline.get("no-such-id")

        assert exc_info.value.document_id == "no-such-id"

    def test_reanalyze_unknown_document(self, pipeline):
        with pytest.raises(DocumentNotFoundError):
            pipeline.reanalyze("no-such-id")

    def test_reanalyze_keeps_identity_and_sets_trend(self, pipeline):
        original = pipeline.submit(
            DocumentInput(text=RISKY_CONTRACT, filename="contract.pdf"), deal_id="deal-1"
        )

        updated = pipeline.reanalyze(original.document_id)

        assert updated.document_id == original.document_id
        assert updated.uploaded_at == original.uploaded_at
        assert updated.risk_score.overall == original.risk_score.overall
        assert updated.risk_score.trend == ScoreTrend.STABLE
        assert pipeline.get(original.document_id) == updated
        assert [a.document_id for a in pipeline.list_for_deal("deal-1")] == [original.document_id]
        assert pipeline.get_stats().reanalyses == 1

    def test_reanalyze_uses_full_source_text(self, pipeline):
        """The signature sits beyond the truncated raw_text snapshot."""
        text = CLEAN_CONTRACT.replace("Signed by", "Agreed by").replace("Signature:", "Name:")
        text = text + "lorem ipsum " * 600 + "\nSignature: ____________"
        original = pipeline.submit(DocumentInput(text=text, filename="contract.pdf"))
        assert "signature" not in original.raw_text.lower()

        updated = pipeline.reanalyze(original.document_id)

        assert updated.blockers == []
        assert updated.risk_score.trend == ScoreTrend.STABLE

    def test_reanalyze_reports_worsening(self):
        analyzer = AdjustableAnalyzer()
        pipeline = AnalysisPipeline(analyzer=analyzer)
        original = pipeline.submit(DocumentInput(text=CLEAN_CONTRACT, filename="contract.pdf"))

        analyzer.extra_risks = [
            DocumentRisk(
                id=str(uuid.uuid4()),
                category=RiskCategory.LIABILITY_EXPOSURE,
                severity=RiskSeverity.CRITICAL,
                title="Uncapped indemnity",
                description="Indemnity has no cap.",
                recommendation="Cap the indemnity.",
            )
        ]
        updated = pipeline.reanalyze(original.document_id)

        assert updated.risk_score.overall == 35
        assert updated.risk_score.trend == ScoreTrend.WORSENING
        assert updated.blockers[0].type == BlockerType.LEGAL_REVIEW

    def test_reanalyze_keeps_type_hint(self, pipeline):
        original = pipeline.submit(
            DocumentInput(text=CLEAN_CONTRACT, filename="contract.pdf", document_type="msa")
        )

        updated = pipeline.reanalyze(original.document_id)

        assert updated.document_type == DocumentType.MSA

    def test_sql_store_backed_pipeline(self, tmp_path):
        store = SqlAnalysisStore(DatabaseManager(f"sqlite:///{tmp_path / 'pipeline.db'}"))
        pipeline = AnalysisPipeline(analyzer=RuleBasedAnalyzer(), store=store)

        original = pipeline.submit(DocumentInput(text=RISKY_CONTRACT, filename="contract.pdf"), deal_id="deal-3")
        updated = pipeline.reanalyze(original.document_id)

        assert pipeline.get(original.document_id) == updated
        assert [a.document_id for a in pipeline.list_for_deal("deal-3")] == [original.document_id]
        pipeline.close()
