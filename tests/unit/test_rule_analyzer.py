"""Unit tests for the rule-based analyzer."""

import uuid

import pytest

from deal_doc_risk.config import TermChecklists, TermRequirement
from deal_doc_risk.extractors import RuleBasedAnalyzer
from deal_doc_risk.models.enums import (
    BlockerType,
    DocumentType,
    EntityType,
    RiskCategory,
    RiskSeverity,
    TermImportance,
)
from deal_doc_risk.models.findings import DocumentRisk, MissingTerm


ALL_CLAUSES_TEXT = (
    "Either party may terminate on notice. Liability is limited to fees paid. "
    "Each party shall indemnify the other. Confidential material stays protected. "
    "The governing law is Delaware."
)


@pytest.fixture
def analyzer():
    return RuleBasedAnalyzer()


class TestEntityExtraction:
    """Tests for regex entity extraction."""

    def test_extracts_dates_amounts_and_durations(self, analyzer):
        text = (
            "Effective 01/15/2024, the fee is $5,000.00 for a term of 12 months. "
            "Signed on January 5, 2024."
        )

        entities = analyzer.extract_entities(text)
        by_type = {}
        for entity in entities:
            by_type.setdefault(entity.type, []).append(entity.value)

        assert by_type[EntityType.DATE] == ["01/15/2024", "January 5, 2024"]
        assert by_type[EntityType.AMOUNT] == ["$5,000.00"]
        assert by_type[EntityType.TERM_DURATION] == ["term of 12 months"]

    def test_confidence_per_family(self, analyzer):
        entities = analyzer.extract_entities("Due 3/4/25: $100 for a 2 year term")
        confidences = {e.type: e.confidence for e in entities}

        assert confidences == {
            EntityType.DATE: 0.8,
            EntityType.AMOUNT: 0.9,
            EntityType.TERM_DURATION: 0.7,
        }

    def test_location_records_match_span(self, analyzer):
        text = "Total: $250"

        entities = analyzer.extract_entities(text)

        assert len(entities) == 1
        start = text.index("$250")
        assert entities[0].location.position == f"{start}-{start + 4}"

    def test_empty_text_has_no_entities(self, analyzer):
        assert analyzer.extract_entities("") == []


class TestRiskIdentification:
    """Tests for missing clause and unfavorable language detection."""

    def test_empty_text_reports_every_standard_clause(self, analyzer):
        risks = analyzer.identify_risks("", DocumentType.CONTRACT)

        assert [r.title for r in risks] == [
            "Missing termination clause",
            "Missing liability clause",
            "Missing indemnification clause",
            "Missing confidentiality clause",
            "Missing governing law clause",
        ]
        assert all(r.category == RiskCategory.MISSING_CLAUSE for r in risks)
        assert all(r.severity == RiskSeverity.MEDIUM for r in risks)
        assert len({r.id for r in risks}) == 5

    def test_clause_keywords_are_case_insensitive(self, analyzer):
        risks = analyzer.identify_risks(ALL_CLAUSES_TEXT.upper(), DocumentType.CONTRACT)

        assert risks == []

    def test_unfavorable_language(self, analyzer):
        text = (
            ALL_CLAUSES_TEXT
            + " The Customer accepts Unlimited Liability. This contract is subject to"
            " automatic renewal. The Customer agrees to waive all rights of appeal."
        )

        risks = analyzer.identify_risks(text, DocumentType.CONTRACT)

        assert [(r.title, r.severity) for r in risks] == [
            ("Unlimited Liability", RiskSeverity.HIGH),
            ("Rights Waiver", RiskSeverity.MEDIUM),
            ("Auto-Renewal", RiskSeverity.LOW),
        ]
        assert all(r.category == RiskCategory.UNFAVORABLE_TERMS for r in risks)
        assert risks[0].description == (
            "The document contains unlimited liability language that may be unfavorable."
        )
        assert risks[0].recommendation == "Review and potentially negotiate the unlimited liability terms."

    def test_non_compete(self, analyzer):
        risks = analyzer.identify_risks(ALL_CLAUSES_TEXT + " A non-compete applies.", DocumentType.CONTRACT)

        assert [r.title for r in risks] == ["Non-Compete Clause"]


class TestMissingTerms:
    """Tests for checklist-driven missing term detection."""

    def test_contract_checklist_on_empty_text(self, analyzer):
        terms = analyzer.identify_missing_terms("", DocumentType.CONTRACT)

        assert [t.term for t in terms] == [
            "Effective Date",
            "Term Duration",
            "Payment Terms",
            "Termination Clause",
            "Signatures",
        ]
        assert all(t.importance == TermImportance.REQUIRED for t in terms)

    def test_nda_checklist(self, analyzer):
        text = "Confidential Information disclosed to the Receiving Party."

        terms = analyzer.identify_missing_terms(text, DocumentType.NDA)

        assert [t.term for t in terms] == ["Term of Confidentiality", "Permitted Disclosures"]
        assert terms[0].description == "The document is missing a Term of Confidentiality section."

    @pytest.mark.parametrize(
        "doc_type", [DocumentType.UNKNOWN, DocumentType.INVOICE, DocumentType.MSA]
    )
    def test_unlisted_types_use_contract_checklist(self, analyzer, doc_type):
        terms = analyzer.identify_missing_terms("", doc_type)

        assert len(terms) == 5
        assert terms[0].term == "Effective Date"

    def test_custom_checklists(self):
        checklists = TermChecklists(
            checklists={
                DocumentType.NDA: [
                    TermRequirement("Return of Materials", ["return"], TermImportance.OPTIONAL)
                ]
            },
            fallback_type=DocumentType.CONTRACT,
        )
        analyzer = RuleBasedAnalyzer(checklists=checklists)

        nda_terms = analyzer.identify_missing_terms("", DocumentType.NDA)

        assert [(t.term, t.importance) for t in nda_terms] == [
            ("Return of Materials", TermImportance.OPTIONAL)
        ]
        assert analyzer.identify_missing_terms("", DocumentType.CONTRACT) == []


class TestBlockers:
    """Tests for deal blocker derivation."""

    def test_only_missing_signature(self, analyzer):
        blockers = analyzer.identify_blockers("Plain text with no execution block.", [], [])

        assert len(blockers) == 1
        assert blockers[0].type == BlockerType.MISSING_SIGNATURE
        assert blockers[0].title == "Signatures Required"

    def test_signature_keyword_clears_blocker(self, analyzer):
        assert analyzer.identify_blockers("Signed by the CEO.", [], []) == []

    def test_critical_risks_and_required_terms(self, analyzer):
        critical = DocumentRisk(
            id=str(uuid.uuid4()),
            category=RiskCategory.LIABILITY_EXPOSURE,
            severity=RiskSeverity.CRITICAL,
            title="Uncapped indemnity",
            description="Indemnity has no cap.",
            recommendation="Cap the indemnity.",
        )
        high = DocumentRisk(
            id=str(uuid.uuid4()),
            category=RiskCategory.LIABILITY_EXPOSURE,
            severity=RiskSeverity.HIGH,
            title="Broad indemnity",
            description="",
            recommendation="",
        )
        terms = [
            MissingTerm("Payment Terms", TermImportance.REQUIRED, "No payment section.", ""),
            MissingTerm("Timeline", TermImportance.RECOMMENDED, "", ""),
        ]

        blockers = analyzer.identify_blockers("signature", [critical, high], terms)

        assert [(b.type, b.title) for b in blockers] == [
            (BlockerType.LEGAL_REVIEW, "Critical Risk: Uncapped indemnity"),
            (BlockerType.NEGOTIATION_REQUIRED, "Missing: Payment Terms"),
        ]
        assert blockers[0].required_action == "Cap the indemnity."
        assert blockers[1].description == "No payment section."
        assert blockers[1].required_action == "Add Payment Terms to the document."


class TestSummary:
    """Tests for the rule-based summary."""

    def test_summary_format(self, analyzer):
        summary = analyzer.generate_summary("Hello world\n\nSecond paragraph", DocumentType.NDA)

        assert summary == (
            "This is a nda document containing approximately 4 words. Hello world..."
        )

    def test_first_paragraph_truncated(self, analyzer):
        summary = analyzer.generate_summary("x" * 500, DocumentType.CONTRACT)

        assert summary.endswith("x" * 200 + "...")
        assert "x" * 201 not in summary

    def test_name(self, analyzer):
        assert analyzer.name == "rules"
