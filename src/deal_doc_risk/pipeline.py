"""End-to-end analysis pipeline for the deal document risk scoring core.

This module wires the classifier, analyzer, scoring engine and action
prioritizer into a single analyze() call, and manages stored analyses
for retrieval and re-analysis.
"""

import logging
import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from .classifiers.document_classifier import DocumentClassifier
from .config.config_manager import ConfigurationManager
from .config.models import AnalyzerSettings
from .exceptions import DocumentNotFoundError
from .extractors.fallback_analyzer import create_analyzer
from .interfaces.analyzer import IDocumentAnalyzer
from .interfaces.store import IAnalysisStore, StoredAnalysis
from .models.analysis import DocumentAnalysis, DocumentInput
from .models.enums import DocumentType
from .performance import PerformanceMetrics, PerformanceMonitor
from .scoring.action_prioritizer import ActionPrioritizer
from .scoring.risk_scorer import RiskScorer
from .storage.memory_store import InMemoryAnalysisStore


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class PipelineConfig:
    """Configuration for the analysis pipeline."""

    # Run entity, risk, missing-term and summary extraction concurrently
    parallel_extraction: bool = True
    max_workers: int = 4

    # Length of the raw text snapshot kept on each analysis
    raw_text_limit: int = 5000

    # Seconds after which a stage is logged as slow
    max_processing_time: float = 60

    # Directory holding scoring.json / checklists.json
    config_dir: Optional[str] = None


@dataclass
class PipelineStats:
    """Statistics about pipeline execution."""

    total_analyses: int = 0
    reanalyses: int = 0
    average_processing_time: float = 0.0
    total_processing_time: float = 0.0


class AnalysisPipeline:
    """
    Orchestrates document analysis.

    classify -> (entities | risks | missing terms | summary) -> blockers
    -> score -> required actions -> DocumentAnalysis. Blockers wait for
    risks and missing terms; everything else in the middle step is
    independent and may run concurrently.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        analyzer: Optional[IDocumentAnalyzer] = None,
        classifier: Optional[DocumentClassifier] = None,
        scorer: Optional[RiskScorer] = None,
        prioritizer: Optional[ActionPrioritizer] = None,
        store: Optional[IAnalysisStore] = None,
        config_manager: Optional[ConfigurationManager] = None,
        analyzer_settings: Optional[AnalyzerSettings] = None,
    ):
        """
        Initialize the analysis pipeline.

        Args:
            config: Pipeline configuration.
            analyzer: Optional analyzer (selected from analyzer_settings if not provided).
            classifier: Optional document classifier.
            scorer: Optional risk scorer (built from loaded scoring tables if not provided).
            prioritizer: Optional action prioritizer.
            store: Optional analysis store (in-memory if not provided).
            config_manager: Optional configuration manager.
            analyzer_settings: Settings for the AI analyzer; read from env if None.
        """
        self.config = config or PipelineConfig()
        self.stats = PipelineStats()
        self._stats_lock = threading.Lock()
        self.performance_monitor = PerformanceMonitor(
            max_processing_time=self.config.max_processing_time
        )

        self._config_manager = config_manager or ConfigurationManager(
            config_dir=self.config.config_dir
        )
        if self.config.config_dir:
            result = self._config_manager.load_from_directory(self.config.config_dir)
            for error in result.errors:
                logger.warning(f"Configuration error: {error}")
            for warning in result.warnings:
                logger.warning(f"Configuration warning: {warning}")
            logger.info(f"Loaded configuration from {self.config.config_dir}")

        system_config = self._config_manager.configuration
        self._classifier = classifier or DocumentClassifier()
        self._analyzer = analyzer or create_analyzer(
            analyzer_settings, checklists=system_config.checklists
        )
        self._scorer = scorer or RiskScorer(system_config.scoring)
        self._prioritizer = prioritizer or ActionPrioritizer()
        self._store = store or InMemoryAnalysisStore()

        logger.info(f"Analysis pipeline initialized with analyzer '{self._analyzer.name}'")

    @property
    def analyzer(self) -> IDocumentAnalyzer:
        return self._analyzer

    @property
    def store(self) -> IAnalysisStore:
        return self._store

    # =========================================================================
    # Analysis
    # =========================================================================

    def analyze(
        self,
        document: DocumentInput,
        document_id: Optional[str] = None,
        uploaded_at: Optional[str] = None,
    ) -> DocumentAnalysis:
        """
        Run the complete analysis for one document.

        Args:
            document: Extracted text, filename and optional type hint.
            document_id: Identifier to assign (a new uuid if None).
            uploaded_at: Upload timestamp to keep (now if None).

        Returns:
            A self-contained DocumentAnalysis.
        """
        start_time = time.time()
        text = document.text or ""
        timings: Dict[str, float] = {}

        logger.info(f"Starting analysis of '{document.filename}'")

        document_type, type_source = self._resolve_document_type(document, text)
        logger.info(f"Document type: {document_type.value} (from {type_source})")

        entities, risks, missing_terms, summary = self._extract_findings(
            text, document_type, timings
        )
        logger.info(
            f"Extracted {len(entities)} entities, {len(risks)} risks, "
            f"{len(missing_terms)} missing terms"
        )

        blockers, metric = self._timed(
            "identify_blockers",
            lambda: self._analyzer.identify_blockers(text, risks, missing_terms),
        )
        timings[metric.operation_name] = metric.duration or 0.0

        risk_score, metric = self._timed(
            "score", lambda: self._scorer.score(risks, missing_terms, blockers)
        )
        timings[metric.operation_name] = metric.duration or 0.0

        actions = self._prioritizer.prioritize(risks, missing_terms, blockers)

        processing_time = time.time() - start_time
        metadata: Dict[str, Any] = {
            "analyzer": self._analyzer.name,
            "document_type_source": type_source,
            "text_length": len(text),
            "processing_time": processing_time,
            "stage_timings": timings,
        }
        if document.confidence is not None:
            metadata["source_confidence"] = document.confidence

        now = _utc_now()
        analysis = DocumentAnalysis(
            document_id=document_id or str(uuid.uuid4()),
            filename=document.filename,
            document_type=document_type,
            uploaded_at=uploaded_at or now,
            analyzed_at=now,
            entities=entities,
            risks=risks,
            missing_terms=missing_terms,
            blockers=blockers,
            risk_score=risk_score,
            required_actions=actions,
            summary=summary,
            raw_text=text[: self.config.raw_text_limit],
            metadata=metadata,
        )

        self._update_stats(processing_time)
        logger.info(
            f"Analysis of '{document.filename}' completed in {processing_time:.2f}s: "
            f"score {risk_score.overall} grade {risk_score.grade.value}, "
            f"{len(blockers)} blockers, {len(actions)} actions"
        )
        return analysis

    def _resolve_document_type(
        self, document: DocumentInput, text: str
    ) -> Tuple[DocumentType, str]:
        """Use a recognised type hint, otherwise classify."""
        if document.document_type is not None:
            hinted = DocumentType.parse(document.document_type)
            if hinted is not DocumentType.UNKNOWN:
                return hinted, "input"
            logger.warning(
                f"Ignoring unrecognised document type hint '{document.document_type}'"
            )
        return self._classifier.classify(text, document.filename), "classifier"

    def _extract_findings(
        self,
        text: str,
        document_type: DocumentType,
        timings: Dict[str, float],
    ):
        """Run the independent extraction stages."""
        stages: List[Tuple[str, Callable[[], Any]]] = [
            ("extract_entities", lambda: self._analyzer.extract_entities(text)),
            ("identify_risks", lambda: self._analyzer.identify_risks(text, document_type)),
            (
                "identify_missing_terms",
                lambda: self._analyzer.identify_missing_terms(text, document_type),
            ),
            ("generate_summary", lambda: self._analyzer.generate_summary(text, document_type)),
        ]

        if self.config.parallel_extraction and self.config.max_workers > 1:
            with ThreadPoolExecutor(
                max_workers=min(self.config.max_workers, len(stages)),
                thread_name_prefix="doc-risk",
            ) as executor:
                futures = [executor.submit(self._timed, name, call) for name, call in stages]
                outcomes = [future.result() for future in futures]
        else:
            outcomes = [self._timed(name, call) for name, call in stages]

        results = []
        for value, metric in outcomes:
            timings[metric.operation_name] = metric.duration or 0.0
            results.append(value)
        return tuple(results)

    def _timed(self, name: str, call: Callable[[], T]) -> Tuple[T, PerformanceMetrics]:
        """Run one stage under the performance monitor."""
        metric = self.performance_monitor.start_operation(name)
        try:
            value = call()
        except Exception as e:
            self.performance_monitor.end_operation(metric, success=False, error=str(e))
            logger.exception(f"Stage '{name}' failed: {e}")
            raise
        self.performance_monitor.end_operation(metric)
        return value, metric

    # =========================================================================
    # Stored analyses
    # =========================================================================

    def submit(self, document: DocumentInput, deal_id: Optional[str] = None) -> DocumentAnalysis:
        """
        Analyze a document and store it with its full source text.

        Args:
            document: Document to analyze.
            deal_id: Optional CRM deal to associate the document with.
        """
        analysis = self.analyze(document)
        self._store.save(
            StoredAnalysis(analysis=analysis, source_text=document.text or "", deal_id=deal_id)
        )
        return analysis

    def get(self, document_id: str) -> DocumentAnalysis:
        """
        Fetch a stored analysis.

        Raises:
            DocumentNotFoundError: If the document id is unknown.
        """
        return self._require(document_id).analysis

    def list_for_deal(self, deal_id: str) -> List[DocumentAnalysis]:
        """Stored analyses associated with a deal."""
        return [record.analysis for record in self._store.list_for_deal(deal_id)]

    def delete(self, document_id: str) -> bool:
        """Remove a stored analysis. Returns False if it did not exist."""
        existed = self._store.delete(document_id)
        if existed:
            logger.info(f"Deleted analysis {document_id}")
        return existed

    def reanalyze(self, document_id: str) -> DocumentAnalysis:
        """
        Re-run the full pipeline on a stored document's retained text.

        The document id, upload time and deal association are kept; the
        new score carries a trend relative to the previous one.

        Raises:
            DocumentNotFoundError: If the document id is unknown.
        """
        record = self._require(document_id)
        previous = record.analysis
        logger.info(f"Re-analyzing document {document_id}")

        type_hint = None
        if previous.metadata.get("document_type_source") == "input":
            type_hint = previous.document_type.value

        document = DocumentInput(
            text=record.source_text,
            filename=previous.filename,
            document_type=type_hint,
            confidence=previous.metadata.get("source_confidence"),
        )
        fresh = self.analyze(
            document, document_id=previous.document_id, uploaded_at=previous.uploaded_at
        )
        analysis = replace(
            fresh, risk_score=RiskScorer.with_trend(fresh.risk_score, previous.risk_score)
        )

        self._store.save(
            StoredAnalysis(analysis=analysis, source_text=record.source_text, deal_id=record.deal_id)
        )
        with self._stats_lock:
            self.stats.reanalyses += 1
        return analysis

    def _require(self, document_id: str) -> StoredAnalysis:
        record = self._store.get(document_id)
        if record is None:
            raise DocumentNotFoundError(
                message=f"Document not found: {document_id}", document_id=document_id
            )
        return record

    # =========================================================================
    # Statistics
    # =========================================================================

    def _update_stats(self, processing_time: float) -> None:
        """Update pipeline statistics."""
        with self._stats_lock:
            self.stats.total_analyses += 1
            self.stats.total_processing_time += processing_time
            self.stats.average_processing_time = (
                self.stats.total_processing_time / self.stats.total_analyses
            )

    def get_stats(self) -> PipelineStats:
        """Get a snapshot of pipeline execution statistics."""
        with self._stats_lock:
            return replace(self.stats)

    def get_performance_stats(self) -> Dict[str, Dict[str, Any]]:
        """Per-stage performance statistics."""
        return self.performance_monitor.get_all_stats()

    def close(self) -> None:
        """Release store resources where the store holds any."""
        close = getattr(self._store, "close", None)
        if callable(close):
            close()
        logger.info("Analysis pipeline closed")
