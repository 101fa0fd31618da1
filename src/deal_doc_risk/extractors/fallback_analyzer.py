"""Fallback analyzer composing a primary and a fallback layer.

The primary analyzer (typically AI-backed) is tried first for every
operation. Any exception it raises is logged and the same call is
delegated to the fallback analyzer (typically rule-based), so extraction
always returns a well-typed result.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

from ..config.models import AnalyzerSettings, TermChecklists
from ..interfaces.analyzer import IDocumentAnalyzer
from ..models.enums import DocumentType
from ..models.findings import DealBlocker, DocumentRisk, ExtractedEntity, MissingTerm
from .llm_analyzer import OpenAIAnalyzer
from .rule_analyzer import RuleBasedAnalyzer


logger = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackAnalyzer(IDocumentAnalyzer):
    """Decorator that degrades from the primary analyzer to the fallback.

    The fallback analyzer is expected not to raise; its exceptions are
    not caught here.
    """

    def __init__(self, primary: IDocumentAnalyzer, fallback: IDocumentAnalyzer) -> None:
        self._primary = primary
        self._fallback = fallback

    @property
    def name(self) -> str:
        return f"{self._primary.name}>{self._fallback.name}"

    @property
    def primary(self) -> IDocumentAnalyzer:
        return self._primary

    @property
    def fallback(self) -> IDocumentAnalyzer:
        return self._fallback

    def _attempt(
        self,
        operation: str,
        primary_call: Callable[[], T],
        fallback_call: Callable[[], T],
    ) -> T:
        try:
            return primary_call()
        except Exception as e:
            logger.warning(
                f"{operation} failed on {self._primary.name}, "
                f"falling back to {self._fallback.name}: {e}"
            )
        return fallback_call()

    def extract_entities(self, text: str) -> List[ExtractedEntity]:
        return self._attempt(
            "extract_entities",
            lambda: self._primary.extract_entities(text),
            lambda: self._fallback.extract_entities(text),
        )

    def identify_risks(self, text: str, document_type: DocumentType) -> List[DocumentRisk]:
        return self._attempt(
            "identify_risks",
            lambda: self._primary.identify_risks(text, document_type),
            lambda: self._fallback.identify_risks(text, document_type),
        )

    def identify_missing_terms(
        self, text: str, document_type: DocumentType
    ) -> List[MissingTerm]:
        return self._attempt(
            "identify_missing_terms",
            lambda: self._primary.identify_missing_terms(text, document_type),
            lambda: self._fallback.identify_missing_terms(text, document_type),
        )

    def identify_blockers(
        self,
        text: str,
        risks: Sequence[DocumentRisk],
        missing_terms: Sequence[MissingTerm],
    ) -> List[DealBlocker]:
        return self._attempt(
            "identify_blockers",
            lambda: self._primary.identify_blockers(text, risks, missing_terms),
            lambda: self._fallback.identify_blockers(text, risks, missing_terms),
        )

    def generate_summary(self, text: str, document_type: DocumentType) -> str:
        return self._attempt(
            "generate_summary",
            lambda: self._primary.generate_summary(text, document_type),
            lambda: self._fallback.generate_summary(text, document_type),
        )


def create_analyzer(
    settings: Optional[AnalyzerSettings] = None,
    checklists: Optional[TermChecklists] = None,
    client=None,
) -> IDocumentAnalyzer:
    """Select an analyzer from configuration.

    Without an OpenAI credential the rule-based analyzer is returned and
    no remote call is ever attempted. With one, the OpenAI analyzer is
    wrapped in a FallbackAnalyzer over the rules.

    Args:
        settings: Analyzer settings; read from the environment if None.
        checklists: Optional term checklists for the rule layer.
        client: Optional pre-built OpenAI client.
    """
    settings = settings or AnalyzerSettings.from_env()
    rules = RuleBasedAnalyzer(checklists=checklists)

    if not settings.is_configured:
        logger.info("No OpenAI credential configured, using rule-based analyzer")
        return rules

    logger.info(f"Using OpenAI analyzer ({settings.model}) with rule-based fallback")
    remote = OpenAIAnalyzer(settings, client=client, rules=rules)
    return FallbackAnalyzer(primary=remote, fallback=rules)
