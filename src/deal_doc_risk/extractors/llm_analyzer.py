"""OpenAI-backed document analyzer.

This analyzer sends a bounded prefix of the document to a chat model,
asks for a JSON response matching the finding schemas, and parses it into
the same dataclasses the rule-based analyzer produces. It raises
AnalyzerError on any failure; wrap it in FallbackAnalyzer to get the
degrade-to-rules behaviour.
"""

import json
import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from ..config.models import AnalyzerSettings
from ..exceptions import AnalyzerError, AnalyzerResponseError
from ..interfaces.analyzer import IDocumentAnalyzer
from ..models.enums import DocumentType, EntityType, RiskCategory, RiskSeverity
from ..models.findings import DealBlocker, DocumentRisk, ExtractedEntity, MissingTerm
from .rule_analyzer import RuleBasedAnalyzer


logger = logging.getLogger(__name__)


ENTITY_SYSTEM_PROMPT = """You are a legal document analyzer. Extract key entities from the document text.
Return a JSON object with an "entities" array with this structure:
[{"type": "party_name|date|amount|term_duration|payment_terms|liability_clause|termination_clause|confidentiality_clause|indemnification_clause|governing_law|signature|contact_info", "value": "extracted value", "confidence": 0.0-1.0}]
Only include entities you find with reasonable confidence."""

RISK_SYSTEM_PROMPT = """You are a legal risk analyst. Analyze the {document_type} document for potential risks.
Return a JSON object with "risks" array containing:
[{{"category": "missing_clause|unfavorable_terms|compliance_issue|liability_exposure|termination_risk|payment_risk|legal_ambiguity", "severity": "low|medium|high|critical", "title": "brief title", "description": "detailed description", "recommendation": "suggested action", "relatedClauses": ["optional clause references"]}}]"""

SUMMARY_SYSTEM_PROMPT = (
    "You are a legal document summarizer. Provide a concise 2-3 sentence summary "
    "of the document, highlighting key terms and parties involved."
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _clause_list(value: Any) -> List[str]:
    """Normalize a relatedClauses field to a list of clause references."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(c) for c in value if c is not None]
    logger.warning(f"Ignoring malformed relatedClauses of type {type(value).__name__}")
    return []


class OpenAIAnalyzer(IDocumentAnalyzer):
    """
    Analyzer backed by the OpenAI chat completions API.

    Entities, risks and summaries come from the model. Missing terms and
    blockers have no prompt contract and are delegated to the rule-based
    analyzer.
    """

    def __init__(
        self,
        settings: AnalyzerSettings,
        client: Optional[Any] = None,
        rules: Optional[RuleBasedAnalyzer] = None,
    ):
        """
        Args:
            settings: Model name, timeout, retries and prefix limits.
            client: Optional pre-built OpenAI client (created lazily if None).
            rules: Analyzer used for missing terms and blockers.
        """
        self._settings = settings
        self._client = client
        self._rules = rules or RuleBasedAnalyzer()

    @property
    def name(self) -> str:
        return f"openai:{self._settings.model}"

    def _get_client(self):
        """Create the OpenAI client on first use."""
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(
                api_key=self._settings.openai_api_key,
                timeout=self._settings.timeout,
                max_retries=self._settings.max_retries,
            )
        return self._client

    def _complete(
        self,
        operation: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        json_mode: bool = True,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Run a chat completion and return the message content."""
        kwargs: Dict[str, Any] = {
            "model": self._settings.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            response = self._get_client().chat.completions.create(**kwargs)
        except Exception as e:
            raise AnalyzerError(f"OpenAI request failed: {e}", operation=operation)

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise AnalyzerResponseError(f"Malformed completion object: {e}", operation=operation)

        if not content or not content.strip():
            raise AnalyzerResponseError("Empty completion content", operation=operation)
        return content

    def _parse_json(self, operation: str, content: str) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise AnalyzerResponseError(
                f"Invalid JSON: {e}", operation=operation, raw_content=content[:500]
            )

    def _extract_list(self, operation: str, parsed: Any, key: str) -> List[Any]:
        """Accept either {key: [...]} or a bare list."""
        if isinstance(parsed, dict) and isinstance(parsed.get(key), list):
            return parsed[key]
        if isinstance(parsed, list):
            return parsed
        raise AnalyzerResponseError(
            f"Response has no '{key}' array", operation=operation, raw_content=str(parsed)[:500]
        )

    def extract_entities(self, text: str) -> List[ExtractedEntity]:
        operation = "extract_entities"
        prefix = (text or "")[: self._settings.entity_char_limit]
        content = self._complete(
            operation,
            ENTITY_SYSTEM_PROMPT,
            f"Extract entities from this document:\n\n{prefix}",
            temperature=0.1,
        )
        items = self._extract_list(operation, self._parse_json(operation, content), "entities")

        entities: List[ExtractedEntity] = []
        for item in items:
            entity = self._to_entity(item)
            if entity is not None:
                entities.append(entity)
        return entities

    def _to_entity(self, item: Any) -> Optional[ExtractedEntity]:
        """Convert one response item, dropping items outside the schema."""
        try:
            entity_type = EntityType(item["type"])
            value = item["value"]
            confidence = float(item.get("confidence", 0.5))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Dropping malformed entity from analyzer response: {e}")
            return None
        if value is None:
            logger.warning("Dropping entity with null value from analyzer response")
            return None
        if not isinstance(value, str):
            value = str(value)
        return ExtractedEntity(
            type=entity_type,
            value=value,
            confidence=min(1.0, max(0.0, confidence)),
        )

    def identify_risks(self, text: str, document_type: DocumentType) -> List[DocumentRisk]:
        operation = "identify_risks"
        prefix = (text or "")[: self._settings.risk_char_limit]
        content = self._complete(
            operation,
            RISK_SYSTEM_PROMPT.format(document_type=document_type.value),
            f"Analyze this {document_type.value} for risks:\n\n{prefix}",
            temperature=0.2,
        )
        items = self._extract_list(operation, self._parse_json(operation, content), "risks")

        risks: List[DocumentRisk] = []
        for item in items:
            risk = self._to_risk(item)
            if risk is not None:
                risks.append(risk)
        return risks

    def _to_risk(self, item: Any) -> Optional[DocumentRisk]:
        """Convert one response item; ids are always assigned locally."""
        try:
            category = RiskCategory(item["category"])
            severity = RiskSeverity(item["severity"])
            related = item.get("relatedClauses", item.get("related_clauses"))
            return DocumentRisk(
                id=str(uuid.uuid4()),
                category=category,
                severity=severity,
                title=_text(item.get("title")),
                description=_text(item.get("description")),
                recommendation=_text(item.get("recommendation")),
                related_clauses=_clause_list(related),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Dropping malformed risk from analyzer response: {e}")
            return None

    def identify_missing_terms(
        self, text: str, document_type: DocumentType
    ) -> List[MissingTerm]:
        return self._rules.identify_missing_terms(text, document_type)

    def identify_blockers(
        self,
        text: str,
        risks: Sequence[DocumentRisk],
        missing_terms: Sequence[MissingTerm],
    ) -> List[DealBlocker]:
        return self._rules.identify_blockers(text, risks, missing_terms)

    def generate_summary(self, text: str, document_type: DocumentType) -> str:
        prefix = (text or "")[: self._settings.summary_char_limit]
        content = self._complete(
            "generate_summary",
            SUMMARY_SYSTEM_PROMPT,
            f"Summarize this {document_type.value}:\n\n{prefix}",
            temperature=0.3,
            json_mode=False,
            max_tokens=self._settings.summary_max_tokens,
        )
        return content.strip()
