"""Finding extraction components for the deal document risk scoring core."""

from .rule_analyzer import RuleBasedAnalyzer
from .llm_analyzer import OpenAIAnalyzer
from .fallback_analyzer import FallbackAnalyzer, create_analyzer
from .patterns import default_checklists

__all__ = [
    "RuleBasedAnalyzer",
    "OpenAIAnalyzer",
    "FallbackAnalyzer",
    "create_analyzer",
    "default_checklists",
]
