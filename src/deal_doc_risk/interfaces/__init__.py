"""Abstract interfaces for the deal document risk scoring core."""

from .analyzer import IDocumentAnalyzer
from .store import IAnalysisStore, StoredAnalysis

__all__ = [
    "IDocumentAnalyzer",
    "IAnalysisStore",
    "StoredAnalysis",
]
