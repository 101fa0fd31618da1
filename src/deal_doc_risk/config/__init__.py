"""Configuration management for the deal document risk scoring core."""

from .config_manager import ConfigurationManager
from .models import (
    AnalyzerSettings,
    ConfigurationError,
    ScoringConfiguration,
    SystemConfiguration,
    TermChecklists,
    TermRequirement,
    ValidationResult,
)

__all__ = [
    "AnalyzerSettings",
    "ConfigurationManager",
    "ConfigurationError",
    "ScoringConfiguration",
    "SystemConfiguration",
    "TermChecklists",
    "TermRequirement",
    "ValidationResult",
]
