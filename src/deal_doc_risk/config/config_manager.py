"""Configuration Manager for the deal document risk scoring core.

This module loads, validates and exports the scoring tables and the
required-term checklists used by the rule-based analyzer.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..models.enums import DocumentType, RiskCategory, RiskGrade, RiskSeverity, TermImportance
from .models import (
    ConfigurationError,
    ScoringConfiguration,
    SystemConfiguration,
    TermChecklists,
    TermRequirement,
    ValidationResult,
)


logger = logging.getLogger(__name__)

Source = Union[str, Path, Dict[str, Any]]


class ConfigurationManager:
    """
    Manager for scoring configuration.

    Handles loading, validation, and access to scoring tables and
    per-document-type term checklists.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional directory path for configuration files.
        """
        self._config_dir = Path(config_dir) if config_dir else None
        self._configuration = SystemConfiguration()
        self._is_loaded = False

    @property
    def configuration(self) -> SystemConfiguration:
        """Get the current system configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    # =========================================================================
    # Scoring tables
    # =========================================================================

    def load_scoring(self, source: Source) -> ValidationResult:
        """
        Load and validate scoring tables.

        Keys not present in the source keep their default values.

        Args:
            source: JSON file path or dictionary.

        Returns:
            ValidationResult with any warnings.

        Raises:
            ConfigurationError: If validation fails.
        """
        data = self._parse_source(source)
        result = ValidationResult(is_valid=True)
        defaults = ScoringConfiguration()

        if not isinstance(data, dict):
            result.add_error("Scoring configuration must be an object")
            raise ConfigurationError("Scoring configuration validation failed", result)

        weights = self._parse_enum_table(
            data.get("category_weights", {}), RiskCategory, int, "category_weights", result
        )
        multipliers = self._parse_enum_table(
            data.get("severity_multipliers", {}), RiskSeverity, float, "severity_multipliers", result
        )
        penalties = self._parse_enum_table(
            data.get("importance_penalties", {}), TermImportance, int, "importance_penalties", result
        )

        scalars: Dict[str, int] = {}
        for name in ("default_weight", "blocker_penalty", "overall_cap", "bucket_cap"):
            if name not in data:
                continue
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                result.add_error(f"'{name}' must be a non-negative integer")
            else:
                scalars[name] = value

        bands = self._parse_grade_bands(data.get("grade_bands"), result)

        if not result.is_valid:
            raise ConfigurationError("Scoring configuration validation failed", result)

        scoring = ScoringConfiguration(
            category_weights={**defaults.category_weights, **weights},
            severity_multipliers={**defaults.severity_multipliers, **multipliers},
            importance_penalties={**defaults.importance_penalties, **penalties},
            grade_bands=bands if bands is not None else defaults.grade_bands,
            **scalars,
        )
        self._configuration.scoring = scoring
        self._is_loaded = True
        logger.info("Loaded scoring configuration")
        return result

    def _parse_enum_table(
        self,
        raw: Any,
        enum_cls,
        value_type,
        name: str,
        result: ValidationResult,
    ) -> Dict[Any, Any]:
        """Validate a {enum value: number} table."""
        table: Dict[Any, Any] = {}
        if not isinstance(raw, dict):
            result.add_error(f"'{name}' must be an object")
            return table

        for key, value in raw.items():
            try:
                member = enum_cls(key)
            except ValueError:
                result.add_error(f"{name}: unknown key '{key}'")
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                result.add_error(f"{name}: value for '{key}' must be a non-negative number")
                continue
            table[member] = value_type(value)
        return table

    def _parse_grade_bands(self, raw: Any, result: ValidationResult):
        """Validate grade bands given as [{"max": 20, "grade": "A"}, ...]."""
        if raw is None:
            return None
        if not isinstance(raw, list) or not raw:
            result.add_error("'grade_bands' must be a non-empty list")
            return None

        bands = []
        for i, band in enumerate(raw):
            prefix = f"Grade band [{i}]"
            if not isinstance(band, dict) or "max" not in band or "grade" not in band:
                result.add_error(f"{prefix}: requires 'max' and 'grade'")
                continue
            try:
                grade = RiskGrade(band["grade"])
            except ValueError:
                result.add_error(f"{prefix}: unknown grade '{band['grade']}'")
                continue
            if isinstance(band["max"], bool) or not isinstance(band["max"], int):
                result.add_error(f"{prefix}: 'max' must be an integer")
                continue
            bands.append((band["max"], grade))

        bounds = [upper for upper, _ in bands]
        if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
            result.add_error("Grade bands must have strictly increasing upper bounds")
        return bands

    # =========================================================================
    # Term checklists
    # =========================================================================

    def load_checklists(self, source: Source) -> ValidationResult:
        """
        Load and validate required-term checklists.

        Expected shape::

            {"fallback_type": "contract",
             "checklists": {"nda": [{"term": "...", "keywords": ["..."]}]}}

        Raises:
            ConfigurationError: If validation fails.
        """
        data = self._parse_source(source)
        result = ValidationResult(is_valid=True)

        if not isinstance(data, dict) or not isinstance(data.get("checklists"), dict):
            result.add_error("Checklist configuration requires a 'checklists' object")
            raise ConfigurationError("Checklist validation failed", result)

        checklists: Dict[DocumentType, List[TermRequirement]] = {}
        for type_name, entries in data["checklists"].items():
            doc_type = DocumentType.parse(type_name)
            if doc_type is DocumentType.UNKNOWN and type_name != DocumentType.UNKNOWN.value:
                result.add_error(f"Unknown document type '{type_name}'")
                continue
            if not isinstance(entries, list):
                result.add_error(f"Checklist '{type_name}' must be a list")
                continue
            requirements = []
            for i, entry in enumerate(entries):
                requirement = self._validate_requirement(entry, f"{type_name}[{i}]", result)
                if requirement:
                    requirements.append(requirement)
            if not requirements:
                result.add_warning(f"Checklist '{type_name}' is empty")
            checklists[doc_type] = requirements

        raw_fallback = data.get("fallback_type", DocumentType.CONTRACT.value)
        fallback = DocumentType.parse(raw_fallback)
        if fallback is DocumentType.UNKNOWN and raw_fallback != DocumentType.UNKNOWN.value:
            result.add_error(f"Unknown fallback type '{raw_fallback}'")
        elif fallback not in checklists:
            result.add_warning(
                f"Fallback type '{fallback.value}' has no checklist; "
                "unlisted types will report no missing terms"
            )

        if not result.is_valid:
            raise ConfigurationError("Checklist validation failed", result)

        self._configuration.checklists = TermChecklists(
            checklists=checklists, fallback_type=fallback
        )
        self._is_loaded = True
        logger.info(f"Loaded term checklists for {len(checklists)} document types")
        return result

    def _validate_requirement(
        self, data: Any, prefix: str, result: ValidationResult
    ) -> Optional[TermRequirement]:
        """Validate a single checklist entry."""
        if not isinstance(data, dict):
            result.add_error(f"{prefix}: entry must be an object")
            return None

        missing = [name for name in ("term", "keywords") if name not in data]
        for name in missing:
            result.add_error(f"{prefix}: Missing required field '{name}'")
        if missing:
            return None

        if not isinstance(data["term"], str) or not data["term"].strip():
            result.add_error(f"{prefix}: 'term' must be a non-empty string")
            return None
        keywords = data["keywords"]
        if not isinstance(keywords, list) or not keywords or not all(
            isinstance(k, str) and k.strip() for k in keywords
        ):
            result.add_error(f"{prefix}: 'keywords' must be a non-empty list of strings")
            return None

        try:
            importance = TermImportance(data.get("importance", TermImportance.REQUIRED.value))
        except ValueError:
            result.add_error(f"{prefix}: unknown importance '{data.get('importance')}'")
            return None

        return TermRequirement(
            term=data["term"].strip(),
            keywords=[k.strip() for k in keywords],
            importance=importance,
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _parse_source(self, source: Source) -> Any:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}")

        return source

    def load_from_directory(self, config_dir: Union[str, Path]) -> ValidationResult:
        """
        Load all configuration files from a directory.

        Expects files named:
        - scoring.json
        - checklists.json

        Args:
            config_dir: Directory containing configuration files.

        Returns:
            Combined ValidationResult for all loaded configurations.
        """
        config_dir = Path(config_dir)
        result = ValidationResult(is_valid=True)

        scoring_file = config_dir / "scoring.json"
        if scoring_file.exists():
            try:
                result = result.merge(self.load_scoring(scoring_file))
            except ConfigurationError as e:
                result.add_error(f"Scoring loading failed: {e.message}")
                if e.validation_result:
                    result = result.merge(e.validation_result)

        checklist_file = config_dir / "checklists.json"
        if checklist_file.exists():
            try:
                result = result.merge(self.load_checklists(checklist_file))
            except ConfigurationError as e:
                result.add_error(f"Checklist loading failed: {e.message}")
                if e.validation_result:
                    result = result.merge(e.validation_result)

        self._config_dir = config_dir
        return result

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._configuration = SystemConfiguration()
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        scoring = self._configuration.scoring
        data: Dict[str, Any] = {
            "version": self._configuration.version,
            "scoring": {
                "category_weights": {k.value: v for k, v in scoring.category_weights.items()},
                "default_weight": scoring.default_weight,
                "severity_multipliers": {
                    k.value: v for k, v in scoring.severity_multipliers.items()
                },
                "importance_penalties": {
                    k.value: v for k, v in scoring.importance_penalties.items()
                },
                "blocker_penalty": scoring.blocker_penalty,
                "overall_cap": scoring.overall_cap,
                "bucket_cap": scoring.bucket_cap,
                "grade_bands": [
                    {"max": upper, "grade": grade.value} for upper, grade in scoring.grade_bands
                ],
            },
            "metadata": self._configuration.metadata,
        }
        checklists = self._configuration.checklists
        if checklists is not None:
            data["checklists"] = {
                "fallback_type": checklists.fallback_type.value,
                "checklists": {
                    doc_type.value: [
                        {
                            "term": r.term,
                            "keywords": r.keywords,
                            "importance": r.importance.value,
                        }
                        for r in requirements
                    ]
                    for doc_type, requirements in checklists.checklists.items()
                },
            }
        return data
