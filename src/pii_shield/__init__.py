"""PII Shield — layered PII detection and redaction for extracted text."""

from .redactor import Redactor, RedactorConfig, apply_redaction, assign_sequence_numbers
from .merger import merge_entities, resolve_overlaps
from .patterns import scan_regex
from .validators import validate
from .names import is_valid_person_name
from .stats import compute_stats
from .config import build_redactor, load_config, load_from_yaml
from .exceptions import ConfigError, PIIShieldError, UnknownStrategyError
from .types import Entity, EntityType, RedactionResult, RedactionStats, risk_category

__all__ = [
    "Redactor", "RedactorConfig",
    "apply_redaction", "assign_sequence_numbers",
    "merge_entities", "resolve_overlaps",
    "scan_regex", "validate", "is_valid_person_name",
    "compute_stats",
    "build_redactor", "load_config", "load_from_yaml",
    "ConfigError", "PIIShieldError", "UnknownStrategyError",
    "Entity", "EntityType", "RedactionResult", "RedactionStats", "risk_category",
]
__version__ = "0.1.0"
