"""YAML/dict config loader for pii-shield.

Supports loading from a YAML file or a plain dict (for embedding in a
larger application config).

Example YAML:

    pii_shield:
      use_presidio: true
      language: en
      score_threshold: 0.35
      model_timeout: 30
      strategy: Smart Placeholders
      placeholder_width: 2
      skip_types:
        - DATE_OF_BIRTH
      allow_list:
        - support@example.com
      hash_salt: change-me

Environment overrides (applied by ``apply_env_overrides``):
    PII_SHIELD_NO_PRESIDIO   any non-empty value disables the NER layer
    PII_SHIELD_THRESHOLD     float score threshold for the NER layer
    PII_SHIELD_STRATEGY      default redaction strategy
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError, UnknownStrategyError
from .redactor import Redactor, RedactorConfig
from .strategies import normalize_strategy
from .types import EntityType


def _entity_types(values: Any, key: str) -> set[EntityType] | None:
    if values is None:
        return None
    if isinstance(values, str):
        values = [v for v in values.split(",") if v.strip()]
    try:
        return {EntityType(str(v).strip().upper()) for v in values}
    except ValueError as exc:
        raise ConfigError(f"{key}: {exc}") from exc


def _float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number, got {value!r}") from exc


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def load_config(data: Mapping[str, Any] | None) -> RedactorConfig:
    """Normalize a config mapping (from YAML or inline) into a RedactorConfig."""
    data = dict(data or {})
    # Support nested under "pii_shield" key or flat
    if "pii_shield" in data:
        data = dict(data["pii_shield"] or {})

    threshold = _float(data.get("score_threshold", 0.35), "score_threshold")
    if not 0.0 <= threshold <= 1.0:
        raise ConfigError(f"score_threshold must be within [0, 1], got {threshold}")

    timeout = data.get("model_timeout", 30.0)
    if timeout is not None:
        timeout = _float(timeout, "model_timeout")

    width = data.get("placeholder_width", 1)
    if not isinstance(width, int) or width < 1:
        raise ConfigError(f"placeholder_width must be a positive integer, got {width!r}")

    try:
        strategy = normalize_strategy(data.get("strategy", "placeholder"))
    except UnknownStrategyError as exc:
        raise ConfigError(str(exc)) from exc

    return RedactorConfig(
        use_presidio=_bool(data.get("use_presidio", True), "use_presidio"),
        language=str(data.get("language", "en")),
        score_threshold=threshold,
        model_timeout=timeout,
        enabled_types=_entity_types(data.get("entities"), "entities"),
        skip_types=_entity_types(data.get("skip_types"), "skip_types") or set(),
        allow_list=set(data.get("allow_list") or []),
        strategy=strategy,
        placeholder_width=width,
        hash_salt=str(data.get("hash_salt", "")),
    )


def load_from_yaml(path: str | Path) -> RedactorConfig:
    """Load config from a YAML file."""
    with open(Path(path).expanduser(), encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return load_config(raw)


def apply_env_overrides(
    config: RedactorConfig,
    environ: Mapping[str, str] | None = None,
) -> RedactorConfig:
    """Apply PII_SHIELD_* environment variables on top of a config."""
    env = os.environ if environ is None else environ

    if env.get("PII_SHIELD_NO_PRESIDIO", ""):
        config.use_presidio = False
    if env.get("PII_SHIELD_THRESHOLD"):
        config.score_threshold = _float(env["PII_SHIELD_THRESHOLD"], "PII_SHIELD_THRESHOLD")
    if env.get("PII_SHIELD_STRATEGY"):
        try:
            config.strategy = normalize_strategy(env["PII_SHIELD_STRATEGY"])
        except UnknownStrategyError as exc:
            raise ConfigError(str(exc)) from exc
    return config


def build_redactor(config: Mapping[str, Any] | RedactorConfig | None = None) -> Redactor:
    """Create a configured Redactor from a mapping or a RedactorConfig."""
    if not isinstance(config, RedactorConfig):
        config = load_config(config)
    return Redactor(config)
