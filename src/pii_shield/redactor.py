"""Redactor — the main API.  Layered: regex first, then Presidio NER.

Usage:
    from pii_shield import Redactor, RedactorConfig

    redactor = Redactor(RedactorConfig(use_presidio=False))
    result = redactor.redact("Contact John Smith at john@acme.com")
    print(result.redacted_text)   # "Contact [NAME_1] at [EMAIL_1]"

    # Same entities, different substitution
    redactor.redact(text, strategy="Contextual Masking")

The two detection layers run side by side on a small thread pool and
are merged only after both finish.  If the NER layer errors or times
out, the pattern results are used alone.
"""

from __future__ import annotations
import logging
import threading
import time
from collections import defaultdict
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from .merger import merge_entities
from .patterns import scan_regex
from .stats import compute_stats, mean_confidence
from .strategies import StrategyOptions, get_strategy, normalize_strategy
from .types import Entity, EntityType, RedactionResult

logger = logging.getLogger(__name__)

Scanner = Callable[[str], list[Entity]]


@dataclass
class RedactorConfig:
    """Configuration for the Redactor."""
    use_presidio: bool = True         # enable Layer 2 (NER)
    language: str = "en"
    score_threshold: float = 0.35     # minimum confidence for Presidio
    model_timeout: float | None = 30.0  # seconds to wait for Layer 2
    custom_scanners: list[Scanner] = field(default_factory=list)
    # None = every registered pattern type
    enabled_types: set[EntityType] | None = None
    # Entity types to always skip (e.g. don't redact dates)
    skip_types: set[EntityType] = field(default_factory=set)
    # Allow-list: values that should NEVER be redacted
    allow_list: set[str] = field(default_factory=set)
    strategy: str = "placeholder"
    placeholder_width: int = 1
    hash_salt: str = ""

    @property
    def strategy_options(self) -> StrategyOptions:
        return StrategyOptions(
            placeholder_width=self.placeholder_width,
            hash_salt=self.hash_salt,
        )


# ----------------------------------------------------------------------
# Redaction engine
# ----------------------------------------------------------------------

def assign_sequence_numbers(entities: Iterable[Entity]) -> dict[Entity, int]:
    """Number entities 1..n within each type, in order of appearance."""
    counters: dict[EntityType, int] = defaultdict(int)
    numbers: dict[Entity, int] = {}
    for entity in sorted(entities, key=lambda e: e.start):
        counters[entity.type] += 1
        numbers[entity] = counters[entity.type]
    return numbers


def apply_redaction(
    text: str,
    entities: Sequence[Entity],
    strategy: str = "placeholder",
    options: StrategyOptions | None = None,
) -> str:
    """Replace each entity span in text using the named strategy.

    ``entities`` must be a canonical (non-overlapping) list with offsets
    into ``text``.  Replacement runs right-to-left so earlier offsets
    stay valid; everything outside the spans is copied verbatim.
    """
    replace = get_strategy(strategy)
    options = options or StrategyOptions()
    _check_canonical(text, entities)

    # numbering must be fixed before any offsets move
    numbers = assign_sequence_numbers(entities)

    result = text
    for entity in sorted(entities, key=lambda e: e.start, reverse=True):
        replacement = replace(entity, numbers[entity], options)
        result = result[:entity.start] + replacement + result[entity.end:]
    return result


def _check_canonical(text: str, entities: Sequence[Entity]) -> None:
    previous: Entity | None = None
    for entity in sorted(entities, key=lambda e: e.start):
        if not (0 <= entity.start < entity.end <= len(text)):
            raise ValueError(
                f"entity span [{entity.start}, {entity.end}) outside text of length {len(text)}"
            )
        if previous is not None and previous.end > entity.start:
            raise ValueError(
                f"overlapping entities at [{previous.start}, {previous.end}) "
                f"and [{entity.start}, {entity.end}); merge them first"
            )
        previous = entity


# ----------------------------------------------------------------------
# Pipeline
# ----------------------------------------------------------------------

class Redactor:
    """Layered PII detector and redactor.

    Layer 1: Regex patterns + validators + name filter
    Layer 2: Presidio NER (person names), optional
    Layer 3: Custom scanners (user-provided callables)

    At most ``MODEL_WORKERS`` NER calls are in flight at once.  A call
    that would exceed that (because earlier ones hang) is skipped and
    the request runs pattern-only.
    """

    MODEL_WORKERS = 2

    def __init__(
        self,
        config: RedactorConfig | None = None,
        *,
        recognizer: Scanner | None = None,
    ) -> None:
        self.config = config or RedactorConfig()
        self._recognizer = recognizer
        self._lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        self._in_flight: set[Future] = set()
        # fail fast on a bad default strategy
        normalize_strategy(self.config.strategy)

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def detect(self, text: str | None) -> list[Entity]:
        """Return the canonical entity list for text."""
        if not text or not text.strip():
            return []

        submitted = self._submit_model(text)

        # --- Layer 1: Regex (runs here while Layer 2 works) ---
        regex_matches = scan_regex(text, self.config.enabled_types)

        # --- Layer 2: NER ---
        model_matches = self._collect_model(submitted)

        # --- Layer 3: Custom scanners ---
        custom_matches: list[Entity] = []
        for scanner in self.config.custom_scanners:
            custom_matches.extend(scanner(text))

        logger.debug(
            "detected %d regex, %d model, %d custom candidates",
            len(regex_matches), len(model_matches), len(custom_matches),
        )
        return merge_entities(
            self._filter(regex_matches),
            self._filter(model_matches),
            self._filter(custom_matches),
        )

    def _model_scanner(self) -> Scanner | None:
        if self._recognizer is not None:
            return self._recognizer
        if not self.config.use_presidio:
            return None

        from .presidio_layer import scan_presidio

        language = self.config.language
        threshold = self.config.score_threshold
        return lambda text: scan_presidio(text, language=language, score_threshold=threshold)

    def _submit_model(self, text: str) -> tuple[Future, float | None] | None:
        """Queue the NER call; returns the future and its deadline."""
        scanner = self._model_scanner()
        if scanner is None:
            return None

        with self._lock:
            if len(self._in_flight) >= self.MODEL_WORKERS:
                logger.warning(
                    "NER layer busy with %d unfinished calls; using pattern results only",
                    len(self._in_flight),
                )
                return None
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.MODEL_WORKERS, thread_name_prefix="pii-ner"
                )
            future = self._executor.submit(scanner, text)
            self._in_flight.add(future)

        future.add_done_callback(self._model_done)
        timeout = self.config.model_timeout
        deadline = None if timeout is None else time.monotonic() + timeout
        return future, deadline

    def _model_done(self, future: Future) -> None:
        with self._lock:
            self._in_flight.discard(future)

    def _collect_model(self, submitted: tuple[Future, float | None] | None) -> list[Entity]:
        if submitted is None:
            return []
        future, deadline = submitted
        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        try:
            return list(future.result(timeout=remaining))
        except FutureTimeout:
            # drops the call if it never started
            future.cancel()
            logger.warning(
                "NER layer timed out after %ss; using pattern results only",
                self.config.model_timeout,
            )
        except Exception as exc:
            logger.warning("NER layer unavailable (%s); using pattern results only", exc)
        return []

    def _filter(self, matches: list[Entity]) -> list[Entity]:
        enabled = self.config.enabled_types
        filtered: list[Entity] = []
        for m in matches:
            if enabled is not None and m.type not in enabled:
                continue
            if m.type in self.config.skip_types:
                continue
            if m.text in self.config.allow_list:
                continue
            filtered.append(m)
        return filtered


    # ------------------------------------------------------------------
    # Redaction
    # ------------------------------------------------------------------

    def redact(self, text: str | None, strategy: str | None = None) -> RedactionResult:
        """Detect PII in text and replace it with the chosen strategy."""
        strategy_id = normalize_strategy(strategy or self.config.strategy)
        text = text or ""

        entities = self.detect(text)
        redacted = apply_redaction(
            text, entities, strategy_id, self.config.strategy_options
        )
        return RedactionResult(
            original_text=text,
            redacted_text=redacted,
            entities=tuple(entities),
            strategy=strategy_id,
            confidence=mean_confidence(entities),
            stats=compute_stats(entities),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self, wait: bool = False) -> None:
        """Shut down the NER pool; hung calls are abandoned unless ``wait``."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> Redactor:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
