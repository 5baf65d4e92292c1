"""Layer 2 — Presidio NER for person names.

The pattern layer only sees capitalization; Presidio's spaCy model
catches names in running prose.  Only PERSON results are used, and
they are reported as ``EntityType.NAME`` so they merge with the
pattern-based names instead of double-redacting the same characters.

Model loading is slow, so the analyzer is built once per process by a
``LazyModel``.  Concurrent first callers all wait on the same load.
"""

from __future__ import annotations
import logging
import threading
from concurrent.futures import Future
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

from .exceptions import RecognizerUnavailable
from .types import Entity, EntityType

if TYPE_CHECKING:
    from presidio_analyzer import AnalyzerEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")

PERSON_LABELS = {"PERSON", "PER"}


class LazyModel(Generic[T]):
    """At-most-once initializer for an expensive resource.

    The first ``get()`` runs the factory; every other caller, including
    ones that arrive while the factory is still running, blocks on the
    same future.  A failed load is cached and re-raised to all callers
    until ``reset()``.
    """

    __slots__ = ("_factory", "_lock", "_future")

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._future: Future[T] | None = None

    def get(self, timeout: float | None = None) -> T:
        with self._lock:
            future = self._future
            owner = future is None
            if owner:
                future = self._future = Future()

        if owner:
            try:
                future.set_result(self._factory())
            except Exception as exc:
                future.set_exception(exc)
        return future.result(timeout=timeout)

    @property
    def loaded(self) -> bool:
        future = self._future
        return future is not None and future.done() and future.exception() is None

    def reset(self) -> None:
        """Forget the cached result so the next ``get()`` loads again."""
        with self._lock:
            self._future = None


_engines: dict[str, LazyModel[AnalyzerEngine]] = {}
_engines_lock = threading.Lock()


def _build_engine(language: str) -> AnalyzerEngine:
    """Create the Presidio analyzer engine (spaCy under the hood)."""
    try:
        from presidio_analyzer import AnalyzerEngine
        from presidio_analyzer.nlp_engine import NlpEngineProvider
    except ImportError as exc:
        raise RecognizerUnavailable("presidio-analyzer is not installed") from exc

    logger.info("loading Presidio analyzer for language %r", language)
    try:
        provider = NlpEngineProvider(nlp_configuration={
            "nlp_engine_name": "spacy",
            "models": [{"lang_code": language, "model_name": f"{language}_core_web_sm"}],
        })
        nlp_engine = provider.create_engine()
    except (OSError, ValueError) as exc:
        raise RecognizerUnavailable(f"spaCy model for {language!r} unavailable: {exc}") from exc
    return AnalyzerEngine(nlp_engine=nlp_engine, supported_languages=[language])


def get_engine_loader(language: str = "en") -> LazyModel[AnalyzerEngine]:
    """Per-language lazy loader, shared process-wide."""
    with _engines_lock:
        loader = _engines.get(language)
        if loader is None:
            loader = _engines[language] = LazyModel(lambda: _build_engine(language))
        return loader


def scan_presidio(
    text: str,
    *,
    language: str = "en",
    score_threshold: float = 0.35,
    engine: AnalyzerEngine | None = None,
) -> list[Entity]:
    """Run Presidio on text and return consolidated person spans.

    Args:
        text: Input text to scan.
        language: ISO language code.
        score_threshold: Minimum model score.
        engine: Analyzer to use instead of the shared lazy one.

    Raises whatever the engine raises; the caller decides how to degrade.
    """
    if not text or not text.strip():
        return []

    if engine is None:
        engine = get_engine_loader(language).get()
    results = engine.analyze(
        text=text,
        language=language,
        entities=["PERSON"],
        score_threshold=score_threshold,
    )
    return person_entities(text, (
        (r.entity_type, r.start, r.end, r.score) for r in results
    ))


def person_entities(text: str, spans) -> list[Entity]:
    """Turn ``(label, start, end, score)`` tuples into NAME entities.

    Non-person labels are dropped and exact duplicate spans collapse to
    the first one seen.
    """
    seen: set[tuple[int, int]] = set()
    out: list[Entity] = []
    for label, start, end, score in spans:
        if str(label).upper() not in PERSON_LABELS:
            continue
        if not (0 <= start < end <= len(text)):
            continue
        if (start, end) in seen:
            continue
        seen.add((start, end))
        out.append(Entity.create(
            EntityType.NAME,
            text[start:end],
            start,
            end,
            float(score or 0.0),
            source="presidio",
        ))
    return sorted(out, key=lambda e: e.start)
