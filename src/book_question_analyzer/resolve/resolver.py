"""Question resolution - turning an analysis into the events that answer it.

Resolution is a small state machine. States are tried in a fixed priority
order and the first whose condition holds handles the question:

1. EXPLICIT_CHAPTER: the question names a chapter; return its events.
2. FUZZY_HIT: the similarity fallback found an event; return it alone.
3. NO_SIGNAL: nothing to filter on; return no events.
4. FILTERED_SEARCH: filter events by intent phrases, characters and places.
"""

import logging
from typing import Callable

from ..analyze.analyzer import QueryAnalyzer
from ..errors import ChapterNotFoundError, InvalidQuestionError
from ..models.analysis import QuestionAnalysis, QuestionResult, ResolutionState
from ..models.entities import CatalogEntry
from ..storage.base import NarrativeStore
from .filters import EventFilter, build_event_filter

logger = logging.getLogger(__name__)

SIMILAR_LABEL = "similar"
ALL_CHAPTERS_LABEL = "todos"


def _no_structured_filter(analysis: QuestionAnalysis) -> bool:
    return not analysis.intents and not analysis.character_names and not analysis.place_names


STATE_ORDER: list[tuple[ResolutionState, Callable[[QuestionAnalysis], bool]]] = [
    (ResolutionState.EXPLICIT_CHAPTER, lambda a: a.chapter_number is not None),
    (ResolutionState.FUZZY_HIT, lambda a: a.fuzzy_event is not None),
    (ResolutionState.NO_SIGNAL, _no_structured_filter),
    (ResolutionState.FILTERED_SEARCH, lambda a: True),
]


def select_state(analysis: QuestionAnalysis) -> ResolutionState:
    """Pick the first state whose condition holds for the analysis."""
    return next(state for state, condition in STATE_ORDER if condition(analysis))


def resolve_ids(entries: list[CatalogEntry], names: list[str]) -> list[str]:
    """IDs of catalog entries whose name equals one of ``names``, ignoring case."""
    wanted = {name.casefold() for name in names}
    return [e.id for e in entries if e.name.casefold() in wanted]


class QuestionResolver:
    """Answers questions with events from a narrative store."""

    def __init__(
        self,
        store: NarrativeStore,
        analyzer: QueryAnalyzer | None = None,
    ):
        """Initialize the resolver.

        Args:
            store: Catalogs, events and chapters to answer from
            analyzer: Analyzer to use (one over the same store if not provided)
        """
        self.store = store
        self.analyzer = analyzer or QueryAnalyzer(store)
        self._handlers: dict[ResolutionState, Callable[[QuestionAnalysis], QuestionResult]] = {
            ResolutionState.EXPLICIT_CHAPTER: self._resolve_chapter,
            ResolutionState.FUZZY_HIT: self._resolve_fuzzy,
            ResolutionState.NO_SIGNAL: self._resolve_no_signal,
            ResolutionState.FILTERED_SEARCH: self._resolve_filtered,
        }

    def resolve(self, question: str | None) -> QuestionResult:
        """Analyze a question and return the events that answer it.

        Raises:
            InvalidQuestionError: If the question is missing, blank or names an impossible chapter
            ChapterNotFoundError: If the question names a chapter that does not exist
            StorageUnavailableError: If the store cannot be read
        """
        if question is None or not question.strip():
            raise InvalidQuestionError("Question text is required")

        analysis = self.analyzer.analyze(question.strip())
        return self.resolve_analysis(analysis)

    def resolve_analysis(self, analysis: QuestionAnalysis) -> QuestionResult:
        """Resolve an existing analysis."""
        state = select_state(analysis)
        logger.info("Resolving %r as %s", analysis.question, state.value)
        result = self._handlers[state](analysis)
        logger.info("%d result(s)", len(result.results))
        return result

    def build_filter(self, analysis: QuestionAnalysis) -> EventFilter:
        """Build the event filter for a FILTERED_SEARCH analysis."""
        character_ids: list[str] = []
        if analysis.character_names:
            character_ids = resolve_ids(self.store.characters.list_names(), analysis.character_names)

        place_ids: list[str] = []
        if analysis.place_names:
            place_ids = resolve_ids(self.store.places.list_names(), analysis.place_names)

        logger.debug("IDs - characters: %s, places: %s", character_ids, place_ids)

        return build_event_filter(
            phrase_patterns=self.analyzer.intents.phrase_patterns(analysis.matched_intents),
            character_ids=character_ids,
            place_ids=place_ids,
        )

    def _resolve_chapter(self, analysis: QuestionAnalysis) -> QuestionResult:
        number = analysis.chapter_number
        chapter = self.store.chapters.find_by_number(number)
        if chapter is None:
            raise ChapterNotFoundError(number)
        return QuestionResult(
            chapter_label=number,
            results=chapter.events,
            state=ResolutionState.EXPLICIT_CHAPTER,
        )

    def _resolve_fuzzy(self, analysis: QuestionAnalysis) -> QuestionResult:
        event = self.store.events.get(analysis.fuzzy_event.id)
        return QuestionResult(
            chapter_label=SIMILAR_LABEL,
            results=[event] if event else [],
            state=ResolutionState.FUZZY_HIT,
        )

    def _resolve_no_signal(self, analysis: QuestionAnalysis) -> QuestionResult:
        return QuestionResult(
            chapter_label=ALL_CHAPTERS_LABEL,
            results=[],
            state=ResolutionState.NO_SIGNAL,
        )

    def _resolve_filtered(self, analysis: QuestionAnalysis) -> QuestionResult:
        event_filter = self.build_filter(analysis)
        logger.debug("Event filter: %s", event_filter)

        # Names that no longer resolve leave nothing to filter on
        results = [] if event_filter.is_empty else self.store.events.query(event_filter)
        return QuestionResult(
            chapter_label=ALL_CHAPTERS_LABEL,
            results=results,
            state=ResolutionState.FILTERED_SEARCH,
        )


def analyze_and_resolve(question: str | None, store: NarrativeStore | None = None) -> QuestionResult:
    """Answer a question from the configured store.

    This is the entry point a web layer calls. Errors carry ``status_code``.
    """
    if store is None:
        from ..storage import open_store

        store = open_store()
    return QuestionResolver(store).resolve(question)
