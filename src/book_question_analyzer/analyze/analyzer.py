"""Question analysis coordinator.

Runs normalization, chapter extraction, catalog matching and intent
detection over a question, and falls back to similarity search only when
none of them found anything.
"""

import logging

from ..config import get_settings
from ..models.analysis import QuestionAnalysis
from ..storage.base import NarrativeStore
from .chapters import ChapterExtractor
from .fuzzy import FuzzyEventMatcher
from .intents import IntentClassifier
from .lexicon import IntentLexicon
from .matching import EntityCatalogMatcher
from .normalizer import TextNormalizer

logger = logging.getLogger(__name__)


class QueryAnalyzer:
    """Turns a free-text question into a QuestionAnalysis."""

    def __init__(
        self,
        store: NarrativeStore,
        lexicon: IntentLexicon | None = None,
        fuzzy_threshold: float | None = None,
    ):
        """Initialize the analyzer.

        Args:
            store: Catalogs and event store to match against
            lexicon: Intent lexicon (the process-wide one if not provided)
            fuzzy_threshold: Minimum similarity score (from settings if not provided)
        """
        if fuzzy_threshold is None:
            fuzzy_threshold = get_settings().fuzzy_threshold

        self.store = store
        self.normalizer = TextNormalizer()
        self.chapters = ChapterExtractor()
        self.entities = EntityCatalogMatcher(self.normalizer)
        self.intents = IntentClassifier(lexicon, self.normalizer)
        self.fuzzy = FuzzyEventMatcher(fuzzy_threshold, self.normalizer)

    def analyze(self, question: str) -> QuestionAnalysis:
        """Analyze a question.

        Args:
            question: Raw question text

        Returns:
            QuestionAnalysis with every detected signal

        Raises:
            InvalidQuestionError: If the chapter number is too long
            StorageUnavailableError: If a catalog cannot be read
        """
        normalized = self.normalizer.normalize(question)
        logger.debug("Normalized question: %r", normalized)

        chapter = self.chapters.extract(normalized)
        logger.debug("Chapter detected: %s", chapter)

        characters = self.entities.find_mentioned(self.store.characters.list_names(), normalized)
        places = self.entities.find_mentioned(self.store.places.list_names(), normalized)
        objects = []
        if self.store.objects is not None:
            objects = self.entities.find_mentioned(self.store.objects.list_names(), normalized)

        logger.debug("Characters detected: %s", [e.name for e in characters])
        logger.debug("Places detected: %s", [e.name for e in places])
        logger.debug("Objects detected: %s", [e.name for e in objects])

        analysis = QuestionAnalysis(
            question=question,
            normalized=normalized,
            chapter_number=chapter,
            intents=self.intents.detect(question),
            character_names=[e.name for e in characters],
            place_names=[e.name for e in places],
            object_names=[e.name for e in objects],
        )

        # Any structured signal beats a similarity guess
        if not analysis.has_signal:
            summaries = self.store.events.list_summaries()
            analysis.fuzzy_event = self.fuzzy.find_best_match(normalized, summaries)

        return analysis
