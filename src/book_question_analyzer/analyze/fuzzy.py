"""Last-resort similarity search over event descriptions.

A bag-of-words overlap: the fraction of the question's distinct words that
also appear in an event's name or description. Cheap and explainable, with
no resistance to common-word noise, which is acceptable for a small curated
event corpus.
"""

import logging
from typing import Sequence

from ..models.entities import EventSummary
from .normalizer import TextNormalizer

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.2


class FuzzyEventMatcher:
    """Finds the event whose text best overlaps a question."""

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        normalizer: TextNormalizer | None = None,
    ):
        self.threshold = threshold
        self.normalizer = normalizer or TextNormalizer()

    def score(self, normalized_question: str, event: EventSummary) -> float:
        """Fraction of question words found in the event's name and description."""
        question_words = set(normalized_question.split())
        combined = self.normalizer.normalize(f"{event.name} {event.description or ''}")
        event_words = set(combined.split())
        return len(question_words & event_words) / max(len(question_words), 1)

    def find_best_match(
        self,
        normalized_question: str,
        events: Sequence[EventSummary],
    ) -> EventSummary | None:
        """Return the best scoring event above the threshold.

        Ties go to the event listed first.
        """
        if not events:
            logger.debug("No events to compare against")
            return None

        best: EventSummary | None = None
        best_score = -1.0
        for event in events:
            score = self.score(normalized_question, event)
            logger.debug("Event %r scored %.3f", event.name, score)
            if score > best_score:
                best, best_score = event, score

        if best is not None and best_score > self.threshold:
            logger.debug("Best match %r with score %.3f", best.name, best_score)
            return best

        logger.debug("No event above threshold %.2f", self.threshold)
        return None
