"""Intent detection against the literary verb lexicon."""

import logging
import re
from typing import Iterable

from ..models.analysis import IntentKey, IntentMatch
from .lexicon import IntentLexicon, get_intent_lexicon
from .normalizer import TextNormalizer

logger = logging.getLogger(__name__)


def whole_word_pattern(phrase: str) -> str:
    """Regex source matching ``phrase`` literally, bounded by word edges."""
    return rf"\b{re.escape(phrase)}\b"


class IntentClassifier:
    """Detects which intents a question expresses."""

    def __init__(
        self,
        lexicon: IntentLexicon | None = None,
        normalizer: TextNormalizer | None = None,
    ):
        self.lexicon = lexicon or get_intent_lexicon()
        self.normalizer = normalizer or TextNormalizer()
        self._patterns = self._compile_patterns()

    def _compile_patterns(self) -> dict[IntentKey, list[tuple[str, re.Pattern]]]:
        """Compile one accent-free whole-word pattern per literal phrase."""
        patterns: dict[IntentKey, list[tuple[str, re.Pattern]]] = {}
        for intent, phrases in self.lexicon.items():
            patterns[intent] = [
                (phrase, re.compile(whole_word_pattern(self.normalizer.clean_only(phrase))))
                for phrase in phrases
            ]
        return patterns

    def detect(self, raw_question: str) -> list[IntentMatch]:
        """Find the intents mentioned in a question.

        Only case and accents are folded: lexicon phrases are literal surface
        forms, so they are not singularized like the question is elsewhere.
        At most one match is recorded per intent.
        """
        text = self.normalizer.clean_only(raw_question)
        matches: list[IntentMatch] = []

        for intent, patterns in self._patterns.items():
            for phrase, pattern in patterns:
                if pattern.search(text):
                    matches.append(IntentMatch(intent=intent, phrase=phrase))
                    break

        logger.debug("Intents detected: %s", [(m.intent.value, m.phrase) for m in matches])
        return matches

    def phrase_patterns(self, intents: Iterable[IntentKey]) -> list[str]:
        """Whole-word pattern sources for every phrase of the given intents.

        Both the literal phrase and its accent-free form are included, so
        stored descriptions match whether or not they carry accents.
        """
        sources: dict[str, None] = {}
        for intent in intents:
            for phrase in self.lexicon.phrases(intent):
                sources[whole_word_pattern(phrase)] = None
                sources[whole_word_pattern(self.normalizer.clean_only(phrase))] = None
        return list(sources)
