"""Question analysis pipeline for Book Question Analyzer."""

from .analyzer import QueryAnalyzer
from .chapters import ChapterExtractor
from .fuzzy import FuzzyEventMatcher
from .intents import IntentClassifier
from .lexicon import IntentLexicon, get_intent_lexicon
from .matching import EntityCatalogMatcher, extract_alias, matches_flexible
from .normalizer import TextNormalizer

__all__ = [
    "QueryAnalyzer",
    "ChapterExtractor",
    "FuzzyEventMatcher",
    "IntentClassifier",
    "IntentLexicon",
    "get_intent_lexicon",
    "EntityCatalogMatcher",
    "extract_alias",
    "matches_flexible",
    "TextNormalizer",
]
