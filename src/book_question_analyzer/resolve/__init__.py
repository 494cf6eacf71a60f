"""Resolving analyzed questions into events."""

from .filters import CharacterGroup, EventFilter, PhraseGroup, PlaceGroup, build_event_filter
from .resolver import QuestionResolver, analyze_and_resolve, select_state
from .search import CatalogSearch, CatalogSearchResults

__all__ = [
    "CharacterGroup",
    "EventFilter",
    "PhraseGroup",
    "PlaceGroup",
    "build_event_filter",
    "QuestionResolver",
    "analyze_and_resolve",
    "select_state",
    "CatalogSearch",
    "CatalogSearchResults",
]
