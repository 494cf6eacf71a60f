"""Data models for entities, events and question analysis."""

from book_question_analyzer.models.entities import (
    CatalogEntry,
    Chapter,
    ChapterDetail,
    Character,
    Event,
    EventDetail,
    EventSummary,
    Generation,
    Object,
    Place,
    split_alias,
)
from book_question_analyzer.models.analysis import (
    IntentKey,
    IntentMatch,
    QuestionAnalysis,
    QuestionResult,
    ResolutionState,
)

__all__ = [
    "CatalogEntry",
    "Chapter",
    "ChapterDetail",
    "Character",
    "Event",
    "EventDetail",
    "EventSummary",
    "Generation",
    "Object",
    "Place",
    "split_alias",
    "IntentKey",
    "IntentMatch",
    "QuestionAnalysis",
    "QuestionResult",
    "ResolutionState",
]
