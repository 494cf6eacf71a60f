"""Models produced while analyzing and resolving a question."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from .entities import EventDetail, EventSummary


class IntentKey(str, Enum):
    """Coarse narrative actions a question can ask about."""

    DIE = "die"
    FOUND = "found"
    BE_BORN = "be_born"
    MARRY = "marry"
    DISAPPEAR = "disappear"
    AGE = "age"
    LOVE = "love"
    DEPART = "depart"
    RETURN = "return"
    WRITE = "write"
    REVEAL = "reveal"
    KILL = "kill"
    READ = "read"
    PROPHESY = "prophesy"
    IMPOSE = "impose"


class IntentMatch(BaseModel):
    """An intent detected in a question and the phrase that triggered it."""

    intent: IntentKey
    phrase: str


class QuestionAnalysis(BaseModel):
    """Structured signals extracted from one question."""

    question: str
    normalized: str
    chapter_number: int | None = None
    intents: list[IntentMatch] = Field(default_factory=list)
    character_names: list[str] = Field(default_factory=list)
    place_names: list[str] = Field(default_factory=list)
    object_names: list[str] = Field(default_factory=list)
    # Only set when no other signal was found
    fuzzy_event: EventSummary | None = None

    @property
    def matched_intents(self) -> list[IntentKey]:
        return [m.intent for m in self.intents]

    @property
    def has_entities(self) -> bool:
        return bool(self.character_names or self.place_names or self.object_names)

    @property
    def has_signal(self) -> bool:
        """True if any structured signal (chapter, entity, intent) was found."""
        return self.chapter_number is not None or self.has_entities or bool(self.intents)


class ResolutionState(str, Enum):
    """How a question was resolved, in priority order."""

    EXPLICIT_CHAPTER = "explicit_chapter"
    FUZZY_HIT = "fuzzy_hit"
    NO_SIGNAL = "no_signal"
    FILTERED_SEARCH = "filtered_search"


ChapterLabel = int | Literal["similar", "todos"]


class QuestionResult(BaseModel):
    """Events answering a question, labelled by how they were found."""

    chapter_label: ChapterLabel
    results: list[EventDetail] = Field(default_factory=list)
    state: ResolutionState

    def to_payload(self) -> dict:
        """JSON body served to the browser client."""
        return {
            "capitulo": self.chapter_label,
            "resultados": [event.model_dump() for event in self.results],
        }
