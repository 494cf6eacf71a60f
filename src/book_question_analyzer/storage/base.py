"""Interfaces the question pipeline reads narrative data through.

Implementations raise ``StorageUnavailableError`` when the backing store
cannot be read. They never retry.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeVar

from ..models.entities import (
    CatalogEntry,
    ChapterDetail,
    Character,
    EntityBase,
    Event,
    EventDetail,
    EventSummary,
    Generation,
    Object,
    Place,
)

if TYPE_CHECKING:
    from ..resolve.filters import EventFilter

E = TypeVar("E", bound=EntityBase, covariant=True)


class EntityCatalog(Protocol[E]):
    """A collection of characters, places, objects or generations."""

    def list_names(self) -> list[CatalogEntry]:
        """Every entry's id and stored name, in store order."""
        ...

    def list_all(self) -> list[E]:
        ...

    def get(self, entity_id: str) -> E | None:
        ...


class EventStore(Protocol):
    """The event collection."""

    def list_summaries(self) -> list[EventSummary]:
        """Id, name and description of every event, in store order."""
        ...

    def list_all(self) -> list[Event]:
        ...

    def get(self, event_id: str) -> EventDetail | None:
        """One event with its related entities populated."""
        ...

    def query(self, event_filter: "EventFilter") -> list[EventDetail]:
        """Populated events matching every group of the filter, in store order."""
        ...


class ChapterStore(Protocol):
    """The chapter collection."""

    def find_by_number(self, number: int) -> ChapterDetail | None:
        """A chapter with its events populated, in chapter order."""
        ...

    def list_numbers(self) -> list[int]:
        ...


@dataclass
class NarrativeStore:
    """All collaborators the pipeline reads from.

    ``objects`` is optional: when None, object mentions are not detected.
    """

    characters: EntityCatalog[Character]
    places: EntityCatalog[Place]
    generations: EntityCatalog[Generation]
    events: EventStore
    chapters: ChapterStore
    objects: EntityCatalog[Object] | None = None
