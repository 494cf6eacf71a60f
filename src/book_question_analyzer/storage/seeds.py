"""In-memory narrative store loaded from JSON seed files.

A seed directory holds one JSON array per collection::

    characters.json  places.json  objects.json  generations.json
    events.json      chapters.json

``objects.json`` is optional; without it object mentions are not detected.
Other missing files are treated as empty collections.
"""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import ValidationError

from ..config import get_settings
from ..errors import StorageUnavailableError
from ..models.entities import (
    CatalogEntry,
    Chapter,
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
from .base import NarrativeStore

if TYPE_CHECKING:
    from ..resolve.filters import EventFilter

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=EntityBase)


class SeedCatalog(Generic[E]):
    """An entity catalog held in memory, in file order."""

    def __init__(self, entities: list[E]):
        self._entities = list(entities)
        self._by_id = {e.id: e for e in self._entities}

    def list_names(self) -> list[CatalogEntry]:
        return [CatalogEntry(id=e.id, name=e.name) for e in self._entities]

    def list_all(self) -> list[E]:
        return list(self._entities)

    def get(self, entity_id: str) -> E | None:
        return self._by_id.get(entity_id)

    def __len__(self) -> int:
        return len(self._entities)


class SeedEventStore:
    """Events held in memory, populated from the seed catalogs on read."""

    def __init__(
        self,
        events: list[Event],
        characters: SeedCatalog[Character],
        places: SeedCatalog[Place],
        generations: SeedCatalog[Generation],
    ):
        self._events = list(events)
        self._by_id = {e.id: e for e in self._events}
        self.characters = characters
        self.places = places
        self.generations = generations

    def populate(self, event: Event) -> EventDetail:
        """Attach the referenced character, place and generation records."""
        characters = [self.characters.get(cid) for cid in event.involved_characters]
        return EventDetail(
            **event.model_dump(),
            characters=[c for c in characters if c is not None],
            place=self.places.get(event.related_place) if event.related_place else None,
            generation=(
                self.generations.get(event.related_generation)
                if event.related_generation else None
            ),
        )

    def list_summaries(self) -> list[EventSummary]:
        return [
            EventSummary(id=e.id, name=e.name, description=e.description)
            for e in self._events
        ]

    def list_all(self) -> list[Event]:
        return list(self._events)

    def get(self, event_id: str) -> EventDetail | None:
        event = self._by_id.get(event_id)
        return self.populate(event) if event else None

    def query(self, event_filter: "EventFilter") -> list[EventDetail]:
        return [self.populate(e) for e in self._events if event_filter.matches(e)]

    def __len__(self) -> int:
        return len(self._events)


class SeedChapterStore:
    """Chapters held in memory."""

    def __init__(self, chapters: list[Chapter], events: SeedEventStore):
        self._by_number = {c.number: c for c in chapters}
        self.events = events

    def find_by_number(self, number: int) -> ChapterDetail | None:
        chapter = self._by_number.get(number)
        if chapter is None:
            return None
        details = [self.events.get(event_id) for event_id in chapter.events]
        return ChapterDetail(number=chapter.number, events=[d for d in details if d is not None])

    def list_numbers(self) -> list[int]:
        return sorted(self._by_number)

    def __len__(self) -> int:
        return len(self._by_number)


def _read_seed_file(path: Path, model: type) -> list | None:
    """Read one seed file into model instances. Returns None if absent."""
    if not path.exists():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return [model(**item) for item in data]
    except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
        raise StorageUnavailableError(f"Cannot read seed file {path}: {e}") from e


def load_seed_store(seed_dir: Path | None = None) -> NarrativeStore:
    """Load a narrative store from a seed directory.

    Args:
        seed_dir: Directory containing seed JSON files (from settings if not provided)

    Returns:
        NarrativeStore backed by in-memory collections

    Raises:
        StorageUnavailableError: If a seed file cannot be read or validated
    """
    seed_dir = seed_dir or get_settings().seeds_dir
    if not seed_dir.is_dir():
        raise StorageUnavailableError(f"Seed directory not found: {seed_dir}")

    characters = SeedCatalog(_read_seed_file(seed_dir / "characters.json", Character) or [])
    places = SeedCatalog(_read_seed_file(seed_dir / "places.json", Place) or [])
    generations = SeedCatalog(_read_seed_file(seed_dir / "generations.json", Generation) or [])

    object_items = _read_seed_file(seed_dir / "objects.json", Object)
    objects = SeedCatalog(object_items) if object_items is not None else None

    events = SeedEventStore(
        _read_seed_file(seed_dir / "events.json", Event) or [],
        characters,
        places,
        generations,
    )
    chapters = SeedChapterStore(_read_seed_file(seed_dir / "chapters.json", Chapter) or [], events)

    logger.info(
        "Loaded seeds from %s: %d characters, %d places, %d objects, %d events, %d chapters",
        seed_dir, len(characters), len(places), len(objects) if objects else 0,
        len(events), len(chapters),
    )

    return NarrativeStore(
        characters=characters,
        places=places,
        generations=generations,
        events=events,
        chapters=chapters,
        objects=objects,
    )
