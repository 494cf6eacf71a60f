"""Plain text search across every collection.

Unlike question resolution this does no analysis: an entity matches when
the query, reduced to lower-case ASCII, is a substring of its name.
"""

import logging

from pydantic import BaseModel, Field

from ..analyze.normalizer import TextNormalizer
from ..errors import InvalidQuestionError
from ..models.entities import Character, EntityBase, Event, Generation, Object, Place
from ..storage.base import NarrativeStore

logger = logging.getLogger(__name__)


class CatalogSearchResults(BaseModel):
    """Matches per collection."""

    characters: list[Character] = Field(default_factory=list)
    places: list[Place] = Field(default_factory=list)
    objects: list[Object] = Field(default_factory=list)
    generations: list[Generation] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            len(self.characters) + len(self.places) + len(self.objects)
            + len(self.generations) + len(self.events)
        )


class CatalogSearch:
    """Substring search over names (and event descriptions)."""

    def __init__(self, store: NarrativeStore):
        self.store = store
        self.normalizer = TextNormalizer()

    def _name_matches(self, entity: EntityBase, key: str) -> bool:
        return key in self.normalizer.search_key(entity.name)

    def search(self, query: str | None) -> CatalogSearchResults:
        """Search all collections for a query string.

        Raises:
            InvalidQuestionError: If the query is missing or blank
            StorageUnavailableError: If the store cannot be read
        """
        if query is None or not query.strip():
            raise InvalidQuestionError("Search text is required")

        key = self.normalizer.search_key(query.strip())
        objects = self.store.objects.list_all() if self.store.objects is not None else []

        results = CatalogSearchResults(
            characters=[c for c in self.store.characters.list_all() if self._name_matches(c, key)],
            places=[p for p in self.store.places.list_all() if self._name_matches(p, key)],
            objects=[o for o in objects if self._name_matches(o, key)],
            generations=[g for g in self.store.generations.list_all() if self._name_matches(g, key)],
            events=[
                e for e in self.store.events.list_all()
                if key in self.normalizer.search_key(e.name)
                or key in self.normalizer.search_key(e.description)
            ],
        )
        logger.info(
            "Search %r: characters=%d places=%d objects=%d generations=%d events=%d",
            query, len(results.characters), len(results.places), len(results.objects),
            len(results.generations), len(results.events),
        )
        return results
