"""Neo4j-backed narrative store.

Graph layout written by ``GraphWriter``::

    (:Event)-[:INVOLVES {position}]->(:Character)
    (:Event)-[:HAPPENED_AT]->(:Place)
    (:Event)-[:IN_GENERATION]->(:Generation)
    (:Chapter {number})-[:CONTAINS {position}]->(:Event)

Every node carries an ``order`` property preserving seed order.
"""

from typing import Any, Generic, TypeVar

from neo4j import Driver, Query
from neo4j.exceptions import DriverError, Neo4jError

from ..config import Settings, get_settings
from ..errors import StorageUnavailableError
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
from ..resolve.filters import CharacterGroup, EventFilter, PhraseGroup, PlaceGroup
from ..storage.base import NarrativeStore
from .connection import get_driver

E = TypeVar("E", bound=EntityBase)

# Clauses after a MATCH that binds `e` and `sort_key`
POPULATE_EVENTS = """
OPTIONAL MATCH (e)-[r:INVOLVES]->(c:Character)
WITH e, sort_key, c, r.position AS position
ORDER BY position
WITH e, sort_key, collect(c) AS characters
OPTIONAL MATCH (e)-[:HAPPENED_AT]->(p:Place)
OPTIONAL MATCH (e)-[:IN_GENERATION]->(g:Generation)
RETURN e, characters, p AS place, g AS generation
ORDER BY sort_key, e.id
"""


class GraphRunner:
    """Runs read queries with a timeout, wrapping driver failures."""

    def __init__(self, driver: Driver, timeout: float | None = None):
        self.driver = driver
        self.timeout = timeout

    def run(self, cypher: str, **params: Any) -> list:
        """Run a query and return all records.

        Raises:
            StorageUnavailableError: If Neo4j is unreachable or the query fails
        """
        try:
            with self.driver.session() as session:
                return list(session.run(Query(cypher, timeout=self.timeout), params))
        except (Neo4jError, DriverError) as e:
            raise StorageUnavailableError(f"Neo4j query failed: {e}") from e


def _props(node: Any) -> dict:
    return dict(node) if node is not None else {}


class GraphEntityCatalog(Generic[E]):
    """Catalog over all nodes with one label."""

    def __init__(self, runner: GraphRunner, label: str, model: type[E]):
        self.runner = runner
        self.label = label
        self.model = model

    def list_names(self) -> list[CatalogEntry]:
        records = self.runner.run(
            f"MATCH (n:{self.label}) RETURN n.id AS id, n.name AS name ORDER BY n.order, n.id"
        )
        return [CatalogEntry(id=r["id"], name=r["name"]) for r in records]

    def list_all(self) -> list[E]:
        records = self.runner.run(f"MATCH (n:{self.label}) RETURN n ORDER BY n.order, n.id")
        return [self.model(**_props(r["n"])) for r in records]

    def get(self, entity_id: str) -> E | None:
        records = self.runner.run(f"MATCH (n:{self.label} {{id: $id}}) RETURN n", id=entity_id)
        return self.model(**_props(records[0]["n"])) if records else None


def compile_filter(event_filter: EventFilter) -> tuple[str, dict]:
    r"""Translate an EventFilter into a Cypher WHERE condition and parameters.

    Cypher's ``=~`` must match the whole string, so phrase patterns are
    wrapped in ``.*`` with case-insensitive, dot-all and Unicode character
    class flags. The last makes Java's ``\b`` treat accented letters as word
    characters, as Python's ``re`` does.
    """
    conditions: list[str] = []
    params: dict[str, Any] = {}

    for group in event_filter.groups:
        if isinstance(group, PhraseGroup):
            conditions.append(
                "any(rx IN $phrase_patterns "
                "WHERE e.name =~ rx OR coalesce(e.description, '') =~ rx)"
            )
            params["phrase_patterns"] = [f"(?iUs).*{p}.*" for p in group.patterns]
        elif isinstance(group, CharacterGroup):
            conditions.append(
                "EXISTS { MATCH (e)-[:INVOLVES]->(fc:Character) WHERE fc.id IN $character_ids }"
            )
            params["character_ids"] = sorted(group.ids)
        elif isinstance(group, PlaceGroup):
            conditions.append(
                "EXISTS { MATCH (e)-[:HAPPENED_AT]->(fp:Place) WHERE fp.id IN $place_ids }"
            )
            params["place_ids"] = sorted(group.ids)

    return " AND ".join(conditions) or "true", params


def event_from_record(record: Any) -> EventDetail:
    """Build a populated event from a record returned after POPULATE_EVENTS."""
    characters = [Character(**_props(c)) for c in record["characters"]]
    place = Place(**_props(record["place"])) if record["place"] is not None else None
    generation = (
        Generation(**_props(record["generation"]))
        if record["generation"] is not None else None
    )
    return EventDetail(**{
        **_props(record["e"]),
        "involved_characters": [c.id for c in characters],
        "related_place": place.id if place else None,
        "related_generation": generation.id if generation else None,
        "characters": characters,
        "place": place,
        "generation": generation,
    })


class GraphEventStore:
    """Event store over Event nodes and their relationships."""

    def __init__(self, runner: GraphRunner):
        self.runner = runner

    def list_summaries(self) -> list[EventSummary]:
        records = self.runner.run(
            "MATCH (e:Event) "
            "RETURN e.id AS id, e.name AS name, e.description AS description "
            "ORDER BY e.order, e.id"
        )
        return [
            EventSummary(id=r["id"], name=r["name"], description=r["description"])
            for r in records
        ]

    def list_all(self) -> list[Event]:
        records = self.runner.run("MATCH (e:Event) WITH e, e.order AS sort_key" + POPULATE_EVENTS)
        return [
            Event(**event_from_record(r).model_dump(exclude={"characters", "place", "generation"}))
            for r in records
        ]

    def get(self, event_id: str) -> EventDetail | None:
        records = self.runner.run(
            "MATCH (e:Event {id: $id}) WITH e, e.order AS sort_key" + POPULATE_EVENTS,
            id=event_id,
        )
        return event_from_record(records[0]) if records else None

    def query(self, event_filter: EventFilter) -> list[EventDetail]:
        where, params = compile_filter(event_filter)
        records = self.runner.run(
            f"MATCH (e:Event) WHERE {where} WITH e, e.order AS sort_key" + POPULATE_EVENTS,
            **params,
        )
        return [event_from_record(r) for r in records]


class GraphChapterStore:
    """Chapter store over Chapter nodes."""

    def __init__(self, runner: GraphRunner):
        self.runner = runner

    def find_by_number(self, number: int) -> ChapterDetail | None:
        found = self.runner.run(
            "MATCH (ch:Chapter {number: $number}) RETURN ch.number AS number",
            number=number,
        )
        if not found:
            return None

        records = self.runner.run(
            "MATCH (:Chapter {number: $number})-[contains:CONTAINS]->(e:Event) "
            "WITH e, contains.position AS sort_key" + POPULATE_EVENTS,
            number=number,
        )
        return ChapterDetail(number=number, events=[event_from_record(r) for r in records])

    def list_numbers(self) -> list[int]:
        records = self.runner.run("MATCH (ch:Chapter) RETURN ch.number AS number ORDER BY number")
        return [r["number"] for r in records]


def open_graph_store(
    driver: Driver | None = None,
    settings: Settings | None = None,
) -> NarrativeStore:
    """Build a NarrativeStore reading from Neo4j.

    Raises:
        StorageUnavailableError: If no driver can be created
    """
    settings = settings or get_settings()
    driver = driver or get_driver(settings)
    if driver is None:
        raise StorageUnavailableError("Cannot connect to Neo4j")

    runner = GraphRunner(driver, timeout=settings.neo4j_timeout)
    return NarrativeStore(
        characters=GraphEntityCatalog(runner, "Character", Character),
        places=GraphEntityCatalog(runner, "Place", Place),
        generations=GraphEntityCatalog(runner, "Generation", Generation),
        events=GraphEventStore(runner),
        chapters=GraphChapterStore(runner),
        objects=GraphEntityCatalog(runner, "Object", Object),
    )
