"""Write a narrative store into Neo4j."""

from neo4j import Driver

from ..models.entities import EntityBase
from ..storage.base import NarrativeStore
from .connection import get_driver, init_schema


class GraphWriter:
    """Loads narrative collections into the Neo4j graph."""

    def __init__(self, driver: Driver | None = None):
        """Initialize the graph writer.

        Args:
            driver: Optional Neo4j driver (created if not provided)
        """
        self._driver = driver
        self._initialized = False

    @property
    def driver(self) -> Driver:
        """Get the Neo4j driver, creating if needed."""
        if self._driver is None:
            self._driver = get_driver()
            if self._driver is None:
                raise ConnectionError("Cannot connect to Neo4j")
        return self._driver

    def initialize(self) -> None:
        """Initialize the graph schema."""
        if not self._initialized:
            init_schema(self.driver)
            self._initialized = True

    def write_entities(self, label: str, entities: list[EntityBase]) -> int:
        """Merge entity nodes with one label, keeping their order.

        Returns:
            Number of nodes written
        """
        if not entities:
            return 0

        batch = [
            {"id": e.id, "props": {**e.model_dump(exclude={"id"}), "order": i}}
            for i, e in enumerate(entities)
        ]
        query = f"""
        UNWIND $batch AS item
        MERGE (n:{label} {{id: item.id}})
        SET n += item.props
        """
        with self.driver.session() as session:
            session.run(query, batch=batch)
        return len(batch)

    def write_events(self, store: NarrativeStore) -> int:
        """Merge event nodes and their character, place and generation links.

        Returns:
            Number of events written
        """
        events = store.events.list_all()
        if not events:
            return 0

        nodes = [
            {"id": e.id, "name": e.name, "description": e.description, "order": i}
            for i, e in enumerate(events)
        ]
        involves = [
            {"event": e.id, "character": cid, "position": pos}
            for e in events
            for pos, cid in enumerate(e.involved_characters)
        ]
        places = [{"event": e.id, "place": e.related_place} for e in events if e.related_place]
        generations = [
            {"event": e.id, "generation": e.related_generation}
            for e in events
            if e.related_generation
        ]

        with self.driver.session() as session:
            session.run(
                """
                UNWIND $batch AS item
                MERGE (e:Event {id: item.id})
                SET e.name = item.name, e.description = item.description, e.order = item.order
                """,
                batch=nodes,
            )
            session.run(
                """
                UNWIND $batch AS link
                MATCH (e:Event {id: link.event})
                MATCH (c:Character {id: link.character})
                MERGE (e)-[r:INVOLVES]->(c)
                SET r.position = link.position
                """,
                batch=involves,
            )
            session.run(
                """
                UNWIND $batch AS link
                MATCH (e:Event {id: link.event})
                MATCH (p:Place {id: link.place})
                MERGE (e)-[:HAPPENED_AT]->(p)
                """,
                batch=places,
            )
            session.run(
                """
                UNWIND $batch AS link
                MATCH (e:Event {id: link.event})
                MATCH (g:Generation {id: link.generation})
                MERGE (e)-[:IN_GENERATION]->(g)
                """,
                batch=generations,
            )

        return len(nodes)

    def write_chapters(self, store: NarrativeStore) -> int:
        """Merge chapter nodes and their ordered CONTAINS links.

        Returns:
            Number of chapters written
        """
        links = []
        numbers = store.chapters.list_numbers()
        for number in numbers:
            chapter = store.chapters.find_by_number(number)
            if chapter is None:
                continue
            links.extend(
                {"number": number, "event": event.id, "position": pos}
                for pos, event in enumerate(chapter.events)
            )

        with self.driver.session() as session:
            session.run(
                "UNWIND $numbers AS number MERGE (:Chapter {number: number})",
                numbers=numbers,
            )
            session.run(
                """
                UNWIND $batch AS link
                MATCH (ch:Chapter {number: link.number})
                MATCH (e:Event {id: link.event})
                MERGE (ch)-[r:CONTAINS]->(e)
                SET r.position = link.position
                """,
                batch=links,
            )

        return len(numbers)

    def write_store(self, store: NarrativeStore) -> dict[str, int]:
        """Write every collection of a store.

        Args:
            store: Source store, typically loaded from seed files

        Returns:
            Count of written nodes per collection
        """
        self.initialize()

        counts = {
            "characters": self.write_entities("Character", store.characters.list_all()),
            "places": self.write_entities("Place", store.places.list_all()),
            "generations": self.write_entities("Generation", store.generations.list_all()),
            "objects": (
                self.write_entities("Object", store.objects.list_all())
                if store.objects is not None else 0
            ),
        }
        counts["events"] = self.write_events(store)
        counts["chapters"] = self.write_chapters(store)
        return counts

    def close(self) -> None:
        if self._driver is not None:
            self._driver.close()
