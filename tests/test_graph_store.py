"""Tests for the Neo4j store and writer, against a mocked driver."""

from unittest.mock import MagicMock

import pytest
from neo4j.exceptions import ServiceUnavailable

from book_question_analyzer.config import Settings
from book_question_analyzer.errors import StorageUnavailableError
from book_question_analyzer.graph.store import (
    GraphRunner,
    compile_filter,
    event_from_record,
    open_graph_store,
)
from book_question_analyzer.graph.writer import GraphWriter
from book_question_analyzer.resolve.filters import build_event_filter


def mock_driver(records=None):
    driver = MagicMock()
    session = driver.session.return_value.__enter__.return_value
    session.run.return_value = records or []
    return driver, session


EVENT_RECORD = {
    "e": {"id": "e2", "name": "Muerte de Úrsula", "description": "Úrsula murió", "order": 1},
    "characters": [{"id": "c2", "name": "Úrsula Iguarán", "order": 1}],
    "place": {"id": "p1", "name": "Macondo", "order": 0},
    "generation": None,
}


class TestCompileFilter:
    """Tests for translating filters to Cypher."""

    def test_all_groups(self):
        event_filter = build_event_filter(
            phrase_patterns=[r"\bmurió\b"],
            character_ids=["c2", "c1"],
            place_ids=["p1"],
        )
        where, params = compile_filter(event_filter)

        assert where.count(" AND ") == 2
        assert "$phrase_patterns" in where
        assert params["phrase_patterns"] == [r"(?iUs).*\bmurió\b.*"]
        assert params["character_ids"] == ["c1", "c2"]
        assert params["place_ids"] == ["p1"]

    def test_single_group(self):
        where, params = compile_filter(build_event_filter(place_ids=["p2"]))

        assert "HAPPENED_AT" in where
        assert " AND " not in where
        assert list(params) == ["place_ids"]

    def test_empty(self):
        assert compile_filter(build_event_filter()) == ("true", {})


class TestGraphStore:
    """Tests for reading through the driver."""

    @pytest.fixture
    def settings(self):
        return Settings(neo4j_timeout=2.5)

    def test_event_from_record(self):
        event = event_from_record(EVENT_RECORD)

        assert event.id == "e2"
        assert event.involved_characters == ["c2"]
        assert event.related_place == "p1"
        assert event.generation is None

    def test_list_names(self, settings):
        driver, session = mock_driver([
            {"id": "p1", "name": "Macondo"},
            {"id": "p2", "name": "Riohacha"},
        ])
        store = open_graph_store(driver=driver, settings=settings)

        assert [e.name for e in store.places.list_names()] == ["Macondo", "Riohacha"]
        query = session.run.call_args.args[0]
        assert "MATCH (n:Place)" in query.text
        assert query.timeout == 2.5

    def test_query_passes_parameters(self, settings):
        driver, session = mock_driver([EVENT_RECORD])
        store = open_graph_store(driver=driver, settings=settings)

        results = store.events.query(build_event_filter(character_ids=["c2"]))

        assert [e.id for e in results] == ["e2"]
        assert session.run.call_args.args[1] == {"character_ids": ["c2"]}

    def test_missing_chapter(self, settings):
        driver, _ = mock_driver([])
        store = open_graph_store(driver=driver, settings=settings)
        assert store.chapters.find_by_number(99) is None

    def test_driver_errors_wrapped(self):
        driver, session = mock_driver()
        session.run.side_effect = ServiceUnavailable("connection refused")

        with pytest.raises(StorageUnavailableError):
            GraphRunner(driver).run("MATCH (n) RETURN n")


class TestGraphWriter:
    """Tests for loading a store into Neo4j."""

    def test_write_store(self, store):
        driver, session = mock_driver()
        counts = GraphWriter(driver).write_store(store)

        assert counts == {
            "characters": 4,
            "places": 2,
            "generations": 1,
            "objects": 1,
            "events": 5,
            "chapters": 2,
        }
        statements = [c.args[0] for c in session.run.call_args_list]
        assert any("CREATE CONSTRAINT event_id" in s for s in statements)
        assert any("INVOLVES" in s for s in statements)

    def test_no_driver(self, monkeypatch):
        monkeypatch.setattr("book_question_analyzer.graph.writer.get_driver", lambda: None)
        with pytest.raises(ConnectionError):
            GraphWriter().initialize()
