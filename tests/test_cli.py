"""Tests for the command-line interface."""

import json
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner
from neo4j.exceptions import ServiceUnavailable

from book_question_analyzer.cli import main


@pytest.fixture
def runner():
    return CliRunner()


class TestCli:
    """Tests for the bqa commands over a seed directory."""

    def test_ask_json(self, runner, seed_dir):
        result = runner.invoke(main, ["--seeds-dir", str(seed_dir), "ask", "capitulo 3", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["capitulo"] == 3
        assert [e["id"] for e in payload["resultados"]] == ["e1", "e2"]

    def test_ask_table(self, runner, seed_dir):
        result = runner.invoke(main, ["--seeds-dir", str(seed_dir), "ask", "qué pasó"])

        assert result.exit_code == 0
        assert "No events found" in result.output

    def test_ask_missing_chapter(self, runner, seed_dir):
        result = runner.invoke(main, ["--seeds-dir", str(seed_dir), "ask", "capitulo 99"])
        assert result.exit_code == 1

    def test_ask_missing_seeds(self, runner, tmp_path):
        result = runner.invoke(main, ["--seeds-dir", str(tmp_path / "missing"), "ask", "Macondo"])
        assert result.exit_code == 1

    def test_analyze(self, runner, seed_dir):
        result = runner.invoke(main, ["--seeds-dir", str(seed_dir), "analyze", "¿Cuándo murió Úrsula?"])

        assert result.exit_code == 0
        assert "die (murió)" in result.output

    def test_ask_chapter_number_too_long(self, runner, seed_dir):
        result = runner.invoke(main, ["--seeds-dir", str(seed_dir), "ask", "capitulo " + "9" * 5000])

        assert result.exit_code == 1
        assert not isinstance(result.exception, ValueError)

    def test_search(self, runner, seed_dir):
        result = runner.invoke(main, ["--seeds-dir", str(seed_dir), "search", "macondo"])

        assert result.exit_code == 0
        assert "Fundación de Macondo" in result.output

    def test_catalog(self, runner, seed_dir):
        result = runner.invoke(main, ["--seeds-dir", str(seed_dir), "catalog"])

        assert result.exit_code == 0
        assert "Characters" in result.output
        assert "Chapters" in result.output

    def test_status(self, runner, seed_dir, monkeypatch):
        monkeypatch.setattr(
            "book_question_analyzer.graph.connection.check_neo4j_connection",
            lambda settings=None: False,
        )
        result = runner.invoke(main, ["--seeds-dir", str(seed_dir), "status"])

        assert result.exit_code == 0
        assert "Seed directory found" in result.output
        assert "Neo4j not reachable" in result.output


class TestGraphStats:
    """Tests for the graph stats command against a mocked driver."""

    @pytest.fixture
    def driver(self, monkeypatch):
        driver = MagicMock()
        monkeypatch.setattr(
            "book_question_analyzer.graph.connection.get_driver",
            lambda settings=None: driver,
        )
        return driver

    def test_counts(self, runner, driver):
        session = driver.session.return_value.__enter__.return_value
        relationships = MagicMock()
        relationships.single.return_value = {"count": 7}
        session.run.side_effect = [
            [{"label": "Event", "count": 5}, {"label": "Character", "count": 4}],
            relationships,
        ]

        result = runner.invoke(main, ["graph", "stats"])

        assert result.exit_code == 0
        assert "Total nodes:" in result.output
        assert "9" in result.output
        driver.close.assert_called_once()

    def test_query_failure_closes_driver(self, runner, driver):
        session = driver.session.return_value.__enter__.return_value
        session.run.side_effect = ServiceUnavailable("connection refused")

        result = runner.invoke(main, ["graph", "stats"])

        assert result.exit_code == 1
        driver.close.assert_called_once()
