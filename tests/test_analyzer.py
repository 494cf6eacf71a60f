"""Tests for the question analyzer."""

from unittest.mock import MagicMock

import pytest

from book_question_analyzer.analyze.analyzer import QueryAnalyzer
from book_question_analyzer.models import IntentKey
from book_question_analyzer.storage.seeds import load_seed_store


class TestQueryAnalyzer:
    """Tests for combining the analysis steps."""

    @pytest.fixture
    def analyzer(self, store):
        return QueryAnalyzer(store, fuzzy_threshold=0.2)

    def test_chapter(self, analyzer):
        analysis = analyzer.analyze("Cuéntame del capítulo 3")

        assert analysis.chapter_number == 3
        assert analysis.fuzzy_event is None

    def test_entities(self, analyzer):
        analysis = analyzer.analyze("¿Qué pasó con Úrsula en Macondo?")

        assert analysis.normalized == "que paso con ursula en macondo"
        assert analysis.character_names == ["Úrsula Iguarán"]
        assert analysis.place_names == ["Macondo"]
        assert analysis.object_names == []
        assert analysis.intents == []
        assert analysis.fuzzy_event is None

    def test_intents(self, analyzer):
        analysis = analyzer.analyze("¿Quién murió?")

        assert analysis.matched_intents == [IntentKey.DIE]
        assert analysis.fuzzy_event is None

    def test_objects(self, analyzer):
        analysis = analyzer.analyze("los pergaminos")
        assert analysis.object_names == ["Pergaminos"]

    def test_objects_not_configured(self, tmp_path, seed_writer):
        store = load_seed_store(seed_writer(tmp_path / "seeds", include_objects=False))
        analysis = QueryAnalyzer(store, fuzzy_threshold=0.2).analyze("los pergaminos")

        assert store.objects is None
        assert analysis.object_names == []

    def test_fuzzy_when_no_signal(self, analyzer):
        analysis = analyzer.analyze("una ceremonia en la casa")

        assert not analysis.has_signal
        assert analysis.fuzzy_event.id == "e4"

    def test_no_fuzzy_with_signal(self, store):
        store.events = MagicMock(wraps=store.events)
        analysis = QueryAnalyzer(store, fuzzy_threshold=0.2).analyze("Úrsula ceremonia casa boda")

        assert analysis.character_names == ["Úrsula Iguarán"]
        assert analysis.fuzzy_event is None
        store.events.list_summaries.assert_not_called()

    def test_no_fuzzy_below_threshold(self, analyzer):
        analysis = analyzer.analyze("qué pasó")

        assert not analysis.has_signal
        assert analysis.fuzzy_event is None
