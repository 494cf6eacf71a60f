"""Tests for catalog matching."""

import pytest

from book_question_analyzer.analyze.matching import (
    EntityCatalogMatcher,
    extract_alias,
    matches_flexible,
)
from book_question_analyzer.analyze.normalizer import TextNormalizer
from book_question_analyzer.models import CatalogEntry, split_alias


class TestExtractAlias:
    """Tests for splitting stored names."""

    def test_with_alias(self):
        parts = extract_alias("Aureliano (el coronel)")
        assert parts.name == "aureliano"
        assert parts.alias == "el coronel"
        assert parts.original == "Aureliano (el coronel)"

    def test_without_alias(self):
        parts = extract_alias("José Arcadio Buendía")
        assert parts.name == "jose arcadio buendia"
        assert parts.alias is None

    def test_split_alias_keeps_case(self):
        assert split_alias("Remedios (la bella)") == ("Remedios", "la bella")
        assert split_alias("Macondo") == ("Macondo", None)


class TestMatchesFlexible:
    """Tests for permissive name matching."""

    def test_full_name(self):
        assert matches_flexible("jose arcadio", "hablaron sobre jose arcadio buendia")

    def test_any_word(self):
        assert matches_flexible("ursula iguaran", "que hizo ursula")

    def test_no_match(self):
        assert not matches_flexible("jose arcadio", "no hay nadie aqui")

    def test_empty(self):
        assert not matches_flexible("", "ursula")
        assert not matches_flexible("ursula", "")
        assert not matches_flexible(None, None)


class TestEntityCatalogMatcher:
    """Tests for finding mentioned entries."""

    @pytest.fixture
    def catalog(self):
        return [
            CatalogEntry(id="c1", name="José Arcadio Buendía"),
            CatalogEntry(id="c2", name="Úrsula Iguarán"),
            CatalogEntry(id="c3", name="Aureliano (el coronel)"),
            CatalogEntry(id="c4", name="Melquíades"),
        ]

    @pytest.fixture
    def matcher(self):
        return EntityCatalogMatcher()

    @staticmethod
    def question(text):
        return TextNormalizer().normalize(text)

    def test_catalog_order(self, matcher, catalog):
        found = matcher.find_mentioned(catalog, self.question("¿Qué hizo Úrsula con José?"))
        assert [e.id for e in found] == ["c1", "c2"]

    def test_alias(self, matcher, catalog):
        found = matcher.find_mentioned(catalog, self.question("¿Qué hizo el coronel?"))
        assert [e.id for e in found] == ["c3"]

    def test_name_ending_in_s(self, matcher, catalog):
        found = matcher.find_mentioned(catalog, self.question("¿Quién es Melquíades?"))
        assert "c4" in [e.id for e in found]

    def test_nothing_mentioned(self, matcher, catalog):
        assert matcher.find_mentioned(catalog, self.question("qué pasó")) == []

    def test_missing_catalog(self, matcher):
        assert matcher.find_mentioned(None, "ursula") == []
        assert matcher.find_mentioned([], "ursula") == []
