"""Catalog matching - finding which known entities a question mentions."""

import logging
from dataclasses import dataclass
from typing import Sequence

from ..models.entities import CatalogEntry, split_alias
from .normalizer import TextNormalizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameParts:
    """A stored name split into cleaned canonical name and alias."""

    name: str
    alias: str | None
    original: str


def extract_alias(raw_name: str, normalizer: TextNormalizer | None = None) -> NameParts:
    """Split "Aureliano (el coronel)" into name "aureliano" and alias "el coronel"."""
    normalizer = normalizer or TextNormalizer()
    name, alias = split_alias(raw_name)
    return NameParts(
        name=normalizer.clean_only(name),
        alias=normalizer.clean_only(alias) if alias else None,
        original=raw_name,
    )


def matches_flexible(needle: str | None, haystack: str | None) -> bool:
    """Check whether a name occurs in a text, or any single word of it does.

    Deliberately permissive: "ursula iguaran" matches a question that only
    says "ursula".
    """
    if not needle or not haystack:
        return False

    if needle in haystack:
        return True

    return any(part in haystack for part in needle.split())


class EntityCatalogMatcher:
    """Reports the catalog entries mentioned in a normalized question."""

    def __init__(self, normalizer: TextNormalizer | None = None):
        self.normalizer = normalizer or TextNormalizer()

    def is_mentioned(self, entry: CatalogEntry, normalized_question: str) -> bool:
        """Check a single entry by canonical name, then by alias."""
        parts = extract_alias(entry.name, self.normalizer)

        # Fold names the same way the question was folded
        name = self.normalizer.normalize(parts.name)
        if matches_flexible(name, normalized_question):
            logger.debug("Matched %r", entry.name)
            return True

        if parts.alias:
            alias = self.normalizer.normalize(parts.alias)
            if matches_flexible(alias, normalized_question):
                logger.debug("Matched %r (alias)", entry.name)
                return True

        return False

    def find_mentioned(
        self,
        catalog: Sequence[CatalogEntry] | None,
        normalized_question: str,
    ) -> list[CatalogEntry]:
        """Return mentioned entries in catalog order.

        Args:
            catalog: Catalog rows, or None when the catalog is not configured
            normalized_question: Question passed through ``normalize``

        Returns:
            The entries whose name or alias the question mentions
        """
        if not catalog:
            return []
        return [e for e in catalog if self.is_mentioned(e, normalized_question)]
