"""Event filters - an AND of OR-groups built from detected signals.

Filters are plain data so every store can evaluate them its own way: the
seed store calls ``matches`` per event, the graph store compiles them to
Cypher.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Union

from ..models.entities import Event


@dataclass(frozen=True)
class PhraseGroup:
    """Any phrase pattern occurs in the event's name or description."""

    patterns: tuple[str, ...]
    _compiled: tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        compiled = tuple(re.compile(p, re.IGNORECASE) for p in self.patterns)
        object.__setattr__(self, "_compiled", compiled)

    def matches(self, event: Event) -> bool:
        texts = (event.name, event.description or "")
        return any(p.search(text) for p in self._compiled for text in texts)


@dataclass(frozen=True)
class CharacterGroup:
    """The event involves any of the given characters."""

    ids: frozenset[str]

    def matches(self, event: Event) -> bool:
        return not self.ids.isdisjoint(event.involved_characters)


@dataclass(frozen=True)
class PlaceGroup:
    """The event happened at any of the given places."""

    ids: frozenset[str]

    def matches(self, event: Event) -> bool:
        return event.related_place in self.ids


FilterGroup = Union[PhraseGroup, CharacterGroup, PlaceGroup]


@dataclass(frozen=True)
class EventFilter:
    """Conjunction of filter groups. Each group is itself a disjunction."""

    groups: tuple[FilterGroup, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.groups

    def matches(self, event: Event) -> bool:
        return all(group.matches(event) for group in self.groups)

    def group(self, kind: type) -> FilterGroup | None:
        """The group of the given type, if present."""
        return next((g for g in self.groups if isinstance(g, kind)), None)


def build_event_filter(
    phrase_patterns: Iterable[str] = (),
    character_ids: Iterable[str] = (),
    place_ids: Iterable[str] = (),
) -> EventFilter:
    """Build a filter from the non-empty signal groups.

    Args:
        phrase_patterns: Regex sources for intent phrases
        character_ids: IDs of characters mentioned in the question
        place_ids: IDs of places mentioned in the question

    Returns:
        EventFilter whose groups are the non-empty ones, in that order
    """
    groups: list[FilterGroup] = []

    patterns = tuple(phrase_patterns)
    if patterns:
        groups.append(PhraseGroup(patterns))

    characters = frozenset(character_ids)
    if characters:
        groups.append(CharacterGroup(characters))

    places = frozenset(place_ids)
    if places:
        groups.append(PlaceGroup(places))

    return EventFilter(tuple(groups))
