"""Entity models for the narrative dataset."""

import re

from pydantic import BaseModel, Field

_ALIAS_PATTERN = re.compile(r"\((.*?)\)")
_PARENTHETICAL_PATTERN = re.compile(r"\s*\(.*?\)\s*")


def split_alias(stored_name: str) -> tuple[str, str | None]:
    """Split a stored name into (canonical name, alias).

    The alias is the first parenthetical group; the canonical name is what
    remains once every parenthetical is removed.
    """
    match = _ALIAS_PATTERN.search(stored_name)
    alias = match.group(1) if match else None
    return _PARENTHETICAL_PATTERN.sub(" ", stored_name).strip(), alias


class EntityBase(BaseModel):
    """Base class for all catalog entities.

    ``name`` is the stored name, which may end with a parenthetical alias,
    e.g. "José Arcadio (el coronel)".
    """

    id: str
    name: str
    description: str | None = None


class Character(EntityBase):
    """A character of the novel."""

    fate: str | None = None
    gender: str | None = None  # masculino, femenino, otro
    generation: int | None = None
    objects: list[str] = Field(default_factory=list)  # Object IDs


class Place(EntityBase):
    """A location in the world."""

    generations: list[str] = Field(default_factory=list)  # Generation IDs
    events: list[str] = Field(default_factory=list)  # Event IDs
    parent_place: str | None = None


class Object(EntityBase):
    """A significant item."""

    event: str | None = None
    place: str | None = None
    character: str | None = None
    generation: str | None = None


class Generation(EntityBase):
    """A generation of the family."""

    main_characters: list[str] = Field(default_factory=list)  # Character IDs


class CatalogEntry(BaseModel):
    """The id/name row a catalog lists for matching."""

    id: str
    name: str


class EventSummary(BaseModel):
    """The text of an event, as used for similarity scoring."""

    id: str
    name: str
    description: str | None = None


class Event(EventSummary):
    """A significant occurrence with references to related entities."""

    involved_characters: list[str] = Field(default_factory=list)  # Character IDs
    related_place: str | None = None  # Place ID
    related_generation: str | None = None  # Generation ID


class EventDetail(Event):
    """An event with its referenced entities populated."""

    characters: list[Character] = Field(default_factory=list)
    place: Place | None = None
    generation: Generation | None = None


class Chapter(BaseModel):
    """A chapter and the IDs of the events it contains."""

    number: int
    events: list[str] = Field(default_factory=list)


class ChapterDetail(BaseModel):
    """A chapter with its events populated."""

    number: int
    events: list[EventDetail] = Field(default_factory=list)
