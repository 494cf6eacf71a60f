"""The intent lexicon - literary phrases that signal each narrative action.

The table lives in ``intent_lexicon.json`` so it can be extended without
touching the matching code. It is loaded once and never mutated.
"""

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from ..config import get_settings
from ..models.analysis import IntentKey

DEFAULT_LEXICON = "intent_lexicon.json"


class IntentLexicon:
    """Read-only, ordered mapping of intent to literal surface phrases."""

    def __init__(self, table: Mapping[IntentKey | str, list[str]]):
        """Build a lexicon from a mapping of intent keys to phrases.

        Duplicate phrases within an intent are dropped, keeping the first.

        Raises:
            ValueError: If a key is not a known intent or has no phrases
        """
        entries: dict[IntentKey, tuple[str, ...]] = {}
        for key, phrases in table.items():
            intent = IntentKey(key)
            unique = tuple(dict.fromkeys(p.strip() for p in phrases if p.strip()))
            if not unique:
                raise ValueError(f"Intent {intent.value!r} has no phrases")
            entries[intent] = unique
        self._entries = MappingProxyType(entries)

    @classmethod
    def from_file(cls, path: Path) -> "IntentLexicon":
        """Load a lexicon from a JSON file of {intent: [phrases]}."""
        with open(path, encoding="utf-8") as f:
            return cls(json.load(f))

    @classmethod
    def default(cls) -> "IntentLexicon":
        """Load the lexicon bundled with the package."""
        source = resources.files(__package__).joinpath(DEFAULT_LEXICON)
        return cls(json.loads(source.read_text(encoding="utf-8")))

    def phrases(self, intent: IntentKey) -> tuple[str, ...]:
        return self._entries.get(intent, ())

    def items(self) -> Iterator[tuple[IntentKey, tuple[str, ...]]]:
        return iter(self._entries.items())

    def __iter__(self) -> Iterator[IntentKey]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, intent: object) -> bool:
        return intent in self._entries


@lru_cache
def get_intent_lexicon() -> IntentLexicon:
    """Get the process-wide lexicon (custom file if configured)."""
    settings = get_settings()
    if settings.lexicon_path:
        return IntentLexicon.from_file(settings.lexicon_path)
    return IntentLexicon.default()
