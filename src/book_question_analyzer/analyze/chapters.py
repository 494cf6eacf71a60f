"""Explicit chapter references ("capítulo 5")."""

import re

from ..errors import InvalidQuestionError

CHAPTER_PATTERN = re.compile(r"cap[ií]tulo\s*(\d+)", re.IGNORECASE)

# Chapter numbers are stored as 64-bit integers
MAX_CHAPTER_DIGITS = 18


class ChapterExtractor:
    """Pulls an explicit chapter number out of a question."""

    def extract(self, text: str | None) -> int | None:
        """Return the first chapter number mentioned, or None.

        Raises:
            InvalidQuestionError: If the number is too long to be a chapter
        """
        if not text:
            return None
        match = CHAPTER_PATTERN.search(text)
        if not match:
            return None

        digits = match.group(1)
        if len(digits) > MAX_CHAPTER_DIGITS:
            raise InvalidQuestionError(f"Chapter number is too long ({len(digits)} digits)")
        return int(digits)
