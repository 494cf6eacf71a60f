"""Text normalization for matching questions against catalogs.

Two levels are offered:

- ``clean_only``: case-folding and diacritic removal, so that "José" and
  "jose" compare equal. Used for literal phrases and stored names.
- ``normalize``: punctuation stripping and plural singularization on top of
  ``clean_only``. Used for free-text questions, so that "las ceremonias"
  meets an event described as "una ceremonia".

Both are idempotent.
"""

import re
import unicodedata

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_NON_SEARCHABLE = re.compile(r"[^a-z0-9\s]")

# Words ending in -s that are not plurals
INVARIANT_WORDS = frozenset({
    "analisis", "atlas", "caries", "crisis", "dosis", "jueves", "lunes",
    "martes", "miercoles", "oasis", "tesis", "viernes", "virus",
})

VOWELS = frozenset("aeiou")
# Consonants that take -es in the plural: ciudad/ciudades, papel/papeles...
ES_CONSONANTS = frozenset("dlnrjy")


def strip_diacritics(text: str) -> str:
    """Remove combining marks after canonical decomposition."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if unicodedata.category(c) != "Mn")


def singularize_word(word: str) -> str:
    """Reduce a lower-cased, accent-free Spanish plural to its singular.

    The result never ends in "s" unless the word was left untouched, so
    applying this twice gives the same result as applying it once.
    """
    if len(word) <= 4 or not word.isalpha() or not word.endswith("s"):
        return word
    if word in INVARIANT_WORDS:
        return word

    if word.endswith("ces"):
        return word[:-3] + "z"
    if word.endswith("ones"):
        return word[:-2]
    if word.endswith("es") and word[-3] in ES_CONSONANTS:
        return word[:-2]
    if word[-2] in VOWELS:
        return word[:-1]
    return word


class TextNormalizer:
    """Canonicalizes text into a comparable form."""

    def clean_only(self, text: str | None) -> str:
        """Lower-case and strip diacritics, nothing else."""
        if not text:
            return ""
        return strip_diacritics(text.lower())

    def strip_punctuation(self, text: str) -> str:
        """Replace punctuation with spaces and collapse whitespace."""
        text = _PUNCTUATION.sub(" ", text)
        return _WHITESPACE.sub(" ", text).strip()

    def singularize(self, text: str) -> str:
        """Singularize every word of an already cleaned text."""
        return " ".join(singularize_word(w) for w in text.split())

    def normalize(self, text: str | None) -> str:
        """Full normalization for free-text questions."""
        if not text:
            return ""
        cleaned = self.strip_punctuation(self.clean_only(text))
        return self.singularize(cleaned)

    def search_key(self, text: str | None) -> str:
        """Reduce text to lower-case ASCII letters, digits and spaces."""
        return _NON_SEARCHABLE.sub("", self.clean_only(text))
