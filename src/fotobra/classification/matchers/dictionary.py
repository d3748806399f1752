"""Closed-vocabulary lookup for disciplines and services."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from ..lexicon import Vocabulary, load_vocabulary
from ..normalize import normalize_text

__all__ = ["DictionaryLookup", "find_disciplina_in_text", "find_servico_in_text", "MIN_SUBSTRING_LENGTH"]

# Shorter entries never match as substrings.
MIN_SUBSTRING_LENGTH = 5


def _surfaces(entries: Sequence[str]) -> List[Tuple[str, str]]:
    pairs = [(normalize_text(entry), entry) for entry in entries]
    pairs = [(surface, entry) for surface, entry in pairs if surface]
    # Longer surfaces first so the most specific entry wins; sort is stable.
    pairs.sort(key=lambda item: len(item[0]), reverse=True)
    return pairs


class DictionaryLookup:
    """Match free text against the discipline and service vocabularies.

    Returned values are always the vocabulary strings as declared, never the
    normalised surface used for comparison.
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None) -> None:
        self.vocabulary = vocabulary or load_vocabulary()
        self._disciplina_tokens: Dict[str, str] = {}
        for entry in self.vocabulary.disciplinas:
            self._disciplina_tokens.setdefault(normalize_text(entry), entry)
        self._disciplina_surfaces = _surfaces(self.vocabulary.disciplinas)
        self._servico_surfaces = _surfaces(self.vocabulary.servicos)

    @staticmethod
    def _contains(haystack: str, surfaces: Sequence[Tuple[str, str]]) -> Optional[str]:
        for surface, entry in surfaces:
            if len(surface) >= MIN_SUBSTRING_LENGTH and surface in haystack:
                return entry
        return None

    def find_disciplina(self, text: Optional[str]) -> Optional[str]:
        haystack = normalize_text(text)
        if not haystack:
            return None
        for token in haystack.split():
            entry = self._disciplina_tokens.get(token)
            if entry is not None:
                return entry
        return self._contains(haystack, self._disciplina_surfaces)

    def find_servico(self, text: Optional[str]) -> Optional[str]:
        haystack = normalize_text(text)
        if not haystack:
            return None
        return self._contains(haystack, self._servico_surfaces)


_DEFAULT: Dict[str, object] = {"vocabulary": None, "lookup": None}


def _default_lookup() -> DictionaryLookup:
    vocabulary = load_vocabulary()
    if _DEFAULT["vocabulary"] is not vocabulary:
        _DEFAULT["vocabulary"] = vocabulary
        _DEFAULT["lookup"] = DictionaryLookup(vocabulary)
    return _DEFAULT["lookup"]  # type: ignore[return-value]


def find_disciplina_in_text(text: Optional[str], *, lookup: Optional[DictionaryLookup] = None) -> Optional[str]:
    """Exact token match first, then substring match for entries of 5+ characters."""

    return (lookup or _default_lookup()).find_disciplina(text)


def find_servico_in_text(text: Optional[str], *, lookup: Optional[DictionaryLookup] = None) -> Optional[str]:
    """Substring match only, for entries of 5+ characters; services are compound names."""

    return (lookup or _default_lookup()).find_servico(text)
