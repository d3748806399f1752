"""Lexical matchers feeding the classification resolver."""

from .aliases import AliasRuleMatcher, apply_alias_rules, build_haystack
from .dictionary import DictionaryLookup, find_disciplina_in_text, find_servico_in_text
from .frente import extract_frente_from_ocr, extract_frente_from_path

__all__ = [
    "AliasRuleMatcher",
    "DictionaryLookup",
    "apply_alias_rules",
    "build_haystack",
    "extract_frente_from_ocr",
    "extract_frente_from_path",
    "find_disciplina_in_text",
    "find_servico_in_text",
]
