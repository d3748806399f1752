"""Text normalisation shared by every matcher.

Two flavours are exposed:

* :func:`normalize_text` keeps single spaces between tokens and is used for
  free-text search (folder paths, filenames, OCR text).
* :func:`normalize_key` joins tokens with underscores and is used to compare
  vocabulary entries (``"Instalações Elétricas"`` → ``"INSTALACOES_ELETRICAS"``).

Both strip diacritics, uppercase, never raise and are idempotent.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Optional

__all__ = ["strip_accents", "normalize_text", "normalize_key"]

_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]+")


def strip_accents(value: Optional[str]) -> str:
    """Remove combining marks after canonical decomposition (``ç`` → ``c``)."""

    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", str(value))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(value: Optional[str]) -> str:
    """Uppercase, accent-free, ``[A-Z0-9 ]`` only, single spaces between tokens."""

    cleaned = _NON_ALNUM_RE.sub(" ", strip_accents(value).upper())
    return cleaned.strip()


def normalize_key(value: Optional[str]) -> str:
    """Uppercase, accent-free, ``[A-Z0-9_]`` only, tokens joined by underscores."""

    cleaned = _NON_ALNUM_RE.sub("_", strip_accents(value).upper())
    return cleaned.strip("_")
