"""
String normalization shared by name indexing and name queries.

Rules (applied identically on both sides):
  1. NFKD decomposition, combining marks dropped ("Évry" -> "Evry")
  2. Case folding
  3. Punctuation, apostrophes and hyphens become separators
     ("Saint-Étienne" -> "saint etienne", "L'Haÿ-les-Roses" -> "l hay les roses")
  4. Whitespace tokenization
"""

from __future__ import annotations

import re
import unicodedata

_SEPARATOR_RE = re.compile(r"[^\w\s]|_")
# Ligatures that NFKD leaves intact
_LIGATURES = {"œ": "oe", "æ": "ae", "ß": "ss"}


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def tokenize(text: str) -> list[str]:
    """Normalize text and split it into search tokens."""
    folded = strip_accents(text).casefold()
    for src, dst in _LIGATURES.items():
        folded = folded.replace(src, dst)
    return _SEPARATOR_RE.sub(" ", folded).split()


def normalize_string(text: str) -> str:
    """Single-string form of tokenize(), used as the fuzzy-match key."""
    return " ".join(tokenize(text))
