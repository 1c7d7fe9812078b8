from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import numpy as np
from rapidfuzz import fuzz, process

from communes_geo.models import Commune
from communes_geo.normalize import normalize_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextHit:
    ref: str       # commune code
    score: float   # 0..1


class NameSearcher(Protocol):
    def add(self, commune: Commune) -> None: ...

    def search(self, query: str) -> list[TextHit]: ...

    def __len__(self) -> int: ...


class TextIndex:
    """
    Fuzzy name index. Stores only normalized names keyed by commune code;
    callers resolve hits back to records through the code index.
    """

    def __init__(self, min_score: float = 0.8, max_results: int = 0):
        self.min_score = min_score
        self.max_results = max_results
        self._refs: list[str] = []
        self._keys: list[str] = []
        self._position: dict[str, int] = {}

    def add(self, commune: Commune) -> None:
        key = normalize_string(commune.name)
        pos = self._position.get(commune.code)
        if pos is not None:
            self._keys[pos] = key
            return
        self._position[commune.code] = len(self._refs)
        self._refs.append(commune.code)
        self._keys.append(key)

    def search(self, query: str) -> list[TextHit]:
        q = normalize_string(query or "")
        if not q or not self._keys:
            return []

        sims = process.cdist([q], self._keys, scorer=fuzz.WRatio)[0] / 100.0
        # Stable sort: equal scores keep dataset order
        idxs = np.argsort(-sims, kind="stable")
        if self.max_results:
            idxs = idxs[: self.max_results]
        hits = [TextHit(ref=self._refs[int(i)], score=round(float(sims[int(i)]), 4)) for i in idxs]
        hits = [h for h in hits if h.score >= self.min_score]
        logger.debug("Name query %r -> %d hits", q, len(hits))
        return hits

    def __len__(self) -> int:
        return len(self._refs)
