"""
In-memory commune database.

get_indexed_db() walks the dataset once and feeds every record into four
indexes:

  code_index         code -> commune                 (UniqueKeyIndex)
  postal_code_index  postal code -> communes         (MultiKeyIndex)
  spatial_index      lon/lat -> containing commune   (SpatialIndex)
  text_index         fuzzy name -> ranked codes      (TextIndex)

search() runs one sub-query per predicate present in the criteria and
intersects the partial results by commune code. The element kept for each
code, and the result order, come from the first partial in the order
name, postal code, code, point. Every branch returns deep copies, so
callers never hold references into the indexes; name matches also carry
their relevance score.

Nothing is mutated after construction, so one database can serve any
number of concurrent readers.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import ValidationError
from shapely.errors import ShapelyError

from communes_geo.config import Settings, get_settings
from communes_geo.errors import CriteriaError, DatasetLoadError
from communes_geo.indexes import MultiKeyIndex, UniqueKeyIndex
from communes_geo.loader import load_communes, parse_communes
from communes_geo.models import Commune, SearchCriteria
from communes_geo.spatial import PointLocator, SpatialIndex
from communes_geo.text import NameSearcher, TextIndex

logger = logging.getLogger(__name__)


class CommuneDatabase:
    """Read-only handle over the indexed dataset. Build it with get_indexed_db()."""

    def __init__(
        self,
        communes: tuple[Commune, ...],
        code_index: UniqueKeyIndex[str, Commune],
        postal_code_index: MultiKeyIndex[str, Commune],
        spatial_index: PointLocator,
        text_index: NameSearcher,
    ):
        self.communes = communes
        self.code_index = code_index
        self.postal_code_index = postal_code_index
        self.spatial_index = spatial_index
        self.text_index = text_index

    # ── Single-index queries ──────────────────────────────────────────

    def query_by_name(self, nom: str) -> list[Commune]:
        out: list[Commune] = []
        for hit in self.text_index.search(nom):
            commune = self.code_index.get(hit.ref)
            if commune is None:
                # Name entry with no record behind it; only possible with a foreign text index
                logger.warning("Text index returned unknown code %s", hit.ref)
                continue
            out.append(commune.with_score(hit.score))
        return out

    def query_by_postal_code(self, code_postal: str) -> list[Commune]:
        return [c.detached() for c in self.postal_code_index.get(code_postal)]

    def query_by_code(self, code: str) -> list[Commune]:
        commune = self.code_index.get(code)
        return [commune.detached()] if commune is not None else []

    def query_by_lon_lat(self, lon: float, lat: float) -> list[Commune]:
        commune = self.spatial_index.query_point(lon, lat)
        return [commune.detached()] if commune is not None else []

    # ── Composed search ───────────────────────────────────────────────

    def search(self, criteria: SearchCriteria | Mapping[str, Any]) -> list[Commune]:
        """
        Multi-criteria lookup.

        Raises CriteriaError for malformed criteria (unknown key, latitude
        without longitude, no predicate at all). Unknown values never raise;
        they just produce an empty result.
        """
        if not isinstance(criteria, SearchCriteria):
            criteria = parse_criteria(criteria)

        partials: list[list[Commune]] = []
        if criteria.name is not None:
            partials.append(self.query_by_name(criteria.name))
        if criteria.postal_code is not None:
            partials.append(self.query_by_postal_code(criteria.postal_code))
        if criteria.code is not None:
            partials.append(self.query_by_code(criteria.code))
        if criteria.has_point:
            partials.append(self.query_by_lon_lat(criteria.longitude, criteria.latitude))

        if len(partials) == 1:
            return partials[0]
        result = intersect_by_code(partials)
        logger.debug("search(%s) -> %d communes", ",".join(criteria.predicates()), len(result))
        return result

    def stats(self) -> dict[str, int]:
        return {
            "communes": len(self.communes),
            "codes": len(self.code_index),
            "postal_codes": len(self.postal_code_index),
            "contours": len(self.spatial_index),
            "names": len(self.text_index),
        }


def parse_criteria(raw: Mapping[str, Any]) -> SearchCriteria:
    try:
        return SearchCriteria.model_validate(dict(raw))
    except ValidationError as e:
        raise CriteriaError(f"Invalid search criteria: {e}") from e


def intersect_by_code(partials: Sequence[Sequence[Commune]]) -> list[Commune]:
    """
    Communes of the first sequence whose code appears in every other one,
    first occurrence only, in first-sequence order.
    """
    first, *rest = partials
    other_codes = [{c.code for c in p} for p in rest]
    seen: set[str] = set()
    out: list[Commune] = []
    for commune in first:
        if commune.code in seen:
            continue
        if all(commune.code in codes for codes in other_codes):
            seen.add(commune.code)
            out.append(commune)
    return out


# ── Construction ──────────────────────────────────────────────────────

def get_indexed_db(
    communes: Optional[Iterable[Commune | Mapping[str, Any]]] = None,
    source_path: str | Path | None = None,
    *,
    settings: Settings | None = None,
    spatial_index: PointLocator | None = None,
    text_index: NameSearcher | None = None,
) -> CommuneDatabase:
    """
    Build every index in one pass over the dataset.

    Explicit communes take precedence over source_path, which defaults to
    settings.dataset.path. Raises DatasetLoadError if the dataset cannot
    be loaded or indexed; no partially built database escapes.
    """
    settings = settings or get_settings()

    if communes is not None:
        records = parse_communes(communes)
    else:
        records = load_communes(source_path or settings.dataset.path)

    code_index: UniqueKeyIndex[str, Commune] = UniqueKeyIndex()
    postal_code_index: MultiKeyIndex[str, Commune] = MultiKeyIndex()
    if spatial_index is None:
        spatial_index = SpatialIndex()
    if text_index is None:
        text_index = TextIndex(
            min_score=settings.search.min_text_score,
            max_results=settings.search.max_text_results,
        )

    duplicates: list[str] = []
    for i, commune in enumerate(records):
        if code_index.put(commune.code, commune):
            duplicates.append(commune.code)
        text_index.add(commune)
        for code_postal in commune.postal_codes:
            postal_code_index.add(code_postal, commune)
        try:
            spatial_index.insert(commune)
        except (ShapelyError, ValueError, TypeError, IndexError, KeyError) as e:
            raise DatasetLoadError(f"Invalid contour for commune {commune.code} (index {i}): {e}") from e

    if duplicates:
        if settings.dataset.reject_duplicates:
            raise DatasetLoadError(
                f"Duplicate commune codes in dataset: {', '.join(sorted(set(duplicates)))}"
            )
        logger.warning(
            "%d duplicate commune codes, keeping the last occurrence of each: %s",
            len(duplicates), ", ".join(sorted(set(duplicates))[:10]),
        )

    try:
        spatial_index.build()
    except (ShapelyError, ValueError, TypeError) as e:
        raise DatasetLoadError(f"Cannot build spatial index: {e}") from e

    db = CommuneDatabase(
        communes=tuple(records),
        code_index=code_index,
        postal_code_index=postal_code_index,
        spatial_index=spatial_index,
        text_index=text_index,
    )
    logger.info(
        "Commune database ready: %d communes, %d postal codes, %d contours",
        len(records), len(postal_code_index), len(spatial_index),
    )
    return db
