"""
Dataset loading.

Accepts either a JSON array of commune objects:

    [{"code": "75056", "nom": "Paris", "codesPostaux": ["75001", ...],
      "centre": {...}, "contour": {...}}, ...]

or a GeoJSON FeatureCollection whose feature properties carry the same
fields; the feature geometry is used as the contour when the properties
don't hold one.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from communes_geo.errors import DatasetLoadError
from communes_geo.models import Commune

logger = logging.getLogger(__name__)


def load_communes(path: str | Path) -> list[Commune]:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise DatasetLoadError(f"Communes dataset not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DatasetLoadError(f"Cannot read communes dataset {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DatasetLoadError(f"Invalid JSON in communes dataset {path}: {e}") from e

    communes = parse_communes(_rows_from_payload(raw, source=str(path)), source=str(path))
    logger.info("Loaded %d communes from %s", len(communes), path)
    return communes


def parse_communes(rows: Iterable[Any], source: str = "<memory>") -> list[Commune]:
    """Validate raw rows (dicts or Commune instances) into Commune records."""
    out: list[Commune] = []
    for i, row in enumerate(rows):
        try:
            out.append(Commune.model_validate(row))
        except ValidationError as e:
            raise DatasetLoadError(f"Invalid commune at index {i} in {source}: {e}") from e
    return out


def _rows_from_payload(raw: Any, source: str) -> list[Any]:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict) and raw.get("type") == "FeatureCollection":
        return [_feature_to_row(feat) for feat in raw.get("features", [])]
    raise DatasetLoadError(
        f"Communes dataset {source} must be a JSON array or a GeoJSON FeatureCollection"
    )


def _feature_to_row(feature: Any) -> Any:
    if not isinstance(feature, dict):
        return feature
    row = dict(feature.get("properties") or {})
    if "contour" not in row and feature.get("geometry"):
        row["contour"] = feature["geometry"]
    return row
