"""
Pydantic models for commune records and search criteria.
These are pure data objects — no index coupling.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

BOUNDARY_TYPES = {"Polygon", "MultiPolygon"}


# ── Dataset records ───────────────────────────────────────────────────

class Commune(BaseModel):
    """One administrative unit as stored in the source dataset."""
    code: str
    name: str = Field(..., alias="nom")
    postal_codes: tuple[str, ...] = Field(default=(), alias="codesPostaux")
    centroid: Optional[dict[str, Any]] = Field(None, alias="centre")
    boundary: Optional[dict[str, Any]] = Field(None, alias="contour")
    # Relevance of a name match; only ever set on per-query copies
    score: Optional[float] = Field(None, alias="_score")

    model_config = {"populate_by_name": True, "extra": "allow", "frozen": True}

    @field_validator("centroid")
    @classmethod
    def check_centroid(cls, v):
        if v is not None and v.get("type") != "Point":
            raise ValueError(f"centre must be a GeoJSON Point, got {v.get('type')!r}")
        return v

    @field_validator("boundary")
    @classmethod
    def check_boundary(cls, v):
        if v is not None and v.get("type") not in BOUNDARY_TYPES:
            raise ValueError(f"contour must be a GeoJSON Polygon or MultiPolygon, got {v.get('type')!r}")
        return v

    def detached(self) -> Commune:
        """Deep copy safe to hand to callers; geometry dicts are not shared with the index."""
        return self.model_copy(deep=True)

    def with_score(self, score: float) -> Commune:
        """Detached copy carrying a relevance score; the indexed record is untouched."""
        return self.model_copy(update={"score": score}, deep=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── Query criteria ────────────────────────────────────────────────────

class SearchCriteria(BaseModel):
    """
    Predicates accepted by CommuneDatabase.search().

    Keys may use the dataset's French names (nom, codePostal, lat, lon)
    or the English ones (name, postalCode, latitude, longitude).
    """
    name: Optional[str] = Field(None, validation_alias=AliasChoices("nom", "name"))
    postal_code: Optional[str] = Field(
        None, validation_alias=AliasChoices("codePostal", "postalCode", "postal_code"),
    )
    code: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90, validation_alias=AliasChoices("lat", "latitude"))
    longitude: Optional[float] = Field(None, ge=-180, le=180, validation_alias=AliasChoices("lon", "longitude"))

    model_config = {"populate_by_name": True, "extra": "forbid", "frozen": True}

    @model_validator(mode="after")
    def check_shape(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be supplied together")
        if not self.predicates():
            raise ValueError("at least one search criterion is required")
        return self

    @property
    def has_point(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def predicates(self) -> list[str]:
        """Names of the predicates present, in composition order."""
        present = []
        if self.name is not None:
            present.append("name")
        if self.postal_code is not None:
            present.append("postal_code")
        if self.code is not None:
            present.append("code")
        if self.has_point:
            present.append("point")
        return present


# ── API response models ───────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str = "ok"
    communes: int = 0
    codes: int = 0
    postal_codes: int = 0
    contours: int = 0
    names: int = 0
