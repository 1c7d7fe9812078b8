"""
Tests for Pydantic model validation.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from communes_geo.models import Commune, SearchCriteria

POLYGON = {"type": "Polygon", "coordinates": [[[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]]}


class TestCommune:
    def test_basic_parsing(self):
        commune = Commune.model_validate({"nom": "Paris", "code": "75056", "codesPostaux": ["75001", "75002"]})
        assert commune.code == "75056"
        assert commune.name == "Paris"
        assert commune.postal_codes == ("75001", "75002")
        assert commune.boundary is None
        assert commune.score is None

    def test_populate_by_name(self):
        commune = Commune(code="75056", name="Paris", postal_codes=["75001"])
        assert commune.postal_codes == ("75001",)

    def test_missing_postal_codes_default_empty(self):
        commune = Commune.model_validate({"nom": "abc", "code": "12345"})
        assert commune.postal_codes == ()

    def test_extra_fields_allowed(self):
        commune = Commune.model_validate({"nom": "abc", "code": "12345", "population": 42})
        assert commune.to_dict()["population"] == 42

    def test_frozen(self):
        commune = Commune.model_validate({"nom": "abc", "code": "12345"})
        with pytest.raises(ValidationError):
            commune.name = "xyz"

    def test_boundary_type_checked(self):
        with pytest.raises(ValidationError):
            Commune.model_validate({"nom": "abc", "code": "12345", "contour": {"type": "Dumb", "coordinates": []}})

    def test_centroid_type_checked(self):
        with pytest.raises(ValidationError):
            Commune.model_validate({"nom": "abc", "code": "12345", "centre": POLYGON})

    def test_to_dict_uses_dataset_field_names(self):
        raw = {"nom": "abc", "code": "12345", "codesPostaux": ["11111"], "contour": POLYGON}
        assert Commune.model_validate(raw).to_dict() == raw

    def test_with_score_is_a_detached_copy(self):
        commune = Commune.model_validate({"nom": "abc", "code": "12345", "contour": POLYGON})
        scored = commune.with_score(0.75)
        assert scored.score == 0.75
        assert commune.score is None
        assert scored.boundary == commune.boundary
        assert scored.boundary is not commune.boundary
        assert scored.to_dict()["_score"] == 0.75


class TestSearchCriteria:
    def test_french_keys(self):
        criteria = SearchCriteria.model_validate({"nom": "abc", "codePostal": "11111", "lat": 1, "lon": 2})
        assert criteria.name == "abc"
        assert criteria.postal_code == "11111"
        assert criteria.latitude == 1
        assert criteria.longitude == 2

    def test_english_keys(self):
        criteria = SearchCriteria.model_validate({"name": "abc", "postalCode": "11111", "latitude": 1, "longitude": 2})
        assert criteria.predicates() == ["name", "postal_code", "point"]

    def test_predicate_order_is_fixed(self):
        criteria = SearchCriteria.model_validate({"lon": 0, "lat": 0, "code": "1", "codePostal": "2", "nom": "x"})
        assert criteria.predicates() == ["name", "postal_code", "code", "point"]

    def test_latitude_without_longitude(self):
        with pytest.raises(ValidationError):
            SearchCriteria.model_validate({"lat": 5})

    def test_longitude_without_latitude(self):
        with pytest.raises(ValidationError):
            SearchCriteria.model_validate({"code": "12345", "lon": 5})

    def test_unknown_key(self):
        with pytest.raises(ValidationError):
            SearchCriteria.model_validate({"code": "12345", "departement": "75"})

    def test_empty_criteria(self):
        with pytest.raises(ValidationError):
            SearchCriteria.model_validate({})

    def test_coordinate_bounds(self):
        with pytest.raises(ValidationError):
            SearchCriteria.model_validate({"lat": 91, "lon": 0})
