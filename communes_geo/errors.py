"""Domain errors."""


class CommunesError(Exception):
    """Base class for commune database failures."""

    error_code = "COMMUNES_ERROR"


class DatasetLoadError(CommunesError):
    """Raised when the source dataset cannot be located, read or validated."""

    error_code = "DATASET_LOAD_ERROR"


class CriteriaError(CommunesError, ValueError):
    """Raised for malformed search criteria (unknown keys, half a coordinate pair)."""

    error_code = "CRITERIA_ERROR"
