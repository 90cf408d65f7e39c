"""Split-timing transformation engine reused by the API."""

from .errors import MalformedFieldError, MissingInputError, UnexpectedTransformError, UpstreamUnavailable
from .record import CalculatedRecord, RawSplitRecord, records_from_payload, unique_race_ids
from .transform import ResultTransformer, TransformResults, build_views
from .loader import SplitsSource

__all__ = [
    "CalculatedRecord",
    "MalformedFieldError",
    "MissingInputError",
    "RawSplitRecord",
    "ResultTransformer",
    "SplitsSource",
    "TransformResults",
    "UnexpectedTransformError",
    "UpstreamUnavailable",
    "build_views",
    "records_from_payload",
    "unique_race_ids",
]
