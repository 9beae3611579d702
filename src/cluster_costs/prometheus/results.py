"""Decoding of Prometheus HTTP API query results.

A raw response is decoded once into either a VectorResult (instant query, one
sample per series) or a MatrixResult (range query, ordered samples per series).
Both expose the same ordered list of Series, so consumers never look at the
raw payload.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal

from cluster_costs.errors import ParseError


@dataclass(frozen=True)
class Sample:
    """A single (timestamp, value) point."""

    timestamp: float  # Unix seconds
    value: float


@dataclass(frozen=True)
class Series:
    """A read-only label set plus its time-ascending samples."""

    labels: Mapping[str, str] = field(default_factory=dict)
    samples: tuple[Sample, ...] = ()

    def __post_init__(self):
        # Labels are fixed at construction
        object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))

    def label(self, key: str) -> str:
        """Return the label value, or an empty string if absent."""
        return self.labels.get(key, "")


@dataclass(frozen=True)
class VectorResult:
    """Instant query result."""

    series: list[Series]
    result_type: Literal["vector"] = "vector"


@dataclass(frozen=True)
class MatrixResult:
    """Range query result."""

    series: list[Series]
    result_type: Literal["matrix"] = "matrix"


QueryResult = VectorResult | MatrixResult


def _to_float(raw: Any, what: str) -> float:
    if isinstance(raw, bool):
        raise ParseError(f"Improperly formatted {what} in datapoint: {raw!r}")
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ParseError(f"Improperly formatted {what} in datapoint: {raw!r}") from None


def _parse_sample(point: Any) -> Sample:
    """Parse a [timestamp, "value"] pair."""
    if not isinstance(point, (list, tuple)) or len(point) != 2:
        raise ParseError(f"Improperly formatted datapoint from Prometheus: {point!r}")
    return Sample(
        timestamp=_to_float(point[0], "timestamp"),
        value=_to_float(point[1], "value"),
    )


def _parse_labels(entry: dict[str, Any]) -> dict[str, str]:
    metric = entry.get("metric")
    if metric is None:
        raise ParseError("Metric field does not exist in data result")
    if not isinstance(metric, dict):
        raise ParseError("Metric field is improperly formatted")
    return {str(key): str(value) for key, value in metric.items()}


def _entry_shape(entry: dict[str, Any]) -> str:
    has_value = "value" in entry
    has_values = "values" in entry
    if has_value and has_values:
        raise ParseError("Data result contains both 'value' and 'values'")
    if has_values:
        return "matrix"
    if has_value:
        return "vector"
    raise ParseError("Value field does not exist in data result")


def _parse_series(entry: Any, shape: str) -> Series:
    if not isinstance(entry, dict):
        raise ParseError("Result entry is improperly formatted")
    labels = _parse_labels(entry)

    if shape == "vector":
        samples: tuple[Sample, ...] = (_parse_sample(entry["value"]),)
    else:
        values = entry["values"]
        if not isinstance(values, list):
            raise ParseError("Values field is improperly formatted")
        samples = tuple(_parse_sample(point) for point in values)

    return Series(labels=labels, samples=samples)


def _unwrap_data(raw: Any) -> dict[str, Any]:
    """Return the `data` object from a full envelope or a bare data object."""
    if raw is None:
        raise ParseError("Nil query result")
    if not isinstance(raw, dict):
        raise ParseError(f"Query result is not an object: {type(raw).__name__}")

    if "result" in raw:
        return raw

    if "data" not in raw:
        if raw.get("status") == "error":
            raise ParseError(
                f"Prometheus error ({raw.get('errorType', 'unknown')}): "
                f"{raw.get('error', 'no error message')}"
            )
        raise ParseError("Data field does not exist in Prometheus response")

    data = raw["data"]
    if not isinstance(data, dict):
        raise ParseError("Data field improperly formatted in Prometheus response")
    if "result" not in data:
        raise ParseError("Result field not present in Prometheus response")
    return data


def decode_query_result(raw: Any) -> QueryResult:
    """
    Decode a raw Prometheus response into a typed result.

    Args:
        raw: Decoded JSON of a query or query_range response, either the full
            envelope or its `data` object.

    Returns:
        VectorResult or MatrixResult.

    Raises:
        ParseError: If the payload is not a well-formed vector or matrix result.
    """
    data = _unwrap_data(raw)

    entries = data["result"]
    if not isinstance(entries, list):
        raise ParseError("Result field is improperly formatted")

    declared = data.get("resultType")
    if declared is not None and declared not in ("vector", "matrix"):
        raise ParseError(f"Unsupported result type: {declared}")

    shapes = set()
    for entry in entries:
        if not isinstance(entry, dict):
            raise ParseError("Result entry is improperly formatted")
        shapes.add(_entry_shape(entry))

    if len(shapes) > 1:
        raise ParseError("Result mixes vector and matrix entries")
    if declared is not None and shapes and shapes != {declared}:
        raise ParseError(
            f"Result type '{declared}' does not match entries of type '{shapes.pop()}'"
        )

    shape = declared or (shapes.pop() if shapes else "vector")
    series = [_parse_series(entry, shape) for entry in entries]

    if shape == "matrix":
        return MatrixResult(series=series)
    return VectorResult(series=series)


def parse_query_result(raw: Any) -> list[Series]:
    """Parse a raw Prometheus response into an ordered list of Series."""
    return decode_query_result(raw).series
