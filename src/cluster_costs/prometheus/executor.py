"""Instant and range query execution against a metrics backend."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from cluster_costs.errors import ExecutionError, TimeParseError
from cluster_costs.prometheus.client import MetricsClient

logger = logging.getLogger(__name__)

# Range boundaries are exchanged as e.g. 2024-01-15T00:00:00.000Z
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
_TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
    "w": 604800.0,
    "y": 31536000.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h|d|w|y)")


def parse_timestamp(value: str, field: str = "time") -> datetime:
    """
    Parse a range boundary in the fixed YYYY-MM-DDTHH:MM:SS.mmmZ format.

    Raises:
        TimeParseError: If the string does not match the format.
    """
    if not isinstance(value, str) or not _TIMESTAMP_PATTERN.match(value):
        raise TimeParseError(field, str(value), "expected format YYYY-MM-DDTHH:MM:SS.mmmZ")
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=UTC)
    except ValueError as e:
        raise TimeParseError(field, value, str(e)) from e


def parse_duration(value: str, field: str = "duration") -> float:
    """
    Parse a duration such as 5m, 1h30m, 1.5h or 7d into seconds.

    Raises:
        TimeParseError: If the string is empty or contains an unknown unit.
    """
    if not isinstance(value, str) or not value:
        raise TimeParseError(field, str(value), "empty duration")

    position = 0
    total = 0.0
    for match in _DURATION_PART.finditer(value):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position != len(value):
        raise TimeParseError(field, value, "invalid duration")
    return total


@dataclass(frozen=True)
class QueryRange:
    """Parsed start, end and step of a range query."""

    start: datetime
    end: datetime
    step_seconds: float

    @classmethod
    def parse(cls, start: str, end: str, step: str) -> QueryRange:
        """
        Parse textual range parameters.

        Raises:
            TimeParseError: Naming the field (start, end or step) that failed.
        """
        try:
            start_time = parse_timestamp(start, "start")
            end_time = parse_timestamp(end, "end")
            step_seconds = parse_duration(step, "step")
        except TimeParseError as e:
            logger.warning("Error parsing time %s. Error: %s", e.value, e)
            raise

        if step_seconds <= 0:
            raise TimeParseError("step", step, "step must be positive")
        if end_time < start_time:
            raise TimeParseError("end", end, f"end is before start {start}")

        return cls(start=start_time, end=end_time, step_seconds=step_seconds)


class QueryExecutor:
    """
    Run PromQL queries through a MetricsClient.

    Every client failure is re-raised as ExecutionError carrying the query
    text, so a failing call can always be traced back to its expression.
    """

    def __init__(self, client: MetricsClient):
        self.client = client

    def run_instant(self, query: str, time: datetime | None = None) -> dict[str, Any]:
        """Run an instant query and return the raw response."""
        logger.debug("Running query %s", query)
        try:
            return self.client.query(query, time=time)
        except Exception as e:
            raise ExecutionError(query, e) from e

    def run_range(self, query: str, start: str, end: str, step: str) -> dict[str, Any]:
        """
        Run a range query from textual start, end and step.

        Raises:
            TimeParseError: Before the query is issued, if any parameter is malformed.
            ExecutionError: If the backend fails.
        """
        return self.run_range_window(query, QueryRange.parse(start, end, step))

    def run_range_window(self, query: str, query_range: QueryRange) -> dict[str, Any]:
        """Run a range query over an already parsed range."""
        logger.debug(
            "Running range query %s (start=%s end=%s step=%ss)",
            query,
            query_range.start.isoformat(),
            query_range.end.isoformat(),
            query_range.step_seconds,
        )
        try:
            return self.client.query_range(
                query,
                start=query_range.start,
                end=query_range.end,
                step_seconds=query_range.step_seconds,
            )
        except Exception as e:
            raise ExecutionError(query, e) from e
