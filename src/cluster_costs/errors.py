"""Exceptions raised by the cost aggregation engine."""

from __future__ import annotations


class ClusterCostError(Exception):
    """Base error for cluster cost aggregation."""

    pass


class TimeParseError(ClusterCostError):
    """A start, end, window or step string could not be parsed."""

    def __init__(self, field: str, value: str, reason: str = ""):
        self.field = field
        self.value = value
        self.reason = reason
        message = f"Error parsing {field} '{value}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ExecutionError(ClusterCostError):
    """The metrics backend rejected or failed to answer a query."""

    def __init__(self, query: str, cause: BaseException):
        self.query = query
        self.cause = cause
        super().__init__(f"Error for query {query}: {cause}")


class ParseError(ClusterCostError):
    """The backend answered but the payload is not a well-formed result."""

    pass


class NoDataError(ClusterCostError):
    """A query returned no usable series."""

    def __init__(self, message: str = "Not enough data available in the selected time range"):
        super().__init__(message)
