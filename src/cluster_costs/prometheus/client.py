"""Prometheus HTTP API client."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import requests


class PrometheusClientError(Exception):
    """Error talking to the Prometheus HTTP API."""

    pass


class MetricsClient(ABC):
    """Abstract interface for a PromQL-compatible metrics backend."""

    @abstractmethod
    def query(self, query: str, time: datetime | None = None) -> dict[str, Any]:
        """
        Execute an instant query.

        Returns the decoded JSON response envelope.
        """

    @abstractmethod
    def query_range(
        self,
        query: str,
        start: datetime,
        end: datetime,
        step_seconds: float,
    ) -> dict[str, Any]:
        """
        Execute a range query evaluated every `step_seconds` from start to end.

        Returns the decoded JSON response envelope.
        """


class PrometheusClient(MetricsClient):
    """
    Client for the Prometheus HTTP API.

    Works against Prometheus itself and compatible backends (Thanos, Cortex,
    Mimir, VictoriaMetrics) that serve /api/v1/query and /api/v1/query_range.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        verify_tls: bool = True,
        headers: dict[str, str] | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the Prometheus client.

        Args:
            url: Base URL of the Prometheus server (e.g., http://prometheus:9090).
            timeout: Per-request timeout in seconds.
            verify_tls: Whether to verify TLS certificates.
            headers: Extra headers sent with every request (e.g., Authorization).
            session: Optional requests session.
        """
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.verify_tls = verify_tls
        self._session = session or requests.Session()
        if headers:
            self._session.headers.update(headers)

    def query(self, query: str, time: datetime | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {"query": query}
        if time is not None:
            params["time"] = time.timestamp()
        return self._post("query", params)

    def query_range(
        self,
        query: str,
        start: datetime,
        end: datetime,
        step_seconds: float,
    ) -> dict[str, Any]:
        params = {
            "query": query,
            "start": start.timestamp(),
            "end": end.timestamp(),
            "step": step_seconds,
        }
        return self._post("query_range", params)

    def _post(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """
        POST a form-encoded request to the Prometheus API.

        A JSON error body (status=error, usually with HTTP 400 or 422) is raised
        with the backend's errorType and message.

        Raises:
            PrometheusClientError: On network errors, unexpected HTTP status,
                or a body that is not JSON.
        """
        url = f"{self.url}/api/v1/{endpoint}"

        try:
            response = self._session.post(
                url,
                data=params,
                timeout=self.timeout,
                verify=self.verify_tls,
            )
        except requests.RequestException as e:
            raise PrometheusClientError(f"Request to {url} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("status") == "error":
            raise PrometheusClientError(
                f"Prometheus API error ({body.get('errorType', 'unknown')}): "
                f"{body.get('error', 'no error message')}"
            )

        if not response.ok:
            raise PrometheusClientError(
                f"Prometheus API error: {response.status_code} - {response.text[:200]}"
            )
        if not isinstance(body, dict):
            raise PrometheusClientError(f"Prometheus API returned a non-JSON body from {url}")

        return body
