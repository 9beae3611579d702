"""Tests for Prometheus result decoding."""

import math

import pytest

from conftest import matrix_response, vector_response
from cluster_costs.errors import ParseError
from cluster_costs.prometheus.results import (
    MatrixResult,
    Sample,
    Series,
    VectorResult,
    decode_query_result,
    parse_query_result,
)


class TestDecodeQueryResult:
    """Tests for decode_query_result."""

    def test_vector(self):
        """Test that an instant response decodes to single-sample series."""
        raw = vector_response(({"cluster_id": "A"}, 100, 5.0), ({"cluster_id": "B"}, 100, 7.0))
        result = decode_query_result(raw)

        assert isinstance(result, VectorResult)
        assert result.series == [
            Series(labels={"cluster_id": "A"}, samples=(Sample(100.0, 5.0),)),
            Series(labels={"cluster_id": "B"}, samples=(Sample(100.0, 7.0),)),
        ]

    def test_matrix(self):
        """Test that a range response keeps sample order."""
        raw = matrix_response(({"cluster_id": "A"}, [(100, 1.0), (160, 2.0), (220, 3.0)]))
        result = decode_query_result(raw)

        assert isinstance(result, MatrixResult)
        assert [s.timestamp for s in result.series[0].samples] == [100.0, 160.0, 220.0]
        assert [s.value for s in result.series[0].samples] == [1.0, 2.0, 3.0]

    def test_bare_data_object(self):
        """Test that the data object is accepted without the envelope."""
        raw = vector_response(({}, 100, 1.5))["data"]
        assert parse_query_result(raw) == [Series(labels={}, samples=(Sample(100.0, 1.5),))]

    def test_empty_result(self):
        assert parse_query_result(vector_response()) == []
        assert isinstance(decode_query_result(matrix_response()), MatrixResult)

    def test_inferred_shape_without_result_type(self):
        raw = {"data": {"result": [{"metric": {}, "values": [[1, "2"]]}]}}
        assert isinstance(decode_query_result(raw), MatrixResult)

    def test_labels_verbatim(self):
        """Test that labels are kept as-is and absent labels read as empty."""
        raw = vector_response(({"cluster_id": "", "node": "n1"}, 100, 1.0), ({}, 100, 2.0))
        series = parse_query_result(raw)

        assert series[0].labels == {"cluster_id": "", "node": "n1"}
        assert series[0].label("cluster_id") == ""
        assert series[1].label("cluster_id") == ""

    def test_labels_read_only(self):
        """Test that a decoded series cannot have its labels changed."""
        series = parse_query_result(vector_response(({"cluster_id": "A"}, 100, 1.0)))[0]

        with pytest.raises(TypeError):
            series.labels["cluster_id"] = "B"
        assert series.label("cluster_id") == "A"

    def test_labels_copied_from_caller(self):
        labels = {"cluster_id": "A"}
        series = Series(labels=labels, samples=(Sample(100.0, 1.0),))

        labels["cluster_id"] = "B"
        assert series.label("cluster_id") == "A"

    def test_special_values(self):
        raw = {
            "data": {
                "resultType": "vector",
                "result": [
                    {"metric": {}, "value": [1, "NaN"]},
                    {"metric": {}, "value": [1, "+Inf"]},
                ],
            }
        }
        series = parse_query_result(raw)
        assert math.isnan(series[0].samples[0].value)
        assert series[1].samples[0].value == math.inf


class TestDecodeErrors:
    """Tests for malformed payloads."""

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "not an object",
            {},
            {"status": "success"},
            {"data": []},
            {"data": {"resultType": "vector"}},
            {"data": {"result": {}}},
            {"data": {"result": ["entry"]}},
            {"data": {"result": [{"value": [1, "1"]}]}},
            {"data": {"result": [{"metric": [], "value": [1, "1"]}]}},
            {"data": {"result": [{"metric": {}}]}},
            {"data": {"result": [{"metric": {}, "value": [1]}]}},
            {"data": {"result": [{"metric": {}, "value": [1, "abc"]}]}},
            {"data": {"result": [{"metric": {}, "value": ["x", "1"]}]}},
            {"data": {"result": [{"metric": {}, "values": "1"}]}},
        ],
    )
    def test_malformed(self, raw):
        with pytest.raises(ParseError):
            decode_query_result(raw)

    def test_backend_error_body(self):
        """Test that a backend error body is reported with its message."""
        raw = {"status": "error", "errorType": "bad_data", "error": "parse error at char 4"}
        with pytest.raises(ParseError, match="bad_data.*parse error at char 4"):
            decode_query_result(raw)

    def test_unsupported_result_type(self):
        raw = {"data": {"resultType": "scalar", "result": [1, "1"]}}
        with pytest.raises(ParseError, match="Unsupported result type"):
            decode_query_result(raw)

    def test_declared_type_mismatch(self):
        """Test that entries must match the declared result type."""
        raw = {"data": {"resultType": "vector", "result": [{"metric": {}, "values": [[1, "1"]]}]}}
        with pytest.raises(ParseError, match="does not match"):
            decode_query_result(raw)

    def test_mixed_shapes(self):
        raw = {
            "data": {
                "result": [
                    {"metric": {}, "value": [1, "1"]},
                    {"metric": {}, "values": [[1, "1"]]},
                ]
            }
        }
        with pytest.raises(ParseError, match="mixes"):
            decode_query_result(raw)

    def test_both_value_and_values(self):
        raw = {"data": {"result": [{"metric": {}, "value": [1, "1"], "values": [[1, "1"]]}]}}
        with pytest.raises(ParseError):
            decode_query_result(raw)
