"""Tests for the command line interface."""

import json

import pytest

from conftest import FakeMetricsClient, vector_response
from cluster_costs.cli import build_parser, main, run
from cluster_costs.config.schema import Config


@pytest.fixture
def client():
    return FakeMetricsClient(
        responses={
            "cores": vector_response(({"cluster_id": "A"}, 100, 5.0)),
            "memory": vector_response(({"cluster_id": "A"}, 100, 2.0)),
            "storage": vector_response(({"cluster_id": "A"}, 100, 1.0)),
            "total": vector_response(({"cluster_id": "A"}, 100, 8.0)),
        }
    )


class TestRun:
    """Tests for command dispatch."""

    def test_snapshot(self, client):
        args = build_parser().parse_args(["snapshot", "--window", "1d"])
        output = run(args, Config(), client=client)

        assert output["cpucost"] == [["100.000000", "5.000000"]]
        assert output["storageCost"] == [["100.000000", "1.000000"]]

    def test_snapshot_all_clusters(self, client):
        args = build_parser().parse_args(["snapshot", "--all-clusters", "--offset", "1h"])
        output = run(args, Config(), client=client)

        assert list(output) == ["A"]
        assert output["A"]["totalcost"] == [["100.000000", "8.000000"]]
        # Window falls back to configuration
        assert all("[1d] offset 1h" in query for _, query in client.calls)

    def test_range_requires_start_and_end(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["range", "--window", "1h"])


class TestMain:
    """Tests for the console entry point."""

    @pytest.fixture(autouse=True)
    def clear_env(self, monkeypatch):
        for var in ("PROMETHEUS_URL", "CLUSTER_ID", "CLOUD_PROVIDER", "LOG_LEVEL", "MAX_WORKERS"):
            monkeypatch.delenv(var, raising=False)

    def test_error_exit_status(self, tmp_path, capsys):
        """Test that a malformed range exits 1 before contacting Prometheus."""
        exit_code = main(
            [
                "--config",
                str(tmp_path),
                "range",
                "--start",
                "yesterday",
                "--end",
                "2024-01-15T00:00:00.000Z",
                "--window",
                "1h",
            ]
        )

        assert exit_code == 1
        assert "Error parsing start 'yesterday'" in capsys.readouterr().err

    def test_snapshot_prints_json(self, tmp_path, capsys, monkeypatch, client):
        monkeypatch.setattr(
            "cluster_costs.costs.aggregator.PrometheusClient", lambda **kwargs: client
        )

        exit_code = main(["--config", str(tmp_path), "snapshot", "--window", "1d"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["memcost"] == [["100.000000", "2.000000"]]

    @pytest.mark.parametrize(
        "var,value,message",
        [
            ("MAX_WORKERS", "abc", "MAX_WORKERS must be an integer"),
            ("CLOUD_PROVIDER", "digitalocean", "provider.name"),
        ],
    )
    def test_invalid_env_override_exits_1(self, tmp_path, capsys, monkeypatch, var, value, message):
        """Test that a bad environment override is reported instead of raising."""
        monkeypatch.setenv(var, value)

        exit_code = main(["--config", str(tmp_path), "snapshot"])

        assert exit_code == 1
        err = capsys.readouterr().err
        assert err.startswith("Configuration error:")
        assert message in err

    def test_malformed_yaml_exits_1(self, tmp_path, capsys):
        (tmp_path / "config.yaml").write_text("prometheus: [unclosed\n")

        exit_code = main(["--config", str(tmp_path), "snapshot"])

        assert exit_code == 1
        assert "Configuration error:" in capsys.readouterr().err
