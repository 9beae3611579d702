"""Command line interface for Cluster Costs."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import yaml

from cluster_costs.config import Config, load_config
from cluster_costs.costs.aggregator import ClusterCostAggregator
from cluster_costs.errors import ClusterCostError
from cluster_costs.prometheus.client import MetricsClient


def configure_logging(level: str) -> None:
    """Configure root logging for command line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cluster-costs",
        description="Report monthly-rate Kubernetes cluster costs from Prometheus",
    )
    parser.add_argument("--config", help="Config directory (defaults to searching for config/)")
    parser.add_argument("--env", help="Config environment (dev, staging, prod)")
    parser.add_argument("--prometheus-url", help="Override the Prometheus URL")

    subparsers = parser.add_subparsers(dest="command", required=True)

    snapshot = subparsers.add_parser("snapshot", help="Costs averaged over a window")
    snapshot.add_argument("--window", help="Look-back window, e.g. 1d (default from config)")
    snapshot.add_argument("--offset", default="", help="Evaluate as of this long ago, e.g. 1h")
    snapshot.add_argument(
        "--all-clusters",
        action="store_true",
        help="Report every cluster instead of the default cluster only",
    )

    ranged = subparsers.add_parser("range", help="Costs over time, one value per window")
    ranged.add_argument("--start", required=True, help="Start, e.g. 2024-01-15T00:00:00.000Z")
    ranged.add_argument("--end", required=True, help="End, e.g. 2024-01-16T00:00:00.000Z")
    ranged.add_argument("--window", help="Window and step, e.g. 1h (default from config)")
    ranged.add_argument("--offset", default="", help="Evaluate as of this long ago, e.g. 1h")

    return parser


def run(args: argparse.Namespace, config: Config, client: MetricsClient | None = None) -> Any:
    """Run the requested command and return its JSON-serializable output."""
    aggregator = ClusterCostAggregator.from_config(config, client=client)
    window = args.window or config.aggregation.default_window

    if args.command == "snapshot":
        if args.all_clusters:
            totals_by_cluster = aggregator.cluster_costs_for_all_clusters(window, args.offset)
            return {cluster_id: totals.to_dict() for cluster_id, totals in totals_by_cluster.items()}
        return aggregator.cluster_costs(window, args.offset).to_dict()

    return aggregator.cluster_costs_over_time(args.start, args.end, window, args.offset).to_dict()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # pydantic.ValidationError is a ValueError
    try:
        config = load_config(config_path=args.config, environment=args.env)
    except (ValueError, yaml.YAMLError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    if args.prometheus_url:
        config.prometheus.url = args.prometheus_url
    configure_logging(config.logging.level)

    try:
        output = run(args, config)
    except ClusterCostError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
