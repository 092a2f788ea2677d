"""
chain-metrics command line.

Runs the pipeline operations against the configured store without the HTTP
surface. Output is JSON on stdout; logs go through structlog.
"""

import argparse
import asyncio
import json
import sys
from typing import Any

from chain_metrics.config import get_settings
from chain_metrics.dependency_container import ChainMetricsContainer
from chain_metrics.infrastructure.observability import setup_logging


def _print(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


async def _run(args: argparse.Namespace, container: ChainMetricsContainer) -> int:
    service = container.service

    if args.command == "init-db":
        await container.store.ensure_schema()
        _print({"success": True, "message": "Schema ready"})
        return 0

    if args.command == "refresh":
        result = await service.refresh_chain(args.chain_id)
        latest = result["latest"]
        result["latest"] = latest.to_point() if latest else None
        _print(result)
        return 1 if result["outcome"] == "failed" else 0

    if args.command == "batch":
        handle = service.start_batch_refresh()
        report = await handle.wait()
        _print(report.to_dict())
        return 1 if report.error else 0

    if args.command == "snapshot":
        snapshot = await service.network_snapshot()
        _print(snapshot.model_dump(by_alias=True))
        return 0

    if args.command == "history":
        points = await service.network_history(args.days)
        _print([point.model_dump(by_alias=True) for point in points])
        return 0

    raise ValueError(f"Unknown command: {args.command}")


async def _main(args: argparse.Namespace) -> int:
    state = get_settings()
    setup_logging(level=state.logging.level, json_logs=state.logging.json_logs)

    container = ChainMetricsContainer(state)
    try:
        await container.start()
        return await _run(args, container)
    finally:
        await container.close()


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chain-metrics", description="Chain TPS ingestion and aggregation"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the TPS table when missing")

    refresh = subparsers.add_parser("refresh", help="Refresh one chain now")
    refresh.add_argument("chain_id", help="Chain identifier")

    subparsers.add_parser("batch", help="Refresh every catalog chain and wait")
    subparsers.add_parser("snapshot", help="Print the current network TPS")

    history = subparsers.add_parser("history", help="Print network TPS history")
    history.add_argument(
        "--days", type=_positive_int, default=None, help="Look-back in days"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
