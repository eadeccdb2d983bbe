"""
Command Line Entry Point

Two modes:

    cache - sample ticker feeds for one window and write the snapshot
    read  - print the aggregate of every pair in a written snapshot

Usage examples:
    ws-price-aggregator --mode cache --pairs btc_usdt,eth_usdt
    ws-price-aggregator --mode cache --pairs btc_usdt --interval 5 --output btc.json
    ws-price-aggregator --mode read
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from core.config import Settings, load_exchange_configs, settings, validate_configuration
from core.errors import AggregatorError
from core.logging import logger, set_log_level
from core.pairs import check_pairs, parse_pairs
from services.sampling_loop import run_sampling
from storage.snapshot_store import SnapshotStore


EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sample ticker prices from Binance, Coinbase and OKX and store per-pair averages"
    )
    parser.add_argument("-m", "--mode", required=True, choices=["cache", "read"],
                        help="cache collects pair prices, read shows the cached aggregates")
    parser.add_argument("-p", "--pairs", default="",
                        help="Comma-separated base_quote pairs (e.g., btc_usdt,eth_usdt)")
    parser.add_argument("--config", default=None,
                        help=f"Exchange configuration file (default: {settings.ws_details_path})")
    parser.add_argument("--output", default=None,
                        help=f"Snapshot file (default: {settings.snapshot_path})")
    parser.add_argument("--interval", type=float, default=None,
                        help=f"Timer period in seconds (default: {settings.sample_interval_seconds})")
    parser.add_argument("--log-level", default=None,
                        help=f"Logging level (default: {settings.log_level})")
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Apply command line overrides on top of environment settings."""
    overrides = {
        "ws_details_path": args.config,
        "snapshot_path": args.output,
        "sample_interval_seconds": args.interval,
        "log_level": args.log_level,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


# ============================================
# Modes
# ============================================

def handle_cache_mode(pairs: str, config: Settings) -> int:
    if not pairs:
        logger.error("Pairs is required")
        return EXIT_USAGE

    if not check_pairs(pairs):
        return EXIT_USAGE

    tokens = parse_pairs(pairs)
    configs = load_exchange_configs(config.ws_details_path)

    asyncio.run(run_sampling(configs, tokens, config))

    logger.info("Cache complete")
    return EXIT_OK


def handle_read_mode(config: Settings) -> int:
    snapshot = SnapshotStore(config.snapshot_path).read()

    for key, entry in snapshot.items():
        print(f"pair: {key} -> aggregate: {entry.aggregate}")

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_settings(args)
        set_log_level(config.log_level)
        validate_configuration(config)

        if args.mode == "cache":
            return handle_cache_mode(args.pairs, config)
        return handle_read_mode(config)

    except AggregatorError as e:
        logger.error(f"Error: {e}")
        return EXIT_ERROR


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.warning("Interrupted; no snapshot written")
        sys.exit(130)


if __name__ == "__main__":
    run()
