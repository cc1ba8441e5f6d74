"""
Command-line interface for the contract tracker.

Usage:
    # Watch the mempool for 5 transactions sent to a contract
    TARGET_CONTRACT_ADDRESS=0xdac17f958d2ee523a2206206994597c13d831ec7 \\
        contract-tracker track --rpc-url wss://mainnet.infura.io/ws/v3/YOUR_KEY

    # Classify a saved JSON feed offline
    contract-tracker decode --input data/raw/transactions.json \\
        --target 0xdac17f958d2ee523a2206206994597c13d831ec7 --csv matches.csv

Settings are read from configs/tracker_config.yaml when --config is given;
flags override environment variables, which override the file.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable

import click

from .classification import AddressMatcher, RawTransaction, classify_transactions
from .config import TrackerConfig
from .errors import TrackerError, TransportError
from .export import export_to_csv
from .feed import PendingTransactionFeed, Web3ConnectionManager, load_transactions
from .report import format_report
from .utils import setup_logging

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def load_config(config_path: Path | None) -> TrackerConfig:
    """Load configuration from YAML, or defaults when no file is given."""
    if config_path is None:
        return TrackerConfig()
    return TrackerConfig.from_yaml(config_path)


def run_classification(
    transactions: Iterable[RawTransaction],
    target: str,
    limit: int | None,
    csv_path: Path | None,
) -> int:
    """
    Classify transactions, print the sorted report and optionally export CSV.

    The report covers every match collected so far, even when the feed is
    interrupted (Ctrl-C) or the node connection fails mid-stream.

    Returns:
        Process exit code: 0 on completion, 1 on a transport failure,
        130 on interrupt
    """
    matcher = AddressMatcher(target)
    summaries = []
    exit_code = 0

    try:
        for summary in classify_transactions(transactions, matcher, limit=limit):
            summaries.append(summary)
    except KeyboardInterrupt:
        logger.warning(f"Interrupted after {len(summaries)} matched transactions")
        exit_code = 130
    except TransportError as e:
        logger.error(f"{e} (reporting {len(summaries)} matched transactions)")
        exit_code = 1

    click.echo(format_report(summaries, matcher.target))

    if csv_path is not None:
        if summaries:
            export_to_csv(summaries, csv_path)
        else:
            logger.warning("No matched transactions to export")

    return exit_code


@click.group()
@click.version_option(package_name="contract-tracker")
def main() -> None:
    """Track transactions sent to a contract and decode ERC-20 transfers."""


@main.command()
@click.option(
    "--target",
    default=None,
    help="Target contract address (default: $TARGET_CONTRACT_ADDRESS)",
)
@click.option(
    "--rpc-url",
    default=None,
    help="Ethereum RPC endpoint URL, http(s) or ws(s) (default: $ETH_RPC_URL)",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many matched transactions (default: 5)",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Also export matched transactions to this CSV file",
)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to tracker config YAML file",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level",
)
def track(
    target: str | None,
    rpc_url: str | None,
    limit: int | None,
    csv_path: Path | None,
    config: Path | None,
    log_level: str | None,
) -> None:
    """
    Watch pending transactions and report those sent to the target contract.
    """
    try:
        cfg = load_config(config).with_overrides(
            rpc_url=rpc_url, target_address=target, limit=limit
        )
        setup_logging(level=log_level or cfg.logging.level, log_format=cfg.logging.format)

        target_address = cfg.require_target()
        logger.info(f"Tracking transactions to {target_address}")
        logger.info(f"RPC URL: {cfg.rpc.endpoint}")

        manager = Web3ConnectionManager(cfg.rpc.endpoint, timeout=cfg.rpc.timeout)
        feed = PendingTransactionFeed(manager, poll_interval=cfg.rpc.poll_interval)

        exit_code = run_classification(
            feed, target_address, cfg.tracking.limit, csv_path
        )
        if exit_code:
            sys.exit(exit_code)

    except TrackerError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        sys.exit(130)


@main.command()
@click.option(
    "--input",
    "input_path",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Input JSON file with raw transaction data",
)
@click.option(
    "--target",
    default=None,
    help="Target contract address (default: $TARGET_CONTRACT_ADDRESS)",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many matched transactions (default: all)",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Also export matched transactions to this CSV file",
)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to tracker config YAML file",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level",
)
def decode(
    input_path: Path,
    target: str | None,
    limit: int | None,
    csv_path: Path | None,
    config: Path | None,
    log_level: str | None,
) -> None:
    """
    Classify transactions from a saved JSON file.
    """
    try:
        cfg = load_config(config).with_overrides(target_address=target)
        setup_logging(level=log_level or cfg.logging.level, log_format=cfg.logging.format)

        target_address = cfg.require_target()
        transactions = load_transactions(input_path)

        exit_code = run_classification(transactions, target_address, limit, csv_path)
        if exit_code:
            sys.exit(exit_code)

    except (TrackerError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
