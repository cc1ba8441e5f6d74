"""
Tests for the command-line interface.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest
from click.testing import CliRunner

from contract_tracker.classification.models import RawTransaction
from contract_tracker.cli import main
from contract_tracker.errors import NodeConnectionError

USDT_ADDRESS = "0xdac17f958d2ee523a2206206994597c13d831ec7"


@pytest.fixture
def fixture_path() -> Path:
    return Path(__file__).parent / "fixtures" / "sample_transactions.json"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def raw_transactions(fixture_path) -> list[RawTransaction]:
    with open(fixture_path, "r") as f:
        return [RawTransaction.from_web3(record) for record in json.load(f)]


class TestDecodeCommand:
    """Test offline classification of a JSON file."""

    def test_decode(self, runner, fixture_path):
        result = runner.invoke(
            main, ["decode", "--input", str(fixture_path), "--target", USDT_ADDRESS]
        )

        assert result.exit_code == 0, result.output
        assert "Sorted transactions related to contract" in result.output
        assert result.output.count("Transaction Details") == 2
        assert "Token Transfer Detected:" in result.output

    def test_decode_target_from_environment(self, runner, fixture_path):
        result = runner.invoke(
            main,
            ["decode", "--input", str(fixture_path)],
            env={"TARGET_CONTRACT_ADDRESS": USDT_ADDRESS},
        )

        assert result.exit_code == 0, result.output
        assert result.output.count("Transaction Details") == 2

    def test_decode_limit(self, runner, fixture_path):
        result = runner.invoke(
            main,
            ["decode", "--input", str(fixture_path), "--target", USDT_ADDRESS, "--limit", "1"],
        )

        assert result.exit_code == 0, result.output
        assert result.output.count("Transaction Details") == 1

    def test_decode_csv_export(self, runner, fixture_path, tmp_path):
        csv_path = tmp_path / "matches.csv"

        result = runner.invoke(
            main,
            [
                "decode",
                "--input",
                str(fixture_path),
                "--target",
                USDT_ADDRESS,
                "--csv",
                str(csv_path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert len(pd.read_csv(csv_path)) == 2

    def test_decode_invalid_target(self, runner, fixture_path):
        result = runner.invoke(
            main, ["decode", "--input", str(fixture_path), "--target", "0x1234"]
        )

        assert result.exit_code == 1

    def test_decode_missing_target(self, runner, fixture_path):
        result = runner.invoke(
            main,
            ["decode", "--input", str(fixture_path)],
            env={"TARGET_CONTRACT_ADDRESS": None},
        )

        assert result.exit_code == 1


class TestTrackCommand:
    """Test the live tracking command with the node mocked out."""

    def test_track(self, runner, raw_transactions):
        with patch("contract_tracker.cli.Web3ConnectionManager") as mock_manager, patch(
            "contract_tracker.cli.PendingTransactionFeed"
        ) as mock_feed:
            mock_feed.return_value = iter(raw_transactions * 3)

            result = runner.invoke(
                main,
                [
                    "track",
                    "--target",
                    USDT_ADDRESS,
                    "--rpc-url",
                    "http://localhost:8545",
                    "--limit",
                    "3",
                ],
            )

        assert result.exit_code == 0, result.output
        assert result.output.count("Transaction Details") == 3
        mock_manager.assert_called_once_with("http://localhost:8545", timeout=30)

    def test_track_default_limit(self, runner, raw_transactions):
        with patch("contract_tracker.cli.Web3ConnectionManager"), patch(
            "contract_tracker.cli.PendingTransactionFeed"
        ) as mock_feed:
            mock_feed.return_value = iter(raw_transactions * 10)

            result = runner.invoke(
                main,
                ["track", "--rpc-url", "http://localhost:8545"],
                env={"TARGET_CONTRACT_ADDRESS": USDT_ADDRESS},
            )

        assert result.exit_code == 0, result.output
        assert result.output.count("Transaction Details") == 5

    def test_track_connection_failure(self, runner):
        with patch(
            "contract_tracker.cli.Web3ConnectionManager",
            side_effect=NodeConnectionError("Failed to connect"),
        ):
            result = runner.invoke(
                main,
                ["track", "--target", USDT_ADDRESS, "--rpc-url", "http://localhost:1"],
            )

        assert result.exit_code == 1

    def test_track_rejects_zero_limit(self, runner):
        result = runner.invoke(
            main, ["track", "--target", USDT_ADDRESS, "--limit", "0"]
        )

        assert result.exit_code == 2

    @staticmethod
    def _feed_then_raise(transactions, error):
        def feed():
            yield from transactions
            raise error

        return feed()

    def test_track_interrupt_reports_collected(self, runner, raw_transactions, tmp_path):
        """Test that Ctrl-C still prints and exports the matches seen so far."""
        csv_path = tmp_path / "matches.csv"

        with patch("contract_tracker.cli.Web3ConnectionManager"), patch(
            "contract_tracker.cli.PendingTransactionFeed"
        ) as mock_feed:
            mock_feed.return_value = self._feed_then_raise(
                raw_transactions[:2], KeyboardInterrupt()
            )

            result = runner.invoke(
                main,
                [
                    "track",
                    "--target",
                    USDT_ADDRESS,
                    "--rpc-url",
                    "http://localhost:8545",
                    "--csv",
                    str(csv_path),
                ],
            )

        assert result.exit_code == 130
        assert result.output.count("Transaction Details") == 2
        assert len(pd.read_csv(csv_path)) == 2

    def test_track_node_failure_reports_collected(self, runner, raw_transactions):
        """Test that a node failure mid-feed still prints the matches seen so far."""
        with patch("contract_tracker.cli.Web3ConnectionManager"), patch(
            "contract_tracker.cli.PendingTransactionFeed"
        ) as mock_feed:
            mock_feed.return_value = self._feed_then_raise(
                raw_transactions[:1],
                NodeConnectionError("Failed to poll pending transactions"),
            )

            result = runner.invoke(
                main,
                ["track", "--target", USDT_ADDRESS, "--rpc-url", "http://localhost:8545"],
            )

        assert result.exit_code == 1
        assert result.output.count("Transaction Details") == 1
