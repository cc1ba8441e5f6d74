"""
Tests for console report formatting and CSV export.
"""

import json
from dataclasses import replace
from pathlib import Path

import pandas as pd
import pytest

from contract_tracker.classification import (
    AddressMatcher,
    RawTransaction,
    classify_transactions,
)
from contract_tracker.export import CSV_COLUMNS, export_to_csv
from contract_tracker.report import format_report, format_summary, sort_by_value

USDT_ADDRESS = "0xdac17f958d2ee523a2206206994597c13d831ec7"


@pytest.fixture
def summaries():
    """Summaries for the two fixture transactions sent to USDT."""
    fixture_path = Path(__file__).parent / "fixtures" / "sample_transactions.json"
    with open(fixture_path, "r") as f:
        transactions = [RawTransaction.from_web3(record) for record in json.load(f)]
    return list(classify_transactions(transactions, AddressMatcher(USDT_ADDRESS)))


class TestReport:
    """Test console report formatting."""

    def test_sort_by_value(self, summaries):
        reversed_order = list(reversed(summaries))

        ordered = sort_by_value(reversed_order)

        assert [s.value_wei for s in ordered] == sorted(s.value_wei for s in summaries)

    def test_token_transfer_block(self, summaries):
        text = format_summary(summaries[0])

        assert f"Transaction Hash: {summaries[0].hash}" in text
        assert "Value Transferred (ETH): 0" in text
        assert "Gas Price (Gwei): 30" in text
        assert "Block Number: 18500000" in text
        assert "Token Transfer Detected:" in text
        assert f"  Recipient: {summaries[0].token_transfer.destination}" in text
        # 1,000,000 units shown in 18-decimal units
        assert "  Token Amount: 0.000000000001" in text

    def test_pending_block(self, summaries):
        text = format_summary(summaries[1])

        assert "Value Transferred (ETH): 2.5" in text
        assert "Block Number: Pending" in text
        assert "Transaction Index in Block: Pending" in text
        assert "Block Hash: Pending" in text
        assert "Token Information: Not available" in text

    def test_contract_creation_recipient(self, summaries):
        text = format_summary(replace(summaries[1], recipient=None))

        assert "To Address: None (Contract Creation)" in text

    def test_format_report(self, summaries):
        matcher = AddressMatcher(USDT_ADDRESS)

        report = format_report(summaries, matcher.target)

        assert report.startswith(f"Sorted transactions related to contract {matcher.target}")
        assert report.count("Transaction Details") == 2

    def test_format_report_empty(self):
        assert "No transactions" in format_report([], USDT_ADDRESS)


class TestExportToCsv:
    """Test CSV export."""

    def test_export(self, tmp_path, summaries):
        output = tmp_path / "out" / "matches.csv"

        export_to_csv(summaries, output)

        df = pd.read_csv(output, dtype=str, keep_default_na=False)
        assert list(df.columns) == CSV_COLUMNS
        assert len(df) == 2
        assert df.loc[0, "decoded_action"] == "transfer"
        assert df.loc[0, "token_amount"] == "1000000"
        assert df.loc[1, "decoded_action"] == ""
        assert df.loc[1, "value_eth"] == "2.5"
        assert df.loc[1, "block"] == ""

    def test_export_empty_raises(self, tmp_path):
        with pytest.raises(ValueError, match="empty"):
            export_to_csv([], tmp_path / "matches.csv")
