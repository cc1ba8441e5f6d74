"""
Contract Transaction Tracker

Watches an Ethereum node for transactions sent to a configured contract,
decodes ERC-20 transfer calls, and reports the matches in human-friendly
units (ETH, Gwei, token amounts).
"""

__version__ = "0.1.0"
