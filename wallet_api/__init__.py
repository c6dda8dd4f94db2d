"""Wallet backend: accounts, email verification, wallet balance and ledger."""

__version__ = "0.1.0"
