"""Bookie: peer-to-peer sports wager ledger and settlement engine."""

__version__ = "0.1.0"
__author__ = "Bookie Team"

__all__ = ["__version__", "__author__"]
