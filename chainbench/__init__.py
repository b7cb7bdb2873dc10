"""Latency benchmarking of blockchain-data API providers."""

__version__ = "0.1.0"
