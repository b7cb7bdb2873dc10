"""Custom exceptions for the benchmarking system."""
from typing import List


class BenchmarkExecutionError(Exception):
    """Custom exception for benchmark execution failures."""
    pass


class MissingCredentialsError(BenchmarkExecutionError):
    """Raised when selected providers have no API key configured."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Missing API keys: {', '.join(self.missing)}")


class UnknownProviderError(BenchmarkExecutionError):
    """Raised when a provider name is not in the catalog."""
    pass


class RequestError(Exception):
    """Exception raised when a request fails."""
    pass


class RequestTimeoutError(RequestError):
    """Exception raised when a request exceeds its time budget."""
    pass


class InvalidResponseFormatError(Exception):
    """Exception raised when response format is invalid."""
    pass
