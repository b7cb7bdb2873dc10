"""Constants for the benchmarking system."""


class BenchmarkConstants:
    """Centralized constants for benchmark configuration."""
    WARMUP_CALLS = 2
    TIMEOUT_MS = 30000
    BASE_DELAY_MS = 400  # fixed spacing between calls
    MAX_BACKOFF_MS = 4000  # cap on a single rate-limit wait
    DEFAULT_RETRY_AFTER_SECONDS = 1
    DEFAULT_MAX_RETRIES = 3  # rate-limit retries per iteration
    DEFAULT_ITERATIONS = 10
    PROGRESS_EVERY = 5
    PERCENTILES = (50, 95, 99)
    SAMPLE_RESPONSE_MAX_CHARS = 2000
    ERROR_BODY_MAX_CHARS = 500
    READ_CHUNK_SIZE = 16384
