"""Constants for the chainbench application."""

# Logging configuration
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_HANDLER_NAME = "chainbench-console"

# Library log levels
LIBRARY_LOG_LEVELS = {
    "urllib3": "WARNING",
    "matplotlib": "WARNING",
    "PIL": "WARNING"
}

# Settings sources
ENV_PREFIX = "CHAINBENCH_"
ENV_FILE_NAME = ".env"
CONFIG_FILE_NAME = "chainbench.json"

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_TOO_MANY_REQUESTS = 429

# HTTP headers
AUTHORIZATION_HEADER = "Authorization"
CONTENT_TYPE_HEADER = "Content-Type"
CONTENT_TYPE_JSON = "application/json"
RETRY_AFTER_HEADER = "retry-after"

# Output artifacts
DEFAULT_OUTPUT_DIR = "bench"
RESULTS_FILE_PREFIX = "benchmark-results"
SUMMARY_CSV_NAME = "benchmark_summary.csv"
GRAPH_FILE_NAME = "benchmark_percentiles.png"

# Report labels
TIE_LABEL = "tie"
NOT_AVAILABLE = "n/a"
ALL_PROVIDERS = "all"
MASKED_SECRET = "****"

# CLI exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
