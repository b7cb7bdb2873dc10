import json
from pathlib import Path
from typing import Dict, Any, Iterable, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chainbench.const import (
    CONFIG_FILE_NAME, DEFAULT_LOG_LEVEL, DEFAULT_OUTPUT_DIR, ENV_FILE_NAME, ENV_PREFIX, LIBRARY_LOG_LEVELS
)
from chainbench.benchmark.constants import BenchmarkConstants
from chainbench.benchmark.models import BenchmarkConfig


class Config(BaseSettings):
    """Global configuration settings for chainbench."""

    iterations: int = Field(default=BenchmarkConstants.DEFAULT_ITERATIONS, gt=0)
    warmup_calls: int = Field(default=BenchmarkConstants.WARMUP_CALLS, ge=0)
    timeout_ms: int = Field(default=BenchmarkConstants.TIMEOUT_MS, gt=0)
    inter_call_delay_ms: int = Field(default=BenchmarkConstants.BASE_DELAY_MS, ge=0)
    max_backoff_ms: int = Field(default=BenchmarkConstants.MAX_BACKOFF_MS, ge=0)
    default_retry_after_seconds: int = Field(default=BenchmarkConstants.DEFAULT_RETRY_AFTER_SECONDS, ge=0)
    max_rate_limit_retries: int = Field(default=BenchmarkConstants.DEFAULT_MAX_RETRIES, ge=0)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    log_level: str = DEFAULT_LOG_LEVEL
    library_log_levels: Dict[str, str] = dict(LIBRARY_LOG_LEVELS)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=ENV_FILE_NAME,
        extra='ignore',
    )

    def to_benchmark_config(self) -> BenchmarkConfig:
        """Freeze the timing-related settings for the benchmark engine."""
        return BenchmarkConfig(
            warmup_calls=self.warmup_calls,
            timeout_ms=self.timeout_ms,
            inter_call_delay_ms=self.inter_call_delay_ms,
            max_backoff_ms=self.max_backoff_ms,
            default_retry_after_seconds=self.default_retry_after_seconds,
            max_rate_limit_retries=self.max_rate_limit_retries,
        )

    @classmethod
    def load_config_from_json(cls) -> Dict[str, Any]:
        """Load configuration from chainbench.json file."""
        config_path = Path(CONFIG_FILE_NAME)
        if config_path.exists():
            with open(config_path, 'r') as f:
                config = json.load(f)
                # Convert output_dir to Path if it's a string
                if "output_dir" in config:
                    config["output_dir"] = Path(config["output_dir"])
                return config
        return {}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """
        Customise the sources for settings.

        Order of precedence (highest to lowest):
        1. Init settings (kwargs passed to constructor)
        2. Environment variables
        3. .env file
        4. JSON config file
        5. Default values
        """
        def json_source():
            return cls.load_config_from_json()

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            json_source,
        )


class ProviderCredentials(BaseSettings):
    """API keys, one per provider, read from MOBULA_API_KEY style variables."""

    mobula_api_key: str = ""
    covalent_api_key: str = ""
    codex_api_key: str = ""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE_NAME,
        extra='ignore',
    )

    def key_for(self, provider: str) -> str:
        return getattr(self, f"{provider}_api_key", "")

    def missing(self, providers: Iterable[str]) -> List[str]:
        """Environment variable names with no value for the given providers."""
        return [f"{provider.upper()}_API_KEY" for provider in providers if not self.key_for(provider)]
