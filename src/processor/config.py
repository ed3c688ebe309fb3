"""
Pipeline configuration.
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .exceptions import ConfigurationError


ENV_API_KEY = "EDINET_API_KEY"
ENV_STORE_DIR = "EDINET_STORE_DIR"
ENV_TEMP_DIR = "EDINET_TEMP_DIR"
ENV_MAX_WORKERS = "EDINET_MAX_WORKERS"
ENV_REQUEST_TIMEOUT = "EDINET_REQUEST_TIMEOUT"

DEFAULT_STORE_DIR = Path("data/edinet")


@dataclass
class PipelineConfig:
    """Settings shared by the filing source, publisher and processor."""
    edinet_api_key: Optional[str] = None
    store_dir: Path = DEFAULT_STORE_DIR
    temp_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    max_workers: int = 4
    request_timeout_seconds: int = 300
    publish_retry_attempts: int = 3

    def __post_init__(self):
        self.store_dir = Path(self.store_dir)
        self.temp_dir = Path(self.temp_dir)
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.request_timeout_seconds <= 0:
            raise ConfigurationError(
                f"request_timeout_seconds must be positive, got {self.request_timeout_seconds}"
            )
        if self.publish_retry_attempts < 0:
            raise ConfigurationError("publish_retry_attempts cannot be negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "PipelineConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            **overrides: Field values taking precedence over the environment;
                ``None`` values are ignored

        Returns:
            PipelineConfig instance

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        values = {}

        if env.get(ENV_API_KEY):
            values["edinet_api_key"] = env[ENV_API_KEY]
        if env.get(ENV_STORE_DIR):
            values["store_dir"] = Path(env[ENV_STORE_DIR])
        if env.get(ENV_TEMP_DIR):
            values["temp_dir"] = Path(env[ENV_TEMP_DIR])
        if env.get(ENV_MAX_WORKERS):
            values["max_workers"] = _parse_int(env, ENV_MAX_WORKERS)
        if env.get(ENV_REQUEST_TIMEOUT):
            values["request_timeout_seconds"] = _parse_int(env, ENV_REQUEST_TIMEOUT)

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def require_api_key(self) -> str:
        """Return the API key or fail when a remote source needs one."""
        if not self.edinet_api_key:
            raise ConfigurationError(
                f"EDINET API key is not configured; set {ENV_API_KEY}"
            )
        return self.edinet_api_key


def _parse_int(env: Mapping[str, str], name: str) -> int:
    try:
        return int(env[name])
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {env[name]!r}") from None
