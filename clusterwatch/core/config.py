from typing import Optional
from dataclasses import dataclass
import os
from dotenv import load_dotenv

from .exceptions import ConfigurationError

@dataclass
class PollerConfig:
    """Polling cadence and agent endpoint configuration"""
    scheme: str = "https"
    path: str = "/system"
    timeout_ms: int = 5000
    poll_interval_ms: int = 1000
    prune_interval_ms: int = 60000
    history_capacity: int = 30

    def __post_init__(self) -> None:
        """Validate poller configuration"""
        if self.scheme not in ("http", "https"):
            raise ConfigurationError(f"Unsupported scheme '{self.scheme}'")
        if not self.path.startswith("/"):
            raise ConfigurationError("Endpoint path must start with '/'")
        if self.timeout_ms <= 0:
            raise ConfigurationError("Timeout must be positive")
        if self.poll_interval_ms <= 0:
            raise ConfigurationError("Poll interval must be positive")
        if self.prune_interval_ms <= 0:
            raise ConfigurationError("Prune interval must be positive")
        if self.history_capacity <= 0:
            raise ConfigurationError("History capacity must be positive")

    @property
    def timeout(self) -> float:
        """Request timeout in seconds"""
        return self.timeout_ms / 1000

    @property
    def poll_interval(self) -> float:
        """Poll cadence in seconds"""
        return self.poll_interval_ms / 1000

    @property
    def prune_interval(self) -> float:
        """Prune cadence in seconds"""
        return self.prune_interval_ms / 1000

@dataclass
class APIConfig:
    """Read-only feed configuration"""
    host: str = "0.0.0.0"
    port: int = 8003

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid port {self.port}")

@dataclass
class LogConfig:
    """Logging configuration"""
    level: str = "INFO"
    directory: Optional[str] = None
    max_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5

    def __post_init__(self) -> None:
        if self.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"Invalid log level '{self.level}'")

class Config:
    """Application configuration"""

    def __init__(self):
        # Load environment variables
        load_dotenv()

        self.poller = self._init_poller_config()
        self.api = self._init_api_config()
        self.logging = self._init_log_config()

    def _init_poller_config(self) -> PollerConfig:
        """Initialize poller configuration"""
        try:
            return PollerConfig(
                scheme=os.getenv('CLUSTERWATCH_SCHEME', 'https'),
                path=os.getenv('CLUSTERWATCH_PATH', '/system'),
                timeout_ms=int(os.getenv('CLUSTERWATCH_TIMEOUT_MS', '5000')),
                poll_interval_ms=int(os.getenv('CLUSTERWATCH_POLL_INTERVAL_MS', '1000')),
                prune_interval_ms=int(os.getenv('CLUSTERWATCH_PRUNE_INTERVAL_MS', '60000')),
                history_capacity=int(os.getenv('CLUSTERWATCH_HISTORY_CAPACITY', '30'))
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid poller configuration: {e}")

    def _init_api_config(self) -> APIConfig:
        """Initialize API configuration"""
        try:
            return APIConfig(
                host=os.getenv('CLUSTERWATCH_API_HOST', '0.0.0.0'),
                port=int(os.getenv('CLUSTERWATCH_API_PORT', '8003'))
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid API configuration: {e}")

    def _init_log_config(self) -> LogConfig:
        """Initialize logging configuration"""
        return LogConfig(
            level=os.getenv('CLUSTERWATCH_LOG_LEVEL', 'INFO'),
            directory=os.getenv('CLUSTERWATCH_LOG_DIR')
        )
