"""Configuration data models."""

from dataclasses import dataclass, field

from runner_mock.types import LogFormat, LogLevel


@dataclass
class ServerConfig:
    """Listener configuration."""

    host: str = "127.0.0.1"
    port: int = 8080
    poll_interval: float = 0.1  # seconds between stop-flag checks
    api_version: str = "2022-11-28"  # X-GitHub-Api-Version response header


@dataclass
class AuthConfig:
    """Authorization configuration."""

    enabled: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    file: str | None = None  # append-only request log


@dataclass
class RegistryConfig:
    """Mock registry configuration."""

    partition_by_scope: bool = False
    runner_os: str = "Linux"
    id_min: int = 1000
    id_max: int = 99999


@dataclass
class ReleaseConfig:
    """Mocked runner release metadata."""

    version: str = "2.311.0"
    documentation_url: str = "https://docs.github.com/rest"


@dataclass
class MockServiceConfig:
    """Root configuration object."""

    server: ServerConfig = field(default_factory=ServerConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
