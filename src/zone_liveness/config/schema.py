"""
Zone Liveness Configuration Schema

Configuration schema covering the DNS provider account, the liveness record,
the polling retry policy, the resolvers and logging.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .validators import (
    validate_boolean,
    validate_file_path,
    validate_log_level,
    validate_nameservers,
    validate_non_negative_float,
    validate_positive_float,
    validate_positive_int,
    validate_record_label,
    validate_ttl,
)

SUPPORTED_PROVIDERS = ["gcp"]
ZONE_MATCH_MODES = ["exact", "substring"]

DEFAULT_RECORD_PREFIX = "kubefirst-liveness"
DEFAULT_RECORD_VALUE = "domain record propagated"
DEFAULT_RECORD_TTL = 10
DEFAULT_FALLBACK_NAMESERVERS = ["8.8.8.8"]


@dataclass
class ProviderConfig:
    """DNS provider account configuration section."""

    type: str = "gcp"
    project: str = ""
    credentials_file: str = ""

    def __post_init__(self) -> None:
        """Validate provider configuration."""
        if self.type not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported DNS provider: {self.type}")

        if not isinstance(self.project, str):
            raise ValueError(f"Provider project must be a string: {self.project}")

        if self.credentials_file and not validate_file_path(self.credentials_file):
            raise ValueError(f"Invalid credentials file path: {self.credentials_file}")


@dataclass
class RecordConfig:
    """Liveness record configuration section."""

    prefix: str = DEFAULT_RECORD_PREFIX
    value: str = DEFAULT_RECORD_VALUE
    ttl: int = DEFAULT_RECORD_TTL
    require_value_match: bool = False

    def __post_init__(self) -> None:
        """Validate record configuration."""
        if not validate_record_label(self.prefix):
            raise ValueError(f"Invalid record prefix: {self.prefix}")

        if not isinstance(self.value, str) or not self.value:
            raise ValueError(f"Record value must be a non-empty string: {self.value}")

        # A single TXT character-string holds at most 255 octets
        if len(self.value.encode("utf-8")) > 255:
            raise ValueError("Record value must not exceed 255 bytes")

        if not validate_ttl(self.ttl):
            raise ValueError(f"Invalid record TTL: {self.ttl}")

        if not validate_boolean(self.require_value_match):
            raise ValueError(
                f"Require value match must be boolean: {self.require_value_match}"
            )


@dataclass
class RetryConfig:
    """Propagation polling configuration section."""

    max_attempts: int = 100
    interval: float = 10.0
    jitter: float = 0.0

    def __post_init__(self) -> None:
        """Validate retry configuration."""
        if not validate_positive_int(self.max_attempts):
            raise ValueError(f"Max attempts must be positive: {self.max_attempts}")

        if not validate_non_negative_float(self.interval):
            raise ValueError(f"Interval must be non-negative: {self.interval}")

        if not validate_non_negative_float(self.jitter):
            raise ValueError(f"Jitter must be non-negative: {self.jitter}")


@dataclass
class ResolverConfig:
    """Resolver configuration section.

    ``primary_nameservers`` left unset means the system resolver
    configuration (``/etc/resolv.conf``) is used.
    """

    primary_nameservers: Optional[List[str]] = None
    fallback_nameservers: List[str] = field(
        default_factory=lambda: list(DEFAULT_FALLBACK_NAMESERVERS)
    )
    timeout: float = 5.0

    def __post_init__(self) -> None:
        """Validate resolver configuration."""
        if self.primary_nameservers is not None and not validate_nameservers(
            self.primary_nameservers
        ):
            raise ValueError(
                f"Invalid primary nameservers: {self.primary_nameservers}"
            )

        if not validate_nameservers(self.fallback_nameservers):
            raise ValueError(
                f"Invalid fallback nameservers: {self.fallback_nameservers}"
            )

        if not validate_positive_float(self.timeout):
            raise ValueError(f"Resolver timeout must be positive: {self.timeout}")


@dataclass
class LoggingConfig:
    """Logging configuration section."""

    level: str = "INFO"
    format: str = "console"
    file: str = ""
    max_size_mb: int = 10
    backup_count: int = 3

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        if not validate_log_level(self.level):
            raise ValueError(f"Invalid log level: {self.level}")

        if self.format not in ["console", "json"]:
            raise ValueError(f"Invalid log format: {self.format}")

        if self.file and not validate_file_path(self.file):
            raise ValueError(f"Invalid log file path: {self.file}")

        if not validate_positive_int(self.max_size_mb):
            raise ValueError(f"Max size MB must be positive: {self.max_size_mb}")

        if not validate_positive_int(self.backup_count):
            raise ValueError(f"Backup count must be positive: {self.backup_count}")


@dataclass
class LivenessConfig:
    """Main zone liveness configuration."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    record: RecordConfig = field(default_factory=RecordConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    zone_match: str = "exact"

    def __post_init__(self) -> None:
        """Validate the entire configuration."""
        if self.zone_match not in ZONE_MATCH_MODES:
            raise ValueError(f"Invalid zone match mode: {self.zone_match}")


def create_default_config() -> LivenessConfig:
    """Create a default configuration instance."""
    return LivenessConfig()
