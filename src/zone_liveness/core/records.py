"""
Zone and Record Models

Provider-neutral views of managed zones and record sets, the liveness record
derived from a zone name, and the tagged result of a liveness check.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Type

import dns.exception
import dns.name

from .errors import (
    LivenessError,
    ProviderError,
    RecordCreationError,
    ResolutionTimedOutError,
    VerificationCancelledError,
    ZoneNotFoundError,
)

TXT = "TXT"


def normalize_name(name: str) -> str:
    """Return a lower-case, fully qualified DNS name with a trailing dot.

    Internationalized names are returned in their ASCII (punycode) form, the
    form providers report and resolvers query.
    """
    name = name.strip().lower()
    if not name:
        return "."
    try:
        return dns.name.from_text(name).to_text().lower()
    except dns.exception.DNSException:
        # Left for zone name validation to reject
        if not name.endswith("."):
            name += "."
        return name


@dataclass
class ManagedZone:
    """A hosted zone as reported by the DNS provider."""

    zone_id: str
    dns_name: str
    description: str = ""
    name_servers: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.dns_name = normalize_name(self.dns_name)

    def matches(self, zone_name: str, mode: str = "exact") -> bool:
        """Check whether this zone is the one named ``zone_name``.

        ``substring`` mode accepts any zone whose DNS name contains the
        requested name.
        """
        if mode == "substring":
            return normalize_name(zone_name).rstrip(".") in self.dns_name
        return self.dns_name == normalize_name(zone_name)


@dataclass
class RecordSet:
    """A resource record set inside a managed zone."""

    name: str
    record_type: str
    ttl: int
    rrdatas: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.name = normalize_name(self.name)
        self.record_type = self.record_type.upper()


@dataclass(frozen=True)
class LivenessRecord:
    """The synthetic TXT record used to probe zone propagation."""

    name: str
    value: str
    ttl: int
    record_type: str = TXT

    @classmethod
    def for_zone(
        cls,
        zone_name: str,
        prefix: str = "kubefirst-liveness",
        value: str = "domain record propagated",
        ttl: int = 10,
    ) -> "LivenessRecord":
        """Build the liveness record ``<prefix>.<zone>.``."""
        zone = normalize_name(zone_name).rstrip(".")
        return cls(name=f"{prefix}.{zone}.", value=value, ttl=ttl)

    def to_record_set(self) -> RecordSet:
        return RecordSet(
            name=self.name,
            record_type=self.record_type,
            ttl=self.ttl,
            rrdatas=[self.value],
        )


class LivenessStatus(Enum):
    """Outcome of a liveness check."""

    PROPAGATED = "propagated"
    ALREADY_PROPAGATED = "already_propagated"
    ZONE_NOT_FOUND = "zone_not_found"
    RECORD_CREATION_FAILED = "record_creation_failed"
    RESOLUTION_TIMED_OUT = "resolution_timed_out"
    PROVIDER_ERROR = "provider_error"
    CANCELLED = "cancelled"

    @property
    def ok(self) -> bool:
        return self in (LivenessStatus.PROPAGATED, LivenessStatus.ALREADY_PROPAGATED)


STATUS_ERRORS = {
    LivenessStatus.ZONE_NOT_FOUND: ZoneNotFoundError,
    LivenessStatus.RECORD_CREATION_FAILED: RecordCreationError,
    LivenessStatus.RESOLUTION_TIMED_OUT: ResolutionTimedOutError,
    LivenessStatus.PROVIDER_ERROR: ProviderError,
    LivenessStatus.CANCELLED: VerificationCancelledError,
}


@dataclass
class LivenessResult:
    """Result of a liveness check.

    Truthy when the record was found or became resolvable. ``attempts`` counts
    polling attempts and is zero when polling never started.
    """

    zone_name: str
    record_name: str
    status: LivenessStatus
    attempts: int = 0
    values: List[str] = field(default_factory=list)
    resolver: Optional[str] = None
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.status.ok

    @property
    def error_class(self) -> Optional[Type[LivenessError]]:
        return STATUS_ERRORS.get(self.status)

    @property
    def remediation(self) -> str:
        error_class = self.error_class
        return error_class.remediation if error_class else ""

    def raise_for_status(self) -> "LivenessResult":
        """Raise the typed error for a failed check, return self otherwise.

        Raises:
            LivenessError: Subclass matching the failure status
        """
        error_class = self.error_class
        if error_class is None:
            return self

        message = self.error or f"zone {self.zone_name}: {self.status.value}"
        raise error_class(message, zone_name=self.zone_name)

    def to_dict(self) -> dict:
        return {
            "zone_name": self.zone_name,
            "record_name": self.record_name,
            "status": self.status.value,
            "attempts": self.attempts,
            "values": list(self.values),
            "resolver": self.resolver,
            "error": self.error,
        }
