"""
DNS Provider Interface

The management API surface the liveness verifier needs from a DNS provider.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.records import ManagedZone, RecordSet


class DNSProvider(ABC):
    """Management API of a hosted DNS provider.

    Implementations translate SDK failures into ``ProviderError`` and a
    duplicate record creation into ``RecordExistsError``.
    """

    name = "provider"

    @abstractmethod
    def list_zones(self) -> List[ManagedZone]:
        """List the managed zones visible to the authenticated account."""

    @abstractmethod
    def get_zone(self, zone_id: str) -> ManagedZone:
        """Fetch the details of one managed zone."""

    @abstractmethod
    def list_records(self, zone: ManagedZone) -> List[RecordSet]:
        """List the record sets of a zone."""

    @abstractmethod
    def create_record(self, zone: ManagedZone, record: RecordSet) -> Optional[str]:
        """Create a record set in a zone and return the provider's change status."""
