"""
Google Cloud DNS Provider

DNS provider backed by the google-cloud-dns client library.
"""

import logging
from typing import Dict, List, Optional

import requests
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import dns as cloud_dns

from ..config.schema import ProviderConfig
from ..core.errors import ProviderError, RecordExistsError
from ..core.records import TXT, ManagedZone, RecordSet
from .base import DNSProvider

logger = logging.getLogger(__name__)

# Failures of a management API call: API errors, expired or refused
# credentials and connection errors below the API client
CALL_ERRORS = (
    google_exceptions.GoogleAPICallError,
    auth_exceptions.GoogleAuthError,
    requests.exceptions.RequestException,
)


def quote_txt(value: str) -> str:
    """Quote a TXT value the way the Cloud DNS API expects it."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class GoogleCloudDNSProvider(DNSProvider):
    """Cloud DNS managed zones of one Google Cloud project."""

    name = "gcp"

    def __init__(
        self,
        project: str = "",
        credentials_file: str = "",
        client: Optional[cloud_dns.Client] = None,
    ):
        self.project = project
        self.credentials_file = credentials_file
        self._client = client
        self._zones: Dict[str, cloud_dns.ManagedZone] = {}

    @classmethod
    def from_config(cls, config: ProviderConfig) -> "GoogleCloudDNSProvider":
        return cls(project=config.project, credentials_file=config.credentials_file)

    @property
    def client(self) -> cloud_dns.Client:
        """Return the Cloud DNS client, created on first use."""
        if self._client is None:
            project = self.project or None
            try:
                if self.credentials_file:
                    self._client = cloud_dns.Client.from_service_account_json(
                        self.credentials_file, project=project
                    )
                else:
                    self._client = cloud_dns.Client(project=project)
            except (auth_exceptions.GoogleAuthError, OSError, ValueError) as e:
                raise ProviderError(f"error creating google dns client: {e}") from e
        return self._client

    def list_zones(self) -> List[ManagedZone]:
        try:
            zones = list(self.client.list_zones())
        except CALL_ERRORS as e:
            raise ProviderError(f"error listing google dns zones: {e}") from e

        result = []
        for zone in zones:
            self._zones[zone.name] = zone
            result.append(self._to_managed_zone(zone))
        return result

    def get_zone(self, zone_id: str) -> ManagedZone:
        zone = self.client.zone(zone_id)
        try:
            zone.reload()
        except CALL_ERRORS as e:
            raise ProviderError(
                f"error getting google dns zone {zone_id}: {e}"
            ) from e

        self._zones[zone_id] = zone
        return self._to_managed_zone(zone)

    def list_records(self, zone: ManagedZone) -> List[RecordSet]:
        google_zone = self._google_zone(zone)
        try:
            record_sets = list(google_zone.list_resource_record_sets())
        except CALL_ERRORS as e:
            raise ProviderError(
                f"error listing google dns zone records: {e}"
            ) from e

        return [
            RecordSet(
                name=rrs.name,
                record_type=rrs.record_type,
                ttl=rrs.ttl,
                rrdatas=list(rrs.rrdatas or []),
            )
            for rrs in record_sets
        ]

    def create_record(self, zone: ManagedZone, record: RecordSet) -> Optional[str]:
        google_zone = self._google_zone(zone)

        rrdatas = list(record.rrdatas)
        if record.record_type == TXT:
            rrdatas = [quote_txt(value) for value in rrdatas]

        record_set = google_zone.resource_record_set(
            record.name, record.record_type, record.ttl, rrdatas
        )
        changes = google_zone.changes()
        changes.add_record_set(record_set)

        try:
            changes.create()
        except google_exceptions.Conflict as e:
            raise RecordExistsError(
                f"record {record.name} already exists in {zone.dns_name}"
            ) from e
        except CALL_ERRORS as e:
            raise ProviderError(
                f"error creating google dns zone record: {e}"
            ) from e

        logger.debug("Cloud DNS change %s status %s", changes.name, changes.status)
        return changes.status

    def _google_zone(self, zone: ManagedZone) -> cloud_dns.ManagedZone:
        google_zone = self._zones.get(zone.zone_id)
        if google_zone is None:
            google_zone = self.client.zone(zone.zone_id, zone.dns_name)
            self._zones[zone.zone_id] = google_zone
        return google_zone

    @staticmethod
    def _to_managed_zone(zone: cloud_dns.ManagedZone) -> ManagedZone:
        return ManagedZone(
            zone_id=zone.name,
            dns_name=zone.dns_name or "",
            description=zone.description or "",
            name_servers=list(zone.name_servers or []),
        )
