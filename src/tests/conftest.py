"""Shared fixtures: an in-memory DNS provider and scripted TXT resolvers."""

import logging

import pytest
import structlog

from zone_liveness.core.errors import ProviderError, ResolutionError
from zone_liveness.core.records import ManagedZone, RecordSet
from zone_liveness.core.resolver import TXTResolver
from zone_liveness.dns_logging import logger as logger_module
from zone_liveness.providers.base import DNSProvider


class FakeProvider(DNSProvider):
    """In-memory provider recording every management API call."""

    name = "fake"

    def __init__(self, zones=None, records=None, create_error=None, list_error=None):
        self.zones = list(zones or [])
        self.records = {zone_id: list(rs) for zone_id, rs in (records or {}).items()}
        self.create_error = create_error
        self.list_error = list_error
        self.calls = []
        self.created = []

    def list_zones(self):
        self.calls.append("list_zones")
        if self.list_error:
            raise self.list_error
        return list(self.zones)

    def get_zone(self, zone_id):
        self.calls.append("get_zone")
        for zone in self.zones:
            if zone.zone_id == zone_id:
                return zone
        raise ProviderError(f"zone {zone_id} not found")

    def list_records(self, zone):
        self.calls.append("list_records")
        return list(self.records.get(zone.zone_id, []))

    def create_record(self, zone, record):
        self.calls.append("create_record")
        if self.create_error:
            raise self.create_error
        self.created.append((zone, record))
        self.records.setdefault(zone.zone_id, []).append(record)
        return "pending"


class ScriptedResolver(TXTResolver):
    """Resolver failing until its ``succeed_on``-th lookup (never when None)."""

    def __init__(self, name, succeed_on=None, values=None, on_lookup=None):
        self.name = name
        self.succeed_on = succeed_on
        self.values = ["domain record propagated"] if values is None else values
        self.on_lookup = on_lookup
        self.calls = []

    def lookup_txt(self, record_name):
        self.calls.append(record_name)
        if self.on_lookup:
            self.on_lookup(len(self.calls))
        if self.succeed_on is not None and len(self.calls) >= self.succeed_on:
            return list(self.values)
        raise ResolutionError(f"{record_name} not found")


class SleepRecorder:
    def __init__(self):
        self.delays = []

    def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
    logger_module._logger_instance = None


@pytest.fixture
def zone():
    return ManagedZone(zone_id="example-com", dns_name="example.com.")


@pytest.fixture
def make_provider(zone):
    def factory(zones=None, records=None, **kwargs):
        return FakeProvider(
            zones=[zone] if zones is None else zones, records=records, **kwargs
        )

    return factory


@pytest.fixture
def make_resolver():
    return ScriptedResolver


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def liveness_record_set():
    return RecordSet(
        name="kubefirst-liveness.example.com.",
        record_type="TXT",
        ttl=10,
        rrdatas=['"domain record propagated"'],
    )
