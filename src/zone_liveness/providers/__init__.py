"""
DNS Provider Module

Provider adapters used to find hosted zones and create the liveness record.
"""

from ..config.schema import ProviderConfig
from .base import DNSProvider
from .gcp import GoogleCloudDNSProvider

PROVIDERS = {
    "gcp": GoogleCloudDNSProvider,
}


def create_provider(config: ProviderConfig) -> DNSProvider:
    """Create the DNS provider selected by configuration.

    Raises:
        ValueError: If the provider type is not registered
    """
    provider_cls = PROVIDERS.get(config.type)
    if provider_cls is None:
        raise ValueError(f"Unsupported DNS provider: {config.type}")
    return provider_cls.from_config(config)


__all__ = [
    "DNSProvider",
    "GoogleCloudDNSProvider",
    "PROVIDERS",
    "create_provider",
]
