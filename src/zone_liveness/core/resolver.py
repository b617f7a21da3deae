"""
TXT Resolvers

This module provides the TXT lookup capability the liveness verifier polls:
- An abstract resolver interface
- A dnspython-backed resolver for the system configuration
- A dnspython-backed resolver pinned to fixed public nameservers (fallback)
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import dns.exception
import dns.resolver

from ..config.schema import DEFAULT_FALLBACK_NAMESERVERS, ResolverConfig
from .errors import ResolutionError

logger = logging.getLogger(__name__)


class TXTResolver(ABC):
    """Capability to look up the TXT values of a DNS name."""

    name = "resolver"

    @abstractmethod
    def lookup_txt(self, record_name: str) -> List[str]:
        """Return the TXT values published for ``record_name``.

        Raises:
            ResolutionError: If the lookup fails or nothing is published
        """


class DNSPythonTXTResolver(TXTResolver):
    """TXT resolver built on dnspython.

    Without explicit nameservers the system resolver configuration is read
    on first use. Answers are never cached between lookups.
    """

    def __init__(
        self,
        nameservers: Optional[List[str]] = None,
        timeout: float = 5.0,
        port: int = 53,
        name: Optional[str] = None,
    ):
        self.nameservers = list(nameservers) if nameservers else None
        self.timeout = timeout
        self.port = port
        self.name = name or ("fallback" if self.nameservers else "system")
        self._resolver: Optional[dns.resolver.Resolver] = None

    def _get_resolver(self) -> dns.resolver.Resolver:
        if self._resolver is None:
            try:
                resolver = dns.resolver.Resolver(configure=self.nameservers is None)
            except dns.resolver.NoResolverConfiguration as e:
                raise ResolutionError(
                    f"no system resolver configuration available: {e}"
                ) from e

            if self.nameservers:
                resolver.nameservers = self.nameservers
                resolver.port = self.port
            resolver.lifetime = self.timeout
            resolver.cache = None
            self._resolver = resolver
        return self._resolver

    def lookup_txt(self, record_name: str) -> List[str]:
        resolver = self._get_resolver()

        try:
            answer = resolver.resolve(record_name, "TXT", raise_on_no_answer=True)
        except dns.resolver.NXDOMAIN as e:
            raise ResolutionError(f"{record_name} does not exist (NXDOMAIN)") from e
        except dns.resolver.NoAnswer as e:
            raise ResolutionError(f"no TXT record published for {record_name}") from e
        except dns.resolver.NoNameservers as e:
            raise ResolutionError(
                f"no nameserver answered for {record_name}: {e}"
            ) from e
        except dns.exception.Timeout as e:
            raise ResolutionError(
                f"timed out after {self.timeout}s resolving {record_name}"
            ) from e
        except dns.exception.DNSException as e:
            raise ResolutionError(f"lookup of {record_name} failed: {e}") from e

        values = []
        for rdata in answer:
            # A TXT record may be split into several character-strings
            values.append(
                b"".join(rdata.strings).decode("utf-8", errors="replace")
            )

        if not values:
            raise ResolutionError(f"empty TXT answer for {record_name}")

        logger.debug(
            "TXT lookup via %s resolver for %s returned %s",
            self.name,
            record_name,
            values,
        )
        return values

    def __repr__(self) -> str:
        return (
            f"DNSPythonTXTResolver(name={self.name!r}, "
            f"nameservers={self.nameservers!r})"
        )


def system_resolver(
    timeout: float = 5.0, nameservers: Optional[List[str]] = None
) -> DNSPythonTXTResolver:
    """Primary resolver: the OS configuration unless nameservers are given."""
    return DNSPythonTXTResolver(nameservers=nameservers, timeout=timeout, name="primary")


def fallback_resolver(
    nameservers: Optional[List[str]] = None, timeout: float = 5.0
) -> DNSPythonTXTResolver:
    """Fallback resolver pinned to public nameservers (8.8.8.8 by default)."""
    return DNSPythonTXTResolver(
        nameservers=nameservers or list(DEFAULT_FALLBACK_NAMESERVERS),
        timeout=timeout,
        name="fallback",
    )


def resolvers_from_config(config: ResolverConfig):
    """Build the (primary, fallback) resolver pair from configuration."""
    return (
        system_resolver(timeout=config.timeout, nameservers=config.primary_nameservers),
        fallback_resolver(nameservers=config.fallback_nameservers, timeout=config.timeout),
    )
