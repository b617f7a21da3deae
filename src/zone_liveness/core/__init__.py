"""
Zone Liveness Core Module

This module exports the liveness verifier and the types it works with.
"""

from .errors import (
    LivenessError,
    ProviderError,
    RecordCreationError,
    RecordExistsError,
    ResolutionError,
    ResolutionTimedOutError,
    VerificationCancelledError,
    ZoneNotFoundError,
)
from .records import (
    LivenessRecord,
    LivenessResult,
    LivenessStatus,
    ManagedZone,
    RecordSet,
)
from .resolver import (
    DNSPythonTXTResolver,
    TXTResolver,
    fallback_resolver,
    resolvers_from_config,
    system_resolver,
)
from .retry import RetryPolicy
from .verifier import ZoneLivenessVerifier, verify_zone_liveness

__all__ = [
    # Verifier
    "ZoneLivenessVerifier",
    "verify_zone_liveness",
    "RetryPolicy",
    # Resolvers
    "TXTResolver",
    "DNSPythonTXTResolver",
    "system_resolver",
    "fallback_resolver",
    "resolvers_from_config",
    # Models
    "LivenessRecord",
    "LivenessResult",
    "LivenessStatus",
    "ManagedZone",
    "RecordSet",
    # Errors
    "LivenessError",
    "ProviderError",
    "RecordExistsError",
    "ZoneNotFoundError",
    "RecordCreationError",
    "ResolutionError",
    "ResolutionTimedOutError",
    "VerificationCancelledError",
]
