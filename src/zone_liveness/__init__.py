"""
Zone Liveness

Verifies that a DNS hosted zone accepts records and that they propagate to
public resolvers before cluster bootstrap continues.
"""

from .core import (
    LivenessResult,
    LivenessStatus,
    RetryPolicy,
    ZoneLivenessVerifier,
    verify_zone_liveness,
)

__version__ = "0.1.0"

__all__ = [
    "LivenessResult",
    "LivenessStatus",
    "RetryPolicy",
    "ZoneLivenessVerifier",
    "verify_zone_liveness",
]
