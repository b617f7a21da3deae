"""
Zone Liveness Errors

Exception taxonomy for liveness checks. Fatal errors carry the operator
remediation text the command line prints.
"""

from typing import Optional


class LivenessError(Exception):
    """Base class for all zone liveness errors."""

    remediation: str = ""

    def __init__(self, message: str, zone_name: Optional[str] = None):
        super().__init__(message)
        self.zone_name = zone_name


class ProviderError(LivenessError):
    """A DNS provider management API call failed."""

    remediation = (
        "check the DNS provider credentials and that the account can list "
        "and edit managed zones"
    )


class RecordExistsError(ProviderError):
    """The provider rejected a record creation because the record already exists."""


class ZoneNotFoundError(LivenessError):
    """No managed zone matches the requested zone name."""

    remediation = (
        "check that the hosted zone exists under the authenticated provider "
        "account and that the zone name is spelled correctly"
    )


class RecordCreationError(LivenessError):
    """The liveness record could not be created in the zone."""

    remediation = (
        "check that the provider account is allowed to create records in "
        "the hosted zone"
    )


class ResolutionError(LivenessError):
    """A single TXT lookup failed or returned nothing. Retried while polling."""


class ResolutionTimedOutError(LivenessError):
    """The liveness record never became resolvable within the attempt bound."""

    remediation = (
        "unable to resolve hosted zone dns record. please check your domain "
        "registrar and that its nameservers delegate to the hosted zone"
    )


class VerificationCancelledError(LivenessError):
    """The verification was cancelled before the record resolved."""

    remediation = "verification was interrupted, re-run it to continue waiting"
