"""
Zone Liveness Verifier

Confirms that a hosted zone is usable before cluster bootstrap continues:
- Locates the managed zone under the authenticated provider account
- Ensures the liveness TXT record exists, creating it when absent
- Polls the primary and fallback resolvers until the record resolves or the
  retry policy is exhausted
"""

import threading
import time
from typing import Callable, List, Optional, Tuple

import structlog

from ..config.schema import RecordConfig
from ..config.validators import validate_zone_name
from ..providers.base import DNSProvider
from .errors import ProviderError, RecordExistsError, ResolutionError
from .records import LivenessRecord, LivenessResult, LivenessStatus, ManagedZone
from .resolver import TXTResolver, fallback_resolver, system_resolver
from .retry import RetryPolicy


class ZoneLivenessVerifier:
    """Blocking liveness check for one hosted zone at a time.

    All collaborators are injected. ``sleep`` is only used when no cancel
    signal is passed to :meth:`verify`; with a signal the wait between
    attempts is ``cancel.wait(delay)`` so it ends as soon as the signal is set.
    """

    def __init__(
        self,
        provider: DNSProvider,
        primary_resolver: TXTResolver,
        fallback_resolver: TXTResolver,
        retry_policy: Optional[RetryPolicy] = None,
        record_config: Optional[RecordConfig] = None,
        zone_match: str = "exact",
        logger=None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if zone_match not in ("exact", "substring"):
            raise ValueError(f"Invalid zone match mode: {zone_match}")

        self.provider = provider
        self.primary_resolver = primary_resolver
        self.fallback_resolver = fallback_resolver
        self.retry_policy = retry_policy or RetryPolicy()
        self.record_config = record_config or RecordConfig()
        self.zone_match = zone_match
        self.logger = logger or structlog.get_logger(__name__)
        self._sleep = sleep

    def record_for(self, zone_name: str) -> LivenessRecord:
        """The liveness record probed for ``zone_name``."""
        return LivenessRecord.for_zone(
            zone_name,
            prefix=self.record_config.prefix,
            value=self.record_config.value,
            ttl=self.record_config.ttl,
        )

    def verify(
        self, zone_name: str, cancel: Optional[threading.Event] = None
    ) -> LivenessResult:
        """Verify that ``zone_name`` is live.

        Args:
            zone_name: DNS name of the hosted zone, e.g. ``example.com``
            cancel: Optional signal that aborts the polling wait when set

        Returns:
            Tagged result; truthy when the record exists or resolved
        """
        record = self.record_for(zone_name)
        log = self.logger.bind(zone=zone_name, record=record.name)

        def result(status: LivenessStatus, **kwargs) -> LivenessResult:
            return LivenessResult(
                zone_name=zone_name, record_name=record.name, status=status, **kwargs
            )

        if not validate_zone_name(zone_name):
            log.error("invalid hosted zone name")
            return result(
                LivenessStatus.ZONE_NOT_FOUND,
                error=f"invalid hosted zone name: {zone_name!r}",
            )

        try:
            zone = self._find_zone(zone_name, log)
            if zone is None:
                log.error("could not find zone", match=self.zone_match)
                return result(
                    LivenessStatus.ZONE_NOT_FOUND,
                    error=f"could not find zone {zone_name}",
                )

            zone = self.provider.get_zone(zone.zone_id)
            log = log.bind(zone_id=zone.zone_id)

            log.info("checking to see if record exists")
            records = self.provider.list_records(zone)
        except ProviderError as e:
            log.error("dns provider error", error=str(e))
            return result(LivenessStatus.PROVIDER_ERROR, error=str(e))

        if any(existing.name == record.name for existing in records):
            log.info("domain record found")
            return result(LivenessStatus.ALREADY_PROPAGATED)

        try:
            status = self.provider.create_record(zone, record.to_record_set())
        except RecordExistsError:
            # Another caller created it between our listing and creation
            log.info("domain record created concurrently")
            return result(LivenessStatus.ALREADY_PROPAGATED)
        except ProviderError as e:
            log.error("error creating liveness record", error=str(e))
            return result(LivenessStatus.RECORD_CREATION_FAILED, error=str(e))

        log.info("record creation status", status=status, ttl=record.ttl)

        return self._poll(record, log, result, cancel)

    def _find_zone(self, zone_name: str, log) -> Optional[ManagedZone]:
        matches = [
            zone
            for zone in self.provider.list_zones()
            if zone.matches(zone_name, self.zone_match)
        ]
        if not matches:
            return None

        if len(matches) > 1:
            log.warning(
                "multiple zones match, using the last one listed",
                zones=[zone.dns_name for zone in matches],
            )
        return matches[-1]

    def _poll(self, record: LivenessRecord, log, result, cancel) -> LivenessResult:
        max_attempts = self.retry_policy.max_attempts

        for attempt in range(1, max_attempts + 1):
            if cancel is not None and cancel.is_set():
                log.warning("verification cancelled", attempts=attempt - 1)
                return result(LivenessStatus.CANCELLED, attempts=attempt - 1)

            resolver_name, values, error = self._resolve(record)
            if resolver_name is not None:
                log.info(
                    "TXT record resolved",
                    values=values,
                    resolver=resolver_name,
                    attempt=attempt,
                )
                return result(
                    LivenessStatus.PROPAGATED,
                    attempts=attempt,
                    values=values,
                    resolver=resolver_name,
                )

            if attempt == max_attempts:
                break

            delay = self.retry_policy.delay()
            log.warning(
                "could not get record, waiting and trying again",
                attempt=attempt,
                max_attempts=max_attempts,
                delay=delay,
                error=error,
            )
            if self._wait(delay, cancel):
                log.warning("verification cancelled", attempts=attempt)
                return result(LivenessStatus.CANCELLED, attempts=attempt)

        log.error(
            "unable to resolve hosted zone dns record. please check your domain registrar",
            attempts=max_attempts,
            error=error,
        )
        return result(
            LivenessStatus.RESOLUTION_TIMED_OUT,
            attempts=max_attempts,
            error=(
                f"{record.name} did not resolve after {max_attempts} attempts: {error}"
            ),
        )

    def _resolve(
        self, record: LivenessRecord
    ) -> Tuple[Optional[str], List[str], Optional[str]]:
        """Query the primary then the fallback resolver once.

        Returns the name of the resolver that answered and its values, or
        ``(None, [], last_error)`` when both failed.
        """
        error = None
        for resolver in (self.primary_resolver, self.fallback_resolver):
            try:
                values = resolver.lookup_txt(record.name)
            except ResolutionError as e:
                error = f"{resolver.name}: {e}"
                continue

            if not values:
                error = f"{resolver.name}: empty TXT answer"
                continue

            if self.record_config.require_value_match and record.value not in values:
                error = f"{resolver.name}: value mismatch {values!r}"
                continue

            return resolver.name, list(values), None

        return None, [], error

    def _wait(self, delay: float, cancel: Optional[threading.Event]) -> bool:
        """Wait ``delay`` seconds; True when cancelled during the wait."""
        if cancel is not None:
            return cancel.wait(delay)

        if delay > 0:
            self._sleep(delay)
        return False


def verify_zone_liveness(
    zone_name: str,
    provider: DNSProvider,
    primary: Optional[TXTResolver] = None,
    fallback: Optional[TXTResolver] = None,
    retry_policy: Optional[RetryPolicy] = None,
    cancel: Optional[threading.Event] = None,
    **kwargs,
) -> bool:
    """Convenience wrapper returning True when the zone is live.

    Resolvers default to the system resolver and the public fallback resolver.
    """
    verifier = ZoneLivenessVerifier(
        provider,
        primary or system_resolver(),
        fallback or fallback_resolver(),
        retry_policy=retry_policy,
        **kwargs,
    )
    return bool(verifier.verify(zone_name, cancel=cancel))
