"""
Zone Liveness Main Entry Point

This script provides the command line entry point used by cluster bootstrap
to block until a hosted zone is live.
"""

import argparse
import signal
import sys
import threading
from typing import Any, Dict, List, Optional

from zone_liveness.config.loader import ConfigLoader
from zone_liveness.config.schema import LivenessConfig
from zone_liveness.core import (
    LivenessResult,
    LivenessStatus,
    RetryPolicy,
    ZoneLivenessVerifier,
    resolvers_from_config,
)
from zone_liveness.dns_logging import get_logger, log_exception, setup_logging
from zone_liveness.providers import DNSProvider, create_provider

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CODES = {
    LivenessStatus.PROPAGATED: EXIT_OK,
    LivenessStatus.ALREADY_PROPAGATED: EXIT_OK,
    LivenessStatus.ZONE_NOT_FOUND: 2,
    LivenessStatus.RECORD_CREATION_FAILED: 3,
    LivenessStatus.RESOLUTION_TIMED_OUT: 4,
    LivenessStatus.PROVIDER_ERROR: 5,
    LivenessStatus.CANCELLED: 130,
}


class LivenessApp:
    """Zone liveness application"""

    def __init__(
        self,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        provider: Optional[DNSProvider] = None,
    ):
        self.config_path = config_path
        self.overrides = overrides or {}
        self.config: Optional[LivenessConfig] = None
        self.provider = provider
        self.verifier: Optional[ZoneLivenessVerifier] = None
        self.cancel_event = threading.Event()
        self.logger = None

    def initialize(self) -> None:
        """Load configuration, set up logging and build the verifier."""
        config_loader = ConfigLoader(self.config_path)
        self.config = config_loader.load_config(self.overrides)

        setup_logging(self.config.logging)
        self.logger = get_logger("zone_liveness.app")

        if self.provider is None:
            self.provider = create_provider(self.config.provider)

        primary, fallback = resolvers_from_config(self.config.resolver)
        self.verifier = ZoneLivenessVerifier(
            self.provider,
            primary,
            fallback,
            retry_policy=RetryPolicy.from_config(self.config.retry),
            record_config=self.config.record,
            zone_match=self.config.zone_match,
            logger=get_logger("zone_liveness.verifier"),
        )

        self.logger.info(
            "zone liveness initialized",
            provider=self.config.provider.type,
            project=self.config.provider.project,
            max_attempts=self.config.retry.max_attempts,
            interval=self.config.retry.interval,
            fallback_nameservers=self.config.resolver.fallback_nameservers,
            zone_match=self.config.zone_match,
        )

    def run(self, zone_name: str) -> LivenessResult:
        """Run the liveness check for ``zone_name``."""
        if self.verifier is None:
            self.initialize()

        return self.verifier.verify(zone_name, cancel=self.cancel_event)

    def install_signal_handlers(self) -> Dict[int, Any]:
        """Cancel the wait on SIGINT/SIGTERM instead of killing the process.

        Returns the previous handlers so they can be restored. Off the main
        thread no handlers can be installed and the wait is not interruptible.
        """
        previous = {}
        if threading.current_thread() is not threading.main_thread():
            if self.logger:
                self.logger.debug("not on the main thread, signal handlers skipped")
            return previous

        for sig in (signal.SIGINT, signal.SIGTERM):
            previous[sig] = signal.signal(sig, self._signal_handler)
        return previous

    @staticmethod
    def restore_signal_handlers(previous: Dict[int, Any]) -> None:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    def _signal_handler(self, signum, frame) -> None:
        if self.logger:
            self.logger.info("Received shutdown signal", signal=signum)
        self.cancel_event.set()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zone-liveness",
        description="Verify that a DNS hosted zone is live and propagating",
    )
    parser.add_argument("zone", help="Hosted zone name, e.g. example.com")
    parser.add_argument("--config", "-c", help="Configuration file path")
    parser.add_argument("--provider", help="DNS provider type")
    parser.add_argument("--project", help="Cloud project owning the hosted zone")
    parser.add_argument(
        "--credentials-file", help="Service account credentials JSON file"
    )
    parser.add_argument(
        "--max-attempts", type=int, help="Resolution attempts before giving up"
    )
    parser.add_argument(
        "--interval", type=float, help="Seconds to wait between attempts"
    )
    parser.add_argument(
        "--fallback-nameserver",
        action="append",
        dest="fallback_nameservers",
        help="Fallback resolver address (repeatable)",
    )
    parser.add_argument(
        "--substring-match",
        action="store_true",
        help="Match the zone by substring instead of exact name",
    )
    parser.add_argument(
        "--require-value-match",
        action="store_true",
        help="Only accept answers containing the liveness record value",
    )
    parser.add_argument("--log-level", help="Log level")
    parser.add_argument(
        "--log-format", choices=["console", "json"], help="Log output format"
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Turn command line flags into configuration overrides."""
    overrides: Dict[str, Any] = {}

    def put(section: str, key: str, value: Any) -> None:
        if value is not None:
            overrides.setdefault(section, {})[key] = value

    put("provider", "type", args.provider)
    put("provider", "project", args.project)
    put("provider", "credentials_file", args.credentials_file)
    put("retry", "max_attempts", args.max_attempts)
    put("retry", "interval", args.interval)
    put("resolver", "fallback_nameservers", args.fallback_nameservers)
    put("logging", "level", args.log_level.upper() if args.log_level else None)
    put("logging", "format", args.log_format)
    if args.require_value_match:
        put("record", "require_value_match", True)
    if args.substring_match:
        overrides["zone_match"] = "substring"
    return overrides


def report(result: LivenessResult) -> None:
    """Print the outcome and operator guidance."""
    if result:
        print(f"hosted zone {result.zone_name} is live ({result.status.value})")
        return

    print(
        f"hosted zone {result.zone_name} liveness check failed: "
        f"{result.status.value}",
        file=sys.stderr,
    )
    if result.error:
        print(f"  error: {result.error}", file=sys.stderr)
    if result.remediation:
        print(f"  {result.remediation}", file=sys.stderr)


def main(argv: Optional[List[str]] = None, provider: Optional[DNSProvider] = None) -> int:
    """Main function, returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        app = LivenessApp(args.config, overrides_from_args(args), provider=provider)
        app.initialize()
    except (FileNotFoundError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:
        print(f"Failed to initialize zone liveness check: {e}", file=sys.stderr)
        return EXIT_ERROR

    previous_handlers = app.install_signal_handlers()

    try:
        result = app.run(args.zone)
    except Exception as e:
        log_exception(app.logger, "Zone liveness check failed", e)
        return EXIT_ERROR
    finally:
        app.restore_signal_handlers(previous_handlers)

    report(result)
    return EXIT_CODES[result.status]


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
