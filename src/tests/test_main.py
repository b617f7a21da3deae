"""Tests for the command line entry point."""

import signal
import threading

import pytest

from zone_liveness import main as main_module
from zone_liveness.core.errors import ProviderError
from zone_liveness.core.records import ManagedZone
from zone_liveness.main import LivenessApp, build_parser, main, overrides_from_args


@pytest.fixture
def fake_resolvers(monkeypatch, make_resolver):
    resolvers = {}

    def factory(config):
        resolvers["primary"] = make_resolver("primary")
        resolvers["fallback"] = make_resolver("fallback")
        return resolvers["primary"], resolvers["fallback"]

    monkeypatch.setattr(main_module, "resolvers_from_config", factory)
    return resolvers


class TestArguments:
    def test_overrides_from_args(self):
        args = build_parser().parse_args(
            [
                "example.com",
                "--project",
                "k1-project",
                "--max-attempts",
                "5",
                "--interval",
                "0.5",
                "--fallback-nameserver",
                "1.1.1.1",
                "--fallback-nameserver",
                "9.9.9.9",
                "--substring-match",
                "--log-level",
                "debug",
            ]
        )

        overrides = overrides_from_args(args)

        assert args.zone == "example.com"
        assert overrides == {
            "provider": {"project": "k1-project"},
            "retry": {"max_attempts": 5, "interval": 0.5},
            "resolver": {"fallback_nameservers": ["1.1.1.1", "9.9.9.9"]},
            "logging": {"level": "DEBUG"},
            "zone_match": "substring",
        }

    def test_no_flags_no_overrides(self):
        args = build_parser().parse_args(["example.com"])

        assert overrides_from_args(args) == {}


class TestMain:
    """Test exit codes and operator output"""

    def test_existing_record_exits_zero(
        self, make_provider, zone, liveness_record_set, fake_resolvers, capsys
    ):
        provider = make_provider(records={zone.zone_id: [liveness_record_set]})

        exit_code = main(["example.com"], provider=provider)

        assert exit_code == 0
        assert "is live" in capsys.readouterr().out

    def test_zone_not_found(self, make_provider, fake_resolvers, capsys):
        provider = make_provider(
            zones=[ManagedZone(zone_id="other", dns_name="other.org.")]
        )

        exit_code = main(["example.com"], provider=provider)

        assert exit_code == 2
        assert "zone_not_found" in capsys.readouterr().err

    def test_resolution_timeout(self, make_provider, fake_resolvers, capsys):
        provider = make_provider()

        exit_code = main(
            ["example.com", "--max-attempts", "3", "--interval", "0"],
            provider=provider,
        )

        err = capsys.readouterr().err
        assert exit_code == 4
        assert "please check your domain registrar" in err
        assert len(fake_resolvers["primary"].calls) == 3
        assert len(fake_resolvers["fallback"].calls) == 3

    def test_record_creation_failure(self, make_provider, fake_resolvers):
        provider = make_provider(create_error=ProviderError("denied"))

        assert main(["example.com"], provider=provider) == 3

    def test_invalid_configuration(self, make_provider, capsys):
        exit_code = main(
            ["example.com", "--max-attempts", "0"], provider=make_provider()
        )

        assert exit_code == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_missing_config_file(self, make_provider, capsys):
        exit_code = main(
            ["example.com", "--config", "/non/existent.yaml"], provider=make_provider()
        )

        assert exit_code == 1

    def test_unexpected_error(self, make_provider, fake_resolvers, monkeypatch):
        provider = make_provider()

        def explode(zone):
            raise RuntimeError("bug")

        monkeypatch.setattr(provider, "list_records", explode)

        assert main(["example.com"], provider=provider) == 1


class TestSignals:
    def test_signal_sets_cancel_event(self):
        app = LivenessApp()

        app._signal_handler(signal.SIGTERM, None)

        assert app.cancel_event.is_set()

    def test_handlers_restored(self):
        app = LivenessApp()
        before = signal.getsignal(signal.SIGTERM)

        previous = app.install_signal_handlers()
        assert signal.getsignal(signal.SIGTERM) == app._signal_handler
        app.restore_signal_handlers(previous)

        assert signal.getsignal(signal.SIGTERM) == before

    def test_no_handlers_off_main_thread(self):
        app = LivenessApp()
        before = signal.getsignal(signal.SIGTERM)
        installed = []

        worker = threading.Thread(
            target=lambda: installed.append(app.install_signal_handlers())
        )
        worker.start()
        worker.join()

        assert installed == [{}]
        assert signal.getsignal(signal.SIGTERM) == before

    def test_main_off_main_thread(self, make_provider, zone, liveness_record_set):
        provider = make_provider(records={zone.zone_id: [liveness_record_set]})
        exit_codes = []

        worker = threading.Thread(
            target=lambda: exit_codes.append(main(["example.com"], provider=provider))
        )
        worker.start()
        worker.join()

        assert exit_codes == [0]
