"""Basic import tests to verify all dependencies are installed correctly."""


def test_core_dns_imports():
    """Test that DNS resolution and config libraries can be imported."""
    import dns.resolver
    import yaml

    # Basic functionality test for dnspython
    assert hasattr(dns.resolver, "Resolver")
    assert hasattr(yaml, "safe_load")


def test_logging_imports():
    """Test that logging libraries can be imported."""
    import structlog

    assert hasattr(structlog, "get_logger")


def test_provider_imports():
    """Test that the Google Cloud DNS client libraries can be imported."""
    from google.api_core import exceptions
    from google.cloud import dns

    assert hasattr(dns, "Client")
    assert hasattr(exceptions, "Conflict")


def test_package_imports():
    import zone_liveness

    assert zone_liveness.__version__
    assert hasattr(zone_liveness, "ZoneLivenessVerifier")
