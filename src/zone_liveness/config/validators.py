"""
Configuration Validators

This module provides validation functions for zone liveness configuration parameters.
"""

import ipaddress
import re
from pathlib import Path
from typing import List

import dns.exception
import dns.name

_LABEL_RE = re.compile(r"^[A-Za-z0-9_]([A-Za-z0-9_-]{0,61}[A-Za-z0-9])?$")


def validate_boolean(value) -> bool:
    """Validate boolean value."""
    return isinstance(value, bool)


def validate_file_path(path: str) -> bool:
    """Validate file path format."""
    if not path:
        return False

    try:
        Path(path)
        return True
    except (TypeError, ValueError):
        return False


def validate_log_level(level: str) -> bool:
    """Validate log level."""
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    return isinstance(level, str) and level.upper() in valid_levels


def validate_positive_float(value: float) -> bool:
    """Validate positive float."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and value > 0
    )


def validate_non_negative_float(value: float) -> bool:
    """Validate float that may be zero."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and value >= 0
    )


def validate_positive_int(value: int) -> bool:
    """Validate positive integer."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_ttl(ttl: int) -> bool:
    """Validate a record TTL in seconds (RFC 2181 upper bound)."""
    return validate_positive_int(ttl) and ttl <= 2147483647


def validate_nameserver(address: str) -> bool:
    """Validate nameserver address (IPv4 or IPv6 literal)."""
    if not isinstance(address, str) or not address:
        return False

    try:
        ipaddress.ip_address(address)
        return True
    except ValueError:
        return False


def validate_nameservers(servers: List[str]) -> bool:
    """Validate a non-empty list of nameserver addresses."""
    if not isinstance(servers, list) or not servers:
        return False

    return all(validate_nameserver(server) for server in servers)


def validate_record_label(label: str) -> bool:
    """Validate a single DNS label such as the liveness record prefix."""
    if not isinstance(label, str) or not label:
        return False

    return all(_LABEL_RE.match(part) for part in label.split("."))


def validate_zone_name(zone_name: str) -> bool:
    """Validate a DNS zone name.

    The name must parse as a DNS name and have at least two labels, so that
    ``example.com`` and ``example.com.`` pass while ``com`` and ``..`` fail.
    """
    if not isinstance(zone_name, str) or not zone_name.strip(". "):
        return False

    try:
        name = dns.name.from_text(zone_name.strip())
    except dns.exception.DNSException:
        return False

    labels = [label for label in name.labels if label]
    if len(labels) < 2:
        return False

    return all(_LABEL_RE.match(label.decode("ascii", "replace")) for label in labels)
