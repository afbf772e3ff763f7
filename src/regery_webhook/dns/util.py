"""DNS utility functions."""

from __future__ import annotations


def normalize_name(name: str) -> str:
    """Strip a single trailing dot from a DNS name."""
    return name.removesuffix(".")


def extract_record_name(fqdn: str, zone: str) -> str:
    """Return the record label for ``fqdn`` relative to ``zone``.

    Trailing dots on either argument are ignored. When the FQDN equals the
    zone the label is the empty string (zone apex).

    A FQDN that does not end with the zone is returned whole. Note this is a
    plain string suffix check, so ``_acme-challenge.notexample.com`` in zone
    ``example.com`` yields ``_acme-challenge.not``.

    Args:
        fqdn: Fully qualified record name (e.g. "_acme-challenge.example.com.").
        zone: DNS zone name (e.g. "example.com.").

    Returns:
        Relative record name (e.g. "_acme-challenge").
    """
    fqdn = normalize_name(fqdn)
    zone = normalize_name(zone)
    if fqdn.endswith(zone):
        return fqdn.removesuffix(zone).removesuffix(".")
    return fqdn
