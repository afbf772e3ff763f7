"""DNS provider factory: build the provider used by the solver."""

from __future__ import annotations

from regery_webhook.dns.base import DnsProvider
from regery_webhook.dns.regery import RegeryDnsProvider
from regery_webhook.models import Credentials


def get_dns_provider(credentials: Credentials) -> DnsProvider:
    """Instantiate the Regery DNS provider for one challenge.

    Use the result as a context manager so the HTTP client is closed after
    the call.
    """
    return RegeryDnsProvider(credentials=credentials)
