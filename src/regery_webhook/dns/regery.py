"""Regery DNS provider: create/delete TXT records via the Regery REST API."""

from __future__ import annotations

import json
import logging

import httpx

from regery_webhook.dns.base import DnsProvider
from regery_webhook.errors import ApiRequestError, PayloadEncodeError
from regery_webhook.models import Credentials

logger = logging.getLogger(__name__)

# Regery expects the TTL as a string
_CHALLENGE_TTL = "60"


def build_record_payload(record_name: str, value: str, ttl: str | None = None) -> dict:
    """Build the ``records`` body shared by the create and delete calls."""
    record = {"type": "TXT", "name": record_name, "value": value}
    if ttl is not None:
        record["ttl"] = ttl
    return {"records": [record]}


class RegeryDnsProvider(DnsProvider):
    """DNS provider backed by the Regery API.

    Each call is a single request with no retries; cert-manager re-invokes the
    solver when it wants another attempt.
    """

    def __init__(
        self,
        credentials: Credentials,
        _http_client: httpx.Client | None = None,
    ) -> None:
        self._api_url = credentials.api_url
        self._client = _http_client or httpx.Client(
            headers={
                "Content-Type": "application/json",
                "Authorization": credentials.authorization,
            },
        )

    def _records_url(self, zone: str) -> str:
        return f"{self._api_url}/domains/{zone}/records"

    def _call(self, method: str, url: str, payload: dict) -> None:
        """Send one request and require a 200 response.

        Transport failures (``httpx.TransportError``) propagate unchanged.
        """
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as err:
            raise PayloadEncodeError(f"failed to marshal payload: {err}") from err

        resp = self._client.request(method, url, content=body)
        if resp.status_code == httpx.codes.OK:
            return

        raise ApiRequestError(f"{resp.status_code} {resp.reason_phrase}", url, method)

    def create_txt_record(self, zone: str, record_name: str, value: str) -> None:
        url = self._records_url(zone)
        self._call("POST", url, build_record_payload(record_name, value, ttl=_CHALLENGE_TTL))
        logger.info("Created TXT record %r in Regery zone %s", record_name, zone)

    def delete_txt_record(self, zone: str, record_name: str, value: str) -> None:
        url = self._records_url(zone)
        self._call("DELETE", url, build_record_payload(record_name, value))
        logger.info("Deleted TXT record %r from Regery zone %s", record_name, zone)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
