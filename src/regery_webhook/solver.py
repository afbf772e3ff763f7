"""cert-manager webhook solver for Regery-hosted zones."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

import httpx
from kubernetes import client

from regery_webhook.credentials import resolve_credentials
from regery_webhook.dns import get_dns_provider
from regery_webhook.dns.base import DnsProvider
from regery_webhook.dns.util import extract_record_name, normalize_name
from regery_webhook.errors import ChallengeError, RegeryWebhookError
from regery_webhook.kube import build_core_api
from regery_webhook.models import ChallengeRequest, Credentials

logger = logging.getLogger(__name__)


class Solver(ABC):
    """The contract cert-manager expects from a DNS-01 webhook solver."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Solver name, used as the resource name in the webhook API."""

    @abstractmethod
    def initialize(
        self,
        client_configuration: client.Configuration | None,
        stop_event: threading.Event | None = None,
    ) -> None:
        """Prepare the solver. Called once before any challenge is served."""

    @abstractmethod
    def present(self, challenge: ChallengeRequest) -> None:
        """Publish the TXT record for a challenge."""

    @abstractmethod
    def cleanup(self, challenge: ChallengeRequest) -> None:
        """Remove the TXT record for a challenge."""


class RegeryDnsSolver(Solver):
    """Solves DNS-01 challenges by managing TXT records through the Regery API.

    Stateless apart from the Kubernetes API client, which is only read from
    after ``initialize`` and may be shared by concurrent challenges.
    """

    def __init__(
        self,
        core_api: client.CoreV1Api | None = None,
        provider_factory: Callable[[Credentials], DnsProvider] = get_dns_provider,
    ) -> None:
        self._core_api = core_api
        self._provider_factory = provider_factory

    @property
    def name(self) -> str:
        return "regery"

    def initialize(
        self,
        client_configuration: client.Configuration | None,
        stop_event: threading.Event | None = None,
    ) -> None:
        self._core_api = build_core_api(client_configuration)
        logger.debug("Solver initialized (stop event set: %s)", stop_event is not None and stop_event.is_set())

    def _credentials(self, challenge: ChallengeRequest) -> Credentials:
        namespace = challenge.resource_namespace
        if self._core_api is None:
            raise ChallengeError(namespace, "solver not initialized")
        try:
            return resolve_credentials(self._core_api, challenge)
        except RegeryWebhookError as err:
            raise ChallengeError(namespace, f"unable to get secret `{namespace}`; {err}") from err

    def present(self, challenge: ChallengeRequest) -> None:
        logger.debug(
            "Present: namespace=%s, zone=%s, fqdn=%s",
            challenge.resource_namespace,
            challenge.resolved_zone,
            challenge.resolved_fqdn,
        )
        credentials = self._credentials(challenge)
        zone = normalize_name(challenge.resolved_zone)
        record_name = extract_record_name(challenge.resolved_fqdn, zone)

        with self._provider_factory(credentials) as provider:
            try:
                provider.create_txt_record(zone, record_name, challenge.key)
            except (RegeryWebhookError, httpx.HTTPError, httpx.InvalidURL) as err:
                logger.error("Failed to present TXT record for %s: %s", challenge.resolved_fqdn, err)
                raise

        logger.info("Presented TXT record for %s", challenge.resolved_fqdn)

    def cleanup(self, challenge: ChallengeRequest) -> None:
        logger.debug(
            "CleanUp: namespace=%s, zone=%s, fqdn=%s",
            challenge.resource_namespace,
            challenge.resolved_zone,
            challenge.resolved_fqdn,
        )
        credentials = self._credentials(challenge)
        zone = normalize_name(challenge.resolved_zone)
        record_name = extract_record_name(challenge.resolved_fqdn, zone)

        with self._provider_factory(credentials) as provider:
            try:
                provider.delete_txt_record(zone, record_name, challenge.key)
            except (RegeryWebhookError, httpx.HTTPError, httpx.InvalidURL) as err:
                logger.error("Failed to delete TXT record for %s: %s", challenge.resolved_fqdn, err)
                raise

        logger.info("Deleted TXT record for %s", challenge.resolved_fqdn)
