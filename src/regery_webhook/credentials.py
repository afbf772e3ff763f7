"""Resolve Regery API credentials from the secret referenced by the issuer."""

from __future__ import annotations

import base64
import binascii
import json
import logging

from kubernetes import client
from kubernetes.client.exceptions import OpenApiException
from urllib3.exceptions import HTTPError

from regery_webhook.errors import ConfigDecodeError, MissingCredentialFieldError, SecretLookupError
from regery_webhook.models import ChallengeRequest, Credentials, ProviderConfig

logger = logging.getLogger(__name__)

API_KEY_FIELD = "api-key"
API_SECRET_FIELD = "api-secret"


def load_provider_config(raw: str | bytes | None) -> ProviderConfig:
    """Parse the issuer's solver config. A missing config yields an empty one."""
    if not raw:
        return ProviderConfig()
    try:
        data = json.loads(raw)
    except ValueError as err:
        raise ConfigDecodeError(f"error decoding solver config: {err}") from err
    if not isinstance(data, dict):
        raise ConfigDecodeError(f"error decoding solver config: expected an object, got {type(data).__name__}")
    return ProviderConfig.from_dict(data)


def string_from_secret_data(secret_data: dict[str, str], key: str) -> str:
    """Return the decoded value of ``key`` from a secret's base64 data map."""
    if key not in secret_data:
        raise MissingCredentialFieldError(key)
    try:
        return base64.b64decode(secret_data[key], validate=True).decode()
    except (binascii.Error, UnicodeDecodeError) as err:
        raise MissingCredentialFieldError(key, detail=f'value of key "{key}" could not be decoded: {err}') from err


def resolve_credentials(core_api: client.CoreV1Api, challenge: ChallengeRequest) -> Credentials:
    """Fetch the API key and secret for a challenge.

    Reads the secret named in the solver config from the challenge's
    namespace. Exactly one read against the Kubernetes API; nothing is
    cached between calls.

    Raises:
        ConfigDecodeError: solver config is not valid JSON.
        SecretLookupError: no secret is named, the secret is missing or the
            API is unreachable.
        MissingCredentialFieldError: ``api-key`` or ``api-secret`` is absent.
    """
    provider_config = load_provider_config(challenge.config)
    secret_name = provider_config.secret_name
    namespace = challenge.resource_namespace
    if not secret_name:
        raise SecretLookupError(secret_name, namespace, "resource name may not be empty")

    try:
        secret = core_api.read_namespaced_secret(secret_name, namespace)
    except (OpenApiException, HTTPError) as err:
        raise SecretLookupError(secret_name, namespace, err) from err

    data = secret.data or {}
    try:
        api_key = string_from_secret_data(data, API_KEY_FIELD)
        api_secret = string_from_secret_data(data, API_SECRET_FIELD)
    except MissingCredentialFieldError as err:
        logger.debug("Secret %s/%s is missing %s", namespace, secret_name, err.key)
        raise MissingCredentialFieldError(err.key, secret_name, namespace, detail=err.detail) from err

    return Credentials(api_key=api_key, api_secret=api_secret)
