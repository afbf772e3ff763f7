"""Errors raised while solving a DNS-01 challenge.

Every error is reported back to cert-manager as a failed challenge; nothing
here is retried internally. Network failures talking to the Regery API are
not wrapped and surface as ``httpx.TransportError``.
"""

from __future__ import annotations


class RegeryWebhookError(Exception):
    """Base class for all webhook errors."""


class ConfigDecodeError(RegeryWebhookError):
    """The solver config attached to the issuer is not valid JSON."""


class SecretLookupError(RegeryWebhookError):
    """The referenced secret could not be read from the Kubernetes API."""

    def __init__(self, secret_name: str, namespace: str, reason: object):
        self.secret_name = secret_name
        self.namespace = namespace
        super().__init__(f"unable to get secret `{secret_name}/{namespace}`; {reason}")


class MissingCredentialFieldError(RegeryWebhookError):
    """A required key is absent from the secret data or cannot be decoded."""

    def __init__(
        self,
        key: str,
        secret_name: str | None = None,
        namespace: str | None = None,
        detail: str | None = None,
    ):
        self.key = key
        self.secret_name = secret_name
        self.namespace = namespace
        self.detail = detail or f'key "{key}" not found in secret data'
        message = self.detail
        if secret_name is not None:
            message = f"unable to get {key} from secret `{secret_name}/{namespace}`; {message}"
        super().__init__(message)


class PayloadEncodeError(RegeryWebhookError):
    """The outbound record payload could not be serialized."""


class ApiRequestError(RegeryWebhookError):
    """The Regery API answered with anything other than 200 OK.

    The response body is not kept.
    """

    def __init__(self, status: str, url: str, method: str):
        self.status = status
        self.url = url
        self.method = method
        super().__init__(f"Error calling API status:{status} url: {url} method: {method}")


class ChallengeError(RegeryWebhookError):
    """A challenge could not be handled for the given namespace."""

    def __init__(self, namespace: str, message: str):
        self.namespace = namespace
        super().__init__(message)
