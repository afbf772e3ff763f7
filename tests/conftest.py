"""Shared test fixtures for regery-webhook."""

import base64
from unittest.mock import MagicMock

import pytest

from regery_webhook.models import ChallengeRequest


def b64(value: str) -> str:
    return base64.b64encode(value.encode()).decode()


def make_challenge(**overrides) -> ChallengeRequest:
    defaults = {
        "uid": "uid-1",
        "action": "Present",
        "resource_namespace": "cert-manager",
        "resolved_zone": "example.com.",
        "resolved_fqdn": "_acme-challenge.example.com.",
        "key": "abc123",
        "config": '{"secretName": "regery-credentials"}',
    }
    defaults.update(overrides)
    return ChallengeRequest(**defaults)


def make_secret(data: dict[str, str] | None) -> MagicMock:
    secret = MagicMock()
    secret.data = {k: b64(v) for k, v in data.items()} if data is not None else None
    return secret


@pytest.fixture
def core_api():
    api = MagicMock()
    api.read_namespaced_secret.return_value = make_secret({"api-key": "K", "api-secret": "S"})
    return api
