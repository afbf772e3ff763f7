"""Tests for regery_webhook.models."""

import json

from regery_webhook.models import (
    REGERY_API_URL,
    ChallengeRequest,
    ChallengeResponse,
    Credentials,
    ProviderConfig,
)


def _wire_request(**overrides) -> dict:
    data = {
        "uid": "6f9e2c",
        "action": "Present",
        "type": "dns-01",
        "dnsName": "example.com",
        "key": "abc123",
        "resourceNamespace": "cert-manager",
        "resolvedFQDN": "_acme-challenge.example.com.",
        "resolvedZone": "example.com.",
        "allowAmbientCredentials": False,
        "config": {"secretName": "regery-credentials"},
    }
    data.update(overrides)
    return data


class TestChallengeRequest:
    def test_from_dict_maps_wire_fields(self):
        request = ChallengeRequest.from_dict(_wire_request())

        assert request.uid == "6f9e2c"
        assert request.action == "Present"
        assert request.dns_name == "example.com"
        assert request.key == "abc123"
        assert request.resource_namespace == "cert-manager"
        assert request.resolved_fqdn == "_acme-challenge.example.com."
        assert request.resolved_zone == "example.com."
        assert request.allow_ambient_credentials is False

    def test_from_dict_serializes_config_object(self):
        request = ChallengeRequest.from_dict(_wire_request())

        assert json.loads(request.config) == {"secretName": "regery-credentials"}

    def test_from_dict_keeps_config_text(self):
        request = ChallengeRequest.from_dict(_wire_request(config='{"secretName": "x"}'))

        assert request.config == '{"secretName": "x"}'

    def test_from_dict_absent_config_is_none(self):
        data = _wire_request()
        del data["config"]

        assert ChallengeRequest.from_dict(data).config is None

    def test_to_dict_round_trips_wire_shape(self):
        data = _wire_request()

        assert ChallengeRequest.from_dict(data).to_dict() == data


class TestChallengeResponse:
    def test_success_has_no_status(self):
        assert ChallengeResponse(uid="u", success=True).to_dict() == {"uid": "u", "success": True}

    def test_failure_carries_message(self):
        response = ChallengeResponse(uid="u", success=False, message="boom")

        assert response.to_dict() == {"uid": "u", "success": False, "status": {"message": "boom"}}
        assert ChallengeResponse.from_dict(response.to_dict()) == response


class TestProviderConfig:
    def test_from_dict_reads_secret_name(self):
        assert ProviderConfig.from_dict({"secretName": "creds"}).secret_name == "creds"

    def test_missing_secret_name_defaults_to_empty(self):
        assert ProviderConfig.from_dict({}).secret_name == ""


class TestCredentials:
    def test_uses_fixed_api_url(self):
        assert Credentials(api_key="K", api_secret="S").api_url == "https://api.regery.com/v1"
        assert REGERY_API_URL == "https://api.regery.com/v1"

    def test_authorization_joins_key_and_secret(self):
        assert Credentials(api_key="K", api_secret="S").authorization == "K:S"

    def test_repr_hides_secret(self):
        assert "top-secret" not in repr(Credentials(api_key="K", api_secret="top-secret"))
