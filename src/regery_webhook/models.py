"""Data classes exchanged with cert-manager and passed to the DNS provider."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

REGERY_API_URL = "https://api.regery.com/v1"


@dataclass(frozen=True)
class ChallengeRequest:
    """A single DNS-01 challenge as sent by cert-manager.

    ``config`` holds the raw solver config JSON from the issuer, or None when
    the issuer does not set one.
    """

    uid: str
    action: str
    resource_namespace: str
    resolved_zone: str
    resolved_fqdn: str
    key: str
    type: str = "dns-01"
    dns_name: str = ""
    allow_ambient_credentials: bool = False
    config: str | None = None

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "action": self.action,
            "type": self.type,
            "dnsName": self.dns_name,
            "key": self.key,
            "resourceNamespace": self.resource_namespace,
            "resolvedFQDN": self.resolved_fqdn,
            "resolvedZone": self.resolved_zone,
            "allowAmbientCredentials": self.allow_ambient_credentials,
            "config": json.loads(self.config) if self.config else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ChallengeRequest:
        # The API server embeds the solver config as a JSON object; keep it as
        # text so it is decoded in one place.
        raw_config = data.get("config")
        if raw_config is not None and not isinstance(raw_config, str):
            raw_config = json.dumps(raw_config)
        return cls(
            uid=data.get("uid", ""),
            action=data["action"],
            type=data.get("type", "dns-01"),
            dns_name=data.get("dnsName", ""),
            key=data["key"],
            resource_namespace=data.get("resourceNamespace", ""),
            resolved_fqdn=data["resolvedFQDN"],
            resolved_zone=data["resolvedZone"],
            allow_ambient_credentials=bool(data.get("allowAmbientCredentials", False)),
            config=raw_config,
        )


@dataclass(frozen=True)
class ChallengeResponse:
    """Outcome of a challenge, reported back to cert-manager."""

    uid: str
    success: bool
    message: str = ""

    def to_dict(self) -> dict:
        result: dict = {"uid": self.uid, "success": self.success}
        if self.message:
            result["status"] = {"message": self.message}
        return result

    @classmethod
    def from_dict(cls, data: dict) -> ChallengeResponse:
        return cls(
            uid=data["uid"],
            success=data["success"],
            message=(data.get("status") or {}).get("message", ""),
        )


@dataclass(frozen=True)
class ProviderConfig:
    """Solver config from the issuer: which secret holds the API credentials."""

    secret_name: str = ""

    def to_dict(self) -> dict:
        return {"secretName": self.secret_name}

    @classmethod
    def from_dict(cls, data: dict) -> ProviderConfig:
        return cls(secret_name=data.get("secretName", ""))


@dataclass(frozen=True)
class Credentials:
    """Regery API credentials resolved for one call. Never cached."""

    api_key: str
    api_secret: str = field(repr=False)
    api_url: str = REGERY_API_URL

    @property
    def authorization(self) -> str:
        return f"{self.api_key}:{self.api_secret}"
