"""HTTP server exposing the solver through the cert-manager webhook API.

cert-manager reaches webhook solvers through the Kubernetes API aggregation
layer: each challenge arrives as a ``ChallengePayload`` POSTed to
``/apis/<group>/v1alpha1/<solver name>`` and the outcome is written back into
the same envelope.
"""

from __future__ import annotations

import json
import logging
import re
import ssl
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import httpx

from regery_webhook.config import AppConfig
from regery_webhook.errors import RegeryWebhookError
from regery_webhook.models import ChallengeRequest, ChallengeResponse
from regery_webhook.solver import Solver

logger = logging.getLogger(__name__)

API_VERSION = "v1alpha1"
PAYLOAD_API_VERSION = f"acme.cert-manager.io/{API_VERSION}"
PAYLOAD_KIND = "ChallengePayload"

# An idle client can hold at most one worker thread for this long before any
# HTTP is spoken
_TLS_HANDSHAKE_TIMEOUT = 10

_RESOURCE_PATH = re.compile(rf"^/apis/(?P<group>[^/]+)/{API_VERSION}/(?:namespaces/[^/]+/)?(?P<resource>[^/]+)$")


def handle_challenge(solver: Solver, challenge: ChallengeRequest) -> ChallengeResponse:
    """Run one challenge action and turn the outcome into a response."""
    if challenge.action == "Present":
        action = solver.present
    elif challenge.action == "CleanUp":
        action = solver.cleanup
    else:
        return ChallengeResponse(uid=challenge.uid, success=False, message=f"unknown action '{challenge.action}'")

    try:
        action(challenge)
    except (RegeryWebhookError, httpx.HTTPError, httpx.InvalidURL) as err:
        logger.warning("Challenge %s (%s) failed: %s", challenge.uid, challenge.action, err)
        return ChallengeResponse(uid=challenge.uid, success=False, message=str(err))
    return ChallengeResponse(uid=challenge.uid, success=True)


class WebhookHandler(BaseHTTPRequestHandler):
    """HTTP handler for the webhook API, discovery and health endpoints."""

    server: WebhookHTTPServer

    def log_message(self, format: str, *args: object) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def handle_one_request(self) -> None:
        """Handle request, suppressing connection errors from health probes."""
        try:
            super().handle_one_request()
        except (ConnectionResetError, BrokenPipeError, ConnectionAbortedError):
            pass

    def do_GET(self) -> None:
        if self.path in ("/healthz", "/readyz"):
            self._send_text(200, "OK")
        elif self.path == f"/apis/{self.server.group_name}/{API_VERSION}":
            self._send_json(200, self._resource_list())
        else:
            self._send_text(404, "not found")

    def do_POST(self) -> None:
        body = self._read_body()
        match = _RESOURCE_PATH.match(self.path)
        if (
            not match
            or match["group"] != self.server.group_name
            or match["resource"] != self.server.solver.name
        ):
            self._send_text(404, "not found")
            return

        try:
            payload = json.loads(body or b"null")
            if not isinstance(payload, dict):
                raise ValueError("request body must be a JSON object")
            if payload.get("kind") != PAYLOAD_KIND or not isinstance(payload.get("request"), dict):
                raise ValueError(f"expected a {PAYLOAD_KIND} with a request")
            challenge = ChallengeRequest.from_dict(payload["request"])
        except (ValueError, KeyError, TypeError) as err:
            logger.warning("Rejected malformed challenge payload: %s", err)
            self._send_text(400, f"malformed challenge payload: {err}")
            return

        response = handle_challenge(self.server.solver, challenge)
        self._send_json(
            200,
            {
                "apiVersion": payload.get("apiVersion", PAYLOAD_API_VERSION),
                "kind": PAYLOAD_KIND,
                "response": response.to_dict(),
            },
        )

    def _resource_list(self) -> dict:
        return {
            "kind": "APIResourceList",
            "apiVersion": "v1",
            "groupVersion": f"{self.server.group_name}/{API_VERSION}",
            "resources": [
                {
                    "name": self.server.solver.name,
                    "singularName": self.server.solver.name,
                    "namespaced": False,
                    "kind": PAYLOAD_KIND,
                    "verbs": ["create"],
                }
            ],
        }

    def _read_body(self) -> bytes:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            length = 0
        return self.rfile.read(length) if length > 0 else b""

    def _send_json(self, status: int, body: dict) -> None:
        self._send(status, "application/json", json.dumps(body).encode())

    def _send_text(self, status: int, text: str) -> None:
        self._send(status, "text/plain", text.encode())

    def _send(self, status: int, content_type: str, data: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)


class WebhookHTTPServer(ThreadingHTTPServer):
    """Threaded HTTP server carrying the solver and API group for its handlers.

    With an SSL context, each accepted connection is wrapped without
    handshaking; the handshake runs, with a timeout, in the connection's
    worker thread rather than in the accept loop.
    """

    daemon_threads = True

    def __init__(
        self,
        server_address: tuple[str, int],
        solver: Solver,
        group_name: str,
        ssl_context: ssl.SSLContext | None = None,
        handshake_timeout: float = _TLS_HANDSHAKE_TIMEOUT,
    ):
        self.solver = solver
        self.group_name = group_name
        self.ssl_context = ssl_context
        self.handshake_timeout = handshake_timeout
        super().__init__(server_address, WebhookHandler)

    def get_request(self):
        sock, addr = super().get_request()
        if self.ssl_context is not None:
            sock = self.ssl_context.wrap_socket(sock, server_side=True, do_handshake_on_connect=False)
        return sock, addr

    def finish_request(self, request, client_address) -> None:
        if isinstance(request, ssl.SSLSocket):
            request.settimeout(self.handshake_timeout)
            try:
                request.do_handshake()
            except OSError as err:
                logger.debug("TLS handshake with %s failed: %s", client_address[0], err)
                return
            request.settimeout(None)
        super().finish_request(request, client_address)


class WebhookServer:
    """Serves a solver on the configured address, optionally over TLS."""

    def __init__(self, config: AppConfig, solver: Solver):
        self.config = config
        self.solver = solver
        context = None
        if config.tls_enabled:
            context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
            context.load_cert_chain(config.tls_cert_file, config.tls_key_file)
        self.httpd = WebhookHTTPServer((config.host, config.port), solver, config.group_name, ssl_context=context)

    @property
    def server_address(self) -> tuple[str, int]:
        host, port = self.httpd.server_address[:2]
        return host, port

    def serve_forever(self) -> None:
        """Serve requests until ``shutdown`` is called."""
        host, port = self.server_address
        logger.info(
            "Serving solver '%s' for group %s on %s:%d (tls=%s)",
            self.solver.name,
            self.config.group_name,
            host,
            port,
            self.config.tls_enabled,
        )
        try:
            self.httpd.serve_forever()
        finally:
            self.httpd.server_close()

    def shutdown(self) -> None:
        """Stop ``serve_forever``. Must be called from another thread."""
        self.httpd.shutdown()
