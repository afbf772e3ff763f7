"""Kubernetes API client construction."""

from __future__ import annotations

import logging

from kubernetes import client, config

logger = logging.getLogger(__name__)


def load_client_configuration() -> client.Configuration:
    """Return in-cluster configuration, falling back to the local kubeconfig."""
    configuration = client.Configuration()
    try:
        config.load_incluster_config(client_configuration=configuration)
        logger.debug("Using in-cluster Kubernetes configuration")
    except config.ConfigException:
        config.load_kube_config(client_configuration=configuration)
        logger.debug("Using kubeconfig Kubernetes configuration")
    return configuration


def build_core_api(configuration: client.Configuration | None = None) -> client.CoreV1Api:
    """Build a CoreV1Api bound to the given (or discovered) cluster configuration."""
    if configuration is None:
        configuration = load_client_configuration()
    return client.CoreV1Api(client.ApiClient(configuration))
