import json
import logging
from typing import Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from .errors import GenPoolError

logger = logging.getLogger(__name__)


class KubernetesNodeSource:
    """Reads the cluster's nodes in the same shape as `kubectl get nodes -o json`."""

    def __init__(self, context: Optional[str] = None):
        self._load_config(context)
        self.api_client = client.ApiClient()
        self.v1 = client.CoreV1Api(self.api_client)

    def _load_config(self, context: Optional[str]):
        if context is None:
            try:
                config.load_incluster_config()
                logger.info("Using in-cluster kubernetes config")
                return
            except ConfigException:
                logger.debug("Not running in a cluster, trying kubeconfig")
        try:
            config.load_kube_config(context=context)
        except ConfigException as e:
            raise GenPoolError(f"failed to load kubernetes config: {e}") from e
        logger.info("Using kubeconfig context %s", context or "<current>")

    def get_nodes(self) -> bytes:
        try:
            node_list = self.v1.list_node()
        except ApiException as e:
            raise GenPoolError(
                f"failed to list nodes: {e.status} {e.reason}"
            ) from e
        logger.info("Fetched %d nodes from the cluster", len(node_list.items))
        return json.dumps(
            self.api_client.sanitize_for_serialization(node_list)
        ).encode()
