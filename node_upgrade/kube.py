import asyncio

import aiohttp
import yaml
from kubernetes_asyncio import client, config
from kubernetes_asyncio.client.rest import ApiException

from .collaborators import ReadinessClient, NodeStatusHandle
from .errors import TransientQueryError
from .models import NodeReadinessState
from .logger import get_logger

logger = get_logger("kube")


def node_readiness(node):
    """Map a V1Node's Ready condition onto NodeReadinessState"""
    conditions = (node.status.conditions if node.status else None) or []
    for condition in conditions:
        if condition.type == "Ready":
            if condition.status == "True":
                return NodeReadinessState.READY
            return NodeReadinessState.NOT_READY
    return NodeReadinessState.UNKNOWN


def _api_host(endpoint):
    if endpoint.startswith("http://") or endpoint.startswith("https://"):
        return endpoint
    return f"https://{endpoint}"


class KubeNodeStatusHandle(NodeStatusHandle):
    def __init__(self, api_client, request_timeout):
        self._api_client = api_client
        self._api = client.CoreV1Api(api_client)
        self._request_timeout = request_timeout

    async def get_node_status(self, node_name):
        try:
            node = await self._api.read_node(node_name, _request_timeout=self._request_timeout)
        except ApiException as e:
            raise TransientQueryError(f"reading node {node_name} failed with status {e.status}: {e.reason}") from e
        except aiohttp.ClientError as e:
            raise TransientQueryError(f"reading node {node_name} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransientQueryError(f"reading node {node_name} timed out after {self._request_timeout}s") from e
        return node_readiness(node)

    async def close(self):
        await self._api_client.close()


class KubeReadinessClient(ReadinessClient):
    """ReadinessClient backed by kubernetes_asyncio; the endpoint overrides the kubeconfig server"""

    async def connect(self, endpoint, credentials, poll_interval, timeout):
        if isinstance(credentials, str):
            credentials = yaml.safe_load(credentials)
        if not credentials:
            raise ValueError("kubeconfig material is required to query node status")

        configuration = client.Configuration()
        await config.load_kube_config_from_dict(config_dict=credentials, client_configuration=configuration)
        if endpoint:
            configuration.host = _api_host(endpoint)
        logger.debug(f"Connecting to Kubernetes API at {configuration.host}")

        # A single query never outlives one poll interval
        return KubeNodeStatusHandle(client.ApiClient(configuration=configuration), request_timeout=poll_interval)
