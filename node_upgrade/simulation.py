import asyncio
from .collaborators import ResourceDeleter, TemplateDeployer, ReadinessClient, NodeStatusHandle
from .errors import ResourceError, DeploymentError, TransientQueryError
from .models import NodeReadinessState


class SimulatedResourceDeleter(ResourceDeleter):
    def __init__(self, fail=False, delay=0):
        self.fail = fail
        self.delay = delay
        self.deleted = []

    async def delete(self, subscription_id, resource_group, resource_name):
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ResourceError(f"Simulated failure deleting {resource_name}")
        self.deleted.append((subscription_id, resource_group, resource_name))


class SimulatedTemplateDeployer(TemplateDeployer):
    def __init__(self, fail=False, delay=0):
        self.fail = fail
        self.delay = delay
        self.deployments = []

    async def deploy(self, resource_group, deployment_name, template, parameters):
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise DeploymentError(f"Simulated failure submitting {deployment_name}")
        self.deployments.append({
            "resource_group": resource_group,
            "name": deployment_name,
            "template": template,
            "parameters": parameters
        })
        return {"name": deployment_name, "provisioningState": "Accepted"}


class SimulatedNodeHandle(NodeStatusHandle):
    def __init__(self, client):
        self.client = client
        self.closed = False

    async def get_node_status(self, node_name):
        return self.client.query(node_name)

    async def close(self):
        self.closed = True


class SimulatedReadinessClient(ReadinessClient):
    """Nodes turn ready on poll number `ready_after`; the first `failing_queries` polls error.

    `ready_after=None` simulates a node that never becomes ready.
    """

    def __init__(self, ready_after=1, failing_queries=0):
        self.ready_after = ready_after
        self.failing_queries = failing_queries
        self.queries = {}
        self.handles = []

    async def connect(self, endpoint, credentials, poll_interval, timeout):
        handle = SimulatedNodeHandle(self)
        self.handles.append(handle)
        return handle

    def query_count(self, node_name=None):
        if node_name is None:
            return sum(self.queries.values())
        return self.queries.get(node_name, 0)

    def query(self, node_name):
        self.queries[node_name] = self.queries.get(node_name, 0) + 1
        attempt = self.queries[node_name]
        if attempt <= self.failing_queries:
            raise TransientQueryError(f"Simulated query failure for {node_name}")
        if self.ready_after is not None and attempt >= self.ready_after:
            return NodeReadinessState.READY
        return NodeReadinessState.NOT_READY
