from abc import ABC, abstractmethod


class ResourceDeleter(ABC):
    """Destroys the infrastructure backing a named virtual node"""

    @abstractmethod
    async def delete(self, subscription_id, resource_group, resource_name):
        """Delete `resource_name`; raise on failure"""


class TemplateDeployer(ABC):
    """Submits a named deployment of an infrastructure template"""

    @abstractmethod
    async def deploy(self, resource_group, deployment_name, template, parameters):
        """Submit the deployment and return the provider's result; raise on failure"""


class NodeStatusHandle(ABC):
    @abstractmethod
    async def get_node_status(self, node_name):
        """Return the NodeReadinessState of `node_name`"""

    async def close(self):
        pass


class ReadinessClient(ABC):
    """Yields handles that can query node health in a cluster"""

    @abstractmethod
    async def connect(self, endpoint, credentials, poll_interval, timeout):
        """Return a NodeStatusHandle for the cluster at `endpoint`"""


class ArtifactWriter(ABC):
    """Debug hook that persists a descriptor before it is submitted"""

    @abstractmethod
    def write(self, descriptor, parameters, output_path):
        pass


class UpgradeNode(ABC):
    """Per-node replacement steps driven by a rolling upgrade"""

    @abstractmethod
    async def delete_node(self, node_identity, drain=False):
        pass

    @abstractmethod
    async def create_node(self, pool_name, ordinal):
        pass

    @abstractmethod
    async def validate(self, node_identity):
        pass
