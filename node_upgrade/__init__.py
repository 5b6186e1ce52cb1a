from .models import (
    NodeReadinessState, ValidationOutcome, DeploymentDescriptor, UpgradeConfig,
    CreateResult, NodeUpgradeResult, new_deployment_name
)
from .errors import (
    UpgradeError, ResourceError, DeploymentError, ValidationContextError,
    TransientQueryError, ReadinessTimeoutError
)
from .collaborators import (
    ResourceDeleter, TemplateDeployer, ReadinessClient, NodeStatusHandle, ArtifactWriter, UpgradeNode
)
from .upgrader import NodeUpgrader, upgrade_node

__all__ = [
    "NodeReadinessState", "ValidationOutcome", "DeploymentDescriptor", "UpgradeConfig",
    "CreateResult", "NodeUpgradeResult", "new_deployment_name",
    "UpgradeError", "ResourceError", "DeploymentError", "ValidationContextError",
    "TransientQueryError", "ReadinessTimeoutError",
    "ResourceDeleter", "TemplateDeployer", "ReadinessClient", "NodeStatusHandle",
    "ArtifactWriter", "UpgradeNode",
    "NodeUpgrader", "upgrade_node"
]
