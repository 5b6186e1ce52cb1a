import copy
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum


class NodeReadinessState(str, Enum):
    UNKNOWN = "unknown"
    NOT_READY = "not_ready"
    READY = "ready"


class ValidationOutcome(str, Enum):
    SKIPPED = "skipped"
    READY = "ready"
    TIMED_OUT = "timed_out"


@dataclass
class DeploymentDescriptor:
    """Infrastructure template, its parameters and the pool sizing variables"""
    template: dict
    parameters: dict = field(default_factory=dict)
    offset: int = 0  # Position of the new node within its pool
    count: int = 1  # Pool size while the new node is added
    offset_variable: str = "masterOffset"
    count_variable: str = "masterCount"

    def for_ordinal(self, ordinal):
        """Return a copy sized for a node at `ordinal` in a pool grown by one"""
        if ordinal < 0:
            raise ValueError("ordinal must be >= 0")
        return replace(self, offset=ordinal, count=ordinal + 1)

    def render_template(self):
        """Deep copy of the template with the sizing variables filled in"""
        rendered = copy.deepcopy(self.template)
        variables = rendered.setdefault("variables", {})
        variables[self.offset_variable] = self.offset
        variables[self.count_variable] = self.count
        return rendered


@dataclass
class UpgradeConfig:
    """Configuration for a node upgrader"""
    subscription_id: str
    resource_group: str
    kubeconfig: object = None  # Kubeconfig material, YAML text or an already parsed mapping
    endpoint: str = None  # Cluster API endpoint (FQDN or URL) the new node registers with
    timeout_s: float = 20 * 60.0  # How long validate waits for the node to become ready
    poll_interval_s: float = 5.0  # Delay between readiness queries
    skip_validation_without_endpoint: bool = True  # Skip instead of fail when endpoint is unknown
    deployment_name_prefix: str = "master"
    write_debug_artifacts: bool = False  # Dump descriptor before each submission
    debug_output_path: str = "_output/Upgrade"


@dataclass
class CreateResult:
    """What create_node submitted"""
    deployment_name: str
    descriptor: DeploymentDescriptor
    result: object = None  # Whatever the template deployer returned


@dataclass
class NodeUpgradeResult:
    """Results from upgrading a single node"""
    node: str
    success: bool = False
    deployment_name: str = None
    validation: ValidationOutcome = None
    error: str = None  # Why the upgrade stopped (if it did)
    history: list = field(default_factory=list)  # Step events in order


def new_deployment_name(prefix="master", now=None):
    """Build a deployment name unique per creation attempt"""
    now = now or datetime.now()
    return f"{prefix}-{now.strftime('%y-%m-%dT%H.%M.%S')}-{uuid.uuid4().hex}"
