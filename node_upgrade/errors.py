class UpgradeError(Exception):
    """Base class for node upgrade failures"""


class ResourceError(UpgradeError):
    """Deleting the node's infrastructure failed"""


class DeploymentError(UpgradeError):
    """Submitting the replacement deployment failed"""


class ValidationContextError(UpgradeError):
    """Validation was asked for without the context needed to run it"""


class TransientQueryError(UpgradeError):
    """A single readiness query failed; the poll loop retries it"""


class ReadinessTimeoutError(UpgradeError):
    """The node did not report ready before the deadline"""

    def __init__(self, node_name, timeout_s, elapsed_s):
        self.node_name = node_name
        self.timeout_s = timeout_s
        self.elapsed_s = elapsed_s
        super().__init__(f"Node {node_name} was not ready within {timeout_s}s (waited {elapsed_s:.1f}s)")
