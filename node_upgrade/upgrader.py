import asyncio
from .collaborators import UpgradeNode
from .errors import (
    ResourceError, DeploymentError, ValidationContextError, ReadinessTimeoutError
)
from .models import (
    NodeReadinessState, ValidationOutcome, CreateResult, NodeUpgradeResult, new_deployment_name
)
from .logger import get_logger


class NodeUpgrader(UpgradeNode):
    """Replaces one control-plane node: delete, create, validate.

    Control-plane nodes are deleted directly, without draining workloads.
    """

    def __init__(self, config, descriptor, deleter, deployer, readiness_client, artifact_writer=None):
        self.config = config
        self.descriptor = descriptor
        self.deleter = deleter
        self.deployer = deployer
        self.readiness_client = readiness_client
        self.artifact_writer = artifact_writer
        self.logger = get_logger("upgrader")

    async def delete_node(self, node_identity, drain=False):
        """Delete the infrastructure backing `node_identity`.

        `drain` is accepted for symmetry with agent node upgrades and ignored.
        """
        if not node_identity:
            raise ValueError("node_identity must not be empty")
        if drain:
            self.logger.debug(f"Ignoring drain request for control-plane node {node_identity}")

        self.logger.info(f"Deleting node {node_identity} in resource group {self.config.resource_group}")
        try:
            await self.deleter.delete(self.config.subscription_id, self.config.resource_group, node_identity)
        except ResourceError:
            self.logger.error(f"Failed to delete node {node_identity}")
            raise
        except Exception as e:
            self.logger.error(f"Failed to delete node {node_identity}: {e}")
            raise ResourceError(f"failed to delete {node_identity}: {e}") from e

    async def create_node(self, pool_name, ordinal):
        """Submit a deployment that adds a node at `ordinal` in `pool_name`.

        Returns once the deployment is accepted; readiness is checked by validate.
        """
        descriptor = self.descriptor.for_ordinal(ordinal)
        self.logger.info(f"Pool {pool_name} offset: {descriptor.offset}")
        self.logger.info(f"Pool {pool_name} set count to: {descriptor.count} temporarily during upgrade...")

        if self.config.write_debug_artifacts and self.artifact_writer:
            self.artifact_writer.write(descriptor, descriptor.parameters, self.config.debug_output_path)

        deployment_name = new_deployment_name(self.config.deployment_name_prefix)
        self.logger.info(f"Submitting deployment {deployment_name}")
        try:
            result = await self.deployer.deploy(
                self.config.resource_group,
                deployment_name,
                descriptor.render_template(),
                descriptor.parameters,
            )
        except DeploymentError:
            self.logger.error(f"Deployment {deployment_name} failed")
            raise
        except Exception as e:
            self.logger.error(f"Deployment {deployment_name} failed: {e}")
            raise DeploymentError(f"deployment {deployment_name} failed: {e}") from e

        return CreateResult(deployment_name=deployment_name, descriptor=descriptor, result=result)

    async def validate(self, node_identity):
        """Wait until `node_identity` reports ready or the upgrade timeout expires"""
        if not node_identity:
            self.logger.warning("Node name was empty. Skipping node condition check")
            return ValidationOutcome.SKIPPED

        if not self.config.endpoint:
            if not self.config.skip_validation_without_endpoint:
                raise ValidationContextError(f"no cluster endpoint configured to validate {node_identity}")
            self.logger.warning("Cluster endpoint was empty. Skipping node condition check")
            return ValidationOutcome.SKIPPED

        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            # wait_for cancels the poll task and waits for it before raising
            await asyncio.wait_for(self._poll_until_ready(node_identity), timeout=self.config.timeout_s)
        except asyncio.TimeoutError:
            elapsed = loop.time() - started
            self.logger.error(f"Node {node_identity} was not ready within {self.config.timeout_s}s")
            raise ReadinessTimeoutError(node_identity, self.config.timeout_s, elapsed) from None

        return ValidationOutcome.READY

    async def _poll_until_ready(self, node_name):
        handle = await self.readiness_client.connect(
            self.config.endpoint, self.config.kubeconfig, self.config.poll_interval_s, self.config.timeout_s
        )
        try:
            while True:
                try:
                    state = await handle.get_node_status(node_name)
                except Exception as e:
                    self.logger.info(f"Node {node_name} status error: {e}")
                else:
                    if state == NodeReadinessState.READY:
                        self.logger.info(f"Node {node_name} is ready")
                        return
                    self.logger.info(f"Node {node_name} not ready yet...")

                await asyncio.sleep(self.config.poll_interval_s)
        finally:
            try:
                await asyncio.wait_for(handle.close(), timeout=self.config.poll_interval_s)
            except asyncio.TimeoutError:
                self.logger.warning(f"Closing status handle for node {node_name} timed out")


async def upgrade_node(upgrader, node, pool_name, ordinal, new_node=None):
    """Run delete, create and validate for a single node and collect the outcome"""
    logger = get_logger("upgrader")
    result = NodeUpgradeResult(node=node)
    # The replacement is provisioned under the same name unless told otherwise
    new_node = new_node or node

    try:
        await upgrader.delete_node(node)
        result.history.append({"event": "deleted", "node": node})

        created = await upgrader.create_node(pool_name, ordinal)
        result.deployment_name = created.deployment_name
        result.history.append({
            "event": "created",
            "deployment": created.deployment_name,
            "offset": created.descriptor.offset,
            "count": created.descriptor.count
        })

        result.validation = await upgrader.validate(new_node)
        result.history.append({"event": "validated", "node": new_node, "outcome": result.validation.value})

    except Exception as e:
        if isinstance(e, ReadinessTimeoutError):
            result.validation = ValidationOutcome.TIMED_OUT
        result.error = str(e)
        result.history.append({"event": "failed", "error": result.error})
        logger.error(f"Upgrade of node {node} failed: {e}")
        return result

    result.success = True
    logger.info(f"SUCCESS: Node {node} upgraded (validation {result.validation.value})")
    return result
