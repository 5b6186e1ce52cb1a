import pytest
from node_upgrade.models import DeploymentDescriptor, UpgradeConfig
from node_upgrade.upgrader import NodeUpgrader
from node_upgrade.simulation import (
    SimulatedResourceDeleter, SimulatedTemplateDeployer, SimulatedReadinessClient
)


def make_upgrader(deleter=None, deployer=None, readiness=None, artifact_writer=None, **config_overrides):
    settings = dict(
        subscription_id="sub-1",
        resource_group="rg-1",
        kubeconfig="apiVersion: v1\nkind: Config\n",
        endpoint="cluster.example.com",
        timeout_s=1.0,
        poll_interval_s=0.05,
    )
    settings.update(config_overrides)
    descriptor = DeploymentDescriptor(
        template={"resources": [], "variables": {"masterOffset": 0, "masterCount": 3}},
        parameters={"dnsPrefix": {"value": "cluster"}}
    )
    return NodeUpgrader(
        UpgradeConfig(**settings),
        descriptor,
        deleter or SimulatedResourceDeleter(),
        deployer or SimulatedTemplateDeployer(),
        readiness or SimulatedReadinessClient(),
        artifact_writer=artifact_writer
    )


@pytest.fixture
def upgrader_factory():
    return make_upgrader
