import pytest
from node_upgrade.errors import ResourceError
from node_upgrade.simulation import SimulatedResourceDeleter


class ExplodingDeleter(SimulatedResourceDeleter):
    async def delete(self, subscription_id, resource_group, resource_name):
        raise ConnectionError("network unreachable")


class TestDeleteNode:
    """Deleting the old node's infrastructure."""

    @pytest.mark.asyncio
    async def test_delete_uses_configured_subscription_and_group(self, upgrader_factory):
        deleter = SimulatedResourceDeleter()
        upgrader = upgrader_factory(deleter=deleter)

        await upgrader.delete_node("k8s-master-0")
        assert deleter.deleted == [("sub-1", "rg-1", "k8s-master-0")]

    @pytest.mark.asyncio
    async def test_drain_flag_has_no_effect(self, upgrader_factory):
        deleter = SimulatedResourceDeleter()
        upgrader = upgrader_factory(deleter=deleter)

        await upgrader.delete_node("k8s-master-0", drain=True)
        await upgrader.delete_node("k8s-master-1", drain=False)
        assert deleter.deleted == [
            ("sub-1", "rg-1", "k8s-master-0"),
            ("sub-1", "rg-1", "k8s-master-1"),
        ]

    @pytest.mark.asyncio
    async def test_resource_error_propagates_unchanged(self, upgrader_factory):
        upgrader = upgrader_factory(deleter=SimulatedResourceDeleter(fail=True))

        with pytest.raises(ResourceError, match="Simulated failure deleting k8s-master-0") as exc_info:
            await upgrader.delete_node("k8s-master-0")
        assert exc_info.value.__cause__ is None

    @pytest.mark.asyncio
    async def test_other_errors_are_wrapped(self, upgrader_factory):
        upgrader = upgrader_factory(deleter=ExplodingDeleter())

        with pytest.raises(ResourceError, match="network unreachable") as exc_info:
            await upgrader.delete_node("k8s-master-0")
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_empty_identity_rejected(self, upgrader_factory):
        deleter = SimulatedResourceDeleter()
        upgrader = upgrader_factory(deleter=deleter)

        with pytest.raises(ValueError, match="node_identity must not be empty"):
            await upgrader.delete_node("")
        assert deleter.deleted == []
