"""
Tests for ManageMachinesUseCase.
"""
import logging

import pytest

from machine_exchange.application.use_cases.manage_machines import ManageMachinesUseCase
from machine_exchange.domain.entities.agent import Agent
from machine_exchange.domain.entities.gateway import GatewayState
from machine_exchange.domain.exceptions import (
    AlreadyRegisteredError,
    FeeOutOfRangeError,
    NotOwnerError,
)
from machine_exchange.domain.services.agent_registry import AgentRegistry
from machine_exchange.domain.services.fee_calculator import FeeCalculator
from machine_exchange.domain.services.ownership_guard import OwnershipGuard


class TestManageMachinesUseCase:
    """Tests for ManageMachinesUseCase."""

    @pytest.fixture
    def state(self):
        return GatewayState.deploy(deployer="owner", address="gateway", base_token="BASE", router="router")

    @pytest.fixture
    def use_case(self):
        registry = AgentRegistry(FeeCalculator(granularity=10000), default_fee=1000)
        return ManageMachinesUseCase(registry=registry, guard=OwnershipGuard())

    def test_add_machine(self, use_case, state):
        agent = use_case.add_machine(state, "owner", "machine-1")
        assert agent == Agent("machine-1", 1000, 1000)

    def test_add_machine_twice(self, use_case, state):
        use_case.add_machine(state, "owner", "machine-1")
        with pytest.raises(AlreadyRegisteredError):
            use_case.add_machine(state, "owner", "machine-1")

    def test_remove_machine(self, use_case, state):
        use_case.add_machine(state, "owner", "machine-1")
        assert use_case.remove_machine(state, "owner", "machine-1") is True
        assert use_case.remove_machine(state, "owner", "machine-1") is False

    def test_edit_machine_fees(self, use_case, state):
        use_case.add_machine(state, "owner", "machine-1")
        agent = use_case.edit_machine_fees(state, "owner", "machine-1", 10, 20)
        assert (agent.buy_fee, agent.sell_fee) == (10, 20)

    def test_edit_fee_at_granularity_rejected(self, use_case, state):
        use_case.add_machine(state, "owner", "machine-1")
        with pytest.raises(FeeOutOfRangeError):
            use_case.edit_machine_fees(state, "owner", "machine-1", 10000, 0)

    def test_transfer_ownership(self, use_case, state):
        assert use_case.transfer_ownership(state, "owner", "bob") == "owner"
        assert state.owner == "bob"
        with pytest.raises(NotOwnerError):
            use_case.add_machine(state, "owner", "machine-1")
        use_case.add_machine(state, "bob", "machine-1")

    @pytest.mark.parametrize("operation,args", [
        ("add_machine", ("machine-2",)),
        ("remove_machine", ("machine-1",)),
        ("edit_machine_fees", ("machine-1", 1, 1)),
        ("transfer_ownership", ("mallory",)),
    ])
    def test_non_owner_leaves_state_unchanged(self, use_case, state, operation, args):
        """Every administrative operation is rejected for non-owners."""
        use_case.add_machine(state, "owner", "machine-1")
        before = state.snapshot()

        with pytest.raises(NotOwnerError):
            getattr(use_case, operation)(state, "mallory", *args)

        assert state == before

    def test_agent_cannot_administer(self, use_case, state):
        use_case.add_machine(state, "owner", "machine-1")
        with pytest.raises(NotOwnerError):
            use_case.add_machine(state, "machine-1", "machine-2")

    def test_rejection_is_logged(self, use_case, state, caplog):
        with caplog.at_level(logging.WARNING):
            with pytest.raises(NotOwnerError):
                use_case.add_machine(state, "mallory", "machine-1")
        assert "non-owner mallory" in caplog.text
