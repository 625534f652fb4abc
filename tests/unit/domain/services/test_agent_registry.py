"""
Tests for AgentRegistry domain service.
"""
import pytest

from machine_exchange.domain.entities.agent import Agent
from machine_exchange.domain.entities.gateway import GatewayState
from machine_exchange.domain.exceptions import (
    AlreadyRegisteredError,
    FeeOutOfRangeError,
    InvalidIdentityError,
    NotRegisteredError,
    UnauthorizedAgentError,
)
from machine_exchange.domain.services.agent_registry import AgentRegistry
from machine_exchange.domain.services.fee_calculator import FeeCalculator


@pytest.fixture
def state():
    return GatewayState.deploy(deployer="owner", address="gateway", base_token="BASE", router="router")


@pytest.fixture
def registry():
    return AgentRegistry(FeeCalculator(granularity=10000), default_fee=1000)


class TestAgentRegistryConstruction:

    def test_default_fee_must_be_below_granularity(self):
        with pytest.raises(FeeOutOfRangeError):
            AgentRegistry(FeeCalculator(granularity=10000), default_fee=10000)


class TestAdd:
    """add()"""

    def test_add_uses_default_fees(self, registry, state):
        agent = registry.add(state, "machine-1")
        assert agent == Agent("machine-1", 1000, 1000)
        assert state.machines["machine-1"] == agent

    def test_add_twice_raises(self, registry, state):
        registry.add(state, "machine-1")
        with pytest.raises(AlreadyRegisteredError):
            registry.add(state, "machine-1")
        assert len(state.machines) == 1

    def test_add_normalizes_identity(self, registry, state):
        registry.add(state, " machine-1 ")
        assert "machine-1" in state.machines

    def test_add_rejects_empty_identity(self, registry, state):
        with pytest.raises(InvalidIdentityError):
            registry.add(state, "")


class TestRemove:
    """remove()"""

    def test_remove_registered(self, registry, state):
        registry.add(state, "machine-1")
        assert registry.remove(state, "machine-1") is True
        assert "machine-1" not in state.machines

    def test_remove_is_idempotent(self, registry, state):
        assert registry.remove(state, "machine-1") is False
        assert registry.remove(state, "machine-1") is False
        assert state.machines == {}


class TestEditFees:
    """edit_fees()"""

    def test_edit_replaces_both_fees(self, registry, state):
        registry.add(state, "machine-1")
        agent = registry.edit_fees(state, "machine-1", buy_fee=0, sell_fee=9999)
        assert agent == Agent("machine-1", 0, 9999)
        assert state.machines["machine-1"] == agent

    def test_edit_unregistered_raises(self, registry, state):
        with pytest.raises(NotRegisteredError):
            registry.edit_fees(state, "machine-1", buy_fee=1, sell_fee=1)

    @pytest.mark.parametrize("buy_fee,sell_fee", [
        (10000, 0),
        (0, 10000),
        (10001, 0),
        (0, 10001),
        (-1, 0),
        (0, 2**256),
    ])
    def test_edit_out_of_range_leaves_fees_unchanged(self, registry, state, buy_fee, sell_fee):
        """Either fee out of range rejects the whole edit."""
        registry.add(state, "machine-1")
        with pytest.raises(FeeOutOfRangeError) as exc_info:
            registry.edit_fees(state, "machine-1", buy_fee=buy_fee, sell_fee=sell_fee)
        assert exc_info.value.error_code == "FEE_OUT_OF_RANGE"
        assert state.machines["machine-1"] == Agent("machine-1", 1000, 1000)

    def test_not_registered_is_checked_before_fees(self, registry, state):
        with pytest.raises(NotRegisteredError):
            registry.edit_fees(state, "ghost", buy_fee=10000, sell_fee=10000)


class TestLookupAndAuthorize:

    def test_lookup(self, registry, state):
        registry.add(state, "machine-1")
        assert registry.lookup(state, "machine-1").identity == "machine-1"
        assert registry.lookup(state, "machine-2") is None
        assert registry.lookup(state, None) is None

    def test_list_agents_sorted(self, registry, state):
        registry.add(state, "b")
        registry.add(state, "a")
        assert [agent.identity for agent in registry.list_agents(state)] == ["a", "b"]

    def test_authorize_registered(self, registry, state):
        registry.add(state, "machine-1")
        authorization = registry.authorize(state, "machine-1")
        assert authorization
        assert authorization.agent.identity == "machine-1"

    def test_authorize_unregistered(self, registry, state):
        authorization = registry.authorize(state, "mallory")
        assert not authorization
        assert isinstance(authorization.error, UnauthorizedAgentError)

    def test_owner_is_not_implicitly_an_agent(self, registry, state):
        assert not registry.authorize(state, "owner")
