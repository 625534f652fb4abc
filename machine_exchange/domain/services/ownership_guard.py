"""
OwnershipGuard Domain Service

Single-owner authorization used as a precondition gate by every
administrative operation.
"""
from machine_exchange.domain.entities.gateway import GatewayState
from machine_exchange.domain.exceptions import NotOwnerError
from machine_exchange.domain.value_objects.authorization import Authorization
from machine_exchange.domain.value_objects.units import Address, normalize_address


class OwnershipGuard:
    """
    Owner capability checks and ownership transfer.

    Ownership transfer is a single step: the current owner names the new
    owner and the change takes effect immediately, without the new owner
    accepting. A transfer to a wrong identity can only be undone by that
    identity transferring ownership back. This is an accepted tradeoff for
    a simpler administrative surface.
    """

    def check_owner(self, state: GatewayState, caller: Address) -> Authorization:
        """Check that caller is the current owner, without raising."""
        if not isinstance(caller, str) or caller.strip() != state.owner:
            return Authorization.deny(caller, NotOwnerError(caller))
        return Authorization.allow(caller)

    def require_owner(self, state: GatewayState, caller: Address) -> None:
        """
        Raises:
            NotOwnerError: If caller is not the current owner
        """
        self.check_owner(state, caller).unwrap()

    def transfer_ownership(
        self,
        state: GatewayState,
        caller: Address,
        new_owner: Address,
    ) -> Address:
        """
        Replace the owner.

        Returns:
            The previous owner

        Raises:
            NotOwnerError: If caller is not the current owner
            InvalidIdentityError: If new_owner is not a valid identity
        """
        self.require_owner(state, caller)
        new_owner = normalize_address(new_owner)
        previous = state.owner
        state.owner = new_owner
        return previous
