"""
PlotNFT Simulator

Contract-test harness around ``PlotRegistry``. The simulator holds the
ambient context a chain would supply (the current caller and block height)
and forwards every call to the registry with that context filled in.

    sim = RegistrySimulator()
    sim.set_authority_contract("ST2TEST")
    sim.block_height = 1000
    result = sim.mint_plot("ForestA", {"lat": 40, "long": -75}, 100, 1000,
                           "Oak", 500, 1, True)

    with sim.as_caller("ST3OTHER"):
        sim.transfer_plot(result.value, "ST4X")   # rejected, not the owner

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from plotnft.config import PlotNFTConfig
from plotnft.events import EventBus
from plotnft.ledger import BlockClock, FeeLedger
from plotnft.observability import Component, get_logger
from plotnft.records import PlotRecord
from plotnft.registry import PlotRegistry
from plotnft.result import Result
from plotnft.validation import Validators


class RegistrySimulator:
    """Registry plus a mutable caller and block clock."""

    def __init__(
        self,
        contract_owner: Optional[str] = None,
        *,
        event_bus: Optional[EventBus] = None,
        config: Optional[PlotNFTConfig] = None,
    ):
        self._contract_owner = contract_owner
        self._event_bus = event_bus if event_bus is not None else EventBus()
        self._config = config
        self._logger = get_logger("harness", Component.SIMULATOR)
        self.reset()

    def reset(self) -> None:
        """Start over with an empty registry, clock and ledger."""
        self.clock = BlockClock()
        self.ledger = FeeLedger()
        self.registry = PlotRegistry(
            self._contract_owner,
            ledger=self.ledger,
            event_bus=self._event_bus,
            config=self._config,
        )
        self._caller = self.registry.contract_owner
        self._logger.debug("simulator reset", contract_owner=self._caller)

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def caller(self) -> str:
        return self._caller

    @caller.setter
    def caller(self, principal: str) -> None:
        Validators.validate_principal(principal, "caller").raise_if_invalid()
        self._caller = principal

    @property
    def block_height(self) -> int:
        return self.clock.height

    @block_height.setter
    def block_height(self, height: int) -> None:
        self.clock.set(height)

    def mine(self, blocks: int = 1) -> int:
        return self.clock.advance(blocks)

    @contextmanager
    def as_caller(self, principal: str) -> Iterator["RegistrySimulator"]:
        """Temporarily act as ``principal``."""
        previous = self._caller
        self.caller = principal
        try:
            yield self
        finally:
            self._caller = previous

    # Administration

    def set_authority_contract(self, principal: str) -> Result[bool]:
        return self.registry.configure_authority(self._caller, principal)

    def set_max_tokens(self, new_max: int) -> Result[bool]:
        return self.registry.set_max_tokens(self._caller, new_max)

    def set_mint_fee(self, new_fee: int) -> Result[bool]:
        return self.registry.set_mint_fee(self._caller, new_fee)

    # Token lifecycle

    def mint_plot(
        self,
        location: str,
        coordinates: Any,
        tree_count: int,
        plant_date: int,
        species: str,
        carbon_estimate: Any,
        partner_id: int,
        status: bool,
    ) -> Result[int]:
        return self.registry.mint(
            self._caller,
            self.clock.height,
            location,
            coordinates,
            tree_count,
            plant_date,
            species,
            carbon_estimate,
            partner_id,
            status,
        )

    def transfer_plot(self, token_id: int, recipient: str) -> Result[bool]:
        return self.registry.transfer(self._caller, token_id, recipient)

    def update_plot(self, token_id: int, new_location: str, new_tree_count: int) -> Result[bool]:
        return self.registry.update(self._caller, self.clock.height, token_id, new_location, new_tree_count)

    def burn_plot(self, token_id: int) -> Result[bool]:
        return self.registry.burn(self._caller, token_id)

    # Queries

    def get_plot_details(self, token_id: int) -> Optional[PlotRecord]:
        return self.registry.get_details(token_id)

    def get_token_count(self) -> Result[int]:
        return self.registry.get_token_count()

    def get_owner(self, token_id: int) -> Result[Optional[str]]:
        return self.registry.get_owner(token_id)
