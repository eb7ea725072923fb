"""
PlotNFT Registry

In-memory registry of plot tokens: agricultural plots carrying tree and
carbon metadata, minted against a fee paid to a configured authority.

State
─────

    settings    contract owner, max supply, mint fee, token counter and
                the write-once authority principal
    plots       token id -> PlotRecord
    owners      token id -> owning principal (authoritative for access checks)
    updates     token id -> last UpdateRecord

A token is present in ``plots`` exactly when it is present in ``owners``,
and ``PlotRecord.owner`` always equals the ``owners`` entry.

Operations
──────────

Every mutating operation receives the acting ``caller`` (and the current
``block_height`` where time matters) as arguments and returns a ``Result``.
All checks run before the first write, so a rejected call leaves state,
fee ledger and event stream exactly as they were.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from plotnft.config import PlotNFTConfig, get_config
from plotnft.events import (
    AuthorityConfigured,
    Event,
    EventBus,
    MaxTokensChanged,
    MintFeeChanged,
    PlotBurned,
    PlotMinted,
    PlotTransferred,
    PlotUpdated,
    get_event_bus,
)
from plotnft.ledger import FeeLedger
from plotnft.observability import AuditLogger, Component, get_correlation_id, get_logger
from plotnft.records import PlotRecord, RegistrySettings, UpdateRecord
from plotnft.result import ErrorCode, Result
from plotnft.validation import Validators


def _resource_type(resource_id: Any) -> str:
    return "settings" if resource_id == "settings" else "plot"


class PlotRegistry:
    """
    Plot token registry.

    Without an explicit ``event_bus`` the registry publishes to the
    process-wide ``get_event_bus()``, which every other default-constructed
    registry shares. Pass a dedicated ``EventBus`` to observe one registry
    in isolation.

    Example:
        registry = PlotRegistry(contract_owner="ST1TEST")
        registry.configure_authority("ST1TEST", "ST2AUTH")
        result = registry.mint(
            "ST1TEST", 1000,
            location="ForestA", coordinates=(40, -75), tree_count=100,
            plant_date=1000, species="Oak", carbon_estimate=500,
            partner_id=1, status=True,
        )
        assert result.value == 1
    """

    def __init__(
        self,
        contract_owner: Optional[str] = None,
        *,
        max_tokens: Optional[int] = None,
        mint_fee: Optional[int] = None,
        burn_address: Optional[str] = None,
        ledger: Optional[FeeLedger] = None,
        event_bus: Optional[EventBus] = None,
        config: Optional[PlotNFTConfig] = None,
    ):
        config = config or get_config()
        defaults = config.registry

        owner = contract_owner if contract_owner is not None else defaults.contract_owner.get()
        Validators.validate_principal(owner, "contract_owner").raise_if_invalid()
        max_tokens = max_tokens if max_tokens is not None else defaults.max_tokens.get()
        Validators.validate_integer(max_tokens, "max_tokens", min_value=1).raise_if_invalid()
        mint_fee = mint_fee if mint_fee is not None else defaults.mint_fee.get()
        Validators.validate_integer(mint_fee, "mint_fee", min_value=0).raise_if_invalid()

        self._settings = RegistrySettings(
            contract_owner=owner,
            max_tokens=max_tokens,
            mint_fee=mint_fee,
        )
        self._burn_address = burn_address if burn_address is not None else defaults.burn_address.get()

        self._plots: Dict[int, PlotRecord] = {}
        self._owners: Dict[int, str] = {}
        self._updates: Dict[int, UpdateRecord] = {}

        self._ledger = ledger if ledger is not None else FeeLedger()
        self._event_bus = event_bus if event_bus is not None else get_event_bus()
        self._logger = get_logger("plots", Component.REGISTRY)
        self._audit: Optional[AuditLogger] = None
        if config.observability.audit_enabled.get():
            self._audit = AuditLogger(get_logger("trail", Component.AUDIT))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def settings(self) -> RegistrySettings:
        """Snapshot of the current configuration."""
        return self._settings.copy()

    @property
    def contract_owner(self) -> str:
        return self._settings.contract_owner

    @property
    def authority_contract(self) -> Optional[str]:
        return self._settings.authority_contract

    @property
    def max_tokens(self) -> int:
        return self._settings.max_tokens

    @property
    def mint_fee(self) -> int:
        return self._settings.mint_fee

    @property
    def burn_address(self) -> str:
        return self._burn_address

    @property
    def ledger(self) -> FeeLedger:
        return self._ledger

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def audit(self) -> Optional[AuditLogger]:
        return self._audit

    def __contains__(self, token_id: object) -> bool:
        return token_id in self._owners

    def __len__(self) -> int:
        return len(self._owners)

    def token_ids(self) -> List[int]:
        return sorted(self._owners)

    # ------------------------------------------------------------------
    # Outcome plumbing
    # ------------------------------------------------------------------

    def _reject(self, caller: str, action: str, resource_id: Any, code: ErrorCode, **context: Any) -> Result:
        self._logger.warning(
            f"{action} rejected: {code.name}",
            operation=action,
            error_code=code.name,
            caller=caller,
            resource_id=resource_id,
            **context,
        )
        if self._audit:
            self._audit.log(
                caller, action, _resource_type(resource_id), str(resource_id), "failure",
                error_code=int(code), **context,
            )
        return Result.failure(code)

    def _accept(self, caller: str, action: str, resource_id: Any, value: Any, event: Event, **context: Any) -> Result:
        event.correlation_id = get_correlation_id()
        self._event_bus.publish(event)
        self._logger.info(
            f"{action} succeeded",
            operation=action,
            caller=caller,
            resource_id=resource_id,
            **context,
        )
        if self._audit:
            self._audit.log(caller, action, _resource_type(resource_id), str(resource_id), "success", **context)
        return Result.success(value)

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def configure_authority(self, caller: str, principal: str) -> Result[bool]:
        """Set the authority principal. Succeeds at most once per registry."""
        action = "configure_authority"
        valid = Validators.validate_principal(principal, "authority").is_valid
        if not valid or principal == self._burn_address:
            return self._reject(caller, action, "settings", ErrorCode.AUTHORITY_NOT_VERIFIED, principal=principal)
        if caller != self._settings.contract_owner:
            return self._reject(caller, action, "settings", ErrorCode.OWNER_ONLY)
        if self._settings.authority_configured:
            return self._reject(caller, action, "settings", ErrorCode.NOT_AUTHORIZED)

        self._settings.authority_contract = principal
        return self._accept(
            caller, action, "settings", True,
            AuthorityConfigured(authority=principal, configured_by=caller),
            principal=principal,
        )

    def set_max_tokens(self, caller: str, new_max: int) -> Result[bool]:
        action = "set_max_tokens"
        if caller != self._settings.contract_owner:
            return self._reject(caller, action, "settings", ErrorCode.OWNER_ONLY)
        if not Validators.validate_integer(new_max, "max_tokens", min_value=1).is_valid:
            return self._reject(caller, action, "settings", ErrorCode.INVALID_MAX_TOKENS, new_max=new_max)
        if not self._settings.authority_configured:
            return self._reject(caller, action, "settings", ErrorCode.AUTHORITY_NOT_VERIFIED)

        old_max = self._settings.max_tokens
        self._settings.max_tokens = new_max
        return self._accept(
            caller, action, "settings", True,
            MaxTokensChanged(old_max=old_max, new_max=new_max),
            new_max=new_max,
        )

    def set_mint_fee(self, caller: str, new_fee: int) -> Result[bool]:
        action = "set_mint_fee"
        if caller != self._settings.contract_owner:
            return self._reject(caller, action, "settings", ErrorCode.OWNER_ONLY)
        if not Validators.validate_integer(new_fee, "mint_fee", min_value=0).is_valid:
            return self._reject(caller, action, "settings", ErrorCode.INVALID_MINT_FEE, new_fee=new_fee)
        if not self._settings.authority_configured:
            return self._reject(caller, action, "settings", ErrorCode.AUTHORITY_NOT_VERIFIED)

        old_fee = self._settings.mint_fee
        self._settings.mint_fee = new_fee
        return self._accept(
            caller, action, "settings", True,
            MintFeeChanged(old_fee=old_fee, new_fee=new_fee),
            new_fee=new_fee,
        )

    # ------------------------------------------------------------------
    # Token lifecycle
    # ------------------------------------------------------------------

    def mint(
        self,
        caller: str,
        block_height: int,
        location: str,
        coordinates: Any,
        tree_count: int,
        plant_date: int,
        species: str,
        carbon_estimate: Any,
        partner_id: int,
        status: bool,
    ) -> Result[int]:
        """
        Mint a new plot owned by ``caller``.

        Checks run in a fixed order and the first failing check decides the
        error code. On success the mint fee is recorded on the fee ledger
        (caller -> authority) and the new token id is returned.
        """
        action = "mint"
        Validators.validate_principal(caller, "caller").raise_if_invalid()
        Validators.validate_block_height(block_height).raise_if_invalid()
        token_id = self._settings.last_token_id + 1

        if token_id > self._settings.max_tokens:
            return self._reject(caller, action, token_id, ErrorCode.MAX_TOKENS_EXCEEDED)
        if not Validators.validate_location(location).is_valid:
            return self._reject(caller, action, token_id, ErrorCode.INVALID_LOCATION)
        coords = Validators.validate_coordinates(coordinates)
        if not coords.is_valid:
            return self._reject(caller, action, token_id, ErrorCode.INVALID_COORDINATES)
        if not Validators.validate_tree_count(tree_count).is_valid:
            return self._reject(caller, action, token_id, ErrorCode.INVALID_TREE_COUNT)
        if not Validators.validate_plant_date(plant_date, block_height).is_valid:
            return self._reject(
                caller, action, token_id, ErrorCode.INVALID_PLANT_DATE,
                plant_date=plant_date, block_height=block_height,
            )
        if not Validators.validate_species(species).is_valid:
            return self._reject(caller, action, token_id, ErrorCode.INVALID_SPECIES)
        carbon = Validators.validate_carbon_estimate(carbon_estimate)
        if not carbon.is_valid:
            return self._reject(caller, action, token_id, ErrorCode.INVALID_CARBON_ESTIMATE)
        if not Validators.validate_partner_id(partner_id).is_valid:
            return self._reject(caller, action, token_id, ErrorCode.INVALID_PARTNER_ID)
        authority = self._settings.authority_contract
        if authority is None:
            return self._reject(caller, action, token_id, ErrorCode.AUTHORITY_NOT_VERIFIED)

        fee = self._settings.mint_fee
        self._ledger.record(
            amount=fee,
            sender=caller,
            recipient=authority,
            token_id=token_id,
            block_height=block_height,
        )

        self._plots[token_id] = PlotRecord(
            token_id=token_id,
            location=location,
            coordinates=coords.sanitized_value,
            tree_count=tree_count,
            plant_date=plant_date,
            species=species,
            carbon_estimate=carbon.sanitized_value,
            partner_id=partner_id,
            status=bool(status),
            owner=caller,
        )
        self._owners[token_id] = caller
        self._settings.last_token_id = token_id

        return self._accept(
            caller, action, token_id, token_id,
            PlotMinted(
                token_id=token_id,
                owner=caller,
                location=location,
                species=species,
                fee_paid=fee,
                fee_recipient=authority,
                block_height=block_height,
            ),
            fee=fee,
        )

    def transfer(self, caller: str, token_id: int, recipient: str) -> Result[bool]:
        action = "transfer"
        owner = self._owners.get(token_id)
        if owner is None:
            return self._reject(caller, action, token_id, ErrorCode.TOKEN_NOT_FOUND)
        if owner != caller:
            return self._reject(caller, action, token_id, ErrorCode.NOT_AUTHORIZED)
        if not Validators.validate_principal(recipient, "recipient").is_valid:
            return self._reject(caller, action, token_id, ErrorCode.NOT_AUTHORIZED, recipient=recipient)

        self._owners[token_id] = recipient
        self._plots[token_id] = self._plots[token_id].with_owner(recipient)
        return self._accept(
            caller, action, token_id, True,
            PlotTransferred(token_id=token_id, sender=caller, recipient=recipient),
            recipient=recipient,
        )

    def update(
        self,
        caller: str,
        block_height: int,
        token_id: int,
        new_location: str,
        new_tree_count: int,
    ) -> Result[bool]:
        """Overwrite location and tree count, replacing the token's update record."""
        action = "update"
        Validators.validate_block_height(block_height).raise_if_invalid()
        record = self._plots.get(token_id)
        if record is None:
            return self._reject(caller, action, token_id, ErrorCode.TOKEN_NOT_FOUND)
        if self._owners[token_id] != caller:
            return self._reject(caller, action, token_id, ErrorCode.NOT_AUTHORIZED)
        if not Validators.validate_location(new_location).is_valid:
            return self._reject(caller, action, token_id, ErrorCode.INVALID_LOCATION)
        if not Validators.validate_tree_count(new_tree_count).is_valid:
            return self._reject(caller, action, token_id, ErrorCode.INVALID_TREE_COUNT)

        self._plots[token_id] = record.with_update(new_location, new_tree_count)
        self._updates[token_id] = UpdateRecord(
            location=new_location,
            tree_count=new_tree_count,
            timestamp=block_height,
            updater=caller,
        )
        return self._accept(
            caller, action, token_id, True,
            PlotUpdated(
                token_id=token_id,
                location=new_location,
                tree_count=new_tree_count,
                updater=caller,
                block_height=block_height,
            ),
            tree_count=new_tree_count,
        )

    def burn(self, caller: str, token_id: int) -> Result[bool]:
        action = "burn"
        owner = self._owners.get(token_id)
        if owner is None:
            return self._reject(caller, action, token_id, ErrorCode.TOKEN_NOT_FOUND)
        if owner != caller:
            return self._reject(caller, action, token_id, ErrorCode.NOT_AUTHORIZED)

        del self._owners[token_id]
        del self._plots[token_id]
        self._updates.pop(token_id, None)
        return self._accept(
            caller, action, token_id, True,
            PlotBurned(token_id=token_id, owner=caller),
        )

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def get_details(self, token_id: int) -> Optional[PlotRecord]:
        return self._plots.get(token_id)

    def get_update(self, token_id: int) -> Optional[UpdateRecord]:
        return self._updates.get(token_id)

    def get_token_count(self) -> Result[int]:
        return Result.success(self._settings.last_token_id)

    def get_owner(self, token_id: int) -> Result[Optional[str]]:
        return Result.success(self._owners.get(token_id))
