"""
PlotNFT Records

Value types held by the registry. Records are frozen; the registry replaces a
stored record instead of mutating it, so a record handed out by a read
accessor never changes underneath the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Coordinates:
    """Geographic position of a plot, in decimal degrees."""
    lat: Decimal
    long: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {"lat": str(self.lat), "long": str(self.long)}


@dataclass(frozen=True)
class PlotRecord:
    """
    Metadata of a minted plot.

    ``owner`` mirrors the registry's ownership entry for the token.
    """
    token_id: int
    location: str
    coordinates: Coordinates
    tree_count: int
    plant_date: int
    species: str
    carbon_estimate: Decimal
    partner_id: int
    status: bool
    owner: str

    def with_owner(self, owner: str) -> "PlotRecord":
        return replace(self, owner=owner)

    def with_update(self, location: str, tree_count: int) -> "PlotRecord":
        return replace(self, location=location, tree_count=tree_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token_id": self.token_id,
            "location": self.location,
            "coordinates": self.coordinates.to_dict(),
            "tree_count": self.tree_count,
            "plant_date": self.plant_date,
            "species": self.species,
            "carbon_estimate": str(self.carbon_estimate),
            "partner_id": self.partner_id,
            "status": self.status,
            "owner": self.owner,
        }


@dataclass(frozen=True)
class UpdateRecord:
    """Last update applied to a plot."""
    location: str
    tree_count: int
    timestamp: int  # block height
    updater: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "tree_count": self.tree_count,
            "timestamp": self.timestamp,
            "updater": self.updater,
        }


@dataclass(frozen=True)
class FeeTransfer:
    """Mint fee payment intent recorded on the fee ledger."""
    amount: int
    sender: str
    recipient: Optional[str]
    token_id: int = 0
    block_height: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "sender": self.sender,
            "recipient": self.recipient,
            "token_id": self.token_id,
            "block_height": self.block_height,
        }


@dataclass
class RegistrySettings:
    """Scalar configuration of a registry instance."""
    contract_owner: str
    max_tokens: int
    mint_fee: int
    last_token_id: int = 0
    authority_contract: Optional[str] = None

    @property
    def authority_configured(self) -> bool:
        return self.authority_contract is not None

    def copy(self) -> "RegistrySettings":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contract_owner": self.contract_owner,
            "max_tokens": self.max_tokens,
            "mint_fee": self.mint_fee,
            "last_token_id": self.last_token_id,
            "authority_contract": self.authority_contract,
        }
