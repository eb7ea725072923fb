"""
PlotNFT External Collaborators

The registry depends on two things it does not own:

    BlockClock   current block height, used to validate plant dates and to
                 timestamp updates. Never moves backwards.
    FeeLedger    append-only record of mint fee payments. The registry only
                 logs the intent; balances are neither checked nor moved.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from plotnft.records import FeeTransfer


class BlockClock:
    """Monotonically non-decreasing block height source."""

    def __init__(self, height: int = 0):
        if height < 0:
            raise ValueError(f"block height cannot be negative: {height}")
        self._height = height

    @property
    def height(self) -> int:
        return self._height

    def set(self, height: int) -> int:
        """Move to an absolute height. Moving backwards raises ValueError."""
        if height < self._height:
            raise ValueError(
                f"block height must be monotonically increasing: "
                f"cannot go from {self._height} to {height}"
            )
        self._height = height
        return self._height

    def advance(self, blocks: int = 1) -> int:
        if blocks < 0:
            raise ValueError(f"cannot advance by a negative number of blocks: {blocks}")
        self._height += blocks
        return self._height

    def reset(self) -> None:
        self._height = 0

    def __repr__(self) -> str:
        return f"BlockClock(height={self._height})"


class FeeLedger:
    """Append-only list of fee transfers."""

    def __init__(self) -> None:
        self._transfers: List[FeeTransfer] = []

    def record(
        self,
        amount: int,
        sender: str,
        recipient: Optional[str],
        token_id: int = 0,
        block_height: int = 0,
    ) -> FeeTransfer:
        transfer = FeeTransfer(
            amount=amount,
            sender=sender,
            recipient=recipient,
            token_id=token_id,
            block_height=block_height,
        )
        self._transfers.append(transfer)
        return transfer

    @property
    def transfers(self) -> List[FeeTransfer]:
        return list(self._transfers)

    def total_paid_by(self, principal: str) -> int:
        return sum(t.amount for t in self._transfers if t.sender == principal)

    def total_received_by(self, principal: str) -> int:
        return sum(t.amount for t in self._transfers if t.recipient == principal)

    def clear(self) -> None:
        self._transfers.clear()

    def __len__(self) -> int:
        return len(self._transfers)

    def __iter__(self) -> Iterator[FeeTransfer]:
        return iter(list(self._transfers))
