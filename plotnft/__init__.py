"""
PlotNFT — Plot Token Registry

In-memory registry for plot tokens: land plots carrying tree count, species
and carbon estimate metadata, minted against a fee paid to a configured
authority.

Architecture
────────────

    ┌─────────────────────────────────────────────────────────────────────────┐
    │                          PLOT TOKEN REGISTRY                             │
    │                                                                          │
    │  HARNESS                                                                 │
    │    simulator.py      Mutable caller / block height around the registry   │
    │                                                                          │
    │  CORE                                                                    │
    │    registry.py       Mint, transfer, update, burn, admin settings        │
    │    validation.py     Field rules for plot metadata                       │
    │    result.py         Tagged results and numeric error codes              │
    │    records.py        Frozen record types                                 │
    │                                                                          │
    │  COLLABORATORS                                                           │
    │    ledger.py         Block clock and fee-transfer ledger                 │
    │    events.py         Domain events and synchronous event bus             │
    │                                                                          │
    │  AMBIENT                                                                 │
    │    config.py         YAML / env configuration with schema validation     │
    │    observability.py  Structured logging and hash-chained audit trail     │
    │                                                                          │
    └─────────────────────────────────────────────────────────────────────────┘

Design Principles
─────────────────

    Explicit Context: The acting principal and the block height are
    arguments of every operation, never ambient globals.

    No Partial Writes: Every check precedes the first mutation. A rejected
    call leaves registry state, fee ledger and event stream untouched.

    Failures Are Values: Mutating operations return a Result carrying either
    the payload or an ErrorCode. Queries never fail; absence is None.

Copyright (c) 2026 Momentum. All rights reserved.
"""

__version__ = "0.1.0"


def __getattr__(name):
    """Lazy import registry modules on first access."""

    if name in ("PlotRegistry",):
        from plotnft import registry
        return getattr(registry, name)

    if name in ("RegistrySimulator",):
        from plotnft import simulator
        return getattr(simulator, name)

    if name in ("ErrorCode", "Result", "RegistryError"):
        from plotnft import result
        return getattr(result, name)

    if name in ("Coordinates", "PlotRecord", "UpdateRecord", "FeeTransfer", "RegistrySettings"):
        from plotnft import records
        return getattr(records, name)

    if name in ("BlockClock", "FeeLedger"):
        from plotnft import ledger
        return getattr(ledger, name)

    raise AttributeError(f"module 'plotnft' has no attribute '{name}'")


__all__ = [
    "__version__",
    "PlotRegistry",
    "RegistrySimulator",
    "ErrorCode",
    "Result",
    "RegistryError",
    "Coordinates",
    "PlotRecord",
    "UpdateRecord",
    "FeeTransfer",
    "RegistrySettings",
    "BlockClock",
    "FeeLedger",
]
