import os
import pathlib
import sys

import pytest


# Ensure repo root is on PYTHONPATH for direct package imports (e.g. `import plotnft`).
_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from plotnft.config import get_config_manager  # noqa: E402
from plotnft.events import EventBus  # noqa: E402
from plotnft.registry import PlotRegistry  # noqa: E402
from plotnft.simulator import RegistrySimulator  # noqa: E402


OWNER = "ST1TEST"
AUTHORITY = "ST2TEST"


@pytest.fixture(autouse=True)
def _clean_config(monkeypatch: pytest.MonkeyPatch):
    """Every test starts from default configuration with no PLOTNFT_* overrides."""
    for name in list(os.environ):
        if name.startswith("PLOTNFT_"):
            monkeypatch.delenv(name, raising=False)
    get_config_manager().reset()
    yield
    get_config_manager().reset()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def registry(bus: EventBus) -> PlotRegistry:
    return PlotRegistry(OWNER, event_bus=bus)


@pytest.fixture
def authorized_registry(registry: PlotRegistry) -> PlotRegistry:
    assert registry.configure_authority(OWNER, AUTHORITY).ok
    return registry


@pytest.fixture
def sim(bus: EventBus) -> RegistrySimulator:
    return RegistrySimulator(OWNER, event_bus=bus)


@pytest.fixture
def plot_args() -> dict:
    """Keyword arguments for a valid mint at block height 1000."""
    return {
        "location": "ForestA",
        "coordinates": {"lat": 40, "long": -75},
        "tree_count": 100,
        "plant_date": 1000,
        "species": "Oak",
        "carbon_estimate": 500,
        "partner_id": 1,
        "status": True,
    }
