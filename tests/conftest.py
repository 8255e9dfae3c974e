import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from shieldsim.combat.simulator import ShieldSimulator  # noqa: E402
from shieldsim.combat.state import ShieldConfiguration  # noqa: E402
from shieldsim.config import SimulatorConfig  # noqa: E402

HEAVY = ShieldConfiguration(max_charge=80, damage_reduction=52.5, max_life=100, name="Heavy Shield")
NO_SHIELD = ShieldConfiguration(max_charge=0, damage_reduction=0, max_life=100, name="No Shield")


@pytest.fixture
def heavy() -> ShieldSimulator:
    return ShieldSimulator(HEAVY)


@pytest.fixture
def unshielded() -> ShieldSimulator:
    return ShieldSimulator(NO_SHIELD)


@pytest.fixture
def make_sim():
    def _make(configuration: ShieldConfiguration = HEAVY, **config_kwargs) -> ShieldSimulator:
        return ShieldSimulator(configuration, config=SimulatorConfig(**config_kwargs))

    return _make
