"""
Shared test fixtures for the plant engine tests.

This module provides:
- Random sources (seeded, and scripted replays that pin every draw)
- Fresh plants in cold shutdown and in the MUSE warm start
- A scheduler factory showing a plant screen so ticks can fire
"""

import os
import sys

import pytest

# Add implementation/src to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant.rng import ReplayRandom, SeededRandom
from plant.scheduler import PLANT, TickScheduler
from plant.state import apply_muse_preset, new_plant


# =============================================================================
# Random Sources
# =============================================================================

@pytest.fixture
def seeded_rng():
    """Seeded source; the same seed always yields the same plant."""
    return SeededRandom(1979)


@pytest.fixture
def zero_rng():
    """Every draw returns 0, so every countdown sits at its base value."""
    return ReplayRandom([], default=0)


# =============================================================================
# Plants
# =============================================================================

@pytest.fixture
def plant(zero_rng):
    """Cold-shutdown plant with base-value countdowns.

    Pumps 500, valves 250, turbines 2760, filter condition 25, demand
    countdown 50.
    """
    return new_plant(zero_rng)


@pytest.fixture
def muse_plant(seeded_rng):
    """Warm-start plant initialised to the MUSE guidelines."""
    state = new_plant(seeded_rng)
    apply_muse_preset(state)
    return state


# =============================================================================
# Scheduler
# =============================================================================

@pytest.fixture
def make_sim():
    """Factory for schedulers already showing a plant screen."""
    def _make(state, rng, **kwargs):
        sim = TickScheduler(state=state, rng=rng, **kwargs)
        sim.view = PLANT
        return sim
    return _make


@pytest.fixture
def sim(plant, zero_rng, make_sim):
    """Scheduler over the cold-shutdown plant with all-zero draws."""
    return make_sim(plant, zero_rng)
