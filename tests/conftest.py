"""
pytest configuration and fixtures for locmeta/locres codec tests.

Provides reusable fixtures for:
- Sample resource dictionaries
- Hypothesis property-based testing configuration
"""

import os
import sys
from pathlib import Path

import pytest

# Add project paths
sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

from locres import Locres, LocresEntry, LocresNamespace, LocresVersion

# Configure Hypothesis profiles
from hypothesis import settings, Verbosity, Phase

# Default profile: balanced speed and coverage
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
)

# CI profile: more thorough testing
settings.register_profile(
    "ci",
    max_examples=500,
    deadline=None,
    suppress_health_check=[],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)

# Dev profile: fast iteration
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
)

# Debug profile: verbose output
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


def build_sample_locres(version=LocresVersion.CITYHASH):
    """
    Build a small dictionary with shared and non-ASCII translations.

    Namespaces and keys are deliberately not in lexical order.
    """
    ui = LocresNamespace('UI')
    ui.set(LocresEntry('Start', 'Aloita', 0x1A2B3C4D))
    ui.set(LocresEntry('Quit', 'Lopeta', 0x00000001))
    ui.set(LocresEntry('Back', 'Takaisin', 0xFFFFFFFF))

    items = LocresNamespace('Items')
    items.set(LocresEntry('Sword', 'Miekka', 0x0BADF00D))
    items.set(LocresEntry('Shield', 'Kilpi', 0x12345678))
    items.set(LocresEntry('Bow', 'Jousi', 0x9ABCDEF0))

    dialog = LocresNamespace('Dialog')
    dialog.set(LocresEntry('Greeting', 'Hyvää päivää', 0xDEADBEEF))
    dialog.set(LocresEntry('Farewell', 'Näkemiin 👋', 0xCAFEBABE))
    dialog.set(LocresEntry('Cancel', 'Takaisin', 0x55555555))

    locres = Locres(version)
    locres.set(ui)
    locres.set(items)
    locres.set(dialog)
    return locres


@pytest.fixture
def sample_locres():
    """Provide a fresh sample dictionary (CityHash version)."""
    return build_sample_locres()


@pytest.fixture
def make_locres():
    """Provide a factory for sample dictionaries of any version."""
    return build_sample_locres


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
