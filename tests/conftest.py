"""Pytest configuration and fixtures."""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ap_planner.geometry.coordinates import BuildingDimensions
from ap_planner.interaction.controller import InteractionController


@pytest.fixture
def sample_building():
    """Fixture for a 50 m x 30 m building."""
    return BuildingDimensions(length=50.0, width=30.0)


@pytest.fixture
def controller():
    """Controller with a 400x300 plan shown at natural size and a 40 m building."""
    ctrl = InteractionController(building_length=40.0)
    ctrl.load_image(400, 300)
    ctrl.set_display_size(400, 300)
    return ctrl


@pytest.fixture
def scaled_controller():
    """Controller with an 800x600 plan shown at half size."""
    ctrl = InteractionController(building_length=40.0)
    ctrl.load_image(800, 600)
    ctrl.set_display_size(400, 300)
    return ctrl
