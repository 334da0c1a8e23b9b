"""Shared fixtures."""
import pytest

from legodash.core.generator import LevelGenerator
from legodash.models.level import GeneratorConfig


@pytest.fixture
def config():
    """Default capacity configuration."""
    return GeneratorConfig()


@pytest.fixture
def generator(config):
    """Create generator instance."""
    return LevelGenerator(config)
