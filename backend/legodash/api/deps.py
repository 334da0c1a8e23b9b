"""API dependencies."""
from ..core.generator import get_generator, LevelGenerator


def get_level_generator() -> LevelGenerator:
    """Dependency for level generator."""
    return get_generator()
