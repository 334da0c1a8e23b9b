"""Core business logic package.

This package contains the level generation pipeline: color pool selection,
stand sizing and composition, task batching, solvability verification and
structural validation.
"""
from .random_source import RandomSource
from .color_pool import ColorPoolSelector
from .stand_sizes import StandSizeDistributor, StandSizePlan
from .composer import StandColorComposer
from .accessibility import AccessibilityAnalyzer
from .task_builder import TaskBatchBuilder, BatchPlan
from .verifier import SolvabilityVerifier
from .validator import LevelValidator
from .generator import LevelGenerator, get_generator

__all__ = [
    "RandomSource",
    "ColorPoolSelector",
    "StandSizeDistributor",
    "StandSizePlan",
    "StandColorComposer",
    "AccessibilityAnalyzer",
    "TaskBatchBuilder",
    "BatchPlan",
    "SolvabilityVerifier",
    "LevelValidator",
    "LevelGenerator",
    "get_generator",
]
