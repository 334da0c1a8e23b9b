"""Data models package.

This package contains data models and API schemas for the application.
"""
from .level import (
    BrickColor,
    PALETTE,
    Difficulty,
    DifficultyProfile,
    Task,
    GeneratorConfig,
    GenerationParams,
    GenerationResult,
    GenerationFailure,
    FailureKind,
    SolvabilityReport,
    ValidationResult,
    ValidationReport,
)
from .schemas import (
    GenerateRequest,
    GenerateResponse,
    GenerationFailureResponse,
    ValidateRequest,
    ValidateResponse,
    LevelRequest,
    SolvabilityResponse,
    PreviewRequest,
    PreviewResponse,
    PaletteResponse,
)

__all__ = [
    # Level models
    "BrickColor",
    "PALETTE",
    "Difficulty",
    "DifficultyProfile",
    "Task",
    "GeneratorConfig",
    "GenerationParams",
    "GenerationResult",
    "GenerationFailure",
    "FailureKind",
    "SolvabilityReport",
    "ValidationResult",
    "ValidationReport",
    # API schemas
    "GenerateRequest",
    "GenerateResponse",
    "GenerationFailureResponse",
    "ValidateRequest",
    "ValidateResponse",
    "LevelRequest",
    "SolvabilityResponse",
    "PreviewRequest",
    "PreviewResponse",
    "PaletteResponse",
]
