"""Pydantic schemas for API request/response validation."""
from pydantic import BaseModel, Field
from typing import Dict, List, Any, Optional

from .level import Difficulty


class TaskItem(BaseModel):
    """A single task in the convoy."""
    color: str = Field(..., description="Brick color name")
    required_count: int = Field(..., ge=1, description="Bricks the task needs")


class GenerateRequest(BaseModel):
    """Request schema for level generation."""
    total_bricks: int = Field(..., description="Requested total brick count")
    difficulty: Difficulty = Field(default=Difficulty.EASY, description="Difficulty (easy/medium/hard)")
    seed: Optional[int] = Field(default=None, description="Seed for reproducible output")
    preferred_stand_count: Optional[int] = Field(default=None, ge=1, description="Stand count to aim for")
    pool_size: Optional[int] = Field(default=None, ge=1, description="Override the number of colors")
    level_name: str = Field(default="Level", description="Name used in the exported level")


class GenerateResponse(BaseModel):
    """Response schema for level generation."""
    stands: List[List[str]] = Field(..., description="Stands, bricks listed bottom to top")
    tasks: List[TaskItem] = Field(..., description="Ordered task convoy")
    colors: List[str] = Field(..., description="Color pool of the level")
    difficulty: str = Field(..., description="Difficulty tier")
    requested_total: int = Field(..., description="Requested brick count")
    adjusted_total: int = Field(..., description="Brick count actually used")
    was_adjusted: bool = Field(..., description="Whether the total was rounded or clamped")
    attempts: int = Field(..., description="Generation attempts used")
    seed: Optional[int] = Field(default=None, description="Seed used")
    generation_time_ms: int = Field(default=0, description="Generation time in milliseconds")
    level: Dict[str, Any] = Field(default={}, description="Exported level definition")


class GenerationFailureResponse(BaseModel):
    """Diagnostic body returned when generation fails."""
    kind: str = Field(..., description="input_invalid or generation_exhausted")
    message: str = Field(..., description="Failure reason")
    attempts: int = Field(default=0, description="Attempts made")
    failed_color: Optional[str] = Field(default=None, description="Color of the last stuck task")
    reachable_count: int = Field(default=0, description="Reachable bricks of that color")
    required_count: int = Field(default=0, description="Bricks that task needed")


class LevelRequest(BaseModel):
    """Request schema carrying an existing level."""
    stands: List[List[str]] = Field(..., description="Stands, bricks listed bottom to top")
    tasks: List[TaskItem] = Field(..., description="Ordered task convoy")
    difficulty: Difficulty = Field(default=Difficulty.EASY, description="Difficulty rules to apply")


class ValidateRequest(LevelRequest):
    """Request schema for level validation."""
    expected_total: Optional[int] = Field(default=None, description="Brick total the level must match")


class ValidationFailureItem(BaseModel):
    """A single structural failure."""
    success: bool = Field(default=False)
    stand_index: Optional[int] = Field(default=None, description="Offending stand (0-based)")
    message: str = Field(..., description="Broken rule")


class SolvabilityResponse(BaseModel):
    """Response schema for solvability replay."""
    solvable: bool = Field(..., description="Whether every task can be completed")
    failed_task_index: Optional[int] = Field(default=None, description="First stuck task (0-based)")
    failed_color: Optional[str] = Field(default=None, description="Color of the stuck task")
    reachable_count: int = Field(default=0, description="Bricks of that color within the window")
    required_count: int = Field(default=0, description="Bricks the stuck task needed")
    leftover_bricks: int = Field(default=0, description="Bricks left after the last task")
    message: str = Field(default="", description="Summary")


class ValidateResponse(BaseModel):
    """Response schema for level validation."""
    success: bool = Field(..., description="Whether the level passed every check")
    message: str = Field(..., description="First problem found, or a success note")
    failures: List[ValidationFailureItem] = Field(default=[], description="Structural failures")
    solvability: Optional[SolvabilityResponse] = Field(default=None, description="Replay result")


class PreviewRequest(BaseModel):
    """Request schema for generation preview."""
    total_bricks: int = Field(..., description="Requested total brick count")
    difficulty: Difficulty = Field(default=Difficulty.EASY)
    seed: Optional[int] = Field(default=None)
    preferred_stand_count: Optional[int] = Field(default=None, ge=1)
    pool_size: Optional[int] = Field(default=None, ge=1)


class PreviewResponse(BaseModel):
    """Response schema for generation preview."""
    success: bool = Field(..., description="Whether the inputs can be generated")
    message: str = Field(default="", description="Status message")
    colors: List[str] = Field(default=[], description="Color pool")
    stand_sizes: List[int] = Field(default=[], description="Bricks per stand")
    requested_total: int = Field(default=0)
    adjusted_total: int = Field(default=0)
    task_count: int = Field(default=0)


class PaletteResponse(BaseModel):
    """Response schema for palette and capacity configuration."""
    palette: List[str] = Field(..., description="Available colors")
    difficulties: List[str] = Field(..., description="Difficulty tiers")
    config: Dict[str, Any] = Field(..., description="Capacity configuration")

