"""Level validation API routes."""
import asyncio

from fastapi import APIRouter, Depends, HTTPException

from ...models.schemas import (
    LevelRequest,
    SolvabilityResponse,
    ValidateRequest,
    ValidateResponse,
)
from ...core.generator import LevelGenerator
from ...utils.helpers import parse_stands, parse_tasks
from ..deps import get_level_generator

router = APIRouter(prefix="/api", tags=["validate"])


@router.post("/validate", response_model=ValidateResponse)
async def validate_level(
    request: ValidateRequest,
    generator: LevelGenerator = Depends(get_level_generator),
) -> ValidateResponse:
    """
    Re-check a hand-authored level against structural and solvability rules.

    Args:
        request: ValidateRequest with stands, tasks and difficulty.
        generator: LevelGenerator dependency.

    Returns:
        ValidateResponse; rule violations are reported, not raised.
    """
    try:
        stands = parse_stands(request.stands)
        tasks = parse_tasks(request.tasks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid level: {str(e)}")

    report = await asyncio.to_thread(
        generator.validate, stands, tasks, request.difficulty, request.expected_total
    )
    return ValidateResponse(**report.to_dict())


@router.post("/verify", response_model=SolvabilityResponse)
async def verify_level(
    request: LevelRequest,
    generator: LevelGenerator = Depends(get_level_generator),
) -> SolvabilityResponse:
    """
    Replay the task convoy against the stands.

    Args:
        request: LevelRequest with stands, tasks and difficulty.
        generator: LevelGenerator dependency.

    Returns:
        SolvabilityResponse with the first stuck task, if any.
    """
    try:
        stands = parse_stands(request.stands)
        tasks = parse_tasks(request.tasks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid level: {str(e)}")

    report = await asyncio.to_thread(
        generator.verifier.verify, stands, tasks, request.difficulty
    )
    return SolvabilityResponse(**report.to_dict())
