"""Level generation API routes."""
import asyncio

from fastapi import APIRouter, Depends, HTTPException

from ...models.schemas import (
    GenerateRequest,
    GenerateResponse,
    GenerationFailureResponse,
    PreviewRequest,
    PreviewResponse,
    PaletteResponse,
)
from ...models.level import Difficulty, GenerationFailure, GenerationParams
from ...core.generator import LevelGenerator
from ..deps import get_level_generator

router = APIRouter(prefix="/api", tags=["generate"])


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={422: {"model": GenerationFailureResponse}},
)
async def generate_level(
    request: GenerateRequest,
    generator: LevelGenerator = Depends(get_level_generator),
) -> GenerateResponse:
    """
    Generate stands and a task convoy for a brick total and difficulty.

    Args:
        request: GenerateRequest with generation parameters.
        generator: LevelGenerator dependency.

    Returns:
        GenerateResponse with the level; 422 with diagnostics on failure.
    """
    params = GenerationParams(
        total_bricks=request.total_bricks,
        difficulty=request.difficulty,
        seed=request.seed,
        preferred_stand_count=request.preferred_stand_count,
        pool_size=request.pool_size,
    )

    # Generation is CPU-bound; keep it off the event loop
    result = await asyncio.to_thread(generator.generate, params)
    if isinstance(result, GenerationFailure):
        raise HTTPException(status_code=422, detail=result.to_dict())

    data = result.to_dict()
    data.pop("solvability", None)
    return GenerateResponse(
        **data,
        level=result.to_level_dict(level_name=request.level_name),
    )


@router.post("/preview", response_model=PreviewResponse)
async def preview_level(
    request: PreviewRequest,
    generator: LevelGenerator = Depends(get_level_generator),
) -> PreviewResponse:
    """
    Preview the color pool and stand sizes without composing stands.

    Args:
        request: PreviewRequest with generation parameters.
        generator: LevelGenerator dependency.

    Returns:
        PreviewResponse; ``success`` is False when the inputs are invalid.
    """
    params = GenerationParams(
        total_bricks=request.total_bricks,
        difficulty=request.difficulty,
        seed=request.seed,
        preferred_stand_count=request.preferred_stand_count,
        pool_size=request.pool_size,
    )
    return PreviewResponse(**generator.preview(params))


@router.get("/palette", response_model=PaletteResponse)
async def get_palette(
    generator: LevelGenerator = Depends(get_level_generator),
) -> PaletteResponse:
    """Available colors, difficulty tiers and capacity configuration."""
    config = generator.config
    return PaletteResponse(
        palette=[c.value for c in config.palette],
        difficulties=[d.value for d in Difficulty],
        config=config.to_dict(),
    )
