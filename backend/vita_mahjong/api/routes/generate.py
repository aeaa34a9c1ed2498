"""Board generation API routes."""
from fastapi import APIRouter, Depends, HTTPException

from ...models.schemas import GenerateRequest, GenerateResponse
from ...core.generator import BoardGenerator
from ..deps import get_board_generator

router = APIRouter(prefix="/api", tags=["generate"])


@router.post("/generate", response_model=GenerateResponse)
async def generate_board(
    request: GenerateRequest,
    generator: BoardGenerator = Depends(get_board_generator),
) -> GenerateResponse:
    """
    Generate a board for a level and difficulty without starting a game.

    Args:
        request: GenerateRequest with level and difficulty.
        generator: BoardGenerator dependency.

    Returns:
        GenerateResponse with the placed tiles and shortfall information.
    """
    try:
        board = generator.generate(request.level, request.difficulty)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Generation failed: {str(e)}")

    return GenerateResponse(**board.to_dict())
