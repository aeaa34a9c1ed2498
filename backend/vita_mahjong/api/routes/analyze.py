"""Board analysis API routes."""
from fastapi import APIRouter, HTTPException

from ...models.schemas import AnalyzeRequest, AnalyzeResponse
from ...core.accessibility import find_hint_pair, playable_tiles
from ...core.pairing import decomposes_into_pairs
from ...utils.helpers import parse_board, extract_board_statistics

router = APIRouter(prefix="/api", tags=["analyze"])


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_board(request: AnalyzeRequest) -> AnalyzeResponse:
    """
    Report which tiles of a board are playable right now.

    Args:
        request: AnalyzeRequest with the tile list.

    Returns:
        AnalyzeResponse with playable ids, a hint pair and statistics.
    """
    try:
        tiles = parse_board(request.tiles)
    except (ValueError, KeyError) as e:
        raise HTTPException(status_code=400, detail=f"Analysis failed: {str(e)}")

    pair = find_hint_pair(tiles)

    return AnalyzeResponse(
        playable_ids=[t.id for t in playable_tiles(tiles)],
        hint_pair=[pair[0].id, pair[1].id] if pair else None,
        pairable=decomposes_into_pairs([t.face for t in tiles if t.is_visible]),
        statistics=extract_board_statistics(tiles),
    )
