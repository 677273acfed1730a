"""Public leaderboard endpoint."""

from typing import List

from fastapi import APIRouter, Depends

from salesboard.api.deps import get_metrics_engine, to_http_exception
from salesboard.exceptions import SalesboardError
from salesboard.schemas.participant import LeaderboardEntry
from salesboard.services.metrics_engine import MetricsEngine

router = APIRouter(tags=["Leaderboard"])


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def leaderboard(
    engine: MetricsEngine = Depends(get_metrics_engine),
):
    """Participants ranked by score. No authentication required."""
    try:
        participants = await engine.list_participants_by_score()
    except SalesboardError as e:
        raise to_http_exception(e) from e

    return [
        LeaderboardEntry.from_record(rank, participant)
        for rank, participant in enumerate(participants, start=1)
    ]
