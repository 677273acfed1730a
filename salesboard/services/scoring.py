"""
Score formula and goal progress.

Rules:
- Board revenue: 1 point per unit
- MSP revenue: 2 points per unit
- Voice seats: 10 points per seat
- Each closed deal: 50 points
"""

import math
from decimal import Decimal
from typing import Mapping, Union

BOARD_REVENUE_WEIGHT = 1
MSP_REVENUE_WEIGHT = 2
VOICE_SEAT_POINTS = 10
DEAL_POINTS = 50

# Upper bound for any metric or goal, keeps the score inside a 64-bit column
MAX_METRIC_VALUE = 10**15

METRIC_FIELDS = ("board_revenue", "msp_revenue", "voice_seats", "total_deals")
GOAL_FIELDS = tuple(f"{name}_goal" for name in METRIC_FIELDS)

FIELD_LABELS = {
    "board_revenue": "Board revenue",
    "msp_revenue": "MSP revenue",
    "voice_seats": "Voice seats",
    "total_deals": "Total deals",
    "board_revenue_goal": "Board revenue goal",
    "msp_revenue_goal": "MSP revenue goal",
    "voice_seats_goal": "Voice seats goal",
    "total_deals_goal": "Total deals goal",
}

# Which metric each deal type feeds, besides total_deals
DEAL_TYPE_METRIC = {
    "BOARD": "board_revenue",
    "MSP": "msp_revenue",
    "VOICE": "voice_seats",
}


def calculate_score(
    board_revenue: int,
    msp_revenue: int,
    voice_seats: int,
    total_deals: int,
) -> int:
    """Compute the leaderboard score from the four raw metrics.

    Example:
        calculate_score(1000, 500, 3, 2) == 1000 + 1000 + 30 + 100 == 2130
    """
    return (
        board_revenue * BOARD_REVENUE_WEIGHT
        + msp_revenue * MSP_REVENUE_WEIGHT
        + voice_seats * VOICE_SEAT_POINTS
        + total_deals * DEAL_POINTS
    )


def score_for(participant) -> int:
    """Score of any object carrying the four metric attributes."""
    return calculate_score(
        participant.board_revenue,
        participant.msp_revenue,
        participant.voice_seats,
        participant.total_deals,
    )


def goal_progress(current: int, goal: int) -> float:
    """Percent of ``goal`` reached, clamped to [0, 100].

    A goal of 0 means "no goal set" and always yields 0.
    """
    if goal <= 0:
        return 0.0
    percent = current / goal * 100
    return round(min(max(percent, 0.0), 100.0), 1)


def deal_contribution(deal_type: str, amount: Union[Decimal, float, int]) -> dict[str, int]:
    """Metric increments a single deal applies when it is added.

    Revenue and seat counts are integers, so fractional amounts are
    truncated (3.7 seats -> 3), never rounded. Removing the deal
    subtracts exactly the same increments.
    """
    metric = DEAL_TYPE_METRIC[getattr(deal_type, "value", deal_type)]
    return {
        metric: math.floor(amount),
        "total_deals": 1,
    }


def describe_changes(before: Mapping[str, int], after: Mapping[str, int]) -> str:
    """Human readable summary of which fields changed and by how much.

    Metrics are rendered as signed deltas ("Board revenue +5000"),
    goals as the new target ("Voice seats goal set to 40").
    """
    parts = []
    for field in METRIC_FIELDS + GOAL_FIELDS:
        if field not in after:
            continue
        old = before.get(field, 0)
        new = after[field]
        if old == new:
            continue
        if field in GOAL_FIELDS:
            parts.append(f"{FIELD_LABELS[field]} set to {new}")
        else:
            parts.append(f"{FIELD_LABELS[field]} {new - old:+d}")
    return ", ".join(parts) if parts else "No metric changes"
