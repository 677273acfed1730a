"""
Seed demo participants and deals.

Usage:
    python scripts/seed_demo_data.py

Or with custom DATABASE_URL:
    DATABASE_URL="postgresql://..." python scripts/seed_demo_data.py

Every participant is created and scored through the metrics engine, so
the seeded ledgers and histories are consistent with the score formula.
"""

import asyncio
import os
import sys
from decimal import Decimal

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from salesboard.db import dispose_engine, get_db_context
from salesboard.models import DealType
from salesboard.services.metrics_engine import MetricsEngine
from salesboard.store import SqlParticipantStore

DEMO_PARTICIPANTS = [
    {
        "profile": {"name": "Alice Carter", "role": "Account Executive", "department": "Enterprise"},
        "goals": {"board_revenue_goal": 50000, "msp_revenue_goal": 20000, "voice_seats_goal": 40, "total_deals_goal": 10},
        "deals": [
            ("Northwind board refresh", DealType.BOARD, "18000"),
            ("Northwind managed services", DealType.MSP, "6500"),
            ("Contoso hosted voice", DealType.VOICE, "25"),
        ],
    },
    {
        "profile": {"name": "Ben Okafor", "role": "Sales Representative", "department": "SMB"},
        "goals": {"board_revenue_goal": 20000, "msp_revenue_goal": 10000, "voice_seats_goal": 30, "total_deals_goal": 8},
        "deals": [
            ("Fabrikam switches", DealType.BOARD, "7200"),
            ("Fabrikam voice seats", DealType.VOICE, "12"),
            ("Tailspin backup plan", DealType.MSP, "3100"),
            ("Tailspin voice add-on", DealType.VOICE, "4"),
        ],
    },
    {
        "profile": {"name": "Chen Wei", "role": "Sales Representative", "department": "SMB"},
        "goals": {"board_revenue_goal": 15000, "total_deals_goal": 5},
        "deals": [
            ("Litware laptops", DealType.BOARD, "9400"),
        ],
    },
]


async def seed_all() -> None:
    async with get_db_context() as db:
        metrics = MetricsEngine(SqlParticipantStore(db))

        for item in DEMO_PARTICIPANTS:
            participant = await metrics.create_participant(item["profile"])
            await metrics.update_metrics(participant.id, goals=item["goals"])

            for title, deal_type, amount in item["deals"]:
                participant = await metrics.add_deal(
                    participant.id,
                    {"title": title, "type": deal_type, "amount": Decimal(amount)},
                )

            print(f"Created {participant.name} (id={participant.id}, score={participant.score})")

    print("=" * 50)
    print("DEMO DATA CREATED SUCCESSFULLY!")
    print("=" * 50)

    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(seed_all())
