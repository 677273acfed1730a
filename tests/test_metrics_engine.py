"""
Tests for the metrics engine over the in-memory store.

Covers:
- Participant lifecycle (create, profile, delete)
- PATCH semantics of update_metrics and the history it writes
- Deal add/remove as exact inverses
- Bulk deal removal and renaming
- Error taxonomy (not found, invalid input)
"""

from decimal import Decimal

import pytest

from salesboard.exceptions import (
    DealNotFoundError,
    InvalidInputError,
    ParticipantNotFoundError,
)
from salesboard.models import DealType
from salesboard.services.metrics_engine import generate_deal_id
from salesboard.services.scoring import MAX_METRIC_VALUE, METRIC_FIELDS


def _snapshot(record):
    return {field: getattr(record, field) for field in METRIC_FIELDS + ("score",)}


async def _with_deals(metrics, *deals):
    participant = await metrics.create_participant({"name": "Dana"})
    for deal_type, amount in deals:
        participant = await metrics.add_deal(
            participant.id,
            {"title": f"{deal_type} deal", "type": deal_type, "amount": amount},
        )
    return participant


# ── Participants ────────────────────────────────────────────


class TestParticipants:
    @pytest.mark.asyncio
    async def test_create_defaults(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})

        assert participant.id == 1
        assert participant.score == 0
        assert participant.board_revenue == 0
        assert participant.total_deals_goal == 0
        assert participant.deals == []
        assert participant.history == []

    @pytest.mark.asyncio
    async def test_create_scores_initial_metrics(self, metrics):
        participant = await metrics.create_participant(
            {"name": "Bob", "board_revenue": 1000, "msp_revenue": 500, "voice_seats": 3, "total_deals": 2}
        )
        assert participant.score == 2130

    @pytest.mark.asyncio
    async def test_create_rejects_empty_name(self, metrics):
        with pytest.raises(InvalidInputError):
            await metrics.create_participant({"name": ""})

    @pytest.mark.asyncio
    async def test_create_rejects_explicit_score(self, metrics):
        with pytest.raises(InvalidInputError):
            await metrics.create_participant({"name": "Eve", "score": 9999})

    @pytest.mark.asyncio
    async def test_get_unknown(self, metrics):
        with pytest.raises(ParticipantNotFoundError):
            await metrics.get_participant(42)

    @pytest.mark.asyncio
    async def test_profile_update_keeps_score(self, metrics):
        participant = await metrics.create_participant({"name": "Alice", "voice_seats": 2})

        await metrics.update_participant_profile(
            participant.id, {"role": "Account Executive", "department": "Enterprise"}
        )
        updated = await metrics.get_participant(participant.id)

        assert updated.name == "Alice"
        assert updated.role == "Account Executive"
        assert updated.department == "Enterprise"
        assert updated.score == participant.score
        assert updated.history == []

    @pytest.mark.asyncio
    async def test_profile_update_cannot_clear_name(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        with pytest.raises(InvalidInputError):
            await metrics.update_participant_profile(participant.id, {"name": None})

    @pytest.mark.asyncio
    async def test_profile_update_unknown(self, metrics):
        with pytest.raises(ParticipantNotFoundError):
            await metrics.update_participant_profile(7, {"role": "Manager"})

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})

        await metrics.delete_participant(participant.id)
        await metrics.delete_participant(participant.id)

        with pytest.raises(ParticipantNotFoundError):
            await metrics.get_participant(participant.id)

    @pytest.mark.asyncio
    async def test_returned_records_are_detached(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        participant.board_revenue = 10_000
        participant.score = 10_000

        stored = await metrics.get_participant(participant.id)
        assert stored.board_revenue == 0
        assert stored.score == 0


# ── Ordering ────────────────────────────────────────────────


class TestListByScore:
    @pytest.mark.asyncio
    async def test_highest_score_first(self, metrics):
        low = await metrics.create_participant({"name": "Low", "board_revenue": 10})
        high = await metrics.create_participant({"name": "High", "board_revenue": 900})

        ranked = await metrics.list_participants_by_score()
        assert [p.id for p in ranked] == [high.id, low.id]

    @pytest.mark.asyncio
    async def test_ties_by_ascending_id(self, metrics):
        for name in ("C", "A", "B"):
            await metrics.create_participant({"name": name, "voice_seats": 5})

        first = await metrics.list_participants_by_score()
        second = await metrics.list_participants_by_score()

        assert [p.id for p in first] == [1, 2, 3]
        assert [p.id for p in second] == [p.id for p in first]

    @pytest.mark.asyncio
    async def test_empty(self, metrics):
        assert await metrics.list_participants_by_score() == []


# ── update_metrics ──────────────────────────────────────────


class TestUpdateMetrics:
    @pytest.mark.asyncio
    async def test_patch_keeps_other_fields(self, metrics):
        participant = await metrics.create_participant(
            {"name": "Alice", "board_revenue": 100, "msp_revenue": 20, "total_deals": 1}
        )

        updated = await metrics.update_metrics(participant.id, {"voice_seats": 4})

        assert updated.board_revenue == 100
        assert updated.msp_revenue == 20
        assert updated.total_deals == 1
        assert updated.voice_seats == 4
        assert updated.score == 100 + 40 + 40 + 50

    @pytest.mark.asyncio
    async def test_null_fields_are_ignored(self, metrics):
        participant = await metrics.create_participant({"name": "Alice", "board_revenue": 100})
        updated = await metrics.update_metrics(
            participant.id, {"board_revenue": None, "msp_revenue": 5}
        )
        assert updated.board_revenue == 100
        assert updated.msp_revenue == 5

    @pytest.mark.asyncio
    async def test_appends_history_entry(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})

        updated = await metrics.update_metrics(participant.id, {"board_revenue": 5000})

        assert len(updated.history) == 1
        entry = updated.history[0]
        assert entry.score == 5000
        assert "Board revenue +5000" in entry.description

    @pytest.mark.asyncio
    async def test_goals_do_not_affect_score(self, metrics):
        participant = await metrics.create_participant({"name": "Alice", "board_revenue": 300})

        updated = await metrics.update_metrics(
            participant.id, goals={"board_revenue_goal": 1000, "voice_seats_goal": 40}
        )

        assert updated.score == 300
        assert updated.board_revenue_goal == 1000
        assert updated.voice_seats_goal == 40
        assert "Voice seats goal set to 40" in updated.history[-1].description

    @pytest.mark.asyncio
    async def test_empty_patch_still_records_history(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        updated = await metrics.update_metrics(participant.id)

        assert len(updated.history) == 1
        assert updated.history[0].description == "No metric changes"

    @pytest.mark.asyncio
    async def test_rejects_negative_values(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        with pytest.raises(InvalidInputError):
            await metrics.update_metrics(participant.id, {"voice_seats": -1})

        stored = await metrics.get_participant(participant.id)
        assert stored.history == []

    @pytest.mark.asyncio
    async def test_rejects_values_above_limit(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        with pytest.raises(InvalidInputError):
            await metrics.update_metrics(participant.id, {"msp_revenue": MAX_METRIC_VALUE + 1})
        with pytest.raises(InvalidInputError):
            await metrics.create_participant({"name": "Bob", "board_revenue_goal": MAX_METRIC_VALUE + 1})

    @pytest.mark.asyncio
    async def test_accepts_values_beyond_32_bits(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        updated = await metrics.update_metrics(participant.id, {"msp_revenue": 1_100_000_000})
        assert updated.score == 2_200_000_000

    @pytest.mark.asyncio
    async def test_rejects_unknown_fields(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        with pytest.raises(InvalidInputError):
            await metrics.update_metrics(participant.id, {"score": 100})

    @pytest.mark.asyncio
    async def test_unknown_participant(self, metrics):
        with pytest.raises(ParticipantNotFoundError):
            await metrics.update_metrics(99, {"voice_seats": 1})


# ── Deals ───────────────────────────────────────────────────


class TestDeals:
    @pytest.mark.asyncio
    async def test_add_deal_updates_metrics(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})

        updated = await metrics.add_deal(
            participant.id, {"title": "Board refresh", "type": "BOARD", "amount": "5000"}
        )

        assert updated.board_revenue == 5000
        assert updated.total_deals == 1
        assert updated.score == 5050
        assert len(updated.deals) == 1
        assert updated.deals[0].type == DealType.BOARD
        assert updated.deals[0].deal_id
        assert updated.history[-1].description.startswith("Deal added: Board refresh")

    @pytest.mark.asyncio
    async def test_deal_ids_are_unique(self, metrics):
        participant = await _with_deals(
            metrics, (DealType.MSP, Decimal("10")), (DealType.MSP, Decimal("10"))
        )
        ids = [d.deal_id for d in participant.deals]
        assert len(set(ids)) == 2

    @pytest.mark.asyncio
    async def test_add_then_remove_restores_state(self, metrics):
        participant = await metrics.create_participant(
            {"name": "Alice", "board_revenue": 700, "msp_revenue": 300, "voice_seats": 2, "total_deals": 0}
        )
        before = _snapshot(participant)

        # Every amount is floored to whole units, not only voice seats
        for deal_type, amount, field, increment in [
            (DealType.BOARD, Decimal("1234.99"), "board_revenue", 1234),
            (DealType.MSP, Decimal("50.75"), "msp_revenue", 50),
            (DealType.VOICE, Decimal("6.5"), "voice_seats", 6),
        ]:
            added = await metrics.add_deal(
                participant.id, {"title": "Round trip", "type": deal_type, "amount": amount}
            )
            assert getattr(added, field) == before[field] + increment
            assert added.total_deals == before["total_deals"] + 1

            removed = await metrics.remove_deal(participant.id, added.deals[-1].deal_id)

            assert _snapshot(removed) == before
            assert removed.deals == []

    @pytest.mark.asyncio
    async def test_ledger_matches_total_deals(self, metrics):
        participant = await _with_deals(
            metrics,
            (DealType.BOARD, Decimal("100")),
            (DealType.VOICE, Decimal("2")),
            (DealType.MSP, Decimal("40")),
            (DealType.BOARD, Decimal("60")),
        )
        assert participant.total_deals == len(participant.deals) == 4

        participant = await metrics.remove_deal(participant.id, participant.deals[1].deal_id)
        assert participant.total_deals == len(participant.deals) == 3

        ids = [d.deal_id for d in participant.deals[:2]]
        participant = await metrics.remove_many_deals(participant.id, ids)
        assert participant.total_deals == len(participant.deals) == 1

    @pytest.mark.asyncio
    async def test_remove_unknown_deal(self, metrics):
        participant = await _with_deals(metrics, (DealType.BOARD, Decimal("100")))

        with pytest.raises(DealNotFoundError):
            await metrics.remove_deal(participant.id, generate_deal_id())

        stored = await metrics.get_participant(participant.id)
        assert _snapshot(stored) == _snapshot(participant)

    @pytest.mark.asyncio
    async def test_remove_from_unknown_participant(self, metrics):
        with pytest.raises(ParticipantNotFoundError):
            await metrics.remove_deal(5, "abc")

    @pytest.mark.asyncio
    async def test_removal_never_goes_negative(self, metrics):
        participant = await _with_deals(metrics, (DealType.BOARD, Decimal("5000")))
        await metrics.update_metrics(participant.id, {"board_revenue": 1000})

        updated = await metrics.remove_deal(participant.id, participant.deals[0].deal_id)

        assert updated.board_revenue == 0
        assert updated.total_deals == 0
        assert updated.score == 0

    @pytest.mark.asyncio
    async def test_add_deal_rejects_negative_amount(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        with pytest.raises(InvalidInputError):
            await metrics.add_deal(participant.id, {"title": "Refund", "type": "MSP", "amount": "-5"})

    @pytest.mark.asyncio
    async def test_add_deal_rejects_unknown_type(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        with pytest.raises(InvalidInputError):
            await metrics.add_deal(participant.id, {"title": "Fax", "type": "FAX", "amount": "5"})


# ── Bulk operations ─────────────────────────────────────────


class TestBulkDeals:
    @pytest.mark.asyncio
    async def test_remove_many_writes_one_history_entry(self, metrics):
        participant = await _with_deals(
            metrics,
            (DealType.BOARD, Decimal("100")),
            (DealType.MSP, Decimal("200")),
            (DealType.VOICE, Decimal("3")),
        )
        history_before = len(participant.history)

        updated = await metrics.remove_many_deals(
            participant.id, [d.deal_id for d in participant.deals]
        )

        assert len(updated.history) == history_before + 1
        assert updated.history[-1].description.startswith("3 deals removed")
        assert updated.score == 0
        assert updated.deals == []

    @pytest.mark.asyncio
    async def test_remove_many_rejects_whole_batch(self, metrics):
        participant = await _with_deals(
            metrics, (DealType.BOARD, Decimal("100")), (DealType.MSP, Decimal("200"))
        )

        with pytest.raises(DealNotFoundError) as exc_info:
            await metrics.remove_many_deals(
                participant.id, [participant.deals[0].deal_id, "missing"]
            )
        assert exc_info.value.deal_ids == ["missing"]

        stored = await metrics.get_participant(participant.id)
        assert len(stored.deals) == 2
        assert stored.score == participant.score

    @pytest.mark.asyncio
    async def test_remove_many_requires_ids(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        with pytest.raises(InvalidInputError):
            await metrics.remove_many_deals(participant.id, [])

    @pytest.mark.asyncio
    async def test_duplicate_ids_removed_once(self, metrics):
        participant = await _with_deals(
            metrics, (DealType.BOARD, Decimal("100")), (DealType.BOARD, Decimal("50"))
        )
        deal_id = participant.deals[0].deal_id

        updated = await metrics.remove_many_deals(participant.id, [deal_id, deal_id])

        assert updated.board_revenue == 50
        assert updated.total_deals == 1

    @pytest.mark.asyncio
    async def test_update_many_renames_only(self, metrics):
        participant = await _with_deals(
            metrics, (DealType.BOARD, Decimal("100")), (DealType.VOICE, Decimal("4"))
        )
        target = participant.deals[1].deal_id

        updated = await metrics.update_many_deals(
            participant.id, [target], {"title": "Contoso voice expansion"}
        )

        assert updated.deals[1].title == "Contoso voice expansion"
        assert updated.deals[0].title == participant.deals[0].title
        assert updated.score == participant.score
        assert updated.history == participant.history

    @pytest.mark.asyncio
    async def test_update_many_unknown_deal(self, metrics):
        participant = await _with_deals(metrics, (DealType.BOARD, Decimal("100")))
        with pytest.raises(DealNotFoundError):
            await metrics.update_many_deals(participant.id, ["nope"], {"title": "X"})

    @pytest.mark.asyncio
    async def test_update_many_requires_ids(self, metrics):
        participant = await metrics.create_participant({"name": "Alice"})
        with pytest.raises(InvalidInputError):
            await metrics.update_many_deals(participant.id, [], {"title": "X"})


# ── End to end ──────────────────────────────────────────────


class TestScenario:
    @pytest.mark.asyncio
    async def test_alice(self, metrics):
        alice = await metrics.create_participant({"name": "Alice"})
        assert alice.score == 0

        alice = await metrics.add_deal(
            alice.id, {"title": "Board deal", "type": "BOARD", "amount": 5000}
        )
        assert alice.board_revenue == 5000
        assert alice.total_deals == 1
        assert alice.score == 5050
        first_deal = alice.deals[0].deal_id

        alice = await metrics.add_deal(
            alice.id, {"title": "Voice deal", "type": "VOICE", "amount": "3.7"}
        )
        assert alice.voice_seats == 3
        assert alice.total_deals == 2
        assert alice.score == 5130

        alice = await metrics.remove_deal(alice.id, first_deal)
        assert alice.board_revenue == 0
        assert alice.total_deals == 1
        assert alice.score == 80

        assert [h.score for h in alice.history] == [5050, 5130, 80]
