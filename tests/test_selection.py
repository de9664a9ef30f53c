from datetime import datetime, timedelta, timezone

import pytest

from recall.sm2.card_state import CardState, new_card
from recall.sm2.selection import DueCards, due_cards, due_today, end_of_day, is_due


def _reviewed(name, due, interval=3):
    return CardState(
        front=name,
        back=name.upper(),
        interval=interval,
        repetitions=1,
        last_review_date=due - timedelta(days=interval),
        next_review_date=due,
    )


def _fronts(cards):
    return [card.front for card in cards]


class TestIsDue:
    """Due predicate."""

    def test_new_card_is_always_due(self, now):
        assert is_due(new_card("q", "a"), now)

    def test_due_exactly_now(self, now):
        assert is_due(_reviewed("a", now), now)

    def test_future_card_is_not_due(self, now):
        assert not is_due(_reviewed("a", now + timedelta(seconds=1)), now)

    def test_naive_dates_compare_as_utc(self, now):
        naive_due = now.replace(tzinfo=None) - timedelta(hours=1)
        assert is_due(_reviewed("a", naive_due), now)


class TestDueCards:
    """Filtering and ordering of the due set."""

    def test_returns_overdue_and_due_now_only(self, now):
        cards = [
            _reviewed("yesterday", now - timedelta(days=1)),
            _reviewed("now", now),
            _reviewed("tomorrow", now + timedelta(days=1)),
        ]

        assert _fronts(due_cards(cards, now)) == ["yesterday", "now"]

    def test_new_card_comes_first(self, now):
        cards = [
            _reviewed("now", now),
            _reviewed("tomorrow", now + timedelta(days=1)),
            new_card("fresh", "content"),
            _reviewed("yesterday", now - timedelta(days=1)),
        ]

        assert _fronts(due_cards(cards, now)) == ["fresh", "yesterday", "now"]

    def test_most_overdue_first(self, now):
        cards = [
            _reviewed("b", now - timedelta(days=2)),
            _reviewed("c", now - timedelta(hours=1)),
            _reviewed("a", now - timedelta(days=9)),
        ]

        assert _fronts(due_cards(cards, now)) == ["a", "b", "c"]

    def test_equal_due_dates_keep_insertion_order(self, now):
        due = now - timedelta(days=1)
        cards = [_reviewed(name, due) for name in ["first", "second", "third"]]
        cards.insert(1, _reviewed("earlier", now - timedelta(days=2)))

        assert _fronts(due_cards(cards, now)) == ["earlier", "first", "second", "third"]

    def test_new_cards_keep_insertion_order(self, now):
        cards = [new_card(name, "x") for name in ["n1", "n2", "n3"]]
        assert _fronts(due_cards(cards, now)) == ["n1", "n2", "n3"]

    def test_new_last_when_configured(self, now):
        cards = [new_card("fresh", "x"), _reviewed("old", now - timedelta(days=1))]

        assert _fronts(due_cards(cards, now, new_first=False)) == ["old", "fresh"]

    def test_max_new_limits_only_new_cards(self, now):
        cards = [new_card(f"n{i}", "x") for i in range(5)]
        cards.append(_reviewed("old", now - timedelta(days=1)))

        assert _fronts(due_cards(cards, now, max_new=2)) == ["n0", "n1", "old"]

    def test_max_new_zero_skips_new_cards(self, now):
        cards = [new_card("n", "x"), _reviewed("old", now)]
        assert _fronts(due_cards(cards, now, max_new=0)) == ["old"]

    def test_negative_max_new_rejected(self, now):
        with pytest.raises(ValueError):
            due_cards([], now, max_new=-1)

    def test_empty_collection(self, now):
        result = due_cards([], now)
        assert list(result) == []
        assert len(result) == 0


class TestDueCardsSequence:
    """Laziness and restartability."""

    def test_can_be_iterated_repeatedly(self, now):
        cards = [_reviewed("a", now), new_card("b", "x")]
        result = due_cards(cards, now)

        assert list(result) == list(result)
        assert len(result) == 2

    def test_snapshot_ignores_later_changes_to_source(self, now):
        cards = [_reviewed("a", now)]
        result = due_cards(cards, now)
        cards.append(new_card("late", "x"))

        assert _fronts(result) == ["a"]

    def test_accepts_generators(self, now):
        result = due_cards((c for c in [_reviewed("a", now)]), now)

        assert _fronts(result) == ["a"]
        assert _fronts(result) == ["a"]

    def test_is_a_due_cards_view(self, now):
        result = due_cards([], now)
        assert isinstance(result, DueCards)
        assert "DueCards" in repr(result)


class TestDueToday:
    """End-of-day cutoff used for daily sessions."""

    def test_end_of_day(self, now):
        assert end_of_day(now) == datetime(2024, 3, 15, 23, 59, 59, 999999, tzinfo=timezone.utc)

    def test_includes_cards_due_later_today(self, now):
        cards = [
            _reviewed("tonight", now.replace(hour=22)),
            _reviewed("tomorrow", now + timedelta(days=1)),
            _reviewed("morning", now.replace(hour=6)),
        ]

        assert _fronts(due_today(cards, now)) == ["morning", "tonight"]
        assert _fronts(due_cards(cards, now)) == ["morning"]
