"""Tests for photogallery.ordering."""

from __future__ import annotations

import pytest

from photogallery.ordering import MISSING_TIMESTAMP, acquisition_time, move, reorder
from photogallery.types import SortKey
from tests.helpers import at, make_record


def _ids(records) -> list[str]:
    return [r.id for r in records]


@pytest.fixture
def zeta_alpha_items():
    """A: "Zeta" t1, B: "alpha" t2, C: "Zeta" t0, in creation order."""
    return [
        make_record("A", "Zeta", at(1), rank=0),
        make_record("B", "alpha", at(2), rank=1),
        make_record("C", "Zeta", at(0), rank=2),
    ]


class TestReorderAuthor:
    def test_case_insensitive_with_time_tiebreak(self, zeta_alpha_items):
        ordered, request = reorder(zeta_alpha_items, SortKey.author, ascending=True)
        assert _ids(ordered) == ["B", "C", "A"]
        assert [r.rank for r in ordered] == [0, 1, 2]
        assert request == {"B": 0, "C": 1, "A": 2}

    def test_descending_is_exact_reverse(self, zeta_alpha_items):
        ascending, _ = reorder(zeta_alpha_items, SortKey.author, ascending=True)
        descending, _ = reorder(ascending, SortKey.author, ascending=False)
        assert _ids(descending) == list(reversed(_ids(ascending)))

    def test_id_breaks_full_ties(self):
        items = [
            make_record("b", "Same", at(0), rank=0),
            make_record("a", "same", at(0), rank=1),
        ]
        ordered, _ = reorder(items, SortKey.author)
        assert _ids(ordered) == ["a", "b"]
        ordered, _ = reorder(items, SortKey.author, ascending=False)
        assert _ids(ordered) == ["b", "a"]

    def test_missing_author_sorts_as_unknown_author(self):
        items = [
            make_record("z", "Zed", rank=0),
            make_record("n", None, rank=1),
            make_record("a", "Alice", rank=2),
            make_record("u", "unknown author", at(-1), rank=3),
        ]
        ordered, _ = reorder(items, SortKey.author)
        assert _ids(ordered) == ["a", "u", "n", "z"]

    def test_accepts_string_key(self, zeta_alpha_items):
        ordered, _ = reorder(zeta_alpha_items, "author")
        assert _ids(ordered) == ["B", "C", "A"]


class TestReorderAcquiredAt:
    def test_time_then_author_then_id(self):
        items = [
            make_record("x", "Mallory", at(5), rank=0),
            make_record("y", "bob", at(5), rank=1),
            make_record("z", "Zed", at(1), rank=2),
            make_record("w", "Bob", at(5), rank=3),
        ]
        ordered, _ = reorder(items, SortKey.acquired_at)
        assert _ids(ordered) == ["z", "w", "y", "x"]

    def test_missing_timestamp_at_extremes(self):
        items = [
            make_record("late", "A", at(10), rank=0),
            make_record("none", "A", None, rank=1),
            make_record("early", "A", at(0), rank=2),
        ]
        ascending, _ = reorder(items, SortKey.acquired_at, ascending=True)
        descending, _ = reorder(items, SortKey.acquired_at, ascending=False)
        assert _ids(ascending) == ["none", "early", "late"]
        assert _ids(descending) == ["late", "early", "none"]

    def test_missing_timestamp_sentinel(self):
        assert acquisition_time(make_record("a", acquired_at=None)) == MISSING_TIMESTAMP


class TestReorderManual:
    def test_identity(self, zeta_alpha_items):
        ordered, request = reorder(zeta_alpha_items, SortKey.manual)
        assert ordered == zeta_alpha_items
        assert request == {}

    def test_manual_keeps_gapped_ranks(self):
        items = [make_record("a", rank=3), make_record("b", rank=9)]
        ordered, request = reorder(items, SortKey.manual, ascending=False)
        assert [r.rank for r in ordered] == [3, 9]
        assert request == {}


class TestReorderDelta:
    def test_only_changed_ranks_reported(self):
        items = [
            make_record("a", "Alice", rank=0),
            make_record("c", "Carol", rank=1),
            make_record("b", "Bob", rank=2),
        ]
        ordered, request = reorder(items, SortKey.author)
        assert _ids(ordered) == ["a", "b", "c"]
        assert request == {"b": 1, "c": 2}

    @pytest.mark.parametrize("key", [SortKey.author, SortKey.acquired_at])
    @pytest.mark.parametrize("ascending", [True, False])
    def test_idempotent(self, zeta_alpha_items, key, ascending):
        once, _ = reorder(zeta_alpha_items, key, ascending)
        twice, request = reorder(once, key, ascending)
        assert request == {}
        assert twice == once

    def test_gapped_ranks_are_densified(self):
        items = [make_record("a", "A", rank=0), make_record("b", "B", rank=7)]
        ordered, request = reorder(items, SortKey.author)
        assert [r.rank for r in ordered] == [0, 1]
        assert request == {"b": 1}

    def test_input_not_mutated(self, zeta_alpha_items):
        snapshot = list(zeta_alpha_items)
        reorder(zeta_alpha_items, SortKey.author)
        assert zeta_alpha_items == snapshot


class TestMove:
    def test_move_forward(self):
        items = [make_record(i, rank=n) for n, i in enumerate("abcd")]
        ordered, request = move(items, "a", 2)
        assert _ids(ordered) == ["b", "c", "a", "d"]
        assert request == {"b": 0, "c": 1, "a": 2}

    def test_move_clamps_index(self):
        items = [make_record(i, rank=n) for n, i in enumerate("abc")]
        ordered, _ = move(items, "a", 99)
        assert _ids(ordered) == ["b", "c", "a"]
        ordered, _ = move(items, "c", -5)
        assert _ids(ordered) == ["c", "a", "b"]

    def test_move_in_place_is_noop(self):
        items = [make_record(i, rank=n) for n, i in enumerate("abc")]
        ordered, request = move(items, "b", 1)
        assert ordered == items
        assert request == {}

    def test_unknown_id(self):
        with pytest.raises(KeyError):
            move([make_record("a")], "zzz", 0)
