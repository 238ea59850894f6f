# tests/test_reconciler.py
"""Tests for merging repeated kiosk snapshots."""

import threading

import pytest

from kioskboard.config import ExtractionConfig, ReconcileConfig
from kioskboard.exceptions import ReconcileAborted
from kioskboard.scraper.chain import ExtractionChain
from kioskboard.scraper.reconciler import SnapshotReconciler, merge_snapshot, ordered_boards
from kioskboard.scraper.source import SequencePageSource, StaticPageSource
from tests.helpers import FakeClock, make_board, structured_html


def _reconciler(duration_ms=2000, poll_ms=1000, settle_ms=500, nudge=True, clock=None):
    config = ReconcileConfig(
        duration_ms=duration_ms,
        poll_interval_ms=poll_ms,
        settle_ms=settle_ms,
        nudge_enabled=nudge,
    )
    return SnapshotReconciler(ExtractionChain(), config, clock=clock or FakeClock())


class TestMergeSnapshot:

    def test_more_rows_replaces_wholesale(self):
        state = {}
        first = make_board('Game X', 2, prefix='Old')
        second = make_board('Game X', 3, prefix='New')
        merge_snapshot(state, [first])
        merge_snapshot(state, [second])
        assert list(state.values()) == [second]
        assert [row.player for row in state[second.key].rows] == ['New1', 'New2', 'New3']

    def test_equal_row_count_keeps_first(self):
        state = {}
        first = make_board('Game X', 3, prefix='Old')
        second = make_board('Game X', 3, prefix='New')
        merge_snapshot(state, [first])
        assert merge_snapshot(state, [second]) == 0
        assert state[first.key] is first

    def test_fewer_rows_never_replace(self):
        state = {}
        merge_snapshot(state, [make_board('Game X', 5)])
        merge_snapshot(state, [make_board('Game X', 4)])
        assert len(next(iter(state.values())).rows) == 5

    def test_same_snapshot_twice_is_idempotent(self):
        snapshot = [make_board('Alpha', 2), make_board('Beta', 4, art='b.png')]
        state = {}
        merge_snapshot(state, snapshot)
        before = dict(state)
        assert merge_snapshot(state, snapshot) == 0
        assert state == before

    def test_identity_is_case_insensitive_title_and_art(self):
        state = {}
        merge_snapshot(state, [make_board('Godzilla', 1, art='https://cdn/G.png')])
        merge_snapshot(state, [make_board('GODZILLA', 2, art='https://cdn/g.png')])
        assert len(state) == 1

    def test_different_art_is_a_different_game(self):
        state = {}
        merge_snapshot(state, [make_board('Godzilla', 1, art='premium.png')])
        merge_snapshot(state, [make_board('Godzilla', 1, art='pro.png')])
        assert len(state) == 2

    def test_ordered_boards_sorted_by_title(self):
        state = {}
        merge_snapshot(state, [make_board('zebra', 1), make_board('Alpha', 1), make_board('beta', 1)])
        assert [board.title for board in ordered_boards(state)] == ['Alpha', 'beta', 'zebra']


class TestSnapshotReconciler:

    def test_more_rows_wins_across_polls(self):
        source = SequencePageSource([
            structured_html({'Game X': 2}),
            structured_html({'Game X': 5}),
            structured_html({'Game X': 4}),
        ])
        reconciler = _reconciler(duration_ms=2000, poll_ms=1000)

        boards = reconciler.reconcile(source)

        assert reconciler.polls == 3
        assert len(boards) == 1
        assert len(boards[0].rows) == 5

    def test_rotating_games_are_all_retained(self):
        source = SequencePageSource([
            structured_html({'Medieval Madness': 3}),
            structured_html({'Godzilla': 2}),
            structured_html({'medieval madness': 1, 'Attack from Mars': 4}),
        ])
        boards = _reconciler().reconcile(source)

        assert [(board.title, len(board.rows)) for board in boards] == [
            ('Attack from Mars', 4),
            ('Godzilla', 2),
            ('Medieval Madness', 3),
        ]

    def test_polls_spaced_and_settled(self):
        clock = FakeClock()
        source = SequencePageSource([structured_html({'Game X': 1})])
        reconciler = _reconciler(duration_ms=3000, poll_ms=1000, settle_ms=500, clock=clock)

        reconciler.reconcile(source)

        assert clock.sleeps == [1.0, 1.0, 1.0, 0.5]
        assert reconciler.polls == 4

    def test_zero_duration_takes_only_final_snapshot(self):
        source = SequencePageSource([structured_html({'Game X': 2})])
        reconciler = _reconciler(duration_ms=0)

        boards = reconciler.reconcile(source)

        assert reconciler.polls == 1
        assert len(boards[0].rows) == 2

    def test_nudges_between_polls(self):
        source = SequencePageSource([structured_html({'Game X': 1})])
        _reconciler(duration_ms=3000, poll_ms=1000).reconcile(source)
        assert source.nudges == 3

    def test_nudge_disabled(self):
        source = SequencePageSource([structured_html({'Game X': 1})])
        _reconciler(nudge=False).reconcile(source)
        assert source.nudges == 0

    def test_waits_for_ready_markup_but_tolerates_absence(self):
        source = SequencePageSource(['<html><body><p>Loading</p></body></html>'])
        boards = _reconciler().reconcile(source)
        assert boards == []
        assert len(source.waits) == 1

    def test_ready_markup_follows_extraction_config(self):
        extraction = ExtractionConfig(row_selector='.entry')
        chain = ExtractionChain(config=extraction)
        source = SequencePageSource(['<html><body></body></html>'])
        SnapshotReconciler(chain, ReconcileConfig(duration_ms=0, settle_ms=0), clock=FakeClock()).reconcile(source)
        assert source.waits == [extraction.ready_selector]
        assert source.waits[0].startswith('.entry')

    def test_empty_ready_selector_skips_wait(self):
        source = SequencePageSource(['<html><body></body></html>'])
        config = ReconcileConfig(duration_ms=0, settle_ms=0, ready_selector='')
        SnapshotReconciler(ExtractionChain(), config, clock=FakeClock()).reconcile(source)
        assert source.waits == []

    def test_cancel_returns_what_was_gathered(self):
        cancel = threading.Event()
        reconciler = _reconciler(duration_ms=60000)

        class CancellingSource(StaticPageSource):
            def request_nudge(self):
                cancel.set()

        boards = reconciler.reconcile(CancellingSource(structured_html({'Game X': 2})), cancel=cancel)

        assert reconciler.polls == 1
        assert len(boards) == 1

    def test_page_failure_carries_partial_state(self):
        good = structured_html({'Game X': 3})

        class FlakySource(StaticPageSource):
            calls = 0

            def current_dom_state(self):
                self.calls += 1
                if self.calls > 1:
                    raise RuntimeError('Target page, context or browser has been closed')
                return super().current_dom_state()

        with pytest.raises(ReconcileAborted) as excinfo:
            _reconciler().reconcile(FlakySource(good))

        assert len(excinfo.value.partial) == 1
        assert len(excinfo.value.partial[0].rows) == 3
        assert isinstance(excinfo.value.__cause__, RuntimeError)
