"""
Unit tests for terminal events.

Tests the single-slot event channel and background win/lose
validation of a game.
"""
import threading
import time
from typing import List

import pytest
from minesweeper import Event, EventChannel, ExplodedError, Game

WAIT_TIMEOUT = 5.0


def collect(channel: EventChannel) -> List[Event]:
    """Subscribe a list that receives every delivered event."""
    received: List[Event] = []
    channel.subscribe(received.append)
    return received


# ============================================================================
# Event Channel Tests
# ============================================================================

class TestEventChannel:
    """Test the single-slot mailbox."""

    def test_new_channel_is_empty(self, channel: EventChannel) -> None:
        assert channel.poll() is None
        assert channel.done is False

    def test_wait_times_out_without_event(self, channel: EventChannel) -> None:
        assert channel.wait(timeout=0.05) is None

    def test_first_event_is_kept(self, channel: EventChannel) -> None:
        assert channel.publish(Event.LOSE) is True
        assert channel.publish(Event.WIN) is False
        assert channel.poll() == Event.LOSE
        assert channel.wait() == Event.LOSE

    def test_event_persists_without_listener(
        self, channel: EventChannel
    ) -> None:
        channel.publish(Event.WIN)
        assert channel.wait(timeout=0) == Event.WIN
        assert channel.wait(timeout=0) == Event.WIN

    def test_subscriber_called_once(self, channel: EventChannel) -> None:
        received = collect(channel)
        channel.publish(Event.WIN)
        channel.publish(Event.LOSE)
        assert received == [Event.WIN]

    def test_failing_subscriber_does_not_block_others(
        self, channel: EventChannel
    ) -> None:
        def broken(event: Event) -> None:
            raise RuntimeError("listener failed")

        channel.subscribe(broken)
        received = collect(channel)

        assert channel.publish(Event.WIN) is True
        assert received == [Event.WIN]
        assert channel.poll() == Event.WIN

    def test_late_subscriber_called_immediately(
        self, channel: EventChannel
    ) -> None:
        channel.publish(Event.LOSE)
        assert collect(channel) == [Event.LOSE]

    def test_wait_wakes_on_publish(self, channel: EventChannel) -> None:
        timer = threading.Timer(0.05, channel.publish, args=(Event.WIN,))
        timer.start()
        try:
            assert channel.wait(timeout=WAIT_TIMEOUT) == Event.WIN
        finally:
            timer.join()

    def test_concurrent_publish_delivers_once(
        self, channel: EventChannel
    ) -> None:
        received = collect(channel)
        threads = [
            threading.Thread(target=channel.publish, args=(event,))
            for event in [Event.WIN, Event.LOSE] * 10
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(received) == 1


# ============================================================================
# Evaluation Tests
# ============================================================================

class TestEvaluate:
    """Test synchronous win/lose evaluation."""

    def test_not_started(self, sample_game: Game) -> None:
        assert sample_game.evaluate() is None

    def test_in_progress(self, rigged_game: Game) -> None:
        rigged_game.visit(3, 0)
        assert rigged_game.evaluate() is None

    def test_win_when_every_safe_cell_visited(self, rigged_game: Game) -> None:
        rigged_game.visit(0, 0)
        assert rigged_game.evaluate() == Event.WIN

    def test_lose_when_bomb_visited(self, rigged_game: Game) -> None:
        with pytest.raises(ExplodedError):
            rigged_game.visit(4, 0)
        assert rigged_game.evaluate() == Event.LOSE

    def test_lose_takes_precedence(self, rigged_game: Game) -> None:
        rigged_game.visit(0, 0)
        with pytest.raises(ExplodedError):
            rigged_game.visit(4, 4)
        assert rigged_game.evaluate() == Event.LOSE


# ============================================================================
# Background Validation Tests
# ============================================================================

class TestGameEvents:
    """Test events published by the background validator."""

    def test_win_event(self, easy_game: Game) -> None:
        for cell in easy_game.board:
            if not cell.is_bomb and not cell.visited:
                easy_game.visit(cell.x, cell.y)
        assert easy_game.events.wait(timeout=WAIT_TIMEOUT) == Event.WIN
        assert easy_game.outcome == Event.WIN

    def test_lose_event(self, easy_game: Game) -> None:
        bomb = easy_game.bomb_locations()[0]
        with pytest.raises(ExplodedError):
            easy_game.visit(bomb.x, bomb.y)
        assert easy_game.events.wait(timeout=WAIT_TIMEOUT) == Event.LOSE

    def test_no_event_while_in_progress(self, rigged_game: Game) -> None:
        rigged_game.visit(3, 0)
        assert rigged_game.events.wait(timeout=0.2) is None

    def test_win_delivered_exactly_once(self, rigged_game: Game) -> None:
        received = collect(rigged_game.events)
        rigged_game.visit(0, 0)
        assert rigged_game.events.wait(timeout=WAIT_TIMEOUT) == Event.WIN

        rigged_game.flag(4, 0)
        rigged_game.visit(3, 0)
        time.sleep(0.1)
        assert received == [Event.WIN]

    def test_lose_delivered_exactly_once(self, easy_game: Game) -> None:
        received = collect(easy_game.events)
        for bomb in easy_game.bomb_locations():
            with pytest.raises(ExplodedError):
                easy_game.visit(bomb.x, bomb.y)
        assert easy_game.events.wait(timeout=WAIT_TIMEOUT) == Event.LOSE
        time.sleep(0.1)
        assert received == [Event.LOSE]

    def test_outcome_latched_after_loss(self, rigged_game: Game) -> None:
        with pytest.raises(ExplodedError):
            rigged_game.visit(4, 0)
        assert rigged_game.events.wait(timeout=WAIT_TIMEOUT) == Event.LOSE

        rigged_game.visit(0, 0)
        time.sleep(0.1)
        assert rigged_game.outcome == Event.LOSE


# ============================================================================
# Concurrency Tests
# ============================================================================

class TestConcurrentVisits:
    """Test visits issued from several threads at once."""

    def test_each_cell_revealed_once(self, easy_game: Game) -> None:
        safe_cells = [c.position for c in easy_game.board if not c.is_bomb]

        def play(offset: int) -> None:
            for x, y in safe_cells[offset:] + safe_cells[:offset]:
                easy_game.visit(x, y)

        threads = [
            threading.Thread(target=play, args=(i * 37,)) for i in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        positions = [record.position for record in easy_game.history]
        assert len(positions) == len(set(positions)) == len(safe_cells)
        assert easy_game.events.wait(timeout=WAIT_TIMEOUT) == Event.WIN

    def test_flags_and_visits_interleave(self, easy_game: Game) -> None:
        hints = easy_game.hint_locations()

        def flagger() -> None:
            for cell in hints:
                easy_game.flag(cell.x, cell.y)

        def visitor() -> None:
            for cell in hints:
                easy_game.visit(cell.x, cell.y)

        threads = [threading.Thread(target=flagger), threading.Thread(target=visitor)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for cell in hints:
            assert not (cell.visited and cell.flagged)
