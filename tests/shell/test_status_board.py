"""Tests for the status board."""

import asyncio

import pytest

from src.shell.status_board import StatusBoard


class TestStatusBoard:
    """Tests for StatusBoard."""

    def test_starts_empty(self):
        board = StatusBoard()

        assert board.message == ""
        assert board.updated_at is None
        assert board.pulsing is False

    def test_report_without_loop_skips_pulse(self):
        board = StatusBoard()

        board.report("Refreshing data...")

        assert board.message == "Refreshing data..."
        assert board.updated_at is not None
        assert board.pulsing is False

    @pytest.mark.asyncio
    async def test_pulse_clears_after_delay(self):
        board = StatusBoard(pulse_seconds=0.01)

        board.report("Last updated: 10:00:00")
        assert board.pulsing is True

        await asyncio.sleep(0.05)
        assert board.pulsing is False
        assert board.message == "Last updated: 10:00:00"

    @pytest.mark.asyncio
    async def test_new_report_restarts_pulse(self):
        board = StatusBoard(pulse_seconds=0.05)

        board.report("first")
        await asyncio.sleep(0.03)
        board.report("second")
        await asyncio.sleep(0.03)

        assert board.pulsing is True
        assert board.message == "second"

    @pytest.mark.asyncio
    async def test_close_cancels_pulse(self):
        board = StatusBoard(pulse_seconds=10)
        board.report("Refreshing data...")

        board.close()

        assert board.pulsing is False
