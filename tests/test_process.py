"""Tests for the process control block."""

import pytest

from stepsched.core.process import Process, ProcessState


class TestProcess:

    def test_new_process_has_full_remaining_time(self):
        process = Process(pid=1, priority=2, execution_time=5)
        assert process.remaining_time == 5
        assert process.executed_time == 0
        assert process.state is ProcessState.READY
        assert not process.is_completed()

    def test_execute_decrements_remaining_time(self):
        process = Process(pid=1, priority=0, execution_time=2)
        assert process.execute() is False
        assert process.remaining_time == 1
        assert process.executed_time == 1
        assert process.execute() is True
        assert process.is_completed()

    def test_execute_never_goes_below_zero(self):
        process = Process(pid=1, priority=0, execution_time=2)
        assert process.execute(5) is True
        assert process.remaining_time == 0

    def test_completed_process_cannot_execute(self):
        process = Process(pid=7, priority=0, execution_time=1)
        process.execute()
        with pytest.raises(ValueError, match="P7"):
            process.execute()
