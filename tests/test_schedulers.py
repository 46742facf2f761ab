"""Tests for the seven ready-list ordering policies.

Each policy is exercised directly on a SimulationContext and then end to
end through the tick loop.
"""

import pytest

from stepsched.core.process import Process
from stepsched.core.scheduler_base import ConfigurationError, SimulationContext
from stepsched.schedulers import (ALGORITHMS, FCFSScheduler, PriorityFCFSScheduler,
                                  PriorityNonPreemptiveScheduler, PrioritySRTFScheduler,
                                  RoundRobinScheduler, SimulationConfig, SJFScheduler,
                                  SRTFScheduler, create_scheduler)


def pids(context):
    return [p.pid for p in context.ready_queue]


def context_with(*specs, unit_count=1, running=()):
    """specs are (pid, priority, execution_time, remaining_time) tuples."""
    queue = []
    for pid, priority, execution_time, remaining_time in specs:
        process = Process(pid, priority, execution_time)
        process.remaining_time = remaining_time
        queue.append(process)
    running_processes = [p for p in queue if p.pid in running]
    return SimulationContext(unit_count=unit_count, ready_queue=queue, running=running_processes)


class TestRegistry:

    def test_seven_methods_are_registered(self):
        assert sorted(ALGORITHMS) == list(range(7))

    @pytest.mark.parametrize("method", [-1, 7, 42])
    def test_unknown_method_is_rejected(self, method):
        with pytest.raises(ConfigurationError, match="invalid schedule method"):
            create_scheduler(method)

    def test_round_robin_receives_slice_length(self):
        scheduler = create_scheduler(3, slice_length=4)
        assert isinstance(scheduler, RoundRobinScheduler)
        assert scheduler.time_slice == 4

    @pytest.mark.parametrize("unit_count, slice_length", [(0, 1), (1, 0), (-2, 3)])
    def test_config_rejects_non_positive_values(self, unit_count, slice_length):
        with pytest.raises(ConfigurationError):
            SimulationConfig(0, unit_count, slice_length).validate()

    def test_non_preemptive_flags(self):
        assert not FCFSScheduler.preemptive
        assert not SJFScheduler.preemptive
        assert not PriorityNonPreemptiveScheduler.preemptive
        assert SRTFScheduler.preemptive


class TestOrdering:

    def test_fcfs_keeps_arrival_order(self):
        context = context_with((3, 0, 9, 9), (1, 0, 1, 1), (2, 0, 5, 5))
        FCFSScheduler().order_ready_queue(context)
        assert pids(context) == [3, 1, 2]

    def test_sjf_sorts_only_waiting_suffix(self):
        context = context_with((1, 0, 9, 4), (2, 0, 5, 5), (3, 0, 2, 2), running=(1,))
        SJFScheduler().order_ready_queue(context)
        assert pids(context) == [1, 3, 2]

    def test_sjf_uses_total_execution_time(self):
        # 2 has less remaining time, but 3 has the shorter job
        context = context_with((1, 0, 9, 9), (2, 0, 6, 1), (3, 0, 4, 4), running=(1,))
        SJFScheduler().order_ready_queue(context)
        assert pids(context) == [1, 3, 2]

    def test_srtf_sorts_everything_by_remaining_time(self):
        context = context_with((1, 0, 9, 4), (2, 0, 5, 1), (3, 0, 4, 4), running=(1,))
        SRTFScheduler().order_ready_queue(context)
        assert pids(context) == [2, 1, 3]

    def test_priority_fcfs_breaks_ties_by_arrival(self):
        context = context_with((1, 2, 1, 1), (2, 1, 1, 1), (3, 2, 1, 1), (4, 1, 1, 1))
        PriorityFCFSScheduler().order_ready_queue(context)
        assert pids(context) == [2, 4, 1, 3]

    def test_priority_srtf_breaks_ties_by_remaining_time(self):
        context = context_with((1, 1, 9, 9), (2, 1, 3, 3), (3, 0, 5, 5), (4, 1, 2, 2))
        PrioritySRTFScheduler().order_ready_queue(context)
        assert pids(context) == [3, 4, 2, 1]

    def test_priority_without_preemption_keeps_running_process(self):
        context = context_with((1, 5, 9, 4), (2, 3, 5, 5), (3, 0, 2, 2), running=(1,))
        PriorityNonPreemptiveScheduler().order_ready_queue(context)
        assert pids(context) == [1, 3, 2]

    def test_round_robin_requeues_expired_slice(self):
        context = context_with((1, 0, 5, 3), (2, 0, 5, 5), (3, 0, 5, 5), running=(1,))
        RoundRobinScheduler(time_slice=2).order_ready_queue(context)
        assert pids(context) == [2, 3, 1]

    def test_round_robin_keeps_process_mid_slice(self):
        context = context_with((1, 0, 5, 4), (2, 0, 5, 5), running=(1,))
        RoundRobinScheduler(time_slice=2).order_ready_queue(context)
        assert pids(context) == [1, 2]

    def test_round_robin_never_requeues_unexecuted_process(self):
        context = context_with((1, 0, 5, 5), (2, 0, 5, 5), running=(1,))
        RoundRobinScheduler(time_slice=1).order_ready_queue(context)
        assert pids(context) == [1, 2]

    def test_round_robin_rejects_zero_slice(self):
        with pytest.raises(ConfigurationError):
            RoundRobinScheduler(time_slice=0)


class TestScenarios:

    def test_sjf_does_not_preempt(self, simulate_lines):
        lines = simulate_lines(1, "0 1 0 5\n1 2 0 1\n\n")
        assert lines == ["0 1", "1 1", "2 1", "3 1", "4 1", "5 2", "6 -1"]

    def test_srtf_preempts_on_same_input(self, simulate_lines):
        lines = simulate_lines(2, "0 1 0 5\n1 2 0 1\n\n")
        assert lines == ["0 1", "1 2", "2 1", "3 1", "4 1", "5 1", "6 -1"]

    def test_sjf_picks_shortest_job_when_nothing_runs(self, simulate_lines):
        lines = simulate_lines(1, "0 1 0 3 2 0 5 3 0 2\n\n")
        assert lines == ["0 3", "1 3", "2 1", "3 1", "4 1",
                         "5 2", "6 2", "7 2", "8 2", "9 2", "10 -1"]

    def test_round_robin_single_unit(self, simulate_lines):
        lines = simulate_lines(3, "0 1 0 3 2 0 3\n\n", slice_length=2)
        assert lines == ["0 1", "1 1", "2 2", "3 2", "4 1", "5 2", "6 -1"]

    def test_round_robin_two_units(self, simulate_lines):
        lines = simulate_lines(3, "0 1 0 2 2 0 2 3 0 2\n\n", unit_count=2, slice_length=1)
        assert lines == ["0 1 2", "1 1 3", "2 2 3", "3 -1 -1"]

    def test_priority_with_preemption(self, simulate_lines):
        lines = simulate_lines(4, "0 1 5 3\n1 2 1 2\n\n")
        assert lines == ["0 1", "1 2", "2 2", "3 1", "4 1", "5 -1"]

    def test_priority_without_preemption(self, simulate_lines):
        lines = simulate_lines(6, "0 1 5 3\n1 2 1 2\n\n")
        assert lines == ["0 1", "1 1", "2 1", "3 2", "4 2", "5 -1"]

    def test_priority_ties_fall_back_to_arrival_order(self, simulate_lines):
        lines = simulate_lines(4, "0 1 1 1 2 1 1 3 0 1\n\n")
        assert lines == ["0 3", "1 1", "2 2", "3 -1"]

    def test_priority_srtf_differs_from_priority_fcfs(self, simulate_lines):
        text = "0 1 1 4 2 1 2 3 2 1\n\n"
        assert simulate_lines(5, text) == ["0 2", "1 2", "2 1", "3 1", "4 1", "5 1",
                                           "6 3", "7 -1"]
        assert simulate_lines(4, text) == ["0 1", "1 1", "2 1", "3 1", "4 2", "5 2",
                                           "6 3", "7 -1"]
