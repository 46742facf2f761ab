"""
Core modules for the tick-step scheduler simulator
"""

from .process import Process, ProcessState
from .scheduler_base import (IDLE, BaseScheduler, ConfigurationError, SchedulerError,
                             SchedulingInvariantError, SimulationContext, assign_units,
                             sort_unit_states, to_unit_states)
from .simulation import (DEFAULT_UNIT_COUNT, ArrivalRecord, GanttEntry, SchedulerStats,
                         Simulator, TickRecord, build_gantt_chart)

__all__ = [
    'Process',
    'ProcessState',
    'IDLE',
    'BaseScheduler',
    'SchedulerError',
    'ConfigurationError',
    'SchedulingInvariantError',
    'SimulationContext',
    'assign_units',
    'sort_unit_states',
    'to_unit_states',
    'DEFAULT_UNIT_COUNT',
    'ArrivalRecord',
    'GanttEntry',
    'SchedulerStats',
    'Simulator',
    'TickRecord',
    'build_gantt_chart'
]
