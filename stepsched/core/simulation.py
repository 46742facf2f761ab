"""
tick 단위 시뮬레이션 루프 및 통계

한 tick의 처리 순서:
    도착 프로세스 추가 → 정책 실행 (Ready List 정렬) → 유닛 배치
    → 점유 프로세스의 남은 시간 감소, 완료 프로세스 제거 → tick 기록 → 시간 증가

입력이 모두 소진되고 모든 유닛이 유휴 상태가 되면 종료한다.
"""

import sys
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from dataclasses import dataclass, field
from .process import Process, ProcessState
from .scheduler_base import (IDLE, BaseScheduler, ConfigurationError, SchedulingInvariantError,
                             SimulationContext, to_unit_states)

DEFAULT_UNIT_COUNT = 1


@dataclass
class ArrivalRecord:
    """입력 한 줄: 도착 시간과 (id, 우선순위, 실행 시간) 목록"""
    time: int
    processes: List[Tuple[int, int, int]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TickRecord:
    """한 tick의 출력: 시간과 유닛별 점유 프로세스 ID (-1은 유휴)"""
    time: int
    units: Tuple[int, ...]

    def format(self) -> str:
        return " ".join(str(value) for value in (self.time,) + tuple(self.units))


@dataclass
class GanttEntry:
    """Gantt Chart 엔트리"""
    pid: int
    start_time: int
    end_time: int


def build_gantt_chart(ticks: Iterable[TickRecord]) -> List[GanttEntry]:
    """
    tick 기록에서 Gantt Chart 생성
    같은 프로세스가 연속으로 실행된 tick은 하나의 구간으로 합친다
    """
    entries: List[GanttEntry] = []
    open_entries: Dict[int, GanttEntry] = {}

    for tick in ticks:
        for pid in tick.units:
            if pid == IDLE:
                continue
            entry = open_entries.get(pid)
            if entry is not None and entry.end_time == tick.time:
                entry.end_time = tick.time + 1
            else:
                entry = GanttEntry(pid, tick.time, tick.time + 1)
                open_entries[pid] = entry
                entries.append(entry)

    return sorted(entries, key=lambda e: (e.start_time, e.pid))


class SchedulerStats:
    """스케줄링 통계"""

    def __init__(self, unit_count: int = DEFAULT_UNIT_COUNT):
        self.unit_count = unit_count
        self.total_waiting_time = 0
        self.total_turnaround_time = 0
        self.total_response_time = 0
        self.preemptions = 0
        self.cpu_busy_time = 0  # 점유된 유닛-tick 합계
        self.total_simulation_time = 0
        self.process_count = 0

    def calculate_averages(self) -> Dict:
        """평균 계산"""
        capacity = self.total_simulation_time * self.unit_count
        utilization = (self.cpu_busy_time / capacity * 100) if capacity > 0 else 0

        if self.process_count == 0:
            return {
                'avg_waiting_time': 0,
                'avg_turnaround_time': 0,
                'avg_response_time': 0,
                'cpu_utilization': utilization,
                'preemptions': self.preemptions
            }

        return {
            'avg_waiting_time': self.total_waiting_time / self.process_count,
            'avg_turnaround_time': self.total_turnaround_time / self.process_count,
            'avg_response_time': self.total_response_time / self.process_count,
            'cpu_utilization': utilization,
            'preemptions': self.preemptions
        }


class Simulator:
    """
    tick 루프
    입력 레코드를 받아 스케줄러(정책)로 유닛을 배치하고 남은 시간을 관리한다
    """

    def __init__(self, scheduler: BaseScheduler, unit_count: int = DEFAULT_UNIT_COUNT,
                 records: Optional[Iterable[ArrivalRecord]] = None):
        """
        Args:
            scheduler: 스케줄링 정책
            unit_count: 실행 유닛(CPU) 수
            records: 도착 레코드 (시간 순, 스트림 가능)
        """
        if unit_count < 1:
            raise ConfigurationError(f"유닛 수는 1 이상이어야 합니다: {unit_count}")

        self.scheduler = scheduler
        self.name = scheduler.name
        self.context = SimulationContext(unit_count=unit_count)
        self._records: Iterator[ArrivalRecord] = iter(records if records is not None else [])
        self._pending: Optional[ArrivalRecord] = None

        self.ticks: List[TickRecord] = []
        self.processes: List[Process] = []
        self.terminated_processes: List[Process] = []
        self.stats = SchedulerStats(unit_count)

    @property
    def current_time(self) -> int:
        return self.context.current_time

    def admit(self, pid: int, priority: int, execution_time: int) -> Optional[Process]:
        """새 프로세스를 Ready List 끝에 추가 (살아있는 프로세스와 ID가 겹치면 버림)"""
        context = self.context
        if any(p.pid == pid for p in context.ready_queue):
            message = f"P{pid} ID가 살아있는 프로세스와 중복되어 버림"
            print(f"경고: {message}", file=sys.stderr)
            context.log_event(message)
            return None

        process = Process(pid, priority, execution_time, arrival_time=context.current_time)
        context.ready_queue.append(process)
        self.processes.append(process)
        context.log_event(f"P{pid} arrived (prio={priority}, exec={execution_time}) → Ready Queue")
        return process

    def handle_process_arrival(self):
        """tick마다 레코드를 최대 한 개 읽어 도착 처리 (미래 시간 레코드는 보류)"""
        context = self.context

        if self._pending is None:
            if context.input_exhausted:
                return
            self._pending = next(self._records, None)
            if self._pending is None:
                context.input_exhausted = True
                context.log_event("입력 종료")
                return

        if self._pending.time > context.current_time:
            return

        record, self._pending = self._pending, None
        if record.time < context.current_time:
            context.log_event(f"T={record.time} 레코드가 늦게 도착 → 현재 시간에 추가")

        for pid, priority, execution_time in record.processes:
            self.admit(pid, priority, execution_time)

    def dispatch(self, occupants: List[Process]):
        """유닛 점유 변화 기록 (실행 시작, 선점)"""
        context = self.context

        for process in context.running:
            if process.is_completed() or any(process is p for p in occupants):
                continue
            process.state = ProcessState.READY
            self.stats.preemptions += 1
            context.log_event(f"P{process.pid} preempted → Ready Queue")

        for process in occupants:
            if any(process is p for p in context.running):
                continue
            process.state = ProcessState.RUNNING
            if process.start_time is None:
                process.start_time = context.current_time
                process.response_time = context.current_time - process.arrival_time
            context.log_event(f"P{process.pid} → Running")

    def execute_units(self, occupants: List[Process]):
        """
        유닛을 점유한 프로세스의 남은 시간을 1 감소
        남은 시간이 0이 된 프로세스는 Ready List에서 즉시 제거

        Raises:
            SchedulingInvariantError: 점유 프로세스가 Ready List에 없거나 두 유닛을 점유한 경우
        """
        context = self.context

        if len({id(p) for p in occupants}) != len(occupants):
            raise SchedulingInvariantError("한 프로세스가 두 개 이상의 유닛을 점유했습니다")

        for process in occupants:
            index = context.index_of(process)
            if index < 0:
                raise SchedulingInvariantError(
                    f"유닛 점유 프로세스 P{process.pid}를 Ready List에서 찾을 수 없습니다")

            self.stats.cpu_busy_time += 1
            if process.execute(1):
                del context.ready_queue[index]
                process.finish_time = context.current_time + 1
                self.terminate_process(process)

    def terminate_process(self, process: Process):
        """프로세스 종료 처리"""
        process.state = ProcessState.TERMINATED
        process.turnaround_time = process.finish_time - process.arrival_time
        process.waiting_time = process.turnaround_time - process.execution_time

        self.terminated_processes.append(process)
        self.context.log_event(f"P{process.pid} → Terminated "
                               f"(WT={process.waiting_time}, TT={process.turnaround_time})")

    def is_simulation_complete(self) -> bool:
        """입력이 소진되고 모든 유닛이 유휴 상태이면 완료"""
        return self.context.input_exhausted and self.context.all_units_idle()

    def execute_one_step(self) -> bool:
        """
        한 tick 실행

        Returns:
            시뮬레이션 완료 여부
        """
        if self.is_simulation_complete():
            return True

        context = self.context

        # 1. 프로세스 도착 처리
        self.handle_process_arrival()

        # 2. 정책 실행 및 유닛 배치
        occupants = self.scheduler.schedule(context)
        self.dispatch(occupants)
        context.running = occupants
        context.unit_states = to_unit_states(occupants, context.unit_count)

        # 3. 실행 (남은 시간 감소, 완료 프로세스 제거)
        self.execute_units(occupants)

        # 4. 출력 기록 후 시간 증가
        self.ticks.append(TickRecord(context.current_time, tuple(context.unit_states)))
        self.stats.total_simulation_time += 1
        context.current_time += 1

        return self.is_simulation_complete()

    def iter_ticks(self) -> Iterator[TickRecord]:
        """tick을 하나씩 실행하며 기록을 바로 반환 (스트리밍 출력용)"""
        while not self.is_simulation_complete():
            self.execute_one_step()
            yield self.ticks[-1]

    def run(self, verbose: bool = False) -> Dict:
        """
        스케줄링 시뮬레이션 실행

        Args:
            verbose: 상세 로그 출력 여부

        Returns:
            시뮬레이션 결과 딕셔너리
        """
        self.context.log_event(f"===== {self.name} Scheduling Started =====")

        for _ in self.iter_ticks():
            pass

        self.context.log_event(f"===== {self.name} Scheduling Completed =====")

        if verbose:
            for log in self.context.event_log:
                print(log)

        return self.get_results()

    def update_statistics(self):
        """최종 통계 업데이트"""
        self.stats.process_count = len(self.terminated_processes)
        self.stats.total_waiting_time = sum(p.waiting_time for p in self.terminated_processes)
        self.stats.total_turnaround_time = sum(p.turnaround_time for p in self.terminated_processes)
        self.stats.total_response_time = sum(p.response_time for p in self.terminated_processes
                                             if p.response_time is not None)

    def get_current_snapshot(self) -> Dict:
        """현재 시뮬레이션 상태 스냅샷 반환"""
        context = self.context
        return {
            'time': context.current_time,
            'units': list(context.unit_states),
            'running': list(context.running),
            'ready_queue': list(context.ready_queue),
            'terminated': list(self.terminated_processes),
            'input_exhausted': context.input_exhausted,
            'latest_tick': self.ticks[-1] if self.ticks else None,
            'latest_log': context.event_log[-1] if context.event_log else ""
        }

    def get_results(self) -> Dict:
        """
        시뮬레이션 결과 반환

        Returns:
            결과 딕셔너리 (통계, tick 기록, Gantt Chart, 로그 등)
        """
        self.update_statistics()

        return {
            'algorithm': self.name,
            'statistics': self.stats.calculate_averages(),
            'ticks': list(self.ticks),
            'gantt_chart': build_gantt_chart(self.ticks),
            'event_log': list(self.context.event_log),
            'processes': list(self.terminated_processes)
        }
