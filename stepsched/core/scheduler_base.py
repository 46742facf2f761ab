"""
스케줄러 기본 프레임워크
- 시뮬레이션 컨텍스트 (Ready List, 유닛 상태, 시뮬레이션 시간)
- 유닛 할당 및 출력용 정렬
- 모든 스케줄링 정책의 공통 인터페이스
"""

from typing import Callable, List, Optional
from dataclasses import dataclass, field
from .process import Process

# 유휴 유닛 표시값
IDLE = -1


class SchedulerError(Exception):
    """스케줄러 오류의 기본 클래스"""


class ConfigurationError(SchedulerError, ValueError):
    """잘못된 스케줄링 방법, 유닛 수 또는 타임 슬라이스"""


class SchedulingInvariantError(SchedulerError, RuntimeError):
    """유닛에 기록된 프로세스를 Ready List에서 찾을 수 없는 등의 내부 불변식 위반"""


@dataclass
class SimulationContext:
    """
    tick 사이에 전달되는 시뮬레이션 상태
    Ready List와 유닛 상태는 이 컨텍스트만이 소유한다
    """
    unit_count: int = 1
    current_time: int = 0
    ready_queue: List[Process] = field(default_factory=list)
    unit_states: List[int] = field(default_factory=list)
    # 직전 tick에 유닛을 점유한 프로세스 (출력 순서)
    running: List[Process] = field(default_factory=list)
    input_exhausted: bool = False
    event_log: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.unit_states:
            self.unit_states = [IDLE] * self.unit_count

    def log_event(self, message: str):
        """이벤트 로그 기록"""
        self.event_log.append(f"[T={self.current_time:3d}] {message}")

    def index_of(self, process: Process) -> int:
        """Ready List에서 프로세스 위치 (동일 객체 기준), 없으면 -1"""
        for index, candidate in enumerate(self.ready_queue):
            if candidate is process:
                return index
        return -1

    def all_units_idle(self) -> bool:
        """모든 유닛이 유휴 상태인지 확인"""
        return all(state == IDLE for state in self.unit_states)


def sort_unit_states(unit_states: List[int]) -> List[int]:
    """
    출력용 유닛 상태 정렬
    프로세스 ID 오름차순, 유휴 유닛(-1)은 뒤로 (안정 정렬)
    """
    return sorted(unit_states, key=lambda state: (state == IDLE, state))


def assign_units(ready_queue: List[Process], unit_count: int) -> List[Process]:
    """
    정렬된 Ready List의 앞에서부터 최대 unit_count개의 프로세스를 유닛에 배치

    Returns:
        유닛을 점유한 프로세스 리스트 (출력 순서, PID 오름차순)
    """
    occupants = ready_queue[:unit_count]
    return sorted(occupants, key=lambda p: p.pid)


def to_unit_states(occupants: List[Process], unit_count: int) -> List[int]:
    """점유 프로세스 리스트를 유닛 상태 배열로 변환"""
    states = [p.pid for p in occupants] + [IDLE] * (unit_count - len(occupants))
    return sort_unit_states(states)


def stable_sort(queue: List[Process], key: Callable[[Process], int], start: int = 0):
    """Ready List의 start 이후 구간을 제자리에서 안정 정렬"""
    queue[start:] = sorted(queue[start:], key=key)


class BaseScheduler:
    """
    기본 스케줄러 클래스
    모든 스케줄링 정책은 order_ready_queue()만 구현하면 된다
    """

    method_id: Optional[int] = None
    name = "Base Scheduler"
    preemptive = True

    def order_ready_queue(self, context: SimulationContext):
        """
        Ready List 재정렬 (하위 클래스에서 구현)
        앞쪽 unit_count개의 프로세스가 이번 tick에 실행된다
        """
        raise NotImplementedError("Subclasses must implement order_ready_queue()")

    def schedule(self, context: SimulationContext) -> List[Process]:
        """
        정책에 따라 Ready List를 정렬하고 유닛에 배치

        Returns:
            이번 tick에 유닛을 점유하는 프로세스 리스트 (출력 순서)
        """
        self.order_ready_queue(context)
        return assign_units(context.ready_queue, context.unit_count)

    def running_processes(self, context: SimulationContext) -> List[Process]:
        """
        직전 tick에 유닛을 점유했고 아직 완료되지 않은 프로세스 (유닛 순서)

        Raises:
            SchedulingInvariantError: 살아있는 점유 프로세스가 Ready List에 없는 경우
        """
        running = []
        for process in context.running:
            if process.is_completed():
                # 직전 tick에 완료되어 Ready List에서 이미 제거됨
                continue
            if context.index_of(process) < 0:
                raise SchedulingInvariantError(
                    f"유닛 점유 프로세스 P{process.pid}를 Ready List에서 찾을 수 없습니다")
            running.append(process)
        return running

    def running_prefix_length(self, context: SimulationContext) -> int:
        """
        비선점형 정책용: Ready List 앞쪽에서 실행 중인 프로세스가 차지하는 구간 길이
        유닛 점유 프로세스를 Ready List와 대조하며 절단 위치를 앞으로 옮긴다
        """
        running = self.running_processes(context)
        cut = 0
        while cut < len(context.ready_queue) and cut < len(running):
            if not any(context.ready_queue[cut] is p for p in running):
                break
            cut += 1
        return cut

    def __repr__(self):
        return f"{type(self).__name__}(method={self.method_id})"
