"""
기본 스케줄링 알고리즘 구현
- FCFS (First-Come, First-Served)
- SJF (Shortest Job First - 비선점형)
- SRTF (Shortest Remaining Time First - 선점형)
- Round Robin
"""

from stepsched.core.scheduler_base import (BaseScheduler, ConfigurationError, SimulationContext,
                                           stable_sort)

DEFAULT_SLICE_LENGTH = 1


class FCFSScheduler(BaseScheduler):
    """
    FCFS (First-Come, First-Served) 스케줄러
    비선점형: 먼저 도착한 프로세스를 먼저 처리
    """

    method_id = 0
    name = "FCFS"
    preemptive = False

    def order_ready_queue(self, context: SimulationContext):
        # Ready List는 이미 도착 순서
        pass


class SJFScheduler(BaseScheduler):
    """
    SJF (Shortest Job First) 스케줄러 - 비선점형
    실행 중인 프로세스는 그대로 두고, 나머지를 총 실행 시간 오름차순으로 정렬
    """

    method_id = 1
    name = "SJF"
    preemptive = False

    def order_ready_queue(self, context: SimulationContext):
        cut = self.running_prefix_length(context)
        stable_sort(context.ready_queue, key=lambda p: p.execution_time, start=cut)


class SRTFScheduler(BaseScheduler):
    """
    SRTF (Shortest Remaining Time First) 스케줄러 - 선점형
    매 tick 전체 Ready List를 남은 실행 시간 오름차순으로 정렬
    """

    method_id = 2
    name = "SRTF"

    def order_ready_queue(self, context: SimulationContext):
        stable_sort(context.ready_queue, key=lambda p: p.remaining_time)


class RoundRobinScheduler(BaseScheduler):
    """
    Round Robin 스케줄러
    FCFS 순서에 타임 슬라이스 만료 규칙 추가: 슬라이스를 다 쓴 프로세스는 Ready List 끝으로
    """

    method_id = 3
    name = "Round Robin"

    def __init__(self, time_slice: int = DEFAULT_SLICE_LENGTH):
        if time_slice < 1:
            raise ConfigurationError(f"타임 슬라이스는 1 이상이어야 합니다: {time_slice}")
        self.time_slice = time_slice
        self.name = f"Round Robin (q={time_slice})"

    def slice_expired(self, executed_time: int) -> bool:
        """실행한 적이 있고, 실행 시간이 슬라이스의 배수이면 만료"""
        return executed_time > 0 and executed_time % self.time_slice == 0

    def order_ready_queue(self, context: SimulationContext):
        queue = context.ready_queue
        for process in self.running_processes(context):
            if not self.slice_expired(process.executed_time):
                continue
            del queue[context.index_of(process)]
            queue.append(process)
            context.log_event(f"P{process.pid} time slice expired → Ready Queue (tail)")
