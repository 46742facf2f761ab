"""
우선순위 스케줄링 알고리즘 구현 (낮은 우선순위 값이 높은 우선순위)
- Priority with preemption, 동일 우선순위는 FCFS
- Priority with preemption, 동일 우선순위는 SRTF
- Priority without preemption, 동일 우선순위는 FCFS
"""

from stepsched.core.scheduler_base import BaseScheduler, SimulationContext, stable_sort


class PriorityFCFSScheduler(BaseScheduler):
    """
    우선순위 스케줄러 - 선점형
    전체 Ready List를 우선순위로 안정 정렬 (동일 우선순위는 도착 순서 유지)
    """

    method_id = 4
    name = "Priority (FCFS)"

    def order_ready_queue(self, context: SimulationContext):
        stable_sort(context.ready_queue, key=lambda p: p.priority)


class PrioritySRTFScheduler(BaseScheduler):
    """
    우선순위 스케줄러 - 선점형
    남은 시간으로 먼저 정렬한 뒤 우선순위로 안정 정렬 (동일 우선순위는 남은 시간 순)
    """

    method_id = 5
    name = "Priority (SRTF)"

    def order_ready_queue(self, context: SimulationContext):
        stable_sort(context.ready_queue, key=lambda p: p.remaining_time)
        stable_sort(context.ready_queue, key=lambda p: p.priority)


class PriorityNonPreemptiveScheduler(BaseScheduler):
    """
    우선순위 스케줄러 - 비선점형
    실행 중인 프로세스는 그대로 두고, 나머지를 우선순위로 정렬
    """

    method_id = 6
    name = "Priority (Non-preemptive)"
    preemptive = False

    def order_ready_queue(self, context: SimulationContext):
        cut = self.running_prefix_length(context)
        stable_sort(context.ready_queue, key=lambda p: p.priority, start=cut)
