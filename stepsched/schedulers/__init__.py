"""
CPU Scheduling Algorithms
스케줄링 방법 ID(0-6)로 정책을 선택한다
"""

from dataclasses import dataclass

from stepsched.core.scheduler_base import BaseScheduler, ConfigurationError
from stepsched.core.simulation import DEFAULT_UNIT_COUNT
from .basic_schedulers import (DEFAULT_SLICE_LENGTH, FCFSScheduler, RoundRobinScheduler,
                               SJFScheduler, SRTFScheduler)
from .priority_schedulers import (PriorityFCFSScheduler, PriorityNonPreemptiveScheduler,
                                  PrioritySRTFScheduler)

# 사용 가능한 알고리즘 정의 (방법 ID → 정책 클래스)
ALGORITHMS = {
    0: FCFSScheduler,
    1: SJFScheduler,
    2: SRTFScheduler,
    3: RoundRobinScheduler,
    4: PriorityFCFSScheduler,
    5: PrioritySRTFScheduler,
    6: PriorityNonPreemptiveScheduler,
}


@dataclass
class SimulationConfig:
    """시뮬레이션 설정 (방법, 유닛 수, Round Robin 타임 슬라이스)"""
    method: int
    unit_count: int = DEFAULT_UNIT_COUNT
    slice_length: int = DEFAULT_SLICE_LENGTH

    def validate(self) -> 'SimulationConfig':
        """
        Raises:
            ConfigurationError: 설정 값이 유효하지 않은 경우
        """
        if self.method not in ALGORITHMS:
            raise ConfigurationError(f"invalid schedule method: {self.method} "
                                     f"(0-{len(ALGORITHMS) - 1} 중 선택)")
        if self.unit_count < 1:
            raise ConfigurationError(f"유닛 수는 1 이상이어야 합니다: {self.unit_count}")
        if self.slice_length < 1:
            raise ConfigurationError(f"타임 슬라이스는 1 이상이어야 합니다: {self.slice_length}")
        return self


def create_scheduler(method: int, slice_length: int = DEFAULT_SLICE_LENGTH) -> BaseScheduler:
    """방법 ID에 해당하는 스케줄러 생성"""
    SimulationConfig(method, slice_length=slice_length).validate()

    scheduler_class = ALGORITHMS[method]
    if scheduler_class is RoundRobinScheduler:
        return scheduler_class(time_slice=slice_length)
    return scheduler_class()


__all__ = [
    'ALGORITHMS',
    'SimulationConfig',
    'create_scheduler',
    'DEFAULT_SLICE_LENGTH',
    'FCFSScheduler',
    'SJFScheduler',
    'SRTFScheduler',
    'RoundRobinScheduler',
    'PriorityFCFSScheduler',
    'PrioritySRTFScheduler',
    'PriorityNonPreemptiveScheduler'
]
