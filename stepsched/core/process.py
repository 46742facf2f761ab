"""
프로세스 및 PCB (Process Control Block) 관리 모듈
"""

from enum import Enum
from typing import Optional


class ProcessState(Enum):
    """프로세스 상태"""
    READY = "Ready"
    RUNNING = "Running"
    TERMINATED = "Terminated"


class Process:
    """
    프로세스 제어 블록 (PCB)
    실행 시간과 남은 실행 시간을 관리 (0 <= remaining_time <= execution_time)
    """

    def __init__(self, pid: int, priority: int, execution_time: int, arrival_time: int = 0):
        """
        프로세스 초기화

        Args:
            pid: 프로세스 ID (동시에 살아있는 프로세스 사이에서만 유일)
            priority: 우선순위 (낮을수록 높은 우선순위)
            execution_time: 총 실행 시간 (tick)
            arrival_time: 도착(입력) 시간
        """
        self.pid = pid
        self.priority = priority
        self.execution_time = execution_time
        self.remaining_time = execution_time
        self.arrival_time = arrival_time

        self.state = ProcessState.READY

        # 통계 정보
        self.start_time: Optional[int] = None  # 첫 실행 시간
        self.finish_time: Optional[int] = None  # 완료 시간
        self.waiting_time = 0
        self.turnaround_time = 0
        self.response_time: Optional[int] = None

    @property
    def executed_time(self) -> int:
        """지금까지 실행된 시간"""
        return self.execution_time - self.remaining_time

    def execute(self, time_units: int = 1) -> bool:
        """
        프로세스 실행 (남은 시간 감소)

        Args:
            time_units: 실행할 시간 단위

        Returns:
            프로세스가 완료되었는지 여부
        """
        if self.is_completed():
            raise ValueError(f"이미 완료된 프로세스 P{self.pid}는 실행할 수 없습니다.")

        self.remaining_time = max(0, self.remaining_time - time_units)
        return self.is_completed()

    def is_completed(self) -> bool:
        """프로세스가 완료되었는지 확인"""
        return self.remaining_time <= 0

    def __repr__(self):
        return f"P{self.pid}[{self.state.value}]"

    def __str__(self):
        return f"Process {self.pid}: State={self.state.value}, Priority={self.priority}, " \
               f"Remaining={self.remaining_time}/{self.execution_time}"
