"""
입력 데이터 파서 및 워크로드 생성 모듈

입력 형식 (한 줄에 한 레코드, 빈 줄 또는 스트림 끝에서 입력 종료):
    t id prio exec_t [id prio exec_t ...]
"""

import io
import random
import sys
from typing import Dict, Iterator, List, Optional, TextIO, Tuple
from stepsched.core.simulation import ArrivalRecord

FIELDS_PER_PROCESS = 3


class InputParser:
    """입력 스트림 파서"""

    @staticmethod
    def parse_line(line: str) -> Optional[ArrivalRecord]:
        """
        입력 한 줄 파싱

        잘못된 프로세스 항목(필드 부족, 정수가 아닌 값, 음수 ID, 1 미만의 실행 시간)은
        버리고 레코드의 warnings에 기록한다

        Args:
            line: 입력 라인

        Returns:
            도착 레코드 (빈 줄이면 None)

        Raises:
            ValueError: 시간 값을 읽을 수 없는 경우
        """
        tokens = line.split()
        if not tokens:
            return None

        try:
            time = int(tokens[0])
        except ValueError:
            raise ValueError(f"시간 값이 정수가 아닙니다: {tokens[0]!r}")
        if time < 0:
            raise ValueError(f"시간은 0 이상이어야 합니다: {time}")

        record = ArrivalRecord(time)
        fields = tokens[1:]

        for start in range(0, len(fields), FIELDS_PER_PROCESS):
            group = fields[start:start + FIELDS_PER_PROCESS]
            if len(group) < FIELDS_PER_PROCESS:
                record.warnings.append(f"T={time}: 불완전한 프로세스 항목 버림 {group}")
                continue

            try:
                pid, priority, execution_time = (int(value) for value in group)
            except ValueError:
                record.warnings.append(f"T={time}: 정수가 아닌 프로세스 항목 버림 {group}")
                continue

            if pid < 0:
                record.warnings.append(f"T={time}: 프로세스 ID는 0 이상이어야 합니다: {pid}")
                continue
            if execution_time < 1:
                record.warnings.append(f"T={time}: P{pid} 실행 시간은 1 이상이어야 합니다: "
                                       f"{execution_time}")
                continue

            record.processes.append((pid, priority, execution_time))

        return record

    @staticmethod
    def read_records(stream: TextIO, warn_stream: Optional[TextIO] = None) -> Iterator[ArrivalRecord]:
        """
        스트림에서 레코드를 한 줄씩 읽기 (빈 줄 또는 스트림 끝에서 종료)
        경고는 warn_stream(기본 stderr)으로 출력하고 파싱은 계속한다
        """
        warn_stream = warn_stream if warn_stream is not None else sys.stderr

        for line in stream:
            if not line.strip():
                return

            try:
                record = InputParser.parse_line(line)
            except ValueError as e:
                print(f"경고: 라인 파싱 실패: {line.rstrip()} ({e})", file=warn_stream)
                continue

            for warning in record.warnings:
                print(f"경고: {warning}", file=warn_stream)
            yield record

    @staticmethod
    def parse_text(text: str, warn_stream: Optional[TextIO] = None) -> List[ArrivalRecord]:
        """문자열 전체를 레코드 리스트로 파싱"""
        return list(InputParser.read_records(io.StringIO(text), warn_stream))

    @staticmethod
    def parse_file(filename: str, warn_stream: Optional[TextIO] = None) -> List[ArrivalRecord]:
        """입력 파일에서 레코드 읽기"""
        with open(filename, 'r', encoding='utf-8') as f:
            return list(InputParser.read_records(f, warn_stream))

    @staticmethod
    def generate_random_processes(num_processes: int = 10,
                                  max_arrival: int = 20,
                                  max_execution: int = 10,
                                  max_priority: int = 5,
                                  seed: int = None) -> List[ArrivalRecord]:
        """
        랜덤 워크로드 생성

        Args:
            num_processes: 생성할 프로세스 수 (ID는 1부터)
            max_arrival: 최대 도착 시간
            max_execution: 최대 실행 시간
            max_priority: 최대 우선순위 값
            seed: 랜덤 시드

        Returns:
            도착 시간 순 레코드 리스트
        """
        rng = random.Random(seed)
        arrivals: Dict[int, List[Tuple[int, int, int]]] = {}

        for pid in range(1, num_processes + 1):
            arrival_time = rng.randint(0, max_arrival)
            priority = rng.randint(0, max_priority)
            execution_time = rng.randint(1, max_execution)
            arrivals.setdefault(arrival_time, []).append((pid, priority, execution_time))

        return [ArrivalRecord(time, processes) for time, processes in sorted(arrivals.items())]

    @staticmethod
    def format_records(records: List[ArrivalRecord]) -> str:
        """레코드를 입력 형식 문자열로 변환 (마지막 빈 줄 포함)"""
        lines = []
        for record in records:
            fields = [str(record.time)]
            for process in record.processes:
                fields.extend(str(value) for value in process)
            lines.append(" ".join(fields))
        return "\n".join(lines) + "\n\n"

    @staticmethod
    def save_records_to_file(records: List[ArrivalRecord], filename: str):
        """레코드를 입력 형식으로 파일에 저장"""
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(InputParser.format_records(records))
